"""Weight normalization endpoint."""

from fastapi import APIRouter

from api.schemas.requests import NormalizeRequest
from api.schemas.responses import NormalizeResponse
from workforcepilot.engine import normalize_weights

router = APIRouter(prefix="/weights", tags=["Weights"])


@router.post("/normalize", response_model=NormalizeResponse)
async def normalize(body: NormalizeRequest):
    """
    Change one weight and rebalance the other three.

    The requested value is clamped to [0.05, 0.85]; the other weights are
    rescaled proportionally so the set still sums to 1.0.
    """
    weights = normalize_weights(body.weights.to_weights(), body.changed_key, body.value)
    return NormalizeResponse(weights=weights.to_dict(), total=round(weights.total, 4))
