"""Executive brief endpoint."""

from fastapi import APIRouter

from api.routes.evaluate import get_evaluator, scenario_events
from api.schemas.requests import BriefRequest
from api.schemas.responses import BriefResponse
from workforcepilot.narration import build_fallback_brief

router = APIRouter(prefix="/brief", tags=["Brief"])


@router.post("", response_model=BriefResponse)
async def generate_brief(body: BriefRequest):
    """
    Deterministic executive brief for a scenario.

    Every number is copied from the evaluation and every risk cites an
    evidence ID, so the same scenario always yields the same brief.
    """
    evaluation = get_evaluator().evaluate(scenario_events(body), body.weights.to_weights())
    brief = build_fallback_brief(evaluation)
    return BriefResponse(**brief.to_dict(), evaluation_id=evaluation.id)
