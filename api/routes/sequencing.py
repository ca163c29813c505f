"""Recommended sequencing endpoints."""

from fastapi import APIRouter

from api.routes.evaluate import get_evaluator, scenario_events
from api.schemas.requests import SequencingRequest
from api.schemas.responses import (
    SequencedEventsResponse,
    SequencingCompareResponse,
    SequencingPreviewResponse,
)
from workforcepilot.engine import (
    apply_recommended_sequencing,
    apply_sequencing_to_evaluation,
    derive_sequencing_projection,
)
from workforcepilot.models.event import total_quantity

router = APIRouter(prefix="/sequencing", tags=["Sequencing"])


@router.post("/events", response_model=SequencedEventsResponse)
async def sequence_events(body: SequencingRequest):
    """
    Apply the recommended staging to the events themselves.

    Large terminations are split across two quarters and large contractor
    conversions are pushed one quarter later. Total quantity is preserved.
    """
    events = scenario_events(body)
    sequenced = apply_recommended_sequencing(events)
    return SequencedEventsResponse(
        events=[e.to_dict() for e in sequenced],
        original_count=len(events),
        sequenced_count=len(sequenced),
        total_quantity=total_quantity(sequenced),
    )


@router.post("/preview", response_model=SequencingPreviewResponse)
async def preview(body: SequencingRequest):
    """
    Fast projection of the effect of sequencing.

    Does not re-run the engine: breach count and component scores are
    adjusted from the baseline. Use /sequencing/compare for a full
    re-evaluation of the sequenced events.
    """
    engine = get_evaluator()
    weights = body.weights.to_weights()
    baseline = engine.evaluate(scenario_events(body), weights)

    return SequencingPreviewResponse(
        baseline=baseline.to_dict(),
        projection=derive_sequencing_projection(baseline, weights).to_dict(),
        sequenced=apply_sequencing_to_evaluation(baseline, weights).to_dict(),
    )


@router.post("/compare", response_model=SequencingCompareResponse)
async def compare(body: SequencingRequest):
    """Baseline vs. full re-evaluation of the sequenced events."""
    engine = get_evaluator()
    comparison = engine.compare(scenario_events(body), body.weights.to_weights())
    return SequencingCompareResponse(**comparison.to_dict())
