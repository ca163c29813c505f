"""Scenario evaluation endpoints."""

import logging
import time
from typing import Optional

from fastapi import APIRouter, HTTPException, Request

from api.config import WFP_ENGINE_VERSION, WFP_MAX_EVENTS
from api.schemas.requests import EvaluateRequest, RecomputeRequest, ScenarioRequest
from api.schemas.responses import EvaluateResponse, RecomputeResponse
from workforcepilot.canon import compute_evaluation_fingerprint, compute_scenario_hash
from workforcepilot.engine import ScenarioEvaluator, recompute_composite, weighted_contributions
from workforcepilot.exceptions import InvalidScenarioError
from workforcepilot.models import OFSWeights, ScenarioEvent

router = APIRouter(prefix="/evaluate", tags=["Evaluation"])

logger = logging.getLogger("workforcepilot.api")

# Shared evaluator instance (set by main.py)
evaluator: Optional[ScenarioEvaluator] = None


def set_evaluator(e: ScenarioEvaluator):
    global evaluator
    evaluator = e


def get_evaluator() -> ScenarioEvaluator:
    if evaluator is None:
        raise HTTPException(status_code=503, detail="Reference pack not loaded")
    return evaluator


def scenario_events(body: ScenarioRequest) -> list[ScenarioEvent]:
    """Convert request events, enforcing the per-request event limit."""
    if len(body.events) > WFP_MAX_EVENTS:
        raise InvalidScenarioError(
            message=f"Scenario has {len(body.events)} events; the limit is {WFP_MAX_EVENTS}",
            details={"max_events": WFP_MAX_EVENTS},
        )
    return body.to_events()


@router.post("", response_model=EvaluateResponse)
async def evaluate_scenario(body: EvaluateRequest, request: Request):
    """
    Evaluate a scenario.

    Returns the full evaluation (signals, triggers, threshold records,
    workflow, heatmap, evidence, data gaps, staging advice and component
    scores) plus a fingerprint that is identical for identical input.
    """
    engine = get_evaluator()
    events = scenario_events(body)
    started = time.perf_counter()

    evaluation = engine.evaluate(events, body.weights.to_weights())
    fingerprint = compute_evaluation_fingerprint(evaluation)

    logger.info(
        "Scenario evaluated",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "scenario_fingerprint": fingerprint[:16],
            "event_count": len(events),
            "ofs": evaluation.signals.ofs,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        },
    )

    return EvaluateResponse(
        evaluation=evaluation.to_dict(),
        fingerprint=fingerprint,
        scenario_hash=compute_scenario_hash(events),
        reference_pack_id=engine.tables.pack_id,
        reference_pack_version=engine.tables.pack_version,
        engine_version=WFP_ENGINE_VERSION,
    )


@router.post("/recompute", response_model=RecomputeResponse)
async def recompute(body: RecomputeRequest):
    """
    Re-weight stored component scores.

    Stateless: the engine is not re-run, so this is cheap enough to call
    on every weight slider change.
    """
    components = body.component_scores.to_components()
    weights = body.weights.to_weights()
    contributions = weighted_contributions(components, weights)

    return RecomputeResponse(
        ofs=recompute_composite(components, weights),
        contributions={
            key: round(value, 4) for key, value in zip(OFSWeights.KEYS, contributions)
        },
        weights=weights.to_dict(),
    )
