"""
WorkforcePilot Sequencing Engine

Two deliberately separate operations:

1. apply_recommended_sequencing(events) rewrites the event list the way
   the staging suggestion recommends. This is the ground truth: running
   the evaluator over the result gives the real post-sequencing picture.

2. apply_sequencing_to_evaluation(evaluation, weights) projects an
   existing evaluation to a fast preview of the same change without
   re-running the engine. It is an approximation and may diverge from a
   full re-evaluation of the sequenced events.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace

from ..models import (
    CountryCode,
    OFSComponentScores,
    OFSWeights,
    Quarter,
    ScenarioEvaluation,
    ScenarioEvent,
    ThresholdBreach,
)
from .composite import clamp_score, recompute_composite

logger = logging.getLogger(__name__)


# Termination groups at or above this size are split across two quarters
TERMINATION_SPLIT_MIN = 3
# Conversion batches at or above this size are delayed one quarter
CONVERSION_DELAY_MIN = 5

SPLIT_ID_SUFFIX = "_seq"


# =============================================================================
# Event Transform
# =============================================================================

def apply_recommended_sequencing(events: list[ScenarioEvent]) -> list[ScenarioEvent]:
    """
    Return a re-sequenced copy of ``events``.

    (a) For every (country, quarter) termination group whose total
        quantity is >= 3 and whose quarter is before Q4, the group's first
        event keeps the ceiling half in place and the floor half is
        appended as ``<id>_seq`` one quarter later. Nothing is split when
        the floor half is zero.
    (b) When the input's total conversion quantity is >= 5, every
        conversion not already in Q4 moves one quarter later.

    Total quantity is conserved, no event is dropped, and the input list
    is left untouched.
    """
    result = list(events)

    groups: dict[tuple[CountryCode, Quarter], list[int]] = {}
    totals: dict[tuple[CountryCode, Quarter], int] = {}
    for index, event in enumerate(events):
        if event.is_termination:
            groups.setdefault(event.cluster_key, []).append(index)
            totals[event.cluster_key] = totals.get(event.cluster_key, 0) + event.quantity

    for key, indices in groups.items():
        _, quarter = key
        if totals[key] < TERMINATION_SPLIT_MIN or quarter.is_last:
            continue
        first = result[indices[0]]
        kept = math.ceil(first.quantity / 2)
        moved = first.quantity - kept
        if moved <= 0:
            continue
        result[indices[0]] = first.with_changes(quantity=kept)
        result.append(
            first.with_changes(
                id=f"{first.id}{SPLIT_ID_SUFFIX}",
                quantity=moved,
                timing_quarter=quarter.next(),
            )
        )

    conversions = sum(e.quantity for e in events if e.is_conversion)
    if conversions >= CONVERSION_DELAY_MIN:
        result = [
            e.with_changes(timing_quarter=e.timing_quarter.next())
            if e.is_conversion and not e.timing_quarter.is_last
            else e
            for e in result
        ]

    logger.debug("Sequencing: %d events -> %d events", len(events), len(result))
    return result


# =============================================================================
# Evaluation Projection
# =============================================================================

MAX_BREACHES_REMOVED = 2
EXPOSURE_FACTOR = 0.72
GOVERNANCE_RELIEF_PER_BREACH = 0.06
EXECUTION_RELIEF_PER_BREACH = 0.08


@dataclass(frozen=True)
class SequencingProjection:
    """Projected component scores after following the staging advice."""
    components: OFSComponentScores
    breaches_before: int
    breaches_after: int
    ofs: int

    @property
    def breaches_removed(self) -> int:
        return self.breaches_before - self.breaches_after

    def to_dict(self) -> dict:
        return {
            "components": self.components.to_dict(),
            "breaches_before": self.breaches_before,
            "breaches_after": self.breaches_after,
            "breaches_removed": self.breaches_removed,
            "ofs": self.ofs,
        }


def derive_sequencing_projection(
    evaluation: ScenarioEvaluation,
    weights: OFSWeights,
) -> SequencingProjection:
    """Project component scores and composite without touching the events."""
    before = evaluation.breached_count
    after = max(0, before - MAX_BREACHES_REMOVED)
    removed = before - after

    current = evaluation.component_scores
    components = OFSComponentScores(
        exposure_score=clamp_score(evaluation.signals.exposure_score * EXPOSURE_FACTOR),
        governance_load=clamp_score(
            current.governance_load * (1 - GOVERNANCE_RELIEF_PER_BREACH * removed)
        ),
        execution_cluster_risk=clamp_score(
            current.execution_cluster_risk * (1 - EXECUTION_RELIEF_PER_BREACH * removed)
        ),
        input_completeness_score=current.input_completeness_score,
    )
    return SequencingProjection(
        components=components,
        breaches_before=before,
        breaches_after=after,
        ofs=recompute_composite(components, weights),
    )


def _clear_breaches(
    breaches: tuple[ThresholdBreach, ...],
    count: int,
) -> tuple[ThresholdBreach, ...]:
    """Mark the first ``count`` breached records as just under their limit."""
    remaining = count
    cleared = []
    for breach in breaches:
        if breach.breached and remaining > 0:
            remaining -= 1
            breach = replace(breach, breached=False, current=max(0, breach.threshold - 1))
        cleared.append(breach)
    return tuple(cleared)


def apply_sequencing_to_evaluation(
    evaluation: ScenarioEvaluation,
    weights: OFSWeights,
) -> ScenarioEvaluation:
    """
    Return a new evaluation previewing the effect of sequencing.

    The id, summary, triggers and other artifacts are carried over; the
    component scores, related signals, breach records and weights are
    replaced. The input evaluation is not modified.
    """
    projection = derive_sequencing_projection(evaluation, weights)
    components = projection.components

    signals = replace(
        evaluation.signals,
        exposure_score=components.exposure_score,
        governance_load=components.governance_load,
        execution_cluster_risk=components.execution_cluster_risk,
        risk_cluster_count=max(
            0, evaluation.signals.risk_cluster_count - projection.breaches_removed
        ),
        ofs=projection.ofs,
    )
    return replace(
        evaluation,
        signals=signals,
        component_scores=components,
        threshold_breaches=_clear_breaches(
            evaluation.threshold_breaches, projection.breaches_removed
        ),
        weights=weights,
    )
