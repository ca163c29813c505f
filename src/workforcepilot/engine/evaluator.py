"""
WorkforcePilot Scenario Evaluator

Composes the engine passes into the single deterministic transformation

    (events, weights) -> ScenarioEvaluation

Pass order:
1. Risk engine, threshold engine, workflow orchestrator
2. Component scorers
3. Composite score (the only weight-dependent value)
4. Heatmap, evidence, data gaps, signals, staging suggestion, summary

Reference tables are injected through ScenarioEvaluator; the module-level
functions use the bundled pack, loaded lazily once per process.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from ..models import (
    DEFAULT_WEIGHTS,
    OFSWeights,
    ReferenceTables,
    ScenarioEvaluation,
    ScenarioEvent,
)
from ..packs import get_default_tables
from .artifacts import (
    build_heatmap,
    build_staging_suggestion,
    collect_evidence,
    identify_data_gaps,
)
from .component_scorers import score_components
from .composite import recompute_composite
from .risk_engine import RiskEngine
from .sequencing import apply_recommended_sequencing
from .signals import build_signals, build_summary
from .threshold_engine import check_thresholds
from .workflow_orchestrator import build_workflow

logger = logging.getLogger(__name__)


def new_evaluation_id() -> str:
    """Short opaque identifier for an evaluation."""
    return uuid.uuid4().hex[:12]


class ScenarioEvaluator:
    """
    Evaluates scenarios against one set of reference tables.

    Holds no state besides the (immutable) tables, so a single instance
    can serve any number of evaluations.

    Usage:
        evaluator = ScenarioEvaluator(tables)
        evaluation = evaluator.evaluate(events, weights)
    """

    def __init__(self, tables: ReferenceTables):
        self.tables = tables
        self.risk_engine = RiskEngine(tables)

    def evaluate(
        self,
        events: list[ScenarioEvent],
        weights: OFSWeights = DEFAULT_WEIGHTS,
    ) -> ScenarioEvaluation:
        """
        Evaluate a scenario.

        Never raises on well-typed input; an empty list yields explicit
        zero scores and only the always-emitted threshold records.
        """
        events = list(events)
        tables = self.tables

        triggers = self.risk_engine.evaluate(events)
        breaches = check_thresholds(events, tables)
        workflow = build_workflow(events, tables)

        components = score_components(events, triggers, workflow, tables)
        ofs = recompute_composite(components, weights)

        signals = build_signals(events, triggers, components, ofs, tables)
        evaluation = ScenarioEvaluation(
            id=new_evaluation_id(),
            created_at=datetime.now(timezone.utc),
            summary=build_summary(events, triggers, breaches),
            signals=signals,
            heatmap=tuple(build_heatmap(events, triggers, tables)),
            threshold_breaches=tuple(breaches),
            triggers=tuple(triggers),
            workflow=tuple(workflow),
            evidence=tuple(collect_evidence(triggers, tables)),
            data_gaps=tuple(identify_data_gaps(events, triggers)),
            staging_suggestion=build_staging_suggestion(events, breaches, signals.pcr),
            component_scores=components,
            weights=weights,
        )

        logger.debug(
            "Evaluated %d events: ofs=%d triggers=%d breached=%d",
            len(events),
            ofs,
            len(triggers),
            evaluation.breached_count,
        )
        return evaluation

    def compare(
        self,
        events: list[ScenarioEvent],
        weights: OFSWeights = DEFAULT_WEIGHTS,
    ) -> "ScenarioComparison":
        """Evaluate the scenario as given and after recommended sequencing."""
        baseline = self.evaluate(events, weights)
        sequenced_events = apply_recommended_sequencing(list(events))
        sequenced = self.evaluate(sequenced_events, weights)
        return ScenarioComparison(
            baseline=baseline,
            sequenced_events=tuple(sequenced_events),
            sequenced=sequenced,
        )


# =============================================================================
# Comparison
# =============================================================================

@dataclass(frozen=True)
class ScenarioComparison:
    """
    A scenario evaluated before and after recommended sequencing.

    Unlike the sequencing projection, ``sequenced`` is a full
    re-evaluation of the transformed events.
    """
    baseline: ScenarioEvaluation
    sequenced_events: tuple[ScenarioEvent, ...]
    sequenced: ScenarioEvaluation

    @property
    def ofs_delta(self) -> int:
        return self.sequenced.signals.ofs - self.baseline.signals.ofs

    @property
    def breached_delta(self) -> int:
        return self.sequenced.breached_count - self.baseline.breached_count

    @property
    def cost_delta(self) -> int:
        return self.sequenced.signals.total_cost_impact - self.baseline.signals.total_cost_impact

    def to_dict(self) -> dict[str, Any]:
        return {
            "baseline": self.baseline.to_dict(),
            "sequenced_events": [e.to_dict() for e in self.sequenced_events],
            "sequenced": self.sequenced.to_dict(),
            "deltas": {
                "ofs": self.ofs_delta,
                "breached": self.breached_delta,
                "total_cost_impact": self.cost_delta,
            },
        }


# =============================================================================
# Default Evaluator
# =============================================================================

_default_evaluator: Optional[ScenarioEvaluator] = None


def get_default_evaluator() -> ScenarioEvaluator:
    """Get or create the evaluator over the bundled reference pack."""
    global _default_evaluator
    if _default_evaluator is None:
        _default_evaluator = ScenarioEvaluator(get_default_tables())
    return _default_evaluator


def _evaluator_for(tables: Optional[ReferenceTables]) -> ScenarioEvaluator:
    if tables is None:
        return get_default_evaluator()
    return ScenarioEvaluator(tables)


def evaluate(
    events: list[ScenarioEvent],
    weights: OFSWeights = DEFAULT_WEIGHTS,
    tables: Optional[ReferenceTables] = None,
) -> ScenarioEvaluation:
    """
    Evaluate a scenario.

    Convenience function; uses the bundled reference pack unless
    ``tables`` is given.
    """
    return _evaluator_for(tables).evaluate(events, weights)


def compare_scenarios(
    events: list[ScenarioEvent],
    weights: OFSWeights = DEFAULT_WEIGHTS,
    tables: Optional[ReferenceTables] = None,
) -> ScenarioComparison:
    """Baseline vs. full re-evaluation of the recommended sequencing."""
    return _evaluator_for(tables).compare(events, weights)
