"""
WorkforcePilot Engine

Deterministic scenario evaluation.

Services:
- ScenarioEvaluator: Run every pass over a scenario
- RiskEngine: Match events against policy rules
- check_thresholds: Compare aggregates against limits
- build_workflow: Union of workflow templates
- score_components: The four OFS sub-scores
- recompute_composite / normalize_weights: Weighting
- apply_recommended_sequencing / apply_sequencing_to_evaluation: Staging

Usage:
    from workforcepilot.engine import (
        ScenarioEvaluator,
        evaluate,
        recompute_composite,
        normalize_weights,
        apply_recommended_sequencing,
        apply_sequencing_to_evaluation,
    )
"""
from __future__ import annotations

from .artifacts import (
    build_heatmap,
    build_staging_suggestion,
    collect_evidence,
    identify_data_gaps,
)
from .component_scorers import (
    score_components,
    score_execution_cluster_risk,
    score_exposure,
    score_governance_load,
    score_input_completeness,
)
from .composite import (
    clamp_score,
    normalize_weights,
    recompute_composite,
    round_half_up,
    weighted_contributions,
)
from .evaluator import (
    ScenarioComparison,
    ScenarioEvaluator,
    compare_scenarios,
    evaluate,
    get_default_evaluator,
)
from .risk_engine import RiskEngine, find_policy_triggers, sort_by_severity
from .sequencing import (
    SequencingProjection,
    apply_recommended_sequencing,
    apply_sequencing_to_evaluation,
    derive_sequencing_projection,
)
from .signals import (
    build_signals,
    build_summary,
    headcount_delta,
    liability_tail,
    payroll_cycle_risk,
    total_cost_impact,
    visa_load,
)
from .threshold_engine import check_threshold, check_thresholds, has_breach
from .workflow_orchestrator import build_workflow, distinct_event_types

__all__ = [
    # Evaluator
    "ScenarioEvaluator",
    "ScenarioComparison",
    "evaluate",
    "compare_scenarios",
    "get_default_evaluator",
    # Passes
    "RiskEngine",
    "find_policy_triggers",
    "sort_by_severity",
    "check_threshold",
    "check_thresholds",
    "has_breach",
    "build_workflow",
    "distinct_event_types",
    # Scores
    "score_components",
    "score_exposure",
    "score_governance_load",
    "score_execution_cluster_risk",
    "score_input_completeness",
    "recompute_composite",
    "weighted_contributions",
    "normalize_weights",
    "round_half_up",
    "clamp_score",
    # Artifacts and signals
    "build_heatmap",
    "collect_evidence",
    "identify_data_gaps",
    "build_staging_suggestion",
    "build_signals",
    "build_summary",
    "total_cost_impact",
    "headcount_delta",
    "visa_load",
    "liability_tail",
    "payroll_cycle_risk",
    # Sequencing
    "SequencingProjection",
    "apply_recommended_sequencing",
    "apply_sequencing_to_evaluation",
    "derive_sequencing_projection",
]
