"""
WorkforcePilot Brief Builder

Deterministic executive brief for a ScenarioEvaluation.

The brief only restates what the evaluation already contains: every
number is copied from the evaluation and every risk statement cites an
evidence ID from its triggers. No language model is involved, so the
same evaluation always yields the same brief.
"""
from __future__ import annotations

import logging

from ..engine.composite import weighted_contributions
from ..models import (
    DominantDriver,
    ExecBrief,
    ScenarioEvaluation,
    TopRisk,
)

logger = logging.getLogger(__name__)


ADVICE_MARKER = "Illustrative — not legal advice."
FALLBACK_EVIDENCE_ID = "EVD-001"
MAX_SEQUENCING_STEPS = 3
MAX_TOP_RISKS = 3

# Contribution order matches weighted_contributions()
_DRIVER_ORDER = (
    DominantDriver.EXPOSURE,
    DominantDriver.GOVERNANCE,
    DominantDriver.EXECUTION,
    DominantDriver.CONFIDENCE,
)


def dominant_driver(evaluation: ScenarioEvaluation) -> DominantDriver:
    """
    Component with the largest weighted contribution.

    Ties go to the later component in Exposure, Governance, Execution,
    Confidence order.
    """
    contributions = weighted_contributions(evaluation.component_scores, evaluation.weights)
    best = 0
    for index in range(1, len(contributions)):
        if not contributions[best] > contributions[index]:
            best = index
    return _DRIVER_ORDER[best]


def split_staging_steps(staging_suggestion: str) -> list[str]:
    """Split the staging paragraph into sentences, each ending with a period."""
    steps = []
    for part in staging_suggestion.split(". "):
        part = part.strip()
        if not part:
            continue
        steps.append(part if part.endswith(".") else part + ".")
    return steps


def _event_type_count(evaluation: ScenarioEvaluation) -> int:
    return len({step.event_type for step in evaluation.workflow})


def describe_tradeoff(evaluation: ScenarioEvaluation, driver: DominantDriver) -> str:
    components = evaluation.component_scores
    if driver == DominantDriver.EXPOSURE:
        return (
            "Speed-to-market conflicts with Tax Presence and Employment Status Exposure "
            "reduction — converting contractors before entity readiness increases "
            "exposure indicators."
        )
    if driver == DominantDriver.GOVERNANCE:
        return (
            f"Policy family breadth ({len(evaluation.policy_families)} families) extends "
            "governance timeline and increases approval overhead."
        )
    if driver == DominantDriver.EXECUTION:
        return (
            f"Event clustering across {_event_type_count(evaluation)} event type(s) in "
            "compressed quarters increases payroll cycle risk."
        )
    return (
        f"Incomplete input data ({components.input_completeness_score}% complete) "
        f"introduces {components.confidence_penalty}-point uncertainty into the OFS "
        "calculation."
    )


def _first_evidence_id(evaluation: ScenarioEvaluation) -> str:
    for trigger in evaluation.triggers:
        if trigger.severity.is_high_or_critical:
            return trigger.evidence_ids[0] if trigger.evidence_ids else FALLBACK_EVIDENCE_ID
    return FALLBACK_EVIDENCE_ID


def build_fallback_brief(evaluation: ScenarioEvaluation) -> ExecBrief:
    """Build the executive brief for an evaluation."""
    signals = evaluation.signals
    components = evaluation.component_scores
    driver = dominant_driver(evaluation)
    high = sum(1 for t in evaluation.triggers if t.severity.is_high_or_critical)
    evidence_id = _first_evidence_id(evaluation)
    staging = split_staging_steps(evaluation.staging_suggestion)
    cost = f"${signals.total_cost_impact:,}"

    brief = ExecBrief(
        scenario_summary=(
            f"{ADVICE_MARKER} The simulation activated {len(evaluation.triggers)} policy "
            f"triggers with {high} at HIGH or CRITICAL severity (see {evidence_id}). "
            f"Operational Friction Score is {signals.ofs}/100."
        ),
        of_score=signals.ofs,
        dominant_driver=driver,
        tradeoff_identified=describe_tradeoff(evaluation, driver),
        recommended_sequencing=tuple(staging[:MAX_SEQUENCING_STEPS]),
        input_confidence=components.input_completeness_score,
        data_required=evaluation.data_gaps,
        exec_brief=(
            f"{ADVICE_MARKER} Scenario carries OFS {signals.ofs}/100 driven by "
            f"{driver.value.lower()} factors; modeled cost impact {cost} across "
            f"{_event_type_count(evaluation)} event type(s) requiring "
            f"{len(evaluation.workflow)} workflow steps."
        ),
        top_risks=tuple(
            TopRisk(severity=t.severity, title=t.title, evidence_ids=t.evidence_ids)
            for t in evaluation.triggers[:MAX_TOP_RISKS]
        ),
        staging_plan=tuple(staging),
        exec_sentence=(
            f"Scenario requires {len(evaluation.workflow)} workflow steps with OFS "
            f"{signals.ofs}/100 and modeled cost impact of {cost}."
        ),
    )
    logger.debug("Built brief for evaluation %s (driver=%s)", evaluation.id, driver.value)
    return brief
