"""
WorkforcePilot Component Scorers

The four weight-independent OFS sub-scores, each in [0, 100]:

- Input completeness: how much of the data the model would like is present
- Exposure: tax-presence and misclassification sensitivity of the scenario
- Governance load: size and spread of the required workflow
- Execution cluster risk: concentration of events in one country/quarter

Every scorer returns 0 for an empty scenario.
"""
from __future__ import annotations

from typing import Mapping

from ..models import (
    EventType,
    OFSComponentScores,
    PolicyTrigger,
    ReferenceTables,
    RiskSeverity,
    ScenarioEvent,
    WorkflowStep,
)
from .composite import round_half_up
from .risk_engine import count_high_or_critical


UNKNOWN_EVENT_WEIGHT = 0.5


# =============================================================================
# Input Completeness
# =============================================================================

# Data points always captured by the scenario form
PRESENT_BASE = 7
REQUIRED_BASE = 8

REQUIRED_BY_EVENT_TYPE: Mapping[EventType, int] = {
    EventType.RELOCATION: 9,             # destination country
    EventType.CONTRACTOR_CONVERSION: 10,  # role authority, exclusive engagement
    EventType.TERMINATION: 9,            # tenure
}

# Countries above this PE sensitivity also need entity presence data
HIGH_PE_SENSITIVITY = 0.7


def score_input_completeness(
    events: list[ScenarioEvent],
    tables: ReferenceTables,
) -> int:
    if not events:
        return 0

    total = 0.0
    for event in events:
        required = REQUIRED_BY_EVENT_TYPE.get(event.event_type, REQUIRED_BASE)
        present = PRESENT_BASE
        if event.is_relocation and event.destination_country is not None:
            present += 1
        if tables.country(event.country).pe_sensitivity > HIGH_PE_SENSITIVITY:
            required += 1
        total += present / required * 100

    return round_half_up(total / len(events))


# =============================================================================
# Exposure
# =============================================================================

EXPOSURE_EVENT_WEIGHTS: Mapping[EventType, float] = {
    EventType.CONTRACTOR_CONVERSION: 1.0,
    EventType.RELOCATION: 0.8,
    EventType.TERMINATION: 0.6,
    EventType.EOR_ONBOARDING: 0.4,
}

EXPOSURE_FAMILIES = frozenset({"PE", "Misclassification"})
CRITICAL_EXPOSURE_BOOST = 8


def quantity_factor(quantity: int) -> float:
    """Batch-size amplifier, capped at 2.0."""
    return min(1 + quantity * 0.04, 2.0)


def score_exposure(
    events: list[ScenarioEvent],
    triggers: list[PolicyTrigger],
    tables: ReferenceTables,
) -> int:
    if not events:
        return 0

    total_pe = 0.0
    total_misclass = 0.0
    total_weight = 0.0
    for event in events:
        profile = tables.country(event.country)
        weight = EXPOSURE_EVENT_WEIGHTS.get(event.event_type, UNKNOWN_EVENT_WEIGHT)
        factor = quantity_factor(event.quantity)
        total_pe += profile.pe_sensitivity * weight * factor
        total_misclass += profile.misclass_sensitivity * weight * factor
        total_weight += weight

    avg_pe = total_pe / total_weight if total_weight > 0 else 0.0
    avg_misclass = total_misclass / total_weight if total_weight > 0 else 0.0
    base_score = (avg_pe + avg_misclass) / 2 * 100

    critical = sum(
        1
        for t in triggers
        if t.family in EXPOSURE_FAMILIES and t.severity == RiskSeverity.CRITICAL
    )
    return min(round_half_up(base_score + critical * CRITICAL_EXPOSURE_BOOST), 100)


# =============================================================================
# Governance Load
# =============================================================================

# Saturation point: 30 steps, 15 systems, 10 families, 10 owners
GOVERNANCE_CEILING = 30 * 2 + 15 * 3 + 10 * 5 + 10 * 2


def score_governance_load(
    workflow: list[WorkflowStep],
    triggers: list[PolicyTrigger],
) -> int:
    if not workflow:
        return 0

    systems = {system for step in workflow for system in step.systems_touched}
    owners = {step.owner for step in workflow}
    families = {t.family for t in triggers}

    raw = len(workflow) * 2 + len(systems) * 3 + len(families) * 5 + len(owners) * 2
    return min(round_half_up(raw / GOVERNANCE_CEILING * 100), 100)


# =============================================================================
# Execution Cluster Risk
# =============================================================================

CLUSTER_EVENT_WEIGHTS: Mapping[EventType, float] = {
    EventType.TERMINATION: 1.0,
    EventType.CONTRACTOR_CONVERSION: 0.8,
    EventType.RELOCATION: 0.7,
    EventType.EOR_ONBOARDING: 0.4,
}

CLUSTER_SATURATION = 15
CLUSTER_SCORE_CAP = 80
TRIGGER_BONUS_PER = 4
TRIGGER_BONUS_CAP = 20


def score_execution_cluster_risk(
    events: list[ScenarioEvent],
    triggers: list[PolicyTrigger],
) -> int:
    if not events:
        return 0

    clusters: dict[tuple, float] = {}
    for event in events:
        weight = CLUSTER_EVENT_WEIGHTS.get(event.event_type, UNKNOWN_EVENT_WEIGHT)
        key = event.cluster_key
        clusters[key] = clusters.get(key, 0.0) + event.quantity * weight

    largest = max(clusters.values())
    cluster_score = min(largest / CLUSTER_SATURATION * CLUSTER_SCORE_CAP, CLUSTER_SCORE_CAP)
    trigger_bonus = min(count_high_or_critical(triggers) * TRIGGER_BONUS_PER, TRIGGER_BONUS_CAP)
    return min(round_half_up(cluster_score + trigger_bonus), 100)


# =============================================================================
# All Components
# =============================================================================

def score_components(
    events: list[ScenarioEvent],
    triggers: list[PolicyTrigger],
    workflow: list[WorkflowStep],
    tables: ReferenceTables,
) -> OFSComponentScores:
    """Run all four scorers."""
    return OFSComponentScores(
        exposure_score=score_exposure(events, triggers, tables),
        governance_load=score_governance_load(workflow, triggers),
        execution_cluster_risk=score_execution_cluster_risk(events, triggers),
        input_completeness_score=score_input_completeness(events, tables),
    )
