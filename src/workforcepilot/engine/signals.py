"""
WorkforcePilot Signals

Display signals derived from a scenario: modeled cost, headcount change,
visa workload, liability tail, payroll cycle risk and the one-paragraph
summary sentence. All monetary values are modeled USD approximations.
"""
from __future__ import annotations

from ..models import (
    EventType,
    OFSComponentScores,
    PCRLevel,
    PolicyTrigger,
    ReferenceTables,
    RiskSeverity,
    ScenarioEvent,
    SignalSummary,
    ThresholdBreach,
)
from .composite import round_half_up
from .risk_engine import count_high_or_critical, count_severity
from .workflow_orchestrator import distinct_event_types


DISCLAIMER = "Demo model — illustrative policies only. Not legal advice."

PAYROLL_EVENT_TYPES = frozenset({
    EventType.CONTRACTOR_CONVERSION,
    EventType.EOR_ONBOARDING,
    EventType.TERMINATION,
})

TAIL_EVENT_TYPES = frozenset({EventType.TERMINATION, EventType.CONTRACTOR_CONVERSION})

HEADCOUNT_SIGN = {
    EventType.CONTRACTOR_CONVERSION: 1,
    EventType.EOR_ONBOARDING: 1,
    EventType.TERMINATION: -1,
}


def total_cost_impact(events: list[ScenarioEvent], tables: ReferenceTables) -> int:
    costs = tables.cost_multipliers
    total = 0.0
    for event in events:
        total += (
            event.avg_annual_salary_usd
            * event.quantity
            * costs.base_rate(event.event_type, event.country)
            * costs.worker_multiplier(event.worker_type)
            * costs.quantity_scaling.multiplier_for(event.quantity)
        )
    return round_half_up(total)


def headcount_delta(events: list[ScenarioEvent]) -> int:
    """Conversions and onboarding add heads, terminations remove them."""
    return sum(HEADCOUNT_SIGN.get(e.event_type, 0) * e.quantity for e in events)


def visa_load(events: list[ScenarioEvent], tables: ReferenceTables) -> int:
    count = 0
    for event in events:
        if tables.country(event.country).visa_required:
            count += event.quantity
        if event.destination_country is not None:
            if tables.country(event.destination_country).visa_required:
                count += event.quantity
    return count


def liability_tail(events: list[ScenarioEvent], tables: ReferenceTables) -> int:
    total = 0.0
    for event in events:
        if event.event_type in TAIL_EVENT_TYPES:
            tail = tables.country(event.country).benefits_tail_multiplier
            total += event.avg_annual_salary_usd * event.quantity * tail
    return round_half_up(total)


def payroll_cycle_risk(events: list[ScenarioEvent]) -> PCRLevel:
    """
    Classify clustering of payroll-relevant events per (country, quarter).

    High: largest cluster >= 8 workers or >= 4 clusters.
    Medium: largest cluster >= 4 workers or >= 2 clusters.
    """
    clusters: dict[tuple, int] = {}
    for event in events:
        if event.event_type in PAYROLL_EVENT_TYPES:
            clusters[event.cluster_key] = clusters.get(event.cluster_key, 0) + event.quantity

    largest = max(clusters.values(), default=0)
    if largest >= 8 or len(clusters) >= 4:
        return PCRLevel.HIGH
    if largest >= 4 or len(clusters) >= 2:
        return PCRLevel.MEDIUM
    return PCRLevel.LOW


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def build_summary(
    events: list[ScenarioEvent],
    triggers: list[PolicyTrigger],
    breaches: list[ThresholdBreach],
) -> str:
    workers = sum(e.quantity for e in events)
    countries = ", ".join(dict.fromkeys(e.country.value for e in events))
    labels = ", ".join(t.label for t in distinct_event_types(events))
    critical = count_severity(triggers, RiskSeverity.CRITICAL)
    breached = sum(1 for b in breaches if b.breached)

    text = (
        f"Scenario includes {workers} worker events ({labels}) across {countries}. "
        f"{_plural(len(triggers), 'policy trigger')} activated"
    )
    if critical:
        text += f", including {critical} CRITICAL"
    text += f". {_plural(breached, 'threshold')} breached. {DISCLAIMER}"
    return text


def build_signals(
    events: list[ScenarioEvent],
    triggers: list[PolicyTrigger],
    components: OFSComponentScores,
    ofs: int,
    tables: ReferenceTables,
) -> SignalSummary:
    """Assemble the flattened signal summary."""
    return SignalSummary(
        total_cost_impact=total_cost_impact(events, tables),
        headcount_delta=headcount_delta(events),
        risk_cluster_count=count_high_or_critical(triggers),
        visa_load=visa_load(events, tables),
        ofs=ofs,
        gli=components.governance_load if events else 0,
        pcr=payroll_cycle_risk(events),
        liability_tail=liability_tail(events, tables),
        exposure_score=components.exposure_score,
        governance_load=components.governance_load,
        execution_cluster_risk=components.execution_cluster_risk,
        input_completeness_score=components.input_completeness_score,
    )
