"""
WorkforcePilot Presentation Artifacts

Derived, display-ready outputs of an evaluation:
- build_heatmap: risk per (country, event type)
- collect_evidence: evidence entries cited by the triggers
- identify_data_gaps: fixed messages for missing inputs
- build_staging_suggestion: fixed staging sentences
"""
from __future__ import annotations

from ..models import (
    CountryCode,
    EventType,
    EvidenceEntry,
    HeatmapCell,
    PCRLevel,
    PolicyTrigger,
    ReferenceTables,
    RiskSeverity,
    ScenarioEvent,
    ThresholdBreach,
)
from .composite import round_half_up
from .threshold_engine import has_breach


# =============================================================================
# Heatmap
# =============================================================================

HEATMAP_QUANTITY_BOOST_PER = 3
HEATMAP_QUANTITY_BOOST_CAP = 20


def build_heatmap(
    events: list[ScenarioEvent],
    triggers: list[PolicyTrigger],
    tables: ReferenceTables,
) -> list[HeatmapCell]:
    """
    One cell per (country, event type) present, first-appearance order.

    A trigger is relevant to a cell when it shares the country and its
    rule covers the event type. Triggers arrive most severe first, so the
    first relevant trigger sets the label.
    """
    quantities: dict[tuple[CountryCode, EventType], int] = {}
    for event in events:
        key = (event.country, event.event_type)
        quantities[key] = quantities.get(key, 0) + event.quantity

    cells = []
    for (country, event_type), count in quantities.items():
        relevant = [
            t for t in triggers
            if t.country == country and _rule_covers(tables, t.policy_id, event_type)
        ]
        severity_score = max(
            [RiskSeverity.LOW.heat_score] + [t.severity.heat_score for t in relevant]
        )
        top = relevant[0].severity if relevant else RiskSeverity.LOW
        base_risk = tables.country(country).average_sensitivity
        boost = min(count * HEATMAP_QUANTITY_BOOST_PER, HEATMAP_QUANTITY_BOOST_CAP)
        cells.append(
            HeatmapCell(
                country=country,
                event_type=event_type,
                risk_score=min(round_half_up(severity_score * base_risk + boost), 100),
                label=top.label,
            )
        )
    return cells


def _rule_covers(tables: ReferenceTables, policy_id: str, event_type: EventType) -> bool:
    rule = tables.get_rule(policy_id)
    return rule is not None and rule.covers_event_type(event_type)


# =============================================================================
# Evidence
# =============================================================================

def collect_evidence(
    triggers: list[PolicyTrigger],
    tables: ReferenceTables,
) -> list[EvidenceEntry]:
    """Evidence cited by any trigger, in library order."""
    cited = {evidence_id for t in triggers for evidence_id in t.evidence_ids}
    return [e for e in tables.evidence if e.id in cited]


# =============================================================================
# Data Gaps
# =============================================================================

GAP_RELOCATION_DESTINATION = (
    "Destination country missing for one or more relocation events — "
    "shadow payroll analysis incomplete."
)
GAP_ENTITY_PRESENCE = (
    "Existing entity presence in-country not confirmed — Tax Presence Exposure model "
    "assumes no current entity. Provide entity register data for accurate assessment."
)
GAP_EQUITY_VESTING = (
    "Equity award vesting schedule not provided — withholding estimates use salary "
    "proxy only. Provide grant details for accurate liability model."
)
GAP_TENURE = (
    "Worker tenure data not included — notice period and severance calculations use "
    "minimum statutory estimates only."
)
GAP_ENGAGEMENT_HISTORY = (
    "Contractor engagement history not available — Employment Status Exposure screen "
    "uses pattern indicators only. Provide engagement contracts for deeper analysis."
)


def identify_data_gaps(
    events: list[ScenarioEvent],
    triggers: list[PolicyTrigger],
) -> list[str]:
    families = {t.family for t in triggers}
    gaps = []
    if any(e.is_relocation and e.destination_country is None for e in events):
        gaps.append(GAP_RELOCATION_DESTINATION)
    if "PE" in families:
        gaps.append(GAP_ENTITY_PRESENCE)
    if "Equity" in families:
        gaps.append(GAP_EQUITY_VESTING)
    if "Termination" in families:
        gaps.append(GAP_TENURE)
    if any(e.is_conversion for e in events):
        gaps.append(GAP_ENGAGEMENT_HISTORY)
    return gaps


# =============================================================================
# Staging Suggestion
# =============================================================================

STAGE_TERMINATIONS = (
    "Stage terminations across two quarters to stay below collective consultation "
    "thresholds and reduce execution clustering pressure."
)
STAGE_CONVERSIONS = (
    "Sequence contractor conversions after entity readiness check to avoid Tax "
    "Presence Exposure during transition window."
)
STAGE_RELOCATIONS = (
    "Begin visa and right-to-work processing at least 14 days before target "
    "relocation quarter to avoid start-date slippage."
)
STAGE_PAYROLL = (
    "Shift event timing away from payroll cutoff window (±5 days) to reduce "
    "retroactive adjustment risk."
)
STAGE_NO_CONFLICTS = (
    "No critical staging conflicts detected. Proceed with standard compliance "
    "review workflow before Q-start."
)


def build_staging_suggestion(
    events: list[ScenarioEvent],
    breaches: list[ThresholdBreach],
    pcr: PCRLevel,
) -> str:
    suggestions = []
    if has_breach(breaches, "termination_cluster") and any(e.is_termination for e in events):
        suggestions.append(STAGE_TERMINATIONS)
    if any(e.is_conversion for e in events) and has_breach(breaches, "pe_worker_count"):
        suggestions.append(STAGE_CONVERSIONS)
    if any(e.is_relocation for e in events):
        suggestions.append(STAGE_RELOCATIONS)
    if pcr == PCRLevel.HIGH:
        suggestions.append(STAGE_PAYROLL)
    if not suggestions:
        suggestions.append(STAGE_NO_CONFLICTS)
    return " ".join(suggestions)
