"""
WorkforcePilot Risk Engine

Matches scenario events against the policy rule catalog.

A rule fires for an event when:
- the event's country, or a relocation's destination, is in the rule's
  country list, and
- the event type is in the rule's event-type list.

Triggers are keyed by (rule ID, event country): the first firing event
materializes the trigger and later matches are no-ops. The trigger
records the event's own country even when the match came through a
relocation destination.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..models import (
    CountryCode,
    PolicyRule,
    PolicyTrigger,
    ReferenceTables,
    RiskSeverity,
    ScenarioEvent,
)

logger = logging.getLogger(__name__)


def build_trigger(rule: PolicyRule, country: Optional[CountryCode]) -> PolicyTrigger:
    """Materialize a trigger for a rule in a country."""
    return PolicyTrigger(
        policy_id=rule.id,
        title=rule.title,
        family=rule.family,
        severity=rule.severity,
        confidence=rule.confidence,
        evidence_ids=rule.evidence_ids,
        description=rule.description,
        evidence_text=rule.description,
        country=country,
    )


def sort_by_severity(triggers: Iterable[PolicyTrigger]) -> list[PolicyTrigger]:
    """Most severe first; ties keep their input order."""
    return sorted(triggers, key=lambda t: t.severity.rank)


class RiskEngine:
    """
    Finds the policy triggers for a scenario.

    Usage:
        engine = RiskEngine(tables)
        triggers = engine.evaluate(events)
    """

    def __init__(self, tables: ReferenceTables):
        self.tables = tables

    def evaluate(self, events: list[ScenarioEvent]) -> list[PolicyTrigger]:
        """
        Return deduplicated triggers, most severe first.

        Events are the outer loop and rules (catalog order) the inner
        loop, so discovery order (the tie-break) follows the events.
        """
        found: dict[tuple[str, CountryCode], PolicyTrigger] = {}

        for event in events:
            for rule in self.tables.policy_rules.values():
                if not rule.applies_to(event):
                    continue
                key = (rule.id, event.country)
                if key not in found:
                    found[key] = build_trigger(rule, event.country)

        triggers = sort_by_severity(found.values())
        logger.debug("Risk engine: %d events -> %d triggers", len(events), len(triggers))
        return triggers


def find_policy_triggers(
    events: list[ScenarioEvent],
    tables: ReferenceTables,
) -> list[PolicyTrigger]:
    """Convenience wrapper around RiskEngine.evaluate."""
    return RiskEngine(tables).evaluate(events)


def count_high_or_critical(triggers: Iterable[PolicyTrigger]) -> int:
    """Number of HIGH or CRITICAL triggers."""
    return sum(1 for t in triggers if t.severity.is_high_or_critical)


def count_severity(triggers: Iterable[PolicyTrigger], severity: RiskSeverity) -> int:
    return sum(1 for t in triggers if t.severity == severity)
