"""
WorkforcePilot Threshold Engine

Aggregates event quantities per threshold definition and compares them
against their limits.

Emission rules:
- Definitions are processed in table order.
- Global definitions sum every matching event into one record. With
  ``always_emit`` the record is produced even when nothing matches.
- Per-country definitions emit one record per country that has at least
  one matching event, in first-appearance order.
- A record is breached when ``current >= threshold``.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..models import (
    CountryCode,
    ReferenceTables,
    ScenarioEvent,
    ThresholdBreach,
    ThresholdDefinition,
)

logger = logging.getLogger(__name__)


def make_breach(
    definition: ThresholdDefinition,
    current: int,
    country: Optional[CountryCode] = None,
) -> ThresholdBreach:
    """Build the comparison record for one aggregate."""
    limit = definition.limit_for(country)
    label = f"{definition.label} ({country.value})" if country else definition.label
    return ThresholdBreach(
        threshold_id=definition.id,
        label=label,
        current=current,
        threshold=limit,
        breached=current >= limit,
        description=definition.description,
        country=country,
    )


def _per_country_totals(events: Iterable[ScenarioEvent]) -> dict[CountryCode, int]:
    totals: dict[CountryCode, int] = {}
    for event in events:
        totals[event.country] = totals.get(event.country, 0) + event.quantity
    return totals


def check_threshold(
    definition: ThresholdDefinition,
    events: list[ScenarioEvent],
) -> list[ThresholdBreach]:
    """Records for a single definition."""
    matching = [e for e in events if definition.matches(e)]

    if definition.is_per_country:
        return [
            make_breach(definition, current, country)
            for country, current in _per_country_totals(matching).items()
        ]

    if not matching and not definition.always_emit:
        return []
    return [make_breach(definition, sum(e.quantity for e in matching))]


def check_thresholds(
    events: list[ScenarioEvent],
    tables: ReferenceTables,
) -> list[ThresholdBreach]:
    """Records for every definition in the reference tables."""
    breaches: list[ThresholdBreach] = []
    for definition in tables.thresholds.values():
        breaches.extend(check_threshold(definition, events))

    logger.debug(
        "Threshold engine: %d records, %d breached",
        len(breaches),
        sum(1 for b in breaches if b.breached),
    )
    return breaches


def has_breach(breaches: Iterable[ThresholdBreach], threshold_id: str) -> bool:
    """True when any record for ``threshold_id`` is breached."""
    return any(b.threshold_id == threshold_id and b.breached for b in breaches)
