"""
WorkforcePilot Reference Tables

Static lookup tables the engine evaluates scenarios against:
- CountryProfile: modeled jurisdiction attributes
- PolicyRule: illustrative policy catalog entries
- ThresholdDefinition: aggregate limits (global or per country)
- WorkflowStepTemplate: ordered operational steps per event type
- CostMultipliers: modeled cost rates
- EvidenceEntry: evidence library cited by policy rules

Tables are loaded from a reference pack (see workforcepilot.packs) and
bundled into a single ReferenceTables value. Everything here is frozen;
mappings are exposed read-only so one loaded instance can be shared by
every evaluation in the process.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from .enums import (
    CountryCode,
    EventType,
    RiskSeverity,
    ThresholdScope,
    WorkerType,
)
from .event import ScenarioEvent


# Fallbacks for lookups that miss the loaded tables
DEFAULT_COST_BASE_RATE = 0.15
DEFAULT_WORKER_TYPE_MULTIPLIER = 1.0
DEFAULT_COUNTRY_THRESHOLD = 20


def _frozen_mapping(data: Optional[Mapping] = None) -> Mapping:
    return MappingProxyType(dict(data or {}))


# =============================================================================
# Countries
# =============================================================================

@dataclass(frozen=True)
class CountryProfile:
    """
    Modeled attributes of a jurisdiction.

    Attributes:
        code: Country code
        name: Display name
        pe_sensitivity: 0-1 approximation of tax-presence (PE) trigger risk
        misclass_sensitivity: 0-1 approximation of worker-misclassification risk
        benefits_tail_multiplier: 0-1 fraction of salary owed as continuation obligations
        visa_required: Inbound workers need visa / right-to-work processing
    """
    code: str
    name: str
    pe_sensitivity: float
    misclass_sensitivity: float
    benefits_tail_multiplier: float = 0.0
    visa_required: bool = False

    @property
    def average_sensitivity(self) -> float:
        """Mean of PE and misclassification sensitivity."""
        return (self.pe_sensitivity + self.misclass_sensitivity) / 2


DEFAULT_COUNTRY_PROFILE = CountryProfile(
    code="??",
    name="Unlisted jurisdiction",
    pe_sensitivity=0.5,
    misclass_sensitivity=0.5,
    benefits_tail_multiplier=0.0,
    visa_required=False,
)


# =============================================================================
# Policy Rules
# =============================================================================

@dataclass(frozen=True)
class PolicyRule:
    """
    An illustrative jurisdictional policy rule.

    A rule fires for an event when the event's country (or a relocation's
    destination) is listed in ``countries`` and the event type is listed
    in ``event_types``.
    """
    id: str
    title: str
    family: str
    countries: tuple[CountryCode, ...]
    event_types: tuple[EventType, ...]
    severity: RiskSeverity
    confidence: float
    description: str
    evidence_ids: tuple[str, ...] = ()
    threshold_key: Optional[str] = None

    def applies_to(self, event: ScenarioEvent) -> bool:
        """Check whether this rule fires for an event."""
        if event.event_type not in self.event_types:
            return False
        if event.country in self.countries:
            return True
        return (
            event.is_relocation
            and event.destination_country is not None
            and event.destination_country in self.countries
        )

    def covers_event_type(self, event_type: EventType) -> bool:
        return event_type in self.event_types


# =============================================================================
# Thresholds
# =============================================================================

@dataclass(frozen=True)
class ThresholdDefinition:
    """
    An aggregate limit over scenario quantities.

    Attributes:
        id: Threshold identifier (e.g. "termination_cluster")
        label: Display label
        description: What crossing the limit means in the model
        scope: GLOBAL sums over the whole scenario, COUNTRY sums per country
        event_types: Event types whose quantities are aggregated
        always_emit: Emit a record even when no matching event exists
        global_threshold: Limit for GLOBAL scope
        threshold_by_country: Per-country limits for COUNTRY scope
        default_threshold: Per-country limit for countries without an entry
    """
    id: str
    label: str
    description: str
    scope: ThresholdScope
    event_types: tuple[EventType, ...]
    always_emit: bool = False
    global_threshold: Optional[int] = None
    threshold_by_country: Mapping[CountryCode, int] = field(default_factory=_frozen_mapping)
    default_threshold: Optional[int] = None

    @property
    def is_per_country(self) -> bool:
        return self.scope == ThresholdScope.COUNTRY

    def matches(self, event: ScenarioEvent) -> bool:
        return event.event_type in self.event_types

    def limit_for(self, country: Optional[CountryCode] = None) -> int:
        """Resolve the limit for a country (or the global limit)."""
        if not self.is_per_country:
            if self.global_threshold is not None:
                return self.global_threshold
            return self.default_threshold or DEFAULT_COUNTRY_THRESHOLD
        if country is not None and country in self.threshold_by_country:
            return self.threshold_by_country[country]
        if self.default_threshold is not None:
            return self.default_threshold
        return DEFAULT_COUNTRY_THRESHOLD


# =============================================================================
# Workflow Templates
# =============================================================================

@dataclass(frozen=True)
class WorkflowStepTemplate:
    """One step of an event type's operational workflow template."""
    step_id: str
    title: str
    owner: str
    days_required: int
    dependencies: tuple[str, ...] = ()
    systems_touched: tuple[str, ...] = ()


# =============================================================================
# Cost Multipliers
# =============================================================================

@dataclass(frozen=True)
class QuantityScaling:
    """
    Batch-size cost scaling.

    ``multipliers[i]`` applies from ``breakpoints[i]`` upwards; quantities
    below the first breakpoint use the first multiplier.
    """
    breakpoints: tuple[int, ...] = (1,)
    multipliers: tuple[float, ...] = (1.0,)

    def multiplier_for(self, quantity: int) -> float:
        multiplier = self.multipliers[0] if self.multipliers else 1.0
        for breakpoint_, value in reversed(list(zip(self.breakpoints, self.multipliers))):
            if quantity >= breakpoint_:
                return value
        return multiplier


@dataclass(frozen=True)
class CostMultipliers:
    """Modeled cost rates by event type, country and worker type."""
    event_type_base: Mapping[EventType, Mapping[CountryCode, float]] = field(
        default_factory=_frozen_mapping
    )
    worker_type_multiplier: Mapping[WorkerType, float] = field(default_factory=_frozen_mapping)
    quantity_scaling: QuantityScaling = field(default_factory=QuantityScaling)

    def base_rate(self, event_type: EventType, country: CountryCode) -> float:
        rates = self.event_type_base.get(event_type)
        if rates is None:
            return DEFAULT_COST_BASE_RATE
        return rates.get(country, DEFAULT_COST_BASE_RATE)

    def worker_multiplier(self, worker_type: WorkerType) -> float:
        return self.worker_type_multiplier.get(worker_type, DEFAULT_WORKER_TYPE_MULTIPLIER)


# =============================================================================
# Evidence Library
# =============================================================================

@dataclass(frozen=True)
class EvidenceEntry:
    """An evidence statement cited by one or more policy rules."""
    id: str
    source: str
    text: str
    policy_id: Optional[str] = None

    def to_dict(self) -> dict[str, Optional[str]]:
        return {
            "id": self.id,
            "source": self.source,
            "text": self.text,
            "policy_id": self.policy_id,
        }


# =============================================================================
# Reference Tables
# =============================================================================

@dataclass(frozen=True)
class ReferenceTables:
    """
    The complete, immutable reference data set for one engine instance.

    Passed explicitly into ScenarioEvaluator so tests can inject fixture
    tables; the bundled pack is available via packs.get_default_tables().
    """
    pack_id: str
    pack_version: str
    countries: Mapping[CountryCode, CountryProfile] = field(default_factory=_frozen_mapping)
    policy_rules: Mapping[str, PolicyRule] = field(default_factory=_frozen_mapping)
    thresholds: Mapping[str, ThresholdDefinition] = field(default_factory=_frozen_mapping)
    workflow_templates: Mapping[EventType, tuple[WorkflowStepTemplate, ...]] = field(
        default_factory=_frozen_mapping
    )
    cost_multipliers: CostMultipliers = field(default_factory=CostMultipliers)
    evidence: tuple[EvidenceEntry, ...] = ()
    name: str = ""

    def __post_init__(self) -> None:
        # Accept plain dicts from callers and freeze them
        for name in ("countries", "policy_rules", "thresholds", "workflow_templates"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, _frozen_mapping(value))

    def country(self, code: CountryCode) -> CountryProfile:
        """Country profile, falling back to DEFAULT_COUNTRY_PROFILE."""
        return self.countries.get(code, DEFAULT_COUNTRY_PROFILE)

    def template_for(self, event_type: EventType) -> tuple[WorkflowStepTemplate, ...]:
        return self.workflow_templates.get(event_type, ())

    def get_rule(self, rule_id: str) -> Optional[PolicyRule]:
        return self.policy_rules.get(rule_id)
