"""
Pytest configuration and fixtures for WorkforcePilot tests.

Provides helper factories and common fixtures matching actual model definitions.
"""
import pytest

from workforcepilot.engine import ScenarioEvaluator
from workforcepilot.models import (
    CostMultipliers,
    CountryCode,
    CountryProfile,
    EventType,
    EvidenceEntry,
    JobFunction,
    PolicyRule,
    Quarter,
    QuantityScaling,
    ReferenceTables,
    RiskSeverity,
    ScenarioEvent,
    ThresholdDefinition,
    ThresholdScope,
    WorkerType,
    WorkflowStepTemplate,
)
from workforcepilot.packs import get_default_tables
from workforcepilot.presets import get_preset


# =============================================================================
# Factory Helpers
# =============================================================================

def make_event(
    id: str = "evt-1",
    country: CountryCode = CountryCode.ES,
    worker_type: WorkerType = WorkerType.CONTRACTOR,
    event_type: EventType = EventType.CONTRACTOR_CONVERSION,
    job_function: JobFunction = JobFunction.ENGINEERING,
    quantity: int = 1,
    timing_quarter: Quarter = Quarter.Q1,
    avg_annual_salary_usd: float = 100000,
    destination_country: CountryCode = None,
) -> ScenarioEvent:
    """Create a ScenarioEvent with sensible defaults."""
    return ScenarioEvent(
        id=id,
        country=country,
        worker_type=worker_type,
        event_type=event_type,
        job_function=job_function,
        quantity=quantity,
        timing_quarter=timing_quarter,
        avg_annual_salary_usd=avg_annual_salary_usd,
        destination_country=destination_country,
    )


def make_rule(
    id: str = "POL-T-001",
    family: str = "PE",
    countries: tuple = (CountryCode.ES,),
    event_types: tuple = (EventType.CONTRACTOR_CONVERSION,),
    severity: RiskSeverity = RiskSeverity.HIGH,
    evidence_ids: tuple = ("EVD-T1",),
    threshold_key: str = None,
) -> PolicyRule:
    """Create a PolicyRule with required fields."""
    return PolicyRule(
        id=id,
        title=f"{family} test rule",
        family=family,
        countries=countries,
        event_types=event_types,
        severity=severity,
        confidence=0.8,
        description=f"{family} test rule description",
        evidence_ids=evidence_ids,
        threshold_key=threshold_key,
    )


def make_threshold(
    id: str = "batch",
    scope: ThresholdScope = ThresholdScope.GLOBAL,
    event_types: tuple = (EventType.CONTRACTOR_CONVERSION,),
    always_emit: bool = False,
    global_threshold: int = None,
    threshold_by_country: dict = None,
    default_threshold: int = None,
) -> ThresholdDefinition:
    """Create a ThresholdDefinition with required fields."""
    return ThresholdDefinition(
        id=id,
        label=id.replace("_", " ").title(),
        description=f"{id} limit",
        scope=scope,
        event_types=event_types,
        always_emit=always_emit,
        global_threshold=global_threshold,
        threshold_by_country=threshold_by_country or {},
        default_threshold=default_threshold,
    )


def make_step(
    step_id: str,
    owner: str = "Legal",
    days_required: int = 2,
    dependencies: tuple = (),
    systems_touched: tuple = ("HRIS",),
) -> WorkflowStepTemplate:
    """Create a WorkflowStepTemplate."""
    return WorkflowStepTemplate(
        step_id=step_id,
        title=f"Step {step_id}",
        owner=owner,
        days_required=days_required,
        dependencies=dependencies,
        systems_touched=systems_touched,
    )


def make_tables(
    countries: dict = None,
    rules: list = None,
    thresholds: list = None,
    templates: dict = None,
    cost_multipliers: CostMultipliers = None,
    evidence: tuple = (),
) -> ReferenceTables:
    """Create ReferenceTables from plain lists and dicts."""
    return ReferenceTables(
        pack_id="TEST-PACK",
        pack_version="0.0.1",
        countries=countries or {},
        policy_rules={r.id: r for r in (rules or [])},
        thresholds={t.id: t for t in (thresholds or [])},
        workflow_templates=templates or {},
        cost_multipliers=cost_multipliers or CostMultipliers(),
        evidence=tuple(evidence),
        name="Test Pack",
    )


# =============================================================================
# Reference Table Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def tables() -> ReferenceTables:
    """The bundled demo reference pack."""
    return get_default_tables()


@pytest.fixture(scope="session")
def evaluator(tables) -> ScenarioEvaluator:
    return ScenarioEvaluator(tables)


@pytest.fixture
def small_tables() -> ReferenceTables:
    """
    Two-country tables with one rule per family of interest.

    ES is high sensitivity, US low; DE is deliberately absent so the
    default country profile is exercised.
    """
    return make_tables(
        countries={
            CountryCode.ES: CountryProfile(
                code="ES",
                name="Spain",
                pe_sensitivity=0.8,
                misclass_sensitivity=0.6,
                benefits_tail_multiplier=0.5,
            ),
            CountryCode.US: CountryProfile(
                code="US",
                name="United States",
                pe_sensitivity=0.2,
                misclass_sensitivity=0.4,
                visa_required=True,
            ),
        },
        rules=[
            make_rule("POL-PE", family="PE", severity=RiskSeverity.CRITICAL),
            make_rule(
                "POL-REL",
                family="Relocation",
                countries=(CountryCode.ES,),
                event_types=(EventType.RELOCATION,),
                severity=RiskSeverity.MEDIUM,
                evidence_ids=("EVD-T2",),
            ),
            make_rule(
                "POL-TRM",
                family="Termination",
                countries=(CountryCode.ES, CountryCode.US),
                event_types=(EventType.TERMINATION,),
                severity=RiskSeverity.LOW,
                evidence_ids=(),
            ),
        ],
        thresholds=[
            make_threshold("batch", global_threshold=5, always_emit=True),
            make_threshold(
                "terminations",
                scope=ThresholdScope.COUNTRY,
                event_types=(EventType.TERMINATION,),
                threshold_by_country={CountryCode.ES: 3},
            ),
        ],
        templates={
            EventType.CONTRACTOR_CONVERSION: (
                make_step("C-1", owner="Legal", systems_touched=("HRIS", "Contracts")),
                make_step("SHARED", owner="Payroll", dependencies=("C-1",),
                          systems_touched=("Payroll",)),
            ),
            EventType.TERMINATION: (
                make_step("T-1", owner="HR"),
                make_step("SHARED", owner="Payroll", dependencies=("T-1",),
                          systems_touched=("Payroll",)),
            ),
        },
        cost_multipliers=CostMultipliers(
            event_type_base={EventType.CONTRACTOR_CONVERSION: {CountryCode.ES: 0.2}},
            worker_type_multiplier={WorkerType.CONTRACTOR: 1.5},
            quantity_scaling=QuantityScaling(breakpoints=(1, 10), multipliers=(1.0, 0.5)),
        ),
        evidence=(
            EvidenceEntry(id="EVD-T1", source="POL-PE", text="PE evidence", policy_id="POL-PE"),
            EvidenceEntry(id="EVD-T2", source="POL-REL", text="Relocation evidence",
                          policy_id="POL-REL"),
        ),
    )


# =============================================================================
# Scenario Fixtures
# =============================================================================

@pytest.fixture
def conversion_wave() -> list[ScenarioEvent]:
    """Demo scenario 1: 6 ES + 6 DE contractor conversions in Q3."""
    return get_preset(1)


@pytest.fixture
def relocation_scenario() -> list[ScenarioEvent]:
    """Demo scenario 2: 5 engineers relocated US -> GB in Q2."""
    return get_preset(2)


@pytest.fixture
def termination_scenario() -> list[ScenarioEvent]:
    """Demo scenario 3: 5 DE EOR employees terminated in Q2."""
    return get_preset(3)
