"""
Tests for display signals and the scenario summary sentence.
"""
import pytest

from workforcepilot.engine import (
    build_summary,
    check_thresholds,
    find_policy_triggers,
    headcount_delta,
    liability_tail,
    payroll_cycle_risk,
    total_cost_impact,
    visa_load,
)
from workforcepilot.engine.signals import DISCLAIMER
from workforcepilot.models import CountryCode, EventType, PCRLevel, Quarter, WorkerType
from tests.conftest import make_event


class TestCostImpact:

    def test_single_event(self, small_tables):
        # 100000 * 0.2 base * 1.5 contractor * 1.0 scaling
        assert total_cost_impact([make_event()], small_tables) == 30000

    def test_quantity_scaling(self, small_tables):
        # 10 workers drop to the 0.5 scaling tier
        assert total_cost_impact([make_event(quantity=10)], small_tables) == 150000

    def test_defaults_for_unlisted_rates(self, small_tables):
        event = make_event(
            country=CountryCode.US,
            worker_type=WorkerType.DIRECT_EMPLOYEE,
            event_type=EventType.TERMINATION,
        )
        assert total_cost_impact([event], small_tables) == 15000

    def test_empty(self, small_tables):
        assert total_cost_impact([], small_tables) == 0


def test_headcount_delta():
    events = [
        make_event(id="c", quantity=3),
        make_event(id="e", event_type=EventType.EOR_ONBOARDING, quantity=2),
        make_event(id="t", event_type=EventType.TERMINATION, quantity=4),
        make_event(id="r", event_type=EventType.RELOCATION, quantity=9),
    ]
    assert headcount_delta(events) == 1


class TestVisaLoad:

    def test_origin_requires_visa(self, small_tables):
        events = [make_event(country=CountryCode.US, quantity=2)]
        assert visa_load(events, small_tables) == 2

    def test_destination_requires_visa(self, small_tables):
        event = make_event(
            event_type=EventType.RELOCATION,
            quantity=3,
            destination_country=CountryCode.US,
        )
        assert visa_load([event], small_tables) == 3

    def test_origin_and_destination_both_count(self, small_tables):
        event = make_event(
            country=CountryCode.US,
            event_type=EventType.RELOCATION,
            destination_country=CountryCode.US,
        )
        assert visa_load([event], small_tables) == 2

    def test_no_visa_countries(self, small_tables):
        assert visa_load([make_event(quantity=5)], small_tables) == 0


class TestLiabilityTail:

    def test_termination(self, small_tables):
        event = make_event(event_type=EventType.TERMINATION, quantity=2)
        # 200000 * 0.5 tail
        assert liability_tail([event], small_tables) == 100000

    def test_relocation_has_no_tail(self, small_tables):
        event = make_event(event_type=EventType.RELOCATION, quantity=2)
        assert liability_tail([event], small_tables) == 0

    def test_default_profile_has_no_tail(self, small_tables):
        assert liability_tail([make_event(country=CountryCode.DE)], small_tables) == 0


class TestPayrollCycleRisk:

    @pytest.mark.parametrize("quantities,expected", [
        ([], PCRLevel.LOW),
        ([3], PCRLevel.LOW),
        ([4], PCRLevel.MEDIUM),
        ([1, 1], PCRLevel.MEDIUM),
        ([8], PCRLevel.HIGH),
        ([1, 1, 1, 1], PCRLevel.HIGH),
    ])
    def test_levels(self, quantities, expected):
        quarters = list(Quarter)
        events = [
            make_event(id=f"e{i}", quantity=q, timing_quarter=quarters[i])
            for i, q in enumerate(quantities)
        ]
        assert payroll_cycle_risk(events) == expected

    def test_relocations_ignored(self):
        events = [make_event(event_type=EventType.RELOCATION, quantity=20)]
        assert payroll_cycle_risk(events) == PCRLevel.LOW

    def test_same_cluster_accumulates(self):
        events = [
            make_event(id="c", quantity=4),
            make_event(id="t", event_type=EventType.TERMINATION, quantity=4),
        ]
        assert payroll_cycle_risk(events) == PCRLevel.HIGH


class TestSummary:

    def test_singular_forms(self, small_tables):
        events = [make_event(quantity=5)]
        triggers = find_policy_triggers(events, small_tables)
        breaches = check_thresholds(events, small_tables)

        assert build_summary(events, triggers, breaches) == (
            "Scenario includes 5 worker events (contractor conversion) across ES. "
            "1 policy trigger activated, including 1 CRITICAL. "
            f"1 threshold breached. {DISCLAIMER}"
        )

    def test_no_critical_clause(self, small_tables):
        events = [
            make_event(id="t", event_type=EventType.TERMINATION),
            make_event(id="r", country=CountryCode.US, event_type=EventType.EOR_ONBOARDING),
        ]
        triggers = find_policy_triggers(events, small_tables)
        breaches = check_thresholds(events, small_tables)

        assert build_summary(events, triggers, breaches) == (
            "Scenario includes 2 worker events (termination, EOR onboarding) across ES, US. "
            "1 policy trigger activated. "
            f"0 thresholds breached. {DISCLAIMER}"
        )

    def test_conversion_wave(self, tables, conversion_wave):
        triggers = find_policy_triggers(conversion_wave, tables)
        breaches = check_thresholds(conversion_wave, tables)

        assert build_summary(conversion_wave, triggers, breaches) == (
            "Scenario includes 12 worker events (contractor conversion) across ES, DE. "
            "7 policy triggers activated, including 2 CRITICAL. "
            "4 thresholds breached. "
            "Demo model — illustrative policies only. Not legal advice."
        )
