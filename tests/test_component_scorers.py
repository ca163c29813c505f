"""
Tests for the four OFS component scorers.
"""
import pytest

from workforcepilot.engine import (
    build_workflow,
    find_policy_triggers,
    score_components,
    score_execution_cluster_risk,
    score_exposure,
    score_governance_load,
    score_input_completeness,
)
from workforcepilot.engine.component_scorers import quantity_factor
from workforcepilot.engine.risk_engine import build_trigger
from workforcepilot.models import CountryCode, EventType, Quarter, RiskSeverity
from tests.conftest import make_event, make_rule


def _high_triggers(count):
    return [
        build_trigger(make_rule(f"POL-H{i}", severity=RiskSeverity.HIGH), CountryCode.ES)
        for i in range(count)
    ]


class TestEmptyScenario:

    def test_all_scores_zero(self, small_tables):
        components = score_components([], [], [], small_tables)
        assert components.exposure_score == 0
        assert components.governance_load == 0
        assert components.execution_cluster_risk == 0
        assert components.input_completeness_score == 0
        assert components.confidence_penalty == 100

    def test_governance_zero_without_workflow(self):
        assert score_governance_load([], _high_triggers(3)) == 0


class TestInputCompleteness:

    @pytest.mark.parametrize("event,expected", [
        # conversion in a high-PE country: 7 of 11
        (make_event(), 64),
        # termination in a low-PE country: 7 of 9
        (make_event(country=CountryCode.US, event_type=EventType.TERMINATION), 78),
        # relocation with destination: 8 of 9
        (make_event(country=CountryCode.DE, event_type=EventType.RELOCATION,
                    destination_country=CountryCode.ES), 89),
        # relocation without destination: 7 of 9
        (make_event(country=CountryCode.DE, event_type=EventType.RELOCATION), 78),
    ])
    def test_single_event(self, small_tables, event, expected):
        assert score_input_completeness([event], small_tables) == expected

    def test_average_over_events(self, small_tables):
        events = [
            make_event(id="a"),
            make_event(id="b", country=CountryCode.US, event_type=EventType.TERMINATION),
        ]
        # (63.64 + 77.78) / 2
        assert score_input_completeness(events, small_tables) == 71


class TestExposure:

    @pytest.mark.parametrize("quantity,expected", [
        (1, 1.04),
        (10, 1.4),
        (25, 2.0),
        (100, 2.0),
    ])
    def test_quantity_factor(self, quantity, expected):
        assert quantity_factor(quantity) == pytest.approx(expected)

    def test_base_score(self, small_tables):
        # ES: pe 0.8, misclass 0.6, factor 1.04
        assert score_exposure([make_event()], [], small_tables) == 73

    def test_critical_trigger_boost(self, small_tables):
        events = [make_event()]
        triggers = find_policy_triggers(events, small_tables)
        assert score_exposure(events, triggers, small_tables) == 81

    def test_boost_only_for_exposure_families(self, small_tables):
        events = [make_event()]
        trigger = build_trigger(
            make_rule("POL-X", family="Payroll", severity=RiskSeverity.CRITICAL),
            CountryCode.ES,
        )
        assert score_exposure(events, [trigger], small_tables) == 73

    def test_capped_at_100(self, small_tables):
        events = [make_event(quantity=25)]
        assert score_exposure(events, [], small_tables) == 100

    def test_unknown_country_uses_default_profile(self, small_tables):
        events = [make_event(country=CountryCode.GB)]
        # 0.5 sensitivity * 1.04
        assert score_exposure(events, [], small_tables) == 52


class TestGovernanceLoad:

    def test_counts_steps_systems_owners_families(self, small_tables):
        workflow = build_workflow([make_event()], small_tables)
        # 2 steps, 3 systems, 2 owners, 0 families -> 17 / 175
        assert score_governance_load(workflow, []) == 10

    def test_families_add_load(self, small_tables):
        events = [make_event()]
        workflow = build_workflow(events, small_tables)
        triggers = find_policy_triggers(events, small_tables)
        # one family adds 5 raw points -> 22 / 175
        assert score_governance_load(workflow, triggers) == 13


class TestExecutionClusterRisk:

    def test_single_cluster(self):
        events = [make_event(event_type=EventType.TERMINATION, quantity=15)]
        assert score_execution_cluster_risk(events, []) == 80

    def test_cluster_score_capped(self):
        events = [make_event(event_type=EventType.TERMINATION, quantity=60)]
        assert score_execution_cluster_risk(events, []) == 80

    def test_same_country_and_quarter_accumulate(self):
        events = [
            make_event(id="c", quantity=5),
            make_event(id="t", event_type=EventType.TERMINATION, quantity=5),
        ]
        # 5 * 0.8 + 5 * 1.0 = 9 -> 48
        assert score_execution_cluster_risk(events, []) == 48

    def test_largest_cluster_wins(self):
        events = [
            make_event(id="c", quantity=5),
            make_event(id="t", event_type=EventType.TERMINATION, quantity=5,
                       timing_quarter=Quarter.Q2),
        ]
        assert score_execution_cluster_risk(events, []) == 27

    @pytest.mark.parametrize("high,expected", [
        (1, 84),
        (5, 100),
        (9, 100),
    ])
    def test_trigger_bonus(self, high, expected):
        events = [make_event(event_type=EventType.TERMINATION, quantity=15)]
        assert score_execution_cluster_risk(events, _high_triggers(high)) == expected


class TestConversionWave:

    def test_components(self, tables, conversion_wave):
        triggers = find_policy_triggers(conversion_wave, tables)
        workflow = build_workflow(conversion_wave, tables)
        components = score_components(conversion_wave, triggers, workflow, tables)

        assert components.to_dict() == {
            "exposure_score": 100,
            "governance_load": 27,
            "execution_cluster_risk": 42,
            "input_completeness_score": 64,
            "confidence_penalty": 36,
        }

    def test_scores_in_range(self, tables, conversion_wave, relocation_scenario,
                             termination_scenario):
        for events in (conversion_wave, relocation_scenario, termination_scenario):
            triggers = find_policy_triggers(events, tables)
            workflow = build_workflow(events, tables)
            for value in score_components(events, triggers, workflow, tables).to_dict().values():
                assert 0 <= value <= 100
