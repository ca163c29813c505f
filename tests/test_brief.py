"""
Tests for the deterministic executive brief.
"""
from dataclasses import replace

import pytest

from workforcepilot.models import (
    DominantDriver,
    OFSComponentScores,
    OFSWeights,
    RiskSeverity,
)
from workforcepilot.narration import build_fallback_brief
from workforcepilot.narration.brief_builder import (
    ADVICE_MARKER,
    dominant_driver,
    split_staging_steps,
)


class TestConversionWaveBrief:

    @pytest.fixture
    def evaluation(self, evaluator, conversion_wave):
        return evaluator.evaluate(conversion_wave)

    @pytest.fixture
    def brief(self, evaluation):
        return build_fallback_brief(evaluation)

    def test_numbers_copied_from_evaluation(self, brief, evaluation):
        assert brief.of_score == evaluation.signals.ofs == 60
        assert brief.input_confidence == 64
        assert brief.data_required == evaluation.data_gaps

    def test_dominant_driver(self, brief):
        assert brief.dominant_driver == DominantDriver.EXPOSURE
        assert brief.tradeoff_identified.startswith("Speed-to-market conflicts")

    def test_summary_cites_evidence(self, brief):
        assert brief.scenario_summary == (
            f"{ADVICE_MARKER} The simulation activated 7 policy triggers with 4 at HIGH "
            "or CRITICAL severity (see EVD-001). Operational Friction Score is 60/100."
        )

    def test_exec_brief(self, brief):
        assert brief.exec_brief == (
            f"{ADVICE_MARKER} Scenario carries OFS 60/100 driven by exposure factors; "
            "modeled cost impact $201,894 across 1 event type(s) requiring 5 workflow steps."
        )
        assert brief.exec_sentence == (
            "Scenario requires 5 workflow steps with OFS 60/100 and modeled cost impact "
            "of $201,894."
        )

    def test_top_risks(self, brief):
        assert [(r.severity, r.title) for r in brief.top_risks] == [
            (RiskSeverity.CRITICAL, "Tax Presence Exposure"),
            (RiskSeverity.CRITICAL, "Tax Presence Exposure"),
            (RiskSeverity.HIGH, "Employment Status Exposure"),
        ]
        assert brief.top_risks[0].evidence_ids == ("EVD-001", "EVD-002")

    def test_sequencing(self, brief):
        assert brief.recommended_sequencing == (
            "Sequence contractor conversions after entity readiness check to avoid Tax "
            "Presence Exposure during transition window.",
        )
        assert brief.staging_plan == brief.recommended_sequencing

    def test_deterministic(self, evaluation):
        assert build_fallback_brief(evaluation) == build_fallback_brief(evaluation)

    def test_to_dict(self, brief):
        data = brief.to_dict()
        assert data["dominant_driver"] == "Exposure"
        assert data["top_risks"][0]["severity"] == "CRITICAL"
        assert isinstance(data["recommended_sequencing"], list)


class TestTerminationBrief:

    def test_first_high_trigger_evidence(self, evaluator, termination_scenario):
        brief = build_fallback_brief(evaluator.evaluate(termination_scenario))
        assert "(see EVD-005)" in brief.scenario_summary
        assert "1 at HIGH or CRITICAL" in brief.scenario_summary
        assert len(brief.top_risks) == 3


class TestEmptyBrief:

    def test_fallback_evidence_and_confidence_driver(self, evaluator):
        brief = build_fallback_brief(evaluator.evaluate([]))

        assert "(see EVD-001)" in brief.scenario_summary
        assert brief.dominant_driver == DominantDriver.CONFIDENCE
        assert brief.tradeoff_identified == (
            "Incomplete input data (0% complete) introduces 100-point uncertainty "
            "into the OFS calculation."
        )
        assert brief.top_risks == ()
        assert brief.of_score == 10


class TestDominantDriver:

    def _with(self, evaluation, components, weights):
        return replace(evaluation, component_scores=components, weights=weights)

    def test_tie_goes_to_later_component(self, evaluator):
        evaluation = self._with(
            evaluator.evaluate([]),
            OFSComponentScores(
                exposure_score=50,
                governance_load=50,
                execution_cluster_risk=50,
                input_completeness_score=50,
            ),
            OFSWeights(exposure=0.25, governance=0.25, speed=0.25, confidence=0.25),
        )
        assert dominant_driver(evaluation) == DominantDriver.CONFIDENCE

    def test_governance(self, evaluator, conversion_wave):
        base = evaluator.evaluate(conversion_wave)
        evaluation = self._with(
            base,
            base.component_scores,
            OFSWeights(exposure=0.05, governance=0.85, speed=0.05, confidence=0.05),
        )
        brief = build_fallback_brief(evaluation)

        assert brief.dominant_driver == DominantDriver.GOVERNANCE
        assert brief.tradeoff_identified.startswith("Policy family breadth (4 families)")

    def test_execution(self, evaluator, conversion_wave):
        base = evaluator.evaluate(conversion_wave)
        evaluation = self._with(
            base,
            base.component_scores,
            OFSWeights(exposure=0.05, governance=0.05, speed=0.85, confidence=0.05),
        )
        brief = build_fallback_brief(evaluation)

        assert brief.dominant_driver == DominantDriver.EXECUTION
        assert "across 1 event type(s)" in brief.tradeoff_identified


class TestStagingSteps:

    def test_split_sentences(self):
        assert split_staging_steps("Do this first. Then that.") == [
            "Do this first.",
            "Then that.",
        ]

    def test_empty(self):
        assert split_staging_steps("") == []

    def test_recommended_limited_to_three(self, evaluator, conversion_wave):
        evaluation = replace(
            evaluator.evaluate(conversion_wave),
            staging_suggestion="One. Two. Three. Four.",
        )
        brief = build_fallback_brief(evaluation)

        assert brief.recommended_sequencing == ("One.", "Two.", "Three.")
        assert brief.staging_plan == ("One.", "Two.", "Three.", "Four.")
