"""
WorkforcePilot Executive Brief

Structured narration of a ScenarioEvaluation for executive readers.
Every field is copied or derived from the evaluation; nothing here is
computed from the events directly.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .enums import DominantDriver, RiskSeverity


@dataclass(frozen=True)
class TopRisk:
    """One of the most severe triggers, as cited in a brief."""
    severity: RiskSeverity
    title: str
    evidence_ids: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "title": self.title,
            "evidence_ids": list(self.evidence_ids),
        }


@dataclass(frozen=True)
class ExecBrief:
    """
    Executive brief for a scenario.

    Attributes:
        scenario_summary: 1-2 sentences citing evidence IDs
        of_score: OFS copied from the evaluation signals
        dominant_driver: Component with the largest weighted contribution
        tradeoff_identified: Key tradeoff for the dominant driver
        recommended_sequencing: Up to three actionable staging steps
        input_confidence: Input completeness score (0-100)
        data_required: Data gaps copied from the evaluation
        exec_brief: One-sentence brief carrying the not-legal-advice marker
        top_risks: Up to three triggers, most severe first
        staging_plan: All staging steps
        exec_sentence: One-line summary for Q&A mode
    """
    scenario_summary: str
    of_score: int
    dominant_driver: DominantDriver
    tradeoff_identified: str
    recommended_sequencing: tuple[str, ...]
    input_confidence: int
    data_required: tuple[str, ...]
    exec_brief: str
    top_risks: tuple[TopRisk, ...] = field(default_factory=tuple)
    staging_plan: tuple[str, ...] = field(default_factory=tuple)
    exec_sentence: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "scenario_summary": self.scenario_summary,
            "of_score": self.of_score,
            "dominant_driver": self.dominant_driver.value,
            "tradeoff_identified": self.tradeoff_identified,
            "recommended_sequencing": list(self.recommended_sequencing),
            "input_confidence": self.input_confidence,
            "data_required": list(self.data_required),
            "exec_brief": self.exec_brief,
            "top_risks": [r.to_dict() for r in self.top_risks],
            "staging_plan": list(self.staging_plan),
            "exec_sentence": self.exec_sentence,
        }
