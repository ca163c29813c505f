"""
WorkforcePilot Evaluation Models

Everything the engine produces for a scenario:
- PolicyTrigger: a policy rule judged applicable
- ThresholdBreach: an aggregate compared to its limit
- WorkflowStep: a required operational step
- HeatmapCell: risk score per (country, event type)
- OFSComponentScores / OFSWeights: inputs of the friction score
- SignalSummary: flattened display signals
- ScenarioEvaluation: the complete, immutable result

Evaluations are never edited. Re-weighting or applying sequencing builds a
new ScenarioEvaluation so the previous one stays available for comparison.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..exceptions import InvalidWeightsError
from .enums import CountryCode, EventType, PCRLevel, RiskSeverity
from .reference import EvidenceEntry


# =============================================================================
# Policy Triggers
# =============================================================================

@dataclass(frozen=True)
class PolicyTrigger:
    """
    A policy rule that fired for the scenario.

    Unique per (policy_id, country).
    """
    policy_id: str
    title: str
    family: str
    severity: RiskSeverity
    confidence: float
    evidence_ids: tuple[str, ...]
    description: str
    evidence_text: str = ""
    country: Optional[CountryCode] = None

    @property
    def key(self) -> tuple[str, Optional[CountryCode]]:
        return (self.policy_id, self.country)

    def to_dict(self) -> dict[str, Any]:
        return {
            "policy_id": self.policy_id,
            "title": self.title,
            "family": self.family,
            "severity": self.severity.value,
            "confidence": self.confidence,
            "evidence_ids": list(self.evidence_ids),
            "evidence_text": self.evidence_text,
            "description": self.description,
            "country": self.country.value if self.country else None,
        }


# =============================================================================
# Threshold Breaches
# =============================================================================

@dataclass(frozen=True)
class ThresholdBreach:
    """
    An aggregate quantity compared against a threshold.

    Records are emitted whether or not the limit is crossed;
    ``breached`` is inclusive (current == threshold counts).
    """
    threshold_id: str
    label: str
    current: int
    threshold: int
    breached: bool
    description: str
    country: Optional[CountryCode] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "threshold_id": self.threshold_id,
            "label": self.label,
            "current": self.current,
            "threshold": self.threshold,
            "breached": self.breached,
            "country": self.country.value if self.country else None,
            "description": self.description,
        }


# =============================================================================
# Workflow
# =============================================================================

@dataclass(frozen=True)
class WorkflowStep:
    """A required step, tagged with the event type whose template contributed it."""
    step_id: str
    title: str
    owner: str
    days_required: int
    dependencies: tuple[str, ...]
    systems_touched: tuple[str, ...]
    event_type: EventType

    def to_dict(self) -> dict[str, Any]:
        return {
            "step_id": self.step_id,
            "title": self.title,
            "owner": self.owner,
            "days_required": self.days_required,
            "dependencies": list(self.dependencies),
            "systems_touched": list(self.systems_touched),
            "event_type": self.event_type.value,
        }


# =============================================================================
# Heatmap
# =============================================================================

@dataclass(frozen=True)
class HeatmapCell:
    """Modeled risk for one (country, event type) pair."""
    country: CountryCode
    event_type: EventType
    risk_score: int
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "country": self.country.value,
            "event_type": self.event_type.value,
            "risk_score": self.risk_score,
            "label": self.label,
        }


# =============================================================================
# OFS Components and Weights
# =============================================================================

SCORE_MIN = 0
SCORE_MAX = 100


@dataclass(frozen=True)
class OFSComponentScores:
    """
    The four weight-independent OFS sub-scores (0-100).

    ``confidence_penalty`` is always derived as
    ``100 - input_completeness_score`` and cannot be passed in.
    """
    exposure_score: int
    governance_load: int
    execution_cluster_risk: int
    input_completeness_score: int
    confidence_penalty: int = field(init=False)

    def __post_init__(self) -> None:
        for name in (
            "exposure_score",
            "governance_load",
            "execution_cluster_risk",
            "input_completeness_score",
        ):
            value = getattr(self, name)
            if not SCORE_MIN <= value <= SCORE_MAX:
                raise ValueError(f"{name} must be within [0, 100], got {value}")
        object.__setattr__(
            self, "confidence_penalty", SCORE_MAX - self.input_completeness_score
        )

    @classmethod
    def zero(cls) -> "OFSComponentScores":
        return cls(
            exposure_score=0,
            governance_load=0,
            execution_cluster_risk=0,
            input_completeness_score=0,
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "exposure_score": self.exposure_score,
            "governance_load": self.governance_load,
            "execution_cluster_risk": self.execution_cluster_risk,
            "input_completeness_score": self.input_completeness_score,
            "confidence_penalty": self.confidence_penalty,
        }


MIN_WEIGHT = 0.05
MAX_WEIGHT = 0.85
WEIGHT_SUM_TOLERANCE = 0.01


@dataclass(frozen=True)
class OFSWeights:
    """
    Weights applied to the OFS components.

    ``speed`` weighs execution cluster risk and ``confidence`` weighs the
    confidence penalty. Valid weights lie in [0.05, 0.85] and sum to 1.0.
    """
    exposure: float = 0.40
    governance: float = 0.30
    speed: float = 0.20
    confidence: float = 0.10

    KEYS = ("exposure", "governance", "speed", "confidence")

    @property
    def total(self) -> float:
        return self.exposure + self.governance + self.speed + self.confidence

    @property
    def is_valid(self) -> bool:
        in_range = all(
            MIN_WEIGHT - 1e-9 <= getattr(self, k) <= MAX_WEIGHT + 1e-9 for k in self.KEYS
        )
        return in_range and abs(self.total - 1.0) < WEIGHT_SUM_TOLERANCE

    def validate(self) -> "OFSWeights":
        """Return self, or raise InvalidWeightsError when out of contract."""
        if not self.is_valid:
            raise InvalidWeightsError(
                message="Weights must each lie in [0.05, 0.85] and sum to 1.0",
                details={"weights": self.to_dict(), "total": round(self.total, 4)},
            )
        return self

    def to_dict(self) -> dict[str, float]:
        return {k: getattr(self, k) for k in self.KEYS}

    @classmethod
    def from_dict(cls, data: dict[str, float]) -> "OFSWeights":
        unknown = set(data) - set(cls.KEYS)
        if unknown:
            raise InvalidWeightsError(
                message=f"Unknown weight keys: {sorted(unknown)}",
                details={"allowed": list(cls.KEYS)},
            )
        try:
            values = {k: float(v) for k, v in data.items()}
        except (TypeError, ValueError) as e:
            raise InvalidWeightsError(
                message=f"Weights must be numbers: {e}",
                details={"weights": {k: repr(v) for k, v in data.items()}},
            ) from e
        return cls(**values)


DEFAULT_WEIGHTS = OFSWeights()


# =============================================================================
# Signals
# =============================================================================

@dataclass(frozen=True)
class SignalSummary:
    """Flattened display signals, including the composite score (ofs)."""
    total_cost_impact: int
    headcount_delta: int
    risk_cluster_count: int
    visa_load: int
    ofs: int
    gli: int
    pcr: PCRLevel
    liability_tail: int
    exposure_score: int
    governance_load: int
    execution_cluster_risk: int
    input_completeness_score: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_cost_impact": self.total_cost_impact,
            "headcount_delta": self.headcount_delta,
            "risk_cluster_count": self.risk_cluster_count,
            "visa_load": self.visa_load,
            "ofs": self.ofs,
            "gli": self.gli,
            "pcr": self.pcr.value,
            "liability_tail": self.liability_tail,
            "exposure_score": self.exposure_score,
            "governance_load": self.governance_load,
            "execution_cluster_risk": self.execution_cluster_risk,
            "input_completeness_score": self.input_completeness_score,
        }


# =============================================================================
# Scenario Evaluation
# =============================================================================

@dataclass(frozen=True)
class ScenarioEvaluation:
    """
    The complete result of evaluating a scenario.

    ``component_scores`` are fixed for a scenario; ``signals.ofs`` reflects
    ``weights``. Use engine.composite.recompute_composite to re-weight
    without re-running the engine.
    """
    id: str
    created_at: datetime
    summary: str
    signals: SignalSummary
    heatmap: tuple[HeatmapCell, ...]
    threshold_breaches: tuple[ThresholdBreach, ...]
    triggers: tuple[PolicyTrigger, ...]
    workflow: tuple[WorkflowStep, ...]
    evidence: tuple[EvidenceEntry, ...]
    data_gaps: tuple[str, ...]
    staging_suggestion: str
    component_scores: OFSComponentScores
    weights: OFSWeights

    @property
    def breached_count(self) -> int:
        return sum(1 for b in self.threshold_breaches if b.breached)

    @property
    def policy_families(self) -> set[str]:
        return {t.family for t in self.triggers}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict (snake_case keys)."""
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "summary": self.summary,
            "signals": self.signals.to_dict(),
            "heatmap": [c.to_dict() for c in self.heatmap],
            "threshold_breaches": [b.to_dict() for b in self.threshold_breaches],
            "triggers": [t.to_dict() for t in self.triggers],
            "workflow": [s.to_dict() for s in self.workflow],
            "evidence": [e.to_dict() for e in self.evidence],
            "data_gaps": list(self.data_gaps),
            "staging_suggestion": self.staging_suggestion,
            "component_scores": self.component_scores.to_dict(),
            "weights": self.weights.to_dict(),
        }
