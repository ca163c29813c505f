"""Request schemas for the API."""

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from workforcepilot.models import OFSComponentScores, OFSWeights, ScenarioEvent
from workforcepilot.models.evaluation import MAX_WEIGHT, MIN_WEIGHT, WEIGHT_SUM_TOLERANCE
from workforcepilot.packs.schema import CountryCodeValue, EventTypeValue, WorkerTypeValue


JobFunctionValue = Literal["Engineering", "Sales", "Operations", "Finance", "HR", "Marketing"]
QuarterValue = Literal["Q1", "Q2", "Q3", "Q4"]
WeightKeyValue = Literal["exposure", "governance", "speed", "confidence"]


class EventInput(BaseModel):
    """One batch of workers undergoing one workforce action."""
    id: str = Field(..., min_length=1, description="Unique event ID within the scenario")
    country: CountryCodeValue = Field(..., description="Jurisdiction of the workers")
    worker_type: WorkerTypeValue = Field(..., description="Current engagement model")
    event_type: EventTypeValue = Field(..., description="Action being taken")
    job_function: JobFunctionValue = Field(..., description="Business function")
    quantity: int = Field(..., gt=0, description="Number of workers in the batch")
    timing_quarter: QuarterValue = Field(..., description="Quarter the action lands in")
    avg_annual_salary_usd: float = Field(..., gt=0, description="Average annual salary (USD)")
    destination_country: Optional[CountryCodeValue] = Field(
        None, description="Target jurisdiction (relocations only)"
    )

    def to_event(self) -> ScenarioEvent:
        return ScenarioEvent.from_dict(self.model_dump())


class WeightsInput(BaseModel):
    """OFS weights; each in [0.05, 0.85], summing to 1.0."""
    exposure: float = Field(0.40, ge=MIN_WEIGHT, le=MAX_WEIGHT)
    governance: float = Field(0.30, ge=MIN_WEIGHT, le=MAX_WEIGHT)
    speed: float = Field(0.20, ge=MIN_WEIGHT, le=MAX_WEIGHT)
    confidence: float = Field(0.10, ge=MIN_WEIGHT, le=MAX_WEIGHT)

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def check_sum(self) -> "WeightsInput":
        total = self.exposure + self.governance + self.speed + self.confidence
        if abs(total - 1.0) >= WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Weights must sum to 1.0, got {round(total, 4)}")
        return self

    def to_weights(self) -> OFSWeights:
        return OFSWeights.from_dict(self.model_dump())


class ScenarioRequest(BaseModel):
    """A scenario plus the weights to score it with."""
    events: list[EventInput] = Field(default_factory=list, description="Scenario events")
    weights: WeightsInput = Field(default_factory=WeightsInput, description="OFS weights")

    @model_validator(mode="after")
    def check_unique_ids(self) -> "ScenarioRequest":
        seen = set()
        for event in self.events:
            if event.id in seen:
                raise ValueError(f"Duplicate event id: {event.id}")
            seen.add(event.id)
        return self

    def to_events(self) -> list[ScenarioEvent]:
        return [e.to_event() for e in self.events]

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "events": [
                        {
                            "id": "wow1-es",
                            "country": "ES",
                            "worker_type": "contractor",
                            "event_type": "contractor_conversion",
                            "job_function": "Engineering",
                            "quantity": 6,
                            "timing_quarter": "Q3",
                            "avg_annual_salary_usd": 75000,
                        },
                        {
                            "id": "wow1-de",
                            "country": "DE",
                            "worker_type": "contractor",
                            "event_type": "contractor_conversion",
                            "job_function": "Engineering",
                            "quantity": 6,
                            "timing_quarter": "Q3",
                            "avg_annual_salary_usd": 85000,
                        },
                    ],
                    "weights": {
                        "exposure": 0.40,
                        "governance": 0.30,
                        "speed": 0.20,
                        "confidence": 0.10,
                    },
                }
            ]
        }
    }


class EvaluateRequest(ScenarioRequest):
    """Request to evaluate a scenario."""


class BriefRequest(ScenarioRequest):
    """Request for the executive brief of a scenario."""


class SequencingRequest(ScenarioRequest):
    """Request to preview or compare recommended sequencing."""


class ComponentScoresInput(BaseModel):
    """The weight-independent OFS sub-scores of an earlier evaluation."""
    exposure_score: int = Field(..., ge=0, le=100)
    governance_load: int = Field(..., ge=0, le=100)
    execution_cluster_risk: int = Field(..., ge=0, le=100)
    input_completeness_score: int = Field(..., ge=0, le=100)

    def to_components(self) -> OFSComponentScores:
        return OFSComponentScores(**self.model_dump())


class RecomputeRequest(BaseModel):
    """Request to re-weight component scores without re-running the engine."""
    component_scores: ComponentScoresInput
    weights: WeightsInput = Field(default_factory=WeightsInput)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "component_scores": {
                        "exposure_score": 89,
                        "governance_load": 34,
                        "execution_cluster_risk": 33,
                        "input_completeness_score": 85,
                    },
                    "weights": {
                        "exposure": 0.55,
                        "governance": 0.20,
                        "speed": 0.15,
                        "confidence": 0.10,
                    },
                }
            ]
        }
    }


class NormalizeRequest(BaseModel):
    """Request to change one weight and rebalance the others."""
    weights: WeightsInput = Field(default_factory=WeightsInput, description="Current weights")
    changed_key: WeightKeyValue = Field(..., description="Weight being changed")
    value: float = Field(..., ge=0.0, le=1.0, description="Requested value (clamped to range)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "weights": {
                        "exposure": 0.40,
                        "governance": 0.30,
                        "speed": 0.20,
                        "confidence": 0.10,
                    },
                    "changed_key": "exposure",
                    "value": 0.6,
                }
            ]
        }
    }
