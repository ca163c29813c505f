"""
WorkforcePilot Reference Pack Schemas

Pydantic models for validating reference pack YAML/JSON files.

These schemas define the structure of the reference tables the engine
evaluates scenarios against. They map to the frozen domain models in
workforcepilot.models.reference.

Schema versioning:
- schema_version field tracks breaking changes
- Loaders check the major version for compatibility
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"


# =============================================================================
# Enums as Literals (for YAML validation)
# =============================================================================

CountryCodeValue = Literal["ES", "DE", "GB", "US"]

WorkerTypeValue = Literal["contractor", "eor_employee", "direct_employee"]

EventTypeValue = Literal[
    "contractor_conversion", "termination", "relocation", "eor_onboarding"
]

SeverityValue = Literal["LOW", "MEDIUM", "HIGH", "CRITICAL"]

ThresholdScopeValue = Literal["global", "country"]


# =============================================================================
# Countries
# =============================================================================

class CountrySchema(BaseModel):
    """Schema for a modeled jurisdiction."""
    code: CountryCodeValue = Field(..., description="Country code")
    name: str = Field(..., description="Display name")
    pe_sensitivity: float = Field(..., ge=0, le=1, description="Tax-presence risk (0-1)")
    misclass_sensitivity: float = Field(
        ..., ge=0, le=1, description="Worker-misclassification risk (0-1)"
    )
    benefits_tail_multiplier: float = Field(
        0.0, ge=0, le=1, description="Fraction of salary owed as continuation obligations"
    )
    visa_required: bool = Field(False, description="Inbound workers need visa processing")

    model_config = {"extra": "forbid"}


# =============================================================================
# Policy Rules
# =============================================================================

class PolicyRuleSchema(BaseModel):
    """Schema for an illustrative policy rule."""
    id: str = Field(..., description="Rule identifier (e.g., 'POL-PE-001')")
    title: str = Field(..., description="Short display title")
    family: str = Field(..., description="Rule family (e.g., 'PE', 'Misclassification')")
    countries: list[CountryCodeValue] = Field(..., min_length=1)
    event_types: list[EventTypeValue] = Field(..., min_length=1)
    severity: SeverityValue = Field(..., description="Severity when the rule fires")
    confidence: float = Field(..., ge=0, le=1)
    description: str = Field(..., description="Rule description, reused as evidence text")
    evidence_ids: list[str] = Field(default_factory=list)
    threshold_key: Optional[str] = Field(
        None, description="Threshold definition this rule is associated with"
    )

    model_config = {"extra": "forbid"}


# =============================================================================
# Thresholds
# =============================================================================

class ThresholdSchema(BaseModel):
    """
    Schema for a threshold definition.

    Global thresholds carry ``global_threshold``; per-country thresholds
    carry ``threshold_by_country`` and/or ``default_threshold``.
    """
    id: str = Field(..., description="Threshold identifier")
    label: str
    description: str
    scope: ThresholdScopeValue = Field(..., description="Aggregation dimension")
    event_types: list[EventTypeValue] = Field(..., min_length=1)
    always_emit: bool = Field(False, description="Emit a record even with no matching events")
    global_threshold: Optional[int] = Field(None, gt=0)
    threshold_by_country: dict[CountryCodeValue, int] = Field(default_factory=dict)
    default_threshold: Optional[int] = Field(None, gt=0)

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def validate_scope(self) -> "ThresholdSchema":
        """Validate limits against the declared scope."""
        if self.scope == "global":
            if self.global_threshold is None:
                raise ValueError(f"Global threshold '{self.id}' requires 'global_threshold'")
            if self.threshold_by_country:
                raise ValueError(
                    f"'threshold_by_country' requires country scope (threshold '{self.id}')"
                )
        else:
            if self.global_threshold is not None:
                raise ValueError(
                    f"Per-country threshold '{self.id}' cannot set 'global_threshold'"
                )
            if self.always_emit:
                raise ValueError(
                    f"'always_emit' is only supported for global thresholds ('{self.id}')"
                )
        for country, limit in self.threshold_by_country.items():
            if limit <= 0:
                raise ValueError(
                    f"Threshold '{self.id}' has non-positive limit for {country}: {limit}"
                )
        return self


# =============================================================================
# Workflow Templates
# =============================================================================

class WorkflowStepSchema(BaseModel):
    """Schema for one workflow template step."""
    step_id: str = Field(..., description="Step identifier; shared steps reuse the same id")
    title: str
    owner: str = Field(..., description="Owning team")
    days_required: int = Field(..., gt=0)
    dependencies: list[str] = Field(default_factory=list)
    systems_touched: list[str] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


class WorkflowTemplateSchema(BaseModel):
    """Schema for the ordered steps required by one event type."""
    event_type: EventTypeValue
    steps: list[WorkflowStepSchema] = Field(..., min_length=1)

    model_config = {"extra": "forbid"}


# =============================================================================
# Cost Multipliers
# =============================================================================

class QuantityScalingSchema(BaseModel):
    """Schema for batch-size cost scaling."""
    breakpoints: list[int] = Field(..., min_length=1)
    multipliers: list[float] = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_breakpoints(self) -> "QuantityScalingSchema":
        """Breakpoints and multipliers pair up; breakpoints ascend strictly."""
        if len(self.breakpoints) != len(self.multipliers):
            raise ValueError(
                "'breakpoints' and 'multipliers' must have the same length "
                f"({len(self.breakpoints)} != {len(self.multipliers)})"
            )
        for lower, upper in zip(self.breakpoints, self.breakpoints[1:]):
            if upper <= lower:
                raise ValueError(f"'breakpoints' must be strictly ascending: {self.breakpoints}")
        if any(m <= 0 for m in self.multipliers):
            raise ValueError("'multipliers' must be positive")
        return self


class CostMultipliersSchema(BaseModel):
    """Schema for modeled cost rates."""
    event_type_base: dict[EventTypeValue, dict[CountryCodeValue, float]] = Field(
        default_factory=dict,
        description="Base cost rate (fraction of salary) by event type and country",
    )
    worker_type_multiplier: dict[WorkerTypeValue, float] = Field(default_factory=dict)
    quantity_scaling: QuantityScalingSchema = Field(
        default_factory=lambda: QuantityScalingSchema(breakpoints=[1], multipliers=[1.0])
    )

    model_config = {"extra": "forbid"}


# =============================================================================
# Evidence
# =============================================================================

class EvidenceSchema(BaseModel):
    """Schema for an evidence library entry."""
    id: str = Field(..., description="Evidence identifier (e.g., 'EVD-001')")
    source: str
    text: str
    policy_id: Optional[str] = Field(None, description="Policy rule the evidence supports")

    model_config = {"extra": "forbid"}


# =============================================================================
# Reference Pack Schema
# =============================================================================

class ReferencePackSchema(BaseModel):
    """
    Top-level schema for a reference pack YAML/JSON file.

    A reference pack carries every static table the evaluation engine
    reads.
    """
    # Metadata
    schema_version: str = Field(SCHEMA_VERSION, description="Schema version for compatibility")
    id: str = Field(..., description="Unique identifier (e.g., 'WFP-DEMO-2025')")
    name: str = Field(..., description="Human-readable name")
    version: str = Field(..., description="Version string (e.g., '2025.1')")
    description: Optional[str] = None

    # Tables
    countries: list[CountrySchema] = Field(default_factory=list)
    policy_rules: list[PolicyRuleSchema] = Field(default_factory=list)
    thresholds: list[ThresholdSchema] = Field(default_factory=list)
    workflow_templates: list[WorkflowTemplateSchema] = Field(default_factory=list)
    cost_multipliers: CostMultipliersSchema = Field(default_factory=CostMultipliersSchema)
    evidence: list[EvidenceSchema] = Field(default_factory=list)

    model_config = {
        "extra": "forbid",  # Reject unknown fields
    }


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_reference_pack(data: dict[str, Any]) -> ReferencePackSchema:
    """
    Validate a reference pack dictionary against the schema.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return ReferencePackSchema.model_validate(data)


def check_schema_version(data: dict[str, Any]) -> bool:
    """Check that a pack's schema major version matches SCHEMA_VERSION."""
    pack_version = str(data.get("schema_version", SCHEMA_VERSION))
    pack_major = pack_version.split(".")[0]
    current_major = SCHEMA_VERSION.split(".")[0]
    return pack_major == current_major
