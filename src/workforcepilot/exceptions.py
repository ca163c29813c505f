"""
WorkforcePilot Exception Hierarchy

Domain-specific exceptions for workforce scenario evaluation.
All exceptions include error codes for tracking and logging.

The evaluation engine itself does not raise on well-typed input; these
exceptions come from the edges (reference pack loading, weight handling,
request parsing).

Exception codes follow the pattern: WP_<CATEGORY>_<SPECIFIC>
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class WorkforcePilotError(Exception):
    """
    Base exception for all WorkforcePilot errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (WP_*)
        details: Additional context about the error
        scenario_id: Associated scenario/evaluation ID if applicable
    """
    message: str
    code: str = "WP_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    scenario_id: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.scenario_id:
            parts.append(f"(scenario: {self.scenario_id})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/API responses."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.scenario_id:
            result["scenario_id"] = self.scenario_id
        return result


# =============================================================================
# Reference Pack Errors
# =============================================================================

@dataclass
class ReferencePackLoadError(WorkforcePilotError):
    """Failed to read or parse a reference pack file."""
    code: str = "WP_PACK_LOAD_ERROR"


@dataclass
class ReferencePackValidationError(WorkforcePilotError):
    """Reference pack schema validation failed."""
    code: str = "WP_PACK_VALIDATION_ERROR"


@dataclass
class SchemaVersionMismatch(WorkforcePilotError):
    """Reference pack schema version is not supported."""
    code: str = "WP_SCHEMA_VERSION_MISMATCH"


@dataclass
class ReferenceIntegrityError(WorkforcePilotError):
    """Reference pack contains dangling or duplicate identifiers."""
    code: str = "WP_PACK_INTEGRITY_ERROR"


# =============================================================================
# Scenario / Weight Errors
# =============================================================================

@dataclass
class InvalidScenarioError(WorkforcePilotError):
    """Scenario input could not be parsed into events."""
    code: str = "WP_INVALID_SCENARIO"


@dataclass
class InvalidWeightsError(WorkforcePilotError):
    """OFS weights are out of range, do not sum to 1.0, or name an unknown key."""
    code: str = "WP_INVALID_WEIGHTS"

