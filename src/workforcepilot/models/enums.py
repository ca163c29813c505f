"""
WorkforcePilot Enumerations

All enumeration types used throughout the WorkforcePilot system.
Organized by domain area for clarity.

All enums inherit from (str, Enum) for JSON serialization compatibility.
"""
from __future__ import annotations

from enum import Enum


# =============================================================================
# Jurisdictions
# =============================================================================

class CountryCode(str, Enum):
    """Jurisdictions covered by the reference pack."""
    ES = "ES"
    DE = "DE"
    GB = "GB"
    US = "US"


# =============================================================================
# Worker and Event Types
# =============================================================================

class WorkerType(str, Enum):
    """Engagement model of the workers in an event batch."""
    CONTRACTOR = "contractor"
    EOR_EMPLOYEE = "eor_employee"          # Employed through an employer of record
    DIRECT_EMPLOYEE = "direct_employee"


class EventType(str, Enum):
    """Workforce action applied to an event batch."""
    CONTRACTOR_CONVERSION = "contractor_conversion"
    TERMINATION = "termination"
    RELOCATION = "relocation"
    EOR_ONBOARDING = "eor_onboarding"

    @property
    def label(self) -> str:
        """Lower-case display label used in scenario summaries."""
        return _EVENT_TYPE_LABELS[self]


_EVENT_TYPE_LABELS = {
    EventType.CONTRACTOR_CONVERSION: "contractor conversion",
    EventType.TERMINATION: "termination",
    EventType.RELOCATION: "relocation",
    EventType.EOR_ONBOARDING: "EOR onboarding",
}


class JobFunction(str, Enum):
    """Business function of the workers in an event batch."""
    ENGINEERING = "Engineering"
    SALES = "Sales"
    OPERATIONS = "Operations"
    FINANCE = "Finance"
    HR = "HR"
    MARKETING = "Marketing"


# =============================================================================
# Timing
# =============================================================================

class Quarter(str, Enum):
    """Calendar quarter in which an event is scheduled."""
    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"

    @property
    def position(self) -> int:
        """Zero-based position within the year (Q1 -> 0)."""
        return _QUARTER_ORDER.index(self)

    @property
    def is_last(self) -> bool:
        return self is Quarter.Q4

    def next(self) -> "Quarter":
        """Following quarter; Q4 stays Q4 (no year rollover)."""
        if self.is_last:
            return self
        return _QUARTER_ORDER[self.position + 1]


_QUARTER_ORDER = (Quarter.Q1, Quarter.Q2, Quarter.Q3, Quarter.Q4)


# =============================================================================
# Severity
# =============================================================================

class RiskSeverity(str, Enum):
    """
    Ordered severity of a policy trigger.

    Order is explicit through ``rank`` (0 = most severe) rather than
    string comparison, so sorting triggers by severity is stable and
    independent of the enum values.
    """
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        """Sort rank, most severe first (CRITICAL=0 ... LOW=3)."""
        return _SEVERITY_RANK[self]

    @property
    def heat_score(self) -> int:
        """Heatmap base score for this severity."""
        return _SEVERITY_HEAT_SCORE[self]

    @property
    def label(self) -> str:
        """Title-case display label (e.g. "Critical")."""
        return self.value.title()

    @property
    def is_high_or_critical(self) -> bool:
        return self in (RiskSeverity.HIGH, RiskSeverity.CRITICAL)


_SEVERITY_RANK = {
    RiskSeverity.CRITICAL: 0,
    RiskSeverity.HIGH: 1,
    RiskSeverity.MEDIUM: 2,
    RiskSeverity.LOW: 3,
}

_SEVERITY_HEAT_SCORE = {
    RiskSeverity.LOW: 20,
    RiskSeverity.MEDIUM: 45,
    RiskSeverity.HIGH: 70,
    RiskSeverity.CRITICAL: 95,
}


# =============================================================================
# Derived Signals
# =============================================================================

class PCRLevel(str, Enum):
    """Payroll Cycle Risk: clustering of payroll-relevant events."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class DominantDriver(str, Enum):
    """OFS component with the largest weighted contribution."""
    EXPOSURE = "Exposure"
    GOVERNANCE = "Governance"
    EXECUTION = "Execution"
    CONFIDENCE = "Confidence"


class ThresholdScope(str, Enum):
    """Aggregation dimension of a threshold definition."""
    GLOBAL = "global"
    COUNTRY = "country"
