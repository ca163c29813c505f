"""
WorkforcePilot Models

All domain models for the WorkforcePilot scenario evaluation engine.

Exports all models organized by category for convenient imports:

    from workforcepilot.models import (
        # Enums
        CountryCode, EventType, Quarter, RiskSeverity,
        # Scenario
        ScenarioEvent,
        # Reference tables
        ReferenceTables, PolicyRule, ThresholdDefinition,
        # Evaluation
        ScenarioEvaluation, PolicyTrigger, ThresholdBreach,
        OFSComponentScores, OFSWeights,
    )
"""
from __future__ import annotations

# =============================================================================
# Enums
# =============================================================================
from .enums import (
    CountryCode,
    DominantDriver,
    EventType,
    JobFunction,
    PCRLevel,
    Quarter,
    RiskSeverity,
    ThresholdScope,
    WorkerType,
)

# =============================================================================
# Scenario
# =============================================================================
from .event import ScenarioEvent, total_quantity

# =============================================================================
# Reference Tables
# =============================================================================
from .reference import (
    DEFAULT_COST_BASE_RATE,
    DEFAULT_COUNTRY_PROFILE,
    DEFAULT_COUNTRY_THRESHOLD,
    DEFAULT_WORKER_TYPE_MULTIPLIER,
    CostMultipliers,
    CountryProfile,
    EvidenceEntry,
    PolicyRule,
    QuantityScaling,
    ReferenceTables,
    ThresholdDefinition,
    WorkflowStepTemplate,
)

# =============================================================================
# Evaluation
# =============================================================================
from .evaluation import (
    DEFAULT_WEIGHTS,
    MAX_WEIGHT,
    MIN_WEIGHT,
    HeatmapCell,
    OFSComponentScores,
    OFSWeights,
    PolicyTrigger,
    ScenarioEvaluation,
    SignalSummary,
    ThresholdBreach,
    WorkflowStep,
)

# =============================================================================
# Brief
# =============================================================================
from .brief import ExecBrief, TopRisk

__all__ = [
    # Enums
    "CountryCode",
    "DominantDriver",
    "EventType",
    "JobFunction",
    "PCRLevel",
    "Quarter",
    "RiskSeverity",
    "ThresholdScope",
    "WorkerType",
    # Scenario
    "ScenarioEvent",
    "total_quantity",
    # Reference tables
    "DEFAULT_COST_BASE_RATE",
    "DEFAULT_COUNTRY_PROFILE",
    "DEFAULT_COUNTRY_THRESHOLD",
    "DEFAULT_WORKER_TYPE_MULTIPLIER",
    "CostMultipliers",
    "CountryProfile",
    "EvidenceEntry",
    "PolicyRule",
    "QuantityScaling",
    "ReferenceTables",
    "ThresholdDefinition",
    "WorkflowStepTemplate",
    # Evaluation
    "DEFAULT_WEIGHTS",
    "MAX_WEIGHT",
    "MIN_WEIGHT",
    "HeatmapCell",
    "OFSComponentScores",
    "OFSWeights",
    "PolicyTrigger",
    "ScenarioEvaluation",
    "SignalSummary",
    "ThresholdBreach",
    "WorkflowStep",
    # Brief
    "ExecBrief",
    "TopRisk",
]
