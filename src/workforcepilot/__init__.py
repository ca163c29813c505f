"""
WorkforcePilot - Deterministic Workforce Scenario Evaluation

WorkforcePilot evaluates a proposed set of workforce actions (contractor
conversions, terminations, cross-border relocations, EOR onboarding)
against a static library of illustrative jurisdictional policies. It
produces MODELED signals, not legal determinations.

Core Principle: "Same events, same weights, same tables -> same evaluation."

Key Features:
- Policy trigger matching with evidence citations
- Global and per-country threshold checks
- Workflow step derivation per event type
- Weighted Operational Friction Score (OFS) with live re-weighting
- Recommended re-sequencing and a fast preview of its effect
- Deterministic executive brief

Quick Start:
    from workforcepilot import evaluate, get_preset, build_fallback_brief

    events = get_preset(1)
    evaluation = evaluate(events)
    print(evaluation.signals.ofs, evaluation.summary)

    brief = build_fallback_brief(evaluation)

Version: 0.1.0
"""
from __future__ import annotations

__version__ = "0.1.0"
__author__ = "WorkforcePilot Team"

# =============================================================================
# Core Models (Re-exported for convenience)
# =============================================================================
from .models import (
    # Enums
    CountryCode,
    DominantDriver,
    EventType,
    JobFunction,
    PCRLevel,
    Quarter,
    RiskSeverity,
    WorkerType,
    # Scenario
    ScenarioEvent,
    # Evaluation
    DEFAULT_WEIGHTS,
    HeatmapCell,
    OFSComponentScores,
    OFSWeights,
    PolicyTrigger,
    ScenarioEvaluation,
    SignalSummary,
    ThresholdBreach,
    WorkflowStep,
    # Reference tables
    EvidenceEntry,
    ReferenceTables,
    # Brief
    ExecBrief,
)

# =============================================================================
# Engine
# =============================================================================
from .engine import (
    ScenarioComparison,
    ScenarioEvaluator,
    apply_recommended_sequencing,
    apply_sequencing_to_evaluation,
    compare_scenarios,
    evaluate,
    normalize_weights,
    recompute_composite,
)
from .narration import build_fallback_brief
from .packs import get_default_tables, load_reference_pack
from .presets import get_preset

# =============================================================================
# Exceptions
# =============================================================================
from .exceptions import (
    InvalidScenarioError,
    InvalidWeightsError,
    ReferenceIntegrityError,
    ReferencePackLoadError,
    ReferencePackValidationError,
    SchemaVersionMismatch,
    WorkforcePilotError,
)

__all__ = [
    "__version__",
    # Enums
    "CountryCode",
    "DominantDriver",
    "EventType",
    "JobFunction",
    "PCRLevel",
    "Quarter",
    "RiskSeverity",
    "WorkerType",
    # Models
    "ScenarioEvent",
    "DEFAULT_WEIGHTS",
    "HeatmapCell",
    "OFSComponentScores",
    "OFSWeights",
    "PolicyTrigger",
    "ScenarioEvaluation",
    "SignalSummary",
    "ThresholdBreach",
    "WorkflowStep",
    "EvidenceEntry",
    "ReferenceTables",
    "ExecBrief",
    # Engine
    "ScenarioEvaluator",
    "ScenarioComparison",
    "evaluate",
    "compare_scenarios",
    "recompute_composite",
    "normalize_weights",
    "apply_recommended_sequencing",
    "apply_sequencing_to_evaluation",
    "build_fallback_brief",
    "get_default_tables",
    "load_reference_pack",
    "get_preset",
    # Exceptions
    "WorkforcePilotError",
    "ReferencePackLoadError",
    "ReferencePackValidationError",
    "SchemaVersionMismatch",
    "ReferenceIntegrityError",
    "InvalidScenarioError",
    "InvalidWeightsError",
]
