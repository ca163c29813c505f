"""
WorkforcePilot Reference Packs

Schema validation and loading for reference packs.

Reference packs are YAML or JSON files holding the static tables the
evaluation engine reads: country profiles, policy rules, thresholds,
workflow templates, cost multipliers and the evidence library.

Usage:
    from workforcepilot.packs import get_default_tables, load_reference_pack

    # The bundled demo pack (loaded once per process)
    tables = get_default_tables()

    # A custom pack
    tables = load_reference_pack("path/to/reference.yaml")
"""
from __future__ import annotations

from .loader import (
    DEFAULT_PACK_PATH,
    ReferencePackLoader,
    get_default_tables,
    load_reference_pack,
    load_reference_pack_from_string,
    validate_reference_integrity,
)
from .schema import (
    SCHEMA_VERSION,
    CostMultipliersSchema,
    CountrySchema,
    EvidenceSchema,
    PolicyRuleSchema,
    QuantityScalingSchema,
    ReferencePackSchema,
    ThresholdSchema,
    WorkflowStepSchema,
    WorkflowTemplateSchema,
    check_schema_version,
    validate_reference_pack,
)

__all__ = [
    # Version
    "SCHEMA_VERSION",
    # Loader
    "DEFAULT_PACK_PATH",
    "ReferencePackLoader",
    "get_default_tables",
    "load_reference_pack",
    "load_reference_pack_from_string",
    # Validation
    "validate_reference_pack",
    "validate_reference_integrity",
    "check_schema_version",
    # Schemas (for advanced usage)
    "ReferencePackSchema",
    "CountrySchema",
    "PolicyRuleSchema",
    "ThresholdSchema",
    "WorkflowTemplateSchema",
    "WorkflowStepSchema",
    "CostMultipliersSchema",
    "QuantityScalingSchema",
    "EvidenceSchema",
]
