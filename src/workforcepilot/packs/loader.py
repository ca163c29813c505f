"""
WorkforcePilot Reference Pack Loader

Loads and validates reference packs from YAML or JSON files.

Converts Pydantic schema models to the frozen WorkforcePilot reference
tables consumed by the evaluation engine.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import (
    ReferenceIntegrityError,
    ReferencePackLoadError,
    ReferencePackValidationError,
    SchemaVersionMismatch,
)
from ..models import (
    CostMultipliers,
    CountryCode,
    CountryProfile,
    EventType,
    EvidenceEntry,
    PolicyRule,
    QuantityScaling,
    ReferenceTables,
    RiskSeverity,
    ThresholdDefinition,
    ThresholdScope,
    WorkerType,
    WorkflowStepTemplate,
)
from .schema import (
    SCHEMA_VERSION,
    CostMultipliersSchema,
    CountrySchema,
    EvidenceSchema,
    PolicyRuleSchema,
    ReferencePackSchema,
    ThresholdSchema,
    WorkflowStepSchema,
    check_schema_version,
    validate_reference_pack,
)

logger = logging.getLogger(__name__)

DEFAULT_PACK_PATH = Path(__file__).parent / "data" / "workforce_reference.yaml"


# =============================================================================
# Reference Integrity Validation
# =============================================================================

def _duplicates(ids: list[str]) -> list[str]:
    seen: set[str] = set()
    dupes: list[str] = []
    for item in ids:
        if item in seen and item not in dupes:
            dupes.append(item)
        seen.add(item)
    return dupes


def validate_reference_integrity(schema: ReferencePackSchema, path: str = "") -> None:
    """
    Validate internal references are consistent.

    Catches:
    - Duplicate country codes, rule IDs, threshold IDs, evidence IDs
    - Duplicate workflow templates for one event type
    - Rules citing non-existent evidence
    - Rules naming a non-existent threshold_key
    - Evidence attributed to a non-existent policy rule
    - Workflow dependencies on steps outside their own template

    Raises:
        ValueError: If reference integrity errors are found
    """
    errors = []

    for label, ids in (
        ("country code", [c.code for c in schema.countries]),
        ("policy rule ID", [r.id for r in schema.policy_rules]),
        ("threshold ID", [t.id for t in schema.thresholds]),
        ("evidence ID", [e.id for e in schema.evidence]),
        ("workflow template", [t.event_type for t in schema.workflow_templates]),
    ):
        for dupe in _duplicates(ids):
            errors.append(f"Duplicate {label}: '{dupe}'")

    evidence_ids = {e.id for e in schema.evidence}
    threshold_ids = {t.id for t in schema.thresholds}
    rule_ids = {r.id for r in schema.policy_rules}

    for rule in schema.policy_rules:
        for evidence_id in rule.evidence_ids:
            if evidence_id not in evidence_ids:
                errors.append(
                    f"Policy rule '{rule.id}' references non-existent evidence '{evidence_id}'"
                )
        if rule.threshold_key and rule.threshold_key not in threshold_ids:
            errors.append(
                f"Policy rule '{rule.id}' references non-existent threshold '{rule.threshold_key}'"
            )

    for entry in schema.evidence:
        if entry.policy_id and entry.policy_id not in rule_ids:
            errors.append(
                f"Evidence '{entry.id}' references non-existent policy rule '{entry.policy_id}'"
            )

    for template in schema.workflow_templates:
        step_ids = [s.step_id for s in template.steps]
        for dupe in _duplicates(step_ids):
            errors.append(f"Duplicate step '{dupe}' in {template.event_type} template")
        for step in template.steps:
            for dep in step.dependencies:
                if dep not in step_ids:
                    errors.append(
                        f"Step '{step.step_id}' in {template.event_type} template "
                        f"depends on unknown step '{dep}'"
                    )

    if errors:
        path_str = f" in {path}" if path else ""
        raise ValueError(
            f"Reference integrity errors{path_str}:\n" +
            "\n".join(f"  - {e}" for e in errors)
        )


# =============================================================================
# Schema to Model Converters
# =============================================================================

def _convert_country(schema: CountrySchema) -> CountryProfile:
    """Convert CountrySchema to CountryProfile model."""
    return CountryProfile(
        code=schema.code,
        name=schema.name,
        pe_sensitivity=schema.pe_sensitivity,
        misclass_sensitivity=schema.misclass_sensitivity,
        benefits_tail_multiplier=schema.benefits_tail_multiplier,
        visa_required=schema.visa_required,
    )


def _convert_policy_rule(schema: PolicyRuleSchema) -> PolicyRule:
    """Convert PolicyRuleSchema to PolicyRule model."""
    return PolicyRule(
        id=schema.id,
        title=schema.title,
        family=schema.family,
        countries=tuple(CountryCode(c) for c in schema.countries),
        event_types=tuple(EventType(e) for e in schema.event_types),
        severity=RiskSeverity(schema.severity),
        confidence=schema.confidence,
        description=schema.description,
        evidence_ids=tuple(schema.evidence_ids),
        threshold_key=schema.threshold_key,
    )


def _convert_threshold(schema: ThresholdSchema) -> ThresholdDefinition:
    """Convert ThresholdSchema to ThresholdDefinition model."""
    return ThresholdDefinition(
        id=schema.id,
        label=schema.label,
        description=schema.description,
        scope=ThresholdScope(schema.scope),
        event_types=tuple(EventType(e) for e in schema.event_types),
        always_emit=schema.always_emit,
        global_threshold=schema.global_threshold,
        threshold_by_country=_frozen(
            {CountryCode(c): limit for c, limit in schema.threshold_by_country.items()}
        ),
        default_threshold=schema.default_threshold,
    )


def _convert_workflow_step(schema: WorkflowStepSchema) -> WorkflowStepTemplate:
    """Convert WorkflowStepSchema to WorkflowStepTemplate model."""
    return WorkflowStepTemplate(
        step_id=schema.step_id,
        title=schema.title,
        owner=schema.owner,
        days_required=schema.days_required,
        dependencies=tuple(schema.dependencies),
        systems_touched=tuple(schema.systems_touched),
    )


def _convert_cost_multipliers(schema: CostMultipliersSchema) -> CostMultipliers:
    """Convert CostMultipliersSchema to CostMultipliers model."""
    event_type_base = {
        EventType(event_type): _frozen({CountryCode(c): rate for c, rate in rates.items()})
        for event_type, rates in schema.event_type_base.items()
    }
    return CostMultipliers(
        event_type_base=_frozen(event_type_base),
        worker_type_multiplier=_frozen(
            {WorkerType(w): m for w, m in schema.worker_type_multiplier.items()}
        ),
        quantity_scaling=QuantityScaling(
            breakpoints=tuple(schema.quantity_scaling.breakpoints),
            multipliers=tuple(schema.quantity_scaling.multipliers),
        ),
    )


def _convert_evidence(schema: EvidenceSchema) -> EvidenceEntry:
    """Convert EvidenceSchema to EvidenceEntry model."""
    return EvidenceEntry(
        id=schema.id,
        source=schema.source,
        text=schema.text,
        policy_id=schema.policy_id,
    )


def _convert_reference_pack(schema: ReferencePackSchema) -> ReferenceTables:
    """Convert ReferencePackSchema to ReferenceTables model."""
    return ReferenceTables(
        pack_id=schema.id,
        pack_version=schema.version,
        name=schema.name,
        countries={CountryCode(c.code): _convert_country(c) for c in schema.countries},
        policy_rules={r.id: _convert_policy_rule(r) for r in schema.policy_rules},
        thresholds={t.id: _convert_threshold(t) for t in schema.thresholds},
        workflow_templates={
            EventType(t.event_type): tuple(_convert_workflow_step(s) for s in t.steps)
            for t in schema.workflow_templates
        },
        cost_multipliers=_convert_cost_multipliers(schema.cost_multipliers),
        evidence=tuple(_convert_evidence(e) for e in schema.evidence),
    )


def _frozen(data: dict) -> MappingProxyType:
    return MappingProxyType(data)


# =============================================================================
# Reference Pack Loader
# =============================================================================

class ReferencePackLoader:
    """
    Loads reference packs from YAML or JSON files.

    Usage:
        loader = ReferencePackLoader()
        tables = loader.load("path/to/reference.yaml")
    """

    def __init__(self, strict_version: bool = True):
        """
        Initialize the loader.

        Args:
            strict_version: If True, reject packs with incompatible schema
                versions; otherwise log a warning and continue
        """
        self.strict_version = strict_version
        self._packs: dict[str, ReferenceTables] = {}

    def load(self, path: Union[str, Path]) -> ReferenceTables:
        """
        Load a reference pack from a file.

        Raises:
            ReferencePackLoadError: If file cannot be read
            SchemaVersionMismatch: If schema version incompatible (strict mode)
            ReferencePackValidationError: If schema validation fails
            ReferenceIntegrityError: If internal references are inconsistent
        """
        path = Path(path)

        try:
            data = self._load_file(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ReferencePackLoadError(
                message=f"Failed to load reference pack: {e}",
                details={"path": str(path), "error": str(e)},
            ) from e

        tables = self.load_data(data, source=str(path))
        logger.info(
            "Loaded reference pack %s v%s from %s (%d rules, %d thresholds)",
            tables.pack_id,
            tables.pack_version,
            path,
            len(tables.policy_rules),
            len(tables.thresholds),
        )
        return tables

    def load_data(self, data: Any, source: str = "<data>") -> ReferenceTables:
        """Validate and convert an already-parsed pack dictionary."""
        if not isinstance(data, dict):
            raise ReferencePackLoadError(
                message="Reference pack must be a mapping at the top level",
                details={"path": source, "type": type(data).__name__},
            )

        if not check_schema_version(data):
            pack_version = data.get("schema_version", "unknown")
            if self.strict_version:
                raise SchemaVersionMismatch(
                    message=(
                        f"Schema version mismatch: pack has {pack_version}, "
                        f"expected {SCHEMA_VERSION}"
                    ),
                    details={
                        "pack_version": pack_version,
                        "expected_version": SCHEMA_VERSION,
                    },
                )
            logger.warning(
                "Reference pack %s has schema version %s (expected %s); loading anyway",
                source,
                pack_version,
                SCHEMA_VERSION,
            )

        try:
            schema = validate_reference_pack(data)
        except ValidationError as e:
            raise ReferencePackValidationError(
                message=f"Reference pack validation failed: {e.error_count()} errors",
                details={
                    "errors": e.errors(include_url=False, include_context=False),
                    "path": source,
                },
            ) from e

        try:
            validate_reference_integrity(schema, source)
        except ValueError as e:
            raise ReferenceIntegrityError(
                message="Reference integrity validation failed",
                details={"errors": str(e), "path": source},
            ) from e

        tables = _convert_reference_pack(schema)
        self._packs[tables.pack_id] = tables
        return tables

    def _load_file(self, path: Path) -> Any:
        """Load data from YAML or JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in {".yaml", ".yml"}:
                return yaml.safe_load(f)
            elif path.suffix.lower() == ".json":
                return json.load(f)
            else:
                # Try YAML first, then JSON
                content = f.read()
                try:
                    return yaml.safe_load(content)
                except yaml.YAMLError:
                    return json.loads(content)

    def get_pack(self, pack_id: str) -> Optional[ReferenceTables]:
        """Get a previously loaded pack by ID."""
        return self._packs.get(pack_id)

    def list_packs(self) -> list[str]:
        """List IDs of all loaded packs."""
        return list(self._packs.keys())


# =============================================================================
# Convenience Functions
# =============================================================================

def load_reference_pack(
    path: Union[str, Path],
    strict_version: bool = True,
) -> ReferenceTables:
    """Load a reference pack from a file with a temporary loader."""
    return ReferencePackLoader(strict_version=strict_version).load(path)


def load_reference_pack_from_string(
    content: str,
    format: str = "yaml",
    strict_version: bool = True,
) -> ReferenceTables:
    """
    Load a reference pack from a string.

    Args:
        content: YAML or JSON string
        format: "yaml" or "json"
    """
    try:
        if format.lower() == "json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (ValueError, yaml.YAMLError) as e:
        raise ReferencePackLoadError(
            message=f"Failed to parse reference pack: {e}",
            details={"format": format, "error": str(e)},
        ) from e
    return ReferencePackLoader(strict_version=strict_version).load_data(data, source="<string>")


_default_tables: Optional[ReferenceTables] = None


def get_default_tables() -> ReferenceTables:
    """Get or load the bundled reference pack (once per process)."""
    global _default_tables
    if _default_tables is None:
        _default_tables = load_reference_pack(DEFAULT_PACK_PATH)
    return _default_tables
