"""
Deterministic JSON and content hashes.

Evaluations are fingerprinted from their canonical JSON form: keys sorted,
compact separators, UTF-8 text kept as-is. Two runs over the same events,
weights and tables must produce byte-identical output here, which is what
the determinism tests and the API ``fingerprint`` field rely on.

Reference packs are hashed the same way so an evaluation can be tied to
the exact tables it was computed from.
"""
from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable


def _default_serializer(obj: Any) -> Any:
    """
    Fallback encoder for values json does not know.

    Datetimes become millisecond ISO strings (aware ones in UTC with ``Z``),
    Decimals become strings, enums their value, dataclasses and read-only
    mappings plain dicts, sets a sorted list.
    """
    if isinstance(obj, datetime):
        if obj.tzinfo is not None:
            utc = obj.astimezone(timezone.utc)
            return utc.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
        return obj.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3]
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, Mapping):
        return {_key(k): v for k, v in obj.items()}
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def _key(key: Any) -> str:
    return key.value if isinstance(key, Enum) else str(key)


def canonical_json(obj: Any) -> str:
    """
    Render a value as canonical JSON text.

        >>> canonical_json({"quantity": 6, "country": "ES"})
        '{"country":"ES","quantity":6}'
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        default=_default_serializer,
        ensure_ascii=False,
    )


def canonical_json_bytes(obj: Any) -> bytes:
    return canonical_json(obj).encode("utf-8")


def content_hash(obj: Any) -> str:
    """Hex SHA-256 of the canonical JSON bytes."""
    return hashlib.sha256(canonical_json_bytes(obj)).hexdigest()


def content_hash_short(obj: Any, length: int = 12) -> str:
    """Prefix of content_hash, for logs and CLI output."""
    return content_hash(obj)[:length]


# =============================================================================
# Domain fingerprints
# =============================================================================

# Evaluation fields that differ between otherwise identical runs
_VOLATILE_EVALUATION_FIELDS = ("id", "created_at")


def compute_evaluation_fingerprint(evaluation: Any) -> str:
    """
    Hash the deterministic content of a ScenarioEvaluation.

    ``id`` and ``created_at`` are excluded, so two evaluations of the same
    events under the same weights and tables share a fingerprint.
    """
    payload = evaluation.to_dict()
    for name in _VOLATILE_EVALUATION_FIELDS:
        payload.pop(name, None)
    return content_hash(payload)


def compute_scenario_hash(events: Iterable[Any]) -> str:
    """Hash an ordered event list (order is significant)."""
    return content_hash([e.to_dict() for e in events])


def compute_reference_pack_hash(tables: Any) -> str:
    """
    Hash a ReferenceTables value.

    Covers every table the engine reads. Rule and evidence catalogs keep
    their order (it drives trigger discovery and evidence listing), so
    reordering a catalog changes the hash; countries and thresholds are
    keyed and serialize with sorted keys.
    """
    payload = {
        "pack_id": tables.pack_id,
        "pack_version": tables.pack_version,
        "countries": {_key(k): asdict(v) for k, v in tables.countries.items()},
        "policy_rules": [asdict(r) for r in tables.policy_rules.values()],
        "thresholds": {k: _serialize_threshold(v) for k, v in tables.thresholds.items()},
        "workflow_templates": {
            _key(k): [asdict(s) for s in steps]
            for k, steps in tables.workflow_templates.items()
        },
        "cost_multipliers": _serialize_cost_multipliers(tables.cost_multipliers),
        "evidence": [asdict(e) for e in tables.evidence],
    }
    return content_hash(payload)


def _serialize_threshold(definition: Any) -> dict:
    """Serialize a ThresholdDefinition for hashing."""
    return {
        "id": definition.id,
        "label": definition.label,
        "description": definition.description,
        "scope": definition.scope.value,
        "event_types": [e.value for e in definition.event_types],
        "always_emit": definition.always_emit,
        "global_threshold": definition.global_threshold,
        "threshold_by_country": {
            _key(k): v for k, v in definition.threshold_by_country.items()
        },
        "default_threshold": definition.default_threshold,
    }


def _serialize_cost_multipliers(costs: Any) -> dict:
    """Serialize CostMultipliers for hashing."""
    return {
        "event_type_base": {
            _key(event_type): {_key(c): rate for c, rate in rates.items()}
            for event_type, rates in costs.event_type_base.items()
        },
        "worker_type_multiplier": {
            _key(k): v for k, v in costs.worker_type_multiplier.items()
        },
        "quantity_scaling": {
            "breakpoints": list(costs.quantity_scaling.breakpoints),
            "multipliers": list(costs.quantity_scaling.multipliers),
        },
    }
