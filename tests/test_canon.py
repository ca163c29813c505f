"""
Tests for canonical JSON serialization and fingerprints.
"""
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from types import MappingProxyType

import pytest

from workforcepilot.canon import (
    canonical_json,
    canonical_json_bytes,
    compute_evaluation_fingerprint,
    compute_scenario_hash,
    content_hash,
    content_hash_short,
)
from workforcepilot.models import CountryCode, Quarter
from tests.conftest import make_event


class TestCanonicalJson:

    def test_sorted_keys_no_whitespace(self):
        assert canonical_json({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'

    def test_key_order_irrelevant(self):
        assert canonical_json({"x": 1, "y": 2}) == canonical_json({"y": 2, "x": 1})

    def test_enum_as_value(self):
        assert canonical_json({"country": CountryCode.DE}) == '{"country":"DE"}'

    def test_enum_mapping_keys(self):
        data = MappingProxyType({Quarter.Q2: 1})
        assert canonical_json(data) == '{"Q2":1}'

    def test_datetime_utc(self):
        value = datetime(2025, 3, 1, 12, 30, 0, tzinfo=timezone.utc)
        assert canonical_json(value) == '"2025-03-01T12:30:00.000Z"'

    def test_aware_datetime_converted_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        value = datetime(2025, 3, 1, 14, 30, 0, tzinfo=plus_two)
        assert canonical_json(value) == '"2025-03-01T12:30:00.000Z"'

    def test_date_and_decimal(self):
        assert canonical_json([date(2025, 1, 2), Decimal("1.10")]) == '["2025-01-02","1.10"]'

    def test_set_sorted(self):
        assert canonical_json({"s": {"b", "a"}}) == '{"s":["a","b"]}'

    def test_dataclass(self):
        data = canonical_json(make_event(id="x"))
        assert data.startswith('{"avg_annual_salary_usd":100000')
        assert '"country":"ES"' in data

    def test_non_ascii_kept(self):
        assert canonical_json("—") == '"—"'
        assert canonical_json_bytes("—") == '"—"'.encode("utf-8")

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            canonical_json(object())


class TestHashes:

    def test_content_hash(self):
        digest = content_hash({"a": 1})
        assert len(digest) == 64
        assert digest == content_hash({"a": 1})
        assert content_hash_short({"a": 1}) == digest[:12]

    def test_scenario_hash_is_order_sensitive(self):
        a = make_event(id="a")
        b = make_event(id="b", quantity=2)
        assert compute_scenario_hash([a, b]) != compute_scenario_hash([b, a])
        assert compute_scenario_hash([a, b]) == compute_scenario_hash([a, b])

    def test_fingerprint_ignores_id_and_timestamp(self, evaluator, conversion_wave):
        evaluation = evaluator.evaluate(conversion_wave)
        moved = replace(
            evaluation,
            id="other",
            created_at=datetime(2000, 1, 1, tzinfo=timezone.utc),
        )
        assert compute_evaluation_fingerprint(moved) == compute_evaluation_fingerprint(evaluation)

    def test_fingerprint_sees_content(self, evaluator, conversion_wave):
        evaluation = evaluator.evaluate(conversion_wave)
        changed = replace(evaluation, summary="different")
        assert compute_evaluation_fingerprint(changed) != compute_evaluation_fingerprint(evaluation)
