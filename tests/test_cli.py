"""
Tests for the command-line interface.
"""
import json

import pytest
import yaml

from workforcepilot.cli import (
    ExitCode,
    build_parser,
    load_scenario_file,
    main,
    parse_events,
    parse_weights,
)
from workforcepilot.exceptions import InvalidScenarioError, InvalidWeightsError
from workforcepilot.models import DEFAULT_WEIGHTS, Quarter
from workforcepilot.packs import DEFAULT_PACK_PATH
from tests.conftest import make_event


def _event_dict(**overrides):
    data = make_event(quantity=6, timing_quarter=Quarter.Q3).to_dict()
    data.update(overrides)
    return data


@pytest.fixture
def scenario_file(tmp_path):
    path = tmp_path / "scenario.json"
    path.write_text(json.dumps({"events": [_event_dict()]}))
    return path


# =============================================================================
# Input Parsing
# =============================================================================

class TestParseWeights:

    def test_full_set(self):
        weights = parse_weights("exposure=0.5,governance=0.2,speed=0.2,confidence=0.1")
        assert weights.exposure == 0.5
        assert weights.governance == 0.2

    def test_missing_keys_keep_defaults(self):
        weights = parse_weights("exposure=0.3,governance=0.4")
        assert weights.speed == DEFAULT_WEIGHTS.speed
        assert weights.confidence == DEFAULT_WEIGHTS.confidence

    @pytest.mark.parametrize("text", [
        "exposure",
        "exposure=high",
        "risk=0.4",
        "exposure=0.9,governance=0.04,speed=0.03,confidence=0.03",
        "exposure=0.5",
    ])
    def test_invalid(self, text):
        with pytest.raises(InvalidWeightsError):
            parse_weights(text)

    def test_non_numeric_error_is_chained(self):
        with pytest.raises(InvalidWeightsError) as exc_info:
            parse_weights("exposure=high")
        assert isinstance(exc_info.value.__cause__, ValueError)


class TestParseEvents:

    def test_valid(self):
        [event] = parse_events([_event_dict()])
        assert event.quantity == 6
        assert event.timing_quarter == Quarter.Q3

    @pytest.mark.parametrize("raw", [
        {"id": "not-a-list"},
        ["not-a-mapping"],
        [{"id": "missing-fields"}],
        [_event_dict(country="FR")],
        [_event_dict(quantity=0)],
        [_event_dict(avg_annual_salary_usd=-1)],
        [_event_dict(job_function="engineering")],
    ])
    def test_invalid(self, raw):
        with pytest.raises(InvalidScenarioError):
            parse_events(raw)

    def test_conversion_error_is_chained(self):
        with pytest.raises(InvalidScenarioError) as exc_info:
            parse_events([_event_dict(country="FR")])
        assert isinstance(exc_info.value.__cause__, ValueError)


class TestLoadScenarioFile:

    def test_json_mapping(self, scenario_file):
        events, weights = load_scenario_file(scenario_file)
        assert len(events) == 1
        assert weights is None

    def test_yaml_list(self, tmp_path):
        path = tmp_path / "scenario.yaml"
        path.write_text(yaml.safe_dump([_event_dict(id="a"), _event_dict(id="b")]))
        events, _ = load_scenario_file(path)
        assert [e.id for e in events] == ["a", "b"]

    def test_embedded_weights(self, tmp_path):
        path = tmp_path / "scenario.json"
        path.write_text(json.dumps({
            "events": [_event_dict()],
            "weights": {"exposure": 0.25, "governance": 0.25, "speed": 0.25,
                        "confidence": 0.25},
        }))
        _, weights = load_scenario_file(path)
        assert weights.exposure == 0.25

    @pytest.mark.parametrize("weights", [{"exposure": "high"}, [0.4, 0.3, 0.2, 0.1], 5])
    def test_malformed_embedded_weights(self, tmp_path, weights):
        path = tmp_path / "scenario.json"
        path.write_text(json.dumps({"events": [_event_dict()], "weights": weights}))
        with pytest.raises(InvalidWeightsError):
            load_scenario_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidScenarioError) as exc_info:
            load_scenario_file(tmp_path / "missing.json")
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{")
        with pytest.raises(InvalidScenarioError):
            load_scenario_file(path)


# =============================================================================
# Commands
# =============================================================================

class TestEvaluateCommand:

    def test_preset_json(self, capsys):
        assert main(["evaluate", "--preset", "1", "--json"]) == ExitCode.OK

        payload = json.loads(capsys.readouterr().out)
        assert payload["signals"]["ofs"] == 60
        assert len(payload["fingerprint"]) == 64

    def test_json_fingerprint_is_stable(self, capsys):
        main(["evaluate", "--preset", "3", "--json"])
        first = json.loads(capsys.readouterr().out)
        main(["evaluate", "--preset", "3", "--json"])
        second = json.loads(capsys.readouterr().out)
        assert first["fingerprint"] == second["fingerprint"]

    def test_weights_override(self, capsys):
        code = main([
            "evaluate", "--preset", "1", "--json",
            "--weights", "exposure=0.1,governance=0.7,speed=0.1,confidence=0.1",
        ])
        assert code == ExitCode.OK
        assert json.loads(capsys.readouterr().out)["signals"]["ofs"] == 37

    def test_sequence_projection(self, capsys):
        assert main(["evaluate", "--preset", "1", "--sequence", "--json"]) == ExitCode.OK
        assert json.loads(capsys.readouterr().out)["signals"]["ofs"] == 47

    def test_human_output(self, scenario_file, capsys):
        assert main(["evaluate", "--scenario", str(scenario_file)]) == ExitCode.OK

        out = capsys.readouterr().out
        assert "Scenario Evaluation" in out
        assert "POL-PE-001" in out
        assert "Fingerprint" in out

    def test_invalid_weights(self, capsys):
        code = main(["evaluate", "--preset", "1", "--weights", "exposure=2"])
        assert code == ExitCode.INPUT_INVALID
        assert "WP_INVALID_WEIGHTS" in capsys.readouterr().err

    def test_invalid_scenario_file(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([_event_dict(quantity=0)]))
        assert main(["evaluate", "--scenario", str(path)]) == ExitCode.INPUT_INVALID

    @pytest.mark.parametrize("weights", [{"exposure": "high"}, ["exposure"]])
    def test_invalid_weights_in_scenario_file(self, tmp_path, capsys, weights):
        path = tmp_path / "scenario.json"
        path.write_text(json.dumps({"events": [_event_dict()], "weights": weights}))

        assert main(["evaluate", "--scenario", str(path)]) == ExitCode.INPUT_INVALID
        assert "WP_INVALID_WEIGHTS" in capsys.readouterr().err

    def test_bad_pack(self, tmp_path, capsys):
        pack = tmp_path / "pack.yaml"
        pack.write_text("id: only-an-id\n")
        code = main(["evaluate", "--preset", "1", "--pack", str(pack)])
        assert code == ExitCode.PACK_ERROR


class TestBriefCommand:

    def test_json(self, capsys):
        assert main(["brief", "--preset", "1", "--json"]) == ExitCode.OK

        brief = json.loads(capsys.readouterr().out)
        assert brief["of_score"] == 60
        assert brief["dominant_driver"] == "Exposure"

    def test_human_output(self, capsys):
        assert main(["brief", "--preset", "3"]) == ExitCode.OK
        out = capsys.readouterr().out
        assert "Executive Brief" in out
        assert "EVD-005" in out


class TestPackCommands:

    def test_validate_bundled_pack(self, capsys):
        assert main(["validate-pack", "--pack", str(DEFAULT_PACK_PATH)]) == ExitCode.OK
        assert "Pack is valid" in capsys.readouterr().out

    def test_validate_missing_file(self, tmp_path):
        code = main(["validate-pack", "--pack", str(tmp_path / "missing.yaml")])
        assert code == ExitCode.INPUT_INVALID

    def test_validate_schema_errors(self, tmp_path, capsys):
        data = yaml.safe_load(DEFAULT_PACK_PATH.read_text())
        data["countries"][0]["pe_sensitivity"] = 3
        pack = tmp_path / "pack.yaml"
        pack.write_text(yaml.safe_dump(data))

        assert main(["validate-pack", "--pack", str(pack)]) == ExitCode.PACK_ERROR
        assert "countries.0.pe_sensitivity" in capsys.readouterr().out

    def test_validate_integrity_errors(self, tmp_path, capsys):
        data = yaml.safe_load(DEFAULT_PACK_PATH.read_text())
        data["policy_rules"][0]["evidence_ids"] = ["EVD-404"]
        pack = tmp_path / "pack.yaml"
        pack.write_text(yaml.safe_dump(data))

        assert main(["validate-pack", "--pack", str(pack)]) == ExitCode.PACK_ERROR
        assert "EVD-404" in capsys.readouterr().err

    def test_lenient_schema_version(self, tmp_path):
        data = yaml.safe_load(DEFAULT_PACK_PATH.read_text())
        data["schema_version"] = "9.0.0"
        pack = tmp_path / "pack.yaml"
        pack.write_text(yaml.safe_dump(data))

        assert main(["validate-pack", "--pack", str(pack)]) == ExitCode.PACK_ERROR
        assert main(["validate-pack", "--pack", str(pack), "--lenient"]) == ExitCode.OK

    def test_pack_info(self, capsys):
        assert main(["pack-info"]) == ExitCode.OK
        out = capsys.readouterr().out
        assert "WFP-DEMO-2025" in out
        assert "POL-ENT-001" in out


class TestParser:

    def test_no_command(self, capsys):
        assert main([]) == ExitCode.INPUT_INVALID

    def test_scenario_source_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["evaluate"])

    def test_sources_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["evaluate", "--preset", "1", "--scenario", "x.json"])

    def test_unknown_preset_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["evaluate", "--preset", "7"])
