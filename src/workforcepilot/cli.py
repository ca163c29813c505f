#!/usr/bin/env python3
"""
WorkforcePilot CLI - Scenario Runner

Command-line interface for evaluating workforce scenarios against the
reference pack. Output is deterministic apart from the evaluation id.

Usage:
    workforcepilot evaluate --scenario scenario.json
    workforcepilot evaluate --scenario scenario.yaml --weights exposure=0.5,governance=0.2,speed=0.2,confidence=0.1
    workforcepilot evaluate --scenario scenario.json --sequence
    workforcepilot evaluate --preset 1 --json
    workforcepilot brief --scenario scenario.json
    workforcepilot validate-pack --pack my_pack.yaml
    workforcepilot pack-info

Scenario files (JSON or YAML) hold either a list of events or a mapping
with ``events`` and optional ``weights``:

    {"events": [{"id": "e1", "country": "ES", "worker_type": "contractor",
                 "event_type": "contractor_conversion", "job_function": "Engineering",
                 "quantity": 6, "timing_quarter": "Q3", "avg_annual_salary_usd": 75000}],
     "weights": {"exposure": 0.4, "governance": 0.3, "speed": 0.2, "confidence": 0.1}}

Exit Codes:
    0   OK              - Command completed
    10  INPUT_INVALID   - Invalid scenario or weights
    11  PACK_ERROR      - Pack validation/loading failed
    20  INTERNAL_ERROR  - Unexpected internal error
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import yaml

from . import __version__
from .canon import compute_evaluation_fingerprint, compute_reference_pack_hash
from .engine import (
    ScenarioEvaluator,
    apply_sequencing_to_evaluation,
)
from .engine.workflow_orchestrator import total_days
from .exceptions import (
    InvalidScenarioError,
    InvalidWeightsError,
    ReferenceIntegrityError,
    ReferencePackLoadError,
    ReferencePackValidationError,
    SchemaVersionMismatch,
    WorkforcePilotError,
)
from .models import (
    DEFAULT_WEIGHTS,
    OFSWeights,
    ReferenceTables,
    ScenarioEvaluation,
    ScenarioEvent,
)
from .narration import build_fallback_brief
from .packs import DEFAULT_PACK_PATH, ReferencePackLoader
from .presets import get_preset


# ============================================================================
# EXIT CODES
# ============================================================================

class ExitCode:
    """Deterministic exit codes for pipeline integration."""
    OK = 0                # Command completed
    INPUT_INVALID = 10    # Invalid scenario or weights
    PACK_ERROR = 11       # Pack validation/loading failed
    INTERNAL_ERROR = 20   # Unexpected error


_PACK_ERRORS = (
    ReferencePackLoadError,
    ReferencePackValidationError,
    SchemaVersionMismatch,
    ReferenceIntegrityError,
)


# ============================================================================
# OUTPUT FORMATTING
# ============================================================================

class Colors:
    """ANSI color codes for terminal output."""
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    END = '\033[0m'

    @classmethod
    def disable(cls):
        cls.CYAN = ''
        cls.GREEN = ''
        cls.YELLOW = ''
        cls.RED = ''
        cls.BOLD = ''
        cls.END = ''


def print_header(text: str):
    print(f"\n{Colors.BOLD}{Colors.CYAN}{'='*60}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}{text}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}{'='*60}{Colors.END}")


def print_success(text: str):
    print(f"{Colors.GREEN}[OK] {text}{Colors.END}")


def print_error(text: str):
    print(f"{Colors.RED}[ERROR] {text}{Colors.END}", file=sys.stderr)


def print_warning(text: str):
    print(f"{Colors.YELLOW}[WARN] {text}{Colors.END}")


def print_kv(key: str, value: Any, indent: int = 0):
    spaces = "  " * indent
    print(f"{spaces}{Colors.BOLD}{key}:{Colors.END} {value}")


def json_dumps(obj: Any, indent: int = 2) -> str:
    return json.dumps(obj, indent=indent, sort_keys=True, ensure_ascii=False)


# ============================================================================
# INPUT PARSING
# ============================================================================

def parse_weights(text: str) -> OFSWeights:
    """
    Parse ``key=value`` pairs separated by commas into validated weights.

    Keys that are not given keep their default value.
    """
    values = DEFAULT_WEIGHTS.to_dict()
    for pair in text.split(","):
        pair = pair.strip()
        if not pair:
            continue
        key, sep, raw = pair.partition("=")
        if not sep:
            raise InvalidWeightsError(
                message=f"Expected key=value, got '{pair}'",
                details={"allowed": list(OFSWeights.KEYS)},
            )
        try:
            values[key.strip()] = float(raw)
        except ValueError as e:
            raise InvalidWeightsError(message=f"Weight '{key}' is not a number: '{raw}'") from e
    return OFSWeights.from_dict(values).validate()


def parse_events(raw_events: Any) -> list[ScenarioEvent]:
    """Build events from a list of dicts, rejecting malformed batches."""
    if not isinstance(raw_events, list):
        raise InvalidScenarioError(message="Scenario events must be a list")

    events = []
    for index, item in enumerate(raw_events):
        if not isinstance(item, dict):
            raise InvalidScenarioError(
                message=f"Event #{index} is not a mapping",
                details={"index": index},
            )
        try:
            event = ScenarioEvent.from_dict(item)
        except KeyError as e:
            raise InvalidScenarioError(
                message=f"Event #{index} is missing field {e}",
                details={"index": index},
            ) from e
        except (TypeError, ValueError) as e:
            raise InvalidScenarioError(
                message=f"Event #{index} is invalid: {e}",
                details={"index": index},
            ) from e
        if event.quantity <= 0 or event.avg_annual_salary_usd <= 0:
            raise InvalidScenarioError(
                message=f"Event #{index} needs a positive quantity and salary",
                details={"index": index, "event_id": event.id},
            )
        events.append(event)
    return events


def load_scenario_file(path: Path) -> tuple[list[ScenarioEvent], Optional[OFSWeights]]:
    """
    Read a scenario file (.json, .yaml, .yml).

    Returns:
        The events, plus the weights embedded in the file (if any)
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except OSError as e:
        raise InvalidScenarioError(message=f"Cannot read scenario file: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InvalidScenarioError(message=f"Cannot parse scenario file: {e}") from e

    weights = None
    if isinstance(data, dict):
        if "weights" in data and data["weights"] is not None:
            if not isinstance(data["weights"], dict):
                raise InvalidWeightsError(
                    message="Scenario weights must be a mapping",
                    details={"allowed": list(OFSWeights.KEYS)},
                )
            weights = OFSWeights.from_dict(data["weights"]).validate()
        data = data.get("events")

    return parse_events(data), weights


def _load_tables(pack: Optional[str], strict: bool = True) -> ReferenceTables:
    loader = ReferencePackLoader(strict_version=strict)
    return loader.load(pack or DEFAULT_PACK_PATH)


def _resolve_scenario(args) -> tuple[list[ScenarioEvent], OFSWeights]:
    if args.preset is not None:
        events, file_weights = get_preset(args.preset), None
    elif args.scenario:
        events, file_weights = load_scenario_file(Path(args.scenario))
    else:
        raise InvalidScenarioError(message="Either --scenario or --preset is required")

    if args.weights:
        return events, parse_weights(args.weights)
    return events, file_weights or DEFAULT_WEIGHTS


# ============================================================================
# EVALUATE COMMAND
# ============================================================================

def print_evaluation(evaluation: ScenarioEvaluation) -> None:
    signals = evaluation.signals
    components = evaluation.component_scores

    print(evaluation.summary)
    print()
    print_kv("OFS", f"{signals.ofs}/100")
    print_kv("Total Cost Impact", f"${signals.total_cost_impact:,}")
    print_kv("Headcount Delta", f"{signals.headcount_delta:+d}")
    print_kv("Visa Load", signals.visa_load)
    print_kv("Liability Tail", f"${signals.liability_tail:,}")
    print_kv("Payroll Cycle Risk", signals.pcr.value)
    print_kv("Governance Load", signals.gli)

    print(f"\n{Colors.BOLD}Component Scores:{Colors.END}")
    print_kv("Exposure", components.exposure_score, indent=1)
    print_kv("Governance", components.governance_load, indent=1)
    print_kv("Execution", components.execution_cluster_risk, indent=1)
    print_kv("Input Completeness", f"{components.input_completeness_score}%", indent=1)
    print_kv("Confidence Penalty", components.confidence_penalty, indent=1)

    print(f"\n{Colors.BOLD}Policy Triggers ({len(evaluation.triggers)}):{Colors.END}")
    for trigger in evaluation.triggers:
        country = trigger.country.value if trigger.country else "-"
        print(f"  [{trigger.severity.value}] {trigger.policy_id} ({country}): {trigger.title}")

    print(f"\n{Colors.BOLD}Thresholds:{Colors.END}")
    for breach in evaluation.threshold_breaches:
        marker = f"{Colors.RED}BREACHED{Colors.END}" if breach.breached else "ok"
        print(f"  {breach.label}: {breach.current}/{breach.threshold} {marker}")

    print(f"\n{Colors.BOLD}Workflow ({len(evaluation.workflow)} steps, "
          f"{total_days(list(evaluation.workflow))} days sequential):{Colors.END}")
    for step in evaluation.workflow:
        print(f"  {step.step_id}: {step.title} [{step.owner}, {step.days_required}d]")

    if evaluation.data_gaps:
        print(f"\n{Colors.BOLD}Data Gaps:{Colors.END}")
        for gap in evaluation.data_gaps:
            print(f"  - {gap}")

    print(f"\n{Colors.BOLD}Staging:{Colors.END} {evaluation.staging_suggestion}")


def cmd_evaluate(args):
    """Evaluate a scenario and print its signals."""
    try:
        events, weights = _resolve_scenario(args)
    except (InvalidScenarioError, InvalidWeightsError) as e:
        print_error(str(e))
        return ExitCode.INPUT_INVALID

    try:
        tables = _load_tables(args.pack)
    except _PACK_ERRORS as e:
        print_error(f"Failed to load pack: {e}")
        return ExitCode.PACK_ERROR

    evaluation = ScenarioEvaluator(tables).evaluate(events, weights)
    if args.sequence:
        evaluation = apply_sequencing_to_evaluation(evaluation, weights)

    if args.json:
        payload = evaluation.to_dict()
        payload["fingerprint"] = compute_evaluation_fingerprint(evaluation)
        print(json_dumps(payload))
        return ExitCode.OK

    title = "Sequenced Projection" if args.sequence else "Scenario Evaluation"
    print_header(f"WorkforcePilot - {title}")
    if args.sequence:
        print_warning("Projected from the baseline; events were not re-evaluated")
    print_evaluation(evaluation)
    print()
    print_kv("Fingerprint", compute_evaluation_fingerprint(evaluation)[:32] + "...")
    return ExitCode.OK


# ============================================================================
# BRIEF COMMAND
# ============================================================================

def cmd_brief(args):
    """Print the deterministic executive brief for a scenario."""
    try:
        events, weights = _resolve_scenario(args)
    except (InvalidScenarioError, InvalidWeightsError) as e:
        print_error(str(e))
        return ExitCode.INPUT_INVALID

    try:
        tables = _load_tables(args.pack)
    except _PACK_ERRORS as e:
        print_error(f"Failed to load pack: {e}")
        return ExitCode.PACK_ERROR

    evaluation = ScenarioEvaluator(tables).evaluate(events, weights)
    brief = build_fallback_brief(evaluation)

    if args.json:
        print(json_dumps(brief.to_dict()))
        return ExitCode.OK

    print_header("WorkforcePilot - Executive Brief")
    print(brief.scenario_summary)
    print()
    print_kv("OFS", f"{brief.of_score}/100")
    print_kv("Dominant Driver", brief.dominant_driver.value)
    print_kv("Input Confidence", f"{brief.input_confidence}%")
    print_kv("Tradeoff", brief.tradeoff_identified)

    print(f"\n{Colors.BOLD}Top Risks:{Colors.END}")
    for risk in brief.top_risks:
        print(f"  [{risk.severity.value}] {risk.title} ({', '.join(risk.evidence_ids)})")

    print(f"\n{Colors.BOLD}Recommended Sequencing:{Colors.END}")
    for index, step in enumerate(brief.recommended_sequencing, start=1):
        print(f"  {index}. {step}")

    if brief.data_required:
        print(f"\n{Colors.BOLD}Data Required:{Colors.END}")
        for gap in brief.data_required:
            print(f"  - {gap}")

    print()
    print(brief.exec_brief)
    return ExitCode.OK


# ============================================================================
# PACK COMMANDS
# ============================================================================

def cmd_validate_pack(args):
    """Validate a reference pack file."""
    print_header("WorkforcePilot - Validate Pack")

    pack_path = Path(args.pack)
    if not pack_path.exists():
        print_error(f"Pack file not found: {pack_path}")
        return ExitCode.INPUT_INVALID

    print(f"Validating: {pack_path}")

    try:
        tables = _load_tables(str(pack_path), strict=not args.lenient)
    except ReferencePackValidationError as e:
        errors = e.details.get("errors", [])
        print_error(f"Validation failed with {len(errors)} error(s):")
        for error in errors:
            location = ".".join(str(part) for part in error.get("loc", ()))
            print(f"  {Colors.RED}[X]{Colors.END} {location}: {error.get('msg')}")
        return ExitCode.PACK_ERROR
    except ReferenceIntegrityError as e:
        print_error(e.details.get("errors", e.message))
        return ExitCode.PACK_ERROR
    except _PACK_ERRORS as e:
        print_error(f"Loading failed: {e}")
        return ExitCode.PACK_ERROR

    print_success("Pack is valid!")
    print()
    print_kv("Pack ID", tables.pack_id)
    print_kv("Version", tables.pack_version)
    print_kv("Pack Hash", compute_reference_pack_hash(tables)[:32] + "...")
    print()
    print_kv("Countries", len(tables.countries))
    print_kv("Policy Rules", len(tables.policy_rules))
    print_kv("Thresholds", len(tables.thresholds))
    print_kv("Evidence", len(tables.evidence))
    return ExitCode.OK


def cmd_pack_info(args):
    """Show reference pack information."""
    print_header("WorkforcePilot - Pack Info")

    try:
        tables = _load_tables(args.pack)
    except _PACK_ERRORS as e:
        print_error(f"Failed to load pack: {e}")
        return ExitCode.PACK_ERROR

    print_kv("Pack ID", tables.pack_id)
    print_kv("Name", tables.name)
    print_kv("Version", tables.pack_version)
    print_kv("Pack Hash", compute_reference_pack_hash(tables))
    print_kv("Engine Version", __version__)

    print(f"\n{Colors.BOLD}Countries ({len(tables.countries)}):{Colors.END}")
    for code, profile in sorted(tables.countries.items(), key=lambda kv: kv[0].value):
        visa = "visa" if profile.visa_required else "no visa"
        print(f"  {code.value}: PE {profile.pe_sensitivity:.2f}, "
              f"misclassification {profile.misclass_sensitivity:.2f}, {visa}")

    print(f"\n{Colors.BOLD}Policy Rules ({len(tables.policy_rules)}):{Colors.END}")
    for rule in tables.policy_rules.values():
        print(f"  {rule.id}: {rule.severity.value} - {rule.title}")

    print(f"\n{Colors.BOLD}Thresholds ({len(tables.thresholds)}):{Colors.END}")
    for definition in tables.thresholds.values():
        print(f"  {definition.id}: {definition.scope.value} - {definition.label}")

    return ExitCode.OK


# ============================================================================
# MAIN
# ============================================================================

def _add_scenario_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--scenario", "-s", help="Scenario file (JSON or YAML)")
    source.add_argument("--preset", type=int, choices=(1, 2, 3), help="Built-in demo scenario")
    parser.add_argument("--weights", "-w",
                        help="OFS weights as key=value pairs, e.g. exposure=0.5,governance=0.2")
    parser.add_argument("--pack", "-p", help="Reference pack file (defaults to the bundled pack)")
    parser.add_argument("--json", action="store_true", help="Print machine-readable JSON")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workforcepilot",
        description="WorkforcePilot CLI - deterministic workforce scenario evaluation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit Codes:
  0   OK              Command completed
  10  INPUT_INVALID   Invalid scenario or weights
  11  PACK_ERROR      Pack validation failed
  20  INTERNAL_ERROR  Unexpected error

Examples:
  workforcepilot evaluate --scenario scenario.json
  workforcepilot evaluate --preset 1 --sequence
  workforcepilot brief --scenario scenario.yaml --weights exposure=0.6,governance=0.2,speed=0.1,confidence=0.1
  workforcepilot validate-pack --pack my_pack.yaml
  workforcepilot pack-info
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log engine activity")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # evaluate
    eval_parser = subparsers.add_parser("evaluate", help="Evaluate a scenario")
    _add_scenario_arguments(eval_parser)
    eval_parser.add_argument("--sequence", action="store_true",
                             help="Show the projection after recommended sequencing")
    eval_parser.set_defaults(func=cmd_evaluate)

    # brief
    brief_parser = subparsers.add_parser("brief", help="Print the executive brief")
    _add_scenario_arguments(brief_parser)
    brief_parser.set_defaults(func=cmd_brief)

    # validate-pack
    val_pack_parser = subparsers.add_parser("validate-pack", help="Validate a reference pack")
    val_pack_parser.add_argument("--pack", "-p", required=True, help="Pack YAML/JSON file")
    val_pack_parser.add_argument("--lenient", action="store_true",
                                 help="Warn instead of failing on schema version mismatch")
    val_pack_parser.set_defaults(func=cmd_validate_pack)

    # pack-info
    info_parser = subparsers.add_parser("pack-info", help="Show reference pack information")
    info_parser.add_argument("--pack", "-p", help="Pack file (defaults to the bundled pack)")
    info_parser.set_defaults(func=cmd_pack_info)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    if not sys.stdout.isatty():
        Colors.disable()

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return ExitCode.INPUT_INVALID

    try:
        return args.func(args)
    except WorkforcePilotError as e:
        print_error(str(e))
        return ExitCode.INPUT_INVALID
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        return ExitCode.INTERNAL_ERROR


if __name__ == "__main__":
    sys.exit(main())
