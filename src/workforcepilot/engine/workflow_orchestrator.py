"""
WorkforcePilot Workflow Orchestrator

Builds the flattened list of operational steps required by a scenario.

For each distinct event type (first-appearance order) the type's
template steps are appended unless a step with the same ``step_id`` is
already present. Shared steps are therefore owned by the first event
type that needs them. Dependencies are copied as-is.
"""
from __future__ import annotations

from ..models import EventType, ReferenceTables, ScenarioEvent, WorkflowStep


def distinct_event_types(events: list[ScenarioEvent]) -> list[EventType]:
    """Event types in first-appearance order."""
    return list(dict.fromkeys(e.event_type for e in events))


def build_workflow(
    events: list[ScenarioEvent],
    tables: ReferenceTables,
) -> list[WorkflowStep]:
    seen: set[str] = set()
    steps: list[WorkflowStep] = []

    for event_type in distinct_event_types(events):
        for template in tables.template_for(event_type):
            if template.step_id in seen:
                continue
            seen.add(template.step_id)
            steps.append(
                WorkflowStep(
                    step_id=template.step_id,
                    title=template.title,
                    owner=template.owner,
                    days_required=template.days_required,
                    dependencies=template.dependencies,
                    systems_touched=template.systems_touched,
                    event_type=event_type,
                )
            )

    return steps


def total_days(steps: list[WorkflowStep]) -> int:
    """Sum of step durations (ignores parallelism)."""
    return sum(s.days_required for s in steps)
