"""
WorkforcePilot Scenario Events

A scenario is an ordered list of ScenarioEvent batches. Each event is one
homogeneous group of workers undergoing one action in one quarter.

Events are immutable. The scenario builder owns creation and removal; the
engine never edits an event in place, it returns new lists (see
engine.sequencing).
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

from .enums import CountryCode, EventType, JobFunction, Quarter, WorkerType


@dataclass(frozen=True)
class ScenarioEvent:
    """
    One batch of workers undergoing one workforce action.

    Attributes:
        id: Opaque unique identifier within the scenario
        country: Jurisdiction the workers are in
        worker_type: Current engagement model
        event_type: Action being taken
        job_function: Business function of the batch
        quantity: Batch size (positive integer)
        timing_quarter: Quarter in which the action lands
        avg_annual_salary_usd: Average annual salary of the batch
        destination_country: Target jurisdiction, only meaningful for relocations
    """
    id: str
    country: CountryCode
    worker_type: WorkerType
    event_type: EventType
    job_function: JobFunction
    quantity: int
    timing_quarter: Quarter
    avg_annual_salary_usd: float
    destination_country: Optional[CountryCode] = None

    @property
    def is_relocation(self) -> bool:
        return self.event_type == EventType.RELOCATION

    @property
    def is_termination(self) -> bool:
        return self.event_type == EventType.TERMINATION

    @property
    def is_conversion(self) -> bool:
        return self.event_type == EventType.CONTRACTOR_CONVERSION

    @property
    def cluster_key(self) -> tuple[CountryCode, Quarter]:
        """(country, quarter) grouping key used by clustering passes."""
        return (self.country, self.timing_quarter)

    def with_changes(self, **changes: Any) -> "ScenarioEvent":
        """Return a copy of this event with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "country": self.country.value,
            "worker_type": self.worker_type.value,
            "event_type": self.event_type.value,
            "job_function": self.job_function.value,
            "quantity": self.quantity,
            "timing_quarter": self.timing_quarter.value,
            "avg_annual_salary_usd": self.avg_annual_salary_usd,
            "destination_country": (
                self.destination_country.value if self.destination_country else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScenarioEvent":
        """Build an event from a snake_case dict (as produced by to_dict)."""
        destination = data.get("destination_country")
        return cls(
            id=str(data["id"]),
            country=CountryCode(data["country"]),
            worker_type=WorkerType(data["worker_type"]),
            event_type=EventType(data["event_type"]),
            job_function=JobFunction(data["job_function"]),
            quantity=int(data["quantity"]),
            timing_quarter=Quarter(data["timing_quarter"]),
            avg_annual_salary_usd=float(data["avg_annual_salary_usd"]),
            destination_country=CountryCode(destination) if destination else None,
        )


def total_quantity(events: list[ScenarioEvent]) -> int:
    """Sum of batch sizes across a scenario."""
    return sum(e.quantity for e in events)
