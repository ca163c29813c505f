"""
WorkforcePilot Demo Scenarios

Three canned scenarios that exercise the main risk paths:

1. Contractor conversion wave: 6 ES + 6 DE contractors converted in Q3
2. Cross-border relocation: 5 engineers moved US -> GB in Q2
3. Protected-jurisdiction termination: 5 DE EOR employees in Q2
"""
from __future__ import annotations

from .exceptions import InvalidScenarioError
from .models import (
    CountryCode,
    EventType,
    JobFunction,
    Quarter,
    ScenarioEvent,
    WorkerType,
)


PRESET_NAMES = {
    1: "Contractor conversion wave (ES + DE)",
    2: "US to GB engineering relocation",
    3: "DE termination in a protected jurisdiction",
}


def _conversion_wave() -> list[ScenarioEvent]:
    return [
        ScenarioEvent(
            id="wow1-es",
            country=CountryCode.ES,
            worker_type=WorkerType.CONTRACTOR,
            event_type=EventType.CONTRACTOR_CONVERSION,
            job_function=JobFunction.ENGINEERING,
            quantity=6,
            timing_quarter=Quarter.Q3,
            avg_annual_salary_usd=75000,
        ),
        ScenarioEvent(
            id="wow1-de",
            country=CountryCode.DE,
            worker_type=WorkerType.CONTRACTOR,
            event_type=EventType.CONTRACTOR_CONVERSION,
            job_function=JobFunction.ENGINEERING,
            quantity=6,
            timing_quarter=Quarter.Q3,
            avg_annual_salary_usd=85000,
        ),
    ]


def _relocation() -> list[ScenarioEvent]:
    return [
        ScenarioEvent(
            id="wow2-rel",
            country=CountryCode.US,
            worker_type=WorkerType.DIRECT_EMPLOYEE,
            event_type=EventType.RELOCATION,
            job_function=JobFunction.ENGINEERING,
            quantity=5,
            timing_quarter=Quarter.Q2,
            avg_annual_salary_usd=140000,
            destination_country=CountryCode.GB,
        ),
    ]


def _termination() -> list[ScenarioEvent]:
    return [
        ScenarioEvent(
            id="wow3-de",
            country=CountryCode.DE,
            worker_type=WorkerType.EOR_EMPLOYEE,
            event_type=EventType.TERMINATION,
            job_function=JobFunction.OPERATIONS,
            quantity=5,
            timing_quarter=Quarter.Q2,
            avg_annual_salary_usd=90000,
        ),
    ]


_BUILDERS = {
    1: _conversion_wave,
    2: _relocation,
    3: _termination,
}


def get_preset(number: int) -> list[ScenarioEvent]:
    """
    Return a fresh copy of demo scenario ``number`` (1, 2 or 3).

    Raises:
        InvalidScenarioError: If no such preset exists
    """
    builder = _BUILDERS.get(number)
    if builder is None:
        raise InvalidScenarioError(
            message=f"Unknown preset: {number}",
            details={"available": sorted(_BUILDERS)},
        )
    return builder()


def list_presets() -> list[dict]:
    """Preset numbers and names, in order."""
    return [{"number": n, "name": PRESET_NAMES[n]} for n in sorted(_BUILDERS)]
