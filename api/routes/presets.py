"""Demo scenario endpoints."""

from fastapi import APIRouter, HTTPException

from api.schemas.responses import PresetDetail, PresetSummary
from workforcepilot.exceptions import InvalidScenarioError
from workforcepilot.presets import PRESET_NAMES, get_preset, list_presets

router = APIRouter(prefix="/presets", tags=["Presets"])


@router.get("", response_model=list[PresetSummary])
async def get_presets():
    """List the built-in demo scenarios."""
    return [PresetSummary(**p) for p in list_presets()]


@router.get("/{number}", response_model=PresetDetail)
async def get_preset_detail(number: int):
    """Events of one demo scenario, ready to POST to /evaluate."""
    try:
        events = get_preset(number)
    except InvalidScenarioError:
        raise HTTPException(
            status_code=404,
            detail=f"Preset {number} not found. Available: {sorted(PRESET_NAMES)}",
        )
    return PresetDetail(
        number=number,
        name=PRESET_NAMES[number],
        events=[e.to_dict() for e in events],
    )
