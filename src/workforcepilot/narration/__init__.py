"""
WorkforcePilot Narration

Deterministic executive briefs built from an evaluation.

Usage:
    from workforcepilot.narration import build_fallback_brief

    brief = build_fallback_brief(evaluation)
"""
from __future__ import annotations

from .brief_builder import (
    ADVICE_MARKER,
    build_fallback_brief,
    describe_tradeoff,
    dominant_driver,
    split_staging_steps,
)

__all__ = [
    "ADVICE_MARKER",
    "build_fallback_brief",
    "describe_tradeoff",
    "dominant_driver",
    "split_staging_steps",
]
