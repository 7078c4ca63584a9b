"""Data models for the ReadGrove application."""

from .session import (
    SessionState,
    Verdict,
    VolumeStatus,
    SessionStats,
    CalibrationRun,
    trees_for,
    growth_percentage,
    focus_percentage,
)
from .settings import GameSettings, MIN_DECIBELS, MAX_DECIBELS
from .events import SessionSnapshot, SessionEvent, GrowthMilestone

__all__ = [
    "SessionState",
    "Verdict",
    "VolumeStatus",
    "SessionStats",
    "CalibrationRun",
    "trees_for",
    "growth_percentage",
    "focus_percentage",
    "GameSettings",
    "MIN_DECIBELS",
    "MAX_DECIBELS",
    "SessionSnapshot",
    "SessionEvent",
    "GrowthMilestone",
]
