"""Session-related data models."""

import math
from dataclasses import dataclass
from enum import Enum


class SessionState(Enum):
    """Overall mode of a practice session."""
    IDLE = "idle"
    CALIBRATING = "calibrating"
    READING = "reading"
    PAUSED = "paused"  # Reserved; no core transition enters it
    COMPLETED = "completed"


class Verdict(Enum):
    """Classification of a single loudness sample."""
    TOO_QUIET = "too_quiet"
    GOOD = "good"
    TOO_LOUD = "too_loud"


class VolumeStatus(Enum):
    """Meter status shown to the reader."""
    IDLE = "idle"
    CALIBRATING = "calibrating"
    QUIET = "quiet"
    GOOD = "good"
    LOUD = "loud"


@dataclass(frozen=True)
class SessionStats:
    """Running scorecard of a session."""
    duration_seconds: float = 0.0
    valid_duration_seconds: float = 0.0
    too_loud_duration_seconds: float = 0.0
    trees_planted: int = 0

    @property
    def too_quiet_duration_seconds(self) -> float:
        """Time spent below target, derived from the other counters."""
        quiet = self.duration_seconds - self.valid_duration_seconds - self.too_loud_duration_seconds
        return max(0.0, round(quiet, 6))


@dataclass
class CalibrationRun:
    """A single noise-floor listening window."""
    start_timestamp: float  # Engine clock, seconds
    duration_limit_ms: int

    def elapsed_ms(self, now: float) -> float:
        return (now - self.start_timestamp) * 1000.0

    def is_expired(self, now: float) -> bool:
        return self.elapsed_ms(now) > self.duration_limit_ms


def trees_for(valid_duration_seconds: float, tree_cycle_seconds: float) -> int:
    """Number of completed trees for a valid duration."""
    return int(math.floor(valid_duration_seconds / tree_cycle_seconds))


def growth_percentage(valid_duration_seconds: float, tree_cycle_seconds: float) -> float:
    """Growth of the tree currently in progress, 0-100."""
    progress = valid_duration_seconds % tree_cycle_seconds
    return min(100.0, (progress / tree_cycle_seconds) * 100.0)


def focus_percentage(stats: SessionStats) -> int:
    """Share of session time spent at good volume, rounded percent."""
    if stats.duration_seconds <= 0:
        return 0
    return int(round((stats.valid_duration_seconds / stats.duration_seconds) * 100))
