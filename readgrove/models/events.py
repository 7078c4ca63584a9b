"""Event models published to the presentation layer."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Any, Dict

from .session import SessionState, SessionStats, VolumeStatus


@dataclass(frozen=True)
class SessionSnapshot:
    """Pull-based view of the engine for rendering."""
    state: SessionState
    smoothed_db: float
    noise_floor_db: float
    target_db: float
    scream_threshold_db: float
    stats: SessionStats
    growth_percentage: float
    focus_percentage: int
    volume_status: VolumeStatus
    current_meter_percent: float
    target_meter_percent: float
    scream_meter_percent: float
    error_message: Optional[str] = None


@dataclass
class SessionEvent:
    """Session lifecycle event."""
    event_type: str  # "state_changed", "calibration_completed", "tree_planted", "sensor_error"
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class GrowthMilestone:
    """A decorative growth stage reached by the current tree."""
    stage: str  # "sprout", "grow1", "grow2", "complete"
    growth_percentage: float
    trees_planted: int
    timestamp: datetime = field(default_factory=datetime.now)
