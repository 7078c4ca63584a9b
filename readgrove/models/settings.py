"""Game tuning parameters."""

from dataclasses import dataclass

MIN_DECIBELS = -100.0
MAX_DECIBELS = 0.0

# Usable meter range for a calibrated noise floor
NOISE_FLOOR_MIN_DB = -80.0
NOISE_FLOOR_MAX_DB = -30.0


@dataclass(frozen=True)
class GameSettings:
    """Constants that drive calibration, classification and growth."""
    tick_interval_ms: int = 100
    calibration_duration_ms: int = 3000
    default_noise_floor_db: float = -60.0
    target_offset_db: float = 10.0
    scream_threshold_db: float = -15.0
    max_tree_height: float = 100.0
    points_per_second: float = 10.0
    ema_alpha: float = 0.2

    def __post_init__(self):
        """Reject values the engine cannot run with."""
        if not 0.0 < self.ema_alpha <= 1.0:
            raise ValueError(f"ema_alpha must be in (0, 1], got {self.ema_alpha}")
        if self.tick_interval_ms <= 0:
            raise ValueError(f"tick_interval_ms must be positive, got {self.tick_interval_ms}")
        if self.calibration_duration_ms <= 0:
            raise ValueError(f"calibration_duration_ms must be positive, got {self.calibration_duration_ms}")
        if self.max_tree_height <= 0 or self.points_per_second <= 0:
            raise ValueError("max_tree_height and points_per_second must be positive")

    @property
    def tick_seconds(self) -> float:
        return self.tick_interval_ms / 1000.0

    @property
    def tree_cycle_seconds(self) -> float:
        """Seconds of good-volume reading needed for one tree."""
        return self.max_tree_height / self.points_per_second
