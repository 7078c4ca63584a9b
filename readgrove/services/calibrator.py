"""Noise floor calibration."""

import logging
from typing import Optional

from ..audio.metrics import clamp
from ..models.session import CalibrationRun
from ..models.settings import NOISE_FLOOR_MIN_DB, NOISE_FLOOR_MAX_DB

logger = logging.getLogger(__name__)


class Calibrator:
    """Runs a fixed listening window and derives a clamped noise floor."""

    def __init__(self, duration_limit_ms: int, default_noise_floor_db: float):
        self.duration_limit_ms = duration_limit_ms
        self.noise_floor_db = clamp(default_noise_floor_db, NOISE_FLOOR_MIN_DB, NOISE_FLOOR_MAX_DB)
        self.current_run: Optional[CalibrationRun] = None

    @property
    def is_running(self) -> bool:
        return self.current_run is not None

    def begin(self, now: float) -> CalibrationRun:
        """Start a new run, discarding any run in progress."""
        if self.current_run is not None:
            logger.info("Discarding unfinished calibration run")
        self.current_run = CalibrationRun(start_timestamp=now,
                                          duration_limit_ms=self.duration_limit_ms)
        logger.info(f"Calibration started ({self.duration_limit_ms} ms window)")
        return self.current_run

    def abandon(self) -> None:
        """Drop the current run without touching the noise floor."""
        if self.current_run is not None:
            logger.info("Calibration run abandoned")
        self.current_run = None

    def observe(self, raw_db: float, now: float) -> Optional[float]:
        """Check the run against the clock.

        Returns:
            The new noise floor when the run expired on this sample,
            otherwise None.
        """
        if self.current_run is None or not self.current_run.is_expired(now):
            return None

        self.noise_floor_db = clamp(raw_db, NOISE_FLOOR_MIN_DB, NOISE_FLOOR_MAX_DB)
        self.current_run = None
        logger.info(f"Calibration complete: raw {raw_db:.1f} dB, noise floor {self.noise_floor_db:.1f} dB")
        return self.noise_floor_db
