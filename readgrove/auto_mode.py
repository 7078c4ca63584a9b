"""Auto mode: calibrate, read for a fixed time, stop and print the scorecard."""

import time
import logging
from typing import Optional

from rich.console import Console

from .models.events import SessionSnapshot
from .models.session import SessionState
from .services.session_engine import SessionEngine
from .ui.session_screen import render_summary

logger = logging.getLogger(__name__)


def wait_for_calibration(engine: SessionEngine, timeout_seconds: float) -> bool:
    """Block until the engine leaves Calibrating or the timeout passes."""
    deadline = time.monotonic() + timeout_seconds
    while engine.state == SessionState.CALIBRATING:
        if time.monotonic() > deadline:
            logger.warning("Calibration did not finish in time")
            return False
        time.sleep(0.05)
    return True


def run_auto_mode(engine: SessionEngine,
                  duration_seconds: float = 10,
                  skip_calibration: bool = False,
                  console: Optional[Console] = None) -> Optional[SessionSnapshot]:
    """Run one unattended session.

    Returns:
        The final snapshot, or None if the microphone could not be opened
        or calibration did not finish.
    """
    console = console or Console()
    logger.info(f"Starting auto mode: {duration_seconds}s of reading")

    if not skip_calibration:
        console.print("Calibrating, stay quiet...", style="yellow")
        if not engine.start_calibration():
            console.print(f"Calibration failed: {engine.error_message}", style="bold red")
            return None
        calibration_timeout = engine.settings.calibration_duration_ms / 1000.0 * 3 + 1
        if not wait_for_calibration(engine, calibration_timeout):
            engine.reset()
            return None
        console.print(f"Noise floor: {engine.noise_floor_db:.1f} dB, "
                      f"target: {engine.target_db:.1f} dB", style="green")

    if not engine.start_reading():
        console.print(f"Could not start reading: {engine.error_message}", style="bold red")
        return None

    console.print(f"Read aloud for {duration_seconds}s...", style="blue")
    time.sleep(duration_seconds)
    engine.stop()

    snapshot = engine.snapshot()
    console.print(render_summary(snapshot))
    stats = snapshot.stats
    logger.info(f"Auto mode completed: {stats.trees_planted} trees, "
                f"{stats.valid_duration_seconds:.1f}s valid of {stats.duration_seconds:.1f}s")
    return snapshot
