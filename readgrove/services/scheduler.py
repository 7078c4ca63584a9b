"""Cancellable repeating task that drives the game loop."""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RepeatingTimer:
    """Calls a function every ``interval_seconds`` on a background thread.

    Calls never overlap: the next wait starts only after the callback returns.
    """

    def __init__(self, interval_seconds: float, callback: Callable[[], None], name: str = "TickTimer"):
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.name = name
        self.thread: Optional[threading.Thread] = None
        self.stop_event = threading.Event()

    @property
    def is_active(self) -> bool:
        return self.thread is not None and not self.stop_event.is_set()

    def start(self) -> None:
        """Arm the timer."""
        if self.is_active:
            logger.warning(f"{self.name} already running")
            return

        self.stop_event = threading.Event()
        self.thread = threading.Thread(target=self._run, args=(self.stop_event,), daemon=True)
        self.thread.name = self.name
        self.thread.start()
        logger.debug(f"{self.name} armed every {self.interval_seconds:.3f}s")

    def cancel(self, wait: bool = True) -> None:
        """Disarm the timer. Safe to call from inside the callback.

        Args:
            wait: Join the timer thread. Callers holding a lock the
                callback also takes must pass False.
        """
        if self.thread is None:
            return

        self.stop_event.set()
        if wait and self.thread is not threading.current_thread() and self.thread.is_alive():
            self.thread.join(timeout=2.0)
            if self.thread.is_alive():
                logger.warning(f"{self.name} did not stop cleanly")
        self.thread = None
        logger.debug(f"{self.name} disarmed")

    def _run(self, stop_event: threading.Event) -> None:
        """Internal method: tick loop in background thread."""
        while not stop_event.wait(self.interval_seconds):
            try:
                self.callback()
            except Exception as e:
                logger.error(f"Unhandled exception in {self.name} callback: {e}", exc_info=True)
