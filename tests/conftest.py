"""Pytest configuration and fixtures for ReadGrove tests."""

import pytest
import logging
from typing import List, Optional

import numpy as np
from pubsub import pub

from readgrove.audio.level_sensor import LevelSensor, SensorAcquisitionError
from readgrove.models.settings import GameSettings, MIN_DECIBELS
from readgrove.services.publisher import SessionPublisher
from readgrove.services.session_engine import SessionEngine


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests with no threads or hardware")
    config.addinivalue_line("markers", "integration: tests that run the real tick thread")
    config.addinivalue_line("markers", "hardware: tests that need a real microphone")


class FakeLevelSensor(LevelSensor):
    """Level sensor that reports whatever level the test sets."""

    def __init__(self, level_db: float = MIN_DECIBELS):
        self.level_db = level_db
        self.fail_with: Optional[SensorAcquisitionError] = None
        self.acquire_count = 0
        self.release_count = 0
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    def acquire(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.acquire_count += 1
        self._active = True

    def release(self) -> None:
        if self._active:
            self.release_count += 1
        self._active = False

    def current_level_db(self) -> float:
        return self.level_db if self._active else MIN_DECIBELS


class ManualTimer:
    """Stand-in for RepeatingTimer that only ticks when fired."""

    def __init__(self, interval_seconds: float, callback, name: str = "TickTimer"):
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.started = False
        self.cancelled = False

    @property
    def is_active(self) -> bool:
        return self.started and not self.cancelled

    def start(self) -> None:
        self.started = True

    def cancel(self, wait: bool = True) -> None:
        self.cancelled = True

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            self.callback()


class ManualTimerFactory:
    """Builds ManualTimers and remembers them."""

    def __init__(self):
        self.timers: List[ManualTimer] = []

    def __call__(self, interval_seconds, callback):
        timer = ManualTimer(interval_seconds, callback)
        self.timers.append(timer)
        return timer

    @property
    def latest(self) -> ManualTimer:
        return self.timers[-1]


class ManualClock:
    """Monotonic clock the test advances by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def clean_pubsub():
    """Drop listeners registered by a test."""
    yield
    pub.unsubAll()


@pytest.fixture
def fake_sensor():
    return FakeLevelSensor()


@pytest.fixture
def timer_factory():
    return ManualTimerFactory()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def settings():
    return GameSettings()


@pytest.fixture
def engine(fake_sensor, settings, timer_factory, clock):
    """Engine wired to fakes; nothing runs until a timer is fired."""
    engine = SessionEngine(fake_sensor, settings, SessionPublisher(),
                           timer_factory=timer_factory, clock=clock)
    yield engine
    engine.shutdown()


@pytest.fixture
def published():
    """Collect everything the engine publishes."""
    collected = {"snapshots": [], "events": []}

    def on_snapshot(snapshot):
        collected["snapshots"].append(snapshot)

    def on_event(event):
        collected["events"].append(event)

    pub.subscribe(on_snapshot, "session.snapshot")
    pub.subscribe(on_event, "session.event")
    # Keep strong references; pubsub only holds weak ones
    collected["_listeners"] = (on_snapshot, on_event)
    return collected


@pytest.fixture
def sample_audio_chunk():
    """Generate a 1024-sample 16-bit sine chunk at half scale."""
    sample_rate = 16000
    t = np.linspace(0, 1024 / sample_rate, 1024, False)
    wave_data = 0.5 * np.sin(2 * np.pi * 440 * t)
    return (wave_data * 32767).astype(np.int16).tobytes()
