"""Session engine: the state machine that drives calibration and reading."""

import time
import logging
import threading
from typing import Callable, Optional

from ..audio.level_sensor import LevelSensor, SensorAcquisitionError
from ..audio.metrics import smooth, meter_percent
from ..models.events import SessionSnapshot, SessionEvent
from ..models.session import SessionState, SessionStats, VolumeStatus, focus_percentage
from ..models.settings import GameSettings, MIN_DECIBELS
from .accumulator import SessionAccumulator
from .calibrator import Calibrator
from .classifier import classify, volume_status
from .publisher import SessionPublisher
from .scheduler import RepeatingTimer

logger = logging.getLogger(__name__)

# States in which the tick loop runs
TICKING_STATES = (SessionState.CALIBRATING, SessionState.READING)

TimerFactory = Callable[[float, Callable[[], None]], RepeatingTimer]


class SessionEngine:
    """Owns the session state and every transition between states.

    Ticks from the timer thread and user actions are serialised behind one
    lock, so each runs as a single uninterrupted step.
    """

    def __init__(self,
                 sensor: LevelSensor,
                 settings: Optional[GameSettings] = None,
                 publisher: Optional[SessionPublisher] = None,
                 timer_factory: TimerFactory = RepeatingTimer,
                 clock: Callable[[], float] = time.monotonic):
        """Initialize the engine in the Idle state.

        Args:
            sensor: Loudness source
            settings: Game tuning; defaults when None
            publisher: Snapshot/event publisher; a default one when None
            timer_factory: Builds the repeating tick task
            clock: Monotonic seconds, used for calibration timing
        """
        self.sensor = sensor
        self.settings = settings or GameSettings()
        self.publisher = publisher or SessionPublisher()
        self.timer_factory = timer_factory
        self.clock = clock

        self.state = SessionState.IDLE
        self.calibrator = Calibrator(self.settings.calibration_duration_ms,
                                     self.settings.default_noise_floor_db)
        self.accumulator = SessionAccumulator(self.settings.tree_cycle_seconds)
        self.smoothed_db = MIN_DECIBELS
        self.error_message: Optional[str] = None

        self._lock = threading.RLock()
        self._timer: Optional[RepeatingTimer] = None
        self._timer_generation = 0

        logger.info(f"SessionEngine ready: tick {self.settings.tick_interval_ms} ms, "
                    f"tree cycle {self.settings.tree_cycle_seconds:.1f}s")

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def noise_floor_db(self) -> float:
        return self.calibrator.noise_floor_db

    @property
    def target_db(self) -> float:
        return self.noise_floor_db + self.settings.target_offset_db

    @property
    def stats(self) -> SessionStats:
        return self.accumulator.stats

    @property
    def growth_percentage(self) -> float:
        return self.accumulator.growth_percentage

    @property
    def volume_status(self) -> VolumeStatus:
        return volume_status(self.state, self.smoothed_db, self.noise_floor_db,
                             self.settings.target_offset_db, self.settings.scream_threshold_db)

    @property
    def is_timer_armed(self) -> bool:
        return self._timer is not None

    def snapshot(self) -> SessionSnapshot:
        """Consistent view of everything the presentation layer renders."""
        with self._lock:
            stats = self.accumulator.stats
            return SessionSnapshot(
                state=self.state,
                smoothed_db=self.smoothed_db,
                noise_floor_db=self.noise_floor_db,
                target_db=self.target_db,
                scream_threshold_db=self.settings.scream_threshold_db,
                stats=stats,
                growth_percentage=self.growth_percentage,
                focus_percentage=focus_percentage(stats),
                volume_status=self.volume_status,
                current_meter_percent=meter_percent(self.smoothed_db),
                target_meter_percent=meter_percent(self.target_db),
                scream_meter_percent=meter_percent(self.settings.scream_threshold_db),
                error_message=self.error_message,
            )

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def start_calibration(self) -> bool:
        """Idle -> Calibrating. Returns False if the action was not taken."""
        with self._lock:
            if self.state != SessionState.IDLE:
                logger.warning(f"Cannot start calibration while {self.state.value}")
                return False

            self.error_message = None
            if not self._acquire_sensor("start_calibration"):
                self._publish_snapshot()
                return False

            self.calibrator.begin(self.clock())
            self._transition(SessionState.CALIBRATING)
            self._publish_snapshot()
            return True

    def start_reading(self) -> bool:
        """Idle (or Paused) -> Reading. Returns False if the action was not taken."""
        with self._lock:
            if self.state not in (SessionState.IDLE, SessionState.PAUSED):
                logger.warning(f"Cannot start reading while {self.state.value}")
                return False

            self.error_message = None
            if not self.sensor.is_active and not self._acquire_sensor("start_reading"):
                self._publish_snapshot()
                return False

            self._transition(SessionState.READING)
            self._publish_snapshot()
            return True

    def stop(self) -> bool:
        """Reading -> Completed, releasing the sensor."""
        with self._lock:
            if self.state != SessionState.READING:
                logger.warning(f"Cannot stop while {self.state.value}")
                return False

            self._transition(SessionState.COMPLETED)
            self.sensor.release()
            stats = self.accumulator.stats
            logger.info(f"Session completed: {stats.trees_planted} trees, "
                        f"{stats.valid_duration_seconds:.1f}s valid of {stats.duration_seconds:.1f}s")
            self._publish_snapshot()
            return True

    def reset(self) -> None:
        """Any state -> Idle with zeroed stats and the sensor released."""
        with self._lock:
            self._disarm_timer()
            self.calibrator.abandon()
            self.sensor.release()
            self.accumulator.reset()
            self._transition(SessionState.IDLE)
            self._publish_snapshot()

    def continue_to_new_session(self) -> bool:
        """Completed -> Idle with zeroed stats."""
        with self._lock:
            if self.state != SessionState.COMPLETED:
                logger.warning(f"Cannot continue to a new session while {self.state.value}")
                return False

            self.accumulator.reset()
            self._transition(SessionState.IDLE)
            self._publish_snapshot()
            return True

    def shutdown(self) -> None:
        """Disarm the timer and release the sensor; state is left as is."""
        with self._lock:
            self._disarm_timer()
            self.calibrator.abandon()
            self.sensor.release()
            logger.info("SessionEngine shut down")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _acquire_sensor(self, action: str) -> bool:
        try:
            self.sensor.acquire()
            return True
        except SensorAcquisitionError as e:
            self.error_message = e.message
            logger.error(f"{action} failed, sensor unavailable ({e.reason}): {e.message}")
            self.publisher.publish_event(SessionEvent(
                event_type="sensor_error",
                metadata={"action": action, "reason": e.reason, "message": e.message},
            ))
            return False

    def _transition(self, new_state: SessionState) -> None:
        old_state = self.state
        if old_state in TICKING_STATES:
            self._disarm_timer()

        self.state = new_state
        if new_state in TICKING_STATES:
            self._arm_timer()

        if old_state == new_state:
            return
        logger.info(f"Session state: {old_state.value} -> {new_state.value}")
        self.publisher.publish_event(SessionEvent(
            event_type="state_changed",
            metadata={"from": old_state.value, "to": new_state.value},
        ))

    def _arm_timer(self) -> None:
        self._disarm_timer()
        generation = self._timer_generation
        self._timer = self.timer_factory(self.settings.tick_seconds,
                                         lambda: self._tick(generation))
        self._timer.start()

    def _disarm_timer(self) -> None:
        if self._timer is not None:
            # The timer thread may be waiting on our lock; the generation bump stops its tick
            self._timer.cancel(wait=False)
            self._timer = None
        self._timer_generation += 1

    def _tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._timer_generation or self.state not in TICKING_STATES:
                return

            raw_db = self.sensor.current_level_db()
            self.smoothed_db = smooth(self.smoothed_db, raw_db, self.settings.ema_alpha)

            if self.state == SessionState.CALIBRATING:
                noise_floor = self.calibrator.observe(raw_db, self.clock())
                if noise_floor is not None:
                    self.publisher.publish_event(SessionEvent(
                        event_type="calibration_completed",
                        metadata={"raw_db": raw_db, "noise_floor_db": noise_floor},
                    ))
                    self._transition(SessionState.IDLE)
            else:
                verdict = classify(raw_db, self.noise_floor_db,
                                   self.settings.target_offset_db,
                                   self.settings.scream_threshold_db)
                trees_before = self.accumulator.stats.trees_planted
                stats = self.accumulator.record(verdict, self.settings.tick_seconds)
                logger.debug(f"Tick {raw_db:.1f} dB -> {verdict.value}")
                if stats.trees_planted > trees_before:
                    logger.info(f"Tree planted! Total: {stats.trees_planted}")
                    self.publisher.publish_event(SessionEvent(
                        event_type="tree_planted",
                        metadata={"trees_planted": stats.trees_planted},
                    ))

            self._publish_snapshot()

    def _publish_snapshot(self) -> None:
        self.publisher.publish_snapshot(self.snapshot())
