"""Per-tick accumulation of session durations."""

import logging
from dataclasses import replace

from ..models.session import SessionStats, Verdict, trees_for, growth_percentage

logger = logging.getLogger(__name__)

# Totals are kept to the microsecond so uniform ticks land exactly on cycle boundaries
_PRECISION = 6


def _add(total: float, delta: float) -> float:
    return round(total + delta, _PRECISION)


class SessionAccumulator:
    """Turns a stream of classified samples into a session scorecard.

    The accumulator never changes the session state; the engine decides
    when it is fed.
    """

    def __init__(self, tree_cycle_seconds: float):
        self.tree_cycle_seconds = tree_cycle_seconds
        self.stats = SessionStats()

    def record(self, verdict: Verdict, delta_seconds: float) -> SessionStats:
        """Apply one tick's verdict and return the updated stats."""
        s = self.stats
        if verdict == Verdict.TOO_LOUD:
            self.stats = replace(
                s,
                duration_seconds=_add(s.duration_seconds, delta_seconds),
                too_loud_duration_seconds=_add(s.too_loud_duration_seconds, delta_seconds),
            )
        elif verdict == Verdict.GOOD:
            valid = _add(s.valid_duration_seconds, delta_seconds)
            self.stats = replace(
                s,
                duration_seconds=_add(s.duration_seconds, delta_seconds),
                valid_duration_seconds=valid,
                trees_planted=trees_for(valid, self.tree_cycle_seconds),
            )
        else:
            self.stats = replace(s, duration_seconds=_add(s.duration_seconds, delta_seconds))
        return self.stats

    def reset(self) -> None:
        """Zero all counters at once."""
        self.stats = SessionStats()
        logger.debug("Session stats reset")

    @property
    def growth_percentage(self) -> float:
        return growth_percentage(self.stats.valid_duration_seconds, self.tree_cycle_seconds)
