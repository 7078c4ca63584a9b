"""Unit tests for volume classification."""

import pytest

from readgrove.models.session import SessionState, Verdict, VolumeStatus
from readgrove.services.classifier import classify, volume_status


@pytest.mark.unit
class TestClassify:
    """Test cases for classify()."""

    def test_target_boundary_is_good(self):
        """offset 10 over a -60 floor puts the target at -50, inclusive."""
        assert classify(-50.0, -60.0, 10.0, -15.0) == Verdict.GOOD

    def test_just_below_target_is_too_quiet(self):
        assert classify(-50.01, -60.0, 10.0, -15.0) == Verdict.TOO_QUIET

    def test_scream_boundary_is_not_loud(self):
        assert classify(-15.0, -60.0, 10.0, -15.0) == Verdict.GOOD

    def test_above_scream_is_too_loud(self):
        assert classify(-14.99, -60.0, 10.0, -15.0) == Verdict.TOO_LOUD

    def test_loud_wins_when_target_is_above_scream(self):
        """A very high target cannot make a scream count as good."""
        assert classify(-10.0, -30.0, 25.0, -15.0) == Verdict.TOO_LOUD

    def test_silence_is_too_quiet(self):
        assert classify(-100.0, -80.0, 10.0, -15.0) == Verdict.TOO_QUIET

    @pytest.mark.parametrize("noise_floor", [-80.0, -72.5, -60.0, -45.0, -30.0])
    def test_regions_partition_the_line(self, noise_floor):
        """Every level gets exactly one verdict, and verdicts change only at the bounds."""
        target = noise_floor + 10.0
        scream = -15.0
        previous = None
        changes = []
        level = -100.0
        while level <= 0.0:
            verdict = classify(level, noise_floor, 10.0, scream)
            assert verdict in (Verdict.TOO_QUIET, Verdict.GOOD, Verdict.TOO_LOUD)
            if level > scream:
                assert verdict == Verdict.TOO_LOUD
            elif level >= target:
                assert verdict == Verdict.GOOD
            else:
                assert verdict == Verdict.TOO_QUIET
            if previous is not None and verdict != previous:
                changes.append(verdict)
            previous = verdict
            level = round(level + 0.25, 2)

        assert changes == [Verdict.GOOD, Verdict.TOO_LOUD]


@pytest.mark.unit
class TestVolumeStatus:
    """Test cases for the meter status."""

    def test_calibrating(self):
        assert volume_status(SessionState.CALIBRATING, -20.0, -60.0, 10.0, -15.0) == VolumeStatus.CALIBRATING

    @pytest.mark.parametrize("state", [SessionState.IDLE, SessionState.PAUSED, SessionState.COMPLETED])
    def test_not_reading_is_idle(self, state):
        assert volume_status(state, -20.0, -60.0, 10.0, -15.0) == VolumeStatus.IDLE

    @pytest.mark.parametrize("level,expected", [
        (-70.0, VolumeStatus.QUIET),
        (-50.0, VolumeStatus.GOOD),
        (-15.0, VolumeStatus.GOOD),
        (-5.0, VolumeStatus.LOUD),
    ])
    def test_reading(self, level, expected):
        assert volume_status(SessionState.READING, level, -60.0, 10.0, -15.0) == expected
