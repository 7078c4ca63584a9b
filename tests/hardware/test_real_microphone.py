"""Real hardware tests for the microphone level sensor.

These tests require an actual input device.

Run with: READGROVE_HARDWARE_TESTS=1 pytest tests/hardware/ -v -s -m hardware
"""

import os
import time

import pytest

pytestmark = pytest.mark.skipif(
    not os.environ.get("READGROVE_HARDWARE_TESTS"),
    reason="set READGROVE_HARDWARE_TESTS=1 to run against a real microphone",
)


@pytest.mark.hardware
class TestRealMicrophone:

    def test_levels_from_real_microphone(self):
        from readgrove.audio.microphone import MicrophoneLevelSensor

        sensor = MicrophoneLevelSensor()
        sensor.acquire()
        try:
            levels = []
            for _ in range(20):
                time.sleep(0.1)
                levels.append(sensor.current_level_db())
        finally:
            sensor.release()

        print(f"\nLevels (dB): min {min(levels):.1f}, max {max(levels):.1f}")
        assert all(-100.0 <= level <= 0.0 for level in levels)
        assert sensor.total_chunks > 0

    def test_calibration_with_real_microphone(self):
        from readgrove.audio.microphone import MicrophoneLevelSensor
        from readgrove.models.session import SessionState
        from readgrove.services.session_engine import SessionEngine

        engine = SessionEngine(MicrophoneLevelSensor())
        try:
            assert engine.start_calibration()
            deadline = time.monotonic() + 10
            while engine.state == SessionState.CALIBRATING and time.monotonic() < deadline:
                time.sleep(0.1)

            print(f"\nNoise floor: {engine.noise_floor_db:.1f} dB")
            assert engine.state == SessionState.IDLE
            assert -80.0 <= engine.noise_floor_db <= -30.0
        finally:
            engine.shutdown()
