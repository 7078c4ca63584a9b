"""Loudness math shared by the sensor, the engine and the meter."""

import numpy as np

from ..models.settings import MIN_DECIBELS, MAX_DECIBELS

# Range of the on-screen meter bar
METER_MIN_DB = -70.0
METER_MAX_DB = -10.0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def rms_to_db(samples: np.ndarray) -> float:
    """Convert normalized float samples in [-1, 1] to a clamped dBFS level."""
    if samples.size == 0:
        return MIN_DECIBELS
    rms = float(np.sqrt(np.mean(np.square(samples, dtype=np.float64))))
    if rms <= 0.0:
        return MIN_DECIBELS
    return clamp(20.0 * float(np.log10(rms)), MIN_DECIBELS, MAX_DECIBELS)


def pcm16_to_float(audio_chunk: bytes) -> np.ndarray:
    """Decode 16-bit signed PCM bytes into floats in [-1, 1]."""
    return np.frombuffer(audio_chunk, dtype=np.int16).astype(np.float32) / 32768.0


def smooth(previous: float, raw_sample: float, alpha: float) -> float:
    """Exponential moving average step used for the displayed level."""
    return previous * (1.0 - alpha) + raw_sample * alpha


def meter_percent(db: float) -> float:
    """Position of a level on the meter bar, 0-100."""
    return clamp(((db - METER_MIN_DB) / (METER_MAX_DB - METER_MIN_DB)) * 100.0, 0.0, 100.0)
