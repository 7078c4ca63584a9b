"""Loudness sensing for ReadGrove."""

from .level_sensor import LevelSensor, SensorAcquisitionError
from .metrics import smooth, rms_to_db, meter_percent

__all__ = [
    'LevelSensor',
    'SensorAcquisitionError',
    'smooth',
    'rms_to_db',
    'meter_percent',
]
