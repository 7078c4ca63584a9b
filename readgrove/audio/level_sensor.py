"""Abstract loudness source consumed by the session engine."""

from abc import ABC, abstractmethod
import logging

logger = logging.getLogger(__name__)


class SensorAcquisitionError(Exception):
    """Raised when the capture device cannot be opened."""

    PERMISSION_DENIED = "permission_denied"
    UNSUPPORTED = "unsupported"

    def __init__(self, reason: str, message: str = ""):
        self.reason = reason
        self.message = message or "Microphone permission denied or not supported."
        super().__init__(self.message)


class LevelSensor(ABC):
    """Owns a capture device and reports instantaneous loudness in dB."""

    @abstractmethod
    def acquire(self) -> None:
        """Open the capture device.

        Raises:
            SensorAcquisitionError: If permission is denied or the
                environment has no usable input device.
        """
        pass

    @abstractmethod
    def release(self) -> None:
        """Close the capture device. Safe to call when not acquired."""
        pass

    @property
    @abstractmethod
    def is_active(self) -> bool:
        """True while the device is acquired."""
        pass

    @abstractmethod
    def current_level_db(self) -> float:
        """Latest loudness in [MIN_DECIBELS, 0]; MIN_DECIBELS without signal."""
        pass
