"""Microphone level sensor backed by PyAudio."""

import pyaudio
import logging
from threading import Thread, Event, Lock
from typing import Optional

from .level_sensor import LevelSensor, SensorAcquisitionError
from .metrics import rms_to_db, pcm16_to_float
from ..models.settings import MIN_DECIBELS


logger = logging.getLogger(__name__)


class MicrophoneLevelSensor(LevelSensor):
    """Continuously reads the default input device and keeps the latest dB level."""

    def __init__(
        self,
        sample_rate: int = 16000,
        chunk_size: int = 2048,
        channels: int = 1,
        format: int = pyaudio.paInt16,
    ):
        """Initialize the sensor with capture parameters.

        Args:
            sample_rate: Audio sample rate in Hz
            chunk_size: Samples per analysis window
            channels: Number of audio channels (1 for mono)
            format: Audio format (16-bit signed int)
        """
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.channels = channels
        self.format = format

        # Reader thread management
        self.reader_thread: Optional[Thread] = None
        self.stop_event = Event()
        self.release_timeout = 2.0
        self._active = False

        self._level_lock = Lock()
        self._latest_db = MIN_DECIBELS
        self.total_chunks = 0

        self.pyaudio_instance: Optional[pyaudio.PyAudio] = None
        self.stream = None

    @property
    def is_active(self) -> bool:
        return self._active

    def acquire(self) -> None:
        """Open the input stream and start reading levels in the background."""
        if self._active:
            logger.warning("Microphone already acquired")
            return

        logger.info("Acquiring microphone")
        pyaudio_instance = None
        try:
            pyaudio_instance = pyaudio.PyAudio()
            stream = self.__open_audio_stream(pyaudio_instance)
        except OSError as e:
            if pyaudio_instance:
                pyaudio_instance.terminate()
            reason = (SensorAcquisitionError.PERMISSION_DENIED
                      if "permission" in str(e).lower()
                      else SensorAcquisitionError.UNSUPPORTED)
            logger.error(f"Could not open microphone ({reason}): {e}")
            raise SensorAcquisitionError(reason) from e

        # Each acquisition owns its own stop event, stream and PyAudio instance
        self.stop_event = Event()
        self.pyaudio_instance = pyaudio_instance
        self.stream = stream
        self.total_chunks = 0
        with self._level_lock:
            self._latest_db = MIN_DECIBELS

        self.reader_thread = Thread(
            target=self._read_continuously,
            args=(stream, pyaudio_instance, self.stop_event),
            daemon=True,
        )
        self.reader_thread.name = "MicrophoneLevelThread"
        self.reader_thread.start()
        self._active = True

    def release(self) -> None:
        """Stop the reader thread and close the device.

        A reader stuck in a blocking read is left to close its own stream
        once the read returns.
        """
        if not self._active:
            return

        logger.info("Releasing microphone")
        self.stop_event.set()

        if self.reader_thread and self.reader_thread.is_alive():
            self.reader_thread.join(timeout=self.release_timeout)
            if self.reader_thread.is_alive():
                logger.warning("Microphone reader thread did not stop cleanly")

        self._active = False
        self.reader_thread = None
        self.stream = None
        self.pyaudio_instance = None
        with self._level_lock:
            self._latest_db = MIN_DECIBELS
        logger.info(f"Microphone released. Total chunks: {self.total_chunks}")

    def current_level_db(self) -> float:
        with self._level_lock:
            return self._latest_db

    def __open_audio_stream(self, pyaudio_instance):
        stream = pyaudio_instance.open(
            format=self.format,
            channels=self.channels,
            rate=self.sample_rate,
            input=True,
            frames_per_buffer=self.chunk_size,
            stream_callback=None
        )
        logger.info(f"Audio stream opened: {self.sample_rate}Hz, "
                    f"{self.chunk_size} samples/chunk")
        return stream

    def _read_continuously(self, stream, pyaudio_instance, stop_event: Event) -> None:
        """Internal method: level reading loop in background thread."""
        try:
            while not stop_event.is_set():
                audio_chunk = stream.read(self.chunk_size, exception_on_overflow=False)
                if stop_event.is_set():
                    break
                self.total_chunks += 1
                level = rms_to_db(pcm16_to_float(audio_chunk))
                with self._level_lock:
                    if not stop_event.is_set():
                        self._latest_db = level
        except OSError as e:
            logger.error(f"Microphone read failed: {e}")
            with self._level_lock:
                if not stop_event.is_set():
                    self._latest_db = MIN_DECIBELS
        finally:
            stream.stop_stream()
            stream.close()
            pyaudio_instance.terminate()

    def __del__(self):
        """Ensure the device is closed on deletion."""
        if self._active:
            self.release()
