"""Microphone capture producing in-memory WAV blobs.

``AudioCapture`` owns one microphone handle at a time: ``start_recording()``
acquires it and starts a reader thread that buffers PCM chunks,
``stop_recording()`` releases the device and returns a single ``audio/wav``
``AudioBlob``. ``select_file()`` is the file-picker alternative.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Protocol

from src.core.exceptions import (
    EmptyInputError,
    InvalidAudioError,
    PermissionDeniedError,
    RecordingAlreadyActiveError,
    RecordingNotActiveError,
)
from src.core.models import AudioBlob
from src.services.audio.processor import AudioProcessor, guess_mime_type, is_audio_mime

logger = logging.getLogger(__name__)


class MicrophoneStream(Protocol):
    """An open microphone yielding raw 16-bit PCM chunks."""

    def read(self) -> bytes:
        """Block until the next chunk is available and return it."""

    def close(self) -> None:
        """Stop the underlying hardware stream."""


class SpeechRecognitionMicrophone:
    """Microphone stream backed by ``speech_recognition.Microphone`` (PyAudio)."""

    def __init__(self, sample_rate: int = 16000, chunk_size: int = 1024) -> None:
        try:
            import speech_recognition as sr
        except ImportError as exc:  # pragma: no cover - import guard
            raise RuntimeError(
                "Microphone backend unavailable. Install extras with: pip install 'suara[voice]'"
            ) from exc
        self._microphone = sr.Microphone(sample_rate=sample_rate, chunk_size=chunk_size)
        self._source = self._microphone.__enter__()

    def read(self) -> bytes:
        return self._source.stream.read(self._source.CHUNK)

    def close(self) -> None:
        self._microphone.__exit__(None, None, None)


def select_file(name: str, data: bytes, mime_type: str | None = None) -> AudioBlob:
    """Validate a user-chosen file and wrap it as an ``AudioBlob``.

    Raises:
        EmptyInputError: If the file has no content.
        InvalidAudioError: If the file is not audio-typed.
    """
    if not data:
        raise EmptyInputError("Selected audio file is empty")
    mime = mime_type or guess_mime_type(name)
    if not is_audio_mime(mime):
        raise InvalidAudioError(f"{name} is not an audio file ({mime or 'unknown type'})")
    return AudioBlob(data=data, mime_type=mime, name=name)


class AudioCapture:
    """Records microphone audio into a WAV ``AudioBlob``.

    Args:
        open_microphone: Factory returning an open ``MicrophoneStream``.
            Defaults to ``SpeechRecognitionMicrophone``.
        sample_rate: Capture rate in Hz.
        sample_width: Bytes per sample of the PCM chunks.
        channels: Number of channels of the PCM chunks.
    """

    def __init__(
        self,
        open_microphone: Callable[[], MicrophoneStream] | None = None,
        sample_rate: int = 16000,
        sample_width: int = 2,
        channels: int = 1,
    ) -> None:
        self._open_microphone = open_microphone or (
            lambda: SpeechRecognitionMicrophone(sample_rate=sample_rate)
        )
        self._processor = AudioProcessor(sample_rate, sample_width, channels)
        self._stream: MicrophoneStream | None = None
        self._reader: threading.Thread | None = None
        self._stop = threading.Event()
        self._chunks: list[bytes] = []
        self._error: Exception | None = None

    @property
    def recording(self) -> bool:
        return self._stream is not None

    def start_recording(self) -> None:
        """Acquire the microphone and start buffering audio.

        Raises:
            RecordingAlreadyActiveError: If a recording is in progress.
            PermissionDeniedError: If the device refused or is missing.
        """
        if self.recording:
            raise RecordingAlreadyActiveError()
        try:
            stream = self._open_microphone()
        except (OSError, AttributeError, RuntimeError) as exc:
            # PyAudio raises OSError for denied/missing devices and
            # speech_recognition raises AttributeError when PyAudio is absent
            logger.warning("Microphone access failed: %s", exc)
            raise PermissionDeniedError(
                "Could not access the microphone. Make sure access is allowed."
            ) from exc

        self._stream = stream
        self._chunks = []
        self._error = None
        self._stop.clear()
        self._reader = threading.Thread(target=self._read_loop, name="audio-capture", daemon=True)
        self._reader.start()
        logger.info("Recording started")

    def _read_loop(self) -> None:
        stream = self._stream
        while not self._stop.is_set():
            try:
                chunk = stream.read()
            except Exception as exc:
                self._error = exc
                return
            if chunk:
                self._chunks.append(chunk)

    def _release(self) -> None:
        """Stop the reader and close the hardware stream."""
        self._stop.set()
        if self._reader is not None:
            self._reader.join(timeout=2.0)
        stream, self._stream, self._reader = self._stream, None, None
        if stream is not None:
            stream.close()

    def stop_recording(self) -> AudioBlob:
        """Release the microphone and return the recording as WAV.

        Raises:
            RecordingNotActiveError: If no recording was started.
        """
        if not self.recording:
            raise RecordingNotActiveError()
        self._release()

        if self._error is not None:
            error, self._error = self._error, None
            raise PermissionDeniedError(f"Microphone stream failed: {error}") from error

        pcm = b"".join(self._chunks)
        self._chunks = []
        logger.info("Recording stopped (%.1fs)", self._processor.duration(pcm))
        return AudioBlob(
            data=self._processor.to_wav_bytes(pcm),
            mime_type="audio/wav",
            name="recording.wav",
        )

    def release(self) -> None:
        """Discard any in-progress recording and free the device."""
        if self.recording:
            self._release()
            self._chunks = []
            logger.info("Recording discarded")

    def select_file(self, name: str, data: bytes, mime_type: str | None = None) -> AudioBlob:
        """File-picker alternative to recording."""
        return select_file(name, data, mime_type)
