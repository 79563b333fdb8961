"""Speech recognition sessions over ``speech_recognition``.

A ``RecognitionSession`` runs the microphone loop on a background thread and
exposes the results as a lazy, finite iterator of ``TranscriptEvent``s.
The iterator ends with exactly one terminal event: a final transcript or an
error. A session can be consumed once; start a new one to listen again.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Iterator
from typing import Protocol

from src.core.exceptions import ExternalServiceError
from src.core.models import TranscriptEvent

logger = logging.getLogger(__name__)

# Error reported when a session ends without any recognized speech
NO_SPEECH = "no-speech"


class RecognitionEngine(Protocol):
    """Microphone-backed recognizer used by ``RecognitionSession``."""

    def open(self) -> None:
        """Acquire the microphone."""

    def close(self) -> None:
        """Release the microphone."""

    def listen(self, timeout: float, phrase_time_limit: float):
        """Return one captured phrase, or None if nothing was heard."""

    def recognize(self, audio) -> str:
        """Return the transcript of a phrase ("" if unintelligible)."""


class SpeechRecognitionEngine:
    """Recognizer + microphone pair from the ``speech_recognition`` package.

    Uses the Google Web Speech backend with a BCP-47 language tag.
    """

    def __init__(
        self,
        language: str = "id-ID",
        sample_rate: int = 16000,
        adjust_noise_seconds: float = 0.2,
    ) -> None:
        try:
            import speech_recognition as sr
        except ImportError as exc:  # pragma: no cover - import guard
            raise RuntimeError(
                "Voice STT backend unavailable. Install extras with: pip install 'suara[voice]'"
            ) from exc
        self._sr = sr
        self._recognizer = sr.Recognizer()
        self._language = language
        self._sample_rate = sample_rate
        self._adjust_noise_seconds = max(0.0, adjust_noise_seconds)
        self._microphone = None
        self._source = None

    def open(self) -> None:
        self._microphone = self._sr.Microphone(sample_rate=self._sample_rate)
        self._source = self._microphone.__enter__()
        if self._adjust_noise_seconds > 0:
            try:
                self._recognizer.adjust_for_ambient_noise(
                    self._source, duration=self._adjust_noise_seconds
                )
            except Exception:
                self.close()
                raise

    def close(self) -> None:
        if self._microphone is not None:
            self._microphone.__exit__(None, None, None)
        self._microphone = None
        self._source = None

    def listen(self, timeout: float, phrase_time_limit: float):
        try:
            return self._recognizer.listen(
                self._source, timeout=timeout, phrase_time_limit=phrase_time_limit
            )
        except self._sr.WaitTimeoutError:
            return None

    def recognize(self, audio) -> str:
        try:
            return self._recognizer.recognize_google(audio, language=self._language)
        except self._sr.UnknownValueError:
            return ""
        except self._sr.RequestError as exc:
            raise ExternalServiceError(
                "Speech recognition service request failed", details=str(exc)
            ) from exc


class RecognitionSession:
    """One listening session: start, consume ``events()``, stop.

    Args:
        engine: A ``RecognitionEngine``; opened on start, closed when the
            session ends.
        continuous: Keep listening after the first phrase until stopped.
        interim_results: Emit non-final events with the running transcript.
        listen_timeout: Seconds to wait for speech before re-checking stop.
        phrase_time_limit: Maximum seconds per captured phrase.
    """

    def __init__(
        self,
        engine: RecognitionEngine,
        continuous: bool = True,
        interim_results: bool = True,
        listen_timeout: float = 1.0,
        phrase_time_limit: float = 5.0,
    ) -> None:
        self._engine = engine
        self._continuous = continuous
        self._interim_results = interim_results
        self._listen_timeout = listen_timeout
        self._phrase_time_limit = phrase_time_limit
        self._events: queue.Queue = queue.Queue()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._consumed = False

    @property
    def active(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Open the microphone and begin listening on a worker thread."""
        if self._thread is not None:
            raise RuntimeError("Recognition session already started")
        self._thread = threading.Thread(target=self._run, name="recognition", daemon=True)
        self._thread.start()

    def stop(self, wait: float = 5.0) -> None:
        """Ask the session to finish and wait for the microphone to be released."""
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=wait)

    def _run(self) -> None:
        try:
            self._engine.open()
        except (OSError, AttributeError) as exc:
            logger.warning("Recognition could not open microphone: %s", exc)
            self._events.put(TranscriptEvent(is_final=True, error=f"not-allowed: {exc}"))
            return
        except Exception as exc:
            logger.exception("Recognition could not start")
            reason = str(exc) or type(exc).__name__
            self._events.put(TranscriptEvent(is_final=True, error=f"audio-capture: {reason}"))
            return

        phrases: list[str] = []
        error: str | None = None
        try:
            while not self._stop.is_set():
                audio = self._engine.listen(self._listen_timeout, self._phrase_time_limit)
                if audio is None:
                    continue
                text = self._engine.recognize(audio).strip()
                if not text:
                    continue
                phrases.append(text)
                if not self._continuous:
                    break
                if self._interim_results:
                    self._events.put(TranscriptEvent(text=" ".join(phrases), is_final=False))
        except ExternalServiceError as exc:
            error = f"{exc.detail}: {exc.details}" if exc.details else exc.detail
        except Exception as exc:
            logger.exception("Recognition session failed")
            error = str(exc) or type(exc).__name__
        finally:
            self._engine.close()

        transcript = " ".join(phrases)
        if error is None and not transcript:
            error = NO_SPEECH
        self._events.put(TranscriptEvent(text=transcript, is_final=True, error=error))

    def events(self, poll: float | None = None) -> Iterator[TranscriptEvent | None]:
        """Yield transcript events until the terminal one.

        With ``poll`` set, ``None`` is yielded whenever no event arrived
        within ``poll`` seconds, so the consumer can stay responsive.

        Raises:
            RuntimeError: If the session was not started or already consumed.
        """
        if self._thread is None:
            raise RuntimeError("Recognition session not started")
        if self._consumed:
            raise RuntimeError("Recognition session already consumed; start a new one")
        self._consumed = True
        return self._iterate(poll)

    def _iterate(self, poll: float | None) -> Iterator[TranscriptEvent | None]:
        while True:
            try:
                event = self._events.get(timeout=poll)
            except queue.Empty:
                yield None
                continue
            yield event
            if event.is_final:
                return
