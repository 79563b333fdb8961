"""Offline relay provider backed by faster-whisper.

Selected with ``STT_PROVIDER=local`` (or ``whisper``) when the relay should
transcribe uploads on this machine instead of calling the hosted API.
Decoding is CPU-bound, so it runs on a worker thread; the loaded model is
kept for the life of the process and reloaded only when the configured
size, device or compute type changes.
"""

import asyncio
import logging
import math

from faster_whisper import WhisperModel

from src.core.config import get_settings
from src.core.exceptions import TranscriptionError
from src.core.models import TranscriptionResult, TranscriptionSegment
from src.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)

# (model_size, device, compute_type) -> loaded model
_model_cache: tuple[tuple[str, str, str], WhisperModel] | None = None


class WhisperSTT(BaseSTT):
    """Transcribe relay uploads locally with a faster-whisper model.

    Constructor arguments override the ``WHISPER_*`` settings.
    """

    def __init__(
        self,
        model_size: str | None = None,
        device: str | None = None,
        compute_type: str | None = None,
        settings=None,
    ) -> None:
        self._settings = settings or get_settings()
        self._model_size = model_size or self._settings.whisper_model
        self._device = device or self._settings.whisper_device
        self._compute_type = compute_type or self._settings.whisper_compute_type

    def _get_model(self) -> WhisperModel:
        global _model_cache  # noqa: PLW0603
        key = (self._model_size, self._device, self._compute_type)
        if _model_cache is None or _model_cache[0] != key:
            logger.info("Loading Whisper model %s on %s (%s)", *key)
            _model_cache = (
                key,
                WhisperModel(self._model_size, device=self._device, compute_type=self._compute_type),
            )
        return _model_cache[1]

    @staticmethod
    def _logprob_to_confidence(avg_logprob: float) -> float:
        return max(0.0, min(1.0, math.exp(avg_logprob)))

    def _decode(self, audio_path: str, language: str | None, beam_size: int, vad_filter: bool):
        """Decode one upload on the calling thread.

        The segment generator is drained here, on the worker thread that
        owns the model call, and blank segments are dropped.
        """
        segments, info = self._get_model().transcribe(
            audio_path,
            language=language,
            beam_size=beam_size,
            vad_filter=vad_filter,
        )
        spoken = [
            TranscriptionSegment(
                text=seg.text.strip(),
                start=seg.start,
                end=seg.end,
                avg_logprob=seg.avg_logprob,
                no_speech_prob=seg.no_speech_prob,
            )
            for seg in segments
            if seg.text.strip()
        ]
        return spoken, info

    async def transcribe(self, audio_path: str, **kwargs) -> dict:
        """Transcribe a relay temp file.

        Accepts ``language`` (the relay passes ``id``), plus ``beam_size``
        and ``vad_filter`` for tuning. Silence yields empty text with zero
        confidence rather than an error.
        """
        try:
            spoken, info = await asyncio.to_thread(
                self._decode,
                audio_path,
                kwargs.get("language"),
                kwargs.get("beam_size", 5),
                kwargs.get("vad_filter", True),
            )
        except Exception as exc:
            raise TranscriptionError(detail=f"Whisper transcription failed: {exc}") from exc

        confidence = 0.0
        if spoken:
            mean_logprob = sum(seg.avg_logprob for seg in spoken) / len(spoken)
            confidence = self._logprob_to_confidence(mean_logprob)

        result = TranscriptionResult(
            text=" ".join(seg.text for seg in spoken),
            language=info.language or "unknown",
            language_probability=info.language_probability,
            confidence=confidence,
            duration=info.duration,
            segments=spoken,
        )
        logger.info("Local transcription: %d segment(s), %.1fs audio", len(spoken), info.duration)
        return result.model_dump(exclude={"error"})
