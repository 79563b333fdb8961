"""Hosted STT implementation using the OpenAI transcription API.

Streams the temporary upload file to ``audio.transcriptions.create`` with a
fixed language hint. SDK retries are disabled: the relay makes a single
attempt per request and reports failures to the caller.
"""

import logging

from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from src.core.config import get_settings
from src.core.exceptions import TranscriptionError
from src.core.models import TranscriptionResult
from src.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


class OpenAISTT(BaseSTT):
    """Speech-to-text provider backed by OpenAI's hosted Whisper model.

    Args:
        api_key: OpenAI API key (defaults to ``settings.openai_api_key``).
        model: Model identifier (defaults to ``whisper-1``).
        settings: Optional Settings instance (defaults to get_settings()).
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        settings=None,
    ) -> None:
        self._settings = settings or get_settings()
        self._api_key = api_key or self._settings.openai_api_key
        self._model = model or self._settings.openai_transcription_model
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        """Return the SDK client, creating it on first use."""
        if not self._api_key:
            raise TranscriptionError(detail="OPENAI_API_KEY is not configured")
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._api_key, max_retries=0)
        return self._client

    async def transcribe(self, audio_path: str, **kwargs) -> dict:
        """Send an audio file to the hosted model.

        Args:
            audio_path: Path to the uploaded audio file.
            **kwargs: Optional key: language (ISO 639-1 hint).

        Returns:
            Dict with text and language.
        """
        client = self._get_client()
        language = kwargs.get("language")
        request: dict = {"model": self._model}
        if language:
            request["language"] = language

        logger.info("Sending %s to %s (language=%s)", audio_path, self._model, language)
        try:
            with open(audio_path, "rb") as audio_file:
                response = await client.audio.transcriptions.create(file=audio_file, **request)
        except APITimeoutError as exc:
            logger.warning("OpenAI transcription timeout: %s", exc)
            raise TranscriptionError(detail=f"Transcription service timed out: {exc}") from exc
        except APIConnectionError as exc:
            logger.warning("OpenAI transcription unreachable: %s", exc)
            raise TranscriptionError(
                detail=f"Transcription service unreachable: {exc}"
            ) from exc
        except APIStatusError as exc:
            logger.warning("OpenAI transcription rejected (%s): %s", exc.status_code, exc)
            raise TranscriptionError(
                detail=f"Transcription service returned {exc.status_code}: {exc.message}"
            ) from exc
        except OSError as exc:
            raise TranscriptionError(detail=f"Could not read audio file: {exc}") from exc

        text = (getattr(response, "text", "") or "").strip()
        result = TranscriptionResult(text=text, language=language or "unknown")
        return result.model_dump(exclude={"error"})

    async def close(self) -> None:
        """Close the SDK client and its connection pool."""
        if self._client is not None:
            await self._client.close()
            self._client = None
