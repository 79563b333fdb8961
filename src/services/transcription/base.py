"""
Abstract base class for Speech-to-Text providers.

All STT implementations (OpenAI hosted API, local Whisper) must implement
this interface, enabling provider-agnostic transcription in the relay.
"""

from abc import ABC, abstractmethod


class BaseSTT(ABC):
    """Interface that every STT provider must implement."""

    @abstractmethod
    async def transcribe(self, audio_path: str, **kwargs) -> dict:
        """Transcribe an audio file to text.

        Args:
            audio_path: Path to the audio file.
            **kwargs: Provider-specific options (language, beam_size, etc.).

        Returns:
            Dict with keys: ``text``, ``language``, ``confidence``.

        Raises:
            TranscriptionError: If the provider fails or is unreachable.
        """

    async def close(self) -> None:
        """Release network clients or other resources held by the provider."""
