"""Text-to-speech backend powered by ``pyttsx3``."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from src.core.exceptions import EmptyInputError, SynthesisError
from src.core.models import AudioBlob, SpeechOptions, VoiceProfile

logger = logging.getLogger(__name__)

# espeak pitch scale: 0-100, 50 is the neutral voice
_ESPEAK_NEUTRAL_PITCH = 50


def _decode_language(raw) -> str:
    """Normalize a pyttsx3 voice language entry (espeak yields prefixed bytes)."""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="ignore")
    return "".join(ch for ch in str(raw) if ch.isprintable()).strip()


def pick_default_voice(voices: list[VoiceProfile], language: str = "id-ID") -> VoiceProfile | None:
    """Prefer a voice matching ``language`` (e.g. Indonesian), else the first one."""
    if not voices:
        return None
    prefix = language.split("-", 1)[0].lower()
    for voice in voices:
        lang = voice.lang.lower().replace("_", "-")
        if lang == language.lower() or lang.split("-", 1)[0] == prefix or lang == "in-id":
            return voice
    return voices[0]


class SpeechSynthesizer:
    """Owned handle around one local pyttsx3 engine instance.

    Args:
        engine: Pre-built pyttsx3-compatible engine (tests inject fakes).
        language: Default language used to pick a voice.
    """

    def __init__(self, engine=None, language: str = "id-ID") -> None:
        if engine is None:
            try:
                import pyttsx3
            except ImportError as exc:  # pragma: no cover - import guard
                raise RuntimeError(
                    "Voice TTS backend unavailable. Install extras with: pip install 'suara[voice]'"
                ) from exc
            engine = pyttsx3.init()
        self._engine = engine
        self._language = language
        self._base_rate = engine.getProperty("rate") or 200
        try:
            engine.getProperty("pitch")
            self._supports_pitch = True
        except (KeyError, AttributeError):
            self._supports_pitch = False

    def list_voices(self) -> list[VoiceProfile]:
        """Enumerate the voices installed for the engine."""
        profiles = []
        for voice in self._engine.getProperty("voices") or []:
            languages = getattr(voice, "languages", None) or []
            lang = _decode_language(languages[0]) if languages else ""
            profiles.append(VoiceProfile(id=voice.id, name=voice.name or voice.id, lang=lang))
        return profiles

    def _apply(self, options: SpeechOptions) -> None:
        self._engine.setProperty("rate", int(self._base_rate * options.rate))
        if options.voice_id:
            self._engine.setProperty("voice", options.voice_id)
        if self._supports_pitch:
            self._engine.setProperty("pitch", int(_ESPEAK_NEUTRAL_PITCH * options.pitch))

    def speak(self, text: str, options: SpeechOptions | None = None) -> None:
        """Say ``text`` aloud and block until the utterance ends.

        Raises:
            EmptyInputError: If the text is blank.
            SynthesisError: If the engine fails.
        """
        if not text or not text.strip():
            raise EmptyInputError("Enter some text to read aloud")
        self._apply(options or SpeechOptions(language=self._language))
        try:
            self._engine.say(text)
            self._engine.runAndWait()
        except RuntimeError as exc:
            raise SynthesisError(f"Error while reading text: {exc}") from exc

    def synthesize(self, text: str, options: SpeechOptions | None = None) -> AudioBlob:
        """Render ``text`` to a WAV blob instead of the speakers.

        Raises:
            EmptyInputError: If the text is blank.
            SynthesisError: If the engine fails or produces no audio.
        """
        if not text or not text.strip():
            raise EmptyInputError("Enter some text to read aloud")
        self._apply(options or SpeechOptions(language=self._language))

        fd, temp_name = tempfile.mkstemp(prefix="suara-tts-", suffix=".wav")
        os.close(fd)
        temp_path = Path(temp_name)
        try:
            self._engine.save_to_file(text, str(temp_path))
            self._engine.runAndWait()
            data = temp_path.read_bytes()
        except (RuntimeError, OSError) as exc:
            raise SynthesisError(f"Failed to generate audio: {exc}") from exc
        finally:
            temp_path.unlink(missing_ok=True)

        if not data:
            raise SynthesisError("Failed to generate audio: engine produced no output")
        return AudioBlob(data=data, mime_type="audio/wav", name="tts-audio.wav")

    def stop(self) -> None:
        """Cancel any queued or ongoing utterance."""
        self._engine.stop()
