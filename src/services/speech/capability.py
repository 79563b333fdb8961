"""Capability detection for the local speech engines.

Each ``detect_*`` function probes one engine once and returns either
``Available(handle)`` or ``Unavailable(reason)``. Callers hold on to the
handle instead of probing ambient globals on every action.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from src.core.config import get_settings
from src.core.exceptions import UnsupportedCapabilityError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Available:
    """The engine is usable through ``handle``."""

    handle: Any


@dataclass(frozen=True)
class Unavailable:
    """The engine cannot be used on this machine."""

    reason: str


Capability = Available | Unavailable


def require(capability: Capability, feature: str) -> Any:
    """Return the handle of an available capability.

    Raises:
        UnsupportedCapabilityError: If the capability is unavailable.
    """
    if isinstance(capability, Available):
        return capability.handle
    raise UnsupportedCapabilityError(feature, capability.reason)


def _probe(feature: str, build: Callable[[], Any]) -> Capability:
    try:
        return Available(build())
    except ImportError as exc:
        reason = f"missing dependency ({exc.name or exc}); install with: pip install 'suara[voice]'"
    except (AttributeError, OSError, RuntimeError) as exc:
        reason = str(exc) or type(exc).__name__
    logger.warning("%s unavailable: %s", feature, reason)
    return Unavailable(reason)


def _check_microphone() -> None:
    import speech_recognition as sr

    # Raises AttributeError when PyAudio is not installed
    sr.Microphone.get_pyaudio()
    if not sr.Microphone.list_microphone_names():
        raise OSError("no microphone found")


def detect_synthesis(settings=None) -> Capability:
    """Probe the pyttsx3 text-to-speech engine."""
    from src.services.speech.synthesis import SpeechSynthesizer

    settings = settings or get_settings()
    return _probe("Speech synthesis", lambda: SpeechSynthesizer(language=settings.speech_language))


def detect_recognition(settings=None) -> Capability:
    """Probe speech recognition (SpeechRecognition + a microphone)."""
    from src.services.speech.recognition import SpeechRecognitionEngine

    settings = settings or get_settings()

    def build():
        _check_microphone()
        return SpeechRecognitionEngine(
            language=settings.speech_language,
            sample_rate=settings.sample_rate,
        )

    return _probe("Speech recognition", build)


def detect_recording(settings=None) -> Capability:
    """Probe microphone recording."""
    from src.services.audio.capture import AudioCapture

    settings = settings or get_settings()

    def build():
        _check_microphone()
        return AudioCapture(sample_rate=settings.sample_rate)

    return _probe("Audio recording", build)
