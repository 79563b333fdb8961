"""
Speech module - Local synthesis and recognition engines.
"""

from .capability import (
    Available,
    Capability,
    Unavailable,
    detect_recognition,
    detect_recording,
    detect_synthesis,
    require,
)
from .recognition import NO_SPEECH, RecognitionSession, SpeechRecognitionEngine
from .synthesis import SpeechSynthesizer, pick_default_voice

__all__ = [
    "NO_SPEECH",
    "Available",
    "Capability",
    "RecognitionSession",
    "SpeechRecognitionEngine",
    "SpeechSynthesizer",
    "Unavailable",
    "detect_recognition",
    "detect_recording",
    "detect_synthesis",
    "pick_default_voice",
    "require",
]
