"""Tests for speech capability detection and the ``require`` guard."""

import sys
from unittest.mock import MagicMock, patch

import pytest

from src.core.config import Settings
from src.core.exceptions import UnsupportedCapabilityError
from src.services.audio.capture import AudioCapture
from src.services.speech import capability
from src.services.speech.capability import (
    Available,
    Unavailable,
    detect_recording,
    detect_synthesis,
    require,
)


@pytest.fixture
def settings():
    return Settings(_env_file=None)


class TestRequire:
    def test_returns_handle(self):
        handle = object()
        assert require(Available(handle), "Speech synthesis") is handle

    def test_unavailable_raises_with_reason(self):
        with pytest.raises(UnsupportedCapabilityError) as exc_info:
            require(Unavailable("no microphone found"), "Audio recording")
        assert exc_info.value.status_code == 501
        assert "no microphone found" in exc_info.value.detail


class TestProbe:
    def test_success_is_available(self):
        assert capability._probe("thing", lambda: 42) == Available(42)

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (OSError("no microphone found"), "no microphone found"),
            (RuntimeError("eSpeak not installed"), "eSpeak not installed"),
            (ImportError("no pyaudio", name="pyaudio"), "pip install 'suara[voice]'"),
        ],
    )
    def test_failures_are_unavailable(self, error, expected):
        def _build():
            raise error

        result = capability._probe("thing", _build)
        assert isinstance(result, Unavailable)
        assert expected in result.reason


class TestDetect:
    def test_synthesis_available(self, settings, fake_tts_engine):
        fake_pyttsx3 = MagicMock()
        fake_pyttsx3.init.return_value = fake_tts_engine
        with patch.dict(sys.modules, {"pyttsx3": fake_pyttsx3}):
            result = detect_synthesis(settings)
        assert isinstance(result, Available)
        assert result.handle.list_voices()[1].id == "id"

    def test_synthesis_driver_missing(self, settings):
        fake_pyttsx3 = MagicMock()
        fake_pyttsx3.init.side_effect = RuntimeError("could not load driver")
        with patch.dict(sys.modules, {"pyttsx3": fake_pyttsx3}):
            result = detect_synthesis(settings)
        assert result == Unavailable("could not load driver")

    def test_recording_available(self, settings):
        with patch.object(capability, "_check_microphone"):
            result = detect_recording(settings)
        assert isinstance(result, Available)
        assert isinstance(result.handle, AudioCapture)

    def test_recording_without_microphone(self, settings):
        with patch.object(
            capability, "_check_microphone", side_effect=OSError("no microphone found")
        ):
            result = detect_recording(settings)
        assert result == Unavailable("no microphone found")
