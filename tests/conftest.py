"""Shared pytest fixtures for the Suara test suite.

Provides common test fixtures used across unit and integration tests,
including a mock STT provider, PCM/WAV samples and fakes for the
microphone and the pyttsx3 engine.
"""

import io
import struct
import wave
from unittest.mock import AsyncMock

import pytest

from src.core.config import get_settings
from tests.fakes import FakeMicrophone, FakeTTSEngine, make_voice

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop the cached Settings so env changes in one test do not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# STT Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_stt():
    """Create a mock STT provider for unit testing.

    Returns:
        AsyncMock: A mock implementing the BaseSTT interface with a
        default transcribe response.
    """
    from src.services.transcription.base import BaseSTT

    stt = AsyncMock(spec=BaseSTT)
    stt.transcribe.return_value = {
        "text": "Halo dunia",
        "language": "id",
        "confidence": 0.95,
    }
    return stt


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_pcm_bytes():
    """Generate 1 second of 440Hz sine-wave PCM audio (16kHz, 16-bit, mono).

    Returns:
        bytes: Raw PCM audio data.
    """
    import math

    sample_rate = 16000
    duration = 1.0
    frequency = 440.0
    amplitude = 16000  # ~50% of max int16

    samples = []
    for i in range(int(sample_rate * duration)):
        value = int(amplitude * math.sin(2 * math.pi * frequency * i / sample_rate))
        samples.append(struct.pack("<h", value))
    return b"".join(samples)


@pytest.fixture
def sample_wav_bytes(sample_pcm_bytes):
    """The sine-wave sample wrapped in an in-memory WAV container."""
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(16000)
        wf.writeframes(sample_pcm_bytes)
    return buf.getvalue()


@pytest.fixture
def sample_audio_path(tmp_path, sample_wav_bytes):
    """Write the WAV sample to a temporary file.

    Returns:
        str: Path to the temporary WAV file.
    """
    wav_path = tmp_path / "test_audio.wav"
    wav_path.write_bytes(sample_wav_bytes)
    return str(wav_path)


# ---------------------------------------------------------------------------
# Hardware fakes
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_microphone():
    """A FakeMicrophone preloaded with four 20 ms chunks of tone."""
    chunk = struct.pack("<h", 1000) * 320
    return FakeMicrophone(chunks=[chunk] * 4)


@pytest.fixture
def fake_tts_engine():
    """FakeTTSEngine with an English and an Indonesian voice."""
    return FakeTTSEngine(
        voices=[
            make_voice("en", "English", [b"\x05en-us"]),
            make_voice("id", "Indonesian", [b"\x05id"]),
        ]
    )
