"""
Pydantic v2 models shared by the relay, the speech services and the UI.

v0.1.0 — Health, AudioBlob, Transcription, Speech, Error
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


# ---------------------------------------------------------------------------
# Audio
# ---------------------------------------------------------------------------


class AudioBlob(BaseModel):
    """In-memory audio payload handed from capture to upload or download."""

    data: bytes
    mime_type: str = "audio/wav"
    name: str = "recording.wav"

    @property
    def size(self) -> int:
        return len(self.data)


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------


class TranscriptionSegment(BaseModel):
    """A single transcription segment with timestamps."""

    text: str
    start: float
    end: float
    avg_logprob: float = 0.0
    no_speech_prob: float = 0.0


class TranscriptionResult(BaseModel):
    """Outcome of one transcription request.

    ``error`` is set only on the UI side when the relay call failed.
    """

    text: str
    error: str | None = None
    language: str = "unknown"
    language_probability: float = 0.0
    confidence: float = 0.0
    duration: float = 0.0
    segments: list[TranscriptionSegment] = Field(default_factory=list)


class TranscriptionResponse(BaseModel):
    """POST /api/transcribe success body."""

    text: str


# ---------------------------------------------------------------------------
# Speech
# ---------------------------------------------------------------------------


class VoiceProfile(BaseModel):
    """A synthesis voice offered by the local TTS engine."""

    id: str
    name: str
    lang: str = ""


class SpeechOptions(BaseModel):
    """Tunables applied to every utterance."""

    rate: float = Field(1.0, ge=0.5, le=2.0)
    pitch: float = Field(1.0, ge=0.5, le=2.0)
    voice_id: str | None = None
    language: str = "id-ID"


class TranscriptEvent(BaseModel):
    """One item of a recognition session's event stream."""

    text: str = ""
    is_final: bool = False
    error: str | None = None


class GenerationStatus(StrEnum):
    """States of the one-shot TTS audio rendering."""

    idle = "idle"
    generating = "generating"
    done = "done"
    error = "error"


# ---------------------------------------------------------------------------
# Error
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the API."""

    error: str
    code: str = "SUARA_ERROR"
    timestamp: str | None = None
    details: str | None = None
