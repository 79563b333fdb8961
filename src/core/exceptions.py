"""
Suara exception hierarchy.

All application-specific exceptions inherit from SuaraError,
enabling centralized error handling in the API middleware layer
and uniform alerts in the UI.
"""

from datetime import UTC, datetime
from typing import Any


class SuaraError(Exception):
    """Base exception for all Suara errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "SUARA_ERROR",
        status_code: int = 500,
        details: Any = None,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.details = details
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class BadRequestError(SuaraError):
    """Raised when an upload is missing, malformed or rejected."""

    def __init__(self, detail: str = "Bad request", code: str = "BAD_REQUEST") -> None:
        super().__init__(detail=detail, code=code, status_code=400)


class InvalidAudioError(BadRequestError):
    """Raised when a selected or uploaded file is not audio."""

    def __init__(self, detail: str = "File is not an audio file") -> None:
        super().__init__(detail=detail, code="INVALID_AUDIO")


class EmptyInputError(SuaraError):
    """Raised when an action is invoked with no text or audio present."""

    def __init__(self, detail: str = "Nothing to process") -> None:
        super().__init__(detail=detail, code="EMPTY_INPUT", status_code=400)


class PermissionDeniedError(SuaraError):
    """Raised when microphone or clipboard access is refused or unavailable."""

    def __init__(self, detail: str = "Permission denied") -> None:
        super().__init__(detail=detail, code="PERMISSION_DENIED", status_code=403)


class RecordingAlreadyActiveError(SuaraError):
    """Raised when trying to start a recording while one is already active."""

    def __init__(self) -> None:
        super().__init__(
            detail="A recording is already active",
            code="RECORDING_ALREADY_ACTIVE",
            status_code=409,
        )


class RecordingNotActiveError(SuaraError):
    """Raised when stopping a recording that was never started."""

    def __init__(self) -> None:
        super().__init__(
            detail="No recording is active",
            code="RECORDING_NOT_ACTIVE",
            status_code=409,
        )


class UnsupportedCapabilityError(SuaraError):
    """Raised when a speech capability is missing on this machine."""

    def __init__(self, feature: str, reason: str = "") -> None:
        detail = f"{feature} is not supported"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(
            detail=detail,
            code="UNSUPPORTED_CAPABILITY",
            status_code=501,
        )


class ExternalServiceError(SuaraError):
    """Raised when a hosted service or speech engine call fails."""

    def __init__(
        self,
        detail: str = "External service failed",
        code: str = "EXTERNAL_SERVICE_ERROR",
        details: Any = None,
    ) -> None:
        super().__init__(detail=detail, code=code, status_code=500, details=details)


class TranscriptionError(ExternalServiceError):
    """Raised when STT processing fails."""

    def __init__(self, detail: str = "Transcription failed") -> None:
        super().__init__(detail=detail, code="TRANSCRIPTION_ERROR")


class SynthesisError(ExternalServiceError):
    """Raised when TTS rendering fails."""

    def __init__(self, detail: str = "Speech synthesis failed") -> None:
        super().__init__(detail=detail, code="SYNTHESIS_ERROR")
