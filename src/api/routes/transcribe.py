"""
Audio transcription relay endpoint.

Accepts a multipart upload with a single ``audio`` file field, writes it to
a uniquely named temporary file, forwards it to the configured STT provider
with a fixed language hint and returns ``{"text": ...}``.

The temporary file is removed on every exit path: success, provider error,
timeout or client disconnect.
"""

import asyncio
import logging
import mimetypes
import os
import tempfile
from pathlib import Path

from fastapi import APIRouter, Request
from starlette.datastructures import UploadFile

from src.core.config import get_settings
from src.core.exceptions import BadRequestError, ExternalServiceError, InvalidAudioError, SuaraError
from src.core.models import ErrorResponse, TranscriptionResponse
from src.services.audio.processor import is_audio_mime
from src.services.transcription import create_stt

logger = logging.getLogger(__name__)

router = APIRouter(tags=["transcription"])

_ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}

_READ_CHUNK_BYTES = 1024 * 1024


def _suffix_for(upload: UploadFile) -> str:
    """Pick a temp-file extension; hosted APIs detect the format from it."""
    suffix = Path(upload.filename or "").suffix.lower()
    if 1 < len(suffix) <= 6 and suffix[1:].isalnum():
        return suffix
    if upload.content_type:
        guessed = mimetypes.guess_extension(upload.content_type.split(";", 1)[0].strip())
        if guessed:
            return guessed
    return ".wav"


async def _read_upload(request: Request) -> UploadFile:
    """Extract and validate the ``audio`` field of a multipart body.

    Raises:
        BadRequestError: If the field is missing or is not a file.
        InvalidAudioError: If the file declares a non-audio content type.
    """
    form = await request.form()
    audio = form.get("audio")
    if audio is None:
        raise BadRequestError("No file uploaded")
    if not isinstance(audio, UploadFile):
        raise BadRequestError("Field 'audio' must be a file upload")
    if audio.content_type and not is_audio_mime(audio.content_type):
        raise InvalidAudioError(f"Unsupported content type: {audio.content_type}")
    return audio


async def _persist(upload: UploadFile, max_bytes: int, tmp_dir: str | None) -> tuple[Path, int]:
    """Stream the upload into a fresh temporary file.

    Returns:
        Tuple of (temp file path, size in bytes).

    Raises:
        BadRequestError: If the upload is empty or larger than ``max_bytes``.
    """
    fd, name = tempfile.mkstemp(prefix="suara-", suffix=_suffix_for(upload), dir=tmp_dir)
    path = Path(name)
    size = 0
    try:
        with os.fdopen(fd, "wb") as fh:
            while chunk := await upload.read(_READ_CHUNK_BYTES):
                size += len(chunk)
                if size > max_bytes:
                    raise BadRequestError(
                        f"Audio file too large (limit {max_bytes // (1024 * 1024)} MB)"
                    )
                fh.write(chunk)
        if size == 0:
            raise BadRequestError("Uploaded audio file is empty")
    except BaseException:
        path.unlink(missing_ok=True)
        raise
    return path, size


@router.post("/transcribe", response_model=TranscriptionResponse, responses=_ERROR_RESPONSES)
@router.post(
    "/whisper",
    response_model=TranscriptionResponse,
    responses=_ERROR_RESPONSES,
    include_in_schema=False,
)
async def transcribe_audio(request: Request) -> TranscriptionResponse:
    """Transcribe one uploaded audio file.

    Responses:
        200: ``{"text": "..."}``
        400: ``{"error": "..."}`` when the ``audio`` field is absent or invalid.
        500: ``{"error": "Failed to process audio", "details": ...}`` when the
        transcription service fails, is unreachable or times out.
    """
    settings = get_settings()
    upload = await _read_upload(request)
    path, size = await _persist(
        upload,
        max_bytes=settings.max_upload_mb * 1024 * 1024,
        tmp_dir=settings.upload_tmp_dir or None,
    )
    logger.info(
        "Relaying %s (%s, %d bytes) to provider=%s",
        upload.filename,
        upload.content_type,
        size,
        settings.stt_provider,
    )

    timeout = settings.transcription_timeout or None
    stt = None
    try:
        stt = create_stt(provider=settings.stt_provider)
        result = await asyncio.wait_for(
            stt.transcribe(str(path), language=settings.transcription_language or None),
            timeout=timeout,
        )
    except TimeoutError as exc:
        logger.error("Transcription timed out after %ss", timeout)
        raise ExternalServiceError(
            "Failed to process audio", details=f"Transcription timed out after {timeout}s"
        ) from exc
    except Exception as exc:
        logger.error("Error transcribing audio: %s", exc)
        details = exc.detail if isinstance(exc, SuaraError) else str(exc)
        raise ExternalServiceError("Failed to process audio", details=details) from exc
    finally:
        path.unlink(missing_ok=True)
        if stt is not None:
            await stt.close()

    return TranscriptionResponse(text=result.get("text", ""))
