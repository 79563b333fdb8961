"""Integration tests for POST /api/transcribe (and its /api/whisper alias).

Drives the relay end to end through the ASGI app with a mock STT provider:
request validation, the success path, provider failures and timeouts, and
that the temporary upload file never outlives the request.
"""

import asyncio
from pathlib import Path

import pytest

from src.core.config import get_settings
from src.core.exceptions import TranscriptionError


def _audio(data: bytes, name: str = "recording.wav", mime: str = "audio/wav") -> dict:
    return {"audio": (name, data, mime)}


# ---------------------------------------------------------------------------
# Request validation (400)
# ---------------------------------------------------------------------------


class TestBadRequests:
    async def test_missing_audio_field(self, async_client, stt_provider):
        resp = await async_client.post(
            "/api/transcribe", files={"file": ("a.wav", b"RIFF", "audio/wav")}
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "No file uploaded"
        stt_provider.assert_not_called()

    async def test_empty_body(self, async_client, stt_provider):
        resp = await async_client.post("/api/transcribe")
        assert resp.status_code == 400
        assert "error" in resp.json()

    async def test_audio_field_not_a_file(self, async_client, stt_provider):
        resp = await async_client.post("/api/transcribe", data={"audio": "not a file"})
        assert resp.status_code == 400
        assert "must be a file" in resp.json()["error"]

    async def test_non_audio_content_type(self, async_client, stt_provider):
        resp = await async_client.post(
            "/api/transcribe", files=_audio(b"hello", "notes.txt", "text/plain")
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_AUDIO"

    async def test_empty_file(self, async_client, stt_provider, upload_dir):
        resp = await async_client.post("/api/transcribe", files=_audio(b""))
        assert resp.status_code == 400
        assert "empty" in resp.json()["error"]
        assert list(upload_dir.iterdir()) == []

    async def test_file_too_large(self, async_client, stt_provider, upload_dir, monkeypatch):
        monkeypatch.setenv("MAX_UPLOAD_MB", "1")
        get_settings.cache_clear()

        resp = await async_client.post(
            "/api/transcribe", files=_audio(b"\x00" * (1024 * 1024 + 1))
        )

        assert resp.status_code == 400
        assert "too large" in resp.json()["error"]
        assert list(upload_dir.iterdir()) == []
        stt_provider.stt.transcribe.assert_not_called()

    async def test_malformed_multipart(self, async_client, stt_provider):
        resp = await async_client.post(
            "/api/transcribe",
            content=b"garbage without boundaries",
            headers={"Content-Type": "multipart/form-data; boundary=xyz"},
        )
        assert resp.status_code == 400
        assert "error" in resp.json()


# ---------------------------------------------------------------------------
# Success path
# ---------------------------------------------------------------------------


class TestTranscribe:
    async def test_returns_text(self, async_client, stt_provider, sample_wav_bytes):
        resp = await async_client.post("/api/transcribe", files=_audio(sample_wav_bytes))
        assert resp.status_code == 200
        assert resp.json() == {"text": "Halo dunia"}

    async def test_provider_gets_file_and_language(
        self, async_client, stt_provider, sample_wav_bytes, upload_dir
    ):
        seen = {}

        async def _transcribe(audio_path, **kwargs):
            path = Path(audio_path)
            seen["parent"] = path.parent
            seen["suffix"] = path.suffix
            seen["data"] = path.read_bytes()
            seen["language"] = kwargs.get("language")
            return {"text": "Selamat pagi"}

        stt_provider.stt.transcribe.side_effect = _transcribe

        resp = await async_client.post("/api/transcribe", files=_audio(sample_wav_bytes))

        assert resp.json() == {"text": "Selamat pagi"}
        assert seen["parent"] == upload_dir
        assert seen["suffix"] == ".wav"
        assert seen["data"] == sample_wav_bytes
        assert seen["language"] == "id"
        stt_provider.assert_called_once_with(provider="openai")
        stt_provider.stt.close.assert_awaited_once()

    async def test_webm_recording_accepted(self, async_client, stt_provider):
        resp = await async_client.post(
            "/api/transcribe", files=_audio(b"\x1aE\xdf\xa3webm", "audio.webm", "video/webm")
        )
        assert resp.status_code == 200

    async def test_whisper_alias(self, async_client, stt_provider, sample_wav_bytes):
        resp = await async_client.post("/api/whisper", files=_audio(sample_wav_bytes))
        assert resp.status_code == 200
        assert resp.json()["text"] == "Halo dunia"

    async def test_temp_file_removed(self, async_client, stt_provider, sample_wav_bytes, upload_dir):
        await async_client.post("/api/transcribe", files=_audio(sample_wav_bytes))
        assert list(upload_dir.iterdir()) == []


# ---------------------------------------------------------------------------
# Provider failures (500)
# ---------------------------------------------------------------------------


class TestProviderFailures:
    @pytest.mark.parametrize(
        "error",
        [
            TranscriptionError("Transcription service unreachable: connection refused"),
            RuntimeError("boom"),
        ],
    )
    async def test_provider_error_is_500(
        self, async_client, stt_provider, sample_wav_bytes, upload_dir, error
    ):
        stt_provider.stt.transcribe.side_effect = error

        resp = await async_client.post("/api/transcribe", files=_audio(sample_wav_bytes))

        assert resp.status_code == 500
        body = resp.json()
        assert body["error"] == "Failed to process audio"
        assert "text" not in body
        assert body["details"]
        assert list(upload_dir.iterdir()) == []
        stt_provider.stt.close.assert_awaited_once()

    async def test_timeout_is_500(
        self, async_client, stt_provider, sample_wav_bytes, upload_dir, monkeypatch
    ):
        monkeypatch.setenv("TRANSCRIPTION_TIMEOUT", "0.05")
        get_settings.cache_clear()

        async def _hang(audio_path, **kwargs):
            await asyncio.sleep(5)
            return {"text": "too late"}

        stt_provider.stt.transcribe.side_effect = _hang

        resp = await async_client.post("/api/transcribe", files=_audio(sample_wav_bytes))

        assert resp.status_code == 500
        assert "timed out" in resp.json()["details"]
        assert list(upload_dir.iterdir()) == []
        stt_provider.stt.close.assert_awaited_once()

    async def test_unknown_provider_is_500(
        self, async_client, sample_wav_bytes, upload_dir, monkeypatch
    ):
        monkeypatch.setenv("STT_PROVIDER", "carrier-pigeon")
        get_settings.cache_clear()

        resp = await async_client.post("/api/transcribe", files=_audio(sample_wav_bytes))

        assert resp.status_code == 500
        assert "carrier-pigeon" in resp.json()["details"]
        assert list(upload_dir.iterdir()) == []

    async def test_missing_api_key_is_500(
        self, async_client, sample_wav_bytes, upload_dir, monkeypatch
    ):
        monkeypatch.setenv("OPENAI_API_KEY", "")
        get_settings.cache_clear()

        resp = await async_client.post("/api/transcribe", files=_audio(sample_wav_bytes))

        assert resp.status_code == 500
        assert "OPENAI_API_KEY" in resp.json()["details"]
        assert list(upload_dir.iterdir()) == []
