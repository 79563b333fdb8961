"""Integration test fixtures for the transcription relay.

Provides an async HTTP client bound to a fresh app whose uploads land in a
per-test temporary directory and whose STT provider is a mock.
"""

from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.app import create_app
from src.core.config import get_settings


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """Directory the relay writes its temporary upload files into."""
    directory = tmp_path / "uploads"
    directory.mkdir()
    monkeypatch.setenv("UPLOAD_TMP_DIR", str(directory))
    monkeypatch.setenv("STT_PROVIDER", "openai")
    monkeypatch.setenv("TRANSCRIPTION_LANGUAGE", "id")
    get_settings.cache_clear()
    return directory


@pytest.fixture
def app(upload_dir):
    """Create a fresh FastAPI application instance."""
    return create_app()


@pytest.fixture
def stt_provider(mock_stt):
    """Route the relay's provider factory to the mock STT."""
    with patch("src.api.routes.transcribe.create_stt", return_value=mock_stt) as factory:
        factory.stt = mock_stt
        yield factory


@pytest.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
