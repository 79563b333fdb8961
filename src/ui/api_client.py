"""
Synchronous HTTP client for the Suara transcription relay.

Uses ``httpx.Client`` (sync) because Streamlit scripts run synchronously.
"""

import logging

import httpx
import streamlit as st

from src.core.exceptions import EmptyInputError
from src.core.models import AudioBlob

logger = logging.getLogger(__name__)


class APIError(Exception):
    """User-friendly API error with categorized message.

    Categories: "connection", "timeout", "http", "network", "unknown".
    Used by the UI to display appropriate error messages.
    """

    def __init__(self, message: str, category: str = "unknown") -> None:
        self.message = message
        self.category = category
        super().__init__(message)


class NetworkError(APIError):
    """The relay could not be reached (refused, timed out, dropped)."""


class ServerError(APIError):
    """The relay answered with a failure status or an unusable body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message, category="http")


class APIClient:
    """Thin synchronous wrapper around httpx for calling the relay.

    All methods return parsed values or raise ``APIError`` subclasses with
    user-friendly messages for display in the UI. Each call is a single
    attempt; retrying is left to the user.
    """

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 120.0) -> None:
        """Initialize the HTTP client.

        Args:
            base_url: Base URL of the Suara FastAPI backend.
            timeout: Seconds to wait for the relay (transcription can be slow).
        """
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self._base_url, timeout=timeout)

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request with user-friendly error handling.

        Args:
            method: HTTP method name ("get", "post").
            path: API endpoint path (e.g. "/api/transcribe").
            **kwargs: Passed through to httpx (files, params, timeout, etc.).

        Returns:
            The httpx Response object with a successful status code.

        Raises:
            NetworkError: On connection, timeout or other transport errors.
            ServerError: On a non-2xx HTTP status.
        """
        try:
            resp = getattr(self._client, method)(path, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.ConnectError:
            raise NetworkError(
                "Backend server is not running. "
                "Start it with: `uvicorn src.api.app:app --reload --port 8000`",
                category="connection",
            ) from None
        except httpx.TimeoutException:
            raise NetworkError(
                "Request timed out. The server may be overloaded.",
                category="timeout",
            ) from None
        except httpx.HTTPStatusError as exc:
            try:
                body = exc.response.json()
                detail = body.get("error") or body.get("detail") or exc.response.text
            except Exception:
                detail = exc.response.text or str(exc)
            raise ServerError(str(detail), status_code=exc.response.status_code) from None
        except httpx.HTTPError as exc:
            raise NetworkError(f"Network error: {exc}", category="network") from None

    # -- health --

    def health_check(self) -> dict:
        resp = self._request("get", "/health")
        try:
            return resp.json()
        except ValueError:
            raise ServerError(
                "Backend returned an unreadable health response.", status_code=resp.status_code
            ) from None

    def check_connection(self) -> tuple[bool, str]:
        """Check if the backend is reachable. Returns (ok, message)."""
        try:
            self.health_check()
            return True, "Connected"
        except APIError as exc:
            return False, exc.message

    # -- transcription --

    def transcribe(self, blob: AudioBlob | None) -> str:
        """Upload an audio blob to the relay and return its transcript.

        Raises:
            EmptyInputError: If no (or an empty) blob was supplied.
            NetworkError: If the relay is unreachable.
            ServerError: If the relay reports a failure.
        """
        if blob is None or not blob.data:
            raise EmptyInputError("Select or record an audio file first")

        files = {"audio": (blob.name, blob.data, blob.mime_type)}
        resp = self._request("post", "/api/transcribe", files=files)
        try:
            body = resp.json()
        except ValueError:
            body = None
        if not isinstance(body, dict) or "text" not in body:
            raise ServerError("Failed to transcribe.", status_code=resp.status_code)
        logger.info("Transcribed %s (%d bytes)", blob.name, blob.size)
        return body["text"]


@st.cache_resource
def get_api_client(base_url: str = "http://localhost:8000", timeout: float = 120.0) -> APIClient:
    """Return a cached APIClient, keyed by base_url.

    Uses Streamlit's ``cache_resource`` to persist the client across reruns.
    When the base URL changes (e.g. user updates sidebar), a new client
    is created automatically because the cache key includes the parameter.
    """
    return APIClient(base_url=base_url, timeout=timeout)
