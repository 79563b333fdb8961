"""
Global error handling middleware for the FastAPI application.

Catches SuaraError subclasses, HTTP errors raised by Starlette (e.g. an
unparseable multipart body), Pydantic validation errors, and unhandled
exceptions, converting them into a consistent JSON envelope with an
``error`` message.
"""

from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.exceptions import SuaraError
from src.core.models import ErrorResponse


def _envelope(error: str, code: str, timestamp: str | None = None, details=None) -> dict:
    body = ErrorResponse(
        error=error,
        code=code,
        timestamp=timestamp or datetime.now(UTC).isoformat(),
        details=None if details is None else str(details),
    )
    return body.model_dump(exclude_none=True)


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application.

    Registers four handlers in priority order:
    1. ``SuaraError`` — maps domain errors to structured JSON responses.
    2. ``HTTPException`` — framework errors such as malformed bodies.
    3. ``RequestValidationError`` — Pydantic validation failures (422).
    4. ``Exception`` — catch-all for unexpected server errors (500).

    Args:
        app: The FastAPI application instance to register handlers on.
    """

    @app.exception_handler(SuaraError)
    async def suara_error_handler(_request: Request, exc: SuaraError) -> JSONResponse:
        """Convert domain-specific errors into a JSON error envelope."""
        return JSONResponse(
            status_code=exc.status_code,
            content=_envelope(exc.detail, exc.code, exc.timestamp, exc.details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Keep framework-level HTTP errors in the same envelope."""
        return JSONResponse(
            status_code=exc.status_code,
            content=_envelope(str(exc.detail), "HTTP_ERROR"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle Pydantic request validation errors (malformed body/params)."""
        return JSONResponse(
            status_code=422,
            content=_envelope(str(exc), "VALIDATION_ERROR"),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(_request: Request, _exc: Exception) -> JSONResponse:
        """Catch-all handler — prevents stack traces from leaking to clients."""
        return JSONResponse(
            status_code=500,
            content=_envelope("Internal server error", "INTERNAL_ERROR"),
        )
