# src/basectl/infrastructure/http/errors.py
# Copyright (c) Basectl.
# SPDX-License-Identifier: MIT
"""HTTP error envelopes.

Summary:
    Aborts raised by controllers surface as `HTTPException`s. This module turns
    them (and anything unexpected) into the JSON error envelope:

        {"error": {"code", "http_status", "message", "details"?, "trace_id"?}}

    `install_error_handlers()` wires the handlers into a Starlette or FastAPI
    application; `ChainApp` uses `http_exception_response()` directly.
"""

from __future__ import annotations

from typing import Any

from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from basectl.infrastructure.logging.logger import get_json_logger

__all__ = [
    "error_envelope",
    "handle_http_exception",
    "handle_unhandled_exception",
    "http_exception_response",
    "install_error_handlers",
]

_LOGGER = get_json_logger(__name__)


def _trace_id(request: Request | None) -> str | None:
    if request is None:
        return None
    return getattr(getattr(request, "state", None), "request_id", None)


def error_envelope(
    *,
    code: str,
    http_status: int,
    message: str,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    err: dict[str, Any] = {
        "code": code,
        "http_status": http_status,
        "message": message,
    }
    if details is not None:
        err["details"] = details
    if trace_id is not None:
        err["trace_id"] = trace_id
    return {"error": err}


def http_exception_response(
    exc: HTTPException,
    *,
    trace_id: str | None = None,
    headers: dict[str, str] | None = None,
) -> Response:
    """Render an `HTTPException` as an error-envelope response."""
    payload = error_envelope(
        code="HTTP_ERROR",
        http_status=exc.status_code,
        message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
        details=None if isinstance(exc.detail, str) else {"detail": exc.detail},
        trace_id=trace_id,
    )
    merged = dict(headers or {})
    merged.update(exc.headers or {})
    return JSONResponse(status_code=exc.status_code, content=payload, headers=merged or None)


async def handle_http_exception(request: Request, exc: HTTPException) -> Response:
    return http_exception_response(exc, trace_id=_trace_id(request))


async def handle_unhandled_exception(request: Request, exc: Exception) -> Response:
    _LOGGER.error(
        "unhandled_exception",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"path": request.url.path},
    )
    payload = error_envelope(
        code="INTERNAL_ERROR",
        http_status=500,
        message="Internal server error",
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=500, content=payload)


def install_error_handlers(app: Starlette) -> None:
    """Register the envelope handlers on ``app``."""
    app.add_exception_handler(HTTPException, handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unhandled_exception)
