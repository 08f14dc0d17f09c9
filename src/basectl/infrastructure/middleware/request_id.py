# src/basectl/infrastructure/middleware/request_id.py
# Copyright (c) Basectl.
# SPDX-License-Identifier: MIT
"""Request ID Middleware.

Summary:
    Chain stage that assigns a correlation ID to each request and echoes it on
    the response. Uses an incoming request-id header if present and valid;
    otherwise generates a new UUID4.

Contract:
    • Reads:  X-Request-ID (optional; header name from ChainApp settings)
    • Writes: X-Request-ID (always written)
    • Stores: ctx.state["request_id"], ctx.state["request_id_header"] and
              request.state.request_id
    • Enriches logs via contextvars (request_id)
"""

from __future__ import annotations

import re
import uuid
from typing import Final

from basectl.application.interfaces.context_port import Continuation, Middleware
from basectl.config.settings import get_settings
from basectl.infrastructure.http.context import RequestContext
from basectl.infrastructure.logging.logger import set_request_context

__all__ = ["make_request_id_middleware", "request_id_middleware"]

_SAFE_RE: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9\-_.:@]{1,128}$")


def _coerce_request_id(raw: str | None) -> str:
    """Return a safe request id, preferring caller-provided values.

    Args:
        raw: Incoming request id header value, if any.

    Returns:
        Validated or generated request id string.
    """
    if raw and _SAFE_RE.match(raw):
        return raw
    return str(uuid.uuid4())


def make_request_id_middleware(header: str | None = None) -> Middleware:
    """Build a request-id stage bound to ``header``.

    Args:
        header: Header name. Defaults to the name the hosting `ChainApp`
            placed in ``ctx.state["request_id_header"]``, then to the
            ``request_id_header`` setting.

    Returns:
        Chain middleware.
    """

    async def middleware(ctx: RequestContext, call_next: Continuation | None = None) -> None:
        name = (
            header
            or ctx.state.get("request_id_header")
            or get_settings().request_id_header
        )
        ctx.state["request_id_header"] = name
        incoming = ctx.request.headers.get(name) if ctx.request is not None else None
        req_id = _coerce_request_id(incoming)

        ctx.state["request_id"] = req_id
        if ctx.request is not None:
            ctx.request.state.request_id = req_id
        set_request_context(request_id=req_id)

        ctx.set(name, req_id)
        if call_next is not None:
            await call_next()

    return middleware  # type: ignore[return-value]


request_id_middleware = make_request_id_middleware()
