# src/basectl/infrastructure/middleware/access_log.py
# Copyright (c) Basectl.
# SPDX-License-Identifier: MIT
"""Access Log Middleware.

Summary:
    Chain stage emitting one structured access log entry per request, wrapped
    around everything downstream of it.

Fields:
    evt: Literal "access" marker.
    method: HTTP method.
    path: URL path (no scheme/host).
    status: Response status (the abort status if one was raised, else 500 on failure).
    elapsed_ms: Latency in milliseconds, rounded to two decimals.
    request_id: Correlation ID if a request-id stage ran earlier.
    ok: True if the downstream chain returned normally.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from starlette.exceptions import HTTPException

from basectl.application.interfaces.context_port import Continuation
from basectl.infrastructure.http.context import RequestContext
from basectl.infrastructure.logging.logger import get_json_logger

__all__ = ["access_log_middleware"]

_logger: logging.Logger = get_json_logger(__name__)


async def access_log_middleware(ctx: RequestContext, call_next: Continuation | None = None) -> None:
    """Log a single access record around the downstream chain.

    Raises:
        Exception: Re-raised after logging if the downstream chain fails.
    """
    t0 = time.perf_counter()
    ok = False
    status_code = 500
    try:
        if call_next is not None:
            await call_next()
        ok = True
        status_code = ctx.status
    except HTTPException as exc:
        status_code = exc.status_code
        raise
    finally:
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        log: dict[str, Any] = {
            "evt": "access",
            "method": ctx.method,
            "path": ctx.path,
            "status": status_code,
            "elapsed_ms": round(elapsed_ms, 2),
            "request_id": ctx.state.get("request_id"),
            "ok": ok,
        }
        _logger.info("access_log", extra=log)
