# src/basectl/infrastructure/http/app.py
# Copyright (c) Basectl.
# SPDX-License-Identifier: MIT
"""ASGI endpoint for a middleware chain.

Summary:
    `ChainApp` is a plain ASGI application wrapping a composed chain of
    ``async (ctx, call_next)`` middleware, typically ending in a controller's
    ``as_middleware()``. Mount it as a Starlette route endpoint; because it is
    not a function endpoint, Starlette forwards every request method to it and
    the controller decides what is allowed.

        Route("/items", ChainApp(request_id_middleware, ItemsController.as_middleware()))

Behavior:
    • One `RequestContext` per request; rendered once the chain completes.
    • `HTTPException` aborts become error-envelope responses carrying the
      request id (if a stage stored one under ``ctx.state["request_id"]``).
    • Any other exception is logged and re-raised to the host.
"""

from __future__ import annotations

from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from basectl.application.interfaces.context_port import Middleware
from basectl.config.settings import Settings, get_settings
from basectl.infrastructure.http.chain import compose
from basectl.infrastructure.http.context import RequestContext
from basectl.infrastructure.http.errors import http_exception_response
from basectl.infrastructure.logging.logger import get_json_logger

__all__ = ["ChainApp"]

_LOGGER = get_json_logger(__name__)


class ChainApp:
    """ASGI application running a middleware chain per HTTP request.

    Args:
        *middleware: Chain stages in execution order.
        settings: Optional settings; defaults to `get_settings()` on first use.

    Raises:
        ValueError: If no middleware is given.
    """

    def __init__(self, *middleware: Middleware, settings: Settings | None = None) -> None:
        if not middleware:
            raise ValueError("ChainApp needs at least one middleware")
        self.middleware = middleware
        self._chain = compose(middleware)
        self._settings = settings

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            raise RuntimeError(f"ChainApp only serves HTTP, got scope type {scope['type']!r}")

        request = Request(scope, receive)
        ctx = RequestContext(request)
        ctx.state["request_id_header"] = self.settings.request_id_header
        try:
            await self._chain(ctx)
            response = ctx.render()
        except HTTPException as exc:
            response = self._error_response(ctx, exc)
        except Exception:
            _LOGGER.exception(
                "chain_failed",
                extra={"method": ctx.method, "path": ctx.path},
            )
            raise
        await response(scope, receive, send)

    def _error_response(self, ctx: RequestContext, exc: HTTPException) -> Response:
        request_id = ctx.state.get("request_id")
        name = ctx.state.get("request_id_header") or self.settings.request_id_header
        headers = {name: request_id} if request_id else None
        return http_exception_response(exc, trace_id=request_id, headers=headers)
