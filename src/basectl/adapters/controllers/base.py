# Copyright (c) Basectl.
# SPDX-License-Identifier: MIT
"""Base Controller.

Summary:
    Abstract base for resource controllers. A subclass implements one handler
    per HTTP method it supports (``get``, ``post``, ...); `dispatch()` picks the
    handler named after the request method, stores its return value as the
    response body and then runs the middleware continuation once.

    The default response status is 200. Handlers return only the body; status
    and header changes go through the ``set_response_*`` helpers.

Usage:
    class ItemsController(BaseController):
        async def get(self, ctx):
            return {"items": []}

    endpoint = ChainApp(ItemsController.as_middleware())

    ``as_middleware()`` builds a fresh controller for every request, so
    handlers may keep per-request state on ``self``.

Layer:
    adapters/controllers
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from http import HTTPStatus
from types import MappingProxyType
from typing import Any, ClassVar, Final, NoReturn

from fastapi import HTTPException
from starlette.exceptions import HTTPException as StarletteHTTPException

from basectl.application.interfaces.context_port import (
    Continuation,
    DiagnosticSink,
    HeaderValue,
    Middleware,
    RequestContextPort,
)
from basectl.config.settings import get_settings
from basectl.domain.enums.http_method import HttpMethod, parse_method
from basectl.domain.exceptions.controller import AbstractControllerError
from basectl.infrastructure.logging.logger import get_json_logger

__all__ = ["BaseController", "DEFAULT_ERROR_MESSAGE", "REPEATED_NEXT_MESSAGE"]

_LOGGER = get_json_logger(__name__)

DEFAULT_ERROR_MESSAGE: Final[str] = "An error occurred"
REPEATED_NEXT_MESSAGE: Final[str] = "The 'next' function was called, but it has already been run."


class BaseController:
    """Dispatch a request to the handler named after its HTTP method.

    Args:
        ctx: Request context borrowed from the host for this request.
        call_next: Optional continuation running the next middleware stage.
        logger: Sink for non-fatal diagnostics. Defaults to the module logger.

    Attributes:
        ctx: The request context.
        next_called: ``True`` once the continuation has completed.
        handlers: Per-class table of implemented methods to handler names,
            built when the subclass is defined.
        expose_error_messages: Class-level override of the
            ``expose_error_messages`` setting (``None`` defers to settings).
        warn_on_repeated_next: Class-level override of the
            ``warn_on_repeated_next`` setting (``None`` defers to settings).

    Raises:
        AbstractControllerError: If `BaseController` itself is instantiated.
    """

    handlers: ClassVar[Mapping[HttpMethod, str]] = MappingProxyType({})
    expose_error_messages: ClassVar[bool | None] = None
    warn_on_repeated_next: ClassVar[bool | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        table: dict[HttpMethod, str] = {}
        for method in HttpMethod:
            handler = getattr(cls, method.value, None)
            if handler is None:
                continue
            if not callable(handler):
                raise TypeError(
                    f"{cls.__name__}.{method.value} must be a callable handler, "
                    f"got {type(handler).__name__}"
                )
            table[method] = method.value
        cls.handlers = MappingProxyType(table)

    def __init__(
        self,
        ctx: RequestContextPort,
        call_next: Continuation | None = None,
        *,
        logger: DiagnosticSink | None = None,
    ) -> None:
        if type(self) is BaseController:
            raise AbstractControllerError()
        self.ctx = ctx
        self._next = call_next
        self.next_called = False
        self._logger: DiagnosticSink = logger if logger is not None else _LOGGER

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    @classmethod
    def as_middleware(cls) -> Middleware:
        """Return a middleware function that dispatches a new controller per request.

        Like Django's ``View.as_view()``, the result can be handed straight to
        the host's middleware chain.

        Returns:
            ``async (ctx, call_next=None) -> None``.

        Raises:
            AbstractControllerError: If called on `BaseController` itself.
        """
        if cls is BaseController:
            raise AbstractControllerError()

        async def middleware(
            ctx: RequestContextPort, call_next: Continuation | None = None
        ) -> None:
            controller = cls(ctx, call_next)
            await controller.dispatch()

        middleware.__name__ = f"{cls.__name__}_middleware"
        middleware.__qualname__ = f"{cls.__qualname__}.as_middleware.<locals>.middleware"
        return middleware

    async def dispatch(self) -> None:
        """Invoke the handler for the request method and set the response body.

        Raises:
            HTTPException: 400 for an unknown method, 501 for a method this
                controller does not implement, and the translated status of any
                handler or continuation failure.
        """
        token = (self.ctx.method or "").lower()
        method = parse_method(token)
        if method is None:
            self._abort(400, f"Invalid request method: {token.upper()}")

        handler_name = self.handlers.get(method)
        if handler_name is None:
            self._abort(501, f"{method.value.upper()} method not implemented")

        handler = getattr(self, handler_name)
        _LOGGER.debug(
            "controller_dispatch",
            extra={"controller": type(self).__name__, "method": method.value},
        )

        try:
            result = handler(self.ctx)
            if inspect.isawaitable(result):
                result = await result
            self.set_response_body(result)
            if not self.next_called:
                await self.next()
        except Exception as exc:
            status_code, message = self._describe_failure(exc)
            log_extra = {
                "controller": type(self).__name__,
                "method": method.value,
                "status": status_code,
            }
            if status_code >= 500:
                _LOGGER.exception("controller_handler_failed", extra=log_extra)
            else:
                _LOGGER.info("controller_request_aborted", extra=log_extra)
            self._abort(status_code, message)

    async def next(self) -> None:
        """Run the continuation unless it has already run.

        A repeated call is tolerated: the continuation is not invoked again
        and a warning goes to the diagnostic sink. Without a continuation this
        is a no-op.
        """
        if self._next is None:
            return
        if self.next_called:
            if self._should_warn_on_repeated_next():
                self._logger.warning(REPEATED_NEXT_MESSAGE)
            return
        await self._next()
        self.next_called = True

    # -------------------------------------------------------------------------
    # Response helpers
    # -------------------------------------------------------------------------

    def set_response_status(self, status_code: int | HTTPStatus) -> None:
        """Set the response HTTP status code."""
        self.ctx.status = int(status_code)

    def set_response_headers(self, headers: Mapping[str, HeaderValue]) -> None:
        """Merge ``headers`` into the response headers.

        Headers not named in ``headers`` are left untouched.
        """
        for name, value in headers.items():
            self.ctx.set(name, value)

    def set_response_body(self, body: Any) -> None:
        """Set the response body as-is; rendering is left to the host."""
        self.ctx.body = body

    def error(self, status_code: int | HTTPStatus, message: str) -> NoReturn:
        """Abort the request with a user-level error.

        The message is sent to the client, so it must not carry internals.

        Args:
            status_code: HTTP status code.
            message: Client-visible message.
        """
        self._abort(int(status_code), message)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _abort(self, status_code: int, message: str) -> NoReturn:
        self.ctx.throw(status_code, message)
        # throw() is required to raise; keep the abort terminal regardless.
        raise HTTPException(status_code=status_code, detail=message)

    def _describe_failure(self, exc: Exception) -> tuple[int, str]:
        """Map a handler failure to the status and message it is reported with."""
        if isinstance(exc, StarletteHTTPException):
            detail = exc.detail if isinstance(exc.detail, str) and exc.detail else None
            return exc.status_code, detail or DEFAULT_ERROR_MESSAGE

        declared = getattr(exc, "status_code", None)
        if isinstance(declared, int) and not isinstance(declared, bool) and 400 <= declared <= 599:
            return declared, str(exc) or DEFAULT_ERROR_MESSAGE

        message = str(exc) if self._should_expose_error_messages() else ""
        return 500, message or DEFAULT_ERROR_MESSAGE

    def _should_expose_error_messages(self) -> bool:
        if self.expose_error_messages is not None:
            return self.expose_error_messages
        return get_settings().expose_error_messages

    def _should_warn_on_repeated_next(self) -> bool:
        if self.warn_on_repeated_next is not None:
            return self.warn_on_repeated_next
        return get_settings().warn_on_repeated_next
