# src/basectl/infrastructure/http/context.py
# Copyright (c) Basectl.
# SPDX-License-Identifier: MIT
"""Request Context (Starlette-backed).

Summary:
    Concrete `RequestContextPort` for Starlette/FastAPI hosts. It exposes the
    incoming request method, carries the mutable response state a controller
    writes to (status, body, headers) and aborts via FastAPI `HTTPException`.

Contract:
    • ``status`` defaults to 200, ``body`` to ``None``.
    • Header names are case-insensitive and stored lower-cased.
    • ``throw()`` always raises.
    • ``state`` is a scratch dict middleware stages use to share values.

Rendering:
    ``render()`` turns the state into a Starlette ``Response``:
      - ``None``       → empty body
      - ``bytes``      → raw body (``application/octet-stream`` unless set)
      - ``str``        → ``text/plain; charset=utf-8`` unless set
      - pydantic model → JSON of ``model_dump(mode="json")``
      - anything else  → JSON
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, NoReturn

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from starlette.datastructures import MutableHeaders
from starlette.responses import JSONResponse, PlainTextResponse, Response

from basectl.application.interfaces.context_port import HeaderValue

__all__ = ["RequestContext"]


class RequestContext:
    """Mutable per-request context shared by the middleware chain.

    Args:
        request: Incoming Starlette request. Optional for tests and offline use.
        method: Method override; required when ``request`` is omitted.

    Raises:
        ValueError: If neither ``request`` nor ``method`` is supplied.
    """

    def __init__(self, request: Request | None = None, *, method: str | None = None) -> None:
        if request is None and method is None:
            raise ValueError("RequestContext needs a request or an explicit method")
        self.request = request
        self._method = method if method is not None else request.method  # type: ignore[union-attr]
        self.status: int = 200
        self.body: Any = None
        self.headers = MutableHeaders()
        self.state: dict[str, Any] = {}

    @property
    def method(self) -> str:
        """Request method as received."""
        return self._method

    @method.setter
    def method(self, value: str) -> None:
        self._method = value

    @property
    def path(self) -> str:
        """Request path, or ``""`` for contexts without a request."""
        return self.request.url.path if self.request is not None else ""

    def set(self, name: str, value: HeaderValue) -> None:
        """Set a response header, replacing earlier values.

        A sequence value emits one header line per item.
        """
        key = name.lower()
        if isinstance(value, str):
            self.headers[key] = value
            return
        if isinstance(value, bytes | bytearray) or not isinstance(value, Sequence):
            raise TypeError(f"header {name!r} must be a string or a sequence of strings")
        if key in self.headers:
            del self.headers[key]
        for item in value:
            self.headers.append(key, str(item))

    def get(self, name: str) -> str | None:
        """Return the response header value for ``name`` (case-insensitive)."""
        return self.headers.get(name.lower())

    def throw(self, status_code: int, message: str) -> NoReturn:
        """Abort the request with an HTTP error."""
        raise HTTPException(status_code=int(status_code), detail=message)

    def render(self) -> Response:
        """Build the Starlette response for the current state."""
        body = self.body
        response: Response
        if body is None:
            response = Response(status_code=self.status)
        elif isinstance(body, bytes | bytearray):
            response = Response(
                content=bytes(body),
                status_code=self.status,
                media_type=self.get("content-type") or "application/octet-stream",
            )
        elif isinstance(body, str):
            response = PlainTextResponse(content=body, status_code=self.status)
        elif isinstance(body, BaseModel):
            response = JSONResponse(content=body.model_dump(mode="json"), status_code=self.status)
        else:
            response = JSONResponse(content=jsonable_encoder(body), status_code=self.status)

        for key in {k for k, _ in self.headers.items()}:
            values = self.headers.getlist(key)
            response.headers[key] = values[0]
            for extra in values[1:]:
                response.headers.append(key, extra)
        return response
