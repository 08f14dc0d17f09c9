# src/basectl/application/interfaces/context_port.py
# Copyright (c) Basectl.
# SPDX-License-Identifier: MIT
"""Application Interface: Request Context Port.

Synopsis:
    The collaborators a controller borrows from its host for one request: a
    mutable request context, the middleware continuation, and a sink for
    diagnostics. `RequestContext` in the infrastructure layer implements the
    context over Starlette; tests may supply any structurally compatible
    object.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, NoReturn, Protocol, runtime_checkable

type Continuation = Callable[[], Awaitable[None]]
type HeaderValue = str | Sequence[str]


@runtime_checkable
class RequestContextPort(Protocol):
    """Per-request state shared between the host and a controller.

    ``status`` starts at 200 and ``body`` at ``None``. Header names are
    case-insensitive; implementations store them lower-cased.
    """

    status: int
    body: Any

    @property
    def method(self) -> str:
        """Request method as received (any case)."""
        ...

    def set(self, name: str, value: HeaderValue) -> None:
        """Set a response header, replacing any previous value for ``name``."""
        ...

    def get(self, name: str) -> str | None:
        """Return a response header value, or ``None`` if unset."""
        ...

    def throw(self, status_code: int, message: str) -> NoReturn:
        """Abort the request with ``status_code`` and ``message``.

        Implementations must raise; returning normally breaks the abort
        contract.
        """
        ...


type Middleware = Callable[[RequestContextPort, Continuation | None], Awaitable[None]]


class DiagnosticSink(Protocol):
    """Destination for non-fatal controller diagnostics (a `logging.Logger` fits)."""

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Record a warning."""
        ...


__all__ = [
    "Continuation",
    "DiagnosticSink",
    "HeaderValue",
    "Middleware",
    "RequestContextPort",
]
