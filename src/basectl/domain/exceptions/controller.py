# Copyright (c) Basectl.
# SPDX-License-Identifier: MIT
"""
Controller Exceptions.

Summary:
    `ControllerError` is the root of everything basectl raises on its own.
    `HandlerError` is what handlers raise to fail a request with a declared
    HTTP status. Aborts issued through the request context are FastAPI
    `HTTPException`s and sit outside this hierarchy.

Layer:
    domain/exceptions
"""
from __future__ import annotations

from typing import Any, Final

ABSTRACT_CONTROLLER_MESSAGE: Final[str] = (
    "BaseController is an abstract class and should not be instantiated."
)


class ControllerError(Exception):
    """Base class for basectl exceptions, tagged with a stable `code`."""

    code: str = "CONTROLLER_ERROR"

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details or {}


class AbstractControllerError(ControllerError, TypeError):
    """Raised when the abstract controller base is constructed directly."""

    code = "ABSTRACT_CONTROLLER"

    def __init__(self, message: str = ABSTRACT_CONTROLLER_MESSAGE) -> None:
        super().__init__(message)


class HandlerError(ControllerError):
    """Handler failure carrying the HTTP status it should be reported with.

    Args:
        message: Client-visible message.
        status_code: HTTP status (4xx or 5xx). Defaults to 500.
        details: Optional structured context for logs.

    Raises:
        ValueError: If ``status_code`` is not an error status.
    """

    code = "HANDLER_ERROR"

    def __init__(
        self,
        message: str = "",
        *,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        if not 400 <= status_code <= 599:
            raise ValueError(f"status_code must be a 4xx or 5xx code, got {status_code}")
        super().__init__(message, details=details)
        self.status_code = status_code


__all__ = [
    "ABSTRACT_CONTROLLER_MESSAGE",
    "AbstractControllerError",
    "ControllerError",
    "HandlerError",
]
