# Copyright (c) Basectl.
# SPDX-License-Identifier: MIT
"""HTTP Method Tokens.

Summary:
    The fixed set of request methods a controller may handle. Values are the
    lowercase method names, which double as handler attribute names on
    controller subclasses.

Layer:
    domain/enums
"""

from __future__ import annotations

from enum import Enum
from typing import Final


class HttpMethod(str, Enum):
    """Request methods a controller can dispatch."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    CONNECT = "connect"
    OPTIONS = "options"
    TRACE = "trace"


HTTP_METHODS: Final[tuple[str, ...]] = tuple(m.value for m in HttpMethod)


def parse_method(raw: str | None) -> HttpMethod | None:
    """Resolve a raw request method to an `HttpMethod`.

    Args:
        raw: Method as received on the wire (any case).

    Returns:
        The matching member, or ``None`` when the token is not a known method.
    """
    if not raw:
        return None
    try:
        return HttpMethod(raw.lower())
    except ValueError:
        return None


__all__ = ["HTTP_METHODS", "HttpMethod", "parse_method"]
