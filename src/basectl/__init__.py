"""basectl: method-dispatching resource controllers for Starlette/FastAPI chains.

Typical usage:

    from basectl import BaseController, ChainApp

    class ItemsController(BaseController):
        async def get(self, ctx):
            return {"items": []}

    endpoint = ChainApp(ItemsController.as_middleware())
"""

from __future__ import annotations

from basectl.adapters.controllers.base import BaseController
from basectl.domain.enums.http_method import HTTP_METHODS, HttpMethod
from basectl.domain.exceptions.controller import (
    AbstractControllerError,
    ControllerError,
    HandlerError,
)
from basectl.infrastructure.http.app import ChainApp
from basectl.infrastructure.http.chain import compose
from basectl.infrastructure.http.context import RequestContext

__all__ = [
    "AbstractControllerError",
    "BaseController",
    "ChainApp",
    "ControllerError",
    "HTTP_METHODS",
    "HandlerError",
    "HttpMethod",
    "RequestContext",
    "compose",
]
