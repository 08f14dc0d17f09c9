# src/basectl/main.py
# Copyright (c) Basectl.
# SPDX-License-Identifier: MIT
"""
Application Factory

Synopsis:
    Convenience FastAPI factory for hosting controller chains. Routing stays
    with the caller: pass the Starlette routes to mount, usually each one a
    `ChainApp` ending in a controller's ``as_middleware()``.

Design:
    • Root JSON logging configured from settings.
    • Error envelopes installed for aborts and unexpected failures.
    • No business logic here.
"""

from __future__ import annotations

from collections.abc import Sequence

from fastapi import FastAPI
from starlette.routing import BaseRoute

from basectl.config.settings import Settings, get_settings
from basectl.infrastructure.http.errors import install_error_handlers
from basectl.infrastructure.logging.logger import configure_root_logging, get_json_logger

__all__ = ["create_app"]

logger = get_json_logger(__name__)


def create_app(routes: Sequence[BaseRoute] = (), *, settings: Settings | None = None) -> FastAPI:
    """Build a FastAPI application serving ``routes``.

    Args:
        routes: Starlette routes to mount.
        settings: Optional settings; defaults to `get_settings()`.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()
    configure_root_logging(settings.log_level)

    app = FastAPI(routes=list(routes))
    app.state.settings = settings
    install_error_handlers(app)

    logger.info(
        "app_created",
        extra={"environment": settings.environment.value, "routes": len(app.routes)},
    )
    return app
