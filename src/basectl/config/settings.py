# src/basectl/config/settings.py
# Copyright (c) Basectl.
# SPDX-License-Identifier: MIT
"""Basectl Configuration (Pydantic Settings, v2)

Summary:
    Typed, validated runtime configuration for controllers and the ASGI glue
    around them. Values come from the process environment; tests and hosts may
    also construct `Settings` directly and hand it to the components that
    accept one.

Design:
    - Pydantic v2 BaseSettings with `extra='forbid'` to catch unknown fields.
    - Explicit field declarations with env aliases.
    - Environment label for startup logs only; it does not change behavior.
    - Singleton accessor `get_settings()` with LRU cache.
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Deployment environment label attached to startup logs."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed configuration for Basectl controllers."""

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Deployment environment label (informational; logged at startup).",
        validation_alias="BASECTL_ENVIRONMENT",
    )

    log_level: LogLevel = Field(
        default="INFO",
        description="Root log level applied by configure_root_logging().",
        validation_alias="LOG_LEVEL",
    )

    expose_error_messages: bool = Field(
        default=True,
        description=(
            "Forward the message of unexpected handler exceptions to the client. "
            "When false, such failures are reported as 'An error occurred'. "
            "HTTP aborts always keep their message."
        ),
        validation_alias="BASECTL_EXPOSE_ERROR_MESSAGES",
    )

    warn_on_repeated_next: bool = Field(
        default=True,
        description="Emit a warning when a controller's next() runs after the continuation already ran.",
        validation_alias="BASECTL_WARN_ON_REPEATED_NEXT",
    )

    request_id_header: str = Field(
        default="X-Request-ID",
        min_length=1,
        max_length=64,
        description="Header used by the request-id middleware for correlation.",
        validation_alias="BASECTL_REQUEST_ID_HEADER",
    )

    model_config = SettingsConfigDict(
        extra="forbid",
        populate_by_name=True,
        case_sensitive=False,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        """Accept lowercase level names from the environment."""
        if isinstance(value, str):
            return value.strip().upper()
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton `Settings` instance.

    Returns:
        Settings: Validated settings.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        settings = Settings()
    except ValidationError as exc:
        logger.exception("Invalid basectl configuration")
        raise RuntimeError(f"Invalid configuration: {exc}") from exc

    logger.info(
        "Settings initialized",
        extra={
            "environment": settings.environment.value,
            "log_level": settings.log_level,
            "expose_error_messages": settings.expose_error_messages,
            "warn_on_repeated_next": settings.warn_on_repeated_next,
        },
    )
    return settings
