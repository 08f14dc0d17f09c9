# tests/conftest.py
from __future__ import annotations

from collections.abc import Iterator

import pytest

from basectl.config.settings import get_settings
from basectl.infrastructure.http.context import RequestContext


@pytest.fixture
def anyio_backend() -> str:
    """Run anyio-marked tests on asyncio only."""
    return "asyncio"


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from ambient BASECTL_* env and the cached settings singleton."""
    for key in (
        "BASECTL_ENVIRONMENT",
        "BASECTL_EXPOSE_ERROR_MESSAGES",
        "BASECTL_WARN_ON_REPEATED_NEXT",
        "BASECTL_REQUEST_ID_HEADER",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def ctx() -> RequestContext:
    """Request context for a GET without an underlying Starlette request."""
    return RequestContext(method="GET")
