from __future__ import annotations

import logging

import pytest
from fastapi import HTTPException

from basectl.infrastructure.http.context import RequestContext
from basectl.infrastructure.middleware.access_log import access_log_middleware

_LOGGER_NAME = "basectl.infrastructure.middleware.access_log"


def _access_records(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.getMessage() == "access_log"]


@pytest.mark.anyio
async def test_logs_success(ctx: RequestContext, caplog: pytest.LogCaptureFixture) -> None:
    ctx.state["request_id"] = "rid-1"

    async def downstream() -> None:
        ctx.status = 201

    with caplog.at_level(logging.INFO, logger=_LOGGER_NAME):
        await access_log_middleware(ctx, downstream)

    (record,) = _access_records(caplog)
    assert record.evt == "access"  # type: ignore[attr-defined]
    assert record.method == "GET"  # type: ignore[attr-defined]
    assert record.status == 201  # type: ignore[attr-defined]
    assert record.ok is True  # type: ignore[attr-defined]
    assert record.request_id == "rid-1"  # type: ignore[attr-defined]
    assert record.elapsed_ms >= 0  # type: ignore[attr-defined]


@pytest.mark.anyio
async def test_logs_abort_status_and_reraises(
    ctx: RequestContext, caplog: pytest.LogCaptureFixture
) -> None:
    async def downstream() -> None:
        raise HTTPException(status_code=501, detail="GET method not implemented")

    with caplog.at_level(logging.INFO, logger=_LOGGER_NAME):
        with pytest.raises(HTTPException):
            await access_log_middleware(ctx, downstream)

    (record,) = _access_records(caplog)
    assert record.status == 501  # type: ignore[attr-defined]
    assert record.ok is False  # type: ignore[attr-defined]


@pytest.mark.anyio
async def test_logs_500_for_unexpected_failure(
    ctx: RequestContext, caplog: pytest.LogCaptureFixture
) -> None:
    async def downstream() -> None:
        raise RuntimeError("boom")

    with caplog.at_level(logging.INFO, logger=_LOGGER_NAME):
        with pytest.raises(RuntimeError):
            await access_log_middleware(ctx, downstream)

    (record,) = _access_records(caplog)
    assert record.status == 500  # type: ignore[attr-defined]
