# Copyright (c) Basectl.
# SPDX-License-Identifier: MIT
"""Unit tests for the request-id chain stage and its header rules."""

from __future__ import annotations

import pytest
from starlette.requests import Request

from basectl.infrastructure.http.context import RequestContext
from basectl.infrastructure.logging.logger import get_request_id
from basectl.infrastructure.middleware.request_id import (
    _SAFE_RE,
    _coerce_request_id,
    make_request_id_middleware,
    request_id_middleware,
)


def _ctx(headers: dict[str, str] | None = None) -> RequestContext:
    raw = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    scope = {"type": "http", "method": "GET", "path": "/", "query_string": b"", "headers": raw}
    return RequestContext(Request(scope))


def test_coerce_keeps_safe_ids_and_replaces_others() -> None:
    assert _coerce_request_id("abc-123_456:@Z") == "abc-123_456:@Z"
    generated = _coerce_request_id("bad id with space")
    assert generated != "bad id with space"
    assert _SAFE_RE.match(generated)
    assert _SAFE_RE.match(_coerce_request_id(None))


@pytest.mark.anyio
async def test_generates_id_and_sets_state_header_and_log_context() -> None:
    ctx = _ctx()
    seen: list[str | None] = []

    async def downstream() -> None:
        seen.append(get_request_id())

    await request_id_middleware(ctx, downstream)

    rid = ctx.state["request_id"]
    assert _SAFE_RE.match(rid)
    assert ctx.get("X-Request-ID") == rid
    assert ctx.request is not None and ctx.request.state.request_id == rid
    assert seen == [rid]


@pytest.mark.anyio
async def test_valid_incoming_id_is_preserved() -> None:
    ctx = _ctx({"X-Request-ID": "incoming-1"})
    await request_id_middleware(ctx)
    assert ctx.state["request_id"] == "incoming-1"
    assert ctx.get("x-request-id") == "incoming-1"


@pytest.mark.anyio
async def test_custom_header_from_argument() -> None:
    ctx = _ctx({"X-Correlation-ID": "corr-9"})
    await make_request_id_middleware("X-Correlation-ID")(ctx)
    assert ctx.get("x-correlation-id") == "corr-9"
    assert ctx.get("x-request-id") is None


@pytest.mark.anyio
async def test_custom_header_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BASECTL_REQUEST_ID_HEADER", "X-Trace")
    ctx = _ctx({"X-Trace": "t-1"})
    await make_request_id_middleware()(ctx)
    assert ctx.get("x-trace") == "t-1"


@pytest.mark.anyio
async def test_works_without_underlying_request() -> None:
    ctx = RequestContext(method="GET")
    await request_id_middleware(ctx)
    assert _SAFE_RE.match(ctx.state["request_id"])


@pytest.mark.anyio
async def test_header_staged_by_host_wins_over_process_settings(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("BASECTL_REQUEST_ID_HEADER", "X-Trace")
    ctx = _ctx({"X-Correlation-ID": "corr-3"})
    ctx.state["request_id_header"] = "X-Correlation-ID"

    await request_id_middleware(ctx)

    assert ctx.get("x-correlation-id") == "corr-3"
    assert ctx.get("x-trace") is None
    assert ctx.state["request_id_header"] == "X-Correlation-ID"
