from __future__ import annotations

from fastapi import FastAPI, HTTPException, Request
from fastapi.testclient import TestClient

from basectl.infrastructure.http import errors


def test_error_envelope_includes_optional_fields() -> None:
    """error_envelope should include all optional fields when provided."""
    payload = errors.error_envelope(
        code="SOME_CODE",
        http_status=418,
        message="I'm a teapot",
        details={"extra": "info"},
        trace_id="trace-123",
    )

    err = payload["error"]
    assert err["code"] == "SOME_CODE"
    assert err["http_status"] == 418
    assert err["message"] == "I'm a teapot"
    assert err["details"] == {"extra": "info"}
    assert err["trace_id"] == "trace-123"


def test_error_envelope_omits_absent_fields() -> None:
    err = errors.error_envelope(code="X", http_status=400, message="m")["error"]
    assert set(err) == {"code", "http_status", "message"}


def test_http_exception_response_merges_headers() -> None:
    exc = HTTPException(status_code=401, detail="login", headers={"WWW-Authenticate": "Bearer"})
    response = errors.http_exception_response(
        exc, trace_id="rid-1", headers={"X-Request-ID": "rid-1"}
    )
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.headers["x-request-id"] == "rid-1"


def _make_app_with_handlers() -> FastAPI:
    app = FastAPI()
    errors.install_error_handlers(app)

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):  # type: ignore[no-untyped-def]
        request.state.request_id = "rid-xyz"
        return await call_next(request)

    @app.get("/http-exc")
    async def http_exc_route() -> None:
        raise HTTPException(status_code=404, detail="not found")

    @app.get("/unhandled")
    async def unhandled_route() -> None:
        raise RuntimeError("boom")

    return app


def test_handle_http_exception_envelope() -> None:
    client = TestClient(_make_app_with_handlers())

    resp = client.get("/http-exc")

    assert resp.status_code == 404
    err = resp.json()["error"]
    assert err["code"] == "HTTP_ERROR"
    assert err["http_status"] == 404
    assert err["message"] == "not found"
    assert err["trace_id"] == "rid-xyz"


def test_handle_unhandled_exception_envelope() -> None:
    client = TestClient(_make_app_with_handlers(), raise_server_exceptions=False)

    resp = client.get("/unhandled")

    assert resp.status_code == 500
    err = resp.json()["error"]
    assert err["code"] == "INTERNAL_ERROR"
    assert err["message"] == "Internal server error"
    assert "boom" not in resp.text
