"""Raw ASGI middleware: request id, timeout, body size limit."""

import asyncio
import logging

from httpx import ASGITransport, AsyncClient
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from app.middleware import RequestIDMiddleware, RequestSizeLimitMiddleware, TimeoutMiddleware
from app.middleware.request_id import sanitize_request_id
from app.shared.context import RequestContextFilter, get_request_context


async def _echo_context(request: Request) -> JSONResponse:
    ctx = get_request_context()
    return JSONResponse({"request_id": ctx.request_id})


async def _slow(request: Request) -> JSONResponse:
    await asyncio.sleep(1)
    return JSONResponse({"ok": True})


async def _read_body(request: Request) -> JSONResponse:
    body = await request.body()
    return JSONResponse({"size": len(body)})


def _client(asgi_app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=asgi_app), base_url="http://test")


def _starlette() -> Starlette:
    return Starlette(
        routes=[
            Route("/ctx", _echo_context),
            Route("/slow", _slow),
            Route("/body", _read_body, methods=["POST"]),
        ]
    )


def test_sanitize_request_id() -> None:
    assert sanitize_request_id("abc-123_X") == "abc-123_X"
    generated = sanitize_request_id("bad id\nINJECT")
    assert len(generated) == 32
    assert sanitize_request_id("x" * 65) != "x" * 65


async def test_request_id_is_forwarded_and_visible_in_context() -> None:
    asgi_app = RequestIDMiddleware(_starlette(), header_name="X-Request-ID")
    async with _client(asgi_app) as client:
        response = await client.get("/ctx", headers={"X-Request-ID": "req-42"})
    assert response.headers["x-request-id"] == "req-42"
    assert response.json() == {"request_id": "req-42"}
    assert get_request_context().request_id is None


async def test_request_id_generated_when_missing() -> None:
    asgi_app = RequestIDMiddleware(_starlette())
    async with _client(asgi_app) as client:
        response = await client.get("/ctx")
    assert response.json()["request_id"] == response.headers["x-request-id"]


def test_log_records_carry_request_context() -> None:
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)
    assert RequestContextFilter().filter(record) is True
    assert record.request_id == "-"


async def test_timeout_returns_504_envelope() -> None:
    asgi_app = TimeoutMiddleware(_starlette(), timeout_seconds=0.05)
    async with _client(asgi_app) as client:
        response = await client.get("/slow")
    assert response.status_code == 504
    assert response.json()["error"] == "GATEWAY_TIMEOUT"


async def test_declared_oversize_body_is_rejected_up_front() -> None:
    asgi_app = RequestSizeLimitMiddleware(_starlette(), max_bytes=10)
    async with _client(asgi_app) as client:
        response = await client.post("/body", content=b"x" * 11)
    assert response.status_code == 413
    assert response.json()["error"] == "PAYLOAD_TOO_LARGE"


async def test_body_within_limit_passes() -> None:
    asgi_app = RequestSizeLimitMiddleware(_starlette(), max_bytes=10)
    async with _client(asgi_app) as client:
        response = await client.post("/body", content=b"x" * 10)
    assert response.json() == {"size": 10}
