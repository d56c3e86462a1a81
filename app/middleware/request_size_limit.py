"""Request body size limit middleware.

Rejects bodies over max_bytes: up front when Content-Length says so, and
while the body is read otherwise (chunked uploads). Raw ASGI.
"""

import json
from typing import Any, Callable

from starlette.exceptions import HTTPException

from app.middleware.request_id import get_header


def _too_large_message(max_bytes: int) -> str:
    return f"Request body must be at most {max_bytes} bytes"


async def _send_413(send: Callable, max_bytes: int, actual: int) -> None:
    details: dict[str, Any] = {"max_bytes": max_bytes, "content_length": actual}
    body = json.dumps(
        {"error": "PAYLOAD_TOO_LARGE", "message": _too_large_message(max_bytes), "details": details}
    ).encode()
    await send(
        {
            "type": "http.response.start",
            "status": 413,
            "headers": [(b"content-type", b"application/json")],
        }
    )
    await send({"type": "http.response.body", "body": body})


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject requests whose body exceeds max_bytes. Raw ASGI.

    A streamed body that crosses the limit raises HTTPException(413) from
    receive(), which the route's exception handling turns into a response.
    """

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        declared = get_header(scope, "content-length")
        if declared and declared.isdigit() and int(declared) > max_bytes:
            await _send_413(send, max_bytes, int(declared))
            return

        received = 0

        async def limited_receive() -> dict:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > max_bytes:
                    raise HTTPException(status_code=413, detail=_too_large_message(max_bytes))
            return message

        await app(scope, limited_receive, send)

    return asgi_app
