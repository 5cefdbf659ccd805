"""Request ID middleware.

Forwards a safe client X-Request-ID or generates one, stores it on
scope["state"]["request_id"] and echoes it on the response. Raw ASGI.
"""

from typing import Callable

from flow_registry.middleware.headers import (
    append_header,
    get_header,
    new_trace_id,
    sanitize_trace_id,
)


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Add or forward the request ID header on each HTTP request and response."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_trace_id(get_header(scope, header_name)) or new_trace_id()
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                append_header(message, header_name, request_id)
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
