"""Correlation ID middleware.

Propagates X-Correlation-ID across services: the client's value when safe,
else the request ID set by RequestIDMiddleware, else a new one. Raw ASGI.
"""

from typing import Callable

from flow_registry.middleware.headers import (
    append_header,
    get_header,
    new_trace_id,
    sanitize_trace_id,
)


def CorrelationIDMiddleware(
    app: Callable, header_name: str = "X-Correlation-ID"
) -> Callable:
    """Add or forward the correlation ID header on each HTTP request and response."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        state = scope.setdefault("state", {})
        correlation_id = (
            sanitize_trace_id(get_header(scope, header_name))
            or state.get("request_id")
            or new_trace_id()
        )
        state["correlation_id"] = correlation_id

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                append_header(message, header_name, correlation_id)
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
