"""ASGI header helpers shared by the ID middlewares."""

import re
import uuid

# Safe for logging: alphanumeric, hyphen, underscore, bounded length.
TRACE_ID_MAX_LENGTH = 64
TRACE_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,%d}$" % TRACE_ID_MAX_LENGTH)


def get_header(scope: dict, name: str) -> str | None:
    """Return the first value of header name (case-insensitive), or None."""
    want = name.lower().encode()
    for key, value in scope.get("headers", []):
        if key.lower() == want:
            return value.decode("utf-8", errors="replace")
    return None


def sanitize_trace_id(raw: str | None) -> str | None:
    """Return raw stripped if it is a safe identifier, else None (prevents log injection)."""
    if raw is None:
        return None
    raw = raw.strip()
    return raw if TRACE_ID_PATTERN.match(raw) else None


def new_trace_id() -> str:
    return str(uuid.uuid4())


def append_header(message: dict, name: str, value: str) -> None:
    """Add a response header to an http.response.start message."""
    headers = list(message.get("headers", []))
    headers.append((name.encode(), value.encode()))
    message["headers"] = headers
