"""HTTP middleware: timeout, request ID, correlation ID.

Applied in the main app; order matters (last added = outermost).
"""

from flow_registry.middleware.correlation_id import CorrelationIDMiddleware
from flow_registry.middleware.request_id import RequestIDMiddleware
from flow_registry.middleware.timeout import TimeoutMiddleware

__all__ = [
    "CorrelationIDMiddleware",
    "RequestIDMiddleware",
    "TimeoutMiddleware",
]
