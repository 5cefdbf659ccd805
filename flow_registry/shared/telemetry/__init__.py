"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from flow_registry.shared.telemetry.logging import setup_logging
from flow_registry.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from flow_registry.shared.telemetry.tracing import add_span_attributes, traced

__all__ = [
    "setup_logging",
    "TelemetryConfig",
    "get_telemetry",
    "set_telemetry",
    "traced",
    "add_span_attributes",
]
