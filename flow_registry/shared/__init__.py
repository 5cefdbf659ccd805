"""Shared cross-cutting utilities: enums, telemetry, and helpers."""
