"""API version 1."""

from flow_registry.api.v1.router import api_router

__all__ = ["api_router"]
