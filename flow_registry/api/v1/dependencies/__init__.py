"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for repositories and application services.
Routes depend only on these dependencies, not on infrastructure directly.
"""

from flow_registry.api.v1.dependencies.flow import (
    get_flow_repo,
    get_flow_repo_for_write,
    get_flow_store,
    get_flow_store_for_write,
    get_link_service,
    get_version_resolver,
)

__all__ = [
    "get_flow_repo",
    "get_flow_repo_for_write",
    "get_flow_store",
    "get_flow_store_for_write",
    "get_link_service",
    "get_version_resolver",
]
