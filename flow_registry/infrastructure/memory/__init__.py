"""Process-local storage backend (database_backend='memory')."""

from flow_registry.infrastructure.memory.flow_repo import (
    InMemoryFlowRepository,
    get_in_memory_flow_repository,
)

__all__ = ["InMemoryFlowRepository", "get_in_memory_flow_repository"]
