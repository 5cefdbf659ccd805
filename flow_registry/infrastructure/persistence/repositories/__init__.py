"""SQL repositories. Each repository returns domain entities, never ORM rows."""

from flow_registry.infrastructure.persistence.repositories.base import BaseRepository
from flow_registry.infrastructure.persistence.repositories.flow_repo import FlowRepository

__all__ = ["BaseRepository", "FlowRepository"]
