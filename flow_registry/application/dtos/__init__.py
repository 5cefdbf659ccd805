"""Application DTOs (no ORM dependency)."""

from flow_registry.application.dtos.flow import (
    FlowCreate,
    FlowUpdate,
    SnapshotCreate,
    SnapshotMetadataCreate,
)
from flow_registry.application.dtos.query import QueryParameters, SortParameter

__all__ = [
    "FlowCreate",
    "FlowUpdate",
    "QueryParameters",
    "SnapshotCreate",
    "SnapshotMetadataCreate",
    "SortParameter",
]
