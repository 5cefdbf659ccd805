"""Persistence models: ORM entities and mixins."""

from flow_registry.infrastructure.persistence.models.flow import Flow, FlowSnapshot
from flow_registry.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
)

__all__ = [
    "Flow",
    "FlowSnapshot",
    "CuidMixin",
    "TimestampMixin",
]
