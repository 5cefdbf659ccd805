"""Flow use cases: flow store (CRUD + version assignment) and version resolver."""

from flow_registry.application.use_cases.flows.flow_store import FlowStoreService
from flow_registry.application.use_cases.flows.version_resolver import (
    FlowVersionResolver,
)

__all__ = [
    "FlowStoreService",
    "FlowVersionResolver",
]
