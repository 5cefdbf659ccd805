"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from flow_registry.application.dtos.flow import FlowCreate, FlowUpdate, SnapshotCreate
    from flow_registry.application.dtos.query import QueryParameters
    from flow_registry.domain.entities.flow import FlowSnapshotEntity, VersionedFlowEntity


# Flow repository interface
class IFlowRepository(Protocol):
    """Protocol for flow and flow snapshot persistence (DIP).

    Implementations own version assignment: create_snapshot computes the next
    version and inserts the snapshot as one atomic step, and raises
    VersionAssignmentConflictException when a concurrent writer took that
    version first.
    """

    async def list_flows(self, query: QueryParameters) -> list[VersionedFlowEntity]:
        """Return all flows ordered by query.sort_parameters (no snapshot metadata)."""

    async def get_flow(
        self, flow_id: str, *, verbose: bool = False
    ) -> VersionedFlowEntity | None:
        """Return flow by identifier; populate the ordered snapshot metadata when verbose."""

    async def create_flow(self, identifier: str, data: FlowCreate) -> VersionedFlowEntity:
        """Persist a new flow; raise FlowAlreadyExistsException if the identifier is taken."""

    async def update_flow(
        self, flow_id: str, data: FlowUpdate
    ) -> VersionedFlowEntity | None:
        """Update name/description; return updated flow or None if not found."""

    async def delete_flow(self, flow_id: str) -> VersionedFlowEntity | None:
        """Delete flow with all its snapshots; return last-known state (verbose) or None."""

    async def create_snapshot(
        self, flow_id: str, data: SnapshotCreate
    ) -> FlowSnapshotEntity | None:
        """Assign the next version and persist snapshot + metadata; None if flow not found."""

    async def get_snapshot(
        self, flow_id: str, version: int
    ) -> FlowSnapshotEntity | None:
        """Return the snapshot for exactly this version, or None."""
