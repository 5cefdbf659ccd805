"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from flow_registry.schemas.flow import SnapshotMetadataResponse, VersionedFlowResponse


# Link enrichment interface
class ILinkService(Protocol):
    """Protocol for attaching discoverability links to API responses.

    Invoked by the presentation layer after the core returns data. Purely
    additive: never changes identifiers or version numbers.
    """

    def populate_flow_links(
        self, flows: VersionedFlowResponse | Iterable[VersionedFlowResponse]
    ) -> None:
        """Set a self link on one flow or on each flow in an iterable."""

    def populate_snapshot_links(
        self, snapshot_metadata: Iterable[SnapshotMetadataResponse]
    ) -> None:
        """Set a self link on each snapshot metadata entry."""
