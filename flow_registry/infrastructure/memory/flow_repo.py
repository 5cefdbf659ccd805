"""In-memory flow repository (process-local, asyncio-safe).

Each flow has its own asyncio.Lock; computing the next version and storing the
snapshot happen under that lock, so concurrent writers to one flow are
serialized and writers to different flows never wait on each other. The
store-wide lock is held only while the flow map itself changes. Locks exist
only for flows that exist. Snapshot contents are deep-copied on the way in and
on the way out, so no caller can alter a stored version.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import Any

from flow_registry.application.dtos.flow import FlowCreate, FlowUpdate, SnapshotCreate
from flow_registry.application.dtos.query import QueryParameters
from flow_registry.core.constants import FLOW_FIELD_IDENTIFIER, FLOW_FIELD_NAME, FLOW_FIELDS
from flow_registry.domain.entities.flow import (
    FlowSnapshotEntity,
    SnapshotMetadataEntity,
    VersionedFlowEntity,
)
from flow_registry.domain.exceptions import FlowAlreadyExistsException, ValidationException
from flow_registry.domain.value_objects.versioning import (
    SnapshotMetadataSet,
    next_version,
)
from flow_registry.shared.enums import SortOrder
from flow_registry.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@dataclass
class _FlowRecord:
    identifier: str
    name: str
    description: str | None
    bucket_identifier: str | None
    created_at: Any
    updated_at: Any
    snapshots: dict[int, FlowSnapshotEntity] = field(default_factory=dict)

    def max_version(self) -> int:
        return max(self.snapshots, default=0)

    def to_entity(self, *, verbose: bool) -> VersionedFlowEntity:
        metadata_set = None
        if verbose:
            metadata_set = SnapshotMetadataSet(
                self.identifier,
                (s.snapshot_metadata for s in self.snapshots.values()),
            )
        return VersionedFlowEntity(
            identifier=self.identifier,
            name=self.name,
            description=self.description,
            bucket_identifier=self.bucket_identifier,
            created_at=self.created_at,
            updated_at=self.updated_at,
            version_count=len(self.snapshots),
            snapshot_metadata=metadata_set,
        )


def _detached(snapshot: FlowSnapshotEntity) -> FlowSnapshotEntity:
    # Stored contents never leave the store; callers get their own copy.
    return replace(snapshot, flow_contents=copy.deepcopy(snapshot.flow_contents))


def _sort_key(field_name: str):
    # None sorts after any value in ascending order.
    def key(record: _FlowRecord) -> tuple[bool, Any]:
        value = getattr(record, field_name)
        return (value is None, value if value is not None else "")

    return key


class InMemoryFlowRepository:
    """IFlowRepository backed by a dict; data lives for the process lifetime."""

    def __init__(self) -> None:
        self._flows: dict[str, _FlowRecord] = {}
        self._lock = asyncio.Lock()
        self._flow_locks: dict[str, asyncio.Lock] = {}

    def _get_lock(self, flow_id: str) -> asyncio.Lock | None:
        """Get or create the lock for an existing flow; None for unknown ids."""
        if flow_id not in self._flows:
            return None
        if flow_id not in self._flow_locks:
            self._flow_locks[flow_id] = asyncio.Lock()
        return self._flow_locks[flow_id]

    def _locked_record(self, flow_id: str, lock: asyncio.Lock) -> _FlowRecord | None:
        """Return the record guarded by lock, or None if the flow was deleted meanwhile."""
        if self._flow_locks.get(flow_id) is not lock:
            return None
        return self._flows.get(flow_id)

    async def list_flows(self, query: QueryParameters) -> list[VersionedFlowEntity]:
        """Return all flows ordered by query.sort_parameters (name, identifier by default)."""
        params = query.sort_parameters
        for param in params:
            if param.field_name not in FLOW_FIELDS:
                raise ValidationException(
                    f"Invalid sort field '{param.field_name}'", field="sort"
                )
        records = sorted(self._flows.values(), key=_sort_key(FLOW_FIELD_IDENTIFIER))
        if not params:
            records.sort(key=_sort_key(FLOW_FIELD_NAME))
        # Stable sorts applied last-key-first leave the first parameter primary.
        for param in reversed(params):
            records.sort(
                key=_sort_key(param.field_name),
                reverse=param.order == SortOrder.DESC,
            )
        return [r.to_entity(verbose=False) for r in records]

    async def get_flow(
        self, flow_id: str, *, verbose: bool = False
    ) -> VersionedFlowEntity | None:
        record = self._flows.get(flow_id)
        return record.to_entity(verbose=verbose) if record else None

    async def create_flow(self, identifier: str, data: FlowCreate) -> VersionedFlowEntity:
        async with self._lock:
            if identifier in self._flows:
                raise FlowAlreadyExistsException(identifier)
            now = utc_now()
            record = _FlowRecord(
                identifier=identifier,
                name=data.name,
                description=data.description,
                bucket_identifier=data.bucket_identifier,
                created_at=now,
                updated_at=now,
            )
            self._flows[identifier] = record
        return record.to_entity(verbose=False)

    async def update_flow(
        self, flow_id: str, data: FlowUpdate
    ) -> VersionedFlowEntity | None:
        lock = self._get_lock(flow_id)
        if lock is None:
            return None
        async with lock:
            record = self._locked_record(flow_id, lock)
            if record is None:
                return None
            if data.name is not None:
                record.name = data.name
            if data.description is not None:
                record.description = data.description
            record.updated_at = utc_now()
            return record.to_entity(verbose=False)

    async def delete_flow(self, flow_id: str) -> VersionedFlowEntity | None:
        """Remove the flow and its snapshots; return its last-known state (verbose)."""
        lock = self._get_lock(flow_id)
        if lock is None:
            return None
        # Lock order: flow lock, then store lock.
        async with lock:
            if self._locked_record(flow_id, lock) is None:
                return None
            async with self._lock:
                record = self._flows.pop(flow_id)
                del self._flow_locks[flow_id]
        return record.to_entity(verbose=True)

    async def create_snapshot(
        self, flow_id: str, data: SnapshotCreate
    ) -> FlowSnapshotEntity | None:
        """Store the next version of flow_id; None if the flow does not exist."""
        lock = self._get_lock(flow_id)
        if lock is None:
            return None
        async with lock:
            record = self._locked_record(flow_id, lock)
            if record is None:
                return None
            metadata = data.snapshot_metadata
            snapshot = FlowSnapshotEntity(
                snapshot_metadata=SnapshotMetadataEntity(
                    flow_identifier=flow_id,
                    version=next_version(record.max_version()),
                    timestamp=utc_now(),
                    author=metadata.author if metadata else None,
                    comments=metadata.comments if metadata else None,
                ),
                flow_contents=copy.deepcopy(data.flow_contents),
            )
            record.snapshots[snapshot.version] = snapshot
        logger.debug("Stored version %d of flow %s", snapshot.version, flow_id)
        return _detached(snapshot)

    async def get_snapshot(
        self, flow_id: str, version: int
    ) -> FlowSnapshotEntity | None:
        record = self._flows.get(flow_id)
        if record is None or version not in record.snapshots:
            return None
        return _detached(record.snapshots[version])

    def clear(self) -> None:
        """Drop every flow (tests and process reset)."""
        self._flows.clear()
        self._flow_locks.clear()


@lru_cache
def get_in_memory_flow_repository() -> InMemoryFlowRepository:
    """Return the process-wide in-memory repository."""
    return InMemoryFlowRepository()
