"""FlowStoreService unit tests with a mocked flow repository."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from flow_registry.application.dtos.flow import FlowCreate, FlowUpdate, SnapshotCreate
from flow_registry.application.dtos.query import QueryParameters, SortParameter
from flow_registry.application.use_cases.flows import FlowStoreService
from flow_registry.domain.entities.flow import (
    FlowSnapshotEntity,
    SnapshotMetadataEntity,
    VersionedFlowEntity,
)
from flow_registry.domain.exceptions import (
    FlowAlreadyExistsException,
    ResourceNotFoundException,
    SnapshotNotFoundException,
    ValidationException,
    VersionAssignmentConflictException,
)
from flow_registry.domain.value_objects import MAX_VERSION

_TS = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def _flow(identifier: str = "f1", version_count: int = 0) -> VersionedFlowEntity:
    return VersionedFlowEntity(
        identifier=identifier,
        name="Flow",
        description=None,
        bucket_identifier=None,
        created_at=_TS,
        updated_at=_TS,
        version_count=version_count,
    )


def _snapshot(version: int, flow_id: str = "f1") -> FlowSnapshotEntity:
    return FlowSnapshotEntity(
        snapshot_metadata=SnapshotMetadataEntity(
            flow_identifier=flow_id, version=version, timestamp=_TS
        ),
        flow_contents={"v": version},
    )


@pytest.fixture
def store_mocks():
    """FlowStoreService over an AsyncMock repository (three attempts)."""
    flow_repo = AsyncMock()
    flow_repo.get_flow = AsyncMock(return_value=_flow())
    svc = FlowStoreService(flow_repo, version_assign_max_attempts=3)
    return svc, flow_repo


def test_max_attempts_must_be_positive() -> None:
    with pytest.raises(ValueError):
        FlowStoreService(AsyncMock(), version_assign_max_attempts=0)


def test_get_flow_fields() -> None:
    assert "name" in FlowStoreService.get_flow_fields()
    assert "color" not in FlowStoreService.get_flow_fields()


async def test_get_flows_rejects_unknown_sort_field(store_mocks) -> None:
    svc, flow_repo = store_mocks
    with pytest.raises(ValidationException):
        await svc.get_flows(QueryParameters((SortParameter("color"),)))
    flow_repo.list_flows.assert_not_called()


async def test_get_flows_defaults_to_empty_query(store_mocks) -> None:
    svc, flow_repo = store_mocks
    flow_repo.list_flows = AsyncMock(return_value=[_flow()])
    flows = await svc.get_flows()
    assert len(flows) == 1
    flow_repo.list_flows.assert_awaited_once_with(QueryParameters())


async def test_get_flow_not_found(store_mocks) -> None:
    svc, flow_repo = store_mocks
    flow_repo.get_flow = AsyncMock(return_value=None)
    with pytest.raises(ResourceNotFoundException):
        await svc.get_flow("missing")


async def test_get_flow_blank_id(store_mocks) -> None:
    svc, flow_repo = store_mocks
    with pytest.raises(ValidationException):
        await svc.get_flow("  ")
    flow_repo.get_flow.assert_not_called()


async def test_create_flow_generates_identifier(store_mocks) -> None:
    svc, flow_repo = store_mocks
    flow_repo.get_flow = AsyncMock(return_value=None)
    flow_repo.create_flow = AsyncMock(side_effect=lambda identifier, data: _flow(identifier))
    flow = await svc.create_flow(FlowCreate(name="New"))
    assert flow.identifier
    identifier, data = flow_repo.create_flow.await_args.args
    assert identifier == flow.identifier
    assert data.name == "New"


async def test_create_flow_duplicate(store_mocks) -> None:
    svc, flow_repo = store_mocks
    with pytest.raises(FlowAlreadyExistsException):
        await svc.create_flow(FlowCreate(name="Dup", identifier="f1"))
    flow_repo.create_flow.assert_not_called()


async def test_update_flow_mismatch_never_reaches_repo(store_mocks) -> None:
    svc, flow_repo = store_mocks
    with pytest.raises(ValidationException):
        await svc.update_flow("f1", FlowUpdate(identifier="f2"))
    flow_repo.update_flow.assert_not_called()


async def test_update_flow_not_found(store_mocks) -> None:
    svc, flow_repo = store_mocks
    flow_repo.update_flow = AsyncMock(return_value=None)
    with pytest.raises(ResourceNotFoundException):
        await svc.update_flow("f1", FlowUpdate(name="x"))


async def test_delete_flow_returns_last_known_state(store_mocks) -> None:
    svc, flow_repo = store_mocks
    flow_repo.delete_flow = AsyncMock(return_value=_flow(version_count=2))
    flow = await svc.delete_flow("f1")
    assert flow.version_count == 2
    flow_repo.delete_flow = AsyncMock(return_value=None)
    with pytest.raises(ResourceNotFoundException):
        await svc.delete_flow("f1")


async def test_create_snapshot_passes_normalized_data(store_mocks) -> None:
    svc, flow_repo = store_mocks
    flow_repo.create_snapshot = AsyncMock(return_value=_snapshot(1))
    snapshot = await svc.create_flow_snapshot("f1", SnapshotCreate(flow_contents={}))
    assert snapshot.version == 1
    flow_id, data = flow_repo.create_snapshot.await_args.args
    assert flow_id == "f1"
    assert data.snapshot_metadata.flow_identifier == "f1"


async def test_create_snapshot_retries_on_conflict(store_mocks) -> None:
    """A lost race is retried; the next attempt gets a fresh version."""
    svc, flow_repo = store_mocks
    flow_repo.create_snapshot = AsyncMock(
        side_effect=[VersionAssignmentConflictException("f1"), _snapshot(2)]
    )
    snapshot = await svc.create_flow_snapshot("f1", SnapshotCreate(flow_contents={}))
    assert snapshot.version == 2
    assert flow_repo.create_snapshot.await_count == 2


async def test_create_snapshot_conflict_after_retries_exhausted(store_mocks) -> None:
    svc, flow_repo = store_mocks
    flow_repo.create_snapshot = AsyncMock(
        side_effect=VersionAssignmentConflictException("f1")
    )
    with pytest.raises(VersionAssignmentConflictException) as exc_info:
        await svc.create_flow_snapshot("f1", SnapshotCreate(flow_contents={}))
    assert exc_info.value.details["attempts"] == 3
    assert flow_repo.create_snapshot.await_count == 3


async def test_create_snapshot_unknown_flow(store_mocks) -> None:
    svc, flow_repo = store_mocks
    flow_repo.create_snapshot = AsyncMock(return_value=None)
    with pytest.raises(ResourceNotFoundException):
        await svc.create_flow_snapshot("f1", SnapshotCreate(flow_contents={}))


async def test_get_snapshot_distinguishes_missing_flow_and_version(store_mocks) -> None:
    svc, flow_repo = store_mocks
    flow_repo.get_snapshot = AsyncMock(return_value=None)
    with pytest.raises(SnapshotNotFoundException):
        await svc.get_flow_snapshot("f1", 3)

    flow_repo.get_flow = AsyncMock(return_value=None)
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await svc.get_flow_snapshot("f1", 3)
    assert not isinstance(exc_info.value, SnapshotNotFoundException)


async def test_get_snapshot_rejects_version_zero(store_mocks) -> None:
    svc, flow_repo = store_mocks
    with pytest.raises(ValidationException):
        await svc.get_flow_snapshot("f1", 0)
    flow_repo.get_snapshot.assert_not_called()


async def test_get_snapshot_beyond_max_version_is_not_found(store_mocks) -> None:
    """A version no flow can ever reach is reported missing without querying storage."""
    svc, flow_repo = store_mocks
    with pytest.raises(SnapshotNotFoundException) as exc_info:
        await svc.get_flow_snapshot("f1", MAX_VERSION + 1)
    assert exc_info.value.details["version"] == MAX_VERSION + 1
    flow_repo.get_snapshot.assert_not_called()


async def test_get_snapshot_at_max_version_reaches_repo(store_mocks) -> None:
    svc, flow_repo = store_mocks
    flow_repo.get_snapshot = AsyncMock(return_value=None)
    with pytest.raises(SnapshotNotFoundException):
        await svc.get_flow_snapshot("f1", MAX_VERSION)
    flow_repo.get_snapshot.assert_awaited_once_with("f1", MAX_VERSION)
