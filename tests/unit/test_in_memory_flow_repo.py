"""InMemoryFlowRepository: version assignment, sorting, cascade delete, concurrency, isolation."""

import asyncio

import pytest

from flow_registry.application.dtos.flow import (
    FlowCreate,
    FlowUpdate,
    SnapshotCreate,
    SnapshotMetadataCreate,
)
from flow_registry.application.dtos.query import QueryParameters
from flow_registry.application.use_cases.flows import FlowStoreService, FlowVersionResolver
from flow_registry.domain.exceptions import (
    FlowAlreadyExistsException,
    ResourceNotFoundException,
)
from flow_registry.infrastructure.memory import InMemoryFlowRepository


@pytest.fixture
def repo() -> InMemoryFlowRepository:
    return InMemoryFlowRepository()


def _snapshot(contents: dict | None = None, **metadata) -> SnapshotCreate:
    return SnapshotCreate(
        flow_contents=contents or {},
        snapshot_metadata=SnapshotMetadataCreate(**metadata) if metadata else None,
    )


async def test_create_and_get_flow(repo) -> None:
    created = await repo.create_flow("f1", FlowCreate(name="Flow", description="d"))
    assert created.identifier == "f1"
    assert created.version_count == 0
    assert created.created_at == created.updated_at

    found = await repo.get_flow("f1")
    assert found.name == "Flow"
    assert found.snapshot_metadata is None
    assert await repo.get_flow("missing") is None


async def test_duplicate_identifier_rejected(repo) -> None:
    await repo.create_flow("f1", FlowCreate(name="Flow"))
    with pytest.raises(FlowAlreadyExistsException):
        await repo.create_flow("f1", FlowCreate(name="Other"))


async def test_sequential_versions_start_at_one(repo) -> None:
    await repo.create_flow("f1", FlowCreate(name="Flow"))
    versions = [
        (await repo.create_snapshot("f1", _snapshot({"n": n}))).version for n in range(5)
    ]
    assert versions == [1, 2, 3, 4, 5]
    flow = await repo.get_flow("f1", verbose=True)
    assert flow.version_count == 5
    assert flow.snapshot_metadata.versions() == (1, 2, 3, 4, 5)


async def test_snapshot_carries_metadata_and_contents(repo) -> None:
    await repo.create_flow("f1", FlowCreate(name="Flow"))
    created = await repo.create_snapshot(
        "f1", _snapshot({"k": "v"}, flow_identifier="f1", author="ana", comments="c")
    )
    stored = await repo.get_snapshot("f1", created.version)
    assert stored == created
    assert stored.snapshot_metadata.author == "ana"
    assert stored.flow_contents == {"k": "v"}
    assert stored.snapshot_metadata.timestamp.tzinfo is not None


async def test_snapshot_for_unknown_flow(repo) -> None:
    assert await repo.create_snapshot("missing", _snapshot()) is None
    assert await repo.get_snapshot("missing", 1) is None


async def test_concurrent_snapshots_get_distinct_versions(repo) -> None:
    """K concurrent creations after N existing versions yield exactly N+1..N+K."""
    await repo.create_flow("f1", FlowCreate(name="Flow"))
    for _ in range(3):
        await repo.create_snapshot("f1", _snapshot())
    results = await asyncio.gather(
        *(repo.create_snapshot("f1", _snapshot({"n": n})) for n in range(20))
    )
    assert sorted(r.version for r in results) == list(range(4, 24))


async def test_concurrent_snapshots_through_flow_store(repo) -> None:
    await repo.create_flow("f1", FlowCreate(name="Flow"))
    store = FlowStoreService(repo)
    results = await asyncio.gather(
        *(store.create_flow_snapshot("f1", _snapshot()) for _ in range(10))
    )
    assert sorted(r.version for r in results) == list(range(1, 11))


async def test_update_flow(repo) -> None:
    await repo.create_flow("f1", FlowCreate(name="Before", description="keep"))
    updated = await repo.update_flow("f1", FlowUpdate(name="After"))
    assert updated.name == "After"
    assert updated.description == "keep"
    assert updated.updated_at >= updated.created_at
    assert await repo.update_flow("missing", FlowUpdate(name="x")) is None


async def test_delete_flow_removes_snapshots(repo) -> None:
    await repo.create_flow("f1", FlowCreate(name="Flow"))
    await repo.create_snapshot("f1", _snapshot())
    deleted = await repo.delete_flow("f1")
    assert deleted.snapshot_metadata.versions() == (1,)
    assert await repo.get_flow("f1") is None
    assert await repo.get_snapshot("f1", 1) is None
    assert await repo.delete_flow("f1") is None


async def test_recreated_flow_starts_at_version_one(repo) -> None:
    await repo.create_flow("f1", FlowCreate(name="Flow"))
    await repo.create_snapshot("f1", _snapshot())
    await repo.delete_flow("f1")
    await repo.create_flow("f1", FlowCreate(name="Flow"))
    assert (await repo.create_snapshot("f1", _snapshot())).version == 1


async def test_list_flows_sorting(repo) -> None:
    await repo.create_flow("b", FlowCreate(name="same", bucket_identifier="x"))
    await repo.create_flow("a", FlowCreate(name="same"))
    await repo.create_flow("c", FlowCreate(name="alpha", bucket_identifier="y"))

    default = await repo.list_flows(QueryParameters())
    assert [f.identifier for f in default] == ["c", "a", "b"]

    by_name_desc = await repo.list_flows(QueryParameters.from_strings(["name:DESC"]))
    assert [f.identifier for f in by_name_desc] == ["a", "b", "c"]

    by_bucket = await repo.list_flows(
        QueryParameters.from_strings(["bucket_identifier:ASC"])
    )
    assert [f.identifier for f in by_bucket] == ["b", "c", "a"]


async def test_unknown_flow_ids_leave_no_locks(repo) -> None:
    """Writes addressed to flows that do not exist never allocate a per-flow lock."""
    store = FlowStoreService(repo)
    for n in range(50):
        with pytest.raises(ResourceNotFoundException):
            await store.update_flow(f"ghost-{n}", FlowUpdate(name="x"))
        with pytest.raises(ResourceNotFoundException):
            await store.create_flow_snapshot(f"ghost-{n}", _snapshot())
        with pytest.raises(ResourceNotFoundException):
            await store.delete_flow(f"ghost-{n}")
    assert len(repo._flow_locks) == 0


async def test_deleted_flow_releases_its_lock(repo) -> None:
    await repo.create_flow("f1", FlowCreate(name="Flow"))
    await repo.create_snapshot("f1", _snapshot())
    assert "f1" in repo._flow_locks
    await repo.delete_flow("f1")
    assert "f1" not in repo._flow_locks


async def test_writer_queued_behind_delete_sees_flow_gone(repo) -> None:
    await repo.create_flow("f1", FlowCreate(name="Flow"))
    lock = repo._get_lock("f1")
    await lock.acquire()
    delete_task = asyncio.create_task(repo.delete_flow("f1"))
    snapshot_task = asyncio.create_task(repo.create_snapshot("f1", _snapshot()))
    await asyncio.sleep(0)
    lock.release()

    assert (await delete_task) is not None
    assert (await snapshot_task) is None
    assert await repo.get_flow("f1") is None
    assert repo._flow_locks == {}


async def test_stored_contents_are_isolated_from_callers(repo) -> None:
    """Mutating the submitted payload or a returned snapshot never changes the stored version."""
    await repo.create_flow("f1", FlowCreate(name="Flow"))
    payload = {"procs": [{"id": "a"}], "meta": {"x": 1}}
    created = await repo.create_snapshot("f1", _snapshot(payload))

    payload["procs"].append({"id": "b"})
    payload["meta"]["x"] = 2
    created.flow_contents["procs"].append({"id": "c"})
    read = await repo.get_snapshot("f1", 1)
    read.flow_contents["procs"][0]["id"] = "z"
    read.flow_contents["extra"] = True

    stored = await repo.get_snapshot("f1", 1)
    assert stored.flow_contents == {"procs": [{"id": "a"}], "meta": {"x": 1}}


async def test_resolved_version_contents_are_isolated(repo) -> None:
    await repo.create_flow("f1", FlowCreate(name="Flow"))
    await repo.create_snapshot("f1", _snapshot({"procs": ["a"]}))
    resolver = FlowVersionResolver(FlowStoreService(repo))

    (await resolver.specific_version("f1", 1)).flow_contents["procs"].append("b")
    (await resolver.latest_version("f1")).flow_contents["procs"].append("c")

    assert (await resolver.specific_version("f1", 1)).flow_contents == {"procs": ["a"]}
