"""SnapshotMetadataSet and next_version: ordering and uniqueness."""

from datetime import datetime, timezone

import pytest

from flow_registry.domain.entities.flow import SnapshotMetadataEntity
from flow_registry.domain.exceptions import ValidationException
from flow_registry.domain.value_objects import (
    FIRST_VERSION,
    SnapshotMetadataSet,
    next_version,
)

_TS = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def _meta(version: int, flow_id: str = "f1") -> SnapshotMetadataEntity:
    return SnapshotMetadataEntity(flow_identifier=flow_id, version=version, timestamp=_TS)


def test_next_version() -> None:
    assert next_version(0) == FIRST_VERSION == 1
    assert next_version(7) == 8
    with pytest.raises(ValidationException):
        next_version(-1)


def test_entries_are_sorted_ascending() -> None:
    s = SnapshotMetadataSet("f1", [_meta(3), _meta(1), _meta(2)])
    assert s.versions() == (1, 2, 3)
    assert [m.version for m in s] == [1, 2, 3]
    assert s.last().version == 3
    assert len(s) == 3


def test_empty_set() -> None:
    s = SnapshotMetadataSet("f1")
    assert not s
    assert s.last() is None


def test_duplicate_versions_rejected() -> None:
    with pytest.raises(ValidationException) as exc_info:
        SnapshotMetadataSet("f1", [_meta(1), _meta(1)])
    assert exc_info.value.details["field"] == "version"


def test_foreign_flow_entries_rejected() -> None:
    with pytest.raises(ValidationException) as exc_info:
        SnapshotMetadataSet("f1", [_meta(1, flow_id="f2")])
    assert exc_info.value.details["field"] == "flow_identifier"


def test_equality_and_hash() -> None:
    a = SnapshotMetadataSet("f1", [_meta(2), _meta(1)])
    b = SnapshotMetadataSet("f1", [_meta(1), _meta(2)])
    assert a == b
    assert hash(a) == hash(b)
    assert a != SnapshotMetadataSet("f1", [_meta(1)])


def test_snapshot_metadata_entity_rejects_non_positive_version() -> None:
    with pytest.raises(ValidationException):
        _meta(0)
