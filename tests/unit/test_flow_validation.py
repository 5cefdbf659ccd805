"""Flow validation: identifier and version consistency checks (no I/O)."""

import pytest

from flow_registry.application.dtos.flow import (
    FlowCreate,
    FlowUpdate,
    SnapshotCreate,
    SnapshotMetadataCreate,
)
from flow_registry.application.services.flow_validation import (
    ValidationResult,
    validate_flow_create,
    validate_flow_id,
    validate_flow_update,
    validate_snapshot_create,
    validate_version_number,
)
from flow_registry.domain.exceptions import ValidationException


def test_validation_result_unwrap() -> None:
    assert ValidationResult.success(3).unwrap() == 3
    failure = ValidationResult.failure("bad", field="x")
    assert not failure.ok
    with pytest.raises(ValidationException) as exc_info:
        failure.unwrap()
    assert exc_info.value.message == "bad"
    assert exc_info.value.details == {"field": "x"}


@pytest.mark.parametrize("flow_id", [None, "", "   "])
def test_blank_flow_id_rejected(flow_id) -> None:
    assert not validate_flow_id(flow_id).ok


def test_flow_create_checks() -> None:
    assert validate_flow_create(None).error == "Flow cannot be null"
    assert validate_flow_create(FlowCreate(name=" ")).field == "name"
    assert validate_flow_create(FlowCreate(name="n", identifier=" ")).field == "identifier"
    assert validate_flow_create(FlowCreate(name="n")).ok


def test_flow_update_fills_identifier_from_path() -> None:
    result = validate_flow_update("f1", FlowUpdate(name="renamed"))
    assert result.ok
    assert result.value.identifier == "f1"
    assert result.value.name == "renamed"


def test_flow_update_mismatch_rejected() -> None:
    result = validate_flow_update("f1", FlowUpdate(identifier="f2"))
    assert result.error == "Flow id in path param must match flow id in body"
    assert result.field == "identifier"


def test_flow_update_requires_payload_and_id() -> None:
    assert validate_flow_update("f1", None).error == "Flow cannot be null"
    assert validate_flow_update(" ", FlowUpdate()).field == "flow_id"
    assert validate_flow_update("f1", FlowUpdate(name="")).field == "name"


def test_snapshot_create_null_payload() -> None:
    result = validate_snapshot_create("f1", None)
    assert result.error == "VersionedFlowSnapshot cannot be null"


def test_snapshot_create_null_contents() -> None:
    result = validate_snapshot_create("f1", SnapshotCreate(flow_contents=None))
    assert result.field == "flow_contents"


def test_snapshot_create_attaches_metadata_from_path() -> None:
    result = validate_snapshot_create("f1", SnapshotCreate(flow_contents={}))
    assert result.ok
    assert result.value.snapshot_metadata.flow_identifier == "f1"


def test_snapshot_create_keeps_author_when_filling_identifier() -> None:
    data = SnapshotCreate(
        flow_contents={}, snapshot_metadata=SnapshotMetadataCreate(author="ana")
    )
    result = validate_snapshot_create("f1", data)
    assert result.value.snapshot_metadata.author == "ana"
    assert result.value.snapshot_metadata.flow_identifier == "f1"


def test_snapshot_create_mismatch_rejected() -> None:
    data = SnapshotCreate(
        flow_contents={}, snapshot_metadata=SnapshotMetadataCreate(flow_identifier="f2")
    )
    result = validate_snapshot_create("f1", data)
    assert result.error == "Flow id in path param must match flow id in body"
    assert result.field == "flow_identifier"


@pytest.mark.parametrize("version", [None, 0, -1, True, "1"])
def test_invalid_version_numbers(version) -> None:
    result = validate_version_number(version)
    assert not result.ok
    assert result.field == "version"


def test_valid_version_number() -> None:
    assert validate_version_number(1).unwrap() == 1
