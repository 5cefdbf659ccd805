"""Version lineage value objects.

A flow's history is an ordered index of snapshot metadata keyed by version
number: ascending iteration, one entry per version, every entry owned by the
same flow. First version is 1; each new version is the current maximum + 1.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from flow_registry.domain.exceptions import ValidationException

if TYPE_CHECKING:
    from flow_registry.domain.entities.flow import SnapshotMetadataEntity

FIRST_VERSION = 1
# Versions are stored in a 32-bit integer column.
MAX_VERSION = 2**31 - 1


def next_version(current_max: int) -> int:
    """Return the version number that follows current_max (0 means no versions).

    Raises:
        ValidationException: If current_max is negative.
    """
    if current_max < 0:
        raise ValidationException(
            f"Current maximum version cannot be negative: {current_max}",
            field="version",
        )
    return max(current_max + 1, FIRST_VERSION)


@dataclass(frozen=True)
class NoVersionsYet:
    """Explicit result for "latest version" of a flow that has no snapshots.

    Returned instead of None so an empty lineage cannot be mistaken for a
    missing payload or a missing flow.
    """

    flow_identifier: str


class SnapshotMetadataSet:
    """Immutable set of snapshot metadata for one flow, sorted ascending by version.

    Construction sorts the entries and rejects duplicate versions and entries
    that belong to a different flow.
    """

    __slots__ = ("_flow_identifier", "_entries", "_versions")

    def __init__(
        self,
        flow_identifier: str,
        entries: Iterable[SnapshotMetadataEntity] = (),
    ) -> None:
        ordered = sorted(entries, key=lambda m: m.version)
        versions: list[int] = []
        for metadata in ordered:
            if metadata.flow_identifier != flow_identifier:
                raise ValidationException(
                    f"Snapshot metadata for flow {metadata.flow_identifier} "
                    f"cannot belong to flow {flow_identifier}",
                    field="flow_identifier",
                )
            if versions and versions[-1] == metadata.version:
                raise ValidationException(
                    f"Duplicate version {metadata.version} for flow {flow_identifier}",
                    field="version",
                )
            versions.append(metadata.version)
        self._flow_identifier = flow_identifier
        self._entries: tuple[SnapshotMetadataEntity, ...] = tuple(ordered)
        self._versions: tuple[int, ...] = tuple(versions)

    @property
    def flow_identifier(self) -> str:
        return self._flow_identifier

    def versions(self) -> tuple[int, ...]:
        return self._versions

    def last(self) -> SnapshotMetadataEntity | None:
        """Return the entry with the highest version, or None when empty."""
        return self._entries[-1] if self._entries else None

    def __iter__(self) -> Iterator[SnapshotMetadataEntity]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SnapshotMetadataSet):
            return NotImplemented
        return (
            self._flow_identifier == other._flow_identifier
            and self._entries == other._entries
        )

    def __hash__(self) -> int:
        return hash((self._flow_identifier, self._entries))

    def __repr__(self) -> str:
        return f"SnapshotMetadataSet({self._flow_identifier!r}, versions={list(self._versions)})"
