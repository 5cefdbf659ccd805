"""Shared enumerations for the flow registry.

Cross-cutting enums used by application and infrastructure.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class SortOrder(_ValuesMixin, str, Enum):
    """Direction of a sort parameter ("name:ASC")."""

    ASC = "ASC"
    DESC = "DESC"
