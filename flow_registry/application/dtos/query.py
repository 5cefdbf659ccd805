"""Query DTOs: sort parameters for listing flows ("field:order", e.g. "name:ASC")."""

from __future__ import annotations

from dataclasses import dataclass, field

from flow_registry.core.constants import SORT_PARAM_SEP
from flow_registry.domain.exceptions import ValidationException
from flow_registry.shared.enums import SortOrder


@dataclass(frozen=True)
class SortParameter:
    """One sort key: field name and direction."""

    field_name: str
    order: SortOrder = SortOrder.ASC

    @classmethod
    def from_string(cls, value: str) -> SortParameter:
        """Parse "field:order" (order is ASC or DESC, case-insensitive).

        Raises:
            ValidationException: If the string is not exactly "field:order"
                or the order is unknown.
        """
        if value is None or not value.strip():
            raise ValidationException("Sort parameter cannot be blank", field="sort")
        parts = value.strip().split(SORT_PARAM_SEP)
        if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
            raise ValidationException(
                f"Sort parameter must be in the form field:order, got '{value}'",
                field="sort",
            )
        order = parts[1].strip().upper()
        if order not in SortOrder.values():
            raise ValidationException(
                f"Sort order must be one of {SortOrder.values()}, got '{parts[1]}'",
                field="sort",
            )
        return cls(field_name=parts[0].strip(), order=SortOrder(order))

    def __str__(self) -> str:
        return f"{self.field_name}{SORT_PARAM_SEP}{self.order.value}"


@dataclass(frozen=True)
class QueryParameters:
    """Parameters for listing flows. Sort parameters apply in order (first is primary)."""

    sort_parameters: tuple[SortParameter, ...] = field(default_factory=tuple)

    @classmethod
    def from_strings(cls, values: list[str] | None) -> QueryParameters:
        """Build from raw "field:order" strings (e.g. repeated ?sort= query params)."""
        return cls(tuple(SortParameter.from_string(v) for v in values or []))
