from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from ..models.column_map import ColumnIndexMap, ColumnRole, required_roles
from ..models.config_models import ColumnNames
from ..models.issue import RichLink

"""Sheet context: the snapshot one batch works on, and the narrow interfaces
the reconciliation core needs from the tabular store.
"""

__all__ = [
    "ContextError",
    "SheetNotFoundError",
    "MissingColumnsError",
    "RowAccessor",
    "ContextProvider",
    "SheetContext",
    "resolve_column_map",
]


class ContextError(Exception):
    """Raised when the sheet context cannot be built. Fatal to the batch."""


class SheetNotFoundError(ContextError):
    pass


class MissingColumnsError(ContextError):
    pass


class RowAccessor(Protocol):
    def set_cell(self, row_number: int, role: ColumnRole, value: Any) -> None:
        """Write one cell of the 1-based ``row_number``."""

    def commit(self) -> None:
        """Persist the writes made so far."""


@dataclass(frozen=True)
class SheetContext:
    row_accessor: RowAccessor
    rows: list[list[Any]]  # rows[0] is the header row
    rich_link_rows: list[list[RichLink | None]]  # same shape as rows
    column_map: ColumnIndexMap
    container_url: str


class ContextProvider(Protocol):
    def get_context(self) -> SheetContext:
        ...


def resolve_column_map(headers: Sequence[Any], names: ColumnNames, update_mode: str) -> ColumnIndexMap:
    """Resolve header texts into a ColumnIndexMap.

    Raises:
        MissingColumnsError: if a required role cannot be resolved
    """
    column_map = ColumnIndexMap.from_headers(headers, names)
    missing = column_map.missing(required_roles(update_mode))
    if missing:
        labels = sorted(getattr(names, r.value) for r in missing)
        raise MissingColumnsError(f"Required columns not found: {labels}")
    return column_map
