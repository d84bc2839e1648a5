from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .config_models import UPDATE_MODE_GH_STATUS, ColumnNames

"""Column roles of the planning sheet and their resolved positions.

The header row is scanned once per batch; afterwards every component works
with fixed zero-based offsets instead of header texts.
"""

__all__ = [
    "ColumnRole",
    "ColumnIndexMap",
    "required_roles",
]


class ColumnRole(Enum):
    """Semantic role of a sheet column."""
    REQUIREMENT = "requirement"
    PRODUCT_JIRA = "product_jira"
    UPSTREAM_ISSUE = "upstream_issue"
    STATUS = "status"
    RESPONSIBLE = "responsible"
    RESPONSIBLE_EMAIL = "responsible_email"
    REMAINING_WORK = "remaining_work"
    GH_STATUS = "gh_status"


# roles matched by header prefix instead of exact text
PREFIX_ROLES = frozenset({ColumnRole.REMAINING_WORK})


def required_roles(update_mode: str) -> tuple[ColumnRole, ...]:
    """Roles that must be present before any row is touched.

    STATUS and UPSTREAM_ISSUE are always required; the write target of the
    selected update mode is required as well.
    """
    if update_mode == UPDATE_MODE_GH_STATUS:
        return (ColumnRole.STATUS, ColumnRole.UPSTREAM_ISSUE, ColumnRole.GH_STATUS)
    return (ColumnRole.STATUS, ColumnRole.UPSTREAM_ISSUE, ColumnRole.REMAINING_WORK)


@dataclass(frozen=True)
class ColumnIndexMap:
    """Role -> zero-based column index. Missing optional roles map to None."""
    indexes: dict[ColumnRole, int | None]

    @classmethod
    def from_headers(cls, headers: Sequence[Any], names: ColumnNames) -> ColumnIndexMap:
        labels = ["" if h is None else str(h).strip() for h in headers]
        indexes: dict[ColumnRole, int | None] = {}
        for role in ColumnRole:
            wanted = getattr(names, role.value)
            if role in PREFIX_ROLES:
                indexes[role] = next((i for i, h in enumerate(labels) if h.startswith(wanted)), None)
            else:
                indexes[role] = labels.index(wanted) if wanted in labels else None
        return cls(indexes=indexes)

    def get(self, role: ColumnRole) -> int | None:
        return self.indexes.get(role)

    def __getitem__(self, role: ColumnRole) -> int:
        idx = self.indexes.get(role)
        if idx is None:
            raise KeyError(f"column role not resolved: {role.value}")
        return idx

    def missing(self, roles: Iterable[ColumnRole]) -> list[ColumnRole]:
        return [r for r in roles if self.indexes.get(r) is None]

    def cell(self, row: Sequence[Any], role: ColumnRole) -> Any:
        """Value of ``role`` in ``row``; None when the role or the cell is absent."""
        idx = self.indexes.get(role)
        if idx is None or idx >= len(row):
            return None
        return row[idx]
