from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Batch outcome models.

BatchOutcome aggregates one run of the batch driver and carries everything
the SUMMARY line needs.
"""

ROW_UPDATED = "updated"
ROW_SKIPPED = "skipped"


@dataclass(frozen=True)
class RowStat:
    """Per-row statistics (internal helper for BatchOutcome)."""
    row_number: int  # 1-based sheet row
    status: str  # updated/skipped
    elapsed_seconds: float


@dataclass(frozen=True)
class BatchOutcome:
    """Counters of one batch run. Rows that were not candidates are not counted."""
    updated_count: int
    skipped_count: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    row_stats: list[RowStat] | None = None

    @property
    def processed_count(self) -> int:
        return self.updated_count + self.skipped_count
