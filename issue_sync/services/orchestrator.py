from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime

from ..models.column_map import ColumnRole
from ..models.config_models import SyncConfig
from ..models.sync_result import ROW_SKIPPED, ROW_UPDATED, BatchOutcome, RowStat
from ..sheet.context import ContextProvider, SheetContext
from .progress import RowProgressTracker
from .reconciler import RowReconciler

logger = logging.getLogger(__name__)

"""Batch orchestration for the sheet <-> GitHub issue sync.

run_batch():
1. Takes one context snapshot (rows, hyperlinks, column map, container url)
2. Walks the data rows in order; only rows whose status equals the
   in-progress label are candidates, all others are ignored
3. Stops once updated + skipped reaches max_rows_per_batch
4. Sleeps delay_between_rows_ms after each candidate row (if non-zero)
5. Returns a BatchOutcome and hands it to the reporter

The reconciler commits every updated row before its notification goes out:
a run killed by its host keeps the rows it already updated. A row whose
commit fails counts as skipped and the batch carries on.
"""

Reporter = Callable[[BatchOutcome], None]


class SyncError(Exception):
    """Base exception for sync errors."""
    pass


class RowSelectionError(SyncError):
    """Raised when a single-row sync targets the header or a missing row."""


class BatchDriver:
    def __init__(
        self,
        config: SyncConfig,
        context_provider: ContextProvider,
        reconciler: RowReconciler,
        *,
        reporter: Reporter | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.context_provider = context_provider
        self.reconciler = reconciler
        self.reporter = reporter
        self._sleep = sleep

    def _candidate_indexes(self, context: SheetContext) -> list[int]:
        in_progress = self.config.status_values.in_progress
        return [
            i
            for i in range(1, len(context.rows))  # rows[0] is the header
            if context.column_map.cell(context.rows[i], ColumnRole.STATUS) == in_progress
        ]

    def _reconcile(self, context: SheetContext, row_index: int) -> bool:
        rich_row = context.rich_link_rows[row_index] if row_index < len(context.rich_link_rows) else None
        return self.reconciler.reconcile(
            context.row_accessor,
            row_index,
            context.rows[row_index],
            rich_row,
            context.column_map,
            context.container_url,
        )

    def run_batch(self) -> BatchOutcome:
        """Sync all candidate rows of the sheet (up to max_rows_per_batch).

        Raises:
            ContextError: sheet or required columns missing (before any write)
        """
        start_time = datetime.now(UTC)
        max_rows = self.config.max_rows_per_batch
        delay_ms = self.config.delay_between_rows_ms

        logger.info(
            f"Starting sync: sheet='{self.config.sheet_name}' "
            f"email_notifications={'ENABLED' if self.config.email_notifications_enabled else 'DISABLED'} "
            f"mock_github={self.config.github.enable_mock_answer} "
            f"max_rows={max_rows} delay_ms={delay_ms}"
        )

        context = self.context_provider.get_context()
        logger.info(f"Loaded {len(context.rows)} rows from sheet")

        candidates = self._candidate_indexes(context)
        logger.debug(f"{len(candidates)} '{self.config.status_values.in_progress}' rows found")

        updated_count = 0
        skipped_count = 0
        row_stats: list[RowStat] = []

        with RowProgressTracker(min(len(candidates), max_rows)) as progress:
            for row_index in candidates:
                if updated_count + skipped_count >= max_rows:
                    logger.info(f"Row limit reached ({max_rows}); remaining rows are left for the next run")
                    break
                row_number = row_index + 1
                progress.start_row(row_number)

                row_start = time.monotonic()
                updated = self._reconcile(context, row_index)
                if updated:
                    updated_count += 1
                else:
                    skipped_count += 1
                row_stats.append(
                    RowStat(
                        row_number=row_number,
                        status=ROW_UPDATED if updated else ROW_SKIPPED,
                        elapsed_seconds=time.monotonic() - row_start,
                    )
                )
                progress.finish_row(updated=updated_count, skipped=skipped_count)

                if delay_ms > 0:
                    self._sleep(delay_ms / 1000)

        end_time = datetime.now(UTC)
        outcome = BatchOutcome(
            updated_count=updated_count,
            skipped_count=skipped_count,
            start_time=start_time,
            end_time=end_time,
            elapsed_seconds=(end_time - start_time).total_seconds(),
            row_stats=row_stats,
        )
        logger.info(f"Completed: {updated_count} updated, {skipped_count} skipped")
        self._report(outcome)
        return outcome

    def run_single_row(self, row_number: int) -> bool:
        """Sync one row regardless of its status. ``row_number`` is 1-based.

        Raises:
            RowSelectionError: header row or a row outside the sheet
        """
        if row_number <= 1:
            raise RowSelectionError("Cannot update the header row. Please select a data row.")
        context = self.context_provider.get_context()
        if row_number > len(context.rows):
            raise RowSelectionError(f"row {row_number} is outside the sheet ({len(context.rows)} rows)")
        updated = self._reconcile(context, row_number - 1)
        logger.info(f"Completed update of row {row_number}: {'updated' if updated else 'skipped'}")
        return updated

    def _report(self, outcome: BatchOutcome) -> None:
        if self.reporter is None:
            return
        try:
            self.reporter(outcome)
        except Exception as e:
            # unattended runs may have no reporting channel
            logger.debug(f"summary report unavailable: {e}")
