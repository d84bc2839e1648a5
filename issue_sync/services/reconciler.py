from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ..logging.trace_log import log_trace_event
from ..models.column_map import ColumnIndexMap, ColumnRole
from ..models.config_models import UPDATE_MODE_GH_STATUS, SyncConfig
from ..models.issue import ISSUE_STATE_CLOSED, RichLink
from ..models.notification import NotificationPayload
from ..models.trace_event import (
    STEP_DECIDE,
    STEP_EXTRACT,
    STEP_FETCH,
    STEP_IDENTITY,
    STEP_NOTIFY,
    STEP_UPDATE,
    TraceEvent,
    TraceObserver,
)
from ..sheet.context import RowAccessor
from .github_client import GitHubIssueClient
from .issue_identity import parse_issue_url
from .notifier import NotificationDispatcher
from .url_extractor import extract_url_from_cell

"""Single row reconciliation.

extract URL -> parse identity -> fetch state -> (closed only) write row ->
notify. The first failing step turns the row into a skip; nothing is
written for a skipped row. The row write is committed before the
notification is attempted; a row whose commit fails is a skip and sends
no mail. A failed notification never turns an updated row back into a skip.
"""

__all__ = [
    "RowReconciler",
    "REMAINING_WORK_DONE",
]

logger = logging.getLogger(__name__)

REMAINING_WORK_DONE = "0"


def _cell_text(row: Sequence[Any], column_map: ColumnIndexMap, role: ColumnRole) -> str:
    value = column_map.cell(row, role)
    return str(value).strip() if value else ""


def _rich_cell(rich_row: Sequence[RichLink | None] | None, column_map: ColumnIndexMap, role: ColumnRole) -> RichLink | None:
    if not rich_row:
        return None
    return column_map.cell(rich_row, role)


class RowReconciler:
    def __init__(
        self,
        config: SyncConfig,
        client: GitHubIssueClient,
        dispatcher: NotificationDispatcher | None = None,
        observer: TraceObserver | None = None,
    ) -> None:
        self.config = config
        self.client = client
        self.dispatcher = dispatcher
        self.observer = observer or log_trace_event

    def _trace(self, row_number: int, step: str, message: str, **data: Any) -> None:
        self.observer(TraceEvent.create(row_number, step, message, **data))

    def reconcile(
        self,
        row_accessor: RowAccessor,
        row_index: int,
        row: Sequence[Any],
        rich_row: Sequence[RichLink | None] | None,
        column_map: ColumnIndexMap,
        container_url: str,
    ) -> bool:
        """Reconcile one row. Returns True if the row was updated, False if skipped.

        Args:
            row_accessor: sink receiving the cell writes (committed once per updated row)
            row_index: zero-based index into the sheet rows (0 = header)
            row: raw cell values of the row
            rich_row: hyperlink metadata per cell (same shape as ``row``)
            column_map: resolved column positions
            container_url: URL of the workbook, used for the row link in mails
        """
        row_number = row_index + 1

        issue_url = extract_url_from_cell(
            column_map.cell(row, ColumnRole.UPSTREAM_ISSUE),
            _rich_cell(rich_row, column_map, ColumnRole.UPSTREAM_ISSUE),
        )
        self._trace(row_number, STEP_EXTRACT, "extracted upstream issue url", url=issue_url)

        responsible_name = _cell_text(row, column_map, ColumnRole.RESPONSIBLE)
        responsible_email = _cell_text(row, column_map, ColumnRole.RESPONSIBLE_EMAIL)

        identity = parse_issue_url(issue_url)
        if identity is None:
            self._trace(row_number, STEP_IDENTITY, "invalid GitHub issue url, skipping row", url=issue_url)
            return False
        self._trace(
            row_number, STEP_IDENTITY, "valid GitHub issue url",
            owner=identity.owner, repo=identity.repo, number=identity.number,
        )

        issue_state = self.client.fetch_state(identity)
        self._trace(row_number, STEP_FETCH, "fetched issue state", state=issue_state)

        if issue_state != ISSUE_STATE_CLOSED:
            self._trace(row_number, STEP_DECIDE, "issue not closed, skipping row", state=issue_state)
            return False

        updated_status = self._write_row(row_accessor, row_number, row, column_map, issue_state)
        try:
            row_accessor.commit()
        except Exception as e:
            logger.error(f"row {row_number}: failed to persist update: {e}")
            self._trace(row_number, STEP_UPDATE, "failed to persist row, skipping row", error=str(e))
            return False
        self._trace(row_number, STEP_UPDATE, "row updated", status=updated_status, mode=self.config.update_mode)

        if not self.config.email_notifications_enabled or self.dispatcher is None:
            return True
        if not responsible_email:
            self._trace(row_number, STEP_NOTIFY, "no email for responsible person, skipping notification")
            return True

        payload = NotificationPayload(
            recipient_email=responsible_email,
            issue_url=issue_url,
            issue_state=issue_state,
            requirement_name=_cell_text(row, column_map, ColumnRole.REQUIREMENT),
            row_number=row_number,
            secondary_ticket_url=extract_url_from_cell(
                column_map.cell(row, ColumnRole.PRODUCT_JIRA),
                _rich_cell(rich_row, column_map, ColumnRole.PRODUCT_JIRA),
            ),
            responsible_name=responsible_name,
            container_url=container_url,
            updated_status=updated_status,
        )
        try:
            sent = self.dispatcher.notify(payload)
        except Exception as e:
            logger.warning(f"row {row_number}: notification failed: {e}")
            sent = False
        self._trace(row_number, STEP_NOTIFY, "notification dispatched" if sent else "notification failed",
                    recipient=responsible_email)
        return True

    def _write_row(
        self,
        row_accessor: RowAccessor,
        row_number: int,
        row: Sequence[Any],
        column_map: ColumnIndexMap,
        issue_state: str,
    ) -> str:
        """Apply the configured update mode; returns the status label the row now carries."""
        if self.config.update_mode == UPDATE_MODE_GH_STATUS:
            return _write_gh_status(row_accessor, row_number, row, column_map, issue_state)
        return _write_finished_status(row_accessor, row_number, self.config.status_values.finished)


def _write_finished_status(row_accessor: RowAccessor, row_number: int, finished_label: str) -> str:
    row_accessor.set_cell(row_number, ColumnRole.STATUS, finished_label)
    row_accessor.set_cell(row_number, ColumnRole.REMAINING_WORK, REMAINING_WORK_DONE)
    return finished_label


def _write_gh_status(
    row_accessor: RowAccessor,
    row_number: int,
    row: Sequence[Any],
    column_map: ColumnIndexMap,
    issue_state: str,
) -> str:
    # status 列は触らない
    row_accessor.set_cell(row_number, ColumnRole.GH_STATUS, issue_state)
    return _cell_text(row, column_map, ColumnRole.STATUS)
