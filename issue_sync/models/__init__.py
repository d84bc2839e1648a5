"""Domain models for the planning sheet <-> GitHub issue sync.

This package contains the domain model classes shared by the sheet reader,
the reconciliation services and the CLI.
"""

from .column_map import ColumnIndexMap, ColumnRole
from .config_models import ColumnNames, GitHubConfig, SmtpConfig, StatusValues, SyncConfig
from .issue import IssueIdentity, RichLink
from .notification import NotificationPayload
from .sync_result import BatchOutcome, RowStat
from .trace_event import TraceEvent

__all__ = [
    # Configuration models
    "ColumnNames",
    "GitHubConfig",
    "SmtpConfig",
    "StatusValues",
    "SyncConfig",
    # Sheet models
    "ColumnIndexMap",
    "ColumnRole",
    "RichLink",
    # Processing models
    "IssueIdentity",
    "NotificationPayload",
    "BatchOutcome",
    "RowStat",
    "TraceEvent",
]
