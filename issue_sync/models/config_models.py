from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the planning sheet <-> GitHub issue sync.

These are the typed domain models the loader in issue_sync/config/loader.py
produces. Every dataclass is frozen so one batch run always sees one
consistent configuration.
"""

UPDATE_MODE_STATUS = "status"
UPDATE_MODE_GH_STATUS = "gh_status"


@dataclass(frozen=True)
class ColumnNames:
    """Header texts used to locate each column role in the sheet.

    remaining_work is matched by prefix: the Eng and QE headers are merged
    in the planning sheet so the physical header text carries a suffix.
    """
    status: str = "Status"
    upstream_issue: str = "Upstream Issue"
    requirement: str = "Requirement"
    product_jira: str = "Product JIRA"
    responsible: str = "Responsible"
    responsible_email: str = "Responsible email"
    remaining_work: str = "Remaining Work Eng QE"
    gh_status: str = "GH Status"


@dataclass(frozen=True)
class StatusValues:
    in_progress: str = "In progress"
    finished: str = "Finished"


@dataclass(frozen=True)
class GitHubConfig:
    """GitHub REST API access.

    enable_mock_answer short-circuits every fetch to "closed" without
    touching the network (dry runs and tests).
    """
    enable_mock_answer: bool = False
    api_base_url: str = "https://api.github.com"
    timeout_sec: float = 30.0
    token: str | None = None  # GITHUB_TOKEN (env only)


@dataclass(frozen=True)
class SmtpConfig:
    host: str = "localhost"
    port: int = 25
    sender: str = "issue-sync@localhost"
    use_tls: bool = False
    user: str | None = None  # SMTP_USER (env only)
    password: str | None = None  # SMTP_PASSWORD (env only)


@dataclass(frozen=True)
class SyncConfig:
    """Root configuration object for one sync run."""
    workbook_path: str
    sheet_name: str = "Requirements"
    container_url: str | None = None  # None -> file URI of the workbook
    max_rows_per_batch: int = 1000
    delay_between_rows_ms: int = 0  # 0 = no delay
    email_notifications_enabled: bool = True
    update_mode: str = UPDATE_MODE_STATUS
    column_names: ColumnNames = field(default_factory=ColumnNames)
    status_values: StatusValues = field(default_factory=StatusValues)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    smtp: SmtpConfig = field(default_factory=SmtpConfig)
