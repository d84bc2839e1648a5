# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook

from issue_sync.models.column_map import ColumnRole
from issue_sync.models.config_models import ColumnNames, GitHubConfig, SyncConfig
from issue_sync.sheet.context import SheetContext, resolve_column_map

HEADERS = [
    "Requirement",
    "Product JIRA",
    "Upstream Issue",
    "Status",
    "Responsible",
    "Responsible email",
    "Remaining Work Eng QE",
]
CONTAINER_URL = "https://docs.google.com/spreadsheets/d/12345678910/edit"


def data_row(n: int, status: str = "In progress", issue: str | None = None, email: str = "john@example.com") -> list[Any]:
    return [
        f"Requirement {n}",
        f"https://issues.jira.com/browse/JIRA-{n}",
        issue if issue is not None else f"https://github.com/owner/repo/issues/{n}",
        status,
        "John Doe",
        email,
        "5",
    ]


class FakeRowAccessor:
    def __init__(self) -> None:
        self.writes: list[tuple[int, ColumnRole, Any]] = []
        self.commits = 0

    def set_cell(self, row_number: int, role: ColumnRole, value: Any) -> None:
        self.writes.append((row_number, role, value))

    def commit(self) -> None:
        self.commits += 1


class StaticContextProvider:
    """In-memory context provider over a list of rows (rows[0] = header)."""

    def __init__(self, rows: list[list[Any]], *, update_mode: str = "status") -> None:
        self.rows = rows
        self.update_mode = update_mode
        self.accessor = FakeRowAccessor()
        self.calls = 0

    def get_context(self) -> SheetContext:
        self.calls += 1
        column_map = resolve_column_map(self.rows[0], ColumnNames(), self.update_mode)
        return SheetContext(
            row_accessor=self.accessor,
            rows=self.rows,
            rich_link_rows=[[None] * len(r) for r in self.rows],
            column_map=column_map,
            container_url=CONTAINER_URL,
        )


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        monkeypatch.delenv("SMTP_USER", raising=False)
        monkeypatch.delenv("SMTP_PASSWORD", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """workbook_path: ./data/planning.xlsx
sheet_name: Requirements
container_url: https://docs.google.com/spreadsheets/d/12345678910/edit
max_rows_per_batch: 1000
delay_between_rows_ms: 0
email_notifications_enabled: false
github:
  enable_mock_answer: true
smtp:
  host: smtp.example.com
  port: 2525
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "sync.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_workbook(temp_workdir: Path):
    """Write rows (rows[0] = header) into data/planning.xlsx.

    ``links`` maps (1-based row, 1-based column) -> hyperlink target.
    """
    def _make(rows: list[list[Any]], links: dict[tuple[int, int], str] | None = None,
              sheet_name: str = "Requirements") -> Path:
        wb = Workbook()
        ws = wb.active
        ws.title = sheet_name
        for r in rows:
            ws.append(r)
        for (row, col), target in (links or {}).items():
            ws.cell(row=row, column=col).hyperlink = target
        path = temp_workdir / "data" / "planning.xlsx"
        wb.save(path)
        return path
    return _make


@pytest.fixture()
def sync_config() -> SyncConfig:
    return SyncConfig(workbook_path="./data/planning.xlsx", github=GitHubConfig(enable_mock_answer=False))


@pytest.fixture()
def row_accessor() -> FakeRowAccessor:
    return FakeRowAccessor()


@pytest.fixture()
def context_provider_factory():
    return StaticContextProvider


@pytest.fixture()
def headers() -> list[str]:
    return list(HEADERS)


@pytest.fixture()
def row_factory():
    return data_row
