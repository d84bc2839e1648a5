from __future__ import annotations

from pathlib import Path

import pytest
from openpyxl import load_workbook

from issue_sync.models.column_map import ColumnRole
from issue_sync.models.config_models import SyncConfig
from issue_sync.sheet.context import ContextError, MissingColumnsError, SheetNotFoundError
from issue_sync.sheet.reader import WorkbookContextProvider, preview_sheet


def _config(path: Path, **kw) -> SyncConfig:
    return SyncConfig(workbook_path=str(path), **kw)


def test_get_context_reads_rows_links_and_columns(make_workbook, headers, row_factory):
    rows = [headers, row_factory(1), row_factory(2, status="Finished")]
    rows[1][2] = '=HYPERLINK("https://github.com/owner/repo/issues/1", "Issue 1")'
    rows[2][2] = "Issue 2"
    path = make_workbook(rows, links={(3, 3): "https://github.com/owner/repo/issues/2"})

    ctx = WorkbookContextProvider(_config(path, container_url="https://example.com/sheet")).get_context()

    assert len(ctx.rows) == 3
    assert ctx.rows[1][2] == '=HYPERLINK("https://github.com/owner/repo/issues/1", "Issue 1")'
    assert ctx.rich_link_rows[2][2].link_url == "https://github.com/owner/repo/issues/2"
    assert ctx.rich_link_rows[1][2] is None
    assert ctx.column_map[ColumnRole.STATUS] == 3
    assert ctx.column_map[ColumnRole.UPSTREAM_ISSUE] == 2
    assert ctx.column_map[ColumnRole.REMAINING_WORK] == 6
    assert ctx.column_map.get(ColumnRole.GH_STATUS) is None
    assert ctx.container_url == "https://example.com/sheet"


def test_container_url_defaults_to_file_uri(make_workbook, headers, row_factory):
    path = make_workbook([headers, row_factory(1)])
    ctx = WorkbookContextProvider(_config(path)).get_context()
    assert ctx.container_url == path.resolve().as_uri()


def test_remaining_work_matches_header_prefix(make_workbook, headers, row_factory):
    headers[6] = "Remaining Work Eng QE (days)"
    path = make_workbook([headers, row_factory(1)])
    ctx = WorkbookContextProvider(_config(path)).get_context()
    assert ctx.column_map[ColumnRole.REMAINING_WORK] == 6


def test_missing_sheet(make_workbook, headers):
    path = make_workbook([headers], sheet_name="Other")
    with pytest.raises(SheetNotFoundError, match="Sheet 'Requirements' not found!"):
        WorkbookContextProvider(_config(path)).get_context()


def test_missing_workbook(temp_workdir):
    with pytest.raises(ContextError, match="workbook not found"):
        WorkbookContextProvider(_config(temp_workdir / "nope.xlsx")).get_context()


@pytest.mark.parametrize("drop", ["Status", "Upstream Issue", "Remaining Work Eng QE"])
def test_missing_required_column(make_workbook, headers, drop):
    headers[headers.index(drop)] = "QE Assignee"
    path = make_workbook([headers])
    with pytest.raises(MissingColumnsError, match="Required columns not found"):
        WorkbookContextProvider(_config(path)).get_context()


def test_gh_status_mode_requires_gh_status_column(make_workbook, headers):
    path = make_workbook([headers])
    with pytest.raises(MissingColumnsError, match="GH Status"):
        WorkbookContextProvider(_config(path, update_mode="gh_status")).get_context()


def test_row_accessor_writes_and_commits(make_workbook, headers, row_factory):
    path = make_workbook([headers, row_factory(1)])
    ctx = WorkbookContextProvider(_config(path)).get_context()

    ctx.row_accessor.set_cell(2, ColumnRole.STATUS, "Finished")
    ctx.row_accessor.set_cell(2, ColumnRole.REMAINING_WORK, "0")
    ctx.row_accessor.commit()

    ws = load_workbook(path)["Requirements"]
    assert ws.cell(row=2, column=4).value == "Finished"
    assert ws.cell(row=2, column=7).value == "0"


def test_preview_sheet(make_workbook, headers, row_factory):
    path = make_workbook([headers] + [row_factory(i) for i in range(1, 6)])
    df = preview_sheet(path, "Requirements", nrows=3)
    assert list(df.columns) == headers
    assert len(df) == 3


def test_preview_sheet_missing_sheet(make_workbook, headers):
    path = make_workbook([headers])
    with pytest.raises(SheetNotFoundError):
        preview_sheet(path, "Other")
