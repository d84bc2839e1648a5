from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl import load_workbook
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from ..models.column_map import ColumnIndexMap, ColumnRole
from ..models.config_models import SyncConfig
from ..models.issue import RichLink
from .context import ContextError, SheetContext, SheetNotFoundError, resolve_column_map

"""Workbook backed sheet context (.xlsx via openpyxl).

The first row of the sheet is the header row, every following row is a data
row. The workbook is loaded with formulas kept as text (data_only=False) so
that =HYPERLINK(...) cells reach the URL extractor unchanged; cell hyperlinks
become RichLink metadata.
"""

logger = logging.getLogger(__name__)


def _rich_link(cell: Any) -> RichLink | None:
    # MergedCell には hyperlink が無い場合がある
    hyperlink = getattr(cell, "hyperlink", None)
    if hyperlink is None:
        return None
    target = hyperlink.target or None
    if target is None:
        return None
    return RichLink(link_url=target, text=None if cell.value is None else str(cell.value))


class WorkbookRowAccessor:
    """Row mutation sink writing into an openpyxl worksheet.

    Writes stay in memory until commit() saves the workbook back to ``path``.
    """
    def __init__(self, workbook: Workbook, worksheet: Worksheet, path: Path, column_map: ColumnIndexMap) -> None:
        self.workbook = workbook
        self.worksheet = worksheet
        self.path = path
        self.column_map = column_map
        self._dirty = False

    def set_cell(self, row_number: int, role: ColumnRole, value: Any) -> None:
        column = self.column_map[role] + 1  # openpyxl columns are 1-based
        self.worksheet.cell(row=row_number, column=column, value=value)
        self._dirty = True

    def commit(self) -> None:
        if not self._dirty:
            return
        self.workbook.save(self.path)
        self._dirty = False


class WorkbookContextProvider:
    def __init__(self, config: SyncConfig) -> None:
        self.config = config
        self.path = Path(config.workbook_path)

    def get_context(self) -> SheetContext:
        """Load one consistent snapshot of the configured sheet.

        Raises:
            ContextError: workbook missing or unreadable
            SheetNotFoundError: configured sheet not present
            MissingColumnsError: a required column header is missing
        """
        if not self.path.exists():
            raise ContextError(f"workbook not found: {self.path}")
        try:
            workbook = load_workbook(self.path)
        except Exception as e:
            raise ContextError(f"cannot open workbook {self.path}: {e}") from e

        sheet_name = self.config.sheet_name
        if sheet_name not in workbook.sheetnames:
            raise SheetNotFoundError(f"Sheet '{sheet_name}' not found!")
        worksheet = workbook[sheet_name]

        rows: list[list[Any]] = []
        rich_link_rows: list[list[RichLink | None]] = []
        for cells in worksheet.iter_rows():
            rows.append([c.value for c in cells])
            rich_link_rows.append([_rich_link(c) for c in cells])

        headers = rows[0] if rows else []
        column_map = resolve_column_map(headers, self.config.column_names, self.config.update_mode)

        container_url = self.config.container_url or self.path.resolve().as_uri()
        logger.debug(f"loaded {len(rows)} rows from sheet '{sheet_name}' ({self.path})")
        return SheetContext(
            row_accessor=WorkbookRowAccessor(workbook, worksheet, self.path, column_map),
            rows=rows,
            rich_link_rows=rich_link_rows,
            column_map=column_map,
            container_url=container_url,
        )


def preview_sheet(path: Path, sheet_name: str, nrows: int = 3) -> pd.DataFrame:
    """Read the header and the first ``nrows`` data rows for inspection."""
    if not path.exists():
        raise ContextError(f"workbook not found: {path}")
    with pd.ExcelFile(path) as xls:
        if sheet_name not in [str(n) for n in xls.sheet_names]:
            raise SheetNotFoundError(f"Sheet '{sheet_name}' not found!")
        return xls.parse(sheet_name, header=0, nrows=nrows)
