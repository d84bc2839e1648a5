"""Sync "In progress" requirement rows of a planning workbook with GitHub issue state."""

__version__ = "0.1.0"
