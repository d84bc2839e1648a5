from __future__ import annotations

from ..models.sync_result import BatchOutcome

"""Summary rendering for a finished batch.

SUMMARY line format:
SUMMARY updated={u} skipped={s} processed={u+s} elapsed_sec={elapsed}
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.2f}".rstrip("0").rstrip(".")


def render_summary_line(outcome: BatchOutcome) -> str:
    """Render the SUMMARY line of a batch.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> render_summary_line(BatchOutcome(1, 0, t, t, 0.0))
        'SUMMARY updated=1 skipped=0 processed=1 elapsed_sec=0'
    """
    return (
        f"SUMMARY updated={outcome.updated_count} "
        f"skipped={outcome.skipped_count} "
        f"processed={outcome.processed_count} "
        f"elapsed_sec={_format_seconds(outcome.elapsed_seconds)}"
    )


def render_alert_text(outcome: BatchOutcome) -> str:
    """Short two-line text for interactive reporting."""
    return f"Updated: {outcome.updated_count} row(s)\nSkipped: {outcome.skipped_count} row(s)"
