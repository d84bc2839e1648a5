from __future__ import annotations

import re
from datetime import UTC, datetime

from issue_sync.models.sync_result import BatchOutcome
from issue_sync.services.summary import render_summary_line

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY updated=([0-9]+) skipped=([0-9]+) processed=([0-9]+) elapsed_sec=([0-9]+(\.[0-9]+)?)$"
)


def test_summary_line_matches_contract():
    now = datetime.now(UTC)
    line = render_summary_line(BatchOutcome(4, 6, now, now, 12.345))
    m = SUMMARY_PATTERN.match(line)
    assert m, line
    assert int(m.group(1)) + int(m.group(2)) == int(m.group(3))
