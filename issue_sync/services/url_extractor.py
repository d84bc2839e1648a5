from __future__ import annotations

import logging
import re
from typing import Any

from ..models.issue import RichLink

"""URL extraction from a sheet cell.

A link column may hold a plain URL, a =HYPERLINK("url", "label") formula, or
display text with the real target kept as hyperlink metadata on the cell.
"""

__all__ = [
    "extract_url_from_cell",
]

logger = logging.getLogger(__name__)

HYPERLINK_RE = re.compile(r'^=HYPERLINK\("([^"]+)"\s*,\s*"[^"]*"\)$', re.IGNORECASE)


def extract_url_from_cell(value: Any, rich_link: RichLink | None = None) -> str:
    """Return the bare URL held by a cell.

    Order of precedence:
    1. empty / None value -> ""
    2. HYPERLINK formula -> the quoted URL, verbatim
    3. rich link with a non-empty target -> the target
    4. the trimmed string form of the value
    """
    if value is None or value == "":
        return ""

    value_str = str(value).strip()

    match = HYPERLINK_RE.match(value_str)
    if match:
        logger.debug("  -> extracted from HYPERLINK formula")
        return match.group(1)

    if rich_link is not None and rich_link.link_url:
        logger.debug("  -> extracted from rich text link")
        return rich_link.link_url

    logger.debug("  -> using plain text value")
    return value_str
