from __future__ import annotations

import re

from ..models.issue import IssueIdentity

__all__ = [
    "GITHUB_ISSUE_RE",
    "parse_issue_url",
]

# exact issue URL only: no trailing segments, no /pull/ paths
GITHUB_ISSUE_RE = re.compile(r"^https://github\.com/([^/]+)/([^/]+)/issues/(\d+)$")


def parse_issue_url(url: str) -> IssueIdentity | None:
    """Parse a GitHub issue URL into an IssueIdentity.

    Returns None for anything that is not exactly
    ``https://github.com/<owner>/<repo>/issues/<digits>``.

    Raises:
        TypeError: if ``url`` is None. Callers always hold a string (the
            extractor returns "" for empty cells), so None is a bug.
    """
    if url is None:
        raise TypeError("issue url must be a string, got None")
    match = GITHUB_ISSUE_RE.fullmatch(url)
    if not match:
        return None
    owner, repo, number = match.groups()
    return IssueIdentity(owner=owner, repo=repo, number=number)
