from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "IssueIdentity",
    "RichLink",
    "ISSUE_STATE_OPEN",
    "ISSUE_STATE_CLOSED",
]

ISSUE_STATE_OPEN = "open"
ISSUE_STATE_CLOSED = "closed"  # terminal state, the only one that mutates a row


@dataclass(frozen=True)
class IssueIdentity:
    """owner/repo/number of a GitHub issue.

    Build it through issue_sync.services.issue_identity.parse_issue_url so
    that only URLs of the exact issue form ever produce one.
    """
    owner: str
    repo: str
    number: str

    @property
    def api_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}/issues/{self.number}"


@dataclass(frozen=True)
class RichLink:
    """Hyperlink metadata attached to a cell, independent of its text."""
    link_url: str | None
    text: str | None = None
