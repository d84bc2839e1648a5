from __future__ import annotations

from dataclasses import dataclass

"""NotificationPayload model.

Built fresh for every row that switched to the terminal state and handed to
the notification dispatcher. Never persisted.
"""

__all__ = [
    "NotificationPayload",
]


@dataclass(frozen=True)
class NotificationPayload:
    recipient_email: str
    issue_url: str
    issue_state: str
    requirement_name: str
    row_number: int  # 1-based sheet row
    secondary_ticket_url: str  # Product JIRA link, may be ""
    responsible_name: str
    container_url: str
    updated_status: str

    @property
    def row_url(self) -> str:
        """Link that points the reader at the updated row of the container."""
        if not self.container_url:
            return ""
        sep = "&" if "#" in self.container_url else "#"
        return f"{self.container_url}{sep}range=A{self.row_number}"
