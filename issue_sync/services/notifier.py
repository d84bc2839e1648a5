from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from ..models.config_models import SmtpConfig
from ..models.notification import NotificationPayload

"""E-mail notification of a GH status change.

NotificationDispatcher renders a NotificationPayload and hands it to a
transport. Transport failures are logged and swallowed: a row that was
updated stays updated whether or not the mail went out.
"""

__all__ = [
    "NotificationTransport",
    "SmtpTransport",
    "NotificationDispatcher",
    "render_subject",
    "render_body",
]

logger = logging.getLogger(__name__)


class NotificationTransport(Protocol):
    def send(self, recipient: str, subject: str, body: str) -> None:
        ...


class SmtpTransport:
    """Plain smtplib delivery, one connection per message."""

    def __init__(self, config: SmtpConfig) -> None:
        self.config = config

    def send(self, recipient: str, subject: str, body: str) -> None:
        msg = EmailMessage()
        msg["From"] = self.config.sender
        msg["To"] = recipient
        msg["Subject"] = subject
        msg.set_content(body)
        with smtplib.SMTP(self.config.host, self.config.port, timeout=30) as smtp:
            if self.config.use_tls:
                smtp.starttls()
            if self.config.user:
                smtp.login(self.config.user, self.config.password or "")
            smtp.send_message(msg)


def render_subject(payload: NotificationPayload) -> str:
    return f"Planning Sheet - GH Status Updated for: {payload.requirement_name}"


def render_body(payload: NotificationPayload) -> str:
    greeting = f"Hello {payload.responsible_name}," if payload.responsible_name else "Hello,"
    lines = [
        greeting,
        "",
        "The GitHub issue status has been updated for the following requirement:",
        "",
        f"Row: {payload.row_number}",
    ]
    if payload.row_url:
        lines.append(f"Row link: {payload.row_url}")
    lines += [
        f"Requirement: {payload.requirement_name}",
        f"GitHub Issue: {payload.issue_url}",
        f"Issue State: {payload.issue_state}",
        f"Updated Status: {payload.updated_status}",
        "",
        "IMPORTANT: Please update the Product JIRA ticket with this status change.",
        f"Product JIRA: {payload.secondary_ticket_url or 'Not specified'}",
        "",
        "This is an automated notification from the planning sheet issue sync.",
    ]
    return "\n".join(lines)


class NotificationDispatcher:
    def __init__(self, transport: NotificationTransport) -> None:
        self.transport = transport

    def notify(self, payload: NotificationPayload) -> bool:
        """Render and send ``payload``. Returns False when delivery failed."""
        try:
            self.transport.send(payload.recipient_email, render_subject(payload), render_body(payload))
        except Exception as e:
            logger.warning(f"failed to send email to {payload.recipient_email}: {e}")
            return False
        return True
