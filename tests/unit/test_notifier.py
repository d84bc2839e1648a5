from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from issue_sync.models.config_models import SmtpConfig
from issue_sync.models.notification import NotificationPayload
from issue_sync.services.notifier import NotificationDispatcher, SmtpTransport, render_body, render_subject


@pytest.fixture()
def payload() -> NotificationPayload:
    return NotificationPayload(
        recipient_email="john@example.com",
        issue_url="https://github.com/owner/repo/issues/123",
        issue_state="closed",
        requirement_name="Some requirement",
        row_number=7,
        secondary_ticket_url="https://issues.jira.com/browse/JIRA-12345",
        responsible_name="John Doe",
        container_url="https://docs.google.com/spreadsheets/d/1/edit#gid=0",
        updated_status="Finished",
    )


def test_render_subject(payload):
    assert render_subject(payload) == "Planning Sheet - GH Status Updated for: Some requirement"


def test_render_body(payload):
    body = render_body(payload)
    assert body.startswith("Hello John Doe,")
    assert "Row: 7" in body
    assert "Row link: https://docs.google.com/spreadsheets/d/1/edit#gid=0&range=A7" in body
    assert "GitHub Issue: https://github.com/owner/repo/issues/123" in body
    assert "Issue State: closed" in body
    assert "Updated Status: Finished" in body
    assert "Product JIRA: https://issues.jira.com/browse/JIRA-12345" in body


def test_render_body_without_jira_or_container(payload):
    from dataclasses import replace

    body = render_body(replace(payload, secondary_ticket_url="", container_url="", responsible_name=""))
    assert body.startswith("Hello,")
    assert "Product JIRA: Not specified" in body
    assert "Row link" not in body


def test_dispatcher_sends_rendered_message(payload):
    transport = MagicMock()
    assert NotificationDispatcher(transport).notify(payload) is True
    transport.send.assert_called_once_with("john@example.com", render_subject(payload), render_body(payload))


def test_dispatcher_swallows_transport_errors(payload):
    transport = MagicMock()
    transport.send.side_effect = OSError("connection refused")

    with patch("issue_sync.services.notifier.logger") as log:
        assert NotificationDispatcher(transport).notify(payload) is False
    assert "failed to send email to john@example.com" in log.warning.call_args.args[0]


def test_smtp_transport_sends_message():
    cfg = SmtpConfig(host="smtp.example.com", port=2525, sender="bot@example.com", use_tls=True,
                     user="bot", password="pw")
    with patch("issue_sync.services.notifier.smtplib.SMTP") as smtp_cls:
        smtp = smtp_cls.return_value.__enter__.return_value
        SmtpTransport(cfg).send("john@example.com", "subject", "body")

    smtp_cls.assert_called_once_with("smtp.example.com", 2525, timeout=30)
    smtp.starttls.assert_called_once()
    smtp.login.assert_called_once_with("bot", "pw")
    msg = smtp.send_message.call_args.args[0]
    assert msg["To"] == "john@example.com"
    assert msg["From"] == "bot@example.com"
    assert msg["Subject"] == "subject"


def test_smtp_transport_without_auth():
    with patch("issue_sync.services.notifier.smtplib.SMTP") as smtp_cls:
        smtp = smtp_cls.return_value.__enter__.return_value
        SmtpTransport(SmtpConfig()).send("a@example.com", "s", "b")
    smtp.starttls.assert_not_called()
    smtp.login.assert_not_called()
