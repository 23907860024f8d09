"""Unit tests for email senders and content."""

from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from core.config import Settings
from infrastructure.email.factory import build_email_sender
from infrastructure.email.sendgrid_sender import EmailDeliveryError, SendGridEmailSender
from infrastructure.email.sender import (
    EmailRecipient,
    LoggingEmailSender,
    event_reminder_content,
    join_approval_content,
    join_request_content,
)

BOB = EmailRecipient(email="bob@example.com", name="Bob")


class TestContent:
    def test_join_request(self):
        subject, body = join_request_content("bob", "Sunday Football")
        assert subject == "New Join Request for Sunday Football"
        assert "bob has requested to join" in body

    def test_join_approval(self):
        subject, _ = join_approval_content("Sunday Football")
        assert subject == "You're in! Join request for Sunday Football approved"

    def test_day_before_reminder(self):
        subject, body = event_reminder_content(
            "Bob", "Sunday Football", datetime(2026, 6, 7, 10, 30), "Hackney Marshes", "24hour"
        )
        assert subject == "Reminder: Sunday Football is tomorrow"
        assert "10:30" in body
        assert "at Hackney Marshes" in body

    def test_hour_before_reminder_without_venue(self):
        subject, body = event_reminder_content(
            "Bob", "Sunday Football", datetime(2026, 6, 7, 10, 30), None, "1hour"
        )
        assert subject == "Reminder: Sunday Football starts in 1 hour"
        assert " at " not in body


class TestLoggingEmailSender:
    @pytest.mark.asyncio
    async def test_logs_instead_of_sending(self):
        with patch("infrastructure.email.sender.logger") as logger:
            await LoggingEmailSender().send_member_removal_email(BOB, "Sunday Football")

        logger.info.assert_called_once_with(
            "email_logged",
            to="bob@example.com",
            subject="You have been removed from Sunday Football",
        )


class TestSendGridEmailSender:
    def _sender(self, status_code: int) -> tuple[SendGridEmailSender, MagicMock]:
        sender = SendGridEmailSender("SG.test", "noreply@example.com", "Groops")
        client = MagicMock()
        client.send.return_value = MagicMock(status_code=status_code)
        sender._client = client
        return sender, client

    @pytest.mark.asyncio
    async def test_sends_mail(self):
        sender, client = self._sender(202)

        await sender.send_join_approval_email(BOB, "Sunday Football")

        client.send.assert_called_once()
        mail = client.send.call_args.args[0].get()
        assert mail["subject"] == "You're in! Join request for Sunday Football approved"
        assert mail["personalizations"][0]["to"][0]["email"] == "bob@example.com"

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        sender, _ = self._sender(500)

        with pytest.raises(EmailDeliveryError):
            await sender.send_member_removal_email(BOB, "Sunday Football")


class TestFactory:
    def test_logging_sender_without_key(self):
        assert isinstance(build_email_sender(Settings(sendgrid_api_key="")), LoggingEmailSender)

    def test_sendgrid_sender_with_key(self):
        sender = build_email_sender(Settings(sendgrid_api_key="SG.test"))
        assert isinstance(sender, SendGridEmailSender)
