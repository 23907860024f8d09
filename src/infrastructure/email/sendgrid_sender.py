"""SendGrid email sender."""

import asyncio
from datetime import datetime

import structlog
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Content, Email, Mail, To

from infrastructure.email.sender import (
    EmailRecipient,
    event_reminder_content,
    join_approval_content,
    join_request_content,
    member_removal_content,
)

logger = structlog.get_logger()

MIN_ERROR_STATUS = 400


class EmailDeliveryError(Exception):
    """SendGrid refused or failed to accept a message."""


class SendGridEmailSender:
    """IEmailSender implementation backed by the SendGrid v3 API.

    The SendGrid client is synchronous, so each send runs in a worker
    thread to keep the event loop free.
    """

    def __init__(self, api_key: str, from_email: str, from_name: str) -> None:
        self._client = SendGridAPIClient(api_key)
        self._from = Email(from_email, from_name)

    async def send_join_request_email(
        self, organiser: EmailRecipient, requester_username: str, group_name: str
    ) -> None:
        subject, body = join_request_content(requester_username, group_name)
        await self._send(organiser, subject, body)

    async def send_join_approval_email(
        self, requester: EmailRecipient, group_name: str
    ) -> None:
        subject, body = join_approval_content(group_name)
        await self._send(requester, subject, body)

    async def send_member_removal_email(
        self, member: EmailRecipient, group_name: str
    ) -> None:
        subject, body = member_removal_content(group_name)
        await self._send(member, subject, body)

    async def send_event_reminder_email(
        self,
        member: EmailRecipient,
        group_name: str,
        date_time: datetime,
        venue: str | None,
        reminder_type: str,
    ) -> None:
        subject, body = event_reminder_content(
            member.name, group_name, date_time, venue, reminder_type
        )
        await self._send(member, subject, body)

    async def _send(self, recipient: EmailRecipient, subject: str, body: str) -> None:
        mail = Mail(self._from, To(recipient.email, recipient.name), subject)
        mail.content = [Content("text/plain", body)]

        response = await asyncio.to_thread(self._client.send, mail)
        if response.status_code >= MIN_ERROR_STATUS:
            raise EmailDeliveryError(
                f"SendGrid returned {response.status_code} for {recipient.email}"
            )
        logger.info("email_sent", to=recipient.email, subject=subject)
