"""Email sender protocol and a logging-only implementation."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

import structlog

logger = structlog.get_logger()


@dataclass
class EmailRecipient:
    """Who an email goes to."""

    email: str
    name: str


class IEmailSender(Protocol):
    """Protocol for transactional email delivery."""

    async def send_join_request_email(
        self, organiser: EmailRecipient, requester_username: str, group_name: str
    ) -> None:
        """Tell the organiser that someone asked to join their group."""
        ...

    async def send_join_approval_email(
        self, requester: EmailRecipient, group_name: str
    ) -> None:
        """Tell a requester that their join request was approved."""
        ...

    async def send_member_removal_email(
        self, member: EmailRecipient, group_name: str
    ) -> None:
        """Tell a member that the organiser removed them."""
        ...

    async def send_event_reminder_email(
        self,
        member: EmailRecipient,
        group_name: str,
        date_time: datetime,
        venue: str | None,
        reminder_type: str,
    ) -> None:
        """Remind a member of an upcoming event."""
        ...


def join_request_content(requester_username: str, group_name: str) -> tuple[str, str]:
    return (
        f"New Join Request for {group_name}",
        f"{requester_username} has requested to join your group '{group_name}'",
    )


def join_approval_content(group_name: str) -> tuple[str, str]:
    return (
        f"You're in! Join request for {group_name} approved",
        f"Your request to join '{group_name}' has been approved!",
    )


def member_removal_content(group_name: str) -> tuple[str, str]:
    return (
        f"You have been removed from {group_name}",
        f"You have been removed from the group '{group_name}'",
    )


def event_reminder_content(
    member_name: str,
    group_name: str,
    date_time: datetime,
    venue: str | None,
    reminder_type: str,
) -> tuple[str, str]:
    if reminder_type == "24hour":
        subject = f"Reminder: {group_name} is tomorrow"
    else:
        subject = f"Reminder: {group_name} starts in 1 hour"
    when = date_time.strftime("%a %b %d, %H:%M UTC")
    where = f" at {venue}" if venue else ""
    body = (
        f"Hello {member_name}, your event {group_name} is coming up soon "
        f"on {when}{where}. Don't miss it!"
    )
    return subject, body


class LoggingEmailSender:
    """Email sender that only logs; used when no provider key is configured."""

    async def send_join_request_email(
        self, organiser: EmailRecipient, requester_username: str, group_name: str
    ) -> None:
        subject, _ = join_request_content(requester_username, group_name)
        self._log(organiser, subject)

    async def send_join_approval_email(
        self, requester: EmailRecipient, group_name: str
    ) -> None:
        subject, _ = join_approval_content(group_name)
        self._log(requester, subject)

    async def send_member_removal_email(
        self, member: EmailRecipient, group_name: str
    ) -> None:
        subject, _ = member_removal_content(group_name)
        self._log(member, subject)

    async def send_event_reminder_email(
        self,
        member: EmailRecipient,
        group_name: str,
        date_time: datetime,
        venue: str | None,
        reminder_type: str,
    ) -> None:
        subject, _ = event_reminder_content(
            member.name, group_name, date_time, venue, reminder_type
        )
        self._log(member, subject)

    def _log(self, recipient: EmailRecipient, subject: str) -> None:
        logger.info("email_logged", to=recipient.email, subject=subject)
