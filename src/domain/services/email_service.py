"""Email side effects of group activity.

Emails are never sent on the request path. Each one is scheduled on the
background task runner; the recipient's address is resolved from their
account when the task runs, and a missing account only logs a warning.
"""

import asyncio
from collections.abc import Awaitable, Callable
from uuid import UUID

import structlog

from domain.entities.account import Account
from domain.entities.group import Group
from domain.entities.reminder import ReminderType
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.email.sender import EmailRecipient, IEmailSender
from infrastructure.tasks.runner import BackgroundTaskRunner

logger = structlog.get_logger()


class EmailService:
    """Resolves recipients and hands messages to the email sender."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        sender: IEmailSender,
        runner: BackgroundTaskRunner,
        send_timeout: float = 10.0,
    ) -> None:
        self._uow_factory = uow_factory
        self._sender = sender
        self._runner = runner
        self._send_timeout = send_timeout

    def join_requested(self, group: Group, requester_username: str) -> None:
        """Email the organiser about a new join request."""

        async def send(recipient: EmailRecipient) -> None:
            await self._sender.send_join_request_email(recipient, requester_username, group.name)

        self._schedule("join_request_email", group.id, group.organiser_username, send)

    def join_approved(self, group: Group, username: str) -> None:
        """Email a requester that they were approved."""

        async def send(recipient: EmailRecipient) -> None:
            await self._sender.send_join_approval_email(recipient, group.name)

        self._schedule("join_approval_email", group.id, username, send)

    def member_removed(self, group: Group, username: str) -> None:
        """Email a member that the organiser removed them."""

        async def send(recipient: EmailRecipient) -> None:
            await self._sender.send_member_removal_email(recipient, group.name)

        self._schedule("member_removal_email", group.id, username, send)

    async def send_event_reminder(
        self, group: Group, account: Account, reminder_type: ReminderType
    ) -> bool:
        """Send one reminder now. Returns False (and logs) on failure."""
        try:
            await asyncio.wait_for(
                self._sender.send_event_reminder_email(
                    _recipient(account),
                    group.name,
                    group.date_time,
                    group.venue,
                    reminder_type.value,
                ),
                timeout=self._send_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "event_reminder_timed_out",
                group_id=str(group.id),
                username=account.username,
            )
            return False
        except Exception:
            logger.exception(
                "event_reminder_failed",
                group_id=str(group.id),
                username=account.username,
            )
            return False
        return True

    def _schedule(
        self,
        name: str,
        group_id: UUID,
        username: str,
        send: Callable[[EmailRecipient], Awaitable[None]],
    ) -> None:
        async def job() -> None:
            async with self._uow_factory() as uow:
                account = await uow.accounts.get(username)
            if account is None or not account.email:
                logger.warning(
                    "email_recipient_missing",
                    email=name,
                    group_id=str(group_id),
                    username=username,
                )
                return
            await send(_recipient(account))

        self._runner.schedule(name, job, timeout=self._send_timeout)


def _recipient(account: Account) -> EmailRecipient:
    return EmailRecipient(email=account.email, name=account.display_name or account.username)
