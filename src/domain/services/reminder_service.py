"""Event reminder emails."""

from collections.abc import Callable
from datetime import datetime

import structlog

from domain.entities.group import Group
from domain.entities.membership import MembershipStatus
from domain.entities.reminder import REMINDER_WINDOW, ReminderSent, ReminderType
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.email_service import EmailService

logger = structlog.get_logger()


class ReminderService:
    """Sends 24 hour and 1 hour reminders to approved members."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        email_service: EmailService,
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._email = email_service
        self._clock = clock

    async def send_due_reminders(self) -> int:
        """Send every reminder that is due now. Returns the number of emails sent.

        A reminder is due when the event starts within the ``REMINDER_WINDOW``
        slice that ends at the reminder's lead time, and that reminder type
        has not been recorded for the group yet.
        """
        now = self._clock()
        sent = 0
        for reminder_type in ReminderType:
            window_end = now + reminder_type.lead_time
            async with self._uow_factory() as uow:
                groups = await uow.groups.list_starting_between(
                    window_end - REMINDER_WINDOW, window_end
                )
            for group in groups:
                sent += await self._remind_group(group, reminder_type)
        return sent

    async def _remind_group(self, group: Group, reminder_type: ReminderType) -> int:
        async with self._uow_factory() as uow:
            if await uow.reminders.was_sent(group.id, reminder_type):
                return 0
            members = await uow.memberships.list_by_status(group.id, MembershipStatus.APPROVED)
            accounts = await uow.accounts.get_many([m.username for m in members])

        missing = {m.username for m in members} - {a.username for a in accounts}
        if missing:
            logger.warning(
                "reminder_recipients_missing",
                group_id=str(group.id),
                usernames=sorted(missing),
            )

        delivered = [
            ReminderSent(group_id=group.id, username=account.username, reminder_type=reminder_type)
            for account in accounts
            if await self._email.send_event_reminder(group, account, reminder_type)
        ]
        if not delivered:
            return 0

        async with self._uow_factory() as uow:
            await uow.reminders.record(delivered)
            await uow.commit()

        logger.info(
            "event_reminders_sent",
            group_id=str(group.id),
            reminder_type=reminder_type.value,
            count=len(delivered),
        )
        return len(delivered)
