"""Reminder repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.reminder import ReminderSent, ReminderType


class IReminderRepository(Protocol):
    """Repository interface for sent-reminder bookkeeping."""

    async def was_sent(self, group_id: UUID, reminder_type: ReminderType) -> bool:
        """Check whether a reminder type already went out for a group."""
        ...

    async def record(self, reminders: list[ReminderSent]) -> None:
        """Record reminders as sent."""
        ...
