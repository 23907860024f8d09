"""Event reminder bookkeeping."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum
from uuid import UUID


class ReminderType(StrEnum):
    """Reminder sent ahead of an event."""

    DAY_BEFORE = "24hour"
    HOUR_BEFORE = "1hour"

    @property
    def lead_time(self) -> timedelta:
        if self is ReminderType.DAY_BEFORE:
            return timedelta(hours=24)
        return timedelta(hours=1)


# Width of the slice before each lead time in which a reminder is due.
REMINDER_WINDOW = timedelta(minutes=10)


@dataclass
class ReminderSent:
    """Record that a reminder went out to a member."""

    group_id: UUID
    username: str
    reminder_type: ReminderType
    sent_at: datetime = field(default_factory=datetime.utcnow)
