"""SQLAlchemy implementation of Reminder repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.reminder import ReminderSent, ReminderType
from infrastructure.database.models import ReminderSentModel


class SQLAlchemyReminderRepository:
    """SQLAlchemy implementation of IReminderRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def was_sent(self, group_id: UUID, reminder_type: ReminderType) -> bool:
        """Check whether a reminder type already went out for a group."""
        stmt = (
            select(ReminderSentModel.id)
            .where(
                ReminderSentModel.group_id == group_id,
                ReminderSentModel.reminder_type == reminder_type.value,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def record(self, reminders: list[ReminderSent]) -> None:
        """Record reminders as sent."""
        self._session.add_all(
            [
                ReminderSentModel(
                    group_id=r.group_id,
                    username=r.username,
                    reminder_type=r.reminder_type.value,
                    sent_at=r.sent_at,
                )
                for r in reminders
            ]
        )
        await self._session.flush()
