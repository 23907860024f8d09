"""SQLAlchemy implementation of Notification repository."""

from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.notification import Notification, NotificationType
from infrastructure.database.models import NotificationModel


class SQLAlchemyNotificationRepository:
    """SQLAlchemy implementation of INotificationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, notification: Notification) -> Notification:
        """Create a new notification."""
        model = self._to_model(notification)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def has_unread(
        self, recipient_username: str, type: NotificationType, group_id: UUID
    ) -> bool:
        """Check for an unread notification of a type for a recipient and group."""
        stmt = (
            select(NotificationModel.id)
            .where(
                NotificationModel.recipient_username == recipient_username,
                NotificationModel.type == type.value,
                NotificationModel.group_id == group_id,
                NotificationModel.read.is_(False),
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_for_recipient(
        self,
        recipient_username: str,
        unread_only: bool = False,
        limit: int = 50,
    ) -> list[Notification]:
        """Get a recipient's notifications, newest first."""
        stmt = select(NotificationModel).where(
            NotificationModel.recipient_username == recipient_username
        )
        if unread_only:
            stmt = stmt.where(NotificationModel.read.is_(False))

        stmt = stmt.order_by(NotificationModel.created_at.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def count_unread(self, recipient_username: str) -> int:
        """Count a recipient's unread notifications."""
        stmt = (
            select(func.count())
            .select_from(NotificationModel)
            .where(
                NotificationModel.recipient_username == recipient_username,
                NotificationModel.read.is_(False),
            )
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def mark_read(self, id: UUID, recipient_username: str) -> bool:
        """Mark one notification read. False if it is not the recipient's."""
        stmt = (
            update(NotificationModel)
            .where(
                NotificationModel.id == id,
                NotificationModel.recipient_username == recipient_username,
            )
            .values(read=True)
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[return-value]

    async def mark_all_read(self, recipient_username: str) -> int:
        """Mark every notification of a recipient read. Returns count updated."""
        stmt = (
            update(NotificationModel)
            .where(
                NotificationModel.recipient_username == recipient_username,
                NotificationModel.read.is_(False),
            )
            .values(read=True)
        )
        result = await self._session.execute(stmt)
        return result.rowcount  # type: ignore[return-value]

    def _to_entity(self, model: NotificationModel) -> Notification:
        """Convert ORM model to domain entity."""
        return Notification(
            id=model.id,
            recipient_username=model.recipient_username,
            type=NotificationType(model.type),
            message=model.message,
            group_id=model.group_id,
            read=model.read,
            created_at=model.created_at,
        )

    def _to_model(self, entity: Notification) -> NotificationModel:
        """Convert domain entity to ORM model."""
        return NotificationModel(
            id=entity.id,
            recipient_username=entity.recipient_username,
            type=entity.type.value,
            message=entity.message,
            group_id=entity.group_id,
            read=entity.read,
            created_at=entity.created_at,
        )
