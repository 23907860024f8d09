"""Notification service layer for creating and managing notifications."""

from collections.abc import Callable, Iterable
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import NotificationNotFoundError
from domain.entities.notification import Notification, NotificationType
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class NotificationService:
    """Service layer for notification creation and management."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    # --- Sink (best effort, own transaction) ---

    async def notify(
        self,
        recipient_username: str,
        type: NotificationType,
        message: str,
        group_id: UUID,
    ) -> Notification | None:
        """Create a single notification. Failures are logged and swallowed."""
        created = await self.notify_many([recipient_username], type, message, group_id)
        return created[0] if created else None

    async def notify_many(
        self,
        recipients: Iterable[str],
        type: NotificationType,
        message: str,
        group_id: UUID,
    ) -> list[Notification]:
        """Create the same notification for several recipients in one transaction.

        Returns the created notifications, or an empty list when nothing was
        stored.
        """
        usernames = list(dict.fromkeys(recipients))
        if not usernames:
            return []

        try:
            async with self._uow_factory() as uow:
                created = [
                    await uow.notifications.create(
                        Notification(
                            recipient_username=username,
                            type=type,
                            message=message,
                            group_id=group_id,
                        )
                    )
                    for username in usernames
                ]
                await uow.commit()
                return created
        except SQLAlchemyError:
            logger.exception(
                "notification_create_failed",
                type=type.value,
                group_id=str(group_id),
                recipients=usernames,
            )
            return []

    async def notify_if_no_unread(
        self,
        recipients: Iterable[str],
        type: NotificationType,
        message: str,
        group_id: UUID,
    ) -> list[Notification]:
        """Create a notification only for recipients without an unread one of the same type.

        Keeps at most one unread notification of ``type`` per recipient and
        group.
        """
        async with self._uow_factory() as uow:
            created: list[Notification] = []
            for username in dict.fromkeys(recipients):
                if await uow.notifications.has_unread(username, type, group_id):
                    continue
                created.append(
                    await uow.notifications.create(
                        Notification(
                            recipient_username=username,
                            type=type,
                            message=message,
                            group_id=group_id,
                        )
                    )
                )
            await uow.commit()
            return created

    # --- Read methods ---

    async def get_notifications(
        self,
        username: str,
        unread_only: bool = False,
        limit: int = 50,
    ) -> list[Notification]:
        """Get a user's notifications, newest first."""
        async with self._uow_factory() as uow:
            return await uow.notifications.list_for_recipient(
                username, unread_only=unread_only, limit=limit
            )

    async def get_unread_count(self, username: str) -> int:
        """Get the count of unread notifications."""
        async with self._uow_factory() as uow:
            return await uow.notifications.count_unread(username)

    async def mark_read(self, notification_id: UUID, username: str) -> None:
        """Mark a notification as read for its recipient."""
        async with self._uow_factory() as uow:
            success = await uow.notifications.mark_read(notification_id, username)
            if not success:
                raise NotificationNotFoundError(str(notification_id))
            await uow.commit()

    async def mark_all_read(self, username: str) -> int:
        """Mark all notifications as read. Returns count of marked."""
        async with self._uow_factory() as uow:
            count = await uow.notifications.mark_all_read(username)
            await uow.commit()
            return count
