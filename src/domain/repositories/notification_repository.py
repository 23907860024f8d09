"""Notification repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.notification import Notification, NotificationType


class INotificationRepository(Protocol):
    """Repository interface for Notification entities."""

    async def create(self, notification: Notification) -> Notification:
        """Create a new notification."""
        ...

    async def has_unread(
        self, recipient_username: str, type: NotificationType, group_id: UUID
    ) -> bool:
        """Check for an unread notification of a type for a recipient and group."""
        ...

    async def list_for_recipient(
        self,
        recipient_username: str,
        unread_only: bool = False,
        limit: int = 50,
    ) -> list[Notification]:
        """Get a recipient's notifications, newest first."""
        ...

    async def count_unread(self, recipient_username: str) -> int:
        """Count a recipient's unread notifications."""
        ...

    async def mark_read(self, id: UUID, recipient_username: str) -> bool:
        """Mark one notification read. False if it is not the recipient's."""
        ...

    async def mark_all_read(self, recipient_username: str) -> int:
        """Mark every notification of a recipient read. Returns count updated."""
        ...
