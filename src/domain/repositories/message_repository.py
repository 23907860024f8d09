"""Message repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.message import Message


class IMessageRepository(Protocol):
    """Repository interface for group messages and read receipts."""

    async def create(self, message: Message) -> Message:
        """Create a message; ``read_by`` receipts are stored with it."""
        ...

    async def list_for_group(
        self,
        group_id: UUID,
        limit: int = 50,
        before: int | None = None,
    ) -> list[Message]:
        """Get messages of a group newest first, optionally older than ``before``."""
        ...

    async def mark_read(self, message_ids: list[int], username: str) -> int:
        """Record that a user read the messages. Returns new receipts added."""
        ...

    async def count_unread(self, group_id: UUID, username: str) -> int:
        """Count messages in a group the user has not read."""
        ...
