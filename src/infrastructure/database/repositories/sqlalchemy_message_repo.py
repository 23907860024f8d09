"""SQLAlchemy implementation of Message repository."""

from uuid import UUID

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.message import Message
from infrastructure.database.models import MessageModel, MessageReadModel


class SQLAlchemyMessageRepository:
    """SQLAlchemy implementation of IMessageRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, message: Message) -> Message:
        """Create a message together with its initial read receipts."""
        model = MessageModel(
            group_id=message.group_id,
            username=message.username,
            content=message.content,
            created_at=message.created_at,
        )
        model.reads = [MessageReadModel(username=u) for u in dict.fromkeys(message.read_by)]
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def list_for_group(
        self,
        group_id: UUID,
        limit: int = 50,
        before: int | None = None,
    ) -> list[Message]:
        """Get messages of a group newest first, optionally older than ``before``."""
        stmt = select(MessageModel).where(MessageModel.group_id == group_id)
        if before is not None:
            stmt = stmt.where(MessageModel.id < before)

        stmt = stmt.order_by(MessageModel.id.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def mark_read(self, message_ids: list[int], username: str) -> int:
        """Record that a user read the messages. Returns new receipts added."""
        if not message_ids:
            return 0

        stmt = select(MessageReadModel.message_id).where(
            MessageReadModel.message_id.in_(message_ids),
            MessageReadModel.username == username,
        )
        result = await self._session.execute(stmt)
        already_read = set(result.scalars())

        missing = [mid for mid in dict.fromkeys(message_ids) if mid not in already_read]
        self._session.add_all(
            [MessageReadModel(message_id=mid, username=username) for mid in missing]
        )
        await self._session.flush()
        return len(missing)

    async def count_unread(self, group_id: UUID, username: str) -> int:
        """Count messages in a group the user has not read."""
        read_receipt = exists().where(
            MessageReadModel.message_id == MessageModel.id,
            MessageReadModel.username == username,
        )
        stmt = (
            select(func.count())
            .select_from(MessageModel)
            .where(MessageModel.group_id == group_id, ~read_receipt)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    def _to_entity(self, model: MessageModel) -> Message:
        """Convert ORM model to domain entity."""
        return Message(
            id=model.id,
            group_id=model.group_id,
            username=model.username,
            content=model.content,
            read_by=[read.username for read in model.reads],
            created_at=model.created_at,
        )
