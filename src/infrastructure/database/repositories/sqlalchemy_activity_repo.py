"""SQLAlchemy implementation of Activity Log repository."""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.activity import ActivityLog
from infrastructure.database.models import ActivityLogModel


class SQLAlchemyActivityRepository:
    """SQLAlchemy implementation of IActivityRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, activity: ActivityLog) -> ActivityLog:
        """Create a new activity log entry."""
        model = self._to_model(activity)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def get_for_user(
        self,
        username: str,
        limit: int = 50,
    ) -> List[ActivityLog]:
        """Get activity log entries of a user, ordered by newest first."""
        stmt = (
            select(ActivityLogModel)
            .where(ActivityLogModel.username == username)
            .order_by(ActivityLogModel.timestamp.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: ActivityLogModel) -> ActivityLog:
        """Convert ORM model to domain entity."""
        return ActivityLog(
            id=model.id,
            username=model.username,
            event_type=model.event_type,
            group_id=model.group_id,
            timestamp=model.timestamp,
        )

    def _to_model(self, entity: ActivityLog) -> ActivityLogModel:
        """Convert domain entity to ORM model."""
        return ActivityLogModel(
            id=entity.id,
            username=entity.username,
            event_type=entity.event_type,
            group_id=entity.group_id,
            timestamp=entity.timestamp,
        )
