"""Activity service layer for recording and querying user activity."""

import asyncio
from collections.abc import Awaitable, Callable
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError

from domain.entities.activity import ActivityLog
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class ActivityService:
    """Service layer for activity logging and retrieval."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        max_attempts: int = 3,
        backoff_seconds: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._uow_factory = uow_factory
        self._max_attempts = max_attempts
        self._backoff_seconds = backoff_seconds
        self._sleep = sleep

    async def record(
        self,
        username: str,
        event_type: str,
        group_id: UUID,
    ) -> ActivityLog | None:
        """Record an activity entry in its own transaction.

        Retries with linear backoff (``attempt * backoff_seconds``) and gives
        up after ``max_attempts``. Failures are logged, never raised.

        Args:
            username: The user who performed the action.
            event_type: The event type (use Actions constants).
            group_id: The group the action concerned.

        Returns:
            The created ActivityLog entry, or None if every attempt failed.
        """
        for attempt in range(1, self._max_attempts + 1):
            try:
                async with self._uow_factory() as uow:
                    created = await uow.activities.create(
                        ActivityLog(username=username, event_type=event_type, group_id=group_id)
                    )
                    await uow.commit()
                    return created
            except SQLAlchemyError as e:
                if attempt < self._max_attempts:
                    logger.warning(
                        "activity_log_retry",
                        username=username,
                        event_type=event_type,
                        group_id=str(group_id),
                        attempt=attempt,
                        error=str(e),
                    )
                    await self._sleep(attempt * self._backoff_seconds)
                else:
                    logger.error(
                        "activity_log_failed",
                        username=username,
                        event_type=event_type,
                        group_id=str(group_id),
                        attempts=attempt,
                        error=str(e),
                    )
        return None

    async def get_history(self, username: str, limit: int = 50) -> list[ActivityLog]:
        """Get a user's activity history, newest first."""
        async with self._uow_factory() as uow:
            return await uow.activities.get_for_user(username, limit=limit)
