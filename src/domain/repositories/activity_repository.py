"""Activity log repository protocol."""

from typing import List, Protocol

from domain.entities.activity import ActivityLog


class IActivityRepository(Protocol):
    """Repository interface for ActivityLog entities."""

    async def create(self, activity: ActivityLog) -> ActivityLog:
        """Create a new activity log entry."""
        ...

    async def get_for_user(
        self,
        username: str,
        limit: int = 50,
    ) -> List[ActivityLog]:
        """Get activity log entries of a user, newest first."""
        ...
