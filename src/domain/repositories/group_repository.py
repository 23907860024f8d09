"""Group repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.group import Group, GroupFilter


class IGroupRepository(Protocol):
    """Repository interface for Group entities."""

    async def get(self, id: UUID) -> Group | None:
        """Get a group by ID."""
        ...

    async def get_for_update(self, id: UUID) -> Group | None:
        """Get a group by ID, locking its row until the transaction ends."""
        ...

    async def search(self, filters: GroupFilter) -> list[Group]:
        """List groups matching the filter, sorted and paginated."""
        ...

    async def list_starting_between(self, start: datetime, end: datetime) -> list[Group]:
        """List groups whose event starts in the half-open range (start, end]."""
        ...

    async def create(self, group: Group) -> Group:
        """Create a new group."""
        ...

    async def update(self, group: Group) -> Group:
        """Update an existing group."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a group and everything owned by it."""
        ...

    async def list_ids_by_organiser(self, username: str) -> list[UUID]:
        """List the IDs of groups organised by a user."""
        ...

    async def count(self) -> int:
        """Count all groups."""
        ...
