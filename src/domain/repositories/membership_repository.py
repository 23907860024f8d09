"""Membership repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.membership import Membership, MembershipStatus


class IMembershipRepository(Protocol):
    """Repository interface for Membership records.

    Pure persistence keyed on (group_id, username). Business rules live in
    the membership state machine and workflow.
    """

    async def get(self, group_id: UUID, username: str) -> Membership | None:
        """Get the membership of a user in a group."""
        ...

    async def add(self, membership: Membership) -> Membership:
        """Insert a new membership. Fails on a duplicate (group, user)."""
        ...

    async def upsert(self, membership: Membership) -> Membership:
        """Insert or overwrite the membership for (group, user)."""
        ...

    async def delete(self, group_id: UUID, username: str) -> bool:
        """Delete a membership. Returns False if none existed."""
        ...

    async def count_by_status(self, group_id: UUID, status: MembershipStatus) -> int:
        """Count memberships in a group with the given status."""
        ...

    async def list_by_status(
        self, group_id: UUID, status: MembershipStatus
    ) -> list[Membership]:
        """List memberships in a group with the given status."""
        ...

    async def list_for_group(self, group_id: UUID) -> list[Membership]:
        """List every membership in a group."""
        ...

    async def list_for_user(self, username: str) -> list[Membership]:
        """List every membership held by a user."""
        ...

    async def approve_if_capacity(
        self,
        group_id: UUID,
        username: str,
        max_members: int,
        now: datetime,
    ) -> bool:
        """Atomically move a pending membership to approved.

        The update only applies while the approved count is below
        ``max_members``. Returns True when the row was approved.
        """
        ...
