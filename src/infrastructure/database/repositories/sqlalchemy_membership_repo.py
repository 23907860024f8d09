"""SQLAlchemy implementation of Membership repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from domain.entities.membership import Membership, MembershipStatus
from infrastructure.database.models import GroupMemberModel


class SQLAlchemyMembershipRepository:
    """SQLAlchemy implementation of IMembershipRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, group_id: UUID, username: str) -> Membership | None:
        """Get the membership of a user in a group."""
        model = await self._get_model(group_id, username)
        return self._to_entity(model) if model else None

    async def add(self, membership: Membership) -> Membership:
        """Insert a new membership (IntegrityError on duplicate key)."""
        model = self._to_model(membership)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def upsert(self, membership: Membership) -> Membership:
        """Insert or overwrite the membership for (group, user)."""
        model = await self._get_model(membership.group_id, membership.username)
        if model is None:
            return await self.add(membership)

        model.status = membership.status.value
        model.joined_at = membership.joined_at
        model.updated_at = membership.updated_at
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, group_id: UUID, username: str) -> bool:
        """Delete a membership."""
        model = await self._get_model(group_id, username)
        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def count_by_status(self, group_id: UUID, status: MembershipStatus) -> int:
        """Count memberships in a group with the given status."""
        stmt = (
            select(func.count())
            .select_from(GroupMemberModel)
            .where(
                GroupMemberModel.group_id == group_id,
                GroupMemberModel.status == status.value,
            )
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def list_by_status(
        self, group_id: UUID, status: MembershipStatus
    ) -> list[Membership]:
        """List memberships in a group with the given status, oldest first."""
        stmt = (
            select(GroupMemberModel)
            .where(
                GroupMemberModel.group_id == group_id,
                GroupMemberModel.status == status.value,
            )
            .order_by(GroupMemberModel.joined_at)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_for_group(self, group_id: UUID) -> list[Membership]:
        """List every membership in a group, oldest first."""
        stmt = (
            select(GroupMemberModel)
            .where(GroupMemberModel.group_id == group_id)
            .order_by(GroupMemberModel.joined_at)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_for_user(self, username: str) -> list[Membership]:
        """List every membership held by a user, oldest first."""
        stmt = (
            select(GroupMemberModel)
            .where(GroupMemberModel.username == username)
            .order_by(GroupMemberModel.joined_at)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def approve_if_capacity(
        self,
        group_id: UUID,
        username: str,
        max_members: int,
        now: datetime,
    ) -> bool:
        """Approve a pending membership in one conditional UPDATE.

        The approved-count subquery reads an alias of the same table so it is
        not correlated with the row being updated.
        """
        counted = aliased(GroupMemberModel)
        approved_count = (
            select(func.count())
            .select_from(counted)
            .where(
                counted.group_id == group_id,
                counted.status == MembershipStatus.APPROVED.value,
            )
            .scalar_subquery()
        )
        stmt = (
            update(GroupMemberModel)
            .where(
                GroupMemberModel.group_id == group_id,
                GroupMemberModel.username == username,
                GroupMemberModel.status == MembershipStatus.PENDING.value,
                approved_count < max_members,
            )
            .values(status=MembershipStatus.APPROVED.value, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1  # type: ignore[return-value]

    async def _get_model(self, group_id: UUID, username: str) -> GroupMemberModel | None:
        stmt = (
            select(GroupMemberModel)
            .where(
                GroupMemberModel.group_id == group_id,
                GroupMemberModel.username == username,
            )
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: GroupMemberModel) -> Membership:
        """Convert ORM model to domain entity."""
        return Membership(
            group_id=model.group_id,
            username=model.username,
            status=MembershipStatus(model.status),
            joined_at=model.joined_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Membership) -> GroupMemberModel:
        """Convert domain entity to ORM model."""
        return GroupMemberModel(
            group_id=entity.group_id,
            username=entity.username,
            status=entity.status.value,
            joined_at=entity.joined_at,
            updated_at=entity.updated_at,
        )
