"""SQLAlchemy implementation of Group repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.group import ActivityType, Group, GroupFilter, SkillLevel
from infrastructure.database.models import GroupModel

_SORT_COLUMNS = {
    "date_time": GroupModel.date_time,
    "name": GroupModel.name,
    "cost": GroupModel.cost,
    "skill_level": GroupModel.skill_level,
    "activity_type": GroupModel.activity_type,
    "max_members": GroupModel.max_members,
    "created_at": GroupModel.created_at,
    "updated_at": GroupModel.updated_at,
}


class SQLAlchemyGroupRepository:
    """SQLAlchemy implementation of IGroupRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Group | None:
        """Get a group by ID."""
        stmt = select(GroupModel).where(GroupModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_for_update(self, id: UUID) -> Group | None:
        """Get a group by ID with a row lock (no-op on SQLite)."""
        stmt = select(GroupModel).where(GroupModel.id == id).with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def search(self, filters: GroupFilter) -> list[Group]:
        """List groups matching the filter, sorted and paginated."""
        stmt = select(GroupModel)

        if filters.activity_type is not None:
            stmt = stmt.where(GroupModel.activity_type == filters.activity_type.value)
        if filters.skill_level is not None:
            stmt = stmt.where(GroupModel.skill_level == filters.skill_level.value)
        if filters.min_price is not None:
            stmt = stmt.where(GroupModel.cost >= filters.min_price)
        if filters.max_price is not None:
            stmt = stmt.where(GroupModel.cost <= filters.max_price)
        if filters.date_from is not None:
            stmt = stmt.where(GroupModel.date_time >= filters.date_from)
        if filters.date_to is not None:
            stmt = stmt.where(GroupModel.date_time <= filters.date_to)
        if filters.min_members is not None:
            stmt = stmt.where(GroupModel.max_members >= filters.min_members)
        if filters.max_members is not None:
            stmt = stmt.where(GroupModel.max_members <= filters.max_members)

        column = _SORT_COLUMNS.get(filters.sort_by, GroupModel.date_time)
        order = column.desc() if filters.sort_order == "desc" else column.asc()
        stmt = stmt.order_by(order, GroupModel.id).offset(filters.offset).limit(filters.limit)

        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_starting_between(self, start: datetime, end: datetime) -> list[Group]:
        """List groups whose event starts after ``start`` and no later than ``end``."""
        stmt = (
            select(GroupModel)
            .where(GroupModel.date_time > start, GroupModel.date_time <= end)
            .order_by(GroupModel.date_time)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, group: Group) -> Group:
        """Create a new group."""
        model = self._to_model(group)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, group: Group) -> Group:
        """Update an existing group."""
        stmt = select(GroupModel).where(GroupModel.id == group.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Group {group.id} not found")

        model.name = group.name
        model.description = group.description
        model.date_time = group.date_time
        model.max_members = group.max_members
        model.activity_type = group.activity_type.value
        model.skill_level = group.skill_level.value
        model.cost = group.cost
        model.venue = group.venue
        model.updated_at = datetime.utcnow()

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a group (cascade deletes members, notifications, messages)."""
        stmt = select(GroupModel).where(GroupModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def list_ids_by_organiser(self, username: str) -> list[UUID]:
        """List the IDs of groups organised by a user, soonest first."""
        stmt = (
            select(GroupModel.id)
            .where(GroupModel.organiser_username == username)
            .order_by(GroupModel.date_time)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars())

    async def count(self) -> int:
        """Count all groups."""
        result = await self._session.execute(select(func.count()).select_from(GroupModel))
        return result.scalar_one()

    def _to_entity(self, model: GroupModel) -> Group:
        """Convert ORM model to domain entity."""
        return Group(
            id=model.id,
            name=model.name,
            organiser_username=model.organiser_username,
            date_time=model.date_time,
            max_members=model.max_members,
            description=model.description,
            activity_type=ActivityType(model.activity_type),
            skill_level=SkillLevel(model.skill_level),
            cost=model.cost,
            venue=model.venue,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Group) -> GroupModel:
        """Convert domain entity to ORM model."""
        return GroupModel(
            id=entity.id,
            name=entity.name,
            organiser_username=entity.organiser_username,
            date_time=entity.date_time,
            max_members=entity.max_members,
            description=entity.description,
            activity_type=entity.activity_type.value,
            skill_level=entity.skill_level.value,
            cost=entity.cost,
            venue=entity.venue,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
