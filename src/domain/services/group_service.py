"""Group service layer with business logic."""

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from uuid import UUID

import structlog

from core.exceptions import (
    CapacityBelowMembersError,
    GroupNotFoundError,
    InvalidEventDateError,
    OrganiserOnlyError,
)
from domain.entities.activity import Actions
from domain.entities.group import (
    MAX_PAGE_SIZE,
    SORTABLE_FIELDS,
    ActivityType,
    Group,
    GroupDetails,
    GroupFilter,
    SkillLevel,
)
from domain.entities.membership import Membership, MembershipStatus
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService

logger = structlog.get_logger()


class GroupService:
    """Service layer for creating, browsing and managing groups."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        activity_service: ActivityService | None = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._activity = activity_service
        self._clock = clock

    async def create(
        self,
        organiser_username: str,
        name: str,
        date_time: datetime,
        max_members: int,
        description: str = "",
        activity_type: ActivityType = ActivityType.OTHER,
        skill_level: SkillLevel = SkillLevel.BEGINNER,
        cost: float = 0.0,
        venue: str | None = None,
    ) -> Group:
        """Create a group; the organiser becomes its first approved member."""
        now = self._clock()
        if date_time <= now:
            raise InvalidEventDateError()

        async with self._uow_factory() as uow:
            group = Group(
                name=name,
                organiser_username=organiser_username,
                date_time=date_time,
                max_members=max_members,
                description=description,
                activity_type=activity_type,
                skill_level=skill_level,
                cost=cost,
                venue=venue,
                created_at=now,
                updated_at=now,
            )
            created = await uow.groups.create(group)
            await uow.memberships.add(
                Membership(
                    group_id=created.id,
                    username=organiser_username,
                    status=MembershipStatus.APPROVED,
                    joined_at=now,
                    updated_at=now,
                )
            )
            await uow.commit()

        logger.info("group_created", group_id=str(created.id), organiser=organiser_username)
        if self._activity:
            await self._activity.record(organiser_username, Actions.CREATE_GROUP, created.id)
        return created

    async def get(self, group_id: UUID) -> GroupDetails:
        """Get a group with its approved member count and organiser summary."""
        async with self._uow_factory() as uow:
            group = await uow.groups.get(group_id)
            if not group:
                raise GroupNotFoundError(str(group_id))

            approved = await uow.memberships.count_by_status(group_id, MembershipStatus.APPROVED)
            organiser = await uow.accounts.get(group.organiser_username)
            return GroupDetails(group=group, approved_count=approved, organiser=organiser)

    async def search(self, filters: GroupFilter) -> list[Group]:
        """List groups; unknown sort keys fall back to ``date_time`` ascending."""
        normalized = replace(
            filters,
            sort_by=filters.sort_by if filters.sort_by in SORTABLE_FIELDS else "date_time",
            sort_order=filters.sort_order if filters.sort_order in ("asc", "desc") else "asc",
            limit=min(max(filters.limit, 1), MAX_PAGE_SIZE),
            offset=max(filters.offset, 0),
        )
        async with self._uow_factory() as uow:
            return await uow.groups.search(normalized)

    async def update(
        self,
        group_id: UUID,
        actor: str,
        name: str | None = None,
        description: str | None = None,
        date_time: datetime | None = None,
        max_members: int | None = None,
        activity_type: ActivityType | None = None,
        skill_level: SkillLevel | None = None,
        cost: float | None = None,
        venue: str | None = None,
    ) -> Group:
        """Update a group. Organiser only."""
        async with self._uow_factory() as uow:
            group = await uow.groups.get_for_update(group_id)
            if not group:
                raise GroupNotFoundError(str(group_id))
            if not group.is_organiser(actor):
                raise OrganiserOnlyError("update the group")

            if date_time is not None:
                if date_time <= self._clock():
                    raise InvalidEventDateError()
                group.date_time = date_time

            if max_members is not None and max_members != group.max_members:
                approved = await uow.memberships.count_by_status(
                    group_id, MembershipStatus.APPROVED
                )
                if max_members < approved:
                    raise CapacityBelowMembersError(max_members, approved)
                group.max_members = max_members

            if name is not None:
                group.name = name
            if description is not None:
                group.description = description
            if activity_type is not None:
                group.activity_type = activity_type
            if skill_level is not None:
                group.skill_level = skill_level
            if cost is not None:
                group.cost = cost
            if venue is not None:
                group.venue = venue

            updated = await uow.groups.update(group)
            await uow.commit()

        if self._activity:
            await self._activity.record(actor, Actions.UPDATE_GROUP, group_id)
        return updated

    async def delete(self, group_id: UUID, actor: str) -> None:
        """Delete a group and everything it owns. Organiser only."""
        async with self._uow_factory() as uow:
            group = await uow.groups.get(group_id)
            if not group:
                raise GroupNotFoundError(str(group_id))
            if not group.is_organiser(actor):
                raise OrganiserOnlyError("delete the group")

            await uow.groups.delete(group_id)
            await uow.commit()

        logger.info("group_deleted", group_id=str(group_id), organiser=actor)
        if self._activity:
            await self._activity.record(actor, Actions.DELETE_GROUP, group_id)
