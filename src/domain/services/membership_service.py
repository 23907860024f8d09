"""Membership workflow: join, leave, approve, reject and remove.

Each operation loads the group under a row lock, asks the state machine for
the transition, persists it and commits. Activity entries, notifications
and emails follow the commit and cannot fail the operation.
"""

from collections.abc import Callable
from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    GroupFullError,
    GroupNotFoundError,
    JoinRequestPendingError,
    MembershipStatusConflictError,
    PendingRequestNotFoundError,
)
from domain.entities.activity import Actions
from domain.entities.group import Group
from domain.entities.membership import Membership, MembershipStatus
from domain.entities.notification import NotificationType
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from domain.services.email_service import EmailService
from domain.services.membership_state_machine import MembershipStateMachine
from domain.services.notification_service import NotificationService

logger = structlog.get_logger()


class MembershipService:
    """Service layer for the group membership workflow."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        state_machine: MembershipStateMachine,
        activity_service: ActivityService,
        notification_service: NotificationService,
        email_service: EmailService | None = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._machine = state_machine
        self._activity = activity_service
        self._notification = notification_service
        self._email = email_service
        self._clock = clock

    async def request_join(self, group_id: UUID, username: str) -> Membership:
        """Submit (or resubmit after rejection) a join request."""
        now = self._clock()
        async with self._uow_factory() as uow:
            group = await self._get_group_for_update(uow, group_id)
            existing = await uow.memberships.get(group_id, username)
            approved = await uow.memberships.count_by_status(group_id, MembershipStatus.APPROVED)

            membership = self._machine.request_join(group, username, existing, approved, now)

            try:
                if existing is None:
                    saved = await uow.memberships.add(membership)
                else:
                    saved = await uow.memberships.upsert(membership)
                await uow.commit()
            except IntegrityError as e:
                # A concurrent request for the same (group, user) won the insert.
                raise JoinRequestPendingError(username) from e

        logger.info(
            "join_requested",
            group_id=str(group_id),
            username=username,
            resubmitted=existing is not None,
        )

        await self._activity.record(username, Actions.JOIN_GROUP_REQUEST, group_id)
        await self._notification.notify(
            group.organiser_username,
            NotificationType.JOIN_REQUEST,
            f"{username} requested to join your group '{group.name}'",
            group_id,
        )
        if self._email:
            self._email.join_requested(group, username)

        return saved

    async def leave(self, group_id: UUID, username: str) -> None:
        """Leave a group (approved member) or withdraw a pending request."""
        now = self._clock()
        async with self._uow_factory() as uow:
            group = await self._get_group_for_update(uow, group_id)
            existing = await uow.memberships.get(group_id, username)

            membership = self._machine.leave(group, username, existing, now)

            await uow.memberships.delete(group_id, membership.username)
            await uow.commit()

        logger.info(
            "member_left",
            group_id=str(group_id),
            username=username,
            previous_status=membership.status.value,
        )

        await self._activity.record(username, Actions.LEAVE_GROUP, group_id)
        await self._notification.notify(
            group.organiser_username,
            NotificationType.LEAVE_GROUP,
            f"{username} has left your group '{group.name}'",
            group_id,
        )

    async def list_pending(self, group_id: UUID, actor: str) -> list[Membership]:
        """List pending join requests. Organiser only."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            self._machine.ensure_organiser(group, actor, "view pending members")
            return await uow.memberships.list_by_status(group_id, MembershipStatus.PENDING)

    async def list_members(self, group_id: UUID, actor: str) -> list[Membership]:
        """List members. The organiser sees every status, others approved only."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            if group.is_organiser(actor):
                return await uow.memberships.list_for_group(group_id)
            return await uow.memberships.list_by_status(group_id, MembershipStatus.APPROVED)

    async def approve(self, group_id: UUID, actor: str, username: str) -> Membership:
        """Approve a pending request if the group still has room."""
        now = self._clock()
        async with self._uow_factory() as uow:
            group = await self._get_group_for_update(uow, group_id)
            existing = await uow.memberships.get(group_id, username)
            approved = await uow.memberships.count_by_status(group_id, MembershipStatus.APPROVED)

            membership = self._machine.approve(group, actor, username, existing, approved, now)

            updated = await uow.memberships.approve_if_capacity(
                group_id, username, group.max_members, now
            )
            if not updated:
                await self._raise_approval_lost(uow, group, username)

            members = await uow.memberships.list_by_status(group_id, MembershipStatus.APPROVED)
            await uow.commit()

        logger.info("join_approved", group_id=str(group_id), username=username, actor=actor)

        await self._activity.record(username, Actions.JOIN_GROUP_APPROVED, group_id)
        await self._notification.notify(
            username,
            NotificationType.JOIN_APPROVED,
            f"Your request to join group '{group.name}' was approved",
            group_id,
        )
        others = [m.username for m in members if m.username not in (actor, username)]
        await self._notification.notify_many(
            others,
            NotificationType.MEMBER_JOINED,
            f"{username} joined group '{group.name}'",
            group_id,
        )
        if self._email:
            self._email.join_approved(group, username)

        return membership

    async def reject(self, group_id: UUID, actor: str, username: str) -> Membership:
        """Reject a pending request."""
        now = self._clock()
        async with self._uow_factory() as uow:
            group = await self._get_group_for_update(uow, group_id)
            existing = await uow.memberships.get(group_id, username)

            membership = self._machine.reject(group, actor, username, existing, now)

            saved = await uow.memberships.upsert(membership)
            await uow.commit()

        logger.info("join_rejected", group_id=str(group_id), username=username, actor=actor)

        await self._activity.record(username, Actions.JOIN_GROUP_REJECTED, group_id)
        await self._notification.notify(
            username,
            NotificationType.JOIN_REJECTED,
            f"Your request to join group '{group.name}' was rejected",
            group_id,
        )
        return saved

    async def remove(self, group_id: UUID, actor: str, username: str) -> None:
        """Remove an approved member. Organiser only; the organiser cannot be removed."""
        now = self._clock()
        async with self._uow_factory() as uow:
            group = await self._get_group_for_update(uow, group_id)
            self._machine.ensure_can_remove(group, actor, username)
            existing = await uow.memberships.get(group_id, username)

            membership = self._machine.remove(group, actor, username, existing, now)

            await uow.memberships.delete(group_id, membership.username)
            await uow.commit()

        logger.info("member_removed", group_id=str(group_id), username=username, actor=actor)

        await self._activity.record(actor, Actions.REMOVE_MEMBER, group_id)
        await self._notification.notify(
            username,
            NotificationType.REMOVED_FROM_GROUP,
            f"You have been removed from group '{group.name}'",
            group_id,
        )
        if self._email:
            self._email.member_removed(group, username)

    async def _get_group(self, uow: IUnitOfWork, group_id: UUID) -> Group:
        group = await uow.groups.get(group_id)
        if not group:
            raise GroupNotFoundError(str(group_id))
        return group

    async def _get_group_for_update(self, uow: IUnitOfWork, group_id: UUID) -> Group:
        group = await uow.groups.get_for_update(group_id)
        if not group:
            raise GroupNotFoundError(str(group_id))
        return group

    async def _raise_approval_lost(self, uow: IUnitOfWork, group: Group, username: str) -> None:
        """Explain why the conditional approval updated nothing."""
        current = await uow.memberships.get(group.id, username)
        if current is None:
            raise PendingRequestNotFoundError(username)
        if current.status != MembershipStatus.PENDING:
            raise MembershipStatusConflictError(username, current.status.value, "approve")
        logger.info("join_approval_rejected_full", group_id=str(group.id), username=username)
        raise GroupFullError(group.max_members)
