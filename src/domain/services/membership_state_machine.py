"""Membership state machine.

Every membership status change is decided here. Methods validate the actor,
the membership window and the current record, then return the record to
persist (or the record to delete). They never touch storage.

    none / rejected --request--> pending
    pending --approve--> approved
    pending --reject--> rejected
    pending / approved --leave--> (deleted)
    approved --remove--> (deleted)
"""

from dataclasses import replace
from datetime import datetime, timedelta

from core.exceptions import (
    AlreadyAGroupMemberError,
    CannotLeaveError,
    JoinRequestPendingError,
    MembershipNotFoundError,
    MembershipStatusConflictError,
    MembershipWindowClosedError,
    OrganiserCannotBeRemovedError,
    OrganiserCannotLeaveError,
    OrganiserOnlyError,
    PendingRequestNotFoundError,
)
from domain.entities.group import Group
from domain.entities.membership import Membership, MembershipStatus
from domain.services.capacity import ensure_capacity


class MembershipStateMachine:
    """Guards and transitions for (group, user) membership records."""

    def __init__(self, lockout: timedelta = timedelta(hours=1)) -> None:
        self._lockout = lockout

    @property
    def lockout(self) -> timedelta:
        return self._lockout

    def is_window_open(self, group: Group, now: datetime) -> bool:
        """Membership may change until ``lockout`` before the event starts."""
        return now < group.membership_closes_at(self._lockout)

    def ensure_window_open(self, group: Group, now: datetime) -> None:
        if not self.is_window_open(group, now):
            raise MembershipWindowClosedError(
                group.date_time, int(self._lockout.total_seconds() // 60)
            )

    def ensure_organiser(self, group: Group, actor: str, action: str) -> None:
        if not group.is_organiser(actor):
            raise OrganiserOnlyError(action)

    def request_join(
        self,
        group: Group,
        actor: str,
        existing: Membership | None,
        approved_count: int,
        now: datetime,
    ) -> Membership:
        """Create a pending request, or reopen a rejected one."""
        if group.is_organiser(actor):
            raise AlreadyAGroupMemberError(actor)

        self.ensure_window_open(group, now)

        if existing is not None:
            if existing.status == MembershipStatus.PENDING:
                raise JoinRequestPendingError(actor)
            if existing.status == MembershipStatus.APPROVED:
                raise AlreadyAGroupMemberError(actor)

        ensure_capacity(group, approved_count)

        if existing is None:
            return Membership(
                group_id=group.id,
                username=actor,
                status=MembershipStatus.PENDING,
                joined_at=now,
                updated_at=now,
            )
        return replace(existing, status=MembershipStatus.PENDING, joined_at=now, updated_at=now)

    def leave(
        self,
        group: Group,
        actor: str,
        existing: Membership | None,
        now: datetime,
    ) -> Membership:
        """Validate a member leaving; returns the record to delete."""
        if group.is_organiser(actor):
            raise OrganiserCannotLeaveError()

        self.ensure_window_open(group, now)

        if existing is None:
            raise MembershipNotFoundError(actor)
        if existing.status == MembershipStatus.REJECTED:
            raise CannotLeaveError(existing.status.value)
        return existing

    def approve(
        self,
        group: Group,
        actor: str,
        target: str,
        existing: Membership | None,
        approved_count: int,
        now: datetime,
    ) -> Membership:
        """Validate approval of a pending request; returns the approved record.

        The capacity check here is advisory. The store repeats it atomically
        when it writes the approval.
        """
        pending = self._ensure_pending_decision(group, actor, target, existing, "approve", now)
        ensure_capacity(group, approved_count)
        return replace(pending, status=MembershipStatus.APPROVED, updated_at=now)

    def reject(
        self,
        group: Group,
        actor: str,
        target: str,
        existing: Membership | None,
        now: datetime,
    ) -> Membership:
        """Validate rejection of a pending request; returns the rejected record."""
        pending = self._ensure_pending_decision(group, actor, target, existing, "reject", now)
        return replace(pending, status=MembershipStatus.REJECTED, updated_at=now)

    def ensure_can_remove(self, group: Group, actor: str, target: str) -> None:
        """Checks that do not depend on the target's record."""
        self.ensure_organiser(group, actor, "remove members")
        if group.is_organiser(target):
            raise OrganiserCannotBeRemovedError()

    def remove(
        self,
        group: Group,
        actor: str,
        target: str,
        existing: Membership | None,
        now: datetime,
    ) -> Membership:
        """Validate removal of an approved member; returns the record to delete."""
        self.ensure_can_remove(group, actor, target)
        self.ensure_window_open(group, now)

        if existing is None or existing.status != MembershipStatus.APPROVED:
            raise MembershipNotFoundError(target)
        return existing

    def _ensure_pending_decision(
        self,
        group: Group,
        actor: str,
        target: str,
        existing: Membership | None,
        action: str,
        now: datetime,
    ) -> Membership:
        self.ensure_organiser(group, actor, f"{action} members")
        self.ensure_window_open(group, now)

        if existing is None:
            raise PendingRequestNotFoundError(target)
        if existing.status != MembershipStatus.PENDING:
            raise MembershipStatusConflictError(target, existing.status.value, action)
        return existing
