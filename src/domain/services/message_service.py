"""Group messaging and the deferred unread-messages check."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import GroupNotFoundError, NotAGroupMemberError
from domain.entities.activity import Actions
from domain.entities.group import Group
from domain.entities.membership import MembershipStatus
from domain.entities.message import Message
from domain.entities.notification import NotificationType
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from domain.services.notification_service import NotificationService
from infrastructure.tasks.runner import BackgroundTaskRunner

logger = structlog.get_logger()


class MessageService:
    """Service layer for group messages.

    Posting a message schedules one unread check per group: further messages
    posted while a check is waiting are covered by it.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        notification_service: NotificationService,
        runner: BackgroundTaskRunner,
        activity_service: ActivityService | None = None,
        unread_check_delay: float = 10.0,
        unread_check_timeout: float = 5.0,
    ) -> None:
        self._uow_factory = uow_factory
        self._notification = notification_service
        self._runner = runner
        self._activity = activity_service
        self._unread_check_delay = unread_check_delay
        self._unread_check_timeout = unread_check_timeout

    async def send(self, group_id: UUID, username: str, content: str) -> Message:
        """Post a message. Organiser or approved members only."""
        async with self._uow_factory() as uow:
            await self._require_participant(uow, group_id, username)
            created = await uow.messages.create(
                Message(group_id=group_id, username=username, content=content, read_by=[username])
            )
            await uow.commit()

        if self._activity:
            await self._activity.record(username, Actions.SEND_MESSAGE, group_id)

        self._runner.schedule(
            f"unread_check:{group_id}",
            lambda: self.check_unread(group_id),
            delay=self._unread_check_delay,
            timeout=self._unread_check_timeout,
            key=f"unread_check:{group_id}",
        )
        return created

    async def list_messages(
        self,
        group_id: UUID,
        username: str,
        limit: int = 50,
        before: int | None = None,
    ) -> list[Message]:
        """Get messages newest first and mark them read by the requester."""
        async with self._uow_factory() as uow:
            await self._require_participant(uow, group_id, username)
            messages = await uow.messages.list_for_group(group_id, limit=limit, before=before)

            unread_ids = [m.id for m in messages if m.id is not None and username not in m.read_by]
            if unread_ids:
                await uow.messages.mark_read(unread_ids, username)
                await uow.commit()

        for message in messages:
            if message.id in unread_ids:
                message.read_by.append(username)
        return messages

    async def check_unread(self, group_id: UUID) -> int:
        """Notify approved members who have unread messages in the group.

        A member already holding an unread ``unread_messages`` notification
        for the group gets no second one. Returns how many were created.
        """
        async with self._uow_factory() as uow:
            group = await uow.groups.get(group_id)
            if not group:
                return 0
            members = await uow.memberships.list_by_status(group_id, MembershipStatus.APPROVED)
            recipients = [
                m.username
                for m in members
                if await uow.messages.count_unread(group_id, m.username) > 0
            ]

        if not recipients:
            return 0

        created = await self._notification.notify_if_no_unread(
            recipients,
            NotificationType.UNREAD_MESSAGES,
            f"You have unread messages in '{group.name}'",
            group_id,
        )
        logger.info(
            "unread_check_completed",
            group_id=str(group_id),
            candidates=len(recipients),
            notified=len(created),
        )
        return len(created)

    async def _require_participant(self, uow: IUnitOfWork, group_id: UUID, username: str) -> Group:
        group = await uow.groups.get(group_id)
        if not group:
            raise GroupNotFoundError(str(group_id))
        if group.is_organiser(username):
            return group

        membership = await uow.memberships.get(group_id, username)
        if membership is None or not membership.is_approved:
            raise NotAGroupMemberError(str(group_id))
        return group
