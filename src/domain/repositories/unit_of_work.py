"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.account_repository import IAccountRepository
from domain.repositories.activity_repository import IActivityRepository
from domain.repositories.group_repository import IGroupRepository
from domain.repositories.membership_repository import IMembershipRepository
from domain.repositories.message_repository import IMessageRepository
from domain.repositories.notification_repository import INotificationRepository
from domain.repositories.reminder_repository import IReminderRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    accounts: IAccountRepository
    groups: IGroupRepository
    memberships: IMembershipRepository
    notifications: INotificationRepository
    activities: IActivityRepository
    messages: IMessageRepository
    reminders: IReminderRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
