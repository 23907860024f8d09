"""Service dependency factories shared by the API routers."""

from datetime import timedelta
from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.account_service import AccountService
from domain.services.activity_service import ActivityService
from domain.services.email_service import EmailService
from domain.services.group_service import GroupService
from domain.services.membership_service import MembershipService
from domain.services.membership_state_machine import MembershipStateMachine
from domain.services.message_service import MessageService
from domain.services.notification_service import NotificationService
from domain.services.reminder_service import ReminderService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.email.factory import build_email_sender
from infrastructure.tasks.runner import BackgroundTaskRunner


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_task_runner() -> BackgroundTaskRunner:
    """Get the background task runner (shut down by the app lifespan)."""
    return BackgroundTaskRunner()


@lru_cache
def get_account_service() -> AccountService:
    """Get Account service instance."""
    return AccountService(get_uow_factory())


@lru_cache
def get_activity_service() -> ActivityService:
    """Get Activity service instance."""
    return ActivityService(
        get_uow_factory(),
        max_attempts=settings.activity_log_max_attempts,
        backoff_seconds=settings.activity_log_backoff_seconds,
    )


@lru_cache
def get_notification_service() -> NotificationService:
    """Get Notification service instance."""
    return NotificationService(get_uow_factory())


@lru_cache
def get_email_service() -> EmailService:
    """Get Email service instance."""
    return EmailService(
        get_uow_factory(),
        sender=build_email_sender(settings),
        runner=get_task_runner(),
        send_timeout=settings.email_send_timeout_seconds,
    )


@lru_cache
def get_group_service() -> GroupService:
    """Get Group service instance."""
    return GroupService(get_uow_factory(), activity_service=get_activity_service())


@lru_cache
def get_membership_service() -> MembershipService:
    """Get Membership service instance."""
    return MembershipService(
        get_uow_factory(),
        state_machine=MembershipStateMachine(
            lockout=timedelta(minutes=settings.membership_lockout_minutes)
        ),
        activity_service=get_activity_service(),
        notification_service=get_notification_service(),
        email_service=get_email_service(),
    )


@lru_cache
def get_message_service() -> MessageService:
    """Get Message service instance."""
    return MessageService(
        get_uow_factory(),
        notification_service=get_notification_service(),
        runner=get_task_runner(),
        activity_service=get_activity_service(),
        unread_check_delay=settings.unread_check_delay_seconds,
        unread_check_timeout=settings.unread_check_timeout_seconds,
    )


@lru_cache
def get_reminder_service() -> ReminderService:
    """Get Reminder service instance."""
    return ReminderService(get_uow_factory(), email_service=get_email_service())
