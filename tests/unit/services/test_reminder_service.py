"""Unit tests for ReminderService."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from domain.entities.account import Account
from domain.entities.membership import MembershipStatus
from domain.entities.reminder import ReminderType
from domain.services.reminder_service import ReminderService
from tests.unit.conftest import NOW, FakeUnitOfWork, make_group, make_membership


@pytest.fixture
def emails() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(uow: FakeUnitOfWork, emails: AsyncMock) -> ReminderService:
    return ReminderService(lambda: uow, email_service=emails, clock=lambda: NOW)


def _account(username: str) -> Account:
    return Account(username=username, email=f"{username}@example.com")


class TestSendDueReminders:
    @pytest.mark.asyncio
    async def test_queries_each_reminder_window(self, service: ReminderService, uow: FakeUnitOfWork):
        uow.groups.list_starting_between.return_value = []

        assert await service.send_due_reminders() == 0

        windows = [c.args for c in uow.groups.list_starting_between.await_args_list]
        assert windows == [
            (NOW + timedelta(hours=24) - timedelta(minutes=10), NOW + timedelta(hours=24)),
            (NOW + timedelta(minutes=50), NOW + timedelta(hours=1)),
        ]

    @pytest.mark.asyncio
    async def test_sends_to_members_with_accounts_and_records(
        self, service: ReminderService, uow: FakeUnitOfWork, emails: AsyncMock
    ):
        group = make_group(starts_in=timedelta(minutes=55))
        uow.groups.list_starting_between.side_effect = [[], [group]]
        uow.reminders.was_sent.return_value = False
        uow.memberships.list_by_status.return_value = [
            make_membership(group, "olive", MembershipStatus.APPROVED),
            make_membership(group, "bob", MembershipStatus.APPROVED),
            make_membership(group, "ghost", MembershipStatus.APPROVED),
        ]
        uow.accounts.get_many.return_value = [_account("olive"), _account("bob")]
        emails.send_event_reminder.return_value = True

        sent = await service.send_due_reminders()

        assert sent == 2
        assert emails.send_event_reminder.await_count == 2
        recorded = uow.reminders.record.await_args.args[0]
        assert {r.username for r in recorded} == {"olive", "bob"}
        assert {r.reminder_type for r in recorded} == {ReminderType.HOUR_BEFORE}
        assert uow.committed

    @pytest.mark.asyncio
    async def test_already_sent_is_skipped(
        self, service: ReminderService, uow: FakeUnitOfWork, emails: AsyncMock
    ):
        group = make_group(starts_in=timedelta(hours=23, minutes=55))
        uow.groups.list_starting_between.side_effect = [[group], []]
        uow.reminders.was_sent.return_value = True

        assert await service.send_due_reminders() == 0
        emails.send_event_reminder.assert_not_called()
        uow.reminders.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_only_successful_sends_are_recorded(
        self, service: ReminderService, uow: FakeUnitOfWork, emails: AsyncMock
    ):
        group = make_group(starts_in=timedelta(minutes=55))
        uow.groups.list_starting_between.side_effect = [[], [group]]
        uow.reminders.was_sent.return_value = False
        uow.memberships.list_by_status.return_value = [
            make_membership(group, "olive", MembershipStatus.APPROVED),
            make_membership(group, "bob", MembershipStatus.APPROVED),
        ]
        uow.accounts.get_many.return_value = [_account("olive"), _account("bob")]
        emails.send_event_reminder.side_effect = [True, False]

        assert await service.send_due_reminders() == 1
        recorded = uow.reminders.record.await_args.args[0]
        assert [r.username for r in recorded] == ["olive"]

    @pytest.mark.asyncio
    async def test_all_failed_records_nothing(
        self, service: ReminderService, uow: FakeUnitOfWork, emails: AsyncMock
    ):
        group = make_group(starts_in=timedelta(minutes=55))
        uow.groups.list_starting_between.side_effect = [[], [group]]
        uow.reminders.was_sent.return_value = False
        uow.memberships.list_by_status.return_value = [
            make_membership(group, "bob", MembershipStatus.APPROVED)
        ]
        uow.accounts.get_many.return_value = [_account("bob")]
        emails.send_event_reminder.return_value = False

        assert await service.send_due_reminders() == 0
        uow.reminders.record.assert_not_called()
