"""Unit tests for AccountService."""

import pytest
from sqlalchemy.exc import IntegrityError

from core.exceptions import AccountNotFoundError, NoProfileChangesError, ProfileOwnerOnlyError
from domain.entities.account import Account
from domain.entities.membership import MembershipStatus
from domain.services.account_service import AccountService
from tests.unit.conftest import FakeUnitOfWork, make_group, make_membership


@pytest.fixture
def service(uow: FakeUnitOfWork) -> AccountService:
    return AccountService(lambda: uow)


class TestEnsureAccount:
    @pytest.mark.asyncio
    async def test_returns_existing(self, service: AccountService, uow: FakeUnitOfWork):
        existing = Account(username="bob", email="bob@example.com")
        uow.accounts.get.return_value = existing

        assert await service.ensure_account("bob", "bob@example.com") is existing
        uow.accounts.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_creates_on_first_sight(self, service: AccountService, uow: FakeUnitOfWork):
        uow.accounts.get.return_value = None
        uow.accounts.create.side_effect = lambda a: a

        account = await service.ensure_account("bob", "bob@example.com", "Bob")

        assert account.username == "bob"
        assert account.display_name == "Bob"
        assert uow.committed

    @pytest.mark.asyncio
    async def test_concurrent_creation_returns_winner(
        self, service: AccountService, uow: FakeUnitOfWork
    ):
        winner = Account(username="bob", email="bob@example.com")
        uow.accounts.get.side_effect = [None, winner]
        uow.accounts.create.side_effect = IntegrityError("INSERT", {}, Exception("duplicate"))

        assert await service.ensure_account("bob", "bob@example.com") is winner
        assert uow.rolled_back


class TestGetProfile:
    @pytest.mark.asyncio
    async def test_groups_split_by_role(self, service: AccountService, uow: FakeUnitOfWork):
        owned = make_group(organiser="bob")
        joined = make_group()
        waiting = make_group()
        uow.accounts.get.return_value = Account(username="bob", email="bob@example.com")
        uow.groups.list_ids_by_organiser.return_value = [owned.id]
        uow.memberships.list_for_user.return_value = [
            make_membership(owned, "bob", MembershipStatus.APPROVED),
            make_membership(joined, "bob", MembershipStatus.APPROVED),
            make_membership(waiting, "bob", MembershipStatus.PENDING),
        ]

        profile = await service.get_profile("bob")

        assert profile.account.username == "bob"
        assert profile.owned_group_ids == [owned.id]
        assert profile.approved_group_ids == [joined.id]
        assert profile.pending_group_ids == [waiting.id]

    @pytest.mark.asyncio
    async def test_unknown_account(self, service: AccountService, uow: FakeUnitOfWork):
        uow.accounts.get.return_value = None

        with pytest.raises(AccountNotFoundError):
            await service.get_profile("nobody")


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_updates_given_fields(self, service: AccountService, uow: FakeUnitOfWork):
        uow.accounts.get.return_value = Account(
            username="bob", email="bob@example.com", bio="Old bio"
        )
        uow.accounts.update.side_effect = lambda a: a

        account = await service.update_profile(
            "bob", "bob", avatar_url="https://example.com/bob.png"
        )

        assert account.avatar_url == "https://example.com/bob.png"
        assert account.bio == "Old bio"
        assert uow.committed

    @pytest.mark.asyncio
    async def test_someone_elses_profile(self, service: AccountService, uow: FakeUnitOfWork):
        with pytest.raises(ProfileOwnerOnlyError):
            await service.update_profile("mallory", "bob", bio="pwned")

        uow.accounts.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_nothing_to_update(self, service: AccountService, uow: FakeUnitOfWork):
        with pytest.raises(NoProfileChangesError):
            await service.update_profile("bob", "bob")


class TestGetStats:
    @pytest.mark.asyncio
    async def test_counts(self, service: AccountService, uow: FakeUnitOfWork):
        uow.accounts.count.return_value = 12
        uow.groups.count.return_value = 4

        stats = await service.get_stats()

        assert (stats.users, stats.groups) == (12, 4)
