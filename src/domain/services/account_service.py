"""Account service layer."""

from collections.abc import Callable

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import AccountNotFoundError, NoProfileChangesError, ProfileOwnerOnlyError
from domain.entities.account import Account, AccountProfile, PlatformStats
from domain.entities.membership import MembershipStatus
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class AccountService:
    """Keeps local accounts in step with authenticated users and serves profiles."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get(self, username: str) -> Account | None:
        async with self._uow_factory() as uow:
            return await uow.accounts.get(username)

    async def ensure_account(
        self, username: str, email: str, display_name: str | None = None
    ) -> Account:
        """Return the user's account, creating it on first sight."""
        async with self._uow_factory() as uow:
            account = await uow.accounts.get(username)
            if account:
                return account
            try:
                created = await uow.accounts.create(
                    Account(username=username, email=email, display_name=display_name)
                )
                await uow.commit()
            except IntegrityError:
                await uow.rollback()
                # Created by a concurrent request for the same user.
                existing = await uow.accounts.get(username)
                if existing is None:
                    raise
                return existing

        logger.info("account_created", username=username)
        return created

    async def get_profile(self, username: str) -> AccountProfile:
        """Get an account with the groups it organises, belongs to and awaits.

        Groups the user organises are listed as owned only, not as approved.
        """
        async with self._uow_factory() as uow:
            account = await uow.accounts.get(username)
            if not account:
                raise AccountNotFoundError(username)

            owned = await uow.groups.list_ids_by_organiser(username)
            memberships = await uow.memberships.list_for_user(username)

        owned_ids = set(owned)
        return AccountProfile(
            account=account,
            owned_group_ids=owned,
            approved_group_ids=[
                m.group_id
                for m in memberships
                if m.status == MembershipStatus.APPROVED and m.group_id not in owned_ids
            ],
            pending_group_ids=[
                m.group_id for m in memberships if m.status == MembershipStatus.PENDING
            ],
        )

    async def update_profile(
        self,
        actor: str,
        username: str,
        display_name: str | None = None,
        bio: str | None = None,
        avatar_url: str | None = None,
    ) -> Account:
        """Update profile fields. Users may only update their own profile."""
        if actor != username:
            raise ProfileOwnerOnlyError()
        if display_name is None and bio is None and avatar_url is None:
            raise NoProfileChangesError()

        async with self._uow_factory() as uow:
            account = await uow.accounts.get(username)
            if not account:
                raise AccountNotFoundError(username)

            if display_name is not None:
                account.display_name = display_name
            if bio is not None:
                account.bio = bio
            if avatar_url is not None:
                account.avatar_url = avatar_url

            updated = await uow.accounts.update(account)
            await uow.commit()

        logger.info("profile_updated", username=username)
        return updated

    async def get_stats(self) -> PlatformStats:
        """Count registered accounts and groups."""
        async with self._uow_factory() as uow:
            return PlatformStats(
                users=await uow.accounts.count(),
                groups=await uow.groups.count(),
            )
