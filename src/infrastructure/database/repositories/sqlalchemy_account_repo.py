"""SQLAlchemy implementation of Account repository."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.account import Account
from infrastructure.database.models import AccountModel


class SQLAlchemyAccountRepository:
    """SQLAlchemy implementation of IAccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, username: str) -> Account | None:
        """Get an account by username."""
        stmt = select(AccountModel).where(AccountModel.username == username)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_many(self, usernames: list[str]) -> list[Account]:
        """Get the accounts that exist among the given usernames."""
        if not usernames:
            return []
        stmt = select(AccountModel).where(AccountModel.username.in_(usernames))
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, account: Account) -> Account:
        """Create a new account."""
        model = self._to_model(account)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, account: Account) -> Account:
        """Persist profile changes to an existing account."""
        stmt = select(AccountModel).where(AccountModel.username == account.username)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Account {account.username} not found")

        model.display_name = account.display_name
        model.bio = account.bio
        model.avatar_url = account.avatar_url

        await self._session.flush()
        return self._to_entity(model)

    async def count(self) -> int:
        """Count all accounts."""
        result = await self._session.execute(select(func.count()).select_from(AccountModel))
        return result.scalar_one()

    def _to_entity(self, model: AccountModel) -> Account:
        """Convert ORM model to domain entity."""
        return Account(
            username=model.username,
            email=model.email,
            display_name=model.display_name,
            bio=model.bio,
            avatar_url=model.avatar_url,
            created_at=model.created_at,
        )

    def _to_model(self, entity: Account) -> AccountModel:
        """Convert domain entity to ORM model."""
        return AccountModel(
            username=entity.username,
            email=entity.email,
            display_name=entity.display_name,
            bio=entity.bio,
            avatar_url=entity.avatar_url,
            created_at=entity.created_at,
        )
