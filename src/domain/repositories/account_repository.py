"""Account repository protocol."""

from typing import Protocol

from domain.entities.account import Account


class IAccountRepository(Protocol):
    """Repository interface for Account entities."""

    async def get(self, username: str) -> Account | None:
        """Get an account by username."""
        ...

    async def get_many(self, usernames: list[str]) -> list[Account]:
        """Get the accounts that exist among the given usernames."""
        ...

    async def create(self, account: Account) -> Account:
        """Create a new account."""
        ...

    async def update(self, account: Account) -> Account:
        """Persist profile changes to an existing account."""
        ...

    async def count(self) -> int:
        """Count all accounts."""
        ...
