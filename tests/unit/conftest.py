"""Shared fixtures for unit tests."""

from datetime import datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.group import Group
from domain.entities.membership import Membership, MembershipStatus

NOW = datetime(2026, 6, 1, 12, 0, 0)


class FakeUnitOfWork:
    """Fake Unit of Work with all 7 repository mocks for unit testing."""

    def __init__(self) -> None:
        self.accounts = AsyncMock()
        self.groups = AsyncMock()
        self.memberships = AsyncMock()
        self.notifications = AsyncMock()
        self.activities = AsyncMock()
        self.messages = AsyncMock()
        self.reminders = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


def make_group(
    organiser: str = "olive",
    max_members: int = 5,
    starts_in: timedelta = timedelta(days=2),
    **kwargs: Any,
) -> Group:
    """Build a group starting ``starts_in`` after ``NOW``."""
    return Group(
        name=kwargs.pop("name", "Sunday Football"),
        organiser_username=organiser,
        date_time=NOW + starts_in,
        max_members=max_members,
        **kwargs,
    )


def make_membership(
    group: Group, username: str, status: MembershipStatus = MembershipStatus.PENDING
) -> Membership:
    return Membership(
        group_id=group.id,
        username=username,
        status=status,
        joined_at=NOW - timedelta(days=1),
        updated_at=NOW - timedelta(days=1),
    )


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def group() -> Group:
    """An upcoming group organised by ``olive`` with room for five."""
    return make_group()


@pytest.fixture
def group_id() -> UUID:
    """A random group ID."""
    return uuid4()
