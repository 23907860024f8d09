"""Account domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass
class Account:
    """Domain entity for a user account (synced from the auth token)."""

    username: str
    email: str
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class AccountProfile:
    """An account together with the groups it organises or belongs to."""

    account: Account
    owned_group_ids: list[UUID] = field(default_factory=list)
    approved_group_ids: list[UUID] = field(default_factory=list)
    pending_group_ids: list[UUID] = field(default_factory=list)


@dataclass
class PlatformStats:
    users: int
    groups: int
