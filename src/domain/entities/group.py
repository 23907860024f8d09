"""Group domain entities."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum
from uuid import UUID, uuid4

from domain.entities.account import Account


class ActivityType(StrEnum):
    """Kind of activity a group is organised around."""

    SPORT = "sport"
    SOCIAL = "social"
    GAMES = "games"
    OTHER = "other"


class SkillLevel(StrEnum):
    """Skill level expected from participants."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


MIN_GROUP_SIZE = 2


@dataclass
class Group:
    """Domain entity for an activity group.

    ``date_time`` is the event start in naive UTC. The organiser is always an
    approved member and counts against ``max_members``.
    """

    name: str
    organiser_username: str
    date_time: datetime
    max_members: int
    id: UUID = field(default_factory=uuid4)
    description: str = ""
    activity_type: ActivityType = ActivityType.OTHER
    skill_level: SkillLevel = SkillLevel.BEGINNER
    cost: float = 0.0
    venue: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def is_organiser(self, username: str) -> bool:
        """Check whether the user organises this group."""
        return self.organiser_username == username

    def membership_closes_at(self, lockout: timedelta) -> datetime:
        """Moment from which membership changes are refused."""
        return self.date_time - lockout

    def has_started(self, now: datetime | None = None) -> bool:
        """Check whether the event start time has passed."""
        return (now or datetime.utcnow()) >= self.date_time


@dataclass
class GroupFilter:
    """Listing criteria for groups."""

    activity_type: ActivityType | None = None
    skill_level: SkillLevel | None = None
    min_price: float | None = None
    max_price: float | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    min_members: int | None = None
    max_members: int | None = None
    sort_by: str = "date_time"
    sort_order: str = "asc"
    limit: int = 10
    offset: int = 0


SORTABLE_FIELDS = (
    "date_time",
    "name",
    "cost",
    "skill_level",
    "activity_type",
    "max_members",
    "created_at",
    "updated_at",
)
MAX_PAGE_SIZE = 100


@dataclass
class GroupDetails:
    """A group with its approved member count and organiser account."""

    group: Group
    approved_count: int
    organiser: Account | None = None
