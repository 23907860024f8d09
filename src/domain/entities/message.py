"""Group chat message entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

MAX_MESSAGE_LENGTH = 1000


@dataclass
class Message:
    """Domain entity for a message posted to a group."""

    group_id: UUID
    username: str
    content: str
    id: int | None = None
    read_by: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
