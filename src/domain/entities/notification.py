"""Notification domain entity and types."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class NotificationType(StrEnum):
    """In-app notification kinds."""

    JOIN_REQUEST = "join_request"
    JOIN_APPROVED = "join_approved"
    JOIN_REJECTED = "join_rejected"
    LEAVE_GROUP = "leave_group"
    MEMBER_JOINED = "member_joined"
    REMOVED_FROM_GROUP = "removed_from_group"
    UNREAD_MESSAGES = "unread_messages"


@dataclass
class Notification:
    """Domain entity for an in-app notification.

    Created as a side effect of group activity; only ``read`` changes
    afterwards.
    """

    recipient_username: str
    type: NotificationType
    message: str
    group_id: UUID
    id: UUID = field(default_factory=uuid4)
    read: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
