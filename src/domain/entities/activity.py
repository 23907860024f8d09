"""Activity log domain entity and event type constants."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


class Actions:
    """Activity event type constants."""

    # Group lifecycle
    CREATE_GROUP = "create_group"
    UPDATE_GROUP = "update_group"
    DELETE_GROUP = "delete_group"

    # Membership
    JOIN_GROUP_REQUEST = "join_group_request"
    JOIN_GROUP_APPROVED = "join_group_approved"
    JOIN_GROUP_REJECTED = "join_group_rejected"
    LEAVE_GROUP = "leave_group"
    REMOVE_MEMBER = "remove_member"

    # Messages
    SEND_MESSAGE = "send_message"


@dataclass
class ActivityLog:
    """Domain entity for a user's activity history entry."""

    username: str
    event_type: str
    group_id: UUID
    id: UUID = field(default_factory=uuid4)
    timestamp: datetime = field(default_factory=datetime.utcnow)
