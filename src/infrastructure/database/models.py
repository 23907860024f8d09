"""SQLAlchemy ORM models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class AccountModel(Base):
    """User account (synced from the auth token on first request)."""

    __tablename__ = "accounts"

    username: Mapped[str] = mapped_column(String(30), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(100))
    bio: Mapped[str | None] = mapped_column(String(500))
    avatar_url: Mapped[str | None] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class GroupModel(Base):
    """Activity group model."""

    __tablename__ = "groups"
    __table_args__ = (
        CheckConstraint("max_members >= 2", name="ck_groups_max_members"),
        CheckConstraint("cost >= 0", name="ck_groups_cost"),
        CheckConstraint(
            "activity_type IN ('sport', 'social', 'games', 'other')",
            name="ck_groups_activity_type",
        ),
        CheckConstraint(
            "skill_level IN ('beginner', 'intermediate', 'advanced')",
            name="ck_groups_skill_level",
        ),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    organiser_username: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    date_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    max_members: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    activity_type: Mapped[str] = mapped_column(String(20), nullable=False, default="other")
    skill_level: Mapped[str] = mapped_column(String(20), nullable=False, default="beginner")
    cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    venue: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships (deleting a group removes everything it owns)
    members: Mapped[list["GroupMemberModel"]] = relationship(
        "GroupMemberModel",
        back_populates="group",
        cascade="all, delete-orphan",
    )
    notifications: Mapped[list["NotificationModel"]] = relationship(
        "NotificationModel",
        cascade="all, delete-orphan",
    )
    messages: Mapped[list["MessageModel"]] = relationship(
        "MessageModel",
        cascade="all, delete-orphan",
    )
    reminders: Mapped[list["ReminderSentModel"]] = relationship(
        "ReminderSentModel",
        cascade="all, delete-orphan",
    )


class GroupMemberModel(Base):
    """Group membership model (composite PK on group_id + username)."""

    __tablename__ = "group_members"
    __table_args__ = (
        Index("ix_group_members_group_status", "group_id", "status"),
    )

    group_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
    )
    username: Mapped[str] = mapped_column(String(30), primary_key=True, index=True)
    status: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_group_members_status",
        ),
        nullable=False,
        default="pending",
    )
    joined_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    group: Mapped["GroupModel"] = relationship("GroupModel", back_populates="members")


class NotificationModel(Base):
    """In-app notification model."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_recipient_read", "recipient_username", "read"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    recipient_username: Mapped[str] = mapped_column(String(30), nullable=False)
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    group_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class ActivityLogModel(Base):
    """User activity history (kept after the group is deleted)."""

    __tablename__ = "activity_log"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    username: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    event_type: Mapped[str] = mapped_column(String(50), nullable=False)
    group_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)


class MessageModel(Base):
    """Group chat message model."""

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_group_created", "group_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
    )
    username: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    reads: Mapped[list["MessageReadModel"]] = relationship(
        "MessageReadModel",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class MessageReadModel(Base):
    """Read receipt for a message (composite PK on message_id + username)."""

    __tablename__ = "message_reads"

    message_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("messages.id", ondelete="CASCADE"),
        primary_key=True,
    )
    username: Mapped[str] = mapped_column(String(30), primary_key=True)
    read_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class ReminderSentModel(Base):
    """Tracks event reminders already sent, to avoid duplicates."""

    __tablename__ = "reminders_sent"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    username: Mapped[str] = mapped_column(String(30), nullable=False)
    reminder_type: Mapped[str] = mapped_column(
        String(10),
        CheckConstraint(
            "reminder_type IN ('24hour', '1hour')",
            name="ck_reminders_sent_type",
        ),
        nullable=False,
    )
    sent_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
