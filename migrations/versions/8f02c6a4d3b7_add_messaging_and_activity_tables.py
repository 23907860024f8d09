"""add_messaging_and_activity_tables

Revision ID: 8f02c6a4d3b7
Revises: 4b1d9e7c2a10
Create Date: 2026-09-21 16:40:27.105366

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8f02c6a4d3b7'
down_revision: Union[str, Sequence[str], None] = '4b1d9e7c2a10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create notifications, activity_log, messages, message_reads and reminders_sent."""
    op.create_table('notifications',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('recipient_username', sa.String(length=30), nullable=False),
        sa.Column('type', sa.String(length=30), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('group_id', sa.UUID(), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_notifications_group_id', 'notifications', ['group_id'], unique=False)
    op.create_index(
        'ix_notifications_recipient_read',
        'notifications',
        ['recipient_username', 'read'],
        unique=False,
    )

    # No foreign key: history outlives deleted groups.
    op.create_table('activity_log',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('username', sa.String(length=30), nullable=False),
        sa.Column('event_type', sa.String(length=50), nullable=False),
        sa.Column('group_id', sa.UUID(), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_activity_log_username', 'activity_log', ['username'], unique=False)
    op.create_index('ix_activity_log_timestamp', 'activity_log', ['timestamp'], unique=False)

    op.create_table('messages',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('group_id', sa.UUID(), nullable=False),
        sa.Column('username', sa.String(length=30), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_messages_username', 'messages', ['username'], unique=False)
    op.create_index('ix_messages_group_created', 'messages', ['group_id', 'created_at'], unique=False)

    op.create_table('message_reads',
        sa.Column('message_id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=30), nullable=False),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['message_id'], ['messages.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('message_id', 'username'),
    )

    op.create_table('reminders_sent',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('group_id', sa.UUID(), nullable=False),
        sa.Column('username', sa.String(length=30), nullable=False),
        sa.Column('reminder_type', sa.String(length=10), nullable=False),
        sa.Column('sent_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "reminder_type IN ('24hour', '1hour')",
            name='ck_reminders_sent_type',
        ),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_reminders_sent_group_id', 'reminders_sent', ['group_id'], unique=False)


def downgrade() -> None:
    """Drop messaging, notification and activity tables."""
    op.drop_index('ix_reminders_sent_group_id', table_name='reminders_sent')
    op.drop_table('reminders_sent')
    op.drop_table('message_reads')
    op.drop_index('ix_messages_group_created', table_name='messages')
    op.drop_index('ix_messages_username', table_name='messages')
    op.drop_table('messages')
    op.drop_index('ix_activity_log_timestamp', table_name='activity_log')
    op.drop_index('ix_activity_log_username', table_name='activity_log')
    op.drop_table('activity_log')
    op.drop_index('ix_notifications_recipient_read', table_name='notifications')
    op.drop_index('ix_notifications_group_id', table_name='notifications')
    op.drop_table('notifications')
