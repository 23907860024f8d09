"""create_group_tables

Revision ID: 4b1d9e7c2a10
Revises:
Create Date: 2026-09-14 10:02:11.482913

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b1d9e7c2a10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create accounts, groups and group_members tables."""
    op.create_table('accounts',
        sa.Column('username', sa.String(length=30), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('username'),
    )

    op.create_table('groups',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('organiser_username', sa.String(length=30), nullable=False),
        sa.Column('date_time', sa.DateTime(), nullable=False),
        sa.Column('max_members', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('activity_type', sa.String(length=20), nullable=False, server_default='other'),
        sa.Column('skill_level', sa.String(length=20), nullable=False, server_default='beginner'),
        sa.Column('cost', sa.Float(), nullable=False, server_default='0'),
        sa.Column('venue', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('max_members >= 2', name='ck_groups_max_members'),
        sa.CheckConstraint('cost >= 0', name='ck_groups_cost'),
        sa.CheckConstraint(
            "activity_type IN ('sport', 'social', 'games', 'other')",
            name='ck_groups_activity_type',
        ),
        sa.CheckConstraint(
            "skill_level IN ('beginner', 'intermediate', 'advanced')",
            name='ck_groups_skill_level',
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_groups_organiser_username', 'groups', ['organiser_username'], unique=False)
    op.create_index('ix_groups_date_time', 'groups', ['date_time'], unique=False)

    op.create_table('group_members',
        sa.Column('group_id', sa.UUID(), nullable=False),
        sa.Column('username', sa.String(length=30), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('joined_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name='ck_group_members_status',
        ),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('group_id', 'username'),
    )
    op.create_index('ix_group_members_username', 'group_members', ['username'], unique=False)
    op.create_index(
        'ix_group_members_group_status', 'group_members', ['group_id', 'status'], unique=False
    )


def downgrade() -> None:
    """Drop group tables."""
    op.drop_index('ix_group_members_group_status', table_name='group_members')
    op.drop_index('ix_group_members_username', table_name='group_members')
    op.drop_table('group_members')
    op.drop_index('ix_groups_date_time', table_name='groups')
    op.drop_index('ix_groups_organiser_username', table_name='groups')
    op.drop_table('groups')
    op.drop_table('accounts')
