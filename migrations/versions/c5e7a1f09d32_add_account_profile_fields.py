"""add_account_profile_fields

Revision ID: c5e7a1f09d32
Revises: 8f02c6a4d3b7
Create Date: 2026-10-19 11:02:44.318205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'c5e7a1f09d32'
down_revision: Union[str, Sequence[str], None] = '8f02c6a4d3b7'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add bio and avatar_url to accounts."""
    op.add_column('accounts', sa.Column('bio', sa.String(length=500), nullable=True))
    op.add_column('accounts', sa.Column('avatar_url', sa.String(length=500), nullable=True))


def downgrade() -> None:
    """Remove bio and avatar_url from accounts."""
    op.drop_column('accounts', 'avatar_url')
    op.drop_column('accounts', 'bio')
