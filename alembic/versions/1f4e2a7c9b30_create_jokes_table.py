"""create_jokes_table

Revision ID: 1f4e2a7c9b30
Revises:
Create Date: 2026-10-19 10:12:41.402117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '1f4e2a7c9b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'jokes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('joke_id', sa.String(length=100), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('setup', sa.Text(), nullable=False),
        sa.Column('punchline', sa.Text(), nullable=False),
        sa.Column('rating', sa.Float(), nullable=False, server_default='0'),
        sa.Column('votes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_jokes_joke_id'), 'jokes', ['joke_id'], unique=True)
    op.create_index(op.f('ix_jokes_type'), 'jokes', ['type'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_jokes_type'), table_name='jokes')
    op.drop_index(op.f('ix_jokes_joke_id'), table_name='jokes')
    op.drop_table('jokes')
