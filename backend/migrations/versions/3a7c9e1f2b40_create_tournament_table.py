"""create tournament table

Revision ID: 3a7c9e1f2b40
Revises:
Create Date: 2026-10-18 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3a7c9e1f2b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'tournament',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('participant_count', sa.Integer(), nullable=False),
        sa.Column('invite_code', sa.String(length=16), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('current_round', sa.Integer(), nullable=False),
        sa.Column('players', sa.JSON(), nullable=False),
        sa.Column('rounds', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    with op.batch_alter_table('tournament') as batch_op:
        batch_op.create_index('ix_tournament_invite_code', ['invite_code'], unique=True)
        batch_op.create_index('ix_tournament_created_at', ['created_at'], unique=False)


def downgrade():
    with op.batch_alter_table('tournament') as batch_op:
        batch_op.drop_index('ix_tournament_created_at')
        batch_op.drop_index('ix_tournament_invite_code')
    op.drop_table('tournament')
