"""create error_logs

Revision ID: 7c41e9a0d5b2
Revises: 3f8a1c2d9b7e
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7c41e9a0d5b2'
down_revision: Union[str, None] = '3f8a1c2d9b7e'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('error_logs',
        sa.Column('error_code', sa.String(length=100), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status_code', sa.Integer(), nullable=False),
        sa.Column('stack', sa.Text(), nullable=True),
        sa.Column('context', sa.Text(), nullable=True),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('method', sa.String(length=10), nullable=True),
        sa.Column('path', sa.String(length=2048), nullable=True),
        sa.Column('user_agent', sa.String(length=512), nullable=True),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_error_logs_error_code', 'error_logs', ['error_code'])
    op.create_index('ix_error_logs_user_id', 'error_logs', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_error_logs_user_id', table_name='error_logs')
    op.drop_index('ix_error_logs_error_code', table_name='error_logs')
    op.drop_table('error_logs')
