"""create nfc_tags

Revision ID: 3f8a1c2d9b7e
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f8a1c2d9b7e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Identity provider's table; created here only when the database is fresh
    bind = op.get_bind()
    if not sa.inspect(bind).has_table('users'):
        op.create_table('users',
            sa.Column('username', sa.String(length=50), nullable=True),
            sa.Column('email', sa.String(length=255), nullable=True),
            sa.Column('profile_image_type', sa.String(length=50), nullable=True),
            sa.Column('profile_image_data', sa.JSON(), nullable=True),
            sa.Column('hashed_password', sa.String(length=255), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False),
            sa.Column('id', sa.Uuid(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table('nfc_tags',
        sa.Column('tag_id', sa.String(length=255), nullable=False),
        sa.Column('tag_url', sa.String(length=512), nullable=False),
        sa.Column('status', sa.Enum('AVAILABLE', 'CLAIMED', 'DISABLED', name='tagstatus'), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=True),
        sa.Column('claimed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_injected', sa.Boolean(), nullable=False),
        sa.Column('viewed_count', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_nfc_tags_tag_id', 'nfc_tags', ['tag_id'], unique=True)
    op.create_index('ix_nfc_tags_owner_status', 'nfc_tags', ['owner_id', 'status'])
    # One claimed tag per owner
    op.create_index(
        'uq_nfc_tags_one_claim_per_owner', 'nfc_tags', ['owner_id'], unique=True,
        postgresql_where=sa.text("status = 'CLAIMED'"),
        sqlite_where=sa.text("status = 'CLAIMED'"),
    )


def downgrade() -> None:
    op.drop_index('uq_nfc_tags_one_claim_per_owner', table_name='nfc_tags')
    op.drop_index('ix_nfc_tags_owner_status', table_name='nfc_tags')
    op.drop_index('ix_nfc_tags_tag_id', table_name='nfc_tags')
    op.drop_table('nfc_tags')
    sa.Enum(name='tagstatus').drop(op.get_bind(), checkfirst=True)
