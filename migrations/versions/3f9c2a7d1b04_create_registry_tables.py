"""create registry tables

Revision ID: 3f9c2a7d1b04
Revises:
Create Date: 2026-10-19 10:12:44.318201

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c2a7d1b04'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ---------- ENUM DEFINITIONS ----------
    # Enum columns hold member names, matching how SQLModel maps str enums
    itemtype = sa.Enum('lost', 'found', name='itemtype')
    itemstatus = sa.Enum('new', 'pending_claim', 'claimed', 'resolved', name='itemstatus')
    residencytype = sa.Enum('hosteller', 'day_scholar', 'unspecified', name='residencytype')
    themetype = sa.Enum('light', 'dark', name='themetype')

    # ---------- USERS ----------
    op.create_table(
        'users',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('registration_number', sa.String(), nullable=False),
        sa.Column('profile_picture', sa.String(), nullable=True),
        sa.Column('branch', sa.String(), nullable=True),
        sa.Column('year_of_study', sa.String(), nullable=True),
        sa.Column('residency', residencytype, nullable=False),
        sa.Column('theme', themetype, nullable=False),
        sa.Column('trust_score', sa.Integer(), nullable=False),
        sa.Column('resolved_count', sa.Integer(), nullable=False),
        sa.Column('onboarded', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_onboarded', 'users', ['onboarded'], unique=False)

    # ---------- ITEMS ----------
    op.create_table(
        'items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('reporter_id', sa.String(), nullable=False),
        sa.Column('reporter_name', sa.String(), nullable=False),
        sa.Column('type', itemtype, nullable=False),
        sa.Column('status', itemstatus, nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('date', sa.String(), nullable=False),
        sa.Column('image_paths', sa.JSON(), nullable=False),
        sa.Column('reports', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_items_created_at', 'items', ['created_at'], unique=False)
    op.create_index('ix_items_reporter_id', 'items', ['reporter_id'], unique=False)
    op.create_index('ix_items_type', 'items', ['type'], unique=False)
    op.create_index('ix_items_status', 'items', ['status'], unique=False)
    op.create_index('ix_items_category', 'items', ['category'], unique=False)

    # ---------- MESSAGES ----------
    op.create_table(
        'messages',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('item_id', sa.Uuid(), nullable=False),
        sa.Column('seq', sa.Integer(), nullable=False),
        sa.Column('sender_id', sa.String(), nullable=False),
        sa.Column('sender_name', sa.String(), nullable=False),
        sa.Column('text', sa.String(), nullable=False),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('timestamp', sa.String(), nullable=False),
        sa.ForeignKeyConstraint(['item_id'], ['items.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('item_id', 'seq', name='uq_message_item_seq'),
    )
    op.create_index('ix_messages_item_id', 'messages', ['item_id'], unique=False)
    op.create_index('ix_messages_sender_id', 'messages', ['sender_id'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_messages_sender_id', table_name='messages')
    op.drop_index('ix_messages_item_id', table_name='messages')
    op.drop_table('messages')

    for index in ('ix_items_category', 'ix_items_status', 'ix_items_type', 'ix_items_reporter_id', 'ix_items_created_at'):
        op.drop_index(index, table_name='items')
    op.drop_table('items')

    op.drop_index('ix_users_onboarded', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for name in ('themetype', 'residencytype', 'itemstatus', 'itemtype'):
            op.execute(f"DROP TYPE IF EXISTS {name}")
