"""Initial schema: users, library entries, sync tokens and history, lists

Revision ID: 4c1d9e7a2b10
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1d9e7a2b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('user',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('image', sa.String(length=1024), nullable=True),
        sa.Column('username', sa.String(length=30), nullable=True),
        sa.Column('is_admin', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('username')
    )

    op.create_table('library_entry',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('user_id', sa.String(length=32), nullable=False),
        sa.Column('title_asin', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('progress', sa.Integer(), nullable=False),
        sa.Column('user_rating', sa.Integer(), nullable=False),
        sa.Column('source', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'title_asin', name='uix_library_entry_user_asin')
    )
    op.create_index('idx_library_entry_title_asin', 'library_entry', ['title_asin'])
    op.create_index('idx_library_entry_user_source', 'library_entry', ['user_id', 'source'])

    op.create_table('sync_token',
        sa.Column('jti', sa.String(length=64), nullable=False),
        sa.Column('user_id', sa.String(length=32), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('used', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('jti')
    )
    op.create_index('idx_sync_token_user_id', 'sync_token', ['user_id'])

    op.create_table('sync_history',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('user_id', sa.String(length=32), nullable=False),
        sa.Column('titles_imported', sa.Integer(), nullable=False),
        sa.Column('new_to_catalog', sa.Integer(), nullable=False),
        sa.Column('library_count', sa.Integer(), nullable=False),
        sa.Column('wishlist_count', sa.Integer(), nullable=False),
        sa.Column('warnings', sa.JSON(), nullable=False),
        sa.Column('success', sa.Boolean(), nullable=False),
        sa.Column('synced_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_sync_history_user_synced', 'sync_history', ['user_id', 'synced_at'])

    op.create_table('list',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('user_id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(length=80), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('tiers', sa.JSON(), nullable=False),
        sa.Column('image_template_id', sa.String(length=50), nullable=True),
        sa.Column('image_version', sa.Integer(), nullable=False),
        sa.Column('image_status', sa.String(length=20), nullable=False),
        sa.Column('image_og_key', sa.String(length=255), nullable=True),
        sa.Column('image_square_key', sa.String(length=255), nullable=True),
        sa.Column('image_generated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('image_error', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_list_user_id', 'list', ['user_id'])
    op.create_index('idx_list_updated_at', 'list', ['updated_at'])

    op.create_table('list_item',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('list_id', sa.String(length=32), nullable=False),
        sa.Column('title_asin', sa.String(length=20), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('tier', sa.String(length=20), nullable=True),
        sa.ForeignKeyConstraint(['list_id'], ['list.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('list_id', 'title_asin', name='uix_list_item_list_asin')
    )
    op.create_index('idx_list_item_title_asin', 'list_item', ['title_asin'])


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_index('idx_list_item_title_asin', table_name='list_item')
    op.drop_table('list_item')
    op.drop_index('idx_list_updated_at', table_name='list')
    op.drop_index('idx_list_user_id', table_name='list')
    op.drop_table('list')
    op.drop_index('idx_sync_history_user_synced', table_name='sync_history')
    op.drop_table('sync_history')
    op.drop_index('idx_sync_token_user_id', table_name='sync_token')
    op.drop_table('sync_token')
    op.drop_index('idx_library_entry_user_source', table_name='library_entry')
    op.drop_index('idx_library_entry_title_asin', table_name='library_entry')
    op.drop_table('library_entry')
    op.drop_table('user')
