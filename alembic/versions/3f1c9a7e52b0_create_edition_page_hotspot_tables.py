"""create edition, category, page and hotspot tables

Revision ID: 3f1c9a7e52b0
Revises:
Create Date: 2026-10-17 09:12:44.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7e52b0'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'editions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('edition_date', sa.Date(), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=True),
        sa.Column('status', sa.String(length=20), server_default='draft', nullable=False),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_editions_id', 'editions', ['id'])
    op.create_index('ix_editions_edition_date', 'editions', ['edition_date'])
    op.create_index('ix_editions_status_date', 'editions', ['status', 'edition_date'])

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('position')
    )
    op.create_index('ix_categories_id', 'categories', ['id'])

    op.create_table(
        'pages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('edition_id', sa.Integer(), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('page_no', sa.Integer(), nullable=False),
        sa.Column('image_original_path', sa.String(length=500), nullable=False),
        sa.Column('image_large_path', sa.String(length=500), nullable=True),
        sa.Column('image_thumb_path', sa.String(length=500), nullable=True),
        sa.Column('width', sa.Integer(), nullable=True),
        sa.Column('height', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['edition_id'], ['editions.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('edition_id', 'page_no', name='uq_pages_edition_page_no')
    )
    op.create_index('ix_pages_id', 'pages', ['id'])
    op.create_index('ix_pages_edition_id', 'pages', ['edition_id'])
    op.create_index('ix_pages_edition_category', 'pages', ['edition_id', 'category_id'])

    # target_hotspot_id / linked_hotspot_id are soft references kept
    # symmetric by the application, not foreign keys
    op.create_table(
        'page_hotspots',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('page_id', sa.Integer(), nullable=False),
        sa.Column('relation_kind', sa.String(length=20), server_default='next', nullable=False),
        sa.Column('target_page_no', sa.Integer(), nullable=True),
        sa.Column('target_hotspot_id', sa.Integer(), nullable=True),
        sa.Column('linked_hotspot_id', sa.Integer(), nullable=True),
        sa.Column('x', sa.Float(), nullable=False),
        sa.Column('y', sa.Float(), nullable=False),
        sa.Column('w', sa.Float(), nullable=False),
        sa.Column('h', sa.Float(), nullable=False),
        sa.Column('label', sa.String(length=150), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['page_id'], ['pages.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_page_hotspots_id', 'page_hotspots', ['id'])
    op.create_index('ix_page_hotspots_page_id', 'page_hotspots', ['page_id'])
    op.create_index('ix_page_hotspots_target_hotspot_id', 'page_hotspots', ['target_hotspot_id'])
    op.create_index('ix_page_hotspots_linked_hotspot_id', 'page_hotspots', ['linked_hotspot_id'])
    op.create_index('ix_page_hotspots_page_relation', 'page_hotspots', ['page_id', 'relation_kind'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_page_hotspots_page_relation', table_name='page_hotspots')
    op.drop_index('ix_page_hotspots_linked_hotspot_id', table_name='page_hotspots')
    op.drop_index('ix_page_hotspots_target_hotspot_id', table_name='page_hotspots')
    op.drop_index('ix_page_hotspots_page_id', table_name='page_hotspots')
    op.drop_index('ix_page_hotspots_id', table_name='page_hotspots')
    op.drop_table('page_hotspots')

    op.drop_index('ix_pages_edition_category', table_name='pages')
    op.drop_index('ix_pages_edition_id', table_name='pages')
    op.drop_index('ix_pages_id', table_name='pages')
    op.drop_table('pages')

    op.drop_index('ix_categories_id', table_name='categories')
    op.drop_table('categories')

    op.drop_index('ix_editions_status_date', table_name='editions')
    op.drop_index('ix_editions_edition_date', table_name='editions')
    op.drop_index('ix_editions_id', table_name='editions')
    op.drop_table('editions')
