"""Initial schema for users, restaurants, items, sales and revoked tokens

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'restaurants',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('restaurant_id', sa.Uuid(), sa.ForeignKey('restaurants.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'items',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('public_id', sa.String(16), nullable=False),
        sa.Column('restaurant_id', sa.Uuid(), sa.ForeignKey('restaurants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('price >= 0', name='ck_items_price_non_negative'),
    )
    op.create_index('ix_items_public_id', 'items', ['public_id'], unique=True)
    op.create_index('ix_items_restaurant_id', 'items', ['restaurant_id'])

    op.create_table(
        'sales',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('restaurant_id', sa.Uuid(), sa.ForeignKey('restaurants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('total_amount', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
    )
    op.create_index('idx_sales_restaurant_created', 'sales', ['restaurant_id', 'created_at'])

    op.create_table(
        'sale_items',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('sale_id', sa.Uuid(), sa.ForeignKey('sales.id', ondelete='CASCADE'), nullable=False),
        sa.Column('item_id', sa.Integer(), sa.ForeignKey('items.id', ondelete='SET NULL'), nullable=True),
        sa.Column('item_name', sa.String(255), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Integer(), nullable=False),
    )
    op.create_index('ix_sale_items_item_id', 'sale_items', ['item_id'])

    op.create_table(
        'revoked_tokens',
        sa.Column('token_hash', sa.String(64), primary_key=True),
        sa.Column('revoked_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_revoked_tokens_expires', 'revoked_tokens', ['expires_at'])


def downgrade() -> None:
    op.drop_table('revoked_tokens')
    op.drop_table('sale_items')
    op.drop_table('sales')
    op.drop_table('items')
    op.drop_table('users')
    op.drop_table('restaurants')
