"""create_storefront_tables

Revision ID: 001_storefront
Revises:
Create Date: 2026-10-19

Creates the catalog and order tables.
Order items reference products with ON DELETE RESTRICT so a product that
appears in any order cannot be removed from the catalog.

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '001_storefront'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        'products',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('sale_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('image_urls', postgresql.ARRAY(sa.String(500)), nullable=False,
                  server_default='{}'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('tags', postgresql.ARRAY(sa.String(100)), nullable=False,
                  server_default='{}'),
        *_timestamps(),
        sa.CheckConstraint('price >= 0', name='chk_product_price_non_negative'),
        sa.CheckConstraint('stock >= 0', name='chk_product_stock_non_negative'),
        sa.CheckConstraint(
            'sale_price IS NULL OR (sale_price >= 0 AND sale_price < price)',
            name='chk_product_sale_price_below_price',
        ),
    )
    op.create_index('idx_products_category', 'products', ['category'])
    op.create_index('idx_products_active_created', 'products', ['is_active', 'created_at'])

    op.create_table(
        'orders',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('order_number', sa.String(32), nullable=False, unique=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='PENDING'),
        sa.Column('total', sa.Numeric(12, 2), nullable=False),
        sa.Column('customer_name', sa.String(255), nullable=False),
        sa.Column('customer_email', sa.String(255), nullable=False),
        sa.Column('customer_phone', sa.String(50), nullable=True),
        sa.Column('shipping_address', postgresql.JSONB(), nullable=False),
        sa.Column('payment_method', sa.String(50), nullable=True),
        sa.Column('payment_status', sa.String(50), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('total >= 0', name='chk_order_total_non_negative'),
    )
    op.create_index('idx_orders_status_created', 'orders', ['status', 'created_at'])

    op.create_table(
        'order_items',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('order_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('products.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('product_name', sa.String(255), nullable=False),
        sa.Column('product_slug', sa.String(255), nullable=False),
        sa.Column('product_image', sa.String(500), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.CheckConstraint('quantity > 0', name='chk_order_item_quantity_positive'),
    )
    op.create_index('idx_order_items_product', 'order_items', ['product_id'])
    op.create_index('idx_order_items_order', 'order_items', ['order_id'])


def downgrade() -> None:
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('products')
