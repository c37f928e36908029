"""Marketplace schema: suppliers, products and orders.

Revision ID: 001_marketplace_schema
Revises: None
Create Date: 2026-10-19

Orders are document-style rows: items, supplier sub-orders and the
delivery address are JSONB columns. Every aggregate table carries a
``version`` column for optimistic concurrency.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_marketplace_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """Create marketplace tables."""
    op.create_table(
        "suppliers",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(20), nullable=False),
        sa.Column("email", sa.String(255)),
        sa.Column("whatsapp", sa.String(20)),
        sa.Column("address", sa.Text()),
        sa.Column("city", sa.String(100), nullable=False, server_default="Conakry"),
        sa.Column("description", sa.Text()),
        sa.Column("categories", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("delivery_zones", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("rating", sa.Numeric(3, 2), nullable=False, server_default="0"),
        sa.Column("total_orders", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("successful_orders", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("average_response_time", sa.Numeric(12, 4)),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint("phone", name="suppliers_phone_key"),
        sa.CheckConstraint("rating >= 0 AND rating <= 5", name="check_supplier_rating_range"),
    )
    op.create_index("ix_suppliers_name", "suppliers", ["name"])
    op.create_index("idx_suppliers_active_rating", "suppliers", ["is_active", "rating"])

    op.create_table(
        "products",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("sku", sa.String(50), nullable=False),
        sa.Column("supplier_id", sa.Uuid(), sa.ForeignKey("suppliers.id"), nullable=False),
        sa.Column("supplier_name", sa.String(200)),
        sa.Column("supplier_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("public_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("margin", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("margin_percentage", sa.Numeric(7, 1), nullable=False, server_default="0"),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("min_stock", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint("sku", name="products_sku_key"),
        sa.CheckConstraint("stock >= 0", name="check_product_stock_non_negative"),
        sa.CheckConstraint(
            "supplier_price >= 0 AND public_price >= 0", name="check_product_prices_non_negative"
        ),
    )
    op.create_index("ix_products_name", "products", ["name"])
    op.create_index("ix_products_category", "products", ["category"])
    op.create_index("ix_products_supplier_id", "products", ["supplier_id"])
    op.create_index("idx_products_status_available", "products", ["status", "is_available"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("order_number", sa.String(20), nullable=False),
        sa.Column("customer_id", sa.Uuid()),
        sa.Column("customer_email", sa.String(255)),
        sa.Column("customer_phone", sa.String(20), nullable=False),
        sa.Column("delivery_address", postgresql.JSONB(), nullable=False),
        sa.Column("items", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("suppliers", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("supplier_refs", sa.Text(), nullable=False, server_default=""),
        sa.Column("subtotal", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("delivery_fee", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("total", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("total_margin", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("payment_method", sa.String(20), nullable=False, server_default="cash"),
        sa.Column("payment_reference", sa.String(100)),
        sa.Column("delivery_method", sa.String(20), nullable=False, server_default="standard"),
        sa.Column("notes", sa.Text()),
        sa.Column("admin_notes", sa.Text()),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint("order_number", name="orders_order_number_key"),
    )
    op.create_index("idx_orders_status_created", "orders", ["status", "created_at"])
    op.create_index("idx_orders_payment_status", "orders", ["payment_status"])
    op.create_index("idx_orders_customer_phone", "orders", ["customer_phone"])


def downgrade() -> None:
    """Drop marketplace tables."""
    op.drop_table("orders")
    op.drop_table("products")
    op.drop_table("suppliers")
