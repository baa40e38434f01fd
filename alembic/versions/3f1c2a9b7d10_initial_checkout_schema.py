"""initial checkout schema

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-19 10:12:41.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=False, server_default="user"),
        sa.Column("can_login", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "product",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False, server_default=""),
        sa.Column("brand", sa.String(), nullable=True),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("images", sa.JSON(), nullable=True),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),
        sa.CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
    )
    op.create_index("ix_product_name", "product", ["name"])

    op.create_table(
        "cart",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_cart_user_id", "cart", ["user_id"], unique=True)

    # product_id is deliberately not a foreign key on cart and order lines
    op.create_table(
        "cartitem",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("cart_id", sa.Integer(), sa.ForeignKey("cart.id"), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("product_name", sa.String(), nullable=False),
        sa.Column("image", sa.String(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("color", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_cartitem_cart_id", "cartitem", ["cart_id"])
    op.create_index("ix_cartitem_product_id", "cartitem", ["product_id"])

    op.create_table(
        "order",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_number", sa.String(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("shipping_address", sa.JSON(), nullable=False),
        sa.Column("payment_method", sa.String(), nullable=False),
        sa.Column("payment_status", sa.String(), nullable=False),
        sa.Column("payment_result", sa.JSON(), nullable=True),
        sa.Column("order_status", sa.String(), nullable=False),
        sa.Column("subtotal", sa.Float(), nullable=False),
        sa.Column("shipping_cost", sa.Float(), nullable=False),
        sa.Column("tax", sa.Float(), nullable=False),
        sa.Column("discount", sa.Float(), nullable=False),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("delivered_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_order_order_number", "order", ["order_number"], unique=True)
    op.create_index("ix_order_user_id", "order", ["user_id"])
    op.create_index("ix_order_order_status", "order", ["order_status"])
    op.create_index("ix_order_created_at", "order", ["created_at"])

    op.create_table(
        "orderitem",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("order.id"), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("image", sa.String(), nullable=True),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("color", sa.String(), nullable=True),
        sa.CheckConstraint("quantity >= 1", name="ck_orderitem_quantity_positive"),
        sa.CheckConstraint("price >= 0", name="ck_orderitem_price_non_negative"),
    )
    op.create_index("ix_orderitem_order_id", "orderitem", ["order_id"])
    op.create_index("ix_orderitem_product_id", "orderitem", ["product_id"])


def downgrade():
    op.drop_index("ix_orderitem_product_id", table_name="orderitem")
    op.drop_index("ix_orderitem_order_id", table_name="orderitem")
    op.drop_table("orderitem")

    op.drop_index("ix_order_created_at", table_name="order")
    op.drop_index("ix_order_order_status", table_name="order")
    op.drop_index("ix_order_user_id", table_name="order")
    op.drop_index("ix_order_order_number", table_name="order")
    op.drop_table("order")

    op.drop_index("ix_cartitem_product_id", table_name="cartitem")
    op.drop_index("ix_cartitem_cart_id", table_name="cartitem")
    op.drop_table("cartitem")

    op.drop_index("ix_cart_user_id", table_name="cart")
    op.drop_table("cart")

    op.drop_index("ix_product_name", table_name="product")
    op.drop_table("product")

    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")
