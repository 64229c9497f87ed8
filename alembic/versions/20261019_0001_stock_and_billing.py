"""stock and billing schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "stock_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("gsm_number", sa.String(length=64), nullable=False),
        sa.Column("category", sa.String(length=120), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("manufacturer", sa.String(length=160), nullable=True),
        sa.Column("stock", sa.Integer(), nullable=False),
        sa.Column("cost_price", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("selling_price", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("minimum_stock", sa.Integer(), nullable=False),
        sa.Column("unit", sa.String(length=24), nullable=False, server_default="piece"),
        sa.Column("kg", sa.Numeric(precision=12, scale=3), nullable=True),
        sa.Column("amount", sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_stock_items_id"), "stock_items", ["id"], unique=False)
    op.create_index(op.f("ix_stock_items_gsm_number"), "stock_items", ["gsm_number"], unique=False)
    op.create_index(op.f("ix_stock_items_category"), "stock_items", ["category"], unique=False)

    op.create_table(
        "bills",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("customer_name", sa.String(length=160), nullable=False),
        sa.Column("payment_mode", sa.String(length=40), nullable=True),
        sa.Column("status", sa.String(length=24), nullable=False, server_default="Pending"),
        sa.Column("bill_date", sa.DateTime(), nullable=False),
        sa.Column("subtotal", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bills_id"), "bills", ["id"], unique=False)
    op.create_index(op.f("ix_bills_bill_date"), "bills", ["bill_date"], unique=False)

    op.create_table(
        "bill_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("bill_id", sa.Integer(), nullable=False),
        sa.Column("gsm_number", sa.String(length=64), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("cost_price", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("total", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["bill_id"], ["bills.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bill_items_id"), "bill_items", ["id"], unique=False)
    op.create_index(op.f("ix_bill_items_bill_id"), "bill_items", ["bill_id"], unique=False)
    op.create_index(op.f("ix_bill_items_gsm_number"), "bill_items", ["gsm_number"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_bill_items_gsm_number"), table_name="bill_items")
    op.drop_index(op.f("ix_bill_items_bill_id"), table_name="bill_items")
    op.drop_index(op.f("ix_bill_items_id"), table_name="bill_items")
    op.drop_table("bill_items")

    op.drop_index(op.f("ix_bills_bill_date"), table_name="bills")
    op.drop_index(op.f("ix_bills_id"), table_name="bills")
    op.drop_table("bills")

    op.drop_index(op.f("ix_stock_items_category"), table_name="stock_items")
    op.drop_index(op.f("ix_stock_items_gsm_number"), table_name="stock_items")
    op.drop_index(op.f("ix_stock_items_id"), table_name="stock_items")
    op.drop_table("stock_items")
