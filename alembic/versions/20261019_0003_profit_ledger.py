"""add profit ledger cache

Revision ID: 20261019_0003
Revises: 20261019_0002
Create Date: 2026-10-19 10:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_0003"
down_revision: Union[str, Sequence[str], None] = "20261019_0002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "profit_ledger",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("bill_item_id", sa.Integer(), nullable=True),
        sa.Column("entry_date", sa.DateTime(), nullable=True),
        sa.Column("gsm_number", sa.String(length=64), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("cost", sa.Numeric(12, 2), nullable=False),
        sa.Column("synced_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_profit_ledger_id"), "profit_ledger", ["id"], unique=False)
    op.create_index(op.f("ix_profit_ledger_bill_item_id"), "profit_ledger", ["bill_item_id"], unique=False)
    op.create_index(op.f("ix_profit_ledger_entry_date"), "profit_ledger", ["entry_date"], unique=False)
    op.create_index(op.f("ix_profit_ledger_gsm_number"), "profit_ledger", ["gsm_number"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_profit_ledger_gsm_number"), table_name="profit_ledger")
    op.drop_index(op.f("ix_profit_ledger_entry_date"), table_name="profit_ledger")
    op.drop_index(op.f("ix_profit_ledger_bill_item_id"), table_name="profit_ledger")
    op.drop_index(op.f("ix_profit_ledger_id"), table_name="profit_ledger")
    op.drop_table("profit_ledger")
