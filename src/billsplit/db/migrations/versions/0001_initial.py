"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("tg_id", sa.BigInteger(), unique=True),
        sa.Column("display_name", sa.Text()),
    )

    op.create_table(
        "bills",
        sa.Column("id", postgresql.UUID(), primary_key=True),
        sa.Column("owner_user_id", sa.Text(), sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("title", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="USD"),
        sa.Column("tax_cents", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("tip_cents", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("share_token", sa.Text(), unique=True),
        sa.Column("is_link_active", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.CheckConstraint("tax_cents >= 0", name="bills_tax_cents_check"),
        sa.CheckConstraint("tip_cents >= 0", name="bills_tip_cents_check"),
    )

    op.create_table(
        "participants",
        sa.Column("id", postgresql.UUID(), primary_key=True),
        sa.Column("bill_id", postgresql.UUID(), sa.ForeignKey("bills.id", ondelete="CASCADE"), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=False),
        sa.Column("linked_user_id", sa.Text(), sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "items",
        sa.Column("id", postgresql.UUID(), primary_key=True),
        sa.Column("bill_id", postgresql.UUID(), sa.ForeignKey("bills.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("unit_price_cents", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("unit_price_cents >= 0", name="items_unit_price_cents_check"),
        sa.CheckConstraint("quantity > 0", name="items_quantity_check"),
    )

    op.create_table(
        "item_allocations",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("item_id", postgresql.UUID(), sa.ForeignKey("items.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "participant_id",
            postgresql.UUID(),
            sa.ForeignKey("participants.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )

    op.create_index("idx_participants_bill", "participants", ["bill_id"])
    op.create_index("idx_items_bill", "items", ["bill_id"])
    op.create_index("idx_item_allocations_item", "item_allocations", ["item_id"])


def downgrade() -> None:
    op.drop_index("idx_item_allocations_item", table_name="item_allocations")
    op.drop_index("idx_items_bill", table_name="items")
    op.drop_index("idx_participants_bill", table_name="participants")

    op.drop_table("item_allocations")
    op.drop_table("items")
    op.drop_table("participants")
    op.drop_table("bills")
    op.drop_table("users")
