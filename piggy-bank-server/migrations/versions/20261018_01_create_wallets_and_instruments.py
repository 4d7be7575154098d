"""create wallets, instruments and value-change history

Revision ID: 3f9c2b7d1e04
Revises: 
Create Date: 2026-10-18 09:30:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9c2b7d1e04"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "wallets",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("owner_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("length(name) > 0 AND length(name) <= 100", name="ck_wallets_name_length"),
        sa.CheckConstraint(
            "description IS NULL OR length(description) <= 500",
            name="ck_wallets_description_length",
        ),
    )
    op.create_index("ix_wallets_owner_id", "wallets", ["owner_id"])
    op.create_index("ix_wallets_owner_deleted", "wallets", ["owner_id", "deleted_at"])
    op.create_index(
        "uq_wallets_owner_active_name",
        "wallets",
        ["owner_id", sa.text("lower(name)")],
        unique=True,
        sqlite_where=sa.text("deleted_at IS NULL"),
        postgresql_where=sa.text("deleted_at IS NULL"),
    )

    op.create_table(
        "instruments",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("wallet_id", sa.String(length=36), sa.ForeignKey("wallets.id"), nullable=False),
        sa.Column("owner_id", sa.String(length=36), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("short_description", sa.Text()),
        sa.Column("invested_money_grosze", sa.BigInteger(), nullable=False),
        sa.Column("current_value_grosze", sa.BigInteger(), nullable=False),
        sa.Column("goal_grosze", sa.BigInteger()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("type IN ('bonds', 'etf', 'stocks')", name="ck_instruments_type"),
        sa.CheckConstraint("length(name) > 0 AND length(name) <= 100", name="ck_instruments_name_length"),
        sa.CheckConstraint(
            "short_description IS NULL OR length(short_description) <= 500",
            name="ck_instruments_short_description_length",
        ),
        sa.CheckConstraint("invested_money_grosze >= 0", name="ck_instruments_invested_non_negative"),
        sa.CheckConstraint("current_value_grosze >= 0", name="ck_instruments_current_non_negative"),
        sa.CheckConstraint("goal_grosze IS NULL OR goal_grosze >= 0", name="ck_instruments_goal_non_negative"),
    )
    op.create_index("ix_instruments_wallet_id", "instruments", ["wallet_id"])
    op.create_index("ix_instruments_owner_id", "instruments", ["owner_id"])
    op.create_index("ix_instruments_wallet_deleted", "instruments", ["wallet_id", "deleted_at"])
    op.create_index(
        "uq_instruments_wallet_active_name",
        "instruments",
        ["wallet_id", sa.text("lower(name)")],
        unique=True,
        sqlite_where=sa.text("deleted_at IS NULL"),
        postgresql_where=sa.text("deleted_at IS NULL"),
    )

    op.create_table(
        "instrument_value_changes",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("instrument_id", sa.String(length=36), sa.ForeignKey("instruments.id"), nullable=False),
        sa.Column("before_value_grosze", sa.BigInteger(), nullable=False),
        sa.Column("after_value_grosze", sa.BigInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("before_value_grosze >= 0", name="ck_value_changes_before_non_negative"),
        sa.CheckConstraint("after_value_grosze >= 0", name="ck_value_changes_after_non_negative"),
    )
    op.create_index(
        "ix_value_changes_instrument_created",
        "instrument_value_changes",
        ["instrument_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_value_changes_instrument_created", table_name="instrument_value_changes")
    op.drop_table("instrument_value_changes")

    op.drop_index("uq_instruments_wallet_active_name", table_name="instruments")
    op.drop_index("ix_instruments_wallet_deleted", table_name="instruments")
    op.drop_index("ix_instruments_owner_id", table_name="instruments")
    op.drop_index("ix_instruments_wallet_id", table_name="instruments")
    op.drop_table("instruments")

    op.drop_index("uq_wallets_owner_active_name", table_name="wallets")
    op.drop_index("ix_wallets_owner_deleted", table_name="wallets")
    op.drop_index("ix_wallets_owner_id", table_name="wallets")
    op.drop_table("wallets")
