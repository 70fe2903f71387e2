"""Initial schema for the asset tracker."""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


asset_class = sa.Enum(
    "precious_metals",
    "real_estate",
    "fixed_deposit",
    "sip",
    "mutual_fund",
    "shares",
    name="asset_class",
)
transaction_type = sa.Enum("BUY", "SELL", "INSTALLMENT", "DIVIDEND", name="asset_transaction_type")


def _amount() -> sa.Numeric:
    return sa.Numeric(18, 6)


def upgrade() -> None:
    op.create_table(
        "asset",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("asset_class", asset_class, nullable=False),
        sa.Column("category_code", sa.String(length=64), nullable=True),
        sa.Column("asset_name", sa.String(length=255), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="AED"),
        sa.Column("purchase_date", sa.Date(), nullable=False),
        sa.Column("quantity", _amount(), nullable=True),
        sa.Column("quantity_unit", sa.String(length=16), nullable=True),
        sa.Column("purchase_price_per_unit", _amount(), nullable=True),
        sa.Column("total_cost", _amount(), nullable=False, server_default="0"),
        sa.Column("current_value", _amount(), nullable=True),
        sa.Column("is_current_value_manual", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("opening_quantity", _amount(), nullable=True),
        sa.Column("opening_cost", _amount(), nullable=True),
        sa.Column("metal_type", sa.String(length=16), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("area_sqft", _amount(), nullable=True),
        sa.Column("rental_income_monthly", _amount(), nullable=True),
        sa.Column("bank_name", sa.String(length=255), nullable=True),
        sa.Column("principal", _amount(), nullable=True),
        sa.Column("interest_rate", _amount(), nullable=True),
        sa.Column("maturity_date", sa.Date(), nullable=True),
        sa.Column("maturity_amount", _amount(), nullable=True),
        sa.Column("instrument_name", sa.String(length=255), nullable=True),
        sa.Column("scheme_code", sa.String(length=32), nullable=True),
        sa.Column("nav_or_price", _amount(), nullable=True),
        sa.Column("sip_frequency", sa.String(length=16), nullable=True),
        sa.Column("sip_amount", _amount(), nullable=True),
        sa.Column("sip_day_of_month", sa.Integer(), nullable=True),
        sa.Column("sip_status", sa.String(length=16), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_asset_user_id", "asset", ["user_id"])
    op.create_index("ix_asset_user_class", "asset", ["user_id", "asset_class"])

    op.create_table(
        "asset_transaction",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("asset_id", sa.Integer(), sa.ForeignKey("asset.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("transaction_type", transaction_type, nullable=False),
        sa.Column("trade_date", sa.Date(), nullable=False),
        sa.Column("quantity", _amount(), nullable=False, server_default="0"),
        sa.Column("quantity_unit", sa.String(length=16), nullable=False, server_default="UNITS"),
        sa.Column("price", _amount(), nullable=False, server_default="0"),
        sa.Column("price_unit", sa.String(length=16), nullable=False, server_default="PER_UNIT"),
        sa.Column("fees", _amount(), nullable=False, server_default="0"),
        sa.Column("amount", _amount(), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("holding_after", _amount(), nullable=False, server_default="0"),
        sa.Column("average_cost_after", _amount(), nullable=False, server_default="0"),
        sa.Column("realized_pl", _amount(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_asset_transaction_user_id", "asset_transaction", ["user_id"])
    op.create_index("ix_asset_transaction_asset_date", "asset_transaction", ["asset_id", "trade_date"])

    op.create_table(
        "user_settings",
        sa.Column("user_id", sa.String(length=64), primary_key=True),
        sa.Column("display_currency", sa.String(length=3), nullable=False, server_default="AED"),
        sa.Column("usd_to_aed_rate", sa.Numeric(18, 8), nullable=True),
        sa.Column("inr_to_aed_rate", sa.Numeric(18, 8), nullable=True),
        sa.Column("rebalance_threshold_pct", sa.Numeric(6, 2), nullable=False, server_default="5"),
    )

    op.create_table(
        "liability",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("outstanding", _amount(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="AED"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_liability_user_id", "liability", ["user_id"])

    op.create_table(
        "goal",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("key", sa.String(length=64), nullable=False),
        sa.Column("label", sa.String(length=255), nullable=False),
        sa.Column("target_amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("years", sa.Integer(), nullable=False),
        sa.UniqueConstraint("user_id", "key", name="uq_goal_user_key"),
    )
    op.create_index("ix_goal_user_id", "goal", ["user_id"])

    op.create_table(
        "portfolio_snapshot",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("snapshot_date", sa.Date(), nullable=False),
        sa.Column("total_value", sa.Numeric(18, 2), nullable=False),
        sa.Column("total_invested", sa.Numeric(18, 2), nullable=False),
        sa.Column("total_liabilities", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("net_worth", sa.Numeric(18, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "snapshot_date", name="uq_portfolio_snapshot_user_date"),
    )
    op.create_index("ix_portfolio_snapshot_user_date", "portfolio_snapshot", ["user_id", "snapshot_date"])


def downgrade() -> None:
    op.drop_index("ix_portfolio_snapshot_user_date", table_name="portfolio_snapshot")
    op.drop_table("portfolio_snapshot")

    op.drop_index("ix_goal_user_id", table_name="goal")
    op.drop_table("goal")

    op.drop_index("ix_liability_user_id", table_name="liability")
    op.drop_table("liability")

    op.drop_table("user_settings")

    op.drop_index("ix_asset_transaction_asset_date", table_name="asset_transaction")
    op.drop_index("ix_asset_transaction_user_id", table_name="asset_transaction")
    op.drop_table("asset_transaction")

    op.drop_index("ix_asset_user_class", table_name="asset")
    op.drop_index("ix_asset_user_id", table_name="asset")
    op.drop_table("asset")

    transaction_type.drop(op.get_bind(), checkfirst=False)
    asset_class.drop(op.get_bind(), checkfirst=False)
