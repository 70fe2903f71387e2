"""Asset and asset transaction models."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

ASSET_CLASSES = ("precious_metals", "real_estate", "fixed_deposit", "sip", "mutual_fund", "shares")
TRANSACTION_TYPES = ("BUY", "SELL", "INSTALLMENT", "DIVIDEND")


def _amount() -> Numeric:
    return Numeric(18, 6, asdecimal=False)


class Asset(Base):
    __tablename__ = "asset"
    __table_args__ = (Index("ix_asset_user_class", "user_id", "asset_class"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    asset_class: Mapped[str] = mapped_column(Enum(*ASSET_CLASSES, name="asset_class"))
    category_code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    asset_name: Mapped[str] = mapped_column(String(255))
    currency: Mapped[str] = mapped_column(String(3), default="AED")
    purchase_date: Mapped[date] = mapped_column(Date)
    quantity: Mapped[float | None] = mapped_column(_amount(), nullable=True)
    quantity_unit: Mapped[str | None] = mapped_column(String(16), nullable=True)
    purchase_price_per_unit: Mapped[float | None] = mapped_column(_amount(), nullable=True)
    total_cost: Mapped[float] = mapped_column(_amount(), default=0)
    current_value: Mapped[float | None] = mapped_column(_amount(), nullable=True)
    is_current_value_manual: Mapped[bool] = mapped_column(Boolean, default=False)
    # position recorded at creation; the ledger replay starts from it
    opening_quantity: Mapped[float | None] = mapped_column(_amount(), nullable=True)
    opening_cost: Mapped[float | None] = mapped_column(_amount(), nullable=True)

    metal_type: Mapped[str | None] = mapped_column(String(16), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    area_sqft: Mapped[float | None] = mapped_column(_amount(), nullable=True)
    rental_income_monthly: Mapped[float | None] = mapped_column(_amount(), nullable=True)

    bank_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    principal: Mapped[float | None] = mapped_column(_amount(), nullable=True)
    interest_rate: Mapped[float | None] = mapped_column(_amount(), nullable=True)
    maturity_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    maturity_amount: Mapped[float | None] = mapped_column(_amount(), nullable=True)

    instrument_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    scheme_code: Mapped[str | None] = mapped_column(String(32), nullable=True)
    nav_or_price: Mapped[float | None] = mapped_column(_amount(), nullable=True)
    sip_frequency: Mapped[str | None] = mapped_column(String(16), nullable=True)
    sip_amount: Mapped[float | None] = mapped_column(_amount(), nullable=True)
    sip_day_of_month: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sip_status: Mapped[str | None] = mapped_column(String(16), nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    transactions: Mapped[list["AssetTransaction"]] = relationship(
        back_populates="asset",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class AssetTransaction(Base):
    """Ledger entry; the ``*_after`` columns are maintained by the asset service."""

    __tablename__ = "asset_transaction"
    __table_args__ = (Index("ix_asset_transaction_asset_date", "asset_id", "trade_date"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    asset_id: Mapped[int] = mapped_column(ForeignKey("asset.id", ondelete="CASCADE"))
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    transaction_type: Mapped[str] = mapped_column(Enum(*TRANSACTION_TYPES, name="asset_transaction_type"))
    trade_date: Mapped[date] = mapped_column(Date)
    quantity: Mapped[float] = mapped_column(_amount(), default=0)
    quantity_unit: Mapped[str] = mapped_column(String(16), default="UNITS")
    price: Mapped[float] = mapped_column(_amount(), default=0)
    price_unit: Mapped[str] = mapped_column(String(16), default="PER_UNIT")
    fees: Mapped[float] = mapped_column(_amount(), default=0)
    amount: Mapped[float] = mapped_column(_amount(), default=0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    holding_after: Mapped[float] = mapped_column(_amount(), default=0)
    average_cost_after: Mapped[float] = mapped_column(_amount(), default=0)
    realized_pl: Mapped[float] = mapped_column(_amount(), default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    asset: Mapped[Optional[Asset]] = relationship(back_populates="transactions")


__all__ = ["ASSET_CLASSES", "TRANSACTION_TYPES", "Asset", "AssetTransaction"]
