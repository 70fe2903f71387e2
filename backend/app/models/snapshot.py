"""Daily portfolio snapshot model."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Index, Numeric, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class PortfolioSnapshot(Base):
    __tablename__ = "portfolio_snapshot"
    __table_args__ = (
        UniqueConstraint("user_id", "snapshot_date", name="uq_portfolio_snapshot_user_date"),
        Index("ix_portfolio_snapshot_user_date", "user_id", "snapshot_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64))
    snapshot_date: Mapped[date] = mapped_column(Date)
    total_value: Mapped[float] = mapped_column(Numeric(18, 2, asdecimal=False))
    total_invested: Mapped[float] = mapped_column(Numeric(18, 2, asdecimal=False))
    total_liabilities: Mapped[float] = mapped_column(Numeric(18, 2, asdecimal=False), default=0)
    net_worth: Mapped[float] = mapped_column(Numeric(18, 2, asdecimal=False))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


__all__ = ["PortfolioSnapshot"]
