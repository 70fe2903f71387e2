"""Per-user settings, liabilities and savings goals."""

from __future__ import annotations

from sqlalchemy import Boolean, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class UserSettings(Base):
    __tablename__ = "user_settings"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    display_currency: Mapped[str] = mapped_column(String(3), default="AED")
    usd_to_aed_rate: Mapped[float | None] = mapped_column(Numeric(18, 8, asdecimal=False), nullable=True)
    inr_to_aed_rate: Mapped[float | None] = mapped_column(Numeric(18, 8, asdecimal=False), nullable=True)
    rebalance_threshold_pct: Mapped[float] = mapped_column(Numeric(6, 2, asdecimal=False), default=5)


class Liability(Base):
    __tablename__ = "liability"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    name: Mapped[str] = mapped_column(String(255))
    outstanding: Mapped[float] = mapped_column(Numeric(18, 6, asdecimal=False), default=0)
    currency: Mapped[str] = mapped_column(String(3), default="AED")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)


class Goal(Base):
    __tablename__ = "goal"
    __table_args__ = (UniqueConstraint("user_id", "key", name="uq_goal_user_key"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    key: Mapped[str] = mapped_column(String(64))
    label: Mapped[str] = mapped_column(String(255))
    target_amount: Mapped[float] = mapped_column(Numeric(18, 2, asdecimal=False))
    years: Mapped[int] = mapped_column(Integer)


__all__ = ["Goal", "Liability", "UserSettings"]
