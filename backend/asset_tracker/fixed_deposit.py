"""Fixed deposit valuation helpers.

Accrual uses simple interest on an Actual/365 day count. Maturity projection
assumes annual compounding regardless of the deposit's real schedule; that is
a known approximation and is kept as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, List, Optional

from .models import Asset

DAYS_PER_YEAR = 365


class ValuationMethod(str, Enum):
    MANUAL = "manual"
    MATURITY = "maturity"
    ACCRUED = "accrued"
    PRINCIPAL = "principal"


class MaturityState(str, Enum):
    ACTIVE = "active"
    MATURED = "matured"
    UNKNOWN = "unknown"


class Urgency(str, Enum):
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    LATER = "later"


@dataclass(frozen=True)
class FDValuation:
    value: float
    method: ValuationMethod


@dataclass(frozen=True)
class MaturityStatus:
    status: MaturityState
    label: str
    days_remaining: Optional[int] = None


@dataclass(frozen=True)
class UpcomingMaturity:
    asset_id: str
    asset_name: str
    maturity_date: date
    days_to_maturity: int
    amount: float
    currency: str
    urgency: Urgency


def accrued_interest(
    principal: float | None,
    annual_rate_pct: float | None,
    purchase_date: date | None,
    as_of: date,
) -> float:
    """Return simple interest earned between ``purchase_date`` and ``as_of``."""

    if not principal or not annual_rate_pct or purchase_date is None:
        return 0.0
    days_elapsed = max(0, (as_of - purchase_date).days)
    return principal * (annual_rate_pct / 100) * (days_elapsed / DAYS_PER_YEAR)


def current_value(
    principal: float,
    annual_rate_pct: float | None,
    purchase_date: date | None,
    as_of: date,
) -> float:
    return principal + accrued_interest(principal, annual_rate_pct, purchase_date, as_of)


def maturity_amount(
    principal: float | None,
    annual_rate_pct: float | None,
    purchase_date: date | None,
    maturity_date: date | None,
) -> float | None:
    """Project the payout at maturity with annual compounding."""

    if not principal or not annual_rate_pct or purchase_date is None or maturity_date is None:
        return None
    years_to_maturity = (maturity_date - purchase_date).days / DAYS_PER_YEAR
    return principal * (1 + annual_rate_pct / 100) ** years_to_maturity


def effective_current_value(asset: Asset, as_of: date) -> FDValuation:
    """Resolve the value shown for a deposit and how it was obtained.

    Order: manual override, recorded maturity amount once matured, accrued
    value, then principal (or total cost).
    """

    if asset.is_current_value_manual and asset.current_value:
        return FDValuation(asset.current_value, ValuationMethod.MANUAL)

    if asset.maturity_date is not None and as_of >= asset.maturity_date and asset.maturity_amount:
        return FDValuation(asset.maturity_amount, ValuationMethod.MATURITY)

    if asset.principal and asset.interest_rate:
        value = current_value(asset.principal, asset.interest_rate, asset.purchase_date, as_of)
        return FDValuation(value, ValuationMethod.ACCRUED)

    return FDValuation(asset.principal or asset.total_cost, ValuationMethod.PRINCIPAL)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def maturity_status(maturity_date: date | None, now: date) -> MaturityStatus:
    if maturity_date is None:
        return MaturityStatus(MaturityState.UNKNOWN, "No maturity date")

    days_remaining = (maturity_date - now).days
    if days_remaining < 0:
        return MaturityStatus(MaturityState.MATURED, "Matured", 0)
    if days_remaining == 0:
        return MaturityStatus(MaturityState.MATURED, "Matures today", 0)
    if days_remaining <= 30:
        return MaturityStatus(MaturityState.ACTIVE, f"{_plural(days_remaining, 'day')} left", days_remaining)
    if days_remaining <= 365:
        months = days_remaining // 30
        return MaturityStatus(MaturityState.ACTIVE, f"{_plural(months, 'month')} left", days_remaining)

    years = days_remaining // 365
    remaining_months = (days_remaining % 365) // 30
    return MaturityStatus(MaturityState.ACTIVE, f"{years}y {remaining_months}m left", days_remaining)


def _urgency(days: int) -> Urgency:
    if days <= 7:
        return Urgency.THIS_WEEK
    if days <= 30:
        return Urgency.THIS_MONTH
    return Urgency.LATER


def upcoming_maturities(
    assets: Iterable[Asset],
    as_of: date,
    *,
    window_days: int = 90,
    limit: int | None = 5,
) -> List[UpcomingMaturity]:
    """Return deposits maturing within ``window_days``, soonest first."""

    rows: list[UpcomingMaturity] = []
    for asset in assets:
        if not asset.is_fixed_deposit or asset.maturity_date is None:
            continue
        days = (asset.maturity_date - as_of).days
        if days < 0 or days > window_days:
            continue
        amount = asset.maturity_amount or asset.current_value or asset.total_cost or 0.0
        rows.append(
            UpcomingMaturity(
                asset_id=asset.id,
                asset_name=asset.asset_name,
                maturity_date=asset.maturity_date,
                days_to_maturity=days,
                amount=amount,
                currency=asset.currency,
                urgency=_urgency(days),
            )
        )
    rows.sort(key=lambda row: row.days_to_maturity)
    return rows[:limit] if limit is not None else rows


__all__ = [
    "DAYS_PER_YEAR",
    "FDValuation",
    "MaturityState",
    "MaturityStatus",
    "UpcomingMaturity",
    "Urgency",
    "ValuationMethod",
    "accrued_interest",
    "current_value",
    "effective_current_value",
    "maturity_amount",
    "maturity_status",
    "upcoming_maturities",
]
