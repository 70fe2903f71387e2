"""Report tables: contributions by year, growth timeline, SIP calendar and leaderboard."""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from .aggregation import resolve_current_value
from .fx import CurrencyConfig, to_aed
from .models import Asset
from .returns import holding_cagr


def _in_aed(amount: float, asset: Asset, config: CurrencyConfig | None) -> float:
    return to_aed(amount, asset.currency, config) if config is not None else amount


@dataclass(frozen=True)
class YearlyContribution:
    year: int
    amount: float


def yearly_contributions(assets: Iterable[Asset], config: CurrencyConfig | None = None) -> List[YearlyContribution]:
    """Total cost grouped by purchase year, most recent year first."""

    totals: dict[int, float] = {}
    for asset in assets:
        year = asset.purchase_date.year
        totals[year] = totals.get(year, 0.0) + _in_aed(asset.total_cost or 0.0, asset, config)
    return [YearlyContribution(year, amount) for year, amount in sorted(totals.items(), reverse=True)]


@dataclass(frozen=True)
class TimelinePoint:
    year: int
    invested: float
    current_value: Optional[float] = None


def growth_timeline(
    assets: Sequence[Asset],
    as_of: date,
    config: CurrencyConfig | None = None,
) -> List[TimelinePoint]:
    """Cumulative invested capital per purchase year.

    Market value is not tracked historically, so only the final (``as_of``)
    year carries a current value.
    """

    if not assets:
        return []
    frame = pd.DataFrame(
        [
            {
                "year": asset.purchase_date.year,
                "invested": _in_aed(asset.total_cost or 0.0, asset, config),
                "value": _in_aed(resolve_current_value(asset, as_of), asset, config),
            }
            for asset in assets
            if asset.purchase_date.year <= as_of.year
        ],
        columns=["year", "invested", "value"],
    )
    years = sorted(set(frame["year"].tolist()) | {as_of.year})
    cumulative = frame.groupby("year")[["invested", "value"]].sum().reindex(years, fill_value=0.0).cumsum()

    points: list[TimelinePoint] = []
    for year, row in cumulative.iterrows():
        current = float(row["value"]) if year == as_of.year else None
        points.append(TimelinePoint(year=int(year), invested=float(row["invested"]), current_value=current))
    return points


@dataclass(frozen=True)
class SipDue:
    asset_id: str
    asset_name: str
    amount: float
    due_date: date

    def days_until(self, as_of: date) -> int:
        return (self.due_date - as_of).days


def next_sip_due_date(day_of_month: int | None, as_of: date) -> date | None:
    """Next installment date; short months clamp the day to their last day."""

    if not day_of_month:
        return None
    day = min(day_of_month, calendar.monthrange(as_of.year, as_of.month)[1])
    due = as_of.replace(day=day)
    if due >= as_of:
        return due
    year, month = (as_of.year + 1, 1) if as_of.month == 12 else (as_of.year, as_of.month + 1)
    return date(year, month, min(day_of_month, calendar.monthrange(year, month)[1]))


def upcoming_sips(sips: Iterable[Asset], as_of: date, *, this_month_only: bool = True) -> List[SipDue]:
    rows: list[SipDue] = []
    for sip in sips:
        if (sip.sip_status or "").upper() != "ACTIVE":
            continue
        due = next_sip_due_date(sip.sip_day_of_month, as_of)
        if due is None:
            continue
        if this_month_only and (due.year, due.month) != (as_of.year, as_of.month):
            continue
        rows.append(SipDue(sip.id, sip.asset_name, sip.sip_amount or 0.0, due))
    rows.sort(key=lambda row: row.due_date)
    return rows


def monthly_sip_outflow(sips: Iterable[Asset]) -> float:
    return sum(sip.sip_amount or 0.0 for sip in sips if (sip.sip_status or "").upper() == "ACTIVE")


@dataclass(frozen=True)
class RankedAsset:
    id: str
    name: str
    invested: float
    current_value: float
    absolute_gain: float
    return_pct: float
    cagr_pct: Optional[float]
    purchase_date: date
    rank: int


def rank_assets(assets: Iterable[Asset], as_of: date) -> List[RankedAsset]:
    """Rank holdings by absolute return percentage, best first."""

    scored = []
    for asset in assets:
        invested = asset.total_cost or 0.0
        current = resolve_current_value(asset, as_of)
        gain = current - invested
        return_pct = gain / invested * 100 if invested > 0 else 0.0
        rate = holding_cagr(invested, current, asset.purchase_date, as_of)
        scored.append((asset, invested, current, gain, return_pct, rate * 100 if rate is not None else None))

    scored.sort(key=lambda item: item[4], reverse=True)
    return [
        RankedAsset(
            id=asset.id,
            name=asset.asset_name,
            invested=invested,
            current_value=current,
            absolute_gain=gain,
            return_pct=return_pct,
            cagr_pct=cagr_pct,
            purchase_date=asset.purchase_date,
            rank=position,
        )
        for position, (asset, invested, current, gain, return_pct, cagr_pct) in enumerate(scored, start=1)
    ]


def leaders(ranked: Sequence[RankedAsset], n: int = 5) -> List[RankedAsset]:
    return [row for row in ranked if row.return_pct > 0][:n]


def laggards(ranked: Sequence[RankedAsset], n: int = 5) -> List[RankedAsset]:
    """Losing positions, worst first."""

    losing = [row for row in ranked if row.return_pct < 0]
    return list(reversed(losing[-n:])) if n > 0 else []


__all__ = [
    "RankedAsset",
    "SipDue",
    "TimelinePoint",
    "YearlyContribution",
    "growth_timeline",
    "laggards",
    "leaders",
    "monthly_sip_outflow",
    "next_sip_due_date",
    "rank_assets",
    "upcoming_sips",
    "yearly_contributions",
]
