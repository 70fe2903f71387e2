"""Daily net-worth roll-up persisted for trend charts."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from .aggregation import resolve_current_value
from .fx import CurrencyConfig, to_aed
from .models import Asset, Liability, MutualFundHolding


@dataclass(frozen=True)
class SnapshotTotals:
    snapshot_date: date
    total_value: float
    total_invested: float
    total_liabilities: float

    @property
    def net_worth(self) -> float:
        return self.total_value - self.total_liabilities


def compute_snapshot(
    assets: Iterable[Asset],
    liabilities: Iterable[Liability],
    mf_holdings: Iterable[MutualFundHolding],
    config: CurrencyConfig,
    snapshot_date: date,
) -> SnapshotTotals:
    """Total value, invested capital and active liabilities in AED.

    Mutual-fund holdings are INR denominated.
    """

    invested = 0.0
    value = 0.0
    for asset in assets:
        invested += to_aed(asset.total_cost or 0.0, asset.currency, config)
        value += to_aed(resolve_current_value(asset, snapshot_date), asset.currency, config)

    for holding in mf_holdings:
        if not holding.is_active:
            continue
        invested += holding.invested_amount * config.inr_to_aed
        current = holding.current_value if holding.current_value else holding.invested_amount
        value += current * config.inr_to_aed

    owed = sum(
        to_aed(liability.outstanding or 0.0, liability.currency, config)
        for liability in liabilities
        if liability.is_active
    )
    return SnapshotTotals(
        snapshot_date=snapshot_date,
        total_value=value,
        total_invested=invested,
        total_liabilities=owed,
    )


__all__ = ["SnapshotTotals", "compute_snapshot"]
