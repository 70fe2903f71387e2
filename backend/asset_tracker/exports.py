"""CSV exports.

Quoting follows RFC 4180: a field containing a comma, quote or line break is
wrapped in double quotes and embedded quotes are doubled.
"""
from __future__ import annotations

import csv
import io
from datetime import date, datetime
from typing import Any, Iterable, Sequence

from .aggregation import PortfolioOverview, resolve_current_value
from .metals import MetalTransaction
from .models import Asset
from .reports import RankedAsset

TRANSACTION_HEADERS = ["Date", "Metal", "Side", "Quantity", "Unit", "Price", "Price Unit", "Fees", "Notes"]
ASSET_HEADERS = ["Name", "Type", "Currency", "Purchase Date", "Total Cost", "Current Value", "P/L", "Notes"]
LEADERBOARD_HEADERS = ["Rank", "Asset", "Invested", "Current Value", "Gain", "Return %", "CAGR %", "Purchase Date"]


def _write(rows: Iterable[Sequence[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    for row in rows:
        writer.writerow(["" if value is None else value for value in row])
    return buffer.getvalue()


def _money(value: float) -> str:
    return f"{value:.2f}"


def transactions_csv(transactions: Iterable[MetalTransaction]) -> str:
    rows: list[Sequence[Any]] = [TRANSACTION_HEADERS]
    for tx in transactions:
        rows.append(
            [
                tx.trade_date.isoformat(),
                tx.instrument_symbol,
                tx.side,
                tx.quantity,
                tx.quantity_unit,
                tx.price,
                tx.price_unit,
                tx.fees,
                tx.notes or "",
            ]
        )
    return _write(rows)


def assets_csv(assets: Iterable[Asset], as_of: date | None = None) -> str:
    as_of_date = as_of or date.today()
    rows: list[Sequence[Any]] = [ASSET_HEADERS]
    for asset in assets:
        current = resolve_current_value(asset, as_of_date)
        rows.append(
            [
                asset.asset_name,
                asset.asset_class.label,
                asset.currency,
                asset.purchase_date.isoformat(),
                _money(asset.total_cost),
                _money(current),
                _money(current - asset.total_cost),
                asset.notes or "",
            ]
        )
    return _write(rows)


def portfolio_summary_csv(overview: PortfolioOverview, generated_at: datetime | None = None) -> str:
    generated = generated_at or datetime.now()
    rows: list[Sequence[Any]] = [
        ["Portfolio Summary Report"],
        [f"Generated: {generated:%Y-%m-%d %H:%M}"],
        [],
        ["Metric", "Value (AED)"],
        ["Total Invested", _money(overview.total_invested)],
        ["Current Value", _money(overview.total_current_value)],
        ["Total P/L", _money(overview.total_profit_loss)],
        ["Total P/L %", f"{overview.total_profit_loss_pct:.2f}%"],
        [],
        ["Category Breakdown"],
        ["Category", "Invested", "Current Value", "P/L", "Count"],
    ]
    for category in overview.categories:
        rows.append(
            [
                category.label,
                _money(category.total_invested),
                _money(category.current_value),
                _money(category.profit_loss),
                category.count,
            ]
        )
    return _write(rows)


def leaderboard_csv(ranked: Iterable[RankedAsset]) -> str:
    rows: list[Sequence[Any]] = [LEADERBOARD_HEADERS]
    for row in ranked:
        rows.append(
            [
                row.rank,
                row.name,
                _money(row.invested),
                _money(row.current_value),
                _money(row.absolute_gain),
                f"{row.return_pct:.2f}",
                f"{row.cagr_pct:.2f}" if row.cagr_pct is not None else "N/A",
                row.purchase_date.isoformat(),
            ]
        )
    return _write(rows)


__all__ = ["assets_csv", "leaderboard_csv", "portfolio_summary_csv", "transactions_csv"]
