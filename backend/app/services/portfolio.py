"""Portfolio views assembled from a user's stored assets."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.models import Asset, Goal, Liability, UserSettings
from app.services.assets import list_assets, list_user_transactions, opening_entry, to_core_asset
from asset_tracker import models as core
from asset_tracker.aggregation import (
    PortfolioOverview,
    PortfolioSummary,
    build_overview,
    build_portfolio_summary,
    summarize_mutual_funds,
    summarize_sips,
)
from asset_tracker.fx import CurrencyConfig
from asset_tracker.metals import MetalTransaction
from asset_tracker.projections import DEFAULT_GOALS
from asset_tracker.projections import Goal as GoalTarget
from asset_tracker.quotes import ForexQuote, MetalPrices, currency_config_from_quote
from asset_tracker.rebalancing import DEFAULT_THRESHOLD_PCT

logger = logging.getLogger(__name__)


@dataclass
class PortfolioContext:
    """Everything the valuation library needs for one user."""

    user_id: str
    rows: list[Asset]
    assets: list[core.Asset]
    config: CurrencyConfig
    threshold_pct: float = DEFAULT_THRESHOLD_PCT
    liabilities: list[core.Liability] = field(default_factory=list)

    def of_class(self, asset_class: core.AssetClass) -> list[core.Asset]:
        return [asset for asset in self.assets if asset.asset_class is asset_class]


async def get_user_settings(session: AsyncSession, user_id: str) -> UserSettings | None:
    return await session.get(UserSettings, user_id)


def currency_config(user_settings: UserSettings | None, forex: ForexQuote | None = None) -> CurrencyConfig:
    """User overrides win, then live rates, then the configured defaults."""

    settings = get_settings()
    usd_override = user_settings.usd_to_aed_rate if user_settings else None
    inr_override = user_settings.inr_to_aed_rate if user_settings else None
    if forex is None:
        usd_override = usd_override or settings.default_usd_to_aed
        inr_override = inr_override or settings.default_inr_to_aed
    return currency_config_from_quote(
        forex,
        display_currency=(user_settings.display_currency if user_settings else None) or settings.base_currency,
        usd_to_aed_override=usd_override,
        inr_to_aed_override=inr_override,
    )


async def load_liabilities(session: AsyncSession, user_id: str) -> list[core.Liability]:
    result = await session.execute(select(Liability).where(Liability.user_id == user_id))
    return [
        core.Liability(
            name=row.name,
            outstanding=float(row.outstanding or 0.0),
            currency=row.currency,
            is_active=bool(row.is_active),
        )
        for row in result.scalars().all()
    ]


async def load_context(
    session: AsyncSession,
    user_id: str,
    *,
    forex: ForexQuote | None = None,
) -> PortfolioContext:
    rows = await list_assets(session, user_id)
    user_settings = await get_user_settings(session, user_id)
    threshold = DEFAULT_THRESHOLD_PCT
    if user_settings and user_settings.rebalance_threshold_pct:
        threshold = float(user_settings.rebalance_threshold_pct)
    return PortfolioContext(
        user_id=user_id,
        rows=rows,
        assets=[to_core_asset(row) for row in rows],
        config=currency_config(user_settings, forex),
        threshold_pct=threshold,
        liabilities=await load_liabilities(session, user_id),
    )


def mutual_fund_holdings(assets: Iterable[core.Asset]) -> list[core.MutualFundHolding]:
    return [
        core.MutualFundHolding(
            scheme_name=asset.instrument_name or asset.asset_name,
            invested_amount=asset.total_cost,
            current_value=asset.current_value,
        )
        for asset in assets
        if asset.asset_class is core.AssetClass.MUTUAL_FUND
    ]


def overview_for(context: PortfolioContext, as_of: date) -> PortfolioOverview:
    funds = mutual_fund_holdings(context.assets)
    sips = context.of_class(core.AssetClass.SIP)
    return build_overview(
        context.assets,
        context.config,
        as_of,
        mf_summary=summarize_mutual_funds(funds, context.config) if funds else None,
        sip_summary=summarize_sips(sips, context.config) if sips else None,
    )


async def metal_ledger(session: AsyncSession, context: PortfolioContext) -> list[MetalTransaction]:
    """Transactions of precious-metal assets keyed by the metal symbol (XAU/XAG)."""

    symbols = {
        row.id: (row.metal_type or "XAU").upper()
        for row in context.rows
        if row.asset_class == core.AssetClass.PRECIOUS_METALS.value
    }
    if not symbols:
        return []
    ledger: list[MetalTransaction] = []
    for row in context.rows:
        opening = opening_entry(row, symbols[row.id]) if row.id in symbols else None
        if opening is not None:
            ledger.append(opening)
    for row in await list_user_transactions(session, context.user_id):
        symbol = symbols.get(row.asset_id)
        if symbol is None:
            continue
        ledger.append(
            MetalTransaction(
                id=str(row.id),
                instrument_symbol=symbol,
                side=row.transaction_type,
                trade_date=row.trade_date,
                quantity=float(row.quantity),
                quantity_unit=row.quantity_unit,
                price=float(row.price),
                price_unit=row.price_unit,
                fees=float(row.fees or 0.0),
                notes=row.notes,
            )
        )
    return ledger


async def summary_for(
    session: AsyncSession,
    context: PortfolioContext,
    prices: MetalPrices,
    as_of: date,
) -> PortfolioSummary:
    ledger = await metal_ledger(session, context)
    return build_portfolio_summary(context.assets, ledger, prices, context.config, as_of)


async def load_goals(session: AsyncSession, user_id: str) -> Sequence[GoalTarget]:
    result = await session.execute(select(Goal).where(Goal.user_id == user_id).order_by(Goal.id))
    rows = result.scalars().all()
    if not rows:
        return DEFAULT_GOALS
    return [GoalTarget(row.key, row.label, float(row.target_amount), int(row.years)) for row in rows]


__all__ = [
    "PortfolioContext",
    "currency_config",
    "get_user_settings",
    "load_context",
    "load_goals",
    "load_liabilities",
    "metal_ledger",
    "mutual_fund_holdings",
    "overview_for",
    "summary_for",
]
