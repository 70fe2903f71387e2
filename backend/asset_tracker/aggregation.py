"""Portfolio aggregation: category and currency roll-ups, allocation and exposure."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from .fixed_deposit import effective_current_value
from .fx import CurrencyConfig, to_aed
from .metals import (
    METAL_NAMES,
    MetalTransaction,
    MetalsSummary,
    instrument_summary,
    metals_summary,
    process_transaction_history,
)
from .models import ASSET_CLASS_LABELS, Asset, AssetClass, MutualFundHolding
from .quotes import MetalPrices

CONCENTRATION_THRESHOLD_PCT = 40.0


class RiskBucket(str, Enum):
    EQUITY = "Equity"
    FIXED_INCOME = "Fixed Income"
    GOLD = "Gold"
    REAL_ESTATE = "Real Estate"
    OTHER = "Other"


class LiquidityBucket(str, Enum):
    LIQUID = "Liquid"
    SEMI_LIQUID = "Semi-Liquid"
    ILLIQUID = "Illiquid"


RISK_BUCKETS: Mapping[str, RiskBucket] = {
    "shares": RiskBucket.EQUITY,
    "mutual_fund": RiskBucket.EQUITY,
    "sip": RiskBucket.EQUITY,
    "equity_market": RiskBucket.EQUITY,
    "fixed_deposit": RiskBucket.FIXED_INCOME,
    "banking_fi": RiskBucket.FIXED_INCOME,
    "precious_metals": RiskBucket.GOLD,
    "real_estate": RiskBucket.REAL_ESTATE,
    "real_assets": RiskBucket.REAL_ESTATE,
}

LIQUIDITY_BUCKETS: Mapping[str, LiquidityBucket] = {
    "precious_metals": LiquidityBucket.LIQUID,
    "shares": LiquidityBucket.LIQUID,
    "mutual_fund": LiquidityBucket.LIQUID,
    "fixed_deposit": LiquidityBucket.SEMI_LIQUID,
    "sip": LiquidityBucket.SEMI_LIQUID,
}


def classify_risk(code: str | None) -> RiskBucket:
    """Map a category code to its risk bucket; unknown codes are ``OTHER``."""

    if code is None:
        return RiskBucket.OTHER
    return RISK_BUCKETS.get(code, RiskBucket.OTHER)


def classify_liquidity(code: str | None) -> LiquidityBucket:
    if code is None:
        return LiquidityBucket.ILLIQUID
    return LIQUIDITY_BUCKETS.get(code, LiquidityBucket.ILLIQUID)


def category_label(code: str, labels: Mapping[str, str] | None = None) -> str:
    if labels and code in labels:
        return labels[code]
    try:
        return ASSET_CLASS_LABELS[AssetClass(code)]
    except ValueError:
        return code.replace("_", " ").title()


def resolve_current_value(asset: Asset, as_of: date) -> float:
    """Current value of one asset in its own currency, never ``None``."""

    if asset.is_fixed_deposit:
        return effective_current_value(asset, as_of).value
    if asset.current_value is not None:
        return asset.current_value
    return asset.total_cost


def allocation_pct(value: float, total: float) -> float:
    if total == 0:
        return 0.0
    return value / total * 100


@dataclass
class CategoryTotal:
    code: str
    label: str
    total_invested: float = 0.0
    current_value: float = 0.0
    count: int = 0
    allocation_pct: float = 0.0
    concentrated: bool = False

    @property
    def profit_loss(self) -> float:
        return self.current_value - self.total_invested


@dataclass
class CurrencyTotal:
    currency: str
    total_invested: float = 0.0
    current_value: float = 0.0
    current_value_aed: float = 0.0
    allocation_pct: float = 0.0
    concentrated: bool = False


@dataclass(frozen=True)
class MutualFundSummary:
    total_invested_inr: float
    current_value_inr: float
    total_invested_aed: float
    current_value_aed: float
    unrealized_gain_inr: float
    return_pct: float
    holdings_count: int


@dataclass(frozen=True)
class SipSummary:
    invested_inr: float
    invested_aed: float
    current_value_inr: float
    current_value_aed: float
    monthly_commitment_inr: float
    monthly_commitment_aed: float
    active_count: int
    total_count: int


@dataclass
class PortfolioOverview:
    total_invested: float
    total_current_value: float
    categories: List[CategoryTotal] = field(default_factory=list)
    currencies: List[CurrencyTotal] = field(default_factory=list)
    mf_summary: Optional[MutualFundSummary] = None
    sip_summary: Optional[SipSummary] = None

    @property
    def total_profit_loss(self) -> float:
        return self.total_current_value - self.total_invested

    @property
    def total_profit_loss_pct(self) -> float:
        if self.total_invested <= 0:
            return 0.0
        return self.total_profit_loss / self.total_invested * 100

    @property
    def concentration_warnings(self) -> List[str]:
        return [item.label for item in self.categories if item.concentrated]

    def category(self, code: str) -> CategoryTotal | None:
        return next((item for item in self.categories if item.code == code), None)


def build_overview(
    assets: Iterable[Asset],
    config: CurrencyConfig,
    as_of: date,
    *,
    labels: Mapping[str, str] | None = None,
    mf_summary: MutualFundSummary | None = None,
    sip_summary: SipSummary | None = None,
) -> PortfolioOverview:
    """Fold assets into category and currency totals.

    Category and portfolio totals are in AED. Currency buckets keep native
    amounts; their allocation share is measured on the AED value.
    """

    categories: Dict[str, CategoryTotal] = {}
    currencies: Dict[str, CurrencyTotal] = {}
    total_invested = 0.0
    total_value = 0.0

    for asset in assets:
        invested = asset.total_cost or 0.0
        value = resolve_current_value(asset, as_of)
        invested_aed = to_aed(invested, asset.currency, config)
        value_aed = to_aed(value, asset.currency, config)
        total_invested += invested_aed
        total_value += value_aed

        code = asset.group_code
        bucket = categories.get(code)
        if bucket is None:
            bucket = categories[code] = CategoryTotal(code=code, label=category_label(code, labels))
        bucket.total_invested += invested_aed
        bucket.current_value += value_aed
        bucket.count += 1

        ccy = asset.currency.upper()
        ccy_bucket = currencies.setdefault(ccy, CurrencyTotal(currency=ccy))
        ccy_bucket.total_invested += invested
        ccy_bucket.current_value += value
        ccy_bucket.current_value_aed += value_aed

    for bucket in categories.values():
        bucket.allocation_pct = allocation_pct(bucket.current_value, total_value)
        bucket.concentrated = bucket.allocation_pct > CONCENTRATION_THRESHOLD_PCT
    currency_total = sum(item.current_value_aed for item in currencies.values())
    for ccy_bucket in currencies.values():
        ccy_bucket.allocation_pct = allocation_pct(ccy_bucket.current_value_aed, currency_total)
        ccy_bucket.concentrated = ccy_bucket.allocation_pct > CONCENTRATION_THRESHOLD_PCT

    return PortfolioOverview(
        total_invested=total_invested,
        total_current_value=total_value,
        categories=sorted(categories.values(), key=lambda item: item.current_value, reverse=True),
        currencies=list(currencies.values()),
        mf_summary=mf_summary,
        sip_summary=sip_summary,
    )


@dataclass(frozen=True)
class ExposureRow:
    name: str
    value: float
    pct: float


def _exposure(totals: Mapping[str, float]) -> List[ExposureRow]:
    positive = {name: value for name, value in totals.items() if value > 0}
    grand_total = sum(positive.values())
    return [ExposureRow(name, value, allocation_pct(value, grand_total)) for name, value in positive.items()]


def risk_exposure(assets: Iterable[Asset], config: CurrencyConfig, as_of: date) -> List[ExposureRow]:
    totals = {bucket.value: 0.0 for bucket in RiskBucket}
    for asset in assets:
        value = to_aed(resolve_current_value(asset, as_of), asset.currency, config)
        totals[classify_risk(asset.group_code).value] += value
    return _exposure(totals)


def liquidity_breakdown(assets: Iterable[Asset], config: CurrencyConfig, as_of: date) -> List[ExposureRow]:
    totals = {bucket.value: 0.0 for bucket in LiquidityBucket}
    for asset in assets:
        value = to_aed(resolve_current_value(asset, as_of), asset.currency, config)
        totals[classify_liquidity(asset.group_code).value] += value
    return _exposure(totals)


def performance_status(return_pct: float) -> str:
    if return_pct >= 12:
        return "Strong"
    if return_pct >= 6:
        return "Moderate"
    return "Needs Review"


def category_totals(assets: Iterable[Asset], config: CurrencyConfig) -> Dict[str, tuple[float, int]]:
    """AED value and count per category, as used to order navigation."""

    totals: Dict[str, tuple[float, int]] = {}
    for asset in assets:
        code = asset.category_code or "other"
        value = asset.current_value or asset.total_cost or 0.0
        running_value, running_count = totals.get(code, (0.0, 0))
        totals[code] = (running_value + to_aed(value, asset.currency, config), running_count + 1)
    return totals


def summarize_mutual_funds(holdings: Iterable[MutualFundHolding], config: CurrencyConfig) -> MutualFundSummary:
    active = [holding for holding in holdings if holding.is_active]
    invested = sum(holding.invested_amount for holding in active)
    value = sum(
        holding.current_value if holding.current_value is not None else holding.invested_amount
        for holding in active
    )
    gain = value - invested
    return MutualFundSummary(
        total_invested_inr=invested,
        current_value_inr=value,
        total_invested_aed=invested * config.inr_to_aed,
        current_value_aed=value * config.inr_to_aed,
        unrealized_gain_inr=gain,
        return_pct=gain / invested * 100 if invested > 0 else 0.0,
        holdings_count=len(active),
    )


def summarize_sips(sips: Sequence[Asset], config: CurrencyConfig) -> SipSummary:
    active = [sip for sip in sips if (sip.sip_status or "").upper() == "ACTIVE"]
    invested = sum(sip.total_cost for sip in sips)
    value = sum(sip.current_value if sip.current_value is not None else sip.total_cost for sip in sips)
    monthly = sum(sip.sip_amount or 0.0 for sip in active)
    return SipSummary(
        invested_inr=invested,
        invested_aed=invested * config.inr_to_aed,
        current_value_inr=value,
        current_value_aed=value * config.inr_to_aed,
        monthly_commitment_inr=monthly,
        monthly_commitment_aed=monthly * config.inr_to_aed,
        active_count=len(active),
        total_count=len(sips),
    )


@dataclass(frozen=True)
class PortfolioSummary:
    total_buys_aed: float
    total_sells_aed: float
    net_cash_invested_aed: float
    current_value_aed: float
    total_realized_pl_aed: float
    total_unrealized_pl_aed: float
    total_pl_aed: float
    total_return_pct: Optional[float]
    metals: MetalsSummary


def build_portfolio_summary(
    assets: Sequence[Asset],
    metal_transactions: Iterable[MetalTransaction],
    prices: MetalPrices,
    config: CurrencyConfig,
    as_of: date,
) -> PortfolioSummary:
    """Merge the metals position engine with every other asset class."""

    by_symbol: Dict[str, list[MetalTransaction]] = {symbol: [] for symbol in METAL_NAMES}
    for tx in metal_transactions:
        by_symbol.setdefault(tx.instrument_symbol.upper(), []).append(tx)

    instruments = []
    for symbol, transactions in by_symbol.items():
        history = process_transaction_history(transactions)
        instruments.append(
            instrument_summary(
                symbol,
                METAL_NAMES.get(symbol, symbol),
                history.final_position,
                prices.price_aed_per_oz(symbol),
            )
        )
    metals = metals_summary(instruments)

    other_invested = 0.0
    other_value = 0.0
    for asset in assets:
        if asset.asset_class is AssetClass.PRECIOUS_METALS:
            continue
        other_invested += to_aed(asset.total_cost or 0.0, asset.currency, config)
        other_value += to_aed(resolve_current_value(asset, as_of), asset.currency, config)

    buys = metals.total_buys_aed + other_invested
    sells = metals.total_sells_aed
    net_cash = buys - sells
    value = (metals.current_value_aed or 0.0) + other_value
    unrealized = value - net_cash
    realized = metals.total_realized_pl_aed
    total_pl = realized + unrealized
    return PortfolioSummary(
        total_buys_aed=buys,
        total_sells_aed=sells,
        net_cash_invested_aed=net_cash,
        current_value_aed=value,
        total_realized_pl_aed=realized,
        total_unrealized_pl_aed=unrealized,
        total_pl_aed=total_pl,
        total_return_pct=total_pl / net_cash * 100 if net_cash > 0 else None,
        metals=metals,
    )


__all__ = [
    "CONCENTRATION_THRESHOLD_PCT",
    "CategoryTotal",
    "CurrencyTotal",
    "ExposureRow",
    "LiquidityBucket",
    "MutualFundSummary",
    "PortfolioOverview",
    "PortfolioSummary",
    "RiskBucket",
    "SipSummary",
    "allocation_pct",
    "build_overview",
    "build_portfolio_summary",
    "category_label",
    "category_totals",
    "classify_liquidity",
    "classify_risk",
    "liquidity_breakdown",
    "performance_status",
    "resolve_current_value",
    "risk_exposure",
    "summarize_mutual_funds",
    "summarize_sips",
]
