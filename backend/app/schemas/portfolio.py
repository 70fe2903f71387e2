"""Schemas for the derived portfolio views."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from asset_tracker.fixed_deposit import Urgency
from asset_tracker.rebalancing import RebalanceAction


class _FromCore(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CategoryTotalSchema(_FromCore):
    code: str
    label: str
    total_invested: float
    current_value: float
    profit_loss: float
    count: int
    allocation_pct: float
    concentrated: bool


class CurrencyTotalSchema(_FromCore):
    currency: str
    total_invested: float
    current_value: float
    current_value_aed: float
    allocation_pct: float
    concentrated: bool


class MutualFundSummarySchema(_FromCore):
    total_invested_inr: float
    current_value_inr: float
    total_invested_aed: float
    current_value_aed: float
    unrealized_gain_inr: float
    return_pct: float
    holdings_count: int


class SipSummarySchema(_FromCore):
    invested_inr: float
    invested_aed: float
    current_value_inr: float
    current_value_aed: float
    monthly_commitment_inr: float
    monthly_commitment_aed: float
    active_count: int
    total_count: int


class OverviewSchema(_FromCore):
    display_currency: str = "AED"
    total_invested: float
    total_current_value: float
    total_profit_loss: float
    total_profit_loss_pct: float
    performance_status: str = ""
    categories: list[CategoryTotalSchema]
    currencies: list[CurrencyTotalSchema]
    concentration_warnings: list[str]
    mf_summary: MutualFundSummarySchema | None = None
    sip_summary: SipSummarySchema | None = None


class InstrumentSummarySchema(_FromCore):
    symbol: str
    name: str
    holding_oz: float
    holding_grams: float
    average_cost_aed_per_oz: float
    average_cost_aed_per_gram: float
    cost_basis_aed: float
    current_price_aed_per_oz: float | None = None
    current_price_aed_per_gram: float | None = None
    current_value_aed: float | None = None
    unrealized_pl_aed: float | None = None
    unrealized_pl_pct: float | None = None
    realized_pl_aed: float
    total_bought_aed: float
    total_sold_aed: float


class MetalsSummarySchema(_FromCore):
    total_buys_aed: float
    total_sells_aed: float
    net_cash_invested_aed: float
    current_value_aed: float | None = None
    total_realized_pl_aed: float
    total_unrealized_pl_aed: float | None = None
    total_pl_aed: float | None = None
    total_return_pct: float | None = None
    instruments: list[InstrumentSummarySchema]


class PortfolioSummarySchema(_FromCore):
    total_buys_aed: float
    total_sells_aed: float
    net_cash_invested_aed: float
    current_value_aed: float
    total_realized_pl_aed: float
    total_unrealized_pl_aed: float
    total_pl_aed: float
    total_return_pct: float | None = None
    prices_source: str = ""
    metals: MetalsSummarySchema


class ExposureRowSchema(_FromCore):
    name: str
    value: float
    pct: float


class AllocationTargetLineSchema(BaseModel):
    category_code: str
    target_pct: float = Field(..., ge=0, le=100)
    min_pct: float = Field(default=0.0, ge=0, le=100)
    max_pct: float = Field(default=100.0, ge=0, le=100)


class RebalanceRequest(BaseModel):
    lines: list[AllocationTargetLineSchema]
    threshold_pct: float | None = Field(default=None, ge=1, le=50)


class DriftRowSchema(_FromCore):
    category_code: str
    label: str
    current_pct: float
    target_pct: float
    drift: float
    current_value: float
    target_value: float
    action: RebalanceAction
    amount: float
    breached: bool


class RebalanceResponse(BaseModel):
    threshold_pct: float
    total_drift: float
    breach_count: int
    rows: list[DriftRowSchema]


class UpcomingMaturitySchema(_FromCore):
    asset_id: str
    asset_name: str
    maturity_date: date
    days_to_maturity: int
    amount: float
    currency: str
    urgency: Urgency


class RankedAssetSchema(_FromCore):
    id: str
    name: str
    invested: float
    current_value: float
    absolute_gain: float
    return_pct: float
    cagr_pct: float | None = None
    purchase_date: date
    rank: int


class LeaderboardSchema(BaseModel):
    ranked: list[RankedAssetSchema]
    leaders: list[RankedAssetSchema]
    laggards: list[RankedAssetSchema]


class TimelinePointSchema(_FromCore):
    year: int
    invested: float
    current_value: float | None = None


class SipDueSchema(_FromCore):
    asset_id: str
    asset_name: str
    amount: float
    due_date: date


class CashFlowReportSchema(BaseModel):
    monthly_sip_outflow_inr: float
    upcoming_sips: list[SipDueSchema]
    upcoming_maturities: list[UpcomingMaturitySchema]
    yearly_contributions: dict[int, float]


__all__ = [
    "AllocationTargetLineSchema",
    "CashFlowReportSchema",
    "CategoryTotalSchema",
    "CurrencyTotalSchema",
    "DriftRowSchema",
    "ExposureRowSchema",
    "LeaderboardSchema",
    "MetalsSummarySchema",
    "OverviewSchema",
    "PortfolioSummarySchema",
    "RankedAssetSchema",
    "RebalanceRequest",
    "RebalanceResponse",
    "SipDueSchema",
    "TimelinePointSchema",
    "UpcomingMaturitySchema",
]
