"""Aggregated portfolio views for the calling user."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies.context import RequestContext, get_db_session, get_request_context
from app.schemas import (
    DriftRowSchema,
    ExposureRowSchema,
    OverviewSchema,
    PortfolioSummarySchema,
    RebalanceRequest,
    RebalanceResponse,
    UpcomingMaturitySchema,
)
from app.services.portfolio import load_context, overview_for, summary_for
from app.services.prices import fetch_price_board
from asset_tracker.aggregation import liquidity_breakdown, performance_status, risk_exposure
from asset_tracker.fixed_deposit import upcoming_maturities
from asset_tracker.rebalancing import AllocationTargetLine, compute_drift

router = APIRouter()


@router.get("/overview", response_model=OverviewSchema)
async def get_overview(
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> OverviewSchema:
    portfolio = await load_context(session, context.user_id)
    overview = overview_for(portfolio, date.today())
    schema = OverviewSchema.model_validate(overview)
    schema.display_currency = portfolio.config.display_currency
    schema.performance_status = performance_status(overview.total_profit_loss_pct)
    return schema


@router.get("/summary", response_model=PortfolioSummarySchema)
async def get_summary(
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> PortfolioSummarySchema:
    prices, forex = await fetch_price_board()
    portfolio = await load_context(session, context.user_id, forex=forex)
    summary = await summary_for(session, portfolio, prices, date.today())
    schema = PortfolioSummarySchema.model_validate(summary, from_attributes=True)
    schema.prices_source = prices.source
    return schema


@router.get("/risk", response_model=list[ExposureRowSchema])
async def get_risk(
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> list[ExposureRowSchema]:
    portfolio = await load_context(session, context.user_id)
    rows = risk_exposure(portfolio.assets, portfolio.config, date.today())
    return [ExposureRowSchema.model_validate(row) for row in rows]


@router.get("/liquidity", response_model=list[ExposureRowSchema])
async def get_liquidity(
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> list[ExposureRowSchema]:
    portfolio = await load_context(session, context.user_id)
    rows = liquidity_breakdown(portfolio.assets, portfolio.config, date.today())
    return [ExposureRowSchema.model_validate(row) for row in rows]


@router.post("/rebalance", response_model=RebalanceResponse)
async def post_rebalance(
    payload: RebalanceRequest,
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> RebalanceResponse:
    portfolio = await load_context(session, context.user_id)
    threshold = payload.threshold_pct or portfolio.threshold_pct
    lines = [AllocationTargetLine(**line.model_dump()) for line in payload.lines]
    rows = compute_drift(overview_for(portfolio, date.today()), lines, threshold)
    return RebalanceResponse(
        threshold_pct=threshold,
        total_drift=sum(abs(row.drift) for row in rows),
        breach_count=sum(1 for row in rows if row.breached),
        rows=[DriftRowSchema.model_validate(row) for row in rows],
    )


@router.get("/maturities", response_model=list[UpcomingMaturitySchema])
async def get_maturities(
    window_days: int = Query(default=90, ge=1, le=3650),
    limit: int = Query(default=5, ge=1, le=100),
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> list[UpcomingMaturitySchema]:
    portfolio = await load_context(session, context.user_id)
    rows = upcoming_maturities(portfolio.assets, date.today(), window_days=window_days, limit=limit)
    return [UpcomingMaturitySchema.model_validate(row) for row in rows]


__all__ = ["router"]
