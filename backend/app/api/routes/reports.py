"""Leaderboard, cash-flow and growth reports plus CSV exports."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies.context import RequestContext, get_db_session, get_request_context
from app.schemas import (
    CashFlowReportSchema,
    LeaderboardSchema,
    RankedAssetSchema,
    SipDueSchema,
    TimelinePointSchema,
    UpcomingMaturitySchema,
)
from app.services.portfolio import load_context, metal_ledger, overview_for
from asset_tracker import exports
from asset_tracker.fixed_deposit import upcoming_maturities
from asset_tracker.models import AssetClass
from asset_tracker.reports import (
    growth_timeline,
    laggards,
    leaders,
    monthly_sip_outflow,
    rank_assets,
    upcoming_sips,
    yearly_contributions,
)

router = APIRouter()

CSV_MEDIA_TYPE = "text/csv"


def _csv(body: str, filename: str) -> Response:
    return Response(
        content=body,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/leaderboard", response_model=LeaderboardSchema)
async def get_leaderboard(
    limit: int = Query(default=5, ge=1, le=50),
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> LeaderboardSchema:
    portfolio = await load_context(session, context.user_id)
    ranked = rank_assets(portfolio.assets, date.today())
    return LeaderboardSchema(
        ranked=[RankedAssetSchema.model_validate(row) for row in ranked],
        leaders=[RankedAssetSchema.model_validate(row) for row in leaders(ranked, limit)],
        laggards=[RankedAssetSchema.model_validate(row) for row in laggards(ranked, limit)],
    )


@router.get("/cash-flow", response_model=CashFlowReportSchema)
async def get_cash_flow(
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> CashFlowReportSchema:
    portfolio = await load_context(session, context.user_id)
    today = date.today()
    sips = portfolio.of_class(AssetClass.SIP)
    return CashFlowReportSchema(
        monthly_sip_outflow_inr=monthly_sip_outflow(sips),
        upcoming_sips=[SipDueSchema.model_validate(row) for row in upcoming_sips(sips, today)],
        upcoming_maturities=[
            UpcomingMaturitySchema.model_validate(row) for row in upcoming_maturities(portfolio.assets, today)
        ],
        yearly_contributions={
            row.year: row.amount for row in yearly_contributions(portfolio.assets, portfolio.config)
        },
    )


@router.get("/growth", response_model=list[TimelinePointSchema])
async def get_growth(
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> list[TimelinePointSchema]:
    portfolio = await load_context(session, context.user_id)
    points = growth_timeline(portfolio.assets, date.today(), portfolio.config)
    return [TimelinePointSchema.model_validate(point) for point in points]


@router.get("/transactions.csv", response_class=Response)
async def export_transactions(
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    portfolio = await load_context(session, context.user_id)
    ledger = await metal_ledger(session, portfolio)
    return _csv(exports.transactions_csv(ledger), f"transactions-{date.today().isoformat()}.csv")


@router.get("/assets.csv", response_class=Response)
async def export_assets(
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    portfolio = await load_context(session, context.user_id)
    today = date.today()
    return _csv(exports.assets_csv(portfolio.assets, today), f"assets-{today.isoformat()}.csv")


@router.get("/portfolio-summary.csv", response_class=Response)
async def export_portfolio_summary(
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    portfolio = await load_context(session, context.user_id)
    today = date.today()
    overview = overview_for(portfolio, today)
    return _csv(exports.portfolio_summary_csv(overview), f"portfolio-summary-{today.isoformat()}.csv")


@router.get("/leaderboard.csv", response_class=Response)
async def export_leaderboard(
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    portfolio = await load_context(session, context.user_id)
    today = date.today()
    ranked = rank_assets(portfolio.assets, today)
    return _csv(exports.leaderboard_csv(ranked), f"leaderboard-{today.isoformat()}.csv")


__all__ = ["router"]
