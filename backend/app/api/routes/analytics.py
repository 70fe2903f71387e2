"""Return calculations, corpus projections and savings goals."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies.context import RequestContext, get_db_session, get_request_context
from app.schemas import (
    CagrRequest,
    CagrResponse,
    GoalProjectionSchema,
    GoalSchema,
    ProjectionResponse,
    ProjectionRowSchema,
    XirrRequest,
    XirrResponse,
)
from app.services import household
from app.services.portfolio import load_context, load_goals, overview_for
from asset_tracker.models import CashFlow
from asset_tracker.projections import GROWTH_RATES, HORIZONS, goal_projections, projection_table
from asset_tracker.returns import cagr, format_rate, solve_xirr

router = APIRouter()


@router.post("/xirr", response_model=XirrResponse)
async def post_xirr(payload: XirrRequest) -> XirrResponse:
    result = solve_xirr([CashFlow(flow.date, flow.amount) for flow in payload.cash_flows])
    return XirrResponse(status=result.status.value, rate=result.rate, display=format_rate(result.rate))


@router.post("/cagr", response_model=CagrResponse)
async def post_cagr(payload: CagrRequest) -> CagrResponse:
    rate = cagr(payload.begin_value, payload.end_value, payload.years)
    return CagrResponse(rate=rate, display=format_rate(rate))


@router.get("/projections", response_model=ProjectionResponse)
async def get_projections(
    corpus: float = Query(..., ge=0),
    rates: list[float] = Query(default=list(GROWTH_RATES)),
) -> ProjectionResponse:
    table = projection_table(corpus, rates, HORIZONS)
    rows = [
        ProjectionRowSchema(years=years, values={f"{rate:g}": value for rate, value in values.items()})
        for years, values in table.items()
    ]
    return ProjectionResponse(corpus=corpus, rates=rates, rows=rows)


@router.get("/goals", response_model=list[GoalProjectionSchema])
async def get_goals(
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> list[GoalProjectionSchema]:
    portfolio = await load_context(session, context.user_id)
    corpus = overview_for(portfolio, date.today()).total_current_value
    goals = await load_goals(session, context.user_id)
    return [GoalProjectionSchema.model_validate(item, from_attributes=True) for item in goal_projections(corpus, goals)]


@router.put("/goals", response_model=list[GoalSchema])
async def put_goals(
    payload: list[GoalSchema],
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> list[GoalSchema]:
    try:
        rows = await household.replace_goals(session, context.user_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return [GoalSchema.model_validate(row) for row in rows]


__all__ = ["router"]
