"""Daily net-worth snapshots."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies.context import CronAuth, RequestContext, get_db_session, get_request_context
from app.schemas import PortfolioSnapshotSchema, SnapshotRunItem, SnapshotRunResponse
from app.services import snapshots as snapshot_service

router = APIRouter()


@router.get("", response_model=list[PortfolioSnapshotSchema])
async def get_snapshots(
    since: date | None = Query(default=None),
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> list[PortfolioSnapshotSchema]:
    rows = await snapshot_service.list_snapshots(session, context.user_id, since=since)
    return [PortfolioSnapshotSchema.model_validate(row) for row in rows]


@router.post("", response_model=PortfolioSnapshotSchema, status_code=status.HTTP_201_CREATED)
async def post_snapshot(
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> PortfolioSnapshotSchema:
    totals = await snapshot_service.take_snapshot(session, context.user_id, date.today())
    return PortfolioSnapshotSchema(
        snapshot_date=totals.snapshot_date,
        total_value=totals.total_value,
        total_invested=totals.total_invested,
        total_liabilities=totals.total_liabilities,
        net_worth=totals.net_worth,
    )


@router.post("/run", response_model=SnapshotRunResponse, dependencies=[CronAuth])
async def run_snapshots(session: AsyncSession = Depends(get_db_session)) -> SnapshotRunResponse:
    today = date.today()
    results = await snapshot_service.run_daily_snapshots(session, today)
    return SnapshotRunResponse(
        run_date=today,
        results=[SnapshotRunItem(user_id=user_id, status=outcome) for user_id, outcome in results],
    )


__all__ = ["router"]
