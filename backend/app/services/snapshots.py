"""Daily net-worth snapshots."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Asset, PortfolioSnapshot
from app.services.portfolio import load_context
from asset_tracker.snapshots import SnapshotTotals, compute_snapshot

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_ERROR = "error"


def _insert_for(session: AsyncSession):
    dialect = session.bind.dialect.name if session.bind is not None else "postgresql"
    return sqlite.insert if dialect == "sqlite" else postgresql.insert


async def _upsert(session: AsyncSession, user_id: str, totals: SnapshotTotals) -> None:
    values: dict[str, Any] = {
        "user_id": user_id,
        "snapshot_date": totals.snapshot_date,
        "total_value": round(totals.total_value, 2),
        "total_invested": round(totals.total_invested, 2),
        "total_liabilities": round(totals.total_liabilities, 2),
        "net_worth": round(totals.net_worth, 2),
    }
    insert = _insert_for(session)
    stmt = (
        insert(PortfolioSnapshot)
        .values(**values)
        .on_conflict_do_update(
            index_elements=[PortfolioSnapshot.user_id, PortfolioSnapshot.snapshot_date],
            set_={
                "total_value": values["total_value"],
                "total_invested": values["total_invested"],
                "total_liabilities": values["total_liabilities"],
                "net_worth": values["net_worth"],
            },
        )
    )
    await session.execute(stmt)


async def take_snapshot(session: AsyncSession, user_id: str, as_of: date) -> SnapshotTotals:
    """Compute and store today's totals; re-running the same day overwrites the row."""

    context = await load_context(session, user_id)
    totals = compute_snapshot(context.assets, context.liabilities, [], context.config, as_of)
    await _upsert(session, user_id, totals)
    await session.commit()
    return totals


async def snapshot_user_ids(session: AsyncSession) -> list[str]:
    result = await session.execute(select(Asset.user_id).distinct().order_by(Asset.user_id))
    return list(result.scalars().all())


async def run_daily_snapshots(session: AsyncSession, as_of: date) -> list[tuple[str, str]]:
    """Snapshot every user holding assets; one failure does not stop the rest."""

    results: list[tuple[str, str]] = []
    for user_id in await snapshot_user_ids(session):
        try:
            await take_snapshot(session, user_id, as_of)
        except SQLAlchemyError:
            logger.exception("Snapshot failed for user %s", user_id)
            await session.rollback()
            results.append((user_id, STATUS_ERROR))
            continue
        results.append((user_id, STATUS_OK))
    logger.info(
        "Daily snapshots for %s: %s ok, %s failed",
        as_of,
        sum(1 for _, status in results if status == STATUS_OK),
        sum(1 for _, status in results if status == STATUS_ERROR),
    )
    return results


async def list_snapshots(
    session: AsyncSession,
    user_id: str,
    *,
    since: date | None = None,
) -> list[PortfolioSnapshot]:
    stmt = select(PortfolioSnapshot).where(PortfolioSnapshot.user_id == user_id)
    if since is not None:
        stmt = stmt.where(PortfolioSnapshot.snapshot_date >= since)
    result = await session.execute(stmt.order_by(PortfolioSnapshot.snapshot_date))
    return list(result.scalars().all())


__all__ = [
    "STATUS_ERROR",
    "STATUS_OK",
    "list_snapshots",
    "run_daily_snapshots",
    "snapshot_user_ids",
    "take_snapshot",
]
