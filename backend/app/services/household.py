"""Per-user settings, liabilities and savings goals."""

from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Goal, Liability, UserSettings
from app.schemas import GoalSchema, LiabilityCreateRequest, UserSettingsSchema

logger = logging.getLogger(__name__)


async def save_user_settings(session: AsyncSession, user_id: str, payload: UserSettingsSchema) -> UserSettings:
    row = await session.get(UserSettings, user_id)
    if row is None:
        row = UserSettings(user_id=user_id)
        session.add(row)
    for field, value in payload.model_dump().items():
        setattr(row, field, value)
    await session.commit()
    await session.refresh(row)
    return row


async def list_liabilities(session: AsyncSession, user_id: str) -> list[Liability]:
    result = await session.execute(select(Liability).where(Liability.user_id == user_id).order_by(Liability.id))
    return list(result.scalars().all())


async def create_liability(session: AsyncSession, user_id: str, payload: LiabilityCreateRequest) -> Liability:
    row = Liability(user_id=user_id, **payload.model_dump())
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return row


async def delete_liability(session: AsyncSession, user_id: str, liability_id: int) -> None:
    row = await session.get(Liability, liability_id)
    if row is None or row.user_id != user_id:
        raise LookupError(f"Liability {liability_id} not found")
    await session.delete(row)
    await session.commit()


async def replace_goals(session: AsyncSession, user_id: str, goals: Sequence[GoalSchema]) -> list[Goal]:
    """Swap the user's goal list for ``goals`` in one transaction."""

    keys = [goal.key for goal in goals]
    if len(set(keys)) != len(keys):
        raise ValueError("Goal keys must be unique")
    await session.execute(delete(Goal).where(Goal.user_id == user_id))
    rows = [Goal(user_id=user_id, **goal.model_dump()) for goal in goals]
    session.add_all(rows)
    await session.commit()
    logger.info("Stored %s goals for user %s", len(rows), user_id)
    return rows


__all__ = [
    "create_liability",
    "delete_liability",
    "list_liabilities",
    "replace_goals",
    "save_user_settings",
]
