"""Request-scoped dependencies shared by the API routes."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db.session import get_db


async def get_db_session() -> AsyncIterator[AsyncSession]:
    async for session in get_db():  # pragma: no cover - FastAPI dependency wrapper
        yield session


@dataclass
class RequestContext:
    user_id: str


def get_request_context(x_user_id: str | None = Header(default=None)) -> RequestContext:
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing user context")
    return RequestContext(user_id=x_user_id)


def verify_cron_secret(authorization: str | None = Header(default=None)) -> None:
    """Scheduled jobs authenticate with ``Authorization: Bearer <secret>``."""

    secret = get_settings().snapshot_cron_secret
    if secret is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Cron secret not configured")
    if authorization != f"Bearer {secret}":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid cron secret")


CronAuth = Depends(verify_cron_secret)


__all__ = ["CronAuth", "RequestContext", "get_db_session", "get_request_context", "verify_cron_secret"]
