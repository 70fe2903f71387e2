"""Database engine and session utilities."""

from __future__ import annotations

from typing import Any, AsyncIterator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.config import get_settings


def build_engine(url: str) -> AsyncEngine:
    """Async engine for ``url``; SQLite (used by the test-suite) skips connection pinging."""

    options: dict[str, Any] = {"echo": False}
    if make_url(url).get_backend_name() != "sqlite":
        options["pool_pre_ping"] = True
    return create_async_engine(url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


_settings = get_settings()
_engine: AsyncEngine = build_engine(_settings.database_url)
_session_factory = build_session_factory(_engine)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Yield an AsyncSession for FastAPI dependency usage."""

    async with _session_factory() as session:
        yield session


__all__ = ["build_engine", "build_session_factory", "get_db", "_engine", "_session_factory"]
