"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from opentelemetry import trace
from sqlalchemy.ext.asyncio import AsyncEngine

from app.api.routes import api_router
from app.config import AppSettings, get_settings
from app.core.logging import setup_logging
from app.core.telemetry import setup_telemetry
from app.db.init import init_database
from app.db.session import _engine

EXPOSED_HEADERS = ["traceparent", "tracestate", "x-request-id", "content-disposition"]


def create_app(settings: AppSettings | None = None, engine: AsyncEngine | None = None) -> FastAPI:
    """Build the API; tests pass their own settings and a throwaway engine."""

    app_settings = settings or get_settings()
    db_engine = engine or _engine

    @asynccontextmanager
    async def _lifespan(_: FastAPI):
        await init_database(db_engine)
        yield

    setup_logging()
    app = FastAPI(title=app_settings.app_name, version="0.1.0", lifespan=_lifespan)
    setup_telemetry(app, app_settings, engine=db_engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=EXPOSED_HEADERS,
    )

    @app.middleware("http")
    async def _attach_user(request: Request, call_next):
        user_id = request.headers.get("x-user-id")
        if user_id:
            trace.get_current_span().set_attribute("enduser.id", user_id)
        return await call_next(request)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {
            "status": "ok",
            "timestamp": datetime.now().isoformat(),
            "timezone": app_settings.timezone,
            "base_currency": app_settings.base_currency,
        }

    app.include_router(api_router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
