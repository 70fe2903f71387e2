"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .analytics import router as analytics_router
from .assets import router as assets_router
from .household import router as household_router
from .portfolio import router as portfolio_router
from .prices import router as prices_router
from .reports import router as reports_router
from .snapshots import router as snapshots_router
from .transactions import router as transactions_router

api_router = APIRouter()
api_router.include_router(assets_router, prefix="/assets", tags=["assets"])
api_router.include_router(transactions_router, prefix="/transactions", tags=["assets"])
api_router.include_router(portfolio_router, prefix="/portfolio", tags=["portfolio"])
api_router.include_router(analytics_router, prefix="/analytics", tags=["analytics"])
api_router.include_router(prices_router, prefix="/prices", tags=["prices"])
api_router.include_router(reports_router, prefix="/reports", tags=["reports"])
api_router.include_router(snapshots_router, prefix="/snapshots", tags=["snapshots"])
api_router.include_router(household_router, tags=["household"])

__all__ = ["api_router"]
