"""Live metal prices, forex rates and mutual-fund NAV refresh."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies.context import RequestContext, get_db_session, get_request_context
from app.schemas import ForexSchema, MetalPricesSchema, PriceBoardSchema
from app.services.prices import fetch_forex, fetch_metal_prices, fetch_price_board, refresh_mutual_fund_navs

router = APIRouter()


class NavRefreshItem(BaseModel):
    asset_id: int
    scheme_code: str
    success: bool
    nav: float | None = None
    error: str | None = None


@router.get("", response_model=PriceBoardSchema)
async def get_price_board() -> PriceBoardSchema:
    metals, forex = await fetch_price_board()
    return PriceBoardSchema(
        metals=MetalPricesSchema.model_validate(metals),
        forex=ForexSchema.model_validate(forex),
    )


@router.get("/metals", response_model=MetalPricesSchema)
async def get_metal_prices() -> MetalPricesSchema:
    forex = await fetch_forex()
    return MetalPricesSchema.model_validate(await fetch_metal_prices(usd_to_aed=forex.usd_aed))


@router.get("/forex", response_model=ForexSchema)
async def get_forex() -> ForexSchema:
    return ForexSchema.model_validate(await fetch_forex())


@router.post("/nav/refresh", response_model=list[NavRefreshItem])
async def post_nav_refresh(
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> list[NavRefreshItem]:
    results = await refresh_mutual_fund_navs(session, context.user_id)
    return [NavRefreshItem.model_validate(item, from_attributes=True) for item in results]


__all__ = ["router"]
