"""Live price lookups with per-feed failure isolation."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.providers.forex import ForexClient, ForexRateError
from app.providers.metal_prices import MetalPriceClient, MetalPriceError
from app.providers.mf_nav import MutualFundNavClient, NavFetchError
from app.services.assets import list_assets
from asset_tracker.quotes import (
    ForexQuote,
    MetalPrices,
    default_forex,
    failed_metal_prices,
    normalize_metal_prices,
)

logger = logging.getLogger(__name__)


async def _metal_payload(client: MetalPriceClient) -> dict[str, Any] | None:
    try:
        return await client.fetch_usd_quotes()
    except MetalPriceError as exc:
        logger.warning("Metal prices unavailable: %s", exc)
        return None


async def fetch_forex(client: ForexClient | None = None) -> ForexQuote:
    """Live rates, or the configured defaults tagged ``source="default"``."""

    forex_client = client or ForexClient()
    try:
        return await forex_client.fetch_rates()
    except ForexRateError as exc:
        logger.warning("Forex rates unavailable, using defaults: %s", exc)
        return default_forex()
    finally:
        if client is None:
            await forex_client.aclose()


async def fetch_metal_prices(
    client: MetalPriceClient | None = None,
    *,
    usd_to_aed: float | None = None,
) -> MetalPrices:
    metal_client = client or MetalPriceClient()
    try:
        payload = await _metal_payload(metal_client)
    finally:
        if client is None:
            await metal_client.aclose()
    if payload is None:
        return failed_metal_prices()
    if usd_to_aed is None:
        return normalize_metal_prices(payload)
    return normalize_metal_prices(payload, usd_to_aed)


async def fetch_price_board(
    metal_client: MetalPriceClient | None = None,
    forex_client: ForexClient | None = None,
) -> tuple[MetalPrices, ForexQuote]:
    """Fetch both feeds concurrently; either may fail without affecting the other."""

    owned_metal = metal_client is None
    metals = metal_client or MetalPriceClient()
    try:
        payload, forex = await asyncio.gather(_metal_payload(metals), fetch_forex(forex_client))
    finally:
        if owned_metal:
            await metals.aclose()
    prices = failed_metal_prices() if payload is None else normalize_metal_prices(payload, forex.usd_aed)
    return prices, forex


@dataclass(frozen=True)
class NavRefreshResult:
    asset_id: int
    scheme_code: str
    success: bool
    nav: float | None = None
    error: str | None = None


async def refresh_mutual_fund_navs(
    session: AsyncSession,
    user_id: str,
    client: MutualFundNavClient | None = None,
) -> list[NavRefreshResult]:
    """Update NAV and derived current value for fund and SIP holdings with a scheme code."""

    nav_client = client or MutualFundNavClient()
    results: list[NavRefreshResult] = []
    try:
        assets = await list_assets(session, user_id)
        for asset in assets:
            if asset.asset_class not in ("mutual_fund", "sip") or not asset.scheme_code:
                continue
            try:
                latest = await nav_client.latest_nav(asset.scheme_code)
            except NavFetchError as exc:
                results.append(NavRefreshResult(asset.id, asset.scheme_code, False, error=str(exc)))
                continue
            asset.nav_or_price = latest.nav
            if asset.quantity and not asset.is_current_value_manual:
                asset.current_value = asset.quantity * latest.nav
            results.append(NavRefreshResult(asset.id, asset.scheme_code, True, nav=latest.nav))
        await session.commit()
    finally:
        if client is None:
            await nav_client.aclose()
    logger.info(
        "NAV refresh for %s: %s updated, %s failed",
        user_id,
        sum(1 for item in results if item.success),
        sum(1 for item in results if not item.success),
    )
    return results


__all__ = [
    "NavRefreshResult",
    "fetch_forex",
    "fetch_metal_prices",
    "fetch_price_board",
    "refresh_mutual_fund_navs",
]
