"""USD->AED and INR->AED rates: exchangerate.host with a frankfurter.app fallback."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from app.config import get_settings
from app.providers.metal_prices import DEFAULT_HEADERS
from asset_tracker.quotes import ForexQuote, normalize_forex, normalize_forex_fallback

logger = logging.getLogger(__name__)


class ForexRateError(RuntimeError):
    """Raised when neither forex source produced rates."""


class ForexClient:
    def __init__(
        self,
        *,
        primary_url: str | None = None,
        fallback_url: str | None = None,
        timeout_seconds: float | None = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        settings = get_settings()
        self._primary_url = primary_url or settings.forex_primary_url
        self._fallback_url = fallback_url or settings.forex_fallback_url
        self._timeout = timeout_seconds or settings.http_timeout_seconds
        self._client = client or httpx.AsyncClient(headers=DEFAULT_HEADERS)
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get_json(self, url: str, params: dict[str, Any]) -> dict[str, Any] | None:
        try:
            response = await self._client.get(url, params=params, timeout=self._timeout)
        except httpx.HTTPError as exc:
            logger.warning("Forex request to %s failed: %s", url, exc)
            return None
        if response.status_code >= 400:
            logger.warning("Forex source %s responded with %s", url, response.status_code)
            return None
        try:
            payload = response.json()
        except ValueError:
            logger.warning("Forex source %s returned invalid JSON", url)
            return None
        return payload if isinstance(payload, dict) else None

    async def fetch_rates(self) -> ForexQuote:
        """Query both pairs concurrently, falling back to a single USD-based quote."""

        now = datetime.now(timezone.utc)
        usd_payload, inr_payload = await asyncio.gather(
            self._get_json(self._primary_url, {"from": "USD", "to": "AED"}),
            self._get_json(self._primary_url, {"from": "INR", "to": "AED"}),
        )
        if usd_payload is not None and inr_payload is not None:
            return normalize_forex(usd_payload, inr_payload, now=now)

        logger.info("Primary forex source failed, trying fallback %s", self._fallback_url)
        fallback = await self._get_json(self._fallback_url, {"from": "USD", "to": "AED,INR"})
        if fallback is None:
            raise ForexRateError("Both forex sources are unavailable")
        return normalize_forex_fallback(fallback, now=now)


__all__ = ["ForexClient", "ForexRateError"]
