"""Spot gold and silver prices from goldprice.org."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from app.config import get_settings

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "Mozilla/5.0 (compatible; AssetTracker/1.0)",
}


class MetalPriceError(RuntimeError):
    """Raised when the metal price feed is unreachable or returns garbage."""


class MetalPriceClient:
    """Fetch the raw USD quote payload; normalisation happens in ``asset_tracker.quotes``."""

    def __init__(
        self,
        *,
        url: str | None = None,
        timeout_seconds: float | None = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        settings = get_settings()
        self._url = url or settings.metal_price_url
        self._timeout = timeout_seconds or settings.http_timeout_seconds
        self._client = client or httpx.AsyncClient(headers=DEFAULT_HEADERS)
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_usd_quotes(self) -> dict[str, Any]:
        try:
            response = await self._client.get(self._url, params={}, timeout=self._timeout)
        except httpx.HTTPError as exc:
            raise MetalPriceError(f"Failed to reach metal price feed: {exc}") from exc

        if response.status_code >= 400:
            logger.warning("Metal price feed %s responded with %s", self._url, response.status_code)
            raise MetalPriceError(f"Metal price feed responded with status {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise MetalPriceError("Metal price feed returned invalid JSON payload") from exc
        if not isinstance(payload, dict):
            raise MetalPriceError("Metal price payload is not an object")
        return payload


__all__ = ["MetalPriceClient", "MetalPriceError"]
