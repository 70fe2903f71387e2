"""Latest mutual-fund NAVs from mfapi.in."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Awaitable, Callable, Optional

import httpx

from app.config import get_settings
from app.providers.metal_prices import DEFAULT_HEADERS

logger = logging.getLogger(__name__)


class NavFetchError(RuntimeError):
    """Raised when a NAV cannot be fetched after every retry."""


@dataclass(frozen=True)
class SchemeNav:
    scheme_code: str
    scheme_name: str | None
    nav: float
    nav_date: date


def parse_latest_nav(scheme_code: str, payload: dict[str, Any]) -> SchemeNav:
    """Read the first ``data`` row; dates arrive as ``DD-MM-YYYY``."""

    rows = payload.get("data") or []
    if not rows:
        raise NavFetchError(f"No NAV data for scheme {scheme_code}")
    latest = rows[0]
    try:
        nav = float(latest["nav"])
        nav_date = datetime.strptime(latest["date"], "%d-%m-%Y").date()
    except (KeyError, TypeError, ValueError) as exc:
        raise NavFetchError(f"Malformed NAV row for scheme {scheme_code}: {latest}") from exc
    if nav <= 0:
        raise NavFetchError(f"Non-positive NAV for scheme {scheme_code}")
    meta = payload.get("meta") or {}
    return SchemeNav(scheme_code=scheme_code, scheme_name=meta.get("scheme_name"), nav=nav, nav_date=nav_date)


class MutualFundNavClient:
    """NAV lookups retried with exponential backoff (1s, 2s, 4s, ...)."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        timeout_seconds: float | None = None,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.mf_nav_url).rstrip("/")
        self._max_retries = max_retries or settings.nav_max_retries
        self._backoff = settings.nav_backoff_seconds if backoff_seconds is None else backoff_seconds
        self._timeout = timeout_seconds or settings.http_timeout_seconds
        self._client = client or httpx.AsyncClient(headers=DEFAULT_HEADERS)
        self._owns_client = client is None
        self._sleep = sleep

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def latest_nav(self, scheme_code: str) -> SchemeNav:
        url = f"{self._base_url}/{scheme_code}/latest"
        last_error: str = "no attempt made"
        for attempt in range(self._max_retries):
            try:
                response = await self._client.get(url, params={}, timeout=self._timeout)
            except httpx.HTTPError as exc:
                last_error = str(exc)
            else:
                if response.status_code < 400:
                    try:
                        return parse_latest_nav(scheme_code, response.json())
                    except ValueError as exc:
                        raise NavFetchError(f"Invalid JSON for scheme {scheme_code}") from exc
                last_error = f"HTTP {response.status_code}"

            if attempt < self._max_retries - 1:
                delay = self._backoff * 2**attempt
                logger.warning(
                    "NAV fetch for %s failed (%s), retrying in %.1fs", scheme_code, last_error, delay
                )
                await self._sleep(delay)

        raise NavFetchError(f"NAV fetch for {scheme_code} failed after {self._max_retries} attempts: {last_error}")


__all__ = ["MutualFundNavClient", "NavFetchError", "SchemeNav", "parse_latest_nav"]
