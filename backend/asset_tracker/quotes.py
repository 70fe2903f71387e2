"""Normalisation of raw metal and forex quotes.

Upstream failures never raise from here: a missing or malformed payload turns
into a ``failed`` metal quote set or the ``default`` forex rates so callers
can still render a "no data" state.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from .fx import DEFAULT_INR_TO_AED, DEFAULT_USD_TO_AED, CurrencyConfig
from .metals import OUNCE_TO_GRAM

logger = logging.getLogger(__name__)

SOURCE_FAILED = "failed"
SOURCE_DEFAULT = "default"
FALLBACK_USD_TO_INR = 83.5


@dataclass(frozen=True)
class MetalQuote:
    usd_per_oz: float
    aed_per_oz: float
    aed_per_gram: float


@dataclass(frozen=True)
class MetalPrices:
    xau: Optional[MetalQuote]
    xag: Optional[MetalQuote]
    last_updated: Optional[datetime]
    source: str

    @property
    def failed(self) -> bool:
        return self.source == SOURCE_FAILED

    def price_aed_per_oz(self, symbol: str) -> float | None:
        quote = self.xau if symbol.upper() == "XAU" else self.xag if symbol.upper() == "XAG" else None
        return quote.aed_per_oz if quote else None


@dataclass(frozen=True)
class ForexQuote:
    usd_aed: float
    inr_aed: float
    last_updated: datetime
    source: str

    @property
    def aed_usd(self) -> float:
        return 1 / self.usd_aed if self.usd_aed else 0.0

    @property
    def aed_inr(self) -> float:
        return 1 / self.inr_aed if self.inr_aed else 0.0

    @property
    def is_default(self) -> bool:
        return self.source == SOURCE_DEFAULT


def metal_quote(usd_per_oz: float, usd_to_aed: float) -> MetalQuote:
    aed_per_oz = usd_per_oz * usd_to_aed
    return MetalQuote(usd_per_oz=usd_per_oz, aed_per_oz=aed_per_oz, aed_per_gram=aed_per_oz / OUNCE_TO_GRAM)


def failed_metal_prices() -> MetalPrices:
    return MetalPrices(xau=None, xag=None, last_updated=None, source=SOURCE_FAILED)


def normalize_metal_prices(
    payload: Mapping[str, Any] | None,
    usd_to_aed: float = DEFAULT_USD_TO_AED,
    *,
    source: str = "goldprice.org",
) -> MetalPrices:
    """Turn a goldprice.org style payload into per-ounce and per-gram AED quotes."""

    if not payload:
        return failed_metal_prices()
    items = payload.get("items") or []
    usd_item = next((item for item in items if isinstance(item, Mapping) and item.get("curr") == "USD"), None)
    if usd_item is None:
        logger.warning("USD prices not found in metal price payload")
        return failed_metal_prices()
    try:
        xau_usd = float(usd_item["xauPrice"])
        xag_usd = float(usd_item["xagPrice"])
    except (KeyError, TypeError, ValueError):
        logger.warning("Malformed metal price payload: %s", usd_item)
        return failed_metal_prices()

    updated: Optional[datetime] = None
    ts = payload.get("ts")
    if isinstance(ts, (int, float)):
        # goldprice.org reports milliseconds; seconds are accepted as well
        seconds = ts / 1000 if ts > 1e11 else ts
        updated = datetime.fromtimestamp(seconds, tz=timezone.utc)

    return MetalPrices(
        xau=metal_quote(xau_usd, usd_to_aed),
        xag=metal_quote(xag_usd, usd_to_aed),
        last_updated=updated,
        source=source,
    )


def default_forex(now: datetime | None = None) -> ForexQuote:
    return ForexQuote(
        usd_aed=DEFAULT_USD_TO_AED,
        inr_aed=DEFAULT_INR_TO_AED,
        last_updated=now or datetime.now(timezone.utc),
        source=SOURCE_DEFAULT,
    )


def _parse_rate(value: Any) -> float | None:
    """Positive float from an upstream field, or ``None`` when absent or garbage."""

    if value is None or isinstance(value, bool):
        return None
    try:
        rate = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric forex rate %r", value)
        return None
    return rate if rate > 0 and rate != float("inf") else None


def _rate_from_convert_payload(payload: Mapping[str, Any], default: float) -> float:
    result = _parse_rate(payload.get("result"))
    if result is not None:
        return result
    info = payload.get("info")
    rate = _parse_rate(info.get("rate")) if isinstance(info, Mapping) else None
    return rate if rate is not None else default


def normalize_forex(
    usd_payload: Mapping[str, Any],
    inr_payload: Mapping[str, Any],
    *,
    now: datetime | None = None,
    source: str = "exchangerate.host",
) -> ForexQuote:
    """Build a quote from two ``convert`` responses (USD->AED and INR->AED)."""

    return ForexQuote(
        usd_aed=_rate_from_convert_payload(usd_payload, DEFAULT_USD_TO_AED),
        inr_aed=_rate_from_convert_payload(inr_payload, DEFAULT_INR_TO_AED),
        last_updated=now or datetime.now(timezone.utc),
        source=source,
    )


def normalize_forex_fallback(
    payload: Mapping[str, Any],
    *,
    now: datetime | None = None,
    source: str = "frankfurter.app",
) -> ForexQuote:
    """Derive both rates from a USD-based ``latest`` response carrying AED and INR."""

    rates = payload.get("rates")
    if not isinstance(rates, Mapping):
        rates = {}
    usd_to_aed = _parse_rate(rates.get("AED")) or DEFAULT_USD_TO_AED
    usd_to_inr = _parse_rate(rates.get("INR")) or FALLBACK_USD_TO_INR
    return ForexQuote(
        usd_aed=usd_to_aed,
        inr_aed=usd_to_aed / usd_to_inr,
        last_updated=now or datetime.now(timezone.utc),
        source=source,
    )


def currency_config_from_quote(
    quote: ForexQuote | None,
    *,
    display_currency: str = "AED",
    usd_to_aed_override: float | None = None,
    inr_to_aed_override: float | None = None,
) -> CurrencyConfig:
    """Build the conversion config; user overrides take precedence over live rates."""

    config = CurrencyConfig(display_currency=display_currency)
    if quote is not None:
        config = replace(config, usd_to_aed=quote.usd_aed, inr_to_aed=quote.inr_aed)
    if usd_to_aed_override:
        config = replace(config, usd_to_aed=usd_to_aed_override)
    if inr_to_aed_override:
        config = replace(config, inr_to_aed=inr_to_aed_override)
    return config


__all__ = [
    "ForexQuote",
    "MetalPrices",
    "MetalQuote",
    "SOURCE_DEFAULT",
    "SOURCE_FAILED",
    "currency_config_from_quote",
    "default_forex",
    "failed_metal_prices",
    "metal_quote",
    "normalize_forex",
    "normalize_forex_fallback",
    "normalize_metal_prices",
]
