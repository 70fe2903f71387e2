"""Price and forex normalisation tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from asset_tracker.fx import DEFAULT_INR_TO_AED, DEFAULT_USD_TO_AED
from asset_tracker.metals import OUNCE_TO_GRAM
from asset_tracker.quotes import (
    FALLBACK_USD_TO_INR,
    SOURCE_DEFAULT,
    SOURCE_FAILED,
    currency_config_from_quote,
    default_forex,
    normalize_forex,
    normalize_forex_fallback,
    normalize_metal_prices,
)

NOW = datetime(2025, 1, 3, 12, 0, tzinfo=timezone.utc)
PAYLOAD = {
    "ts": 1735905600000,
    "items": [
        {"curr": "EUR", "xauPrice": 2500.0, "xagPrice": 28.0},
        {"curr": "USD", "xauPrice": 2000.0, "xagPrice": 25.0},
    ],
}


def test_metal_prices_in_every_unit():
    prices = normalize_metal_prices(PAYLOAD, 3.6725)
    assert not prices.failed
    assert prices.xau.usd_per_oz == 2000.0
    assert prices.xau.aed_per_oz == pytest.approx(7345.0)
    assert prices.xau.aed_per_gram == pytest.approx(7345.0 / OUNCE_TO_GRAM)
    assert prices.xag.aed_per_oz == pytest.approx(25.0 * 3.6725)
    assert prices.last_updated == datetime(2025, 1, 3, 12, 0, tzinfo=timezone.utc)
    assert prices.price_aed_per_oz("xau") == pytest.approx(7345.0)
    assert prices.price_aed_per_oz("XPT") is None


@pytest.mark.parametrize(
    "payload",
    [
        None,
        {},
        {"items": [{"curr": "EUR", "xauPrice": 1.0, "xagPrice": 1.0}]},
        {"items": [{"curr": "USD", "xauPrice": "n/a"}]},
    ],
)
def test_unusable_metal_payload_is_a_failed_sentinel(payload):
    prices = normalize_metal_prices(payload)
    assert prices.failed
    assert prices.source == SOURCE_FAILED
    assert prices.xau is None and prices.xag is None
    assert prices.price_aed_per_oz("XAU") is None


def test_forex_exposes_rates_and_reciprocals():
    quote = normalize_forex({"result": 3.67}, {"info": {"rate": 0.0441}}, now=NOW)
    assert quote.usd_aed == 3.67
    assert quote.inr_aed == 0.0441
    assert quote.aed_usd == pytest.approx(1 / 3.67)
    assert quote.aed_inr == pytest.approx(1 / 0.0441)
    assert quote.last_updated == NOW
    assert not quote.is_default


def test_forex_defaults_when_pair_missing():
    quote = normalize_forex({}, {"result": None}, now=NOW)
    assert quote.usd_aed == DEFAULT_USD_TO_AED
    assert quote.inr_aed == DEFAULT_INR_TO_AED


def test_fallback_derives_inr_cross_rate():
    quote = normalize_forex_fallback({"base": "USD", "rates": {"AED": 3.6725, "INR": 83.0}}, now=NOW)
    assert quote.usd_aed == 3.6725
    assert quote.inr_aed == pytest.approx(3.6725 / 83.0)
    assert quote.source == "frankfurter.app"


def test_default_forex_is_tagged():
    quote = default_forex(NOW)
    assert quote.is_default
    assert quote.source == SOURCE_DEFAULT
    assert quote.usd_aed == DEFAULT_USD_TO_AED


def test_user_overrides_win_over_live_rates():
    quote = normalize_forex({"result": 3.6}, {"result": 0.05}, now=NOW)
    config = currency_config_from_quote(quote, display_currency="INR", usd_to_aed_override=3.7)
    assert config.display_currency == "INR"
    assert config.usd_to_aed == 3.7
    assert config.inr_to_aed == 0.05


def test_config_without_quote_uses_defaults():
    config = currency_config_from_quote(None)
    assert config.usd_to_aed == DEFAULT_USD_TO_AED
    assert config.inr_to_aed == DEFAULT_INR_TO_AED


@pytest.mark.parametrize("garbage", ["n/a", "", -1.0, 0, [], {"rate": 3.7}, True])
def test_forex_ignores_unparseable_rates(garbage):
    quote = normalize_forex({"result": garbage}, {"result": garbage, "info": {"rate": "x"}}, now=NOW)
    assert quote.usd_aed == DEFAULT_USD_TO_AED
    assert quote.inr_aed == DEFAULT_INR_TO_AED


def test_forex_reads_numeric_strings():
    quote = normalize_forex({"result": "3.67"}, {"result": "n/a", "info": {"rate": "0.045"}}, now=NOW)
    assert quote.usd_aed == pytest.approx(3.67)
    assert quote.inr_aed == pytest.approx(0.045)


def test_fallback_ignores_unparseable_rates():
    quote = normalize_forex_fallback({"rates": {"AED": "x", "INR": None}}, now=NOW)
    assert quote.usd_aed == DEFAULT_USD_TO_AED
    assert quote.inr_aed == pytest.approx(DEFAULT_USD_TO_AED / FALLBACK_USD_TO_INR)
    assert normalize_forex_fallback({"rates": "broken"}, now=NOW).usd_aed == DEFAULT_USD_TO_AED
