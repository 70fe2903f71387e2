"""Currency conversion tests."""

from __future__ import annotations

import pytest

from asset_tracker.fx import CurrencyConfig, convert, convert_aed, format_aed, format_amount, to_aed


def test_conversion_goes_through_aed():
    config = CurrencyConfig(display_currency="USD", usd_to_aed=3.6725, inr_to_aed=0.044)
    assert to_aed(1000.0, "INR", config) == pytest.approx(44.0)
    assert convert(1000.0, "INR", config) == pytest.approx(44.0 / 3.6725)
    assert convert(100.0, "usd", config) == pytest.approx(100.0)


def test_aed_display_is_identity():
    config = CurrencyConfig()
    assert convert(250.0, "AED", config) == 250.0
    assert convert_aed(250.0, config) == 250.0


def test_unknown_currency_treated_as_aed():
    assert to_aed(10.0, "EUR", CurrencyConfig()) == 10.0


def test_formatting_uses_display_symbol():
    inr = CurrencyConfig(display_currency="INR", inr_to_aed=0.05)
    assert format_amount(1234.5, inr) == "₹ 1,234.50"
    assert format_aed(50.0, inr) == "₹ 1,000.00"
    assert format_amount(None, inr) == "—"
    assert format_amount(10.0, CurrencyConfig(), decimals=0) == "AED 10"
