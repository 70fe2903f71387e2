"""Net-worth snapshot computation tests."""

from __future__ import annotations

from datetime import date

import pytest

from asset_tracker.models import AssetClass, Liability, MutualFundHolding
from asset_tracker.snapshots import compute_snapshot


def test_snapshot_totals_in_aed(make_asset, currency_config):
    assets = [
        make_asset("1", 1000.0, 1200.0),
        make_asset("2", 10_000.0, asset_class=AssetClass.SIP, currency="INR"),
    ]
    liabilities = [
        Liability("Car loan", 500.0),
        Liability("Old card", 1000.0, is_active=False),
        Liability("US card", 100.0, currency="USD"),
    ]
    holdings = [MutualFundHolding("Debt Fund", 1000.0), MutualFundHolding("Closed", 5000.0, is_active=False)]

    totals = compute_snapshot(assets, liabilities, holdings, currency_config, date(2025, 1, 3))

    assert totals.snapshot_date == date(2025, 1, 3)
    assert totals.total_invested == pytest.approx(1000.0 + 440.0 + 44.0)
    assert totals.total_value == pytest.approx(1200.0 + 440.0 + 44.0)
    assert totals.total_liabilities == pytest.approx(500.0 + 367.25)
    assert totals.net_worth == pytest.approx(totals.total_value - totals.total_liabilities)


def test_empty_snapshot(currency_config):
    totals = compute_snapshot([], [], [], currency_config, date(2025, 1, 3))
    assert (totals.total_value, totals.total_invested, totals.net_worth) == (0.0, 0.0, 0.0)
