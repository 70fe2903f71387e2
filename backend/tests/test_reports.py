"""Contribution, SIP and leaderboard report tests."""

from __future__ import annotations

from datetime import date

import pytest

from asset_tracker.fx import CurrencyConfig
from asset_tracker.models import AssetClass
from asset_tracker.reports import (
    growth_timeline,
    laggards,
    leaders,
    monthly_sip_outflow,
    next_sip_due_date,
    rank_assets,
    upcoming_sips,
    yearly_contributions,
)


def test_yearly_contributions_newest_first(make_asset):
    assets = [
        make_asset("a", 100.0, purchase_date=date(2023, 3, 1)),
        make_asset("b", 200.0, purchase_date=date(2024, 5, 1)),
        make_asset("c", 50.0, purchase_date=date(2023, 9, 1)),
        make_asset("d", 1000.0, purchase_date=date(2024, 1, 1), currency="INR"),
    ]
    rows = yearly_contributions(assets, CurrencyConfig(inr_to_aed=0.05))
    assert [row.year for row in rows] == [2024, 2023]
    assert [row.amount for row in rows] == [pytest.approx(250.0), pytest.approx(150.0)]


def test_growth_timeline_is_cumulative_with_value_on_latest_year(make_asset, as_of):
    assets = [
        make_asset("a", 100.0, purchase_date=date(2022, 3, 1)),
        make_asset("b", 200.0, 250.0, purchase_date=date(2024, 3, 1)),
    ]
    points = growth_timeline(assets, as_of)
    assert [point.year for point in points] == [2022, 2024, 2025]
    assert [point.invested for point in points] == [100.0, 300.0, 300.0]
    assert [point.current_value for point in points] == [None, None, 350.0]


def test_growth_timeline_empty(as_of):
    assert growth_timeline([], as_of) == []


def test_next_sip_due_date_clamps_to_month_end(as_of):
    assert next_sip_due_date(31, date(2025, 2, 10)) == date(2025, 2, 28)
    assert next_sip_due_date(5, date(2025, 12, 10)) == date(2026, 1, 5)
    assert next_sip_due_date(10, date(2025, 3, 10)) == date(2025, 3, 10)
    assert next_sip_due_date(None, as_of) is None


def test_upcoming_sips_this_month_only_and_active(make_asset):
    today = date(2025, 1, 10)

    def sip(asset_id: str, day: int, amount: float, status: str):
        return make_asset(
            asset_id,
            0.0,
            asset_class=AssetClass.SIP,
            sip_day_of_month=day,
            sip_amount=amount,
            sip_status=status,
        )

    sips = [sip("early", 5, 1000.0, "ACTIVE"), sip("late", 20, 500.0, "active"), sip("paused", 25, 700.0, "PAUSED")]
    due = upcoming_sips(sips, today)
    assert [row.asset_id for row in due] == ["late"]
    assert due[0].days_until(today) == 10
    assert [row.asset_id for row in upcoming_sips(sips, today, this_month_only=False)] == ["late", "early"]
    assert monthly_sip_outflow(sips) == 1500.0


def test_rank_assets_and_leaders(make_asset, as_of):
    assets = [
        make_asset("flat", 1000.0, 1000.0, purchase_date=date(2020, 1, 1)),
        make_asset("winner", 1000.0, 1500.0),
        make_asset("loser", 1000.0, 800.0),
        make_asset("worst", 1000.0, 500.0, purchase_date=date(2025, 5, 20)),
        make_asset("ok", 1000.0, 1100.0),
    ]
    ranked = rank_assets(assets, as_of)
    assert [row.id for row in ranked] == ["winner", "ok", "flat", "loser", "worst"]
    assert [row.rank for row in ranked] == [1, 2, 3, 4, 5]
    assert ranked[0].return_pct == pytest.approx(50.0)
    assert ranked[0].absolute_gain == pytest.approx(500.0)
    assert ranked[-1].cagr_pct is None

    assert [row.id for row in leaders(ranked)] == ["winner", "ok"]
    assert [row.id for row in laggards(ranked)] == ["worst", "loser"]
    assert [row.id for row in laggards(ranked, 1)] == ["worst"]
