"""CSV export tests."""

from __future__ import annotations

from datetime import date, datetime

from asset_tracker.aggregation import build_overview
from asset_tracker.exports import assets_csv, leaderboard_csv, portfolio_summary_csv, transactions_csv
from asset_tracker.fx import CurrencyConfig
from asset_tracker.metals import MetalTransaction
from asset_tracker.models import Asset, AssetClass
from asset_tracker.reports import rank_assets

AS_OF = date(2025, 6, 1)


def test_transactions_csv_quotes_special_characters():
    tx = MetalTransaction(
        id="1",
        instrument_symbol="XAU",
        side="BUY",
        trade_date=date(2025, 1, 3),
        quantity=1.0,
        price=7000.0,
        notes='Bought "coins", 24k',
    )
    lines = transactions_csv([tx]).splitlines()
    assert lines[0] == "Date,Metal,Side,Quantity,Unit,Price,Price Unit,Fees,Notes"
    assert lines[1] == '2025-01-03,XAU,BUY,1.0,OZ,7000.0,AED_PER_OZ,0.0,"Bought ""coins"", 24k"'


def test_assets_csv_rows():
    asset = Asset(
        id="1",
        asset_class=AssetClass.REAL_ESTATE,
        asset_name="Marina Flat",
        currency="AED",
        purchase_date=date(2020, 5, 1),
        total_cost=1_000_000.0,
        current_value=1_250_000.5,
        notes="line one\nline two",
    )
    body = assets_csv([asset], AS_OF)
    assert body.startswith("Name,Type,Currency,Purchase Date,Total Cost,Current Value,P/L,Notes\n")
    assert 'Marina Flat,Real Estate,AED,2020-05-01,1000000.00,1250000.50,250000.50,"line one\nline two"\n' in body


def test_portfolio_summary_csv_layout():
    assets = [
        Asset("1", AssetClass.SHARES, "ACME", "AED", date(2024, 1, 1), 100.0, current_value=150.0),
        Asset("2", AssetClass.SHARES, "Initech", "AED", date(2024, 1, 1), 200.0, current_value=180.0),
    ]
    overview = build_overview(assets, CurrencyConfig(), AS_OF)
    lines = portfolio_summary_csv(overview, datetime(2025, 6, 1, 9, 30)).splitlines()
    assert lines[:8] == [
        "Portfolio Summary Report",
        "Generated: 2025-06-01 09:30",
        "",
        "Metric,Value (AED)",
        "Total Invested,300.00",
        "Current Value,330.00",
        "Total P/L,30.00",
        "Total P/L %,10.00%",
    ]
    assert lines[-1] == "Shares/Stocks,300.00,330.00,30.00,2"


def test_leaderboard_csv_marks_missing_cagr():
    assets = [Asset("1", AssetClass.SHARES, "New, Co", "AED", date(2025, 5, 25), 100.0, current_value=110.0)]
    lines = leaderboard_csv(rank_assets(assets, AS_OF)).splitlines()
    assert lines[0] == "Rank,Asset,Invested,Current Value,Gain,Return %,CAGR %,Purchase Date"
    assert lines[1] == '1,"New, Co",100.00,110.00,10.00,10.00,N/A,2025-05-25'
