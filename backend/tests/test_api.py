"""End-to-end API tests against a throwaway SQLite database."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.api.dependencies.context import get_db_session
from app.api.routes import api_router
from app.config import get_settings
from app.db.base import Base
from app.db.session import build_engine, build_session_factory

import app.models  # noqa: F401  # pylint: disable=unused-import

USER = {"X-User-Id": "user-1"}
OTHER_USER = {"X-User-Id": "user-2"}


@asynccontextmanager
async def _api(tmp_path: Path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'tracker.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = build_session_factory(engine)

    async def _session():
        async with factory() as session:
            yield session

    application = FastAPI()
    application.include_router(api_router)
    application.dependency_overrides[get_db_session] = _session
    try:
        async with AsyncClient(transport=ASGITransport(app=application), base_url="http://test") as client:
            yield client
    finally:
        await engine.dispose()


async def _create_asset(client: AsyncClient, **fields) -> dict:
    payload = {"asset_class": "shares", "asset_name": "ACME", "purchase_date": "2024-01-10", "total_cost": 1000.0}
    payload.update(fields)
    response = await client.post("/assets", json=payload, headers=USER)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_requests_without_user_are_rejected(tmp_path: Path):
    async with _api(tmp_path) as client:
        response = await client.get("/assets")
        assert response.status_code == 401


@pytest.mark.asyncio
async def test_asset_crud_is_scoped_to_the_user(tmp_path: Path):
    async with _api(tmp_path) as client:
        created = await _create_asset(client, current_value=1200.0, is_current_value_manual=True)
        asset_id = created["id"]
        assert created["effective_value"] == pytest.approx(1200.0)

        assert (await client.get(f"/assets/{asset_id}", headers=OTHER_USER)).status_code == 404
        assert (await client.get("/assets", headers=OTHER_USER)).json() == []

        patched = await client.patch(f"/assets/{asset_id}", json={"current_value": 1500.0}, headers=USER)
        assert patched.status_code == 200
        assert patched.json()["current_value"] == pytest.approx(1500.0)

        assert (await client.delete(f"/assets/{asset_id}", headers=USER)).status_code == 204
        assert (await client.get(f"/assets/{asset_id}", headers=USER)).status_code == 404


@pytest.mark.asyncio
async def test_fixed_deposit_defaults_and_validation(tmp_path: Path):
    async with _api(tmp_path) as client:
        created = await _create_asset(
            client,
            asset_class="fixed_deposit",
            asset_name="Emirates NBD FD",
            total_cost=0.0,
            principal=100_000.0,
            interest_rate=5.0,
            purchase_date="2024-01-01",
            maturity_date="2025-01-01",
        )
        assert created["total_cost"] == pytest.approx(100_000.0)
        assert created["maturity_amount"] == pytest.approx(105_000.0, rel=1e-3)
        assert created["valuation_method"] == "maturity"

        bad = await client.post(
            "/assets",
            json={
                "asset_class": "fixed_deposit",
                "asset_name": "Backwards FD",
                "purchase_date": "2024-06-01",
                "maturity_date": "2024-01-01",
            },
            headers=USER,
        )
        assert bad.status_code == 400


@pytest.mark.asyncio
async def test_deleting_a_transaction_rebuilds_later_rows(tmp_path: Path):
    async with _api(tmp_path) as client:
        asset = await _create_asset(
            client,
            asset_class="precious_metals",
            asset_name="Gold bars",
            quantity_unit="OZ",
            metal_type="XAU",
        )
        url = f"/assets/{asset['id']}/transactions"

        def _tx(side: str, when: str, quantity: float, price: float) -> dict:
            return {
                "transaction_type": side,
                "trade_date": when,
                "quantity": quantity,
                "quantity_unit": "OZ",
                "price": price,
                "price_unit": "AED_PER_OZ",
            }

        assert (await client.post(url, json=_tx("BUY", "2024-01-10", 2, 7000), headers=USER)).status_code == 201
        march = await client.post(url, json=_tx("BUY", "2024-03-01", 1, 7600), headers=USER)
        sell = await client.post(url, json=_tx("SELL", "2024-06-01", 1, 8000), headers=USER)
        assert sell.status_code == 201
        assert sell.json()["transaction"]["realized_pl"] == pytest.approx(800.0)

        oversell = await client.post(url, json=_tx("SELL", "2024-07-01", 5, 8000), headers=USER)
        assert oversell.status_code == 400

        march_id = march.json()["transaction"]["id"]
        assert (await client.delete(f"/transactions/{march_id}", headers=OTHER_USER)).status_code == 404
        assert (await client.delete(f"/transactions/{march_id}", headers=USER)).status_code == 204

        rows = (await client.get(url, headers=USER)).json()
        assert [row["transaction_type"] for row in rows] == ["BUY", "SELL"]
        assert rows[0]["amount"] == pytest.approx(-14_000.0)
        assert rows[1]["holding_after"] == pytest.approx(1.0)
        assert rows[1]["average_cost_after"] == pytest.approx(7000.0)
        assert rows[1]["realized_pl"] == pytest.approx(1000.0)

        refreshed = (await client.get(f"/assets/{asset['id']}", headers=USER)).json()
        assert refreshed["quantity"] == pytest.approx(1.0)


@pytest.mark.asyncio
async def test_ledger_starts_from_the_opening_position(tmp_path: Path):
    async with _api(tmp_path) as client:
        asset = await _create_asset(client, quantity=10.0, total_cost=1000.0)
        url = f"/assets/{asset['id']}/transactions"

        sell = await client.post(
            url, json={"transaction_type": "SELL", "trade_date": "2024-03-01", "quantity": 2, "price": 120}, headers=USER
        )
        assert sell.status_code == 201, sell.text
        assert sell.json()["transaction"]["holding_after"] == pytest.approx(8.0)
        assert sell.json()["transaction"]["realized_pl"] == pytest.approx(40.0)

        buy = await client.post(
            url, json={"transaction_type": "BUY", "trade_date": "2024-04-01", "quantity": 1, "price": 130}, headers=USER
        )
        assert buy.status_code == 201, buy.text
        refreshed = (await client.get(f"/assets/{asset['id']}", headers=USER)).json()
        assert refreshed["quantity"] == pytest.approx(9.0)
        assert refreshed["total_cost"] == pytest.approx(930.0)

        oversell = await client.post(
            url, json={"transaction_type": "SELL", "trade_date": "2024-05-01", "quantity": 20, "price": 130}, headers=USER
        )
        assert oversell.status_code == 400
        assert "(9.0000 units)" in oversell.json()["detail"]

        edit = await client.patch(f"/assets/{asset['id']}", json={"quantity": 50.0}, headers=USER)
        assert edit.status_code == 400

        assert (await client.delete(f"/transactions/{sell.json()['transaction']['id']}", headers=USER)).status_code == 204
        refreshed = (await client.get(f"/assets/{asset['id']}", headers=USER)).json()
        assert refreshed["quantity"] == pytest.approx(11.0)
        assert refreshed["total_cost"] == pytest.approx(1130.0)

        returns = await client.get(f"/assets/{asset['id']}/returns", headers=USER)
        assert returns.status_code == 200


@pytest.mark.asyncio
async def test_unknown_metal_type_is_rejected(tmp_path: Path):
    async with _api(tmp_path) as client:
        response = await client.post(
            "/assets",
            json={
                "asset_class": "precious_metals",
                "asset_name": "Gold coins",
                "purchase_date": "2024-01-10",
                "metal_type": "gold",
            },
            headers=USER,
        )
        assert response.status_code == 422
        silver = await _create_asset(client, asset_class="precious_metals", asset_name="Silver", metal_type="XAG")
        assert silver["metal_type"] == "XAG"

@pytest.mark.asyncio
async def test_overview_and_rebalance(tmp_path: Path):
    async with _api(tmp_path) as client:
        await _create_asset(client, total_cost=500.0, current_value=600.0)
        await _create_asset(client, asset_class="real_estate", asset_name="Flat", total_cost=400.0, current_value=400.0)

        overview = (await client.get("/portfolio/overview", headers=USER)).json()
        assert overview["total_current_value"] == pytest.approx(1000.0)
        assert [row["code"] for row in overview["categories"]] == ["shares", "real_estate"]
        assert overview["concentration_warnings"]

        rebalance = await client.post(
            "/portfolio/rebalance",
            json={"lines": [{"category_code": "shares", "target_pct": 50}, {"category_code": "real_estate", "target_pct": 50}]},
            headers=USER,
        )
        assert rebalance.status_code == 200
        body = rebalance.json()
        assert body["threshold_pct"] == pytest.approx(5.0)
        assert body["breach_count"] == 2
        assert [row["action"] for row in body["rows"]] == ["SELL", "BUY"]


@pytest.mark.asyncio
async def test_snapshot_upsert_is_idempotent(tmp_path: Path):
    async with _api(tmp_path) as client:
        await _create_asset(client, total_cost=1000.0, current_value=1200.0)
        liability = await client.post("/liabilities", json={"name": "Car loan", "outstanding": 200.0}, headers=USER)
        assert liability.status_code == 201

        first = await client.post("/snapshots", headers=USER)
        second = await client.post("/snapshots", headers=USER)
        assert first.status_code == second.status_code == 201
        assert second.json()["net_worth"] == pytest.approx(1000.0)

        history = (await client.get("/snapshots", headers=USER)).json()
        assert len(history) == 1
        assert history[0]["total_liabilities"] == pytest.approx(200.0)


@pytest.mark.asyncio
async def test_cron_snapshot_run_requires_secret(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SNAPSHOT_CRON_SECRET", "s3cret")
    get_settings.cache_clear()
    try:
        async with _api(tmp_path) as client:
            await _create_asset(client)
            assert (await client.post("/snapshots/run")).status_code == 401
            response = await client.post("/snapshots/run", headers={"Authorization": "Bearer s3cret"})
            assert response.status_code == 200
            assert response.json()["results"] == [{"user_id": "user-1", "status": "ok"}]
    finally:
        get_settings.cache_clear()


@pytest.mark.asyncio
async def test_goals_fall_back_to_defaults_until_replaced(tmp_path: Path):
    async with _api(tmp_path) as client:
        defaults = (await client.get("/analytics/goals", headers=USER)).json()
        assert len(defaults) >= 1

        goals = [{"key": "house", "label": "House deposit", "target_amount": 200000, "years": 5}]
        assert (await client.put("/analytics/goals", json=goals, headers=USER)).status_code == 200
        stored = (await client.get("/analytics/goals", headers=USER)).json()
        assert [item["goal"]["key"] for item in stored] == ["house"]

        duplicate = await client.put("/analytics/goals", json=goals * 2, headers=USER)
        assert duplicate.status_code == 400


@pytest.mark.asyncio
async def test_xirr_and_cagr_endpoints(tmp_path: Path):
    async with _api(tmp_path) as client:
        xirr = await client.post(
            "/analytics/xirr",
            json={"cash_flows": [{"date": "2020-01-01", "amount": -1000}, {"date": "2021-01-01", "amount": 1100}]},
        )
        assert xirr.status_code == 200
        assert xirr.json()["status"] == "converged"
        assert xirr.json()["rate"] == pytest.approx(0.1, abs=0.002)

        single = await client.post("/analytics/xirr", json={"cash_flows": [{"date": "2020-01-01", "amount": -1000}]})
        assert single.json() == {"status": "insufficient_data", "rate": None, "display": "—"}

        cagr = await client.post("/analytics/cagr", json={"begin_value": 1000, "end_value": 2000, "years": 10})
        assert cagr.json()["rate"] == pytest.approx(0.0718, abs=1e-4)

        projections = await client.get("/analytics/projections", params={"corpus": 100000})
        rows = projections.json()["rows"]
        assert rows[0]["years"] == 5
        assert rows[0]["values"]["8"] == pytest.approx(100000 * 1.08**5)


@pytest.mark.asyncio
async def test_app_factory_bootstraps_schema_on_startup(tmp_path: Path):
    from app.main import create_app

    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'startup.db'}")
    factory = build_session_factory(engine)

    async def _session():
        async with factory() as session:
            yield session

    application = create_app(engine=engine)
    application.dependency_overrides[get_db_session] = _session
    try:
        async with application.router.lifespan_context(application):
            async with AsyncClient(transport=ASGITransport(app=application), base_url="http://test") as client:
                health = await client.get("/health")
                assert health.status_code == 200
                assert health.json()["base_currency"] == "AED"

                created = await _create_asset(client)
                assert created["asset_name"] == "ACME"
    finally:
        await engine.dispose()
