import asyncio
import inspect
import pathlib
import sys
from datetime import date
from typing import Any, Callable

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from asset_tracker.fx import CurrencyConfig  # noqa: E402
from asset_tracker.models import Asset, AssetClass  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the suite."""

    config.addinivalue_line("markers", "asyncio: mark test as running in an asyncio event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        loop = asyncio.new_event_loop()
        # funcargs also carries fixtures the requested ones depend on
        arguments = {name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames}
        try:
            asyncio.set_event_loop(loop)
            loop.run_until_complete(test_function(**arguments))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


@pytest.fixture
def as_of() -> date:
    return date(2025, 6, 1)


@pytest.fixture
def currency_config() -> CurrencyConfig:
    return CurrencyConfig(usd_to_aed=3.6725, inr_to_aed=0.044)


@pytest.fixture
def make_asset() -> Callable[..., Asset]:
    """Factory for core assets: ``make_asset("gold", cost, value, asset_class=..., ...)``."""

    def _make(asset_id: str, total_cost: float, current_value: float | None = None, **fields: Any) -> Asset:
        fields.setdefault("asset_class", AssetClass.SHARES)
        fields.setdefault("asset_name", asset_id.upper())
        fields.setdefault("currency", "AED")
        fields.setdefault("purchase_date", date(2024, 1, 1))
        return Asset(id=asset_id, total_cost=total_cost, current_value=current_value, **fields)

    return _make
