"""Valuation and returns library for the multi-asset tracker."""

from .aggregation import PortfolioOverview, build_overview, resolve_current_value
from .fixed_deposit import effective_current_value, maturity_status
from .fx import CurrencyConfig, convert, format_amount
from .models import Asset, AssetClass, CashFlow
from .projections import evaluate_goal, project_corpus
from .returns import cagr, solve_xirr, xirr

__all__ = [
    "Asset",
    "AssetClass",
    "CashFlow",
    "CurrencyConfig",
    "PortfolioOverview",
    "build_overview",
    "cagr",
    "convert",
    "effective_current_value",
    "evaluate_goal",
    "format_amount",
    "maturity_status",
    "project_corpus",
    "resolve_current_value",
    "solve_xirr",
    "xirr",
]
