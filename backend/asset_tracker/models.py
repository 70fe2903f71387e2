"""Domain models used by the multi-asset valuation library."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class AssetClass(str, Enum):
    PRECIOUS_METALS = "precious_metals"
    REAL_ESTATE = "real_estate"
    FIXED_DEPOSIT = "fixed_deposit"
    SIP = "sip"
    MUTUAL_FUND = "mutual_fund"
    SHARES = "shares"

    @property
    def label(self) -> str:
        return ASSET_CLASS_LABELS[self]


ASSET_CLASS_LABELS = {
    AssetClass.PRECIOUS_METALS: "Precious Metals",
    AssetClass.REAL_ESTATE: "Real Estate",
    AssetClass.FIXED_DEPOSIT: "Fixed Deposit",
    AssetClass.SIP: "SIP",
    AssetClass.MUTUAL_FUND: "Mutual Fund",
    AssetClass.SHARES: "Shares/Stocks",
}

QUANTITY_UNITS = {
    AssetClass.PRECIOUS_METALS: ("grams", "oz"),
    AssetClass.REAL_ESTATE: ("sqft", "sqm", "units"),
    AssetClass.FIXED_DEPOSIT: ("units",),
    AssetClass.SIP: ("units",),
    AssetClass.MUTUAL_FUND: ("units",),
    AssetClass.SHARES: ("shares",),
}


class Currency(str, Enum):
    AED = "AED"
    INR = "INR"
    USD = "USD"


@dataclass(frozen=True)
class Asset:
    """A single user holding.

    Only ``total_cost`` is mandatory for valuation; every class specific field
    is optional and consulted by the engine that understands it.
    """

    id: str
    asset_class: AssetClass
    asset_name: str
    currency: str
    purchase_date: date
    total_cost: float
    category_code: Optional[str] = None
    quantity: Optional[float] = None
    quantity_unit: Optional[str] = None
    purchase_price_per_unit: Optional[float] = None
    current_value: Optional[float] = None
    is_current_value_manual: bool = False
    # precious metals
    metal_type: Optional[str] = None
    # real estate
    location: Optional[str] = None
    area_sqft: Optional[float] = None
    rental_income_monthly: Optional[float] = None
    # fixed deposit
    bank_name: Optional[str] = None
    principal: Optional[float] = None
    interest_rate: Optional[float] = None
    maturity_date: Optional[date] = None
    maturity_amount: Optional[float] = None
    # sip / mutual fund / shares
    instrument_name: Optional[str] = None
    nav_or_price: Optional[float] = None
    sip_frequency: Optional[str] = None
    sip_amount: Optional[float] = None
    sip_day_of_month: Optional[int] = None
    sip_status: Optional[str] = None
    notes: Optional[str] = None

    @property
    def group_code(self) -> str:
        """Return the category code used for grouping, falling back to the class."""

        return self.category_code or self.asset_class.value

    @property
    def is_fixed_deposit(self) -> bool:
        return self.asset_class is AssetClass.FIXED_DEPOSIT or self.category_code == "fixed_deposit"


@dataclass(frozen=True)
class CashFlow:
    """A dated, signed cash movement. Negative values are investments."""

    date: date
    amount: float


@dataclass(frozen=True)
class Liability:
    name: str
    outstanding: float
    currency: str = "AED"
    is_active: bool = True


@dataclass(frozen=True)
class MutualFundHolding:
    scheme_name: str
    invested_amount: float
    current_value: Optional[float] = None
    is_active: bool = True


__all__ = [
    "AssetClass",
    "ASSET_CLASS_LABELS",
    "QUANTITY_UNITS",
    "Currency",
    "Asset",
    "CashFlow",
    "Liability",
    "MutualFundHolding",
]
