"""Pydantic schemas for assets and their transaction ledger."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.models.assets import TRANSACTION_TYPES

AssetClassLiteral = Literal["precious_metals", "real_estate", "fixed_deposit", "sip", "mutual_fund", "shares"]
CURRENCY_PATTERN = "^(AED|INR|USD)$"
METAL_TYPE_PATTERN = "^(XAU|XAG)$"


class AssetFields(BaseModel):
    category_code: str | None = None
    quantity: float | None = Field(default=None, ge=0)
    quantity_unit: str | None = None
    purchase_price_per_unit: float | None = Field(default=None, ge=0)
    current_value: float | None = None
    is_current_value_manual: bool = False
    metal_type: str | None = None
    location: str | None = None
    area_sqft: float | None = None
    rental_income_monthly: float | None = None
    bank_name: str | None = None
    principal: float | None = Field(default=None, ge=0)
    interest_rate: float | None = Field(default=None, ge=0)
    maturity_date: date | None = None
    maturity_amount: float | None = None
    instrument_name: str | None = None
    scheme_code: str | None = None
    nav_or_price: float | None = None
    sip_frequency: str | None = None
    sip_amount: float | None = Field(default=None, ge=0)
    sip_day_of_month: int | None = Field(default=None, ge=1, le=31)
    sip_status: str | None = None
    notes: str | None = None


class AssetCreateRequest(AssetFields):
    asset_class: AssetClassLiteral = Field(..., examples=["fixed_deposit"])
    asset_name: str = Field(..., min_length=1, max_length=255)
    currency: str = Field(default="AED", pattern=CURRENCY_PATTERN)
    purchase_date: date
    total_cost: float = Field(default=0.0, ge=0)
    metal_type: str | None = Field(default=None, pattern=METAL_TYPE_PATTERN)


class AssetUpdateRequest(BaseModel):
    """Partial update; only fields present in the payload are applied."""

    asset_name: str | None = Field(default=None, min_length=1, max_length=255)
    category_code: str | None = None
    currency: str | None = Field(default=None, pattern=CURRENCY_PATTERN)
    purchase_date: date | None = None
    total_cost: float | None = Field(default=None, ge=0)
    quantity: float | None = Field(default=None, ge=0)
    current_value: float | None = None
    is_current_value_manual: bool | None = None
    principal: float | None = Field(default=None, ge=0)
    interest_rate: float | None = Field(default=None, ge=0)
    maturity_date: date | None = None
    maturity_amount: float | None = None
    nav_or_price: float | None = None
    sip_amount: float | None = Field(default=None, ge=0)
    sip_day_of_month: int | None = Field(default=None, ge=1, le=31)
    sip_status: str | None = None
    notes: str | None = None


class AssetSchema(AssetFields):
    model_config = ConfigDict(from_attributes=True)

    id: int
    asset_class: str
    asset_name: str
    currency: str
    purchase_date: date
    total_cost: float
    effective_value: float | None = None
    valuation_method: str | None = None
    maturity_label: str | None = None
    created_at: datetime | None = None


class TransactionCreateRequest(BaseModel):
    transaction_type: str = Field(..., pattern="^(" + "|".join(TRANSACTION_TYPES) + ")$", examples=["BUY"])
    trade_date: date
    quantity: float = Field(default=0.0, ge=0)
    quantity_unit: str = Field(default="UNITS", examples=["OZ", "GRAM", "UNITS"])
    price: float = Field(default=0.0, ge=0)
    price_unit: str = Field(default="PER_UNIT", examples=["AED_PER_OZ", "AED_PER_GRAM", "PER_UNIT"])
    fees: float = Field(default=0.0, ge=0)
    notes: str | None = None


class TransactionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    asset_id: int
    transaction_type: str
    trade_date: date
    quantity: float
    quantity_unit: str
    price: float
    price_unit: str
    fees: float
    amount: float
    notes: str | None = None
    holding_after: float
    average_cost_after: float
    realized_pl: float


class TransactionResultSchema(BaseModel):
    transaction: TransactionSchema
    warnings: list[str] = Field(default_factory=list)


class AssetReturnsSchema(BaseModel):
    asset_id: int
    xirr_status: str
    xirr: float | None = None
    xirr_display: str
    cagr: float | None = None
    cagr_display: str


__all__ = [
    "AssetCreateRequest",
    "AssetReturnsSchema",
    "AssetSchema",
    "AssetUpdateRequest",
    "TransactionCreateRequest",
    "TransactionResultSchema",
    "TransactionSchema",
]
