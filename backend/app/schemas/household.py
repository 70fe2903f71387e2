"""Schemas for per-user settings and liabilities."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserSettingsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    display_currency: str = Field(default="AED", pattern="^(AED|INR|USD)$")
    usd_to_aed_rate: float | None = Field(default=None, gt=0)
    inr_to_aed_rate: float | None = Field(default=None, gt=0)
    rebalance_threshold_pct: float = Field(default=5.0, ge=1, le=50)


class LiabilityCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    outstanding: float = Field(..., ge=0)
    currency: str = Field(default="AED", pattern="^(AED|INR|USD)$")
    is_active: bool = True


class LiabilitySchema(LiabilityCreateRequest):
    model_config = ConfigDict(from_attributes=True)

    id: int


__all__ = ["LiabilityCreateRequest", "LiabilitySchema", "UserSettingsSchema"]
