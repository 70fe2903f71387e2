"""Schemas for metal and forex quotes."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class MetalQuoteSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    usd_per_oz: float
    aed_per_oz: float
    aed_per_gram: float


class MetalPricesSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    xau: MetalQuoteSchema | None = None
    xag: MetalQuoteSchema | None = None
    last_updated: datetime | None = None
    source: str


class ForexSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    usd_aed: float
    inr_aed: float
    aed_usd: float
    aed_inr: float
    last_updated: datetime
    source: str


class PriceBoardSchema(BaseModel):
    metals: MetalPricesSchema
    forex: ForexSchema


__all__ = ["ForexSchema", "MetalPricesSchema", "MetalQuoteSchema", "PriceBoardSchema"]
