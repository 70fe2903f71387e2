"""Pydantic schemas for daily net-worth snapshots."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class PortfolioSnapshotSchema(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "snapshot_date": "2025-01-03",
                "total_value": 412500.0,
                "total_invested": 380000.0,
                "total_liabilities": 25000.0,
                "net_worth": 387500.0,
            }
        },
    )

    snapshot_date: date
    total_value: float
    total_invested: float
    total_liabilities: float
    net_worth: float


class SnapshotRunItem(BaseModel):
    user_id: str
    status: str


class SnapshotRunResponse(BaseModel):
    run_date: date
    results: list[SnapshotRunItem] = Field(default_factory=list)


__all__ = ["PortfolioSnapshotSchema", "SnapshotRunItem", "SnapshotRunResponse"]
