"""Schemas for return calculations and goal projections."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class CashFlowSchema(BaseModel):
    date: dt.date
    amount: float = Field(..., description="Negative for money invested, positive for money returned")


class XirrRequest(BaseModel):
    cash_flows: list[CashFlowSchema] = Field(default_factory=list)


class XirrResponse(BaseModel):
    status: str
    rate: float | None = None
    display: str


class CagrRequest(BaseModel):
    begin_value: float
    end_value: float
    years: float


class CagrResponse(BaseModel):
    rate: float | None = None
    display: str


class ProjectionRowSchema(BaseModel):
    years: int
    values: dict[str, float]


class ProjectionResponse(BaseModel):
    corpus: float
    rates: list[float]
    rows: list[ProjectionRowSchema]


class GoalProgressSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rate_pct: float
    projected: float
    on_track: bool
    progress_pct: float


class GoalSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    label: str
    target_amount: float = Field(..., gt=0)
    years: int = Field(..., ge=1, le=60)


class GoalProjectionSchema(BaseModel):
    goal: GoalSchema
    corpus: float
    progress: list[GoalProgressSchema]


__all__ = [
    "CagrRequest",
    "CagrResponse",
    "CashFlowSchema",
    "GoalProgressSchema",
    "GoalProjectionSchema",
    "GoalSchema",
    "ProjectionResponse",
    "ProjectionRowSchema",
    "XirrRequest",
    "XirrResponse",
]
