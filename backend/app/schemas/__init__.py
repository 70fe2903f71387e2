"""Pydantic schema exports."""

from .analytics import (
    CagrRequest,
    CagrResponse,
    CashFlowSchema,
    GoalProgressSchema,
    GoalProjectionSchema,
    GoalSchema,
    ProjectionResponse,
    ProjectionRowSchema,
    XirrRequest,
    XirrResponse,
)
from .assets import (
    AssetCreateRequest,
    AssetReturnsSchema,
    AssetSchema,
    AssetUpdateRequest,
    TransactionCreateRequest,
    TransactionResultSchema,
    TransactionSchema,
)
from .portfolio import (
    AllocationTargetLineSchema,
    CashFlowReportSchema,
    DriftRowSchema,
    ExposureRowSchema,
    LeaderboardSchema,
    OverviewSchema,
    PortfolioSummarySchema,
    RankedAssetSchema,
    RebalanceRequest,
    RebalanceResponse,
    SipDueSchema,
    TimelinePointSchema,
    UpcomingMaturitySchema,
)
from .household import LiabilityCreateRequest, LiabilitySchema, UserSettingsSchema
from .prices import ForexSchema, MetalPricesSchema, MetalQuoteSchema, PriceBoardSchema
from .snapshots import PortfolioSnapshotSchema, SnapshotRunItem, SnapshotRunResponse

__all__ = [
    "AllocationTargetLineSchema",
    "AssetCreateRequest",
    "AssetReturnsSchema",
    "AssetSchema",
    "AssetUpdateRequest",
    "CagrRequest",
    "CagrResponse",
    "CashFlowReportSchema",
    "CashFlowSchema",
    "DriftRowSchema",
    "ExposureRowSchema",
    "ForexSchema",
    "GoalProgressSchema",
    "GoalProjectionSchema",
    "GoalSchema",
    "LeaderboardSchema",
    "LiabilityCreateRequest",
    "LiabilitySchema",
    "MetalPricesSchema",
    "MetalQuoteSchema",
    "OverviewSchema",
    "PortfolioSnapshotSchema",
    "PortfolioSummarySchema",
    "PriceBoardSchema",
    "ProjectionResponse",
    "ProjectionRowSchema",
    "RankedAssetSchema",
    "RebalanceRequest",
    "RebalanceResponse",
    "SipDueSchema",
    "SnapshotRunItem",
    "SnapshotRunResponse",
    "TimelinePointSchema",
    "TransactionCreateRequest",
    "TransactionResultSchema",
    "TransactionSchema",
    "UpcomingMaturitySchema",
    "UserSettingsSchema",
    "XirrRequest",
    "XirrResponse",
]
