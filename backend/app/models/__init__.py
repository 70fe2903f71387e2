"""Database model exports."""

from .assets import ASSET_CLASSES, TRANSACTION_TYPES, Asset, AssetTransaction
from .household import Goal, Liability, UserSettings
from .snapshot import PortfolioSnapshot

__all__ = [
    "ASSET_CLASSES",
    "TRANSACTION_TYPES",
    "Asset",
    "AssetTransaction",
    "Goal",
    "Liability",
    "PortfolioSnapshot",
    "UserSettings",
]
