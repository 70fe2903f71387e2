"""Allocation drift against a target profile."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from .aggregation import PortfolioOverview

DEFAULT_THRESHOLD_PCT = 5.0


class RebalanceAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


@dataclass(frozen=True)
class AllocationTargetLine:
    category_code: str
    target_pct: float
    min_pct: float = 0.0
    max_pct: float = 100.0


@dataclass(frozen=True)
class DriftRow:
    category_code: str
    label: str
    current_pct: float
    target_pct: float
    drift: float
    current_value: float
    target_value: float
    action: RebalanceAction
    amount: float
    breached: bool


def compute_drift(
    overview: PortfolioOverview,
    lines: Iterable[AllocationTargetLine],
    threshold_pct: float = DEFAULT_THRESHOLD_PCT,
) -> List[DriftRow]:
    """Compare current category weights with the targets.

    A line is breached when its drift exceeds the threshold or its weight falls
    outside the ``min_pct``/``max_pct`` band. Empty portfolios yield no rows.
    """

    total = overview.total_current_value
    if total <= 0:
        return []

    rows: list[DriftRow] = []
    for line in lines:
        category = overview.category(line.category_code)
        current_value = category.current_value if category else 0.0
        current_pct = current_value / total * 100
        target_value = line.target_pct / 100 * total
        drift = current_pct - line.target_pct
        if drift > threshold_pct:
            action = RebalanceAction.SELL
        elif drift < -threshold_pct:
            action = RebalanceAction.BUY
        else:
            action = RebalanceAction.HOLD
        rows.append(
            DriftRow(
                category_code=line.category_code,
                label=category.label if category else line.category_code,
                current_pct=current_pct,
                target_pct=line.target_pct,
                drift=drift,
                current_value=current_value,
                target_value=target_value,
                action=action,
                amount=abs(current_value - target_value),
                breached=abs(drift) > threshold_pct or current_pct < line.min_pct or current_pct > line.max_pct,
            )
        )
    return rows


__all__ = ["AllocationTargetLine", "DEFAULT_THRESHOLD_PCT", "DriftRow", "RebalanceAction", "compute_drift"]
