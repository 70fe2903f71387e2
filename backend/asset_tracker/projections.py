"""Compound-growth projections of a portfolio corpus and goal tracking."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

GROWTH_RATES: tuple[float, ...] = (8.0, 10.0, 12.0)
HORIZONS: tuple[int, ...] = (5, 10, 15, 20, 25, 30)


@dataclass(frozen=True)
class Goal:
    key: str
    label: str
    target_amount: float
    years: int


DEFAULT_GOALS: tuple[Goal, ...] = (
    Goal("education", "Children's Education", 500_000, 10),
    Goal("retirement", "Retirement Fund", 3_000_000, 20),
    Goal("savings", "Long-term Savings", 1_000_000, 15),
)


@dataclass(frozen=True)
class GoalProgress:
    rate_pct: float
    projected: float
    on_track: bool
    progress_pct: float


@dataclass(frozen=True)
class GoalProjection:
    goal: Goal
    corpus: float
    progress: List[GoalProgress]


def project_corpus(corpus: float, years: float, rate_pct: float) -> float:
    return corpus * (1 + rate_pct / 100) ** years


def projection_table(
    corpus: float,
    rates: Sequence[float] = GROWTH_RATES,
    horizons: Sequence[int] = HORIZONS,
) -> Dict[int, Dict[float, float]]:
    """Projected corpus keyed by horizon, then by growth rate."""

    return {years: {rate: project_corpus(corpus, years, rate) for rate in rates} for years in horizons}


def evaluate_goal(corpus: float, goal: Goal, rate_pct: float) -> GoalProgress:
    projected = project_corpus(corpus, goal.years, rate_pct)
    progress = min(100.0, projected / goal.target_amount * 100) if goal.target_amount > 0 else 100.0
    return GoalProgress(
        rate_pct=rate_pct,
        projected=projected,
        on_track=projected >= goal.target_amount,
        progress_pct=progress,
    )


def goal_projections(
    corpus: float,
    goals: Iterable[Goal] = DEFAULT_GOALS,
    rates: Sequence[float] = GROWTH_RATES,
) -> List[GoalProjection]:
    return [
        GoalProjection(goal=goal, corpus=corpus, progress=[evaluate_goal(corpus, goal, rate) for rate in rates])
        for goal in goals
    ]


__all__ = [
    "DEFAULT_GOALS",
    "GROWTH_RATES",
    "Goal",
    "GoalProgress",
    "GoalProjection",
    "HORIZONS",
    "evaluate_goal",
    "goal_projections",
    "project_corpus",
    "projection_table",
]
