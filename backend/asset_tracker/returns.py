"""Rate-of-return calculations: XIRR for irregular cash flows and CAGR."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Sequence

from .models import CashFlow

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.25
INITIAL_GUESS = 0.10
MAX_ITERATIONS = 100
STEP_TOLERANCE = 1e-7
DERIVATIVE_FLOOR = 1e-10
NPV_TOLERANCE = 1.0
RATE_LOWER_BOUND = -1.0
RATE_UPPER_BOUND = 10.0


class XirrStatus(str, Enum):
    CONVERGED = "converged"
    INSUFFICIENT_DATA = "insufficient_data"
    DID_NOT_CONVERGE = "did_not_converge"


@dataclass(frozen=True)
class XirrResult:
    status: XirrStatus
    rate: Optional[float] = None

    @property
    def ok(self) -> bool:
        return self.status is XirrStatus.CONVERGED


def _year_fractions(flows: Sequence[CashFlow]) -> list[tuple[float, float]]:
    start = flows[0].date
    return [((flow.date - start).days / DAYS_PER_YEAR, flow.amount) for flow in flows]


def _npv(rate: float, terms: Sequence[tuple[float, float]]) -> float:
    return sum(amount / (1 + rate) ** t for t, amount in terms)


def _dnpv(rate: float, terms: Sequence[tuple[float, float]]) -> float:
    return sum(-t * amount / (1 + rate) ** (t + 1) for t, amount in terms if t != 0)


def solve_xirr(cash_flows: Sequence[CashFlow]) -> XirrResult:
    """Solve for the annualised rate at which the cash flows' NPV is zero.

    Newton-Raphson from 10%. The iteration is abandoned when the derivative
    flattens out or the estimate leaves (-100%, 1000%).
    """

    if len(cash_flows) < 2:
        return XirrResult(XirrStatus.INSUFFICIENT_DATA)

    terms = _year_fractions(sorted(cash_flows, key=lambda flow: flow.date))
    guess = INITIAL_GUESS
    for iteration in range(MAX_ITERATIONS):
        value = _npv(guess, terms)
        slope = _dnpv(guess, terms)
        if abs(slope) < DERIVATIVE_FLOOR:
            logger.debug("XIRR derivative vanished at iteration %s (rate=%s)", iteration, guess)
            return XirrResult(XirrStatus.DID_NOT_CONVERGE)
        estimate = guess - value / slope
        if abs(estimate - guess) < STEP_TOLERANCE:
            return XirrResult(XirrStatus.CONVERGED, estimate)
        guess = estimate
        if not RATE_LOWER_BOUND < guess < RATE_UPPER_BOUND:
            logger.debug("XIRR diverged at iteration %s (rate=%s)", iteration, guess)
            return XirrResult(XirrStatus.DID_NOT_CONVERGE)

    if abs(_npv(guess, terms)) < NPV_TOLERANCE:
        return XirrResult(XirrStatus.CONVERGED, guess)
    return XirrResult(XirrStatus.DID_NOT_CONVERGE)


def xirr(cash_flows: Sequence[CashFlow]) -> float | None:
    """Return the XIRR as a fraction, or ``None`` when it cannot be computed."""

    return solve_xirr(cash_flows).rate


def cagr(begin_value: float, end_value: float, years: float) -> float | None:
    if begin_value <= 0 or end_value <= 0 or years <= 0:
        return None
    return (end_value / begin_value) ** (1 / years) - 1


def holding_cagr(invested: float, current: float, purchase_date: date, as_of: date) -> float | None:
    """CAGR of a single holding; ``None`` for positions held under 30 days."""

    days = (as_of - purchase_date).days
    if days < 30:
        return None
    return cagr(invested, current, days / DAYS_PER_YEAR)


def format_rate(rate: float | None) -> str:
    if rate is None:
        return "—"
    return f"{rate * 100:.2f}%"


__all__ = [
    "XirrResult",
    "XirrStatus",
    "cagr",
    "format_rate",
    "holding_cagr",
    "solve_xirr",
    "xirr",
]
