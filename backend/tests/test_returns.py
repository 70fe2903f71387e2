"""XIRR and CAGR solver tests."""

from __future__ import annotations

from datetime import date

import pytest

from asset_tracker import returns
from asset_tracker.models import CashFlow
from asset_tracker.returns import XirrStatus, cagr, format_rate, holding_cagr, solve_xirr, xirr


def test_xirr_one_year_ten_percent():
    flows = [CashFlow(date(2023, 1, 1), -1000.0), CashFlow(date(2024, 1, 1), 1100.0)]
    result = solve_xirr(flows)
    assert result.status is XirrStatus.CONVERGED
    assert result.ok
    assert result.rate == pytest.approx(0.10, abs=0.001)


def test_xirr_sorts_flows_by_date():
    flows = [
        CashFlow(date(2024, 1, 1), 1100.0),
        CashFlow(date(2023, 1, 1), -1000.0),
    ]
    assert xirr(flows) == pytest.approx(0.10, abs=0.001)


def test_xirr_with_intermediate_contributions():
    flows = [
        CashFlow(date(2022, 1, 1), -1000.0),
        CashFlow(date(2023, 1, 1), -1000.0),
        CashFlow(date(2024, 1, 1), 2300.0),
    ]
    rate = xirr(flows)
    assert rate is not None
    npv = sum(flow.amount / (1 + rate) ** ((flow.date - flows[0].date).days / 365.25) for flow in flows)
    assert abs(npv) < 1.0


def test_single_flow_is_insufficient_data():
    result = solve_xirr([CashFlow(date(2023, 1, 1), -1000.0)])
    assert result.status is XirrStatus.INSUFFICIENT_DATA
    assert result.rate is None
    assert xirr([]) is None


def test_all_outflows_do_not_converge():
    flows = [CashFlow(date(2023, 1, 1), -1000.0), CashFlow(date(2024, 1, 1), -1000.0)]
    result = solve_xirr(flows)
    assert result.status is XirrStatus.DID_NOT_CONVERGE
    assert result.rate is None
    assert not result.ok


def test_same_day_flows_stall_the_derivative():
    flows = [CashFlow(date(2023, 1, 1), -1000.0), CashFlow(date(2023, 1, 1), 1100.0)]
    assert solve_xirr(flows).status is XirrStatus.DID_NOT_CONVERGE



def test_exhausted_iterations_keep_an_estimate_close_to_zero_npv(monkeypatch):
    monkeypatch.setattr(returns, "MAX_ITERATIONS", 1)
    flows = [CashFlow(date(2023, 1, 1), -1000.0), CashFlow(date(2024, 1, 1), 1120.0)]
    result = solve_xirr(flows)
    assert result.status is XirrStatus.CONVERGED
    assert result.rate == pytest.approx(0.12, abs=0.001)


def test_exhausted_iterations_reject_an_estimate_far_from_zero_npv(monkeypatch):
    monkeypatch.setattr(returns, "MAX_ITERATIONS", 1)
    flows = [CashFlow(date(2023, 1, 1), -1000.0), CashFlow(date(2024, 1, 1), 2000.0)]
    result = solve_xirr(flows)
    assert result.status is XirrStatus.DID_NOT_CONVERGE
    assert result.rate is None

def test_cagr_doubling_over_ten_years():
    assert cagr(1000.0, 2000.0, 10) == pytest.approx(0.0718, abs=1e-4)
    assert cagr(1000.0, 2000.0, 10) == pytest.approx(2 ** 0.1 - 1)


@pytest.mark.parametrize("begin, end, years", [(0.0, 2000.0, 10), (1000.0, 0.0, 10), (1000.0, 2000.0, 0), (-5.0, 10.0, 1)])
def test_cagr_undefined_inputs(begin, end, years):
    assert cagr(begin, end, years) is None


def test_holding_cagr_needs_thirty_days():
    assert holding_cagr(1000.0, 1100.0, date(2025, 1, 1), date(2025, 1, 20)) is None
    assert holding_cagr(1000.0, 1100.0, date(2024, 1, 1), date(2025, 1, 1)) == pytest.approx(
        1.1 ** (365.25 / 366) - 1
    )


def test_format_rate():
    assert format_rate(0.1234) == "12.34%"
    assert format_rate(None) == "—"
