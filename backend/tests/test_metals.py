"""Weighted-average cost position engine tests."""

from __future__ import annotations

from datetime import date

import pytest

from asset_tracker.metals import (
    OUNCE_TO_GRAM,
    MetalTransaction,
    instrument_summary,
    metals_summary,
    normalize_transaction,
    process_transaction_history,
    validate_transaction,
)


def _tx(tx_id: str, side: str, day: int, quantity: float, price: float, fees: float = 0.0, **extra) -> MetalTransaction:
    return MetalTransaction(
        id=tx_id,
        instrument_symbol="XAU",
        side=side,
        trade_date=date(2025, 1, day),
        quantity=quantity,
        price=price,
        fees=fees,
        **extra,
    )


def test_buys_blend_into_average_cost_and_sells_realise_against_it():
    history = process_transaction_history(
        [
            _tx("1", "BUY", 1, 10.0, 100.0, fees=10.0),
            _tx("2", "BUY", 2, 10.0, 120.0),
            _tx("3", "SELL", 3, 5.0, 130.0, fees=5.0),
        ]
    )
    first, second, third = history.transactions
    assert first.average_cost_after_aed_per_oz == pytest.approx(101.0)
    assert second.average_cost_after_aed_per_oz == pytest.approx(110.5)
    assert third.realized_pl_this_tx == pytest.approx(645.0 - 5 * 110.5)
    assert third.average_cost_after_aed_per_oz == pytest.approx(110.5)

    position = history.final_position
    assert position.holding_oz == pytest.approx(15.0)
    assert position.cost_basis_aed == pytest.approx(15 * 110.5)
    assert position.total_sold_proceeds_aed == pytest.approx(645.0)


def test_selling_everything_resets_the_position():
    history = process_transaction_history([_tx("1", "BUY", 1, 2.0, 100.0), _tx("2", "SELL", 2, 2.0, 150.0)])
    position = history.final_position
    assert position.holding_oz == 0.0
    assert position.average_cost_aed_per_oz == 0.0
    assert position.realized_pl_aed == pytest.approx(100.0)


def test_gram_inputs_are_converted_to_ounces():
    normalized = normalize_transaction(
        _tx("1", "BUY", 1, OUNCE_TO_GRAM, 10.0, quantity_unit="GRAM", price_unit="AED_PER_GRAM")
    )
    assert normalized.quantity_oz == pytest.approx(1.0)
    assert normalized.price_aed_per_oz == pytest.approx(10.0 * OUNCE_TO_GRAM)
    assert normalized.amount_aed == pytest.approx(10.0 * OUNCE_TO_GRAM)


def test_other_units_pass_through_unchanged():
    normalized = normalize_transaction(_tx("1", "BUY", 1, 25.0, 40.0, quantity_unit="UNITS", price_unit="PER_UNIT"))
    assert normalized.quantity_oz == 25.0
    assert normalized.amount_aed == 1000.0


def test_installments_count_as_buys_and_dividends_as_income():
    history = process_transaction_history(
        [
            _tx("1", "INSTALLMENT", 1, 10.0, 50.0),
            _tx("2", "DIVIDEND", 2, 0.0, 30.0, fees=5.0),
        ]
    )
    position = history.final_position
    assert position.holding_oz == 10.0
    assert position.average_cost_aed_per_oz == 50.0
    assert position.realized_pl_aed == pytest.approx(25.0)
    assert history.transactions[1].realized_pl_this_tx == pytest.approx(25.0)


def test_replay_orders_by_trade_date_and_keeps_entry_order_within_a_day():
    history = process_transaction_history(
        [
            _tx("late", "SELL", 5, 1.0, 200.0),
            _tx("a", "BUY", 2, 1.0, 100.0),
            _tx("b", "BUY", 2, 1.0, 300.0),
        ]
    )
    assert [item.transaction.source.id for item in history.transactions] == ["a", "b", "late"]
    assert history.transactions[-1].realized_pl_this_tx == pytest.approx(0.0)


def test_replay_after_deleting_an_earlier_buy_rebuilds_later_totals():
    ledger = [_tx("1", "BUY", 1, 1.0, 100.0), _tx("2", "BUY", 2, 1.0, 300.0), _tx("3", "SELL", 3, 1.0, 250.0)]
    before = process_transaction_history(ledger).transactions[-1]
    after = process_transaction_history([tx for tx in ledger if tx.id != "1"]).transactions[-1]
    assert before.realized_pl_this_tx == pytest.approx(50.0)
    assert after.realized_pl_this_tx == pytest.approx(-50.0)
    assert after.holding_after_oz == 0.0


def test_instrument_summary_without_price():
    position = process_transaction_history([_tx("1", "BUY", 1, 2.0, 100.0)]).final_position
    summary = instrument_summary("XAU", "Gold", position, None)
    assert summary.current_value_aed is None
    assert summary.holding_grams == pytest.approx(2 * OUNCE_TO_GRAM)
    assert metals_summary([summary]).current_value_aed is None


def test_metals_summary_totals():
    position = process_transaction_history([_tx("1", "BUY", 1, 2.0, 100.0)]).final_position
    summary = metals_summary([instrument_summary("XAU", "Gold", position, 150.0)])
    assert summary.current_value_aed == pytest.approx(300.0)
    assert summary.total_pl_aed == pytest.approx(100.0)
    assert summary.total_return_pct == pytest.approx(50.0)


def _validate(**overrides):
    fields = dict(
        instrument_symbol="XAU",
        side="BUY",
        trade_date=date(2025, 1, 1),
        quantity=1.0,
        quantity_unit="OZ",
        price=100.0,
        price_unit="AED_PER_OZ",
        fees=0.0,
        current_holding_oz=0.0,
        latest_price_per_oz=None,
    )
    fields.update(overrides)
    return validate_transaction(**fields)


def test_validation_rejects_missing_and_non_positive_fields():
    result = _validate(instrument_symbol=None, quantity=0.0, price=-1.0, fees=-2.0)
    assert not result.valid
    assert {error.field for error in result.errors} == {"instrument_symbol", "quantity", "price", "fees"}


def test_validation_rejects_overselling():
    result = _validate(side="SELL", quantity=62.207, quantity_unit="GRAM", current_holding_oz=1.5)
    assert [error.field for error in result.errors] == ["quantity"]
    assert "exceeds current holdings" in result.errors[0].message
    assert result.errors[0].message == "Sell quantity (2.0000 oz) exceeds current holdings (1.5000 oz)"


def test_oversell_message_uses_the_transaction_unit():
    result = _validate(side="SELL", quantity=2.0, quantity_unit="UNITS", current_holding_oz=1.0)
    assert result.errors[0].message == "Sell quantity (2.0000 units) exceeds current holdings (1.0000 units)"


def test_validation_warns_on_price_far_from_market():
    result = _validate(price=10.0, price_unit="AED_PER_OZ", latest_price_per_oz=8000.0)
    assert result.valid
    assert len(result.warnings) == 1
    assert "Check units" in result.warnings[0]
    assert _validate(price=7900.0, latest_price_per_oz=8000.0).warnings == []
