"""Precious-metals position engine.

Quantities are tracked in troy ounces and prices in AED per ounce. Positions
use weighted-average cost: buys blend into the average, sells realise P/L
against it and leave it unchanged.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, List, Optional, Sequence

OUNCE_TO_GRAM = 31.1035
PRICE_DEVIATION_WARNING = 0.3

METAL_NAMES = {"XAU": "Gold", "XAG": "Silver"}

BUY_SIDES = ("BUY", "INSTALLMENT")
GRAM_UNITS = ("G", "GRAM", "GRAMS")
PER_GRAM_PRICE_UNITS = ("AED_PER_GRAM", "AED_PER_G")


def grams_to_oz(grams: float) -> float:
    return grams / OUNCE_TO_GRAM


def oz_to_grams(oz: float) -> float:
    return oz * OUNCE_TO_GRAM


def price_per_gram_to_per_oz(price_per_gram: float) -> float:
    return price_per_gram * OUNCE_TO_GRAM


def price_per_oz_to_per_gram(price_per_oz: float) -> float:
    return price_per_oz / OUNCE_TO_GRAM


@dataclass(frozen=True)
class MetalTransaction:
    """A buy or sell of a metal as entered by the user."""

    id: str
    instrument_symbol: str
    side: str
    trade_date: date
    quantity: float
    quantity_unit: str = "OZ"
    price: float = 0.0
    price_unit: str = "AED_PER_OZ"
    fees: float = 0.0
    notes: Optional[str] = None

    @property
    def is_buy(self) -> bool:
        return self.side.upper() in BUY_SIDES

    @property
    def is_dividend(self) -> bool:
        return self.side.upper() == "DIVIDEND"


@dataclass(frozen=True)
class NormalizedTransaction:
    source: MetalTransaction
    quantity_oz: float
    price_aed_per_oz: float
    amount_aed: float


@dataclass(frozen=True)
class PositionState:
    holding_oz: float = 0.0
    cost_basis_aed: float = 0.0
    average_cost_aed_per_oz: float = 0.0
    total_bought_oz: float = 0.0
    total_bought_cost_aed: float = 0.0
    total_sold_oz: float = 0.0
    total_sold_proceeds_aed: float = 0.0
    realized_pl_aed: float = 0.0


@dataclass(frozen=True)
class PositionedTransaction:
    """A transaction annotated with the running position after it."""

    transaction: NormalizedTransaction
    holding_after_oz: float
    average_cost_after_aed_per_oz: float
    realized_pl_this_tx: float


@dataclass(frozen=True)
class TransactionHistory:
    transactions: List[PositionedTransaction]
    final_position: PositionState


def _canonical_quantity(quantity: float, unit: str | None) -> float:
    return grams_to_oz(quantity) if (unit or "").upper() in GRAM_UNITS else quantity


def _canonical_price(price: float, unit: str | None) -> float:
    return price_per_gram_to_per_oz(price) if (unit or "").upper() in PER_GRAM_PRICE_UNITS else price


def normalize_transaction(tx: MetalTransaction) -> NormalizedTransaction:
    """Express a transaction in ounces and AED/oz and price its cash amount.

    Quantities in any unit other than grams (ounces, shares, fund units) are
    taken as already canonical.
    """

    quantity_oz = _canonical_quantity(tx.quantity, tx.quantity_unit)
    price_per_oz = _canonical_price(tx.price, tx.price_unit)
    gross = quantity_oz * price_per_oz
    if tx.is_dividend:
        # dividends carry their cash amount in ``price``
        amount = tx.price - tx.fees
    elif tx.is_buy:
        amount = gross + tx.fees
    else:
        amount = gross - tx.fees
    return NormalizedTransaction(
        source=tx,
        quantity_oz=quantity_oz,
        price_aed_per_oz=price_per_oz,
        amount_aed=amount,
    )


def process_transaction(
    tx: NormalizedTransaction, position: PositionState
) -> tuple[PositionState, PositionedTransaction]:
    realized = 0.0
    if tx.source.is_dividend:
        realized = tx.amount_aed
        updated = replace(position, realized_pl_aed=position.realized_pl_aed + realized)
    elif tx.source.is_buy:
        holding = position.holding_oz + tx.quantity_oz
        cost_basis = position.cost_basis_aed + tx.amount_aed
        updated = replace(
            position,
            holding_oz=holding,
            cost_basis_aed=cost_basis,
            total_bought_oz=position.total_bought_oz + tx.quantity_oz,
            total_bought_cost_aed=position.total_bought_cost_aed + tx.amount_aed,
            average_cost_aed_per_oz=cost_basis / holding if holding > 0 else 0.0,
        )
    else:
        sold_cost_basis = tx.quantity_oz * position.average_cost_aed_per_oz
        realized = tx.amount_aed - sold_cost_basis
        updated = replace(
            position,
            holding_oz=position.holding_oz - tx.quantity_oz,
            cost_basis_aed=position.cost_basis_aed - sold_cost_basis,
            total_sold_oz=position.total_sold_oz + tx.quantity_oz,
            total_sold_proceeds_aed=position.total_sold_proceeds_aed + tx.amount_aed,
            realized_pl_aed=position.realized_pl_aed + realized,
        )
        if updated.holding_oz <= 0:
            updated = replace(updated, holding_oz=0.0, cost_basis_aed=0.0, average_cost_aed_per_oz=0.0)

    positioned = PositionedTransaction(
        transaction=tx,
        holding_after_oz=updated.holding_oz,
        average_cost_after_aed_per_oz=updated.average_cost_aed_per_oz,
        realized_pl_this_tx=realized,
    )
    return updated, positioned


def process_transaction_history(transactions: Iterable[MetalTransaction]) -> TransactionHistory:
    """Replay transactions in trade-date order, keeping entry order within a day.

    After a deletion the caller replays the remaining transactions so every
    later running total is rebuilt.
    """

    ordered = sorted(transactions, key=lambda tx: tx.trade_date)
    position = PositionState()
    processed: list[PositionedTransaction] = []
    for tx in ordered:
        position, positioned = process_transaction(normalize_transaction(tx), position)
        processed.append(positioned)
    return TransactionHistory(transactions=processed, final_position=position)


@dataclass(frozen=True)
class InstrumentSummary:
    symbol: str
    name: str
    holding_oz: float
    holding_grams: float
    average_cost_aed_per_oz: float
    average_cost_aed_per_gram: float
    cost_basis_aed: float
    current_price_aed_per_oz: Optional[float]
    current_price_aed_per_gram: Optional[float]
    current_value_aed: Optional[float]
    unrealized_pl_aed: Optional[float]
    unrealized_pl_pct: Optional[float]
    realized_pl_aed: float
    total_bought_aed: float
    total_sold_aed: float

    @property
    def break_even_aed_per_oz(self) -> float:
        return self.average_cost_aed_per_oz

    @property
    def break_even_aed_per_gram(self) -> float:
        return self.average_cost_aed_per_gram


@dataclass(frozen=True)
class MetalsSummary:
    total_buys_aed: float
    total_sells_aed: float
    net_cash_invested_aed: float
    current_value_aed: Optional[float]
    total_realized_pl_aed: float
    total_unrealized_pl_aed: Optional[float]
    total_pl_aed: Optional[float]
    total_return_pct: Optional[float]
    instruments: List[InstrumentSummary]


def instrument_summary(
    symbol: str,
    name: str,
    position: PositionState,
    price_aed_per_oz: float | None,
) -> InstrumentSummary:
    price_per_gram = None
    value = None
    unrealized = None
    unrealized_pct = None
    if price_aed_per_oz is not None:
        price_per_gram = price_per_oz_to_per_gram(price_aed_per_oz)
        value = position.holding_oz * price_aed_per_oz
        if position.holding_oz > 0 and position.cost_basis_aed > 0:
            unrealized = value - position.cost_basis_aed
            unrealized_pct = unrealized / position.cost_basis_aed * 100

    return InstrumentSummary(
        symbol=symbol,
        name=name,
        holding_oz=position.holding_oz,
        holding_grams=oz_to_grams(position.holding_oz),
        average_cost_aed_per_oz=position.average_cost_aed_per_oz,
        average_cost_aed_per_gram=price_per_oz_to_per_gram(position.average_cost_aed_per_oz),
        cost_basis_aed=position.cost_basis_aed,
        current_price_aed_per_oz=price_aed_per_oz,
        current_price_aed_per_gram=price_per_gram,
        current_value_aed=value,
        unrealized_pl_aed=unrealized,
        unrealized_pl_pct=unrealized_pct,
        realized_pl_aed=position.realized_pl_aed,
        total_bought_aed=position.total_bought_cost_aed,
        total_sold_aed=position.total_sold_proceeds_aed,
    )


def metals_summary(instruments: Sequence[InstrumentSummary]) -> MetalsSummary:
    """Combine instruments; valuation totals are ``None`` if a held metal is unpriced."""

    buys = sum(item.total_bought_aed for item in instruments)
    sells = sum(item.total_sold_aed for item in instruments)
    realized = sum(item.realized_pl_aed for item in instruments)
    missing_price = any(
        item.holding_oz > 0 and (item.current_value_aed is None or item.unrealized_pl_aed is None)
        for item in instruments
    )

    value: Optional[float] = None
    unrealized: Optional[float] = None
    if not missing_price:
        value = sum(item.current_value_aed or 0.0 for item in instruments)
        unrealized = sum(item.unrealized_pl_aed or 0.0 for item in instruments)

    net_cash = buys - sells
    total_pl = realized + unrealized if unrealized is not None else None
    total_return = total_pl / net_cash * 100 if total_pl is not None and net_cash > 0 else None
    return MetalsSummary(
        total_buys_aed=buys,
        total_sells_aed=sells,
        net_cash_invested_aed=net_cash,
        current_value_aed=value,
        total_realized_pl_aed=realized,
        total_unrealized_pl_aed=unrealized,
        total_pl_aed=total_pl,
        total_return_pct=total_return,
        instruments=list(instruments),
    )


@dataclass(frozen=True)
class ValidationError:
    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    errors: List[ValidationError]
    warnings: List[str]

    @property
    def valid(self) -> bool:
        return not self.errors


def validate_transaction(
    *,
    instrument_symbol: str | None,
    side: str | None,
    trade_date: date | None,
    quantity: float | None,
    quantity_unit: str | None,
    price: float | None,
    price_unit: str | None,
    fees: float | None,
    current_holding_oz: float,
    latest_price_per_oz: float | None,
) -> ValidationResult:
    """Check a metal transaction before it is saved."""

    errors: list[ValidationError] = []
    warnings: list[str] = []

    if not instrument_symbol:
        errors.append(ValidationError("instrument_symbol", "Metal is required"))
    if not side:
        errors.append(ValidationError("side", "Side (Buy/Sell) is required"))
    if trade_date is None:
        errors.append(ValidationError("trade_date", "Date is required"))
    if not quantity or quantity <= 0:
        errors.append(ValidationError("quantity", "Quantity must be greater than 0"))
    if not price or price <= 0:
        errors.append(ValidationError("price", "Price must be greater than 0"))
    if fees is not None and fees < 0:
        errors.append(ValidationError("fees", "Fees cannot be negative"))

    if side and side.upper() == "SELL" and quantity and quantity_unit:
        sell_qty = _canonical_quantity(quantity, quantity_unit)
        if sell_qty > current_holding_oz:
            # grams are compared in ounces; other units are compared as-is
            label = "oz" if quantity_unit.upper() in GRAM_UNITS + ("OZ",) else quantity_unit.lower()
            errors.append(
                ValidationError(
                    "quantity",
                    f"Sell quantity ({sell_qty:,.4f} {label}) exceeds current holdings ({current_holding_oz:,.4f} {label})",
                )
            )

    if price and price_unit and latest_price_per_oz:
        price_per_oz = _canonical_price(price, price_unit)
        deviation = abs((price_per_oz - latest_price_per_oz) / latest_price_per_oz)
        if deviation > PRICE_DEVIATION_WARNING:
            warnings.append(
                f"Price deviates +{deviation * 100:,.2f}% from latest price. Check units (oz vs gram)."
            )

    return ValidationResult(errors=errors, warnings=warnings)


__all__ = [
    "OUNCE_TO_GRAM",
    "METAL_NAMES",
    "InstrumentSummary",
    "MetalTransaction",
    "MetalsSummary",
    "NormalizedTransaction",
    "PositionState",
    "PositionedTransaction",
    "TransactionHistory",
    "ValidationError",
    "ValidationResult",
    "grams_to_oz",
    "instrument_summary",
    "metals_summary",
    "normalize_transaction",
    "oz_to_grams",
    "price_per_gram_to_per_oz",
    "price_per_oz_to_per_gram",
    "process_transaction",
    "process_transaction_history",
    "validate_transaction",
]
