"""Asset CRUD and transaction ledger maintenance."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Asset, AssetTransaction
from app.schemas import AssetCreateRequest, AssetUpdateRequest, TransactionCreateRequest
from asset_tracker import models as core
from asset_tracker.fixed_deposit import maturity_amount
from asset_tracker.metals import (
    GRAM_UNITS,
    MetalTransaction,
    PositionState,
    oz_to_grams,
    process_transaction_history,
    validate_transaction,
)

logger = logging.getLogger(__name__)


def to_core_asset(row: Asset) -> core.Asset:
    """Map a database row onto the valuation library's asset record."""

    return core.Asset(
        id=str(row.id),
        asset_class=core.AssetClass(row.asset_class),
        asset_name=row.asset_name,
        currency=row.currency,
        purchase_date=row.purchase_date,
        total_cost=float(row.total_cost or 0.0),
        category_code=row.category_code,
        quantity=row.quantity,
        quantity_unit=row.quantity_unit,
        purchase_price_per_unit=row.purchase_price_per_unit,
        current_value=row.current_value,
        is_current_value_manual=bool(row.is_current_value_manual),
        metal_type=row.metal_type,
        location=row.location,
        area_sqft=row.area_sqft,
        rental_income_monthly=row.rental_income_monthly,
        bank_name=row.bank_name,
        principal=row.principal,
        interest_rate=row.interest_rate,
        maturity_date=row.maturity_date,
        maturity_amount=row.maturity_amount,
        instrument_name=row.instrument_name,
        nav_or_price=row.nav_or_price,
        sip_frequency=row.sip_frequency,
        sip_amount=row.sip_amount,
        sip_day_of_month=row.sip_day_of_month,
        sip_status=row.sip_status,
        notes=row.notes,
    )


def to_ledger_entry(row: AssetTransaction) -> MetalTransaction:
    return MetalTransaction(
        id=str(row.id),
        instrument_symbol=str(row.asset_id),
        side=row.transaction_type,
        trade_date=row.trade_date,
        quantity=float(row.quantity or 0.0),
        quantity_unit=row.quantity_unit,
        price=float(row.price or 0.0),
        price_unit=row.price_unit,
        fees=float(row.fees or 0.0),
        notes=row.notes,
    )


OPENING_ENTRY_ID = "opening"


def opening_entry(asset: Asset, symbol: str | None = None) -> MetalTransaction | None:
    """The quantity and cost entered at creation as a BUY dated on the purchase date."""

    quantity = float(asset.opening_quantity or 0.0)
    if quantity <= 0 or asset.opening_cost is None:
        return None
    unit = asset.quantity_unit or "UNITS"
    return MetalTransaction(
        id=OPENING_ENTRY_ID,
        instrument_symbol=symbol or str(asset.id),
        side="BUY",
        trade_date=asset.purchase_date,
        quantity=quantity,
        quantity_unit=unit,
        price=float(asset.opening_cost) / quantity,
        price_unit="AED_PER_GRAM" if unit.upper() in GRAM_UNITS else "PER_UNIT",
    )


def _record_opening_position(asset: Asset) -> None:
    asset.opening_quantity = asset.quantity if asset.quantity else None
    asset.opening_cost = asset.total_cost


async def _has_ledger(session: AsyncSession, asset_id: int) -> bool:
    result = await session.execute(select(AssetTransaction.id).where(AssetTransaction.asset_id == asset_id).limit(1))
    return result.first() is not None


def _fill_fixed_deposit_defaults(asset: Asset) -> None:
    if asset.asset_class != core.AssetClass.FIXED_DEPOSIT.value:
        return
    if asset.principal and not asset.total_cost:
        asset.total_cost = asset.principal
    if asset.maturity_amount is None:
        asset.maturity_amount = maturity_amount(
            asset.principal, asset.interest_rate, asset.purchase_date, asset.maturity_date
        )


async def list_assets(
    session: AsyncSession,
    user_id: str,
    *,
    asset_class: str | None = None,
) -> list[Asset]:
    stmt = select(Asset).where(Asset.user_id == user_id)
    if asset_class:
        stmt = stmt.where(Asset.asset_class == asset_class)
    result = await session.execute(stmt.order_by(Asset.purchase_date, Asset.id))
    return list(result.scalars().all())


async def get_asset(session: AsyncSession, user_id: str, asset_id: int) -> Asset:
    asset = await session.get(Asset, asset_id)
    if asset is None or asset.user_id != user_id:
        raise LookupError(f"Asset {asset_id} not found")
    return asset


async def create_asset(session: AsyncSession, user_id: str, payload: AssetCreateRequest) -> Asset:
    data = payload.model_dump()
    if data["maturity_date"] and data["maturity_date"] < data["purchase_date"]:
        raise ValueError("Maturity date cannot be before the purchase date")
    asset = Asset(user_id=user_id, **data)
    _fill_fixed_deposit_defaults(asset)
    _record_opening_position(asset)
    session.add(asset)
    await session.commit()
    await session.refresh(asset)
    logger.info("Created %s asset %s for user %s", asset.asset_class, asset.id, user_id)
    return asset


async def update_asset(
    session: AsyncSession,
    user_id: str,
    asset_id: int,
    payload: AssetUpdateRequest,
) -> Asset:
    asset = await get_asset(session, user_id, asset_id)
    changes: dict[str, Any] = payload.model_dump(exclude_unset=True)
    has_ledger = await _has_ledger(session, asset.id)
    if has_ledger and {"quantity", "total_cost"} & changes.keys():
        raise ValueError("Quantity and total cost follow the transaction ledger; post a transaction instead")
    for field, value in changes.items():
        setattr(asset, field, value)
    if "current_value" in changes and "is_current_value_manual" not in changes:
        asset.is_current_value_manual = changes["current_value"] is not None
    if {"principal", "interest_rate", "maturity_date", "purchase_date"} & changes.keys() and (
        "maturity_amount" not in changes
    ):
        asset.maturity_amount = None
    _fill_fixed_deposit_defaults(asset)
    if not has_ledger:
        _record_opening_position(asset)
    elif "purchase_date" in changes:
        await recompute_running_totals(session, asset)
    await session.commit()
    await session.refresh(asset)
    return asset


async def delete_asset(session: AsyncSession, user_id: str, asset_id: int) -> None:
    """Remove an asset together with its transaction history."""

    asset = await get_asset(session, user_id, asset_id)
    await session.execute(delete(AssetTransaction).where(AssetTransaction.asset_id == asset.id))
    await session.delete(asset)
    await session.commit()
    logger.info("Deleted asset %s for user %s", asset_id, user_id)


async def list_transactions(session: AsyncSession, user_id: str, asset_id: int) -> list[AssetTransaction]:
    await get_asset(session, user_id, asset_id)
    result = await session.execute(
        select(AssetTransaction)
        .where(AssetTransaction.asset_id == asset_id)
        .order_by(AssetTransaction.trade_date, AssetTransaction.id)
    )
    return list(result.scalars().all())


async def list_user_transactions(session: AsyncSession, user_id: str) -> list[AssetTransaction]:
    result = await session.execute(
        select(AssetTransaction)
        .where(AssetTransaction.user_id == user_id)
        .order_by(AssetTransaction.trade_date, AssetTransaction.id)
    )
    return list(result.scalars().all())


def _apply_running_totals(asset: Asset, rows: Sequence[AssetTransaction]) -> PositionState:
    by_id = {str(row.id): row for row in rows}
    history = process_transaction_history(_ledger_with_opening(asset, rows))
    for positioned in history.transactions:
        row = by_id.get(positioned.transaction.source.id)
        if row is None:
            continue
        row.holding_after = positioned.holding_after_oz
        row.average_cost_after = positioned.average_cost_after_aed_per_oz
        row.realized_pl = positioned.realized_pl_this_tx
        amount = positioned.transaction.amount_aed
        row.amount = -amount if positioned.transaction.source.is_buy else amount
    position = history.final_position
    if any(row.transaction_type != "DIVIDEND" for row in rows):
        in_grams = (asset.quantity_unit or "").upper() in GRAM_UNITS
        asset.quantity = oz_to_grams(position.holding_oz) if in_grams else position.holding_oz
        asset.total_cost = position.cost_basis_aed
    elif asset.opening_cost is not None:
        asset.quantity = asset.opening_quantity
        asset.total_cost = asset.opening_cost
    return position


def _ledger_with_opening(asset: Asset, rows: Sequence[AssetTransaction]) -> list[MetalTransaction]:
    opening = opening_entry(asset)
    entries = [to_ledger_entry(row) for row in rows]
    return entries if opening is None else [opening, *entries]


async def recompute_running_totals(session: AsyncSession, asset: Asset) -> PositionState:
    """Replay the asset's ledger and rewrite every derived column.

    Flushes but does not commit; callers commit once so the rewrite lands
    together with the change that triggered it.
    """

    result = await session.execute(
        select(AssetTransaction)
        .where(AssetTransaction.asset_id == asset.id)
        .order_by(AssetTransaction.trade_date, AssetTransaction.id)
    )
    position = _apply_running_totals(asset, list(result.scalars().all()))
    await session.flush()
    return position


async def add_transaction(
    session: AsyncSession,
    user_id: str,
    asset_id: int,
    payload: TransactionCreateRequest,
    *,
    latest_price_per_unit: float | None = None,
) -> tuple[AssetTransaction, list[str]]:
    asset = await get_asset(session, user_id, asset_id)
    existing = await list_transactions(session, user_id, asset_id)
    holding = process_transaction_history(_ledger_with_opening(asset, existing)).final_position.holding_oz

    if payload.transaction_type == "DIVIDEND":
        if payload.price <= 0:
            raise ValueError("Dividend amount must be greater than 0")
        warnings: list[str] = []
    else:
        check = validate_transaction(
            instrument_symbol=str(asset.id),
            side=payload.transaction_type,
            trade_date=payload.trade_date,
            quantity=payload.quantity,
            quantity_unit=payload.quantity_unit,
            price=payload.price,
            price_unit=payload.price_unit,
            fees=payload.fees,
            current_holding_oz=holding,
            latest_price_per_oz=latest_price_per_unit,
        )
        if not check.valid:
            raise ValueError("; ".join(error.message for error in check.errors))
        warnings = check.warnings

    tx = AssetTransaction(asset_id=asset.id, user_id=user_id, **payload.model_dump())
    session.add(tx)
    try:
        await session.flush()
        await recompute_running_totals(session, asset)
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    await session.refresh(tx)
    return tx, warnings


async def delete_transaction(session: AsyncSession, user_id: str, transaction_id: int) -> None:
    """Delete a ledger entry and rebuild the running totals of every later entry."""

    tx = await session.get(AssetTransaction, transaction_id)
    if tx is None or tx.user_id != user_id:
        raise LookupError(f"Transaction {transaction_id} not found")
    asset = await get_asset(session, user_id, tx.asset_id)
    try:
        await session.delete(tx)
        await session.flush()
        await recompute_running_totals(session, asset)
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    logger.info("Deleted transaction %s and recomputed asset %s", transaction_id, asset.id)


def asset_cash_flows(
    asset: core.Asset,
    ledger: Sequence[AssetTransaction],
    value: float,
    as_of: date,
    *,
    opening_cost: float | None = None,
) -> list[core.CashFlow]:
    """Dated flows for XIRR: the ledger (or the purchase) plus the current value today.

    ``opening_cost`` is the outlay of the position recorded at creation, which
    the ledger itself does not carry.
    """

    if ledger:
        flows = [core.CashFlow(row.trade_date, float(row.amount)) for row in ledger]
        if opening_cost:
            flows.insert(0, core.CashFlow(asset.purchase_date, -opening_cost))
    else:
        flows = [core.CashFlow(asset.purchase_date, -asset.total_cost)]
    if value > 0:
        flows.append(core.CashFlow(as_of, value))
    return flows


__all__ = [
    "add_transaction",
    "asset_cash_flows",
    "create_asset",
    "delete_asset",
    "delete_transaction",
    "get_asset",
    "list_assets",
    "list_transactions",
    "list_user_transactions",
    "opening_entry",
    "recompute_running_totals",
    "to_core_asset",
    "to_ledger_entry",
    "update_asset",
]
