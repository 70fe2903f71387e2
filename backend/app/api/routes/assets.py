"""Asset CRUD, ledger and per-asset return endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies.context import RequestContext, get_db_session, get_request_context
from app.models import Asset
from app.schemas import (
    AssetCreateRequest,
    AssetReturnsSchema,
    AssetSchema,
    AssetUpdateRequest,
    TransactionCreateRequest,
    TransactionResultSchema,
    TransactionSchema,
)
from app.services import assets as asset_service
from asset_tracker.aggregation import resolve_current_value
from asset_tracker.fixed_deposit import effective_current_value, maturity_status
from asset_tracker.returns import format_rate, holding_cagr, solve_xirr

router = APIRouter()


def _asset_schema(row: Asset, as_of: date) -> AssetSchema:
    schema = AssetSchema.model_validate(row)
    core_asset = asset_service.to_core_asset(row)
    if core_asset.is_fixed_deposit:
        valuation = effective_current_value(core_asset, as_of)
        schema.effective_value = valuation.value
        schema.valuation_method = valuation.method.value
        schema.maturity_label = maturity_status(core_asset.maturity_date, as_of).label
    else:
        schema.effective_value = resolve_current_value(core_asset, as_of)
    return schema


@router.get("", response_model=list[AssetSchema])
async def get_assets(
    asset_class: str | None = Query(default=None),
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> list[AssetSchema]:
    rows = await asset_service.list_assets(session, context.user_id, asset_class=asset_class)
    today = date.today()
    return [_asset_schema(row, today) for row in rows]


@router.post("", response_model=AssetSchema, status_code=status.HTTP_201_CREATED)
async def post_asset(
    payload: AssetCreateRequest,
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> AssetSchema:
    try:
        row = await asset_service.create_asset(session, context.user_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _asset_schema(row, date.today())


@router.get("/{asset_id}", response_model=AssetSchema)
async def get_asset(
    asset_id: int,
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> AssetSchema:
    try:
        row = await asset_service.get_asset(session, context.user_id, asset_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _asset_schema(row, date.today())


@router.patch("/{asset_id}", response_model=AssetSchema)
async def patch_asset(
    asset_id: int,
    payload: AssetUpdateRequest,
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> AssetSchema:
    try:
        row = await asset_service.update_asset(session, context.user_id, asset_id, payload)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _asset_schema(row, date.today())


@router.delete("/{asset_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_asset(
    asset_id: int,
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    try:
        await asset_service.delete_asset(session, context.user_id, asset_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{asset_id}/transactions", response_model=list[TransactionSchema])
async def get_transactions(
    asset_id: int,
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> list[TransactionSchema]:
    try:
        rows = await asset_service.list_transactions(session, context.user_id, asset_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return [TransactionSchema.model_validate(row) for row in rows]


@router.post(
    "/{asset_id}/transactions",
    response_model=TransactionResultSchema,
    status_code=status.HTTP_201_CREATED,
)
async def post_transaction(
    asset_id: int,
    payload: TransactionCreateRequest,
    latest_price: float | None = Query(default=None, gt=0),
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> TransactionResultSchema:
    try:
        tx, warnings = await asset_service.add_transaction(
            session,
            context.user_id,
            asset_id,
            payload,
            latest_price_per_unit=latest_price,
        )
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return TransactionResultSchema(transaction=TransactionSchema.model_validate(tx), warnings=warnings)


@router.get("/{asset_id}/returns", response_model=AssetReturnsSchema)
async def get_asset_returns(
    asset_id: int,
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> AssetReturnsSchema:
    try:
        row = await asset_service.get_asset(session, context.user_id, asset_id)
        ledger = await asset_service.list_transactions(session, context.user_id, asset_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    today = date.today()
    core_asset = asset_service.to_core_asset(row)
    value = resolve_current_value(core_asset, today)
    opening = asset_service.opening_entry(row)
    flows = asset_service.asset_cash_flows(
        core_asset, ledger, value, today, opening_cost=row.opening_cost if opening is not None else None
    )
    result = solve_xirr(flows)
    growth = holding_cagr(core_asset.total_cost, value, core_asset.purchase_date, today)
    return AssetReturnsSchema(
        asset_id=row.id,
        xirr_status=result.status.value,
        xirr=result.rate,
        xirr_display=format_rate(result.rate),
        cagr=growth,
        cagr_display=format_rate(growth),
    )


__all__ = ["router"]
