"""User settings and liabilities."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies.context import RequestContext, get_db_session, get_request_context
from app.schemas import LiabilityCreateRequest, LiabilitySchema, UserSettingsSchema
from app.services import household
from app.services.portfolio import get_user_settings

router = APIRouter()


@router.get("/settings", response_model=UserSettingsSchema)
async def get_settings_for_user(
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> UserSettingsSchema:
    row = await get_user_settings(session, context.user_id)
    return UserSettingsSchema.model_validate(row) if row else UserSettingsSchema()


@router.put("/settings", response_model=UserSettingsSchema)
async def put_settings(
    payload: UserSettingsSchema,
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> UserSettingsSchema:
    row = await household.save_user_settings(session, context.user_id, payload)
    return UserSettingsSchema.model_validate(row)


@router.get("/liabilities", response_model=list[LiabilitySchema])
async def get_liabilities(
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> list[LiabilitySchema]:
    rows = await household.list_liabilities(session, context.user_id)
    return [LiabilitySchema.model_validate(row) for row in rows]


@router.post("/liabilities", response_model=LiabilitySchema, status_code=status.HTTP_201_CREATED)
async def post_liability(
    payload: LiabilityCreateRequest,
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> LiabilitySchema:
    row = await household.create_liability(session, context.user_id, payload)
    return LiabilitySchema.model_validate(row)


@router.delete("/liabilities/{liability_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_liability(
    liability_id: int,
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    try:
        await household.delete_liability(session, context.user_id, liability_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
