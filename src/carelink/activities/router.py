"""Activity endpoints for orphanage users."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from carelink.activities.schemas import ActivityResponse, OrphanageActivity
from carelink.activities.service import (
    assign_activity,
    cancel_activity,
    complete_activity,
    list_for_creator,
)
from carelink.auth.context import CallerContext
from carelink.auth.dependencies import get_caller
from carelink.database import get_session

router = APIRouter(prefix="/api/v1/orphanage/activities", tags=["Activities"])


@router.get("", response_model=list[OrphanageActivity])
async def list_activities(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> list[OrphanageActivity]:
    """Activities scheduled by the caller."""
    return await list_for_creator(db, caller)


@router.post("/assign", response_model=ActivityResponse)
async def assign(
    body: dict[str, Any] = Body(...),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> ActivityResponse:
    """Assign an activity to a volunteer."""
    activity = await assign_activity(db, caller, body)
    await db.commit()
    return ActivityResponse.model_validate(activity)


@router.post("/{activity_id}/cancel", response_model=ActivityResponse)
async def cancel(
    activity_id: int,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> ActivityResponse:
    activity = await cancel_activity(db, caller, activity_id)
    await db.commit()
    return ActivityResponse.model_validate(activity)


@router.post("/{activity_id}/complete", response_model=ActivityResponse)
async def complete(
    activity_id: int,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> ActivityResponse:
    activity = await complete_activity(db, caller, activity_id)
    await db.commit()
    return ActivityResponse.model_validate(activity)
