"""Volunteer profile endpoints and the orphanage volunteer directory."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from carelink.activities.schemas import VolunteerActivity
from carelink.activities.service import list_for_volunteer
from carelink.auth.context import CallerContext
from carelink.auth.dependencies import get_caller
from carelink.config import get_settings
from carelink.database import get_session
from carelink.volunteers.schemas import (
    VolunteerListItem,
    VolunteerProfileEnvelope,
    VolunteerProfileResponse,
    VolunteerProfileSaved,
)
from carelink.volunteers.service import get_profile, list_complete_volunteers, save_profile

router = APIRouter(prefix="/api/v1/volunteer-profile", tags=["Volunteers"])
directory_router = APIRouter(prefix="/api/v1/orphanage/volunteers", tags=["Volunteers"])


@router.get("", response_model=VolunteerProfileEnvelope)
async def get_my_profile(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> VolunteerProfileEnvelope:
    return await get_profile(db, caller)


@router.post("", response_model=VolunteerProfileSaved)
async def save_my_profile(
    body: dict[str, Any] = Body(...),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> VolunteerProfileSaved:
    """Create or update the caller's volunteer profile."""
    profile = await save_profile(db, caller, body, get_settings())
    await db.commit()
    return VolunteerProfileSaved(profile=VolunteerProfileResponse.model_validate(profile))


@router.get("/activities", response_model=list[VolunteerActivity])
async def my_activities(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> list[VolunteerActivity]:
    """Scheduled activities assigned to the caller, newest first."""
    return await list_for_volunteer(db, caller)


@directory_router.get("", response_model=list[VolunteerListItem])
async def list_volunteers(
    _caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> list[VolunteerListItem]:
    """Volunteers with a complete profile."""
    return await list_complete_volunteers(db)
