"""Orphanage endpoints: registration and settings."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from carelink.auth.context import CallerContext
from carelink.auth.dependencies import get_caller
from carelink.auth.service import require_orphanage
from carelink.database import get_session
from carelink.orphanages.schemas import OrphanageRegistered, OrphanageResponse
from carelink.orphanages.service import register_orphanage, update_orphanage

router = APIRouter(prefix="/api/v1/orphanage", tags=["Orphanage"])


@router.post("/register", response_model=OrphanageRegistered, status_code=201)
async def register(
    body: dict[str, Any] = Body(...),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> OrphanageRegistered:
    """Register an orphanage for the signed-in user (one per user)."""
    orphanage = await register_orphanage(db, caller, body)
    await db.commit()
    return OrphanageRegistered(data=OrphanageResponse.model_validate(orphanage))


@router.get("", response_model=OrphanageResponse)
async def get_my_orphanage(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> OrphanageResponse:
    """Get the caller's orphanage."""
    orphanage = await require_orphanage(db, caller)
    return OrphanageResponse.model_validate(orphanage)


@router.patch("", response_model=OrphanageResponse)
async def patch_my_orphanage(
    body: dict[str, Any] = Body(...),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> OrphanageResponse:
    """Update orphanage settings."""
    orphanage = await update_orphanage(db, caller, body)
    await db.commit()
    return OrphanageResponse.model_validate(orphanage)
