"""User mirror and ownership resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select

from carelink.common.upsert import insert_once
from carelink.db.models import Orphanage, User, VolunteerProfile
from carelink.errors import NotFound, ValidationFailed

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from carelink.auth.context import CallerContext

logger = structlog.get_logger()


async def get_user(db: AsyncSession, user_id: str) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def ensure_user(db: AsyncSession, caller: CallerContext) -> User:
    """
    Return the caller's User mirror, creating it from token claims if absent.

    Existing rows are left untouched.

    Raises:
        ValidationFailed: If the row must be created and the token carries no email.
    """
    user = await get_user(db, caller.user_id)
    if user is not None:
        return user

    email = (caller.email or "").strip().lower()
    if not email:
        raise ValidationFailed({"email": "Your account has no email address"})

    created = await insert_once(
        db,
        User,
        {
            "id": caller.user_id,
            "email": email,
            "first_name": caller.first_name or "",
            "last_name": caller.last_name or "",
            "profile_image_url": caller.image_url or "",
        },
    )
    if created is not None:
        logger.info("user_mirrored", user_id=caller.user_id)
        return created

    # Lost a race with a concurrent request for the same user
    user = await get_user(db, caller.user_id)
    if user is None:
        raise ValidationFailed({"email": "Email address is already used by another account"})
    return user


async def get_orphanage_for(db: AsyncSession, caller: CallerContext) -> Orphanage | None:
    result = await db.execute(select(Orphanage).where(Orphanage.user_id == caller.user_id))
    return result.scalar_one_or_none()


async def require_orphanage(db: AsyncSession, caller: CallerContext) -> Orphanage:
    """Resolve the caller's orphanage or raise 404."""
    orphanage = await get_orphanage_for(db, caller)
    if orphanage is None:
        raise NotFound("No orphanage found for this user")
    return orphanage


async def get_volunteer_profile_for(db: AsyncSession, caller: CallerContext) -> VolunteerProfile | None:
    result = await db.execute(select(VolunteerProfile).where(VolunteerProfile.user_id == caller.user_id))
    return result.scalar_one_or_none()
