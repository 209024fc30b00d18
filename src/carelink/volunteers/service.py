"""Volunteer profile storage and the orphanage-facing volunteer directory."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select

from carelink.auth.service import ensure_user, get_user, get_volunteer_profile_for
from carelink.common.normalize import normalize_fields, stamp_timestamps, strip_server_owned
from carelink.common.schemas import validate_payload
from carelink.common.upsert import upsert_owned_row
from carelink.db.models import User, VolunteerProfile
from carelink.errors import NotFound
from carelink.volunteers.schemas import (
    UserSummary,
    VolunteerListItem,
    VolunteerProfileEnvelope,
    VolunteerProfileIn,
    VolunteerProfileResponse,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from carelink.auth.context import CallerContext
    from carelink.config import Settings

logger = structlog.get_logger()


async def get_profile(db: AsyncSession, caller: CallerContext) -> VolunteerProfileEnvelope:
    """
    The caller's profile together with their user record.

    Raises:
        NotFound: The caller has never been mirrored locally.
    """
    user = await get_user(db, caller.user_id)
    if user is None:
        raise NotFound("User not found")
    profile = await get_volunteer_profile_for(db, caller)
    return VolunteerProfileEnvelope(
        profile=VolunteerProfileResponse.model_validate(profile) if profile is not None else None,
        user=UserSummary.model_validate(user),
    )


async def save_profile(
    db: AsyncSession,
    caller: CallerContext,
    raw: dict[str, Any],
    settings: Settings,
) -> VolunteerProfile:
    """
    Create or replace the caller's volunteer profile.

    Saving the same payload twice leaves one row; only ``updated_at`` moves.

    Raises:
        ValidationFailed: The payload is invalid. Nothing is written.
    """
    cleaned = normalize_fields(strip_server_owned(raw), policy=settings.date_parse_failure)
    body = validate_payload(VolunteerProfileIn, cleaned, context={"min_age": settings.volunteer_min_age})
    await ensure_user(db, caller)

    values = stamp_timestamps(
        {**body.model_dump(), "id": str(uuid.uuid4()), "user_id": caller.user_id},
        inserting=True,
    )
    profile = await upsert_owned_row(db, VolunteerProfile, VolunteerProfile.user_id, values)

    logger.info(
        "volunteer_profile_saved",
        profile_id=profile.id,
        user_id=caller.user_id,
        profile_complete=profile.profile_complete,
    )
    return profile


async def list_complete_volunteers(db: AsyncSession) -> list[VolunteerListItem]:
    """Volunteers whose profile is marked complete, with contact details."""
    result = await db.execute(
        select(VolunteerProfile, User.email, User.profile_image_url)
        .outerjoin(User, VolunteerProfile.user_id == User.id)
        .where(VolunteerProfile.profile_complete.is_(True))
        .order_by(VolunteerProfile.updated_at.desc())
    )
    return [VolunteerListItem.from_row(row) for row in result.all()]
