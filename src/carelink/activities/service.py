"""Scheduling volunteer activities and moving them through their lifecycle."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select

from carelink.activities.schemas import AssignActivityRequest, OrphanageActivity, VolunteerActivity
from carelink.activities.transitions import CANCELLED, COMPLETED, SCHEDULED, validate_transition
from carelink.auth.service import get_volunteer_profile_for, require_orphanage
from carelink.common.normalize import normalize_fields, stamp_timestamps
from carelink.common.schemas import validate_payload
from carelink.common.upsert import update_owned
from carelink.db.models import Activity, Orphanage, VolunteerProfile
from carelink.errors import InvalidTransition, NotFound, PersistenceError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from carelink.auth.context import CallerContext

logger = structlog.get_logger()


async def assign_activity(db: AsyncSession, caller: CallerContext, raw: dict[str, Any]) -> Activity:
    """
    Schedule an activity for a volunteer on behalf of the caller's orphanage.

    Raises:
        NotFound: The caller has no orphanage, or the volunteer does not exist.
        ValidationFailed: A required field is missing or malformed.
    """
    await require_orphanage(db, caller)
    body = validate_payload(AssignActivityRequest, normalize_fields(raw, date_fields=()))

    volunteer = await db.get(VolunteerProfile, body.volunteer_id)
    if volunteer is None:
        raise NotFound("Volunteer not found")

    values = stamp_timestamps(
        {
            "volunteer_id": volunteer.id,
            "name": body.activity,
            "date": body.date,
            "time_slot": body.time,
            "notes": body.notes or None,
            "status": SCHEDULED,
            "created_by": caller.user_id,
        },
        inserting=True,
    )
    activity = Activity(**values)
    db.add(activity)
    await db.flush()

    logger.info("activity_assigned", activity_id=activity.id, volunteer_id=volunteer.id, created_by=caller.user_id)
    return activity


async def list_for_creator(db: AsyncSession, caller: CallerContext) -> list[OrphanageActivity]:
    """Activities the caller scheduled, latest date and slot first."""
    result = await db.execute(
        select(Activity, VolunteerProfile.first_name)
        .outerjoin(VolunteerProfile, Activity.volunteer_id == VolunteerProfile.id)
        .where(Activity.created_by == caller.user_id)
        .order_by(Activity.date.desc(), Activity.time_slot.desc())
    )
    return [
        OrphanageActivity(
            id=activity.id,
            name=activity.name,
            date=activity.date,
            time_slot=activity.time_slot,
            status=activity.status,
            volunteer_name=volunteer_name,
            volunteer_id=activity.volunteer_id,
            notes=activity.notes,
        )
        for activity, volunteer_name in result.all()
    ]


async def list_for_volunteer(db: AsyncSession, caller: CallerContext) -> list[VolunteerActivity]:
    """
    Scheduled activities assigned to the caller's volunteer profile.

    Raises:
        NotFound: The caller has no volunteer profile.
    """
    profile = await get_volunteer_profile_for(db, caller)
    if profile is None:
        raise NotFound("Volunteer profile not found. Please complete your profile first.")

    result = await db.execute(
        select(Activity, Orphanage.name, Orphanage.city)
        .outerjoin(Orphanage, Activity.created_by == Orphanage.user_id)
        .where(Activity.volunteer_id == profile.id, Activity.status == SCHEDULED)
        .order_by(Activity.date.desc(), Activity.time_slot.desc())
    )
    return [
        VolunteerActivity(
            id=activity.id,
            name=activity.name,
            date=activity.date,
            time_slot=activity.time_slot,
            status=activity.status,
            notes=activity.notes,
            orphanage_name=orphanage_name,
            orphanage_location=orphanage_city,
            created_at=activity.created_at,
        )
        for activity, orphanage_name, orphanage_city in result.all()
    ]


async def get_created_activity(db: AsyncSession, caller: CallerContext, activity_id: int) -> Activity:
    """Fetch an activity the caller scheduled; anyone else's looks absent."""
    result = await db.execute(
        select(Activity).where(Activity.id == activity_id, Activity.created_by == caller.user_id)
    )
    activity = result.scalar_one_or_none()
    if activity is None:
        raise NotFound("Activity not found or you don't have permission to change it")
    return activity


async def transition_activity(
    db: AsyncSession,
    caller: CallerContext,
    activity_id: int,
    target_status: str,
) -> Activity:
    """
    Move an activity the caller created to ``target_status``.

    Raises:
        NotFound: No such activity, or the caller did not create it.
        InvalidTransition: The activity is already completed or cancelled,
            including by a concurrent request.
    """
    activity = await get_created_activity(db, caller, activity_id)
    previous = activity.status
    validate_transition(previous, target_status)

    values = stamp_timestamps({"status": target_status}, inserting=False)
    try:
        updated = await update_owned(
            db,
            Activity,
            activity.id,
            Activity.created_by,
            caller.user_id,
            values,
            conditions=(Activity.status == previous,),
        )
    except PersistenceError as exc:
        # Another request moved it out of ``previous`` after the read.
        msg = f"Activity is no longer {previous}"
        raise InvalidTransition(msg) from exc

    logger.info(
        "activity_status_changed",
        activity_id=updated.id,
        from_status=previous,
        to_status=target_status,
        user_id=caller.user_id,
    )
    return updated


async def cancel_activity(db: AsyncSession, caller: CallerContext, activity_id: int) -> Activity:
    return await transition_activity(db, caller, activity_id, CANCELLED)


async def complete_activity(db: AsyncSession, caller: CallerContext, activity_id: int) -> Activity:
    return await transition_activity(db, caller, activity_id, COMPLETED)
