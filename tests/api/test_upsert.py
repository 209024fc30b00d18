"""Conflict-handling insert and owner-restricted update tests against SQLite."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from carelink.common.upsert import insert_once, update_owned, upsert_owned_row
from carelink.db.models import Orphanage, User, VolunteerProfile
from carelink.errors import PersistenceError

NOW = datetime(2026, 10, 1, tzinfo=timezone.utc)


def _profile_values(user_id: str, city: str) -> dict:
    return {
        "id": f"profile-{city}",
        "user_id": user_id,
        "first_name": "Maya",
        "last_name": "Lindqvist",
        "phone_number": "5551234567",
        "address": "48 Elm Street",
        "city": city,
        "zip_code": "97205",
        "date_of_birth": datetime(1992, 6, 15),
        "emergency_contact_phone": "5559876543",
        "skills": ["Tutoring"],
        "availability": ["Weekends"],
        "about": "Teacher by day, guitarist by night.",
        "profile_complete": True,
        "created_at": NOW,
        "updated_at": NOW,
    }


@pytest.mark.asyncio
async def test_insert_once_returns_none_on_conflict(db_session: AsyncSession) -> None:
    first = await insert_once(db_session, User, {"id": "u1", "email": "u1@example.com"})
    second = await insert_once(db_session, User, {"id": "u1", "email": "other@example.com"})
    await db_session.commit()

    assert first is not None
    assert second is None
    assert (await db_session.get(User, "u1")).email == "u1@example.com"


@pytest.mark.asyncio
async def test_upsert_updates_in_place(db_session: AsyncSession) -> None:
    await insert_once(db_session, User, {"id": "u1", "email": "u1@example.com"})
    owner = VolunteerProfile.user_id
    created = await upsert_owned_row(db_session, VolunteerProfile, owner, _profile_values("u1", "Portland"))
    updated = await upsert_owned_row(db_session, VolunteerProfile, owner, _profile_values("u1", "Salem"))
    await db_session.commit()

    assert updated.id == created.id == "profile-Portland"
    assert updated.city == "Salem"
    assert await db_session.scalar(select(func.count(VolunteerProfile.id))) == 1


@pytest.mark.asyncio
async def test_update_owned_wrong_owner_raises(db_session: AsyncSession) -> None:
    await insert_once(db_session, User, {"id": "u1", "email": "u1@example.com"})
    orphanage = await insert_once(
        db_session,
        Orphanage,
        {
            "user_id": "u1",
            "name": "Sunrise",
            "email": "s@example.org",
            "phone": "5550102030",
            "address": "12 Harbor Road",
            "city": "Portland",
            "state": "Oregon",
            "country": "USA",
            "postal_code": "97201",
            "description": "A family-style home for children.",
            "capacity": 10,
            "registration_number": "ORG-1",
        },
        conflict_column=Orphanage.user_id,
    )
    assert orphanage is not None

    with pytest.raises(PersistenceError):
        await update_owned(db_session, Orphanage, orphanage.id, Orphanage.user_id, "u2", {"name": "Hijacked"})

    renamed = await update_owned(db_session, Orphanage, orphanage.id, Orphanage.user_id, "u1", {"name": "Sunset"})
    assert renamed.name == "Sunset"


@pytest.mark.asyncio
async def test_update_owned_respects_extra_conditions(db_session: AsyncSession) -> None:
    await insert_once(db_session, User, {"id": "u1", "email": "u1@example.com"})
    profile = await upsert_owned_row(
        db_session, VolunteerProfile, VolunteerProfile.user_id, _profile_values("u1", "Portland")
    )

    with pytest.raises(PersistenceError):
        await update_owned(
            db_session,
            VolunteerProfile,
            profile.id,
            VolunteerProfile.user_id,
            "u1",
            {"city": "Salem"},
            conditions=(VolunteerProfile.city == "Eugene",),
        )

    updated = await update_owned(
        db_session,
        VolunteerProfile,
        profile.id,
        VolunteerProfile.user_id,
        "u1",
        {"city": "Salem"},
        conditions=(VolunteerProfile.city == "Portland",),
    )
    assert updated.city == "Salem"
