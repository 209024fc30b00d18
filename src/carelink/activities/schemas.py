"""Request/response schemas for volunteer activities."""

from __future__ import annotations

import datetime as dt

from pydantic import Field

from carelink.common.schemas import CamelModel


class AssignActivityRequest(CamelModel):
    volunteer_id: str = Field(..., min_length=1)
    activity: str = Field(..., min_length=1, max_length=500)
    date: dt.date
    time: str = Field(..., min_length=1, max_length=100)
    notes: str | None = None


class ActivityResponse(CamelModel):
    id: int
    volunteer_id: str
    name: str
    date: dt.date
    time_slot: str
    notes: str | None = None
    status: str
    created_by: str
    created_at: dt.datetime
    updated_at: dt.datetime


class OrphanageActivity(CamelModel):
    """An activity in the scheduling orphanage's list."""

    id: int
    name: str
    date: dt.date
    time_slot: str
    status: str
    volunteer_name: str | None = None
    volunteer_id: str
    notes: str | None = None


class VolunteerActivity(CamelModel):
    """An upcoming activity in the volunteer's own list."""

    id: int
    name: str
    date: dt.date
    time_slot: str
    status: str
    notes: str | None = None
    orphanage_name: str | None = None
    orphanage_location: str | None = None
    created_at: dt.datetime
