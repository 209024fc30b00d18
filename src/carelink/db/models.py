"""ORM models for users, orphanages, children, volunteer profiles and activities.

One orphanage and one volunteer profile per user are enforced with unique
constraints on ``user_id``; writes go through conflict-handling inserts in
``carelink.common.upsert``.
"""

from __future__ import annotations

import uuid
from datetime import date as date_type
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from carelink.db.base import Base

# TEXT[] on PostgreSQL, JSON elsewhere (SQLite in tests).
StringList = JSON().with_variant(ARRAY(Text()), "postgresql")


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp_column() -> Mapped[datetime]:
    return mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now())


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    """Local mirror of an identity-provider user."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = _timestamp_column()
    updated_at: Mapped[datetime] = _timestamp_column()

    orphanage: Mapped[Orphanage | None] = relationship("Orphanage", back_populates="user", uselist=False)
    volunteer_profile: Mapped[VolunteerProfile | None] = relationship(
        "VolunteerProfile", back_populates="user", uselist=False
    )


# ---------------------------------------------------------------------------
# Orphanages
# ---------------------------------------------------------------------------


class Orphanage(Base):
    __tablename__ = "orphanages"
    __table_args__ = (CheckConstraint("capacity >= 1", name="capacity_positive"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    registration_number: Mapped[str] = mapped_column(String(100), nullable=False)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    created_at: Mapped[datetime] = _timestamp_column()
    updated_at: Mapped[datetime] = _timestamp_column()

    user: Mapped[User] = relationship("User", back_populates="orphanage")
    children: Mapped[list[Child]] = relationship("Child", back_populates="orphanage", passive_deletes=True)


# ---------------------------------------------------------------------------
# Children
# ---------------------------------------------------------------------------


class Child(Base):
    __tablename__ = "children"
    __table_args__ = (CheckConstraint("gender IN ('MALE', 'FEMALE', 'OTHER')", name="gender"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    orphanage_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("orphanages.id", ondelete="CASCADE"), nullable=False, index=True
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    gender: Mapped[str] = mapped_column(String(10), nullable=False)
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    needs: Mapped[list[str]] = mapped_column(StringList, nullable=False, default=list)
    interests: Mapped[list[str]] = mapped_column(StringList, nullable=False, default=list)
    is_adopted: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    created_at: Mapped[datetime] = _timestamp_column()
    updated_at: Mapped[datetime] = _timestamp_column()

    orphanage: Mapped[Orphanage] = relationship("Orphanage", back_populates="children")


# ---------------------------------------------------------------------------
# Volunteers
# ---------------------------------------------------------------------------


class VolunteerProfile(Base):
    __tablename__ = "volunteer_profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(20), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(5), nullable=False)
    date_of_birth: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    emergency_contact_phone: Mapped[str] = mapped_column(String(20), nullable=False)
    skills: Mapped[list[str]] = mapped_column(StringList, nullable=False, default=list)
    availability: Mapped[list[str]] = mapped_column(StringList, nullable=False, default=list)
    about: Mapped[str] = mapped_column(Text, nullable=False)
    profile_complete: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    created_at: Mapped[datetime] = _timestamp_column()
    updated_at: Mapped[datetime] = _timestamp_column()

    user: Mapped[User] = relationship("User", back_populates="volunteer_profile")
    activities: Mapped[list[Activity]] = relationship("Activity", back_populates="volunteer", passive_deletes=True)


# ---------------------------------------------------------------------------
# Activities
# ---------------------------------------------------------------------------


class Activity(Base):
    """A volunteer engagement scheduled by an orphanage user."""

    __tablename__ = "activities"
    __table_args__ = (
        CheckConstraint("status IN ('scheduled', 'completed', 'cancelled')", name="status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    volunteer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("volunteer_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    time_slot: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="scheduled", server_default="scheduled")
    created_by: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    created_at: Mapped[datetime] = _timestamp_column()
    updated_at: Mapped[datetime] = _timestamp_column()

    volunteer: Mapped[VolunteerProfile] = relationship("VolunteerProfile", back_populates="activities")
