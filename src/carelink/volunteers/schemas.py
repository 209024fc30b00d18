"""Request/response schemas for volunteer profiles."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import Field, ValidationInfo, field_validator

from carelink.common.schemas import CamelModel

MIN_PHONE_DIGITS = 10
ZIP_DIGITS = 5
DEFAULT_MIN_AGE = 18


def age_on(born: date, today: date) -> int:
    """Whole years between ``born`` and ``today``."""
    years = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        years -= 1
    return years


class VolunteerProfileIn(CamelModel):
    """
    A volunteer profile submission, after field normalization.

    Phone and zip values arrive as digit strings. The minimum age is read
    from the validation context (``min_age``).
    """

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone_number: str
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1, max_length=100)
    zip_code: str
    date_of_birth: datetime
    emergency_contact_phone: str
    skills: list[str] = Field(default_factory=list, validate_default=True)
    availability: list[str] = Field(default_factory=list, validate_default=True)
    about: str = Field("", validate_default=True)
    profile_complete: bool = False

    @field_validator("phone_number", "emergency_contact_phone")
    @classmethod
    def phone_digits(cls, v: str) -> str:
        if len(v) < MIN_PHONE_DIGITS:
            raise ValueError(f"Phone number must be at least {MIN_PHONE_DIGITS} digits")
        return v

    @field_validator("zip_code")
    @classmethod
    def zip_digits(cls, v: str) -> str:
        if len(v) != ZIP_DIGITS or not v.isdigit():
            raise ValueError(f"ZIP code must be {ZIP_DIGITS} digits")
        return v

    @field_validator("date_of_birth")
    @classmethod
    def old_enough(cls, v: datetime, info: ValidationInfo) -> datetime:
        min_age = (info.context or {}).get("min_age", DEFAULT_MIN_AGE)
        today = (info.context or {}).get("today") or date.today()
        if v.date() > today:
            raise ValueError("Date of birth cannot be in the future")
        if age_on(v.date(), today) < min_age:
            raise ValueError(f"You must be at least {min_age} years old")
        return v

    @field_validator("about")
    @classmethod
    def about_length(cls, v: str) -> str:
        if len(v) < 20:
            raise ValueError("About must be at least 20 characters")
        if len(v) > 1000:
            raise ValueError("About must be at most 1000 characters")
        return v

    @field_validator("skills")
    @classmethod
    def at_least_one_skill(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("Select at least one skill")
        return v

    @field_validator("availability")
    @classmethod
    def at_least_one_slot(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("Select at least one availability option")
        return v


class VolunteerProfileResponse(CamelModel):
    id: str
    user_id: str
    first_name: str
    last_name: str
    phone_number: str
    address: str
    city: str
    zip_code: str
    date_of_birth: datetime
    emergency_contact_phone: str
    skills: list[str] = Field(default_factory=list)
    availability: list[str] = Field(default_factory=list)
    about: str
    profile_complete: bool
    created_at: datetime
    updated_at: datetime


class UserSummary(CamelModel):
    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None


class VolunteerProfileEnvelope(CamelModel):
    """``profile`` is null until the caller saves one."""

    profile: VolunteerProfileResponse | None = None
    user: UserSummary


class VolunteerProfileSaved(CamelModel):
    success: bool = True
    profile: VolunteerProfileResponse
    message: str = "Profile saved successfully"


class VolunteerListItem(CamelModel):
    """A volunteer as seen by an orphanage."""

    id: str
    first_name: str
    last_name: str
    skills: list[str] = Field(default_factory=list)
    availability: list[str] = Field(default_factory=list)
    phone_number: str
    email: str | None = None
    profile_image: str | None = None
    bio: str
    location: str
    last_active: datetime

    @classmethod
    def from_row(cls, row: Any) -> VolunteerListItem:  # noqa: ANN401
        profile, email, image = row
        return cls(
            id=profile.id,
            first_name=profile.first_name,
            last_name=profile.last_name,
            skills=profile.skills or [],
            availability=profile.availability or [],
            phone_number=profile.phone_number,
            email=email,
            profile_image=image,
            bio=profile.about,
            location=profile.city,
            last_active=profile.updated_at,
        )
