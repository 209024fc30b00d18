"""Request/response schemas for child records."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from carelink.common.schemas import CamelModel
from carelink.orphanages.schemas import OrphanageSummary

Gender = Literal["MALE", "FEMALE", "OTHER"]


def _upper(value: object) -> object:
    return value.upper() if isinstance(value, str) else value


class ChildCreate(CamelModel):
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    date_of_birth: datetime
    gender: Gender
    bio: str | None = None
    needs: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)

    @field_validator("gender", mode="before")
    @classmethod
    def gender_upper(cls, v: object) -> object:
        return _upper(v)

    @field_validator("bio")
    @classmethod
    def empty_bio_is_none(cls, v: str | None) -> str | None:
        return v or None


class ChildUpdate(CamelModel):
    """Partial update. Unknown and server-owned keys are ignored."""

    first_name: str | None = Field(None, min_length=2, max_length=100)
    last_name: str | None = Field(None, min_length=2, max_length=100)
    # A str survives only under the passthrough date policy.
    date_of_birth: datetime | str | None = None
    gender: Gender | None = None
    photo_url: str | None = None
    bio: str | None = None
    needs: list[str] | None = None
    interests: list[str] | None = None
    is_adopted: bool | None = None

    @field_validator("gender", mode="before")
    @classmethod
    def gender_upper(cls, v: object) -> object:
        return _upper(v)


class ChildResponse(CamelModel):
    id: str
    orphanage_id: str
    first_name: str
    last_name: str
    date_of_birth: datetime
    gender: str
    photo_url: str | None = None
    bio: str | None = None
    needs: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    is_adopted: bool
    created_at: datetime
    updated_at: datetime


class ChildList(CamelModel):
    data: list[ChildResponse]


class PublicChild(CamelModel):
    """A child available for adoption, with the orphanage caring for them."""

    id: str
    first_name: str
    last_name: str
    date_of_birth: datetime
    gender: str
    photo_url: str | None = None
    bio: str | None = None
    needs: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    is_adopted: bool
    orphanage: OrphanageSummary | None = None
