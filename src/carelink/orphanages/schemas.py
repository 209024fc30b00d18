"""Request/response schemas for orphanage endpoints."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from carelink.common.schemas import CamelModel

_URL = re.compile(r"^https?://[^\s/$.?#][^\s]*\.[^\s]+$", re.IGNORECASE)


def _check_website(value: str | None) -> str | None:
    if value is None or value == "":
        return None
    if not _URL.match(value):
        msg = "Invalid URL"
        raise ValueError(msg)
    return value


class OrphanageCreate(CamelModel):
    """Registration form for a new orphanage."""

    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=10, max_length=50)
    address: str = Field(..., min_length=5)
    city: str = Field(..., min_length=2, max_length=100)
    state: str = Field(..., min_length=2, max_length=100)
    country: str = Field(..., min_length=2, max_length=100)
    postal_code: str = Field(..., min_length=3, max_length=20)
    description: str = Field(..., min_length=20)
    capacity: int = Field(..., ge=1)
    website: str | None = Field(None, max_length=255)
    registration_number: str = Field(..., min_length=5, max_length=100)

    @field_validator("website")
    @classmethod
    def website_is_url(cls, v: str | None) -> str | None:
        return _check_website(v)


class OrphanageUpdate(CamelModel):
    """Settings patch. Only supplied fields change."""

    name: str | None = Field(None, min_length=2, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, min_length=10, max_length=50)
    address: str | None = Field(None, min_length=5)
    city: str | None = Field(None, min_length=2, max_length=100)
    state: str | None = Field(None, min_length=2, max_length=100)
    country: str | None = Field(None, min_length=2, max_length=100)
    postal_code: str | None = Field(None, min_length=3, max_length=20)
    description: str | None = Field(None, min_length=20)
    capacity: int | None = Field(None, ge=1)
    website: str | None = Field(None, max_length=255)
    registration_number: str | None = Field(None, min_length=5, max_length=100)

    @field_validator("website")
    @classmethod
    def website_is_url(cls, v: str | None) -> str | None:
        return _check_website(v)


class OrphanageResponse(CamelModel):
    id: str
    user_id: str
    name: str
    email: str
    phone: str
    address: str
    city: str
    state: str
    country: str
    postal_code: str
    description: str
    capacity: int
    website: str | None = None
    registration_number: str
    is_approved: bool
    created_at: datetime
    updated_at: datetime


class OrphanageRegistered(CamelModel):
    data: OrphanageResponse
    message: str = "Orphanage registered successfully"


class OrphanageSummary(CamelModel):
    """The slice of an orphanage shown next to public child listings."""

    id: str
    name: str
    city: str
    state: str
