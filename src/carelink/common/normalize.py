"""Cleaning of raw submitted fields before validation and persistence.

Input keys are the camelCase names used on the wire. Every function returns
a new mapping or value; nothing here touches the database.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any

import structlog

from carelink.errors import ValidationFailed

logger = structlog.get_logger()

_NON_DIGITS = re.compile(r"\D")

DIGIT_FIELDS = ("phoneNumber", "emergencyContactPhone", "zipCode")
LIST_FIELDS = ("skills", "availability", "needs", "interests")
SERVER_OWNED_FIELDS = ("id", "orphanageId", "userId", "createdAt", "updatedAt", "isApproved")

ZIP_LENGTH = 5

# Accepted besides ISO 8601.
_FALLBACK_DATE_FORMATS = ("%m/%d/%Y", "%Y/%m/%d", "%d %B %Y", "%B %d, %Y")


class DateParsePolicy(str, Enum):
    """What to do with a date field that cannot be parsed."""

    REJECT = "reject"
    PASSTHROUGH = "passthrough"


def clean_text(value: Any) -> Any:  # noqa: ANN401
    """Trim surrounding whitespace from strings; other values pass through."""
    if isinstance(value, str):
        return value.strip()
    return value


def digits_only(value: Any) -> str:  # noqa: ANN401
    """Strip every non-digit character. None becomes an empty string."""
    if value is None:
        return ""
    return _NON_DIGITS.sub("", str(value))


def normalize_zip(value: Any) -> str:  # noqa: ANN401
    return digits_only(value)[:ZIP_LENGTH]


def parse_day(value: Any) -> datetime:  # noqa: ANN401
    """
    Parse a date-like value to midnight of its calendar day (naive).

    The calendar day is taken as written: ``2010-05-04T23:30:00-05:00`` is
    the 4th of May, whatever the server's timezone is.

    Raises:
        ValueError: If the value is not a date, datetime or parseable string.
    """
    if isinstance(value, datetime):
        return datetime.combine(value.date(), time.min)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not isinstance(value, str) or not value.strip():
        msg = f"Not a date: {value!r}"
        raise ValueError(msg)

    text = value.strip()
    try:
        return datetime.combine(date.fromisoformat(text), time.min)
    except ValueError:
        pass
    try:
        return datetime.combine(datetime.fromisoformat(text).date(), time.min)
    except ValueError:
        pass
    for fmt in _FALLBACK_DATE_FORMATS:
        try:
            return datetime.combine(datetime.strptime(text, fmt).date(), time.min)
        except ValueError:
            continue
    msg = f"Unrecognized date format: {value!r}"
    raise ValueError(msg)


def normalize_dates(
    record: Mapping[str, Any],
    fields: Iterable[str],
    policy: DateParsePolicy | str = DateParsePolicy.REJECT,
) -> dict[str, Any]:
    """
    Parse the named date fields of ``record`` to day-precision timestamps.

    Absent and null fields are left alone. An unparseable value is either
    reported (REJECT) or kept as submitted with a warning (PASSTHROUGH).

    Raises:
        ValidationFailed: Under REJECT, naming every unparseable field.
    """
    policy = DateParsePolicy(policy)
    cleaned = dict(record)
    errors: dict[str, str] = {}
    for field in fields:
        value = cleaned.get(field)
        if value is None or value == "":
            continue
        try:
            cleaned[field] = parse_day(value)
        except ValueError:
            if policy is DateParsePolicy.REJECT:
                errors[field] = "Invalid date format. Please use YYYY-MM-DD."
            else:
                logger.warning("date_parse_fallback", field=field, value=str(value))
    if errors:
        raise ValidationFailed(errors)
    return cleaned


def coerce_list(value: Any, *, wrap_scalar: bool = False) -> list[Any]:  # noqa: ANN401
    """
    Keep lists as they are; anything else becomes an empty list.

    With ``wrap_scalar`` a single non-empty string becomes a one-element list
    (legacy single-value form fields).
    """
    if isinstance(value, list):
        return [clean_text(item) for item in value if item not in (None, "")]
    if wrap_scalar and isinstance(value, str) and value.strip():
        return [value.strip()]
    return []


def strip_server_owned(record: Mapping[str, Any], fields: Iterable[str] = SERVER_OWNED_FIELDS) -> dict[str, Any]:
    """Drop keys the server assigns; never trusted from the caller."""
    owned = set(fields)
    return {key: value for key, value in record.items() if key not in owned}


def stamp_timestamps(
    values: dict[str, Any],
    *,
    inserting: bool,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Set ``updated_at`` to now; set ``created_at`` only when inserting and absent."""
    now = now or datetime.now(timezone.utc)
    values["updated_at"] = now
    if inserting and values.get("created_at") is None:
        values["created_at"] = now
    return values


def normalize_fields(
    raw: Mapping[str, Any],
    *,
    date_fields: Iterable[str] = ("dateOfBirth",),
    policy: DateParsePolicy | str = DateParsePolicy.REJECT,
    wrap_scalar_lists: bool = False,
) -> dict[str, Any]:
    """
    Apply the full cleaning pass to a submitted mapping.

    Strings are trimmed, phone and zip fields reduced to digits, list fields
    coerced, and date fields parsed according to ``policy``.
    """
    cleaned: dict[str, Any] = {key: clean_text(value) for key, value in raw.items()}
    for field in DIGIT_FIELDS:
        if field in cleaned:
            cleaned[field] = normalize_zip(cleaned[field]) if field == "zipCode" else digits_only(cleaned[field])
    for field in LIST_FIELDS:
        if field in cleaned:
            cleaned[field] = coerce_list(cleaned[field], wrap_scalar=wrap_scalar_lists)
    return normalize_dates(cleaned, date_fields, policy)
