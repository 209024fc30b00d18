"""Shared pydantic base and validation helpers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from carelink.errors import ValidationFailed

ModelT = TypeVar("ModelT", bound=BaseModel)


class CamelModel(BaseModel):
    """snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def field_errors(exc: PydanticValidationError) -> dict[str, str]:
    """Collapse pydantic errors to one message per wire field name."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ()
        field = str(loc[0]) if loc else "_form"
        message = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
        errors.setdefault(field, message)
    return errors


def validate_payload(
    schema: type[ModelT],
    data: Mapping[str, Any],
    context: dict[str, Any] | None = None,
) -> ModelT:
    """
    Validate a cleaned mapping against ``schema``.

    Raises:
        ValidationFailed: With a field-keyed error map on any violation.
    """
    try:
        return schema.model_validate(dict(data), context=context)
    except PydanticValidationError as e:
        raise ValidationFailed(field_errors(e)) from e
