"""Reusable field types for dashboard form schemas.

Browser forms submit every value as a string, so these ``Annotated`` types
decode the common encodings before pydantic applies its own checks:
checkboxes arrive as ``"on"`` or not at all, numbers as digit strings and
empty inputs as ``""``.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Annotated, Any
from uuid import UUID

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic_core import PydanticCustomError

_TRUTHY = {"on", "true", "1", "yes"}
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _checkbox(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUTHY


def _lenient_int(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if value is None:
        return 0
    if isinstance(value, float):
        return int(value)
    # the leading integer wins: "7.9" -> 7, "12abc" -> 12
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def _email(value: str | None) -> str | None:
    if value is not None and not _EMAIL_PATTERN.match(value):
        raise PydanticCustomError("invalid_email", "Invalid email address")
    return value


def required_text(message: str) -> Any:
    """A non-empty string; missing or blank input reports ``message``."""

    def check(value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise PydanticCustomError("required", message)
        return value

    return Annotated[str, BeforeValidator(check)]


def required_ref(message: str) -> Any:
    """A mandatory foreign-key identifier."""

    def check(value: Any) -> Any:
        if _blank_to_none(value) is None:
            raise PydanticCustomError("required", message)
        return value

    return Annotated[UUID, BeforeValidator(check)]


Checkbox = Annotated[bool, BeforeValidator(_checkbox)]
LenientInt = Annotated[int, BeforeValidator(_lenient_int)]
NonNegativeInt = Annotated[int, BeforeValidator(_lenient_int), Field(ge=0)]
OptionalText = Annotated[str | None, BeforeValidator(_blank_to_none)]
OptionalRef = Annotated[UUID | None, BeforeValidator(_blank_to_none)]
OptionalFloat = Annotated[float | None, BeforeValidator(_blank_to_none)]
OptionalDateTime = Annotated[datetime | None, BeforeValidator(_blank_to_none)]
OptionalDate = Annotated[date | None, BeforeValidator(_blank_to_none)]
OptionalTime = Annotated[time | None, BeforeValidator(_blank_to_none)]
OptionalEmail = Annotated[str | None, BeforeValidator(_blank_to_none), AfterValidator(_email)]


class FormSchema(BaseModel):
    """Base model for entity payloads submitted through dashboard forms.

    Unknown fields are ignored and defaults are validated too, so a missing
    required field reports the same message as a blank one.
    """

    model_config = ConfigDict(extra="ignore", validate_default=True, str_strip_whitespace=True)

    id: OptionalRef = None


__all__ = [
    "Checkbox",
    "FormSchema",
    "LenientInt",
    "NonNegativeInt",
    "OptionalDate",
    "OptionalDateTime",
    "OptionalEmail",
    "OptionalFloat",
    "OptionalRef",
    "OptionalText",
    "OptionalTime",
    "required_ref",
    "required_text",
]
