"""Non-raising validation entry point shared by repositories and forms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


@dataclass(frozen=True)
class Issue:
    """One validation problem; ``path`` is empty for model-level errors."""

    path: tuple[str | int, ...]
    message: str


@dataclass(frozen=True)
class ParseResult(Generic[SchemaT]):
    success: bool
    data: SchemaT | None = None
    issues: list[Issue] = field(default_factory=list)


def issues_from_error(error: ValidationError) -> list[Issue]:
    return [Issue(path=tuple(item["loc"]), message=item["msg"]) for item in error.errors()]


def safe_parse(schema: type[SchemaT], payload: Mapping[str, Any] | BaseModel) -> ParseResult[SchemaT]:
    """Validate ``payload`` without raising.

    Accepts raw form mappings as well as already-typed values, so validating
    the output of a previous parse succeeds again with the same data.
    """

    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    try:
        data = schema.model_validate(dict(payload))
    except ValidationError as exc:
        return ParseResult(success=False, issues=issues_from_error(exc))
    return ParseResult(success=True, data=data)


__all__ = ["Issue", "ParseResult", "issues_from_error", "safe_parse"]
