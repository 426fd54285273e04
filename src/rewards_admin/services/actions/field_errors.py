from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from rewards_admin.schemas.validation import Issue


def reduce_field_errors(issues: Iterable[Issue]) -> dict[str, str]:
    """Collapse validation issues into one message per top-level field.

    The first issue reported for a field wins. Model-level issues carry no
    path (or an empty first segment) and are left out.
    """

    errors: dict[str, str] = {}
    for issue in issues:
        if not issue.path or issue.path[0] in ("", None):
            continue
        name = str(issue.path[0])
        if name not in errors:
            errors[name] = issue.message
    return errors


def root_messages(issues: Iterable[Issue]) -> list[str]:
    return [issue.message for issue in issues if not issue.path or issue.path[0] in ("", None)]


@dataclass(frozen=True)
class FieldErrors:
    """Validation failure carried in ``StoreResult.error`` by repositories."""

    errors: dict[str, str]
    messages: list[str] = field(default_factory=list)

    @classmethod
    def from_issues(cls, issues: Iterable[Issue]) -> "FieldErrors":
        issues = list(issues)
        return cls(errors=reduce_field_errors(issues), messages=root_messages(issues))


__all__ = ["FieldErrors", "reduce_field_errors", "root_messages"]
