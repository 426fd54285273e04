"""Outcome of a dashboard form submission, as rendered by the client."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ActionStatus = Literal["success", "invalid", "failed"]


class ActionState(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    message: str = ""
    field_errors: dict[str, str] = Field(default_factory=dict, alias="fieldErrors")
    status: ActionStatus | None = None
    redirect_to: str | None = Field(default=None, alias="redirectTo")
    redirect_after_ms: int | None = Field(default=None, alias="redirectAfterMs")

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


__all__ = ["ActionState", "ActionStatus"]
