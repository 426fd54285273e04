import json
from typing import Annotated, Any

from pydantic import BeforeValidator, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic_core import PydanticCustomError

from rewards_admin.models.loyalty import PointsRuleType

from .common import (
    Checkbox,
    FormSchema,
    LenientInt,
    OptionalDate,
    OptionalDateTime,
    OptionalFloat,
    OptionalRef,
    OptionalText,
    OptionalTime,
    required_ref,
    required_text,
)

# Keys each rule type must carry in ``config``; tiered rules are free-form.
CONFIG_KEYS: dict[PointsRuleType, str] = {
    PointsRuleType.FIXED_AMOUNT: "points_per_dollar",
    PointsRuleType.PERCENTAGE: "percentage",
    PointsRuleType.FIXED_PER_ITEM: "points_per_item",
}

SCHEDULE_FIELDS = (
    "start_date",
    "end_date",
    "valid_from",
    "valid_until",
    "days_of_week",
    "time_start",
    "time_end",
)


def _parse_config(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return {}
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise PydanticCustomError("invalid_config", "Config must be a JSON object") from exc
    if not isinstance(value, dict):
        raise PydanticCustomError("invalid_config", "Config must be a JSON object")
    return value


def _split_days(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, (list, tuple)):
        items = [item.strip() if isinstance(item, str) else item for item in value]
        return [item for item in items if item != ""] or None
    return value


def _system_user(value: Any) -> Any:
    # "system" marks grants issued without a dashboard user
    if isinstance(value, str) and value.strip().lower() == "system":
        return None
    return value


def _rule_type_or_default(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return PointsRuleType.FIXED_AMOUNT
    return value


def _before(value: Any, start: Any) -> bool:
    if value is None or start is None:
        return False
    try:
        return value < start
    except TypeError:
        # naive vs aware datetimes
        return False


class AssignmentInput(FormSchema):
    branch_id: required_ref("Branch is required") = None
    beneficiary_id: required_ref("Beneficiary is required") = None
    user_id: Annotated[OptionalRef, BeforeValidator(_system_user)] = None
    points: LenientInt = 0
    reason: OptionalText = None
    assignment_date: OptionalDateTime = None
    observations: OptionalText = None


DayOfWeek = Annotated[int, Field(ge=0, le=6)]


class PointsRuleInput(FormSchema):
    """Points-earning rule.

    ``config`` may be submitted as JSON or assembled from the flat
    ``points_per_dollar`` / ``percentage`` / ``points_per_item`` inputs the
    dashboard form renders. Default rules apply at all times, so their
    schedule fields are cleared.
    """

    model_config = ConfigDict(FormSchema.model_config, use_enum_values=True)

    name: required_text("Name is required") = ""
    description: OptionalText = None
    rule_type: Annotated[PointsRuleType, BeforeValidator(_rule_type_or_default)] = PointsRuleType.FIXED_AMOUNT
    points_per_dollar: OptionalFloat = None
    percentage: OptionalFloat = None
    points_per_item: OptionalFloat = None
    config: Annotated[dict[str, Any], BeforeValidator(_parse_config)] = Field(default_factory=dict)
    is_active: Checkbox = False
    organization_id: required_ref("Organization is required") = None
    branch_id: OptionalRef = None
    category_id: OptionalRef = None
    start_date: OptionalDate = None
    end_date: OptionalDate = None
    is_default: Checkbox = False
    priority: LenientInt = 0
    valid_from: OptionalDateTime = None
    valid_until: OptionalDateTime = None
    days_of_week: Annotated[list[DayOfWeek] | None, BeforeValidator(_split_days)] = None
    time_start: OptionalTime = None
    time_end: OptionalTime = None
    display_name: OptionalText = None
    display_icon: OptionalText = None
    display_color: OptionalText = None
    show_in_app: Checkbox = False

    @field_validator("config")
    @classmethod
    def _complete_config(cls, value: dict[str, Any], info: ValidationInfo) -> dict[str, Any]:
        rule_type = info.data.get("rule_type")
        key = CONFIG_KEYS.get(rule_type) if rule_type is not None else None
        if key is None or key in value:
            return value

        flat = info.data.get(key)
        if flat is None and rule_type == PointsRuleType.FIXED_PER_ITEM:
            flat = info.data.get("points_per_dollar")
        if flat is None:
            raise PydanticCustomError(
                "missing_config",
                "{rule_type} rules need a {key} value",
                {"rule_type": PointsRuleType(rule_type).value, "key": key},
            )
        return {**value, key: flat}

    @field_validator("end_date")
    @classmethod
    def _end_after_start(cls, value, info: ValidationInfo):
        if _before(value, info.data.get("start_date")):
            raise PydanticCustomError("date_order", "End date must be on or after the start date")
        return value

    @field_validator("valid_until")
    @classmethod
    def _until_after_from(cls, value, info: ValidationInfo):
        if _before(value, info.data.get("valid_from")):
            raise PydanticCustomError("date_order", "Valid until must be after valid from")
        return value

    @field_validator("days_of_week")
    @classmethod
    def _normalize_days(cls, value: list[int] | None) -> list[int] | None:
        return sorted(set(value)) if value else None

    @model_validator(mode="after")
    def _clear_default_schedule(self) -> "PointsRuleInput":
        if self.is_default:
            for name in SCHEDULE_FIELDS:
                setattr(self, name, None)
            self.show_in_app = False
        return self


__all__ = ["AssignmentInput", "CONFIG_KEYS", "PointsRuleInput", "SCHEDULE_FIELDS"]
