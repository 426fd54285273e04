from typing import Annotated, Literal

from pydantic import Field, field_validator

from .common import (
    Checkbox,
    FormSchema,
    LenientInt,
    NonNegativeInt,
    OptionalDateTime,
    OptionalFloat,
    OptionalRef,
    OptionalText,
    required_ref,
    required_text,
)


class OrganizationInput(FormSchema):
    name: required_text("Name is required") = ""
    business_name: OptionalText = None
    tax_id: OptionalText = None
    logo_url: OptionalText = None
    creation_date: OptionalDateTime = None


class AddressInput(FormSchema):
    street: required_text("Street is required") = ""
    number: required_text("Number is required") = ""
    city: required_text("City is required") = ""
    state: required_text("State is required") = ""
    zip_code: required_text("Zip code is required") = ""
    country: OptionalText = None
    place_id: OptionalText = None
    latitude: OptionalFloat = None
    longitude: OptionalFloat = None
    organization_id: OptionalRef = None


class BranchInput(FormSchema):
    organization_id: required_ref("Organization is required") = None
    address_id: OptionalRef = None
    name: required_text("Name is required") = ""
    code: OptionalText = None
    phone: OptionalText = None
    active: Checkbox = False


NotificationPlan = Literal["free", "light", "pro", "premium"]


class OrganizationNotificationLimitInput(FormSchema):
    organization_id: required_ref("Organization is required") = None
    plan_type: NotificationPlan = "free"
    daily_limit: Annotated[LenientInt, Field(ge=1)] = 1
    monthly_limit: Annotated[LenientInt, Field(ge=1)] = 5
    min_hours_between_notifications: Annotated[LenientInt, Field(ge=1)] = 24
    notifications_sent_today: NonNegativeInt = 0
    notifications_sent_this_month: NonNegativeInt = 0
    last_notification_sent_at: OptionalDateTime = None

    @field_validator("plan_type", mode="before")
    @classmethod
    def _default_plan(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "free"
        return value
