from typing import Annotated

from pydantic import Field

from .common import (
    Checkbox,
    FormSchema,
    LenientInt,
    NonNegativeInt,
    OptionalDateTime,
    OptionalRef,
    OptionalText,
    required_ref,
    required_text,
)


class StatusInput(FormSchema):
    name: required_text("Name is required") = ""
    description: OptionalText = None
    is_terminal: Checkbox = False
    order_num: LenientInt = 0


class AppOrderInput(FormSchema):
    order_number: required_text("Order number is required") = ""
    creation_date: OptionalDateTime = None
    total_points: LenientInt = 0
    observations: OptionalText = None


class HistoryInput(FormSchema):
    order_id: required_ref("Order is required") = None
    status_id: OptionalRef = None
    change_date: OptionalDateTime = None
    observations: OptionalText = None


class RedemptionInput(FormSchema):
    beneficiary_id: required_ref("Beneficiary is required") = None
    product_id: OptionalRef = None
    order_id: required_ref("Order is required") = None
    points_used: NonNegativeInt = 0
    quantity: Annotated[LenientInt, Field(ge=1)] = 1
    redemption_date: OptionalDateTime = None
