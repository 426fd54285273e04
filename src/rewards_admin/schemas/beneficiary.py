from .common import (
    Checkbox,
    FormSchema,
    NonNegativeInt,
    OptionalDateTime,
    OptionalEmail,
    OptionalRef,
    OptionalText,
    required_ref,
)


class BeneficiaryInput(FormSchema):
    first_name: OptionalText = None
    last_name: OptionalText = None
    email: OptionalEmail = None
    phone: OptionalText = None
    document_id: OptionalText = None
    available_points: NonNegativeInt = 0
    registration_date: OptionalDateTime = None
    address_id: OptionalRef = None


class BeneficiaryOrganizationInput(FormSchema):
    beneficiary_id: required_ref("Beneficiary is required") = None
    organization_id: required_ref("Organization is required") = None
    available_points: NonNegativeInt = 0
    total_points_earned: NonNegativeInt = 0
    total_points_redeemed: NonNegativeInt = 0
    joined_date: OptionalDateTime = None
    is_active: Checkbox = False
