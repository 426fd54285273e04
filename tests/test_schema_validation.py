from datetime import date
from uuid import uuid4

import pytest

from rewards_admin.schemas.catalog import ProductInput
from rewards_admin.schemas.loyalty import AssignmentInput, PointsRuleInput
from rewards_admin.schemas.order import StatusInput
from rewards_admin.schemas.organization import AddressInput, BranchInput, OrganizationNotificationLimitInput
from rewards_admin.schemas.user import AppUserInput, CollaboratorPermissionInput, RestrictedCollaboratorActionInput
from rewards_admin.schemas.validation import safe_parse


VALID_ADDRESS = {
    "street": "Av. Siempre Viva",
    "number": "742",
    "city": "Springfield",
    "state": "OR",
    "zip_code": "97403",
}


def _messages(result) -> dict:
    return {issue.path[0]: issue.message for issue in result.issues if issue.path}


def test_address_missing_required_fields_report_custom_messages() -> None:
    result = safe_parse(AddressInput, {})

    assert result.success is False
    assert _messages(result) == {
        "street": "Street is required",
        "number": "Number is required",
        "city": "City is required",
        "state": "State is required",
        "zip_code": "Zip code is required",
    }


def test_blank_required_text_is_reported_like_missing() -> None:
    result = safe_parse(AddressInput, {**VALID_ADDRESS, "city": "   "})

    assert result.success is False
    assert _messages(result) == {"city": "City is required"}


def test_blank_optional_text_becomes_none_and_unknown_fields_are_ignored() -> None:
    result = safe_parse(AddressInput, {**VALID_ADDRESS, "country": "", "$ACTION_ID_abc": "x"})

    assert result.success is True
    assert result.data.country is None
    assert not hasattr(result.data, "$ACTION_ID_abc")


def test_validation_is_idempotent() -> None:
    first = safe_parse(AddressInput, VALID_ADDRESS)
    second = safe_parse(AddressInput, VALID_ADDRESS)
    reparsed = safe_parse(AddressInput, first.data)

    assert first.success and second.success and reparsed.success
    assert first.data == second.data == reparsed.data


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("on", True), ("true", True), ("1", True), ("off", False), ("", False), (None, False)],
)
def test_checkbox_coercion(raw, expected) -> None:
    payload = {"organization_id": str(uuid4()), "name": "Centro"}
    if raw is not None:
        payload["active"] = raw

    result = safe_parse(BranchInput, payload)

    assert result.success is True
    assert result.data.active is expected


def test_unparsable_numbers_coerce_to_zero() -> None:
    result = safe_parse(StatusInput, {"name": "Pending", "order_num": "invalid-number"})

    assert result.success is True
    assert result.data.order_num == 0


@pytest.mark.parametrize("raw, expected", [("7.9", 7), ("12abc", 12), (" -3 ", -3), ("+4", 4), ("abc12", 0)])
def test_numbers_keep_their_leading_integer(raw, expected) -> None:
    result = safe_parse(StatusInput, {"name": "Pending", "order_num": raw})

    assert result.success is True
    assert result.data.order_num == expected


def test_numeric_strings_parse_and_range_still_applies() -> None:
    ok = safe_parse(ProductInput, {"subcategory_id": str(uuid4()), "name": "Mug", "required_points": "150"})
    negative = safe_parse(ProductInput, {"subcategory_id": str(uuid4()), "name": "Mug", "required_points": "-5"})

    assert ok.success is True
    assert ok.data.required_points == 150
    assert negative.success is False
    assert set(_messages(negative)) == {"required_points"}


def test_required_reference_message_and_uuid_coercion() -> None:
    missing = safe_parse(BranchInput, {"name": "Centro", "organization_id": ""})
    organization_id = uuid4()
    present = safe_parse(BranchInput, {"name": "Centro", "organization_id": str(organization_id)})

    assert _messages(missing) == {"organization_id": "Organization is required"}
    assert present.data.organization_id == organization_id


def test_email_must_look_like_an_address() -> None:
    organization_id = str(uuid4())
    invalid = safe_parse(AppUserInput, {"organization_id": organization_id, "email": "not-an-email"})
    blank = safe_parse(AppUserInput, {"organization_id": organization_id, "email": ""})

    assert _messages(invalid) == {"email": "Invalid email address"}
    assert blank.success is True
    assert blank.data.email is None


def test_notification_limit_plan_defaults_to_free() -> None:
    result = safe_parse(OrganizationNotificationLimitInput, {"organization_id": str(uuid4()), "plan_type": ""})

    assert result.success is True
    assert result.data.plan_type == "free"
    assert result.data.daily_limit == 1


def test_assignment_system_user_is_stored_without_user() -> None:
    result = safe_parse(
        AssignmentInput,
        {"branch_id": str(uuid4()), "beneficiary_id": str(uuid4()), "user_id": "system", "points": "25"},
    )

    assert result.success is True
    assert result.data.user_id is None
    assert result.data.points == 25


def _rule(**overrides) -> dict:
    payload = {"name": "Double points", "organization_id": str(uuid4()), "rule_type": "fixed_amount"}
    payload.update(overrides)
    return payload


def test_points_rule_config_built_from_flat_fields() -> None:
    result = safe_parse(PointsRuleInput, _rule(points_per_dollar="2"))

    assert result.success is True
    assert result.data.config == {"points_per_dollar": 2.0}
    assert result.data.rule_type == "fixed_amount"


def test_points_rule_requires_value_for_its_type() -> None:
    result = safe_parse(PointsRuleInput, _rule(rule_type="percentage"))

    assert result.success is False
    assert _messages(result) == {"config": "percentage rules need a percentage value"}


def test_points_rule_accepts_json_config() -> None:
    result = safe_parse(PointsRuleInput, _rule(rule_type="tiered", config='{"tiers": [{"min": 0, "points": 1}]}'))

    assert result.success is True
    assert result.data.config == {"tiers": [{"min": 0, "points": 1}]}


def test_points_rule_end_date_before_start_is_field_error() -> None:
    result = safe_parse(
        PointsRuleInput,
        _rule(points_per_dollar="1", start_date="2026-05-10", end_date="2026-05-01"),
    )

    assert _messages(result) == {"end_date": "End date must be on or after the start date"}


def test_points_rule_days_are_normalized() -> None:
    from_string = safe_parse(PointsRuleInput, _rule(points_per_dollar="1", days_of_week="3,1,3"))
    from_list = safe_parse(PointsRuleInput, _rule(points_per_dollar="1", days_of_week=["6", "0"]))
    out_of_range = safe_parse(PointsRuleInput, _rule(points_per_dollar="1", days_of_week="7"))

    assert from_string.data.days_of_week == [1, 3]
    assert from_list.data.days_of_week == [0, 6]
    assert set(_messages(out_of_range)) == {"days_of_week"}


def test_default_points_rule_clears_schedule() -> None:
    result = safe_parse(
        PointsRuleInput,
        _rule(
            points_per_dollar="1",
            is_default="on",
            show_in_app="on",
            start_date="2026-01-01",
            days_of_week="1,2",
            time_start="09:00",
        ),
    )

    assert result.success is True
    data = result.data
    assert data.is_default is True
    assert data.start_date is None
    assert data.days_of_week is None
    assert data.time_start is None
    assert data.show_in_app is False


def test_points_rule_dates_parse() -> None:
    result = safe_parse(PointsRuleInput, _rule(points_per_dollar="1", start_date="2026-03-01"))

    assert result.data.start_date == date(2026, 3, 1)


def test_collaborator_schemas_report_their_messages() -> None:
    permission = safe_parse(CollaboratorPermissionInput, {"permission_type": " "})
    action = safe_parse(RestrictedCollaboratorActionInput, {"action_name": "transfer_ownership", "description": ""})

    assert _messages(permission) == {
        "collaborator_id": "Collaborator is required",
        "permission_type": "Permission type is required",
    }
    assert action.success is True
    assert action.data.description is None
