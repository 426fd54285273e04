"""Per-entity configuration records driving the shared dashboard pipeline.

Every dashboard entity is the same Validate -> Persist -> Reconcile flow; what
differs is captured here: which table and schema it uses, how its list view
is ordered and embedded, the label used in messages and the fields its form
renders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel
from sqlalchemy import Table

from rewards_admin.core.settings import settings
from rewards_admin.db.base import Base
from rewards_admin.models import (
    Address,
    AppOrder,
    AppUser,
    AppUserOrganization,
    Assignment,
    Beneficiary,
    BeneficiaryOrganization,
    Branch,
    Category,
    CollaboratorPermission,
    History,
    Organization,
    OrganizationNotificationLimit,
    PointsRule,
    PointsRuleType,
    Product,
    Redemption,
    RestrictedCollaboratorAction,
    Status,
    Stock,
    Subcategory,
    UserPermission,
)
from rewards_admin.schemas.beneficiary import BeneficiaryInput, BeneficiaryOrganizationInput
from rewards_admin.schemas.catalog import CategoryInput, ProductInput, StockInput, SubcategoryInput
from rewards_admin.schemas.loyalty import AssignmentInput, PointsRuleInput
from rewards_admin.schemas.order import AppOrderInput, HistoryInput, RedemptionInput, StatusInput
from rewards_admin.schemas.organization import (
    AddressInput,
    BranchInput,
    OrganizationInput,
    OrganizationNotificationLimitInput,
)
from rewards_admin.schemas.user import (
    AppUserInput,
    AppUserOrganizationInput,
    CollaboratorPermissionInput,
    RestrictedCollaboratorActionInput,
    UserPermissionInput,
)

InputType = Literal[
    "text",
    "textarea",
    "number",
    "email",
    "password",
    "checkbox",
    "select",
    "date",
    "datetime-local",
    "time",
    "hidden",
    "json",
]


@dataclass(frozen=True)
class FormField:
    name: str
    label: str
    input_type: InputType = "text"
    required: bool = False
    options_from: str | None = None
    option_label: str = "name"
    options_active_only: bool = False
    choices: tuple[str, ...] = ()
    multiple: bool = False
    default: Any = None


def ref(name: str, label: str, table: str, *, required: bool = True, option_label: str = "name", **kwargs: Any) -> FormField:
    """Select input populated from ``table``."""

    return FormField(
        name=name,
        label=label,
        input_type="select",
        required=required,
        options_from=table,
        option_label=option_label,
        **kwargs,
    )


@dataclass(frozen=True)
class EntityConfig:
    name: str
    label: str
    model: type[Base]
    schema: type[BaseModel]
    fields: tuple[FormField, ...] = ()
    order_by: str = "id"
    ascending: bool = True
    nulls_first: bool | None = None
    embeds: dict[str, tuple[str, ...]] = field(default_factory=dict)
    # Columns the database fills in when the form leaves them empty.
    server_defaults: tuple[str, ...] = ()

    @property
    def table(self) -> Table:
        return self.model.__table__

    @property
    def columns(self) -> frozenset[str]:
        return frozenset(column.name for column in self.table.c)

    @property
    def cache_path(self) -> str:
        return f"{settings.dashboard_path_prefix.rstrip('/')}/{self.name}"

    @property
    def revalidation_paths(self) -> tuple[str, ...]:
        """This list plus every list that embeds rows of it or cascades from it."""

        dependents = _DEPENDENTS.get(self.name, ())
        return (self.cache_path, *(ENTITY_CONFIGS[name].cache_path for name in dependents))

    @property
    def created_message(self) -> str:
        return f"{self.label} created successfully!"

    @property
    def updated_message(self) -> str:
        return f"{self.label} updated successfully!"

    @property
    def save_error_message(self) -> str:
        return f"An error occurred while saving the {self.label.lower()}."


_ENTITIES: tuple[EntityConfig, ...] = (
    EntityConfig(
        name="organization",
        label="Organization",
        model=Organization,
        schema=OrganizationInput,
        order_by="name",
        server_defaults=("creation_date",),
        fields=(
            FormField("name", "Name", required=True),
            FormField("business_name", "Business name"),
            FormField("tax_id", "Tax ID"),
            FormField("logo_url", "Logo URL"),
        ),
    ),
    EntityConfig(
        name="address",
        label="Address",
        model=Address,
        schema=AddressInput,
        order_by="street",
        fields=(
            FormField("street", "Street", required=True),
            FormField("number", "Number", required=True),
            FormField("city", "City", required=True),
            FormField("state", "State", required=True),
            FormField("zip_code", "Zip code", required=True),
            FormField("country", "Country"),
            FormField("place_id", "Place ID", input_type="hidden"),
            FormField("latitude", "Latitude", input_type="number"),
            FormField("longitude", "Longitude", input_type="number"),
            ref("organization_id", "Organization", "organization", required=False),
        ),
    ),
    EntityConfig(
        name="branch",
        label="Branch",
        model=Branch,
        schema=BranchInput,
        order_by="name",
        embeds={"organization": ("name",)},
        fields=(
            ref("organization_id", "Organization", "organization"),
            ref("address_id", "Address", "address", required=False, option_label="street"),
            FormField("name", "Name", required=True),
            FormField("code", "Code"),
            FormField("phone", "Phone"),
            FormField("active", "Active", input_type="checkbox", default=True),
        ),
    ),
    EntityConfig(
        name="app_user",
        label="User",
        model=AppUser,
        schema=AppUserInput,
        order_by="first_name",
        nulls_first=False,
        embeds={"organization": ("name",)},
        server_defaults=("created_at",),
        fields=(
            ref("organization_id", "Organization", "organization"),
            FormField("first_name", "First name"),
            FormField("last_name", "Last name"),
            FormField("email", "Email", input_type="email"),
            FormField("username", "Username"),
            FormField("password", "Password", input_type="password"),
            FormField("active", "Active", input_type="checkbox", default=True),
        ),
    ),
    EntityConfig(
        name="app_user_organization",
        label="Membership",
        model=AppUserOrganization,
        schema=AppUserOrganizationInput,
        order_by="created_at",
        ascending=False,
        embeds={"app_user": ("first_name", "last_name"), "organization": ("name",)},
        server_defaults=("created_at", "updated_at"),
        fields=(
            ref("app_user_id", "User", "app_user", option_label="first_name"),
            ref("organization_id", "Organization", "organization"),
            FormField("is_active", "Active", input_type="checkbox", default=True),
        ),
    ),
    EntityConfig(
        name="beneficiary",
        label="Beneficiary",
        model=Beneficiary,
        schema=BeneficiaryInput,
        order_by="registration_date",
        ascending=False,
        server_defaults=("registration_date",),
        fields=(
            FormField("first_name", "First name"),
            FormField("last_name", "Last name"),
            FormField("email", "Email", input_type="email"),
            FormField("phone", "Phone"),
            FormField("document_id", "Document ID"),
            FormField("available_points", "Available points", input_type="number", default=0),
            ref("address_id", "Address", "address", required=False, option_label="street"),
        ),
    ),
    EntityConfig(
        name="beneficiary_organization",
        label="Beneficiary membership",
        model=BeneficiaryOrganization,
        schema=BeneficiaryOrganizationInput,
        order_by="created_at",
        ascending=False,
        embeds={"beneficiary": ("first_name", "last_name"), "organization": ("name",)},
        server_defaults=("joined_date", "created_at", "updated_at"),
        fields=(
            ref("beneficiary_id", "Beneficiary", "beneficiary", option_label="first_name"),
            ref("organization_id", "Organization", "organization"),
            FormField("available_points", "Available points", input_type="number", default=0),
            FormField("total_points_earned", "Total points earned", input_type="number", default=0),
            FormField("total_points_redeemed", "Total points redeemed", input_type="number", default=0),
            FormField("is_active", "Active", input_type="checkbox", default=True),
        ),
    ),
    EntityConfig(
        name="category",
        label="Category",
        model=Category,
        schema=CategoryInput,
        order_by="name",
        fields=(
            FormField("name", "Name", required=True),
            FormField("description", "Description", input_type="textarea"),
            FormField("active", "Active", input_type="checkbox", default=True),
        ),
    ),
    EntityConfig(
        name="subcategory",
        label="Subcategory",
        model=Subcategory,
        schema=SubcategoryInput,
        order_by="name",
        embeds={"category": ("name",)},
        fields=(
            ref("category_id", "Category", "category", options_active_only=True),
            FormField("name", "Name", required=True),
            FormField("description", "Description", input_type="textarea"),
            FormField("active", "Active", input_type="checkbox", default=True),
        ),
    ),
    EntityConfig(
        name="product",
        label="Product",
        model=Product,
        schema=ProductInput,
        order_by="name",
        embeds={"subcategory": ("name",)},
        server_defaults=("creation_date",),
        fields=(
            ref("subcategory_id", "Subcategory", "subcategory", options_active_only=True),
            FormField("name", "Name", required=True),
            FormField("description", "Description", input_type="textarea"),
            FormField("required_points", "Required points", input_type="number", default=0),
            FormField("active", "Active", input_type="checkbox", default=True),
        ),
    ),
    EntityConfig(
        name="stock",
        label="Stock",
        model=Stock,
        schema=StockInput,
        order_by="last_updated",
        ascending=False,
        embeds={"branch": ("name",), "product": ("name",)},
        server_defaults=("last_updated",),
        fields=(
            ref("branch_id", "Branch", "branch"),
            ref("product_id", "Product", "product"),
            FormField("quantity", "Quantity", input_type="number", default=0),
            FormField("minimum_quantity", "Minimum quantity", input_type="number", default=0),
        ),
    ),
    EntityConfig(
        name="status",
        label="Status",
        model=Status,
        schema=StatusInput,
        order_by="order_num",
        fields=(
            FormField("name", "Name", required=True),
            FormField("description", "Description", input_type="textarea"),
            FormField("is_terminal", "Terminal", input_type="checkbox", default=False),
            FormField("order_num", "Order", input_type="number", default=0),
        ),
    ),
    EntityConfig(
        name="app_order",
        label="Order",
        model=AppOrder,
        schema=AppOrderInput,
        order_by="creation_date",
        ascending=False,
        server_defaults=("creation_date",),
        fields=(
            FormField("order_number", "Order number", required=True),
            FormField("total_points", "Total points", input_type="number", default=0),
            FormField("observations", "Observations", input_type="textarea"),
        ),
    ),
    EntityConfig(
        name="history",
        label="History",
        model=History,
        schema=HistoryInput,
        order_by="change_date",
        ascending=False,
        embeds={"app_order": ("order_number",), "status": ("name",)},
        server_defaults=("change_date",),
        fields=(
            ref("order_id", "Order", "app_order", option_label="order_number"),
            ref("status_id", "Status", "status", required=False),
            FormField("change_date", "Change date", input_type="datetime-local"),
            FormField("observations", "Observations", input_type="textarea"),
        ),
    ),
    EntityConfig(
        name="redemption",
        label="Redemption",
        model=Redemption,
        schema=RedemptionInput,
        order_by="redemption_date",
        ascending=False,
        embeds={"app_order": ("order_number",), "beneficiary": ("first_name", "last_name"), "product": ("name",)},
        server_defaults=("redemption_date",),
        fields=(
            ref("beneficiary_id", "Beneficiary", "beneficiary", option_label="first_name"),
            ref("product_id", "Product", "product", required=False),
            ref("order_id", "Order", "app_order", option_label="order_number"),
            FormField("points_used", "Points used", input_type="number", default=0),
            FormField("quantity", "Quantity", input_type="number", default=1),
            FormField("redemption_date", "Redemption date", input_type="datetime-local"),
        ),
    ),
    EntityConfig(
        name="assignment",
        label="Assignment",
        model=Assignment,
        schema=AssignmentInput,
        order_by="assignment_date",
        ascending=False,
        embeds={"branch": ("name",), "beneficiary": ("first_name", "last_name")},
        server_defaults=("assignment_date",),
        fields=(
            ref("branch_id", "Branch", "branch"),
            ref("beneficiary_id", "Beneficiary", "beneficiary", option_label="first_name"),
            ref("user_id", "Assigned by", "app_user", required=False, option_label="first_name"),
            FormField("points", "Points", input_type="number", default=0),
            FormField("reason", "Reason"),
            FormField("assignment_date", "Assignment date", input_type="datetime-local"),
            FormField("observations", "Observations", input_type="textarea"),
        ),
    ),
    EntityConfig(
        name="user_permission",
        label="User permission",
        model=UserPermission,
        schema=UserPermissionInput,
        order_by="assignment_date",
        ascending=False,
        embeds={"app_user": ("first_name", "last_name"), "branch": ("name",)},
        server_defaults=("assignment_date",),
        fields=(
            ref("user_id", "User", "app_user", option_label="first_name"),
            ref("branch_id", "Branch", "branch"),
            FormField("action", "Action", required=True),
        ),
    ),
    EntityConfig(
        name="collaborator_permission",
        label="Collaborator permission",
        model=CollaboratorPermission,
        schema=CollaboratorPermissionInput,
        order_by="created_at",
        ascending=False,
        embeds={"collaborator": ("first_name", "last_name", "email")},
        server_defaults=("created_at", "updated_at"),
        fields=(
            ref("collaborator_id", "Collaborator", "app_user", option_label="email"),
            FormField("permission_type", "Permission type", required=True),
            FormField("can_execute", "Can execute", input_type="checkbox", default=True),
        ),
    ),
    EntityConfig(
        name="restricted_collaborator_action",
        label="Restricted action",
        model=RestrictedCollaboratorAction,
        schema=RestrictedCollaboratorActionInput,
        order_by="action_name",
        server_defaults=("created_at",),
        fields=(
            FormField("action_name", "Action name", required=True),
            FormField("description", "Description", input_type="textarea"),
        ),
    ),
    EntityConfig(
        name="organization_notification_limits",
        label="Organization notification limit",
        model=OrganizationNotificationLimit,
        schema=OrganizationNotificationLimitInput,
        order_by="created_at",
        ascending=False,
        embeds={"organization": ("name",)},
        server_defaults=("created_at", "updated_at"),
        fields=(
            ref("organization_id", "Organization", "organization"),
            FormField("plan_type", "Plan", input_type="select", choices=("free", "light", "pro", "premium"), default="free"),
            FormField("daily_limit", "Daily limit", input_type="number", default=1),
            FormField("monthly_limit", "Monthly limit", input_type="number", default=5),
            FormField("min_hours_between_notifications", "Hours between notifications", input_type="number", default=24),
        ),
    ),
    EntityConfig(
        name="points_rule",
        label="Points rule",
        model=PointsRule,
        schema=PointsRuleInput,
        order_by="created_at",
        ascending=False,
        embeds={"organization": ("name",), "branch": ("name",), "category": ("name",)},
        server_defaults=("created_at", "updated_at"),
        fields=(
            FormField("name", "Name", required=True),
            FormField("description", "Description", input_type="textarea"),
            FormField(
                "rule_type",
                "Rule type",
                input_type="select",
                choices=tuple(rule_type.value for rule_type in PointsRuleType),
                default=PointsRuleType.FIXED_AMOUNT.value,
            ),
            FormField("points_per_dollar", "Points per dollar", input_type="number"),
            FormField("percentage", "Percentage", input_type="number"),
            FormField("points_per_item", "Points per item", input_type="number"),
            FormField("config", "Config", input_type="json"),
            ref("organization_id", "Organization", "organization"),
            ref("branch_id", "Branch", "branch", required=False),
            ref("category_id", "Category", "category", required=False),
            FormField("is_active", "Active", input_type="checkbox", default=True),
            FormField("is_default", "Default rule", input_type="checkbox", default=False),
            FormField("priority", "Priority", input_type="number", default=0),
            FormField("start_date", "Start date", input_type="date"),
            FormField("end_date", "End date", input_type="date"),
            FormField("valid_from", "Valid from", input_type="datetime-local"),
            FormField("valid_until", "Valid until", input_type="datetime-local"),
            FormField(
                "days_of_week",
                "Days of week",
                input_type="select",
                choices=("0", "1", "2", "3", "4", "5", "6"),
                multiple=True,
            ),
            FormField("time_start", "Start time", input_type="time"),
            FormField("time_end", "End time", input_type="time"),
            FormField("display_name", "Display name"),
            FormField("display_icon", "Display icon"),
            FormField("display_color", "Display color"),
            FormField("show_in_app", "Show in app", input_type="checkbox", default=True),
        ),
    ),
)

ENTITY_CONFIGS: dict[str, EntityConfig] = {config.name: config for config in _ENTITIES}


def _dependent_entities(configs: dict[str, EntityConfig]) -> dict[str, tuple[str, ...]]:
    # Entities reachable through foreign keys pointing at each entity, transitively.
    by_table = {config.table.name: name for name, config in configs.items()}
    children: dict[str, set[str]] = {name: set() for name in configs}
    for name, config in configs.items():
        for foreign_key in config.table.foreign_keys:
            parent = by_table.get(foreign_key.column.table.name)
            if parent is not None and parent != name:
                children[parent].add(name)

    dependents: dict[str, tuple[str, ...]] = {}
    for name in configs:
        seen: set[str] = set()
        pending = list(children[name])
        while pending:
            child = pending.pop()
            if child in seen or child == name:
                continue
            seen.add(child)
            pending.extend(children[child])
        dependents[name] = tuple(sorted(seen))
    return dependents


_DEPENDENTS = _dependent_entities(ENTITY_CONFIGS)


def get_entity_config(name: str) -> EntityConfig:
    try:
        return ENTITY_CONFIGS[name]
    except KeyError as exc:
        raise KeyError(f"Unknown dashboard entity: {name}") from exc


__all__ = ["ENTITY_CONFIGS", "EntityConfig", "FormField", "InputType", "get_entity_config", "ref"]
