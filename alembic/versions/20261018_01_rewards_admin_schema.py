"""Rewards admin schema.

Revision ID: 20261018_01
Revises: 
Create Date: 2026-10-18
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "20261018_01"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True)


def _fk(name: str, target: str, *, nullable: bool = False, ondelete: str | None = "CASCADE") -> sa.Column:
    return sa.Column(
        name,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey(f"{target}.id", ondelete=ondelete),
        nullable=nullable,
    )


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def _flag(name: str, default: bool) -> sa.Column:
    return sa.Column(name, sa.Boolean(), nullable=False, server_default="1" if default else "0")


def _counter(name: str, default: int = 0) -> sa.Column:
    return sa.Column(name, sa.Integer(), nullable=False, server_default=str(default))


def upgrade() -> None:
    op.create_table(
        "organization",
        _id(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("business_name", sa.String(), nullable=True),
        sa.Column("tax_id", sa.String(), nullable=True),
        sa.Column("logo_url", sa.Text(), nullable=True),
        _timestamp("creation_date"),
    )
    op.create_table(
        "address",
        _id(),
        _fk("organization_id", "organization", nullable=True),
        sa.Column("street", sa.String(), nullable=False),
        sa.Column("number", sa.String(), nullable=False),
        sa.Column("city", sa.String(), nullable=False),
        sa.Column("state", sa.String(), nullable=False),
        sa.Column("zip_code", sa.String(), nullable=False),
        sa.Column("country", sa.String(), nullable=True),
        sa.Column("place_id", sa.String(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
    )
    op.create_table(
        "branch",
        _id(),
        _fk("organization_id", "organization"),
        _fk("address_id", "address", nullable=True, ondelete="SET NULL"),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("code", sa.String(), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        _flag("active", True),
    )
    op.create_table(
        "organization_notification_limits",
        _id(),
        sa.Column(
            "organization_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("organization.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("plan_type", sa.String(length=16), nullable=False, server_default="free"),
        _counter("daily_limit", 1),
        _counter("monthly_limit", 5),
        _counter("min_hours_between_notifications", 24),
        _counter("notifications_sent_today"),
        _counter("notifications_sent_this_month"),
        sa.Column("last_notification_sent_at", sa.DateTime(timezone=True), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_table(
        "app_user",
        _id(),
        _fk("organization_id", "organization"),
        sa.Column("first_name", sa.String(), nullable=True),
        sa.Column("last_name", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True, unique=True),
        sa.Column("username", sa.String(), nullable=True, unique=True),
        sa.Column("password", sa.String(), nullable=True),
        _flag("active", True),
        _timestamp("created_at"),
    )
    op.create_table(
        "app_user_organization",
        _id(),
        _fk("app_user_id", "app_user"),
        _fk("organization_id", "organization"),
        _flag("is_active", True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.UniqueConstraint("app_user_id", "organization_id", name="uq_app_user_organization"),
    )
    op.create_table(
        "user_permission",
        _id(),
        _fk("user_id", "app_user"),
        _fk("branch_id", "branch"),
        sa.Column("action", sa.String(), nullable=False),
        _timestamp("assignment_date"),
    )
    op.create_table(
        "beneficiary",
        _id(),
        sa.Column("first_name", sa.String(), nullable=True),
        sa.Column("last_name", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("document_id", sa.String(), nullable=True, unique=True),
        _counter("available_points"),
        _timestamp("registration_date"),
        _fk("address_id", "address", nullable=True, ondelete="SET NULL"),
    )
    op.create_table(
        "beneficiary_organization",
        _id(),
        _fk("beneficiary_id", "beneficiary"),
        _fk("organization_id", "organization"),
        _counter("available_points"),
        _counter("total_points_earned"),
        _counter("total_points_redeemed"),
        _timestamp("joined_date"),
        _flag("is_active", True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.UniqueConstraint("beneficiary_id", "organization_id", name="uq_beneficiary_organization"),
    )
    op.create_table(
        "category",
        _id(),
        sa.Column("name", sa.String(), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        _flag("active", True),
    )
    op.create_table(
        "subcategory",
        _id(),
        _fk("category_id", "category"),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _flag("active", True),
    )
    op.create_table(
        "product",
        _id(),
        _fk("subcategory_id", "subcategory", ondelete=None),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _counter("required_points"),
        _flag("active", True),
        _timestamp("creation_date"),
    )
    op.create_table(
        "stock",
        _id(),
        _fk("branch_id", "branch"),
        _fk("product_id", "product"),
        _counter("quantity"),
        _counter("minimum_quantity"),
        _timestamp("last_updated"),
        sa.UniqueConstraint("branch_id", "product_id", name="uq_stock_branch_product"),
    )
    op.create_table(
        "status",
        _id(),
        sa.Column("name", sa.String(), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        _flag("is_terminal", False),
        _counter("order_num"),
    )
    op.create_table(
        "app_order",
        _id(),
        sa.Column("order_number", sa.String(), nullable=False, unique=True),
        _timestamp("creation_date"),
        _counter("total_points"),
        sa.Column("observations", sa.Text(), nullable=True),
    )
    op.create_table(
        "history",
        _id(),
        _fk("order_id", "app_order"),
        _fk("status_id", "status", nullable=True, ondelete=None),
        _timestamp("change_date"),
        sa.Column("observations", sa.Text(), nullable=True),
    )
    op.create_table(
        "redemption",
        _id(),
        _fk("beneficiary_id", "beneficiary"),
        _fk("product_id", "product", nullable=True, ondelete=None),
        _fk("order_id", "app_order"),
        _counter("points_used"),
        _counter("quantity", 1),
        _timestamp("redemption_date"),
    )
    op.create_table(
        "assignment",
        _id(),
        _fk("branch_id", "branch"),
        _fk("beneficiary_id", "beneficiary"),
        _fk("user_id", "app_user", nullable=True, ondelete="SET NULL"),
        _counter("points"),
        sa.Column("reason", sa.String(), nullable=True),
        _timestamp("assignment_date"),
        sa.Column("observations", sa.Text(), nullable=True),
    )
    op.create_table(
        "points_rule",
        _id(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("rule_type", sa.String(length=32), nullable=False),
        sa.Column("config", sa.JSON(), nullable=False),
        _flag("is_active", True),
        _fk("organization_id", "organization"),
        _fk("branch_id", "branch", nullable=True),
        _fk("category_id", "category", nullable=True, ondelete="SET NULL"),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        _flag("is_default", False),
        _counter("priority"),
        sa.Column("valid_from", sa.DateTime(timezone=True), nullable=True),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("days_of_week", sa.JSON(), nullable=True),
        sa.Column("time_start", sa.Time(), nullable=True),
        sa.Column("time_end", sa.Time(), nullable=True),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("display_icon", sa.String(), nullable=True),
        sa.Column("display_color", sa.String(length=16), nullable=True),
        _flag("show_in_app", True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_points_rule_organization_active", "points_rule", ["organization_id", "is_active"])


def downgrade() -> None:
    op.drop_index("ix_points_rule_organization_active", table_name="points_rule")
    for table in (
        "points_rule",
        "assignment",
        "redemption",
        "history",
        "app_order",
        "status",
        "stock",
        "product",
        "subcategory",
        "category",
        "beneficiary_organization",
        "beneficiary",
        "user_permission",
        "app_user_organization",
        "app_user",
        "organization_notification_limits",
        "branch",
        "address",
        "organization",
    ):
        op.drop_table(table)
