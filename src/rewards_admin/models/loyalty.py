"""Point assignments and points-earning rules."""

from __future__ import annotations

from enum import Enum
from uuid import uuid4

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text, Time, func
from sqlalchemy.dialects.postgresql import UUID

from rewards_admin.db.base import Base


class PointsRuleType(str, Enum):
    FIXED_AMOUNT = "fixed_amount"
    PERCENTAGE = "percentage"
    FIXED_PER_ITEM = "fixed_per_item"
    TIERED = "tiered"


class Assignment(Base):
    """Manual points grant to a beneficiary at a branch."""

    __tablename__ = "assignment"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    branch_id = Column(UUID(as_uuid=True), ForeignKey("branch.id", ondelete="CASCADE"), nullable=False)
    beneficiary_id = Column(UUID(as_uuid=True), ForeignKey("beneficiary.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True)
    points = Column(Integer, nullable=False, default=0, server_default="0")
    reason = Column(String, nullable=True)
    assignment_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    observations = Column(Text, nullable=True)


class PointsRule(Base):
    """How purchases earn points, optionally restricted to a schedule window."""

    __tablename__ = "points_rule"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    rule_type = Column(String(32), nullable=False, default=PointsRuleType.FIXED_AMOUNT.value)
    config = Column(JSON, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True, server_default="1")
    organization_id = Column(UUID(as_uuid=True), ForeignKey("organization.id", ondelete="CASCADE"), nullable=False)
    branch_id = Column(UUID(as_uuid=True), ForeignKey("branch.id", ondelete="CASCADE"), nullable=True)
    category_id = Column(UUID(as_uuid=True), ForeignKey("category.id", ondelete="SET NULL"), nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    is_default = Column(Boolean, nullable=False, default=False, server_default="0")
    priority = Column(Integer, nullable=False, default=0, server_default="0")
    valid_from = Column(DateTime(timezone=True), nullable=True)
    valid_until = Column(DateTime(timezone=True), nullable=True)
    days_of_week = Column(JSON, nullable=True)
    time_start = Column(Time, nullable=True)
    time_end = Column(Time, nullable=True)
    display_name = Column(String, nullable=True)
    display_icon = Column(String, nullable=True)
    display_color = Column(String(16), nullable=True)
    show_in_app = Column(Boolean, nullable=False, default=True, server_default="1")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
