"""Organizations, their addresses and branches."""

from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID

from rewards_admin.db.base import Base


class Organization(Base):
    __tablename__ = "organization"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String, nullable=False)
    business_name = Column(String, nullable=True)
    tax_id = Column(String, nullable=True)
    logo_url = Column(Text, nullable=True)
    creation_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Address(Base):
    __tablename__ = "address"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    organization_id = Column(UUID(as_uuid=True), ForeignKey("organization.id", ondelete="CASCADE"), nullable=True)
    street = Column(String, nullable=False)
    number = Column(String, nullable=False)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    zip_code = Column(String, nullable=False)
    country = Column(String, nullable=True)
    place_id = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)


class Branch(Base):
    __tablename__ = "branch"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    organization_id = Column(UUID(as_uuid=True), ForeignKey("organization.id", ondelete="CASCADE"), nullable=False)
    address_id = Column(UUID(as_uuid=True), ForeignKey("address.id", ondelete="SET NULL"), nullable=True)
    name = Column(String, nullable=False)
    code = Column(String, nullable=True)
    phone = Column(String(32), nullable=True)
    active = Column(Boolean, nullable=False, default=True, server_default="1")


class OrganizationNotificationLimit(Base):
    """Push-notification quota per organization plan."""

    __tablename__ = "organization_notification_limits"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    organization_id = Column(
        UUID(as_uuid=True), ForeignKey("organization.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    plan_type = Column(String(16), nullable=False, default="free", server_default="free")
    daily_limit = Column(Integer, nullable=False, default=1, server_default="1")
    monthly_limit = Column(Integer, nullable=False, default=5, server_default="5")
    min_hours_between_notifications = Column(Integer, nullable=False, default=24, server_default="24")
    notifications_sent_today = Column(Integer, nullable=False, default=0, server_default="0")
    notifications_sent_this_month = Column(Integer, nullable=False, default=0, server_default="0")
    last_notification_sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
