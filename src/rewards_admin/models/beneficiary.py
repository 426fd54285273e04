"""Beneficiaries (loyalty members) and their per-organization balances."""

from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID

from rewards_admin.db.base import Base


class Beneficiary(Base):
    __tablename__ = "beneficiary"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String(32), nullable=True)
    document_id = Column(String, nullable=True, unique=True)
    available_points = Column(Integer, nullable=False, default=0, server_default="0")
    registration_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    address_id = Column(UUID(as_uuid=True), ForeignKey("address.id", ondelete="SET NULL"), nullable=True)


class BeneficiaryOrganization(Base):
    __tablename__ = "beneficiary_organization"
    __table_args__ = (
        UniqueConstraint("beneficiary_id", "organization_id", name="uq_beneficiary_organization"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    beneficiary_id = Column(UUID(as_uuid=True), ForeignKey("beneficiary.id", ondelete="CASCADE"), nullable=False)
    organization_id = Column(UUID(as_uuid=True), ForeignKey("organization.id", ondelete="CASCADE"), nullable=False)
    available_points = Column(Integer, nullable=False, default=0, server_default="0")
    total_points_earned = Column(Integer, nullable=False, default=0, server_default="0")
    total_points_redeemed = Column(Integer, nullable=False, default=0, server_default="0")
    joined_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default="1")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
