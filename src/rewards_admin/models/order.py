"""Redemption orders, their status history and the redemptions themselves."""

from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID

from rewards_admin.db.base import Base


class Status(Base):
    __tablename__ = "status"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    is_terminal = Column(Boolean, nullable=False, default=False, server_default="0")
    order_num = Column(Integer, nullable=False, default=0, server_default="0")


class AppOrder(Base):
    __tablename__ = "app_order"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    order_number = Column(String, nullable=False, unique=True)
    creation_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    total_points = Column(Integer, nullable=False, default=0, server_default="0")
    observations = Column(Text, nullable=True)


class History(Base):
    __tablename__ = "history"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    order_id = Column(UUID(as_uuid=True), ForeignKey("app_order.id", ondelete="CASCADE"), nullable=False)
    status_id = Column(UUID(as_uuid=True), ForeignKey("status.id"), nullable=True)
    change_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    observations = Column(Text, nullable=True)


class Redemption(Base):
    __tablename__ = "redemption"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    beneficiary_id = Column(UUID(as_uuid=True), ForeignKey("beneficiary.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(UUID(as_uuid=True), ForeignKey("product.id"), nullable=True)
    order_id = Column(UUID(as_uuid=True), ForeignKey("app_order.id", ondelete="CASCADE"), nullable=False)
    points_used = Column(Integer, nullable=False, default=0, server_default="0")
    quantity = Column(Integer, nullable=False, default=1, server_default="1")
    redemption_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
