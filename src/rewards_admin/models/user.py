"""Back-office users and their branch permissions."""

from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID

from rewards_admin.db.base import Base


class AppUser(Base):
    __tablename__ = "app_user"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    organization_id = Column(UUID(as_uuid=True), ForeignKey("organization.id", ondelete="CASCADE"), nullable=False)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    email = Column(String, nullable=True, unique=True)
    username = Column(String, nullable=True, unique=True)
    password = Column(String, nullable=True)
    active = Column(Boolean, nullable=False, default=True, server_default="1")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class AppUserOrganization(Base):
    __tablename__ = "app_user_organization"
    __table_args__ = (
        UniqueConstraint("app_user_id", "organization_id", name="uq_app_user_organization"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    app_user_id = Column(UUID(as_uuid=True), ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False)
    organization_id = Column(UUID(as_uuid=True), ForeignKey("organization.id", ondelete="CASCADE"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default="1")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class UserPermission(Base):
    __tablename__ = "user_permission"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False)
    branch_id = Column(UUID(as_uuid=True), ForeignKey("branch.id", ondelete="CASCADE"), nullable=False)
    action = Column(String, nullable=False)
    assignment_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class CollaboratorPermission(Base):
    """Per-collaborator grant or denial of a permission type."""

    __tablename__ = "collaborator_permission"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    collaborator_id = Column(
        UUID(as_uuid=True), ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    permission_type = Column(String, nullable=False)
    can_execute = Column(Boolean, nullable=False, default=True, server_default="1")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class RestrictedCollaboratorAction(Base):
    """Actions collaborators may never perform, whatever their permissions."""

    __tablename__ = "restricted_collaborator_action"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    action_name = Column(String, nullable=False, unique=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
