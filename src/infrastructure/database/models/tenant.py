# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tenant, campus, user and refresh token models."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import (
    Base,
    SoftDeleteMixin,
    TenantScopedMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from src.utils.datetime import is_expired, utc_now

USER_ROLES = (
    "admin",
    "academic_director",
    "program_owner",
    "curriculum_designer",
    "teacher",
    "consultant",
    "accountant",
    "qa",
)


class Tenant(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A customer organization; the isolation boundary for all data."""

    __tablename__ = "tenants"

    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    @property
    def is_active(self) -> bool:
        """Check if tenant is active."""
        return self.status == "active"


class Campus(UUIDPrimaryKeyMixin, TenantScopedMixin, TimestampMixin, Base):
    """A physical location of a tenant."""

    __tablename__ = "campuses"

    code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)


class User(UUIDPrimaryKeyMixin, TenantScopedMixin, TimestampMixin, SoftDeleteMixin, Base):
    """An account that can sign in with email and password."""

    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("tenant_id", "email", name="uq_users_tenant_email"),)

    campus_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("campuses.id"), nullable=True
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="teacher")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def is_active(self) -> bool:
        """Check if the user may sign in."""
        return self.status == "active" and self.deleted_at is None


class RefreshToken(UUIDPrimaryKeyMixin, Base):
    """Stored hash of an issued refresh token."""

    __tablename__ = "refresh_tokens"

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False, index=True
    )
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    @property
    def is_valid(self) -> bool:
        """Check that the token is neither revoked nor expired."""
        if self.revoked_at is not None:
            return False
        return not is_expired(self.expires_at)

    def revoke(self) -> None:
        """Mark the token as revoked."""
        self.revoked_at = utc_now()
