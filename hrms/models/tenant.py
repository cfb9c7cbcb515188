"""Tenant ORM: the top-level customer account that owns organizations.

Invariants:
    - slug is globally unique, lowercase alphanumeric
    - subscription_status drives usability (core/tenancy.py tenant_is_usable)
    - max_organizations / max_users_per_org are quotas enforced by services

Design Decisions:
    - JSON for features/settings: flags vary per plan without schema changes
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, JSON, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base, TimestampMixin


class Tenant(TimestampMixin, Base):
    """Customer account: billing, quotas and defaults for its organizations."""
    __tablename__ = "tenants"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    domain: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    subscription_plan: Mapped[str] = mapped_column(
        String(20), nullable=False, default="trial",
    )
    subscription_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="trial",
    )
    trial_ends_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    max_organizations: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    max_users_per_org: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    timezone: Mapped[str] = mapped_column(String(50), nullable=False, default="UTC")
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    features: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    settings: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
