"""TemplateInheritance ORM: the link between a catalog template and an org instance.

Invariants:
    - Unique on (template_id, instance_id, organization_id, template_type)
    - custom_fields is cumulative: every field the organization ever customized, with its value
    - sync_conflicts holds the conflicts of the last refused sync; cleared on success
    - Written in the same transaction as its instance row

Design Decisions:
    - template_id/instance_id are plain UUIDs: template_type selects which tables they
      reference, so no single foreign key can express them
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean, DateTime, ForeignKey, Integer, JSON, String, UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base, TimestampMixin


class TemplateInheritance(TimestampMixin, Base):
    __tablename__ = "template_inheritance"
    __table_args__ = (
        UniqueConstraint(
            "template_id", "instance_id", "organization_id", "template_type",
            name="uq_template_inheritance_link",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    template_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    instance_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("organizations.id"), nullable=False, index=True,
    )
    template_type: Mapped[str] = mapped_column(String(30), nullable=False)
    inheritance_type: Mapped[str] = mapped_column(String(20), nullable=False, default="full")
    customization_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    auto_sync_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    custom_fields: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    last_template_sync: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    template_version: Mapped[str | None] = mapped_column(String(20), nullable=True)
    sync_conflicts: Mapped[list | None] = mapped_column(JSON, nullable=True)
