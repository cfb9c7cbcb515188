"""Template column mixins shared by every catalog table and its org instances.

Invariants:
    - Catalog rows (TemplateCatalogMixin) carry version/category/is_active
    - Instance rows (TemplateInstanceMixin) mirror every customizable field as custom_<field>
      (core/template_inheritance.py TEMPLATE_FIELDS) and track inheritance metadata
    - Each instance table is unique on (organization_id, template_id)

Design Decisions:
    - template_id is declared per instance class: each points at a different catalog table
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import TimestampMixin


class TemplateCatalogMixin(TimestampMixin):
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    version: Mapped[str] = mapped_column(String(20), nullable=False, default="1.0")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class TemplateInstanceMixin(TimestampMixin):
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("organizations.id"), nullable=False, index=True,
    )
    custom_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    inheritance_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="full",
    )
    customization_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    auto_sync_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    template_version: Mapped[str | None] = mapped_column(String(20), nullable=True)
    last_template_sync: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
