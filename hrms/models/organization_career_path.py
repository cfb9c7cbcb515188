"""OrganizationCareerPath ORM: an organization's copy of a CareerPathTemplate."""

import uuid

from sqlalchemy import ForeignKey, Integer, JSON, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateInstanceMixin


class OrganizationCareerPath(TemplateInstanceMixin, Base):
    __tablename__ = "organization_career_paths"
    __table_args__ = (
        UniqueConstraint("organization_id", "template_id", name="uq_org_career_paths_template"),
    )

    template_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("career_path_templates.id"), nullable=False,
    )
    custom_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    custom_from_role: Mapped[str | None] = mapped_column(String(200), nullable=True)
    custom_to_role: Mapped[str | None] = mapped_column(String(200), nullable=True)
    custom_typical_duration_months: Mapped[int | None] = mapped_column(Integer, nullable=True)
    custom_milestones: Mapped[list | None] = mapped_column(JSON, nullable=True)
