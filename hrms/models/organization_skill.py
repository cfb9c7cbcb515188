"""OrganizationSkill ORM: an organization's copy of a SkillTemplate."""

import uuid

from sqlalchemy import ForeignKey, JSON, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateInstanceMixin


class OrganizationSkill(TemplateInstanceMixin, Base):
    __tablename__ = "organization_skills"
    __table_args__ = (
        UniqueConstraint("organization_id", "template_id", name="uq_org_skills_template"),
    )

    template_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("skill_templates.id"), nullable=False,
    )
    custom_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    custom_category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    custom_proficiency_levels: Mapped[list | None] = mapped_column(JSON, nullable=True)
