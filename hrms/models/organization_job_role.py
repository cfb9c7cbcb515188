"""OrganizationJobRole ORM: an organization's copy of a JobRoleTemplate."""

import uuid

from sqlalchemy import ForeignKey, JSON, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateInstanceMixin


class OrganizationJobRole(TemplateInstanceMixin, Base):
    __tablename__ = "organization_job_roles"
    __table_args__ = (
        UniqueConstraint("organization_id", "template_id", name="uq_org_job_roles_template"),
    )

    template_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("job_role_templates.id"), nullable=False,
    )
    custom_title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    custom_responsibilities: Mapped[list | None] = mapped_column(JSON, nullable=True)
    custom_requirements: Mapped[list | None] = mapped_column(JSON, nullable=True)
    custom_skills: Mapped[list | None] = mapped_column(JSON, nullable=True)
