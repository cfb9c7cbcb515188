"""OrganizationTrainingProgram ORM: an organization's copy of a TrainingProgramTemplate."""

import uuid

from sqlalchemy import Float, ForeignKey, JSON, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateInstanceMixin


class OrganizationTrainingProgram(TemplateInstanceMixin, Base):
    __tablename__ = "organization_training_programs"
    __table_args__ = (
        UniqueConstraint(
            "organization_id", "template_id", name="uq_org_training_programs_template",
        ),
    )

    template_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("training_program_templates.id"), nullable=False,
    )
    custom_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    custom_delivery_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    custom_duration_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    custom_skills_covered: Mapped[list | None] = mapped_column(JSON, nullable=True)
