"""OrganizationCompensationBand ORM: an organization's copy of a CompensationBandTemplate."""

import uuid

from sqlalchemy import ForeignKey, JSON, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateInstanceMixin


class OrganizationCompensationBand(TemplateInstanceMixin, Base):
    __tablename__ = "organization_compensation_bands"
    __table_args__ = (
        UniqueConstraint(
            "organization_id", "template_id", name="uq_org_compensation_bands_template",
        ),
    )

    template_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("compensation_band_templates.id"), nullable=False,
    )
    custom_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    custom_salary_range: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    custom_grade_levels: Mapped[list | None] = mapped_column(JSON, nullable=True)
    custom_progression_criteria: Mapped[list | None] = mapped_column(JSON, nullable=True)
