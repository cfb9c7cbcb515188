"""OrganizationBenefitPackage ORM: an organization's copy of a BenefitPackageTemplate."""

import uuid

from sqlalchemy import ForeignKey, JSON, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateInstanceMixin


class OrganizationBenefitPackage(TemplateInstanceMixin, Base):
    __tablename__ = "organization_benefit_packages"
    __table_args__ = (
        UniqueConstraint(
            "organization_id", "template_id", name="uq_org_benefit_packages_template",
        ),
    )

    template_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("benefit_package_templates.id"), nullable=False,
    )
    custom_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    custom_benefits_included: Mapped[list | None] = mapped_column(JSON, nullable=True)
    custom_eligibility_criteria: Mapped[list | None] = mapped_column(JSON, nullable=True)
    custom_enrollment_process: Mapped[str | None] = mapped_column(Text, nullable=True)
