"""BenefitPackageTemplate ORM: shared catalog entry for a bundle of employee benefits."""

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateCatalogMixin


class BenefitPackageTemplate(TemplateCatalogMixin, Base):
    __tablename__ = "benefit_package_templates"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    benefits_included: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    eligibility_criteria: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    enrollment_process: Mapped[str | None] = mapped_column(Text, nullable=True)
