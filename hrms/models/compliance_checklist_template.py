"""ComplianceChecklistTemplate ORM: shared catalog entry for a regulatory checklist."""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateCatalogMixin


class ComplianceChecklistTemplate(TemplateCatalogMixin, Base):
    __tablename__ = "compliance_checklist_templates"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    checklist_items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    compliance_frequency: Mapped[str | None] = mapped_column(String(50), nullable=True)
    regulatory_framework: Mapped[str | None] = mapped_column(String(200), nullable=True)
