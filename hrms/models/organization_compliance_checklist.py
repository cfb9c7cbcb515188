"""OrganizationComplianceChecklist ORM: an organization's copy of a ComplianceChecklistTemplate."""

import uuid

from sqlalchemy import ForeignKey, JSON, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateInstanceMixin


class OrganizationComplianceChecklist(TemplateInstanceMixin, Base):
    __tablename__ = "organization_compliance_checklists"
    __table_args__ = (
        UniqueConstraint(
            "organization_id", "template_id", name="uq_org_compliance_checklists_template",
        ),
    )

    template_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("compliance_checklist_templates.id"), nullable=False,
    )
    custom_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    custom_checklist_items: Mapped[list | None] = mapped_column(JSON, nullable=True)
    custom_compliance_frequency: Mapped[str | None] = mapped_column(String(50), nullable=True)
    custom_regulatory_framework: Mapped[str | None] = mapped_column(String(200), nullable=True)
