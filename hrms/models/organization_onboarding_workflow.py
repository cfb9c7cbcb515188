"""OrganizationOnboardingWorkflow ORM: an organization's copy of an OnboardingWorkflowTemplate."""

import uuid

from sqlalchemy import ForeignKey, Integer, JSON, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateInstanceMixin


class OrganizationOnboardingWorkflow(TemplateInstanceMixin, Base):
    __tablename__ = "organization_onboarding_workflows"
    __table_args__ = (
        UniqueConstraint(
            "organization_id", "template_id", name="uq_org_onboarding_workflows_template",
        ),
    )

    template_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("onboarding_workflow_templates.id"), nullable=False,
    )
    custom_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    custom_workflow_steps: Mapped[list | None] = mapped_column(JSON, nullable=True)
    custom_timeline_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    custom_required_documents: Mapped[list | None] = mapped_column(JSON, nullable=True)
