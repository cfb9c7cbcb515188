"""OnboardingWorkflowTemplate ORM: shared catalog entry for new-hire onboarding steps."""

from sqlalchemy import Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateCatalogMixin


class OnboardingWorkflowTemplate(TemplateCatalogMixin, Base):
    __tablename__ = "onboarding_workflow_templates"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    workflow_steps: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    timeline_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    required_documents: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
