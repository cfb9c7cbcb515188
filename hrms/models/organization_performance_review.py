"""OrganizationPerformanceReview ORM: an organization's copy of a PerformanceReviewTemplate."""

import uuid

from sqlalchemy import ForeignKey, JSON, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateInstanceMixin


class OrganizationPerformanceReview(TemplateInstanceMixin, Base):
    __tablename__ = "organization_performance_reviews"
    __table_args__ = (
        UniqueConstraint(
            "organization_id", "template_id", name="uq_org_performance_reviews_template",
        ),
    )

    template_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("performance_review_templates.id"), nullable=False,
    )
    custom_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    custom_evaluation_criteria: Mapped[list | None] = mapped_column(JSON, nullable=True)
    custom_rating_scale: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    custom_frequency: Mapped[str | None] = mapped_column(String(50), nullable=True)
