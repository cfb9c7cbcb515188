"""PerformanceReviewTemplate ORM: shared catalog entry for a review cycle."""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateCatalogMixin


class PerformanceReviewTemplate(TemplateCatalogMixin, Base):
    __tablename__ = "performance_review_templates"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    evaluation_criteria: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    rating_scale: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    frequency: Mapped[str | None] = mapped_column(String(50), nullable=True)
