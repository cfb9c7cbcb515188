"""CareerPathTemplate ORM: shared catalog entry for a role-to-role progression."""

from sqlalchemy import Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateCatalogMixin


class CareerPathTemplate(TemplateCatalogMixin, Base):
    __tablename__ = "career_path_templates"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    from_role: Mapped[str | None] = mapped_column(String(200), nullable=True)
    to_role: Mapped[str | None] = mapped_column(String(200), nullable=True)
    typical_duration_months: Mapped[int | None] = mapped_column(Integer, nullable=True)
    milestones: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
