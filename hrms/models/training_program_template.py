"""TrainingProgramTemplate ORM: shared catalog entry for a training program."""

from sqlalchemy import Float, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateCatalogMixin


class TrainingProgramTemplate(TemplateCatalogMixin, Base):
    __tablename__ = "training_program_templates"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    delivery_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    duration_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    skills_covered: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
