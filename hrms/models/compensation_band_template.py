"""CompensationBandTemplate ORM: shared catalog entry for a salary band.

salary_range is {"min", "max", "currency"}; schemas/template_fields.py SalaryRange
enforces min <= max before it is stored.
"""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateCatalogMixin


class CompensationBandTemplate(TemplateCatalogMixin, Base):
    __tablename__ = "compensation_band_templates"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    salary_range: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    grade_levels: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    progression_criteria: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
