"""SkillTemplate ORM: shared catalog entry for a skill."""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateCatalogMixin


class SkillTemplate(TemplateCatalogMixin, Base):
    __tablename__ = "skill_templates"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    proficiency_levels: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
