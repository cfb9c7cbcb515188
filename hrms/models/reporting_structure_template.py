"""ReportingStructureTemplate ORM: shared catalog entry for an organization chart shape."""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateCatalogMixin


class ReportingStructureTemplate(TemplateCatalogMixin, Base):
    __tablename__ = "reporting_structure_templates"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    hierarchy_levels: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    reporting_relationships: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
