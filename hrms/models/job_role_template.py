"""JobRoleTemplate ORM: shared catalog entry for a job role and its skill framework."""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateCatalogMixin


class JobRoleTemplate(TemplateCatalogMixin, Base):
    __tablename__ = "job_role_templates"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    responsibilities: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    requirements: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    skills: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
