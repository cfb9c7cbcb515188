"""LeaveTypeTemplate ORM: shared catalog entry for a leave policy."""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateCatalogMixin


class LeaveTypeTemplate(TemplateCatalogMixin, Base):
    __tablename__ = "leave_type_templates"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    max_days_per_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    carry_over_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    requires_approval: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
