"""OrganizationLeaveType ORM: an organization's copy of a LeaveTypeTemplate."""

import uuid

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateInstanceMixin


class OrganizationLeaveType(TemplateInstanceMixin, Base):
    __tablename__ = "organization_leave_types"
    __table_args__ = (
        UniqueConstraint("organization_id", "template_id", name="uq_org_leave_types_template"),
    )

    template_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("leave_type_templates.id"), nullable=False,
    )
    custom_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    custom_max_days_per_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    custom_carry_over_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    custom_requires_approval: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    custom_is_paid: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
