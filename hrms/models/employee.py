"""Employee ORM: the HR profile of a user inside an organization.

Invariants:
    - One employee profile per user (user_id unique)
    - manager_id points to another employee of the same organization; no cycles
      (checked in services/employee_service.py before write)
    - Balances are days, never negative (core/leave_rules.py)
    - Soft delete: deleted_at set, direct reports reassigned by the service

Design Decisions:
    - tenant_id/organization_id denormalized: scope filters without joining users
    - No self-referential relationship(): manager and reports are loaded by explicit
      queries so a lookup never walks the whole reporting tree
"""

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base, TimestampMixin


class Employee(TimestampMixin, Base):
    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("tenants.id"), nullable=False, index=True,
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("organizations.id"), nullable=False, index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, unique=True,
    )
    employee_number: Mapped[str] = mapped_column(String(20), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    position: Mapped[str | None] = mapped_column(String(100), nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    hire_date: Mapped[date] = mapped_column(Date, nullable=False)
    manager_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("employees.id"), nullable=True, index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    vacation_balance: Mapped[float] = mapped_column(
        Numeric(6, 2, asdecimal=False), nullable=False, default=25.0,
    )
    sick_balance: Mapped[float] = mapped_column(
        Numeric(6, 2, asdecimal=False), nullable=False, default=10.0,
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
