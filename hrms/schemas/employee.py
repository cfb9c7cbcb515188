"""Employee Schemas: profile create/update and views with manager / direct reports."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from hrms.core.domain_types import EmployeeStatus
from hrms.schemas.common import ORMModel, Pagination


class EmployeeCreate(BaseModel):
    """Profile for an existing user; names and email are copied from the user."""
    user_id: UUID
    manager_id: UUID | None = None
    position: str | None = Field(None, max_length=100)
    department: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=50)
    hire_date: date | None = None
    vacation_balance: float | None = Field(None, ge=0)
    sick_balance: float | None = Field(None, ge=0)


class EmployeeUpdate(BaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    position: str | None = Field(None, max_length=100)
    department: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=50)
    manager_id: UUID | None = None
    status: EmployeeStatus | None = None
    vacation_balance: float | None = Field(None, ge=0)
    sick_balance: float | None = Field(None, ge=0)


class EmployeeSummary(ORMModel):
    id: UUID
    employee_number: str
    first_name: str
    last_name: str
    email: str
    position: str | None
    department: str | None


class EmployeeResponse(ORMModel):
    id: UUID
    tenant_id: UUID
    organization_id: UUID
    user_id: UUID
    employee_number: str
    first_name: str
    last_name: str
    email: str
    phone: str | None
    position: str | None
    department: str | None
    hire_date: date
    manager_id: UUID | None
    status: str
    vacation_balance: float
    sick_balance: float
    created_at: datetime
    updated_at: datetime


class EmployeeDetail(EmployeeResponse):
    manager: EmployeeSummary | None = None
    direct_reports: list[EmployeeSummary] = []


class EmployeeList(BaseModel):
    employees: list[EmployeeResponse]
    pagination: Pagination


class TeamResponse(BaseModel):
    employee_id: UUID
    team: list[EmployeeSummary]


class LeaveBalanceResponse(BaseModel):
    employee_id: UUID
    vacation_balance: float
    sick_balance: float
    pending_days: dict[str, float]
    used_this_year: dict[str, float]
