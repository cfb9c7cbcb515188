"""Leave Schemas: request create/decision payloads and the leave request views.

Invariants:
    - Date ordering and past-date checks live in core/leave_rules.py (domain rule, 400
      ValidationError with the offending field), not here
    - Rejection requires a non-blank reason
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from hrms.core.domain_types import LeaveType
from hrms.schemas.common import ORMModel, Pagination


class LeaveRequestCreate(BaseModel):
    """submit=False stores a draft; the draft is sent later via /submit."""
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str | None = Field(None, max_length=2000)
    submit: bool = True


class LeaveDecision(BaseModel):
    comment: str | None = Field(None, max_length=2000)


class LeaveRejection(BaseModel):
    reason: str = Field(min_length=1, max_length=2000)

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("reason cannot be empty or whitespace")
        return v


class LeaveRequestResponse(ORMModel):
    id: UUID
    tenant_id: UUID
    organization_id: UUID
    employee_id: UUID
    employee_name: str | None = None
    leave_type: str
    start_date: date
    end_date: date
    days_requested: float
    reason: str | None
    status: str
    submitted_at: datetime | None
    approved_by: UUID | None
    approved_at: datetime | None
    rejection_reason: str | None
    cancelled_at: datetime | None
    created_at: datetime


class LeaveRequestCreated(LeaveRequestResponse):
    remaining_balance: float | None = None


class LeaveRequestList(BaseModel):
    leave_requests: list[LeaveRequestResponse]
    pagination: Pagination
