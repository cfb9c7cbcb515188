"""Leave Request Routes: the leave workflow (draft, submit, approve, reject, cancel).

Invariants:
    - Every response carries the requesting employee's display name
    - Creation also reports the balance left after the request (null for unlimited types)
"""

import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_actor
from hrms.core.permissions import Actor
from hrms.infrastructure.database import get_db
from hrms.models.employee import Employee
from hrms.models.leave_request import LeaveRequest
from hrms.schemas.common import Pagination
from hrms.schemas.leave import (
    LeaveDecision, LeaveRejection, LeaveRequestCreate, LeaveRequestCreated,
    LeaveRequestList, LeaveRequestResponse,
)
from hrms.services.leave_service import LeaveService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/leave-requests", tags=["leave"])


def leave_response(leave: LeaveRequest, employee: Employee | None) -> LeaveRequestResponse:
    response = LeaveRequestResponse.model_validate(leave)
    if employee is not None:
        response.employee_name = f"{employee.first_name} {employee.last_name}"
    return response


@router.post("", response_model=LeaveRequestCreated, status_code=status.HTTP_201_CREATED)
async def create_leave_request(
    body: LeaveRequestCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Create a leave request for the caller; submit=false keeps it as a draft."""
    leave, remaining = await LeaveService(db, actor).create(body)
    created = LeaveRequestCreated.model_validate(leave)
    created.remaining_balance = remaining
    return created


@router.get("", response_model=LeaveRequestList)
async def list_leave_requests(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    status_filter: str | None = Query(None, alias="status"),
    employee_id: UUID | None = None,
    leave_type: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Leave requests visible to the caller, newest first."""
    rows, total = await LeaveService(db, actor).list_requests(
        limit, offset, status=status_filter, employee_id=employee_id,
        start_from=start_date, end_to=end_date, leave_type=leave_type,
    )
    return LeaveRequestList(
        leave_requests=[leave_response(leave, employee) for leave, employee in rows],
        pagination=Pagination(limit=limit, offset=offset, total=total),
    )


@router.get("/pending-approval", response_model=list[LeaveRequestResponse])
async def pending_approval(
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Pending requests of others that the caller may approve or reject."""
    rows = await LeaveService(db, actor).pending_for_approval(limit)
    return [leave_response(leave, employee) for leave, employee in rows]


@router.get("/{request_id}", response_model=LeaveRequestResponse)
async def get_leave_request(
    request_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return leave_response(*await LeaveService(db, actor).get(request_id))


@router.post("/{request_id}/submit", response_model=LeaveRequestResponse)
async def submit_leave_request(
    request_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Send a draft for approval."""
    return leave_response(*await LeaveService(db, actor).submit(request_id))


@router.post("/{request_id}/approve", response_model=LeaveRequestResponse)
async def approve_leave_request(
    request_id: UUID,
    body: LeaveDecision | None = None,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Approve a pending request and deduct the employee's balance."""
    leave, employee = await LeaveService(db, actor).approve(request_id)
    if body is not None and body.comment:
        logger.info(f"Leave request {leave.id} approval comment: {body.comment}")
    return leave_response(leave, employee)


@router.post("/{request_id}/reject", response_model=LeaveRequestResponse)
async def reject_leave_request(
    request_id: UUID,
    body: LeaveRejection,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return leave_response(*await LeaveService(db, actor).reject(request_id, body.reason))


@router.post("/{request_id}/cancel", response_model=LeaveRequestResponse)
async def cancel_leave_request(
    request_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Cancel a request; approved leave that has not started gets its days back."""
    return leave_response(*await LeaveService(db, actor).cancel(request_id))
