"""Employee Routes: employee profiles, reporting lines and leave balances.

Invariants:
    - Path references accept an employee UUID or 'me' (the caller's own profile)
    - Deleted employees answer 404 everywhere
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_actor
from hrms.core.permissions import Actor
from hrms.infrastructure.database import get_db
from hrms.schemas.common import Pagination
from hrms.schemas.employee import (
    EmployeeCreate, EmployeeDetail, EmployeeList, EmployeeResponse, EmployeeUpdate,
    LeaveBalanceResponse, TeamResponse,
)
from hrms.services.employee_service import EmployeeService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/employees", tags=["employees"])


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    body: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Create the employee profile of an existing user."""
    return await EmployeeService(db, actor).create(body)


@router.get("", response_model=EmployeeList)
async def list_employees(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    search: str | None = Query(None, max_length=100),
    status_filter: str | None = Query(None, alias="status"),
    department: str | None = None,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """List employees the caller can see (own, team, organization or tenant)."""
    employees, total = await EmployeeService(db, actor).list_employees(
        limit, offset, search=search, status=status_filter, department=department,
    )
    return EmployeeList(
        employees=employees, pagination=Pagination(limit=limit, offset=offset, total=total),
    )


@router.get("/{employee_ref}", response_model=EmployeeDetail)
async def get_employee(
    employee_ref: str,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    service = EmployeeService(db, actor)
    return await service.get_detail(service.resolve_id(employee_ref))


@router.patch("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: UUID,
    body: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return await EmployeeService(db, actor).update(employee_id, body)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Soft delete; direct reports move to the deleted employee's manager."""
    await EmployeeService(db, actor).delete(employee_id)


@router.get("/{employee_ref}/team", response_model=TeamResponse)
async def get_team(
    employee_ref: str,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    service = EmployeeService(db, actor)
    employee_id = service.resolve_id(employee_ref)
    return TeamResponse(employee_id=employee_id, team=await service.team(employee_id))


@router.get("/{employee_ref}/leave-balance", response_model=LeaveBalanceResponse)
async def get_leave_balance(
    employee_ref: str,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Balances plus pending and used days per leave type."""
    service = EmployeeService(db, actor)
    return await service.leave_balance(service.resolve_id(employee_ref))
