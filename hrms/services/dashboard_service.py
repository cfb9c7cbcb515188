"""Dashboard Service: headline numbers for the caller's home screen.

Invariants:
    - Every count goes through the same scope filters as the list endpoints,
      so the dashboard never shows more than the caller could list
    - Template counts cover the caller's own organization only (zero for sysadmins)
"""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.core.domain_types import EmployeeStatus, LeaveStatus, TemplateType
from hrms.core.permissions import Actor, Resource
from hrms.models.employee import Employee
from hrms.models.leave_request import LeaveRequest
from hrms.services.access import scope_clause, utc_today
from hrms.services.leave_service import LeaveService
from hrms.services.template_registry import binding_for

logger = logging.getLogger(__name__)


class DashboardService:

    def __init__(self, db: AsyncSession, actor: Actor):
        self.db = db
        self.actor = actor

    def _employee_clause(self):
        team_clause = None
        if self.actor.employee_id is not None:
            team_clause = or_(
                Employee.manager_id == self.actor.employee_id,
                Employee.id == self.actor.employee_id,
            )
        return scope_clause(
            self.actor, Resource.EMPLOYEE,
            tenant_col=Employee.tenant_id, org_col=Employee.organization_id,
            own_clause=Employee.user_id == self.actor.user_id, team_clause=team_clause,
        )

    def _leave_clause(self):
        team_clause = None
        if self.actor.employee_id is not None:
            team_clause = Employee.manager_id == self.actor.employee_id
        return scope_clause(
            self.actor, Resource.LEAVE_REQUEST,
            tenant_col=LeaveRequest.tenant_id, org_col=LeaveRequest.organization_id,
            own_clause=Employee.user_id == self.actor.user_id, team_clause=team_clause,
        )

    async def _template_counts(self) -> dict[str, int]:
        counts = {template_type.value: 0 for template_type in TemplateType}
        if self.actor.organization_id is None:
            return counts
        for template_type in TemplateType:
            model = binding_for(template_type).instance_model
            counts[template_type.value] = (await self.db.execute(
                select(func.count())
                .select_from(model)
                .where(model.organization_id == self.actor.organization_id)
                .where(model.is_active.is_(True))
            )).scalar_one()
        return counts

    async def stats(self) -> dict:
        employee_query = (
            select(func.count())
            .select_from(Employee)
            .where(Employee.deleted_at.is_(None))
            .where(Employee.status == EmployeeStatus.ACTIVE.value)
        )
        employee_clause = self._employee_clause()
        if employee_clause is not None:
            employee_query = employee_query.where(employee_clause)
        active_employees = (await self.db.execute(employee_query)).scalar_one()

        leave_query = (
            select(func.count())
            .select_from(LeaveRequest)
            .join(Employee, Employee.id == LeaveRequest.employee_id)
            .where(LeaveRequest.status.in_(
                [LeaveStatus.PENDING.value, LeaveStatus.APPROVED.value]
            ))
            .where(LeaveRequest.end_date >= utc_today())
        )
        leave_clause = self._leave_clause()
        if leave_clause is not None:
            leave_query = leave_query.where(leave_clause)
        active_leave = (await self.db.execute(leave_query)).scalar_one()

        pending = await LeaveService(self.db, self.actor).count_pending_for_approval()
        return {
            "active_employees": active_employees,
            "active_leave_requests": active_leave,
            "pending_approvals": pending,
            "template_instances": await self._template_counts(),
        }

    async def recent_leave_requests(self, limit: int = 5):
        rows, _ = await LeaveService(self.db, self.actor).list_requests(limit=limit, offset=0)
        return rows
