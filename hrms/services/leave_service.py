"""Leave Service: leave request lifecycle (draft, submit, approve, reject, cancel).

Invariants:
    - Only the requesting employee creates and submits their own requests
    - Every operation is gated by the organization's leave_management feature
    - Submission checks the window, the balance (vacation/sick) and overlap with the
      employee's pending/approved requests (409 LEAVE_OVERLAP)
    - Approval re-checks and deducts the balance; cancelling approved leave that has not
      started restores it; balance and status change in one commit
    - Nobody approves or rejects their own request
    - The approval queue and its dashboard count share one SQL query over the approve scope

Design Decisions:
    - Status arithmetic and balance math live in core/leave_rules.py; this module only
      loads rows, authorizes and persists
"""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.core.domain_types import LeaveStatus, LeaveType
from hrms.core.errors import (
    BusinessRuleError, ConflictError, PermissionDeniedError, ResourceNotFoundError,
)
from hrms.core.leave_rules import (
    BLOCKING_STATUSES, balance_field, check_balance, check_cancellable, check_transition,
    deduct, remaining_after, restore, validate_leave_window,
)
from hrms.core.permissions import Action, Actor, Resource, Target, require_permission
from hrms.core.tenancy import has_feature
from hrms.models.employee import Employee
from hrms.models.leave_request import LeaveRequest
from hrms.models.organization import Organization
from hrms.schemas.leave import LeaveRequestCreate
from hrms.services.access import error_context, scope_clause, utc_now, utc_today

logger = logging.getLogger(__name__)

LEAVE_FEATURE = "leave_management"


def leave_target(employee: Employee) -> Target:
    return Target(
        tenant_id=employee.tenant_id,
        organization_id=employee.organization_id,
        owner_user_id=employee.user_id,
        manager_employee_id=employee.manager_id,
    )


class LeaveService:
    """Leave request workflow for the calling actor."""

    def __init__(self, db: AsyncSession, actor: Actor):
        self.db = db
        self.actor = actor

    # --- Loading -------------------------------------------------------------

    async def _ensure_feature(self, organization_id: UUID) -> None:
        organization = await self.db.get(Organization, organization_id)
        if organization is None or not has_feature(organization.features, LEAVE_FEATURE):
            raise BusinessRuleError(
                "Leave management is disabled for this organization",
                "FEATURE_DISABLED", error_context(self.actor), feature=LEAVE_FEATURE,
            )

    async def _own_employee(self) -> Employee:
        if self.actor.employee_id is None:
            raise BusinessRuleError(
                "An employee profile is required to request leave", "NO_EMPLOYEE_PROFILE",
            )
        return await self.db.get(Employee, self.actor.employee_id)

    async def _load(self, request_id: UUID) -> tuple[LeaveRequest, Employee]:
        leave = await self.db.get(LeaveRequest, request_id)
        if leave is None:
            raise ResourceNotFoundError(
                "LeaveRequest", str(request_id), error_context(self.actor),
            )
        employee = await self.db.get(Employee, leave.employee_id)
        return leave, employee

    async def _check_overlap(self, employee_id: UUID, start: date, end: date,
                             exclude_id: UUID | None = None) -> None:
        query = (
            select(LeaveRequest)
            .where(LeaveRequest.employee_id == employee_id)
            .where(LeaveRequest.status.in_([s.value for s in BLOCKING_STATUSES]))
            .where(LeaveRequest.start_date <= end)
            .where(LeaveRequest.end_date >= start)
        )
        if exclude_id is not None:
            query = query.where(LeaveRequest.id != exclude_id)
        conflicting = (await self.db.execute(query.limit(1))).scalar_one_or_none()
        if conflicting is not None:
            raise ConflictError(
                "Requested dates overlap an existing leave request", "LEAVE_OVERLAP",
                error_context(
                    self.actor,
                    conflicting_request_id=str(conflicting.id),
                    conflicting_start_date=conflicting.start_date.isoformat(),
                    conflicting_end_date=conflicting.end_date.isoformat(),
                    conflicting_status=conflicting.status,
                ),
            )

    def _check_balance(self, employee: Employee, leave_type: LeaveType, days: float) -> None:
        field = balance_field(leave_type)
        if field is not None:
            check_balance(leave_type, getattr(employee, field), days)

    def _require_decider(self, employee: Employee) -> None:
        if employee.user_id == self.actor.user_id:
            raise PermissionDeniedError(
                "leave_request", "approve", "requesters cannot decide their own leave",
                error_context(self.actor), code="SELF_APPROVAL_FORBIDDEN",
            )
        require_permission(
            self.actor, Resource.LEAVE_REQUEST, Action.APPROVE, leave_target(employee),
        )

    # --- Operations ----------------------------------------------------------

    async def create(self, data: LeaveRequestCreate) -> tuple[LeaveRequest, float | None]:
        employee = await self._own_employee()
        await self._ensure_feature(employee.organization_id)
        require_permission(
            self.actor, Resource.LEAVE_REQUEST, Action.WRITE, leave_target(employee),
        )
        days = validate_leave_window(data.start_date, data.end_date, utc_today())

        if data.submit:
            self._check_balance(employee, data.leave_type, days)
            await self._check_overlap(employee.id, data.start_date, data.end_date)

        now = utc_now()
        leave = LeaveRequest(
            tenant_id=employee.tenant_id,
            organization_id=employee.organization_id,
            employee_id=employee.id,
            leave_type=data.leave_type.value,
            start_date=data.start_date,
            end_date=data.end_date,
            days_requested=float(days),
            reason=data.reason,
            status=(LeaveStatus.PENDING if data.submit else LeaveStatus.DRAFT).value,
            submitted_at=now if data.submit else None,
        )
        self.db.add(leave)
        await self.db.commit()

        field = balance_field(data.leave_type)
        remaining = remaining_after(
            data.leave_type, getattr(employee, field) if field else None, days,
        )
        logger.info(
            f"Leave request {leave.id} created as {leave.status}",
            extra={"employee_id": str(employee.id), "organization_id": str(employee.organization_id)},
        )
        return leave, remaining

    async def list_requests(
        self, limit: int, offset: int,
        status: str | None = None, employee_id: UUID | None = None,
        start_from: date | None = None, end_to: date | None = None,
        leave_type: str | None = None,
    ) -> tuple[list[tuple[LeaveRequest, Employee]], int]:
        team_clause = None
        if self.actor.employee_id is not None:
            team_clause = Employee.manager_id == self.actor.employee_id
        clause = scope_clause(
            self.actor, Resource.LEAVE_REQUEST,
            tenant_col=LeaveRequest.tenant_id, org_col=LeaveRequest.organization_id,
            own_clause=Employee.user_id == self.actor.user_id, team_clause=team_clause,
        )
        query = (
            select(LeaveRequest, Employee)
            .join(Employee, Employee.id == LeaveRequest.employee_id)
        )
        if clause is not None:
            query = query.where(clause)
        if status:
            query = query.where(LeaveRequest.status == status)
        if employee_id is not None:
            query = query.where(LeaveRequest.employee_id == employee_id)
        if leave_type:
            query = query.where(LeaveRequest.leave_type == leave_type)
        if start_from is not None:
            query = query.where(LeaveRequest.end_date >= start_from)
        if end_to is not None:
            query = query.where(LeaveRequest.start_date <= end_to)

        total = (await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )).scalar_one()
        rows = (await self.db.execute(
            query.order_by(LeaveRequest.created_at.desc()).limit(limit).offset(offset)
        )).all()
        return [(leave, employee) for leave, employee in rows], total

    async def get(self, request_id: UUID) -> tuple[LeaveRequest, Employee]:
        leave, employee = await self._load(request_id)
        require_permission(
            self.actor, Resource.LEAVE_REQUEST, Action.READ, leave_target(employee),
        )
        return leave, employee

    async def submit(self, request_id: UUID) -> tuple[LeaveRequest, Employee]:
        leave, employee = await self._load(request_id)
        if employee.user_id != self.actor.user_id:
            raise PermissionDeniedError(
                "leave_request", "write", "only the requester can submit a draft",
                error_context(self.actor),
            )
        await self._ensure_feature(leave.organization_id)
        check_transition(LeaveStatus(leave.status), LeaveStatus.PENDING)

        days = validate_leave_window(leave.start_date, leave.end_date, utc_today())
        leave_type = LeaveType(leave.leave_type)
        self._check_balance(employee, leave_type, days)
        await self._check_overlap(employee.id, leave.start_date, leave.end_date, leave.id)

        leave.days_requested = float(days)
        leave.status = LeaveStatus.PENDING.value
        leave.submitted_at = utc_now()
        await self.db.commit()
        logger.info(f"Leave request {leave.id} submitted", extra={"employee_id": str(employee.id)})
        return leave, employee

    async def approve(self, request_id: UUID) -> tuple[LeaveRequest, Employee]:
        leave, employee = await self._load(request_id)
        await self._ensure_feature(leave.organization_id)
        self._require_decider(employee)
        check_transition(LeaveStatus(leave.status), LeaveStatus.APPROVED)

        leave_type = LeaveType(leave.leave_type)
        field = balance_field(leave_type)
        if field is not None:
            check_balance(leave_type, getattr(employee, field), leave.days_requested)
            setattr(employee, field, deduct(getattr(employee, field), leave.days_requested))

        leave.status = LeaveStatus.APPROVED.value
        leave.approved_by = self.actor.user_id
        leave.approved_at = utc_now()
        await self.db.commit()
        logger.info(
            f"Leave request {leave.id} approved",
            extra={"user_id": str(self.actor.user_id), "employee_id": str(employee.id)},
        )
        return leave, employee

    async def reject(self, request_id: UUID, reason: str) -> tuple[LeaveRequest, Employee]:
        leave, employee = await self._load(request_id)
        await self._ensure_feature(leave.organization_id)
        self._require_decider(employee)
        check_transition(LeaveStatus(leave.status), LeaveStatus.REJECTED)

        leave.status = LeaveStatus.REJECTED.value
        leave.rejection_reason = reason
        leave.approved_by = self.actor.user_id
        leave.approved_at = utc_now()
        await self.db.commit()
        logger.info(
            f"Leave request {leave.id} rejected",
            extra={"user_id": str(self.actor.user_id), "employee_id": str(employee.id)},
        )
        return leave, employee

    async def cancel(self, request_id: UUID) -> tuple[LeaveRequest, Employee]:
        leave, employee = await self._load(request_id)
        await self._ensure_feature(leave.organization_id)
        if employee.user_id != self.actor.user_id:
            require_permission(
                self.actor, Resource.LEAVE_REQUEST, Action.APPROVE, leave_target(employee),
            )

        must_restore = check_cancellable(LeaveStatus(leave.status), leave.start_date, utc_today())
        if must_restore:
            field = balance_field(LeaveType(leave.leave_type))
            if field is not None:
                setattr(employee, field, restore(getattr(employee, field), leave.days_requested))

        leave.status = LeaveStatus.CANCELLED.value
        leave.cancelled_at = utc_now()
        await self.db.commit()
        logger.info(f"Leave request {leave.id} cancelled", extra={"employee_id": str(employee.id)})
        return leave, employee

    def _decidable_pending(self):
        """Pending requests of others within the actor's approve scope, as one query."""
        team_clause = None
        if self.actor.employee_id is not None:
            team_clause = Employee.manager_id == self.actor.employee_id
        clause = scope_clause(
            self.actor, Resource.LEAVE_REQUEST,
            tenant_col=LeaveRequest.tenant_id, org_col=LeaveRequest.organization_id,
            own_clause=Employee.user_id == self.actor.user_id, team_clause=team_clause,
            action=Action.APPROVE,
        )
        query = (
            select(LeaveRequest, Employee)
            .join(Employee, Employee.id == LeaveRequest.employee_id)
            .where(LeaveRequest.status == LeaveStatus.PENDING.value)
            .where(Employee.user_id != self.actor.user_id)
        )
        if clause is not None:
            query = query.where(clause)
        return query

    async def pending_for_approval(self, limit: int = 50) -> list[tuple[LeaveRequest, Employee]]:
        """Pending requests of others that the actor is allowed to decide, oldest first."""
        rows = (await self.db.execute(
            self._decidable_pending().order_by(LeaveRequest.created_at).limit(limit)
        )).all()
        return [(leave, employee) for leave, employee in rows]

    async def count_pending_for_approval(self) -> int:
        query = self._decidable_pending()
        return (await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )).scalar_one()
