"""Employee Service: employee profiles, reporting lines and leave balances.

Invariants:
    - One profile per user; the user must belong to an organization
    - Manager is an active employee of the same organization; no reporting cycles
      (core/reporting_lines.py)
    - Active employees per organization never exceed organization.max_employees
    - Balances and status of a profile are only writable by a strictly higher rank than
      the profile's user (can_manage_user); nobody sets their own balances
    - Delete is soft: deleted_at set, status terminated, direct reports move up to the
      deleted employee's own manager in the same transaction

Design Decisions:
    - employee_number derived from the primary key ("EMP-" + first 8 hex chars)
      so it is unique without a sequence table
"""

import logging
import uuid
from datetime import date
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.config import get_settings
from hrms.core.domain_types import EmployeeStatus, LeaveStatus, LeaveType, UserRole
from hrms.core.errors import (
    ConflictError, PermissionDeniedError, QuotaExceededError, ResourceNotFoundError,
    ValidationError,
)
from hrms.core.permissions import (
    Action, Actor, Resource, Target, can_manage_user, require_permission,
)
from hrms.core.reporting_lines import would_create_cycle
from hrms.core.tenancy import can_add
from hrms.models.employee import Employee
from hrms.models.leave_request import LeaveRequest
from hrms.models.organization import Organization
from hrms.models.user import User
from hrms.schemas.employee import EmployeeCreate, EmployeeUpdate
from hrms.services.access import error_context, scope_clause, utc_now, utc_today

logger = logging.getLogger(__name__)

_NULLABLE_FIELDS = frozenset({"manager_id", "phone", "position", "department"})
_RESTRICTED_FIELDS = frozenset({"vacation_balance", "sick_balance", "status"})


def employee_target(employee: Employee) -> Target:
    return Target(
        tenant_id=employee.tenant_id,
        organization_id=employee.organization_id,
        owner_user_id=employee.user_id,
        manager_employee_id=employee.manager_id,
    )


def employee_number_for(employee_id: uuid.UUID) -> str:
    return f"EMP-{employee_id.hex[:8].upper()}"


class EmployeeService:
    """Employee CRUD scoped by the caller's role."""

    def __init__(self, db: AsyncSession, actor: Actor):
        self.db = db
        self.actor = actor

    async def get_or_404(self, employee_id: UUID) -> Employee:
        employee = await self.db.get(Employee, employee_id)
        if employee is None or employee.deleted_at is not None:
            raise ResourceNotFoundError("Employee", str(employee_id), error_context(self.actor))
        return employee

    def resolve_id(self, employee_ref: str) -> UUID:
        """'me' -> caller's employee id; anything else must be a UUID."""
        if employee_ref == "me":
            if self.actor.employee_id is None:
                raise ResourceNotFoundError("Employee", "me", error_context(self.actor))
            return self.actor.employee_id
        try:
            return UUID(employee_ref)
        except ValueError:
            raise ValidationError("employee id must be a UUID or 'me'", "employee_id") from None

    def _check_profile_authority(self, owner: User, fields: set[str]) -> None:
        restricted = sorted(fields & _RESTRICTED_FIELDS)
        if not restricted or self.actor.is_sysadmin:
            return
        if owner.id == self.actor.user_id or not can_manage_user(
            self.actor.role, UserRole(owner.role),
        ):
            raise PermissionDeniedError(
                "employee", "write",
                f"role '{self.actor.role.value}' cannot set {', '.join(restricted)} "
                f"for a '{owner.role}' profile",
                error_context(self.actor), code="PROFILE_FIELDS_RESTRICTED",
            )

    async def _direct_reports(self, employee_id: UUID) -> list[Employee]:
        rows = (await self.db.execute(
            select(Employee)
            .where(Employee.manager_id == employee_id)
            .where(Employee.deleted_at.is_(None))
            .order_by(Employee.last_name, Employee.first_name)
        )).scalars().all()
        return list(rows)

    async def _validate_manager(
        self, organization_id: UUID, manager_id: UUID, employee_id: UUID | None,
    ) -> Employee:
        manager = await self.db.get(Employee, manager_id)
        if (
            manager is None
            or manager.deleted_at is not None
            or manager.organization_id != organization_id
        ):
            raise ValidationError(
                "Manager must be an employee of the same organization", "manager_id",
            )
        if employee_id is not None:
            pairs = (await self.db.execute(
                select(Employee.id, Employee.manager_id)
                .where(Employee.organization_id == organization_id)
                .where(Employee.deleted_at.is_(None))
            )).all()
            manager_of = {emp_id: mgr_id for emp_id, mgr_id in pairs}
            if would_create_cycle(employee_id, manager_id, manager_of):
                raise ConflictError(
                    "Manager assignment would create a reporting cycle", "MANAGER_CYCLE",
                )
        return manager

    async def create(self, data: EmployeeCreate) -> Employee:
        user = await self.db.get(User, data.user_id)
        if user is None or user.deleted_at is not None:
            raise ResourceNotFoundError("User", str(data.user_id), error_context(self.actor))
        if user.organization_id is None:
            raise ValidationError("User does not belong to an organization", "user_id")
        require_permission(
            self.actor, Resource.EMPLOYEE, Action.WRITE,
            Target(tenant_id=user.tenant_id, organization_id=user.organization_id),
        )

        existing = (await self.db.execute(
            select(Employee.id).where(Employee.user_id == user.id)
        )).scalar_one_or_none()
        if existing is not None:
            raise ConflictError(
                "User already has an employee profile", "EMPLOYEE_PROFILE_EXISTS",
            )
        self._check_profile_authority(user, set(data.model_dump(exclude_none=True)))

        organization = await self.db.get(Organization, user.organization_id)
        count = (await self.db.execute(
            select(func.count(Employee.id))
            .where(Employee.organization_id == organization.id)
            .where(Employee.deleted_at.is_(None))
        )).scalar_one()
        if not can_add(count, organization.max_employees):
            raise QuotaExceededError(
                "employees", organization.max_employees, error_context(self.actor),
            )

        if data.manager_id is not None:
            await self._validate_manager(organization.id, data.manager_id, None)

        settings = get_settings()
        employee_id = uuid.uuid4()
        employee = Employee(
            id=employee_id,
            tenant_id=user.tenant_id,
            organization_id=organization.id,
            user_id=user.id,
            employee_number=employee_number_for(employee_id),
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            phone=data.phone,
            position=data.position,
            department=data.department,
            hire_date=data.hire_date or utc_today(),
            manager_id=data.manager_id,
            status=EmployeeStatus.ACTIVE.value,
            vacation_balance=(
                data.vacation_balance if data.vacation_balance is not None
                else settings.default_vacation_days
            ),
            sick_balance=(
                data.sick_balance if data.sick_balance is not None
                else settings.default_sick_days
            ),
        )
        self.db.add(employee)
        await self.db.commit()
        logger.info(
            f"Employee {employee.employee_number} created",
            extra={"organization_id": str(organization.id), "employee_id": str(employee.id)},
        )
        return employee

    async def list_employees(
        self, limit: int, offset: int,
        search: str | None = None, status: str | None = None,
        department: str | None = None,
    ) -> tuple[list[Employee], int]:
        team_clause = None
        if self.actor.employee_id is not None:
            team_clause = or_(
                Employee.manager_id == self.actor.employee_id,
                Employee.id == self.actor.employee_id,
            )
        clause = scope_clause(
            self.actor, Resource.EMPLOYEE,
            tenant_col=Employee.tenant_id, org_col=Employee.organization_id,
            own_clause=Employee.user_id == self.actor.user_id, team_clause=team_clause,
        )
        query = select(Employee).where(Employee.deleted_at.is_(None))
        if clause is not None:
            query = query.where(clause)
        if status:
            query = query.where(Employee.status == status)
        if department:
            query = query.where(Employee.department == department)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.where(
                func.lower(Employee.first_name).like(pattern)
                | func.lower(Employee.last_name).like(pattern)
                | func.lower(Employee.email).like(pattern)
                | func.lower(Employee.employee_number).like(pattern)
            )
        total = (await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )).scalar_one()
        rows = (await self.db.execute(
            query.order_by(Employee.last_name, Employee.first_name).limit(limit).offset(offset)
        )).scalars().all()
        return list(rows), total

    async def get(self, employee_id: UUID) -> Employee:
        employee = await self.get_or_404(employee_id)
        require_permission(self.actor, Resource.EMPLOYEE, Action.READ, employee_target(employee))
        return employee

    async def get_detail(self, employee_id: UUID) -> dict:
        employee = await self.get(employee_id)
        data = {c.name: getattr(employee, c.name) for c in Employee.__table__.columns}
        manager = None
        if employee.manager_id is not None:
            manager = await self.db.get(Employee, employee.manager_id)
        data["manager"] = manager
        data["direct_reports"] = await self._direct_reports(employee.id)
        return data

    async def update(self, employee_id: UUID, data: EmployeeUpdate) -> Employee:
        employee = await self.get_or_404(employee_id)
        require_permission(self.actor, Resource.EMPLOYEE, Action.WRITE, employee_target(employee))

        changes = data.model_dump(exclude_unset=True)
        self._check_profile_authority(await self.db.get(User, employee.user_id), set(changes))
        if "manager_id" in changes and changes["manager_id"] is not None:
            await self._validate_manager(
                employee.organization_id, changes["manager_id"], employee.id,
            )
        if changes.get("status") is not None:
            changes["status"] = changes["status"].value
        for key, value in changes.items():
            if value is None and key not in _NULLABLE_FIELDS:
                continue
            setattr(employee, key, value)

        await self.db.commit()
        logger.info(
            f"Employee {employee.employee_number} updated",
            extra={"employee_id": str(employee.id)},
        )
        return employee

    async def delete(self, employee_id: UUID) -> Employee:
        employee = await self.get_or_404(employee_id)
        require_permission(self.actor, Resource.EMPLOYEE, Action.DELETE, employee_target(employee))
        self._check_profile_authority(await self.db.get(User, employee.user_id), {"status"})

        await self.db.execute(
            update(Employee)
            .where(Employee.manager_id == employee.id)
            .values(manager_id=employee.manager_id)
            .execution_options(synchronize_session="fetch")
        )
        employee.deleted_at = utc_now()
        employee.status = EmployeeStatus.TERMINATED.value
        await self.db.commit()
        logger.info(
            f"Employee {employee.employee_number} deleted",
            extra={"employee_id": str(employee.id)},
        )
        return employee

    async def team(self, employee_id: UUID) -> list[Employee]:
        employee = await self.get(employee_id)
        return await self._direct_reports(employee.id)

    async def leave_balance(self, employee_id: UUID) -> dict:
        employee = await self.get(employee_id)
        year_start = date(utc_today().year, 1, 1)

        pending_rows = (await self.db.execute(
            select(LeaveRequest.leave_type, func.sum(LeaveRequest.days_requested))
            .where(LeaveRequest.employee_id == employee.id)
            .where(LeaveRequest.status == LeaveStatus.PENDING.value)
            .group_by(LeaveRequest.leave_type)
        )).all()
        used_rows = (await self.db.execute(
            select(LeaveRequest.leave_type, func.sum(LeaveRequest.days_requested))
            .where(LeaveRequest.employee_id == employee.id)
            .where(LeaveRequest.status == LeaveStatus.APPROVED.value)
            .where(LeaveRequest.start_date >= year_start)
            .group_by(LeaveRequest.leave_type)
        )).all()

        pending = {t.value: 0.0 for t in LeaveType}
        used = {t.value: 0.0 for t in LeaveType}
        for leave_type, days in pending_rows:
            pending[leave_type] = float(days or 0)
        for leave_type, days in used_rows:
            used[leave_type] = float(days or 0)

        return {
            "employee_id": employee.id,
            "vacation_balance": float(employee.vacation_balance),
            "sick_balance": float(employee.sick_balance),
            "pending_days": pending,
            "used_this_year": used,
        }
