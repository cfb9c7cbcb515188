"""User Service: user accounts, role assignment and soft deletion.

Invariants:
    - Emails are lowercase and globally unique (DUPLICATE_EMAIL)
    - A role can only be granted by an equal or higher rank (core/permissions.py can_assign_role)
    - Another user's account (role, password, status, deletion) is only writable by a
      strictly higher rank (can_manage_user); peers cannot take over each other
    - Active users per organization never exceed tenant.max_users_per_org
    - Passwords are stored only as werkzeug hashes
    - Deletion is soft: deleted_at + status inactive; nobody deactivates themselves
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import generate_password_hash

from hrms.core.domain_types import UserRole, UserStatus
from hrms.core.errors import (
    BusinessRuleError, ConflictError, PermissionDeniedError, QuotaExceededError,
    ResourceNotFoundError, ValidationError,
)
from hrms.core.permissions import (
    Action, Actor, Resource, ROLE_SCOPES, Target, can_assign_role, can_manage_user,
    require_permission,
)
from hrms.core.tenancy import can_add
from hrms.models.employee import Employee
from hrms.models.organization import Organization
from hrms.models.tenant import Tenant
from hrms.models.user import User
from hrms.schemas.user import UserCreate, UserUpdate
from hrms.services.access import error_context, scope_clause, utc_now

logger = logging.getLogger(__name__)


class UserService:
    """User CRUD scoped by the caller's role."""

    def __init__(self, db: AsyncSession, actor: Actor):
        self.db = db
        self.actor = actor

    async def get_or_404(self, user_id: UUID) -> User:
        user = await self.db.get(User, user_id)
        if user is None or user.deleted_at is not None:
            raise ResourceNotFoundError("User", str(user_id), error_context(self.actor))
        return user

    async def target_for(self, user: User) -> Target:
        manager_id = (await self.db.execute(
            select(Employee.manager_id)
            .where(Employee.user_id == user.id)
            .where(Employee.deleted_at.is_(None))
        )).scalar_one_or_none()
        return Target(
            tenant_id=user.tenant_id,
            organization_id=user.organization_id,
            owner_user_id=user.id,
            manager_employee_id=manager_id,
        )

    def _check_role_grant(self, role: UserRole) -> None:
        if not can_assign_role(self.actor.role, role):
            raise PermissionDeniedError(
                "user", "write",
                f"role '{self.actor.role.value}' cannot assign role '{role.value}'",
                error_context(self.actor), code="ROLE_ASSIGNMENT_DENIED",
            )

    def _check_rank(self, user: User) -> None:
        if user.id == self.actor.user_id:
            return
        if not can_manage_user(self.actor.role, UserRole(user.role)):
            raise PermissionDeniedError(
                "user", "write",
                f"role '{self.actor.role.value}' cannot manage a '{user.role}' account",
                error_context(self.actor), code="USER_RANK_DENIED",
            )

    async def create(self, data: UserCreate) -> User:
        self._check_role_grant(data.role)

        organization = None
        if data.role == UserRole.SYSADMIN:
            require_permission(self.actor, Resource.USER, Action.WRITE, Target(tenant_id=None))
        else:
            organization_id = data.organization_id or self.actor.organization_id
            if organization_id is None:
                raise ValidationError("organization_id is required", "organization_id")
            organization = await self.db.get(Organization, organization_id)
            if organization is None:
                raise ResourceNotFoundError(
                    "Organization", str(organization_id), error_context(self.actor),
                )
            require_permission(
                self.actor, Resource.USER, Action.WRITE,
                Target(tenant_id=organization.tenant_id, organization_id=organization.id),
            )

        existing = (await self.db.execute(
            select(User.id).where(User.email == data.email)
        )).scalar_one_or_none()
        if existing is not None:
            raise ConflictError(
                f"User with email {data.email} already exists", "DUPLICATE_EMAIL",
            )

        if organization is not None:
            tenant = await self.db.get(Tenant, organization.tenant_id)
            count = (await self.db.execute(
                select(func.count(User.id))
                .where(User.organization_id == organization.id)
                .where(User.deleted_at.is_(None))
            )).scalar_one()
            if not can_add(count, tenant.max_users_per_org):
                raise QuotaExceededError(
                    "users", tenant.max_users_per_org, error_context(self.actor),
                )

        user = User(
            tenant_id=organization.tenant_id if organization else None,
            organization_id=organization.id if organization else None,
            email=data.email,
            password_hash=generate_password_hash(data.password) if data.password else None,
            first_name=data.first_name.strip(),
            last_name=data.last_name.strip(),
            role=data.role.value,
            status=UserStatus.ACTIVE.value,
            locale=data.locale.value,
        )
        self.db.add(user)
        await self.db.commit()
        logger.info(
            f"User {user.id} created with role {user.role}",
            extra={"user_id": str(self.actor.user_id), "organization_id": str(user.organization_id)},
        )
        return user

    async def list_users(
        self, limit: int, offset: int,
        role: str | None = None, status: str | None = None, search: str | None = None,
    ) -> tuple[list[User], int]:
        team_clause = None
        if self.actor.employee_id is not None:
            team_clause = User.id.in_(
                select(Employee.user_id).where(Employee.manager_id == self.actor.employee_id)
            )
        clause = scope_clause(
            self.actor, Resource.USER,
            tenant_col=User.tenant_id, org_col=User.organization_id,
            own_clause=User.id == self.actor.user_id, team_clause=team_clause,
        )
        query = select(User).where(User.deleted_at.is_(None))
        if clause is not None:
            query = query.where(clause)
        if role:
            query = query.where(User.role == role)
        if status:
            query = query.where(User.status == status)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.where(
                func.lower(User.email).like(pattern)
                | func.lower(User.first_name).like(pattern)
                | func.lower(User.last_name).like(pattern)
            )
        total = (await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )).scalar_one()
        rows = (await self.db.execute(
            query.order_by(User.last_name, User.first_name).limit(limit).offset(offset)
        )).scalars().all()
        return list(rows), total

    async def get(self, user_id: UUID) -> User:
        user = await self.get_or_404(user_id)
        require_permission(self.actor, Resource.USER, Action.READ, await self.target_for(user))
        return user

    async def update(self, user_id: UUID, data: UserUpdate) -> User:
        user = await self.get_or_404(user_id)
        require_permission(self.actor, Resource.USER, Action.WRITE, await self.target_for(user))
        self._check_rank(user)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "role" in changes:
            self._check_role_grant(changes["role"])
            if user.id == self.actor.user_id and changes["role"] != self.actor.role:
                raise BusinessRuleError(
                    "Users cannot change their own role", "CANNOT_CHANGE_OWN_ROLE",
                )
            changes["role"] = changes["role"].value
        if "status" in changes:
            if user.id == self.actor.user_id and changes["status"].value != user.status:
                raise BusinessRuleError(
                    "Users cannot change their own status", "CANNOT_DEACTIVATE_SELF",
                )
            changes["status"] = changes["status"].value
        if "locale" in changes:
            changes["locale"] = changes["locale"].value
        if "password" in changes:
            user.password_hash = generate_password_hash(changes.pop("password"))
        for key, value in changes.items():
            setattr(user, key, value)

        await self.db.commit()
        logger.info(f"User {user.id} updated", extra={"user_id": str(self.actor.user_id)})
        return user

    async def deactivate(self, user_id: UUID) -> User:
        user = await self.get_or_404(user_id)
        require_permission(self.actor, Resource.USER, Action.DELETE, await self.target_for(user))
        self._check_rank(user)
        if user.id == self.actor.user_id:
            raise BusinessRuleError(
                "Users cannot deactivate themselves", "CANNOT_DEACTIVATE_SELF",
            )
        user.status = UserStatus.INACTIVE.value
        user.deleted_at = utc_now()
        await self.db.commit()
        logger.info(f"User {user.id} deactivated", extra={"user_id": str(self.actor.user_id)})
        return user

    async def me(self) -> dict:
        user = await self.get_or_404(self.actor.user_id)
        data = {column.name: getattr(user, column.name) for column in User.__table__.columns}
        data["employee_id"] = self.actor.employee_id
        data["permissions"] = {
            resource.value: {"read": read.name.lower(), "write": write.name.lower()}
            for resource, (read, write) in ROLE_SCOPES[self.actor.role].items()
        }
        return data
