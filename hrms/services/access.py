"""Access: resolves the calling user into an Actor and turns role scopes into SQL filters.

Invariants:
    - load_actor is the only place identity is trusted: unknown/inactive/deleted users
      raise AuthenticationError, unusable tenants and inactive organizations raise
      TenantSuspendedError
    - scope_clause never widens access beyond core/permissions.py visible_scope
    - Scope.NONE on a list query raises PermissionDeniedError (no empty-result masking)

Design Decisions:
    - Services receive the Actor, never the raw header, so every query path is testable
      with a hand-built Actor
"""

import logging
from datetime import date, datetime, timezone
from uuid import UUID

from sqlalchemy import and_, false, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.core.domain_types import UserRole
from hrms.core.errors import (
    AuthenticationError, ErrorContext, PermissionDeniedError, TenantSuspendedError,
)
from hrms.core.permissions import Action, Actor, Resource, Scope, visible_scope
from hrms.core.tenancy import tenant_is_usable
from hrms.models.employee import Employee
from hrms.models.organization import Organization
from hrms.models.tenant import Tenant
from hrms.models.user import User

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today() -> date:
    return utc_now().date()


def error_context(actor: Actor, **details) -> ErrorContext:
    return ErrorContext(
        tenant_id=str(actor.tenant_id) if actor.tenant_id else None,
        organization_id=str(actor.organization_id) if actor.organization_id else None,
        user_id=str(actor.user_id),
        details=details or None,
    )


async def load_actor(db: AsyncSession, user_id: UUID) -> Actor:
    """Resolve a user id forwarded by the gateway into an Actor."""
    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        logger.warning("Rejected identity", extra={"user_id": str(user_id)})
        raise AuthenticationError("Unknown or inactive user")

    if user.tenant_id is not None:
        tenant = await db.get(Tenant, user.tenant_id)
        if tenant is None or not tenant_is_usable(
            tenant.is_active, tenant.subscription_status, tenant.trial_ends_at, utc_now(),
        ):
            raise TenantSuspendedError("Tenant subscription is not active")

    if user.organization_id is not None:
        organization = await db.get(Organization, user.organization_id)
        if organization is None or not organization.is_active:
            raise TenantSuspendedError("Organization is inactive", code="ORGANIZATION_INACTIVE")

    employee_id = (await db.execute(
        select(Employee.id)
        .where(Employee.user_id == user.id)
        .where(Employee.deleted_at.is_(None))
    )).scalar_one_or_none()

    return Actor(
        user_id=user.id,
        role=UserRole(user.role),
        tenant_id=user.tenant_id,
        organization_id=user.organization_id,
        employee_id=employee_id,
    )


def scope_clause(
    actor: Actor,
    resource: Resource,
    *,
    tenant_col,
    org_col,
    own_clause=None,
    team_clause=None,
    action: Action = Action.READ,
):
    """WHERE clause restricting a list query to what the actor may see (None = no filter)."""
    scope = visible_scope(actor.role, resource, action)
    if scope == Scope.NONE:
        raise PermissionDeniedError(
            resource.value, action.value,
            f"role '{actor.role.value}' has no {action.value} access to {resource.value}",
        )
    if scope == Scope.GLOBAL:
        return None
    if scope == Scope.TENANT:
        return tenant_col == actor.tenant_id
    if scope == Scope.ORGANIZATION:
        return and_(tenant_col == actor.tenant_id, org_col == actor.organization_id)

    own = own_clause if own_clause is not None else false()
    if scope == Scope.OWN:
        return own
    team = team_clause if team_clause is not None else false()
    return or_(own, team)
