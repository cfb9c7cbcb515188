"""Permissions: role/resource authorization as pure scope arithmetic.

Invariants:
    - Every role holds a (read, write) Scope per Resource; anything absent is NONE
    - The relation between actor and target is itself a Scope (OWN..GLOBAL);
      access is granted when the role's scope covers that relation
    - sysadmin holds GLOBAL on every resource; nobody else can ever reach GLOBAL,
      so cross-tenant access is sysadmin-only
    - No IO: services resolve Actor/Target from rows and call in here

Design Decisions:
    - Separate read and write ladders: a write grant on own data must not imply
      reading the whole organization
    - Relation resolution is ordered (self, direct report, organization, tenant)
      so a manager's own record counts as OWN, not TEAM
"""

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from uuid import UUID

from hrms.core.domain_types import ROLE_RANK, UserRole
from hrms.core.errors import CrossTenantAccessError, PermissionDeniedError

logger = logging.getLogger(__name__)


class Scope(IntEnum):
    NONE = 0
    OWN = 1
    TEAM = 2
    ORGANIZATION = 3
    TENANT = 4
    GLOBAL = 5


class Resource(str, Enum):
    EMPLOYEE = "employee"
    LEAVE_REQUEST = "leave_request"
    ORGANIZATION = "organization"
    TENANT = "tenant"
    USER = "user"
    TEMPLATE = "template"
    ASSESSMENT = "assessment"
    ASSESSMENT_ATTEMPT = "assessment_attempt"
    REPORTS = "reports"


class Action(str, Enum):
    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    APPROVE = "approve"


_O, _T, _ORG, _TEN, _N = Scope.OWN, Scope.TEAM, Scope.ORGANIZATION, Scope.TENANT, Scope.NONE

ROLE_SCOPES: dict[UserRole, dict[Resource, tuple[Scope, Scope]]] = {
    UserRole.EMPLOYEE: {
        Resource.EMPLOYEE: (_O, _N),
        Resource.LEAVE_REQUEST: (_O, _O),
        Resource.ORGANIZATION: (_ORG, _N),
        Resource.USER: (_O, _N),
        Resource.TEMPLATE: (_ORG, _N),
        Resource.ASSESSMENT: (_ORG, _N),
        Resource.ASSESSMENT_ATTEMPT: (_O, _O),
    },
    UserRole.MANAGER: {
        Resource.EMPLOYEE: (_T, _N),
        Resource.LEAVE_REQUEST: (_T, _T),
        Resource.ORGANIZATION: (_ORG, _N),
        Resource.USER: (_T, _N),
        Resource.TEMPLATE: (_ORG, _N),
        Resource.ASSESSMENT: (_ORG, _N),
        Resource.ASSESSMENT_ATTEMPT: (_T, _O),
        Resource.REPORTS: (_T, _N),
    },
    UserRole.HR: {
        Resource.EMPLOYEE: (_ORG, _ORG),
        Resource.LEAVE_REQUEST: (_ORG, _ORG),
        Resource.ORGANIZATION: (_ORG, _N),
        Resource.USER: (_ORG, _ORG),
        Resource.TEMPLATE: (_ORG, _ORG),
        Resource.ASSESSMENT: (_ORG, _ORG),
        Resource.ASSESSMENT_ATTEMPT: (_ORG, _ORG),
        Resource.REPORTS: (_ORG, _N),
    },
    UserRole.ADMIN: {
        Resource.EMPLOYEE: (_TEN, _TEN),
        Resource.LEAVE_REQUEST: (_TEN, _TEN),
        Resource.ORGANIZATION: (_TEN, _TEN),
        Resource.TENANT: (_TEN, _N),
        Resource.USER: (_TEN, _TEN),
        Resource.TEMPLATE: (_TEN, _TEN),
        Resource.ASSESSMENT: (_TEN, _TEN),
        Resource.ASSESSMENT_ATTEMPT: (_TEN, _TEN),
        Resource.REPORTS: (_TEN, _N),
    },
    UserRole.SYSADMIN: {
        resource: (Scope.GLOBAL, Scope.GLOBAL) for resource in Resource
    },
}


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, reduced to what authorization needs."""
    user_id: UUID
    role: UserRole
    tenant_id: UUID | None = None
    organization_id: UUID | None = None
    employee_id: UUID | None = None

    @property
    def is_sysadmin(self) -> bool:
        return self.role == UserRole.SYSADMIN


@dataclass(frozen=True)
class Target:
    """Ownership coordinates of the row being accessed."""
    tenant_id: UUID | None
    organization_id: UUID | None = None
    owner_user_id: UUID | None = None
    manager_employee_id: UUID | None = None


@dataclass(frozen=True)
class AuthorizationResult:
    authorized: bool
    granted: Scope
    required: Scope
    reason: str


def granted_scope(role: UserRole, resource: Resource, action: Action) -> Scope:
    """Scope the role holds for this resource/action pair."""
    read_scope, write_scope = ROLE_SCOPES.get(role, {}).get(resource, (_N, _N))
    return read_scope if action == Action.READ else write_scope


def visible_scope(role: UserRole, resource: Resource, action: Action = Action.READ) -> Scope:
    """Widest scope a list query may cover for this role."""
    return granted_scope(role, resource, action)


def resolve_relation(actor: Actor, target: Target) -> Scope:
    """Closest relation between actor and target, expressed as the scope it needs."""
    if target.owner_user_id is not None and target.owner_user_id == actor.user_id:
        return Scope.OWN
    if (
        actor.employee_id is not None
        and target.manager_employee_id is not None
        and target.manager_employee_id == actor.employee_id
    ):
        return Scope.TEAM
    if actor.tenant_id is None or target.tenant_id != actor.tenant_id:
        return Scope.GLOBAL
    if target.organization_id is not None and target.organization_id == actor.organization_id:
        return Scope.ORGANIZATION
    return Scope.TENANT


def check_permission(
    actor: Actor,
    resource: Resource,
    action: Action,
    target: Target | None = None,
) -> AuthorizationResult:
    """Decide whether actor may perform action on resource (optionally a specific target)."""
    granted = granted_scope(actor.role, resource, action)
    required = resolve_relation(actor, target) if target else Scope.OWN

    if granted == Scope.NONE:
        return AuthorizationResult(
            False, granted, required,
            f"role '{actor.role.value}' has no {action.value} access to {resource.value}",
        )
    if granted >= required:
        return AuthorizationResult(
            True, granted, required,
            f"{granted.name.lower()} scope covers {required.name.lower()} relation",
        )
    return AuthorizationResult(
        False, granted, required,
        f"requires {required.name.lower()} scope, role grants {granted.name.lower()}",
    )


def require_permission(
    actor: Actor,
    resource: Resource,
    action: Action,
    target: Target | None = None,
) -> AuthorizationResult:
    """check_permission that raises instead of returning a denial."""
    result = check_permission(actor, resource, action, target)
    if result.authorized:
        return result
    logger.warning(
        f"Authorization denied: {result.reason}",
        extra={
            "user_id": actor.user_id, "tenant_id": actor.tenant_id,
            "resource": resource.value, "action": action.value,
        },
    )
    if result.required == Scope.GLOBAL:
        raise CrossTenantAccessError(resource.value, action.value)
    raise PermissionDeniedError(resource.value, action.value, result.reason)


def can_assign_role(actor_role: UserRole, role: UserRole) -> bool:
    """Roles may only grant roles at or below their own rank."""
    if role == UserRole.SYSADMIN:
        return actor_role == UserRole.SYSADMIN
    return ROLE_RANK[role] <= ROLE_RANK[actor_role]


def can_manage_user(actor_role: UserRole, target_role: UserRole) -> bool:
    """Another user's account is writable only when it ranks strictly below the caller."""
    if actor_role == UserRole.SYSADMIN:
        return True
    return ROLE_RANK[target_role] < ROLE_RANK[actor_role]
