"""Permissions tests: role scopes against actor/target relations.

Tests cover:
    - Relation resolution order (own before team before organization)
    - Each role's reach: employee own, manager team, hr organization, admin tenant
    - Cross-tenant access is sysadmin-only and raises CrossTenantAccessError
    - Role assignment ranks
"""

import uuid

import pytest

from hrms.core.domain_types import UserRole
from hrms.core.errors import CrossTenantAccessError, PermissionDeniedError
from hrms.core.permissions import (
    Action, Actor, Resource, Scope, Target, can_assign_role, can_manage_user, check_permission,
    granted_scope, require_permission, resolve_relation,
)

TENANT = uuid.uuid4()
OTHER_TENANT = uuid.uuid4()
ORG = uuid.uuid4()
OTHER_ORG = uuid.uuid4()


def _actor(role: UserRole, employee_id=None) -> Actor:
    return Actor(
        user_id=uuid.uuid4(), role=role,
        tenant_id=TENANT, organization_id=ORG, employee_id=employee_id,
    )


def _target(owner=None, manager=None, tenant=TENANT, org=ORG) -> Target:
    return Target(
        tenant_id=tenant, organization_id=org,
        owner_user_id=owner, manager_employee_id=manager,
    )


# --- Relation resolution -------------------------------------------------------


def test_own_record_resolves_to_own():
    actor = _actor(UserRole.MANAGER, employee_id=uuid.uuid4())
    assert resolve_relation(actor, _target(owner=actor.user_id)) == Scope.OWN


def test_direct_report_resolves_to_team():
    actor = _actor(UserRole.MANAGER, employee_id=uuid.uuid4())
    assert resolve_relation(actor, _target(manager=actor.employee_id)) == Scope.TEAM


def test_same_org_resolves_to_organization():
    assert resolve_relation(_actor(UserRole.HR), _target()) == Scope.ORGANIZATION


def test_other_org_resolves_to_tenant():
    assert resolve_relation(_actor(UserRole.HR), _target(org=OTHER_ORG)) == Scope.TENANT


def test_other_tenant_resolves_to_global():
    assert resolve_relation(_actor(UserRole.ADMIN), _target(tenant=OTHER_TENANT)) == Scope.GLOBAL


# --- Role reach ----------------------------------------------------------------


def test_employee_reads_only_own_record():
    actor = _actor(UserRole.EMPLOYEE)
    assert check_permission(actor, Resource.EMPLOYEE, Action.READ, _target(owner=actor.user_id)).authorized
    assert not check_permission(actor, Resource.EMPLOYEE, Action.READ, _target()).authorized


def test_employee_cannot_write_employee_records():
    actor = _actor(UserRole.EMPLOYEE)
    result = check_permission(actor, Resource.EMPLOYEE, Action.WRITE, _target(owner=actor.user_id))
    assert not result.authorized
    assert result.granted == Scope.NONE


def test_manager_approves_team_leave_only():
    actor = _actor(UserRole.MANAGER, employee_id=uuid.uuid4())
    team = _target(owner=uuid.uuid4(), manager=actor.employee_id)
    stranger = _target(owner=uuid.uuid4(), manager=uuid.uuid4())
    assert check_permission(actor, Resource.LEAVE_REQUEST, Action.APPROVE, team).authorized
    assert not check_permission(actor, Resource.LEAVE_REQUEST, Action.APPROVE, stranger).authorized


def test_hr_covers_organization_not_tenant():
    actor = _actor(UserRole.HR)
    assert check_permission(actor, Resource.EMPLOYEE, Action.WRITE, _target()).authorized
    assert not check_permission(
        actor, Resource.EMPLOYEE, Action.WRITE, _target(org=OTHER_ORG),
    ).authorized


def test_admin_covers_whole_tenant():
    actor = _actor(UserRole.ADMIN)
    assert check_permission(
        actor, Resource.ORGANIZATION, Action.WRITE, _target(org=OTHER_ORG),
    ).authorized


def test_sysadmin_reaches_every_tenant():
    actor = Actor(user_id=uuid.uuid4(), role=UserRole.SYSADMIN)
    for resource in Resource:
        assert granted_scope(UserRole.SYSADMIN, resource, Action.WRITE) == Scope.GLOBAL
    assert check_permission(
        actor, Resource.TENANT, Action.WRITE, _target(tenant=OTHER_TENANT),
    ).authorized


def test_no_target_requires_only_some_access():
    assert check_permission(_actor(UserRole.EMPLOYEE), Resource.ASSESSMENT_ATTEMPT, Action.WRITE).authorized
    assert not check_permission(_actor(UserRole.EMPLOYEE), Resource.REPORTS, Action.READ).authorized


# --- require_permission ----------------------------------------------------------


def test_require_permission_raises_permission_denied():
    with pytest.raises(PermissionDeniedError) as exc:
        require_permission(_actor(UserRole.EMPLOYEE), Resource.USER, Action.WRITE, _target())
    assert exc.value.code == "INSUFFICIENT_PERMISSIONS"
    assert exc.value.http_status == 403


def test_require_permission_cross_tenant():
    with pytest.raises(CrossTenantAccessError) as exc:
        require_permission(
            _actor(UserRole.ADMIN), Resource.EMPLOYEE, Action.READ, _target(tenant=OTHER_TENANT),
        )
    assert exc.value.code == "CROSS_TENANT_ACCESS_DENIED"


# --- Role assignment -------------------------------------------------------------


def test_roles_assign_at_or_below_their_rank():
    assert can_assign_role(UserRole.HR, UserRole.MANAGER)
    assert can_assign_role(UserRole.HR, UserRole.HR)
    assert not can_assign_role(UserRole.HR, UserRole.ADMIN)


def test_only_sysadmin_assigns_sysadmin():
    assert not can_assign_role(UserRole.ADMIN, UserRole.SYSADMIN)
    assert can_assign_role(UserRole.SYSADMIN, UserRole.SYSADMIN)


def test_accounts_are_managed_only_from_above():
    assert can_manage_user(UserRole.HR, UserRole.MANAGER)
    assert can_manage_user(UserRole.ADMIN, UserRole.HR)
    assert not can_manage_user(UserRole.HR, UserRole.HR)
    assert not can_manage_user(UserRole.HR, UserRole.ADMIN)
    assert not can_manage_user(UserRole.ADMIN, UserRole.ADMIN)


def test_sysadmin_manages_every_account():
    assert can_manage_user(UserRole.SYSADMIN, UserRole.SYSADMIN)
    assert can_manage_user(UserRole.SYSADMIN, UserRole.ADMIN)
