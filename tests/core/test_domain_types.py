"""Domain Types: verifies enum members, stored values and role ranking.

Tests:
    - Roles rank strictly from employee to sysadmin
    - Enums serialize to their stored string values
    - Leave, inheritance, template and locale member sets are fixed
"""

import json

from hrms.core.domain_types import (
    ROLE_RANK, AttemptStatus, InheritanceType, LeaveStatus, LeaveType,
    Locale, SyncStatus, TemplateType, UserRole,
)


def test_every_role_has_a_rank():
    assert set(ROLE_RANK) == set(UserRole)


def test_roles_rank_from_employee_to_sysadmin():
    ordered = sorted(UserRole, key=ROLE_RANK.__getitem__)
    assert ordered == [
        UserRole.EMPLOYEE, UserRole.MANAGER, UserRole.HR, UserRole.ADMIN, UserRole.SYSADMIN,
    ]
    assert len(set(ROLE_RANK.values())) == len(ROLE_RANK)


def test_str_enums_serialize_as_plain_strings():
    payload = json.dumps({"status": LeaveStatus.PENDING, "type": TemplateType.JOB_ROLE})
    assert payload == '{"status": "pending", "type": "job_role"}'


def test_enum_lookup_by_stored_value():
    assert LeaveStatus("approved") is LeaveStatus.APPROVED
    assert SyncStatus("detached") is SyncStatus.DETACHED
    assert AttemptStatus("expired") is AttemptStatus.EXPIRED


def test_leave_types_are_fixed():
    assert {t.value for t in LeaveType} == {"vacation", "sick", "unpaid", "personal"}


def test_inheritance_types_have_three_states():
    assert set(InheritanceType) == {
        InheritanceType.FULL, InheritanceType.PARTIAL, InheritanceType.OVERRIDE,
    }


def test_template_types_cover_twelve_catalogs():
    assert len(TemplateType) == 12
    assert TemplateType("compensation_band") is TemplateType.COMPENSATION_BAND


def test_supported_locales():
    assert {locale.value for locale in Locale} == {"en", "it"}
