"""Request Schemas tests: user, leave, tenant and template payloads.

Tests cover:
    - Emails are trimmed and lowercased; malformed ones rejected
    - Rejections require a non-blank reason
    - Numeric limits and enum fields reject out-of-range input
    - Template compare needs at least two ids
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from hrms.schemas.employee import EmployeeCreate
from hrms.schemas.leave import LeaveRejection, LeaveRequestCreate
from hrms.schemas.template import TemplateCompare, TemplateSync
from hrms.schemas.tenant import TenantCreate
from hrms.schemas.user import UserCreate


def test_email_normalized():
    user = UserCreate(email="  Anna.Rossi@Acme.TEST ", first_name="Anna", last_name="Rossi")
    assert user.email == "anna.rossi@acme.test"
    assert user.role == "employee"


@pytest.mark.parametrize("email", ["no-at-sign", "@acme.test", "anna@"])
def test_malformed_email_rejected(email):
    with pytest.raises(ValidationError):
        UserCreate(email=email, first_name="Anna", last_name="Rossi")


def test_short_password_rejected():
    with pytest.raises(ValidationError):
        UserCreate(email="a@b.test", first_name="A", last_name="B", password="short")


def test_unknown_role_rejected():
    with pytest.raises(ValidationError):
        UserCreate(email="a@b.test", first_name="A", last_name="B", role="overlord")


def test_rejection_reason_stripped():
    assert LeaveRejection(reason="  overlapping release  ").reason == "overlapping release"


def test_blank_rejection_reason_rejected():
    with pytest.raises(ValidationError):
        LeaveRejection(reason="   ")


def test_leave_request_defaults_to_submit():
    leave = LeaveRequestCreate(leave_type="vacation", start_date="2030-01-07", end_date="2030-01-08")
    assert leave.submit is True


def test_unknown_leave_type_rejected():
    with pytest.raises(ValidationError):
        LeaveRequestCreate(leave_type="sabbatical", start_date="2030-01-07", end_date="2030-01-08")


def test_negative_balance_rejected():
    with pytest.raises(ValidationError):
        EmployeeCreate(user_id=uuid4(), vacation_balance=-1)


def test_tenant_currency_is_three_letters():
    with pytest.raises(ValidationError):
        TenantCreate(name="Acme", slug="acme", currency="EURO")


def test_tenant_defaults_to_trial():
    tenant = TenantCreate(name="Acme", slug="acme")
    assert tenant.subscription_plan == "trial"
    assert tenant.max_organizations == 5


def test_compare_needs_two_templates():
    with pytest.raises(ValidationError):
        TemplateCompare(template_ids=[uuid4()])


def test_sync_defaults():
    sync = TemplateSync()
    assert sync.fields == []
    assert sync.force is False
