"""Error Hierarchy tests: envelope shape and status codes.

Tests cover:
    - to_response envelope carries code, category, severity, context
    - A localized message replaces the default one
    - Validation errors name the offending field
    - HTTP status per error class
"""

import pytest

from hrms.core.errors import (
    AuthenticationError, BusinessRuleError, ConflictError, CrossTenantAccessError,
    DatabaseError, ErrorContext, PermissionDeniedError, QuotaExceededError,
    ResourceNotFoundError, TenantSuspendedError, ValidationError,
)


def test_envelope_shape():
    error = ResourceNotFoundError("employee", "42", ErrorContext(tenant_id="t1", user_id="u1"))
    body = error.to_response()["error"]
    assert body["code"] == "RESOURCE_NOT_FOUND"
    assert body["category"] == "resource_not_found"
    assert body["severity"] == "error"
    assert body["context"]["tenant_id"] == "t1"
    assert body["context"]["user_id"] == "u1"
    assert body["message"] == "employee '42' not found"


def test_localized_message_overrides_default():
    body = AuthenticationError().to_response("Autenticazione richiesta")["error"]
    assert body["message"] == "Autenticazione richiesta"


def test_validation_error_names_field():
    body = ValidationError("bad date", "start_date").to_response()["error"]
    assert body["field"] == "start_date"


def test_business_rule_error_keeps_params():
    error = BusinessRuleError("no", "LEAVE_NOT_PENDING", status="draft")
    assert error.params == {"status": "draft"}


@pytest.mark.parametrize("error,status", [
    (ValidationError("x", "f"), 400),
    (BusinessRuleError("x", "CODE"), 400),
    (AuthenticationError(), 401),
    (PermissionDeniedError("employee", "read", "scope"), 403),
    (CrossTenantAccessError("employee", "read"), 403),
    (TenantSuspendedError("suspended"), 403),
    (QuotaExceededError("employees", 10), 403),
    (ResourceNotFoundError("user", "1"), 404),
    (ConflictError("dup", "DUPLICATE"), 409),
    (DatabaseError("down", "query"), 503),
])
def test_http_status(error, status):
    assert error.http_status == status


def test_cross_tenant_is_a_permission_error():
    error = CrossTenantAccessError("employee", "read")
    assert isinstance(error, PermissionDeniedError)
    assert error.code == "CROSS_TENANT_ACCESS_DENIED"
