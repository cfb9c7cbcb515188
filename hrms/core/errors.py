"""Error Hierarchy: typed, categorized exceptions for all HRMS failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope consumed by the console
    - No internal details leaked in user-facing messages
    - params hold the values interpolated into localized messages (core/language_strings.py)

Design Decisions:
    - Single hierarchy with HrmsError base: one FastAPI handler catches all
    - ErrorContext as dataclass: tenant/user ids travel with the error into the logs
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    tenant_id: str | None = None
    organization_id: str | None = None
    user_id: str | None = None
    details: dict[str, Any] | None = None


class HrmsError(Exception):
    """Base exception for all HRMS errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        params: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.params = params or {}

    def to_response(self, message: str | None = None) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "tenant_id": self.context.tenant_id,
                    "organization_id": self.context.organization_id,
                    "user_id": self.context.user_id,
                    "details": self.context.details,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(HrmsError):
    """Input passed schema validation but violates a domain rule on one field."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400, params={"field": field},
        )
        self.field = field

    def to_response(self, message: str | None = None) -> dict:
        body = super().to_response(message)
        body["error"]["field"] = self.field
        return body


class BusinessRuleError(HrmsError):
    """A state-dependent rule refused the operation."""
    def __init__(
        self, message: str, code: str,
        context: ErrorContext | None = None, **params: Any,
    ):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400, params=params,
        )


class InsufficientBalanceError(HrmsError):
    """Leave request exceeds the employee's remaining balance."""
    def __init__(
        self, leave_type: str, available: float, requested: float,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.details = {
            "leave_type": leave_type, "available": available, "requested": requested,
        }
        super().__init__(
            f"Insufficient {leave_type} balance: {available} available, {requested} requested",
            "INSUFFICIENT_BALANCE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, ctx, 400,
            params={"leave_type": leave_type, "available": available, "requested": requested},
        )


class AuthenticationError(HrmsError):
    """Caller identity missing or no longer valid."""
    def __init__(self, message: str = "Authentication required", context: ErrorContext | None = None):
        super().__init__(
            message, "AUTHENTICATION_REQUIRED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class PermissionDeniedError(HrmsError):
    """Caller's role scope does not cover the target resource."""
    def __init__(
        self, resource: str, action: str, reason: str,
        context: ErrorContext | None = None,
        code: str = "INSUFFICIENT_PERMISSIONS",
    ):
        super().__init__(
            f"Not allowed to {action} {resource}: {reason}",
            code, ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
            params={"resource": resource, "action": action},
        )
        self.resource = resource
        self.action = action
        self.reason = reason


class CrossTenantAccessError(PermissionDeniedError):
    """Caller attempted to reach data owned by another tenant."""
    def __init__(self, resource: str, action: str, context: ErrorContext | None = None):
        super().__init__(
            resource, action, "resource belongs to another tenant",
            context, code="CROSS_TENANT_ACCESS_DENIED",
        )


class TenantSuspendedError(HrmsError):
    """Caller's tenant or organization is not usable."""
    def __init__(
        self, message: str, code: str = "TENANT_SUSPENDED",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class QuotaExceededError(HrmsError):
    """A tenant or organization limit (organizations, users, employees) is reached."""
    def __init__(
        self, quota: str, limit: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Limit reached for {quota} ({limit})",
            "QUOTA_EXCEEDED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 403,
            params={"quota": quota, "limit": limit},
        )
        self.quota = quota
        self.limit = limit


class ResourceNotFoundError(HrmsError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
            params={"resource_type": resource_type, "resource_id": resource_id},
        )


class ConflictError(HrmsError):
    """Operation conflicts with existing state (duplicates, overlaps)."""
    def __init__(
        self, message: str, code: str,
        context: ErrorContext | None = None, **params: Any,
    ):
        super().__init__(
            message, code, ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409, params=params,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(HrmsError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
