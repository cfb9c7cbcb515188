"""Tenancy Rules: subscription state, quotas, slugs and organization defaults.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Slugs are lowercase alphanumeric, 2-100 chars; currencies are 3 upper-case letters
    - A tenant is usable only while active AND (paid-active OR inside an unexpired trial)
    - Datetimes read back from SQLite are naive; as_utc() normalizes before comparing
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any

from hrms.core.domain_types import SubscriptionStatus
from hrms.core.errors import ValidationError

_SLUG_RE = re.compile(r"^[a-z0-9]{2,100}$")
_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")

DEFAULT_TENANT_FEATURES: dict[str, bool] = {
    "advanced_analytics": False,
    "custom_integrations": False,
    "api_access": True,
    "priority_support": False,
}

DEFAULT_ORGANIZATION_FEATURES: dict[str, bool] = {
    "time_tracking": True,
    "leave_management": True,
    "performance_reviews": False,
    "custom_fields": False,
    "advanced_reporting": False,
}


def as_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def normalize_slug(value: str, field: str = "slug") -> str:
    slug = value.strip().lower()
    if not _SLUG_RE.match(slug):
        raise ValidationError(
            "Slug must be 2-100 lowercase letters or digits", field,
        )
    return slug


def normalize_currency(value: str, field: str = "currency") -> str:
    currency = value.strip().upper()
    if not _CURRENCY_RE.match(currency):
        raise ValidationError("Currency must be a 3-letter ISO code", field)
    return currency


def default_trial_end(now: datetime, trial_days: int) -> datetime:
    return now + timedelta(days=trial_days)


def trial_active(status: str, trial_ends_at: datetime | None, now: datetime) -> bool:
    ends = as_utc(trial_ends_at)
    return status == SubscriptionStatus.TRIAL.value and ends is not None and ends > now


def subscription_display_status(
    status: str, trial_ends_at: datetime | None, now: datetime,
) -> str:
    """trial splits into active_trial / expired_trial; other statuses pass through."""
    if status == SubscriptionStatus.TRIAL.value:
        return "active_trial" if trial_active(status, trial_ends_at, now) else "expired_trial"
    return status


def tenant_is_usable(
    is_active: bool, status: str, trial_ends_at: datetime | None, now: datetime,
) -> bool:
    if not is_active:
        return False
    if status == SubscriptionStatus.ACTIVE.value:
        return True
    return trial_active(status, trial_ends_at, now)


def can_add(current_count: int, maximum: int) -> bool:
    """Quota check shared by organizations, users and employees."""
    return current_count < maximum


def merge_features(defaults: dict[str, bool], overrides: dict[str, Any] | None) -> dict[str, bool]:
    merged = dict(defaults)
    for key, value in (overrides or {}).items():
        merged[key] = bool(value)
    return merged


def has_feature(features: dict[str, Any] | None, name: str) -> bool:
    if features is None:
        return DEFAULT_ORGANIZATION_FEATURES.get(name, False)
    return features.get(name, DEFAULT_ORGANIZATION_FEATURES.get(name, False)) is True


def effective_timezone(org_timezone: str | None, tenant_timezone: str | None) -> str:
    return org_timezone or tenant_timezone or "UTC"


def effective_currency(org_currency: str | None, tenant_currency: str | None) -> str:
    return org_currency or tenant_currency or "USD"


def organization_full_domain(
    org_slug: str, org_domain: str | None,
    tenant_slug: str | None, tenant_domain: str | None,
) -> str:
    if org_domain:
        return org_domain
    if tenant_domain:
        return f"{org_slug}.{tenant_domain}"
    return f"{org_slug}.{tenant_slug or 'system'}.hrms.com"
