"""Tenant Schemas: create/update payloads and the tenant/subscription views."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from hrms.core.domain_types import SubscriptionPlan, SubscriptionStatus
from hrms.schemas.common import ORMModel, Pagination


class TenantCreate(BaseModel):
    name: str = Field(min_length=2, max_length=200)
    slug: str = Field(min_length=2, max_length=100)
    domain: str | None = Field(None, max_length=255)
    contact_email: str | None = Field(None, max_length=255)
    subscription_plan: SubscriptionPlan = SubscriptionPlan.TRIAL
    subscription_status: SubscriptionStatus = SubscriptionStatus.TRIAL
    trial_ends_at: datetime | None = None
    max_organizations: int = Field(5, ge=1)
    max_users_per_org: int = Field(100, ge=1)
    timezone: str = Field("UTC", max_length=50)
    currency: str = Field("USD", min_length=3, max_length=3)
    features: dict[str, bool] | None = None
    settings: dict | None = None


class TenantUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=200)
    domain: str | None = Field(None, max_length=255)
    contact_email: str | None = Field(None, max_length=255)
    subscription_plan: SubscriptionPlan | None = None
    subscription_status: SubscriptionStatus | None = None
    trial_ends_at: datetime | None = None
    max_organizations: int | None = Field(None, ge=1)
    max_users_per_org: int | None = Field(None, ge=1)
    timezone: str | None = Field(None, max_length=50)
    currency: str | None = Field(None, min_length=3, max_length=3)
    features: dict[str, bool] | None = None
    settings: dict | None = None
    is_active: bool | None = None


class TenantResponse(ORMModel):
    id: UUID
    name: str
    slug: str
    domain: str | None
    contact_email: str | None
    subscription_plan: str
    subscription_status: str
    trial_ends_at: datetime | None
    max_organizations: int
    max_users_per_org: int
    timezone: str
    currency: str
    features: dict
    settings: dict
    is_active: bool
    created_at: datetime
    updated_at: datetime


class TenantList(BaseModel):
    tenants: list[TenantResponse]
    pagination: Pagination


class SubscriptionResponse(BaseModel):
    tenant_id: UUID
    plan: str
    status: str
    display_status: str
    trial_ends_at: datetime | None
    trial_days_left: int | None
    is_usable: bool
    organizations: int
    max_organizations: int
    max_users_per_org: int
