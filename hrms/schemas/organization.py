"""Organization Schemas: create/update payloads, organization view and stats."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from hrms.core.domain_types import OrganizationSize
from hrms.schemas.common import ORMModel, Pagination


class OrganizationCreate(BaseModel):
    """tenant_id defaults to the caller's tenant; sysadmins must pass it."""
    tenant_id: UUID | None = None
    name: str = Field(min_length=2, max_length=200)
    slug: str = Field(min_length=2, max_length=100)
    domain: str | None = Field(None, max_length=255)
    description: str | None = None
    industry: str | None = Field(None, max_length=100)
    size: OrganizationSize = OrganizationSize.SMALL
    timezone: str | None = Field(None, max_length=50)
    currency: str | None = Field(None, min_length=3, max_length=3)
    max_employees: int = Field(100, ge=1)
    features: dict[str, bool] | None = None
    settings: dict | None = None


class OrganizationUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=200)
    domain: str | None = Field(None, max_length=255)
    description: str | None = None
    industry: str | None = Field(None, max_length=100)
    size: OrganizationSize | None = None
    timezone: str | None = Field(None, max_length=50)
    currency: str | None = Field(None, min_length=3, max_length=3)
    max_employees: int | None = Field(None, ge=1)
    features: dict[str, bool] | None = None
    settings: dict | None = None
    is_active: bool | None = None


class OrganizationResponse(ORMModel):
    id: UUID
    tenant_id: UUID
    name: str
    slug: str
    domain: str | None
    full_domain: str | None = None
    description: str | None
    industry: str | None
    size: str
    timezone: str | None
    currency: str | None
    effective_timezone: str | None = None
    effective_currency: str | None = None
    max_employees: int
    features: dict
    settings: dict
    is_active: bool
    created_at: datetime
    updated_at: datetime


class OrganizationList(BaseModel):
    organizations: list[OrganizationResponse]
    pagination: Pagination


class OrganizationStats(BaseModel):
    organization_id: UUID
    users: int
    employees: int
    max_employees: int
    departments: int
    pending_leave_requests: int
    template_instances: dict[str, int]
