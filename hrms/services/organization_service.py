"""Organization Service: organizations within a tenant, quotas and per-org stats.

Invariants:
    - Organization count per tenant never exceeds tenant.max_organizations
    - Slug unique per tenant (DUPLICATE_SLUG)
    - features always contain every DEFAULT_ORGANIZATION_FEATURES key
    - Deactivation is a flag (is_active=False): users of an inactive org are locked out
      by services/access.py load_actor
"""

import logging
from uuid import UUID

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.core.domain_types import TemplateType
from hrms.core.errors import (
    ConflictError, QuotaExceededError, ResourceNotFoundError, ValidationError,
)
from hrms.core.permissions import Action, Actor, Resource, Target, require_permission
from hrms.core.tenancy import (
    DEFAULT_ORGANIZATION_FEATURES, can_add, effective_currency, effective_timezone,
    merge_features, normalize_currency, normalize_slug, organization_full_domain,
)
from hrms.models.employee import Employee
from hrms.models.leave_request import LeaveRequest
from hrms.models.organization import Organization
from hrms.models.template_inheritance import TemplateInheritance
from hrms.models.tenant import Tenant
from hrms.models.user import User
from hrms.schemas.organization import OrganizationCreate, OrganizationUpdate
from hrms.services.access import error_context, scope_clause

logger = logging.getLogger(__name__)


def organization_target(organization: Organization) -> Target:
    return Target(tenant_id=organization.tenant_id, organization_id=organization.id)


class OrganizationService:
    """Organization CRUD and stats scoped by the caller's role."""

    def __init__(self, db: AsyncSession, actor: Actor):
        self.db = db
        self.actor = actor

    async def get_or_404(self, organization_id: UUID) -> Organization:
        organization = await self.db.get(Organization, organization_id)
        if organization is None:
            raise ResourceNotFoundError(
                "Organization", str(organization_id), error_context(self.actor),
            )
        return organization

    async def describe(self, organization: Organization) -> dict:
        """Row plus derived domain/timezone/currency (tenant fallbacks applied)."""
        tenant = await self.db.get(Tenant, organization.tenant_id)
        data = {
            column.name: getattr(organization, column.name)
            for column in Organization.__table__.columns
        }
        data["full_domain"] = organization_full_domain(
            organization.slug, organization.domain,
            tenant.slug if tenant else None, tenant.domain if tenant else None,
        )
        data["effective_timezone"] = effective_timezone(
            organization.timezone, tenant.timezone if tenant else None,
        )
        data["effective_currency"] = effective_currency(
            organization.currency, tenant.currency if tenant else None,
        )
        return data

    async def create(self, data: OrganizationCreate) -> Organization:
        tenant_id = data.tenant_id or self.actor.tenant_id
        if tenant_id is None:
            raise ValidationError("tenant_id is required", "tenant_id")
        tenant = await self.db.get(Tenant, tenant_id)
        if tenant is None:
            raise ResourceNotFoundError("Tenant", str(tenant_id), error_context(self.actor))
        require_permission(
            self.actor, Resource.ORGANIZATION, Action.WRITE, Target(tenant_id=tenant.id),
        )

        count = (await self.db.execute(
            select(func.count(Organization.id)).where(Organization.tenant_id == tenant.id)
        )).scalar_one()
        if not can_add(count, tenant.max_organizations):
            raise QuotaExceededError(
                "organizations", tenant.max_organizations, error_context(self.actor),
            )

        slug = normalize_slug(data.slug)
        taken = (await self.db.execute(
            select(Organization.id)
            .where(Organization.tenant_id == tenant.id)
            .where(Organization.slug == slug)
        )).scalar_one_or_none()
        if taken is not None:
            raise ConflictError(
                f"Organization slug '{slug}' already exists in this tenant",
                "DUPLICATE_SLUG", slug=slug,
            )

        organization = Organization(
            tenant_id=tenant.id,
            name=data.name.strip(),
            slug=slug,
            domain=data.domain,
            description=data.description,
            industry=data.industry,
            size=data.size.value,
            timezone=data.timezone,
            currency=normalize_currency(data.currency) if data.currency else None,
            max_employees=data.max_employees,
            features=merge_features(DEFAULT_ORGANIZATION_FEATURES, data.features),
            settings=data.settings or {},
        )
        self.db.add(organization)
        await self.db.commit()
        logger.info(
            f"Organization {organization.slug} created",
            extra={"tenant_id": str(tenant.id), "organization_id": str(organization.id)},
        )
        return organization

    async def list_organizations(
        self, limit: int, offset: int,
        tenant_id: UUID | None = None, active: bool | None = None,
    ) -> tuple[list[Organization], int]:
        clause = scope_clause(
            self.actor, Resource.ORGANIZATION,
            tenant_col=Organization.tenant_id, org_col=Organization.id,
        )
        query = select(Organization)
        if clause is not None:
            query = query.where(clause)
        if tenant_id is not None:
            query = query.where(Organization.tenant_id == tenant_id)
        if active is not None:
            query = query.where(Organization.is_active.is_(active))
        total = (await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )).scalar_one()
        rows = (await self.db.execute(
            query.order_by(Organization.name).limit(limit).offset(offset)
        )).scalars().all()
        return list(rows), total

    async def get(self, organization_id: UUID) -> Organization:
        organization = await self.get_or_404(organization_id)
        require_permission(
            self.actor, Resource.ORGANIZATION, Action.READ, organization_target(organization),
        )
        return organization

    async def update(self, organization_id: UUID, data: OrganizationUpdate) -> Organization:
        organization = await self.get_or_404(organization_id)
        require_permission(
            self.actor, Resource.ORGANIZATION, Action.WRITE, organization_target(organization),
        )
        changes = data.model_dump(exclude_unset=True)
        if changes.get("currency"):
            changes["currency"] = normalize_currency(changes["currency"])
        if changes.get("features") is not None:
            changes["features"] = merge_features(organization.features, changes["features"])
        if changes.get("size") is not None:
            changes["size"] = changes["size"].value
        for key, value in changes.items():
            if value is None and key in ("name", "size", "max_employees", "features",
                                         "settings", "is_active"):
                continue
            setattr(organization, key, value)
        await self.db.commit()
        logger.info(
            f"Organization {organization.slug} updated",
            extra={"organization_id": str(organization.id)},
        )
        return organization

    async def deactivate(self, organization_id: UUID) -> Organization:
        organization = await self.get_or_404(organization_id)
        require_permission(
            self.actor, Resource.ORGANIZATION, Action.DELETE, organization_target(organization),
        )
        organization.is_active = False
        await self.db.commit()
        logger.info(
            f"Organization {organization.slug} deactivated",
            extra={"organization_id": str(organization.id)},
        )
        return organization

    async def stats(self, organization_id: UUID) -> dict:
        organization = await self.get(organization_id)
        org_id = organization.id

        users = (await self.db.execute(
            select(func.count(User.id))
            .where(User.organization_id == org_id)
            .where(User.deleted_at.is_(None))
        )).scalar_one()
        employees = (await self.db.execute(
            select(func.count(Employee.id))
            .where(Employee.organization_id == org_id)
            .where(Employee.deleted_at.is_(None))
        )).scalar_one()
        departments = (await self.db.execute(
            select(func.count(distinct(Employee.department)))
            .where(Employee.organization_id == org_id)
            .where(Employee.deleted_at.is_(None))
        )).scalar_one()
        pending = (await self.db.execute(
            select(func.count(LeaveRequest.id))
            .where(LeaveRequest.organization_id == org_id)
            .where(LeaveRequest.status == "pending")
        )).scalar_one()
        rows = (await self.db.execute(
            select(TemplateInheritance.template_type, func.count(TemplateInheritance.id))
            .where(TemplateInheritance.organization_id == org_id)
            .group_by(TemplateInheritance.template_type)
        )).all()
        instances = {t.value: 0 for t in TemplateType}
        for template_type, count in rows:
            instances[template_type] = count

        return {
            "organization_id": org_id,
            "users": users,
            "employees": employees,
            "max_employees": organization.max_employees,
            "departments": departments,
            "pending_leave_requests": pending,
            "template_instances": instances,
        }
