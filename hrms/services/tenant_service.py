"""Tenant Service: tenant administration and subscription status.

Invariants:
    - Only sysadmins create and update tenants; tenant admins may read their own tenant
    - Slugs are normalized (core/tenancy.py) and globally unique
    - A trial tenant without an explicit end date gets now + settings.trial_days
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.config import get_settings
from hrms.core.errors import ConflictError, ResourceNotFoundError
from hrms.core.permissions import Action, Actor, Resource, Target, require_permission
from hrms.core.tenancy import (
    DEFAULT_TENANT_FEATURES, as_utc, default_trial_end, merge_features,
    normalize_currency, normalize_slug, subscription_display_status, tenant_is_usable,
)
from hrms.models.organization import Organization
from hrms.models.tenant import Tenant
from hrms.schemas.tenant import TenantCreate, TenantUpdate
from hrms.services.access import error_context, scope_clause, utc_now

logger = logging.getLogger(__name__)


class TenantService:
    """Tenant CRUD scoped by the caller's role."""

    def __init__(self, db: AsyncSession, actor: Actor):
        self.db = db
        self.actor = actor

    async def get_or_404(self, tenant_id: UUID) -> Tenant:
        tenant = await self.db.get(Tenant, tenant_id)
        if tenant is None:
            raise ResourceNotFoundError("Tenant", str(tenant_id), error_context(self.actor))
        return tenant

    async def _ensure_slug_free(self, slug: str) -> None:
        existing = (await self.db.execute(
            select(Tenant.id).where(Tenant.slug == slug)
        )).scalar_one_or_none()
        if existing is not None:
            raise ConflictError(
                f"Tenant slug '{slug}' already exists", "DUPLICATE_SLUG", slug=slug,
            )

    async def create(self, data: TenantCreate) -> Tenant:
        require_permission(self.actor, Resource.TENANT, Action.WRITE)
        slug = normalize_slug(data.slug)
        await self._ensure_slug_free(slug)

        trial_ends_at = data.trial_ends_at
        if data.subscription_status.value == "trial" and trial_ends_at is None:
            trial_ends_at = default_trial_end(utc_now(), get_settings().trial_days)

        tenant = Tenant(
            name=data.name.strip(),
            slug=slug,
            domain=data.domain,
            contact_email=data.contact_email,
            subscription_plan=data.subscription_plan.value,
            subscription_status=data.subscription_status.value,
            trial_ends_at=trial_ends_at,
            max_organizations=data.max_organizations,
            max_users_per_org=data.max_users_per_org,
            timezone=data.timezone,
            currency=normalize_currency(data.currency),
            features=merge_features(DEFAULT_TENANT_FEATURES, data.features),
            settings=data.settings or {},
        )
        self.db.add(tenant)
        await self.db.commit()
        logger.info(f"Tenant {tenant.slug} created", extra={"tenant_id": str(tenant.id)})
        return tenant

    async def list_tenants(
        self, limit: int, offset: int,
        status: str | None = None, search: str | None = None,
    ) -> tuple[list[Tenant], int]:
        clause = scope_clause(
            self.actor, Resource.TENANT, tenant_col=Tenant.id, org_col=None,
        )
        query = select(Tenant)
        if clause is not None:
            query = query.where(clause)
        if status:
            query = query.where(Tenant.subscription_status == status)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.where(
                func.lower(Tenant.name).like(pattern) | Tenant.slug.like(pattern)
            )
        total = (await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )).scalar_one()
        rows = (await self.db.execute(
            query.order_by(Tenant.created_at.desc()).limit(limit).offset(offset)
        )).scalars().all()
        return list(rows), total

    async def get(self, tenant_id: UUID) -> Tenant:
        tenant = await self.get_or_404(tenant_id)
        require_permission(self.actor, Resource.TENANT, Action.READ, Target(tenant_id=tenant.id))
        return tenant

    async def update(self, tenant_id: UUID, data: TenantUpdate) -> Tenant:
        tenant = await self.get_or_404(tenant_id)
        require_permission(self.actor, Resource.TENANT, Action.WRITE, Target(tenant_id=tenant.id))

        changes = data.model_dump(exclude_unset=True)
        if "currency" in changes and changes["currency"] is not None:
            changes["currency"] = normalize_currency(changes["currency"])
        if "features" in changes and changes["features"] is not None:
            changes["features"] = merge_features(tenant.features, changes["features"])
        for key in ("subscription_plan", "subscription_status"):
            if changes.get(key) is not None:
                changes[key] = changes[key].value
        for key, value in changes.items():
            if value is None and key not in ("domain", "contact_email", "trial_ends_at"):
                continue
            setattr(tenant, key, value)

        await self.db.commit()
        logger.info(f"Tenant {tenant.slug} updated", extra={"tenant_id": str(tenant.id)})
        return tenant

    async def subscription(self, tenant_id: UUID) -> dict:
        tenant = await self.get(tenant_id)
        now = utc_now()
        organizations = (await self.db.execute(
            select(func.count(Organization.id)).where(Organization.tenant_id == tenant.id)
        )).scalar_one()
        trial_end = as_utc(tenant.trial_ends_at)
        days_left = None
        if tenant.subscription_status == "trial" and trial_end is not None:
            days_left = max(0, (trial_end - now).days)
        return {
            "tenant_id": tenant.id,
            "plan": tenant.subscription_plan,
            "status": tenant.subscription_status,
            "display_status": subscription_display_status(
                tenant.subscription_status, tenant.trial_ends_at, now,
            ),
            "trial_ends_at": tenant.trial_ends_at,
            "trial_days_left": days_left,
            "is_usable": tenant_is_usable(
                tenant.is_active, tenant.subscription_status, tenant.trial_ends_at, now,
            ),
            "organizations": organizations,
            "max_organizations": tenant.max_organizations,
            "max_users_per_org": tenant.max_users_per_org,
        }
