"""Organization Routes: organizations inside a tenant, with derived settings and stats.

Invariants:
    - Responses always carry full_domain and the effective timezone/currency
      (organization value, else the tenant's)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_actor
from hrms.core.permissions import Actor
from hrms.infrastructure.database import get_db
from hrms.schemas.common import Pagination
from hrms.schemas.organization import (
    OrganizationCreate, OrganizationList, OrganizationResponse, OrganizationStats,
    OrganizationUpdate,
)
from hrms.services.organization_service import OrganizationService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/organizations", tags=["organizations"])


@router.post("", response_model=OrganizationResponse, status_code=status.HTTP_201_CREATED)
async def create_organization(
    body: OrganizationCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Create an organization within the tenant quota."""
    service = OrganizationService(db, actor)
    return await service.describe(await service.create(body))


@router.get("", response_model=OrganizationList)
async def list_organizations(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    tenant_id: UUID | None = None,
    active: bool | None = None,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    service = OrganizationService(db, actor)
    organizations, total = await service.list_organizations(
        limit, offset, tenant_id=tenant_id, active=active,
    )
    return OrganizationList(
        organizations=[await service.describe(o) for o in organizations],
        pagination=Pagination(limit=limit, offset=offset, total=total),
    )


@router.get("/{organization_id}", response_model=OrganizationResponse)
async def get_organization(
    organization_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    service = OrganizationService(db, actor)
    return await service.describe(await service.get(organization_id))


@router.patch("/{organization_id}", response_model=OrganizationResponse)
async def update_organization(
    organization_id: UUID,
    body: OrganizationUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    service = OrganizationService(db, actor)
    return await service.describe(await service.update(organization_id, body))


@router.delete("/{organization_id}", response_model=OrganizationResponse)
async def deactivate_organization(
    organization_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Deactivate (not delete) an organization."""
    service = OrganizationService(db, actor)
    return await service.describe(await service.deactivate(organization_id))


@router.get("/{organization_id}/stats", response_model=OrganizationStats)
async def organization_stats(
    organization_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return await OrganizationService(db, actor).stats(organization_id)
