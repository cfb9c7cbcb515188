"""Tenant Routes: tenant administration (sysadmin) and subscription status.

Invariants:
    - Only sysadmins create tenants or see other tenants; admins read their own
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_actor
from hrms.core.permissions import Actor
from hrms.infrastructure.database import get_db
from hrms.schemas.common import Pagination
from hrms.schemas.tenant import (
    SubscriptionResponse, TenantCreate, TenantList, TenantResponse, TenantUpdate,
)
from hrms.services.tenant_service import TenantService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/tenants", tags=["tenants"])


@router.post("", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    body: TenantCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Create a tenant with its subscription and quotas."""
    return await TenantService(db, actor).create(body)


@router.get("", response_model=TenantList)
async def list_tenants(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    status_filter: str | None = Query(None, alias="status"),
    search: str | None = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """List tenants visible to the caller."""
    tenants, total = await TenantService(db, actor).list_tenants(
        limit, offset, status=status_filter, search=search,
    )
    return TenantList(
        tenants=tenants, pagination=Pagination(limit=limit, offset=offset, total=total),
    )


@router.get("/{tenant_id}", response_model=TenantResponse)
async def get_tenant(
    tenant_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return await TenantService(db, actor).get(tenant_id)


@router.patch("/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: UUID,
    body: TenantUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return await TenantService(db, actor).update(tenant_id, body)


@router.get("/{tenant_id}/subscription", response_model=SubscriptionResponse)
async def get_subscription(
    tenant_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Plan, trial state and quota usage of a tenant."""
    return await TenantService(db, actor).subscription(tenant_id)
