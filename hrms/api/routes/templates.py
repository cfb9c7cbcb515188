"""Template Catalog Routes: the shared catalog of skills, job roles, leave types,
career paths and training programs.

Invariants:
    - template_type in the path is validated against TemplateType (422 -> 400 envelope)
    - Catalog writes are sysadmin-only (enforced in TemplateCatalogService)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_actor
from hrms.core.domain_types import TemplateType
from hrms.core.permissions import Actor
from hrms.infrastructure.database import get_db
from hrms.schemas.template import TemplateCompare, TemplateCreate, TemplateUpdate
from hrms.services.template_catalog_service import TemplateCatalogService
from hrms.services.template_registry import serialize_template

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/templates", tags=["templates"])


@router.get("/{template_type}")
async def list_templates(
    template_type: TemplateType,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    category: str | None = None,
    search: str | None = Query(None, max_length=100),
    active_only: bool = True,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Browse or search one catalog."""
    templates, total = await TemplateCatalogService(db, actor).list_templates(
        template_type, limit, offset,
        category=category, search=search, active_only=active_only,
    )
    return {
        "templates": [serialize_template(template_type, t) for t in templates],
        "pagination": {"limit": limit, "offset": offset, "total": total},
    }


@router.post("/{template_type}", status_code=status.HTTP_201_CREATED)
async def create_template(
    template_type: TemplateType,
    body: TemplateCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    template = await TemplateCatalogService(db, actor).create(template_type, body)
    return serialize_template(template_type, template)


@router.post("/{template_type}/compare")
async def compare_templates(
    template_type: TemplateType,
    body: TemplateCompare,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Side-by-side field values of 2-10 templates and the fields that differ."""
    return await TemplateCatalogService(db, actor).compare(template_type, body.template_ids)


@router.get("/{template_type}/{template_id}")
async def get_template(
    template_type: TemplateType,
    template_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    template = await TemplateCatalogService(db, actor).get(template_type, template_id)
    return serialize_template(template_type, template)


@router.patch("/{template_type}/{template_id}")
async def update_template(
    template_type: TemplateType,
    template_id: UUID,
    body: TemplateUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Update a catalog entry; the version is bumped unless given explicitly."""
    template = await TemplateCatalogService(db, actor).update(template_type, template_id, body)
    return serialize_template(template_type, template)
