"""Organization Template Routes: importing catalog templates into an organization,
customizing the copies and keeping them in sync.

Invariants:
    - Fixed paths (/stats, /outdated) are registered before /{template_type}, and
      /{template_type}/export before /{template_type}/{instance_id}
    - Reads need organization read access, every change needs organization write access
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_actor
from hrms.core.domain_types import TemplateType
from hrms.core.permissions import Actor
from hrms.infrastructure.database import get_db
from hrms.schemas.template import (
    TemplateBulkImport, TemplateCustomize, TemplateImport, TemplateSync,
)
from hrms.services.template_service import TemplateService

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/v1/organizations/{organization_id}/templates", tags=["templates"],
)


@router.get("")
async def list_all_instances(
    organization_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Every imported template of the organization, all types."""
    instances = await TemplateService(db, actor).list_instances(organization_id)
    return {"instances": instances, "total": len(instances)}


@router.get("/stats")
async def inheritance_stats(
    organization_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Counts by type and inheritance, customization buckets, auto-sync usage."""
    return await TemplateService(db, actor).stats(organization_id)


@router.get("/outdated")
async def outdated_instances(
    organization_id: UUID,
    template_type: TemplateType | None = None,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Instances behind their template version or overdue for an auto-sync."""
    outdated = await TemplateService(db, actor).outdated(organization_id, template_type)
    return {"outdated": outdated, "total": len(outdated)}


@router.get("/{template_type}")
async def list_instances(
    organization_id: UUID,
    template_type: TemplateType,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    instances = await TemplateService(db, actor).list_instances(organization_id, template_type)
    return {"instances": instances, "total": len(instances)}


@router.post("/{template_type}/import", status_code=status.HTTP_201_CREATED)
async def import_template(
    organization_id: UUID,
    template_type: TemplateType,
    body: TemplateImport,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Copy a catalog template into the organization, with optional customizations."""
    return await TemplateService(db, actor).import_template(organization_id, template_type, body)


@router.post("/{template_type}/bulk-import")
async def bulk_import(
    organization_id: UUID,
    template_type: TemplateType,
    body: TemplateBulkImport,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Import many templates; each one succeeds or fails on its own."""
    return await TemplateService(db, actor).bulk_import(organization_id, template_type, body)


@router.post("/{template_type}/preview")
async def preview_import(
    organization_id: UUID,
    template_type: TemplateType,
    body: TemplateImport,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """What an import would produce; nothing is stored."""
    return await TemplateService(db, actor).preview(organization_id, template_type, body)


@router.get("/{template_type}/export")
async def export_instances(
    organization_id: UUID,
    template_type: TemplateType,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Download the organization's instances of one type as CSV."""
    content = await TemplateService(db, actor).export_csv(organization_id, template_type)
    return Response(
        content=content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{template_type.value}_templates.csv"',
        },
    )


@router.get("/{template_type}/{instance_id}")
async def get_instance(
    organization_id: UUID,
    template_type: TemplateType,
    instance_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return await TemplateService(db, actor).get_instance(
        organization_id, template_type, instance_id,
    )


@router.patch("/{template_type}/{instance_id}/customize")
async def customize_instance(
    organization_id: UUID,
    template_type: TemplateType,
    instance_id: UUID,
    body: TemplateCustomize,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Override fields of an instance; override=true detaches it from its template."""
    return await TemplateService(db, actor).customize(
        organization_id, template_type, instance_id, body,
    )


@router.post("/{template_type}/{instance_id}/sync")
async def sync_instance(
    organization_id: UUID,
    template_type: TemplateType,
    instance_id: UUID,
    body: TemplateSync,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Pull template values into the instance; conflicts block unless force=true."""
    return await TemplateService(db, actor).sync(
        organization_id, template_type, instance_id, body,
    )


@router.get("/{template_type}/{instance_id}/inheritance")
async def inheritance_status(
    organization_id: UUID,
    template_type: TemplateType,
    instance_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return await TemplateService(db, actor).inheritance_status(
        organization_id, template_type, instance_id,
    )
