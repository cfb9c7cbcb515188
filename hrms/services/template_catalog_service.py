"""Template Catalog Service: the shared, tenant-independent template catalog.

Invariants:
    - Every role with template read access may browse the catalog
    - Only sysadmins create or change catalog entries
    - An update without an explicit version bumps it (core/template_inheritance.py bump_version),
      which marks every attached instance as outdated
"""

import logging
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.core.domain_types import TemplateType
from hrms.core.errors import PermissionDeniedError, ResourceNotFoundError, ValidationError
from hrms.core.permissions import Action, Actor, Resource, require_permission
from hrms.core.template_inheritance import bump_version, compare_templates
from hrms.schemas.template import TemplateCreate, TemplateUpdate
from hrms.services.access import error_context
from hrms.services.template_registry import binding_for, template_values, validate_values

logger = logging.getLogger(__name__)


class TemplateCatalogService:
    """Browse and curate catalog templates of every type."""

    def __init__(self, db: AsyncSession, actor: Actor):
        self.db = db
        self.actor = actor

    def _require_curator(self) -> None:
        if not self.actor.is_sysadmin:
            raise PermissionDeniedError(
                "template", "write", "only system administrators curate the catalog",
                error_context(self.actor),
            )

    async def get_or_404(self, template_type: TemplateType, template_id: UUID):
        model = binding_for(template_type).template_model
        template = await self.db.get(model, template_id)
        if template is None:
            raise ResourceNotFoundError(
                f"{template_type.value} template", str(template_id), error_context(self.actor),
            )
        return template

    async def list_templates(
        self, template_type: TemplateType, limit: int, offset: int,
        category: str | None = None, search: str | None = None, active_only: bool = True,
    ) -> tuple[list, int]:
        require_permission(self.actor, Resource.TEMPLATE, Action.READ)
        binding = binding_for(template_type)
        model = binding.template_model
        display = getattr(model, binding.display_field)

        query = select(model)
        if active_only:
            query = query.where(model.is_active.is_(True))
        if category:
            query = query.where(model.category == category)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.where(or_(
                func.lower(display).like(pattern),
                func.lower(model.description).like(pattern),
            ))
        total = (await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )).scalar_one()
        rows = (await self.db.execute(
            query.order_by(display).limit(limit).offset(offset)
        )).scalars().all()
        return list(rows), total

    async def get(self, template_type: TemplateType, template_id: UUID):
        require_permission(self.actor, Resource.TEMPLATE, Action.READ)
        return await self.get_or_404(template_type, template_id)

    async def create(self, template_type: TemplateType, data: TemplateCreate):
        self._require_curator()
        binding = binding_for(template_type)
        values = validate_values(template_type, data.values)
        if not values.get(binding.display_field):
            raise ValidationError(
                f"{binding.display_field} is required", binding.display_field,
            )
        extra = {"version": data.version}
        if data.category is not None and "category" not in values:
            extra["category"] = data.category
        template = binding.template_model(**values, **extra)
        self.db.add(template)
        await self.db.commit()
        logger.info(
            f"Catalog template {template.id} created",
            extra={"template_type": template_type.value},
        )
        return template

    async def update(self, template_type: TemplateType, template_id: UUID, data: TemplateUpdate):
        self._require_curator()
        template = await self.get_or_404(template_type, template_id)
        values = validate_values(template_type, data.values)
        display = binding_for(template_type).display_field
        if display in values and not values[display]:
            raise ValidationError(f"{display} cannot be empty", display)

        for field, value in values.items():
            setattr(template, field, value)
        if data.category is not None and "category" not in values:
            template.category = data.category
        if data.is_active is not None:
            template.is_active = data.is_active
        template.version = data.version or bump_version(template.version)

        await self.db.commit()
        logger.info(
            f"Catalog template {template.id} updated to version {template.version}",
            extra={"template_type": template_type.value},
        )
        return template

    async def compare(self, template_type: TemplateType, template_ids: list[UUID]) -> dict:
        require_permission(self.actor, Resource.TEMPLATE, Action.READ)
        templates = []
        for template_id in template_ids:
            template = await self.get_or_404(template_type, template_id)
            templates.append({"id": template.id, **template_values(template_type, template)})
        return compare_templates(template_type, templates)
