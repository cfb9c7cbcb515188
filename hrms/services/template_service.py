"""Template Service: organization instances of catalog templates (import, customize, sync).

Invariants:
    - An organization imports a given template at most once (TEMPLATE_ALREADY_IMPORTED)
    - Instance row and TemplateInheritance row are always written in the same commit
    - custom_fields on the inheritance row is cumulative; customization_level and
      inheritance_type are recomputed from it on every change
    - Detached (override) instances never sync (TEMPLATE_DETACHED)
    - A refused sync persists its conflicts and returns success=False; force=True
      overwrites and drops the synced fields from custom_fields
    - Bulk import: one template failing never prevents the others

Design Decisions:
    - All computation (values, levels, conflicts, status) is delegated to
      core/template_inheritance.py; this module loads, authorizes and persists
    - Bulk import validates every item before adding any row and commits once,
      so no savepoints are needed
"""

import csv
import io
import json
import logging
import uuid
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.config import get_settings
from hrms.core.domain_types import InheritanceType, TemplateType
from hrms.core.errors import (
    BusinessRuleError, ConflictError, HrmsError, ResourceNotFoundError,
)
from hrms.core.permissions import Action, Actor, Resource, Target, require_permission
from hrms.core.template_inheritance import (
    build_instance_values, calculate_customization_level, compute_sync_status,
    TEMPLATE_FIELDS, customization_label, detect_sync_conflicts, inheritance_status,
    inheritance_type_for, is_outdated, select_sync_fields, summarize_inheritances,
)
from hrms.models.organization import Organization
from hrms.models.template_inheritance import TemplateInheritance
from hrms.schemas.template import (
    TemplateBulkImport, TemplateCustomize, TemplateImport, TemplateSync,
)
from hrms.services.access import error_context, utc_now
from hrms.services.template_registry import (
    apply_instance_values, binding_for, instance_values, serialize_instance,
    serialize_template, template_values, validate_values,
)

logger = logging.getLogger(__name__)


class TemplateService:
    """Per-organization template instances and their inheritance bookkeeping."""

    def __init__(self, db: AsyncSession, actor: Actor):
        self.db = db
        self.actor = actor

    # --- Loading -------------------------------------------------------------

    async def _organization(self, organization_id: UUID, action: Action) -> Organization:
        organization = await self.db.get(Organization, organization_id)
        if organization is None:
            raise ResourceNotFoundError(
                "Organization", str(organization_id), error_context(self.actor),
            )
        require_permission(
            self.actor, Resource.TEMPLATE, action,
            Target(tenant_id=organization.tenant_id, organization_id=organization.id),
        )
        return organization

    async def _template(self, template_type: TemplateType, template_id: UUID):
        template = await self.db.get(binding_for(template_type).template_model, template_id)
        if template is None:
            raise ResourceNotFoundError(
                f"{template_type.value} template", str(template_id), error_context(self.actor),
            )
        return template

    async def _instance(self, organization_id: UUID, template_type: TemplateType,
                        instance_id: UUID):
        instance = await self.db.get(binding_for(template_type).instance_model, instance_id)
        if instance is None or instance.organization_id != organization_id:
            raise ResourceNotFoundError(
                f"{template_type.value} instance", str(instance_id), error_context(self.actor),
            )
        return instance

    async def _inheritance(self, organization_id: UUID, template_type: TemplateType,
                           instance_id: UUID) -> TemplateInheritance:
        record = (await self.db.execute(
            select(TemplateInheritance)
            .where(TemplateInheritance.organization_id == organization_id)
            .where(TemplateInheritance.template_type == template_type.value)
            .where(TemplateInheritance.instance_id == instance_id)
        )).scalar_one_or_none()
        if record is None:
            raise ResourceNotFoundError(
                "TemplateInheritance", str(instance_id), error_context(self.actor),
            )
        return record

    async def _already_imported(self, organization_id: UUID, template_type: TemplateType,
                                template_id: UUID) -> bool:
        model = binding_for(template_type).instance_model
        existing = (await self.db.execute(
            select(model.id)
            .where(model.organization_id == organization_id)
            .where(model.template_id == template_id)
        )).scalar_one_or_none()
        return existing is not None

    async def _prepare_import(self, organization: Organization, template_type: TemplateType,
                              template_id: UUID, customizations: dict[str, Any]):
        template = await self._template(template_type, template_id)
        if not template.is_active:
            raise BusinessRuleError(
                f"Template {template_id} is not active", "TEMPLATE_INACTIVE",
                error_context(self.actor),
            )
        custom = validate_values(template_type, customizations)
        if await self._already_imported(organization.id, template_type, template_id):
            raise ConflictError(
                f"Template {template_id} already imported", "TEMPLATE_ALREADY_IMPORTED",
                error_context(self.actor, template_id=str(template_id)),
            )
        return template, custom

    def _add_instance(self, organization: Organization, template_type: TemplateType,
                      template, custom: dict[str, Any], auto_sync: bool):
        binding = binding_for(template_type)
        values = build_instance_values(template_type, template_values(template_type, template), custom)
        level = calculate_customization_level(template_type, custom.keys())
        inheritance_type = inheritance_type_for(level)
        now = utc_now()

        instance_id = uuid.uuid4()
        instance = binding.instance_model(
            id=instance_id,
            organization_id=organization.id,
            template_id=template.id,
            inheritance_type=inheritance_type.value,
            customization_level=level,
            auto_sync_enabled=auto_sync,
            template_version=template.version,
            last_template_sync=now,
        )
        apply_instance_values(instance, values)
        record = TemplateInheritance(
            template_id=template.id,
            instance_id=instance_id,
            organization_id=organization.id,
            template_type=template_type.value,
            inheritance_type=inheritance_type.value,
            customization_level=level,
            auto_sync_enabled=auto_sync,
            custom_fields=custom,
            last_template_sync=now,
            template_version=template.version,
        )
        self.db.add(instance)
        self.db.add(record)
        return instance, record

    def _describe(self, template_type: TemplateType, instance, record: TemplateInheritance,
                  template_version: str | None) -> dict:
        data = serialize_instance(template_type, instance)
        data["custom_fields"] = dict(record.custom_fields or {})
        data["customization_label"] = customization_label(record.customization_level)
        data["sync_conflicts"] = record.sync_conflicts or []
        data["current_template_version"] = template_version
        data["sync_status"] = compute_sync_status(
            InheritanceType(record.inheritance_type), record.sync_conflicts,
            record.template_version, template_version,
        ).value
        return data

    # --- Import --------------------------------------------------------------

    async def import_template(self, organization_id: UUID, template_type: TemplateType,
                              data: TemplateImport) -> dict:
        organization = await self._organization(organization_id, Action.WRITE)
        template, custom = await self._prepare_import(
            organization, template_type, data.template_id, data.customizations,
        )
        instance, record = self._add_instance(
            organization, template_type, template, custom, data.auto_sync_enabled,
        )
        await self.db.commit()
        logger.info(
            f"Template {template.id} imported as {instance.id}",
            extra={"organization_id": str(organization.id), "template_type": template_type.value},
        )
        return self._describe(template_type, instance, record, template.version)

    async def bulk_import(self, organization_id: UUID, template_type: TemplateType,
                          data: TemplateBulkImport) -> dict:
        organization = await self._organization(organization_id, Action.WRITE)
        results = []
        pending = []
        seen: set[UUID] = set()

        for item in data.templates:
            try:
                if item.template_id in seen:
                    raise ConflictError(
                        f"Template {item.template_id} listed twice", "TEMPLATE_ALREADY_IMPORTED",
                    )
                seen.add(item.template_id)
                template, custom = await self._prepare_import(
                    organization, template_type, item.template_id, item.customizations,
                )
            except HrmsError as e:
                results.append({
                    "template_id": str(item.template_id),
                    "success": False,
                    "error": {"code": e.code, "message": e.message},
                })
                continue
            instance, _ = self._add_instance(
                organization, template_type, template, custom, item.auto_sync_enabled,
            )
            pending.append(instance)
            results.append({
                "template_id": str(item.template_id),
                "success": True,
                "instance_id": str(instance.id),
            })

        if pending:
            await self.db.commit()
        succeeded = len(pending)
        logger.info(
            f"Bulk import: {succeeded}/{len(results)} templates imported",
            extra={"organization_id": str(organization.id), "template_type": template_type.value},
        )
        return {
            "results": results,
            "summary": {
                "total": len(results),
                "succeeded": succeeded,
                "failed": len(results) - succeeded,
            },
        }

    async def preview(self, organization_id: UUID, template_type: TemplateType,
                      data: TemplateImport) -> dict:
        """Import computation without persisting anything."""
        organization = await self._organization(organization_id, Action.READ)
        template = await self._template(template_type, data.template_id)
        custom = validate_values(template_type, data.customizations)
        level = calculate_customization_level(template_type, custom.keys())
        return {
            "template": serialize_template(template_type, template),
            "values": build_instance_values(
                template_type, template_values(template_type, template), custom,
            ),
            "customized_fields": sorted(custom),
            "customization_level": level,
            "customization_label": customization_label(level),
            "inheritance_type": inheritance_type_for(level).value,
            "already_imported": await self._already_imported(
                organization.id, template_type, template.id,
            ),
            "template_active": template.is_active,
        }

    # --- Instances -----------------------------------------------------------

    async def list_instances(self, organization_id: UUID,
                             template_type: TemplateType | None = None) -> list[dict]:
        organization = await self._organization(organization_id, Action.READ)
        types = [template_type] if template_type else list(TemplateType)
        described = []
        for current in types:
            binding = binding_for(current)
            model = binding.instance_model
            rows = (await self.db.execute(
                select(model, TemplateInheritance, binding.template_model.version)
                .join(
                    TemplateInheritance,
                    (TemplateInheritance.instance_id == model.id)
                    & (TemplateInheritance.template_type == current.value),
                )
                .join(binding.template_model, binding.template_model.id == model.template_id)
                .where(model.organization_id == organization.id)
                .order_by(model.created_at)
            )).all()
            described.extend(
                self._describe(current, instance, record, version)
                for instance, record, version in rows
            )
        return described

    async def export_csv(self, organization_id: UUID, template_type: TemplateType) -> str:
        """Instances of one type as CSV: bookkeeping columns, then one column per field.

        Lists and mappings are written as JSON so a cell round-trips through a spreadsheet.
        """
        instances = await self.list_instances(organization_id, template_type)
        fields = TEMPLATE_FIELDS[template_type]
        header = [
            "id", "template_id", "inheritance_type", "customization_level",
            "sync_status", "template_version", "last_template_sync", *fields,
        ]
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(header)
        for instance in instances:
            row = [instance[column] for column in header[:len(header) - len(fields)]]
            for field in fields:
                value = instance["values"].get(field)
                row.append(json.dumps(value) if isinstance(value, (list, dict)) else value)
            writer.writerow(row)
        logger.info(
            f"Exported {len(instances)} {template_type.value} instances",
            extra={"organization_id": str(organization_id), "template_type": template_type.value},
        )
        return buffer.getvalue()

    async def get_instance(self, organization_id: UUID, template_type: TemplateType,
                           instance_id: UUID) -> dict:
        await self._organization(organization_id, Action.READ)
        instance = await self._instance(organization_id, template_type, instance_id)
        record = await self._inheritance(organization_id, template_type, instance_id)
        template = await self._template(template_type, instance.template_id)
        data = self._describe(template_type, instance, record, template.version)
        data["template"] = serialize_template(template_type, template)
        return data

    async def customize(self, organization_id: UUID, template_type: TemplateType,
                        instance_id: UUID, data: TemplateCustomize) -> dict:
        await self._organization(organization_id, Action.WRITE)
        instance = await self._instance(organization_id, template_type, instance_id)
        record = await self._inheritance(organization_id, template_type, instance_id)
        custom = validate_values(template_type, data.customizations)

        merged = {**(record.custom_fields or {}), **custom}
        level = calculate_customization_level(template_type, merged.keys())
        override = data.override or record.inheritance_type == InheritanceType.OVERRIDE.value
        inheritance_type = inheritance_type_for(level, override)

        apply_instance_values(instance, custom)
        instance.customization_level = level
        instance.inheritance_type = inheritance_type.value
        record.custom_fields = merged
        record.customization_level = level
        record.inheritance_type = inheritance_type.value
        if override:
            instance.auto_sync_enabled = False
            record.auto_sync_enabled = False

        await self.db.commit()
        logger.info(
            f"Instance {instance.id} customized ({level}%, {inheritance_type.value})",
            extra={"organization_id": str(organization_id), "template_type": template_type.value},
        )
        template = await self._template(template_type, instance.template_id)
        return self._describe(template_type, instance, record, template.version)

    async def sync(self, organization_id: UUID, template_type: TemplateType,
                   instance_id: UUID, data: TemplateSync) -> dict:
        await self._organization(organization_id, Action.WRITE)
        instance = await self._instance(organization_id, template_type, instance_id)
        record = await self._inheritance(organization_id, template_type, instance_id)
        if record.inheritance_type == InheritanceType.OVERRIDE.value:
            raise BusinessRuleError(
                "Detached instances cannot be synced", "TEMPLATE_DETACHED",
                error_context(self.actor),
            )
        template = await self._template(template_type, instance.template_id)

        custom = dict(record.custom_fields or {})
        fields = select_sync_fields(template_type, data.fields, custom.keys())
        source = template_values(template_type, template)
        conflicts = detect_sync_conflicts(
            fields, custom.keys(), instance_values(template_type, instance), source,
        )
        if conflicts and not data.force:
            record.sync_conflicts = conflicts
            await self.db.commit()
            logger.warning(
                f"Sync of {instance.id} refused: {len(conflicts)} conflicts",
                extra={"organization_id": str(organization_id), "template_type": template_type.value},
            )
            return {
                "success": False,
                "conflicts": conflicts,
                "synced_fields": [],
                "instance": self._describe(template_type, instance, record, template.version),
            }

        apply_instance_values(instance, {field: source[field] for field in fields})
        for field in fields:
            custom.pop(field, None)
        level = calculate_customization_level(template_type, custom.keys())
        inheritance_type = inheritance_type_for(level)
        now = utc_now()

        instance.customization_level = level
        instance.inheritance_type = inheritance_type.value
        instance.template_version = template.version
        instance.last_template_sync = now
        record.custom_fields = custom
        record.customization_level = level
        record.inheritance_type = inheritance_type.value
        record.template_version = template.version
        record.last_template_sync = now
        record.sync_conflicts = None

        await self.db.commit()
        logger.info(
            f"Instance {instance.id} synced to template version {template.version}",
            extra={"organization_id": str(organization_id), "template_type": template_type.value},
        )
        return {
            "success": True,
            "conflicts": conflicts,
            "synced_fields": fields,
            "instance": self._describe(template_type, instance, record, template.version),
        }

    # --- Reporting -----------------------------------------------------------

    async def inheritance_status(self, organization_id: UUID, template_type: TemplateType,
                                 instance_id: UUID) -> dict:
        await self._organization(organization_id, Action.READ)
        instance = await self._instance(organization_id, template_type, instance_id)
        record = await self._inheritance(organization_id, template_type, instance_id)
        template = await self._template(template_type, instance.template_id)
        status = inheritance_status(
            inheritance_type=InheritanceType(record.inheritance_type),
            customization_level=record.customization_level,
            auto_sync_enabled=record.auto_sync_enabled,
            last_template_sync=record.last_template_sync,
            sync_conflicts=record.sync_conflicts,
            instance_version=record.template_version,
            template_version=template.version,
            now=utc_now(),
        )
        status["instance_id"] = str(instance.id)
        status["template_id"] = str(template.id)
        status["customized_fields"] = sorted(record.custom_fields or {})
        return status

    async def stats(self, organization_id: UUID) -> dict:
        organization = await self._organization(organization_id, Action.READ)
        records = (await self.db.execute(
            select(TemplateInheritance)
            .where(TemplateInheritance.organization_id == organization.id)
        )).scalars().all()
        summary = summarize_inheritances(
            {
                "template_type": r.template_type,
                "inheritance_type": r.inheritance_type,
                "customization_level": r.customization_level,
                "auto_sync_enabled": r.auto_sync_enabled,
            }
            for r in records
        )
        summary["organization_id"] = str(organization.id)
        summary["with_conflicts"] = sum(1 for r in records if r.sync_conflicts)
        return summary

    async def outdated(self, organization_id: UUID,
                       template_type: TemplateType | None = None) -> list[dict]:
        organization = await self._organization(organization_id, Action.READ)
        stale_days = get_settings().template_stale_after_days
        now = utc_now()
        types = [template_type] if template_type else list(TemplateType)
        found = []
        for current in types:
            template_model = binding_for(current).template_model
            rows = (await self.db.execute(
                select(TemplateInheritance, template_model.version)
                .join(template_model, template_model.id == TemplateInheritance.template_id)
                .where(TemplateInheritance.organization_id == organization.id)
                .where(TemplateInheritance.template_type == current.value)
            )).all()
            for record, version in rows:
                if is_outdated(
                    record.auto_sync_enabled, InheritanceType(record.inheritance_type),
                    record.last_template_sync, now, stale_days,
                    record.template_version, version,
                ):
                    found.append({
                        "instance_id": str(record.instance_id),
                        "template_id": str(record.template_id),
                        "template_type": current.value,
                        "instance_version": record.template_version,
                        "template_version": version,
                        "last_template_sync": record.last_template_sync,
                    })
        return found
