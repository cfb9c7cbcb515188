"""Template Schemas: catalog payloads and organization instance operations.

Invariants:
    - Field-level payloads (values, customizations) are checked by the services per
      template type: keys against TEMPLATE_FIELDS, values against schemas/template_fields.py
    - Bulk import is capped at 100 templates per call
"""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class TemplateCreate(BaseModel):
    values: dict[str, Any]
    category: str | None = Field(None, max_length=100)
    version: str = Field("1.0", max_length=20)


class TemplateUpdate(BaseModel):
    """version omitted -> bumped automatically (1.4 -> 1.5)."""
    values: dict[str, Any] = {}
    category: str | None = Field(None, max_length=100)
    version: str | None = Field(None, max_length=20)
    is_active: bool | None = None


class TemplateCompare(BaseModel):
    template_ids: list[UUID] = Field(min_length=2, max_length=10)


class TemplateImport(BaseModel):
    template_id: UUID
    customizations: dict[str, Any] = {}
    auto_sync_enabled: bool = True


class TemplateBulkImport(BaseModel):
    templates: list[TemplateImport] = Field(min_length=1, max_length=100)


class TemplateCustomize(BaseModel):
    customizations: dict[str, Any] = {}
    override: bool = False


class TemplateSync(BaseModel):
    """Empty fields -> every field the organization has not customized."""
    fields: list[str] = []
    force: bool = False
