"""Template Inheritance: pure bookkeeping for org instances derived from shared templates.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Customization keys are the template field names in TEMPLATE_FIELDS; anything else is rejected
    - Instance columns mirror each field as custom_<field>
    - customization_level is 0-100 and computed over the cumulative set of customized fields
    - A sync conflict exists only for a field the organization customized AND whose
      instance value differs from the template value
    - override detaches an instance: it never syncs and reports SyncStatus.DETACHED

Design Decisions:
    - One field table drives import, customize, sync, preview and compare for every
      template type (one generic code path instead of a function per type)
    - Key presence marks a customization, so a field can be customized to an empty value
"""

from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta
from typing import Any

from hrms.core.domain_types import InheritanceType, SyncStatus, TemplateType
from hrms.core.errors import ValidationError
from hrms.core.tenancy import as_utc

TEMPLATE_FIELDS: dict[TemplateType, tuple[str, ...]] = {
    TemplateType.SKILL: ("name", "description", "category", "proficiency_levels"),
    TemplateType.JOB_ROLE: (
        "title", "description", "responsibilities", "requirements", "skills",
    ),
    TemplateType.LEAVE_TYPE: (
        "name", "description", "max_days_per_year", "carry_over_days",
        "requires_approval", "is_paid",
    ),
    TemplateType.CAREER_PATH: (
        "name", "description", "from_role", "to_role",
        "typical_duration_months", "milestones",
    ),
    TemplateType.TRAINING_PROGRAM: (
        "name", "description", "delivery_method", "duration_hours", "skills_covered",
    ),
    TemplateType.PERFORMANCE_REVIEW: (
        "name", "description", "evaluation_criteria", "rating_scale", "frequency",
    ),
    TemplateType.BENEFIT_PACKAGE: (
        "name", "description", "benefits_included", "eligibility_criteria",
        "enrollment_process",
    ),
    TemplateType.COMPLIANCE_CHECKLIST: (
        "name", "description", "checklist_items", "compliance_frequency",
        "regulatory_framework",
    ),
    TemplateType.ONBOARDING_WORKFLOW: (
        "name", "description", "workflow_steps", "timeline_days", "required_documents",
    ),
    TemplateType.POLICY_DOCUMENT: (
        "title", "description", "content", "policy_category", "approval_process",
    ),
    TemplateType.COMPENSATION_BAND: (
        "name", "description", "salary_range", "grade_levels", "progression_criteria",
    ),
    TemplateType.REPORTING_STRUCTURE: (
        "name", "description", "hierarchy_levels", "reporting_relationships",
    ),
}

# Field used as the human-readable label of a template/instance
DISPLAY_FIELD: dict[TemplateType, str] = {
    template_type: (
        "title" if template_type in (TemplateType.JOB_ROLE, TemplateType.POLICY_DOCUMENT)
        else "name"
    )
    for template_type in TemplateType
}

CUSTOMIZATION_BUCKETS: tuple[str, ...] = ("none", "low", "medium", "high", "complete")


def instance_column(field: str) -> str:
    return f"custom_{field}"


def validate_customizations(
    template_type: TemplateType, customizations: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Reject keys that are not customizable fields of this template type."""
    allowed = TEMPLATE_FIELDS[template_type]
    for key in customizations or {}:
        if key not in allowed:
            raise ValidationError(
                f"'{key}' is not a customizable field of {template_type.value} templates",
                key,
            )
    return dict(customizations or {})


def calculate_customization_level(
    template_type: TemplateType, customized_fields: Iterable[str],
) -> int:
    fields = TEMPLATE_FIELDS[template_type]
    customized = {f for f in customized_fields if f in fields}
    if not customized:
        return 0
    return min(round(len(customized) / len(fields) * 100), 100)


def inheritance_type_for(level: int, override: bool = False) -> InheritanceType:
    if override:
        return InheritanceType.OVERRIDE
    if level > 0:
        return InheritanceType.PARTIAL
    return InheritanceType.FULL


def customization_label(level: int) -> str:
    if level == 0:
        return "None"
    if level <= 25:
        return "Low"
    if level <= 50:
        return "Medium"
    if level <= 75:
        return "High"
    return "Complete"


def _bucket(level: int) -> str:
    return customization_label(level).lower()


def is_fully_customized(inheritance_type: InheritanceType, level: int) -> bool:
    return inheritance_type == InheritanceType.OVERRIDE or level >= 75


def build_instance_values(
    template_type: TemplateType,
    template_values: Mapping[str, Any],
    customizations: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Per-field value of an instance: the customization if given, else the template value."""
    customizations = customizations or {}
    return {
        field: customizations[field] if field in customizations else template_values.get(field)
        for field in TEMPLATE_FIELDS[template_type]
    }


def select_sync_fields(
    template_type: TemplateType,
    requested: Iterable[str] | None,
    customized: Iterable[str],
) -> list[str]:
    """Fields a sync will touch: the requested ones, or every non-customized field."""
    fields = TEMPLATE_FIELDS[template_type]
    requested = list(requested or [])
    if not requested:
        customized_set = set(customized)
        return [f for f in fields if f not in customized_set]
    for field in requested:
        if field not in fields:
            raise ValidationError(
                f"'{field}' is not a field of {template_type.value} templates", field,
            )
    return requested


def detect_sync_conflicts(
    fields: Iterable[str],
    customized: Iterable[str],
    instance_values: Mapping[str, Any],
    template_values: Mapping[str, Any],
) -> list[dict[str, Any]]:
    customized_set = set(customized)
    conflicts = []
    for field in fields:
        if field not in customized_set:
            continue
        if instance_values.get(field) != template_values.get(field):
            conflicts.append({
                "field": field,
                "instance_value": instance_values.get(field),
                "template_value": template_values.get(field),
            })
    return conflicts


def compute_sync_status(
    inheritance_type: InheritanceType,
    sync_conflicts: list | None,
    instance_version: str | None,
    template_version: str | None,
) -> SyncStatus:
    if inheritance_type == InheritanceType.OVERRIDE:
        return SyncStatus.DETACHED
    if sync_conflicts:
        return SyncStatus.CONFLICTED
    if instance_version != template_version:
        return SyncStatus.OUTDATED
    return SyncStatus.IN_SYNC


def has_recent_sync(last_sync: datetime | None, now: datetime, days: int = 7) -> bool:
    last = as_utc(last_sync)
    return last is not None and now - last <= timedelta(days=days)


def is_outdated(
    auto_sync_enabled: bool,
    inheritance_type: InheritanceType,
    last_sync: datetime | None,
    now: datetime,
    stale_after_days: int,
    instance_version: str | None = None,
    template_version: str | None = None,
) -> bool:
    """Auto-synced, attached instances that are stale or behind the template version."""
    if not auto_sync_enabled or inheritance_type == InheritanceType.OVERRIDE:
        return False
    if template_version is not None and instance_version != template_version:
        return True
    return not has_recent_sync(last_sync, now, stale_after_days)


def bump_version(version: str | None) -> str:
    """'1.4' -> '1.5'; unparsable versions get a '.1' suffix."""
    if not version:
        return "1.0"
    head, _, tail = version.rpartition(".")
    if tail.isdigit():
        bumped = str(int(tail) + 1)
        return f"{head}.{bumped}" if head else bumped
    return f"{version}.1"


def inheritance_status(
    *,
    inheritance_type: InheritanceType,
    customization_level: int,
    auto_sync_enabled: bool,
    last_template_sync: datetime | None,
    sync_conflicts: list | None,
    instance_version: str | None,
    template_version: str | None,
    now: datetime,
) -> dict[str, Any]:
    status = compute_sync_status(
        inheritance_type, sync_conflicts, instance_version, template_version,
    )
    return {
        "inheritance_type": inheritance_type.value,
        "customization_level": customization_label(customization_level),
        "customization_percentage": customization_level,
        "auto_sync_enabled": auto_sync_enabled,
        "last_sync": as_utc(last_template_sync).isoformat() if last_template_sync else None,
        "recently_synced": has_recent_sync(last_template_sync, now),
        "has_conflicts": bool(sync_conflicts),
        "can_auto_sync": auto_sync_enabled and inheritance_type != InheritanceType.OVERRIDE,
        "is_fully_customized": is_fully_customized(inheritance_type, customization_level),
        "instance_version": instance_version,
        "template_version": template_version,
        "sync_status": status.value,
    }


def summarize_inheritances(records: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Aggregate inheritance rows of one organization. Pure, no IO.

    Each record carries template_type, inheritance_type, customization_level
    and auto_sync_enabled.
    """
    by_template_type = {t.value: 0 for t in TemplateType}
    by_inheritance_type = {t.value: 0 for t in InheritanceType}
    buckets = {b: 0 for b in CUSTOMIZATION_BUCKETS}
    total = 0
    level_sum = 0
    auto_sync = 0

    for record in records:
        total += 1
        level = int(record.get("customization_level") or 0)
        level_sum += level
        by_template_type[str(record["template_type"])] += 1
        by_inheritance_type[str(record["inheritance_type"])] += 1
        buckets[_bucket(level)] += 1
        if record.get("auto_sync_enabled"):
            auto_sync += 1

    return {
        "total_inheritances": total,
        "by_template_type": by_template_type,
        "by_inheritance_type": by_inheritance_type,
        "customization_levels": buckets,
        "average_customization": round(level_sum / total) if total else 0,
        "auto_sync_enabled": auto_sync,
    }


def compare_templates(
    template_type: TemplateType, templates: list[Mapping[str, Any]],
) -> dict[str, Any]:
    """Side-by-side field values; a field differs when any two templates disagree."""
    fields = TEMPLATE_FIELDS[template_type]
    comparison: dict[str, list[dict[str, Any]]] = {}
    differing: list[str] = []
    for field in fields:
        values = [{"template_id": str(t["id"]), "value": t.get(field)} for t in templates]
        comparison[field] = values
        distinct = []
        for entry in values:
            if entry["value"] not in distinct:
                distinct.append(entry["value"])
        if len(distinct) > 1:
            differing.append(field)
    return {
        "template_type": template_type.value,
        "template_ids": [str(t["id"]) for t in templates],
        "fields": comparison,
        "differing_fields": differing,
    }
