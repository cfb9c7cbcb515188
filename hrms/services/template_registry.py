"""Template Registry: binds each TemplateType to its catalog and instance ORM classes.

Invariants:
    - Every TemplateType has exactly one binding
    - Catalog attribute names equal TEMPLATE_FIELDS names; instance attributes are custom_<field>
    - Values entering a catalog template or an instance pass validate_values first:
      known keys (core), then typed per field (schemas/template_fields.py)
"""

from dataclasses import dataclass
from typing import Any

import pydantic

from hrms.core.domain_types import TemplateType
from hrms.core.errors import ValidationError
from hrms.core.template_inheritance import (
    DISPLAY_FIELD, TEMPLATE_FIELDS, instance_column, validate_customizations,
)
from hrms.models.benefit_package_template import BenefitPackageTemplate
from hrms.models.career_path_template import CareerPathTemplate
from hrms.models.compensation_band_template import CompensationBandTemplate
from hrms.models.compliance_checklist_template import ComplianceChecklistTemplate
from hrms.models.job_role_template import JobRoleTemplate
from hrms.models.leave_type_template import LeaveTypeTemplate
from hrms.models.onboarding_workflow_template import OnboardingWorkflowTemplate
from hrms.models.organization_benefit_package import OrganizationBenefitPackage
from hrms.models.organization_career_path import OrganizationCareerPath
from hrms.models.organization_compensation_band import OrganizationCompensationBand
from hrms.models.organization_compliance_checklist import OrganizationComplianceChecklist
from hrms.models.organization_job_role import OrganizationJobRole
from hrms.models.organization_leave_type import OrganizationLeaveType
from hrms.models.organization_onboarding_workflow import OrganizationOnboardingWorkflow
from hrms.models.organization_performance_review import OrganizationPerformanceReview
from hrms.models.organization_policy_document import OrganizationPolicyDocument
from hrms.models.organization_reporting_structure import OrganizationReportingStructure
from hrms.models.organization_skill import OrganizationSkill
from hrms.models.organization_training_program import OrganizationTrainingProgram
from hrms.models.performance_review_template import PerformanceReviewTemplate
from hrms.models.policy_document_template import PolicyDocumentTemplate
from hrms.models.reporting_structure_template import ReportingStructureTemplate
from hrms.models.skill_template import SkillTemplate
from hrms.models.training_program_template import TrainingProgramTemplate
from hrms.schemas.template_fields import FIELD_MODELS


@dataclass(frozen=True)
class TemplateBinding:
    template_type: TemplateType
    template_model: type
    instance_model: type

    @property
    def fields(self) -> tuple[str, ...]:
        return TEMPLATE_FIELDS[self.template_type]

    @property
    def display_field(self) -> str:
        return DISPLAY_FIELD[self.template_type]


REGISTRY: dict[TemplateType, TemplateBinding] = {
    TemplateType.SKILL: TemplateBinding(
        TemplateType.SKILL, SkillTemplate, OrganizationSkill,
    ),
    TemplateType.JOB_ROLE: TemplateBinding(
        TemplateType.JOB_ROLE, JobRoleTemplate, OrganizationJobRole,
    ),
    TemplateType.LEAVE_TYPE: TemplateBinding(
        TemplateType.LEAVE_TYPE, LeaveTypeTemplate, OrganizationLeaveType,
    ),
    TemplateType.CAREER_PATH: TemplateBinding(
        TemplateType.CAREER_PATH, CareerPathTemplate, OrganizationCareerPath,
    ),
    TemplateType.TRAINING_PROGRAM: TemplateBinding(
        TemplateType.TRAINING_PROGRAM, TrainingProgramTemplate, OrganizationTrainingProgram,
    ),
    TemplateType.PERFORMANCE_REVIEW: TemplateBinding(
        TemplateType.PERFORMANCE_REVIEW, PerformanceReviewTemplate, OrganizationPerformanceReview,
    ),
    TemplateType.BENEFIT_PACKAGE: TemplateBinding(
        TemplateType.BENEFIT_PACKAGE, BenefitPackageTemplate, OrganizationBenefitPackage,
    ),
    TemplateType.COMPLIANCE_CHECKLIST: TemplateBinding(
        TemplateType.COMPLIANCE_CHECKLIST, ComplianceChecklistTemplate,
        OrganizationComplianceChecklist,
    ),
    TemplateType.ONBOARDING_WORKFLOW: TemplateBinding(
        TemplateType.ONBOARDING_WORKFLOW, OnboardingWorkflowTemplate,
        OrganizationOnboardingWorkflow,
    ),
    TemplateType.POLICY_DOCUMENT: TemplateBinding(
        TemplateType.POLICY_DOCUMENT, PolicyDocumentTemplate, OrganizationPolicyDocument,
    ),
    TemplateType.COMPENSATION_BAND: TemplateBinding(
        TemplateType.COMPENSATION_BAND, CompensationBandTemplate, OrganizationCompensationBand,
    ),
    TemplateType.REPORTING_STRUCTURE: TemplateBinding(
        TemplateType.REPORTING_STRUCTURE, ReportingStructureTemplate,
        OrganizationReportingStructure,
    ),
}


def binding_for(template_type: TemplateType) -> TemplateBinding:
    return REGISTRY[template_type]


def validate_values(
    template_type: TemplateType, values: dict[str, Any] | None,
) -> dict[str, Any]:
    """Known keys with values coerced to their column types; only the keys given."""
    values = validate_customizations(template_type, values)
    try:
        typed = FIELD_MODELS[template_type].model_validate(values)
    except pydantic.ValidationError as exc:
        error = exc.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else "values"
        raise ValidationError(f"{field}: {error['msg']}", field) from None
    return typed.model_dump(exclude_unset=True)


def template_values(template_type: TemplateType, template) -> dict[str, Any]:
    return {field: getattr(template, field) for field in TEMPLATE_FIELDS[template_type]}


def instance_values(template_type: TemplateType, instance) -> dict[str, Any]:
    return {
        field: getattr(instance, instance_column(field))
        for field in TEMPLATE_FIELDS[template_type]
    }


def apply_instance_values(instance, values: dict[str, Any]) -> None:
    for field, value in values.items():
        setattr(instance, instance_column(field), value)


def serialize_template(template_type: TemplateType, template) -> dict[str, Any]:
    return {
        "id": template.id,
        "template_type": template_type.value,
        "name": getattr(template, DISPLAY_FIELD[template_type]),
        "category": template.category,
        "version": template.version,
        "is_active": template.is_active,
        "values": template_values(template_type, template),
        "created_at": template.created_at,
        "updated_at": template.updated_at,
    }


def serialize_instance(template_type: TemplateType, instance) -> dict[str, Any]:
    values = instance_values(template_type, instance)
    return {
        "id": instance.id,
        "template_type": template_type.value,
        "organization_id": instance.organization_id,
        "template_id": instance.template_id,
        "name": values.get(DISPLAY_FIELD[template_type]),
        "values": values,
        "inheritance_type": instance.inheritance_type,
        "customization_level": instance.customization_level,
        "auto_sync_enabled": instance.auto_sync_enabled,
        "template_version": instance.template_version,
        "last_template_sync": instance.last_template_sync,
        "is_active": instance.is_active,
    }
