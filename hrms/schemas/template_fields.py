"""Template Field Schemas: typed values of each template type's customizable fields.

Invariants:
    - One model per TemplateType, one attribute per TEMPLATE_FIELDS entry
    - Every attribute is optional as a key; columns that are NOT NULL reject an
      explicit null (display field, lists, flags, carry-over)
    - Unknown keys are rejected (extra="forbid")
    - A salary range never has min above max

Design Decisions:
    - Validated with model_dump(exclude_unset=True) so key presence still marks
      which fields a payload customizes
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from hrms.core.domain_types import TemplateType


class _TemplateFields(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: str | None = None


class SkillFields(_TemplateFields):
    name: str = Field(None, min_length=1, max_length=200)
    category: str | None = Field(None, max_length=100)
    proficiency_levels: list[str] = None


class JobRoleFields(_TemplateFields):
    title: str = Field(None, min_length=1, max_length=200)
    responsibilities: list[str] = None
    requirements: list[str] = None
    skills: list = None


class LeaveTypeFields(_TemplateFields):
    name: str = Field(None, min_length=1, max_length=200)
    max_days_per_year: int | None = Field(None, ge=0)
    carry_over_days: int = Field(None, ge=0)
    requires_approval: bool = None
    is_paid: bool = None


class CareerPathFields(_TemplateFields):
    name: str = Field(None, min_length=1, max_length=200)
    from_role: str | None = Field(None, max_length=200)
    to_role: str | None = Field(None, max_length=200)
    typical_duration_months: int | None = Field(None, ge=0)
    milestones: list = None


class TrainingProgramFields(_TemplateFields):
    name: str = Field(None, min_length=1, max_length=200)
    delivery_method: str | None = Field(None, max_length=50)
    duration_hours: float | None = Field(None, ge=0)
    skills_covered: list = None


class PerformanceReviewFields(_TemplateFields):
    name: str = Field(None, min_length=1, max_length=200)
    evaluation_criteria: list = None
    rating_scale: dict = None
    frequency: str | None = Field(None, max_length=50)


class BenefitPackageFields(_TemplateFields):
    name: str = Field(None, min_length=1, max_length=200)
    benefits_included: list = None
    eligibility_criteria: list = None
    enrollment_process: str | None = None


class ComplianceChecklistFields(_TemplateFields):
    name: str = Field(None, min_length=1, max_length=200)
    checklist_items: list = None
    compliance_frequency: str | None = Field(None, max_length=50)
    regulatory_framework: str | None = Field(None, max_length=200)


class OnboardingWorkflowFields(_TemplateFields):
    name: str = Field(None, min_length=1, max_length=200)
    workflow_steps: list = None
    timeline_days: int | None = Field(None, ge=0)
    required_documents: list[str] = None


class PolicyDocumentFields(_TemplateFields):
    title: str = Field(None, min_length=1, max_length=200)
    content: str | None = None
    policy_category: str | None = Field(None, max_length=100)
    approval_process: str | None = None


class SalaryRange(BaseModel):
    model_config = ConfigDict(extra="forbid")

    min: float = Field(ge=0)
    max: float = Field(ge=0)
    currency: str = Field("EUR", min_length=3, max_length=3)

    @model_validator(mode="after")
    def check_bounds(self) -> "SalaryRange":
        if self.min > self.max:
            raise ValueError("min must not exceed max")
        self.currency = self.currency.upper()
        return self


class CompensationBandFields(_TemplateFields):
    name: str = Field(None, min_length=1, max_length=200)
    salary_range: SalaryRange = None
    grade_levels: list = None
    progression_criteria: list = None


class ReportingStructureFields(_TemplateFields):
    name: str = Field(None, min_length=1, max_length=200)
    hierarchy_levels: list = None
    reporting_relationships: list = None


FIELD_MODELS: dict[TemplateType, type[_TemplateFields]] = {
    TemplateType.SKILL: SkillFields,
    TemplateType.JOB_ROLE: JobRoleFields,
    TemplateType.LEAVE_TYPE: LeaveTypeFields,
    TemplateType.CAREER_PATH: CareerPathFields,
    TemplateType.TRAINING_PROGRAM: TrainingProgramFields,
    TemplateType.PERFORMANCE_REVIEW: PerformanceReviewFields,
    TemplateType.BENEFIT_PACKAGE: BenefitPackageFields,
    TemplateType.COMPLIANCE_CHECKLIST: ComplianceChecklistFields,
    TemplateType.ONBOARDING_WORKFLOW: OnboardingWorkflowFields,
    TemplateType.POLICY_DOCUMENT: PolicyDocumentFields,
    TemplateType.COMPENSATION_BAND: CompensationBandFields,
    TemplateType.REPORTING_STRUCTURE: ReportingStructureFields,
}
