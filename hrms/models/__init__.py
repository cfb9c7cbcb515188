"""ORM Models: SQLAlchemy declarative models for all HRMS entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Tenant is the root of ownership; every tenant-scoped row carries tenant_id
      directly or through its organization

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references and Base.metadata is complete before create_all / Alembic autogenerate
"""

from hrms.models.tenant import Tenant  # noqa: F401
from hrms.models.organization import Organization  # noqa: F401
from hrms.models.user import User  # noqa: F401
from hrms.models.employee import Employee  # noqa: F401
from hrms.models.leave_request import LeaveRequest  # noqa: F401
from hrms.models.skill_template import SkillTemplate  # noqa: F401
from hrms.models.job_role_template import JobRoleTemplate  # noqa: F401
from hrms.models.leave_type_template import LeaveTypeTemplate  # noqa: F401
from hrms.models.career_path_template import CareerPathTemplate  # noqa: F401
from hrms.models.training_program_template import TrainingProgramTemplate  # noqa: F401
from hrms.models.performance_review_template import PerformanceReviewTemplate  # noqa: F401
from hrms.models.benefit_package_template import BenefitPackageTemplate  # noqa: F401
from hrms.models.compliance_checklist_template import ComplianceChecklistTemplate  # noqa: F401
from hrms.models.onboarding_workflow_template import OnboardingWorkflowTemplate  # noqa: F401
from hrms.models.policy_document_template import PolicyDocumentTemplate  # noqa: F401
from hrms.models.compensation_band_template import CompensationBandTemplate  # noqa: F401
from hrms.models.reporting_structure_template import ReportingStructureTemplate  # noqa: F401
from hrms.models.organization_skill import OrganizationSkill  # noqa: F401
from hrms.models.organization_job_role import OrganizationJobRole  # noqa: F401
from hrms.models.organization_leave_type import OrganizationLeaveType  # noqa: F401
from hrms.models.organization_career_path import OrganizationCareerPath  # noqa: F401
from hrms.models.organization_training_program import OrganizationTrainingProgram  # noqa: F401
from hrms.models.organization_performance_review import OrganizationPerformanceReview  # noqa: F401
from hrms.models.organization_benefit_package import OrganizationBenefitPackage  # noqa: F401
from hrms.models.organization_compliance_checklist import OrganizationComplianceChecklist  # noqa: F401
from hrms.models.organization_onboarding_workflow import OrganizationOnboardingWorkflow  # noqa: F401
from hrms.models.organization_policy_document import OrganizationPolicyDocument  # noqa: F401
from hrms.models.organization_compensation_band import OrganizationCompensationBand  # noqa: F401
from hrms.models.organization_reporting_structure import OrganizationReportingStructure  # noqa: F401
from hrms.models.template_inheritance import TemplateInheritance  # noqa: F401
from hrms.models.assessment import Assessment  # noqa: F401
from hrms.models.assessment_question import AssessmentQuestion  # noqa: F401
from hrms.models.assessment_attempt import AssessmentAttempt  # noqa: F401
from hrms.models.assessment_answer import AssessmentAnswer  # noqa: F401
