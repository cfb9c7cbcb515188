"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - All valid states encoded as Enums: no raw string matching in services
    - Enum values are the exact strings stored in the database

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum


# ─── People ──────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Access roles, lowest to highest rank."""
    EMPLOYEE = "employee"
    MANAGER = "manager"
    HR = "hr"
    ADMIN = "admin"
    SYSADMIN = "sysadmin"


ROLE_RANK: dict[UserRole, int] = {
    UserRole.EMPLOYEE: 1,
    UserRole.MANAGER: 2,
    UserRole.HR: 3,
    UserRole.ADMIN: 4,
    UserRole.SYSADMIN: 5,
}


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    TERMINATED = "terminated"
    ON_LEAVE = "on_leave"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    TERMINATED = "terminated"


# ─── Leave ───────────────────────────────────────────────────────

class LeaveType(str, Enum):
    """Vacation and sick leave draw from balances; unpaid and personal do not."""
    VACATION = "vacation"
    SICK = "sick"
    UNPAID = "unpaid"
    PERSONAL = "personal"


class LeaveStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


# ─── Tenancy ─────────────────────────────────────────────────────

class SubscriptionPlan(str, Enum):
    TRIAL = "trial"
    BASIC = "basic"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"
    CUSTOM = "custom"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    TRIAL = "trial"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"
    PAST_DUE = "past_due"


class OrganizationSize(str, Enum):
    STARTUP = "startup"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    ENTERPRISE = "enterprise"


# ─── Template inheritance ────────────────────────────────────────

class TemplateType(str, Enum):
    """Shared catalogs an organization can import and customize."""
    SKILL = "skill"
    JOB_ROLE = "job_role"
    LEAVE_TYPE = "leave_type"
    CAREER_PATH = "career_path"
    TRAINING_PROGRAM = "training_program"
    PERFORMANCE_REVIEW = "performance_review"
    BENEFIT_PACKAGE = "benefit_package"
    COMPLIANCE_CHECKLIST = "compliance_checklist"
    ONBOARDING_WORKFLOW = "onboarding_workflow"
    POLICY_DOCUMENT = "policy_document"
    COMPENSATION_BAND = "compensation_band"
    REPORTING_STRUCTURE = "reporting_structure"


class InheritanceType(str, Enum):
    """full: untouched copy; partial: some fields customized; override: detached."""
    FULL = "full"
    PARTIAL = "partial"
    OVERRIDE = "override"


class SyncStatus(str, Enum):
    IN_SYNC = "in_sync"
    OUTDATED = "outdated"
    CONFLICTED = "conflicted"
    DETACHED = "detached"


# ─── Assessments ─────────────────────────────────────────────────

class AssessmentType(str, Enum):
    TECHNICAL = "technical"
    BEHAVIORAL = "behavioral"
    COGNITIVE = "cognitive"
    PERSONALITY = "personality"
    SKILLS = "skills"
    CUSTOM = "custom"


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class QuestionType(str, Enum):
    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    RATING = "rating"
    TEXT = "text"
    CODE = "code"
    ESSAY = "essay"
    FILE_UPLOAD = "file_upload"


class AttemptStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    EXPIRED = "expired"


# ─── i18n ────────────────────────────────────────────────────────

class Locale(str, Enum):
    """Locales with a full message catalog in core/language_strings.py."""
    EN = "en"
    IT = "it"
