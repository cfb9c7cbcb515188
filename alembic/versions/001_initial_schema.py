"""Initial schema: tenancy, people, leave, template catalogs and instances, assessments.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _catalog_columns() -> list[sa.Column]:
    return [
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("category", sa.String(100), nullable=True, index=True),
        sa.Column("version", sa.String(20), nullable=False, server_default="1.0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    ]


def _instance_columns(catalog_table: str) -> list[sa.Column]:
    return [
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("organization_id", UUID(as_uuid=True), sa.ForeignKey("organizations.id"), nullable=False, index=True),
        sa.Column("template_id", UUID(as_uuid=True), sa.ForeignKey(f"{catalog_table}.id"), nullable=False),
        sa.Column("custom_description", sa.Text, nullable=True),
        sa.Column("inheritance_type", sa.String(20), nullable=False, server_default="full"),
        sa.Column("customization_level", sa.Integer, nullable=False, server_default="0"),
        sa.Column("auto_sync_enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("template_version", sa.String(20), nullable=True),
        sa.Column("last_template_sync", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    ]


def upgrade() -> None:
    # --- Tenancy ---
    op.create_table(
        "tenants",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False, unique=True),
        sa.Column("domain", sa.String(255), nullable=True),
        sa.Column("contact_email", sa.String(255), nullable=True),
        sa.Column("subscription_plan", sa.String(20), nullable=False, server_default="trial"),
        sa.Column("subscription_status", sa.String(20), nullable=False, server_default="trial"),
        sa.Column("trial_ends_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_organizations", sa.Integer, nullable=False, server_default="5"),
        sa.Column("max_users_per_org", sa.Integer, nullable=False, server_default="100"),
        sa.Column("timezone", sa.String(50), nullable=False, server_default="UTC"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("features", sa.JSON, nullable=False),
        sa.Column("settings", sa.JSON, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "organizations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("tenant_id", UUID(as_uuid=True), sa.ForeignKey("tenants.id"), nullable=False, index=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("domain", sa.String(255), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("industry", sa.String(100), nullable=True),
        sa.Column("size", sa.String(20), nullable=False, server_default="small"),
        sa.Column("timezone", sa.String(50), nullable=True),
        sa.Column("currency", sa.String(3), nullable=True),
        sa.Column("max_employees", sa.Integer, nullable=False, server_default="100"),
        sa.Column("features", sa.JSON, nullable=False),
        sa.Column("settings", sa.JSON, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "slug", name="uq_organizations_tenant_slug"),
    )

    # --- People ---
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("tenant_id", UUID(as_uuid=True), sa.ForeignKey("tenants.id"), nullable=True, index=True),
        sa.Column("organization_id", UUID(as_uuid=True), sa.ForeignKey("organizations.id"), nullable=True, index=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="employee"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("locale", sa.String(10), nullable=False, server_default="en"),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "employees",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("tenant_id", UUID(as_uuid=True), sa.ForeignKey("tenants.id"), nullable=False, index=True),
        sa.Column("organization_id", UUID(as_uuid=True), sa.ForeignKey("organizations.id"), nullable=False, index=True),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("employee_number", sa.String(20), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("position", sa.String(100), nullable=True),
        sa.Column("department", sa.String(100), nullable=True, index=True),
        sa.Column("hire_date", sa.Date, nullable=False),
        sa.Column("manager_id", UUID(as_uuid=True), sa.ForeignKey("employees.id"), nullable=True, index=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("vacation_balance", sa.Numeric(6, 2), nullable=False, server_default="25"),
        sa.Column("sick_balance", sa.Numeric(6, 2), nullable=False, server_default="10"),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    # --- Leave ---
    op.create_table(
        "leave_requests",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("tenant_id", UUID(as_uuid=True), sa.ForeignKey("tenants.id"), nullable=False, index=True),
        sa.Column("organization_id", UUID(as_uuid=True), sa.ForeignKey("organizations.id"), nullable=False, index=True),
        sa.Column("employee_id", UUID(as_uuid=True), sa.ForeignKey("employees.id"), nullable=False, index=True),
        sa.Column("leave_type", sa.String(20), nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("days_requested", sa.Numeric(6, 2), nullable=False),
        sa.Column("reason", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_by", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.Text, nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    # --- Template catalogs ---
    op.create_table(
        "skill_templates",
        *_catalog_columns(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("proficiency_levels", sa.JSON, nullable=False),
    )
    op.create_table(
        "job_role_templates",
        *_catalog_columns(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("responsibilities", sa.JSON, nullable=False),
        sa.Column("requirements", sa.JSON, nullable=False),
        sa.Column("skills", sa.JSON, nullable=False),
    )
    op.create_table(
        "leave_type_templates",
        *_catalog_columns(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("max_days_per_year", sa.Integer, nullable=True),
        sa.Column("carry_over_days", sa.Integer, nullable=False, server_default="0"),
        sa.Column("requires_approval", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_paid", sa.Boolean, nullable=False, server_default=sa.true()),
    )
    op.create_table(
        "career_path_templates",
        *_catalog_columns(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("from_role", sa.String(200), nullable=True),
        sa.Column("to_role", sa.String(200), nullable=True),
        sa.Column("typical_duration_months", sa.Integer, nullable=True),
        sa.Column("milestones", sa.JSON, nullable=False),
    )
    op.create_table(
        "training_program_templates",
        *_catalog_columns(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("delivery_method", sa.String(50), nullable=True),
        sa.Column("duration_hours", sa.Float, nullable=True),
        sa.Column("skills_covered", sa.JSON, nullable=False),
    )

    # --- Organization instances ---
    op.create_table(
        "organization_skills",
        *_instance_columns("skill_templates"),
        sa.Column("custom_name", sa.String(200), nullable=True),
        sa.Column("custom_category", sa.String(100), nullable=True),
        sa.Column("custom_proficiency_levels", sa.JSON, nullable=True),
        sa.UniqueConstraint("organization_id", "template_id", name="uq_org_skills_template"),
    )
    op.create_table(
        "organization_job_roles",
        *_instance_columns("job_role_templates"),
        sa.Column("custom_title", sa.String(200), nullable=True),
        sa.Column("custom_responsibilities", sa.JSON, nullable=True),
        sa.Column("custom_requirements", sa.JSON, nullable=True),
        sa.Column("custom_skills", sa.JSON, nullable=True),
        sa.UniqueConstraint("organization_id", "template_id", name="uq_org_job_roles_template"),
    )
    op.create_table(
        "organization_leave_types",
        *_instance_columns("leave_type_templates"),
        sa.Column("custom_name", sa.String(200), nullable=True),
        sa.Column("custom_max_days_per_year", sa.Integer, nullable=True),
        sa.Column("custom_carry_over_days", sa.Integer, nullable=True),
        sa.Column("custom_requires_approval", sa.Boolean, nullable=True),
        sa.Column("custom_is_paid", sa.Boolean, nullable=True),
        sa.UniqueConstraint("organization_id", "template_id", name="uq_org_leave_types_template"),
    )
    op.create_table(
        "organization_career_paths",
        *_instance_columns("career_path_templates"),
        sa.Column("custom_name", sa.String(200), nullable=True),
        sa.Column("custom_from_role", sa.String(200), nullable=True),
        sa.Column("custom_to_role", sa.String(200), nullable=True),
        sa.Column("custom_typical_duration_months", sa.Integer, nullable=True),
        sa.Column("custom_milestones", sa.JSON, nullable=True),
        sa.UniqueConstraint("organization_id", "template_id", name="uq_org_career_paths_template"),
    )
    op.create_table(
        "organization_training_programs",
        *_instance_columns("training_program_templates"),
        sa.Column("custom_name", sa.String(200), nullable=True),
        sa.Column("custom_delivery_method", sa.String(50), nullable=True),
        sa.Column("custom_duration_hours", sa.Float, nullable=True),
        sa.Column("custom_skills_covered", sa.JSON, nullable=True),
        sa.UniqueConstraint("organization_id", "template_id", name="uq_org_training_programs_template"),
    )

    op.create_table(
        "template_inheritance",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("template_id", UUID(as_uuid=True), nullable=False),
        sa.Column("instance_id", UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("organization_id", UUID(as_uuid=True), sa.ForeignKey("organizations.id"), nullable=False, index=True),
        sa.Column("template_type", sa.String(30), nullable=False),
        sa.Column("inheritance_type", sa.String(20), nullable=False, server_default="full"),
        sa.Column("customization_level", sa.Integer, nullable=False, server_default="0"),
        sa.Column("auto_sync_enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("custom_fields", sa.JSON, nullable=False),
        sa.Column("last_template_sync", sa.DateTime(timezone=True), nullable=True),
        sa.Column("template_version", sa.String(20), nullable=True),
        sa.Column("sync_conflicts", sa.JSON, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint(
            "template_id", "instance_id", "organization_id", "template_type",
            name="uq_template_inheritance_link",
        ),
    )

    # --- Assessments ---
    op.create_table(
        "assessments",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("tenant_id", UUID(as_uuid=True), sa.ForeignKey("tenants.id"), nullable=False, index=True),
        sa.Column("organization_id", UUID(as_uuid=True), sa.ForeignKey("organizations.id"), nullable=False, index=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("assessment_type", sa.String(20), nullable=False, server_default="skills"),
        sa.Column("difficulty_level", sa.String(20), nullable=False, server_default="intermediate"),
        sa.Column("time_limit_minutes", sa.Integer, nullable=True),
        sa.Column("passing_score", sa.Float, nullable=False, server_default="70"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_by", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "assessment_questions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("assessment_id", UUID(as_uuid=True), sa.ForeignKey("assessments.id"), nullable=False, index=True),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        sa.Column("question_type", sa.String(20), nullable=False),
        sa.Column("text", sa.Text, nullable=False),
        sa.Column("options", sa.JSON, nullable=True),
        sa.Column("correct_answer", sa.JSON, nullable=True),
        sa.Column("points", sa.Float, nullable=False, server_default="1"),
        *_timestamps(),
    )
    op.create_table(
        "assessment_attempts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("assessment_id", UUID(as_uuid=True), sa.ForeignKey("assessments.id"), nullable=False, index=True),
        sa.Column("candidate_user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("tenant_id", UUID(as_uuid=True), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("organization_id", UUID(as_uuid=True), sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="in_progress"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_score", sa.Float, nullable=True),
        sa.Column("max_score", sa.Float, nullable=True),
        sa.Column("percentage", sa.Float, nullable=True),
        sa.Column("passed", sa.Boolean, nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "assessment_answers",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("attempt_id", UUID(as_uuid=True), sa.ForeignKey("assessment_attempts.id"), nullable=False, index=True),
        sa.Column("question_id", UUID(as_uuid=True), sa.ForeignKey("assessment_questions.id"), nullable=False),
        sa.Column("answer", sa.JSON, nullable=True),
        sa.Column("is_correct", sa.Boolean, nullable=True),
        sa.Column("score", sa.Float, nullable=True),
        sa.Column("feedback", sa.Text, nullable=True),
        sa.Column("evaluated_by", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("evaluated_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("attempt_id", "question_id", name="uq_assessment_answers_question"),
    )


def downgrade() -> None:
    for table in (
        "assessment_answers", "assessment_attempts", "assessment_questions", "assessments",
        "template_inheritance",
        "organization_training_programs", "organization_career_paths",
        "organization_leave_types", "organization_job_roles", "organization_skills",
        "training_program_templates", "career_path_templates", "leave_type_templates",
        "job_role_templates", "skill_templates",
        "leave_requests", "employees", "users", "organizations", "tenants",
    ):
        op.drop_table(table)
