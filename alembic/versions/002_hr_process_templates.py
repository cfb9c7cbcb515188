"""HR process templates: performance reviews, benefits, compliance, onboarding,
policies, compensation bands and reporting structures, each with its per-organization
instance table.

Revision ID: 002_hr_process_templates
Revises: 001_initial_schema
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "002_hr_process_templates"
down_revision: Union[str, None] = "001_initial_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# (catalog table, instance table, catalog columns, instance columns)
_KINDS: list[tuple[str, str, list, list]] = [
    (
        "performance_review_templates", "organization_performance_reviews",
        [
            sa.Column("name", sa.String(200), nullable=False),
            sa.Column("evaluation_criteria", sa.JSON, nullable=False),
            sa.Column("rating_scale", sa.JSON, nullable=False),
            sa.Column("frequency", sa.String(50), nullable=True),
        ],
        [
            sa.Column("custom_name", sa.String(200), nullable=True),
            sa.Column("custom_evaluation_criteria", sa.JSON, nullable=True),
            sa.Column("custom_rating_scale", sa.JSON, nullable=True),
            sa.Column("custom_frequency", sa.String(50), nullable=True),
        ],
    ),
    (
        "benefit_package_templates", "organization_benefit_packages",
        [
            sa.Column("name", sa.String(200), nullable=False),
            sa.Column("benefits_included", sa.JSON, nullable=False),
            sa.Column("eligibility_criteria", sa.JSON, nullable=False),
            sa.Column("enrollment_process", sa.Text, nullable=True),
        ],
        [
            sa.Column("custom_name", sa.String(200), nullable=True),
            sa.Column("custom_benefits_included", sa.JSON, nullable=True),
            sa.Column("custom_eligibility_criteria", sa.JSON, nullable=True),
            sa.Column("custom_enrollment_process", sa.Text, nullable=True),
        ],
    ),
    (
        "compliance_checklist_templates", "organization_compliance_checklists",
        [
            sa.Column("name", sa.String(200), nullable=False),
            sa.Column("checklist_items", sa.JSON, nullable=False),
            sa.Column("compliance_frequency", sa.String(50), nullable=True),
            sa.Column("regulatory_framework", sa.String(200), nullable=True),
        ],
        [
            sa.Column("custom_name", sa.String(200), nullable=True),
            sa.Column("custom_checklist_items", sa.JSON, nullable=True),
            sa.Column("custom_compliance_frequency", sa.String(50), nullable=True),
            sa.Column("custom_regulatory_framework", sa.String(200), nullable=True),
        ],
    ),
    (
        "onboarding_workflow_templates", "organization_onboarding_workflows",
        [
            sa.Column("name", sa.String(200), nullable=False),
            sa.Column("workflow_steps", sa.JSON, nullable=False),
            sa.Column("timeline_days", sa.Integer, nullable=True),
            sa.Column("required_documents", sa.JSON, nullable=False),
        ],
        [
            sa.Column("custom_name", sa.String(200), nullable=True),
            sa.Column("custom_workflow_steps", sa.JSON, nullable=True),
            sa.Column("custom_timeline_days", sa.Integer, nullable=True),
            sa.Column("custom_required_documents", sa.JSON, nullable=True),
        ],
    ),
    (
        "policy_document_templates", "organization_policy_documents",
        [
            sa.Column("title", sa.String(200), nullable=False),
            sa.Column("content", sa.Text, nullable=True),
            sa.Column("policy_category", sa.String(100), nullable=True),
            sa.Column("approval_process", sa.Text, nullable=True),
        ],
        [
            sa.Column("custom_title", sa.String(200), nullable=True),
            sa.Column("custom_content", sa.Text, nullable=True),
            sa.Column("custom_policy_category", sa.String(100), nullable=True),
            sa.Column("custom_approval_process", sa.Text, nullable=True),
        ],
    ),
    (
        "compensation_band_templates", "organization_compensation_bands",
        [
            sa.Column("name", sa.String(200), nullable=False),
            sa.Column("salary_range", sa.JSON, nullable=False),
            sa.Column("grade_levels", sa.JSON, nullable=False),
            sa.Column("progression_criteria", sa.JSON, nullable=False),
        ],
        [
            sa.Column("custom_name", sa.String(200), nullable=True),
            sa.Column("custom_salary_range", sa.JSON, nullable=True),
            sa.Column("custom_grade_levels", sa.JSON, nullable=True),
            sa.Column("custom_progression_criteria", sa.JSON, nullable=True),
        ],
    ),
    (
        "reporting_structure_templates", "organization_reporting_structures",
        [
            sa.Column("name", sa.String(200), nullable=False),
            sa.Column("hierarchy_levels", sa.JSON, nullable=False),
            sa.Column("reporting_relationships", sa.JSON, nullable=False),
        ],
        [
            sa.Column("custom_name", sa.String(200), nullable=True),
            sa.Column("custom_hierarchy_levels", sa.JSON, nullable=True),
            sa.Column("custom_reporting_relationships", sa.JSON, nullable=True),
        ],
    ),
]


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
    for catalog_table, instance_table, catalog_columns, instance_columns in _KINDS:
        op.create_table(catalog_table, *_catalog_columns(), *catalog_columns)
        plural = instance_table.removeprefix("organization_")
        op.create_table(
            instance_table,
            *_instance_columns(catalog_table),
            *instance_columns,
            sa.UniqueConstraint(
                "organization_id", "template_id", name=f"uq_org_{plural}_template",
            ),
        )


def downgrade() -> None:
    for catalog_table, instance_table, _, _ in reversed(_KINDS):
        op.drop_table(instance_table)
        op.drop_table(catalog_table)
