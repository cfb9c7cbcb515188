"""OrganizationPolicyDocument ORM: an organization's copy of a PolicyDocumentTemplate."""

import uuid

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateInstanceMixin


class OrganizationPolicyDocument(TemplateInstanceMixin, Base):
    __tablename__ = "organization_policy_documents"
    __table_args__ = (
        UniqueConstraint(
            "organization_id", "template_id", name="uq_org_policy_documents_template",
        ),
    )

    template_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("policy_document_templates.id"), nullable=False,
    )
    custom_title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    custom_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    custom_policy_category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    custom_approval_process: Mapped[str | None] = mapped_column(Text, nullable=True)
