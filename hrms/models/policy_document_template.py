"""PolicyDocumentTemplate ORM: shared catalog entry for a company policy text."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hrms.db.base import Base
from hrms.models.template_mixins import TemplateCatalogMixin


class PolicyDocumentTemplate(TemplateCatalogMixin, Base):
    __tablename__ = "policy_document_templates"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    policy_category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    approval_process: Mapped[str | None] = mapped_column(Text, nullable=True)
