"""AssessmentQuestion ORM: one question of an assessment.

Invariants:
    - points > 0
    - options required for single_choice / multiple_choice; correct_answer among them
    - correct_answer NULL means the question is evaluated manually
"""

import uuid
from typing import Any

from sqlalchemy import Float, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hrms.db.base import Base, TimestampMixin


class AssessmentQuestion(TimestampMixin, Base):
    __tablename__ = "assessment_questions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    assessment_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("assessments.id"), nullable=False, index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    question_type: Mapped[str] = mapped_column(String(20), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    options: Mapped[list | None] = mapped_column(JSON, nullable=True)
    correct_answer: Mapped[Any] = mapped_column(JSON, nullable=True)
    points: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)

    assessment: Mapped["Assessment"] = relationship(
        "Assessment", back_populates="questions",
    )
