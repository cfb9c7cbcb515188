"""Assessment Schemas: assessments with questions, attempts and evaluations.

Invariants:
    - Question points > 0
    - Choice questions carry at least two options; a correct answer must be among them
      (every element, for multiple_choice)
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from hrms.core.assessment_scoring import CHOICE_TYPES
from hrms.core.domain_types import AssessmentType, DifficultyLevel, QuestionType
from hrms.schemas.common import ORMModel, Pagination


class QuestionCreate(BaseModel):
    question_type: QuestionType
    text: str = Field(min_length=1, max_length=5000)
    options: list[str] | None = None
    correct_answer: Any = None
    points: float = Field(1.0, gt=0)

    @model_validator(mode="after")
    def validate_choices(self):
        if self.question_type in CHOICE_TYPES:
            if not self.options or len(self.options) < 2:
                raise ValueError("choice questions require at least two options")
            if self.correct_answer is not None:
                expected = (
                    self.correct_answer
                    if isinstance(self.correct_answer, list) else [self.correct_answer]
                )
                if any(str(a) not in self.options for a in expected):
                    raise ValueError("correct_answer must be one of the options")
        return self


class AssessmentCreate(BaseModel):
    """organization_id defaults to the caller's organization."""
    organization_id: UUID | None = None
    title: str = Field(min_length=2, max_length=200)
    description: str | None = None
    assessment_type: AssessmentType = AssessmentType.SKILLS
    difficulty_level: DifficultyLevel = DifficultyLevel.INTERMEDIATE
    time_limit_minutes: int | None = Field(None, ge=1, le=600)
    passing_score: float = Field(70.0, ge=0, le=100)
    questions: list[QuestionCreate] = Field(min_length=1, max_length=200)


class QuestionResponse(ORMModel):
    id: UUID
    position: int
    question_type: str
    text: str
    options: list | None
    correct_answer: Any = None
    points: float


class AssessmentResponse(ORMModel):
    id: UUID
    tenant_id: UUID
    organization_id: UUID
    title: str
    description: str | None
    assessment_type: str
    difficulty_level: str
    time_limit_minutes: int | None
    passing_score: float
    is_active: bool
    created_at: datetime
    questions: list[QuestionResponse] = []


class AssessmentList(BaseModel):
    assessments: list[AssessmentResponse]
    pagination: Pagination


class AnswerSubmit(BaseModel):
    question_id: UUID
    answer: Any = None


class AttemptSubmit(BaseModel):
    answers: list[AnswerSubmit] = Field(max_length=200)


class AnswerEvaluate(BaseModel):
    score: float
    feedback: str | None = Field(None, max_length=5000)


class AnswerResponse(ORMModel):
    id: UUID
    question_id: UUID
    answer: Any = None
    is_correct: bool | None
    score: float | None
    feedback: str | None
    evaluated_by: UUID | None
    evaluated_at: datetime | None


class AttemptResponse(ORMModel):
    id: UUID
    assessment_id: UUID
    candidate_user_id: UUID
    status: str
    started_at: datetime
    completed_at: datetime | None
    total_score: float | None
    max_score: float | None
    percentage: float | None
    passed: bool | None
    answers: list[AnswerResponse] = []
