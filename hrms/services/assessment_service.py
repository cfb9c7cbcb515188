"""Assessment Service: assessments, candidate attempts, auto-scoring and manual evaluation.

Invariants:
    - One in_progress attempt per (assessment, candidate) (409 ATTEMPT_IN_PROGRESS)
    - Inactive assessments cannot be started
    - Submitting past the time limit persists status=expired, then raises ATTEMPT_EXPIRED
    - Answers may only reference questions of the attempt's assessment
    - Candidates never evaluate their own answers; scores stay within [0, points]
    - Totals always recomputed through core/assessment_scoring.py summarize_attempt

Design Decisions:
    - correct_answer is withheld from callers without assessment write access, so
      candidates can fetch the questions they are answering
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.core.assessment_scoring import (
    attempt_expired, needs_manual_evaluation, score_answer, summarize_attempt,
)
from hrms.core.domain_types import AttemptStatus, QuestionType
from hrms.core.errors import (
    BusinessRuleError, ConflictError, PermissionDeniedError, ResourceNotFoundError,
    ValidationError,
)
from hrms.core.permissions import (
    Action, Actor, Resource, Target, check_permission, require_permission,
)
from hrms.models.assessment import Assessment
from hrms.models.assessment_answer import AssessmentAnswer
from hrms.models.assessment_attempt import AssessmentAttempt
from hrms.models.assessment_question import AssessmentQuestion
from hrms.models.employee import Employee
from hrms.models.organization import Organization
from hrms.schemas.assessment import AnswerEvaluate, AssessmentCreate, AttemptSubmit
from hrms.services.access import error_context, scope_clause, utc_now

logger = logging.getLogger(__name__)


def assessment_target(assessment: Assessment) -> Target:
    return Target(tenant_id=assessment.tenant_id, organization_id=assessment.organization_id)


class AssessmentService:
    """Assessment authoring and the candidate attempt workflow."""

    def __init__(self, db: AsyncSession, actor: Actor):
        self.db = db
        self.actor = actor

    # --- Loading -------------------------------------------------------------

    async def _assessment(self, assessment_id: UUID) -> Assessment:
        assessment = await self.db.get(Assessment, assessment_id)
        if assessment is None:
            raise ResourceNotFoundError(
                "Assessment", str(assessment_id), error_context(self.actor),
            )
        return assessment

    async def _attempt(self, attempt_id: UUID) -> AssessmentAttempt:
        attempt = await self.db.get(AssessmentAttempt, attempt_id)
        if attempt is None:
            raise ResourceNotFoundError(
                "AssessmentAttempt", str(attempt_id), error_context(self.actor),
            )
        return attempt

    async def _attempt_target(self, attempt: AssessmentAttempt) -> Target:
        manager_id = (await self.db.execute(
            select(Employee.manager_id)
            .where(Employee.user_id == attempt.candidate_user_id)
            .where(Employee.deleted_at.is_(None))
        )).scalar_one_or_none()
        return Target(
            tenant_id=attempt.tenant_id,
            organization_id=attempt.organization_id,
            owner_user_id=attempt.candidate_user_id,
            manager_employee_id=manager_id,
        )

    async def _refresh_attempt(self, attempt: AssessmentAttempt) -> AssessmentAttempt:
        """Re-read attempt with its answers after writes (selectin, no lazy IO)."""
        return (await self.db.execute(
            select(AssessmentAttempt)
            .where(AssessmentAttempt.id == attempt.id)
            .execution_options(populate_existing=True)
        )).scalar_one()

    def can_see_answers(self, assessment: Assessment) -> bool:
        return check_permission(
            self.actor, Resource.ASSESSMENT, Action.WRITE, assessment_target(assessment),
        ).authorized

    def _recompute(self, attempt: AssessmentAttempt, assessment: Assessment,
                   answers: list[AssessmentAnswer]) -> None:
        totals = summarize_attempt(
            {q.id: q.points for q in assessment.questions},
            {a.question_id: a.score for a in answers},
            assessment.passing_score,
        )
        attempt.total_score = totals["total_score"]
        attempt.max_score = totals["max_score"]
        attempt.percentage = totals["percentage"]
        attempt.passed = totals["passed"]

    # --- Assessments ---------------------------------------------------------

    async def create(self, data: AssessmentCreate) -> Assessment:
        organization_id = data.organization_id or self.actor.organization_id
        if organization_id is None:
            raise ValidationError("organization_id is required", "organization_id")
        organization = await self.db.get(Organization, organization_id)
        if organization is None:
            raise ResourceNotFoundError(
                "Organization", str(organization_id), error_context(self.actor),
            )
        require_permission(
            self.actor, Resource.ASSESSMENT, Action.WRITE,
            Target(tenant_id=organization.tenant_id, organization_id=organization.id),
        )

        assessment = Assessment(
            tenant_id=organization.tenant_id,
            organization_id=organization.id,
            title=data.title.strip(),
            description=data.description,
            assessment_type=data.assessment_type.value,
            difficulty_level=data.difficulty_level.value,
            time_limit_minutes=data.time_limit_minutes,
            passing_score=data.passing_score,
            created_by=self.actor.user_id,
            questions=[
                AssessmentQuestion(
                    position=position,
                    question_type=q.question_type.value,
                    text=q.text,
                    options=q.options,
                    correct_answer=q.correct_answer,
                    points=q.points,
                )
                for position, q in enumerate(data.questions)
            ],
        )
        self.db.add(assessment)
        await self.db.commit()
        logger.info(
            f"Assessment {assessment.id} created with {len(data.questions)} questions",
            extra={"organization_id": str(organization.id)},
        )
        return assessment

    async def list_assessments(
        self, limit: int, offset: int, active_only: bool = True,
        assessment_type: str | None = None,
    ) -> tuple[list[Assessment], int]:
        clause = scope_clause(
            self.actor, Resource.ASSESSMENT,
            tenant_col=Assessment.tenant_id, org_col=Assessment.organization_id,
        )
        query = select(Assessment)
        if clause is not None:
            query = query.where(clause)
        if active_only:
            query = query.where(Assessment.is_active.is_(True))
        if assessment_type:
            query = query.where(Assessment.assessment_type == assessment_type)
        total = (await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )).scalar_one()
        rows = (await self.db.execute(
            query.order_by(Assessment.created_at.desc()).limit(limit).offset(offset)
        )).scalars().all()
        return list(rows), total

    async def get(self, assessment_id: UUID) -> Assessment:
        assessment = await self._assessment(assessment_id)
        require_permission(
            self.actor, Resource.ASSESSMENT, Action.READ, assessment_target(assessment),
        )
        return assessment

    async def deactivate(self, assessment_id: UUID) -> Assessment:
        assessment = await self._assessment(assessment_id)
        require_permission(
            self.actor, Resource.ASSESSMENT, Action.DELETE, assessment_target(assessment),
        )
        assessment.is_active = False
        await self.db.commit()
        logger.info(f"Assessment {assessment.id} deactivated")
        return assessment

    # --- Attempts ------------------------------------------------------------

    async def start_attempt(self, assessment_id: UUID) -> AssessmentAttempt:
        assessment = await self.get(assessment_id)
        require_permission(self.actor, Resource.ASSESSMENT_ATTEMPT, Action.WRITE)
        if not assessment.is_active:
            raise BusinessRuleError(
                "Assessment is not active", "ASSESSMENT_INACTIVE", error_context(self.actor),
            )

        now = utc_now()
        open_attempts = (await self.db.execute(
            select(AssessmentAttempt)
            .where(AssessmentAttempt.assessment_id == assessment.id)
            .where(AssessmentAttempt.candidate_user_id == self.actor.user_id)
            .where(AssessmentAttempt.status == AttemptStatus.IN_PROGRESS.value)
        )).scalars().all()
        for attempt in open_attempts:
            if attempt_expired(attempt.started_at, assessment.time_limit_minutes, now):
                attempt.status = AttemptStatus.EXPIRED.value
                attempt.completed_at = now
            else:
                raise ConflictError(
                    "An attempt is already in progress", "ATTEMPT_IN_PROGRESS",
                    error_context(self.actor, attempt_id=str(attempt.id)),
                )

        attempt = AssessmentAttempt(
            assessment_id=assessment.id,
            candidate_user_id=self.actor.user_id,
            tenant_id=assessment.tenant_id,
            organization_id=assessment.organization_id,
            status=AttemptStatus.IN_PROGRESS.value,
            started_at=now,
        )
        self.db.add(attempt)
        await self.db.commit()
        logger.info(
            f"Attempt {attempt.id} started on assessment {assessment.id}",
            extra={"user_id": str(self.actor.user_id)},
        )
        return await self._refresh_attempt(attempt)

    async def submit_attempt(self, attempt_id: UUID, data: AttemptSubmit) -> AssessmentAttempt:
        attempt = await self._attempt(attempt_id)
        if attempt.candidate_user_id != self.actor.user_id:
            raise PermissionDeniedError(
                "assessment_attempt", "write", "only the candidate can submit answers",
                error_context(self.actor),
            )
        if attempt.status != AttemptStatus.IN_PROGRESS.value:
            raise BusinessRuleError(
                "Attempt is no longer in progress", "ATTEMPT_NOT_IN_PROGRESS",
                error_context(self.actor), status=attempt.status,
            )
        assessment = await self._assessment(attempt.assessment_id)
        now = utc_now()
        if attempt_expired(attempt.started_at, assessment.time_limit_minutes, now):
            attempt.status = AttemptStatus.EXPIRED.value
            attempt.completed_at = now
            await self.db.commit()
            logger.info(f"Attempt {attempt.id} expired on submit")
            raise BusinessRuleError(
                "Time limit exceeded", "ATTEMPT_EXPIRED", error_context(self.actor),
            )

        questions = {q.id: q for q in assessment.questions}
        answers = []
        for submitted in data.answers:
            question = questions.get(submitted.question_id)
            if question is None:
                raise ValidationError(
                    f"Question {submitted.question_id} is not part of this assessment",
                    "question_id",
                )
            is_correct, score = score_answer(
                QuestionType(question.question_type), question.correct_answer,
                question.points, submitted.answer,
            )
            answers.append(AssessmentAnswer(
                attempt_id=attempt.id,
                question_id=question.id,
                answer=submitted.answer,
                is_correct=is_correct,
                score=score,
            ))
        if len({a.question_id for a in answers}) != len(answers):
            raise ValidationError("Each question may be answered once", "question_id")

        self.db.add_all(answers)
        self._recompute(attempt, assessment, answers)
        attempt.status = AttemptStatus.COMPLETED.value
        attempt.completed_at = now
        await self.db.commit()
        logger.info(
            f"Attempt {attempt.id} completed: {attempt.percentage}%",
            extra={"user_id": str(self.actor.user_id)},
        )
        return await self._refresh_attempt(attempt)

    async def get_attempt(self, attempt_id: UUID) -> AssessmentAttempt:
        attempt = await self._attempt(attempt_id)
        require_permission(
            self.actor, Resource.ASSESSMENT_ATTEMPT, Action.READ,
            await self._attempt_target(attempt),
        )
        return attempt

    async def list_attempts(self, assessment_id: UUID) -> list[AssessmentAttempt]:
        assessment = await self.get(assessment_id)
        team_clause = None
        if self.actor.employee_id is not None:
            team_clause = AssessmentAttempt.candidate_user_id.in_(
                select(Employee.user_id).where(Employee.manager_id == self.actor.employee_id)
            )
        clause = scope_clause(
            self.actor, Resource.ASSESSMENT_ATTEMPT,
            tenant_col=AssessmentAttempt.tenant_id, org_col=AssessmentAttempt.organization_id,
            own_clause=AssessmentAttempt.candidate_user_id == self.actor.user_id,
            team_clause=team_clause,
        )
        query = select(AssessmentAttempt).where(AssessmentAttempt.assessment_id == assessment.id)
        if clause is not None:
            query = query.where(clause)
        rows = (await self.db.execute(
            query.order_by(AssessmentAttempt.started_at.desc())
        )).scalars().all()
        return list(rows)

    async def evaluate_answer(self, attempt_id: UUID, answer_id: UUID,
                              data: AnswerEvaluate) -> AssessmentAttempt:
        attempt = await self._attempt(attempt_id)
        if attempt.candidate_user_id == self.actor.user_id:
            raise PermissionDeniedError(
                "assessment_attempt", "write", "candidates cannot evaluate their own answers",
                error_context(self.actor), code="SELF_EVALUATION_FORBIDDEN",
            )
        require_permission(
            self.actor, Resource.ASSESSMENT_ATTEMPT, Action.WRITE,
            await self._attempt_target(attempt),
        )
        if attempt.status != AttemptStatus.COMPLETED.value:
            raise BusinessRuleError(
                "Only completed attempts can be evaluated", "ATTEMPT_NOT_COMPLETED",
                error_context(self.actor), status=attempt.status,
            )

        answer = next((a for a in attempt.answers if a.id == answer_id), None)
        if answer is None:
            raise ResourceNotFoundError(
                "AssessmentAnswer", str(answer_id), error_context(self.actor),
            )
        assessment = await self._assessment(attempt.assessment_id)
        question = next(q for q in assessment.questions if q.id == answer.question_id)
        if not needs_manual_evaluation(QuestionType(question.question_type),
                                       question.correct_answer):
            raise BusinessRuleError(
                "Answer is scored automatically", "ANSWER_NOT_MANUAL", error_context(self.actor),
            )
        if data.score < 0 or data.score > question.points:
            raise ValidationError(
                f"Score must be between 0 and {question.points}", "score",
            )

        answer.score = float(data.score)
        answer.is_correct = data.score >= question.points
        answer.feedback = data.feedback
        answer.evaluated_by = self.actor.user_id
        answer.evaluated_at = utc_now()
        self._recompute(attempt, assessment, list(attempt.answers))
        await self.db.commit()
        logger.info(
            f"Answer {answer.id} evaluated: {answer.score}/{question.points}",
            extra={"user_id": str(self.actor.user_id)},
        )
        return await self._refresh_attempt(attempt)
