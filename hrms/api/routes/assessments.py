"""Assessment Routes: assessments, candidate attempts and manual evaluation.

Invariants:
    - /attempts/... paths are registered before /{assessment_id}
    - Correct answers are only shown to callers who may edit the assessment
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_actor
from hrms.core.permissions import Actor
from hrms.infrastructure.database import get_db
from hrms.models.assessment import Assessment
from hrms.schemas.assessment import (
    AnswerEvaluate, AssessmentCreate, AssessmentList, AssessmentResponse,
    AttemptResponse, AttemptSubmit,
)
from hrms.schemas.common import Pagination
from hrms.services.assessment_service import AssessmentService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/assessments", tags=["assessments"])


def assessment_response(service: AssessmentService, assessment: Assessment) -> AssessmentResponse:
    response = AssessmentResponse.model_validate(assessment)
    if not service.can_see_answers(assessment):
        for question in response.questions:
            question.correct_answer = None
    return response


@router.post("", response_model=AssessmentResponse, status_code=status.HTTP_201_CREATED)
async def create_assessment(
    body: AssessmentCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    service = AssessmentService(db, actor)
    return assessment_response(service, await service.create(body))


@router.get("", response_model=AssessmentList)
async def list_assessments(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    active_only: bool = True,
    assessment_type: str | None = None,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    service = AssessmentService(db, actor)
    assessments, total = await service.list_assessments(
        limit, offset, active_only=active_only, assessment_type=assessment_type,
    )
    return AssessmentList(
        assessments=[assessment_response(service, a) for a in assessments],
        pagination=Pagination(limit=limit, offset=offset, total=total),
    )


@router.get("/attempts/{attempt_id}", response_model=AttemptResponse)
async def get_attempt(
    attempt_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return await AssessmentService(db, actor).get_attempt(attempt_id)


@router.post("/attempts/{attempt_id}/submit", response_model=AttemptResponse)
async def submit_attempt(
    attempt_id: UUID,
    body: AttemptSubmit,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Submit answers; objective questions are scored immediately."""
    return await AssessmentService(db, actor).submit_attempt(attempt_id, body)


@router.post(
    "/attempts/{attempt_id}/answers/{answer_id}/evaluate", response_model=AttemptResponse,
)
async def evaluate_answer(
    attempt_id: UUID,
    answer_id: UUID,
    body: AnswerEvaluate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Score a manually evaluated answer and recompute the attempt totals."""
    return await AssessmentService(db, actor).evaluate_answer(attempt_id, answer_id, body)


@router.get("/{assessment_id}", response_model=AssessmentResponse)
async def get_assessment(
    assessment_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    service = AssessmentService(db, actor)
    return assessment_response(service, await service.get(assessment_id))


@router.delete("/{assessment_id}", response_model=AssessmentResponse)
async def deactivate_assessment(
    assessment_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    service = AssessmentService(db, actor)
    return assessment_response(service, await service.deactivate(assessment_id))


@router.post(
    "/{assessment_id}/attempts", response_model=AttemptResponse,
    status_code=status.HTTP_201_CREATED,
)
async def start_attempt(
    assessment_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Start an attempt for the caller."""
    return await AssessmentService(db, actor).start_attempt(assessment_id)


@router.get("/{assessment_id}/attempts", response_model=list[AttemptResponse])
async def list_attempts(
    assessment_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Attempts the caller may see: own, team, organization or tenant."""
    return await AssessmentService(db, actor).list_attempts(assessment_id)
