"""Assessment Scoring: auto-scoring of answers and attempt totals.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Auto-scored: single_choice, multiple_choice (order-insensitive), rating (exact match)
    - A question without a correct answer, or of a free-form type, waits for manual evaluation
    - passed is None while any answer waits for manual evaluation
    - Unanswered questions score 0 and count toward max_score
"""

from datetime import datetime, timedelta
from typing import Any, Hashable

from hrms.core.domain_types import QuestionType
from hrms.core.tenancy import as_utc

AUTO_SCORED_TYPES: frozenset[QuestionType] = frozenset({
    QuestionType.SINGLE_CHOICE,
    QuestionType.MULTIPLE_CHOICE,
    QuestionType.RATING,
})

CHOICE_TYPES: frozenset[QuestionType] = frozenset({
    QuestionType.SINGLE_CHOICE,
    QuestionType.MULTIPLE_CHOICE,
})


def _as_set(value: Any) -> set:
    if isinstance(value, (list, tuple, set)):
        return {str(v) for v in value}
    return {str(value)}


def needs_manual_evaluation(question_type: QuestionType, correct_answer: Any) -> bool:
    return question_type not in AUTO_SCORED_TYPES or correct_answer is None


def score_answer(
    question_type: QuestionType,
    correct_answer: Any,
    points: float,
    answer: Any,
) -> tuple[bool | None, float | None]:
    """(is_correct, score); both None when the answer needs manual evaluation."""
    if needs_manual_evaluation(question_type, correct_answer):
        return None, None

    if question_type == QuestionType.MULTIPLE_CHOICE:
        correct = answer is not None and _as_set(answer) == _as_set(correct_answer)
    elif question_type == QuestionType.RATING:
        try:
            correct = answer is not None and float(answer) == float(correct_answer)
        except (TypeError, ValueError):
            correct = False
    else:
        correct = answer is not None and str(answer) == str(correct_answer)

    return correct, float(points) if correct else 0.0


def summarize_attempt(
    points_by_question: dict[Hashable, float],
    scores: dict[Hashable, float | None],
    passing_score: float,
) -> dict[str, Any]:
    """Totals for an attempt. scores maps answered question -> score (None = pending)."""
    max_score = float(sum(points_by_question.values()))
    pending = sum(1 for q in points_by_question if q in scores and scores[q] is None)
    total = float(sum(s for s in scores.values() if s is not None))
    percentage = round(total / max_score * 100, 2) if max_score else 0.0
    return {
        "total_score": round(total, 2),
        "max_score": round(max_score, 2),
        "percentage": percentage,
        "pending_manual": pending,
        "passed": None if pending else percentage >= passing_score,
    }


def attempt_expired(
    started_at: datetime, time_limit_minutes: int | None, now: datetime,
) -> bool:
    if not time_limit_minutes:
        return False
    return now > as_utc(started_at) + timedelta(minutes=time_limit_minutes)
