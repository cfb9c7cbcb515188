"""Assessment Scoring tests: answer scoring, attempt totals, time limits.

Tests cover:
    - Choice and rating questions are auto-scored, free-form ones wait for evaluation
    - Multiple choice compares as a set
    - Totals count unanswered questions toward max_score
    - passed stays undecided while manual evaluation is pending
"""

from datetime import datetime, timedelta, timezone

import pytest

from hrms.core.assessment_scoring import (
    attempt_expired, needs_manual_evaluation, score_answer, summarize_attempt,
)
from hrms.core.domain_types import QuestionType

NOW = datetime(2030, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("question_type,correct,manual", [
    (QuestionType.SINGLE_CHOICE, "b", False),
    (QuestionType.RATING, 4, False),
    (QuestionType.SINGLE_CHOICE, None, True),
    (QuestionType.TEXT, "anything", True),
    (QuestionType.ESSAY, None, True),
    (QuestionType.CODE, "print()", True),
])
def test_manual_evaluation_rules(question_type, correct, manual):
    assert needs_manual_evaluation(question_type, correct) is manual


def test_single_choice_scoring():
    assert score_answer(QuestionType.SINGLE_CHOICE, "b", 2, "b") == (True, 2.0)
    assert score_answer(QuestionType.SINGLE_CHOICE, "b", 2, "a") == (False, 0.0)


def test_multiple_choice_is_order_insensitive():
    assert score_answer(QuestionType.MULTIPLE_CHOICE, ["a", "c"], 3, ["c", "a"]) == (True, 3.0)
    assert score_answer(QuestionType.MULTIPLE_CHOICE, ["a", "c"], 3, ["a"]) == (False, 0.0)


def test_rating_compares_numerically():
    assert score_answer(QuestionType.RATING, 4, 1, "4") == (True, 1.0)
    assert score_answer(QuestionType.RATING, 4, 1, "four") == (False, 0.0)


def test_missing_answer_scores_zero():
    assert score_answer(QuestionType.SINGLE_CHOICE, "b", 2, None) == (False, 0.0)


def test_free_form_answer_is_pending():
    assert score_answer(QuestionType.ESSAY, None, 5, "long text") == (None, None)


def test_summary_counts_unanswered_toward_max():
    summary = summarize_attempt({"q1": 2, "q2": 3, "q3": 5}, {"q1": 2.0, "q2": 3.0}, 50)
    assert summary["total_score"] == 5.0
    assert summary["max_score"] == 10.0
    assert summary["percentage"] == 50.0
    assert summary["passed"] is True


def test_summary_below_passing_score():
    summary = summarize_attempt({"q1": 3}, {"q1": 1.0}, 70)
    assert summary["percentage"] == 33.33
    assert summary["passed"] is False


def test_pending_manual_leaves_result_undecided():
    summary = summarize_attempt({"q1": 2, "q2": 5}, {"q1": 2.0, "q2": None}, 50)
    assert summary["pending_manual"] == 1
    assert summary["passed"] is None


def test_empty_assessment_has_zero_percentage():
    assert summarize_attempt({}, {}, 0)["percentage"] == 0.0


def test_attempt_expiry():
    started = NOW - timedelta(minutes=31)
    assert attempt_expired(started, 30, NOW)
    assert not attempt_expired(started, 45, NOW)
    assert not attempt_expired(started, None, NOW)


def test_naive_start_treated_as_utc():
    started = (NOW - timedelta(minutes=10)).replace(tzinfo=None)
    assert not attempt_expired(started, 30, NOW)
