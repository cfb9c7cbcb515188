"""Assessment route tests.

Tests cover:
    - Authoring is limited to HR and above; correct answers hidden from candidates
    - Attempt lifecycle: start, one attempt in progress, submit, auto-scoring
    - Time limit: a late submit expires the attempt
    - Manual evaluation of free-form answers: bounds, self-evaluation, role scope
    - Attempt visibility: candidates see their own, HR sees the organization
"""

from datetime import datetime, timedelta, timezone
import uuid

from hrms.models.assessment_attempt import AssessmentAttempt
from tests.services.helpers import as_user

QUESTIONS = [
    {"question_type": "single_choice", "text": "2 + 2?", "options": ["3", "4"],
     "correct_answer": "4", "points": 2},
    {"question_type": "multiple_choice", "text": "Python web frameworks?",
     "options": ["django", "rails", "fastapi"], "correct_answer": ["django", "fastapi"],
     "points": 3},
    {"question_type": "essay", "text": "Describe a project you are proud of", "points": 5},
]


async def _create(client, world, **overrides) -> dict:
    payload = {"title": "Backend screening", "assessment_type": "technical",
               "questions": QUESTIONS, **overrides}
    response = await client.post(
        "/api/v1/assessments", json=payload, headers=as_user(world.hr.id),
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _start(client, user, assessment) -> dict:
    response = await client.post(
        f"/api/v1/assessments/{assessment['id']}/attempts", headers=as_user(user.id),
    )
    assert response.status_code == 201, response.text
    return response.json()


def _answers(assessment, single="4", multiple=("fastapi", "django"), essay="A payroll engine"):
    questions = assessment["questions"]
    return {"answers": [
        {"question_id": questions[0]["id"], "answer": single},
        {"question_id": questions[1]["id"], "answer": list(multiple)},
        {"question_id": questions[2]["id"], "answer": essay},
    ]}


async def _submit(client, user, attempt, payload) -> dict:
    response = await client.post(
        f"/api/v1/assessments/attempts/{attempt['id']}/submit",
        json=payload, headers=as_user(user.id),
    )
    assert response.status_code == 200, response.text
    return response.json()


async def test_hr_creates_assessment(client, world):
    body = await _create(client, world)
    assert body["organization_id"] == str(world.organization.id)
    assert [q["position"] for q in body["questions"]] == [0, 1, 2]
    assert body["questions"][0]["correct_answer"] == "4"


async def test_manager_cannot_author(client, world):
    response = await client.post(
        "/api/v1/assessments",
        json={"title": "Quiz", "questions": QUESTIONS},
        headers=as_user(world.manager.id),
    )
    assert response.status_code == 403


async def test_candidate_does_not_see_correct_answers(client, world):
    assessment = await _create(client, world)
    response = await client.get(
        f"/api/v1/assessments/{assessment['id']}", headers=as_user(world.employee.id),
    )
    assert response.status_code == 200
    assert all(q["correct_answer"] is None for q in response.json()["questions"])


async def test_list_filters_by_type(client, world):
    await _create(client, world)
    await _create(client, world, title="Team fit", assessment_type="behavioral")
    response = await client.get(
        "/api/v1/assessments?assessment_type=behavioral", headers=as_user(world.employee.id),
    )
    assert [a["title"] for a in response.json()["assessments"]] == ["Team fit"]


async def test_other_tenant_cannot_read(client, world):
    assessment = await _create(client, world)
    response = await client.get(
        f"/api/v1/assessments/{assessment['id']}", headers=as_user(world.other_admin.id),
    )
    assert response.status_code == 403


async def test_submit_scores_objective_questions(client, world):
    assessment = await _create(client, world)
    attempt = await _start(client, world.employee, assessment)
    assert attempt["status"] == "in_progress"

    body = await _submit(client, world.employee, attempt, _answers(assessment))
    assert body["status"] == "completed"
    assert body["total_score"] == 5
    assert body["max_score"] == 10
    assert body["passed"] is None
    essay = [a for a in body["answers"] if a["question_id"] == assessment["questions"][2]["id"]]
    assert essay[0]["score"] is None


async def test_wrong_answers_score_zero(client, world):
    assessment = await _create(client, world, questions=QUESTIONS[:2], passing_score=50)
    attempt = await _start(client, world.employee, assessment)
    payload = {"answers": [
        {"question_id": assessment["questions"][0]["id"], "answer": "3"},
        {"question_id": assessment["questions"][1]["id"], "answer": ["django"]},
    ]}
    body = await _submit(client, world.employee, attempt, payload)
    assert body["total_score"] == 0
    assert body["passed"] is False


async def test_second_attempt_while_in_progress_conflicts(client, world):
    assessment = await _create(client, world)
    await _start(client, world.employee, assessment)
    response = await client.post(
        f"/api/v1/assessments/{assessment['id']}/attempts", headers=as_user(world.employee.id),
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "ATTEMPT_IN_PROGRESS"


async def test_inactive_assessment_cannot_be_started(client, world):
    assessment = await _create(client, world)
    deleted = await client.delete(
        f"/api/v1/assessments/{assessment['id']}", headers=as_user(world.hr.id),
    )
    assert deleted.json()["is_active"] is False

    response = await client.post(
        f"/api/v1/assessments/{assessment['id']}/attempts", headers=as_user(world.employee.id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ASSESSMENT_INACTIVE"


async def test_only_candidate_submits(client, world):
    assessment = await _create(client, world)
    attempt = await _start(client, world.employee, assessment)
    response = await client.post(
        f"/api/v1/assessments/attempts/{attempt['id']}/submit",
        json=_answers(assessment), headers=as_user(world.peer.id),
    )
    assert response.status_code == 403


async def test_submitting_twice_rejected(client, world):
    assessment = await _create(client, world)
    attempt = await _start(client, world.employee, assessment)
    await _submit(client, world.employee, attempt, _answers(assessment))
    response = await client.post(
        f"/api/v1/assessments/attempts/{attempt['id']}/submit",
        json=_answers(assessment), headers=as_user(world.employee.id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ATTEMPT_NOT_IN_PROGRESS"


async def test_foreign_question_rejected(client, world):
    assessment = await _create(client, world)
    attempt = await _start(client, world.employee, assessment)
    response = await client.post(
        f"/api/v1/assessments/attempts/{attempt['id']}/submit",
        json={"answers": [{"question_id": str(uuid.uuid4()), "answer": "4"}]},
        headers=as_user(world.employee.id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["field"] == "question_id"


async def test_late_submit_expires_attempt(client, world, test_db):
    assessment = await _create(client, world, time_limit_minutes=5)
    attempt = await _start(client, world.employee, assessment)
    row = await test_db.get(AssessmentAttempt, uuid.UUID(attempt["id"]))
    row.started_at = datetime.now(timezone.utc) - timedelta(minutes=30)
    await test_db.commit()

    response = await client.post(
        f"/api/v1/assessments/attempts/{attempt['id']}/submit",
        json=_answers(assessment), headers=as_user(world.employee.id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ATTEMPT_EXPIRED"

    stored = await client.get(
        f"/api/v1/assessments/attempts/{attempt['id']}", headers=as_user(world.employee.id),
    )
    assert stored.json()["status"] == "expired"

    retry = await _start(client, world.employee, assessment)
    assert retry["status"] == "in_progress"


async def _completed_essay(client, world) -> tuple[dict, dict, str]:
    assessment = await _create(client, world)
    attempt = await _start(client, world.employee, assessment)
    body = await _submit(client, world.employee, attempt, _answers(assessment))
    essay_id = next(
        a["id"] for a in body["answers"]
        if a["question_id"] == assessment["questions"][2]["id"]
    )
    return assessment, body, essay_id


async def test_hr_evaluates_essay(client, world):
    _, attempt, essay_id = await _completed_essay(client, world)
    response = await client.post(
        f"/api/v1/assessments/attempts/{attempt['id']}/answers/{essay_id}/evaluate",
        json={"score": 4, "feedback": "Clear and concrete"}, headers=as_user(world.hr.id),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["total_score"] == 9
    assert body["percentage"] == 90
    assert body["passed"] is True
    essay = next(a for a in body["answers"] if a["id"] == essay_id)
    assert essay["evaluated_by"] == str(world.hr.id)
    assert essay["is_correct"] is False


async def test_score_above_points_rejected(client, world):
    _, attempt, essay_id = await _completed_essay(client, world)
    response = await client.post(
        f"/api/v1/assessments/attempts/{attempt['id']}/answers/{essay_id}/evaluate",
        json={"score": 6}, headers=as_user(world.hr.id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["field"] == "score"


async def test_auto_scored_answer_not_evaluable(client, world):
    assessment, attempt, _ = await _completed_essay(client, world)
    choice_id = next(
        a["id"] for a in attempt["answers"]
        if a["question_id"] == assessment["questions"][0]["id"]
    )
    response = await client.post(
        f"/api/v1/assessments/attempts/{attempt['id']}/answers/{choice_id}/evaluate",
        json={"score": 1}, headers=as_user(world.hr.id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ANSWER_NOT_MANUAL"


async def test_candidate_cannot_self_evaluate(client, world):
    _, attempt, essay_id = await _completed_essay(client, world)
    response = await client.post(
        f"/api/v1/assessments/attempts/{attempt['id']}/answers/{essay_id}/evaluate",
        json={"score": 5}, headers=as_user(world.employee.id),
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "SELF_EVALUATION_FORBIDDEN"


async def test_manager_reads_but_cannot_evaluate_team_attempt(client, world):
    _, attempt, essay_id = await _completed_essay(client, world)
    read = await client.get(
        f"/api/v1/assessments/attempts/{attempt['id']}", headers=as_user(world.manager.id),
    )
    assert read.status_code == 200

    response = await client.post(
        f"/api/v1/assessments/attempts/{attempt['id']}/answers/{essay_id}/evaluate",
        json={"score": 5}, headers=as_user(world.manager.id),
    )
    assert response.status_code == 403


async def test_in_progress_attempt_not_evaluable(client, world):
    assessment = await _create(client, world)
    attempt = await _start(client, world.employee, assessment)
    response = await client.post(
        f"/api/v1/assessments/attempts/{attempt['id']}/answers/{uuid.uuid4()}/evaluate",
        json={"score": 1}, headers=as_user(world.hr.id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ATTEMPT_NOT_COMPLETED"


async def test_attempt_visibility(client, world):
    assessment = await _create(client, world)
    await _start(client, world.employee, assessment)
    await _start(client, world.peer, assessment)

    hr_view = await client.get(
        f"/api/v1/assessments/{assessment['id']}/attempts", headers=as_user(world.hr.id),
    )
    assert len(hr_view.json()) == 2

    own_view = await client.get(
        f"/api/v1/assessments/{assessment['id']}/attempts", headers=as_user(world.peer.id),
    )
    assert [a["candidate_user_id"] for a in own_view.json()] == [str(world.peer.id)]

    manager_view = await client.get(
        f"/api/v1/assessments/{assessment['id']}/attempts", headers=as_user(world.manager.id),
    )
    assert [a["candidate_user_id"] for a in manager_view.json()] == [str(world.employee.id)]
