"""Dashboard route tests.

Tests cover:
    - Counts follow the caller's visibility (organization, team, own)
    - Pending approvals only count requests the caller may decide, never their own,
      and are counted in full rather than from the capped queue
    - Template instance counts per type for the caller's organization
    - Recent leave requests, newest first, limited
"""

from datetime import date, timedelta

from tests.services.helpers import as_user


def _next_week() -> dict:
    today = date.today()
    monday = today + timedelta(days=14 - today.weekday())
    return {
        "leave_type": "personal",
        "start_date": monday.isoformat(),
        "end_date": (monday + timedelta(days=1)).isoformat(),
    }


async def _request_leave(client, user) -> dict:
    response = await client.post(
        "/api/v1/leave-requests", json=_next_week(), headers=as_user(user.id),
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_hr_stats_cover_organization(client, world):
    await _request_leave(client, world.employee)
    await _request_leave(client, world.peer)

    response = await client.get("/api/v1/dashboard/stats", headers=as_user(world.hr.id))
    assert response.status_code == 200
    body = response.json()
    assert body["active_employees"] == 4
    assert body["active_leave_requests"] == 2
    assert body["pending_approvals"] == 2
    assert body["template_instances"]["skill"] == 0


async def test_manager_stats_cover_team(client, world):
    await _request_leave(client, world.employee)
    await _request_leave(client, world.peer)

    body = (await client.get(
        "/api/v1/dashboard/stats", headers=as_user(world.manager.id),
    )).json()
    assert body["active_employees"] == 2
    assert body["active_leave_requests"] == 1
    assert body["pending_approvals"] == 1


async def test_employee_stats_cover_self(client, world):
    await _request_leave(client, world.employee)

    body = (await client.get(
        "/api/v1/dashboard/stats", headers=as_user(world.employee.id),
    )).json()
    assert body["active_employees"] == 1
    assert body["active_leave_requests"] == 1
    assert body["pending_approvals"] == 0


async def test_template_counts(client, world, skill_template):
    await client.post(
        f"/api/v1/organizations/{world.organization.id}/templates/skill/import",
        json={"template_id": str(skill_template.id)}, headers=as_user(world.hr.id),
    )
    body = (await client.get(
        "/api/v1/dashboard/stats", headers=as_user(world.employee.id),
    )).json()
    assert body["template_instances"]["skill"] == 1
    assert body["template_instances"]["job_role"] == 0


async def test_sysadmin_template_counts_are_zero(client, world):
    body = (await client.get(
        "/api/v1/dashboard/stats", headers=as_user(world.sysadmin.id),
    )).json()
    assert set(body["template_instances"].values()) == {0}


async def test_recent_leave_requests(client, world):
    await _request_leave(client, world.employee)
    await _request_leave(client, world.peer)

    response = await client.get(
        "/api/v1/dashboard/recent-leave-requests?limit=1", headers=as_user(world.hr.id),
    )
    assert response.status_code == 200
    rows = response.json()
    assert len(rows) == 1
    assert rows[0]["employee_name"] is not None


async def test_pending_approvals_count_is_not_capped_by_queue_limit(client, world):
    await _request_leave(client, world.employee)
    await _request_leave(client, world.peer)

    queue = await client.get(
        "/api/v1/leave-requests/pending-approval?limit=1", headers=as_user(world.hr.id),
    )
    assert len(queue.json()) == 1
    body = (await client.get("/api/v1/dashboard/stats", headers=as_user(world.hr.id))).json()
    assert body["pending_approvals"] == 2


async def test_own_pending_request_not_counted_for_approval(client, world):
    await _request_leave(client, world.hr)
    await _request_leave(client, world.employee)

    hr_body = (await client.get(
        "/api/v1/dashboard/stats", headers=as_user(world.hr.id),
    )).json()
    assert hr_body["pending_approvals"] == 1

    admin_body = (await client.get(
        "/api/v1/dashboard/stats", headers=as_user(world.admin.id),
    )).json()
    assert admin_body["pending_approvals"] == 2
