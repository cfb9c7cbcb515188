"""User route tests.

Tests cover:
    - /me returns the caller with their employee id and permission ladder
    - Role grants are capped at the caller's rank; only sysadmins create sysadmins
    - Emails are unique; per-organization user quota
    - List visibility by role (own, team, organization)
    - Users cannot change their own role or status, or deactivate themselves
    - Other accounts are only writable by a strictly higher rank
"""

from tests.services.helpers import as_user


def _new_user(**overrides) -> dict:
    return {"email": "new.hire@acme.test", "first_name": "Nina", "last_name": "Neri", **overrides}


async def test_me_includes_permissions(client, world):
    response = await client.get("/api/v1/users/me", headers=as_user(world.manager.id))
    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "manager@acme.test"
    assert body["employee_id"] == str(world.manager_employee.id)
    assert body["permissions"]["leave_request"] == {"read": "team", "write": "team"}


async def test_hr_creates_employee_user(client, world):
    response = await client.post(
        "/api/v1/users", json=_new_user(email="New.Hire@ACME.test", password="s3cret-pass"),
        headers=as_user(world.hr.id),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "new.hire@acme.test"
    assert body["organization_id"] == str(world.organization.id)
    assert body["role"] == "employee"
    assert "password_hash" not in body


async def test_hr_cannot_grant_admin(client, world):
    response = await client.post(
        "/api/v1/users", json=_new_user(role="admin"), headers=as_user(world.hr.id),
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "ROLE_ASSIGNMENT_DENIED"


async def test_admin_cannot_create_sysadmin(client, world):
    response = await client.post(
        "/api/v1/users", json=_new_user(role="sysadmin"), headers=as_user(world.admin.id),
    )
    assert response.status_code == 403


async def test_manager_cannot_create_users(client, world):
    response = await client.post(
        "/api/v1/users", json=_new_user(), headers=as_user(world.manager.id),
    )
    assert response.status_code == 403


async def test_duplicate_email_conflicts(client, world):
    response = await client.post(
        "/api/v1/users", json=_new_user(email="peer@acme.test"), headers=as_user(world.admin.id),
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_EMAIL"


async def test_user_quota_per_organization(client, world, test_db):
    world.tenant.max_users_per_org = 5
    test_db.add(world.tenant)
    await test_db.commit()

    response = await client.post(
        "/api/v1/users", json=_new_user(), headers=as_user(world.admin.id),
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "QUOTA_EXCEEDED"


async def test_admin_cannot_create_user_in_other_tenant(client, world):
    response = await client.post(
        "/api/v1/users", json=_new_user(organization_id=str(world.other_organization.id)),
        headers=as_user(world.admin.id),
    )
    assert response.status_code == 403


async def test_hr_lists_organization_users(client, world):
    response = await client.get("/api/v1/users?role=employee", headers=as_user(world.hr.id))
    assert response.status_code == 200
    emails = {u["email"] for u in response.json()["users"]}
    assert emails == {"employee@acme.test", "peer@acme.test"}


async def test_manager_lists_own_team(client, world):
    response = await client.get("/api/v1/users", headers=as_user(world.manager.id))
    emails = {u["email"] for u in response.json()["users"]}
    assert emails == {"manager@acme.test", "employee@acme.test"}


async def test_employee_lists_only_self(client, world):
    response = await client.get("/api/v1/users", headers=as_user(world.employee.id))
    body = response.json()
    assert body["pagination"]["total"] == 1
    assert body["users"][0]["id"] == str(world.employee.id)


async def test_user_search(client, world):
    response = await client.get("/api/v1/users?search=paola", headers=as_user(world.admin.id))
    assert [u["email"] for u in response.json()["users"]] == ["peer@acme.test"]


async def test_employee_cannot_read_peer(client, world):
    response = await client.get(
        f"/api/v1/users/{world.peer.id}", headers=as_user(world.employee.id),
    )
    assert response.status_code == 403


async def test_manager_reads_direct_report(client, world):
    response = await client.get(
        f"/api/v1/users/{world.employee.id}", headers=as_user(world.manager.id),
    )
    assert response.status_code == 200


async def test_admin_promotes_user(client, world):
    response = await client.patch(
        f"/api/v1/users/{world.peer.id}", json={"role": "manager"},
        headers=as_user(world.admin.id),
    )
    assert response.status_code == 200
    assert response.json()["role"] == "manager"


async def test_cannot_change_own_role(client, world):
    response = await client.patch(
        f"/api/v1/users/{world.admin.id}", json={"role": "hr"},
        headers=as_user(world.admin.id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "CANNOT_CHANGE_OWN_ROLE"


async def test_deactivate_user(client, world):
    response = await client.delete(
        f"/api/v1/users/{world.peer.id}", headers=as_user(world.hr.id),
    )
    assert response.status_code == 200
    assert response.json()["status"] == "inactive"

    gone = await client.get("/api/v1/users/me", headers=as_user(world.peer.id))
    assert gone.status_code == 401


async def test_cannot_deactivate_self(client, world):
    response = await client.delete(
        f"/api/v1/users/{world.admin.id}", headers=as_user(world.admin.id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "CANNOT_DEACTIVATE_SELF"


async def test_hr_cannot_demote_admin(client, world):
    response = await client.patch(
        f"/api/v1/users/{world.admin.id}", json={"role": "employee"},
        headers=as_user(world.hr.id),
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "USER_RANK_DENIED"


async def test_hr_cannot_reset_admin_password(client, world):
    response = await client.patch(
        f"/api/v1/users/{world.admin.id}", json={"password": "hijacked-pass"},
        headers=as_user(world.hr.id),
    )
    assert response.status_code == 403


async def test_hr_cannot_deactivate_admin(client, world):
    response = await client.delete(
        f"/api/v1/users/{world.admin.id}", headers=as_user(world.hr.id),
    )
    assert response.status_code == 403

    still_there = await client.get("/api/v1/users/me", headers=as_user(world.admin.id))
    assert still_there.status_code == 200


async def test_admin_resets_hr_password(client, world):
    response = await client.patch(
        f"/api/v1/users/{world.hr.id}", json={"password": "fresh-pass-123"},
        headers=as_user(world.admin.id),
    )
    assert response.status_code == 200


async def test_cannot_change_own_status(client, world):
    response = await client.patch(
        f"/api/v1/users/{world.hr.id}", json={"status": "on_leave"},
        headers=as_user(world.hr.id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "CANNOT_DEACTIVATE_SELF"
