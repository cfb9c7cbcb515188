"""Tenant and organization route tests.

Tests cover:
    - Tenant creation is sysadmin-only; trial end defaults from settings
    - Slugs are normalized and unique
    - Admins see only their own tenant; other tenants are cross-tenant denials
    - Organization quotas, derived fields, stats and deactivation
"""

from tests.services.helpers import as_user


async def test_sysadmin_creates_tenant_with_trial(client, world):
    response = await client.post(
        "/api/v1/tenants",
        json={"name": "Initech", "slug": "Initech", "currency": "eur"},
        headers=as_user(world.sysadmin.id),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["slug"] == "initech"
    assert body["currency"] == "EUR"
    assert body["subscription_status"] == "trial"
    assert body["trial_ends_at"] is not None
    assert body["features"]["api_access"] is True


async def test_duplicate_tenant_slug_conflicts(client, world):
    response = await client.post(
        "/api/v1/tenants", json={"name": "Acme again", "slug": "acme"},
        headers=as_user(world.sysadmin.id),
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_SLUG"


async def test_invalid_tenant_slug_rejected(client, world):
    response = await client.post(
        "/api/v1/tenants", json={"name": "Bad", "slug": "bad slug!"},
        headers=as_user(world.sysadmin.id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["field"] == "slug"


async def test_admin_cannot_create_tenant(client, world):
    response = await client.post(
        "/api/v1/tenants", json={"name": "Initech", "slug": "initech"},
        headers=as_user(world.admin.id),
    )
    assert response.status_code == 403


async def test_admin_lists_only_own_tenant(client, world):
    response = await client.get("/api/v1/tenants", headers=as_user(world.admin.id))
    assert response.status_code == 200
    body = response.json()
    assert body["pagination"]["total"] == 1
    assert body["tenants"][0]["slug"] == "acme"


async def test_sysadmin_lists_all_tenants(client, world):
    response = await client.get(
        "/api/v1/tenants?status=trial", headers=as_user(world.sysadmin.id),
    )
    assert [t["slug"] for t in response.json()["tenants"]] == ["globex"]


async def test_employee_cannot_list_tenants(client, world):
    response = await client.get("/api/v1/tenants", headers=as_user(world.employee.id))
    assert response.status_code == 403


async def test_other_tenant_is_cross_tenant_denial(client, world):
    response = await client.get(
        f"/api/v1/tenants/{world.other_tenant.id}", headers=as_user(world.admin.id),
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "CROSS_TENANT_ACCESS_DENIED"


async def test_subscription_reports_trial(client, world):
    response = await client.get(
        f"/api/v1/tenants/{world.other_tenant.id}/subscription",
        headers=as_user(world.other_admin.id),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["display_status"] == "active_trial"
    assert body["trial_days_left"] in (9, 10)
    assert body["is_usable"] is True
    assert body["organizations"] == 1


async def test_sysadmin_suspends_tenant(client, world):
    response = await client.patch(
        f"/api/v1/tenants/{world.tenant.id}",
        json={"subscription_status": "suspended"},
        headers=as_user(world.sysadmin.id),
    )
    assert response.status_code == 200
    assert response.json()["subscription_status"] == "suspended"


async def test_admin_creates_organization_with_defaults(client, world):
    response = await client.post(
        "/api/v1/organizations",
        json={"name": "Acme France", "slug": "france", "features": {"performance_reviews": True}},
        headers=as_user(world.admin.id),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["tenant_id"] == str(world.tenant.id)
    assert body["full_domain"] == "france.acme.hrms.com"
    assert body["effective_timezone"] == "UTC"
    assert body["effective_currency"] == "USD"
    assert body["features"]["performance_reviews"] is True
    assert body["features"]["leave_management"] is True


async def test_organization_slug_unique_per_tenant(client, world):
    response = await client.post(
        "/api/v1/organizations", json={"name": "Dup", "slug": "italia"},
        headers=as_user(world.admin.id),
    )
    assert response.status_code == 409


async def test_organization_quota(client, world, test_db):
    world.tenant.max_organizations = 1
    test_db.add(world.tenant)
    await test_db.commit()

    response = await client.post(
        "/api/v1/organizations", json={"name": "Acme France", "slug": "france"},
        headers=as_user(world.admin.id),
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "QUOTA_EXCEEDED"


async def test_sysadmin_must_name_tenant(client, world):
    response = await client.post(
        "/api/v1/organizations", json={"name": "Orphan", "slug": "orphan"},
        headers=as_user(world.sysadmin.id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["field"] == "tenant_id"


async def test_hr_cannot_create_organization(client, world):
    response = await client.post(
        "/api/v1/organizations", json={"name": "Acme France", "slug": "france"},
        headers=as_user(world.hr.id),
    )
    assert response.status_code == 403


async def test_employee_sees_own_organization_only(client, world):
    response = await client.get("/api/v1/organizations", headers=as_user(world.employee.id))
    assert response.status_code == 200
    slugs = [o["slug"] for o in response.json()["organizations"]]
    assert slugs == ["italia"]


async def test_organization_stats(client, world):
    response = await client.get(
        f"/api/v1/organizations/{world.organization.id}/stats",
        headers=as_user(world.hr.id),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["users"] == 5
    assert body["employees"] == 4
    assert body["departments"] == 2
    assert body["template_instances"]["skill"] == 0


async def test_update_organization(client, world):
    response = await client.patch(
        f"/api/v1/organizations/{world.organization.id}",
        json={"timezone": "Europe/Rome", "currency": "eur"},
        headers=as_user(world.admin.id),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["effective_timezone"] == "Europe/Rome"
    assert body["currency"] == "EUR"


async def test_deactivate_organization(client, world):
    response = await client.delete(
        f"/api/v1/organizations/{world.organization.id}", headers=as_user(world.admin.id),
    )
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    locked = await client.get("/api/v1/users/me", headers=as_user(world.employee.id))
    assert locked.status_code == 403
