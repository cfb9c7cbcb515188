"""Health checks, identity resolution and error envelope tests.

Tests cover:
    - Liveness and readiness checks; readiness fails while a table is missing
    - Missing, malformed and unknown identities are 401
    - Suspended tenants and expired trials lock their users out
    - Error messages follow Accept-Language
    - Request validation failures use the 400 VALIDATION_ERROR envelope
"""

from datetime import datetime, timedelta, timezone
import uuid

from sqlalchemy import text

from tests.services.helpers import as_user


async def test_health_check(client):
    response = await client.get("/api/v1/health/")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["service"] == "hrms-api"


async def test_readiness_with_database(client):
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    body = response.json()
    assert body["checks"] == {"database": "healthy", "schema": "healthy"}
    assert body["template_types"] == 12


async def test_readiness_reports_missing_tables(client, test_engine):
    async with test_engine.begin() as conn:
        await conn.execute(text("DROP TABLE organization_reporting_structures"))

    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    body = response.json()
    assert body["reason"] == "schema_incomplete"
    assert body["missing_tables"] == ["organization_reporting_structures"]


async def test_missing_identity_is_401(client, world):
    response = await client.get("/api/v1/users/me")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"


async def test_malformed_identity_is_401(client, world):
    response = await client.get("/api/v1/users/me", headers={"X-User-Id": "not-a-uuid"})
    assert response.status_code == 401


async def test_unknown_user_is_401(client, world):
    response = await client.get("/api/v1/users/me", headers=as_user(uuid.uuid4()))
    assert response.status_code == 401


async def test_suspended_tenant_locks_out_users(client, world, test_db):
    world.tenant.subscription_status = "suspended"
    test_db.add(world.tenant)
    await test_db.commit()

    response = await client.get("/api/v1/users/me", headers=as_user(world.admin.id))
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "TENANT_SUSPENDED"


async def test_expired_trial_locks_out_users(client, world, test_db):
    world.other_tenant.trial_ends_at = datetime.now(timezone.utc) - timedelta(days=1)
    test_db.add(world.other_tenant)
    await test_db.commit()

    response = await client.get("/api/v1/users/me", headers=as_user(world.other_admin.id))
    assert response.status_code == 403


async def test_inactive_organization_locks_out_users(client, world, test_db):
    world.organization.is_active = False
    test_db.add(world.organization)
    await test_db.commit()

    response = await client.get("/api/v1/users/me", headers=as_user(world.employee.id))
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "ORGANIZATION_INACTIVE"


async def test_error_message_localized(client, world):
    response = await client.get(
        f"/api/v1/employees/{uuid.uuid4()}", headers=as_user(world.admin.id, "it-IT,it;q=0.9"),
    )
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "RESOURCE_NOT_FOUND"
    assert error["message"].endswith("non trovato")


async def test_error_envelope_carries_context(client, world):
    response = await client.get(
        f"/api/v1/employees/{uuid.uuid4()}", headers=as_user(world.admin.id),
    )
    error = response.json()["error"]
    assert error["category"] == "resource_not_found"
    assert error["context"]["user_id"] == str(world.admin.id)


async def test_request_validation_envelope(client, world):
    response = await client.post(
        "/api/v1/leave-requests",
        json={"leave_type": "sabbatical", "start_date": "2030-01-07"},
        headers=as_user(world.employee.id),
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    fields = {detail["field"] for detail in error["details"]}
    assert "body.leave_type" in fields
    assert "body.end_date" in fields


async def test_validation_message_localized(client, world):
    response = await client.get(
        "/api/v1/employees?limit=0", headers=as_user(world.admin.id, "it"),
    )
    assert response.status_code == 400
    assert response.json()["error"]["message"] != "Invalid request data"
