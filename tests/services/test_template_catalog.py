"""Template catalog route tests.

Tests cover:
    - Every role with template access browses the catalog; search and category filters
    - Only sysadmins create and edit catalog templates
    - Unknown fields and mistyped values are rejected; the display field is required
    - An edit without a version bumps it
    - Side-by-side comparison lists differing fields
    - HR process kinds (policy documents) are curated the same way
"""

import uuid

from tests.services.helpers import as_user


async def test_employee_browses_catalog(client, world, skill_template):
    response = await client.get("/api/v1/templates/skill", headers=as_user(world.employee.id))
    assert response.status_code == 200
    body = response.json()
    assert body["pagination"]["total"] == 1
    template = body["templates"][0]
    assert template["name"] == "Python"
    assert template["values"]["proficiency_levels"] == ["beginner", "intermediate", "advanced"]


async def test_catalog_search_and_category(client, world, skill_template):
    hit = await client.get(
        "/api/v1/templates/skill?search=PYTH", headers=as_user(world.hr.id),
    )
    assert hit.json()["pagination"]["total"] == 1
    miss = await client.get(
        "/api/v1/templates/skill?category=sales", headers=as_user(world.hr.id),
    )
    assert miss.json()["pagination"]["total"] == 0


async def test_unknown_template_type_rejected(client, world):
    response = await client.get("/api/v1/templates/badge", headers=as_user(world.hr.id))
    assert response.status_code == 400


async def test_sysadmin_creates_job_role(client, world):
    response = await client.post(
        "/api/v1/templates/job_role",
        json={
            "values": {"title": "Backend Engineer", "skills": ["python", "sql"]},
            "category": "engineering",
        },
        headers=as_user(world.sysadmin.id),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Backend Engineer"
    assert body["version"] == "1.0"
    assert body["values"]["skills"] == ["python", "sql"]


async def test_admin_cannot_curate_catalog(client, world):
    response = await client.post(
        "/api/v1/templates/skill", json={"values": {"name": "Go"}},
        headers=as_user(world.admin.id),
    )
    assert response.status_code == 403


async def test_unknown_field_rejected(client, world):
    response = await client.post(
        "/api/v1/templates/skill", json={"values": {"name": "Go", "salary": 1}},
        headers=as_user(world.sysadmin.id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["field"] == "salary"


async def test_display_field_required(client, world):
    response = await client.post(
        "/api/v1/templates/leave_type", json={"values": {"max_days_per_year": 10}},
        headers=as_user(world.sysadmin.id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["field"] == "name"


async def test_update_bumps_version(client, world, skill_template):
    response = await client.patch(
        f"/api/v1/templates/skill/{skill_template.id}",
        json={"values": {"description": "Python 3 programming"}},
        headers=as_user(world.sysadmin.id),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["version"] == "1.1"
    assert body["values"]["description"] == "Python 3 programming"


async def test_deactivated_template_hidden_by_default(client, world, skill_template):
    await client.patch(
        f"/api/v1/templates/skill/{skill_template.id}", json={"is_active": False},
        headers=as_user(world.sysadmin.id),
    )
    active = await client.get("/api/v1/templates/skill", headers=as_user(world.hr.id))
    assert active.json()["pagination"]["total"] == 0
    everything = await client.get(
        "/api/v1/templates/skill?active_only=false", headers=as_user(world.hr.id),
    )
    assert everything.json()["pagination"]["total"] == 1


async def test_missing_template_is_404(client, world):
    response = await client.get(
        f"/api/v1/templates/skill/{uuid.uuid4()}", headers=as_user(world.hr.id),
    )
    assert response.status_code == 404


async def test_compare_templates(client, world, skill_template):
    created = await client.post(
        "/api/v1/templates/skill",
        json={"values": {"name": "Python", "category": "data",
                         "description": "General-purpose programming",
                         "proficiency_levels": ["beginner", "intermediate", "advanced"]}},
        headers=as_user(world.sysadmin.id),
    )
    response = await client.post(
        "/api/v1/templates/skill/compare",
        json={"template_ids": [str(skill_template.id), created.json()["id"]]},
        headers=as_user(world.hr.id),
    )
    assert response.status_code == 200
    assert response.json()["differing_fields"] == ["category"]


async def test_create_rejects_mistyped_value(client, world):
    response = await client.post(
        "/api/v1/templates/leave_type",
        json={"values": {"name": "Sabbatical", "is_paid": "maybe"}},
        headers=as_user(world.sysadmin.id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["field"] == "is_paid"


async def test_update_rejects_null_name(client, world, skill_template):
    response = await client.patch(
        f"/api/v1/templates/skill/{skill_template.id}",
        json={"values": {"name": None}},
        headers=as_user(world.sysadmin.id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["field"] == "name"


async def test_sysadmin_creates_policy_document(client, world):
    response = await client.post(
        "/api/v1/templates/policy_document",
        json={
            "values": {
                "title": "Remote work policy",
                "content": "Employees may work remotely up to three days a week.",
                "policy_category": "workplace",
            },
        },
        headers=as_user(world.sysadmin.id),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Remote work policy"
    assert body["values"]["policy_category"] == "workplace"

    listed = await client.get(
        "/api/v1/templates/policy_document", headers=as_user(world.employee.id),
    )
    assert listed.json()["pagination"]["total"] == 1
