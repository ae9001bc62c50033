"""Tests for the tenant settings endpoints."""

from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from hive.audit.audit_log_repo import AuditLogRepository
from hive.server.main import get_application


@pytest.fixture
async def client(sessionmanager):
    app = get_application()
    app.state.sessionmanager = sessionmanager
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def org(seed):
    org_id = await seed.org()
    roles = {
        role: await seed.member(org_id, role) for role in ("owner", "admin", "member")
    }
    await seed.commit()
    return org_id, roles


def headers(actor_id):
    return {"X-API-Key": "test-admin-key", "X-Actor-Id": str(actor_id)}


async def test_member_reads_settings_and_defaults(client, org):
    org_id, roles = org

    response = await client.get(
        f"/api/admin/orgs/{org_id}/settings", headers=headers(roles["member"])
    )

    assert response.status_code == 200
    body = response.json()
    assert body["settings"] == {
        "modelEnabled": {"openai": True, "gemini": False, "anthropic": False},
        "retentionDays": 90,
        "legalHold": False,
    }
    assert body["defaults"] == body["settings"]


async def test_non_member_cannot_read(client, org):
    org_id, _ = org

    response = await client.get(f"/api/admin/orgs/{org_id}/settings", headers=headers(uuid4()))

    assert response.status_code == 403


async def test_owner_updates_retention_and_each_key_is_audited(client, org, sessionmanager):
    org_id, roles = org

    response = await client.put(
        f"/api/admin/orgs/{org_id}/settings",
        headers=headers(roles["owner"]),
        json={"retentionDays": 120, "legalHold": True},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["settings"]["retentionDays"] == 120
    assert body["settings"]["legalHold"] is True

    async with sessionmanager.session() as session:
        audit = await AuditLogRepository(session).list_for_org(
            org_id, action="tenant_settings.updated"
        )
    assert sorted((entry.meta["key"], entry.meta["value"]) for entry in audit) == [
        ("legalHold", True),
        ("retentionDays", 120),
    ]


async def test_admin_may_toggle_providers(client, org):
    org_id, roles = org

    response = await client.put(
        f"/api/admin/orgs/{org_id}/settings",
        headers=headers(roles["admin"]),
        json={"modelEnabled": {"openai": False, "gemini": True, "anthropic": True}},
    )

    assert response.status_code == 200
    assert response.json()["settings"]["modelEnabled"]["gemini"] is True


async def test_admin_may_not_change_legal_hold(client, org, sessionmanager):
    org_id, roles = org

    response = await client.put(
        f"/api/admin/orgs/{org_id}/settings",
        headers=headers(roles["admin"]),
        json={"legalHold": True},
    )

    assert response.status_code == 403

    async with sessionmanager.session() as session:
        assert await AuditLogRepository(session).list_for_org(org_id) == []


async def test_member_may_not_update(client, org):
    org_id, roles = org

    response = await client.put(
        f"/api/admin/orgs/{org_id}/settings",
        headers=headers(roles["member"]),
        json={"modelEnabled": {"openai": False, "gemini": False, "anthropic": False}},
    )

    assert response.status_code == 403


@pytest.mark.parametrize(
    "body",
    [
        {"retentionDays": 0},
        {"retentionDays": 3651},
        {"retentionDays": "90"},
        {"legalHold": "yes"},
        {"modelEnabled": {"openai": 1, "gemini": False, "anthropic": False}},
        {"modelEnabled": {"openai": True, "gemini": False, "anthropic": False, "mistral": True}},
        {"theme": "dark"},
    ],
)
async def test_invalid_updates_are_rejected(client, org, body):
    org_id, roles = org

    response = await client.put(
        f"/api/admin/orgs/{org_id}/settings", headers=headers(roles["owner"]), json=body
    )

    assert response.status_code == 422


async def test_unknown_org_is_not_found(client):
    response = await client.get(f"/api/admin/orgs/{uuid4()}/settings", headers=headers(uuid4()))

    assert response.status_code == 404
