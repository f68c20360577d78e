from datetime import timedelta

from sqlalchemy import select, update

from conftest import API
from fittrack.core.dates import utcnow
from fittrack.core.enums import UserRole
from fittrack.models.audit import AuditLog
from fittrack.models.user import User
from fittrack.services.privacy import get_privacy_manager, pseudonymize


async def test_consent_flow(client, auth_headers):
    r = await client.post(f"{API}/privacy/consents", json={"consent_type": "analytics", "granted": True}, headers=auth_headers)
    assert r.status_code == 201
    assert r.json()["expires_at"] is not None

    summary = (await client.get(f"{API}/privacy/summary", headers=auth_headers)).json()
    assert summary["consents"]["analytics"] is True
    assert summary["consents"]["essential"] is True
    assert summary["consents"]["marketing"] is False

    r = await client.delete(f"{API}/privacy/consents/analytics", headers=auth_headers)
    assert r.json() == {"consent_type": "analytics", "withdrawn": 1}
    summary = (await client.get(f"{API}/privacy/summary", headers=auth_headers)).json()
    assert summary["consents"]["analytics"] is False

    r = await client.delete(f"{API}/privacy/consents/essential", headers=auth_headers)
    assert r.status_code == 400


async def test_export_request_completes_immediately(client, auth_headers, exercise):
    r = await client.post(f"{API}/privacy/requests", json={"request_type": "export"}, headers=auth_headers)
    assert r.status_code == 201
    body = r.json()
    assert body["status"] == "completed"
    assert "password_hash" not in body["result"]["profile"]
    assert body["result"]["programs"] == []


async def test_rectify_request(client, auth_headers):
    r = await client.post(
        f"{API}/privacy/requests",
        json={"request_type": "rectify", "payload": {"display_name": "Fixed", "email": "ignored@x.io"}},
        headers=auth_headers,
    )
    assert r.json()["result"] == {"updated": ["display_name"]}
    assert (await client.get(f"{API}/auth/me", headers=auth_headers)).json()["display_name"] == "Fixed"

    r = await client.post(
        f"{API}/privacy/requests", json={"request_type": "rectify", "payload": {"email": "x@y.io"}}, headers=auth_headers
    )
    assert r.status_code == 400
    r = await client.post(f"{API}/privacy/requests", json={"request_type": "teleport"}, headers=auth_headers)
    assert r.status_code == 400


async def test_rectify_validates_like_profile_update(client, auth_headers):
    r = await client.post(
        f"{API}/privacy/requests",
        json={"request_type": "rectify", "payload": {"display_name": "<i>Sam</i> onclick=x"}},
        headers=auth_headers,
    )
    assert r.status_code == 201, r.text
    assert (await client.get(f"{API}/auth/me", headers=auth_headers)).json()["display_name"] == "iSam/i x"

    for payload in ({"display_name": "x" * 101}, {"phone": "5" * 40}, {"timezone": None}):
        r = await client.post(
            f"{API}/privacy/requests", json={"request_type": "rectify", "payload": payload}, headers=auth_headers
        )
        assert r.status_code == 400, payload
    assert (await client.get(f"{API}/auth/me", headers=auth_headers)).json()["display_name"] == "iSam/i x"


async def test_delete_request_can_be_cancelled(client, auth_headers):
    r = await client.post(f"{API}/privacy/requests", json={"request_type": "delete"}, headers=auth_headers)
    request = r.json()
    assert request["status"] == "scheduled"
    assert request["scheduled_for"] is not None

    r = await client.post(f"{API}/privacy/requests/{request['id']}/cancel", headers=auth_headers)
    assert r.json()["status"] == "cancelled"
    r = await client.post(f"{API}/privacy/requests/{request['id']}/cancel", headers=auth_headers)
    assert r.status_code == 400


async def test_scheduled_deletion_runs_after_grace_period(client, user, session_maker):
    await client.post(f"{API}/privacy/requests", json={"request_type": "delete"}, headers=user["headers"])

    async with session_maker() as db:
        manager = get_privacy_manager()
        assert (await manager.cleanup_expired_data(db))["deleted_users"] == 0
        summary = await manager.cleanup_expired_data(db, now=utcnow() + timedelta(days=31))
        await db.commit()
    assert summary["deleted_users"] == 1

    async with session_maker() as db:
        assert (await db.execute(select(User).where(User.email == user["email"]))).scalar_one_or_none() is None
        logs = (await db.execute(select(AuditLog).where(AuditLog.user_id.is_(None)))).scalars().all()
        assert any((log.details or {}).get("pseudonym") == pseudonymize(user["id"]) for log in logs)


async def test_status_requires_manage_settings(client, auth_headers, admin_headers, session_maker):
    r = await client.get(f"{API}/privacy/status", headers=auth_headers)
    assert r.status_code == 403
    assert r.json()["detail"] == "Permission denied: manage_settings"

    r = await client.get(f"{API}/privacy/status", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["legal_basis"]["service_provision"] == "contract"

    async with session_maker() as db:
        denied = await db.execute(select(AuditLog).where(AuditLog.event_type == "permission_denied"))
        assert len(denied.scalars().all()) == 1


async def test_guest_is_denied_admin_actions(client, user, session_maker):
    async with session_maker() as db:
        await db.execute(update(User).where(User.email == user["email"]).values(role=UserRole.GUEST))
        await db.commit()
    r = await client.post(f"{API}/privacy/cleanup", headers=user["headers"])
    assert r.status_code == 403


async def test_anonymize_endpoint(client, auth_headers):
    r = await client.post(
        f"{API}/privacy/anonymize",
        json={"record": {"display_name": "Sam", "phone": "5551234", "weight": 80}},
        headers=auth_headers,
    )
    assert r.json() == {"display_name": "Anonymous User", "phone": "*****34", "weight": 80}


async def test_portability_request(client, auth_headers):
    r = await client.post(f"{API}/privacy/requests", json={"request_type": "portability"}, headers=auth_headers)
    assert r.status_code == 201
    result = r.json()["result"]
    assert result["format"] == "json"
    assert result["schema_version"] == "1.0"
    assert "exported_at" in result
