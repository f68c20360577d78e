import pytest

from conftest import API, register


async def grant_analytics(client, headers):
    r = await client.post(
        f"{API}/privacy/consents", json={"consent_type": "analytics", "granted": True}, headers=headers
    )
    assert r.status_code == 201, r.text


async def test_health(client):
    assert (await client.get("/")).json() == {"status": "ok", "message": "FitTrack API"}
    assert (await client.get(f"{API}/health")).json()["status"] == "ok"
    assert (await client.get(f"{API}/health/ready")).json() == {"status": "ok", "database": "connected"}


async def test_backup_round_trip(client, auth_headers, exercise):
    r = await client.post(
        f"{API}/goals",
        json={"title": "Ten pull-ups", "category": "custom", "target": 10, "current": 4},
        headers=auth_headers,
    )
    assert r.status_code == 201, r.text
    await client.post(f"{API}/body", json={"weight": 80, "measured_at": "2026-02-01T07:00:00Z"}, headers=auth_headers)
    r = await client.post(
        f"{API}/workouts", json={"name": "Push", "started_at": "2026-02-01T10:00:00Z"}, headers=auth_headers
    )
    workout = r.json()
    await client.post(
        f"{API}/workouts/{workout['id']}/sets",
        json={"exercise_id": exercise["id"], "weight": 70, "reps": 8, "completed": True},
        headers=auth_headers,
    )

    r = await client.get(f"{API}/data/export", headers=auth_headers)
    assert r.status_code == 200
    backup = r.json()
    assert "password_hash" not in backup["profile"]
    assert backup["workout_sessions"][0]["sets"][0]["exercise_name"] == "Bench Press"

    other = await register(client)
    r = await client.post(f"{API}/data/import", json=backup, headers=other["headers"])
    assert r.json() == {"programs": 0, "goals": 1, "body_measurements": 1, "workout_sessions": 1, "skipped": 0}

    r = await client.get(f"{API}/workouts", headers=other["headers"])
    restored = r.json()[0]
    assert restored["name"] == "Push"
    r = await client.get(f"{API}/workouts/{restored['id']}", headers=other["headers"])
    assert r.json()["sets"][0]["exercise"]["name"] == "Bench Press"
    assert r.json()["sets"][0]["exercise_id"] != exercise["id"]

    r = await client.get(f"{API}/security/audit-logs", params={"event_type": "data_access"}, headers=auth_headers)
    assert [log["details"]["action"] for log in r.json()] == ["export"]


async def test_encrypted_backup(client, auth_headers):
    await client.post(f"{API}/body", json={"weight": 75}, headers=auth_headers)
    r = await client.get(f"{API}/data/export", params={"encrypted": True}, headers=auth_headers)
    envelope = r.json()
    assert envelope["encrypted"] is True
    assert envelope["sensitivity"] == "restricted"

    other = await register(client)
    r = await client.post(f"{API}/data/import", json=envelope, headers=other["headers"])
    assert r.json()["body_measurements"] == 1

    envelope["data"] = envelope["data"][:-8] + "AAAAAAAA"
    r = await client.post(f"{API}/data/import", json=envelope, headers=other["headers"])
    assert r.status_code == 400


async def test_invalid_backup_items_are_skipped(client, auth_headers):
    backup = {
        "programs": [{"name": "", "workouts": []}],
        "goals": [{"title": "No category", "target": 5}],
        "body_measurements": [{"weight": 70, "measured_at": "yesterday"}],
    }
    r = await client.post(f"{API}/data/import", json=backup, headers=auth_headers)
    assert r.json() == {"programs": 0, "goals": 0, "body_measurements": 0, "workout_sessions": 0, "skipped": 3}


async def test_cache_controls(client, auth_headers):
    await client.get(f"{API}/analytics/stats", headers=auth_headers)
    await client.get(f"{API}/analytics/stats", headers=auth_headers)
    metrics = (await client.get(f"{API}/data/cache", headers=auth_headers)).json()
    assert metrics["hits"] >= 1
    assert metrics["size"] >= 1

    r = await client.delete(f"{API}/data/cache", headers=auth_headers)
    assert r.json() == {"cleared": 1}

    r = await client.get(f"{API}/data/performance", headers=auth_headers)
    assert set(r.json()["requests"]) == {"count", "average_ms", "p95_ms", "max_ms", "error_rate"}


async def test_validate_record(client, auth_headers):
    r = await client.post(
        f"{API}/data/validate",
        json={"data_type": "goal", "data": {"title": "  Squat 200  ", "target": -5}},
        headers=auth_headers,
    )
    assert r.json() == {
        "is_valid": False,
        "errors": ["Missing required field: category"],
        "sanitized": {"title": "Squat 200", "target": 0},
    }


async def test_security_status_and_password_strength(client, auth_headers):
    r = await client.get(f"{API}/security/status", headers=auth_headers)
    status = r.json()
    assert status["role"] == "user"
    assert status["locked"] is False
    assert status["password_age_days"] == 0
    assert "view_analytics" in status["permissions"]

    r = await client.post(f"{API}/security/password-strength", json={"password": "Str0ng!Passw0rd"})
    assert r.json() == {"is_valid": True, "errors": [], "score": 100, "strength": "strong"}


async def test_encrypt_endpoints(client, auth_headers):
    r = await client.post(f"{API}/security/encrypt", json={"value": {"weight": 90}}, headers=auth_headers)
    envelope = r.json()
    assert envelope["encrypted"] is True
    assert envelope["sensitivity"] == "confidential"

    r = await client.post(f"{API}/security/decrypt", json={"envelope": envelope}, headers=auth_headers)
    assert r.json() == {"value": {"weight": 90}}

    r = await client.post(f"{API}/security/decrypt", json={"envelope": {"encrypted": True}}, headers=auth_headers)
    assert r.status_code == 400

    r = await client.post(f"{API}/security/key-strength", json={"key": "abc"}, headers=auth_headers)
    assert r.json()["strength"] == "weak"


async def test_encryption_admin(client, auth_headers, admin_headers):
    r = await client.get(f"{API}/security/encryption/status", headers=auth_headers)
    assert r.status_code == 403

    r = await client.get(f"{API}/security/encryption/status", headers=admin_headers)
    version = r.json()["key_version"]
    envelope = (await client.post(f"{API}/security/encrypt", json={"value": "kept"}, headers=admin_headers)).json()

    r = await client.post(f"{API}/security/encryption/rotate", headers=admin_headers)
    assert r.json() == {"key_version": version + 1}
    r = await client.post(f"{API}/security/decrypt", json={"envelope": envelope}, headers=admin_headers)
    assert r.json() == {"value": "kept"}


async def test_role_management(client, user, auth_headers, admin_headers):
    r = await client.put(f"{API}/security/users/{user['id']}/role", json={"role": "moderator"}, headers=auth_headers)
    assert r.status_code == 403

    r = await client.put(
        f"{API}/security/users/{user['id']}/role", json={"role": "moderator"}, headers=admin_headers
    )
    assert r.status_code == 200, r.text
    assert r.json()["role"] == "moderator"

    me = (await client.get(f"{API}/auth/me", headers=admin_headers)).json()
    r = await client.put(f"{API}/security/users/{me['id']}/role", json={"role": "user"}, headers=admin_headers)
    assert r.status_code == 400

    r = await client.get(
        f"{API}/security/audit-logs",
        params={"event_type": "security_setting_change", "user_id": me["id"]},
        headers=admin_headers,
    )
    assert r.json()[0]["details"] == {"target_user": user["id"], "from_role": "user", "to_role": "moderator"}


async def test_admin_unlocks_account(client, user, admin_headers):
    for _ in range(5):
        await client.post(f"{API}/auth/login", json={"email": user["email"], "password": "Wr0ng!Pass"})
    r = await client.post(f"{API}/auth/login", json={"email": user["email"], "password": "Str0ng!Pass"})
    assert r.status_code == 423

    r = await client.post(f"{API}/security/users/{user['id']}/unlock", headers=admin_headers)
    assert r.status_code == 200
    r = await client.post(f"{API}/auth/login", json={"email": user["email"], "password": "Str0ng!Pass"})
    assert r.status_code == 200


async def test_events_need_analytics_consent(client, auth_headers):
    batch = {"events": [{"event_type": "page_view", "properties": {"page": "/history"}}, {"event_type": "button_click"}]}
    r = await client.post(f"{API}/events", json=batch, headers=auth_headers)
    assert r.json() == {"accepted": 0, "dropped": 2}

    await grant_analytics(client, auth_headers)
    r = await client.post(f"{API}/events", json=batch, headers=auth_headers)
    assert r.json() == {"accepted": 2, "dropped": 0}

    r = await client.get(f"{API}/events/summary", headers=auth_headers)
    assert r.json()["by_type"] == {"page_view": 1, "button_click": 1}

    r = await client.post(f"{API}/events", json={"events": []}, headers=auth_headers)
    assert r.status_code == 422


async def test_completion_is_tracked_with_consent(client, auth_headers, exercise):
    await grant_analytics(client, auth_headers)
    r = await client.post(
        f"{API}/workouts", json={"name": "Tracked", "started_at": "2026-02-01T10:00:00Z"}, headers=auth_headers
    )
    workout = r.json()
    await client.post(
        f"{API}/workouts/{workout['id']}/sets",
        json={"exercise_id": exercise["id"], "weight": 50, "reps": 10, "completed": True},
        headers=auth_headers,
    )
    await client.post(f"{API}/workouts/{workout['id']}/complete", headers=auth_headers)

    r = await client.get(f"{API}/events/summary", headers=auth_headers)
    by_type = r.json()["by_type"]
    assert by_type["workout_complete"] == 1
    assert by_type["achievement_unlock"] >= 1


async def test_integration_health_check(client, auth_headers):
    r = await client.post(f"{API}/integration/health-check", headers=auth_headers)
    status = r.json()
    assert status["overall"] in ("healthy", "degraded")
    assert status["components"]["database"]["status"] == "healthy"
    assert status["components"]["encryption"]["status"] == "healthy"
    assert status["components"]["security"]["details"] == {"password_policy": True, "role_permissions": True}

    r = await client.get(f"{API}/integration/status", headers=auth_headers)
    assert r.json()["listeners"]["workout.completed"] == 2


async def test_performance_report(client, auth_headers, admin_headers):
    await client.get(f"{API}/health")
    r = await client.get(f"{API}/performance/report", headers=auth_headers)
    assert r.json()["count"] >= 1
    assert "X-Response-Time-Ms" in r.headers

    r = await client.delete(f"{API}/performance", headers=auth_headers)
    assert r.status_code == 403
    r = await client.delete(f"{API}/performance", headers=admin_headers)
    assert r.status_code == 204


@pytest.mark.parametrize("categories,total", [(["unit"], 4), (["unit", "security"], 7), ([], 10)])
async def test_diagnostics(client, admin_headers, categories, total):
    r = await client.post(f"{API}/diagnostics/run", json={"categories": categories}, headers=admin_headers)
    summary = r.json()["summary"]
    assert summary["total"] == total
    assert summary["passed"] == total
    assert summary["pass_rate"] == 100.0


async def test_diagnostics_need_manage_settings(client, auth_headers):
    r = await client.post(f"{API}/diagnostics/run", headers=auth_headers)
    assert r.status_code == 403
