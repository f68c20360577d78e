from conftest import API, PASSWORD, register


async def test_register_and_me(client):
    r = await client.post(
        f"{API}/auth/register",
        json={"email": "Sam@FitTrack.app", "password": PASSWORD, "display_name": "Sam", "timezone": "Europe/Berlin"},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["email"] == "sam@fittrack.app"
    assert body["role"] == "user"
    assert "password_hash" not in body

    r = await client.post(f"{API}/auth/login", json={"email": "sam@fittrack.app", "password": PASSWORD})
    assert r.status_code == 200
    token = r.json()
    assert token["token_type"] == "bearer"
    assert token["expires_in"] == 30 * 60

    r = await client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token['access_token']}"})
    assert r.status_code == 200
    assert r.json()["timezone"] == "Europe/Berlin"
    assert r.json()["last_login_at"] is not None


async def test_login_with_form(client, user):
    r = await client.post(f"{API}/auth/login", data={"username": user["email"], "password": PASSWORD})
    assert r.status_code == 200
    assert r.json()["access_token"]


async def test_duplicate_email(client, user):
    r = await client.post(f"{API}/auth/register", json={"email": user["email"].upper(), "password": PASSWORD})
    assert r.status_code == 409


async def test_weak_password_rejected(client):
    r = await client.post(f"{API}/auth/register", json={"email": "weak@fittrack.app", "password": "password"})
    assert r.status_code == 400
    assert "Password must contain at least one uppercase letter" in r.json()["detail"]


async def test_unknown_timezone_rejected(client):
    r = await client.post(
        f"{API}/auth/register",
        json={"email": "tz@fittrack.app", "password": PASSWORD, "timezone": "Mars/Olympus"},
    )
    assert r.status_code == 400


async def test_requires_token(client):
    assert (await client.get(f"{API}/auth/me")).status_code == 401
    r = await client.get(f"{API}/auth/me", headers={"Authorization": "Bearer nonsense"})
    assert r.status_code == 401


async def test_lockout_after_repeated_failures(client, user):
    for _ in range(5):
        r = await client.post(f"{API}/auth/login", json={"email": user["email"], "password": "Wrong!Pass1"})
        assert r.status_code == 401
    r = await client.post(f"{API}/auth/login", json={"email": user["email"], "password": PASSWORD})
    assert r.status_code == 423
    assert "Account locked" in r.json()["detail"]


async def test_update_profile(client, auth_headers):
    r = await client.patch(f"{API}/auth/me", json={"display_name": "Coach", "timezone": "Asia/Tokyo"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["display_name"] == "Coach"
    assert r.json()["timezone"] == "Asia/Tokyo"
    r = await client.patch(f"{API}/auth/me", json={"timezone": None}, headers=auth_headers)
    assert r.status_code == 400


async def test_change_password(client, user):
    headers = user["headers"]
    r = await client.post(
        f"{API}/auth/change-password",
        json={"current_password": "nope", "new_password": "N3w!Password"},
        headers=headers,
    )
    assert r.status_code == 400
    r = await client.post(
        f"{API}/auth/change-password",
        json={"current_password": PASSWORD, "new_password": "N3w!Password"},
        headers=headers,
    )
    assert r.status_code == 204
    r = await client.post(f"{API}/auth/login", json={"email": user["email"], "password": "N3w!Password"})
    assert r.status_code == 200


async def test_users_are_isolated(client, exercise):
    other = await register(client)
    r = await client.get(f"{API}/exercises/{exercise['id']}", headers=other["headers"])
    assert r.status_code == 404


async def test_logout_is_audited(client, auth_headers):
    r = await client.post(f"{API}/auth/logout", headers=auth_headers)
    assert r.status_code == 204
    r = await client.get(f"{API}/security/audit-logs", params={"event_type": "logout"}, headers=auth_headers)
    assert len(r.json()) == 1
