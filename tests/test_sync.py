from conftest import API, register

WORKOUT = {
    "offline_id": "phone-42",
    "name": "Garage session",
    "started_at": "2026-02-01T08:00:00Z",
    "sets": [{"exercise_name": "Goblet Squat", "weight": 24, "reps": 10}],
}


async def test_workout_upsert_by_offline_id(client, auth_headers):
    r = await client.post(f"{API}/sync/workouts", json=WORKOUT, headers=auth_headers)
    assert r.status_code == 200, r.text
    created = r.json()
    assert created["success"] is True
    assert created["action"] == "created"

    again = {**WORKOUT, "sets": WORKOUT["sets"] + [{"exercise_name": "goblet squat", "weight": 28, "reps": 8}]}
    r = await client.post(f"{API}/sync/workouts", json=again, headers=auth_headers)
    assert r.json()["action"] == "updated"
    assert r.json()["id"] == created["id"]

    detail = (await client.get(f"{API}/workouts/{created['id']}", headers=auth_headers)).json()
    assert [s["weight"] for s in detail["sets"]] == [24, 28]
    assert detail["sets"][0]["exercise_id"] == detail["sets"][1]["exercise_id"]
    assert detail["offline_id"] == "phone-42"

    status = (await client.get(f"{API}/sync/workouts/phone-42", headers=auth_headers)).json()
    assert status["exists"] is True
    assert status["id"] == created["id"]
    by_id = (await client.get(f"{API}/sync/workouts/{created['id']}", headers=auth_headers)).json()
    assert by_id["exists"] is True
    assert (await client.get(f"{API}/sync/workouts/unknown", headers=auth_headers)).json() == {
        "exists": False,
        "id": None,
        "synced_at": None,
        "last_modified": None,
    }


async def test_set_without_exercise_is_rejected(client, auth_headers):
    r = await client.post(f"{API}/sync/workouts", json={"offline_id": "x", "sets": [{"reps": 5}]}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Set 1 needs exercise_name or exercise_id"


async def test_program_upsert(client, auth_headers):
    program = {
        "offline_id": "prog-1",
        "name": "Travel plan",
        "workouts": [{"name": "Hotel gym", "exercises": [{"name": "Push-ups", "sets": 3, "reps": "15"}]}],
    }
    r = await client.post(f"{API}/sync/programs", json=program, headers=auth_headers)
    assert r.json()["action"] == "created"
    r = await client.post(f"{API}/sync/programs", json={**program, "name": "Travel plan v2"}, headers=auth_headers)
    assert r.json()["action"] == "updated"

    programs = (await client.get(f"{API}/programs", headers=auth_headers)).json()
    assert [p["name"] for p in programs] == ["Travel plan v2"]

    r = await client.post(f"{API}/sync/programs", json={"offline_id": "prog-2", "name": "Empty"}, headers=auth_headers)
    assert r.status_code == 400


async def test_batch_continues_after_failures(client, auth_headers):
    r = await client.post(
        f"{API}/sync/batch",
        json={
            "items": [
                {"kind": "workout", "payload": WORKOUT},
                {"kind": "program", "payload": {"name": "No workouts"}},
                {"kind": "workout", "payload": {"offline_id": "broken"}},
                {"kind": "workout", "payload": {**WORKOUT, "offline_id": "phone-43"}},
            ]
        },
        headers=auth_headers,
    )
    assert r.status_code == 200
    body = r.json()
    assert (body["processed"], body["succeeded"], body["failed"]) == (4, 2, 2)
    assert [item["success"] for item in body["results"]] == [True, False, False, True]
    assert body["results"][1]["error"] == "Program must have at least one workout"


async def test_batch_item_conflict_does_not_undo_the_others(client, auth_headers):
    other = await register(client)
    r = await client.post(
        f"{API}/workouts", json={"name": "Not yours", "started_at": "2026-02-01T10:00:00Z"}, headers=other["headers"]
    )
    taken_id = r.json()["id"]

    r = await client.post(
        f"{API}/sync/batch",
        json={
            "items": [
                {"kind": "workout", "payload": WORKOUT},
                {"kind": "workout", "payload": {"id": taken_id, "name": "Hijack", "sets": []}},
                {"kind": "workout", "payload": {**WORKOUT, "offline_id": "phone-44"}},
            ]
        },
        headers=auth_headers,
    )
    assert r.status_code == 200, r.text
    results = r.json()["results"]
    assert [item["success"] for item in results] == [True, False, True]
    assert results[1]["error"] == "The record conflicts with existing data."

    for key in ("phone-42", "phone-44"):
        status = (await client.get(f"{API}/sync/workouts/{key}", headers=auth_headers)).json()
        assert status["exists"] is True
    r = await client.get(f"{API}/workouts/{taken_id}", headers=other["headers"])
    assert r.json()["name"] == "Not yours"


async def test_failed_item_leaves_no_exercises_behind(client, auth_headers):
    missing = "00000000-0000-0000-0000-000000000000"
    unnamed = {"offline_id": "a", "sets": [{"exercise_name": "Zercher Squat"}, {"reps": 5}]}
    unknown = {"offline_id": "b", "sets": [{"exercise_name": "Jefferson Curl"}, {"exercise_id": missing}]}
    r = await client.post(
        f"{API}/sync/batch",
        json={"items": [{"kind": "workout", "payload": unnamed}, {"kind": "workout", "payload": unknown}]},
        headers=auth_headers,
    )
    results = r.json()["results"]
    assert [item["error"] for item in results] == [
        "Set 2 needs exercise_name or exercise_id",
        f"Exercise {missing} not found",
    ]
    for name in ("Zercher", "Jefferson"):
        r = await client.get(f"{API}/exercises", params={"q": name}, headers=auth_headers)
        assert r.json() == []
    assert (await client.get(f"{API}/sync/workouts/b", headers=auth_headers)).json()["exists"] is False


async def test_synced_text_is_sanitized(client, auth_headers):
    payload = {
        "offline_id": "dirty",
        "name": "<b onclick=x>Leg day</b>",
        "notes": "javascript:alert(1)",
        "sets": [{"exercise_name": "Leg Press", "weight": 100, "reps": 10, "notes": "<script>"}],
    }
    r = await client.post(f"{API}/sync/workouts", json=payload, headers=auth_headers)
    detail = (await client.get(f"{API}/workouts/{r.json()['id']}", headers=auth_headers)).json()
    assert detail["name"] == "b xLeg day/b"
    assert detail["notes"] == "alert(1)"
    assert detail["sets"][0]["notes"] == "script"


async def test_first_of_identical_synced_sets_is_a_pr(client, auth_headers):
    snatch = {"exercise_name": "Snatch", "weight": 50, "reps": 3}
    r = await client.post(
        f"{API}/sync/workouts", json={"offline_id": "oly", "sets": [snatch, snatch]}, headers=auth_headers
    )
    detail = (await client.get(f"{API}/workouts/{r.json()['id']}", headers=auth_headers)).json()
    assert [s["is_pr"] for s in detail["sets"]] == [True, False]
    assert detail["sets"][0]["pr_type"] == "weight"

    exercise_id = detail["sets"][0]["exercise_id"]
    r = await client.get(f"{API}/records", params={"exercise_id": exercise_id}, headers=auth_headers)
    assert [rec["value"] for rec in r.json()] == [50]
