from conftest import API, register

PROGRAM = {
    "name": "Push Day Focus",
    "description": "Heavy pressing",
    "goal": "Strength",
    "difficulty": "Intermediate",
    "frequency": "3x per week",
    "tags": ["push", " strength "],
    "workouts": [
        {
            "name": "Push A",
            "exercises": [
                {"name": "Bench Press", "sets": 5, "reps": "5", "weight": 80, "rest_seconds": 180},
                {"name": "Overhead Press", "sets": 3, "reps": "8-12"},
            ],
        },
        {"name": "Push B", "exercises": [{"name": "Dips", "sets": 3, "reps": "10"}]},
    ],
}


async def create(client, headers, payload=PROGRAM):
    r = await client.post(f"{API}/programs", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


async def test_create_and_read(client, auth_headers):
    program = await create(client, auth_headers)
    assert program["tags"] == ["push", "strength"]
    assert [w["name"] for w in program["workouts"]] == ["Push A", "Push B"]
    assert [e["name"] for e in program["workouts"][0]["exercises"]] == ["Bench Press", "Overhead Press"]
    assert program["workouts"][0]["exercises"][1]["reps"] == "8-12"

    r = await client.get(f"{API}/programs/{program['id']}", headers=auth_headers)
    assert r.status_code == 200
    r = await client.get(f"{API}/programs/by-name/Push Day Focus", headers=auth_headers)
    assert r.json()["id"] == program["id"]
    r = await client.get(f"{API}/programs/search", params={"q": "PRESSING"}, headers=auth_headers)
    assert [p["id"] for p in r.json()] == [program["id"]]


async def test_structure_is_validated(client, auth_headers):
    r = await client.post(f"{API}/programs", json={"name": "Empty"}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == ["Program must have at least one workout"]

    payload = {"name": "Bad", "workouts": [{"name": "Day 1", "exercises": [{"name": "Squat", "sets": 0, "reps": "AMRAP"}]}]}
    r = await client.post(f"{API}/programs", json=payload, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == ['Exercise "Squat" must have at least 1 set', 'Exercise "Squat" must have at least 1 rep']


async def test_update_replaces_workouts(client, auth_headers):
    program = await create(client, auth_headers)
    r = await client.patch(
        f"{API}/programs/{program['id']}",
        json={"name": "Renamed", "workouts": [{"name": "Only", "exercises": [{"name": "Squat", "sets": 5, "reps": "5"}]}]},
        headers=auth_headers,
    )
    assert r.status_code == 200
    assert r.json()["name"] == "Renamed"
    assert [w["name"] for w in r.json()["workouts"]] == ["Only"]

    r = await client.patch(f"{API}/programs/{program['id']}", json={"workouts": []}, headers=auth_headers)
    assert r.status_code == 400


async def test_duplicate_export_import(client, auth_headers):
    program = await create(client, auth_headers)
    r = await client.post(f"{API}/programs/{program['id']}/duplicate", headers=auth_headers)
    assert r.status_code == 201
    assert r.json()["name"] == "Push Day Focus (Copy)"
    assert r.json()["id"] != program["id"]

    exported = (await client.get(f"{API}/programs/{program['id']}/export", headers=auth_headers)).json()
    assert "id" not in exported
    r = await client.post(f"{API}/programs/import", json=exported, headers=auth_headers)
    assert r.status_code == 201
    assert r.json()["is_imported"] is True
    assert len(r.json()["workouts"]) == 2

    stats = (await client.get(f"{API}/programs/stats", headers=auth_headers)).json()
    assert stats["total_programs"] == 3
    assert stats["programs_with_workouts"] == 3


async def test_from_template(client, auth_headers):
    r = await client.post(f"{API}/programs/from-template/5-3-1", headers=auth_headers)
    assert r.status_code == 201
    program = r.json()
    assert program["source_template_id"] == "5-3-1"
    assert program["is_custom"] is False
    assert program["workouts"]

    r = await client.post(f"{API}/programs/from-template/nope", headers=auth_headers)
    assert r.status_code == 404


async def test_delete(client, auth_headers):
    program = await create(client, auth_headers)
    r = await client.delete(f"{API}/programs/{program['id']}", headers=auth_headers)
    assert r.status_code == 204
    r = await client.get(f"{API}/programs/{program['id']}", headers=auth_headers)
    assert r.status_code == 404


async def test_programs_are_private(client, auth_headers):
    program = await create(client, auth_headers)
    other = await register(client)
    r = await client.get(f"{API}/programs/{program['id']}", headers=other["headers"])
    assert r.status_code == 404
    r = await client.get(f"{API}/programs", headers=other["headers"])
    assert r.json() == []


async def test_template_catalog(client):
    r = await client.get(f"{API}/program-templates")
    ids = [t["id"] for t in r.json()]
    for template_id in ("stronglifts-5x5", "starting-strength", "push-pull-legs", "upper-lower", "5-3-1"):
        assert template_id in ids

    r = await client.get(f"{API}/program-templates", params={"goal": "Strength", "difficulty": "Beginner"})
    assert {"stronglifts-5x5", "starting-strength"} <= {t["id"] for t in r.json()}

    r = await client.get(f"{API}/program-templates/popular")
    assert r.json()[0]["id"] == "stronglifts-5x5"

    r = await client.get(f"{API}/program-templates/stronglifts-5x5/variations")
    assert "starting-strength" in [t["id"] for t in r.json()]

    assert (await client.get(f"{API}/program-templates/unknown")).status_code == 404


async def test_recommended_templates(client):
    r = await client.get(
        f"{API}/program-templates/recommended", params={"level": "Beginner", "goal": "strength", "count": 1}
    )
    assert [t["id"] for t in r.json()] == ["stronglifts-5x5"]


async def test_recent_programs(client, auth_headers):
    for name in ("First", "Second", "Third"):
        await create(client, auth_headers, {**PROGRAM, "name": name})
    r = await client.get(f"{API}/programs/recent", params={"limit": 2}, headers=auth_headers)
    assert [p["name"] for p in r.json()] == ["Third", "Second"]


async def test_program_from_completed_session(client, auth_headers, exercise):
    r = await client.post(
        f"{API}/workouts", json={"name": "Friday pump", "started_at": "2026-02-06T18:00:00Z"}, headers=auth_headers
    )
    workout = r.json()
    for order, (weight, reps) in enumerate([(60, 12), (70, 10), (70, 8)]):
        await client.post(
            f"{API}/workouts/{workout['id']}/sets",
            json={"exercise_id": exercise["id"], "weight": weight, "reps": reps, "completed": True, "set_order": order},
            headers=auth_headers,
        )

    r = await client.post(f"{API}/programs/from-session", json={"session_id": workout["id"]}, headers=auth_headers)
    assert r.status_code == 400

    await client.post(f"{API}/workouts/{workout['id']}/complete", headers=auth_headers)
    r = await client.post(
        f"{API}/programs/from-session", json={"session_id": workout["id"], "name": "Pump"}, headers=auth_headers
    )
    assert r.status_code == 201, r.text
    program = r.json()
    assert program["name"] == "Pump"
    assert program["tags"] == ["from-workout"]
    assert program["description"] == "Created from workout on 2026-02-06"
    [saved] = program["workouts"][0]["exercises"]
    assert (saved["name"], saved["sets"], saved["reps"], saved["weight"]) == ("Bench Press", 3, "10", 70)


async def test_program_progress(client, auth_headers):
    program = (await client.post(f"{API}/programs/from-template/stronglifts-5x5", headers=auth_headers)).json()
    r = await client.post(
        f"{API}/workouts/from-program", json={"program_id": program["id"], "workout_index": 0}, headers=auth_headers
    )
    session = r.json()
    first = session["sets"][0]
    await client.patch(
        f"{API}/workouts/{session['id']}/sets/{first['id']}",
        json={"weight": 100, "reps": 5, "completed": True},
        headers=auth_headers,
    )
    r = await client.post(f"{API}/workouts/{session['id']}/complete", headers=auth_headers)
    assert r.status_code == 200, r.text

    r = await client.get(f"{API}/programs/{program['id']}/progress", headers=auth_headers)
    progress = r.json()
    assert progress["sessions_completed"] == 1
    assert [w["completed"] for w in progress["workouts"]] == [1, 0]
    assert progress["adherence"] == 0
    assert [(e["best_weight"], e["estimated_one_rep_max"]) for e in progress["exercises"]] == [(100, 116.67)]
    assert progress["total_volume"] == 500
