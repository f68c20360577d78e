from datetime import datetime, timedelta, timezone

import pytest

from conftest import API


async def finish_workout(client, headers, exercise_id, sets, name="Bench day"):
    """Create a workout with completed `(weight, reps)` sets and complete it."""
    started_at = (datetime.now(timezone.utc) - timedelta(hours=1)).isoformat()
    r = await client.post(f"{API}/workouts", json={"name": name, "started_at": started_at}, headers=headers)
    assert r.status_code == 201, r.text
    workout = r.json()
    for order, (weight, reps) in enumerate(sets):
        r = await client.post(
            f"{API}/workouts/{workout['id']}/sets",
            json={"exercise_id": exercise_id, "weight": weight, "reps": reps, "completed": True, "set_order": order},
            headers=headers,
        )
        assert r.status_code == 201, r.text
    r = await client.post(f"{API}/workouts/{workout['id']}/complete", headers=headers)
    assert r.status_code == 200, r.text
    return r.json()["workout"]


async def test_manual_records(client, auth_headers, exercise):
    r = await client.post(
        f"{API}/records",
        json={"exercise_id": exercise["id"], "record_type": "weight", "weight": 140, "reps": 1, "notes": "gym meet"},
        headers=auth_headers,
    )
    assert r.status_code == 201, r.text
    record = r.json()
    assert record["value"] == 140
    assert record["one_rep_max"] == 140
    assert record["exercise"]["name"] == "Bench Press"

    r = await client.post(
        f"{API}/records", json={"exercise_id": exercise["id"], "record_type": "volume"}, headers=auth_headers
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "A volume record needs a positive value"

    r = await client.get(f"{API}/records/best", headers=auth_headers)
    assert r.json()[0]["max_weight"] == 140
    assert r.json()[0]["best_one_rep_max"] == 140

    r = await client.get(f"{API}/records/trophy-room", headers=auth_headers)
    room = r.json()
    assert room["period"] == "month"
    assert room["count"] == 1
    assert room["by_type"]["weight"] == 1

    r = await client.delete(f"{API}/records/{record['id']}", headers=auth_headers)
    assert r.status_code == 204
    r = await client.delete(f"{API}/records/{record['id']}", headers=auth_headers)
    assert r.status_code == 404


async def test_records_from_completed_workout(client, auth_headers, exercise):
    await finish_workout(client, auth_headers, exercise["id"], [(100, 5), (100, 6)])
    r = await client.get(f"{API}/records", params={"record_type": "weight"}, headers=auth_headers)
    assert [rec["weight"] for rec in r.json()] == [100]
    r = await client.get(f"{API}/records", params={"exercise_id": exercise["id"]}, headers=auth_headers)
    assert len(r.json()) == 2


async def test_streak_after_workout(client, auth_headers, exercise):
    r = await client.get(f"{API}/streak", headers=auth_headers)
    empty = r.json()
    assert empty["current_streak"] == 0
    assert empty["last_workout_date"] is None
    assert len(empty["history"]) == 30

    await finish_workout(client, auth_headers, exercise["id"], [(60, 10)])
    r = await client.get(f"{API}/streak", headers=auth_headers)
    report = r.json()
    assert report["current_streak"] == 1
    assert report["total_workouts"] == 1
    assert report["days_since_last_workout"] == 0
    assert report["history"][-1]["has_workout"] is True


async def test_achievement_endpoints(client, auth_headers, exercise):
    r = await client.get(f"{API}/achievements", params={"unlocked": True}, headers=auth_headers)
    assert r.json() == []

    await finish_workout(client, auth_headers, exercise["id"], [(60, 10)])

    r = await client.get(f"{API}/achievements", params={"unlocked": True}, headers=auth_headers)
    ids = {a["id"] for a in r.json()}
    assert "first-workout" in ids
    assert all(a["unlocked_at"] for a in r.json())

    r = await client.get(f"{API}/achievements/recent", params={"count": 1}, headers=auth_headers)
    assert len(r.json()) == 1

    r = await client.get(f"{API}/achievements/summary", headers=auth_headers)
    assert r.json()["unlocked"] == len(ids)
    assert r.json()["total_xp"] >= 100

    # Already unlocked on completion
    r = await client.post(f"{API}/achievements/evaluate", headers=auth_headers)
    assert r.json() == {"unlocked": [], "count": 0}


async def test_insights_are_refreshed_after_writes(client, auth_headers, exercise):
    r = await client.get(f"{API}/insights", headers=auth_headers)
    assert r.json()["stats"] is None
    assert r.json()["trends"] == []

    await finish_workout(client, auth_headers, exercise["id"], [(80, 5)])
    r = await client.get(f"{API}/insights", headers=auth_headers)
    assert r.json()["stats"]["total_workouts"] == 1
    assert r.json()["trends"][0]["exercise"] == "Bench Press"


async def test_body_measurements(client, auth_headers):
    r = await client.get(f"{API}/body/latest", headers=auth_headers)
    assert r.status_code == 404

    r = await client.post(
        f"{API}/body",
        json={"weight": 82.5, "body_fat": 18, "measurements": {"waist": 84}, "measured_at": "2026-03-01T08:00:00Z"},
        headers=auth_headers,
    )
    assert r.status_code == 201, r.text
    first = r.json()
    r = await client.post(
        f"{API}/body", json={"weight": 81, "measured_at": "2026-03-08T08:00:00Z"}, headers=auth_headers
    )
    second = r.json()

    r = await client.get(f"{API}/body/latest", headers=auth_headers)
    assert r.json()["id"] == second["id"]

    r = await client.patch(f"{API}/body/{first['id']}", json={"notes": "<b>morning</b>"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["notes"] == "bmorning/b"
    assert r.json()["measurements"] == {"waist": 84}

    r = await client.patch(f"{API}/body/{first['id']}", json={"measured_at": None}, headers=auth_headers)
    assert r.status_code == 400

    r = await client.post(f"{API}/body", json={"body_fat": 150}, headers=auth_headers)
    assert r.status_code == 422

    r = await client.delete(f"{API}/body/{first['id']}", headers=auth_headers)
    assert r.status_code == 204
    r = await client.get(f"{API}/body", headers=auth_headers)
    assert [m["id"] for m in r.json()] == [second["id"]]


async def test_analytics(client, auth_headers, exercise):
    old = await finish_workout(client, auth_headers, exercise["id"], [(100, 5)])
    new = await finish_workout(client, auth_headers, exercise["id"], [(110, 5)])

    r = await client.get(f"{API}/analytics/one-rm/{exercise['id']}", headers=auth_headers)
    history = r.json()["history"]
    assert [h["weight"] for h in history] == [100, 110]
    assert history[0]["epley"] == 116.67
    assert history[0]["brzycki"] == 112.5
    assert r.json()["best"]["weight"] == 110

    r = await client.get(f"{API}/analytics/tonnage", headers=auth_headers)
    assert r.json()["total_volume"] == 1050

    r = await client.get(f"{API}/analytics/consistency", headers=auth_headers)
    assert r.json()["total_workouts"] == 2
    assert r.json()["active_days"] == 1

    r = await client.get(f"{API}/analytics/consistency", params={"year": 1999}, headers=auth_headers)
    assert r.json()["days"] == {}

    r = await client.get(f"{API}/analytics/exercise-progress/{exercise['id']}", headers=auth_headers)
    assert [p["one_rep_max"] for p in r.json()["points"]] == [116.67, 128.33]

    r = await client.get(
        f"{API}/analytics/compare",
        params={"old_session_id": old["id"], "new_session_id": new["id"], "exercise_id": exercise["id"]},
        headers=auth_headers,
    )
    compare = r.json()
    assert compare["weight_improvement"] == 10
    assert compare["volume_improvement"] == 50
    assert compare["one_rep_max_improvement"] == 11.67

    r = await client.get(f"{API}/analytics/category-volume", headers=auth_headers)
    assert r.json() == {"Chest": 1050}

    r = await client.get(f"{API}/analytics/stats", headers=auth_headers)
    stats = r.json()
    assert stats["total_workouts"] == 2
    assert stats["logged_sets"] == 2
    assert stats["personal_records"] >= 2


async def test_analytics_unknown_exercise(client, auth_headers):
    r = await client.get(
        f"{API}/analytics/one-rm/00000000-0000-0000-0000-000000000000", headers=auth_headers
    )
    assert r.status_code == 404


async def test_plate_calculator(client):
    r = await client.post(f"{API}/tools/plate-calculator", json={"target_weight": 100})
    assert r.json() == {
        "bar_weight": 20,
        "target_weight": 100,
        "plates": [20, 20],
        "per_side": 40,
        "total": 100,
        "remainder": 0,
    }
    r = await client.post(f"{API}/tools/plate-calculator", json={"target_weight": 135, "unit": "lb"})
    assert r.json()["plates"] == [45]

    r = await client.post(
        f"{API}/tools/plate-calculator", json={"target_weight": 100, "available_plates": [10, -5]}
    )
    assert r.status_code == 400


async def test_one_rep_max_calculator(client):
    r = await client.get(f"{API}/tools/one-rep-max", params={"weight": 100, "reps": 5})
    assert r.json() == {"weight": 100, "reps": 5, "epley": 116.67, "brzycki": 112.5}
    r = await client.get(f"{API}/tools/one-rep-max", params={"weight": 100, "reps": 0})
    assert r.status_code == 422


@pytest.mark.parametrize(
    "params,expected",
    [
        ({"name": "Barbell Back Squat"}, 180),
        ({"name": "Side Plank", "category": "Core"}, 45),
        ({"name": "Farmer Walk"}, 90),
    ],
)
async def test_rest_suggestion_by_name(client, auth_headers, params, expected):
    r = await client.get(f"{API}/tools/rest-suggestion", params=params, headers=auth_headers)
    assert r.json()["rest_seconds"] == expected


async def test_rest_suggestion_by_exercise(client, auth_headers, exercise):
    r = await client.get(f"{API}/tools/rest-suggestion", params={"exercise_id": exercise["id"]}, headers=auth_headers)
    assert r.json() == {"exercise_id": exercise["id"], "name": "Bench Press", "rest_seconds": 180}
    r = await client.get(f"{API}/tools/rest-suggestion", headers=auth_headers)
    assert r.status_code == 400


async def test_plateau_alerts(client, auth_headers, exercise):
    for _ in range(3):
        await finish_workout(client, auth_headers, exercise["id"], [(100, 5)])
    r = await client.get(f"{API}/tools/plateaus", headers=auth_headers)
    assert r.json() == []

    await finish_workout(client, auth_headers, exercise["id"], [(100, 5)])
    r = await client.get(f"{API}/tools/plateaus", headers=auth_headers)
    assert r.json() == [
        {"exercise_id": exercise["id"], "exercise_name": "Bench Press", "sessions_without_improvement": 3}
    ]
