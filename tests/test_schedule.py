from datetime import datetime, timedelta, timezone

import pytest

from conftest import API


@pytest.fixture
async def program(client, auth_headers):
    r = await client.post(f"{API}/programs/from-template/stronglifts-5x5", headers=auth_headers)
    assert r.status_code == 201, r.text
    return r.json()


async def test_generate_from_frequency(client, auth_headers, program):
    r = await client.post(
        f"{API}/schedule/generate",
        json={"program_id": program["id"], "start_date": "2030-06-03", "weeks": 2, "scheduled_time": "07:30:00"},
        headers=auth_headers,
    )
    assert r.status_code == 201, r.text
    entries = r.json()
    assert [e["scheduled_date"] for e in entries] == [
        "2030-06-03",
        "2030-06-05",
        "2030-06-07",
        "2030-06-10",
        "2030-06-12",
        "2030-06-14",
    ]
    assert [e["workout_name"] for e in entries[:3]] == ["Workout A", "Workout B", "Workout A"]
    assert all(e["status"] == "Scheduled" and e["program_name"] == "Stronglifts 5x5" for e in entries)

    r = await client.get(
        f"{API}/schedule", params={"from_date": "2030-06-10", "to_date": "2030-06-30"}, headers=auth_headers
    )
    assert len(r.json()) == 3


async def test_custom_weekdays_are_checked(client, auth_headers, program):
    r = await client.post(
        f"{API}/schedule/generate",
        json={"program_id": program["id"], "start_date": "2030-06-03", "weeks": 1, "weekdays": [5, 6]},
        headers=auth_headers,
    )
    assert [e["scheduled_date"] for e in r.json()] == ["2030-06-08", "2030-06-09"]

    r = await client.post(
        f"{API}/schedule/generate",
        json={"program_id": program["id"], "start_date": "2030-06-03", "weekdays": [7]},
        headers=auth_headers,
    )
    assert r.status_code == 400


async def test_entry_lifecycle(client, auth_headers, program):
    r = await client.post(
        f"{API}/schedule",
        json={"program_id": program["id"], "workout_index": 1, "scheduled_date": "2020-03-02", "scheduled_time": "18:00:00"},
        headers=auth_headers,
    )
    assert r.status_code == 201, r.text
    entry = r.json()
    assert entry["workout_name"] == "Workout B"
    assert entry["status"] == "Overdue"

    r = await client.patch(f"{API}/schedule/{entry['id']}", json={"workout_index": 9}, headers=auth_headers)
    assert r.status_code == 400

    r = await client.post(f"{API}/schedule/{entry['id']}/complete", headers=auth_headers)
    assert r.json()["status"] == "Completed"

    r = await client.delete(f"{API}/schedule/{entry['id']}", headers=auth_headers)
    assert r.status_code == 204


async def test_completing_a_linked_workout_completes_the_entry(client, auth_headers, program, exercise):
    entry = (
        await client.post(
            f"{API}/schedule",
            json={"program_id": program["id"], "scheduled_date": "2030-01-07", "scheduled_time": "18:00:00"},
            headers=auth_headers,
        )
    ).json()
    workout = (
        await client.post(f"{API}/workouts", json={"scheduled_workout_id": entry["id"]}, headers=auth_headers)
    ).json()
    await client.post(
        f"{API}/workouts/{workout['id']}/sets",
        json={"exercise_id": exercise["id"], "weight": 60, "reps": 5},
        headers=auth_headers,
    )
    r = await client.post(f"{API}/workouts/{workout['id']}/complete", headers=auth_headers)
    assert r.status_code == 200

    schedule = (await client.get(f"{API}/schedule", headers=auth_headers)).json()
    assert schedule[0]["completed"] is True
    assert schedule[0]["session_id"] == workout["id"]


async def add_entry(client, headers, program_id, at, reminder_minutes=30):
    r = await client.post(
        f"{API}/schedule",
        json={
            "program_id": program_id,
            "scheduled_date": at.date().isoformat(),
            "scheduled_time": at.time().replace(microsecond=0).isoformat(),
            "reminder_minutes": reminder_minutes,
        },
        headers=headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


async def test_calendar_views(client, auth_headers, program):
    now = datetime.now(timezone.utc)
    soon = await add_entry(client, auth_headers, program["id"], now + timedelta(minutes=10))
    later = await add_entry(client, auth_headers, program["id"], now + timedelta(days=3))
    await add_entry(client, auth_headers, program["id"], now - timedelta(days=2))

    r = await client.get(f"{API}/schedule/upcoming", headers=auth_headers)
    assert [e["id"] for e in r.json()] == [soon["id"], later["id"]]

    r = await client.get(f"{API}/schedule/reminders", headers=auth_headers)
    assert [e["id"] for e in r.json()] == [soon["id"]]

    if soon["scheduled_date"] == now.date().isoformat():
        r = await client.get(f"{API}/schedule/today", headers=auth_headers)
        assert [e["id"] for e in r.json()] == [soon["id"]]

    r = await client.get(f"{API}/schedule/week", headers=auth_headers)
    monday = now.date() - timedelta(days=now.weekday())
    week = {(monday + timedelta(days=i)).isoformat() for i in range(7)}
    assert all(e["scheduled_date"] in week for e in r.json())
