from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from uuid import uuid4

from conftest import make_session, make_set
from fittrack.services.insights import body_trends, build_insights, generate_insights, workout_stats

NOW = datetime(2026, 6, 30, 12, 0, tzinfo=timezone.utc)
BENCH = uuid4()


def history():
    """Eight sessions two days apart, newest first; the newest four are heavier."""
    sessions = []
    for i in range(8):
        ended = NOW - timedelta(days=2 * (i + 1))
        weight = 100 if i < 4 else 80
        sessions.append(
            make_session(
                [make_set(BENCH, weight, 10)],
                started_at=ended - timedelta(minutes=60),
                ended_at=ended,
                completed_at=ended,
            )
        )
    return sessions


def measurement(days_ago, weight, body_fat, muscle_mass):
    return SimpleNamespace(
        measured_at=NOW - timedelta(days=days_ago), weight=weight, body_fat=body_fat, muscle_mass=muscle_mass
    )


def test_workout_stats():
    stats = workout_stats(history(), NOW)
    assert stats == {
        "total_workouts": 8,
        "total_volume": 7200,
        "total_sets": 8,
        "total_reps": 80,
        "average_duration_minutes": 60.0,
        "unique_exercises": 1,
        "workout_frequency": 1.87,
        "consistency_score": 46.7,
    }


def test_no_history():
    assert workout_stats([], NOW) is None
    assert body_trends([]) is None
    assert generate_insights([], None, None) == []


def test_insights_and_trends():
    body = [measurement(60, 90, 20, 35), measurement(1, 84, 18, 37.5), measurement(30, 88, 19, 36)]
    result = build_insights(history(), body, NOW)
    assert [i["id"] for i in result["insights"]] == [
        "low-frequency",
        "volume-surge",
        "low-variety",
        "weight-loss",
        "muscle-gain",
    ]
    assert result["trends"] == [
        {
            "exercise": "Bench Press",
            "sessions": 8,
            "first_weight": 80.0,
            "latest_weight": 100.0,
            "weight_change": 20.0,
            "latest_reps": 10,
        }
    ]
    assert result["body_trends"] == {
        "weight_change": -6.0,
        "body_fat_change": -2.0,
        "muscle_mass_change": 2.5,
        "total_measurements": 3,
    }


def test_frequent_short_sessions():
    sessions = []
    for i in range(20):
        ended = NOW - timedelta(days=i + 1)
        sessions.append(
            make_session(
                [make_set(BENCH, 50, 10)],
                started_at=ended - timedelta(minutes=20),
                ended_at=ended,
                completed_at=ended,
            )
        )
    ids = [i["id"] for i in generate_insights(sessions, workout_stats(sessions, NOW), None)]
    assert "excellent-frequency" in ids
    assert "short-workouts" in ids
    assert "volume-surge" not in ids
