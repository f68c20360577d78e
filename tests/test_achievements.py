from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace
from uuid import uuid4

import pytest

from conftest import make_session, make_set
from fittrack.core.achievement_catalog import ACHIEVEMENTS, ACHIEVEMENTS_BY_ID
from fittrack.services.achievements import achievement_progress, achievement_summary, build_stats, check_condition

BENCH = uuid4()
SQUAT = uuid4()
PULL_UP = uuid4()


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def stats():
    saturday = make_session(
        [
            make_set(BENCH, 100, 5),
            make_set(SQUAT, 140, 3, name="Squat"),
            make_set(BENCH, 60, 55, completed=False),
        ],
        started_at=utc(2026, 6, 6, 5, 0),
        ended_at=utc(2026, 6, 6, 5, 25),
        completed_at=utc(2026, 6, 6, 5, 25),
    )
    sunday = make_session(
        [make_set(PULL_UP, None, 12, name="Pull-up")],
        started_at=utc(2026, 6, 7, 22, 30),
        ended_at=utc(2026, 6, 7, 23, 40),
        completed_at=utc(2026, 6, 7, 23, 40),
    )
    records = [
        SimpleNamespace(exercise=SimpleNamespace(name="Bench Press"), weight=230),
        SimpleNamespace(exercise=SimpleNamespace(name="Pull-up"), weight=None),
    ]
    return build_stats([saturday, sunday], records, "UTC", date(2026, 6, 7))


def test_build_stats(stats):
    assert stats.total_workouts == 2
    assert stats.personal_records == 2
    assert stats.streak == 2
    assert stats.total_volume == 920
    assert stats.max_reps == 12
    assert stats.unique_exercises == 3
    assert stats.durations_minutes == [25, 70]
    assert stats.local_hours == [5, 23]
    assert stats.weekend_workouts == 2
    assert stats.best_weight_by_exercise == {"bench press": 230.0}


def test_local_hours_follow_timezone():
    session = make_session([], completed_at=utc(2026, 1, 10, 4, 0))
    tokyo = build_stats([session], [], "Asia/Tokyo", date(2026, 1, 10))
    assert tokyo.local_hours == [13]


@pytest.mark.parametrize(
    "achievement_id, unlocked",
    [
        ("first-workout", True),
        ("week-warrior", False),
        ("streak-3", False),
        ("first-pr", True),
        ("bench-225", True),
        ("squat-315", False),
        ("marathon-set", False),
        ("speed-demon", True),
        ("efficiency-expert", False),
        ("early-bird", True),
        ("night-owl", True),
        ("weekend-warrior", True),
        ("holiday-hero", False),
    ],
)
def test_conditions(stats, achievement_id, unlocked):
    assert check_condition(ACHIEVEMENTS_BY_ID[achievement_id]["condition"], stats) is unlocked


@pytest.mark.parametrize("seconds, unlocked", [(29 * 60 + 40, True), (30 * 60, False), (30 * 60 + 10, False)])
def test_speed_demon_uses_exact_duration(seconds, unlocked):
    start = utc(2026, 3, 2, 12, 0)
    end = start + timedelta(seconds=seconds)
    session = make_session([], started_at=start, ended_at=end, completed_at=end)
    stats = build_stats([session], [], "UTC", date(2026, 3, 2))
    assert check_condition(ACHIEVEMENTS_BY_ID["speed-demon"]["condition"], stats) is unlocked


def test_efficiency_counts_sessions_under_the_limit():
    sessions = []
    for day in range(1, 11):
        start = utc(2026, 3, day, 12, 0)
        end = start + timedelta(minutes=44, seconds=50)
        sessions.append(make_session([], started_at=start, ended_at=end, completed_at=end))
    stats = build_stats(sessions, [], "UTC", date(2026, 3, 10))
    assert check_condition(ACHIEVEMENTS_BY_ID["efficiency-expert"]["condition"], stats) is True


def test_unknown_condition_is_never_met(stats):
    assert check_condition({"type": "moon_landing", "value": 1}, stats) is False


def test_progress(stats):
    assert achievement_progress(ACHIEVEMENTS_BY_ID["first-workout"], stats, True) == {
        "current": 1,
        "target": 1,
        "percentage": 100,
    }
    assert achievement_progress(ACHIEVEMENTS_BY_ID["week-warrior"], stats, False)["percentage"] == 28.6
    assert achievement_progress(ACHIEVEMENTS_BY_ID["bench-225"], stats, True)["current"] == 225
    assert achievement_progress(ACHIEVEMENTS_BY_ID["squat-315"], stats, False)["percentage"] == 0


def test_summary():
    unlocked = {"first-workout": utc(2026, 1, 1), "streak-3": utc(2026, 1, 3), "retired-badge": utc(2025, 1, 1)}
    summary = achievement_summary(unlocked)
    assert summary["total"] == len(ACHIEVEMENTS)
    assert summary["unlocked"] == 2
    assert summary["total_xp"] == 250
    assert summary["by_rarity"]["common"]["unlocked"] == 2
