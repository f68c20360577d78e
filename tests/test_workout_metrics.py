from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from conftest import make_session, make_set
from fittrack.services.workout_metrics import (
    best_set,
    brzycki_1rm,
    exercise_progress_between,
    exercise_progress_data,
    format_duration,
    format_volume,
    format_weight,
    one_rep_max,
    validate_session_for_completion,
    workout_duration_minutes,
    workout_summary,
)

START = datetime(2026, 3, 2, 18, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "weight,reps,expected",
    [(100, 1, 100), (100, 10, 133.33), (100, 0, 0), (0, 10, 0), (None, 5, 0)],
)
def test_one_rep_max_epley(weight, reps, expected):
    assert one_rep_max(weight, reps) == pytest.approx(expected, abs=0.01)


def test_brzycki_extrapolates_past_36_reps():
    assert brzycki_1rm(100, 10) == pytest.approx(133.33, abs=0.01)
    assert brzycki_1rm(100, 40) == pytest.approx(110)


def test_summary_counts_only_completed_sets():
    bench, squat = uuid4(), uuid4()
    session = make_session(
        [
            make_set(bench, 100, 5, order=0),
            make_set(bench, 100, 5, order=1),
            make_set(bench, 100, 5, completed=False, order=2),
            make_set(squat, 140, 3, order=3, name="Squat"),
        ],
        started_at=START,
        ended_at=START + timedelta(minutes=50),
    )
    summary = workout_summary(session)
    assert summary["total_volume"] == 1420
    assert summary["total_sets"] == 3
    assert summary["total_exercises"] == 2
    assert summary["duration_minutes"] == 50
    bench_summary = summary["exercises"][0]
    assert bench_summary["name"] == "Bench Press"
    assert bench_summary["sets"] == 2
    assert bench_summary["best_one_rep_max"] == pytest.approx(116.67, abs=0.01)


def test_duration_is_zero_without_end():
    assert workout_duration_minutes(make_session([], started_at=START)) == 0


def test_best_set_prefers_heavier_then_more_reps():
    ex = uuid4()
    sets = [make_set(ex, 100, 5), make_set(ex, 100, 8), make_set(ex, 90, 12)]
    assert best_set(sets).reps == 8
    assert best_set([make_set(ex, 100, 5, completed=False)]) is None


def test_progress_data_is_sorted_by_date():
    ex = uuid4()
    later = make_session([make_set(ex, 105, 5)], completed_at=START + timedelta(days=7))
    earlier = make_session([make_set(ex, 100, 5)], completed_at=START)
    points = exercise_progress_data([later, earlier], ex)
    assert [p["weight"] for p in points] == [100, 105]


def test_progress_between_sessions():
    ex = uuid4()
    old = make_session([make_set(ex, 100, 5)])
    new = make_session([make_set(ex, 110, 6)])
    change = exercise_progress_between(old, new, ex)
    assert change["weight_improvement"] == 10
    assert change["reps_improvement"] == 1
    assert change["volume_improvement"] == 160

    empty = exercise_progress_between(old, make_session([]), ex)
    assert empty["weight_improvement"] == 0


def test_completion_validation():
    assert validate_session_for_completion(make_session([], started_at=START), None) == [
        "Workout must have at least one exercise"
    ]
    session = make_session([make_set(uuid4(), 50, 10)], started_at=START)
    assert validate_session_for_completion(session, START - timedelta(minutes=1)) == [
        "End time must be after start time"
    ]
    assert validate_session_for_completion(session, START + timedelta(minutes=30)) == []


def test_formatting():
    assert format_duration(45) == "45m"
    assert format_duration(60) == "1h"
    assert format_duration(75) == "1h 15m"
    assert format_weight(0) == "0 kg"
    assert format_weight(0.5) == "500 g"
    assert format_weight(82.5) == "82.5 kg"
    assert format_volume(950) == "950 kg"
    assert format_volume(12500) == "12.5t"
