from datetime import date, datetime, timedelta, timezone

from fittrack.services.streaks import (
    current_streak,
    local_dates,
    longest_streak,
    next_milestones,
    streak_report,
    streak_status,
)

TODAY = date(2026, 5, 20)


def days_before(*offsets):
    return {TODAY - timedelta(days=o) for o in offsets}


def test_current_streak_counts_back_from_today():
    assert current_streak(days_before(0, 1, 2), TODAY) == 3


def test_current_streak_may_start_yesterday():
    assert current_streak(days_before(1, 2), TODAY) == 2
    assert current_streak(days_before(1, 2), TODAY, allow_yesterday=False) == 0


def test_gap_breaks_streak():
    assert current_streak(days_before(2, 3), TODAY) == 0


def test_longest_streak():
    assert longest_streak(set()) == 0
    assert longest_streak(days_before(0, 5, 6, 7, 10)) == 3


def test_status():
    assert streak_status(3, 0) == "active"
    assert streak_status(3, 1) == "warning"
    assert streak_status(0, None) == "broken"


def test_next_milestones():
    milestones = next_milestones(5)
    assert [m["days"] for m in milestones] == [7, 14, 30]
    assert milestones[0]["remaining"] == 2


def test_local_dates_use_user_timezone():
    late_utc = datetime(2026, 5, 20, 2, 30, tzinfo=timezone.utc)
    assert local_dates([late_utc], "America/New_York") == [date(2026, 5, 19)]
    assert local_dates([late_utc], "UTC") == [date(2026, 5, 20)]


def test_report():
    dates = [TODAY, TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=4)]
    report = streak_report(dates, TODAY, total_workouts=4)
    assert report["current_streak"] == 2
    assert report["longest_streak"] == 2
    assert report["days_since_last_workout"] == 0
    assert report["status"] == "active"
    assert report["breaks"] == 1
    assert len(report["history"]) == 30
    assert report["history"][-1] == {"date": TODAY.isoformat(), "workout_count": 2, "has_workout": True}
