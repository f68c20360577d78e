from datetime import date, datetime, time, timezone
from types import SimpleNamespace

from fittrack.core.enums import ProgramFrequency, ScheduleStatus
from fittrack.services.scheduling import generate_plan, reminder_due, schedule_status, weekdays_for

MONDAY = date(2026, 6, 1)


def entry(**overrides):
    data = {
        "scheduled_date": MONDAY,
        "scheduled_time": time(18, 0),
        "completed": False,
        "reminder": True,
        "reminder_minutes": 30,
    }
    data.update(overrides)
    return SimpleNamespace(**data)


def test_weekdays_from_frequency():
    assert weekdays_for(ProgramFrequency.WEEKLY_3) == (0, 2, 4)
    assert weekdays_for(ProgramFrequency.DAILY) == (0, 1, 2, 3, 4, 5, 6)
    assert weekdays_for(None) == (0, 2, 4)


def test_generate_plan_cycles_workouts():
    plan = generate_plan(MONDAY, 2, (0, 2, 4), 2, time(7, 0))
    assert len(plan) == 6
    assert [p["workout_index"] for p in plan] == [0, 1, 0, 1, 0, 1]
    assert [p["scheduled_date"].weekday() for p in plan] == [0, 2, 4, 0, 2, 4]
    assert generate_plan(MONDAY, 2, (0,), 0, time(7, 0)) == []


def test_status():
    before = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)
    after = datetime(2026, 6, 1, 19, 0, tzinfo=timezone.utc)
    assert schedule_status(entry(), before, "UTC") == ScheduleStatus.SCHEDULED
    assert schedule_status(entry(), after, "UTC") == ScheduleStatus.OVERDUE
    assert schedule_status(entry(completed=True), after, "UTC") == ScheduleStatus.COMPLETED


def test_status_uses_user_timezone():
    # 18:00 in Berlin (CEST) is 16:00 UTC
    now = datetime(2026, 6, 1, 17, 0, tzinfo=timezone.utc)
    assert schedule_status(entry(), now, "Europe/Berlin") == ScheduleStatus.OVERDUE
    assert schedule_status(entry(), now, "UTC") == ScheduleStatus.SCHEDULED


def test_reminder_window():
    assert reminder_due(entry(), datetime(2026, 6, 1, 17, 45, tzinfo=timezone.utc), "UTC")
    assert not reminder_due(entry(), datetime(2026, 6, 1, 17, 0, tzinfo=timezone.utc), "UTC")
    assert not reminder_due(entry(), datetime(2026, 6, 1, 18, 0, tzinfo=timezone.utc), "UTC")
    assert not reminder_due(entry(reminder=False), datetime(2026, 6, 1, 17, 45, tzinfo=timezone.utc), "UTC")
