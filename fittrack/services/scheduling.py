"""Program scheduling: status, frequency-based weekdays, plan generation, reminders."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Iterator

from fittrack.core.dates import combine_utc, ensure_utc
from fittrack.core.enums import ProgramFrequency, ScheduleStatus

# Monday=0 .. Sunday=6
FREQUENCY_WEEKDAYS: dict[ProgramFrequency, tuple[int, ...]] = {
    ProgramFrequency.WEEKLY_3: (0, 2, 4),
    ProgramFrequency.WEEKLY_4: (0, 1, 3, 4),
    ProgramFrequency.WEEKLY_5: (0, 1, 2, 3, 4),
    ProgramFrequency.WEEKLY_6: (0, 1, 2, 3, 4, 5),
    ProgramFrequency.DAILY: (0, 1, 2, 3, 4, 5, 6),
}
DEFAULT_WEEKDAYS = FREQUENCY_WEEKDAYS[ProgramFrequency.WEEKLY_3]


def weekdays_for(frequency: ProgramFrequency | str | None) -> tuple[int, ...]:
    try:
        return FREQUENCY_WEEKDAYS[ProgramFrequency(frequency)]
    except ValueError:
        return DEFAULT_WEEKDAYS


def scheduled_at(entry: Any, tz_name: str | None) -> datetime:
    """Aware UTC datetime of a scheduled entry (date + time in the user's zone)."""
    return combine_utc(entry.scheduled_date, entry.scheduled_time, tz_name)


def schedule_status(entry: Any, now: datetime, tz_name: str | None) -> ScheduleStatus:
    if entry.completed:
        return ScheduleStatus.COMPLETED
    if scheduled_at(entry, tz_name) < ensure_utc(now):
        return ScheduleStatus.OVERDUE
    return ScheduleStatus.SCHEDULED


def reminder_due(entry: Any, now: datetime, tz_name: str | None) -> bool:
    """now within [scheduled - reminder_minutes, scheduled) for open entries with reminders on."""
    if not entry.reminder or entry.completed:
        return False
    at = scheduled_at(entry, tz_name)
    now = ensure_utc(now)
    return at - timedelta(minutes=entry.reminder_minutes or 0) <= now < at


def plan_dates(start: date, weeks: int, weekdays: tuple[int, ...] | list[int]) -> Iterator[date]:
    """Dates from `start` over `weeks` weeks that fall on the given weekdays, ascending."""
    wanted = set(weekdays)
    for offset in range(weeks * 7):
        day = start + timedelta(days=offset)
        if day.weekday() in wanted:
            yield day


def generate_plan(
    start: date, weeks: int, weekdays: tuple[int, ...] | list[int], workout_count: int, at: time
) -> list[dict[str, Any]]:
    """[{scheduled_date, scheduled_time, workout_index}] cycling through the program workouts in order."""
    if workout_count <= 0:
        return []
    return [
        {"scheduled_date": day, "scheduled_time": at, "workout_index": i % workout_count}
        for i, day in enumerate(plan_dates(start, weeks, weekdays))
    ]
