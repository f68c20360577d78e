"""Workout streaks over local calendar days.

The date list is built once per request from completed sessions (bounded by
STREAK_LOOKBACK_DAYS); everything below is pure date arithmetic.
"""

from __future__ import annotations

import uuid
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.core.constants import STREAK_HISTORY_DAYS, STREAK_LOOKBACK_DAYS, STREAK_MILESTONES
from fittrack.core.dates import ensure_utc, local_today, to_local, utcnow
from fittrack.models.workout import WorkoutSession


async def completed_session_times(
    db: AsyncSession, user_id: uuid.UUID, since: datetime | None = None
) -> list[datetime]:
    stmt = select(WorkoutSession.completed_at).where(
        WorkoutSession.user_id == user_id,
        WorkoutSession.completed_at.isnot(None),
    )
    if since is not None:
        stmt = stmt.where(WorkoutSession.completed_at >= since)
    result = await db.execute(stmt)
    return [row[0] for row in result.all()]


def local_dates(times: list[datetime], tz_name: str | None) -> list[date]:
    """One local date per session (duplicates kept, for per-day counts)."""
    return [to_local(t, tz_name).date() for t in times]


def current_streak(days: set[date], today: date, allow_yesterday: bool = True) -> int:
    """Consecutive days with a workout ending today (or yesterday when allowed)."""
    if today in days:
        cursor = today
    elif allow_yesterday and today - timedelta(days=1) in days:
        cursor = today - timedelta(days=1)
    else:
        return 0
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def longest_streak(days: set[date]) -> int:
    if not days:
        return 0
    ordered = sorted(days)
    longest = run = 1
    for prev, cur in zip(ordered, ordered[1:]):
        if cur == prev + timedelta(days=1):
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def streak_status(current: int, days_since_last: int | None) -> str:
    if current == 0 or days_since_last is None:
        return "broken"
    if days_since_last == 0:
        return "active"
    if days_since_last == 1:
        return "warning"
    return "broken"


def next_milestones(current: int, count: int = 3) -> list[dict[str, Any]]:
    return [
        {
            "days": m,
            "remaining": m - current,
            "percentage": round(current / m * 100, 1),
        }
        for m in STREAK_MILESTONES
        if m > current
    ][:count]


def streak_report(dates: list[date], today: date, total_workouts: int) -> dict[str, Any]:
    """Full streak payload from per-session local dates."""
    per_day = Counter(dates)
    days = set(per_day)
    current = current_streak(days, today)
    last = max(days) if days else None
    days_since_last = (today - last).days if last else None
    window_start = today - timedelta(days=STREAK_HISTORY_DAYS - 1)
    recent = sum(n for d, n in per_day.items() if window_start <= d <= today)
    history = []
    for offset in range(STREAK_HISTORY_DAYS - 1, -1, -1):
        d = today - timedelta(days=offset)
        history.append({"date": d.isoformat(), "workout_count": per_day.get(d, 0), "has_workout": d in days})
    return {
        "current_streak": current,
        "longest_streak": longest_streak(days),
        "total_workouts": total_workouts,
        "breaks": max(0, total_workouts - current - 1),
        "average_per_day": round(recent / STREAK_HISTORY_DAYS, 2),
        "days_since_last_workout": days_since_last,
        "last_workout_date": last.isoformat() if last else None,
        "status": streak_status(current, days_since_last),
        "history": history,
        "next_milestones": next_milestones(current),
    }


async def get_streak_report(db: AsyncSession, user: Any, now: datetime | None = None) -> dict[str, Any]:
    now = now or utcnow()
    since = now - timedelta(days=STREAK_LOOKBACK_DAYS)
    all_times = await completed_session_times(db, user.id)
    recent = [t for t in all_times if ensure_utc(t) >= since]
    today = local_today(user.timezone, now)
    return streak_report(local_dates(recent, user.timezone), today, len(all_times))
