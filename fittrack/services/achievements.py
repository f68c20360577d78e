"""Achievement evaluation: user stats -> unlocked catalog entries and progress."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fittrack.core.achievement_catalog import ACHIEVEMENTS, ACHIEVEMENTS_BY_ID, PROGRESS_CONDITIONS
from fittrack.core.dates import local_today, to_local, utcnow
from fittrack.models.achievement import UserAchievement
from fittrack.models.record import PersonalRecord
from fittrack.models.user import User
from fittrack.models.workout import WorkoutSession, WorkoutSet
from fittrack.services.streaks import current_streak
from fittrack.services.workout_metrics import elapsed_minutes, workout_volume

logger = logging.getLogger(__name__)


@dataclass
class UserStats:
    total_workouts: int = 0
    streak: int = 0
    personal_records: int = 0
    best_weight_by_exercise: dict[str, float] = field(default_factory=dict)  # lower-cased name -> weight
    total_volume: float = 0.0
    max_reps: int = 0
    unique_exercises: int = 0
    durations_minutes: list[float] = field(default_factory=list)
    local_hours: list[int] = field(default_factory=list)
    weekend_workouts: int = 0
    holiday_workouts: int = 0


def build_stats(sessions: list[Any], records: list[Any], tz_name: str | None, today: date) -> UserStats:
    """Stats from completed sessions (with sets and exercises loaded) and personal records."""
    stats = UserStats(total_workouts=len(sessions), personal_records=len(records))
    days = set()
    names = set()
    for session in sessions:
        local = to_local(session.completed_at, tz_name)
        days.add(local.date())
        stats.local_hours.append(local.hour)
        if local.weekday() >= 5:
            stats.weekend_workouts += 1
        if local.month == 12 and local.day == 25:
            stats.holiday_workouts += 1
        if session.ended_at is not None:
            stats.durations_minutes.append(elapsed_minutes(session))
        stats.total_volume += workout_volume(session)
        for s in session.sets:
            if s.exercise is not None:
                names.add(s.exercise.name.lower())
            if s.completed and (s.reps or 0) > stats.max_reps:
                stats.max_reps = s.reps
    stats.unique_exercises = len(names)
    stats.streak = current_streak(days, today, allow_yesterday=False)
    for record in records:
        if record.exercise is None or record.weight is None:
            continue
        key = record.exercise.name.lower()
        stats.best_weight_by_exercise[key] = max(stats.best_weight_by_exercise.get(key, 0.0), float(record.weight))
    return stats


def check_condition(condition: dict[str, Any], stats: UserStats) -> bool:
    kind = condition["type"]
    value = condition["value"]
    if kind == "total_workouts":
        return stats.total_workouts >= value
    if kind == "streak":
        return stats.streak >= value
    if kind == "personal_records":
        return stats.personal_records >= value
    if kind == "exercise_weight":
        return stats.best_weight_by_exercise.get(condition["exercise"].lower(), 0) >= value
    if kind == "total_volume":
        return stats.total_volume >= value
    if kind == "max_reps":
        return stats.max_reps >= value
    if kind == "unique_exercises":
        return stats.unique_exercises >= value
    if kind == "workout_duration":
        return condition.get("operator") == "less_than" and any(d < value for d in stats.durations_minutes)
    if kind == "efficient_workouts":
        return sum(1 for d in stats.durations_minutes if d < condition["duration"]) >= value
    if kind == "workout_time":
        if condition.get("operator") == "before":
            return any(h < value for h in stats.local_hours)
        if condition.get("operator") == "after":
            return any(h >= value for h in stats.local_hours)
        return False
    if kind == "weekend_workouts":
        return stats.weekend_workouts >= value
    if kind == "holiday_workout":
        return stats.holiday_workouts >= value
    return False


def _current_value(kind: str, stats: UserStats) -> float:
    return {
        "total_workouts": stats.total_workouts,
        "streak": stats.streak,
        "personal_records": stats.personal_records,
        "total_volume": stats.total_volume,
        "unique_exercises": stats.unique_exercises,
    }[kind]


def achievement_progress(achievement: dict[str, Any], stats: UserStats, unlocked: bool) -> dict[str, Any]:
    condition = achievement["condition"]
    target = condition["value"]
    if condition["type"] in PROGRESS_CONDITIONS:
        current = min(_current_value(condition["type"], stats), target)
        percentage = min(current / target * 100, 100) if target else 0
    else:
        current = target if unlocked else 0
        percentage = 100 if unlocked else 0
    return {"current": current, "target": target, "percentage": round(percentage, 1)}


async def load_stats(db: AsyncSession, user: User, now: datetime | None = None) -> UserStats:
    sessions_result = await db.execute(
        select(WorkoutSession)
        .where(WorkoutSession.user_id == user.id, WorkoutSession.completed_at.isnot(None))
        .options(selectinload(WorkoutSession.sets).selectinload(WorkoutSet.exercise))
    )
    records_result = await db.execute(
        select(PersonalRecord)
        .where(PersonalRecord.user_id == user.id)
        .options(selectinload(PersonalRecord.exercise))
    )
    return build_stats(
        list(sessions_result.scalars().all()),
        list(records_result.scalars().all()),
        user.timezone,
        local_today(user.timezone, now),
    )


async def unlocked_map(db: AsyncSession, user_id) -> dict[str, datetime]:
    result = await db.execute(select(UserAchievement).where(UserAchievement.user_id == user_id))
    return {ua.achievement_id: ua.unlocked_at for ua in result.scalars().all()}


async def evaluate_achievements(db: AsyncSession, user: User, now: datetime | None = None) -> list[dict[str, Any]]:
    """Check every locked achievement and persist the ones now satisfied. Returns the new unlocks."""
    now = now or utcnow()
    stats = await load_stats(db, user, now)
    unlocked = await unlocked_map(db, user.id)
    new = []
    for achievement in ACHIEVEMENTS:
        if achievement["id"] in unlocked:
            continue
        if check_condition(achievement["condition"], stats):
            db.add(UserAchievement(user_id=user.id, achievement_id=achievement["id"], unlocked_at=now))
            new.append({**achievement, "unlocked": True, "unlocked_at": now})
    if new:
        await db.flush()
        logger.info("User %s unlocked %s", user.id, ", ".join(a["id"] for a in new))
    return new


def achievement_summary(unlocked: dict[str, datetime]) -> dict[str, Any]:
    by_rarity: dict[str, dict[str, int]] = {}
    total_xp = 0
    for achievement in ACHIEVEMENTS:
        bucket = by_rarity.setdefault(achievement["rarity"], {"unlocked": 0, "total": 0})
        bucket["total"] += 1
        if achievement["id"] in unlocked:
            bucket["unlocked"] += 1
            total_xp += achievement["reward"]["xp"]
    return {
        "total_xp": total_xp,
        "unlocked": sum(1 for a in unlocked if a in ACHIEVEMENTS_BY_ID),
        "total": len(ACHIEVEMENTS),
        "by_rarity": by_rarity,
    }
