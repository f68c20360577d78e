"""Goal progress: derive `current` from tracked data, then percentage/status."""

from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.core.constants import GOAL_ALMOST_THRESHOLD, GOAL_GOOD_THRESHOLD
from fittrack.core.dates import utcnow
from fittrack.core.enums import GoalCategory, GoalStatus
from fittrack.models.body import BodyMeasurement
from fittrack.models.goal import Goal
from fittrack.models.record import PersonalRecord
from fittrack.models.workout import WorkoutSession, WorkoutSet

BODY_COLUMNS = ("weight", "body_fat", "muscle_mass")


async def _latest_measurement(db: AsyncSession, user_id) -> BodyMeasurement | None:
    result = await db.execute(
        select(BodyMeasurement)
        .where(BodyMeasurement.user_id == user_id)
        .order_by(BodyMeasurement.measured_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


def _completed_sets(user_id):
    return (
        select(WorkoutSet)
        .join(WorkoutSession, WorkoutSession.id == WorkoutSet.session_id)
        .where(WorkoutSession.user_id == user_id, WorkoutSet.completed.is_(True))
    )


async def current_value(db: AsyncSession, goal: Goal) -> float:
    """Current value for the goal's category (custom goals keep their stored value)."""
    category = goal.category
    if category == GoalCategory.STRENGTH:
        if goal.exercise_id is None:
            return 0.0
        r = await db.execute(
            select(func.max(PersonalRecord.weight)).where(
                PersonalRecord.user_id == goal.user_id,
                PersonalRecord.exercise_id == goal.exercise_id,
            )
        )
        return float(r.scalar() or 0)
    if category == GoalCategory.ENDURANCE:
        if goal.exercise_id is None:
            return 0.0
        sub = _completed_sets(goal.user_id).where(WorkoutSet.exercise_id == goal.exercise_id).subquery()
        r = await db.execute(select(func.coalesce(func.sum(sub.c.reps), 0)))
        return float(r.scalar() or 0)
    if category == GoalCategory.VOLUME:
        sub = _completed_sets(goal.user_id).subquery()
        r = await db.execute(select(func.coalesce(func.sum(sub.c.weight * sub.c.reps), 0)))
        return float(r.scalar() or 0)
    if category == GoalCategory.CONSISTENCY:
        r = await db.execute(
            select(func.count(WorkoutSession.id)).where(
                WorkoutSession.user_id == goal.user_id,
                WorkoutSession.completed_at.isnot(None),
            )
        )
        return float(r.scalar() or 0)
    if category in (GoalCategory.WEIGHT, GoalCategory.BODY):
        latest = await _latest_measurement(db, goal.user_id)
        if latest is None:
            return 0.0
        if category == GoalCategory.WEIGHT:
            return float(latest.weight or 0)
        field = goal.measurement or ""
        if field in BODY_COLUMNS:
            return float(getattr(latest, field) or 0)
        return float((latest.measurements or {}).get(field) or 0)
    return float(goal.current or 0)


def goal_status(percentage: float, overdue: bool) -> GoalStatus:
    if percentage >= 100:
        return GoalStatus.COMPLETED
    if overdue:
        return GoalStatus.OVERDUE
    if percentage >= GOAL_ALMOST_THRESHOLD:
        return GoalStatus.ALMOST
    if percentage >= GOAL_GOOD_THRESHOLD:
        return GoalStatus.GOOD
    return GoalStatus.STARTED


def progress_for(current: float, target: float, deadline: date | None, today: date) -> dict[str, Any]:
    percentage = min(current / target * 100, 100) if target > 0 else 0.0
    completed = percentage >= 100
    overdue = bool(deadline and deadline < today and not completed)
    return {
        "current": current,
        "percentage": round(percentage, 1),
        "completed": completed,
        "remaining": max(target - current, 0),
        "overdue": overdue,
        "days_remaining": (deadline - today).days if deadline else None,
        "status": goal_status(percentage, overdue),
    }


async def goal_progress(db: AsyncSession, goal: Goal, today: date) -> dict[str, Any]:
    """Progress payload; stamps completed_at the first time the goal reaches 100%."""
    progress = progress_for(await current_value(db, goal), goal.target, goal.deadline, today)
    if progress["completed"] and goal.completed_at is None:
        goal.completed_at = utcnow()
    return progress
