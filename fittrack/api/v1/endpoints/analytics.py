"""Analytics dashboards over completed sessions. All endpoints need view_analytics."""

from __future__ import annotations

import uuid
from collections import Counter, defaultdict
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fittrack.api.deps import require_permission
from fittrack.core.dates import ensure_utc, local_today, to_local, utcnow
from fittrack.core.enums import Permission
from fittrack.db.session import get_db
from fittrack.models.record import PersonalRecord
from fittrack.models.user import User
from fittrack.models.workout import WorkoutSession, WorkoutSet
from fittrack.services.data_manager import WORKOUT_SESSIONS, get_data_manager
from fittrack.services.exercises import get_visible_exercise
from fittrack.services.insights import load_completed_sessions, workout_stats
from fittrack.services.workout_metrics import (
    brzycki_1rm,
    exercise_progress_between,
    exercise_progress_data,
    one_rep_max,
    workout_volume,
)

router = APIRouter()

view_analytics = require_permission(Permission.VIEW_ANALYTICS)


async def _exercise_or_404(db: AsyncSession, user: User, exercise_id: uuid.UUID):
    exercise = await get_visible_exercise(db, user.id, exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return exercise


async def _session_or_404(db: AsyncSession, user: User, session_id: uuid.UUID) -> WorkoutSession:
    result = await db.execute(
        select(WorkoutSession)
        .where(WorkoutSession.id == session_id, WorkoutSession.user_id == user.id)
        .options(selectinload(WorkoutSession.sets))
    )
    session = result.scalar_one_or_none()
    if not session:
        raise HTTPException(status_code=404, detail="Workout not found")
    return session


@router.get("/one-rm/{exercise_id}")
async def one_rm_history(
    exercise_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(view_analytics),
):
    """Per session: the set with the highest Epley estimate, plus the Brzycki estimate for it."""
    exercise = await _exercise_or_404(db, user, exercise_id)
    history = []
    for session in reversed(await load_completed_sessions(db, user.id)):
        sets = [s for s in session.sets if s.exercise_id == exercise_id and s.completed and s.weight and s.reps]
        if not sets:
            continue
        top = max(sets, key=lambda s: one_rep_max(s.weight, s.reps))
        history.append(
            {
                "session_id": session.id,
                "date": ensure_utc(session.completed_at),
                "weight": top.weight,
                "reps": top.reps,
                "epley": round(one_rep_max(top.weight, top.reps), 2),
                "brzycki": round(brzycki_1rm(top.weight, top.reps), 2),
            }
        )
    best = max(history, key=lambda h: h["epley"]) if history else None
    return {"exercise_id": exercise.id, "exercise_name": exercise.name, "history": history, "best": best}


@router.get("/tonnage")
async def tonnage(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(view_analytics),
    days: int | None = None,
):
    """Completed volume per session, oldest first. `days` limits to the recent window."""
    since = utcnow() - timedelta(days=days) if days else None
    points = []
    for session in reversed(await load_completed_sessions(db, user.id)):
        completed_at = ensure_utc(session.completed_at)
        if since and completed_at < since:
            continue
        points.append(
            {
                "session_id": session.id,
                "name": session.name,
                "date": completed_at,
                "volume": round(workout_volume(session), 2),
            }
        )
    return {"sessions": points, "total_volume": round(sum(p["volume"] for p in points), 2)}


@router.get("/consistency")
async def consistency(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(view_analytics),
    year: int | None = None,
):
    """Calendar of local dates with completed-session counts for one year."""
    year = year or local_today(user.timezone).year
    result = await db.execute(
        select(WorkoutSession.completed_at).where(
            WorkoutSession.user_id == user.id, WorkoutSession.completed_at.isnot(None)
        )
    )
    per_day: Counter[str] = Counter()
    for (completed_at,) in result.all():
        day = to_local(completed_at, user.timezone).date()
        if day.year == year:
            per_day[day.isoformat()] += 1
    return {
        "year": year,
        "days": dict(sorted(per_day.items())),
        "active_days": len(per_day),
        "total_workouts": sum(per_day.values()),
    }


@router.get("/exercise-progress/{exercise_id}")
async def exercise_progress(
    exercise_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(view_analytics),
):
    exercise = await _exercise_or_404(db, user, exercise_id)
    sessions = await load_completed_sessions(db, user.id)
    return {
        "exercise_id": exercise.id,
        "exercise_name": exercise.name,
        "points": exercise_progress_data(sessions, exercise_id),
    }


@router.get("/compare")
async def compare_sessions(
    old_session_id: uuid.UUID,
    new_session_id: uuid.UUID,
    exercise_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(view_analytics),
):
    """Best-set improvement for one exercise between two sessions."""
    old = await _session_or_404(db, user, old_session_id)
    new = await _session_or_404(db, user, new_session_id)
    return {
        "old_session_id": old.id,
        "new_session_id": new.id,
        "exercise_id": exercise_id,
        **exercise_progress_between(old, new, exercise_id),
    }


@router.get("/category-volume")
async def category_volume(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(view_analytics),
):
    """Completed volume per exercise category."""
    volume: defaultdict[str, float] = defaultdict(float)
    for session in await load_completed_sessions(db, user.id):
        for s in session.sets:
            if not s.completed:
                continue
            category = s.exercise.category.value if s.exercise and s.exercise.category else "Uncategorized"
            volume[category] += float(s.weight or 0) * int(s.reps or 0)
    return {category: round(v, 2) for category, v in sorted(volume.items())}


@router.get("/stats")
async def user_stats(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(view_analytics),
):
    """User totals, cached until the next write."""
    manager = get_data_manager()
    cached = manager.cached(WORKOUT_SESSIONS, user.id, "stats")
    if cached is not None:
        return cached
    sessions = await load_completed_sessions(db, user.id)
    records = await db.scalar(select(func.count(PersonalRecord.id)).where(PersonalRecord.user_id == user.id))
    logged_sets = await db.scalar(
        select(func.count(WorkoutSet.id))
        .join(WorkoutSession, WorkoutSession.id == WorkoutSet.session_id)
        .where(WorkoutSession.user_id == user.id)
    )
    stats = workout_stats(sessions, utcnow()) or {"total_workouts": 0}
    stats.update({"personal_records": records or 0, "logged_sets": logged_sets or 0})
    return manager.store(WORKOUT_SESSIONS, user.id, stats, "stats")
