"""Goal tracking: CRUD, derived progress and manual updates for custom goals."""

from __future__ import annotations

import uuid
from collections import Counter
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import get_current_user
from fittrack.core.dates import local_today, utcnow
from fittrack.core.enums import AnalyticsEventType, GoalCategory, GoalPriority, GoalStatus
from fittrack.db.session import get_db
from fittrack.models.goal import Goal
from fittrack.models.user import User
from fittrack.schemas.goal import GoalCreate, GoalProgress, GoalProgressUpdate, GoalRead, GoalUpdate, check_target
from fittrack.services.analytics_tracker import get_analytics_tracker
from fittrack.services.exercises import get_visible_exercise
from fittrack.services.goal_progress import goal_progress
from fittrack.services.integration import DATA_CHANGED, get_integration_manager
from fittrack.services.validation import sanitize_text

router = APIRouter()


async def _read(db: AsyncSession, user: User, goal: Goal, today: date) -> GoalRead:
    """GoalRead with progress; tracks goal_complete the first time a goal reaches 100%."""
    was_completed = goal.completed_at is not None
    progress = await goal_progress(db, goal, today)
    if goal.completed_at is not None and not was_completed:
        await db.flush()
        await get_analytics_tracker().track(
            db, user.id, AnalyticsEventType.GOAL_COMPLETE, {"goal_id": str(goal.id), "category": goal.category.value}
        )
    item = GoalRead.model_validate(goal)
    item.progress = GoalProgress(target=goal.target, **progress)
    return item


async def _get_goal(db: AsyncSession, user: User, goal_id: uuid.UUID) -> Goal:
    result = await db.execute(select(Goal).where(Goal.id == goal_id, Goal.user_id == user.id))
    goal = result.scalar_one_or_none()
    if not goal:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal


async def _all_goals(db: AsyncSession, user: User) -> list[GoalRead]:
    result = await db.execute(select(Goal).where(Goal.user_id == user.id).order_by(Goal.created_at.desc()))
    today = local_today(user.timezone)
    return [await _read(db, user, goal, today) for goal in result.scalars().all()]


async def _changed(db: AsyncSession, user: User) -> None:
    await get_integration_manager().emit(DATA_CHANGED, {"db": db, "user_id": user.id, "collection": "goals"})


@router.get("", response_model=list[GoalRead])
async def list_goals(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    category: GoalCategory | None = None,
    priority: GoalPriority | None = None,
    status: GoalStatus | None = None,
):
    goals = await _all_goals(db, user)
    if category:
        goals = [g for g in goals if g.category == category]
    if priority:
        goals = [g for g in goals if g.priority == priority]
    if status:
        goals = [g for g in goals if g.progress.status == status]
    return goals


@router.get("/summary")
async def goals_summary(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Counts by status and by category."""
    goals = await _all_goals(db, user)
    by_status = Counter(g.progress.status.value for g in goals)
    by_category = Counter(g.category.value for g in goals)
    return {
        "total": len(goals),
        "by_status": {s.value: by_status.get(s.value, 0) for s in GoalStatus},
        "by_category": {c.value: by_category.get(c.value, 0) for c in GoalCategory},
    }


@router.post("", response_model=GoalRead, status_code=201)
async def create_goal(
    payload: GoalCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if payload.exercise_id is not None and await get_visible_exercise(db, user.id, payload.exercise_id) is None:
        raise HTTPException(status_code=404, detail="Exercise not found")
    data = payload.model_dump()
    data["title"] = sanitize_text(data["title"])
    data["description"] = sanitize_text(data["description"])
    goal = Goal(user_id=user.id, **data)
    db.add(goal)
    await db.flush()
    await get_analytics_tracker().track(
        db, user.id, AnalyticsEventType.GOAL_CREATE, {"goal_id": str(goal.id), "category": goal.category.value}
    )
    await _changed(db, user)
    return await _read(db, user, goal, local_today(user.timezone))


@router.get("/{goal_id}", response_model=GoalRead)
async def get_goal(
    goal_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    goal = await _get_goal(db, user, goal_id)
    return await _read(db, user, goal, local_today(user.timezone))


@router.patch("/{goal_id}", response_model=GoalRead)
async def update_goal(
    goal_id: uuid.UUID,
    payload: GoalUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    goal = await _get_goal(db, user, goal_id)
    data = payload.model_dump(exclude_unset=True)
    for key in ("title", "priority", "target"):
        if key in data and data[key] is None:
            raise HTTPException(status_code=400, detail=f"{key} cannot be empty")
    if "target" in data:
        try:
            check_target(goal.category, data["target"])
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    for key in ("title", "description"):
        if key in data:
            data[key] = sanitize_text(data[key])
    for k, v in data.items():
        setattr(goal, k, v)
    if "target" in data:
        # Re-evaluated against the new target
        goal.completed_at = None
    goal.updated_at = utcnow()
    await db.flush()
    await _changed(db, user)
    return await _read(db, user, goal, local_today(user.timezone))


@router.delete("/{goal_id}", status_code=204)
async def delete_goal(
    goal_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    goal = await _get_goal(db, user, goal_id)
    await db.delete(goal)
    await db.flush()
    await _changed(db, user)
    return None


@router.post("/{goal_id}/progress", response_model=GoalRead)
async def update_goal_progress(
    goal_id: uuid.UUID,
    payload: GoalProgressUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Set `current` on a custom goal. Other categories are derived from tracked data."""
    goal = await _get_goal(db, user, goal_id)
    if goal.category != GoalCategory.CUSTOM:
        raise HTTPException(status_code=400, detail="Progress is tracked automatically for this goal category")
    goal.current = payload.current
    goal.updated_at = utcnow()
    await db.flush()
    await _changed(db, user)
    return await _read(db, user, goal, local_today(user.timezone))
