"""Exercise library endpoints: built-in exercises plus the user's custom ones."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import get_current_user
from fittrack.core.enums import Difficulty, Equipment, ExerciseCategory
from fittrack.db.session import get_db
from fittrack.models.exercise import Exercise
from fittrack.models.user import User
from fittrack.schemas.exercise import ExerciseCreate, ExerciseRead, ExerciseUpdate
from fittrack.services.exercises import get_visible_exercise, visible_to
from fittrack.services.validation import sanitize_list, sanitize_text

router = APIRouter()


async def _own_custom_exercise(db: AsyncSession, user: User, exercise_id: uuid.UUID) -> Exercise:
    exercise = await get_visible_exercise(db, user.id, exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail="Exercise not found")
    if exercise.user_id is None:
        raise HTTPException(status_code=403, detail="Built-in exercises cannot be modified")
    return exercise


@router.get("", response_model=list[ExerciseRead])
async def list_exercises(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    q: str | None = None,
    category: ExerciseCategory | None = None,
    equipment: Equipment | None = None,
    difficulty: Difficulty | None = None,
    muscle: str | None = None,
    skip: int = 0,
    limit: int = 100,
):
    """List visible exercises. `q` searches names and muscle lists, `muscle` the muscle lists only."""
    stmt = select(Exercise).where(visible_to(user.id))
    muscles = func.lower(cast(Exercise.primary_muscles, String) + " " + cast(Exercise.secondary_muscles, String))
    if q:
        pattern = f"%{q.strip().lower()}%"
        stmt = stmt.where(or_(func.lower(Exercise.name).like(pattern), muscles.like(pattern)))
    if muscle:
        stmt = stmt.where(muscles.like(f"%{muscle.strip().lower()}%"))
    if category:
        stmt = stmt.where(Exercise.category == category)
    if equipment:
        stmt = stmt.where(Exercise.equipment == equipment)
    if difficulty:
        stmt = stmt.where(Exercise.difficulty == difficulty)
    result = await db.execute(stmt.order_by(Exercise.name).offset(skip).limit(limit))
    return list(result.scalars().all())


@router.post("", response_model=ExerciseRead, status_code=201)
async def create_exercise(
    payload: ExerciseCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Create a custom exercise owned by the current user."""
    data = payload.model_dump()
    data["name"] = sanitize_text(data["name"])
    if not data["name"]:
        raise HTTPException(status_code=400, detail="Exercise name is required")
    data["description"] = sanitize_text(data["description"])
    data["primary_muscles"] = sanitize_list(data["primary_muscles"])
    data["secondary_muscles"] = sanitize_list(data["secondary_muscles"])
    exercise = Exercise(user_id=user.id, **data)
    db.add(exercise)
    await db.flush()
    return exercise


@router.get("/{exercise_id}", response_model=ExerciseRead)
async def get_exercise(
    exercise_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    exercise = await get_visible_exercise(db, user.id, exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return exercise


@router.patch("/{exercise_id}", response_model=ExerciseRead)
async def update_exercise(
    exercise_id: uuid.UUID,
    payload: ExerciseUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Update a custom exercise (partial)."""
    exercise = await _own_custom_exercise(db, user, exercise_id)
    data = payload.model_dump(exclude_unset=True)
    if "name" in data:
        data["name"] = sanitize_text(data["name"])
        if not data["name"]:
            raise HTTPException(status_code=400, detail="Exercise name is required")
    for key in ("primary_muscles", "secondary_muscles"):
        if key in data:
            data[key] = sanitize_list(data[key])
    for k, v in data.items():
        setattr(exercise, k, v)
    await db.flush()
    return exercise


@router.delete("/{exercise_id}", status_code=204)
async def delete_exercise(
    exercise_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Delete a custom exercise (its logged sets go with it)."""
    exercise = await _own_custom_exercise(db, user, exercise_id)
    await db.delete(exercise)
    return None
