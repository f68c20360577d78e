"""Program scheduling: calendar entries, reminders, plan generation."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import get_current_user
from fittrack.core.dates import local_today, start_of_week, utcnow
from fittrack.db.session import get_db
from fittrack.models.program import Program
from fittrack.models.schedule import ScheduledWorkout
from fittrack.models.user import User
from fittrack.models.workout import WorkoutSession
from fittrack.schemas.schedule import (
    ScheduleComplete,
    ScheduledWorkoutCreate,
    ScheduledWorkoutRead,
    ScheduledWorkoutUpdate,
    ScheduleGenerate,
)
from fittrack.services.integration import DATA_CHANGED, get_integration_manager
from fittrack.services.programs import get_program
from fittrack.services.scheduling import generate_plan, reminder_due, schedule_status, scheduled_at, weekdays_for
from fittrack.services.validation import sanitize_text

router = APIRouter()


def _read(entry: ScheduledWorkout, user: User, now: datetime) -> ScheduledWorkoutRead:
    item = ScheduledWorkoutRead.model_validate(entry)
    item.status = schedule_status(entry, now, user.timezone)
    return item


async def _entries(db: AsyncSession, user: User, start: date | None = None, end: date | None = None):
    stmt = select(ScheduledWorkout).where(ScheduledWorkout.user_id == user.id)
    if start:
        stmt = stmt.where(ScheduledWorkout.scheduled_date >= start)
    if end:
        stmt = stmt.where(ScheduledWorkout.scheduled_date <= end)
    result = await db.execute(stmt.order_by(ScheduledWorkout.scheduled_date, ScheduledWorkout.scheduled_time))
    return list(result.scalars().all())


async def _get_entry(db: AsyncSession, user: User, entry_id: uuid.UUID) -> ScheduledWorkout:
    result = await db.execute(
        select(ScheduledWorkout).where(ScheduledWorkout.id == entry_id, ScheduledWorkout.user_id == user.id)
    )
    entry = result.scalar_one_or_none()
    if not entry:
        raise HTTPException(status_code=404, detail="Scheduled workout not found")
    return entry


async def _program_with_workouts(db: AsyncSession, user: User, program_id: uuid.UUID) -> Program:
    program = await get_program(db, user.id, program_id)
    if not program:
        raise HTTPException(status_code=404, detail="Program not found")
    if not program.workouts:
        raise HTTPException(status_code=400, detail="Program has no workouts to schedule")
    return program


def _bind_workout(entry: ScheduledWorkout, program: Program, workout_index: int) -> None:
    if workout_index >= len(program.workouts):
        raise HTTPException(
            status_code=400,
            detail=f"workout_index {workout_index} is out of range (program has {len(program.workouts)} workouts)",
        )
    workout = program.workouts[workout_index]
    entry.program_id = program.id
    entry.program_name = program.name
    entry.workout_index = workout_index
    entry.program_workout_id = workout.id
    entry.workout_name = workout.name


async def _changed(db: AsyncSession, user: User) -> None:
    await get_integration_manager().emit(DATA_CHANGED, {"db": db, "user_id": user.id, "collection": "schedule"})


@router.get("", response_model=list[ScheduledWorkoutRead])
async def list_schedule(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    from_date: date | None = None,
    to_date: date | None = None,
):
    now = utcnow()
    return [_read(e, user, now) for e in await _entries(db, user, from_date, to_date)]


@router.get("/upcoming", response_model=list[ScheduledWorkoutRead])
async def upcoming(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    days: int = 7,
):
    """Open entries from now through the next `days` days."""
    now = utcnow()
    today = local_today(user.timezone, now)
    entries = await _entries(db, user, today, today + timedelta(days=days))
    return [
        _read(e, user, now)
        for e in entries
        if not e.completed and now <= scheduled_at(e, user.timezone) <= now + timedelta(days=days)
    ]


@router.get("/today", response_model=list[ScheduledWorkoutRead])
async def today_schedule(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    now = utcnow()
    today = local_today(user.timezone, now)
    return [_read(e, user, now) for e in await _entries(db, user, today, today)]


@router.get("/week", response_model=list[ScheduledWorkoutRead])
async def week_schedule(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Monday through Sunday of the current local week."""
    now = utcnow()
    monday = start_of_week(local_today(user.timezone, now))
    return [_read(e, user, now) for e in await _entries(db, user, monday, monday + timedelta(days=6))]


@router.get("/reminders", response_model=list[ScheduledWorkoutRead])
async def due_reminders(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Entries whose reminder window contains now."""
    now = utcnow()
    today = local_today(user.timezone, now)
    entries = await _entries(db, user, today - timedelta(days=1), today + timedelta(days=1))
    return [_read(e, user, now) for e in entries if reminder_due(e, now, user.timezone)]


@router.post("", response_model=ScheduledWorkoutRead, status_code=201)
async def create_entry(
    payload: ScheduledWorkoutCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    program = await _program_with_workouts(db, user, payload.program_id)
    entry = ScheduledWorkout(
        user_id=user.id,
        scheduled_date=payload.scheduled_date,
        scheduled_time=payload.scheduled_time,
        reminder=payload.reminder,
        reminder_minutes=payload.reminder_minutes,
        notes=sanitize_text(payload.notes),
        created_at=utcnow(),
    )
    _bind_workout(entry, program, payload.workout_index)
    db.add(entry)
    await db.flush()
    await _changed(db, user)
    return _read(entry, user, utcnow())


@router.post("/generate", response_model=list[ScheduledWorkoutRead], status_code=201)
async def generate_schedule(
    payload: ScheduleGenerate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """
    Create entries over `weeks` weeks from `start_date`, cycling through the program's workouts.
    Weekdays default from the program frequency (3x: Mon/Wed/Fri ... Daily: every day).
    """
    program = await _program_with_workouts(db, user, payload.program_id)
    weekdays = payload.weekdays if payload.weekdays else weekdays_for(program.frequency)
    if any(d < 0 or d > 6 for d in weekdays):
        raise HTTPException(status_code=400, detail="weekdays must be between 0 (Monday) and 6 (Sunday)")
    plan = generate_plan(payload.start_date, payload.weeks, weekdays, len(program.workouts), payload.scheduled_time)
    now = utcnow()
    entries = []
    for item in plan:
        entry = ScheduledWorkout(
            user_id=user.id,
            scheduled_date=item["scheduled_date"],
            scheduled_time=item["scheduled_time"],
            reminder=payload.reminder,
            reminder_minutes=payload.reminder_minutes,
            created_at=now,
        )
        _bind_workout(entry, program, item["workout_index"])
        db.add(entry)
        entries.append(entry)
    await db.flush()
    await _changed(db, user)
    return [_read(e, user, now) for e in entries]


@router.patch("/{entry_id}", response_model=ScheduledWorkoutRead)
async def update_entry(
    entry_id: uuid.UUID,
    payload: ScheduledWorkoutUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    entry = await _get_entry(db, user, entry_id)
    data = payload.model_dump(exclude_unset=True)
    for key in ("scheduled_date", "scheduled_time"):
        if key in data and data[key] is None:
            raise HTTPException(status_code=400, detail=f"{key} is required")
    if "workout_index" in data:
        program = await _program_with_workouts(db, user, entry.program_id)
        _bind_workout(entry, program, data.pop("workout_index"))
    if "notes" in data:
        data["notes"] = sanitize_text(data["notes"])
    for k, v in data.items():
        setattr(entry, k, v)
    await db.flush()
    await _changed(db, user)
    return _read(entry, user, utcnow())


@router.delete("/{entry_id}", status_code=204)
async def delete_entry(
    entry_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    entry = await _get_entry(db, user, entry_id)
    await db.delete(entry)
    await db.flush()
    await _changed(db, user)
    return None


@router.post("/{entry_id}/complete", response_model=ScheduledWorkoutRead)
async def complete_entry(
    entry_id: uuid.UUID,
    payload: ScheduleComplete | None = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    entry = await _get_entry(db, user, entry_id)
    session_id = payload.session_id if payload else None
    if session_id is not None:
        owned = await db.execute(
            select(WorkoutSession.id).where(WorkoutSession.id == session_id, WorkoutSession.user_id == user.id)
        )
        if owned.scalar_one_or_none() is None:
            raise HTTPException(status_code=404, detail="Workout not found")
        entry.session_id = session_id
    now = utcnow()
    entry.completed = True
    entry.completed_at = now
    await db.flush()
    await _changed(db, user)
    return _read(entry, user, now)
