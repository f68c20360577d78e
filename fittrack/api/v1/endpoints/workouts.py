"""Workout session CRUD, set tracking with PR detection, and completion."""

from __future__ import annotations

import uuid
from collections import Counter
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import case, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fittrack.api.deps import get_current_user
from fittrack.core.constants import MAX_EXERCISES_PER_SESSION, MAX_SETS_PER_EXERCISE_PER_SESSION
from fittrack.core.dates import ensure_utc, utcnow
from fittrack.db.session import get_db
from fittrack.models.record import PersonalRecord
from fittrack.models.schedule import ScheduledWorkout
from fittrack.models.user import User
from fittrack.models.workout import WorkoutSession, WorkoutSet
from fittrack.schemas.record import PersonalRecordRead
from fittrack.schemas.workout import (
    PreviousSession,
    WorkoutComplete,
    WorkoutCreate,
    WorkoutFromProgram,
    WorkoutRead,
    WorkoutReadWithSets,
    WorkoutSetCreate,
    WorkoutSetRead,
    WorkoutSetUpdate,
    WorkoutSummary,
    WorkoutUpdate,
)
from fittrack.services.achievements import evaluate_achievements
from fittrack.services.exercises import get_visible_exercise, resolve_exercise
from fittrack.services.integration import (
    ACHIEVEMENT_UNLOCKED,
    DATA_CHANGED,
    WORKOUT_COMPLETED,
    get_integration_manager,
)
from fittrack.services.pr_detection import flag_pr
from fittrack.services.programs import get_program
from fittrack.services.validation import rep_numbers, sanitize_text
from fittrack.services.workout_metrics import validate_session_for_completion, workout_summary

router = APIRouter()

SET_FIELDS_FOR_PR = {"weight", "reps", "duration_seconds", "completed"}


async def _get_session(db: AsyncSession, user: User, workout_id: uuid.UUID) -> WorkoutSession:
    """The user's session with sets and their exercises loaded (fresh from the DB)."""
    result = await db.execute(
        select(WorkoutSession)
        .where(WorkoutSession.id == workout_id, WorkoutSession.user_id == user.id)
        .options(selectinload(WorkoutSession.sets).selectinload(WorkoutSet.exercise))
        .execution_options(populate_existing=True)
    )
    session = result.scalar_one_or_none()
    if not session:
        raise HTTPException(status_code=404, detail="Workout not found")
    return session


async def _get_set(db: AsyncSession, session: WorkoutSession, set_id: uuid.UUID) -> WorkoutSet:
    result = await db.execute(
        select(WorkoutSet)
        .where(WorkoutSet.id == set_id, WorkoutSet.session_id == session.id)
        .options(selectinload(WorkoutSet.exercise))
        .execution_options(populate_existing=True)
    )
    set_ = result.scalar_one_or_none()
    if not set_:
        raise HTTPException(status_code=404, detail="Set not found")
    return set_


async def _get_scheduled(db: AsyncSession, user: User, entry_id: uuid.UUID) -> ScheduledWorkout:
    result = await db.execute(
        select(ScheduledWorkout).where(ScheduledWorkout.id == entry_id, ScheduledWorkout.user_id == user.id)
    )
    entry = result.scalar_one_or_none()
    if not entry:
        raise HTTPException(status_code=404, detail="Scheduled workout not found")
    return entry


def _with_sets(session: WorkoutSession) -> WorkoutReadWithSets:
    detail = WorkoutReadWithSets.model_validate(session)
    detail.sets = [
        WorkoutSetRead.model_validate(s) for s in sorted(session.sets, key=lambda s: (s.set_order, str(s.id)))
    ]
    detail.summary = WorkoutSummary(**workout_summary(session))
    return detail


async def _changed(db: AsyncSession, user: User) -> None:
    await get_integration_manager().emit(DATA_CHANGED, {"db": db, "user_id": user.id, "collection": "workouts"})


@router.get("", response_model=list[WorkoutRead])
async def list_workouts(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    skip: int = 0,
    limit: int = 50,
    from_date: datetime | None = None,
    to_date: datetime | None = None,
    program_id: uuid.UUID | None = None,
):
    """List sessions (without sets), newest first, optionally filtered by date range or program."""
    stmt = select(WorkoutSession).where(WorkoutSession.user_id == user.id)
    if from_date:
        stmt = stmt.where(WorkoutSession.started_at >= from_date)
    if to_date:
        stmt = stmt.where(WorkoutSession.started_at <= to_date)
    if program_id:
        stmt = stmt.where(WorkoutSession.program_id == program_id)
    result = await db.execute(stmt.order_by(WorkoutSession.started_at.desc()).offset(skip).limit(limit))
    return list(result.scalars().all())


@router.post("", response_model=WorkoutRead, status_code=201)
async def create_workout(
    payload: WorkoutCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Start a new session."""
    if payload.program_id is not None and await get_program(db, user.id, payload.program_id) is None:
        raise HTTPException(status_code=404, detail="Program not found")
    if payload.scheduled_workout_id is not None:
        await _get_scheduled(db, user, payload.scheduled_workout_id)
    data = payload.model_dump()
    data["name"] = sanitize_text(data["name"])
    data["notes"] = sanitize_text(data["notes"])
    data["started_at"] = ensure_utc(data["started_at"]) or utcnow()
    session = WorkoutSession(user_id=user.id, **data)
    db.add(session)
    await db.flush()
    return session


@router.post("/from-program", response_model=WorkoutReadWithSets, status_code=201)
async def create_from_program(
    payload: WorkoutFromProgram,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Start a session pre-filled (completed=false) with the targets of one program workout."""
    program = await get_program(db, user.id, payload.program_id)
    if not program:
        raise HTTPException(status_code=404, detail="Program not found")
    if payload.workout_index >= len(program.workouts):
        raise HTTPException(status_code=400, detail=f"workout_index {payload.workout_index} is out of range")
    if payload.scheduled_workout_id is not None:
        await _get_scheduled(db, user, payload.scheduled_workout_id)
    workout = program.workouts[payload.workout_index]

    sets = []
    per_exercise: Counter[uuid.UUID] = Counter()
    for target in workout.exercises:
        exercise = None
        if target.exercise_id is not None:
            exercise = await get_visible_exercise(db, user.id, target.exercise_id)
        if exercise is None:
            exercise = await resolve_exercise(db, user.id, target.name)
        per_exercise[exercise.id] += target.sets
        if per_exercise[exercise.id] > MAX_SETS_PER_EXERCISE_PER_SESSION:
            raise HTTPException(
                status_code=400,
                detail=f"Maximum {MAX_SETS_PER_EXERCISE_PER_SESSION} sets per exercise per session.",
            )
        reps = rep_numbers(target.reps)
        for _ in range(target.sets):
            sets.append(
                WorkoutSet(
                    exercise_id=exercise.id,
                    set_order=len(sets),
                    weight=target.weight or None,
                    reps=reps[0] if reps else None,
                    rest_seconds=target.rest_seconds,
                    completed=False,
                )
            )
    if len(per_exercise) > MAX_EXERCISES_PER_SESSION:
        raise HTTPException(status_code=400, detail=f"Maximum {MAX_EXERCISES_PER_SESSION} exercises per session.")

    session = WorkoutSession(
        user_id=user.id,
        name=workout.name,
        program_id=program.id,
        program_workout_id=workout.id,
        scheduled_workout_id=payload.scheduled_workout_id,
        started_at=utcnow(),
    )
    session.sets = sets
    db.add(session)
    await db.flush()
    return _with_sets(await _get_session(db, user, session.id))


@router.get("/previous-session/{exercise_id}", response_model=PreviousSession)
async def previous_session(
    exercise_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    exclude_workout_id: uuid.UUID | None = None,
):
    """Sets of the most recent completed session that included this exercise."""
    stmt = (
        select(WorkoutSession.id, WorkoutSession.completed_at)
        .join(WorkoutSet, WorkoutSet.session_id == WorkoutSession.id)
        .where(
            WorkoutSession.user_id == user.id,
            WorkoutSession.completed_at.isnot(None),
            WorkoutSet.exercise_id == exercise_id,
        )
    )
    if exclude_workout_id is not None:
        stmt = stmt.where(WorkoutSession.id != exclude_workout_id)
    row = (await db.execute(stmt.order_by(WorkoutSession.completed_at.desc()).limit(1))).first()
    if row is None:
        return PreviousSession()
    result = await db.execute(
        select(WorkoutSet)
        .where(WorkoutSet.session_id == row.id, WorkoutSet.exercise_id == exercise_id)
        .options(selectinload(WorkoutSet.exercise))
        .order_by(WorkoutSet.set_order)
    )
    return PreviousSession(
        session_id=row.id,
        completed_at=row.completed_at,
        sets=[WorkoutSetRead.model_validate(s) for s in result.scalars().all()],
    )


@router.get("/{workout_id}", response_model=WorkoutReadWithSets)
async def get_workout(
    workout_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Session with all sets (and exercise refs) plus its summary."""
    return _with_sets(await _get_session(db, user, workout_id))


@router.get("/{workout_id}/summary", response_model=WorkoutSummary)
async def get_workout_summary(
    workout_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return workout_summary(await _get_session(db, user, workout_id))


@router.patch("/{workout_id}", response_model=WorkoutRead)
async def update_workout(
    workout_id: uuid.UUID,
    payload: WorkoutUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Partial update. duration_seconds is derived from started_at/ended_at when not given."""
    session = await _get_session(db, user, workout_id)
    data = payload.model_dump(exclude_unset=True)
    if "started_at" in data and data["started_at"] is None:
        raise HTTPException(status_code=400, detail="started_at cannot be empty")
    for key in ("name", "notes"):
        if key in data:
            data[key] = sanitize_text(data[key])
    if data.get("ended_at") and "duration_seconds" not in data:
        started = ensure_utc(data.get("started_at") or session.started_at)
        delta = ensure_utc(data["ended_at"]) - started
        data["duration_seconds"] = max(0, int(delta.total_seconds()))
    for k, v in data.items():
        setattr(session, k, v)
    await db.flush()
    await _changed(db, user)
    return session


@router.delete("/{workout_id}", status_code=204)
async def delete_workout(
    workout_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Delete a session, its sets and the records it set."""
    session = await _get_session(db, user, workout_id)
    await db.execute(delete(PersonalRecord).where(PersonalRecord.session_id == session.id))
    await db.delete(session)
    await db.flush()
    await _changed(db, user)
    return None


@router.post("/{workout_id}/sets", response_model=WorkoutSetRead, status_code=201)
async def add_set(
    workout_id: uuid.UUID,
    payload: WorkoutSetCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Add a set (max 50 exercises per session, 20 sets per exercise). Completed sets are checked for PRs."""
    session = await _get_session(db, user, workout_id)
    if await get_visible_exercise(db, user.id, payload.exercise_id) is None:
        raise HTTPException(status_code=404, detail="Exercise not found")

    # One query: distinct exercise count and sets count for this exercise
    counts_row = await db.execute(
        select(
            func.count(func.distinct(WorkoutSet.exercise_id)).label("n_exercises"),
            func.count(case((WorkoutSet.exercise_id == payload.exercise_id, 1))).label("n_sets_this_ex"),
        ).where(WorkoutSet.session_id == session.id)
    )
    row = counts_row.one()
    n_exercises = int(row.n_exercises or 0)
    n_sets_this_ex = int(row.n_sets_this_ex or 0)
    if n_sets_this_ex >= MAX_SETS_PER_EXERCISE_PER_SESSION:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {MAX_SETS_PER_EXERCISE_PER_SESSION} sets per exercise per session.",
        )
    if n_exercises >= MAX_EXERCISES_PER_SESSION and n_sets_this_ex == 0:
        raise HTTPException(status_code=400, detail=f"Maximum {MAX_EXERCISES_PER_SESSION} exercises per session.")

    data = payload.model_dump()
    data["notes"] = sanitize_text(data["notes"])
    set_ = WorkoutSet(session_id=session.id, **data)
    db.add(set_)
    await db.flush()
    await flag_pr(db, user.id, set_)
    session.last_modified = utcnow()
    await db.flush()
    await _changed(db, user)
    return await _get_set(db, session, set_.id)


@router.patch("/{workout_id}/sets/{set_id}", response_model=WorkoutSetRead)
async def update_set(
    workout_id: uuid.UUID,
    set_id: uuid.UUID,
    payload: WorkoutSetUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Partial update; PR detection runs again when the performance or completion changes."""
    session = await _get_session(db, user, workout_id)
    set_ = await _get_set(db, session, set_id)
    data = payload.model_dump(exclude_unset=True)
    if "completed" in data and data["completed"] is None:
        raise HTTPException(status_code=400, detail="completed cannot be empty")
    if "notes" in data:
        data["notes"] = sanitize_text(data["notes"])
    for k, v in data.items():
        setattr(set_, k, v)
    if SET_FIELDS_FOR_PR & data.keys():
        await db.execute(delete(PersonalRecord).where(PersonalRecord.set_id == set_.id))
        await db.flush()
        await flag_pr(db, user.id, set_)
    session.last_modified = utcnow()
    await db.flush()
    await _changed(db, user)
    return await _get_set(db, session, set_.id)


@router.delete("/{workout_id}/sets/{set_id}", status_code=204)
async def delete_set(
    workout_id: uuid.UUID,
    set_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    session = await _get_session(db, user, workout_id)
    set_ = await _get_set(db, session, set_id)
    await db.execute(delete(PersonalRecord).where(PersonalRecord.set_id == set_.id))
    session.sets.remove(set_)
    session.last_modified = utcnow()
    await db.flush()
    await _changed(db, user)
    return None


@router.post("/{workout_id}/complete")
async def complete_workout(
    workout_id: uuid.UUID,
    payload: WorkoutComplete | None = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """
    Finish a session: stamp end/completion and duration, mark the linked scheduled
    workout completed, evaluate achievements and emit workout.completed.
    Returns the summary, the session's personal records and new achievements.
    """
    session = await _get_session(db, user, workout_id)
    if session.completed_at is not None:
        raise HTTPException(status_code=400, detail="Workout already completed")
    now = utcnow()
    ended_at = ensure_utc(payload.ended_at) if payload and payload.ended_at else now
    errors = validate_session_for_completion(session, ended_at)
    if errors:
        raise HTTPException(status_code=400, detail=errors)

    session.ended_at = ended_at
    session.completed_at = now
    session.duration_seconds = max(0, int((ended_at - ensure_utc(session.started_at)).total_seconds()))
    if payload and payload.notes is not None:
        session.notes = sanitize_text(payload.notes)
    session.last_modified = now

    if session.scheduled_workout_id is not None:
        result = await db.execute(
            select(ScheduledWorkout).where(
                ScheduledWorkout.id == session.scheduled_workout_id, ScheduledWorkout.user_id == user.id
            )
        )
        entry = result.scalar_one_or_none()
        if entry is not None:
            entry.completed = True
            entry.completed_at = now
            entry.session_id = session.id
    await db.flush()

    records = await db.execute(
        select(PersonalRecord)
        .where(PersonalRecord.session_id == session.id)
        .options(selectinload(PersonalRecord.exercise))
        .order_by(PersonalRecord.achieved_at)
    )
    new_records = [PersonalRecordRead.model_validate(r) for r in records.scalars().all()]
    unlocked = await evaluate_achievements(db, user, now)
    summary = workout_summary(session)

    bus = get_integration_manager()
    await bus.emit(WORKOUT_COMPLETED, {"db": db, "user_id": user.id, "session_id": session.id, "summary": summary})
    for achievement in unlocked:
        await bus.emit(ACHIEVEMENT_UNLOCKED, {"db": db, "user_id": user.id, "achievement_id": achievement["id"]})

    return {
        "workout": _with_sets(session),
        "summary": summary,
        "new_records": new_records,
        "achievements": unlocked,
    }
