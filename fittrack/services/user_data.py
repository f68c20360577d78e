"""Full export of a user's data and restore from such an export."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from fastapi.encoders import jsonable_encoder
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fittrack.core.dates import utcnow
from fittrack.core.enums import GoalCategory, GoalPriority, SetLabel
from fittrack.models.achievement import UserAchievement
from fittrack.models.body import BodyMeasurement
from fittrack.models.goal import Goal
from fittrack.models.privacy import ConsentRecord
from fittrack.models.program import Program, ProgramWorkout
from fittrack.models.record import PersonalRecord
from fittrack.models.schedule import ScheduledWorkout
from fittrack.models.user import User
from fittrack.models.workout import WorkoutSession, WorkoutSet
from fittrack.services.exercises import resolve_exercise
from fittrack.services.programs import build_program, program_to_dict, sanitize_program
from fittrack.services.validation import validate_program

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"


def _columns(obj: Any, exclude: tuple[str, ...] = ("user_id",)) -> dict[str, Any]:
    return {c.key: getattr(obj, c.key) for c in obj.__table__.columns if c.key not in exclude}


def _session_dict(session: WorkoutSession) -> dict[str, Any]:
    data = _columns(session)
    data["sets"] = [
        {**_columns(s, exclude=("session_id",)), "exercise_name": s.exercise.name if s.exercise else None}
        for s in sorted(session.sets, key=lambda s: (s.set_order or 0, str(s.id)))
    ]
    return data


async def export_user_data(db: AsyncSession, user: User) -> dict[str, Any]:
    """Everything stored for the user, JSON-encoded (ISO timestamps, string ids)."""
    programs = await db.execute(
        select(Program)
        .where(Program.user_id == user.id)
        .options(selectinload(Program.workouts).selectinload(ProgramWorkout.exercises))
        .order_by(Program.created_at)
    )
    sessions = await db.execute(
        select(WorkoutSession)
        .where(WorkoutSession.user_id == user.id)
        .options(selectinload(WorkoutSession.sets).selectinload(WorkoutSet.exercise))
        .order_by(WorkoutSession.started_at)
    )
    schedule = await db.execute(select(ScheduledWorkout).where(ScheduledWorkout.user_id == user.id))
    records = await db.execute(select(PersonalRecord).where(PersonalRecord.user_id == user.id))
    goals = await db.execute(select(Goal).where(Goal.user_id == user.id))
    achievements = await db.execute(select(UserAchievement).where(UserAchievement.user_id == user.id))
    body = await db.execute(select(BodyMeasurement).where(BodyMeasurement.user_id == user.id))
    consents = await db.execute(select(ConsentRecord).where(ConsentRecord.user_id == user.id))

    data = {
        "exported_at": utcnow(),
        "profile": _columns(user, exclude=("password_hash",)),
        "programs": [program_to_dict(p) for p in programs.scalars().all()],
        "workout_sessions": [_session_dict(s) for s in sessions.scalars().all()],
        "scheduled_workouts": [_columns(s) for s in schedule.scalars().all()],
        "personal_records": [_columns(r) for r in records.scalars().all()],
        "goals": [_columns(g) for g in goals.scalars().all()],
        "achievements": [_columns(a) for a in achievements.scalars().all()],
        "body_measurements": [_columns(m) for m in body.scalars().all()],
        "consents": [_columns(c) for c in consents.scalars().all()],
    }
    return jsonable_encoder(data)


async def portable_user_data(db: AsyncSession, user: User) -> dict[str, Any]:
    data = await export_user_data(db, user)
    return {"format": "json", "schema_version": SCHEMA_VERSION, **data}


def _parse_dt(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


async def import_user_data(db: AsyncSession, user: User, data: dict[str, Any]) -> dict[str, int]:
    """Restore programs, goals, body measurements and sessions. Invalid items are skipped and counted."""
    counts = {"programs": 0, "goals": 0, "body_measurements": 0, "workout_sessions": 0, "skipped": 0}

    for item in data.get("programs") or []:
        clean = sanitize_program(item)
        if validate_program(clean):
            counts["skipped"] += 1
            continue
        try:
            program = build_program(
                user.id, clean, is_imported=True, source_template_id=clean.get("source_template_id")
            )
        except ValueError:
            counts["skipped"] += 1
            continue
        db.add(program)
        counts["programs"] += 1

    for item in data.get("goals") or []:
        try:
            db.add(
                Goal(
                    user_id=user.id,
                    title=item["title"],
                    description=item.get("description"),
                    category=GoalCategory(item["category"]),
                    priority=GoalPriority(item.get("priority") or GoalPriority.MEDIUM),
                    target=float(item["target"]),
                    current=float(item.get("current") or 0),
                    unit=item.get("unit"),
                    measurement=item.get("measurement"),
                    completed_at=_parse_dt(item.get("completed_at")),
                )
            )
        except (KeyError, ValueError, TypeError):
            counts["skipped"] += 1
            continue
        counts["goals"] += 1

    for item in data.get("body_measurements") or []:
        try:
            db.add(
                BodyMeasurement(
                    user_id=user.id,
                    measured_at=_parse_dt(item.get("measured_at")) or utcnow(),
                    weight=item.get("weight"),
                    body_fat=item.get("body_fat"),
                    muscle_mass=item.get("muscle_mass"),
                    measurements=item.get("measurements") or {},
                    notes=item.get("notes"),
                )
            )
        except (ValueError, TypeError):
            counts["skipped"] += 1
            continue
        counts["body_measurements"] += 1

    for item in data.get("workout_sessions") or []:
        try:
            session = WorkoutSession(
                user_id=user.id,
                name=item.get("name"),
                started_at=_parse_dt(item.get("started_at")) or utcnow(),
                ended_at=_parse_dt(item.get("ended_at")),
                completed_at=_parse_dt(item.get("completed_at")),
                duration_seconds=item.get("duration_seconds"),
                notes=item.get("notes"),
                offline_id=item.get("offline_id"),
            )
        except (ValueError, TypeError):
            counts["skipped"] += 1
            continue
        sets = []
        for order, s in enumerate(item.get("sets") or []):
            name = s.get("exercise_name")
            if not name:
                continue
            exercise = await resolve_exercise(db, user.id, name)
            sets.append(
                WorkoutSet(
                    exercise_id=exercise.id,
                    set_order=s.get("set_order", order),
                    weight=s.get("weight"),
                    reps=s.get("reps"),
                    duration_seconds=s.get("duration_seconds"),
                    rest_seconds=s.get("rest_seconds"),
                    completed=s.get("completed", True),
                    notes=s.get("notes"),
                    set_label=SetLabel(s["set_label"]) if s.get("set_label") else None,
                )
            )
        session.sets = sets
        db.add(session)
        counts["workout_sessions"] += 1

    await db.flush()
    logger.info("Imported data for user %s: %s", user.id, counts)
    return counts
