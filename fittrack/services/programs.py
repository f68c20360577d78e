"""Program building, export/import, template and session conversion, and progress."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fittrack.core.dates import ensure_utc
from fittrack.core.enums import Difficulty, ProgramDuration, ProgramFrequency, ProgramGoal
from fittrack.models.program import Program, ProgramExercise, ProgramWorkout
from fittrack.models.schedule import ScheduledWorkout
from fittrack.models.workout import WorkoutSession, WorkoutSet
from fittrack.services.validation import sanitize_list, sanitize_text
from fittrack.services.workout_metrics import best_set, group_sets_by_exercise, one_rep_max, workout_volume

EXPORT_VERSION = "1.0"
_PROGRAM_FIELDS = (
    "name",
    "description",
    "goal",
    "difficulty",
    "duration",
    "frequency",
    "equipment",
    "target_muscles",
    "tags",
    "notes",
    "progression",
)
_LIST_FIELDS = ("equipment", "target_muscles", "tags", "notes")
_ENUM_FIELDS = {
    "goal": ProgramGoal,
    "difficulty": Difficulty,
    "duration": ProgramDuration,
    "frequency": ProgramFrequency,
}


def with_structure(stmt):
    return stmt.options(selectinload(Program.workouts).selectinload(ProgramWorkout.exercises))


async def get_program(db: AsyncSession, user_id: uuid.UUID, program_id: uuid.UUID) -> Program | None:
    """The user's program with workouts and exercises loaded, or None."""
    result = await db.execute(
        with_structure(select(Program))
        .where(Program.id == program_id, Program.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def sanitize_program(data: dict[str, Any]) -> dict[str, Any]:
    """Clean the text fields of a program dict, including nested workouts/exercises."""
    clean = dict(data)
    for key in ("name", "description"):
        if key in clean:
            clean[key] = sanitize_text(clean[key])
    for key in _LIST_FIELDS:
        if key in clean:
            clean[key] = sanitize_list(clean[key])
    if clean.get("workouts") is not None:
        clean["workouts"] = [
            {
                **w,
                "name": sanitize_text(w.get("name")),
                "notes": sanitize_text(w.get("notes")),
                "exercises": [
                    {**e, "name": sanitize_text(e.get("name")), "notes": sanitize_text(e.get("notes"))}
                    for e in w.get("exercises") or []
                ],
            }
            for w in clean["workouts"]
        ]
    return clean


def build_workouts(workouts: list[dict[str, Any]]) -> list[ProgramWorkout]:
    """ORM workouts (with exercises) in the given order."""
    built = []
    for w_index, w in enumerate(workouts):
        workout = ProgramWorkout(name=w["name"], notes=w.get("notes"), order_in_program=w_index)
        workout.exercises = [
            ProgramExercise(
                name=e["name"],
                exercise_id=e.get("exercise_id"),
                sets=e.get("sets", 3),
                reps=str(e.get("reps", "10")),
                weight=e.get("weight") or 0,
                rest_seconds=e.get("rest_seconds"),
                notes=e.get("notes"),
                order_in_workout=e_index,
            )
            for e_index, e in enumerate(w.get("exercises") or [])
        ]
        built.append(workout)
    return built


def program_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Top-level program columns from a dict. Enum fields may be given as values ("Strength")."""
    fields = {k: data[k] for k in _PROGRAM_FIELDS if k in data}
    for key, enum_cls in _ENUM_FIELDS.items():
        if fields.get(key) is not None:
            fields[key] = enum_cls(fields[key])
    return fields


def apply_program_data(program: Program, data: dict[str, Any]) -> None:
    """Partial update; a workouts list replaces the whole nested structure."""
    for key, value in program_fields(data).items():
        setattr(program, key, [] if key in _LIST_FIELDS and value is None else value)
    if data.get("workouts") is not None:
        program.workouts = build_workouts(data["workouts"])


def build_program(user_id: uuid.UUID, data: dict[str, Any], **extra: Any) -> Program:
    """Unsaved Program with its nested workouts."""
    program = Program(user_id=user_id, **program_fields(data), **extra)
    for key in _LIST_FIELDS:
        if getattr(program, key) is None:
            setattr(program, key, [])
    program.workouts = build_workouts(data.get("workouts") or [])
    return program


def program_to_dict(program: Program) -> dict[str, Any]:
    """Portable representation; the import endpoint accepts it back."""

    def enum_value(value):
        return value.value if value is not None else None

    return {
        "version": EXPORT_VERSION,
        "name": program.name,
        "description": program.description,
        "goal": enum_value(program.goal),
        "difficulty": enum_value(program.difficulty),
        "duration": enum_value(program.duration),
        "frequency": enum_value(program.frequency),
        "equipment": list(program.equipment or []),
        "target_muscles": list(program.target_muscles or []),
        "tags": list(program.tags or []),
        "notes": list(program.notes or []),
        "progression": program.progression,
        "source_template_id": program.source_template_id,
        "workouts": [
            {
                "name": w.name,
                "notes": w.notes,
                "exercises": [
                    {
                        "name": e.name,
                        "sets": e.sets,
                        "reps": e.reps,
                        "weight": e.weight,
                        "rest_seconds": e.rest_seconds,
                        "notes": e.notes,
                    }
                    for e in w.exercises
                ],
            }
            for w in program.workouts
        ],
    }


def template_to_program_data(template: dict[str, Any]) -> dict[str, Any]:
    """Program dict from a catalog template (workouts as (name, [(exercise, sets, reps, rest)]))."""
    data = {k: template.get(k) for k in _PROGRAM_FIELDS if k != "notes"}
    data["notes"] = list(template.get("notes") or [])
    data["workouts"] = [
        {
            "name": workout_name,
            "exercises": [
                {"name": name, "sets": sets, "reps": reps, "rest_seconds": rest}
                for name, sets, reps, rest in exercises
            ],
        }
        for workout_name, exercises in template["workouts"]
    ]
    return data


def session_to_program_data(session: WorkoutSession, name: str | None, description: str | None) -> dict[str, Any]:
    """One-workout program from a session: exercise order and set counts preserved, best set as target."""
    exercises = []
    for _, ex_name, sets in group_sets_by_exercise(session):
        best = best_set(sets)
        exercises.append(
            {
                "name": ex_name or "Exercise",
                "sets": len(sets),
                "reps": str(best.reps if best is not None and best.reps else 10),
                "weight": float(best.weight or 0) if best is not None else 0,
            }
        )
    title = name or session.name or "Saved Workout"
    return {
        "name": title,
        "description": description or f"Created from workout on {ensure_utc(session.started_at):%Y-%m-%d}",
        "tags": ["from-workout"],
        "workouts": [{"name": session.name or "Workout", "exercises": exercises}],
    }


async def program_progress(db: AsyncSession, program: Program, user_id: uuid.UUID, today: date) -> dict[str, Any]:
    """Completion and strength progress for one program."""
    result = await db.execute(
        select(WorkoutSession)
        .where(
            WorkoutSession.user_id == user_id,
            WorkoutSession.program_id == program.id,
            WorkoutSession.completed_at.isnot(None),
        )
        .options(selectinload(WorkoutSession.sets).selectinload(WorkoutSet.exercise))
        .order_by(WorkoutSession.completed_at.desc())
    )
    sessions = list(result.scalars().all())

    counts_row = await db.execute(
        select(
            func.count(ScheduledWorkout.id),
            func.count(ScheduledWorkout.id).filter(ScheduledWorkout.completed.is_(True)),
        ).where(
            ScheduledWorkout.user_id == user_id,
            ScheduledWorkout.program_id == program.id,
            ScheduledWorkout.scheduled_date <= today,
        )
    )
    due, done = counts_row.one()
    adherence = round(done / due * 100, 1) if due else 0

    per_workout = {w.id: 0 for w in program.workouts}
    exercises: dict[str, dict[str, float]] = {}
    for session in sessions:
        if session.program_workout_id in per_workout:
            per_workout[session.program_workout_id] += 1
        for _, name, sets in group_sets_by_exercise(session):
            best = best_set(sets)
            if best is None:
                continue
            entry = exercises.setdefault(name or "Exercise", {"best_weight": 0.0, "estimated_one_rep_max": 0.0})
            entry["best_weight"] = max(entry["best_weight"], float(best.weight or 0))
            entry["estimated_one_rep_max"] = max(
                entry["estimated_one_rep_max"], round(one_rep_max(best.weight, best.reps), 2)
            )

    return {
        "program_id": program.id,
        "sessions_completed": len(sessions),
        "workouts": [
            {"workout_id": w.id, "name": w.name, "completed": per_workout[w.id]} for w in program.workouts
        ],
        "scheduled_due": due,
        "scheduled_completed": done,
        "adherence": adherence,
        "last_session_at": sessions[0].completed_at if sessions else None,
        "exercises": [{"name": name, **values} for name, values in sorted(exercises.items())],
        "total_volume": round(sum(workout_volume(s) for s in sessions), 2),
    }
