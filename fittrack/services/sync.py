"""Offline sync: idempotent upserts of workouts and programs keyed by offline_id or id."""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from datetime import datetime
from typing import Any

from pydantic import ValidationError
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fittrack.core.constants import MAX_EXERCISES_PER_SESSION, MAX_SETS_PER_EXERCISE_PER_SESSION
from fittrack.core.dates import ensure_utc, utcnow
from fittrack.core.errors import FRIENDLY_MESSAGES
from fittrack.models.program import Program, ProgramWorkout
from fittrack.models.user import User
from fittrack.models.workout import WorkoutSession, WorkoutSet
from fittrack.schemas.sync import SyncProgram, SyncWorkout
from fittrack.services.exercises import get_visible_exercise, resolve_exercise
from fittrack.services.pr_detection import flag_pr
from fittrack.services.programs import apply_program_data, build_program, get_program, sanitize_program
from fittrack.services.validation import sanitize_text, validate_program

logger = logging.getLogger(__name__)


class SyncError(Exception):
    """A sync payload that cannot be applied."""


def _key_filter(model, key: str):
    """Match on offline_id, or on the primary key when the key is a UUID."""
    try:
        return or_(model.offline_id == key, model.id == uuid.UUID(key))
    except ValueError:
        return model.offline_id == key


async def _find(db: AsyncSession, model, user_id: uuid.UUID, key: str | None, *options):
    if not key:
        return None
    result = await db.execute(
        select(model).where(model.user_id == user_id, _key_filter(model, key)).options(*options)
    )
    return result.scalars().first()


async def _build_sets(db: AsyncSession, user_id: uuid.UUID, payload: SyncWorkout) -> list[WorkoutSet]:
    # Reject before resolve_exercise creates anything for the earlier sets
    for order, item in enumerate(payload.sets):
        if item.exercise_id is None and not (item.exercise_name and item.exercise_name.strip()):
            raise SyncError(f"Set {order + 1} needs exercise_name or exercise_id")

    sets = []
    per_exercise: Counter[uuid.UUID] = Counter()
    for order, item in enumerate(payload.sets):
        if item.exercise_id is not None:
            exercise = await get_visible_exercise(db, user_id, item.exercise_id)
            if exercise is None:
                raise SyncError(f"Exercise {item.exercise_id} not found")
        else:
            exercise = await resolve_exercise(db, user_id, item.exercise_name)
        per_exercise[exercise.id] += 1
        if per_exercise[exercise.id] > MAX_SETS_PER_EXERCISE_PER_SESSION:
            raise SyncError(f"Maximum {MAX_SETS_PER_EXERCISE_PER_SESSION} sets per exercise per session.")
        if len(per_exercise) > MAX_EXERCISES_PER_SESSION:
            raise SyncError(f"Maximum {MAX_EXERCISES_PER_SESSION} exercises per session.")
        sets.append(
            WorkoutSet(
                exercise_id=exercise.id,
                set_order=order,
                weight=item.weight,
                reps=item.reps,
                duration_seconds=item.duration_seconds,
                rest_seconds=item.rest_seconds,
                completed=item.completed,
                set_label=item.set_label,
                notes=sanitize_text(item.notes),
            )
        )
    return sets


async def sync_workout(db: AsyncSession, user: User, payload: SyncWorkout, now: datetime | None = None) -> dict:
    now = now or utcnow()
    key = payload.offline_id or (str(payload.id) if payload.id else None)
    session = await _find(db, WorkoutSession, user.id, key, selectinload(WorkoutSession.sets))
    if payload.program_id is not None and await get_program(db, user.id, payload.program_id) is None:
        raise SyncError("Program not found")
    sets = await _build_sets(db, user.id, payload)

    fields = payload.model_dump(exclude={"id", "sets", "offline_id"}, exclude_unset=True)
    for key in ("started_at", "ended_at", "completed_at"):
        if fields.get(key) is not None:
            fields[key] = ensure_utc(fields[key])
    for key in ("name", "notes"):
        if key in fields:
            fields[key] = sanitize_text(fields[key])
    if session is None:
        session = WorkoutSession(user_id=user.id, offline_id=payload.offline_id, **fields)
        if payload.id is not None:
            session.id = payload.id
        action = "created"
        db.add(session)
    else:
        for k, v in fields.items():
            setattr(session, k, v)
        action = "updated"
    if session.started_at is None:
        session.started_at = now
    session.sets = []
    session.synced_at = now
    session.last_modified = now
    await db.flush()
    # One set at a time so each is judged only against the sets before it
    for s in sets:
        session.sets.append(s)
        await db.flush()
        await flag_pr(db, user.id, s)
    await db.flush()
    logger.info("Synced workout %s (%s) for user %s", session.id, action, user.id)
    return {"success": True, "id": session.id, "action": action, "synced_at": now}


async def sync_program(db: AsyncSession, user: User, payload: SyncProgram, now: datetime | None = None) -> dict:
    now = now or utcnow()
    data = sanitize_program(payload.model_dump(exclude={"id", "offline_id"}))
    errors = validate_program(data)
    if errors:
        raise SyncError("; ".join(errors))
    key = payload.offline_id or (str(payload.id) if payload.id else None)
    program = await _find(
        db, Program, user.id, key, selectinload(Program.workouts).selectinload(ProgramWorkout.exercises)
    )
    if program is None:
        program = build_program(user.id, data, offline_id=payload.offline_id)
        if payload.id is not None:
            program.id = payload.id
        action = "created"
        db.add(program)
    else:
        apply_program_data(program, data)
        program.updated_at = now
        action = "updated"
    program.synced_at = now
    await db.flush()
    logger.info("Synced program %s (%s) for user %s", program.id, action, user.id)
    return {"success": True, "id": program.id, "action": action, "synced_at": now}


async def sync_status(db: AsyncSession, model, user_id: uuid.UUID, key: str) -> dict[str, Any]:
    row = await _find(db, model, user_id, key)
    if row is None:
        return {"exists": False}
    modified = getattr(row, "last_modified", None) or getattr(row, "updated_at", None)
    return {"exists": True, "id": row.id, "synced_at": row.synced_at, "last_modified": modified}


async def sync_batch(db: AsyncSession, user: User, items: list[Any], now: datetime | None = None) -> dict:
    """
    Apply items in order. Each item runs in its own savepoint, so a rejected item
    leaves nothing behind and does not stop the ones after it.
    """
    now = now or utcnow()
    results = []
    for item in items:
        try:
            async with db.begin_nested():
                if item.kind == "workout":
                    result = await sync_workout(db, user, SyncWorkout.model_validate(item.payload), now)
                else:
                    result = await sync_program(db, user, SyncProgram.model_validate(item.payload), now)
        except (ValidationError, SyncError) as e:
            logger.warning("Sync batch item (%s) rejected for user %s: %s", item.kind, user.id, e)
            result = {"success": False, "error": str(e)}
        except IntegrityError as e:
            logger.warning("Sync batch item (%s) conflicts for user %s: %s", item.kind, user.id, e.orig)
            result = {"success": False, "error": FRIENDLY_MESSAGES["conflict"]}
        except SQLAlchemyError as e:
            logger.error("Sync batch item (%s) failed for user %s: %s", item.kind, user.id, e)
            result = {"success": False, "error": FRIENDLY_MESSAGES["unknown"]}
        results.append(result)
    succeeded = sum(1 for r in results if r["success"])
    return {"processed": len(results), "succeeded": succeeded, "failed": len(results) - succeeded, "results": results}
