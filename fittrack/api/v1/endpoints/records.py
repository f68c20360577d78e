"""Personal records: list, best per exercise, trophy room, manual entries."""

from __future__ import annotations

import uuid
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fittrack.api.deps import get_current_user
from fittrack.core.dates import ensure_utc, start_of_period, to_local, utcnow
from fittrack.core.enums import PRType
from fittrack.db.session import get_db
from fittrack.models.record import PersonalRecord
from fittrack.models.user import User
from fittrack.schemas.record import BestRecord, PersonalRecordCreate, PersonalRecordRead
from fittrack.services.exercises import get_visible_exercise
from fittrack.services.integration import DATA_CHANGED, get_integration_manager
from fittrack.services.validation import sanitize_text
from fittrack.services.workout_metrics import one_rep_max

router = APIRouter()


def _records_query(user: User):
    return (
        select(PersonalRecord)
        .where(PersonalRecord.user_id == user.id)
        .options(selectinload(PersonalRecord.exercise))
    )


def _manual_value(payload: PersonalRecordCreate) -> float:
    if payload.record_type == PRType.WEIGHT:
        return float(payload.weight or 0)
    if payload.record_type == PRType.VOLUME:
        return float(payload.weight or 0) * int(payload.reps or 0)
    return float(payload.duration_seconds or 0)


@router.get("", response_model=list[PersonalRecordRead])
async def list_records(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    exercise_id: uuid.UUID | None = None,
    record_type: PRType | None = None,
    limit: int = 100,
):
    stmt = _records_query(user)
    if exercise_id:
        stmt = stmt.where(PersonalRecord.exercise_id == exercise_id)
    if record_type:
        stmt = stmt.where(PersonalRecord.record_type == record_type)
    result = await db.execute(stmt.order_by(PersonalRecord.achieved_at.desc()).limit(limit))
    return list(result.scalars().all())


@router.get("/best", response_model=list[BestRecord])
async def best_records(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Per exercise: the heaviest weight record and the best estimated 1RM."""
    result = await db.execute(_records_query(user))
    best: dict[uuid.UUID, BestRecord] = {}
    for record in result.scalars().all():
        entry = best.get(record.exercise_id)
        if entry is None:
            entry = BestRecord(
                exercise_id=record.exercise_id,
                exercise_name=record.exercise.name if record.exercise else "",
                best_one_rep_max=0,
            )
            best[record.exercise_id] = entry
        weight = record.weight or 0
        if weight and (entry.max_weight is None or weight > entry.max_weight):
            entry.max_weight = weight
            entry.max_weight_reps = record.reps
            entry.achieved_at = record.achieved_at
        estimate = record.one_rep_max or one_rep_max(record.weight, record.reps)
        entry.best_one_rep_max = round(max(entry.best_one_rep_max, estimate), 2)
    return sorted(best.values(), key=lambda b: b.exercise_name.lower())


@router.get("/trophy-room")
async def trophy_room(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    period: Literal["month", "year"] = "month",
):
    """Records achieved in the current local month or year, grouped by type."""
    local_now = to_local(utcnow(), user.timezone)
    since = ensure_utc(start_of_period(local_now, period))
    result = await db.execute(
        _records_query(user)
        .where(PersonalRecord.achieved_at >= since)
        .order_by(PersonalRecord.achieved_at.desc())
    )
    records = [PersonalRecordRead.model_validate(r) for r in result.scalars().all()]
    by_type = {t.value: 0 for t in PRType}
    for record in records:
        by_type[record.record_type.value] += 1
    return {"period": period, "since": since, "count": len(records), "by_type": by_type, "records": records}


@router.post("", response_model=PersonalRecordRead, status_code=201)
async def create_record(
    payload: PersonalRecordCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Log a record achieved outside a tracked session."""
    if await get_visible_exercise(db, user.id, payload.exercise_id) is None:
        raise HTTPException(status_code=404, detail="Exercise not found")
    value = _manual_value(payload)
    if value <= 0:
        raise HTTPException(status_code=400, detail=f"A {payload.record_type.value} record needs a positive value")
    record = PersonalRecord(
        user_id=user.id,
        exercise_id=payload.exercise_id,
        record_type=payload.record_type,
        value=value,
        weight=payload.weight,
        reps=payload.reps,
        duration_seconds=payload.duration_seconds,
        one_rep_max=round(one_rep_max(payload.weight, payload.reps), 2) or None,
        notes=sanitize_text(payload.notes),
        achieved_at=ensure_utc(payload.achieved_at) or utcnow(),
    )
    db.add(record)
    await db.flush()
    await get_integration_manager().emit(DATA_CHANGED, {"db": db, "user_id": user.id, "collection": "records"})
    result = await db.execute(_records_query(user).where(PersonalRecord.id == record.id))
    return result.scalar_one()


@router.delete("/{record_id}", status_code=204)
async def delete_record(
    record_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    result = await db.execute(
        select(PersonalRecord).where(PersonalRecord.id == record_id, PersonalRecord.user_id == user.id)
    )
    record = result.scalar_one_or_none()
    if not record:
        raise HTTPException(status_code=404, detail="Record not found")
    await db.delete(record)
    await db.flush()
    await get_integration_manager().emit(DATA_CHANGED, {"db": db, "user_id": user.id, "collection": "records"})
    return None
