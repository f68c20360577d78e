"""PR detection: flag a set as PR if it exceeds the user's all-time best for that exercise."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.core.dates import utcnow
from fittrack.core.enums import PRType
from fittrack.models.record import PersonalRecord
from fittrack.models.workout import WorkoutSession, WorkoutSet
from fittrack.services.workout_metrics import one_rep_max

logger = logging.getLogger(__name__)


async def detect_pr(
    db: AsyncSession,
    user_id: uuid.UUID,
    exercise_id: uuid.UUID,
    weight: float | None,
    reps: int | None,
    duration_seconds: int | None,
    exclude_set_id: uuid.UUID | None = None,
) -> tuple[bool, PRType | None]:
    """
    Compare this set's weight/volume/duration to the user's completed sets of the exercise.
    Returns (is_pr, pr_type). Weight wins over volume, volume over duration.
    With no history every positive value beats the 0 baseline, so a first set is a PR.
    """
    conditions = [
        WorkoutSet.exercise_id == exercise_id,
        WorkoutSet.completed.is_(True),
        WorkoutSession.user_id == user_id,
    ]
    if exclude_set_id is not None:
        conditions.append(WorkoutSet.id != exclude_set_id)

    r = await db.execute(
        select(
            func.max(WorkoutSet.weight),
            func.max(WorkoutSet.weight * WorkoutSet.reps),
            func.max(WorkoutSet.duration_seconds),
        )
        .join(WorkoutSession, WorkoutSession.id == WorkoutSet.session_id)
        .where(*conditions)
    )
    max_weight, max_volume, max_duration = r.one()
    max_weight = float(max_weight or 0)
    max_volume = float(max_volume or 0)
    max_duration = int(max_duration or 0)

    if weight is not None and float(weight) > max_weight:
        return True, PRType.WEIGHT
    if weight is not None and reps is not None and float(weight) * int(reps) > max_volume:
        return True, PRType.VOLUME
    if duration_seconds is not None and int(duration_seconds) > max_duration:
        return True, PRType.DURATION
    return False, None


def _record_value(set_: WorkoutSet, pr_type: PRType) -> float:
    if pr_type == PRType.WEIGHT:
        return float(set_.weight or 0)
    if pr_type == PRType.VOLUME:
        return float(set_.weight or 0) * int(set_.reps or 0)
    return float(set_.duration_seconds or 0)


async def flag_pr(db: AsyncSession, user_id: uuid.UUID, set_: WorkoutSet) -> PersonalRecord | None:
    """Run detection for a completed set; flag it and store a PersonalRecord when it is a PR."""
    if not set_.completed:
        set_.is_pr, set_.pr_type = False, None
        return None
    is_pr, pr_type = await detect_pr(
        db,
        user_id,
        set_.exercise_id,
        set_.weight,
        set_.reps,
        set_.duration_seconds,
        exclude_set_id=set_.id,
    )
    set_.is_pr, set_.pr_type = is_pr, pr_type
    if not is_pr:
        return None
    record = PersonalRecord(
        user_id=user_id,
        exercise_id=set_.exercise_id,
        session_id=set_.session_id,
        set_id=set_.id,
        record_type=pr_type,
        value=_record_value(set_, pr_type),
        weight=set_.weight,
        reps=set_.reps,
        duration_seconds=set_.duration_seconds,
        one_rep_max=round(one_rep_max(set_.weight, set_.reps), 2) or None,
        achieved_at=utcnow(),
    )
    db.add(record)
    logger.info("New %s PR for exercise %s (user %s)", pr_type.value, set_.exercise_id, user_id)
    return record
