"""Calculators: plates, rest times, one-rep max, plateau alerts."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import get_current_user
from fittrack.core.constants import MAX_REPS, MAX_WEIGHT
from fittrack.db.session import get_db
from fittrack.models.user import User
from fittrack.schemas.tools import (
    OneRepMaxResponse,
    PlateauAlert,
    PlateCalcRequest,
    PlateCalcResponse,
    RestSuggestion,
)
from fittrack.services.exercises import get_visible_exercise
from fittrack.services.insights import load_completed_sessions
from fittrack.services.tools import (
    DEFAULT_BAR,
    KG_PLATES,
    LB_PLATES,
    is_plateau,
    plate_calc,
    sessions_without_improvement,
    suggest_rest_seconds,
)
from fittrack.services.workout_metrics import brzycki_1rm, one_rep_max

router = APIRouter()


@router.post("/plate-calculator", response_model=PlateCalcResponse)
async def plate_calculator(payload: PlateCalcRequest):
    """Greedy per-side loading for a target weight."""
    bar = payload.bar_weight if payload.bar_weight is not None else DEFAULT_BAR[payload.unit]
    plates = payload.available_plates or (KG_PLATES if payload.unit == "kg" else LB_PLATES)
    if any(p <= 0 for p in plates):
        raise HTTPException(status_code=400, detail="Plate weights must be positive")
    result = plate_calc(bar, payload.target_weight, plates)
    return PlateCalcResponse(bar_weight=bar, target_weight=payload.target_weight, **result)


@router.get("/rest-suggestion", response_model=RestSuggestion)
async def rest_suggestion(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    exercise_id: uuid.UUID | None = None,
    name: str | None = None,
    category: str | None = None,
):
    """Rest seconds for an exercise (by id) or a free-text name and category."""
    if exercise_id is not None:
        exercise = await get_visible_exercise(db, user.id, exercise_id)
        if not exercise:
            raise HTTPException(status_code=404, detail="Exercise not found")
        seconds = suggest_rest_seconds(
            exercise.name,
            exercise.category.value if exercise.category else None,
            exercise.rest_seconds_preset,
        )
        return RestSuggestion(exercise_id=exercise.id, name=exercise.name, rest_seconds=seconds)
    if not name:
        raise HTTPException(status_code=400, detail="Provide exercise_id or name")
    return RestSuggestion(name=name, rest_seconds=suggest_rest_seconds(name, category))


@router.get("/one-rep-max", response_model=OneRepMaxResponse)
async def one_rep_max_calculator(
    weight: float = Query(gt=0, le=MAX_WEIGHT),
    reps: int = Query(ge=1, le=MAX_REPS),
):
    return OneRepMaxResponse(
        weight=weight,
        reps=reps,
        epley=round(one_rep_max(weight, reps), 2),
        brzycki=round(brzycki_1rm(weight, reps), 2),
    )


@router.get("/plateaus", response_model=list[PlateauAlert])
async def plateau_alerts(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Exercises with no improvement in max weight, volume or duration for 3+ consecutive sessions."""
    per_exercise: dict[uuid.UUID, list[tuple[float, float, int]]] = {}
    names: dict[uuid.UUID, str] = {}
    for session in await load_completed_sessions(db, user.id):
        by_exercise: dict[uuid.UUID, list] = {}
        for s in session.sets:
            if s.completed:
                by_exercise.setdefault(s.exercise_id, []).append(s)
                if s.exercise is not None:
                    names[s.exercise_id] = s.exercise.name
        for exercise_id, sets in by_exercise.items():
            per_exercise.setdefault(exercise_id, []).append(
                (
                    max(float(s.weight or 0) for s in sets),
                    max(float(s.weight or 0) * int(s.reps or 0) for s in sets),
                    max(int(s.duration_seconds or 0) for s in sets),
                )
            )
    alerts = [
        PlateauAlert(
            exercise_id=exercise_id,
            exercise_name=names.get(exercise_id, ""),
            sessions_without_improvement=sessions_without_improvement(stats),
        )
        for exercise_id, stats in per_exercise.items()
        if is_plateau(stats)
    ]
    return sorted(alerts, key=lambda a: a.sessions_without_improvement, reverse=True)
