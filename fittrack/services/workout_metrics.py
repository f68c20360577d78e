"""Workout metrics: one-rep max, volume, summaries, progress and display formatting.

Pure functions over session/set objects (ORM rows or anything with the same
attributes). A session's "exercises" are its sets grouped by exercise_id, in
the order the exercise first appears.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Iterable

from fittrack.core.dates import ensure_utc

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def one_rep_max(weight: float | None, reps: int | None) -> float:
    """Epley: 1RM = weight * (1 + reps/30). A single rep is the 1RM itself."""
    weight = float(weight or 0)
    reps = int(reps or 0)
    if weight <= 0 or reps <= 0:
        return 0.0
    if reps == 1:
        return weight
    return weight * (1 + reps / 30)


def brzycki_1rm(weight: float | None, reps: int | None) -> float:
    """1RM = weight * (36 / (37 - reps))."""
    weight = float(weight or 0)
    reps = int(reps or 0)
    if weight <= 0 or reps <= 0:
        return 0.0
    if reps >= 37:
        return weight * 1.1  # extrapolate
    return weight * (36 / (37 - reps))


def _completed(sets: Iterable[Any]) -> list[Any]:
    return [s for s in sets if s.completed]


def exercise_volume(sets: Iterable[Any]) -> float:
    return sum(float(s.weight or 0) * int(s.reps or 0) for s in _completed(sets))


def exercise_reps(sets: Iterable[Any]) -> int:
    return sum(int(s.reps or 0) for s in _completed(sets))


def exercise_average_weight(sets: Iterable[Any]) -> float:
    done = _completed(sets)
    if not done:
        return 0.0
    return sum(float(s.weight or 0) for s in done) / len(done)


def best_set(sets: Iterable[Any]) -> Any | None:
    """Heaviest completed set; ties go to the one with more reps."""
    done = _completed(sets)
    if not done:
        return None
    return max(done, key=lambda s: (float(s.weight or 0), int(s.reps or 0)))


def best_one_rep_max(sets: Iterable[Any]) -> float:
    best = best_set(sets)
    if best is None:
        return 0.0
    return one_rep_max(best.weight, best.reps)


def group_sets_by_exercise(session: Any) -> list[tuple[uuid.UUID, str | None, list[Any]]]:
    """[(exercise_id, exercise_name, sets)] ordered by first appearance (set_order)."""
    groups: dict[uuid.UUID, list[Any]] = {}
    names: dict[uuid.UUID, str | None] = {}
    for s in sorted(session.sets, key=lambda s: (s.set_order or 0, str(s.id))):
        groups.setdefault(s.exercise_id, []).append(s)
        if s.exercise_id not in names:
            exercise = getattr(s, "exercise", None)
            names[s.exercise_id] = exercise.name if exercise is not None else None
    return [(ex_id, names[ex_id], sets) for ex_id, sets in groups.items()]


def workout_volume(session: Any) -> float:
    return exercise_volume(session.sets)


def total_sets(session: Any) -> int:
    return len(_completed(session.sets))


def total_exercises(session: Any) -> int:
    return len({s.exercise_id for s in session.sets})


def elapsed_minutes(session: Any) -> float:
    """Fractional minutes between started_at and ended_at (0 when either is missing)."""
    started = ensure_utc(session.started_at)
    ended = ensure_utc(session.ended_at)
    if not started or not ended:
        return 0.0
    return (ended - started).total_seconds() / 60


def workout_duration_minutes(session: Any) -> int:
    return round(elapsed_minutes(session))


def workout_summary(session: Any) -> dict[str, Any]:
    return {
        "duration_minutes": workout_duration_minutes(session),
        "total_volume": round(workout_volume(session), 2),
        "total_sets": total_sets(session),
        "total_exercises": total_exercises(session),
        "exercises": [
            {
                "exercise_id": ex_id,
                "name": name,
                "sets": len(_completed(sets)),
                "volume": round(exercise_volume(sets), 2),
                "reps": exercise_reps(sets),
                "average_weight": round(exercise_average_weight(sets), 2),
                "best_one_rep_max": round(best_one_rep_max(sets), 2),
            }
            for ex_id, name, sets in group_sets_by_exercise(session)
        ],
    }


def _session_date(session: Any) -> datetime | None:
    return ensure_utc(session.completed_at or session.ended_at or session.started_at)


def exercise_progress_data(sessions: Iterable[Any], exercise_id: uuid.UUID) -> list[dict[str, Any]]:
    """Best set per session for one exercise, ascending by date."""
    points = []
    for session in sessions:
        sets = [s for s in session.sets if s.exercise_id == exercise_id]
        best = best_set(sets)
        if best is None:
            continue
        points.append(
            {
                "session_id": session.id,
                "date": _session_date(session),
                "weight": float(best.weight or 0),
                "reps": int(best.reps or 0),
                "one_rep_max": round(one_rep_max(best.weight, best.reps), 2),
                "volume": round(exercise_volume(sets), 2),
            }
        )
    points.sort(key=lambda p: p["date"] or _EPOCH)
    return points


def exercise_progress_between(old_session: Any, new_session: Any, exercise_id: uuid.UUID) -> dict[str, float]:
    """Improvement of the best set from one session to another; zeros when either lacks data."""
    zero = {
        "weight_improvement": 0.0,
        "reps_improvement": 0,
        "volume_improvement": 0.0,
        "one_rep_max_improvement": 0.0,
    }
    old_sets = [s for s in old_session.sets if s.exercise_id == exercise_id]
    new_sets = [s for s in new_session.sets if s.exercise_id == exercise_id]
    old_best, new_best = best_set(old_sets), best_set(new_sets)
    if old_best is None or new_best is None:
        return zero
    return {
        "weight_improvement": float(new_best.weight or 0) - float(old_best.weight or 0),
        "reps_improvement": int(new_best.reps or 0) - int(old_best.reps or 0),
        "volume_improvement": round(exercise_volume(new_sets) - exercise_volume(old_sets), 2),
        "one_rep_max_improvement": round(
            one_rep_max(new_best.weight, new_best.reps) - one_rep_max(old_best.weight, old_best.reps), 2
        ),
    }


def unique_exercise_names(sessions: Iterable[Any]) -> list[str]:
    names = set()
    for session in sessions:
        for s in session.sets:
            exercise = getattr(s, "exercise", None)
            if exercise is not None:
                names.add(exercise.name)
    return sorted(names)


def validate_session_for_completion(session: Any, ended_at: datetime | None) -> list[str]:
    errors = []
    if not session.sets:
        errors.append("Workout must have at least one exercise")
    started = ensure_utc(session.started_at)
    ended = ensure_utc(ended_at)
    if started and ended and ended <= started:
        errors.append("End time must be after start time")
    return errors


def format_duration(minutes: int) -> str:
    """45 -> "45m", 60 -> "1h", 75 -> "1h 15m"."""
    if minutes < 60:
        return f"{minutes}m"
    hours, rest = divmod(minutes, 60)
    if rest == 0:
        return f"{hours}h"
    return f"{hours}h {rest}m"


def format_weight(weight: float) -> str:
    if weight == 0:
        return "0 kg"
    if weight < 1:
        return f"{weight * 1000:.0f} g"
    return f"{weight:.1f} kg"


def format_volume(volume: float) -> str:
    if volume == 0:
        return "0 kg"
    if volume < 1000:
        return f"{volume:.0f} kg"
    return f"{volume / 1000:.1f}t"
