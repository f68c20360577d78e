"""Text sanitization and program structure validation."""

from __future__ import annotations

import re
from typing import Any

from fittrack.core.constants import MAX_EXERCISES_PER_SESSION, MAX_WORKOUTS_PER_PROGRAM

_TAG_CHARS = re.compile(r"[<>]")
_JS_PROTOCOL = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+=", re.IGNORECASE)
_NUMBER = re.compile(r"\d+")


def sanitize_text(value: str | None) -> str | None:
    """Trim and strip markup-ish fragments (angle brackets, javascript:, on*= handlers)."""
    if value is None:
        return None
    value = _TAG_CHARS.sub("", value.strip())
    value = _JS_PROTOCOL.sub("", value)
    return _EVENT_HANDLER.sub("", value)


def sanitize_list(values: list[str] | None) -> list[str]:
    return [v for v in (sanitize_text(x) for x in values or []) if v]


def rep_numbers(reps: Any) -> list[int]:
    """Numeric parts of a rep scheme: "8-12" -> [8, 12], "5/3/1" -> [5, 3, 1]."""
    if reps is None:
        return []
    if isinstance(reps, (int, float)):
        return [int(reps)]
    return [int(n) for n in _NUMBER.findall(str(reps))]


def validate_program(program: dict[str, Any]) -> list[str]:
    """Structural checks on a program dict with nested workouts/exercises. Returns error messages."""
    errors: list[str] = []
    if not (program.get("name") or "").strip():
        errors.append("Program name is required")
    workouts = program.get("workouts") or []
    if not workouts:
        errors.append("Program must have at least one workout")
    if len(workouts) > MAX_WORKOUTS_PER_PROGRAM:
        errors.append(f"Program cannot have more than {MAX_WORKOUTS_PER_PROGRAM} workouts")
    for index, workout in enumerate(workouts, start=1):
        name = (workout.get("name") or "").strip()
        if not name:
            errors.append(f"Workout {index} must have a name")
        exercises = workout.get("exercises") or []
        if not exercises:
            errors.append(f'Workout "{name}" must have at least one exercise')
        if len(exercises) > MAX_EXERCISES_PER_SESSION:
            errors.append(f'Workout "{name}" cannot have more than {MAX_EXERCISES_PER_SESSION} exercises')
        for ex_index, exercise in enumerate(exercises, start=1):
            ex_name = (exercise.get("name") or "").strip()
            if not ex_name:
                errors.append(f'Exercise {ex_index} in "{name}" must have a name')
            if (exercise.get("sets") or 0) < 1:
                errors.append(f'Exercise "{ex_name}" must have at least 1 set')
            numbers = rep_numbers(exercise.get("reps"))
            if not numbers or min(numbers) < 1:
                errors.append(f'Exercise "{ex_name}" must have at least 1 rep')
    return errors
