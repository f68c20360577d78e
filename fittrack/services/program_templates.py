"""Search and recommendations over the built-in program template catalog."""

from __future__ import annotations

from typing import Any

from fittrack.core.program_library import POPULAR_TEMPLATE_IDS, PROGRAM_TEMPLATES, TEMPLATES_BY_ID

MAX_VARIATIONS = 3


def _value(field: Any) -> str:
    return getattr(field, "value", field) or ""


def _normalize(text: str) -> str:
    return text.lower().replace(" ", "_")


def search_templates(
    q: str | None = None,
    goal: str | None = None,
    difficulty: str | None = None,
    duration: str | None = None,
    frequency: str | None = None,
    equipment: str | None = None,
) -> list[dict[str, Any]]:
    """Filter the catalog. q matches name, description or tags; equipment is a substring match."""
    results = []
    for template in PROGRAM_TEMPLATES:
        if q:
            needle = q.lower()
            haystack = [template["name"].lower(), template["description"].lower(), *template["tags"]]
            if not any(needle in text for text in haystack):
                continue
        if goal and _value(template["goal"]) != goal:
            continue
        if difficulty and _value(template["difficulty"]) != difficulty:
            continue
        if duration and _value(template["duration"]) != duration:
            continue
        if frequency and _value(template["frequency"]) != frequency:
            continue
        if equipment and not any(equipment.lower() in e.lower() for e in template["equipment"]):
            continue
        results.append(template)
    return results


def get_template(template_id: str) -> dict[str, Any] | None:
    return TEMPLATES_BY_ID.get(template_id)


def popular_templates() -> list[dict[str, Any]]:
    return [TEMPLATES_BY_ID[t] for t in POPULAR_TEMPLATE_IDS if t in TEMPLATES_BY_ID]


def recommended_templates(level: str, goal: str, count: int = 3) -> list[dict[str, Any]]:
    """Templates at the user's level whose goal matches ("Fat Loss" == "fat_loss")."""
    wanted = _normalize(goal)
    return [
        t
        for t in PROGRAM_TEMPLATES
        if _value(t["difficulty"]) == level and _normalize(_value(t["goal"])) == wanted
    ][:count]


def template_variations(template_id: str) -> list[dict[str, Any]]:
    """Other templates with the same goal and difficulty."""
    base = TEMPLATES_BY_ID.get(template_id)
    if base is None:
        return []
    return [
        t
        for t in PROGRAM_TEMPLATES
        if t["id"] != template_id and t["goal"] == base["goal"] and t["difficulty"] == base["difficulty"]
    ][:MAX_VARIATIONS]


def template_summary(template: dict[str, Any]) -> dict[str, Any]:
    """JSON-friendly view of a catalog template."""
    return {
        "id": template["id"],
        "name": template["name"],
        "description": template["description"],
        "goal": _value(template["goal"]),
        "difficulty": _value(template["difficulty"]),
        "duration": _value(template["duration"]),
        "frequency": _value(template["frequency"]),
        "equipment": list(template["equipment"]),
        "target_muscles": list(template["target_muscles"]),
        "tags": list(template["tags"]),
        "notes": list(template["notes"]),
        "progression": dict(template["progression"]),
        "workouts": [
            {
                "name": name,
                "exercises": [
                    {"name": ex, "sets": sets, "reps": reps, "rest_seconds": rest} for ex, sets, reps, rest in exercises
                ],
            }
            for name, exercises in template["workouts"]
        ],
    }
