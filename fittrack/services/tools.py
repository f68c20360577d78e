"""QoL tools: plate calculator, rest suggestions, plateau detection."""

from __future__ import annotations

from typing import Any, Sequence

from fittrack.core.constants import PLATEAU_SESSIONS_THRESHOLD
from fittrack.core.enums import ExerciseCategory

KG_PLATES = (20.0, 15.0, 10.0, 5.0, 2.5, 1.25)
LB_PLATES = (45.0, 35.0, 25.0, 10.0, 5.0, 2.5)
DEFAULT_BAR = {"kg": 20.0, "lb": 45.0}

# (name keywords, category, seconds); first match wins
REST_RULES: tuple[tuple[tuple[str, ...], str | None, int], ...] = (
    (("deadlift", "squat", "bench press", "overhead press"), None, 180),
    (("row", "pull", "dip", "chin"), None, 120),
    (("curl", "extension", "raise", "fly"), None, 60),
    (("burpee", "jump", "sprint"), ExerciseCategory.CARDIO.value, 30),
    (("plank", "crunch", "sit-up"), ExerciseCategory.CORE.value, 45),
)
DEFAULT_REST_SECONDS = 90


def plate_calc(bar: float, target: float, plates: Sequence[float]) -> dict[str, Any]:
    """Greedy plates per side. `remainder` is the part of the target that cannot be loaded."""
    load = target - bar
    if load <= 0:
        return {"per_side": 0.0, "plates": [], "total": bar, "remainder": max(load, 0.0)}
    per_side = load / 2.0
    result: list[float] = []
    remaining = per_side
    for p in sorted(plates, reverse=True):
        while remaining >= p - 0.001:  # float tolerance
            result.append(p)
            remaining -= p
    total = bar + 2 * sum(result)
    return {
        "per_side": per_side,
        "plates": result,
        "total": total,
        "remainder": round(max(target - total, 0.0), 3),
    }


def suggest_rest_seconds(name: str | None, category: str | None = None, preset: int | None = None) -> int:
    """Rest between sets by exercise type; an exercise's own preset wins."""
    if preset:
        return preset
    lowered = (name or "").lower()
    for keywords, rule_category, seconds in REST_RULES:
        if (rule_category and category == rule_category) or any(k in lowered for k in keywords):
            return seconds
    return DEFAULT_REST_SECONDS


def sessions_without_improvement(session_stats: Sequence[tuple[float, float, int]]) -> int:
    """
    session_stats: (max_weight, max_volume, max_duration) per session, most recent first.
    Counts consecutive sessions (from the latest) that did not beat the previous one on any metric.
    """
    count = 0
    for i in range(len(session_stats) - 1):
        cur_w, cur_vol, cur_dur = session_stats[i]
        prev_w, prev_vol, prev_dur = session_stats[i + 1]
        if cur_w <= prev_w and cur_vol <= prev_vol and cur_dur <= prev_dur:
            count += 1
        else:
            break
    return count


def is_plateau(session_stats: Sequence[tuple[float, float, int]]) -> bool:
    return sessions_without_improvement(session_stats) >= PLATEAU_SESSIONS_THRESHOLD
