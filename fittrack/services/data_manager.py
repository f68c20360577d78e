"""In-process data cache plus record validation and sanitization."""

from __future__ import annotations

import logging
import threading
import time
from functools import lru_cache
from typing import Any, Callable

from fittrack.core.config import get_settings

logger = logging.getLogger(__name__)

# Collection names used in cache keys
WORKOUT_SESSIONS = "workoutSessions"
PROGRAMS = "programs"
SCHEDULED_WORKOUTS = "scheduledWorkouts"
PERSONAL_RECORDS = "personalRecords"
GOALS = "goals"
BODY_MEASUREMENTS = "bodyMeasurements"
ACHIEVEMENTS = "achievements"
COLLECTIONS = (
    WORKOUT_SESSIONS,
    PROGRAMS,
    SCHEDULED_WORKOUTS,
    PERSONAL_RECORDS,
    GOALS,
    BODY_MEASUREMENTS,
    ACHIEVEMENTS,
)

REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    "workoutSession": ("exercises", "completedAt"),
    "exercise": ("name", "sets"),
    "personalRecord": ("exercise", "weight", "reps"),
    "bodyMeasurement": ("weight", "date"),
    "goal": ("title", "target", "category"),
}


def cache_key(collection: str, user_id: Any, suffix: str = "all") -> str:
    return f"{collection}:{user_id}:{suffix}"


class DataCache:
    """TTL cache with a size cap; the oldest entry is evicted on overflow."""

    def __init__(self, ttl_seconds: float = 300, max_entries: int = 100, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}  # key -> (stored_at, value), insertion ordered
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.sets = 0
        self.evictions = 0

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            stored_at, value = entry
            if self._clock() - stored_at > self.ttl_seconds:
                del self._entries[key]
                self.misses += 1
                return None
            self.hits += 1
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries.pop(key, None)
            while len(self._entries) >= self.max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
                self.evictions += 1
                logger.debug("Cache evicted %s", oldest)
            self._entries[key] = (self._clock(), value)
            self.sets += 1

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def invalidate(self, prefix: str) -> int:
        """Drop every key starting with prefix. Returns how many were removed."""
        with self._lock:
            keys = [k for k in self._entries if k.startswith(prefix)]
            for k in keys:
                del self._entries[k]
        if keys:
            logger.debug("Cache invalidated %d entries for %s", len(keys), prefix)
        return len(keys)

    def invalidate_user(self, user_id: Any, collections: tuple[str, ...] = COLLECTIONS) -> int:
        return sum(self.invalidate(f"{collection}:{user_id}:") for collection in collections)

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        return count

    def metrics(self) -> dict[str, Any]:
        lookups = self.hits + self.misses
        return {
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": round(self.hits / lookups * 100, 1) if lookups else 0.0,
            "sets": self.sets,
            "evictions": self.evictions,
            "size": len(self._entries),
            "max_entries": self.max_entries,
            "ttl_seconds": self.ttl_seconds,
        }


def validate_data(data_type: str, data: dict[str, Any]) -> dict[str, Any]:
    """Required-field check per record type. Unknown types fail validation."""
    if data_type not in REQUIRED_FIELDS:
        return {"is_valid": False, "errors": [f"Unknown data type: {data_type}"]}
    errors = [
        f"Missing required field: {field}"
        for field in REQUIRED_FIELDS[data_type]
        if data.get(field) is None or data.get(field) == ""
    ]
    return {"is_valid": not errors, "errors": errors}


def _non_negative(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return max(value, 0)
    return value


def sanitize_data(data_type: str, data: dict[str, Any]) -> dict[str, Any]:
    """Trim names and clamp numeric fields into their valid ranges."""
    clean = dict(data)
    for field in ("name", "title", "exercise"):
        if isinstance(clean.get(field), str):
            clean[field] = clean[field].strip()
    for field in ("weight", "reps"):
        if field in clean:
            clean[field] = _non_negative(clean[field])
    if data_type == "bodyMeasurement" and isinstance(clean.get("body_fat"), (int, float)):
        clean["body_fat"] = min(max(clean["body_fat"], 0), 100)
    if data_type == "goal":
        for field in ("target", "current"):
            if field in clean:
                clean[field] = _non_negative(clean[field])
    if data_type == "workoutSession" and isinstance(clean.get("exercises"), list):
        clean["exercises"] = [
            sanitize_data("exercise", e) if isinstance(e, dict) else e for e in clean["exercises"]
        ]
    return clean


class DataManager:
    """Cache owner plus the validation helpers the API exposes."""

    def __init__(self, cache: DataCache) -> None:
        self.cache = cache

    def cached(self, collection: str, user_id: Any, suffix: str = "all") -> Any | None:
        return self.cache.get(cache_key(collection, user_id, suffix))

    def store(self, collection: str, user_id: Any, value: Any, suffix: str = "all") -> Any:
        self.cache.set(cache_key(collection, user_id, suffix), value)
        return value

    def invalidate_user(self, user_id: Any, *collections: str) -> int:
        return self.cache.invalidate_user(user_id, collections or COLLECTIONS)

    validate_data = staticmethod(validate_data)
    sanitize_data = staticmethod(sanitize_data)


@lru_cache
def get_data_manager() -> DataManager:
    settings = get_settings()
    return DataManager(DataCache(settings.cache_ttl_seconds, settings.cache_max_entries))
