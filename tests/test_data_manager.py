from fittrack.services.data_manager import (
    GOALS,
    PROGRAMS,
    WORKOUT_SESSIONS,
    DataCache,
    DataManager,
    cache_key,
    sanitize_data,
    validate_data,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = DataCache(ttl_seconds=10, clock=clock)
    cache.set("a", 1)
    clock.now = 10
    assert cache.get("a") == 1
    clock.now = 10.5
    assert cache.get("a") is None
    assert cache.metrics()["size"] == 0


def test_oldest_entry_is_evicted():
    cache = DataCache(max_entries=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("c", 3)
    assert cache.get("a") is None
    assert cache.get("b") == 2
    assert cache.get("c") == 3
    assert cache.evictions == 1


def test_resetting_a_key_does_not_evict():
    cache = DataCache(max_entries=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 3)
    assert cache.evictions == 0
    assert cache.get("a") == 3


def test_invalidate_user_only_touches_that_user():
    manager = DataManager(DataCache())
    manager.store(WORKOUT_SESSIONS, "u1", [1])
    manager.store(GOALS, "u1", [2], suffix="summary")
    manager.store(PROGRAMS, "u2", [3])
    assert manager.invalidate_user("u1") == 2
    assert manager.cached(WORKOUT_SESSIONS, "u1") is None
    assert manager.cached(PROGRAMS, "u2") == [3]


def test_invalidate_single_collection():
    manager = DataManager(DataCache())
    manager.store(WORKOUT_SESSIONS, "u1", [1])
    manager.store(GOALS, "u1", [2])
    assert manager.invalidate_user("u1", GOALS) == 1
    assert manager.cached(WORKOUT_SESSIONS, "u1") == [1]


def test_metrics_hit_rate():
    cache = DataCache()
    cache.set(cache_key(GOALS, "u1"), [])
    cache.get(cache_key(GOALS, "u1"))
    cache.get("missing")
    metrics = cache.metrics()
    assert metrics["hits"] == 1
    assert metrics["misses"] == 1
    assert metrics["hit_rate"] == 50.0
    assert cache.clear() == 1


def test_validate_data():
    assert validate_data("goal", {"title": "Bench 100", "target": 100, "category": "strength"})["is_valid"]
    result = validate_data("bodyMeasurement", {"weight": 80, "date": ""})
    assert result == {"is_valid": False, "errors": ["Missing required field: date"]}
    assert validate_data("spaceship", {})["errors"] == ["Unknown data type: spaceship"]


def test_sanitize_data():
    clean = sanitize_data(
        "workoutSession",
        {"name": "  Leg day ", "exercises": [{"name": " Squat ", "weight": -5, "reps": 5}]},
    )
    assert clean["name"] == "Leg day"
    assert clean["exercises"] == [{"name": "Squat", "weight": 0, "reps": 5}]
    assert sanitize_data("bodyMeasurement", {"body_fat": 140})["body_fat"] == 100
    assert sanitize_data("goal", {"target": -1, "current": 3}) == {"target": 0, "current": 3}
