"""Built-in self checks run on demand against the live components."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.core.constants import (
    DIAGNOSTIC_PERFORMANCE_THRESHOLD_MS,
    DIAGNOSTIC_RETRY_ATTEMPTS,
    DIAGNOSTIC_TIMEOUT_SECONDS,
)
from fittrack.core.encryption import get_encryption_manager
from fittrack.core.enums import ComponentStatus, DiagnosticCategory, DiagnosticStatus
from fittrack.core.security import hash_password, validate_password, verify_password
from fittrack.services.data_manager import DataCache
from fittrack.services.integration import get_integration_manager
from fittrack.services.workout_metrics import one_rep_max, workout_volume

logger = logging.getLogger(__name__)

RETRY_DELAY_SECONDS = 1.0

Check = Callable[[AsyncSession], Awaitable[None]]


class DiagnosticFailure(AssertionError):
    pass


def expect(condition: bool, message: str) -> None:
    if not condition:
        raise DiagnosticFailure(message)


@dataclass
class Diagnostic:
    name: str
    category: DiagnosticCategory
    check: Check


# Unit


async def check_one_rep_max(db: AsyncSession) -> None:
    expect(one_rep_max(100, 1) == 100, "single rep should equal the weight")
    expect(round(one_rep_max(100, 10), 2) == 133.33, "Epley estimate for 100 x 10")
    expect(one_rep_max(0, 5) == 0, "zero weight gives zero")


async def check_workout_volume(db: AsyncSession) -> None:
    @dataclass
    class _Set:
        weight: float
        reps: int
        completed: bool

    @dataclass
    class _Session:
        sets: list

    session = _Session(sets=[_Set(100, 5, True), _Set(80, 8, True), _Set(200, 1, False)])
    expect(workout_volume(session) == 1140, "volume counts completed sets only")


async def check_cache_operations(db: AsyncSession) -> None:
    cache = DataCache(ttl_seconds=60, max_entries=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("c", 3)
    expect(cache.get("a") is None, "oldest entry should be evicted")
    expect(cache.get("c") == 3, "newest entry should be readable")
    expect(cache.invalidate("b") == 1, "prefix invalidation")


async def check_password_policy(db: AsyncSession) -> None:
    expect(validate_password("Sup3r$ecret")["is_valid"], "strong password accepted")
    expect(len(validate_password("short")["errors"]) == 4, "weak password reports each failed rule")


# Integration


async def check_database(db: AsyncSession) -> None:
    result = await db.execute(text("SELECT 1"))
    expect(result.scalar_one() == 1, "SELECT 1 round trip")


async def check_integration_health(db: AsyncSession) -> None:
    status = await get_integration_manager().run_health_checks(db)
    expect(status["overall"] != ComponentStatus.UNHEALTHY.value, f"components unhealthy: {status['components']}")


# Security


async def check_encryption_round_trip(db: AsyncSession) -> None:
    manager = get_encryption_manager()
    payload = {"weight": 82.5, "notes": "diagnostic"}
    envelope = manager.encrypt(payload, "restricted")
    expect(envelope["encrypted"], "restricted data is encrypted")
    expect(manager.decrypt(envelope) == payload, "decrypt returns the original value")


async def check_hmac(db: AsyncSession) -> None:
    manager = get_encryption_manager()
    signature = manager.generate_hmac("payload")
    expect(manager.verify_hmac("payload", signature), "valid signature verifies")
    expect(not manager.verify_hmac("tampered", signature), "tampered data fails verification")


async def check_password_hashing(db: AsyncSession) -> None:
    hashed = hash_password("Sup3r$ecret")
    expect(hashed != "Sup3r$ecret", "hash differs from the password")
    expect(verify_password("Sup3r$ecret", hashed), "correct password verifies")
    expect(not verify_password("wrong", hashed), "wrong password fails")


# Performance


async def check_cache_throughput(db: AsyncSession) -> None:
    cache = DataCache(ttl_seconds=60, max_entries=100)
    start = time.perf_counter()
    for i in range(500):
        cache.set(f"perf:{i}", i)
        cache.get(f"perf:{i}")
    elapsed_ms = (time.perf_counter() - start) * 1000
    expect(
        elapsed_ms < DIAGNOSTIC_PERFORMANCE_THRESHOLD_MS,
        f"1000 cache operations took {elapsed_ms:.0f}ms",
    )


DIAGNOSTICS: list[Diagnostic] = [
    Diagnostic("one_rep_max_formula", DiagnosticCategory.UNIT, check_one_rep_max),
    Diagnostic("workout_volume", DiagnosticCategory.UNIT, check_workout_volume),
    Diagnostic("cache_operations", DiagnosticCategory.UNIT, check_cache_operations),
    Diagnostic("password_policy", DiagnosticCategory.UNIT, check_password_policy),
    Diagnostic("database_round_trip", DiagnosticCategory.INTEGRATION, check_database),
    Diagnostic("integration_health", DiagnosticCategory.INTEGRATION, check_integration_health),
    Diagnostic("encryption_round_trip", DiagnosticCategory.SECURITY, check_encryption_round_trip),
    Diagnostic("hmac_verification", DiagnosticCategory.SECURITY, check_hmac),
    Diagnostic("password_hashing", DiagnosticCategory.SECURITY, check_password_hashing),
    Diagnostic("cache_throughput", DiagnosticCategory.PERFORMANCE, check_cache_throughput),
]


async def run_diagnostic(
    diagnostic: Diagnostic,
    db: AsyncSession,
    timeout: float = DIAGNOSTIC_TIMEOUT_SECONDS,
    attempts: int = DIAGNOSTIC_RETRY_ATTEMPTS,
    retry_delay: float = RETRY_DELAY_SECONDS,
) -> dict[str, Any]:
    start = time.perf_counter()
    status, error = DiagnosticStatus.FAILED, None
    for attempt in range(1, attempts + 1):
        try:
            await asyncio.wait_for(diagnostic.check(db), timeout=timeout)
            status, error = DiagnosticStatus.PASSED, None
            break
        except asyncio.TimeoutError:
            status, error = DiagnosticStatus.TIMEOUT, f"Timed out after {timeout}s"
        except Exception as e:
            status, error = DiagnosticStatus.FAILED, str(e) or type(e).__name__
        logger.warning("Diagnostic %s attempt %d/%d failed: %s", diagnostic.name, attempt, attempts, error)
        if attempt < attempts and retry_delay:
            await asyncio.sleep(retry_delay)
    return {
        "name": diagnostic.name,
        "category": diagnostic.category.value,
        "status": status.value,
        "attempts": attempt,
        "duration_ms": round((time.perf_counter() - start) * 1000, 2),
        "error": error,
    }


async def run_diagnostics(
    db: AsyncSession,
    categories: list[DiagnosticCategory] | None = None,
    retry_delay: float = RETRY_DELAY_SECONDS,
) -> dict[str, Any]:
    selected = [d for d in DIAGNOSTICS if not categories or d.category in categories]
    start = time.perf_counter()
    results = [await run_diagnostic(d, db, retry_delay=retry_delay) for d in selected]
    passed = sum(1 for r in results if r["status"] == DiagnosticStatus.PASSED.value)
    summary = {
        "total": len(results),
        "passed": passed,
        "failed": len(results) - passed,
        "pass_rate": round(passed / len(results) * 100, 1) if results else 0.0,
        "duration_ms": round((time.perf_counter() - start) * 1000, 2),
    }
    logger.info("Diagnostics finished: %s", summary)
    return {"summary": summary, "results": results}
