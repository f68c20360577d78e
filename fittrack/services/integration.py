"""Integration manager: component health registry and an in-process event bus."""

from __future__ import annotations

import inspect
import logging
from collections import Counter
from datetime import datetime
from functools import lru_cache
from typing import Any, Awaitable, Callable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.core.dates import utcnow
from fittrack.core.encryption import get_encryption_manager
from fittrack.core.enums import ComponentStatus, Permission, ProcessingPurpose, UserRole
from fittrack.core.security import ROLE_PERMISSIONS, validate_password
from fittrack.services.analytics_tracker import get_analytics_tracker
from fittrack.services.data_manager import get_data_manager
from fittrack.services.performance import get_performance_monitor
from fittrack.services.privacy import LEGAL_BASIS

logger = logging.getLogger(__name__)

# Events
WORKOUT_COMPLETED = "workout.completed"
PROGRAM_CHANGED = "program.changed"
DATA_CHANGED = "data.changed"
ACHIEVEMENT_UNLOCKED = "achievement.unlocked"

COMPONENTS = ("database", "cache", "encryption", "privacy", "security", "analytics", "performance")
ERROR_RATE_LIMIT = 5.0  # percent of 5xx responses before performance is degraded

# Higher is worse
_SEVERITY = {
    ComponentStatus.UNHEALTHY: 3,
    ComponentStatus.DEGRADED: 2,
    ComponentStatus.UNKNOWN: 1,
    ComponentStatus.HEALTHY: 0,
}

Handler = Callable[[dict[str, Any]], Awaitable[None] | None]


class IntegrationManager:
    def __init__(self) -> None:
        self.components: dict[str, dict[str, Any]] = {
            name: {"status": ComponentStatus.UNKNOWN, "last_check": None, "details": {}} for name in COMPONENTS
        }
        self._listeners: dict[str, list[Handler]] = {}
        self.event_counts: Counter[str] = Counter()
        self.handler_errors = 0

    # Event bus

    def on(self, event: str, handler: Handler) -> None:
        handlers = self._listeners.setdefault(event, [])
        if handler not in handlers:
            handlers.append(handler)

    def off(self, event: str, handler: Handler) -> None:
        handlers = self._listeners.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    async def emit(self, event: str, payload: dict[str, Any]) -> int:
        """Call every handler for the event. Failures are logged, never raised. Returns handlers run."""
        self.event_counts[event] += 1
        ran = 0
        for handler in list(self._listeners.get(event, [])):
            try:
                result = handler(payload)
                if inspect.isawaitable(result):
                    await result
                ran += 1
            except Exception:
                self.handler_errors += 1
                logger.exception("Handler %r failed for event %s", handler, event)
        return ran

    # Health checks

    async def _check_database(self, db: AsyncSession) -> tuple[ComponentStatus, dict]:
        await db.execute(text("SELECT 1"))
        return ComponentStatus.HEALTHY, {"query": "SELECT 1"}

    async def _check_cache(self, db: AsyncSession) -> tuple[ComponentStatus, dict]:
        cache = get_data_manager().cache
        key = "integration:health:check"
        cache.set(key, {"ok": True})
        ok = cache.get(key) == {"ok": True}
        cache.delete(key)
        return (ComponentStatus.HEALTHY if ok else ComponentStatus.UNHEALTHY), cache.metrics()

    async def _check_encryption(self, db: AsyncSession) -> tuple[ComponentStatus, dict]:
        manager = get_encryption_manager()
        sample = {"check": "integration"}
        ok = manager.decrypt(manager.encrypt(sample)) == sample
        return (ComponentStatus.HEALTHY if ok else ComponentStatus.UNHEALTHY), {"key_version": manager.key_version}

    async def _check_security(self, db: AsyncSession) -> tuple[ComponentStatus, dict]:
        policy_ok = validate_password("Str0ng!Pass")["is_valid"] and not validate_password("weak")["is_valid"]
        roles_ok = (
            ROLE_PERMISSIONS[UserRole.ADMIN] == frozenset(Permission)
            and Permission.READ_PROGRAM in ROLE_PERMISSIONS[UserRole.GUEST]
        )
        ok = policy_ok and roles_ok
        return (ComponentStatus.HEALTHY if ok else ComponentStatus.UNHEALTHY), {
            "password_policy": policy_ok,
            "role_permissions": roles_ok,
        }

    async def _check_privacy(self, db: AsyncSession) -> tuple[ComponentStatus, dict]:
        ok = set(LEGAL_BASIS) == set(ProcessingPurpose)
        return (ComponentStatus.HEALTHY if ok else ComponentStatus.DEGRADED), {"purposes": len(LEGAL_BASIS)}

    async def _check_analytics(self, db: AsyncSession) -> tuple[ComponentStatus, dict]:
        tracker = get_analytics_tracker()
        return (ComponentStatus.HEALTHY if tracker.enabled else ComponentStatus.DEGRADED), tracker.status()

    async def _check_performance(self, db: AsyncSession) -> tuple[ComponentStatus, dict]:
        rate = get_performance_monitor().error_rate()
        status = ComponentStatus.HEALTHY if rate < ERROR_RATE_LIMIT else ComponentStatus.DEGRADED
        return status, {"error_rate": rate}

    async def run_health_checks(self, db: AsyncSession, now: datetime | None = None) -> dict[str, Any]:
        now = now or utcnow()
        for name in COMPONENTS:
            check = getattr(self, f"_check_{name}")
            try:
                status, details = await check(db)
            except Exception as e:
                logger.exception("Health check %s failed", name)
                status, details = ComponentStatus.UNHEALTHY, {"error": str(e)}
            self.components[name] = {"status": status, "last_check": now, "details": details}
        return self.get_integration_status()

    def overall_status(self) -> ComponentStatus:
        return max((c["status"] for c in self.components.values()), key=_SEVERITY.__getitem__)

    def get_integration_status(self) -> dict[str, Any]:
        return {
            "overall": self.overall_status().value,
            "components": {
                name: {**info, "status": info["status"].value} for name, info in self.components.items()
            },
            "events": dict(self.event_counts),
            "handler_errors": self.handler_errors,
            "listeners": {event: len(handlers) for event, handlers in self._listeners.items()},
        }


def _invalidate_user_cache(payload: dict[str, Any]) -> None:
    get_data_manager().invalidate_user(payload["user_id"])


def register_default_handlers(manager: IntegrationManager) -> None:
    """Cache invalidation on every write event; analytics tracking for completions and unlocks."""
    tracker = get_analytics_tracker()
    for event in (WORKOUT_COMPLETED, PROGRAM_CHANGED, DATA_CHANGED):
        manager.on(event, _invalidate_user_cache)
    manager.on(WORKOUT_COMPLETED, tracker.on_workout_completed)
    manager.on(ACHIEVEMENT_UNLOCKED, tracker.on_achievement_unlocked)


@lru_cache
def get_integration_manager() -> IntegrationManager:
    manager = IntegrationManager()
    register_default_handlers(manager)
    return manager
