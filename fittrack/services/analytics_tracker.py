"""Consent-gated usage analytics: client event batches and server-side tracking."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from functools import lru_cache
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.core.dates import utcnow
from fittrack.core.enums import AnalyticsEventType, ConsentType
from fittrack.models.analytics_event import AnalyticsEvent
from fittrack.services.privacy import get_privacy_manager

logger = logging.getLogger(__name__)


class AnalyticsTracker:
    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self.stored = 0
        self.dropped = 0

    async def track_many(
        self, db: AsyncSession, user_id: uuid.UUID, events: list[dict[str, Any]], now: datetime | None = None
    ) -> dict[str, int]:
        """Store events when the user consented to analytics; otherwise drop and count them."""
        now = now or utcnow()
        allowed = self.enabled and await get_privacy_manager().has_consent(db, user_id, ConsentType.ANALYTICS, now)
        if not allowed:
            self.dropped += len(events)
            logger.debug("Dropped %d analytics events for user %s (no consent)", len(events), user_id)
            return {"accepted": 0, "dropped": len(events)}
        for event in events:
            db.add(
                AnalyticsEvent(
                    user_id=user_id,
                    event_type=AnalyticsEventType(event["event_type"]),
                    properties=event.get("properties") or {},
                    client_session_id=event.get("session_id"),
                    occurred_at=event.get("occurred_at") or now,
                )
            )
        await db.flush()
        self.stored += len(events)
        return {"accepted": len(events), "dropped": 0}

    async def track(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        event_type: AnalyticsEventType,
        properties: dict[str, Any] | None = None,
    ) -> bool:
        result = await self.track_many(db, user_id, [{"event_type": event_type, "properties": properties}])
        return result["accepted"] == 1

    async def summary(self, db: AsyncSession, user_id: uuid.UUID, since: datetime) -> dict[str, Any]:
        rows = await db.execute(
            select(AnalyticsEvent.event_type, func.count(AnalyticsEvent.id))
            .where(AnalyticsEvent.user_id == user_id, AnalyticsEvent.occurred_at >= since)
            .group_by(AnalyticsEvent.event_type)
        )
        counts = {event_type.value: count for event_type, count in rows.all()}
        return {"since": since, "total": sum(counts.values()), "by_type": counts}

    def status(self) -> dict[str, Any]:
        return {"enabled": self.enabled, "stored": self.stored, "dropped": self.dropped}

    # Event bus handlers; payloads carry the request's db session

    async def on_workout_completed(self, payload: dict[str, Any]) -> None:
        summary = payload.get("summary") or {}
        await self.track(
            payload["db"],
            payload["user_id"],
            AnalyticsEventType.WORKOUT_COMPLETE,
            {
                "session_id": str(payload["session_id"]),
                "duration_minutes": summary.get("duration_minutes"),
                "total_volume": summary.get("total_volume"),
                "total_sets": summary.get("total_sets"),
            },
        )

    async def on_achievement_unlocked(self, payload: dict[str, Any]) -> None:
        await self.track(
            payload["db"],
            payload["user_id"],
            AnalyticsEventType.ACHIEVEMENT_UNLOCK,
            {"achievement_id": payload["achievement_id"]},
        )


@lru_cache
def get_analytics_tracker() -> AnalyticsTracker:
    return AnalyticsTracker()
