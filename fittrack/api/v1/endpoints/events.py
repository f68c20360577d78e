"""Client analytics events (stored only with analytics consent)."""

from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import get_current_user
from fittrack.core.dates import ensure_utc, utcnow
from fittrack.db.session import get_db
from fittrack.models.user import User
from fittrack.schemas.events import AnalyticsEventBatch, TrackResult
from fittrack.services.analytics_tracker import get_analytics_tracker

router = APIRouter()


@router.post("", response_model=TrackResult)
async def track_events(
    payload: AnalyticsEventBatch,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    events = [
        {**event.model_dump(), "occurred_at": ensure_utc(event.occurred_at)} for event in payload.events
    ]
    return await get_analytics_tracker().track_many(db, user.id, events)


@router.get("/summary")
async def events_summary(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    days: int = 30,
):
    """Counts by event type over the last `days` days."""
    return await get_analytics_tracker().summary(db, user.id, utcnow() - timedelta(days=max(days, 1)))
