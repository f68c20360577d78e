"""Personal insights (cached per user until the next write)."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import get_current_user
from fittrack.core.dates import utcnow
from fittrack.db.session import get_db
from fittrack.models.user import User
from fittrack.services.data_manager import WORKOUT_SESSIONS, get_data_manager
from fittrack.services.insights import build_insights, load_completed_sessions, load_measurements

router = APIRouter()


@router.get("")
async def read_insights(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Stats, rule-based insights, strength trends and body trends."""
    manager = get_data_manager()
    cached = manager.cached(WORKOUT_SESSIONS, user.id, "insights")
    if cached is not None:
        return cached
    sessions = await load_completed_sessions(db, user.id)
    measurements = await load_measurements(db, user.id)
    return manager.store(WORKOUT_SESSIONS, user.id, build_insights(sessions, measurements, utcnow()), "insights")
