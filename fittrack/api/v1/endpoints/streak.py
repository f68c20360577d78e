"""Workout streak report."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import get_current_user
from fittrack.db.session import get_db
from fittrack.models.user import User
from fittrack.services.streaks import get_streak_report

router = APIRouter()


@router.get("")
async def read_streak(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Current and longest streak, status, 30-day history and the next milestones."""
    return await get_streak_report(db, user)
