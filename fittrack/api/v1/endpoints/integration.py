"""Component health and event bus status."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import get_current_user
from fittrack.db.session import get_db
from fittrack.models.user import User
from fittrack.services.integration import get_integration_manager

router = APIRouter()


@router.get("/status")
async def integration_status(user: User = Depends(get_current_user)):
    """Last known component statuses, event counts and listeners."""
    return get_integration_manager().get_integration_status()


@router.post("/health-check")
async def run_health_check(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await get_integration_manager().run_health_checks(db)
