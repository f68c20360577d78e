"""Request timing report."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from fittrack.api.deps import get_current_user, require_permission
from fittrack.core.enums import Permission
from fittrack.models.user import User
from fittrack.services.performance import get_performance_monitor

router = APIRouter()


@router.get("/report")
async def performance_report(user: User = Depends(get_current_user)):
    return get_performance_monitor().get_report()


@router.delete("", status_code=204)
async def reset_performance(user: User = Depends(require_permission(Permission.MANAGE_SETTINGS))):
    get_performance_monitor().reset()
