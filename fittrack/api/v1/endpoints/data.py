"""Backup export/import, cache controls and record validation."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import client_ip, get_current_user, require_permission
from fittrack.core.encryption import DecryptionError, get_encryption_manager
from fittrack.core.enums import AnalyticsEventType, Permission, SecurityEvent, Sensitivity
from fittrack.db.session import get_db
from fittrack.models.user import User
from fittrack.schemas.data import DataValidateRequest, DataValidateResponse, ImportResult
from fittrack.services.analytics_tracker import get_analytics_tracker
from fittrack.services.audit import log_security_event
from fittrack.services.data_manager import get_data_manager, sanitize_data, validate_data
from fittrack.services.integration import DATA_CHANGED, get_integration_manager
from fittrack.services.performance import get_performance_monitor
from fittrack.services.user_data import export_user_data, import_user_data

router = APIRouter()


@router.get("/export")
async def export_data(
    request: Request,
    encrypted: bool = False,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission(Permission.EXPORT_DATA)),
):
    """Full backup of the user's data; `encrypted=true` returns a restricted envelope."""
    data = await export_user_data(db, user)
    await log_security_event(
        db, SecurityEvent.DATA_ACCESS, user.id, {"action": "export", "encrypted": encrypted}, client_ip(request)
    )
    await get_analytics_tracker().track(db, user.id, AnalyticsEventType.EXPORT_DATA, {"encrypted": encrypted})
    if encrypted:
        return get_encryption_manager().encrypt(data, Sensitivity.RESTRICTED)
    return data


@router.post("/import", response_model=ImportResult)
async def import_data(
    request: Request,
    payload: dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Restore programs, goals, body measurements and sessions from an export (plain or encrypted)."""
    if "encrypted" in payload and "data" in payload:
        try:
            payload = get_encryption_manager().decrypt(payload)
        except DecryptionError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Backup must be a JSON object")
    counts = await import_user_data(db, user, payload)
    await log_security_event(
        db, SecurityEvent.DATA_MODIFICATION, user.id, {"action": "import", **counts}, client_ip(request)
    )
    await get_integration_manager().emit(DATA_CHANGED, {"db": db, "user_id": user.id, "collection": "import"})
    return counts


@router.get("/cache")
async def cache_metrics(user: User = Depends(get_current_user)):
    return get_data_manager().cache.metrics()


@router.delete("/cache")
async def clear_cache(user: User = Depends(get_current_user)):
    """Drop the current user's cached entries."""
    return {"cleared": get_data_manager().invalidate_user(user.id)}


@router.post("/validate", response_model=DataValidateResponse)
async def validate_record(payload: DataValidateRequest, user: User = Depends(get_current_user)):
    """Required-field check plus the sanitized form of the record."""
    sanitized = sanitize_data(payload.data_type, payload.data)
    result = validate_data(payload.data_type, sanitized)
    return DataValidateResponse(**result, sanitized=sanitized)


@router.get("/performance")
async def data_performance(user: User = Depends(get_current_user)):
    report = get_performance_monitor().get_report()
    return {
        "cache": get_data_manager().cache.metrics(),
        "requests": {k: report[k] for k in ("count", "average_ms", "p95_ms", "max_ms", "error_rate")},
    }
