"""Audit log, account security status, role management and encryption utilities."""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import client_ip, get_current_user, require_permission
from fittrack.core.config import get_settings
from fittrack.core.dates import ensure_utc, utcnow
from fittrack.core.encryption import DecryptionError, get_encryption_manager
from fittrack.core.enums import Permission, SecurityEvent
from fittrack.core.security import has_permission, password_strength, permissions_for
from fittrack.db.session import get_db
from fittrack.models.audit import AuditLog
from fittrack.models.user import User
from fittrack.schemas.security import (
    AuditLogRead,
    DecryptRequest,
    EncryptRequest,
    KeyStrength,
    KeyStrengthRequest,
    PasswordCheck,
    PasswordStrength,
    RoleUpdate,
    SecurityStatus,
)
from fittrack.schemas.user import UserRead
from fittrack.services.audit import log_security_event

router = APIRouter()

manage_users = require_permission(Permission.MANAGE_USERS)
manage_settings = require_permission(Permission.MANAGE_SETTINGS)


async def _get_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    target = result.scalar_one_or_none()
    if not target:
        raise HTTPException(status_code=404, detail="User not found")
    return target


@router.get("/audit-logs", response_model=list[AuditLogRead])
async def audit_logs(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    event_type: SecurityEvent | None = None,
    from_date: datetime | None = None,
    to_date: datetime | None = None,
    user_id: uuid.UUID | None = None,
    limit: int = 100,
):
    """Own entries; holders of view_audit_logs see everyone's and may filter by user_id."""
    stmt = select(AuditLog)
    if has_permission(user.role, Permission.VIEW_AUDIT_LOGS):
        if user_id is not None:
            stmt = stmt.where(AuditLog.user_id == user_id)
    else:
        stmt = stmt.where(AuditLog.user_id == user.id)
    if event_type:
        stmt = stmt.where(AuditLog.event_type == event_type.value)
    if from_date:
        stmt = stmt.where(AuditLog.created_at >= ensure_utc(from_date))
    if to_date:
        stmt = stmt.where(AuditLog.created_at <= ensure_utc(to_date))
    result = await db.execute(stmt.order_by(AuditLog.created_at.desc()).limit(min(max(limit, 1), 1000)))
    return list(result.scalars().all())


@router.get("/status", response_model=SecurityStatus)
async def security_status(user: User = Depends(get_current_user)):
    now = utcnow()
    locked_until = ensure_utc(user.locked_until)
    changed = ensure_utc(user.password_changed_at)
    return SecurityStatus(
        role=user.role.value,
        permissions=permissions_for(user.role),
        locked=bool(locked_until and locked_until > now),
        locked_until=locked_until,
        failed_login_attempts=user.failed_login_attempts,
        last_login_at=user.last_login_at,
        password_age_days=(now - changed).days if changed else None,
        session_timeout_minutes=get_settings().access_token_expire_minutes,
    )


@router.post("/password-strength", response_model=PasswordStrength)
async def check_password_strength(payload: PasswordCheck):
    """Policy errors plus a 0-100 score and a weak/fair/strong label."""
    return password_strength(payload.password)


@router.put("/users/{user_id}/role", response_model=UserRead)
async def update_role(
    user_id: uuid.UUID,
    payload: RoleUpdate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(manage_users),
):
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="You cannot change your own role")
    target = await _get_user(db, user_id)
    previous = target.role
    target.role = payload.role
    await db.flush()
    await log_security_event(
        db,
        SecurityEvent.SECURITY_SETTING_CHANGE,
        admin.id,
        {"target_user": str(target.id), "from_role": previous.value, "to_role": payload.role.value},
        client_ip(request),
    )
    return target


@router.post("/users/{user_id}/unlock", response_model=UserRead)
async def unlock_user(
    user_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(manage_users),
):
    target = await _get_user(db, user_id)
    target.failed_login_attempts = 0
    target.locked_until = None
    await db.flush()
    await log_security_event(
        db, SecurityEvent.SECURITY_SETTING_CHANGE, admin.id, {"unlocked_user": str(target.id)}, client_ip(request)
    )
    return target


@router.post("/encrypt")
async def encrypt_value(payload: EncryptRequest, user: User = Depends(get_current_user)):
    return get_encryption_manager().encrypt(payload.value, payload.sensitivity)


@router.post("/decrypt")
async def decrypt_value(payload: DecryptRequest, user: User = Depends(get_current_user)):
    try:
        return {"value": get_encryption_manager().decrypt(payload.envelope)}
    except DecryptionError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/encryption/status")
async def encryption_status(user: User = Depends(manage_settings)):
    return get_encryption_manager().get_encryption_status()


@router.post("/encryption/rotate")
async def rotate_keys(
    request: Request,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_settings),
):
    version = get_encryption_manager().rotate_keys()
    await log_security_event(
        db, SecurityEvent.SECURITY_SETTING_CHANGE, user.id, {"key_version": version}, client_ip(request)
    )
    return {"key_version": version}


@router.post("/key-strength", response_model=KeyStrength)
async def key_strength(payload: KeyStrengthRequest, user: User = Depends(get_current_user)):
    return get_encryption_manager().validate_key_strength(payload.key)
