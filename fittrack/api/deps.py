"""Request dependencies: current user from the bearer token, permission checks."""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.core.config import get_settings
from fittrack.core.enums import Permission, SecurityEvent
from fittrack.core.security import TokenError, decode_access_token, has_permission
from fittrack.db.session import get_db
from fittrack.models.user import User
from fittrack.services.audit import log_security_event

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{get_settings().api_v1_prefix}/auth/login", auto_error=False)

CREDENTIALS_ERROR = "Could not validate credentials"


def client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


async def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated", headers={"WWW-Authenticate": "Bearer"})
    try:
        user_id = decode_access_token(token)
    except TokenError as e:
        logger.info("Rejected access token: %s", e)
        raise HTTPException(status_code=401, detail=CREDENTIALS_ERROR, headers={"WWW-Authenticate": "Bearer"})
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail=CREDENTIALS_ERROR, headers={"WWW-Authenticate": "Bearer"})
    return user


def require_permission(permission: Permission) -> Callable:
    """Dependency factory: the current user must hold `permission` (403 otherwise)."""

    async def checker(
        request: Request,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
    ) -> User:
        if has_permission(user.role, permission):
            return user
        await log_security_event(
            db,
            SecurityEvent.PERMISSION_DENIED,
            user.id,
            {"permission": permission.value, "path": request.url.path},
            client_ip(request),
        )
        # The request fails, so the audit entry is committed here
        await db.commit()
        raise HTTPException(status_code=403, detail=f"Permission denied: {permission.value}")

    return checker
