"""Registration, login with lockout, profile and password management."""

from __future__ import annotations

import math
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import client_ip, get_current_user
from fittrack.core.config import get_settings
from fittrack.core.dates import ensure_utc, is_valid_timezone, utcnow
from fittrack.core.enums import AnalyticsEventType, SecurityEvent
from fittrack.core.security import create_access_token, hash_password, validate_password, verify_password
from fittrack.db.session import get_db
from fittrack.models.user import User
from fittrack.schemas.user import LoginRequest, PasswordChange, Token, UserCreate, UserRead, UserUpdate
from fittrack.services.analytics_tracker import get_analytics_tracker
from fittrack.services.audit import log_security_event
from fittrack.services.validation import sanitize_text

router = APIRouter()


def _check_timezone(tz_name: str | None) -> None:
    if tz_name is not None and not is_valid_timezone(tz_name):
        raise HTTPException(status_code=400, detail=f"Unknown timezone: {tz_name}")


def _check_password(password: str) -> None:
    policy = validate_password(password)
    if not policy["is_valid"]:
        raise HTTPException(status_code=400, detail=policy["errors"])


async def _login_payload(request: Request) -> LoginRequest:
    """OAuth2 password form (username/password) or a JSON body (email/password)."""
    try:
        if request.headers.get("content-type", "").startswith("application/json"):
            return LoginRequest.model_validate(await request.json())
        form = await request.form()
        return LoginRequest(email=form.get("username") or form.get("email"), password=form.get("password"))
    except ValidationError as e:
        raise RequestValidationError(e.errors())
    except ValueError:
        raise HTTPException(status_code=400, detail="Malformed login request")


@router.post("/register", response_model=UserRead, status_code=201)
async def register(body: UserCreate, request: Request, db: AsyncSession = Depends(get_db)):
    email = body.email.lower()
    existing = await db.execute(select(User.id).where(User.email == email))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Email already registered")
    _check_password(body.password)
    _check_timezone(body.timezone)
    now = utcnow()
    user = User(
        email=email,
        password_hash=hash_password(body.password),
        display_name=body.display_name,
        timezone=body.timezone,
        password_changed_at=now,
        created_at=now,
    )
    db.add(user)
    await db.flush()
    await log_security_event(db, SecurityEvent.USER_REGISTER, user.id, {"email": email}, client_ip(request))
    await get_analytics_tracker().track(db, user.id, AnalyticsEventType.USER_REGISTER)
    return user


@router.post("/login", response_model=Token)
async def login(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Exchange credentials for a bearer token.
    Repeated failures lock the account for settings.lockout_minutes.
    """
    settings = get_settings()
    body = await _login_payload(request)
    ip = client_ip(request)
    now = utcnow()
    result = await db.execute(select(User).where(User.email == body.email.lower()))
    user = result.scalar_one_or_none()

    locked_until = ensure_utc(user.locked_until) if user else None
    if locked_until and locked_until > now:
        minutes = math.ceil((locked_until - now).total_seconds() / 60)
        raise HTTPException(status_code=423, detail=f"Account locked. Try again in {minutes} minute(s).")

    if not user or not user.is_active or not verify_password(body.password, user.password_hash):
        if user:
            user.failed_login_attempts += 1
            if user.failed_login_attempts >= settings.max_login_attempts:
                user.locked_until = now + timedelta(minutes=settings.lockout_minutes)
                await log_security_event(
                    db, SecurityEvent.ACCOUNT_LOCKED, user.id, {"attempts": user.failed_login_attempts}, ip
                )
        await log_security_event(
            db, SecurityEvent.LOGIN_FAILED, user.id if user else None, {"email": body.email.lower()}, ip
        )
        # The request fails, so the attempt counter and audit entries are committed here
        await db.commit()
        raise HTTPException(status_code=401, detail="Incorrect email or password")

    user.failed_login_attempts = 0
    user.locked_until = None
    user.last_login_at = now
    await log_security_event(db, SecurityEvent.LOGIN_SUCCESS, user.id, None, ip)
    await get_analytics_tracker().track(db, user.id, AnalyticsEventType.USER_LOGIN)
    token, expires_in = create_access_token(user.id, user.role.value)
    return Token(access_token=token, expires_in=expires_in)


@router.post("/logout", status_code=204)
async def logout(
    request: Request,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Tokens are stateless; the client discards it. Logged for the audit trail."""
    await log_security_event(db, SecurityEvent.LOGOUT, user.id, None, client_ip(request))
    await get_analytics_tracker().track(db, user.id, AnalyticsEventType.USER_LOGOUT)


@router.get("/me", response_model=UserRead)
async def read_me(user: User = Depends(get_current_user)):
    return user


@router.patch("/me", response_model=UserRead)
async def update_me(
    body: UserUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    data = body.model_dump(exclude_unset=True)
    if "timezone" in data:
        if data["timezone"] is None:
            raise HTTPException(status_code=400, detail="timezone cannot be empty")
        _check_timezone(data["timezone"])
    for key in ("display_name", "phone"):
        if key in data:
            data[key] = sanitize_text(data[key])
    for k, v in data.items():
        setattr(user, k, v)
    await db.flush()
    return user


@router.post("/change-password", status_code=204)
async def change_password(
    body: PasswordChange,
    request: Request,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not verify_password(body.current_password, user.password_hash):
        raise HTTPException(status_code=400, detail="Current password is incorrect")
    _check_password(body.new_password)
    if verify_password(body.new_password, user.password_hash):
        raise HTTPException(status_code=400, detail="New password must differ from the current password")
    user.password_hash = hash_password(body.new_password)
    user.password_changed_at = utcnow()
    await log_security_event(db, SecurityEvent.PASSWORD_CHANGE, user.id, None, client_ip(request))
