"""Security utilities: password hashing and policy, JWT access tokens, role permissions."""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from fittrack.core.config import get_settings
from fittrack.core.enums import Permission, UserRole

password_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

PASSWORD_MIN_LENGTH = 8
PASSWORD_SYMBOLS = r"[!@#$%^&*(),.?\":{}|<>]"

ROLE_PERMISSIONS: dict[UserRole, frozenset[Permission]] = {
    UserRole.ADMIN: frozenset(Permission),
    UserRole.MODERATOR: frozenset(
        {
            Permission.READ_USER,
            Permission.CREATE_WORKOUT,
            Permission.READ_WORKOUT,
            Permission.UPDATE_WORKOUT,
            Permission.DELETE_WORKOUT,
            Permission.CREATE_PROGRAM,
            Permission.READ_PROGRAM,
            Permission.UPDATE_PROGRAM,
            Permission.DELETE_PROGRAM,
            Permission.VIEW_ANALYTICS,
            Permission.EXPORT_DATA,
        }
    ),
    UserRole.USER: frozenset(
        {
            Permission.READ_USER,
            Permission.CREATE_WORKOUT,
            Permission.READ_WORKOUT,
            Permission.UPDATE_WORKOUT,
            Permission.DELETE_WORKOUT,
            Permission.CREATE_PROGRAM,
            Permission.READ_PROGRAM,
            Permission.UPDATE_PROGRAM,
            Permission.DELETE_PROGRAM,
            Permission.VIEW_ANALYTICS,
        }
    ),
    UserRole.GUEST: frozenset({Permission.READ_WORKOUT, Permission.READ_PROGRAM}),
}


class TokenError(Exception):
    """Access token could not be decoded or has expired."""


def hash_password(plain: str) -> str:
    return password_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return password_context.verify(plain, hashed)


def validate_password(password: str) -> dict[str, Any]:
    """Check a password against the policy. Returns {is_valid, errors}."""
    errors: list[str] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"\d", password):
        errors.append("Password must contain at least one number")
    if not re.search(PASSWORD_SYMBOLS, password):
        errors.append("Password must contain at least one special character")
    return {"is_valid": not errors, "errors": errors}


def password_strength(password: str) -> dict[str, Any]:
    """Policy result plus a 0-100 score (20 per satisfied rule)."""
    result = validate_password(password)
    score = (5 - len(result["errors"])) * 20
    if score < 60:
        label = "weak"
    elif score < 80:
        label = "fair"
    else:
        label = "strong"
    return {**result, "score": score, "strength": label}


def has_permission(role: UserRole | str, permission: Permission | str) -> bool:
    try:
        role = UserRole(role)
        permission = Permission(permission)
    except ValueError:
        return False
    return permission in ROLE_PERMISSIONS.get(role, frozenset())


def permissions_for(role: UserRole | str) -> list[str]:
    return sorted(p.value for p in ROLE_PERMISSIONS.get(UserRole(role), frozenset()))


def create_access_token(user_id: uuid.UUID, role: str, expires_minutes: int | None = None) -> tuple[str, int]:
    """Return (token, expires_in_seconds)."""
    settings = get_settings()
    minutes = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=minutes)).timestamp()),
    }
    token = jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)
    return token, minutes * 60


def decode_access_token(token: str) -> uuid.UUID:
    """Return the user id from a valid token; raise TokenError otherwise."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
        return uuid.UUID(payload["sub"])
    except (JWTError, KeyError, ValueError) as e:
        raise TokenError(str(e)) from e
