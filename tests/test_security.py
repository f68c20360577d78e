import uuid

import pytest

from fittrack.core.enums import Permission, UserRole
from fittrack.core.security import (
    TokenError,
    create_access_token,
    decode_access_token,
    has_permission,
    hash_password,
    password_strength,
    permissions_for,
    validate_password,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = hash_password("Str0ng!Pass")
    assert hashed != "Str0ng!Pass"
    assert verify_password("Str0ng!Pass", hashed)
    assert not verify_password("wrong", hashed)


def test_password_policy():
    assert validate_password("Str0ng!Pass") == {"is_valid": True, "errors": []}
    result = validate_password("short")
    assert not result["is_valid"]
    assert "Password must be at least 8 characters long" in result["errors"]
    assert "Password must contain at least one number" in result["errors"]


def test_password_strength_score():
    assert password_strength("Str0ng!Pass")["score"] == 100
    assert password_strength("Str0ng!Pass")["strength"] == "strong"
    assert password_strength("password")["strength"] == "weak"


def test_role_permissions():
    assert has_permission(UserRole.ADMIN, Permission.MANAGE_USERS)
    assert has_permission(UserRole.USER, Permission.VIEW_ANALYTICS)
    assert not has_permission(UserRole.USER, Permission.EXPORT_DATA)
    assert has_permission(UserRole.MODERATOR, Permission.EXPORT_DATA)
    assert not has_permission(UserRole.GUEST, Permission.CREATE_WORKOUT)
    assert not has_permission("nobody", Permission.READ_WORKOUT)
    assert permissions_for(UserRole.GUEST) == ["read_program", "read_workout"]


def test_access_token_round_trip():
    user_id = uuid.uuid4()
    token, expires_in = create_access_token(user_id, "user", expires_minutes=5)
    assert expires_in == 300
    assert decode_access_token(token) == user_id


def test_expired_token_is_rejected():
    token, _ = create_access_token(uuid.uuid4(), "user", expires_minutes=-1)
    with pytest.raises(TokenError):
        decode_access_token(token)


def test_garbage_token_is_rejected():
    with pytest.raises(TokenError):
        decode_access_token("not-a-token")
