"""Security, audit and encryption schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from fittrack.core.enums import Sensitivity, UserRole


class AuditLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    user_id: UUID | None = None
    event_type: str
    details: dict[str, Any] = {}
    ip_address: str | None = None
    created_at: datetime


class SecurityStatus(BaseModel):
    role: str
    permissions: list[str]
    locked: bool
    locked_until: datetime | None = None
    failed_login_attempts: int
    last_login_at: datetime | None = None
    password_age_days: int | None = None
    session_timeout_minutes: int


class PasswordCheck(BaseModel):
    password: str = Field(max_length=256)


class PasswordStrength(BaseModel):
    is_valid: bool
    errors: list[str]
    score: int
    strength: str


class EncryptRequest(BaseModel):
    value: Any
    sensitivity: Sensitivity = Sensitivity.CONFIDENTIAL


class DecryptRequest(BaseModel):
    envelope: dict[str, Any]


class KeyStrengthRequest(BaseModel):
    key: str = Field(max_length=1024)


class KeyStrength(BaseModel):
    score: int
    strength: str
    feedback: list[str]


class RoleUpdate(BaseModel):
    role: UserRole
