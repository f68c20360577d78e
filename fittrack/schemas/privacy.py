"""Consent and data request schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from fittrack.core.enums import ConsentType, DataRequestStatus, DataRequestType


class ConsentCreate(BaseModel):
    consent_type: ConsentType
    granted: bool
    version: str = Field(default="1.0", max_length=20)


class ConsentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    consent_type: ConsentType
    granted: bool
    version: str
    recorded_at: datetime
    expires_at: datetime | None = None
    withdrawn_at: datetime | None = None
    expired: bool


class DataRequestCreate(BaseModel):
    # Unknown types are rejected by the privacy manager (400), not by validation
    request_type: str = Field(min_length=1, max_length=32)
    payload: dict[str, Any] = {}


class DataRequestRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    request_type: DataRequestType
    status: DataRequestStatus
    payload: dict[str, Any] = {}
    result: dict[str, Any] | None = None
    scheduled_for: datetime | None = None
    created_at: datetime
    completed_at: datetime | None = None


class AnonymizeRequest(BaseModel):
    record: dict[str, Any]
