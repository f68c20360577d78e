"""Offline sync payloads."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

from fittrack.core.constants import MAX_REPS, MAX_WEIGHT, MIN_WEIGHT
from fittrack.core.enums import SetLabel
from fittrack.schemas.program import ProgramCreate


class SyncSet(BaseModel):
    exercise_name: str | None = Field(default=None, max_length=100)
    exercise_id: UUID | None = None
    weight: float | None = Field(default=None, ge=MIN_WEIGHT, le=MAX_WEIGHT)
    reps: int | None = Field(default=None, ge=0, le=MAX_REPS)
    duration_seconds: int | None = Field(default=None, ge=0)
    rest_seconds: int | None = Field(default=None, ge=0)
    completed: bool = True
    set_label: SetLabel | None = None
    notes: str | None = Field(default=None, max_length=500)


class SyncWorkout(BaseModel):
    id: UUID | None = None
    offline_id: str | None = Field(default=None, max_length=64)
    name: str | None = Field(default=None, max_length=100)
    program_id: UUID | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None
    completed_at: datetime | None = None
    duration_seconds: int | None = Field(default=None, ge=0)
    notes: str | None = None
    sets: list[SyncSet]


class SyncProgram(ProgramCreate):
    id: UUID | None = None


class SyncResult(BaseModel):
    success: bool
    id: UUID | None = None
    action: Literal["created", "updated"] | None = None
    synced_at: datetime | None = None
    error: str | None = None


class SyncStatus(BaseModel):
    exists: bool
    id: UUID | None = None
    synced_at: datetime | None = None
    last_modified: datetime | None = None


class SyncBatchItem(BaseModel):
    kind: Literal["workout", "program"]
    payload: dict[str, Any]


class SyncBatch(BaseModel):
    items: list[SyncBatchItem] = Field(max_length=100)


class SyncBatchResult(BaseModel):
    processed: int
    succeeded: int
    failed: int
    results: list[SyncResult]
