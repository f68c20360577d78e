"""Scheduled workout schemas."""

from datetime import date, datetime, time
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from fittrack.core.constants import DEFAULT_REMINDER_MINUTES, MAX_SCHEDULE_WEEKS
from fittrack.core.enums import ScheduleStatus


class ScheduledWorkoutBase(BaseModel):
    scheduled_date: date
    scheduled_time: time
    reminder: bool = True
    reminder_minutes: int = Field(default=DEFAULT_REMINDER_MINUTES, ge=0, le=1440)
    notes: str | None = Field(default=None, max_length=500)


class ScheduledWorkoutCreate(ScheduledWorkoutBase):
    program_id: UUID
    workout_index: int = Field(default=0, ge=0)


class ScheduledWorkoutUpdate(BaseModel):
    scheduled_date: date | None = None
    scheduled_time: time | None = None
    workout_index: int | None = Field(default=None, ge=0)
    reminder: bool | None = None
    reminder_minutes: int | None = Field(default=None, ge=0, le=1440)
    notes: str | None = Field(default=None, max_length=500)


class ScheduledWorkoutRead(ScheduledWorkoutBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    program_id: UUID
    program_name: str
    program_workout_id: UUID | None = None
    workout_index: int
    workout_name: str
    completed: bool
    completed_at: datetime | None = None
    session_id: UUID | None = None
    created_at: datetime
    status: ScheduleStatus | None = None


class ScheduleComplete(BaseModel):
    session_id: UUID | None = None


class ScheduleGenerate(BaseModel):
    program_id: UUID
    start_date: date
    weeks: int = Field(default=4, ge=1, le=MAX_SCHEDULE_WEEKS)
    weekdays: list[int] | None = Field(default=None, description="0=Monday .. 6=Sunday; defaults from frequency")
    scheduled_time: time = time(18, 0)
    reminder: bool = True
    reminder_minutes: int = Field(default=DEFAULT_REMINDER_MINUTES, ge=0, le=1440)
