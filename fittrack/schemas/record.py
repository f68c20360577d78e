"""Personal record schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from fittrack.core.constants import MAX_REPS, MAX_WEIGHT
from fittrack.core.enums import PRType
from fittrack.schemas.workout import ExerciseRef


class PersonalRecordCreate(BaseModel):
    exercise_id: UUID
    record_type: PRType = PRType.WEIGHT
    weight: float | None = Field(default=None, ge=0, le=MAX_WEIGHT)
    reps: int | None = Field(default=None, ge=0, le=MAX_REPS)
    duration_seconds: int | None = Field(default=None, ge=0)
    achieved_at: datetime | None = None
    notes: str | None = Field(default=None, max_length=500)


class PersonalRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    exercise_id: UUID
    session_id: UUID | None = None
    set_id: UUID | None = None
    record_type: PRType
    value: float
    weight: float | None = None
    reps: int | None = None
    duration_seconds: int | None = None
    one_rep_max: float | None = None
    achieved_at: datetime
    notes: str | None = None
    exercise: ExerciseRef | None = None


class BestRecord(BaseModel):
    exercise_id: UUID
    exercise_name: str
    max_weight: float | None = None
    max_weight_reps: int | None = None
    best_one_rep_max: float
    achieved_at: datetime | None = None
