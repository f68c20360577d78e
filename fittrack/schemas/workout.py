"""WorkoutSession and WorkoutSet schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from fittrack.core.constants import MAX_REPS, MAX_WEIGHT, MIN_WEIGHT
from fittrack.core.enums import PRType, SetLabel


class ExerciseRef(BaseModel):
    """Minimal exercise info for embedding in set responses (id + name only)."""

    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class WorkoutSetBase(BaseModel):
    exercise_id: UUID
    set_order: int = 0
    weight: float | None = Field(default=None, ge=MIN_WEIGHT, le=MAX_WEIGHT)
    reps: int | None = Field(default=None, ge=0, le=MAX_REPS)
    duration_seconds: int | None = Field(default=None, ge=0)
    rest_seconds: int | None = Field(default=None, ge=0, le=3600)
    completed: bool = True
    notes: str | None = Field(default=None, max_length=500)
    set_label: SetLabel | None = None


class WorkoutSetCreate(WorkoutSetBase):
    pass


class WorkoutSetUpdate(BaseModel):
    weight: float | None = Field(default=None, ge=MIN_WEIGHT, le=MAX_WEIGHT)
    reps: int | None = Field(default=None, ge=0, le=MAX_REPS)
    duration_seconds: int | None = Field(default=None, ge=0)
    rest_seconds: int | None = Field(default=None, ge=0, le=3600)
    completed: bool | None = None
    notes: str | None = Field(default=None, max_length=500)
    set_label: SetLabel | None = None


class WorkoutSetRead(WorkoutSetBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    session_id: UUID
    is_pr: bool = False
    pr_type: PRType | None = None
    exercise: ExerciseRef | None = None


class WorkoutBase(BaseModel):
    name: str | None = Field(default=None, max_length=100)
    notes: str | None = None


class WorkoutCreate(WorkoutBase):
    started_at: datetime | None = None
    program_id: UUID | None = None
    program_workout_id: UUID | None = None
    scheduled_workout_id: UUID | None = None


class WorkoutFromProgram(BaseModel):
    program_id: UUID
    workout_index: int = Field(default=0, ge=0)
    scheduled_workout_id: UUID | None = None


class WorkoutUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=100)
    started_at: datetime | None = None
    ended_at: datetime | None = None
    duration_seconds: int | None = Field(default=None, ge=0)
    notes: str | None = None


class WorkoutComplete(BaseModel):
    ended_at: datetime | None = None
    notes: str | None = None


class WorkoutRead(WorkoutBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    program_id: UUID | None = None
    program_workout_id: UUID | None = None
    scheduled_workout_id: UUID | None = None
    started_at: datetime
    ended_at: datetime | None = None
    completed_at: datetime | None = None
    duration_seconds: int | None = None
    offline_id: str | None = None
    synced_at: datetime | None = None


class ExerciseSummary(BaseModel):
    exercise_id: UUID
    name: str | None = None
    sets: int
    volume: float
    reps: int
    average_weight: float
    best_one_rep_max: float


class WorkoutSummary(BaseModel):
    duration_minutes: int
    total_volume: float
    total_sets: int
    total_exercises: int
    exercises: list[ExerciseSummary] = []


class WorkoutReadWithSets(WorkoutRead):
    """Session with nested sets (for detail view) and its computed summary."""

    sets: list[WorkoutSetRead] = []
    summary: WorkoutSummary | None = None


class PreviousSession(BaseModel):
    session_id: UUID | None = None
    completed_at: datetime | None = None
    sets: list[WorkoutSetRead] = []
