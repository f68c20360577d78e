"""Program, ProgramWorkout and ProgramExercise schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from fittrack.core.constants import (
    MAX_SETS_PER_EXERCISE_PER_SESSION,
    MAX_WEIGHT,
    MIN_WEIGHT,
    PROGRAM_DESCRIPTION_MAX_LENGTH,
    PROGRAM_NAME_MAX_LENGTH,
)
from fittrack.core.enums import Difficulty, ProgramDuration, ProgramFrequency, ProgramGoal


class ProgramExerciseBase(BaseModel):
    name: str = Field(max_length=100)
    exercise_id: UUID | None = None
    sets: int = Field(default=3, le=MAX_SETS_PER_EXERCISE_PER_SESSION)
    reps: str = Field(default="10", max_length=20)  # "5", "8-12", "5/3/1"
    weight: float = Field(default=0, ge=MIN_WEIGHT, le=MAX_WEIGHT)
    rest_seconds: int | None = Field(default=None, ge=0, le=3600)
    notes: str | None = Field(default=None, max_length=500)


class ProgramExerciseRead(ProgramExerciseBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    order_in_workout: int = 0


class ProgramWorkoutBase(BaseModel):
    name: str = Field(max_length=100)
    notes: str | None = Field(default=None, max_length=500)
    exercises: list[ProgramExerciseBase] = []


class ProgramWorkoutRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    name: str
    notes: str | None = None
    order_in_program: int = 0
    exercises: list[ProgramExerciseRead] = []


class ProgramBase(BaseModel):
    name: str = Field(max_length=PROGRAM_NAME_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=PROGRAM_DESCRIPTION_MAX_LENGTH)
    goal: ProgramGoal | None = None
    difficulty: Difficulty | None = None
    duration: ProgramDuration | None = None
    frequency: ProgramFrequency | None = None
    equipment: list[str] = []
    target_muscles: list[str] = []
    tags: list[str] = []
    notes: list[str] = []
    progression: dict | None = None


class ProgramCreate(ProgramBase):
    workouts: list[ProgramWorkoutBase] = []
    offline_id: str | None = Field(default=None, max_length=64)


class ProgramUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=PROGRAM_NAME_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=PROGRAM_DESCRIPTION_MAX_LENGTH)
    goal: ProgramGoal | None = None
    difficulty: Difficulty | None = None
    duration: ProgramDuration | None = None
    frequency: ProgramFrequency | None = None
    equipment: list[str] | None = None
    target_muscles: list[str] | None = None
    tags: list[str] | None = None
    notes: list[str] | None = None
    progression: dict | None = None
    workouts: list[ProgramWorkoutBase] | None = None


class ProgramRead(ProgramBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    source_template_id: str | None = None
    is_custom: bool = True
    is_imported: bool = False
    offline_id: str | None = None
    synced_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    workouts: list[ProgramWorkoutRead] = []


class ProgramFromSession(BaseModel):
    session_id: UUID
    name: str | None = Field(default=None, max_length=PROGRAM_NAME_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=PROGRAM_DESCRIPTION_MAX_LENGTH)


class ProgramStats(BaseModel):
    total_programs: int
    most_recent_program: str | None = None
    programs_with_workouts: int


