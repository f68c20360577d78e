"""Exercise schemas."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from fittrack.core.constants import EXERCISE_NAME_MAX_LENGTH
from fittrack.core.enums import Difficulty, Equipment, ExerciseCategory, MeasurementMode


class ExerciseBase(BaseModel):
    name: str = Field(min_length=1, max_length=EXERCISE_NAME_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=1000)
    category: ExerciseCategory | None = None
    equipment: Equipment | None = None
    difficulty: Difficulty | None = None
    primary_muscles: list[str] = []
    secondary_muscles: list[str] = []
    unit: str = "kg"
    measurement_mode: MeasurementMode = MeasurementMode.WEIGHT_REPS
    rest_seconds_preset: int | None = Field(default=None, ge=0, le=3600)


class ExerciseCreate(ExerciseBase):
    pass


class ExerciseUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=EXERCISE_NAME_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=1000)
    category: ExerciseCategory | None = None
    equipment: Equipment | None = None
    difficulty: Difficulty | None = None
    primary_muscles: list[str] | None = None
    secondary_muscles: list[str] | None = None
    unit: str | None = None
    measurement_mode: MeasurementMode | None = None
    rest_seconds_preset: int | None = Field(default=None, ge=0, le=3600)


class ExerciseRead(ExerciseBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    user_id: UUID | None = None
    is_custom: bool = False
