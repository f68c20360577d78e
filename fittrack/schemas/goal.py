"""Goal schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fittrack.core.constants import (
    GOAL_DESCRIPTION_MAX_LENGTH,
    GOAL_MAX_TARGET,
    GOAL_MIN_TARGET,
    GOAL_NAME_MAX_LENGTH,
    VOLUME_GOAL_MAX_TARGET,
)
from fittrack.core.enums import GoalCategory, GoalPriority, GoalStatus


def check_target(category: GoalCategory | None, target: float | None) -> None:
    if category is None or target is None:
        return
    limit = VOLUME_GOAL_MAX_TARGET if category == GoalCategory.VOLUME else GOAL_MAX_TARGET
    if target > limit:
        raise ValueError(f"Target must be between {GOAL_MIN_TARGET} and {limit}")


class GoalBase(BaseModel):
    title: str = Field(min_length=1, max_length=GOAL_NAME_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=GOAL_DESCRIPTION_MAX_LENGTH)
    category: GoalCategory
    priority: GoalPriority = GoalPriority.MEDIUM
    target: float = Field(ge=GOAL_MIN_TARGET, le=VOLUME_GOAL_MAX_TARGET)
    unit: str | None = Field(default=None, max_length=20)
    exercise_id: UUID | None = None
    measurement: str | None = Field(default=None, max_length=50)
    deadline: date | None = None


class GoalCreate(GoalBase):
    current: float = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_category_fields(self):
        check_target(self.category, self.target)
        if self.category in (GoalCategory.STRENGTH, GoalCategory.ENDURANCE) and self.exercise_id is None:
            raise ValueError(f"{self.category.value} goals need an exercise_id")
        if self.category == GoalCategory.BODY and not self.measurement:
            raise ValueError("body goals need a measurement")
        return self


class GoalUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=GOAL_NAME_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=GOAL_DESCRIPTION_MAX_LENGTH)
    priority: GoalPriority | None = None
    target: float | None = Field(default=None, ge=GOAL_MIN_TARGET, le=VOLUME_GOAL_MAX_TARGET)
    unit: str | None = Field(default=None, max_length=20)
    deadline: date | None = None


class GoalProgressUpdate(BaseModel):
    current: float = Field(ge=0)


class GoalProgress(BaseModel):
    current: float
    target: float
    percentage: float
    remaining: float
    completed: bool
    overdue: bool
    days_remaining: int | None = None
    status: GoalStatus


class GoalRead(GoalBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    current: float
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    progress: GoalProgress | None = None
