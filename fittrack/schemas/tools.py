"""Calculator schemas."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field


class PlateCalcRequest(BaseModel):
    target_weight: float = Field(gt=0, le=1000)
    unit: Literal["kg", "lb"] = "kg"
    bar_weight: float | None = Field(default=None, ge=0)
    available_plates: list[float] | None = None


class PlateCalcResponse(BaseModel):
    bar_weight: float
    target_weight: float
    plates: list[float]
    per_side: float
    total: float
    remainder: float


class RestSuggestion(BaseModel):
    exercise_id: UUID | None = None
    name: str | None = None
    rest_seconds: int


class OneRepMaxResponse(BaseModel):
    weight: float
    reps: int
    epley: float
    brzycki: float


class PlateauAlert(BaseModel):
    exercise_id: UUID
    exercise_name: str
    sessions_without_improvement: int
