"""Body measurement schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class BodyMeasurementBase(BaseModel):
    weight: float | None = Field(default=None, ge=0, le=1000)
    body_fat: float | None = Field(default=None, ge=0, le=100)
    muscle_mass: float | None = Field(default=None, ge=0, le=1000)
    measurements: dict[str, float] = {}
    notes: str | None = Field(default=None, max_length=500)


class BodyMeasurementCreate(BodyMeasurementBase):
    measured_at: datetime | None = None


class BodyMeasurementUpdate(BaseModel):
    measured_at: datetime | None = None
    weight: float | None = Field(default=None, ge=0, le=1000)
    body_fat: float | None = Field(default=None, ge=0, le=100)
    muscle_mass: float | None = Field(default=None, ge=0, le=1000)
    measurements: dict[str, float] | None = None
    notes: str | None = Field(default=None, max_length=500)


class BodyMeasurementRead(BodyMeasurementBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    measured_at: datetime
