"""Exercise library: built-in (user_id NULL) and user-defined exercises."""

from __future__ import annotations

import uuid

from sqlalchemy import Enum, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fittrack.core.enums import Difficulty, Equipment, ExerciseCategory, MeasurementMode
from fittrack.db.base import Base, JSONType


class Exercise(Base):
    """Exercise definition with category, equipment, difficulty and muscle lists."""

    __tablename__ = "exercises"
    __table_args__ = (Index("ix_exercises_user_id", "user_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    category: Mapped[ExerciseCategory | None] = mapped_column(Enum(ExerciseCategory), nullable=True)
    equipment: Mapped[Equipment | None] = mapped_column(Enum(Equipment), nullable=True)
    difficulty: Mapped[Difficulty | None] = mapped_column(Enum(Difficulty), nullable=True)
    primary_muscles: Mapped[list] = mapped_column(JSONType, default=list)
    secondary_muscles: Mapped[list] = mapped_column(JSONType, default=list)
    unit: Mapped[str] = mapped_column(String(20), default="kg")
    measurement_mode: Mapped[MeasurementMode] = mapped_column(
        Enum(MeasurementMode), default=MeasurementMode.WEIGHT_REPS, nullable=False
    )
    rest_seconds_preset: Mapped[int | None] = mapped_column(nullable=True)  # Rest timer preset

    workout_sets: Mapped[list["WorkoutSet"]] = relationship(
        "WorkoutSet", back_populates="exercise", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def is_custom(self) -> bool:
        return self.user_id is not None
