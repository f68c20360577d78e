"""Training programs: Program -> ProgramWorkout -> ProgramExercise."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Enum, Float, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fittrack.core.enums import Difficulty, ProgramDuration, ProgramFrequency, ProgramGoal
from fittrack.db.base import Base, JSONType


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Program(Base):
    """A named collection of workouts with exercise targets."""

    __tablename__ = "programs"
    __table_args__ = (
        Index("ix_programs_user_created", "user_id", "created_at"),
        Index("ix_programs_user_offline_id", "user_id", "offline_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    goal: Mapped[ProgramGoal | None] = mapped_column(Enum(ProgramGoal), nullable=True)
    difficulty: Mapped[Difficulty | None] = mapped_column(Enum(Difficulty), nullable=True)
    duration: Mapped[ProgramDuration | None] = mapped_column(Enum(ProgramDuration), nullable=True)
    frequency: Mapped[ProgramFrequency | None] = mapped_column(Enum(ProgramFrequency), nullable=True)
    equipment: Mapped[list] = mapped_column(JSONType, default=list)
    target_muscles: Mapped[list] = mapped_column(JSONType, default=list)
    tags: Mapped[list] = mapped_column(JSONType, default=list)
    notes: Mapped[list] = mapped_column(JSONType, default=list)
    progression: Mapped[dict | None] = mapped_column(JSONType, nullable=True)  # {type, increment, deload, max_attempts}
    source_template_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_custom: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_imported: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    offline_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    synced_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, onupdate=_now)

    workouts: Mapped[list["ProgramWorkout"]] = relationship(
        "ProgramWorkout",
        back_populates="program",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProgramWorkout.order_in_program",
    )


class ProgramWorkout(Base):
    """One training day of a program (e.g. "Workout A", "Push Day")."""

    __tablename__ = "program_workouts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    program_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("programs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    order_in_program: Mapped[int] = mapped_column(Integer, default=0)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    program: Mapped["Program"] = relationship("Program", back_populates="workouts")
    exercises: Mapped[list["ProgramExercise"]] = relationship(
        "ProgramExercise",
        back_populates="workout",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProgramExercise.order_in_workout",
    )


class ProgramExercise(Base):
    """Exercise target inside a program workout. Reps is text ("5", "8-12", "5/3/1")."""

    __tablename__ = "program_exercises"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    workout_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("program_workouts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    exercise_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("exercises.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    sets: Mapped[int] = mapped_column(Integer, default=3)
    reps: Mapped[str] = mapped_column(String(20), default="10")
    weight: Mapped[float] = mapped_column(Float, default=0)
    rest_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    order_in_workout: Mapped[int] = mapped_column(Integer, default=0)

    workout: Mapped["ProgramWorkout"] = relationship("ProgramWorkout", back_populates="exercises")
