"""WorkoutSession and WorkoutSet models."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Enum, Float, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fittrack.core.enums import PRType, SetLabel
from fittrack.db.base import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class WorkoutSession(Base):
    """A performed workout. completed_at is set when the session is finished."""

    __tablename__ = "workout_sessions"
    __table_args__ = (
        Index("ix_workout_sessions_user_started", "user_id", "started_at"),
        Index("ix_workout_sessions_user_offline_id", "user_id", "offline_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    program_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("programs.id", ondelete="SET NULL"), nullable=True, index=True
    )
    program_workout_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("program_workouts.id", ondelete="SET NULL"), nullable=True
    )
    # Plain reference; scheduled_workouts.session_id holds the FK in the other direction
    scheduled_workout_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)  # Total session duration
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Offline sync bookkeeping
    offline_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    last_modified: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, onupdate=_now)
    synced_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    sets: Mapped[list["WorkoutSet"]] = relationship(
        "WorkoutSet", back_populates="session", cascade="all, delete-orphan", passive_deletes=True
    )


class WorkoutSet(Base):
    """One set: weight/reps/duration, completion flag, optional label and PR flags."""

    __tablename__ = "workout_sets"
    __table_args__ = (
        Index("ix_workout_sets_session_id", "session_id"),
        Index("ix_workout_sets_exercise_completed", "exercise_id", "completed"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workout_sessions.id", ondelete="CASCADE"), nullable=False
    )
    exercise_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False
    )
    set_order: Mapped[int] = mapped_column(Integer, default=0)
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rest_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)  # rest after this set
    completed: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    set_label: Mapped[SetLabel | None] = mapped_column(Enum(SetLabel), nullable=True)
    is_pr: Mapped[bool] = mapped_column(default=False, nullable=False)
    pr_type: Mapped[PRType | None] = mapped_column(Enum(PRType), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

    session: Mapped["WorkoutSession"] = relationship("WorkoutSession", back_populates="sets")
    exercise: Mapped["Exercise"] = relationship("Exercise", back_populates="workout_sets")
