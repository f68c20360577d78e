"""Scheduled workouts: a program workout bound to a calendar date/time."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timezone

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Integer, String, Time, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from fittrack.core.constants import DEFAULT_REMINDER_MINUTES
from fittrack.db.base import Base


class ScheduledWorkout(Base):
    __tablename__ = "scheduled_workouts"
    __table_args__ = (Index("ix_scheduled_workouts_user_date", "user_id", "scheduled_date"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    program_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("programs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    program_name: Mapped[str] = mapped_column(String(100), nullable=False)
    program_workout_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("program_workouts.id", ondelete="SET NULL"), nullable=True
    )
    workout_index: Mapped[int] = mapped_column(Integer, default=0)
    workout_name: Mapped[str] = mapped_column(String(100), nullable=False)
    scheduled_date: Mapped[date] = mapped_column(Date, nullable=False)
    scheduled_time: Mapped[time] = mapped_column(Time, nullable=False)
    reminder: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    reminder_minutes: Mapped[int] = mapped_column(Integer, default=DEFAULT_REMINDER_MINUTES)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    session_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("workout_sessions.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
