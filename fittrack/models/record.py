"""Personal records, created when a completed set beats the all-time best."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fittrack.core.enums import PRType
from fittrack.db.base import Base


class PersonalRecord(Base):
    __tablename__ = "personal_records"
    __table_args__ = (Index("ix_personal_records_user_exercise", "user_id", "exercise_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    exercise_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False
    )
    session_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("workout_sessions.id", ondelete="CASCADE"), nullable=True
    )
    set_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("workout_sets.id", ondelete="CASCADE"), nullable=True
    )
    record_type: Mapped[PRType] = mapped_column(Enum(PRType), nullable=False)
    value: Mapped[float] = mapped_column(Float, nullable=False)  # weight, volume or seconds
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    one_rep_max: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    achieved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    exercise: Mapped["Exercise"] = relationship("Exercise")
