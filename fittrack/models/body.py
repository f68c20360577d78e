"""Body measurement log (weight, composition, circumferences)."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from fittrack.db.base import Base, JSONType


class BodyMeasurement(Base):
    __tablename__ = "body_measurements"
    __table_args__ = (Index("ix_body_measurements_user_measured", "user_id", "measured_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    measured_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    body_fat: Mapped[float | None] = mapped_column(Float, nullable=True)  # percent
    muscle_mass: Mapped[float | None] = mapped_column(Float, nullable=True)
    measurements: Mapped[dict] = mapped_column(JSONType, default=dict)  # e.g. {"waist": 82, "chest": 101}
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
