"""Analytics event batches."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from fittrack.core.constants import MAX_EVENTS_PER_BATCH
from fittrack.core.enums import AnalyticsEventType


class AnalyticsEventIn(BaseModel):
    event_type: AnalyticsEventType
    properties: dict[str, Any] = {}
    session_id: str | None = Field(default=None, max_length=64)
    occurred_at: datetime | None = None


class AnalyticsEventBatch(BaseModel):
    events: list[AnalyticsEventIn] = Field(min_length=1, max_length=MAX_EVENTS_PER_BATCH)


class TrackResult(BaseModel):
    accepted: int
    dropped: int
