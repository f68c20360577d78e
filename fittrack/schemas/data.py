"""Data manager schemas."""

from typing import Any

from pydantic import BaseModel, Field

from fittrack.core.enums import DiagnosticCategory


class DataValidateRequest(BaseModel):
    data_type: str
    data: dict[str, Any]


class DataValidateResponse(BaseModel):
    is_valid: bool
    errors: list[str]
    sanitized: dict[str, Any]


class ImportResult(BaseModel):
    programs: int = 0
    goals: int = 0
    body_measurements: int = 0
    workout_sessions: int = 0
    skipped: int = 0


class DiagnosticsRequest(BaseModel):
    categories: list[DiagnosticCategory] = Field(default_factory=list)
