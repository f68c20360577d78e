"""Self-test suite."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import require_permission
from fittrack.core.enums import Permission
from fittrack.db.session import get_db
from fittrack.models.user import User
from fittrack.schemas.data import DiagnosticsRequest
from fittrack.services.diagnostics import run_diagnostics

router = APIRouter()


@router.post("/run")
async def run(
    payload: DiagnosticsRequest | None = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission(Permission.MANAGE_SETTINGS)),
):
    """Run registered checks, optionally limited to some categories."""
    return await run_diagnostics(db, payload.categories if payload else None)
