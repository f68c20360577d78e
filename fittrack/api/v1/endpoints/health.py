"""Liveness and readiness probes."""

import logging
import os

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.core.config import get_settings
from fittrack.db.session import get_db

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("")
async def health():
    """Process is up. `built_at` comes from BACKEND_BUILT_AT when the image sets it."""
    settings = get_settings()
    payload: dict = {"status": "ok", "service": settings.app_name, "environment": settings.environment}
    built_at = os.environ.get("BACKEND_BUILT_AT")
    if built_at:
        payload["built_at"] = built_at
    return payload


@router.get("/ready")
async def readiness(db: AsyncSession = Depends(get_db)):
    """503 until the database answers."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Readiness probe failed: %s", e)
        return JSONResponse(status_code=503, content={"status": "unavailable", "database": str(e)})
    return {"status": "ok", "database": "connected"}
