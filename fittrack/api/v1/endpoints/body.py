"""Body measurements."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import get_current_user
from fittrack.core.dates import ensure_utc, utcnow
from fittrack.db.session import get_db
from fittrack.models.body import BodyMeasurement
from fittrack.models.user import User
from fittrack.schemas.body import BodyMeasurementCreate, BodyMeasurementRead, BodyMeasurementUpdate
from fittrack.services.integration import DATA_CHANGED, get_integration_manager
from fittrack.services.validation import sanitize_text

router = APIRouter()


async def _get_measurement(db: AsyncSession, user: User, measurement_id: uuid.UUID) -> BodyMeasurement:
    result = await db.execute(
        select(BodyMeasurement).where(BodyMeasurement.id == measurement_id, BodyMeasurement.user_id == user.id)
    )
    measurement = result.scalar_one_or_none()
    if not measurement:
        raise HTTPException(status_code=404, detail="Measurement not found")
    return measurement


async def _changed(db: AsyncSession, user: User) -> None:
    await get_integration_manager().emit(DATA_CHANGED, {"db": db, "user_id": user.id, "collection": "body"})


@router.get("", response_model=list[BodyMeasurementRead])
async def list_measurements(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    limit: int = 100,
):
    result = await db.execute(
        select(BodyMeasurement)
        .where(BodyMeasurement.user_id == user.id)
        .order_by(BodyMeasurement.measured_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


@router.get("/latest", response_model=BodyMeasurementRead)
async def latest_measurement(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    result = await db.execute(
        select(BodyMeasurement)
        .where(BodyMeasurement.user_id == user.id)
        .order_by(BodyMeasurement.measured_at.desc())
        .limit(1)
    )
    measurement = result.scalar_one_or_none()
    if not measurement:
        raise HTTPException(status_code=404, detail="No measurements yet")
    return measurement


@router.post("", response_model=BodyMeasurementRead, status_code=201)
async def create_measurement(
    payload: BodyMeasurementCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    data = payload.model_dump()
    data["measured_at"] = ensure_utc(data["measured_at"]) or utcnow()
    data["notes"] = sanitize_text(data["notes"])
    measurement = BodyMeasurement(user_id=user.id, **data)
    db.add(measurement)
    await db.flush()
    await _changed(db, user)
    return measurement


@router.get("/{measurement_id}", response_model=BodyMeasurementRead)
async def get_measurement(
    measurement_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await _get_measurement(db, user, measurement_id)


@router.patch("/{measurement_id}", response_model=BodyMeasurementRead)
async def update_measurement(
    measurement_id: uuid.UUID,
    payload: BodyMeasurementUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    measurement = await _get_measurement(db, user, measurement_id)
    data = payload.model_dump(exclude_unset=True)
    if "measured_at" in data:
        if data["measured_at"] is None:
            raise HTTPException(status_code=400, detail="measured_at cannot be empty")
        data["measured_at"] = ensure_utc(data["measured_at"])
    if "measurements" in data:
        data["measurements"] = data["measurements"] or {}
    if "notes" in data:
        data["notes"] = sanitize_text(data["notes"])
    for k, v in data.items():
        setattr(measurement, k, v)
    await db.flush()
    await _changed(db, user)
    return measurement


@router.delete("/{measurement_id}", status_code=204)
async def delete_measurement(
    measurement_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    measurement = await _get_measurement(db, user, measurement_id)
    await db.delete(measurement)
    await db.flush()
    await _changed(db, user)
    return None
