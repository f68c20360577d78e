"""Consents, data-subject requests and privacy reporting."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import client_ip, get_current_user, require_permission
from fittrack.core.enums import ConsentType, DataRequestType, Permission, SecurityEvent
from fittrack.db.session import get_db
from fittrack.models.privacy import ConsentRecord, DataRequest
from fittrack.models.user import User
from fittrack.schemas.privacy import AnonymizeRequest, ConsentCreate, ConsentRead, DataRequestCreate, DataRequestRead
from fittrack.services.audit import log_security_event
from fittrack.services.privacy import PrivacyError, get_privacy_manager

router = APIRouter()


@router.get("/consents", response_model=list[ConsentRead])
async def list_consents(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Consent history, newest first."""
    result = await db.execute(
        select(ConsentRecord)
        .where(ConsentRecord.user_id == user.id)
        .order_by(ConsentRecord.recorded_at.desc())
    )
    return list(result.scalars().all())


@router.post("/consents", response_model=ConsentRead, status_code=201)
async def record_consent(
    payload: ConsentCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await get_privacy_manager().record_consent(
        db, user.id, payload.consent_type, payload.granted, payload.version
    )


@router.delete("/consents/{consent_type}")
async def withdraw_consent(
    consent_type: ConsentType,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if consent_type == ConsentType.ESSENTIAL:
        raise HTTPException(status_code=400, detail="Essential consent cannot be withdrawn")
    withdrawn = await get_privacy_manager().withdraw_consent(db, user.id, consent_type)
    return {"consent_type": consent_type.value, "withdrawn": withdrawn}


@router.get("/requests", response_model=list[DataRequestRead])
async def list_requests(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    result = await db.execute(
        select(DataRequest).where(DataRequest.user_id == user.id).order_by(DataRequest.created_at.desc())
    )
    return list(result.scalars().all())


@router.post("/requests", response_model=DataRequestRead, status_code=201)
async def create_request(
    payload: DataRequestCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """export/portability complete immediately, delete is scheduled, rectify updates the profile."""
    try:
        data_request = await get_privacy_manager().create_request(db, user, payload.request_type, payload.payload)
    except PrivacyError as e:
        raise HTTPException(status_code=400, detail=str(e))
    event = (
        SecurityEvent.DATA_ACCESS
        if data_request.request_type in (DataRequestType.EXPORT, DataRequestType.PORTABILITY)
        else SecurityEvent.DATA_MODIFICATION
    )
    await log_security_event(
        db, event, user.id, {"request": data_request.request_type.value, "id": str(data_request.id)}, client_ip(request)
    )
    return data_request


@router.post("/requests/{request_id}/cancel", response_model=DataRequestRead)
async def cancel_request(
    request_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    result = await db.execute(
        select(DataRequest).where(DataRequest.id == request_id, DataRequest.user_id == user.id)
    )
    data_request = result.scalar_one_or_none()
    if not data_request:
        raise HTTPException(status_code=404, detail="Request not found")
    try:
        return await get_privacy_manager().cancel_request(db, data_request)
    except PrivacyError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/summary")
async def privacy_summary(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Active consents, requests and stored data counts per category."""
    return await get_privacy_manager().get_user_privacy_summary(db, user)


@router.get("/status")
async def privacy_status(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission(Permission.MANAGE_SETTINGS)),
):
    return await get_privacy_manager().get_privacy_status(db)


@router.post("/cleanup")
async def privacy_cleanup(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission(Permission.MANAGE_SETTINGS)),
):
    """Run due deletions, expire consents and purge data past retention."""
    return await get_privacy_manager().cleanup_expired_data(db)


@router.post("/anonymize")
async def anonymize_record(payload: AnonymizeRequest, user: User = Depends(get_current_user)):
    return get_privacy_manager().anonymize(payload.record)
