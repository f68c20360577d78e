"""Offline sync: upsert workouts and programs keyed by offline_id or id."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import get_current_user
from fittrack.db.session import get_db
from fittrack.models.program import Program
from fittrack.models.user import User
from fittrack.models.workout import WorkoutSession
from fittrack.schemas.sync import SyncBatch, SyncBatchResult, SyncProgram, SyncResult, SyncStatus, SyncWorkout
from fittrack.services.integration import DATA_CHANGED, PROGRAM_CHANGED, get_integration_manager
from fittrack.services.sync import SyncError, sync_batch, sync_program, sync_status, sync_workout

router = APIRouter()


@router.post("/workouts", response_model=SyncResult)
async def sync_workout_endpoint(
    payload: SyncWorkout,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        result = await sync_workout(db, user, payload)
    except SyncError as e:
        raise HTTPException(status_code=400, detail=str(e))
    await get_integration_manager().emit(DATA_CHANGED, {"db": db, "user_id": user.id, "collection": "sync"})
    return result


@router.get("/workouts/{key}", response_model=SyncStatus)
async def workout_sync_status(
    key: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """`key` is the offline_id or the server id."""
    return await sync_status(db, WorkoutSession, user.id, key)


@router.post("/programs", response_model=SyncResult)
async def sync_program_endpoint(
    payload: SyncProgram,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        result = await sync_program(db, user, payload)
    except SyncError as e:
        raise HTTPException(status_code=400, detail=str(e))
    await get_integration_manager().emit(
        PROGRAM_CHANGED, {"db": db, "user_id": user.id, "program_id": result["id"], "action": result["action"]}
    )
    return result


@router.get("/programs/{key}", response_model=SyncStatus)
async def program_sync_status(
    key: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await sync_status(db, Program, user.id, key)


@router.post("/batch", response_model=SyncBatchResult)
async def sync_batch_endpoint(
    payload: SyncBatch,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Items run in order with one result each; a failed item does not abort the rest."""
    result = await sync_batch(db, user, payload.items)
    if result["succeeded"]:
        await get_integration_manager().emit(DATA_CHANGED, {"db": db, "user_id": user.id, "collection": "sync"})
    return result
