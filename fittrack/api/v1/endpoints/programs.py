"""Program CRUD, builder helpers (duplicate, import/export, templates, sessions) and progress."""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fittrack.api.deps import get_current_user
from fittrack.core.constants import PROGRAM_NAME_MAX_LENGTH
from fittrack.core.dates import local_today, utcnow
from fittrack.db.session import get_db
from fittrack.models.program import Program, ProgramWorkout
from fittrack.models.schedule import ScheduledWorkout
from fittrack.models.user import User
from fittrack.models.workout import WorkoutSession, WorkoutSet
from fittrack.schemas.program import ProgramCreate, ProgramFromSession, ProgramRead, ProgramStats, ProgramUpdate
from fittrack.services.integration import PROGRAM_CHANGED, get_integration_manager
from fittrack.services.program_templates import get_template
from fittrack.services.programs import (
    apply_program_data,
    build_program,
    get_program,
    program_progress,
    program_to_dict,
    sanitize_program,
    session_to_program_data,
    template_to_program_data,
    with_structure,
)
from fittrack.services.validation import validate_program

router = APIRouter()


def _clean_and_validate(data: dict[str, Any]) -> dict[str, Any]:
    data = sanitize_program(data)
    errors = validate_program(data)
    if errors:
        raise HTTPException(status_code=400, detail=errors)
    return data


async def _get_or_404(db: AsyncSession, user: User, program_id: uuid.UUID) -> Program:
    program = await get_program(db, user.id, program_id)
    if not program:
        raise HTTPException(status_code=404, detail="Program not found")
    return program


async def _save(db: AsyncSession, user: User, program: Program, action: str) -> Program:
    db.add(program)
    await db.flush()
    await get_integration_manager().emit(
        PROGRAM_CHANGED, {"db": db, "user_id": user.id, "program_id": program.id, "action": action}
    )
    return await get_program(db, user.id, program.id)


@router.get("", response_model=list[ProgramRead])
async def list_programs(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    name: str | None = None,
    limit: int = 100,
):
    """The user's programs, newest first. `name` is an exact match."""
    stmt = with_structure(select(Program)).where(Program.user_id == user.id)
    if name is not None:
        stmt = stmt.where(Program.name == name)
    result = await db.execute(stmt.order_by(Program.created_at.desc()).limit(limit))
    return list(result.scalars().all())


@router.get("/recent", response_model=list[ProgramRead])
async def recent_programs(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    limit: int = 5,
):
    result = await db.execute(
        with_structure(select(Program))
        .where(Program.user_id == user.id)
        .order_by(Program.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


@router.get("/search", response_model=list[ProgramRead])
async def search_programs(
    q: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Case-insensitive match on name or description."""
    pattern = f"%{q.strip().lower()}%"
    result = await db.execute(
        with_structure(select(Program))
        .where(
            Program.user_id == user.id,
            or_(func.lower(Program.name).like(pattern), func.lower(Program.description).like(pattern)),
        )
        .order_by(Program.created_at.desc())
    )
    return list(result.scalars().all())


@router.get("/stats", response_model=ProgramStats)
async def program_stats(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    total = await db.scalar(select(func.count(Program.id)).where(Program.user_id == user.id))
    with_workouts = await db.scalar(
        select(func.count(func.distinct(ProgramWorkout.program_id)))
        .join(Program, Program.id == ProgramWorkout.program_id)
        .where(Program.user_id == user.id)
    )
    latest = await db.scalar(
        select(Program.name).where(Program.user_id == user.id).order_by(Program.created_at.desc()).limit(1)
    )
    return ProgramStats(
        total_programs=total or 0,
        most_recent_program=latest,
        programs_with_workouts=with_workouts or 0,
    )


@router.get("/by-name/{name}", response_model=ProgramRead)
async def get_program_by_name(
    name: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    result = await db.execute(
        with_structure(select(Program))
        .where(Program.user_id == user.id, Program.name == name)
        .order_by(Program.created_at.desc())
    )
    program = result.scalars().first()
    if not program:
        raise HTTPException(status_code=404, detail="Program not found")
    return program


@router.post("", response_model=ProgramRead, status_code=201)
async def create_program(
    payload: ProgramCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Create a program with nested workouts and exercises."""
    data = _clean_and_validate(payload.model_dump(exclude={"offline_id"}))
    program = build_program(user.id, data, offline_id=payload.offline_id)
    return await _save(db, user, program, "created")


@router.post("/import", response_model=ProgramRead, status_code=201)
async def import_program(
    payload: ProgramCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Create a program from an export produced by GET /programs/{id}/export."""
    data = _clean_and_validate(payload.model_dump(exclude={"offline_id"}))
    program = build_program(user.id, data, is_imported=True)
    return await _save(db, user, program, "imported")


@router.post("/from-template/{template_id}", response_model=ProgramRead, status_code=201)
async def create_from_template(
    template_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    template = get_template(template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    data = _clean_and_validate(template_to_program_data(template))
    program = build_program(user.id, data, source_template_id=template_id, is_custom=False)
    return await _save(db, user, program, "created")


@router.post("/from-session", response_model=ProgramRead, status_code=201)
async def create_from_session(
    payload: ProgramFromSession,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """One-workout program from a completed session, keeping exercise order and set counts."""
    result = await db.execute(
        select(WorkoutSession)
        .where(WorkoutSession.id == payload.session_id, WorkoutSession.user_id == user.id)
        .options(selectinload(WorkoutSession.sets).selectinload(WorkoutSet.exercise))
    )
    session = result.scalar_one_or_none()
    if not session:
        raise HTTPException(status_code=404, detail="Workout not found")
    if session.completed_at is None:
        raise HTTPException(status_code=400, detail="Only completed workouts can be saved as a program")
    data = _clean_and_validate(session_to_program_data(session, payload.name, payload.description))
    return await _save(db, user, build_program(user.id, data), "created")


@router.get("/{program_id}", response_model=ProgramRead)
async def read_program(
    program_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await _get_or_404(db, user, program_id)


@router.patch("/{program_id}", response_model=ProgramRead)
async def update_program(
    program_id: uuid.UUID,
    payload: ProgramUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Partial update. A `workouts` list replaces the whole nested structure."""
    program = await _get_or_404(db, user, program_id)
    changes = sanitize_program(payload.model_dump(exclude_unset=True))
    merged = {**program_to_dict(program), **changes}
    errors = validate_program(merged)
    if errors:
        raise HTTPException(status_code=400, detail=errors)
    apply_program_data(program, changes)
    program.updated_at = utcnow()
    return await _save(db, user, program, "updated")


@router.delete("/{program_id}", status_code=204)
async def delete_program(
    program_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Delete a program and its schedule. Logged sessions stay, unlinked from the program."""
    program = await _get_or_404(db, user, program_id)
    await db.execute(delete(ScheduledWorkout).where(ScheduledWorkout.program_id == program.id))
    await db.execute(
        update(WorkoutSession)
        .where(WorkoutSession.program_id == program.id)
        .values(program_id=None, program_workout_id=None)
    )
    await db.delete(program)
    await db.flush()
    await get_integration_manager().emit(
        PROGRAM_CHANGED, {"db": db, "user_id": user.id, "program_id": program_id, "action": "deleted"}
    )
    return None


@router.post("/{program_id}/duplicate", response_model=ProgramRead, status_code=201)
async def duplicate_program(
    program_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    program = await _get_or_404(db, user, program_id)
    data = program_to_dict(program)
    data["name"] = f"{program.name} (Copy)"[:PROGRAM_NAME_MAX_LENGTH]
    duplicate = build_program(user.id, data, source_template_id=program.source_template_id)
    return await _save(db, user, duplicate, "created")


@router.get("/{program_id}/export")
async def export_program(
    program_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Portable program dict (no ids) that POST /programs/import accepts."""
    program = await _get_or_404(db, user, program_id)
    return program_to_dict(program)


@router.get("/{program_id}/progress")
async def read_program_progress(
    program_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    program = await _get_or_404(db, user, program_id)
    return await program_progress(db, program, user.id, local_today(user.timezone))
