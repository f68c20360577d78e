"""Exercise lookup: visibility, name resolution and library seeding."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.core.exercise_library import EXERCISE_LIBRARY
from fittrack.models.exercise import Exercise

logger = logging.getLogger(__name__)


def visible_to(user_id: uuid.UUID):
    """Built-in exercises plus the user's own custom ones."""
    return or_(Exercise.user_id.is_(None), Exercise.user_id == user_id)


async def get_visible_exercise(db: AsyncSession, user_id: uuid.UUID, exercise_id: uuid.UUID) -> Exercise | None:
    result = await db.execute(select(Exercise).where(Exercise.id == exercise_id, visible_to(user_id)))
    return result.scalar_one_or_none()


async def resolve_exercise(db: AsyncSession, user_id: uuid.UUID, name: str) -> Exercise:
    """Find a visible exercise by case-insensitive name (own custom first), else create a custom one."""
    cleaned = name.strip()
    result = await db.execute(
        select(Exercise)
        .where(func.lower(Exercise.name) == cleaned.lower(), visible_to(user_id))
        .order_by(Exercise.user_id.is_(None))
    )
    exercise = result.scalars().first()
    if exercise is not None:
        return exercise
    exercise = Exercise(user_id=user_id, name=cleaned)
    db.add(exercise)
    await db.flush()
    logger.info("Created custom exercise %r for user %s", cleaned, user_id)
    return exercise


async def seed_exercise_library(db: AsyncSession) -> int:
    """Insert library exercises that are not present yet. Returns the number inserted."""
    result = await db.execute(select(Exercise.name).where(Exercise.user_id.is_(None)))
    existing = {name.lower() for name in result.scalars().all()}
    added = 0
    for entry in EXERCISE_LIBRARY:
        if entry["name"].lower() in existing:
            continue
        db.add(Exercise(user_id=None, **entry))
        added += 1
    if added:
        await db.flush()
        logger.info("Seeded %d library exercises", added)
    return added
