"""Achievement catalog with unlock state and progress."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import get_current_user
from fittrack.core.achievement_catalog import ACHIEVEMENTS, ACHIEVEMENTS_BY_ID
from fittrack.db.session import get_db
from fittrack.models.user import User
from fittrack.services.achievements import (
    achievement_progress,
    achievement_summary,
    evaluate_achievements,
    load_stats,
    unlocked_map,
)
from fittrack.services.integration import ACHIEVEMENT_UNLOCKED, get_integration_manager

router = APIRouter()


@router.get("")
async def list_achievements(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    category: str | None = None,
    rarity: str | None = None,
    type: str | None = None,
    unlocked: bool | None = None,
) -> list[dict[str, Any]]:
    """Every catalog entry with `unlocked`, `unlocked_at` and `progress`."""
    stats = await load_stats(db, user)
    unlocked_at = await unlocked_map(db, user.id)
    items = []
    for achievement in ACHIEVEMENTS:
        if category and achievement["category"] != category:
            continue
        if rarity and achievement["rarity"] != rarity:
            continue
        if type and achievement["type"] != type:
            continue
        is_unlocked = achievement["id"] in unlocked_at
        if unlocked is not None and is_unlocked != unlocked:
            continue
        items.append(
            {
                **achievement,
                "unlocked": is_unlocked,
                "unlocked_at": unlocked_at.get(achievement["id"]),
                "progress": achievement_progress(achievement, stats, is_unlocked),
            }
        )
    return items


@router.get("/recent")
async def recent_achievements(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    count: int = 5,
):
    unlocked_at = await unlocked_map(db, user.id)
    recent = sorted(
        ((achievement_id, at) for achievement_id, at in unlocked_at.items() if achievement_id in ACHIEVEMENTS_BY_ID),
        key=lambda item: item[1],
        reverse=True,
    )[: max(count, 0)]
    return [{**ACHIEVEMENTS_BY_ID[a_id], "unlocked": True, "unlocked_at": at} for a_id, at in recent]


@router.get("/summary")
async def summary(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return achievement_summary(await unlocked_map(db, user.id))


@router.post("/evaluate")
async def evaluate(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Check locked achievements against current stats and unlock the satisfied ones."""
    new = await evaluate_achievements(db, user)
    bus = get_integration_manager()
    for achievement in new:
        await bus.emit(ACHIEVEMENT_UNLOCKED, {"db": db, "user_id": user.id, "achievement_id": achievement["id"]})
    return {"unlocked": new, "count": len(new)}
