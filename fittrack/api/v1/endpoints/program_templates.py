"""Built-in program template catalog (read-only; no DB)."""

from fastapi import APIRouter, HTTPException

from fittrack.core.enums import Difficulty, ProgramDuration, ProgramFrequency, ProgramGoal
from fittrack.services.program_templates import (
    get_template,
    popular_templates,
    recommended_templates,
    search_templates,
    template_summary,
    template_variations,
)

router = APIRouter()


@router.get("")
async def list_templates(
    q: str | None = None,
    goal: ProgramGoal | None = None,
    difficulty: Difficulty | None = None,
    duration: ProgramDuration | None = None,
    frequency: ProgramFrequency | None = None,
    equipment: str | None = None,
):
    """Search the catalog; every filter is optional."""
    results = search_templates(
        q=q,
        goal=goal.value if goal else None,
        difficulty=difficulty.value if difficulty else None,
        duration=duration.value if duration else None,
        frequency=frequency.value if frequency else None,
        equipment=equipment,
    )
    return [template_summary(t) for t in results]


@router.get("/popular")
async def list_popular():
    return [template_summary(t) for t in popular_templates()]


@router.get("/recommended")
async def list_recommended(level: Difficulty, goal: str, count: int = 3):
    """Templates at `level` for `goal` ("Fat Loss" and "fat_loss" both match)."""
    return [template_summary(t) for t in recommended_templates(level.value, goal, count)]


@router.get("/{template_id}")
async def read_template(template_id: str):
    template = get_template(template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template_summary(template)


@router.get("/{template_id}/variations")
async def list_variations(template_id: str):
    if not get_template(template_id):
        raise HTTPException(status_code=404, detail="Template not found")
    return [template_summary(t) for t in template_variations(template_id)]
