"""API v1 router aggregation."""

from fastapi import APIRouter

from fittrack.api.v1.endpoints import (
    achievements,
    analytics,
    auth,
    body,
    data,
    diagnostics,
    events,
    exercises,
    goals,
    health,
    insights,
    integration,
    performance,
    privacy,
    program_templates,
    programs,
    records,
    schedule,
    security,
    streak,
    sync,
    tools,
    workouts,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(exercises.router, prefix="/exercises", tags=["exercises"])
api_router.include_router(programs.router, prefix="/programs", tags=["programs"])
api_router.include_router(program_templates.router, prefix="/program-templates", tags=["program-templates"])
api_router.include_router(schedule.router, prefix="/schedule", tags=["schedule"])
api_router.include_router(workouts.router, prefix="/workouts", tags=["workouts"])

api_router.include_router(records.router, prefix="/records", tags=["records"])
api_router.include_router(goals.router, prefix="/goals", tags=["goals"])
api_router.include_router(achievements.router, prefix="/achievements", tags=["achievements"])
api_router.include_router(streak.router, prefix="/streak", tags=["streak"])
api_router.include_router(insights.router, prefix="/insights", tags=["insights"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
api_router.include_router(body.router, prefix="/body", tags=["body"])
api_router.include_router(tools.router, prefix="/tools", tags=["tools"])

api_router.include_router(data.router, prefix="/data", tags=["data"])
api_router.include_router(sync.router, prefix="/sync", tags=["sync"])
api_router.include_router(privacy.router, prefix="/privacy", tags=["privacy"])
api_router.include_router(security.router, prefix="/security", tags=["security"])
api_router.include_router(integration.router, prefix="/integration", tags=["integration"])
api_router.include_router(performance.router, prefix="/performance", tags=["performance"])
api_router.include_router(events.router, prefix="/events", tags=["events"])
api_router.include_router(diagnostics.router, prefix="/diagnostics", tags=["diagnostics"])
