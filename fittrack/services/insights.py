"""Personal insights: workout stats, threshold-rule insights, strength and body trends."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fittrack.core.constants import INSIGHT_WINDOW_DAYS, TARGET_WORKOUTS_PER_WEEK, VOLUME_CHANGE_THRESHOLD_PCT
from fittrack.core.dates import ensure_utc
from fittrack.models.body import BodyMeasurement
from fittrack.models.workout import WorkoutSession, WorkoutSet
from fittrack.services.workout_metrics import (
    best_set,
    group_sets_by_exercise,
    total_sets,
    workout_duration_minutes,
    workout_volume,
)

LOW_FREQUENCY_PER_WEEK = 2
LOW_VARIETY = 15
HIGH_VARIETY = 30
LONG_SESSION_MINUTES = 90
SHORT_SESSION_MINUTES = 30
BODY_WEIGHT_CHANGE = 5
MUSCLE_GAIN = 2


def workout_stats(sessions: list[Any], now: datetime) -> dict[str, Any] | None:
    """Aggregate stats over completed sessions (newest first). None without history."""
    if not sessions:
        return None
    window_start = now - timedelta(days=INSIGHT_WINDOW_DAYS)
    recent = [s for s in sessions if ensure_utc(s.completed_at) >= window_start]
    durations = [workout_duration_minutes(s) for s in sessions if s.ended_at is not None]
    names = {name or str(ex_id) for s in sessions for ex_id, name, _ in group_sets_by_exercise(s)}
    frequency = len(recent) / INSIGHT_WINDOW_DAYS * 7
    return {
        "total_workouts": len(sessions),
        "total_volume": round(sum(workout_volume(s) for s in sessions), 2),
        "total_sets": sum(total_sets(s) for s in sessions),
        "total_reps": sum(int(x.reps or 0) for s in sessions for x in s.sets if x.completed),
        "average_duration_minutes": round(sum(durations) / len(durations), 1) if durations else 0,
        "unique_exercises": len(names),
        "workout_frequency": round(frequency, 2),
        "consistency_score": round(min(frequency / TARGET_WORKOUTS_PER_WEEK * 100, 100), 1),
    }


def progress_trends(sessions: list[Any]) -> list[dict[str, Any]]:
    """Per exercise: best set weight of the first and latest session it appears in."""
    series: dict[str, list[tuple[datetime, float, int]]] = {}
    for session in sessions:
        for ex_id, name, sets in group_sets_by_exercise(session):
            best = best_set(sets)
            if best is None or not best.weight:
                continue
            series.setdefault(name or str(ex_id), []).append(
                (ensure_utc(session.completed_at), float(best.weight), int(best.reps or 0))
            )
    trends = []
    for name, points in sorted(series.items()):
        points.sort(key=lambda p: p[0])
        first, latest = points[0], points[-1]
        trends.append(
            {
                "exercise": name,
                "sessions": len(points),
                "first_weight": first[1],
                "latest_weight": latest[1],
                "weight_change": round(latest[1] - first[1], 2),
                "latest_reps": latest[2],
            }
        )
    return trends


def body_trends(measurements: list[Any]) -> dict[str, Any] | None:
    if not measurements:
        return None
    ordered = sorted(measurements, key=lambda m: ensure_utc(m.measured_at))
    first, latest = ordered[0], ordered[-1]

    def delta(field: str) -> float:
        return round(float(getattr(latest, field) or 0) - float(getattr(first, field) or 0), 2)

    return {
        "weight_change": delta("weight"),
        "body_fat_change": delta("body_fat"),
        "muscle_mass_change": delta("muscle_mass"),
        "total_measurements": len(measurements),
    }


def _insight(id_, type_, title, description, recommendation, priority, category):
    return {
        "id": id_,
        "type": type_,
        "title": title,
        "description": description,
        "recommendation": recommendation,
        "priority": priority,
        "category": category,
    }


def generate_insights(sessions: list[Any], stats: dict[str, Any] | None, body: dict[str, Any] | None) -> list[dict]:
    insights: list[dict] = []
    if stats:
        freq = stats["workout_frequency"]
        if freq < LOW_FREQUENCY_PER_WEEK:
            insights.append(_insight(
                "low-frequency", "warning", "Low Workout Frequency",
                f"You're averaging {freq:.1f} workouts per week.",
                "Consider increasing your workout frequency to 3-4 times per week for better results.",
                "high", "consistency",
            ))
        elif freq >= TARGET_WORKOUTS_PER_WEEK:
            insights.append(_insight(
                "excellent-frequency", "success", "Excellent Workout Frequency",
                f"You're averaging {freq:.1f} workouts per week.",
                "Great consistency! Consider adding variety to your workouts.",
                "medium", "consistency",
            ))

        if len(sessions) >= 8:
            recent_volume = sum(workout_volume(s) for s in sessions[:4])
            older_volume = sum(workout_volume(s) for s in sessions[4:8])
            if older_volume > 0:
                change = (recent_volume - older_volume) / older_volume * 100
                if change > VOLUME_CHANGE_THRESHOLD_PCT:
                    insights.append(_insight(
                        "volume-surge", "success", "Volume Surge Detected",
                        f"Your training volume has increased by {change:.1f}% recently.",
                        "Excellent progress! Monitor recovery to avoid overtraining.",
                        "medium", "progress",
                    ))
                elif change < -VOLUME_CHANGE_THRESHOLD_PCT:
                    insights.append(_insight(
                        "volume-decline", "warning", "Volume Decline",
                        f"Your training volume has decreased by {abs(change):.1f}% recently.",
                        "Consider increasing workout intensity or frequency.",
                        "high", "progress",
                    ))

        unique = stats["unique_exercises"]
        if unique < LOW_VARIETY:
            insights.append(_insight(
                "low-variety", "info", "Limited Exercise Variety",
                f"You've used {unique} different exercises.",
                "Try incorporating new exercises to target different muscle groups and prevent plateaus.",
                "medium", "variety",
            ))
        elif unique >= HIGH_VARIETY:
            insights.append(_insight(
                "high-variety", "success", "Excellent Exercise Variety",
                f"You've used {unique} different exercises.",
                "Great variety! This helps prevent plateaus and keeps workouts interesting.",
                "low", "variety",
            ))

        avg = stats["average_duration_minutes"]
        if avg > LONG_SESSION_MINUTES:
            insights.append(_insight(
                "long-workouts", "info", "Long Workout Sessions",
                f"Your average workout duration is {avg:.0f} minutes.",
                "Consider optimizing rest periods or splitting into shorter, more intense sessions.",
                "low", "efficiency",
            ))
        elif 0 < avg < SHORT_SESSION_MINUTES:
            insights.append(_insight(
                "short-workouts", "info", "Short Workout Sessions",
                f"Your average workout duration is {avg:.0f} minutes.",
                "Consider adding more exercises or sets to maximize your time.",
                "medium", "efficiency",
            ))

    if body:
        change = body["weight_change"]
        if change > BODY_WEIGHT_CHANGE:
            insights.append(_insight(
                "weight-gain", "info", "Weight Gain Trend",
                f"You've gained {change:.1f} since your first measurement.",
                "Monitor if this aligns with your goals. Consider adjusting nutrition or training.",
                "medium", "body",
            ))
        elif change < -BODY_WEIGHT_CHANGE:
            insights.append(_insight(
                "weight-loss", "info", "Weight Loss Trend",
                f"You've lost {abs(change):.1f} since your first measurement.",
                "Monitor if this aligns with your goals. Ensure adequate nutrition for recovery.",
                "medium", "body",
            ))
        if body["muscle_mass_change"] > MUSCLE_GAIN:
            insights.append(_insight(
                "muscle-gain", "success", "Muscle Mass Increase",
                f"You've gained {body['muscle_mass_change']:.1f} of muscle mass.",
                "Excellent progress! Keep up the consistent training and nutrition.",
                "low", "body",
            ))
    return insights


def build_insights(sessions: list[Any], measurements: list[Any], now: datetime) -> dict[str, Any]:
    """sessions: completed, newest first, sets and exercises loaded."""
    stats = workout_stats(sessions, now)
    body = body_trends(measurements)
    return {
        "stats": stats,
        "insights": generate_insights(sessions, stats, body),
        "trends": progress_trends(sessions),
        "body_trends": body,
    }


async def load_completed_sessions(db: AsyncSession, user_id: uuid.UUID) -> list[WorkoutSession]:
    """Completed sessions, newest first, with sets and their exercises."""
    result = await db.execute(
        select(WorkoutSession)
        .where(WorkoutSession.user_id == user_id, WorkoutSession.completed_at.isnot(None))
        .options(selectinload(WorkoutSession.sets).selectinload(WorkoutSet.exercise))
        .order_by(WorkoutSession.completed_at.desc())
    )
    return list(result.scalars().all())


async def load_measurements(db: AsyncSession, user_id: uuid.UUID) -> list[BodyMeasurement]:
    result = await db.execute(
        select(BodyMeasurement).where(BodyMeasurement.user_id == user_id).order_by(BodyMeasurement.measured_at)
    )
    return list(result.scalars().all())
