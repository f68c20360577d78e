"""ORM models - import all so Base.metadata is complete for migrations."""

from fittrack.models.achievement import UserAchievement
from fittrack.models.analytics_event import AnalyticsEvent
from fittrack.models.audit import AuditLog
from fittrack.models.body import BodyMeasurement
from fittrack.models.exercise import Exercise
from fittrack.models.goal import Goal
from fittrack.models.privacy import ConsentRecord, DataRequest
from fittrack.models.program import Program, ProgramExercise, ProgramWorkout
from fittrack.models.record import PersonalRecord
from fittrack.models.schedule import ScheduledWorkout
from fittrack.models.user import User
from fittrack.models.workout import WorkoutSession, WorkoutSet

__all__ = [
    "AnalyticsEvent",
    "AuditLog",
    "BodyMeasurement",
    "ConsentRecord",
    "DataRequest",
    "Exercise",
    "Goal",
    "PersonalRecord",
    "Program",
    "ProgramExercise",
    "ProgramWorkout",
    "ScheduledWorkout",
    "User",
    "UserAchievement",
    "WorkoutSession",
    "WorkoutSet",
]
