"""Initial schema: users, exercises, programs, schedule, sessions, records, goals, privacy, audit.

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLAlchemy stores enum member names
ENUMS = {
    "userrole": ("ADMIN", "MODERATOR", "USER", "GUEST"),
    "exercisecategory": ("CHEST", "BACK", "SHOULDERS", "ARMS", "LEGS", "CORE", "CARDIO", "FULL_BODY", "STRETCHING"),
    "equipment": (
        "BARBELL", "DUMBBELL", "MACHINE", "CABLE", "BODYWEIGHT", "KETTLEBELL",
        "RESISTANCE_BAND", "MEDICINE_BALL", "TRX", "PLATE",
    ),
    "difficulty": ("BEGINNER", "INTERMEDIATE", "ADVANCED", "EXPERT"),
    "measurementmode": ("WEIGHT_REPS", "TIME", "BODYWEIGHT_REPS"),
    "programgoal": (
        "STRENGTH", "HYPERTROPHY", "ENDURANCE", "FAT_LOSS", "GENERAL_FITNESS",
        "POWERLIFTING", "BODYBUILDING", "ATHLETIC_PERFORMANCE",
    ),
    "programduration": ("WEEK_4", "WEEK_8", "WEEK_12", "WEEK_16", "ONGOING"),
    "programfrequency": ("WEEKLY_3", "WEEKLY_4", "WEEKLY_5", "WEEKLY_6", "DAILY"),
    "setlabel": ("WARMUP", "WORKING", "FAILURE", "DROP_SET"),
    "prtype": ("WEIGHT", "VOLUME", "DURATION"),
    "goalcategory": ("STRENGTH", "WEIGHT", "ENDURANCE", "VOLUME", "CONSISTENCY", "BODY", "CUSTOM"),
    "goalpriority": ("LOW", "MEDIUM", "HIGH"),
    "consenttype": ("ESSENTIAL", "FUNCTIONAL", "ANALYTICS", "MARKETING", "THIRD_PARTY"),
    "datarequesttype": ("EXPORT", "DELETE", "RECTIFY", "PORTABILITY"),
    "datarequeststatus": ("PENDING", "SCHEDULED", "COMPLETED", "REJECTED", "CANCELLED"),
    "analyticseventtype": (
        "USER_LOGIN", "USER_LOGOUT", "USER_REGISTER", "WORKOUT_START", "WORKOUT_COMPLETE", "SET_COMPLETE",
        "PROGRAM_CREATE", "PROGRAM_UPDATE", "PROGRAM_DELETE", "ACHIEVEMENT_UNLOCK", "GOAL_CREATE",
        "GOAL_COMPLETE", "STREAK_UPDATE", "PAGE_VIEW", "BUTTON_CLICK", "EXPORT_DATA", "ERROR_OCCURRED",
        "API_ERROR", "VALIDATION_ERROR", "PERFORMANCE_ISSUE",
    ),
}


def _enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _uuid_pk() -> sa.Column:
    return sa.Column("id", sa.Uuid(), nullable=False)


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=True)


def upgrade() -> None:
    # Enum types first (PostgreSQL requires them to exist before use)
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        "users",
        _uuid_pk(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=100), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("timezone", sa.String(length=64), nullable=False, server_default="UTC"),
        sa.Column("role", _enum("userrole"), nullable=False, server_default="USER"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("failed_login_attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("locked_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("password_changed_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "exercises",
        _uuid_pk(),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=True),
        sa.Column("category", _enum("exercisecategory"), nullable=True),
        sa.Column("equipment", _enum("equipment"), nullable=True),
        sa.Column("difficulty", _enum("difficulty"), nullable=True),
        sa.Column("primary_muscles", postgresql.JSONB(), nullable=True),
        sa.Column("secondary_muscles", postgresql.JSONB(), nullable=True),
        sa.Column("unit", sa.String(length=20), nullable=True),
        sa.Column("measurement_mode", _enum("measurementmode"), nullable=False, server_default="WEIGHT_REPS"),
        sa.Column("rest_seconds_preset", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_exercises_name"), "exercises", ["name"], unique=False)
    op.create_index("ix_exercises_user_id", "exercises", ["user_id"], unique=False)

    op.create_table(
        "programs",
        _uuid_pk(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("goal", _enum("programgoal"), nullable=True),
        sa.Column("difficulty", _enum("difficulty"), nullable=True),
        sa.Column("duration", _enum("programduration"), nullable=True),
        sa.Column("frequency", _enum("programfrequency"), nullable=True),
        sa.Column("equipment", postgresql.JSONB(), nullable=True),
        sa.Column("target_muscles", postgresql.JSONB(), nullable=True),
        sa.Column("tags", postgresql.JSONB(), nullable=True),
        sa.Column("notes", postgresql.JSONB(), nullable=True),
        sa.Column("progression", postgresql.JSONB(), nullable=True),
        sa.Column("source_template_id", sa.String(length=64), nullable=True),
        sa.Column("is_custom", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("is_imported", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("offline_id", sa.String(length=64), nullable=True),
        sa.Column("synced_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        _created_at("updated_at"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_programs_name"), "programs", ["name"], unique=False)
    op.create_index("ix_programs_user_created", "programs", ["user_id", "created_at"], unique=False)
    op.create_index("ix_programs_user_offline_id", "programs", ["user_id", "offline_id"], unique=False)

    op.create_table(
        "program_workouts",
        _uuid_pk(),
        sa.Column("program_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("order_in_program", sa.Integer(), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.ForeignKeyConstraint(["program_id"], ["programs.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_program_workouts_program_id"), "program_workouts", ["program_id"], unique=False)

    op.create_table(
        "program_exercises",
        _uuid_pk(),
        sa.Column("workout_id", sa.Uuid(), nullable=False),
        sa.Column("exercise_id", sa.Uuid(), nullable=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("sets", sa.Integer(), nullable=True),
        sa.Column("reps", sa.String(length=20), nullable=True),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column("rest_seconds", sa.Integer(), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("order_in_workout", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["workout_id"], ["program_workouts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["exercise_id"], ["exercises.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_program_exercises_workout_id"), "program_exercises", ["workout_id"], unique=False)

    op.create_table(
        "workout_sessions",
        _uuid_pk(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=True),
        sa.Column("program_id", sa.Uuid(), nullable=True),
        sa.Column("program_workout_id", sa.Uuid(), nullable=True),
        sa.Column("scheduled_workout_id", sa.Uuid(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("duration_seconds", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("offline_id", sa.String(length=64), nullable=True),
        sa.Column("last_modified", sa.DateTime(timezone=True), nullable=True),
        sa.Column("synced_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["program_id"], ["programs.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["program_workout_id"], ["program_workouts.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_workout_sessions_program_id"), "workout_sessions", ["program_id"], unique=False)
    op.create_index("ix_workout_sessions_user_started", "workout_sessions", ["user_id", "started_at"], unique=False)
    op.create_index(
        "ix_workout_sessions_user_offline_id", "workout_sessions", ["user_id", "offline_id"], unique=False
    )

    op.create_table(
        "workout_sets",
        _uuid_pk(),
        sa.Column("session_id", sa.Uuid(), nullable=False),
        sa.Column("exercise_id", sa.Uuid(), nullable=False),
        sa.Column("set_order", sa.Integer(), nullable=True),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column("reps", sa.Integer(), nullable=True),
        sa.Column("duration_seconds", sa.Integer(), nullable=True),
        sa.Column("rest_seconds", sa.Integer(), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("set_label", _enum("setlabel"), nullable=True),
        sa.Column("is_pr", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("pr_type", _enum("prtype"), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["session_id"], ["workout_sessions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["exercise_id"], ["exercises.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_workout_sets_session_id", "workout_sets", ["session_id"], unique=False)
    op.create_index(
        "ix_workout_sets_exercise_completed", "workout_sets", ["exercise_id", "completed"], unique=False
    )

    op.create_table(
        "scheduled_workouts",
        _uuid_pk(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("program_id", sa.Uuid(), nullable=False),
        sa.Column("program_name", sa.String(length=100), nullable=False),
        sa.Column("program_workout_id", sa.Uuid(), nullable=True),
        sa.Column("workout_index", sa.Integer(), nullable=True),
        sa.Column("workout_name", sa.String(length=100), nullable=False),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("scheduled_time", sa.Time(), nullable=False),
        sa.Column("reminder", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("reminder_minutes", sa.Integer(), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("session_id", sa.Uuid(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["program_id"], ["programs.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["program_workout_id"], ["program_workouts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["session_id"], ["workout_sessions.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_scheduled_workouts_program_id"), "scheduled_workouts", ["program_id"], unique=False)
    op.create_index(
        "ix_scheduled_workouts_user_date", "scheduled_workouts", ["user_id", "scheduled_date"], unique=False
    )

    op.create_table(
        "personal_records",
        _uuid_pk(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("exercise_id", sa.Uuid(), nullable=False),
        sa.Column("session_id", sa.Uuid(), nullable=True),
        sa.Column("set_id", sa.Uuid(), nullable=True),
        sa.Column("record_type", _enum("prtype"), nullable=False),
        sa.Column("value", sa.Float(), nullable=False),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column("reps", sa.Integer(), nullable=True),
        sa.Column("duration_seconds", sa.Integer(), nullable=True),
        sa.Column("one_rep_max", sa.Float(), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("achieved_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["exercise_id"], ["exercises.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["session_id"], ["workout_sessions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["set_id"], ["workout_sets.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_personal_records_user_exercise", "personal_records", ["user_id", "exercise_id"], unique=False
    )

    op.create_table(
        "goals",
        _uuid_pk(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("category", _enum("goalcategory"), nullable=False),
        sa.Column("priority", _enum("goalpriority"), nullable=False, server_default="MEDIUM"),
        sa.Column("target", sa.Float(), nullable=False),
        sa.Column("current", sa.Float(), nullable=True),
        sa.Column("unit", sa.String(length=20), nullable=True),
        sa.Column("exercise_id", sa.Uuid(), nullable=True),
        sa.Column("measurement", sa.String(length=50), nullable=True),
        sa.Column("deadline", sa.Date(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        _created_at("updated_at"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["exercise_id"], ["exercises.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_goals_user_id"), "goals", ["user_id"], unique=False)

    op.create_table(
        "user_achievements",
        _uuid_pk(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("achievement_id", sa.String(length=64), nullable=False),
        sa.Column("unlocked_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
    )
    op.create_index(op.f("ix_user_achievements_user_id"), "user_achievements", ["user_id"], unique=False)

    op.create_table(
        "body_measurements",
        _uuid_pk(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("measured_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column("body_fat", sa.Float(), nullable=True),
        sa.Column("muscle_mass", sa.Float(), nullable=True),
        sa.Column("measurements", postgresql.JSONB(), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_body_measurements_user_measured", "body_measurements", ["user_id", "measured_at"], unique=False
    )

    op.create_table(
        "consent_records",
        _uuid_pk(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("consent_type", _enum("consenttype"), nullable=False),
        sa.Column("granted", sa.Boolean(), nullable=False),
        sa.Column("version", sa.String(length=20), nullable=True),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("withdrawn_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expired", sa.Boolean(), nullable=False, server_default="false"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_consent_records_user_type", "consent_records", ["user_id", "consent_type"], unique=False)

    op.create_table(
        "data_requests",
        _uuid_pk(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("request_type", _enum("datarequesttype"), nullable=False),
        sa.Column("status", _enum("datarequeststatus"), nullable=False, server_default="PENDING"),
        sa.Column("payload", postgresql.JSONB(), nullable=True),
        sa.Column("result", postgresql.JSONB(), nullable=True),
        sa.Column("scheduled_for", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_data_requests_user_id"), "data_requests", ["user_id"], unique=False)

    op.create_table(
        "audit_logs",
        _uuid_pk(),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("event_type", sa.String(length=50), nullable=False),
        sa.Column("details", postgresql.JSONB(), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_audit_logs_event_type"), "audit_logs", ["event_type"], unique=False)
    op.create_index("ix_audit_logs_user_created", "audit_logs", ["user_id", "created_at"], unique=False)

    op.create_table(
        "analytics_events",
        _uuid_pk(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("event_type", _enum("analyticseventtype"), nullable=False),
        sa.Column("properties", postgresql.JSONB(), nullable=True),
        sa.Column("client_session_id", sa.String(length=64), nullable=True),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_analytics_events_user_occurred", "analytics_events", ["user_id", "occurred_at"], unique=False
    )


def downgrade() -> None:
    for table in (
        "analytics_events",
        "audit_logs",
        "data_requests",
        "consent_records",
        "body_measurements",
        "user_achievements",
        "goals",
        "personal_records",
        "scheduled_workouts",
        "workout_sets",
        "workout_sessions",
        "program_exercises",
        "program_workouts",
        "programs",
        "exercises",
        "users",
    ):
        op.drop_table(table)
    for name in ENUMS:
        op.execute(f"DROP TYPE IF EXISTS {name}")
