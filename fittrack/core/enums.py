"""Shared enums for models and API."""

from enum import Enum


class MeasurementMode(str, Enum):
    """How an exercise is measured."""

    WEIGHT_REPS = "weight_reps"  # Weight & Reps
    TIME = "time"  # Time-based (e.g. Planks)
    BODYWEIGHT_REPS = "bodyweight_reps"  # Bodyweight/Reps only


class SetLabel(str, Enum):
    """Smart set labeling."""

    WARMUP = "warmup"
    WORKING = "working"
    FAILURE = "failure"
    DROP_SET = "drop_set"


class PRType(str, Enum):
    """Type of personal record."""

    WEIGHT = "weight"  # Heaviest weight
    VOLUME = "volume"  # Highest volume (weight × reps)
    DURATION = "duration"  # Longest duration


class ExerciseCategory(str, Enum):
    CHEST = "Chest"
    BACK = "Back"
    SHOULDERS = "Shoulders"
    ARMS = "Arms"
    LEGS = "Legs"
    CORE = "Core"
    CARDIO = "Cardio"
    FULL_BODY = "Full Body"
    STRETCHING = "Stretching"


class Equipment(str, Enum):
    BARBELL = "Barbell"
    DUMBBELL = "Dumbbell"
    MACHINE = "Machine"
    CABLE = "Cable"
    BODYWEIGHT = "Bodyweight"
    KETTLEBELL = "Kettlebell"
    RESISTANCE_BAND = "Resistance Band"
    MEDICINE_BALL = "Medicine Ball"
    TRX = "TRX"
    PLATE = "Plate"


class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"


class ProgramGoal(str, Enum):
    STRENGTH = "Strength"
    HYPERTROPHY = "Hypertrophy"
    ENDURANCE = "Endurance"
    FAT_LOSS = "Fat Loss"
    GENERAL_FITNESS = "General Fitness"
    POWERLIFTING = "Powerlifting"
    BODYBUILDING = "Bodybuilding"
    ATHLETIC_PERFORMANCE = "Athletic Performance"


class ProgramDuration(str, Enum):
    WEEK_4 = "4 Weeks"
    WEEK_8 = "8 Weeks"
    WEEK_12 = "12 Weeks"
    WEEK_16 = "16 Weeks"
    ONGOING = "Ongoing"


class ProgramFrequency(str, Enum):
    WEEKLY_3 = "3x per week"
    WEEKLY_4 = "4x per week"
    WEEKLY_5 = "5x per week"
    WEEKLY_6 = "6x per week"
    DAILY = "Daily"


class ScheduleStatus(str, Enum):
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    OVERDUE = "Overdue"


class GoalCategory(str, Enum):
    STRENGTH = "strength"  # max PR weight for an exercise
    WEIGHT = "weight"  # latest body weight
    ENDURANCE = "endurance"  # total completed reps for an exercise
    VOLUME = "volume"  # total completed volume
    CONSISTENCY = "consistency"  # completed sessions
    BODY = "body"  # latest body measurement field
    CUSTOM = "custom"  # manually tracked


class GoalPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class GoalStatus(str, Enum):
    COMPLETED = "completed"
    OVERDUE = "overdue"
    ALMOST = "almost"
    GOOD = "good"
    STARTED = "started"


class UserRole(str, Enum):
    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"
    GUEST = "guest"


class Permission(str, Enum):
    CREATE_USER = "create_user"
    READ_USER = "read_user"
    UPDATE_USER = "update_user"
    DELETE_USER = "delete_user"
    CREATE_WORKOUT = "create_workout"
    READ_WORKOUT = "read_workout"
    UPDATE_WORKOUT = "update_workout"
    DELETE_WORKOUT = "delete_workout"
    CREATE_PROGRAM = "create_program"
    READ_PROGRAM = "read_program"
    UPDATE_PROGRAM = "update_program"
    DELETE_PROGRAM = "delete_program"
    VIEW_ANALYTICS = "view_analytics"
    EXPORT_DATA = "export_data"
    MANAGE_USERS = "manage_users"
    VIEW_AUDIT_LOGS = "view_audit_logs"
    MANAGE_SETTINGS = "manage_settings"


class SecurityEvent(str, Enum):
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"
    PASSWORD_CHANGE = "password_change"
    PASSWORD_RESET = "password_reset"
    ACCOUNT_LOCKED = "account_locked"
    PERMISSION_DENIED = "permission_denied"
    SUSPICIOUS_ACTIVITY = "suspicious_activity"
    DATA_ACCESS = "data_access"
    DATA_MODIFICATION = "data_modification"
    SECURITY_SETTING_CHANGE = "security_setting_change"
    USER_REGISTER = "user_register"


class Sensitivity(str, Enum):
    PUBLIC = "public"  # stored as-is
    INTERNAL = "internal"
    CONFIDENTIAL = "confidential"
    RESTRICTED = "restricted"


class DataCategory(str, Enum):
    PERSONAL = "personal"
    SENSITIVE = "sensitive"
    BEHAVIORAL = "behavioral"
    TECHNICAL = "technical"
    ANALYTICS = "analytics"


class ConsentType(str, Enum):
    ESSENTIAL = "essential"
    FUNCTIONAL = "functional"
    ANALYTICS = "analytics"
    MARKETING = "marketing"
    THIRD_PARTY = "third_party"


class ProcessingPurpose(str, Enum):
    SERVICE_PROVISION = "service_provision"
    ANALYTICS = "analytics"
    MARKETING = "marketing"
    SECURITY = "security"
    COMPLIANCE = "compliance"
    RESEARCH = "research"


class DataRequestType(str, Enum):
    EXPORT = "export"
    DELETE = "delete"
    RECTIFY = "rectify"
    PORTABILITY = "portability"


class DataRequestStatus(str, Enum):
    PENDING = "pending"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class ComponentStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


class AnalyticsEventType(str, Enum):
    USER_LOGIN = "user_login"
    USER_LOGOUT = "user_logout"
    USER_REGISTER = "user_register"
    WORKOUT_START = "workout_start"
    WORKOUT_COMPLETE = "workout_complete"
    SET_COMPLETE = "set_complete"
    PROGRAM_CREATE = "program_create"
    PROGRAM_UPDATE = "program_update"
    PROGRAM_DELETE = "program_delete"
    ACHIEVEMENT_UNLOCK = "achievement_unlock"
    GOAL_CREATE = "goal_create"
    GOAL_COMPLETE = "goal_complete"
    STREAK_UPDATE = "streak_update"
    PAGE_VIEW = "page_view"
    BUTTON_CLICK = "button_click"
    EXPORT_DATA = "export_data"
    ERROR_OCCURRED = "error_occurred"
    API_ERROR = "api_error"
    VALIDATION_ERROR = "validation_error"
    PERFORMANCE_ISSUE = "performance_issue"


class DiagnosticCategory(str, Enum):
    UNIT = "unit"
    INTEGRATION = "integration"
    SECURITY = "security"
    PERFORMANCE = "performance"


class DiagnosticStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    TIMEOUT = "timeout"
