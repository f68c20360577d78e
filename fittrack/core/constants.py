"""Application constants."""

# Session limits (set tracker)
MAX_EXERCISES_PER_SESSION = 50
MAX_SETS_PER_EXERCISE_PER_SESSION = 20
MIN_WORKOUT_DURATION_MINUTES = 1
MAX_WORKOUT_DURATION_MINUTES = 480

# Exercise / set bounds
EXERCISE_NAME_MAX_LENGTH = 100
MAX_REPS = 1000
MIN_WEIGHT = 0
MAX_WEIGHT = 1000

# Program builder
PROGRAM_NAME_MAX_LENGTH = 100
PROGRAM_DESCRIPTION_MAX_LENGTH = 500
MAX_WORKOUTS_PER_PROGRAM = 20

# Goals
GOAL_NAME_MAX_LENGTH = 100
GOAL_DESCRIPTION_MAX_LENGTH = 500
GOAL_MIN_TARGET = 1
GOAL_MAX_TARGET = 10_000
VOLUME_GOAL_MAX_TARGET = 10_000_000
GOAL_ALMOST_THRESHOLD = 80
GOAL_GOOD_THRESHOLD = 50

# Plateau detection
PLATEAU_SESSIONS_THRESHOLD = 3

# Streaks
STREAK_LOOKBACK_DAYS = 430
STREAK_HISTORY_DAYS = 30
STREAK_MILESTONES = (3, 7, 14, 30, 60, 100, 365)

# Insights
INSIGHT_WINDOW_DAYS = 30
TARGET_WORKOUTS_PER_WEEK = 4
VOLUME_CHANGE_THRESHOLD_PCT = 15

# Scheduling
DEFAULT_REMINDER_MINUTES = 30
MAX_SCHEDULE_WEEKS = 16

# Analytics tracker
MAX_EVENTS_PER_BATCH = 100

# Performance monitor
PERFORMANCE_SAMPLE_SIZE = 1000
PERFORMANCE_WARNING_RATIO = 0.8
PERFORMANCE_CRITICAL_RATIO = 1.0

# Diagnostics
DIAGNOSTIC_TIMEOUT_SECONDS = 30
DIAGNOSTIC_RETRY_ATTEMPTS = 3
DIAGNOSTIC_PERFORMANCE_THRESHOLD_MS = 1000
