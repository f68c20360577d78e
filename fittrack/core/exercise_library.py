"""Built-in exercise library, hardcoded for seeding.

Each entry maps onto an `Exercise` row with user_id NULL. Muscle names are
free text; search matches them case-insensitively.
"""

from fittrack.core.enums import Difficulty, Equipment, ExerciseCategory, MeasurementMode

# ── Muscle groups used by the library ──
PECTORALS = "Pectorals"
ANTERIOR_DELTOIDS = "Anterior Deltoids"
LATERAL_DELTOIDS = "Lateral Deltoids"
POSTERIOR_DELTOIDS = "Posterior Deltoids"
TRICEPS = "Triceps"
BICEPS = "Biceps"
FOREARMS = "Forearms"
LATISSIMUS_DORSI = "Latissimus Dorsi"
RHOMBOIDS = "Rhomboids"
TRAPEZIUS = "Trapezius"
ERECTOR_SPINAE = "Erector Spinae"
QUADRICEPS = "Quadriceps"
HAMSTRINGS = "Hamstrings"
GLUTES = "Glutes"
ABS = "Abs"
CORE = "Core"
SHOULDERS = "Shoulders"
HIP_FLEXORS = "Hip Flexors"


def _entry(name, category, equipment, difficulty, primary, secondary, description, mode=MeasurementMode.WEIGHT_REPS):
    return {
        "name": name,
        "category": category,
        "equipment": equipment,
        "difficulty": difficulty,
        "primary_muscles": primary,
        "secondary_muscles": secondary,
        "description": description,
        "measurement_mode": mode,
    }


EXERCISE_LIBRARY: list[dict] = [
    # Chest
    _entry(
        "Bench Press", ExerciseCategory.CHEST, Equipment.BARBELL, Difficulty.INTERMEDIATE,
        [PECTORALS], [ANTERIOR_DELTOIDS, TRICEPS],
        "Lie flat, lower the bar to the chest with control and press it back up.",
    ),
    _entry(
        "Incline Bench Press", ExerciseCategory.CHEST, Equipment.BARBELL, Difficulty.INTERMEDIATE,
        [PECTORALS, ANTERIOR_DELTOIDS], [TRICEPS],
        "Bench press on a 30-45 degree incline to bias the upper chest.",
    ),
    _entry(
        "Dumbbell Bench Press", ExerciseCategory.CHEST, Equipment.DUMBBELL, Difficulty.INTERMEDIATE,
        [PECTORALS], [ANTERIOR_DELTOIDS, TRICEPS],
        "Flat press with a dumbbell in each hand for a longer range of motion.",
    ),
    _entry(
        "Push-ups", ExerciseCategory.CHEST, Equipment.BODYWEIGHT, Difficulty.BEGINNER,
        [PECTORALS], [ANTERIOR_DELTOIDS, TRICEPS, CORE],
        "Keep a straight line from head to heels and lower the chest to the floor.",
        MeasurementMode.BODYWEIGHT_REPS,
    ),
    _entry(
        "Dumbbell Flyes", ExerciseCategory.CHEST, Equipment.DUMBBELL, Difficulty.INTERMEDIATE,
        [PECTORALS], [ANTERIOR_DELTOIDS],
        "Open the arms in a wide arc with a slight elbow bend, then squeeze back together.",
    ),
    # Back
    _entry(
        "Deadlift", ExerciseCategory.BACK, Equipment.BARBELL, Difficulty.ADVANCED,
        [ERECTOR_SPINAE, GLUTES, HAMSTRINGS], [LATISSIMUS_DORSI, TRAPEZIUS, QUADRICEPS],
        "Lift the bar from the floor to lockout with a neutral spine.",
    ),
    _entry(
        "Pull-ups", ExerciseCategory.BACK, Equipment.BODYWEIGHT, Difficulty.INTERMEDIATE,
        [LATISSIMUS_DORSI], [RHOMBOIDS, BICEPS, POSTERIOR_DELTOIDS],
        "Hang from the bar and pull until the chin clears it.",
        MeasurementMode.BODYWEIGHT_REPS,
    ),
    _entry(
        "Bent-Over Row", ExerciseCategory.BACK, Equipment.BARBELL, Difficulty.INTERMEDIATE,
        [LATISSIMUS_DORSI, RHOMBOIDS], [BICEPS, POSTERIOR_DELTOIDS],
        "Hinge at the hips and row the bar to the lower chest.",
    ),
    # Shoulders
    _entry(
        "Overhead Press", ExerciseCategory.SHOULDERS, Equipment.BARBELL, Difficulty.INTERMEDIATE,
        [ANTERIOR_DELTOIDS, LATERAL_DELTOIDS], [TRICEPS, CORE],
        "Press the bar from the shoulders to overhead lockout while standing.",
    ),
    _entry(
        "Lateral Raises", ExerciseCategory.SHOULDERS, Equipment.DUMBBELL, Difficulty.BEGINNER,
        [LATERAL_DELTOIDS], [ANTERIOR_DELTOIDS],
        "Raise the dumbbells out to the sides up to shoulder height.",
    ),
    # Arms
    _entry(
        "Bicep Curls", ExerciseCategory.ARMS, Equipment.DUMBBELL, Difficulty.BEGINNER,
        [BICEPS], [FOREARMS],
        "Curl the dumbbells up keeping the elbows pinned to the sides.",
    ),
    _entry(
        "Tricep Dips", ExerciseCategory.ARMS, Equipment.BODYWEIGHT, Difficulty.INTERMEDIATE,
        [TRICEPS], [ANTERIOR_DELTOIDS, CORE],
        "Lower the body between parallel bars and press back up.",
        MeasurementMode.BODYWEIGHT_REPS,
    ),
    # Legs
    _entry(
        "Squat", ExerciseCategory.LEGS, Equipment.BARBELL, Difficulty.INTERMEDIATE,
        [QUADRICEPS, GLUTES], [HAMSTRINGS, CORE],
        "Bar on the upper back, squat to at least parallel and stand up.",
    ),
    _entry(
        "Lunges", ExerciseCategory.LEGS, Equipment.BODYWEIGHT, Difficulty.BEGINNER,
        [QUADRICEPS, GLUTES], [HAMSTRINGS, CORE],
        "Step forward and lower the back knee toward the floor, alternating legs.",
        MeasurementMode.BODYWEIGHT_REPS,
    ),
    # Core
    _entry(
        "Plank", ExerciseCategory.CORE, Equipment.BODYWEIGHT, Difficulty.BEGINNER,
        [ABS, CORE], [SHOULDERS, GLUTES],
        "Hold a straight forearm plank for time.",
        MeasurementMode.TIME,
    ),
    _entry(
        "Dead Bug", ExerciseCategory.CORE, Equipment.BODYWEIGHT, Difficulty.BEGINNER,
        [ABS, CORE], [HIP_FLEXORS],
        "On the back, extend the opposite arm and leg while bracing the trunk.",
        MeasurementMode.BODYWEIGHT_REPS,
    ),
]
