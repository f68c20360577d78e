"""Pre-built program templates, hardcoded for O(1) lookups.

Exercises are stored as (name, sets, reps, rest_seconds). Reps are text so
schemes like "5/3/1" fit; target weight is always 0 (the lifter picks it).
"""

from fittrack.core.enums import Difficulty, ProgramDuration, ProgramFrequency, ProgramGoal

STRONGLIFTS = {
    "id": "stronglifts-5x5",
    "name": "Stronglifts 5x5",
    "description": "A simple, effective strength program focusing on compound movements with linear progression.",
    "goal": ProgramGoal.STRENGTH,
    "difficulty": Difficulty.BEGINNER,
    "duration": ProgramDuration.ONGOING,
    "frequency": ProgramFrequency.WEEKLY_3,
    "equipment": ["Barbell", "Squat Rack", "Bench"],
    "target_muscles": ["Full Body"],
    "workouts": [
        ("Workout A", [("Squat", 5, "5", 180), ("Bench Press", 5, "5", 180), ("Barbell Row", 5, "5", 180)]),
        ("Workout B", [("Squat", 5, "5", 180), ("Overhead Press", 5, "5", 180), ("Deadlift", 1, "5", 300)]),
    ],
    "progression": {"type": "linear", "increment": 2.5, "deload": 10, "max_attempts": 3},
    "notes": [
        "Start with empty bar or light weights",
        "Add 2.5lbs each workout",
        "If you fail 3 times, deload by 10%",
        "Rest 3-5 minutes between sets",
        "Focus on form over weight",
    ],
    "tags": ["beginner", "strength", "compound", "linear-progression"],
}

STARTING_STRENGTH = {
    "id": "starting-strength",
    "name": "Starting Strength",
    "description": "Mark Rippetoe's foundational strength program emphasizing the big three lifts.",
    "goal": ProgramGoal.STRENGTH,
    "difficulty": Difficulty.BEGINNER,
    "duration": ProgramDuration.ONGOING,
    "frequency": ProgramFrequency.WEEKLY_3,
    "equipment": ["Barbell", "Squat Rack", "Bench"],
    "target_muscles": ["Full Body"],
    "workouts": [
        ("Workout A", [("Squat", 3, "5", 180), ("Bench Press", 3, "5", 180), ("Deadlift", 1, "5", 300)]),
        ("Workout B", [("Squat", 3, "5", 180), ("Overhead Press", 3, "5", 180), ("Power Clean", 5, "3", 180)]),
    ],
    "progression": {"type": "linear", "increment": 5, "deload": 10, "max_attempts": 3},
    "notes": [
        "Focus on the big three: squat, bench, deadlift",
        "Add 5lbs each workout for upper body, 10lbs for lower body",
        "Power cleans develop explosive strength",
        "Rest 3-5 minutes between sets",
    ],
    "tags": ["beginner", "strength", "rippetoe", "big-three"],
}

PUSH_PULL_LEGS = {
    "id": "push-pull-legs",
    "name": "Push/Pull/Legs (PPL)",
    "description": "A popular hypertrophy program that splits training into push, pull, and leg days.",
    "goal": ProgramGoal.HYPERTROPHY,
    "difficulty": Difficulty.INTERMEDIATE,
    "duration": ProgramDuration.ONGOING,
    "frequency": ProgramFrequency.WEEKLY_6,
    "equipment": ["Barbell", "Dumbbells", "Cable Machine", "Squat Rack"],
    "target_muscles": ["Full Body"],
    "workouts": [
        ("Push Day", [
            ("Bench Press", 4, "8", 120),
            ("Overhead Press", 3, "8", 120),
            ("Incline Dumbbell Press", 3, "10", 90),
            ("Lateral Raises", 3, "12", 60),
            ("Tricep Dips", 3, "10", 90),
            ("Tricep Pushdowns", 3, "12", 60),
        ]),
        ("Pull Day", [
            ("Deadlift", 4, "5", 180),
            ("Pull-ups", 4, "8", 120),
            ("Bent-Over Row", 3, "8", 120),
            ("Cable Row", 3, "10", 90),
            ("Bicep Curls", 3, "12", 60),
            ("Hammer Curls", 3, "12", 60),
        ]),
        ("Leg Day", [
            ("Squat", 4, "8", 180),
            ("Romanian Deadlift", 3, "8", 120),
            ("Leg Press", 3, "12", 90),
            ("Walking Lunges", 3, "12", 90),
            ("Calf Raises", 4, "15", 60),
            ("Plank", 3, "60", 60),
        ]),
    ],
    "progression": {"type": "double-progression", "increment": 2.5, "deload": 10, "max_attempts": 2},
    "notes": [
        "Train each muscle group twice per week",
        "Focus on progressive overload",
        "Use double progression (weight and reps)",
        "Rest 1-2 minutes between sets",
    ],
    "tags": ["intermediate", "hypertrophy", "ppl", "6-day"],
}

UPPER_LOWER = {
    "id": "upper-lower",
    "name": "Upper/Lower Split",
    "description": "A balanced 4-day program alternating between upper and lower body workouts.",
    "goal": ProgramGoal.HYPERTROPHY,
    "difficulty": Difficulty.INTERMEDIATE,
    "duration": ProgramDuration.ONGOING,
    "frequency": ProgramFrequency.WEEKLY_4,
    "equipment": ["Barbell", "Dumbbells", "Cable Machine", "Squat Rack"],
    "target_muscles": ["Full Body"],
    "workouts": [
        ("Upper Body A", [
            ("Bench Press", 4, "6", 180),
            ("Bent-Over Row", 4, "6", 180),
            ("Overhead Press", 3, "8", 120),
            ("Pull-ups", 3, "8", 120),
            ("Dumbbell Flyes", 3, "12", 90),
            ("Bicep Curls", 3, "12", 60),
        ]),
        ("Lower Body A", [
            ("Squat", 4, "6", 180),
            ("Romanian Deadlift", 4, "6", 180),
            ("Bulgarian Split Squat", 3, "8", 120),
            ("Leg Curls", 3, "12", 90),
            ("Calf Raises", 4, "15", 60),
            ("Plank", 3, "60", 60),
        ]),
        ("Upper Body B", [
            ("Incline Bench Press", 4, "6", 180),
            ("Cable Row", 4, "6", 180),
            ("Lateral Raises", 3, "12", 90),
            ("Face Pulls", 3, "12", 90),
            ("Tricep Dips", 3, "10", 90),
            ("Hammer Curls", 3, "12", 60),
        ]),
        ("Lower Body B", [
            ("Deadlift", 4, "5", 300),
            ("Front Squat", 3, "8", 120),
            ("Walking Lunges", 3, "12", 90),
            ("Leg Press", 3, "15", 90),
            ("Calf Raises", 4, "15", 60),
            ("Dead Bug", 3, "12", 60),
        ]),
    ],
    "progression": {"type": "double-progression", "increment": 2.5, "deload": 10, "max_attempts": 2},
    "notes": [
        "Train each muscle group twice per week",
        "Alternate between A and B workouts",
        "Focus on compound movements first",
        "Use double progression for growth",
    ],
    "tags": ["intermediate", "hypertrophy", "upper-lower", "4-day"],
}

FIVE_THREE_ONE = {
    "id": "5-3-1",
    "name": "5/3/1",
    "description": "Jim Wendler's strength program with built-in deloads and sustainable progression.",
    "goal": ProgramGoal.STRENGTH,
    "difficulty": Difficulty.INTERMEDIATE,
    "duration": ProgramDuration.ONGOING,
    "frequency": ProgramFrequency.WEEKLY_4,
    "equipment": ["Barbell", "Squat Rack", "Bench"],
    "target_muscles": ["Full Body"],
    "workouts": [
        ("Squat Day", [("Squat", 3, "5/3/1", 180), ("Bench Press", 5, "10", 120), ("Bent-Over Row", 5, "10", 120)]),
        ("Bench Day", [("Bench Press", 3, "5/3/1", 180), ("Squat", 5, "10", 120), ("Pull-ups", 5, "10", 120)]),
        ("Deadlift Day", [
            ("Deadlift", 3, "5/3/1", 300),
            ("Overhead Press", 5, "10", 120),
            ("Dumbbell Rows", 5, "10", 120),
        ]),
        ("Press Day", [("Overhead Press", 3, "5/3/1", 180), ("Deadlift", 5, "10", 120), ("Dips", 5, "10", 120)]),
    ],
    "progression": {"type": "periodized", "increment": 5, "deload": 0, "max_attempts": 0},
    "notes": [
        "Calculate 90% of your 1RM for each lift",
        "Follow 5/3/1 rep scheme for main lifts",
        "Deload every 4th week",
        "Add 5lbs upper body, 10lbs lower body each cycle",
    ],
    "tags": ["intermediate", "strength", "wendler", "periodized"],
}

HIIT_STRENGTH = {
    "id": "hiit-strength",
    "name": "HIIT Strength",
    "description": "High-intensity interval training combined with strength exercises for fat loss.",
    "goal": ProgramGoal.FAT_LOSS,
    "difficulty": Difficulty.INTERMEDIATE,
    "duration": ProgramDuration.WEEK_8,
    "frequency": ProgramFrequency.WEEKLY_4,
    "equipment": ["Dumbbells", "Bodyweight", "Kettlebell"],
    "target_muscles": ["Full Body"],
    "workouts": [
        ("HIIT Upper", [
            ("Burpees", 4, "30", 60),
            ("Push-ups", 4, "15", 45),
            ("Dumbbell Rows", 4, "12", 45),
            ("Mountain Climbers", 4, "30", 60),
            ("Plank", 4, "60", 45),
        ]),
        ("HIIT Lower", [
            ("Jump Squats", 4, "20", 60),
            ("Lunges", 4, "12", 45),
            ("Kettlebell Swings", 4, "15", 45),
            ("Jumping Jacks", 4, "30", 60),
            ("Wall Sit", 4, "60", 45),
        ]),
        ("HIIT Full Body", [
            ("Burpees", 3, "20", 60),
            ("Dumbbell Thrusters", 3, "12", 60),
            ("Jump Squats", 3, "15", 60),
            ("Push-ups", 3, "10", 60),
            ("Mountain Climbers", 3, "20", 60),
        ]),
        ("HIIT Core", [
            ("Plank", 4, "60", 45),
            ("Russian Twists", 4, "20", 45),
            ("Bicycle Crunches", 4, "20", 45),
            ("Mountain Climbers", 4, "30", 60),
            ("Dead Bug", 4, "12", 45),
        ]),
    ],
    "progression": {"type": "time-based", "increment": 5, "deload": 0, "max_attempts": 0},
    "notes": [
        "Work at maximum intensity during work periods",
        "Rest periods are active recovery",
        "Increase work time or decrease rest time to progress",
        "Focus on form over speed",
    ],
    "tags": ["intermediate", "fat-loss", "hiit", "cardio"],
}

FULL_BODY_BEGINNER = {
    "id": "full-body-beginner",
    "name": "Full Body Beginner",
    "description": "A simple full-body program perfect for beginners starting their fitness journey.",
    "goal": ProgramGoal.GENERAL_FITNESS,
    "difficulty": Difficulty.BEGINNER,
    "duration": ProgramDuration.WEEK_8,
    "frequency": ProgramFrequency.WEEKLY_3,
    "equipment": ["Dumbbells", "Bodyweight"],
    "target_muscles": ["Full Body"],
    "workouts": [
        ("Full Body A", [
            ("Bodyweight Squats", 3, "12", 90),
            ("Push-ups", 3, "8", 90),
            ("Dumbbell Rows", 3, "10", 90),
            ("Lunges", 3, "10", 90),
            ("Plank", 3, "30", 60),
        ]),
        ("Full Body B", [
            ("Goblet Squats", 3, "12", 90),
            ("Dumbbell Press", 3, "10", 90),
            ("Dumbbell Deadlifts", 3, "10", 90),
            ("Step-ups", 3, "10", 90),
            ("Dead Bug", 3, "10", 60),
        ]),
    ],
    "progression": {"type": "linear", "increment": 2.5, "deload": 10, "max_attempts": 3},
    "notes": [
        "Start with light weights or bodyweight",
        "Focus on learning proper form",
        "Add weight gradually each week",
        "Rest 1-2 minutes between sets",
    ],
    "tags": ["beginner", "general-fitness", "full-body", "3-day"],
}

PROGRAM_TEMPLATES: list[dict] = [
    STRONGLIFTS,
    STARTING_STRENGTH,
    PUSH_PULL_LEGS,
    UPPER_LOWER,
    FIVE_THREE_ONE,
    HIIT_STRENGTH,
    FULL_BODY_BEGINNER,
]

TEMPLATES_BY_ID: dict[str, dict] = {t["id"]: t for t in PROGRAM_TEMPLATES}

POPULAR_TEMPLATE_IDS = ("stronglifts-5x5", "push-pull-legs", "upper-lower", "5-3-1", "full-body-beginner")
