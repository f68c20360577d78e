"""Achievement catalog. Conditions are evaluated by services.achievements."""

# Categories
WORKOUT_FREQUENCY = "Workout Frequency"
STRENGTH_PROGRESS = "Strength Progress"
CONSISTENCY = "Consistency"
VOLUME = "Volume"
ENDURANCE = "Endurance"
VARIETY = "Variety"
EFFICIENCY = "Efficiency"
SPECIAL = "Special"

# Rarity, lowest to highest
RARITIES = ("Common", "Uncommon", "Rare", "Epic", "Legendary")
COMMON, UNCOMMON, RARE, EPIC, LEGENDARY = RARITIES


def _a(id_, name, description, category, type_, rarity, condition, xp):
    return {
        "id": id_,
        "name": name,
        "description": description,
        "category": category,
        "type": type_,
        "rarity": rarity,
        "condition": condition,
        "reward": {"xp": xp, "badge": id_},
    }


ACHIEVEMENTS: list[dict] = [
    # Workout frequency
    _a("first-workout", "First Steps", "Complete your first workout",
       WORKOUT_FREQUENCY, "Milestone", COMMON, {"type": "total_workouts", "value": 1}, 100),
    _a("week-warrior", "Week Warrior", "Complete 7 workouts",
       WORKOUT_FREQUENCY, "Total", COMMON, {"type": "total_workouts", "value": 7}, 200),
    _a("month-master", "Month Master", "Complete 30 workouts",
       WORKOUT_FREQUENCY, "Total", UNCOMMON, {"type": "total_workouts", "value": 30}, 500),
    _a("century-club", "Century Club", "Complete 100 workouts",
       WORKOUT_FREQUENCY, "Total", RARE, {"type": "total_workouts", "value": 100}, 1000),
    _a("five-hundred", "Five Hundred", "Complete 500 workouts",
       WORKOUT_FREQUENCY, "Total", EPIC, {"type": "total_workouts", "value": 500}, 2500),
    _a("thousand-club", "Thousand Club", "Complete 1000 workouts",
       WORKOUT_FREQUENCY, "Total", LEGENDARY, {"type": "total_workouts", "value": 1000}, 5000),
    # Streaks
    _a("streak-3", "Getting Started", "Maintain a 3-day workout streak",
       CONSISTENCY, "Streak", COMMON, {"type": "streak", "value": 3}, 150),
    _a("streak-7", "Week Warrior", "Maintain a 7-day workout streak",
       CONSISTENCY, "Streak", UNCOMMON, {"type": "streak", "value": 7}, 300),
    _a("streak-30", "Month Master", "Maintain a 30-day workout streak",
       CONSISTENCY, "Streak", RARE, {"type": "streak", "value": 30}, 750),
    _a("streak-100", "Century Streak", "Maintain a 100-day workout streak",
       CONSISTENCY, "Streak", EPIC, {"type": "streak", "value": 100}, 2000),
    _a("streak-365", "Year of Fire", "Maintain a 365-day workout streak",
       CONSISTENCY, "Streak", LEGENDARY, {"type": "streak", "value": 365}, 5000),
    # Personal records
    _a("first-pr", "First PR", "Set your first personal record",
       STRENGTH_PROGRESS, "Progress", COMMON, {"type": "personal_records", "value": 1}, 200),
    _a("pr-master", "PR Master", "Set 10 personal records",
       STRENGTH_PROGRESS, "Progress", UNCOMMON, {"type": "personal_records", "value": 10}, 500),
    _a("pr-legend", "PR Legend", "Set 50 personal records",
       STRENGTH_PROGRESS, "Progress", RARE, {"type": "personal_records", "value": 50}, 1000),
    _a("bench-225", "Two Plates", "Bench press 225",
       STRENGTH_PROGRESS, "Strength", UNCOMMON,
       {"type": "exercise_weight", "exercise": "Bench Press", "value": 225}, 400),
    _a("squat-315", "Three Plates", "Squat 315",
       STRENGTH_PROGRESS, "Strength", UNCOMMON,
       {"type": "exercise_weight", "exercise": "Squat", "value": 315}, 400),
    _a("deadlift-405", "Four Plates", "Deadlift 405",
       STRENGTH_PROGRESS, "Strength", UNCOMMON,
       {"type": "exercise_weight", "exercise": "Deadlift", "value": 405}, 400),
    # Volume
    _a("volume-10k", "Volume Builder", "Lift 10,000 in total volume",
       VOLUME, "Volume", COMMON, {"type": "total_volume", "value": 10_000}, 300),
    _a("volume-100k", "Volume Master", "Lift 100,000 in total volume",
       VOLUME, "Volume", UNCOMMON, {"type": "total_volume", "value": 100_000}, 600),
    _a("volume-1m", "Volume Legend", "Lift 1,000,000 in total volume",
       VOLUME, "Volume", EPIC, {"type": "total_volume", "value": 1_000_000}, 2000),
    # Endurance
    _a("marathon-set", "Marathon Set", "Complete a set with 50+ reps",
       ENDURANCE, "Endurance", UNCOMMON, {"type": "max_reps", "value": 50}, 400),
    _a("iron-lungs", "Iron Lungs", "Complete a set with 100+ reps",
       ENDURANCE, "Endurance", RARE, {"type": "max_reps", "value": 100}, 800),
    # Variety
    _a("exercise-explorer", "Exercise Explorer", "Try 25 different exercises",
       VARIETY, "Variety", UNCOMMON, {"type": "unique_exercises", "value": 25}, 500),
    _a("exercise-master", "Exercise Master", "Try 100 different exercises",
       VARIETY, "Variety", RARE, {"type": "unique_exercises", "value": 100}, 1000),
    # Efficiency
    _a("speed-demon", "Speed Demon", "Complete a workout in under 30 minutes",
       EFFICIENCY, "Efficiency", UNCOMMON,
       {"type": "workout_duration", "value": 30, "operator": "less_than"}, 300),
    _a("efficiency-expert", "Efficiency Expert", "Complete 10 workouts in under 45 minutes",
       EFFICIENCY, "Efficiency", RARE, {"type": "efficient_workouts", "value": 10, "duration": 45}, 600),
    # Special
    _a("early-bird", "Early Bird", "Complete a workout before 6 AM",
       SPECIAL, "Special", UNCOMMON, {"type": "workout_time", "value": 6, "operator": "before"}, 200),
    _a("night-owl", "Night Owl", "Complete a workout after 10 PM",
       SPECIAL, "Special", UNCOMMON, {"type": "workout_time", "value": 22, "operator": "after"}, 200),
    _a("weekend-warrior", "Weekend Warrior", "Complete workouts on both weekend days",
       SPECIAL, "Special", COMMON, {"type": "weekend_workouts", "value": 2}, 150),
    _a("holiday-hero", "Holiday Hero", "Complete a workout on a holiday",
       SPECIAL, "Special", UNCOMMON, {"type": "holiday_workout", "value": 1}, 300),
]

ACHIEVEMENTS_BY_ID: dict[str, dict] = {a["id"]: a for a in ACHIEVEMENTS}

# Conditions whose progress can be expressed as current/target
PROGRESS_CONDITIONS = frozenset({"total_workouts", "streak", "personal_records", "total_volume", "unique_exercises"})
