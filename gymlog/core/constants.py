"""Application constants."""

# Pagination
DEFAULT_PAGE_SIZE = 10
DEFAULT_EXERCISE_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Workout plans
MAX_EXERCISES_PER_PLAN = 50

# Gym log stats window
RECENT_LOG_DAYS = 7

# Suggested equipment names (free text is still accepted)
COMMON_EQUIPMENT = [
    "barbell",
    "dumbbell",
    "dumbbells",
    "kettlebell",
    "resistance-band",
    "pull-up-bar",
    "bench",
    "squat-rack",
    "cable-machine",
    "smith-machine",
    "leg-press",
    "treadmill",
    "stationary-bike",
    "rowing-machine",
    "elliptical",
    "medicine-ball",
    "stability-ball",
    "foam-roller",
    "yoga-mat",
    "none",  # bodyweight exercises
]
