"""ORM models - import all so Base.metadata is complete for migrations."""

from gymlog.models.exercise import Exercise
from gymlog.models.gym_log import GymLog
from gymlog.models.user import User
from gymlog.models.workout_plan import WorkoutPlan, WorkoutPlanExercise

__all__ = [
    "Exercise",
    "GymLog",
    "User",
    "WorkoutPlan",
    "WorkoutPlanExercise",
]
