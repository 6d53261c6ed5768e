"""Workout plan schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gymlog.core.constants import MAX_EXERCISES_PER_PLAN
from gymlog.core.enums import BodyPart, DifficultyLevel
from gymlog.models.workout_plan import WorkoutPlan, WorkoutPlanExercise
from gymlog.schemas.common import reject_null
from gymlog.schemas.user import CreatorRead


class PlanExerciseCreate(BaseModel):
    """One entry of a plan. order_index defaults to the entry's position (1-based)."""

    exercise_id: str = Field(..., min_length=1, max_length=64)
    sets: int = Field(..., ge=1, le=100)
    reps: int = Field(..., ge=1, le=1000)
    weight: float | None = Field(None, ge=0, le=10000)
    rest_time: int | None = Field(None, ge=0, le=3600)
    notes: str | None = Field(None, max_length=500)
    order_index: int | None = Field(None, ge=1)


class PlanExerciseUpdate(BaseModel):
    sets: int | None = Field(None, ge=1, le=100)
    reps: int | None = Field(None, ge=1, le=1000)
    weight: float | None = Field(None, ge=0, le=10000)
    rest_time: int | None = Field(None, ge=0, le=3600)
    notes: str | None = Field(None, max_length=500)
    order_index: int | None = Field(None, ge=1)

    @field_validator("sets", "reps", "order_index")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class PlanExerciseRead(BaseModel):
    """Plan entry joined with its exercise definition."""

    id: UUID
    exercise_id: str
    exercise_name: str | None = None
    exercise_description: str | None = None
    body_part: str | None = None
    exercise_type: str | None = None
    difficulty: str | None = None
    equipment: list[str] | None = None
    sets: int
    reps: int
    weight: float | None = None
    rest_time: int | None = None
    notes: str | None = None
    order_index: int

    @classmethod
    def from_entry(cls, entry: WorkoutPlanExercise) -> PlanExerciseRead:
        exercise = entry.exercise
        return cls(
            id=entry.id,
            exercise_id=entry.exercise_id,
            exercise_name=exercise.name if exercise else None,
            exercise_description=exercise.description if exercise else None,
            body_part=exercise.body_part.value if exercise else None,
            exercise_type=exercise.exercise_type.value if exercise else None,
            difficulty=exercise.difficulty.value if exercise and exercise.difficulty else None,
            equipment=exercise.equipment if exercise else None,
            sets=entry.sets,
            reps=entry.reps,
            weight=entry.weight,
            rest_time=entry.rest_time,
            notes=entry.notes,
            order_index=entry.order_index,
        )


class WorkoutPlanBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    muscle_types: list[BodyPart] = Field(..., min_length=1)
    difficulty_level: DifficultyLevel | None = None
    estimated_duration: int | None = Field(None, ge=1, le=600)  # minutes
    is_public: bool = False


class WorkoutPlanCreate(WorkoutPlanBase):
    exercises: list[PlanExerciseCreate] = Field(..., min_length=1, max_length=MAX_EXERCISES_PER_PLAN)


class WorkoutPlanUpdate(BaseModel):
    """Partial update. Supplying `exercises` replaces the whole exercise list."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    muscle_types: list[BodyPart] | None = Field(None, min_length=1)
    difficulty_level: DifficultyLevel | None = None
    estimated_duration: int | None = Field(None, ge=1, le=600)
    is_public: bool | None = None
    exercises: list[PlanExerciseCreate] | None = Field(None, min_length=1, max_length=MAX_EXERCISES_PER_PLAN)
    expected_revision: int | None = Field(None, ge=1)

    @field_validator("name", "muscle_types", "is_public", "exercises")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class WorkoutPlanSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    name: str
    description: str | None = None
    muscle_types: list[str]
    difficulty_level: DifficultyLevel | None = None
    estimated_duration: int | None = None
    created_by: UUID
    is_public: bool
    revision: int
    created_at: datetime
    updated_at: datetime
    creator: CreatorRead | None = None


class WorkoutPlanRead(WorkoutPlanSummary):
    """Plan with its exercises in order_index order."""

    exercises: list[PlanExerciseRead] = []

    @classmethod
    def from_plan(cls, plan: WorkoutPlan) -> WorkoutPlanRead:
        summary = WorkoutPlanSummary.model_validate(plan)
        return cls(
            **summary.model_dump(),
            exercises=[PlanExerciseRead.from_entry(e) for e in plan.exercises],
        )


class WorkoutPlanStats(BaseModel):
    total_plans: int
    public_plans: int
    private_plans: int
    by_difficulty: dict[str, int]
    muscle_type_usage: dict[str, int]
