"""Workout plan (header) and its ordered exercise entries."""

from __future__ import annotations

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymlog.core.enums import DifficultyLevel, enum_values
from gymlog.db.base import Base, TimestampMixin

# text[] on PostgreSQL (GIN-indexable, supports @>); JSON elsewhere
MuscleTypeList = ARRAY(String(32)).with_variant(JSON(), "sqlite")


class WorkoutPlan(TimestampMixin, Base):
    """Named template tagged with muscle types, owned by a user, public or private."""

    __tablename__ = "workout_plans"
    __table_args__ = (
        Index("ix_workout_plans_created_at", "created_at"),
        Index("ix_workout_plans_is_public", "is_public"),
        Index("ix_workout_plans_muscle_types", "muscle_types", postgresql_using="gin"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    muscle_types: Mapped[list[str]] = mapped_column(MuscleTypeList, nullable=False)
    difficulty_level: Mapped[DifficultyLevel | None] = mapped_column(
        Enum(DifficultyLevel, name="difficulty_level", native_enum=False, values_callable=enum_values, length=32),
        nullable=True,
        index=True,
    )
    estimated_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)  # minutes
    created_by: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # Bumped whenever the exercise list changes; lets clients detect stale replaces
    revision: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    creator: Mapped["User"] = relationship("User", back_populates="workout_plans")
    exercises: Mapped[list["WorkoutPlanExercise"]] = relationship(
        "WorkoutPlanExercise",
        back_populates="workout_plan",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: [WorkoutPlanExercise.order_index, WorkoutPlanExercise.created_at],
    )


class WorkoutPlanExercise(TimestampMixin, Base):
    """One exercise in a plan with prescribed sets/reps. At most one row per (plan, exercise)."""

    __tablename__ = "workout_plan_exercises"
    __table_args__ = (
        UniqueConstraint("workout_plan_id", "exercise_id", name="uq_workout_plan_exercises_plan_exercise"),
        CheckConstraint("sets > 0", name="ck_workout_plan_exercises_sets_positive"),
        CheckConstraint("reps > 0", name="ck_workout_plan_exercises_reps_positive"),
        Index("ix_workout_plan_exercises_order", "workout_plan_id", "order_index"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    workout_plan_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("workout_plans.id", ondelete="CASCADE"), nullable=False, index=True
    )
    exercise_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sets: Mapped[int] = mapped_column(Integer, nullable=False)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    weight: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    rest_time: Mapped[int | None] = mapped_column(Integer, nullable=True)  # seconds
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    workout_plan: Mapped["WorkoutPlan"] = relationship("WorkoutPlan", back_populates="exercises")
    exercise: Mapped["Exercise"] = relationship("Exercise", back_populates="plan_entries")
