"""Exercise model - catalog entry with body part, type, difficulty and equipment."""

from __future__ import annotations

from sqlalchemy import JSON, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymlog.core.enums import BodyPart, DifficultyLevel, ExerciseType, enum_values
from gymlog.db.base import Base, TimestampMixin


class Exercise(TimestampMixin, Base):
    """Exercise definition. The id is supplied by the client (e.g. "1")."""

    __tablename__ = "exercises"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    body_part: Mapped[BodyPart] = mapped_column(
        Enum(BodyPart, name="body_part", native_enum=False, values_callable=enum_values, length=32),
        nullable=False,
        index=True,
    )
    exercise_type: Mapped[ExerciseType] = mapped_column(
        Enum(ExerciseType, name="exercise_type", native_enum=False, values_callable=enum_values, length=32),
        nullable=False,
        index=True,
    )
    difficulty: Mapped[DifficultyLevel | None] = mapped_column(
        Enum(DifficultyLevel, name="difficulty", native_enum=False, values_callable=enum_values, length=32),
        nullable=True,
        index=True,
    )
    equipment: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)  # list of equipment names

    plan_entries: Mapped[list["WorkoutPlanExercise"]] = relationship("WorkoutPlanExercise", back_populates="exercise")
