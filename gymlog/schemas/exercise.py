"""Exercise schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gymlog.core.enums import BodyPart, DifficultyLevel, ExerciseType
from gymlog.schemas.common import reject_null


def _check_equipment(items: list[str] | None) -> list[str] | None:
    if items is not None and any(not item.strip() for item in items):
        raise ValueError("All equipment items must be non-empty strings")
    return items


class ExerciseBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    description: str = Field(..., min_length=5, max_length=1000)
    body_part: BodyPart
    exercise_type: ExerciseType
    difficulty: DifficultyLevel | None = None
    equipment: list[str] | None = None

    @field_validator("equipment")
    @classmethod
    def _equipment_items(cls, value):
        return _check_equipment(value)


class ExerciseCreate(ExerciseBase):
    id: str = Field(..., min_length=1, max_length=64)


class ExerciseUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=255)
    description: str | None = Field(None, min_length=5, max_length=1000)
    body_part: BodyPart | None = None
    exercise_type: ExerciseType | None = None
    difficulty: DifficultyLevel | None = None
    equipment: list[str] | None = None

    @field_validator("name", "description", "body_part", "exercise_type")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)

    @field_validator("equipment")
    @classmethod
    def _equipment_items(cls, value):
        return _check_equipment(value)


class ExerciseRead(ExerciseBase):
    model_config = ConfigDict(from_attributes=True)
    id: str
    created_at: datetime
    updated_at: datetime


class ExerciseConstants(BaseModel):
    body_parts: list[str]
    exercise_types: list[str]
    difficulty_levels: list[str]
    common_equipment: list[str]


class ExerciseFilters(BaseModel):
    """Distinct values actually present in the catalog."""

    body_parts: list[str]
    exercise_types: list[str]
    difficulties: list[str]


class ExerciseStats(BaseModel):
    total_exercises: int
    by_body_part: dict[str, int]
    by_exercise_type: dict[str, int]
