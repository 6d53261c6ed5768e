"""Gym log schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gymlog.schemas.common import reject_null


class GymLogBase(BaseModel):
    exercise: str = Field(..., min_length=2, max_length=100)
    sets: int = Field(..., ge=1, le=100)
    reps: int = Field(..., ge=1, le=1000)
    weight: float = Field(..., ge=0, le=10000)
    notes: str | None = Field(None, max_length=500)


class GymLogCreate(GymLogBase):
    pass


class GymLogUpdate(BaseModel):
    exercise: str | None = Field(None, min_length=2, max_length=100)
    sets: int | None = Field(None, ge=1, le=100)
    reps: int | None = Field(None, ge=1, le=1000)
    weight: float | None = Field(None, ge=0, le=10000)
    notes: str | None = Field(None, max_length=500)

    @field_validator("exercise", "sets", "reps", "weight")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class GymLogRead(GymLogBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    user_id: UUID
    created_at: datetime
    updated_at: datetime


class GymLogStats(BaseModel):
    total_logs: int
    unique_exercises: int
    recent_logs: int  # last RECENT_LOG_DAYS days
