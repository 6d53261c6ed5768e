"""User schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from gymlog.schemas.common import reject_null


class UserCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=100)
    email: EmailStr | None = None

    @field_validator("name", "email")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class UserRead(BaseModel):
    """Public view of an account (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)
    id: UUID
    email: str
    name: str
    created_at: datetime
    updated_at: datetime


class CreatorRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    name: str
    email: str
