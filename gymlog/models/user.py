"""User account model."""

from __future__ import annotations

import uuid

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymlog.db.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """Account: unique email, bcrypt password hash and display name."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Owned rows go with the account (ON DELETE CASCADE in the database)
    gym_logs: Mapped[list["GymLog"]] = relationship(
        "GymLog", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    workout_plans: Mapped[list["WorkoutPlan"]] = relationship(
        "WorkoutPlan", back_populates="creator", cascade="all, delete-orphan", passive_deletes=True
    )
