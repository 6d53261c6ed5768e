"""Gym log model - one performed exercise."""

from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymlog.db.base import Base, TimestampMixin


class GymLog(TimestampMixin, Base):
    """Free-text exercise name with sets, reps and weight, owned by a user."""

    __tablename__ = "gym_logs"
    __table_args__ = (
        CheckConstraint("sets > 0", name="ck_gym_logs_sets_positive"),
        CheckConstraint("reps > 0", name="ck_gym_logs_reps_positive"),
        CheckConstraint("weight >= 0", name="ck_gym_logs_weight_non_negative"),
        Index("ix_gym_logs_created_at", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    exercise: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    sets: Mapped[int] = mapped_column(Integer, nullable=False)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    weight: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    user: Mapped["User"] = relationship("User", back_populates="gym_logs")
