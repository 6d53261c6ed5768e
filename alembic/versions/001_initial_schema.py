"""Initial schema: users, exercises, gym_logs, workout_plans, workout_plan_exercises.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "exercises",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("body_part", sa.String(length=32), nullable=False),
        sa.Column("exercise_type", sa.String(length=32), nullable=False),
        sa.Column("difficulty", sa.String(length=32), nullable=True),
        sa.Column("equipment", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_exercises_name"), "exercises", ["name"], unique=True)
    op.create_index(op.f("ix_exercises_body_part"), "exercises", ["body_part"], unique=False)
    op.create_index(op.f("ix_exercises_exercise_type"), "exercises", ["exercise_type"], unique=False)
    op.create_index(op.f("ix_exercises_difficulty"), "exercises", ["difficulty"], unique=False)

    op.create_table(
        "gym_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("exercise", sa.String(length=255), nullable=False),
        sa.Column("sets", sa.Integer(), nullable=False),
        sa.Column("reps", sa.Integer(), nullable=False),
        sa.Column("weight", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("sets > 0", name="ck_gym_logs_sets_positive"),
        sa.CheckConstraint("reps > 0", name="ck_gym_logs_reps_positive"),
        sa.CheckConstraint("weight >= 0", name="ck_gym_logs_weight_non_negative"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_gym_logs_user_id"), "gym_logs", ["user_id"], unique=False)
    op.create_index(op.f("ix_gym_logs_exercise"), "gym_logs", ["exercise"], unique=False)
    op.create_index("ix_gym_logs_created_at", "gym_logs", ["created_at"], unique=False)

    op.create_table(
        "workout_plans",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("muscle_types", postgresql.ARRAY(sa.String(length=32)), nullable=False),
        sa.Column("difficulty_level", sa.String(length=32), nullable=True),
        sa.Column("estimated_duration", sa.Integer(), nullable=True),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("revision", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_workout_plans_created_by"), "workout_plans", ["created_by"], unique=False)
    op.create_index(op.f("ix_workout_plans_difficulty_level"), "workout_plans", ["difficulty_level"], unique=False)
    op.create_index("ix_workout_plans_is_public", "workout_plans", ["is_public"], unique=False)
    op.create_index("ix_workout_plans_created_at", "workout_plans", ["created_at"], unique=False)
    op.create_index(
        "ix_workout_plans_muscle_types", "workout_plans", ["muscle_types"], unique=False, postgresql_using="gin"
    )

    op.create_table(
        "workout_plan_exercises",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("workout_plan_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("exercise_id", sa.String(length=64), nullable=False),
        sa.Column("sets", sa.Integer(), nullable=False),
        sa.Column("reps", sa.Integer(), nullable=False),
        sa.Column("weight", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("rest_time", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
        sa.CheckConstraint("sets > 0", name="ck_workout_plan_exercises_sets_positive"),
        sa.CheckConstraint("reps > 0", name="ck_workout_plan_exercises_reps_positive"),
        sa.ForeignKeyConstraint(["workout_plan_id"], ["workout_plans.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["exercise_id"], ["exercises.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("workout_plan_id", "exercise_id", name="uq_workout_plan_exercises_plan_exercise"),
    )
    op.create_index(
        op.f("ix_workout_plan_exercises_workout_plan_id"), "workout_plan_exercises", ["workout_plan_id"], unique=False
    )
    op.create_index(
        op.f("ix_workout_plan_exercises_exercise_id"), "workout_plan_exercises", ["exercise_id"], unique=False
    )
    op.create_index(
        "ix_workout_plan_exercises_order", "workout_plan_exercises", ["workout_plan_id", "order_index"], unique=False
    )


def downgrade() -> None:
    op.drop_table("workout_plan_exercises")
    op.drop_index("ix_workout_plans_muscle_types", table_name="workout_plans")
    op.drop_table("workout_plans")
    op.drop_table("gym_logs")
    op.drop_table("exercises")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
