"""Workout plan aggregate writes: the plan header plus its ordered exercise entries.

The database only sees per-row statements, so a plan write is wrapped in a
savepoint acting as the unit of work. Each entry insert runs in its own nested
savepoint so every row's outcome is observed individually. If any entry fails,
the enclosing savepoint is rolled back, which discards the header (and, for a
replace, restores the previous entries) before PartialWriteError is raised.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, AsyncSessionTransaction
from sqlalchemy.orm import selectinload

from gymlog.core.errors import ConflictError, NotFoundError, PartialWriteError, UpstreamError
from gymlog.models.exercise import Exercise
from gymlog.models.workout_plan import WorkoutPlan, WorkoutPlanExercise
from gymlog.schemas.workout_plan import (
    PlanExerciseCreate,
    PlanExerciseUpdate,
    WorkoutPlanCreate,
    WorkoutPlanUpdate,
)
from gymlog.services.access_policy import Operation, Resource, ensure_access

logger = logging.getLogger(__name__)

PLAN_LABEL = "Workout plan"


@dataclass(frozen=True)
class EntryFailure:
    position: int
    exercise_id: str
    duplicate: bool

    def describe(self) -> str:
        if self.duplicate:
            return f"exercises[{self.position}]: exercise '{self.exercise_id}' is already in the plan"
        return f"exercises[{self.position}]: exercise '{self.exercise_id}' could not be added"


UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    # PostgreSQL drivers expose the SQLSTATE; sqlite only has "UNIQUE constraint failed"
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if sqlstate:
        return sqlstate == UNIQUE_VIOLATION
    return "unique" in str(exc.orig).lower()


async def load_plan(db: AsyncSession, plan_id: uuid.UUID) -> WorkoutPlan | None:
    """Plan with creator and exercises (each joined with its definition), freshly read."""
    result = await db.execute(
        select(WorkoutPlan)
        .options(
            selectinload(WorkoutPlan.creator),
            selectinload(WorkoutPlan.exercises).selectinload(WorkoutPlanExercise.exercise),
        )
        .where(WorkoutPlan.id == plan_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def load_plan_entry(db: AsyncSession, plan_id: uuid.UUID, entry_id: uuid.UUID) -> WorkoutPlanExercise | None:
    result = await db.execute(
        select(WorkoutPlanExercise)
        .options(selectinload(WorkoutPlanExercise.exercise))
        .where(WorkoutPlanExercise.id == entry_id, WorkoutPlanExercise.workout_plan_id == plan_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


class PlanAggregateWriter:
    """Owner-checked writes on a workout plan and its exercise entries."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _authorize(
        self, plan_id: uuid.UUID, actor_id: Any, operation: Operation, forbidden_message: str
    ) -> WorkoutPlan:
        # Read the header on every call; an earlier decision is never reused
        plan = await self.db.get(WorkoutPlan, plan_id, populate_existing=True)
        resource = Resource(owner_id=plan.created_by, is_public=plan.is_public) if plan else None
        ensure_access(actor_id, resource, operation, label=PLAN_LABEL, forbidden_message=forbidden_message)
        return plan

    async def _bump_revision(self, plan_id: uuid.UUID, expected: int | None = None, increment: bool = True) -> None:
        """Guarded revision write, evaluated by the database.

        With ``expected`` the row only matches while it is still at that revision,
        so of two concurrent writers holding the same revision one gets ConflictError.
        """
        stmt = update(WorkoutPlan).where(WorkoutPlan.id == plan_id)
        if expected is not None:
            stmt = stmt.where(WorkoutPlan.revision == expected)
        stmt = stmt.values(revision=WorkoutPlan.revision + 1 if increment else WorkoutPlan.revision)
        result = await self.db.execute(stmt, execution_options={"synchronize_session": False})
        if result.rowcount:
            return
        if expected is not None:
            raise ConflictError(f"Workout plan was modified (expected revision {expected})")
        raise NotFoundError(f"{PLAN_LABEL} not found")

    async def _discard(self, savepoint: AsyncSessionTransaction, plan_id: uuid.UUID | None) -> None:
        """Roll back the unit of work. A failure here is logged, not retried."""
        try:
            await savepoint.rollback()
        except SQLAlchemyError:
            logger.exception("Could not discard partial write of workout plan %s", plan_id)

    async def _insert_entries(self, plan_id: uuid.UUID, specs: list[PlanExerciseCreate]) -> list[EntryFailure]:
        """Insert entries one by one; return the ones the database rejected."""
        failures: list[EntryFailure] = []
        for position, spec in enumerate(specs, start=1):
            entry = WorkoutPlanExercise(
                workout_plan_id=plan_id,
                order_index=spec.order_index or position,
                **spec.model_dump(exclude={"order_index"}),
            )
            try:
                async with self.db.begin_nested():
                    self.db.add(entry)
                    await self.db.flush()
            except IntegrityError as exc:
                failure = EntryFailure(position=position, exercise_id=spec.exercise_id, duplicate=_is_unique_violation(exc))
                logger.warning("Workout plan %s: %s (%s)", plan_id, failure.describe(), exc.orig)
                failures.append(failure)
        return failures

    async def create(self, actor_id: uuid.UUID, payload: WorkoutPlanCreate) -> WorkoutPlan:
        header = payload.model_dump(exclude={"exercises"})
        header["muscle_types"] = [m.value for m in payload.muscle_types]

        savepoint = await self.db.begin_nested()
        try:
            plan = WorkoutPlan(created_by=actor_id, **header)
            self.db.add(plan)
            await self.db.flush()
        except SQLAlchemyError as exc:
            await self._discard(savepoint, None)
            raise UpstreamError("Error creating workout plan") from exc

        plan_id = plan.id
        try:
            failures = await self._insert_entries(plan_id, payload.exercises)
        except SQLAlchemyError as exc:
            await self._discard(savepoint, plan_id)
            raise UpstreamError("Error creating workout plan") from exc
        if failures:
            logger.warning(
                "Discarding workout plan %s: %d of %d exercises failed", plan_id, len(failures), len(payload.exercises)
            )
            await self._discard(savepoint, plan_id)
            raise PartialWriteError(
                "Failed to add exercises to workout plan", details=[f.describe() for f in failures]
            )
        await savepoint.commit()
        logger.info("Created workout plan %s with %d exercises", plan_id, len(payload.exercises))
        return await load_plan(self.db, plan_id)

    async def update(self, plan_id: uuid.UUID, actor_id: Any, payload: WorkoutPlanUpdate) -> WorkoutPlan:
        """Partial header update; a supplied exercise list replaces the current one."""
        plan = await self._authorize(plan_id, actor_id, Operation.UPDATE, "You can only update your own workout plans")

        data = payload.model_dump(exclude_unset=True, exclude={"exercises", "expected_revision"})
        if "muscle_types" in data:
            data["muscle_types"] = [m.value for m in payload.muscle_types]
        replace = payload.exercises is not None

        savepoint = await self.db.begin_nested()
        try:
            # Row lock is taken here, before any other write of this request
            if replace or payload.expected_revision is not None:
                await self._bump_revision(plan_id, expected=payload.expected_revision, increment=replace)
            for key, value in data.items():
                setattr(plan, key, value)
            await self.db.flush()
            failures: list[EntryFailure] = []
            if replace:
                await self.db.execute(
                    delete(WorkoutPlanExercise).where(WorkoutPlanExercise.workout_plan_id == plan_id)
                )
                failures = await self._insert_entries(plan_id, payload.exercises)
        except ConflictError:
            await self._discard(savepoint, plan_id)
            raise
        except SQLAlchemyError as exc:
            await self._discard(savepoint, plan_id)
            raise UpstreamError("Error updating workout plan") from exc
        if failures:
            logger.warning("Keeping previous exercises of workout plan %s: %d replacements failed", plan_id, len(failures))
            await self._discard(savepoint, plan_id)
            raise PartialWriteError(
                "Failed to replace exercises of workout plan", details=[f.describe() for f in failures]
            )
        await savepoint.commit()
        return await load_plan(self.db, plan_id)

    async def delete(self, plan_id: uuid.UUID, actor_id: Any) -> None:
        """Delete a plan; its entries go with it (ON DELETE CASCADE)."""
        plan = await self._authorize(plan_id, actor_id, Operation.DELETE, "You can only delete your own workout plans")
        await self.db.delete(plan)
        await self.db.flush()
        logger.info("Deleted workout plan %s", plan_id)

    async def _next_order_index(self, plan_id: uuid.UUID) -> int:
        current = await self.db.scalar(
            select(func.max(WorkoutPlanExercise.order_index)).where(WorkoutPlanExercise.workout_plan_id == plan_id)
        )
        return (current or 0) + 1

    async def add_exercise(
        self, plan_id: uuid.UUID, actor_id: Any, payload: PlanExerciseCreate
    ) -> WorkoutPlanExercise:
        await self._authorize(
            plan_id, actor_id, Operation.CREATE_CHILD, "You can only modify your own workout plans"
        )
        if await self.db.get(Exercise, payload.exercise_id) is None:
            raise NotFoundError("Exercise not found")
        existing = await self.db.scalar(
            select(WorkoutPlanExercise.id).where(
                WorkoutPlanExercise.workout_plan_id == plan_id,
                WorkoutPlanExercise.exercise_id == payload.exercise_id,
            )
        )
        if existing is not None:
            raise ConflictError("Exercise already exists in this workout plan")

        entry = WorkoutPlanExercise(
            workout_plan_id=plan_id,
            order_index=payload.order_index or await self._next_order_index(plan_id),
            **payload.model_dump(exclude={"order_index"}),
        )
        try:
            async with self.db.begin_nested():
                self.db.add(entry)
                await self.db.flush()
        except IntegrityError as exc:
            # Lost a race with a concurrent add of the same exercise
            if _is_unique_violation(exc):
                raise ConflictError("Exercise already exists in this workout plan") from exc
            raise UpstreamError("Error adding exercise to workout plan") from exc
        await self._bump_revision(plan_id)
        return await load_plan_entry(self.db, plan_id, entry.id)

    async def update_exercise(
        self, plan_id: uuid.UUID, entry_id: uuid.UUID, actor_id: Any, payload: PlanExerciseUpdate
    ) -> WorkoutPlanExercise:
        await self._authorize(plan_id, actor_id, Operation.UPDATE, "You can only modify your own workout plans")
        entry = await load_plan_entry(self.db, plan_id, entry_id)
        if entry is None:
            raise NotFoundError("Exercise not found in workout plan")
        for key, value in payload.model_dump(exclude_unset=True).items():
            setattr(entry, key, value)
        await self.db.flush()
        await self._bump_revision(plan_id)
        return await load_plan_entry(self.db, plan_id, entry_id)

    async def remove_exercise(self, plan_id: uuid.UUID, entry_id: uuid.UUID, actor_id: Any) -> None:
        """Delete one entry. Remaining entries keep their order_index; a plan may end up empty."""
        await self._authorize(plan_id, actor_id, Operation.DELETE, "You can only modify your own workout plans")
        result = await self.db.execute(
            delete(WorkoutPlanExercise).where(
                WorkoutPlanExercise.id == entry_id, WorkoutPlanExercise.workout_plan_id == plan_id
            )
        )
        if result.rowcount:
            await self._bump_revision(plan_id)
