"""API v1 router aggregation."""

from fastapi import APIRouter

from gymlog.api.v1.endpoints import (
    exercises,
    gym_logs,
    health,
    users,
    workout_plans,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(gym_logs.router, prefix="/gym-logs", tags=["gym-logs"])
api_router.include_router(exercises.router, prefix="/exercises", tags=["exercises"])
api_router.include_router(workout_plans.router, prefix="/workout-plans", tags=["workout-plans"])
