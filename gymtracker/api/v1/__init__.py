"""API v1 router aggregation."""

from fastapi import APIRouter

from gymtracker.api.v1.endpoints import (
    controls,
    health,
    plans,
    records,
    reports,
    sessions,
    settings,
    timer,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(plans.router, prefix="/plans", tags=["plans"])
api_router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
api_router.include_router(records.router, prefix="/records", tags=["records"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(timer.router, prefix="/timer", tags=["timer"])
api_router.include_router(controls.router, prefix="/controls", tags=["controls"])
