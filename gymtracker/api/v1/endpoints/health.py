"""Liveness and readiness of the GymTracker service."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.api.deps import get_live_status
from gymtracker.core.config import get_settings
from gymtracker.db.session import get_db
from gymtracker.services.live_status import InMemoryLiveStatusSurface

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def health():
    """Process is up."""
    settings = get_settings()
    return {"status": "ok", "environment": settings.environment}


@router.get("/ready")
async def readiness(
    db: AsyncSession = Depends(get_db),
    live_status: InMemoryLiveStatusSurface = Depends(get_live_status),
):
    """
    Store reachable. Also reports whether rests can be started at all
    (no live status surface means every timer start is ignored).
    """
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.exception("Store not reachable")
        return JSONResponse(status_code=503, content={"status": "error", "database": str(e)})
    return {"status": "ok", "database": "connected", "live_status": live_status.is_available()}
