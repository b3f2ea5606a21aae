"""User settings (single row, created on first read)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.api.deps import get_timer_controls
from gymtracker.db.session import get_db
from gymtracker.schemas.app_settings import AppSettingsRead, AppSettingsUpdate
from gymtracker.services.app_settings import get_or_create_settings
from gymtracker.services.control_events import RestTimerControls

router = APIRouter()


@router.get("", response_model=AppSettingsRead)
async def read_settings(
    db: AsyncSession = Depends(get_db),
    controls: RestTimerControls = Depends(get_timer_controls),
):
    """Current settings; the row is created with defaults if it does not exist yet."""
    settings = await get_or_create_settings(db)
    controls.default_rest_seconds = settings.default_rest_seconds
    return settings


@router.patch("", response_model=AppSettingsRead)
async def update_settings(
    payload: AppSettingsUpdate,
    db: AsyncSession = Depends(get_db),
    controls: RestTimerControls = Depends(get_timer_controls),
):
    settings = await get_or_create_settings(db)
    for k, v in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(settings, k, v)
    await db.flush()
    await db.refresh(settings)
    controls.default_rest_seconds = settings.default_rest_seconds
    return settings
