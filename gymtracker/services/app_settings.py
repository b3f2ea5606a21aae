"""Access to the single settings row."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.models.app_settings import AppSettings


async def get_or_create_settings(db: AsyncSession) -> AppSettings:
    """Return the settings row, creating it with defaults on first read.

    Only the oldest row is meaningful if more than one ever gets written.
    """
    result = await db.execute(select(AppSettings).order_by(AppSettings.created_at, AppSettings.id).limit(1))
    settings = result.scalar_one_or_none()
    if settings is None:
        settings = AppSettings.with_defaults()
        db.add(settings)
        await db.flush()
        await db.refresh(settings)
    return settings
