"""Timezone helpers: the store keeps UTC, calendar grouping happens in the configured local zone."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from gymtracker.core.config import get_settings


def as_utc(value: datetime) -> datetime:
    """Aware UTC datetime. Naive values (SQLite reads) were written as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_zone() -> ZoneInfo:
    return ZoneInfo(get_settings().timezone)
