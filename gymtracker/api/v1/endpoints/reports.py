"""Monthly progress report: HTML view and per-month file."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Path
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.core.config import get_settings
from gymtracker.core.dates import local_zone
from gymtracker.db.session import get_db
from gymtracker.services.monthly_aggregate import aggregate_month, fetch_sessions_for_month
from gymtracker.services.report_renderer import persist_report, render_report

router = APIRouter()


async def _render(db: AsyncSession, month: date) -> str:
    tz = local_zone()
    sessions = await fetch_sessions_for_month(db, month, tz)
    return render_report(aggregate_month(sessions, month, tz), month)


@router.get("/{year}/{month}", response_class=HTMLResponse)
async def monthly_report(
    year: int = Path(..., ge=1970, le=9999),
    month: int = Path(..., ge=1, le=12),
    db: AsyncSession = Depends(get_db),
):
    """The report document. A month with no data (or a failed fetch) renders as an empty report."""
    return HTMLResponse(await _render(db, date(year, month, 1)))


@router.post("/{year}/{month}", status_code=201)
async def export_monthly_report(
    year: int = Path(..., ge=1970, le=9999),
    month: int = Path(..., ge=1, le=12),
    db: AsyncSession = Depends(get_db),
):
    """Write gymtracker-YYYY-MM.html into the reports directory, replacing an earlier export."""
    first = date(year, month, 1)
    path = persist_report(await _render(db, first), first, get_settings().reports_dir)
    if path is None:
        raise HTTPException(status_code=500, detail="Could not write report file")
    return {"filename": path.name, "path": str(path)}
