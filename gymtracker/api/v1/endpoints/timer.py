"""Rest timer: state, transitions and the live status an external surface renders."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.api.deps import get_live_status, get_rest_timer, get_timer_controls
from gymtracker.db.session import get_db
from gymtracker.schemas.timer import LiveStatusRead, TimerRead, TimerStart, TimerTick, TimerTransition
from gymtracker.services.app_settings import get_or_create_settings
from gymtracker.services.control_events import RestTimerControls
from gymtracker.services.live_status import InMemoryLiveStatusSurface
from gymtracker.services.rest_timer import RestTimerCoordinator

router = APIRouter()


def _transition(applied: bool, timer: RestTimerCoordinator) -> TimerTransition:
    return TimerTransition(applied=applied, timer=TimerRead.model_validate(timer.snapshot()))


@router.get("", response_model=TimerRead)
async def timer_state(timer: RestTimerCoordinator = Depends(get_rest_timer)):
    return timer.snapshot()


@router.post("/start", response_model=TimerTransition)
async def start_rest(
    payload: TimerStart,
    db: AsyncSession = Depends(get_db),
    timer: RestTimerCoordinator = Depends(get_rest_timer),
    controls: RestTimerControls = Depends(get_timer_controls),
):
    """Start a rest (settings default duration when omitted). Non-positive durations are ignored."""
    duration = payload.duration_seconds
    if duration is None:
        duration = (await get_or_create_settings(db)).default_rest_seconds
    controls.set_context(payload.exercise_name, payload.workout_label)
    return _transition(timer.start(duration, payload.exercise_name, payload.workout_label), timer)


@router.post("/add-minute", response_model=TimerTransition)
async def add_minute(timer: RestTimerCoordinator = Depends(get_rest_timer)):
    return _transition(timer.add_minute(), timer)


@router.post("/tick", response_model=TimerTransition)
async def tick(payload: TimerTick, timer: RestTimerCoordinator = Depends(get_rest_timer)):
    return _transition(timer.tick(payload.remaining_seconds), timer)


@router.post("/skip", response_model=TimerTransition)
async def skip_rest(timer: RestTimerCoordinator = Depends(get_rest_timer)):
    return _transition(timer.skip(), timer)


@router.post("/stop", response_model=TimerTransition)
async def stop_rest(timer: RestTimerCoordinator = Depends(get_rest_timer)):
    return _transition(timer.stop(), timer)


@router.get("/live-status", response_model=LiveStatusRead | None)
async def live_status(surface: InMemoryLiveStatusSurface = Depends(get_live_status)):
    """What the live status surface shows right now; null when no rest is running."""
    session = surface.current()
    if session is None:
        return None
    return LiveStatusRead(
        remaining_seconds=session.state.remaining_seconds,
        exercise_name=session.state.exercise_name,
        started_at=session.state.started_at,
        ends_at=session.state.ends_at,
        workout_label=session.workout_label,
    )
