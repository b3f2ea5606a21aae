"""Control events from outside the app (lock screen, shortcuts, notification actions)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.api.deps import get_control_bus, get_timer_controls
from gymtracker.db.session import get_db
from gymtracker.services.app_settings import get_or_create_settings
from gymtracker.services.control_events import ControlEvent, ControlEventBus, RestTimerControls

router = APIRouter()


@router.post("/{event}", status_code=202)
async def publish_control_event(
    event: ControlEvent,
    db: AsyncSession = Depends(get_db),
    bus: ControlEventBus = Depends(get_control_bus),
    controls: RestTimerControls = Depends(get_timer_controls),
):
    """Broadcast a control signal. Always accepted; signals that do not apply right now are ignored."""
    if event == ControlEvent.START_REST:
        # Rest length comes from the stored settings, not from whatever was last cached
        controls.default_rest_seconds = (await get_or_create_settings(db)).default_rest_seconds
    bus.publish(event)
    return {"event": event.value, "accepted": True}


@router.get("/pending")
async def pending_workout_actions(controls: RestTimerControls = Depends(get_timer_controls)):
    """Workout actions (log set, next exercise, finish) received since the last poll; clears the queue."""
    return {"actions": [a.value for a in controls.drain_actions()]}
