"""Request dependencies for per-application services kept on app.state."""

from fastapi import Request

from gymtracker.services.control_events import ControlEventBus, RestTimerControls
from gymtracker.services.live_status import InMemoryLiveStatusSurface
from gymtracker.services.rest_timer import RestTimerCoordinator


def get_rest_timer(request: Request) -> RestTimerCoordinator:
    return request.app.state.rest_timer


def get_live_status(request: Request) -> InMemoryLiveStatusSurface:
    return request.app.state.live_status


def get_control_bus(request: Request) -> ControlEventBus:
    return request.app.state.control_bus


def get_timer_controls(request: Request) -> RestTimerControls:
    return request.app.state.timer_controls
