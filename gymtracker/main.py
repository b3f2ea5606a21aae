"""FastAPI application factory and lifespan."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gymtracker.api.v1 import api_router
from gymtracker.core.config import get_settings
from gymtracker.core.constants import DEFAULT_REST_SECONDS
from gymtracker.db.session import engine
from gymtracker.services.control_events import ControlEventBus, RestTimerControls
from gymtracker.services.live_status import AsyncioAlertScheduler, InMemoryLiveStatusSurface
from gymtracker.services.rest_timer import RestTimerCoordinator

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: nothing to warm up; shutdown: cancel pending alerts and dispose the engine."""
    # Tables come from Alembic (alembic upgrade head)
    yield
    for alert_id in list(app.state.alerts.pending):
        app.state.alerts.cancel(alert_id)
    await engine.dispose()


def build_rest_timer(app: FastAPI, live_status_enabled: bool = True) -> None:
    """Wire the rest timer, its surfaces and the control bus onto app.state (one set per app)."""
    app.state.alerts = AsyncioAlertScheduler()
    app.state.live_status = InMemoryLiveStatusSurface(enabled=live_status_enabled)
    app.state.rest_timer = RestTimerCoordinator(app.state.alerts, app.state.live_status)
    # A delivered end-of-rest alert ends the rest even if nobody is polling
    app.state.alerts.on_fire = lambda alert: app.state.rest_timer.alert_delivered(alert.alert_id)
    app.state.control_bus = ControlEventBus()
    # Refreshed from the settings row on settings reads, changes and start_rest signals
    app.state.timer_controls = RestTimerControls(app.state.rest_timer, DEFAULT_REST_SECONDS)
    app.state.control_bus.subscribe(app.state.timer_controls)


def create_application() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # CORS: allow everything in debug, localhost in dev, CORS_ORIGINS otherwise
    if settings.debug:
        cors_origins = ["*"]
    elif settings.environment == "development":
        cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    else:
        cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    build_rest_timer(app)

    @app.get("/")
    def root():
        return {"status": "ok", "message": "GymTracker API"}

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app


app = create_application()
