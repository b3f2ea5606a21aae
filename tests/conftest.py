"""Shared fixtures: a throwaway SQLite database per test, the app wired to it, and rest timer fakes."""

import os

# Must be set before anything imports gymtracker (the engine is built at import)
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite:///./gymtracker-test.db")
os.environ.setdefault("TIMEZONE", "UTC")

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from gymtracker.core.errors import ExternalServiceUnavailable
from gymtracker.db.base import Base
from gymtracker.db.session import enable_sqlite_savepoints, get_db
from gymtracker.main import create_application
from gymtracker.models import *  # noqa: F401, F403 - register all models
from gymtracker.services.live_status import InMemoryLiveStatusSurface
from gymtracker.services.rest_timer import RestTimerCoordinator


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    enable_sqlite_savepoints(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def app(session_maker):
    app = create_application()

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    # Do not leave rest alerts scheduled on the test loop
    for alert_id in list(app.state.alerts.pending):
        app.state.alerts.cancel(alert_id)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeAlerts:
    """Records alert calls. With fail=True every schedule is refused like a denied permission."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.pending: dict[str, tuple[int, str, str]] = {}
        self.scheduled: list[tuple[str, int, str, str]] = []
        self.cancelled: list[str] = []

    def schedule_once(self, alert_id, fire_after_seconds, title, body):
        if self.fail:
            raise ExternalServiceUnavailable("notifications not permitted")
        self.scheduled.append((alert_id, fire_after_seconds, title, body))
        self.pending[alert_id] = (fire_after_seconds, title, body)

    def cancel(self, alert_id):
        self.cancelled.append(alert_id)
        self.pending.pop(alert_id, None)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 3, 10, 0, tzinfo=timezone.utc))


@pytest.fixture
def alerts():
    return FakeAlerts()


@pytest.fixture
def live_status():
    return InMemoryLiveStatusSurface()


@pytest.fixture
def timer(alerts, live_status, clock):
    return RestTimerCoordinator(alerts, live_status, clock=clock)
