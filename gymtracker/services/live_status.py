"""Outward surfaces of the rest timer: deferred alerts and the live status surface.

The coordinator only talks to the two protocols below. The in-process
implementations back the HTTP service: alerts fire from the event loop, and
the live status is kept in memory for an external renderer to poll.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Protocol

from gymtracker.core.errors import ExternalServiceUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiveStatusState:
    """Content pushed to the live status surface."""

    remaining_seconds: int
    exercise_name: str | None
    started_at: datetime
    ends_at: datetime


class AlertService(Protocol):
    def schedule_once(self, alert_id: str, fire_after_seconds: int, title: str, body: str) -> None: ...

    def cancel(self, alert_id: str) -> None: ...


class LiveStatusSurface(Protocol):
    def is_available(self) -> bool: ...

    def request_session(self, state: LiveStatusState, workout_label: str | None = None) -> str | None: ...

    def update(self, handle: str, state: LiveStatusState) -> None: ...

    def end(self, handle: str, immediate: bool = True) -> None: ...


@dataclass(frozen=True)
class DeliveredAlert:
    alert_id: str
    title: str
    body: str
    delivered_at: datetime


class AsyncioAlertScheduler:
    """One-shot alerts on the running event loop, keyed by id. Scheduling an id replaces its pending alert."""

    def __init__(self, on_fire: Callable[[DeliveredAlert], None] | None = None):
        self.on_fire = on_fire
        self.pending: dict[str, asyncio.TimerHandle] = {}
        self.delivered: list[DeliveredAlert] = []

    def schedule_once(self, alert_id: str, fire_after_seconds: int, title: str, body: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise ExternalServiceUnavailable("no running event loop to schedule alerts on") from e
        self.cancel(alert_id)
        self.pending[alert_id] = loop.call_later(max(0, fire_after_seconds), self._fire, alert_id, title, body)

    def cancel(self, alert_id: str) -> None:
        handle = self.pending.pop(alert_id, None)
        if handle is not None:
            handle.cancel()

    def is_pending(self, alert_id: str) -> bool:
        return alert_id in self.pending

    def _fire(self, alert_id: str, title: str, body: str) -> None:
        self.pending.pop(alert_id, None)
        alert = DeliveredAlert(alert_id=alert_id, title=title, body=body, delivered_at=datetime.now(timezone.utc))
        self.delivered.append(alert)
        logger.info("Alert %s delivered: %s", alert_id, title)
        if self.on_fire is not None:
            self.on_fire(alert)


@dataclass
class LiveStatusSession:
    handle: str
    workout_label: str | None
    state: LiveStatusState
    history: list[LiveStatusState] = field(default_factory=list)


class InMemoryLiveStatusSurface:
    """Live status sessions held in memory. `enabled=False` models a user who has not authorized the surface."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.sessions: dict[str, LiveStatusSession] = {}

    def is_available(self) -> bool:
        return self.enabled

    def request_session(self, state: LiveStatusState, workout_label: str | None = None) -> str | None:
        if not self.enabled:
            raise ExternalServiceUnavailable("live status surface is not authorized")
        handle = uuid.uuid4().hex
        self.sessions[handle] = LiveStatusSession(handle=handle, workout_label=workout_label, state=state)
        return handle

    def update(self, handle: str, state: LiveStatusState) -> None:
        session = self.sessions.get(handle)
        if session is None:
            return
        session.history.append(session.state)
        session.state = state

    def end(self, handle: str, immediate: bool = True) -> None:
        if self.sessions.pop(handle, None) is not None:
            logger.debug("Live status %s ended (immediate=%s)", handle, immediate)

    def current(self) -> LiveStatusSession | None:
        """Most recently requested session still alive."""
        if not self.sessions:
            return None
        return next(reversed(self.sessions.values()))
