"""Rest timer coordinator.

Owns the authoritative rest countdown and keeps the two outward surfaces in
step with it: one deferred alert (fixed id, so a new schedule replaces the old
one) and one live status session. Either surface may fail; failures are logged
and never stop the other surface or the countdown itself.

Calls on one instance must be serialized by the caller.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from gymtracker.core.constants import (
    ADD_MINUTE_SECONDS,
    REST_ALERT_BODY_DEFAULT,
    REST_ALERT_ID,
    REST_ALERT_TITLE,
)
from gymtracker.core.enums import TimerState
from gymtracker.core.errors import ExternalServiceUnavailable
from gymtracker.services.live_status import AlertService, LiveStatusState, LiveStatusSurface

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TimerSnapshot:
    state: TimerState
    remaining_seconds: int
    exercise_name: str | None
    workout_label: str | None
    started_at: datetime | None
    ends_at: datetime | None


class RestTimerCoordinator:
    """Idle/Running state machine for the rest timer."""

    def __init__(
        self,
        alerts: AlertService,
        live_status: LiveStatusSurface,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.alerts = alerts
        self.live_status = live_status
        self.clock = clock
        self.state = TimerState.IDLE
        self.started_at: datetime | None = None
        self.end_time: datetime | None = None
        self.exercise_name: str | None = None
        self.workout_label: str | None = None
        self.live_handle: str | None = None

    @property
    def is_running(self) -> bool:
        return self.state == TimerState.RUNNING

    def remaining_seconds(self) -> int:
        if not self.is_running or self.end_time is None:
            return 0
        return max(0, math.ceil((self.end_time - self.clock()).total_seconds()))

    def snapshot(self) -> TimerSnapshot:
        self.expire_if_due()
        return TimerSnapshot(
            state=self.state,
            remaining_seconds=self.remaining_seconds(),
            exercise_name=self.exercise_name,
            workout_label=self.workout_label,
            started_at=self.started_at,
            ends_at=self.end_time,
        )

    # ── transitions ─────────────────────────────────────────────────────

    def start(self, duration_seconds: int, exercise_name: str | None = None, workout_label: str | None = None) -> bool:
        """Start (or restart) a rest. Returns False when ignored: non-positive duration or no live status surface."""
        if duration_seconds <= 0:
            return False
        if not self._live_status_available():
            logger.info("Rest timer not started: live status surface unavailable")
            return False

        # Last write wins: drop whatever the previous run still holds
        if self.is_running:
            self._cancel_alert()
        self._end_live_status()

        now = self.clock()
        self.state = TimerState.RUNNING
        self.started_at = now
        self.end_time = now + timedelta(seconds=duration_seconds)
        self.exercise_name = exercise_name
        self.workout_label = workout_label

        self._schedule_alert(duration_seconds)
        initial = LiveStatusState(
            remaining_seconds=duration_seconds,
            exercise_name=exercise_name,
            started_at=now,
            ends_at=self.end_time,
        )
        try:
            self.live_handle = self.live_status.request_session(initial, workout_label)
        except ExternalServiceUnavailable as e:
            logger.warning("Live status session refused: %s", e)
            self.live_handle = None
        except Exception:
            logger.exception("Live status session request failed")
            self.live_handle = None

        logger.info("Rest started: %ds (%s)", duration_seconds, exercise_name or "-")
        return True

    def add_minute(self) -> bool:
        """Extend the running rest by a minute. The alert is rescheduled to the new end time."""
        if self.expire_if_due() or not self.is_running or self.end_time is None:
            return False
        self.end_time += timedelta(seconds=ADD_MINUTE_SECONDS)
        remaining = self.remaining_seconds()
        self._push_live_status(remaining, self.end_time)
        self._schedule_alert(remaining)
        return True

    def tick(self, remaining_seconds: int) -> bool:
        """Foreground countdown update; only the live status is touched. Reaching zero ends the rest."""
        if self.expire_if_due() or not self.is_running:
            return False
        remaining = max(0, remaining_seconds)
        if remaining == 0:
            return self._finish("expired", cancel_alert=False)
        self._push_live_status(remaining, self.clock() + timedelta(seconds=remaining))
        return True

    def skip(self) -> bool:
        if self.expire_if_due():
            return False
        return self._finish("skipped")

    def stop(self) -> bool:
        if self.expire_if_due():
            return False
        return self._finish("stopped")

    def expire_if_due(self) -> bool:
        """End a rest whose end time has passed. The alert is left to fire. Returns True if it ended one."""
        if not self.is_running or self.end_time is None or self.clock() < self.end_time:
            return False
        return self._finish("expired", cancel_alert=False)

    def alert_delivered(self, alert_id: str) -> None:
        """The end-of-rest alert fired: the rest is over whatever the clock says."""
        if alert_id == REST_ALERT_ID and self.is_running:
            self._finish("expired", cancel_alert=False)

    # ── surfaces ───────────────────────────────────────────────────────

    def _finish(self, reason: str, cancel_alert: bool = True) -> bool:
        if not self.is_running:
            return False
        if cancel_alert:
            self._cancel_alert()
        self._end_live_status()
        self.state = TimerState.IDLE
        self.started_at = None
        self.end_time = None
        self.exercise_name = None
        self.workout_label = None
        logger.info("Rest %s", reason)
        return True

    def _cancel_alert(self) -> None:
        try:
            self.alerts.cancel(REST_ALERT_ID)
        except Exception:
            logger.exception("Cancelling rest alert failed")

    def _live_status_available(self) -> bool:
        try:
            return bool(self.live_status.is_available())
        except Exception:
            logger.exception("Live status availability check failed")
            return False

    def _schedule_alert(self, fire_after_seconds: int) -> None:
        if self.exercise_name:
            body = f"חזרה ל-{self.exercise_name}"
        else:
            body = REST_ALERT_BODY_DEFAULT
        try:
            self.alerts.schedule_once(REST_ALERT_ID, fire_after_seconds, REST_ALERT_TITLE, body)
        except ExternalServiceUnavailable as e:
            logger.warning("Rest alert not scheduled: %s", e)
        except Exception:
            logger.exception("Scheduling rest alert failed")

    def _push_live_status(self, remaining_seconds: int, ends_at: datetime) -> None:
        if self.live_handle is None or self.started_at is None:
            return
        state = LiveStatusState(
            remaining_seconds=remaining_seconds,
            exercise_name=self.exercise_name,
            started_at=self.started_at,
            ends_at=ends_at,
        )
        try:
            self.live_status.update(self.live_handle, state)
        except Exception:
            logger.exception("Live status update failed")

    def _end_live_status(self) -> None:
        handle, self.live_handle = self.live_handle, None
        if handle is None:
            return
        try:
            self.live_status.end(handle, immediate=True)
        except Exception:
            logger.exception("Ending live status failed")
