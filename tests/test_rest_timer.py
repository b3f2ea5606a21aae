import asyncio
from datetime import timedelta

import pytest

from gymtracker.core.constants import REST_ALERT_BODY_DEFAULT, REST_ALERT_ID, REST_ALERT_TITLE
from gymtracker.core.enums import TimerState
from gymtracker.core.errors import ExternalServiceUnavailable
from gymtracker.services.live_status import AsyncioAlertScheduler, InMemoryLiveStatusSurface
from gymtracker.services.rest_timer import RestTimerCoordinator


def test_start_then_stop_releases_everything(timer, alerts, live_status):
    assert timer.start(90, "Squat", "A") is True
    assert timer.state == TimerState.RUNNING
    assert REST_ALERT_ID in alerts.pending
    assert len(live_status.sessions) == 1

    assert timer.stop() is True
    assert timer.state == TimerState.IDLE
    assert alerts.pending == {}
    assert live_status.sessions == {}
    assert timer.live_handle is None
    assert timer.end_time is None
    assert timer.exercise_name is None


def test_start_schedules_alert_and_live_status(timer, alerts, live_status, clock):
    timer.start(90, "Squat", "A")

    assert alerts.scheduled == [(REST_ALERT_ID, 90, REST_ALERT_TITLE, "חזרה ל-Squat")]
    session = live_status.current()
    assert session.workout_label == "A"
    assert session.state.remaining_seconds == 90
    assert session.state.exercise_name == "Squat"
    assert session.state.started_at == clock.now
    assert session.state.ends_at == clock.now + timedelta(seconds=90)


def test_alert_body_without_exercise(timer, alerts):
    timer.start(60)
    assert alerts.pending[REST_ALERT_ID] == (60, REST_ALERT_TITLE, REST_ALERT_BODY_DEFAULT)


def test_remaining_seconds_follows_the_clock(timer, clock):
    timer.start(90, "Bench")
    clock.advance(30)
    assert timer.remaining_seconds() == 60
    clock.advance(0.5)
    assert timer.remaining_seconds() == 60  # rounded up
    clock.advance(100)
    assert timer.remaining_seconds() == 0


@pytest.mark.parametrize("duration", [0, -5])
def test_non_positive_duration_is_ignored(timer, alerts, live_status, duration):
    assert timer.start(duration, "Squat") is False
    assert timer.state == TimerState.IDLE
    assert alerts.scheduled == []
    assert live_status.sessions == {}


def test_unavailable_live_status_blocks_start(alerts, clock):
    timer = RestTimerCoordinator(alerts, InMemoryLiveStatusSurface(enabled=False), clock=clock)
    assert timer.start(90, "Squat") is False
    assert timer.state == TimerState.IDLE
    assert alerts.scheduled == []


def test_idle_transitions_are_no_ops(timer, alerts, live_status):
    assert timer.skip() is False
    assert timer.stop() is False
    assert timer.add_minute() is False
    assert timer.tick(30) is False
    assert alerts.scheduled == []
    assert alerts.cancelled == []
    assert timer.snapshot().remaining_seconds == 0


def test_add_minute_extends_and_reschedules(timer, alerts, live_status, clock):
    timer.start(90, "Squat", "A")
    started = clock.now
    clock.advance(30)

    assert timer.add_minute() is True
    assert timer.remaining_seconds() == 120
    assert timer.end_time == started + timedelta(seconds=150)
    assert alerts.pending[REST_ALERT_ID][0] == 120
    session = live_status.current()
    assert session.state.remaining_seconds == 120
    assert session.state.ends_at == started + timedelta(seconds=150)
    assert len(session.history) == 1


def test_tick_only_updates_live_status(timer, alerts, live_status, clock):
    timer.start(90, "Squat")
    clock.advance(10)
    assert timer.tick(80) is True

    assert len(alerts.scheduled) == 1
    session = live_status.current()
    assert session.state.remaining_seconds == 80
    assert session.state.ends_at == clock.now + timedelta(seconds=80)


def test_skip_ends_the_rest(timer, alerts, live_status):
    timer.start(90, "Squat")
    assert timer.skip() is True
    assert alerts.cancelled == [REST_ALERT_ID]
    assert live_status.sessions == {}
    assert timer.skip() is False


def test_restart_replaces_the_previous_rest(timer, alerts, live_status, clock):
    timer.start(90, "Squat", "A")
    first_handle = timer.live_handle
    clock.advance(20)
    timer.start(120, "Bench", "A")

    assert len(live_status.sessions) == 1
    assert first_handle not in live_status.sessions
    assert alerts.pending == {REST_ALERT_ID: (120, REST_ALERT_TITLE, "חזרה ל-Bench")}
    assert timer.exercise_name == "Bench"
    assert timer.remaining_seconds() == 120


def test_refused_alert_does_not_stop_the_rest(alerts, live_status, clock):
    alerts.fail = True
    timer = RestTimerCoordinator(alerts, live_status, clock=clock)

    assert timer.start(90, "Squat") is True
    assert timer.is_running
    assert len(live_status.sessions) == 1
    assert timer.stop() is True
    assert live_status.sessions == {}


def test_failing_live_status_does_not_stop_the_rest(alerts, clock):
    class FlakySurface(InMemoryLiveStatusSurface):
        def request_session(self, state, workout_label=None):
            raise RuntimeError("surface crashed")

    timer = RestTimerCoordinator(alerts, FlakySurface(), clock=clock)
    assert timer.start(90, "Squat") is True
    assert timer.live_handle is None
    assert REST_ALERT_ID in alerts.pending
    assert timer.add_minute() is True
    assert timer.stop() is True
    assert alerts.pending == {}


def test_snapshot(timer, clock):
    timer.start(45, "Row", "B")
    snap = timer.snapshot()
    assert snap.state == TimerState.RUNNING
    assert snap.remaining_seconds == 45
    assert (snap.exercise_name, snap.workout_label) == ("Row", "B")
    assert snap.ends_at == clock.now + timedelta(seconds=45)


@pytest.mark.asyncio
async def test_asyncio_alert_fires():
    fired = []
    scheduler = AsyncioAlertScheduler(on_fire=fired.append)
    scheduler.schedule_once("rest", 0, "title", "body")
    assert scheduler.is_pending("rest")

    await asyncio.sleep(0.05)
    assert not scheduler.is_pending("rest")
    assert [a.body for a in scheduler.delivered] == ["body"]
    assert fired == scheduler.delivered


@pytest.mark.asyncio
async def test_asyncio_alert_cancel_and_replace():
    scheduler = AsyncioAlertScheduler()
    scheduler.schedule_once("rest", 0, "first", "body")
    scheduler.schedule_once("rest", 0, "second", "body")
    await asyncio.sleep(0.05)
    assert [a.title for a in scheduler.delivered] == ["second"]

    scheduler.schedule_once("rest", 0, "third", "body")
    scheduler.cancel("rest")
    await asyncio.sleep(0.05)
    assert [a.title for a in scheduler.delivered] == ["second"]


def test_asyncio_alert_needs_a_running_loop():
    with pytest.raises(ExternalServiceUnavailable):
        AsyncioAlertScheduler().schedule_once("rest", 10, "title", "body")


def test_rest_expires_when_its_time_has_passed(timer, alerts, live_status, clock):
    timer.start(90, "Squat")
    clock.advance(300)

    snap = timer.snapshot()
    assert snap.state == TimerState.IDLE
    assert snap.remaining_seconds == 0
    assert live_status.sessions == {}
    # The alert is due now; it is left to fire rather than cancelled
    assert alerts.cancelled == []


def test_add_minute_after_expiry_is_ignored(timer, alerts, live_status, clock):
    timer.start(90, "Squat")
    clock.advance(300)

    assert timer.add_minute() is False
    assert timer.state == TimerState.IDLE
    assert alerts.scheduled == [(REST_ALERT_ID, 90, REST_ALERT_TITLE, "חזרה ל-Squat")]
    assert live_status.sessions == {}


def test_skip_and_stop_after_expiry_are_no_ops(timer, clock):
    timer.start(90, "Squat")
    clock.advance(90)
    assert timer.skip() is False
    assert timer.stop() is False
    assert timer.state == TimerState.IDLE


def test_tick_to_zero_ends_the_rest(timer, alerts, live_status, clock):
    timer.start(90, "Squat")
    clock.advance(89)
    assert timer.tick(0) is True
    assert timer.state == TimerState.IDLE
    assert live_status.sessions == {}
    assert timer.tick(10) is False


def test_delivered_alert_ends_the_rest(timer, live_status):
    timer.start(90, "Squat")
    timer.alert_delivered("some_other_alert")
    assert timer.is_running

    timer.alert_delivered(REST_ALERT_ID)
    assert timer.state == TimerState.IDLE
    assert live_status.sessions == {}


def test_refused_restart_drops_the_previous_alert(timer, alerts, clock):
    timer.start(90, "Squat")
    clock.advance(20)
    alerts.fail = True

    assert timer.start(120, "Bench") is True
    assert alerts.pending == {}
    assert alerts.cancelled == [REST_ALERT_ID]


@pytest.mark.asyncio
async def test_asyncio_alert_ends_a_wired_rest(live_status):
    scheduler = AsyncioAlertScheduler()
    timer = RestTimerCoordinator(scheduler, live_status)
    scheduler.on_fire = lambda alert: timer.alert_delivered(alert.alert_id)

    timer.start(1, "Squat")
    await asyncio.sleep(1.2)
    assert timer.state == TimerState.IDLE
    assert [a.alert_id for a in scheduler.delivered] == [REST_ALERT_ID]
