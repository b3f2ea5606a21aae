"""Control events: payload-free signals that can come from outside the foreground UI
(lock-screen actions, shortcuts, notification buttons).

The bus only broadcasts. Turning a signal into a timer call is done by exactly
one subscriber, RestTimerControls; the coordinator never listens itself.
"""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from typing import Callable

from gymtracker.services.rest_timer import RestTimerCoordinator

logger = logging.getLogger(__name__)


class ControlEvent(str, Enum):
    SKIP_REST = "skip_rest"
    STOP_REST = "stop_rest"
    ADD_REST_MINUTE = "add_rest_minute"
    LOG_SET = "log_set"
    NEXT_EXERCISE = "next_exercise"
    START_REST = "start_rest"
    FINISH_WORKOUT = "finish_workout"


Subscriber = Callable[[ControlEvent], None]


class ControlEventBus:
    """Fire-and-forget broadcast. A failing subscriber is logged and the others still run."""

    def __init__(self):
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: ControlEvent) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("Control event subscriber failed on %s", event.value)


# Workout actions the session-logging UI picks up on its next poll
WORKOUT_ACTIONS = frozenset({ControlEvent.LOG_SET, ControlEvent.NEXT_EXERCISE, ControlEvent.FINISH_WORKOUT})


class RestTimerControls:
    """Foreground subscriber: maps rest signals onto the coordinator, queues workout signals."""

    def __init__(self, coordinator: RestTimerCoordinator, default_rest_seconds: int, max_pending: int = 50):
        self.coordinator = coordinator
        self.default_rest_seconds = default_rest_seconds
        self.exercise_name: str | None = None
        self.workout_label: str | None = None
        self.pending_actions: deque[ControlEvent] = deque(maxlen=max_pending)

    def set_context(self, exercise_name: str | None, workout_label: str | None = None) -> None:
        """Exercise the next externally started rest belongs to."""
        self.exercise_name = exercise_name
        self.workout_label = workout_label

    def __call__(self, event: ControlEvent) -> None:
        # A rest that has run out counts as over for every signal below
        self.coordinator.expire_if_due()
        if event == ControlEvent.SKIP_REST:
            # Skipping a rest moves on to the next exercise
            if self.coordinator.skip():
                self.pending_actions.append(ControlEvent.NEXT_EXERCISE)
        elif event == ControlEvent.STOP_REST:
            self.coordinator.stop()
        elif event == ControlEvent.ADD_REST_MINUTE:
            self.coordinator.add_minute()
        elif event == ControlEvent.START_REST:
            if not self.coordinator.is_running:
                self.coordinator.start(self.default_rest_seconds, self.exercise_name, self.workout_label)
        elif event == ControlEvent.NEXT_EXERCISE:
            # Ignored while resting; skip_rest is the way out of a rest
            if not self.coordinator.is_running:
                self.pending_actions.append(event)
        elif event in WORKOUT_ACTIONS:
            self.pending_actions.append(event)

    def drain_actions(self) -> list[ControlEvent]:
        actions = list(self.pending_actions)
        self.pending_actions.clear()
        return actions
