from __future__ import annotations

import logging
from typing import Callable, Protocol

from .models import GameSettings


logger = logging.getLogger(__name__)


class ScheduledTask:
    """Handle for a delayed callback. A cancelled task never runs."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True


class TaskScheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        ...


class SocketIOTaskScheduler:
    """Runs callbacks on Flask-SocketIO background tasks.

    Each callback runs while holding `lock`, the same lock inbound handlers
    take, so a timer never interleaves with an event for the same room.
    """

    def __init__(self, socketio, lock) -> None:
        self._socketio = socketio
        self._lock = lock

    def call_later(self, delay: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        task = ScheduledTask(name)

        def _runner() -> None:
            self._socketio.sleep(delay)
            with self._lock:
                if task.cancelled:
                    return
                task.fired = True
                try:
                    callback()
                except Exception:
                    logger.exception("[timer-error] task=%s", task.name)

        self._socketio.start_background_task(_runner)
        return task


def next_drawer_index(current: int, player_count: int) -> int:
    return (current + 1) % player_count


def drawer_index_after_removal(current: int, removed_at: int, remaining: int) -> int:
    """Keep rotation order stable when the player at `removed_at` leaves.

    The next advance lands on whoever followed the departed player.
    """
    if current < 0 or remaining <= 0:
        return -1
    if removed_at < current:
        return current - 1
    if removed_at == current:
        return (current - 1) % remaining
    return current


class TurnScheduler:
    """Word-choice timeout, round countdown and the pause between rounds.

    At most one task of each kind is live; arming one cancels its predecessor.
    """

    def __init__(self, room_code: str, tasks: TaskScheduler, settings: GameSettings) -> None:
        self.room_code = room_code
        self._tasks = tasks
        self._settings = settings
        self._choose_task: ScheduledTask | None = None
        self._countdown_task: ScheduledTask | None = None
        self._pause_task: ScheduledTask | None = None
        self.remaining = 0

    @property
    def pending(self) -> list[ScheduledTask]:
        tasks = (self._choose_task, self._countdown_task, self._pause_task)
        return [t for t in tasks if t is not None and t.pending]

    def arm_word_choice(self, on_timeout: Callable[[], None]) -> None:
        self.cancel_word_choice()
        delay = self._settings.choose_duration_sec
        logger.debug("[timer-set] room=%s kind=choose duration=%ss", self.room_code, delay)
        self._choose_task = self._tasks.call_later(delay, on_timeout, name=f"{self.room_code}:choose")

    def cancel_word_choice(self) -> None:
        if self._choose_task is not None:
            self._choose_task.cancel()
            self._choose_task = None

    def start_countdown(self, on_tick: Callable[[int], None], on_expire: Callable[[], None]) -> None:
        """Tick once per second, then expire when the countdown hits zero.

        Each tick is armed only after the previous one finished broadcasting.
        """
        self.cancel_countdown()
        self.remaining = self._settings.round_duration_sec
        logger.debug("[timer-set] room=%s kind=countdown duration=%ss", self.room_code, self.remaining)

        def _tick() -> None:
            self.remaining = max(0, self.remaining - 1)
            on_tick(self.remaining)
            if self.remaining <= 0:
                self._countdown_task = None
                on_expire()
                return
            self._countdown_task = self._tasks.call_later(1, _tick, name=f"{self.room_code}:tick")

        self._countdown_task = self._tasks.call_later(1, _tick, name=f"{self.room_code}:tick")

    def cancel_countdown(self) -> None:
        if self._countdown_task is not None:
            self._countdown_task.cancel()
            self._countdown_task = None

    def schedule_next_round(self, callback: Callable[[], None]) -> None:
        self.cancel_pause()
        delay = self._settings.round_end_pause_sec
        self._pause_task = self._tasks.call_later(delay, callback, name=f"{self.room_code}:pause")

    def cancel_pause(self) -> None:
        if self._pause_task is not None:
            self._pause_task.cancel()
            self._pause_task = None

    def cancel_all(self) -> None:
        self.cancel_word_choice()
        self.cancel_countdown()
        self.cancel_pause()
