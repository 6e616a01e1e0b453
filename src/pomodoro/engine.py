"""Single-loop countdown state machine driven by one repeating 1 Hz tick."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional, Protocol

from .constants import (
    ACTION_PAUSE,
    ACTION_RESET,
    ACTION_RESUME,
    ACTION_SELECT,
    ACTION_START,
    DEFAULT_TIMER_SECONDS,
    MODE_IDLE,
    MODE_PAUSED,
    MODE_RUNNING,
    REASON_ALREADY_RUNNING,
    REASON_NOT_PAUSED,
    REASON_NOT_RUNNING,
    REASON_PAUSED,
    REASON_RESET,
    REASON_RESTARTED,
    REASON_RESUMED,
    REASON_SELECTED,
    REASON_STARTED,
    TICK_INTERVAL_SECONDS,
)

CountdownMode = Literal["idle", "running", "paused"]


class Cancellable(Protocol):
    def cancel(self) -> None:
        ...


class TickScheduler(Protocol):
    """Anything with ``call_later``; an asyncio event loop qualifies."""

    def call_later(self, delay: float, callback: Callable[..., object], *args: object) -> Cancellable:
        ...


@dataclass(frozen=True)
class CountdownSnapshot:
    """Immutable countdown state exposed to the controller and the UI."""
    mode: CountdownMode
    selected_seconds: int
    remaining_seconds: int
    revision: int = 0

    @property
    def is_running(self) -> bool:
        return self.mode == MODE_RUNNING

    @property
    def is_dirty(self) -> bool:
        """True when an idle countdown would restart instead of resume."""
        return self.remaining_seconds == 0 or self.remaining_seconds < self.selected_seconds

    @property
    def progress(self) -> float:
        if self.selected_seconds <= 0:
            return 0.0
        return (self.selected_seconds - self.remaining_seconds) / self.selected_seconds


@dataclass(frozen=True)
class ActionResult:
    """Result envelope returned after applying a countdown or session command."""
    action: str
    accepted: bool
    reason: str
    snapshot: CountdownSnapshot


@dataclass(frozen=True)
class CountdownTick:
    """Tick payload emitted to subscribers while the countdown runs."""
    snapshot: CountdownSnapshot
    completed: bool = False


TickListener = Callable[[CountdownTick], None]


class CountdownEngine:
    """Countdown with idle/running/paused modes.

    The engine owns exactly one scheduled tick handle. It is created when the
    countdown enters running and cancelled on every exit from running.
    """

    def __init__(
        self,
        scheduler: TickScheduler,
        *,
        duration_seconds: int = DEFAULT_TIMER_SECONDS,
        tick_interval_seconds: float = TICK_INTERVAL_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        if duration_seconds <= 0:
            raise ValueError("duration_seconds must be greater than zero")

        self._scheduler = scheduler
        self._tick_interval_seconds = tick_interval_seconds
        self._logger = logger or logging.getLogger("timer")

        self._mode: CountdownMode = MODE_IDLE
        self._selected_seconds = int(duration_seconds)
        self._remaining_seconds = self._selected_seconds
        self._revision = 0
        self._tick_handle: Optional[Cancellable] = None
        self._listeners: list[TickListener] = []

    @property
    def has_active_tick(self) -> bool:
        return self._tick_handle is not None

    def subscribe(self, listener: TickListener) -> None:
        self._listeners.append(listener)

    def snapshot(self) -> CountdownSnapshot:
        return CountdownSnapshot(
            mode=self._mode,
            selected_seconds=self._selected_seconds,
            remaining_seconds=self._remaining_seconds,
            revision=self._revision,
        )

    def select_duration(self, seconds: int) -> ActionResult:
        if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds <= 0:
            raise ValueError(f"duration must be a positive integer, got: {seconds!r}")

        self._cancel_tick()
        self._selected_seconds = seconds
        self._remaining_seconds = seconds
        self._mode = MODE_IDLE
        self._revision += 1
        self._logger.info("Countdown armed: duration=%ss", seconds)
        return self._result(ACTION_SELECT, True, REASON_SELECTED)

    def start(self) -> ActionResult:
        if self._mode == MODE_RUNNING:
            return self._result(ACTION_START, False, REASON_ALREADY_RUNNING)

        if self._mode == MODE_PAUSED:
            return self._resume(ACTION_START)

        reason = REASON_STARTED
        if self._remaining_seconds == 0 or self._remaining_seconds < self._selected_seconds:
            self._remaining_seconds = self._selected_seconds
            reason = REASON_RESTARTED

        self._enter_running()
        self._logger.info(
            "Countdown started: duration=%ss remaining=%ss",
            self._selected_seconds,
            self._remaining_seconds,
        )
        return self._result(ACTION_START, True, reason)

    def pause(self) -> ActionResult:
        if self._mode != MODE_RUNNING:
            return self._result(ACTION_PAUSE, False, REASON_NOT_RUNNING)

        self._cancel_tick()
        self._mode = MODE_PAUSED
        self._logger.info("Countdown paused: remaining=%ss", self._remaining_seconds)
        return self._result(ACTION_PAUSE, True, REASON_PAUSED)

    def resume(self) -> ActionResult:
        return self._resume(ACTION_RESUME)

    def toggle(self) -> ActionResult:
        if self._mode == MODE_RUNNING:
            return self.pause()
        if self._mode == MODE_PAUSED:
            return self.resume()
        return self.start()

    def reset(self) -> ActionResult:
        self._cancel_tick()
        self._remaining_seconds = self._selected_seconds
        self._mode = MODE_IDLE
        self._revision += 1
        self._logger.info("Countdown reset: duration=%ss", self._selected_seconds)
        return self._result(ACTION_RESET, True, REASON_RESET)

    def tick(self) -> Optional[CountdownTick]:
        """Advance the countdown by one second; a no-op unless running."""
        if self._mode != MODE_RUNNING:
            return None

        self._remaining_seconds = max(0, self._remaining_seconds - 1)
        completed = self._remaining_seconds == 0
        if completed:
            self._cancel_tick()
            self._mode = MODE_IDLE
            self._logger.info("Countdown completed: duration=%ss", self._selected_seconds)

        tick = CountdownTick(snapshot=self.snapshot(), completed=completed)
        for listener in tuple(self._listeners):
            listener(tick)
        return tick

    def shutdown(self) -> None:
        self._cancel_tick()

    def _resume(self, action: str) -> ActionResult:
        if self._mode != MODE_PAUSED:
            return self._result(action, False, REASON_NOT_PAUSED)

        self._enter_running()
        self._logger.info("Countdown resumed: remaining=%ss", self._remaining_seconds)
        return self._result(action, True, REASON_RESUMED)

    def _enter_running(self) -> None:
        self._cancel_tick()
        self._mode = MODE_RUNNING
        self._schedule_tick()

    def _schedule_tick(self) -> None:
        self._tick_handle = self._scheduler.call_later(
            self._tick_interval_seconds,
            self._on_scheduled_tick,
        )

    def _on_scheduled_tick(self) -> None:
        self._tick_handle = None
        self.tick()
        # Listeners may already have re-armed the engine for the next phase.
        if self._mode == MODE_RUNNING and self._tick_handle is None:
            self._schedule_tick()

    def _cancel_tick(self) -> None:
        handle = self._tick_handle
        self._tick_handle = None
        if handle is not None:
            handle.cancel()

    def _result(self, action: str, accepted: bool, reason: str) -> ActionResult:
        return ActionResult(
            action=action,
            accepted=accepted,
            reason=reason,
            snapshot=self.snapshot(),
        )
