"""Pomodoro phase sequencing layered on top of the countdown engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from .constants import (
    ACTION_COMPLETED,
    ACTION_PHASE_CHANGED,
    ACTION_RESET_SESSION,
    ACTION_SESSION_COMPLETED,
    ACTION_START_SESSION,
    ACTION_UPDATE_PLAN,
    PHASE_LONG_BREAK,
    PHASE_SHORT_BREAK,
    PHASE_WORK,
    REASON_PLAN_UPDATED,
    REASON_SESSION_RESET,
    REASON_SESSION_RUNNING,
    REASON_SESSION_STARTED,
)
from .engine import ActionResult, CountdownEngine, CountdownSnapshot, CountdownTick
from .plan import PomodoroPlan

PomodoroPhase = Optional[Literal["work", "short_break", "long_break"]]


@dataclass(frozen=True)
class PomodoroSnapshot:
    """Immutable session progress; ``phase`` is None in plain countdown mode."""
    phase: PomodoroPhase
    completed_work_cycles: int
    cycles_before_long_break: int

    @property
    def is_active(self) -> bool:
        return self.phase is not None


@dataclass(frozen=True)
class PomodoroEvent:
    """Emitted when a countdown completes, with the resulting session state."""
    action: str
    previous_phase: PomodoroPhase
    snapshot: PomodoroSnapshot
    countdown: CountdownSnapshot
    plan: PomodoroPlan


@dataclass(frozen=True)
class SessionActionResult:
    action: str
    accepted: bool
    reason: str
    snapshot: PomodoroSnapshot
    countdown: CountdownSnapshot


PomodoroListener = Callable[[PomodoroEvent], None]


class PomodoroCycleController:
    """Sequences work, short-break, and long-break phases.

    Every phase change auto-starts the next countdown, except the final
    long-break completion which ends the session and leaves the engine idle.
    """

    def __init__(
        self,
        engine: CountdownEngine,
        *,
        plan: Optional[PomodoroPlan] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._engine = engine
        self._logger = logger or logging.getLogger("pomodoro")
        self._pending_plan = plan or PomodoroPlan()
        self._active_plan = self._pending_plan
        self._phase: PomodoroPhase = None
        self._completed_work_cycles = 0
        self._listeners: list[PomodoroListener] = []
        engine.subscribe(self._on_countdown_tick)

    @property
    def plan(self) -> PomodoroPlan:
        """Plan that the next ``start_session`` will use."""
        return self._pending_plan

    @property
    def active_plan(self) -> PomodoroPlan:
        return self._active_plan

    def subscribe(self, listener: PomodoroListener) -> None:
        self._listeners.append(listener)

    def snapshot(self) -> PomodoroSnapshot:
        return PomodoroSnapshot(
            phase=self._phase,
            completed_work_cycles=self._completed_work_cycles,
            cycles_before_long_break=self._active_plan.cycles_before_long_break,
        )

    def is_session_running(self) -> bool:
        return self._phase is not None and self._engine.snapshot().is_running

    def start_session(self, plan: Optional[PomodoroPlan] = None) -> SessionActionResult:
        if self.is_session_running():
            return self._result(ACTION_START_SESSION, False, REASON_SESSION_RUNNING)

        if plan is not None:
            self._pending_plan = plan
        self._active_plan = self._pending_plan
        self._completed_work_cycles = 1
        self._phase = PHASE_WORK
        self._engine.select_duration(self._active_plan.work_seconds)
        self._engine.start()
        self._logger.info(
            "Pomodoro session started: work=%ss short=%ss long=%ss cycles=%s",
            self._active_plan.work_seconds,
            self._active_plan.short_break_seconds,
            self._active_plan.long_break_seconds,
            self._active_plan.cycles_before_long_break,
        )
        return self._result(ACTION_START_SESSION, True, REASON_SESSION_STARTED)

    def reset_session(self) -> SessionActionResult:
        if self._engine.snapshot().is_running:
            return self._result(ACTION_RESET_SESSION, False, REASON_SESSION_RUNNING)

        self._clear_session()
        self._active_plan = self._pending_plan
        self._engine.select_duration(self._active_plan.work_seconds)
        self._logger.info("Pomodoro session reset")
        return self._result(ACTION_RESET_SESSION, True, REASON_SESSION_RESET)

    def update_plan(self, plan: PomodoroPlan) -> SessionActionResult:
        if self.is_session_running():
            return self._result(ACTION_UPDATE_PLAN, False, REASON_SESSION_RUNNING)

        self._pending_plan = plan
        self._logger.info("Pomodoro plan updated: %s", plan)
        return self._result(ACTION_UPDATE_PLAN, True, REASON_PLAN_UPDATED)

    def select_duration(self, seconds: int) -> ActionResult:
        """Plain countdown selection; ends any pomodoro session."""
        if self._phase is not None:
            self._logger.info("Pomodoro session abandoned by plain duration selection")
            self._clear_session()
        return self._engine.select_duration(seconds)

    def _on_countdown_tick(self, tick: CountdownTick) -> None:
        if not tick.completed:
            return

        previous_phase = self._phase
        if previous_phase is None:
            self._emit(ACTION_COMPLETED, previous_phase)
            return

        plan = self._active_plan
        if previous_phase == PHASE_WORK:
            if self._completed_work_cycles < plan.cycles_before_long_break:
                self._enter_phase(PHASE_SHORT_BREAK)
            else:
                self._enter_phase(PHASE_LONG_BREAK)
        elif previous_phase == PHASE_SHORT_BREAK:
            self._completed_work_cycles += 1
            self._enter_phase(PHASE_WORK)
        else:
            self._clear_session()
            self._engine.select_duration(plan.work_seconds)
            self._logger.info("Pomodoro session completed")
            self._emit(ACTION_SESSION_COMPLETED, previous_phase)
            return

        self._emit(ACTION_PHASE_CHANGED, previous_phase)

    def _enter_phase(self, phase: str) -> None:
        self._phase = phase  # type: ignore[assignment]
        self._engine.select_duration(self._active_plan.seconds_for(phase))
        self._engine.start()
        self._logger.info(
            "Pomodoro phase: %s (cycle %s/%s)",
            phase,
            self._completed_work_cycles,
            self._active_plan.cycles_before_long_break,
        )

    def _clear_session(self) -> None:
        self._phase = None
        self._completed_work_cycles = 0

    def _emit(self, action: str, previous_phase: PomodoroPhase) -> None:
        event = PomodoroEvent(
            action=action,
            previous_phase=previous_phase,
            snapshot=self.snapshot(),
            countdown=self._engine.snapshot(),
            plan=self._active_plan,
        )
        for listener in tuple(self._listeners):
            listener(event)

    def _result(self, action: str, accepted: bool, reason: str) -> SessionActionResult:
        return SessionActionResult(
            action=action,
            accepted=accepted,
            reason=reason,
            snapshot=self.snapshot(),
            countdown=self._engine.snapshot(),
        )
