from __future__ import annotations

from typing import Any, Optional, Protocol

from contracts.ui_protocol import (
    EVENT_ERROR,
    EVENT_NOTIFICATION,
    EVENT_PACE,
    EVENT_POMODORO,
    EVENT_TIMER,
)
from llm import PaceAdvice
from pomodoro import CountdownSnapshot, PomodoroPlan, PomodoroSnapshot

from .display import ProgressRing, control_label, format_clock, phase_label


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...


class RuntimeUIPublisher:
    """Turns engine, session, and pace state into websocket view events."""

    def __init__(
        self,
        ui_server: Optional[UIServerLike],
        *,
        ring: Optional[ProgressRing] = None,
    ):
        self._ui_server = ui_server
        self._ring = ring or ProgressRing()

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def publish_timer_update(
        self,
        snapshot: CountdownSnapshot,
        *,
        pace: float,
        action: str,
        accepted: Optional[bool] = None,
        reason: str = "",
        message: Optional[str] = None,
    ) -> None:
        payload: dict[str, Any] = {
            "action": action,
            "mode": snapshot.mode,
            "selected_seconds": snapshot.selected_seconds,
            "remaining_seconds": snapshot.remaining_seconds,
            "clock": format_clock(snapshot.remaining_seconds),
            "control": control_label(snapshot),
            "ring": self._ring.render(snapshot, pace),
        }
        if accepted is not None:
            payload["accepted"] = accepted
        if reason:
            payload["reason"] = reason
        if message:
            payload["message"] = message
        self.publish(EVENT_TIMER, **payload)

    def publish_pomodoro_update(
        self,
        snapshot: PomodoroSnapshot,
        plan: PomodoroPlan,
        *,
        action: str,
        accepted: Optional[bool] = None,
        reason: str = "",
        session_running: bool = False,
        message: Optional[str] = None,
    ) -> None:
        payload: dict[str, Any] = {
            "action": action,
            "phase": snapshot.phase,
            "phase_label": phase_label(snapshot.phase),
            "completed_work_cycles": snapshot.completed_work_cycles,
            "cycles_before_long_break": snapshot.cycles_before_long_break,
            "plan": {
                "work_minutes": plan.work_seconds // 60,
                "short_break_minutes": plan.short_break_seconds // 60,
                "long_break_minutes": plan.long_break_seconds // 60,
            },
            "plan_editable": not session_running,
        }
        if accepted is not None:
            payload["accepted"] = accepted
        if reason:
            payload["reason"] = reason
        if message:
            payload["message"] = message
        self.publish(EVENT_POMODORO, **payload)

    def publish_pace(self, advice: PaceAdvice, snapshot: CountdownSnapshot) -> None:
        self.publish(
            EVENT_PACE,
            pace=advice.pace,
            reasoning=advice.reasoning,
            transition_seconds=self._ring.transition_seconds(advice.pace),
            revision=snapshot.revision,
        )

    def publish_notification(self, title: str, message: str, *, vibrate_ms: int = 0) -> None:
        self.publish(EVENT_NOTIFICATION, title=title, message=message, vibrate_ms=vibrate_ms)

    def publish_error(self, message: str) -> None:
        self.publish(EVENT_ERROR, message=message)
