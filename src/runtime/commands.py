"""Dispatcher that applies page commands to the countdown and pomodoro session."""

from __future__ import annotations

import logging
from typing import Any, Optional

from contracts.ui_protocol import (
    COMMAND_CONFIGURE_PLAN,
    COMMAND_PAUSE,
    COMMAND_RESET,
    COMMAND_RESET_SESSION,
    COMMAND_RESUME,
    COMMAND_SELECT_DURATION,
    COMMAND_SELECT_PRESET,
    COMMAND_START,
    COMMAND_START_SESSION,
    COMMAND_TOGGLE,
)
from pacing import PaceController
from pomodoro import (
    ActionResult,
    CountdownEngine,
    DurationInputError,
    PlanInputError,
    PomodoroCycleController,
    PomodoroPlan,
    SessionActionResult,
    find_preset,
    parse_duration_input,
)
from pomodoro.constants import ACTION_SYNC
from pomodoro.durations import UNIT_MINUTES

from .messages import (
    TITLE_POMODORO,
    invalid_duration_text,
    invalid_plan_text,
    rejection_text,
    session_started_text,
)
from .notify import CompletionNotifier
from .ui import RuntimeUIPublisher


class RuntimeCommandDispatcher:
    """Routes page commands to the engine and the cycle controller.

    Invalid input is rejected here, before any state changes. Commands that
    are impossible in the current mode are reported back, never raised.
    """
    def __init__(
        self,
        *,
        logger: logging.Logger,
        engine: CountdownEngine,
        controller: PomodoroCycleController,
        pace: PaceController,
        ui: RuntimeUIPublisher,
        notifier: CompletionNotifier,
    ):
        self._logger = logger
        self._engine = engine
        self._controller = controller
        self._pace = pace
        self._ui = ui
        self._notifier = notifier

    def handle_command(self, command: dict[str, Any]) -> None:
        name = command.get("command")
        if name == COMMAND_SELECT_DURATION:
            self._select_duration(command.get("value"), command.get("unit"))
        elif name == COMMAND_SELECT_PRESET:
            self._select_preset(command.get("label"))
        elif name == COMMAND_START:
            self._apply_countdown(self._engine.start())
        elif name == COMMAND_PAUSE:
            self._apply_countdown(self._engine.pause())
        elif name == COMMAND_RESUME:
            self._apply_countdown(self._engine.resume())
        elif name == COMMAND_TOGGLE:
            self._apply_countdown(self._engine.toggle())
        elif name == COMMAND_RESET:
            self._pace.cancel()
            self._apply_countdown(self._engine.reset(), force_pace=True)
        elif name == COMMAND_START_SESSION:
            self._start_session()
        elif name == COMMAND_RESET_SESSION:
            self._apply_session(self._controller.reset_session())
        elif name == COMMAND_CONFIGURE_PLAN:
            self._configure_plan(command)
        else:
            self._logger.warning("Unsupported UI command: %s", name)
            self._ui.publish_error(f"Commande inconnue : {name}")

    def publish_sync(self, reason: str) -> None:
        self.publish_views(ACTION_SYNC, accepted=True, reason=reason)

    def publish_views(
        self,
        action: str,
        *,
        accepted: Optional[bool] = None,
        reason: str = "",
        timer_message: Optional[str] = None,
        session_message: Optional[str] = None,
    ) -> None:
        self._ui.publish_pomodoro_update(
            self._controller.snapshot(),
            self._controller.plan,
            action=action,
            accepted=accepted,
            reason=reason,
            session_running=self._controller.is_session_running(),
            message=session_message,
        )
        self._ui.publish_timer_update(
            self._engine.snapshot(),
            pace=self._pace.advice.pace,
            action=action,
            accepted=accepted,
            reason=reason,
            message=timer_message,
        )

    def _select_duration(self, raw_value: Any, raw_unit: Any) -> None:
        unit = raw_unit if isinstance(raw_unit, str) and raw_unit else UNIT_MINUTES
        try:
            seconds = parse_duration_input(raw_value, unit=unit)
        except DurationInputError as error:
            self._logger.info("Rejected duration input %r: %s", raw_value, error)
            self._ui.publish_error(invalid_duration_text(str(error)))
            return
        self._arm(seconds)

    def _select_preset(self, raw_label: Any) -> None:
        preset = find_preset(raw_label) if isinstance(raw_label, str) else None
        if preset is None:
            self._ui.publish_error(invalid_duration_text(f"préréglage inconnu {raw_label!r}"))
            return
        self._arm(preset.seconds)

    def _arm(self, seconds: int) -> None:
        self._pace.cancel()
        result = self._controller.select_duration(seconds)
        self._apply_countdown(result, force_pace=True)

    def _apply_countdown(self, result: ActionResult, *, force_pace: bool = False) -> None:
        message = None if result.accepted else rejection_text(result.action, result.reason)
        self.publish_views(
            result.action,
            accepted=result.accepted,
            reason=result.reason,
            timer_message=message,
        )
        if result.accepted:
            self._pace.refresh(result.snapshot, force=force_pace)

    def _start_session(self) -> None:
        result = self._controller.start_session()
        if result.accepted:
            self._pace.cancel()
            self._notifier.notify(TITLE_POMODORO, session_started_text(self._controller.active_plan))
        self._apply_session(result)

    def _configure_plan(self, command: dict[str, Any]) -> None:
        try:
            plan = PomodoroPlan.from_minutes(
                work_minutes=command.get("work_minutes"),
                short_break_minutes=command.get("short_break_minutes"),
                long_break_minutes=command.get("long_break_minutes"),
                cycles_before_long_break=self._controller.plan.cycles_before_long_break,
            )
        except PlanInputError as error:
            self._logger.info("Rejected pomodoro plan: %s", error)
            self._ui.publish_error(invalid_plan_text(str(error)))
            return
        self._apply_session(self._controller.update_plan(plan))

    def _apply_session(self, result: SessionActionResult) -> None:
        message = None if result.accepted else rejection_text(result.action, result.reason)
        self.publish_views(
            result.action,
            accepted=result.accepted,
            reason=result.reason,
            session_message=message,
        )
        if result.accepted:
            self._pace.refresh(result.countdown, force=True)
