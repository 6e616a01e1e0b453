"""Runtime orchestration for the countdown, pomodoro session, pace, and UI."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from app_config import AppConfig
from audio import ChimePlayer
from pacing import PaceAdvisor, PaceController
from pomodoro import (
    CountdownEngine,
    CountdownTick,
    PomodoroCycleController,
    PomodoroEvent,
    PomodoroPlan,
    TickScheduler,
)
from pomodoro.constants import ACTION_TICK, REASON_STARTUP, REASON_TICK
from server import UIServer

from .commands import RuntimeCommandDispatcher
from .messages import TITLE_POMODORO, TITLE_TIMER, pomodoro_event_text
from .notify import CompletionNotifier, NotifierDependencies
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class RuntimeHooks:
    """Injectable lifecycle hooks used by runtime startup and shutdown flow."""
    setup_signal_handlers: Callable[[Callable[[], None]], None]


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime."""
    logger: logging.Logger
    app_config: AppConfig
    pace_advisor: PaceAdvisor
    ui_server: Optional[UIServer]
    chime: Optional[ChimePlayer]
    hooks: RuntimeHooks
    close_advisor: Optional[Callable[[], None]] = None


class ChronoZenRuntime:
    """Wires the countdown engine to the session, pace, and UI layers.

    Everything runs on the event loop passed as ``scheduler``; the only work
    leaving the loop is the model call and the chime playback.
    """

    def __init__(self, bootstrap: RuntimeBootstrap, *, scheduler: TickScheduler):
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        config = bootstrap.app_config

        self._engine = CountdownEngine(
            scheduler,
            duration_seconds=config.timer.default_seconds,
            logger=logging.getLogger("timer"),
        )
        self._controller = PomodoroCycleController(
            self._engine,
            plan=PomodoroPlan.from_minutes(
                work_minutes=config.pomodoro.work_minutes,
                short_break_minutes=config.pomodoro.short_break_minutes,
                long_break_minutes=config.pomodoro.long_break_minutes,
                cycles_before_long_break=config.pomodoro.cycles_before_long_break,
            ),
            logger=logging.getLogger("pomodoro"),
        )
        self._ui = RuntimeUIPublisher(bootstrap.ui_server)
        self._pace = PaceController(
            bootstrap.pace_advisor,
            current_snapshot=self._engine.snapshot,
            on_pace=self._ui.publish_pace,
            min_interval_seconds=config.pace.min_interval_seconds,
            timeout_seconds=config.pace.timeout_seconds,
            logger=logging.getLogger("pace"),
        )
        self._notifier = CompletionNotifier(
            NotifierDependencies(
                ui=self._ui,
                logger=self._logger,
                chime=bootstrap.chime,
                vibrate_ms=config.notifications.vibrate_ms,
            )
        )
        self._dispatcher = RuntimeCommandDispatcher(
            logger=self._logger,
            engine=self._engine,
            controller=self._controller,
            pace=self._pace,
            ui=self._ui,
            notifier=self._notifier,
        )

        self._engine.subscribe(self._on_countdown_tick)
        self._controller.subscribe(self._on_pomodoro_event)
        self._stop_requested: Optional[asyncio.Event] = None

    @property
    def engine(self) -> CountdownEngine:
        return self._engine

    @property
    def controller(self) -> PomodoroCycleController:
        return self._controller

    @property
    def dispatcher(self) -> RuntimeCommandDispatcher:
        return self._dispatcher

    def request_stop(self) -> None:
        if self._stop_requested is not None:
            self._stop_requested.set()

    async def run(self) -> int:
        self._stop_requested = asyncio.Event()
        ui_server = self._bootstrap.ui_server
        try:
            if ui_server is not None:
                ui_server.set_command_handler(self._dispatcher.handle_command)
                await ui_server.start()

            self._bootstrap.hooks.setup_signal_handlers(self.request_stop)
            self._publish_startup_sync()
            self._logger.info("Ready! Timer set to %ss", self._engine.snapshot().selected_seconds)

            await self._stop_requested.wait()
            self._logger.info("Shutdown requested.")
            return 0
        except Exception as error:
            self._logger.error("Unexpected error: %s", error, exc_info=True)
            return 1
        finally:
            await self._shutdown()

    def _publish_startup_sync(self) -> None:
        self._dispatcher.publish_sync(REASON_STARTUP)
        self._pace.refresh(self._engine.snapshot(), force=True)

    def _on_countdown_tick(self, tick: CountdownTick) -> None:
        # Completions are published from the session event, after re-arming.
        if tick.completed:
            return
        self._ui.publish_timer_update(
            tick.snapshot,
            pace=self._pace.advice.pace,
            action=ACTION_TICK,
            reason=REASON_TICK,
        )
        self._pace.refresh(tick.snapshot)

    def _on_pomodoro_event(self, event: PomodoroEvent) -> None:
        title = TITLE_TIMER if event.previous_phase is None else TITLE_POMODORO
        self._notifier.notify_completion(title, pomodoro_event_text(event))
        self._pace.cancel()
        self._dispatcher.publish_views(event.action, accepted=True, reason=event.action)
        self._pace.refresh(event.countdown, force=True)

    async def _shutdown(self) -> None:
        self._logger.info("Stopping countdown...")
        self._engine.shutdown()
        self._pace.cancel()

        ui_server = self._bootstrap.ui_server
        if ui_server is not None:
            self._logger.info("Stopping UI server...")
            try:
                await ui_server.stop()
            except Exception as error:
                self._logger.error("Error stopping UI server: %s", error, exc_info=True)

        if self._bootstrap.close_advisor is not None:
            self._bootstrap.close_advisor()
        self._notifier.close()
