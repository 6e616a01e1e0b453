import asyncio
import logging
import unittest

from app_config_schema import (
    AppConfig,
    LLMSettings,
    NotificationSettings,
    PaceSettings,
    PomodoroSettings,
    TimerSettings,
    UIServerSettings,
)
from pacing import RulePaceAdvisor
from runtime import ChronoZenRuntime, RuntimeBootstrap, RuntimeHooks


class _Handle:
    def __init__(self, callback) -> None:
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class _ManualScheduler:
    def __init__(self) -> None:
        self.handles: list[_Handle] = []

    def call_later(self, delay, callback, *args):
        handle = _Handle(lambda: callback(*args))
        self.handles.append(handle)
        return handle

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            live = [handle for handle in self.handles if not handle.cancelled]
            if len(live) != 1:
                raise AssertionError(f"expected exactly one live tick, found {len(live)}")
            live[0].cancelled = True
            live[0].callback()


class _UIServerStub:
    def __init__(self):
        self.events: list[tuple[str, dict[str, object]]] = []
        self.command_handler = None
        self.started = False
        self.stopped = False

    def set_command_handler(self, handler) -> None:
        self.command_handler = handler

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.stopped = True

    def publish(self, event_type: str, **payload):
        self.events.append((event_type, payload))


def _app_config() -> AppConfig:
    return AppConfig(
        timer=TimerSettings(default_seconds=2),
        pomodoro=PomodoroSettings(
            work_minutes=1,
            short_break_minutes=1,
            long_break_minutes=1,
            cycles_before_long_break=2,
        ),
        pace=PaceSettings(),
        llm=LLMSettings(),
        ui_server=UIServerSettings(),
        notifications=NotificationSettings(audio_enabled=False),
        source_file="test.toml",
    )


class ChronoZenRuntimeTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.ui_server = _UIServerStub()
        self.scheduler = _ManualScheduler()
        self.stop_callbacks = []
        self.closed = []
        bootstrap = RuntimeBootstrap(
            logger=logging.getLogger("test.runtime"),
            app_config=_app_config(),
            pace_advisor=RulePaceAdvisor(),
            ui_server=self.ui_server,  # type: ignore[arg-type]
            chime=None,
            hooks=RuntimeHooks(setup_signal_handlers=self.stop_callbacks.append),
            close_advisor=lambda: self.closed.append(True),
        )
        self.runtime = ChronoZenRuntime(bootstrap, scheduler=self.scheduler)

    def _events(self, event_type: str) -> list[dict[str, object]]:
        return [payload for kind, payload in self.ui_server.events if kind == event_type]

    async def test_run_publishes_startup_state_and_stops_cleanly(self) -> None:
        task = asyncio.create_task(self.runtime.run())
        while not self.stop_callbacks:
            await asyncio.sleep(0)

        self.assertTrue(self.ui_server.started)
        self.assertIsNotNone(self.ui_server.command_handler)
        self.assertEqual("startup", self._events("timer")[-1]["reason"])
        self.assertEqual("startup", self._events("pomodoro")[-1]["reason"])

        self.stop_callbacks[0]()
        self.assertEqual(0, await task)
        self.assertTrue(self.ui_server.stopped)
        self.assertEqual([True], self.closed)

    async def test_ticks_publish_timer_updates(self) -> None:
        self.runtime.dispatcher.handle_command({"type": "command", "command": "start"})
        self.scheduler.fire()

        timer = self._events("timer")[-1]
        self.assertEqual("tick", timer["action"])
        self.assertEqual(1, timer["remaining_seconds"])
        self.assertEqual("00:01", timer["clock"])

    async def test_plain_completion_notifies_once_with_final_state(self) -> None:
        self.runtime.dispatcher.handle_command({"type": "command", "command": "start"})
        self.scheduler.fire(2)

        notifications = self._events("notification")
        self.assertEqual(1, len(notifications))
        self.assertEqual("ChronoZen", notifications[0]["title"])
        self.assertEqual("C'est terminé !", notifications[0]["message"])
        self.assertEqual(200, notifications[0]["vibrate_ms"])

        timer = self._events("timer")[-1]
        self.assertEqual("completed", timer["action"])
        self.assertEqual(0, timer["remaining_seconds"])
        self.assertEqual("Réinitialiser", timer["control"])

    async def test_phase_change_publishes_rearmed_countdown(self) -> None:
        self.runtime.dispatcher.handle_command({"type": "command", "command": "start_session"})
        self.scheduler.fire(60)

        notification = self._events("notification")[-1]
        self.assertEqual("ChronoZen Pomodoro", notification["title"])
        self.assertEqual("Pause courte (1 min). Cycle 1/2.", notification["message"])

        timer = self._events("timer")[-1]
        self.assertEqual("phase_changed", timer["action"])
        self.assertEqual("running", timer["mode"])
        self.assertEqual(60, timer["remaining_seconds"])
        self.assertEqual("short_break", self._events("pomodoro")[-1]["phase"])


if __name__ == "__main__":
    unittest.main()
