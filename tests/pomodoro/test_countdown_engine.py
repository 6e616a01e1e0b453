import unittest

from pomodoro import CountdownEngine, CountdownTick


class _Handle:
    def __init__(self, scheduler: "_ManualScheduler", callback) -> None:
        self._scheduler = scheduler
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class _ManualScheduler:
    """Collects call_later callbacks so tests can fire ticks explicitly."""

    def __init__(self) -> None:
        self.handles: list[_Handle] = []

    def call_later(self, delay, callback, *args):
        handle = _Handle(self, lambda: callback(*args))
        self.handles.append(handle)
        return handle

    def live_handles(self) -> list[_Handle]:
        return [handle for handle in self.handles if not handle.cancelled]

    def fire(self) -> None:
        live = self.live_handles()
        if len(live) != 1:
            raise AssertionError(f"expected exactly one live tick, found {len(live)}")
        handle = live[0]
        handle.cancelled = True
        handle.callback()


class CountdownEngineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.scheduler = _ManualScheduler()
        self.engine = CountdownEngine(self.scheduler, duration_seconds=3)

    def test_initial_snapshot_is_idle_with_default_selection(self) -> None:
        engine = CountdownEngine(self.scheduler)
        snapshot = engine.snapshot()

        self.assertEqual("idle", snapshot.mode)
        self.assertEqual(300, snapshot.selected_seconds)
        self.assertEqual(300, snapshot.remaining_seconds)
        self.assertFalse(engine.has_active_tick)

    def test_start_schedules_a_single_tick(self) -> None:
        result = self.engine.start()

        self.assertTrue(result.accepted)
        self.assertEqual("started", result.reason)
        self.assertEqual("running", result.snapshot.mode)
        self.assertEqual(1, len(self.scheduler.live_handles()))

    def test_start_while_running_is_rejected_without_second_tick(self) -> None:
        self.engine.start()
        result = self.engine.start()

        self.assertFalse(result.accepted)
        self.assertEqual("already_running", result.reason)
        self.assertEqual(1, len(self.scheduler.live_handles()))

    def test_ticks_decrement_and_complete(self) -> None:
        ticks: list[CountdownTick] = []
        self.engine.subscribe(ticks.append)
        self.engine.start()

        self.scheduler.fire()
        self.scheduler.fire()
        self.scheduler.fire()

        self.assertEqual([2, 1, 0], [tick.snapshot.remaining_seconds for tick in ticks])
        self.assertEqual([False, False, True], [tick.completed for tick in ticks])
        self.assertEqual("idle", self.engine.snapshot().mode)
        self.assertEqual([], self.scheduler.live_handles())
        self.assertFalse(self.engine.has_active_tick)

    def test_pause_cancels_tick_and_freezes_remaining(self) -> None:
        self.engine.start()
        self.scheduler.fire()
        result = self.engine.pause()

        self.assertTrue(result.accepted)
        self.assertEqual("paused", result.snapshot.mode)
        self.assertEqual(2, result.snapshot.remaining_seconds)
        self.assertEqual([], self.scheduler.live_handles())
        self.assertIsNone(self.engine.tick())
        self.assertEqual(2, self.engine.snapshot().remaining_seconds)

    def test_pause_rejected_when_not_running(self) -> None:
        result = self.engine.pause()
        self.assertFalse(result.accepted)
        self.assertEqual("not_running", result.reason)

    def test_resume_continues_from_paused_remaining(self) -> None:
        self.engine.start()
        self.scheduler.fire()
        self.engine.pause()
        result = self.engine.resume()

        self.assertTrue(result.accepted)
        self.assertEqual("running", result.snapshot.mode)
        self.assertEqual(2, result.snapshot.remaining_seconds)
        self.assertEqual(1, len(self.scheduler.live_handles()))

    def test_resume_rejected_when_not_paused(self) -> None:
        result = self.engine.resume()
        self.assertFalse(result.accepted)
        self.assertEqual("not_paused", result.reason)

    def test_start_while_paused_resumes(self) -> None:
        self.engine.start()
        self.scheduler.fire()
        self.engine.pause()
        result = self.engine.start()

        self.assertTrue(result.accepted)
        self.assertEqual("resumed", result.reason)
        self.assertEqual(2, result.snapshot.remaining_seconds)

    def test_start_after_completion_restarts_from_selection(self) -> None:
        self.engine.start()
        for _ in range(3):
            self.scheduler.fire()

        result = self.engine.start()

        self.assertTrue(result.accepted)
        self.assertEqual("restarted", result.reason)
        self.assertEqual(3, result.snapshot.remaining_seconds)

    def test_toggle_cycles_through_modes(self) -> None:
        self.assertEqual("running", self.engine.toggle().snapshot.mode)
        self.assertEqual("paused", self.engine.toggle().snapshot.mode)
        self.assertEqual("running", self.engine.toggle().snapshot.mode)
        self.assertEqual(1, len(self.scheduler.live_handles()))

    def test_select_duration_cancels_tick_and_bumps_revision(self) -> None:
        self.engine.start()
        before = self.engine.snapshot().revision
        result = self.engine.select_duration(90)

        self.assertTrue(result.accepted)
        self.assertEqual("idle", result.snapshot.mode)
        self.assertEqual(90, result.snapshot.selected_seconds)
        self.assertEqual(90, result.snapshot.remaining_seconds)
        self.assertEqual(before + 1, result.snapshot.revision)
        self.assertEqual([], self.scheduler.live_handles())

    def test_select_duration_rejects_invalid_values(self) -> None:
        for value in (0, -5, True, 1.5, "60"):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    self.engine.select_duration(value)  # type: ignore[arg-type]
        self.assertEqual(3, self.engine.snapshot().selected_seconds)

    def test_reset_restores_selection_and_goes_idle(self) -> None:
        self.engine.start()
        self.scheduler.fire()
        result = self.engine.reset()

        self.assertTrue(result.accepted)
        self.assertEqual("idle", result.snapshot.mode)
        self.assertEqual(3, result.snapshot.remaining_seconds)
        self.assertEqual([], self.scheduler.live_handles())

    def test_listener_rearm_on_completion_keeps_single_tick(self) -> None:
        def rearm(tick: CountdownTick) -> None:
            if tick.completed:
                self.engine.select_duration(2)
                self.engine.start()

        self.engine.subscribe(rearm)
        self.engine.start()
        for _ in range(3):
            self.scheduler.fire()

        snapshot = self.engine.snapshot()
        self.assertEqual("running", snapshot.mode)
        self.assertEqual(2, snapshot.remaining_seconds)
        self.assertEqual(1, len(self.scheduler.live_handles()))

    def test_shutdown_cancels_pending_tick(self) -> None:
        self.engine.start()
        self.engine.shutdown()
        self.assertEqual([], self.scheduler.live_handles())

    def test_progress_and_dirty_flags(self) -> None:
        self.engine.start()
        self.scheduler.fire()
        snapshot = self.engine.snapshot()

        self.assertAlmostEqual(1 / 3, snapshot.progress)
        self.assertTrue(snapshot.is_dirty)
        self.assertFalse(self.engine.reset().snapshot.is_dirty)


if __name__ == "__main__":
    unittest.main()
