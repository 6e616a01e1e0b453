import math
import unittest

from pomodoro import CountdownSnapshot, PomodoroEvent, PomodoroPlan, PomodoroSnapshot
from runtime.display import ProgressRing, control_label, format_clock, phase_label
from runtime.messages import (
    MESSAGE_SESSION_DONE,
    MESSAGE_TIMER_DONE,
    format_minutes,
    pomodoro_event_text,
    rejection_text,
    session_started_text,
)


def _countdown(mode: str, selected: int, remaining: int) -> CountdownSnapshot:
    return CountdownSnapshot(mode=mode, selected_seconds=selected, remaining_seconds=remaining)  # type: ignore[arg-type]


def _event(action: str, phase, completed: int = 1) -> PomodoroEvent:
    plan = PomodoroPlan()
    return PomodoroEvent(
        action=action,
        previous_phase=None,
        snapshot=PomodoroSnapshot(
            phase=phase,
            completed_work_cycles=completed,
            cycles_before_long_break=plan.cycles_before_long_break,
        ),
        countdown=_countdown("running", 300, 300),
        plan=plan,
    )


class DisplayTests(unittest.TestCase):
    def test_format_clock(self) -> None:
        self.assertEqual("05:00", format_clock(300))
        self.assertEqual("03:30", format_clock(210))
        self.assertEqual("00:00", format_clock(-4))
        self.assertEqual("90:00", format_clock(5400))

    def test_control_label_follows_mode(self) -> None:
        self.assertEqual("Démarrer", control_label(_countdown("idle", 300, 300)))
        self.assertEqual("Mettre en pause", control_label(_countdown("running", 300, 120)))
        self.assertEqual("Démarrer", control_label(_countdown("paused", 300, 120)))
        self.assertEqual("Réinitialiser", control_label(_countdown("idle", 300, 0)))

    def test_phase_label(self) -> None:
        self.assertEqual("Pause courte", phase_label("short_break"))
        self.assertIsNone(phase_label(None))

    def test_ring_geometry(self) -> None:
        ring = ProgressRing()
        self.assertEqual(121.0, ring.radius)
        self.assertAlmostEqual(2 * math.pi * 121.0, ring.circumference)
        self.assertAlmostEqual(ring.circumference, ring.dash_offset(0))
        self.assertAlmostEqual(0.0, ring.dash_offset(100))
        self.assertAlmostEqual(0.0, ring.dash_offset(150))

    def test_transition_follows_pace(self) -> None:
        self.assertEqual(0.4, ProgressRing.transition_seconds(1.0))
        self.assertEqual(0.8, ProgressRing.transition_seconds(0.5))
        self.assertEqual(4.0, ProgressRing.transition_seconds(0.0))
        self.assertEqual(0.2, ProgressRing.transition_seconds(5.0))

    def test_render_reports_progress(self) -> None:
        rendered = ProgressRing().render(_countdown("running", 300, 150), pace=1.0)
        self.assertEqual(50.0, rendered["percentage"])
        self.assertEqual(0.4, rendered["transition_seconds"])


class MessageTests(unittest.TestCase):
    def test_format_minutes(self) -> None:
        self.assertEqual("25 min", format_minutes(1500))
        self.assertEqual("3:30 min", format_minutes(210))

    def test_session_started_text(self) -> None:
        self.assertEqual(
            "Cycle 1/4 : Au travail ! (25 min)",
            session_started_text(PomodoroPlan()),
        )

    def test_pomodoro_event_texts(self) -> None:
        self.assertEqual(MESSAGE_TIMER_DONE, pomodoro_event_text(_event("completed", None)))
        self.assertEqual(
            MESSAGE_SESSION_DONE,
            pomodoro_event_text(_event("session_completed", None)),
        )
        self.assertEqual(
            "Pause courte (5 min). Cycle 2/4.",
            pomodoro_event_text(_event("phase_changed", "short_break", completed=2)),
        )
        self.assertEqual(
            "Pause longue méritée (15 min) !",
            pomodoro_event_text(_event("phase_changed", "long_break", completed=4)),
        )
        self.assertEqual(
            "Cycle 3/4 : Au travail !",
            pomodoro_event_text(_event("phase_changed", "work", completed=3)),
        )

    def test_rejection_text(self) -> None:
        self.assertEqual(
            "Le minuteur est déjà en cours.",
            rejection_text("start", "already_running"),
        )
        self.assertEqual(
            "Une session Pomodoro est déjà en cours.",
            rejection_text("start_session", "session_running"),
        )
        self.assertEqual(
            "Cette action n'est pas possible pour le moment.",
            rejection_text("toggle", "whatever"),
        )


if __name__ == "__main__":
    unittest.main()
