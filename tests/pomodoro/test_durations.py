import unittest

from pomodoro import (
    DEFAULT_PRESET,
    PRESET_DURATIONS,
    DurationInputError,
    PlanInputError,
    PomodoroPlan,
    find_preset,
    parse_duration_input,
)


class DurationParsingTests(unittest.TestCase):
    def test_presets_cover_expected_labels(self) -> None:
        self.assertEqual(
            ["3:30", "5:00", "10:00", "15:00", "20:00", "25:00", "30:00"],
            [preset.label for preset in PRESET_DURATIONS],
        )
        self.assertEqual(300, DEFAULT_PRESET.seconds)

    def test_find_preset(self) -> None:
        preset = find_preset(" 3:30 ")
        self.assertIsNotNone(preset)
        if preset is None:
            self.fail("Expected 3:30 preset")
        self.assertEqual(210, preset.seconds)
        self.assertIsNone(find_preset("4:00"))

    def test_accepts_supported_forms(self) -> None:
        cases = [
            (7, "minutes", 420),
            (90, "seconds", 90),
            ("12", "minutes", 720),
            ("45", "seconds", 45),
            ("3:30", "minutes", 210),
            ("90s", "minutes", 90),
            ("7min", "seconds", 420),
        ]
        for raw, unit, expected in cases:
            with self.subTest(raw=raw, unit=unit):
                self.assertEqual(expected, parse_duration_input(raw, unit=unit))

    def test_rejects_invalid_values(self) -> None:
        for raw in (0, -3, "0", "", "  ", "abc", "1.5", "0:00", True, None, 2.5):
            with self.subTest(raw=raw):
                with self.assertRaises(DurationInputError):
                    parse_duration_input(raw)

    def test_rejects_non_ascii_digits_with_typed_error(self) -> None:
        for raw in ("\u00b2", "\u00b3", "5\u00b2", "\u00b2s", "1:\u00b23"):
            with self.subTest(raw=raw):
                with self.assertRaises(DurationInputError):
                    parse_duration_input(raw)

    def test_accepts_whole_number_floats(self) -> None:
        self.assertEqual(300, parse_duration_input(5.0))
        self.assertEqual(45, parse_duration_input(45.0, unit="seconds"))

    def test_rejects_unknown_unit(self) -> None:
        with self.assertRaises(DurationInputError):
            parse_duration_input(5, unit="hours")


class PomodoroPlanTests(unittest.TestCase):
    def test_defaults(self) -> None:
        plan = PomodoroPlan()
        self.assertEqual(1500, plan.work_seconds)
        self.assertEqual(300, plan.short_break_seconds)
        self.assertEqual(900, plan.long_break_seconds)
        self.assertEqual(4, plan.cycles_before_long_break)

    def test_from_minutes_accepts_digit_strings(self) -> None:
        plan = PomodoroPlan.from_minutes(
            work_minutes="50",
            short_break_minutes=10,
            long_break_minutes="30",
        )
        self.assertEqual(3000, plan.work_seconds)
        self.assertEqual(600, plan.short_break_seconds)
        self.assertEqual(1800, plan.long_break_seconds)
        self.assertEqual(3000, plan.seconds_for("work"))

    def test_from_minutes_rejects_invalid_values(self) -> None:
        for bad in (0, -1, "x", "", None, True):
            with self.subTest(bad=bad):
                with self.assertRaises(PlanInputError):
                    PomodoroPlan.from_minutes(
                        work_minutes=bad,
                        short_break_minutes=5,
                        long_break_minutes=15,
                    )

    def test_from_minutes_rejects_non_ascii_digits(self) -> None:
        for bad in ("\u00b2", " \u00b3 "):
            with self.subTest(bad=bad):
                with self.assertRaises(PlanInputError):
                    PomodoroPlan.from_minutes(
                        work_minutes=bad,
                        short_break_minutes=5,
                        long_break_minutes=15,
                    )

    def test_from_minutes_accepts_whole_number_floats(self) -> None:
        plan = PomodoroPlan.from_minutes(
            work_minutes=50.0,
            short_break_minutes=10,
            long_break_minutes=20,
        )
        self.assertEqual(3000, plan.work_seconds)

    def test_seconds_for_unknown_phase_raises(self) -> None:
        with self.assertRaises(ValueError):
            PomodoroPlan().seconds_for("nap")


if __name__ == "__main__":
    unittest.main()
