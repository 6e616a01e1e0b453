"""Preset durations and parsing of user-entered countdown lengths."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

UNIT_MINUTES = "minutes"
UNIT_SECONDS = "seconds"

_CLOCK_PATTERN = re.compile(r"^(\d{1,3}):([0-5]\d)$", re.ASCII)
_SUFFIX_PATTERN = re.compile(r"^(\d+)\s*(s|sec|secs|m|min|mins)$", re.ASCII)
_DIGITS_PATTERN = re.compile(r"\d+", re.ASCII)


class DurationInputError(ValueError):
    """Raised when a user-entered duration is not a positive number of seconds."""


@dataclass(frozen=True)
class DurationPreset:
    label: str
    seconds: int


PRESET_DURATIONS: tuple[DurationPreset, ...] = (
    DurationPreset("3:30", 210),
    DurationPreset("5:00", 300),
    DurationPreset("10:00", 600),
    DurationPreset("15:00", 900),
    DurationPreset("20:00", 1200),
    DurationPreset("25:00", 1500),
    DurationPreset("30:00", 1800),
)

DEFAULT_PRESET = PRESET_DURATIONS[1]


def find_preset(label: str) -> Optional[DurationPreset]:
    wanted = label.strip()
    for preset in PRESET_DURATIONS:
        if preset.label == wanted:
            return preset
    return None


def parse_duration_input(raw: object, *, unit: str = UNIT_MINUTES) -> int:
    """Parse a user duration into seconds.

    Accepts integers, digit strings interpreted in ``unit``, ``M:SS`` clock
    strings, and suffixed forms such as ``"90s"`` or ``"7min"``.

    Raises:
        DurationInputError: If the value is non-numeric or not positive.
    """
    if unit not in (UNIT_MINUTES, UNIT_SECONDS):
        raise DurationInputError(f"Unsupported duration unit: {unit}")

    if isinstance(raw, bool):
        raise DurationInputError("Duration must be a number.")

    # JSON clients may send 5.0 for 5.
    if isinstance(raw, float):
        if not raw.is_integer():
            raise DurationInputError(f"Duration must be a whole number, got: {raw!r}")
        raw = int(raw)

    if isinstance(raw, int):
        seconds = raw * 60 if unit == UNIT_MINUTES else raw
        return _require_positive(seconds)

    if not isinstance(raw, str):
        raise DurationInputError("Duration must be a whole number or a text value.")

    text = raw.strip().lower()
    if not text:
        raise DurationInputError("Duration cannot be empty.")

    clock = _CLOCK_PATTERN.match(text)
    if clock:
        minutes, seconds = clock.groups()
        return _require_positive(int(minutes) * 60 + int(seconds))

    suffixed = _SUFFIX_PATTERN.match(text)
    if suffixed:
        value, suffix = suffixed.groups()
        factor = 1 if suffix.startswith("s") else 60
        return _require_positive(int(value) * factor)

    if not _DIGITS_PATTERN.fullmatch(text):
        raise DurationInputError(f"Duration must be a positive integer, got: {raw!r}")

    value = int(text)
    return _require_positive(value * 60 if unit == UNIT_MINUTES else value)


def _require_positive(seconds: int) -> int:
    if seconds <= 0:
        raise DurationInputError("Duration must be greater than zero.")
    return seconds
