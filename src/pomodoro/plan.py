"""Pomodoro plan: phase lengths and the number of cycles before a long break."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

from .constants import (
    DEFAULT_CYCLES_BEFORE_LONG_BREAK,
    DEFAULT_LONG_BREAK_SECONDS,
    DEFAULT_SHORT_BREAK_SECONDS,
    DEFAULT_WORK_SECONDS,
    PHASE_LONG_BREAK,
    PHASE_SHORT_BREAK,
    PHASE_WORK,
)

_DIGITS_PATTERN = re.compile(r"\d+", re.ASCII)


class PlanInputError(ValueError):
    """Raised when pomodoro plan values are missing, non-numeric, or not positive."""


@dataclass(frozen=True)
class PomodoroPlan:
    """Immutable phase durations for one pomodoro session."""

    work_seconds: int = DEFAULT_WORK_SECONDS
    short_break_seconds: int = DEFAULT_SHORT_BREAK_SECONDS
    long_break_seconds: int = DEFAULT_LONG_BREAK_SECONDS
    cycles_before_long_break: int = DEFAULT_CYCLES_BEFORE_LONG_BREAK

    def __post_init__(self) -> None:
        for field in (
            "work_seconds",
            "short_break_seconds",
            "long_break_seconds",
            "cycles_before_long_break",
        ):
            value = getattr(self, field)
            if isinstance(value, bool) or not isinstance(value, int):
                raise PlanInputError(f"{field} must be an integer, got: {value!r}")
            if value <= 0:
                raise PlanInputError(f"{field} must be greater than zero, got: {value}")

    @classmethod
    def from_minutes(
        cls,
        *,
        work_minutes: Any,
        short_break_minutes: Any,
        long_break_minutes: Any,
        cycles_before_long_break: Optional[int] = None,
    ) -> "PomodoroPlan":
        return cls(
            work_seconds=_minutes_to_seconds(work_minutes, "work_minutes"),
            short_break_seconds=_minutes_to_seconds(
                short_break_minutes,
                "short_break_minutes",
            ),
            long_break_seconds=_minutes_to_seconds(
                long_break_minutes,
                "long_break_minutes",
            ),
            cycles_before_long_break=(
                cycles_before_long_break
                if cycles_before_long_break is not None
                else DEFAULT_CYCLES_BEFORE_LONG_BREAK
            ),
        )

    def seconds_for(self, phase: str) -> int:
        if phase == PHASE_WORK:
            return self.work_seconds
        if phase == PHASE_SHORT_BREAK:
            return self.short_break_seconds
        if phase == PHASE_LONG_BREAK:
            return self.long_break_seconds
        raise ValueError(f"Unknown pomodoro phase: {phase}")


def _minutes_to_seconds(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise PlanInputError(f"{field} must be a positive integer.")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str):
        text = value.strip()
        if not _DIGITS_PATTERN.fullmatch(text):
            raise PlanInputError(f"{field} must be a positive integer, got: {value!r}")
        value = int(text)
    if not isinstance(value, int):
        raise PlanInputError(f"{field} must be a positive integer, got: {value!r}")
    if value <= 0:
        raise PlanInputError(f"{field} must be greater than zero, got: {value}")
    return value * 60
