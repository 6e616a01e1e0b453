"""View-model helpers: clock text, phase labels, and progress ring geometry."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from pomodoro import CountdownSnapshot
from pomodoro.constants import (
    MODE_IDLE,
    MODE_RUNNING,
    PHASE_LONG_BREAK,
    PHASE_SHORT_BREAK,
    PHASE_WORK,
)

BASE_TRANSITION_SECONDS = 0.4
MIN_EFFECTIVE_PACE = 0.1
MAX_EFFECTIVE_PACE = 2.0

PHASE_LABELS: dict[str, str] = {
    PHASE_WORK: "Travail",
    PHASE_SHORT_BREAK: "Pause courte",
    PHASE_LONG_BREAK: "Pause longue",
}

CONTROL_PAUSE = "Mettre en pause"
CONTROL_RESET = "Réinitialiser"
CONTROL_START = "Démarrer"


def format_clock(seconds: int) -> str:
    """Format a duration in seconds as `MM:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def phase_label(phase: Optional[str]) -> Optional[str]:
    if phase is None:
        return None
    return PHASE_LABELS.get(phase)


def control_label(snapshot: CountdownSnapshot) -> str:
    """Label of the single play/pause/restart control."""
    if snapshot.mode == MODE_RUNNING:
        return CONTROL_PAUSE
    if snapshot.mode == MODE_IDLE and snapshot.selected_seconds > 0 and snapshot.is_dirty:
        return CONTROL_RESET
    return CONTROL_START


def progress_percentage(snapshot: CountdownSnapshot) -> float:
    return snapshot.progress * 100.0


@dataclass(frozen=True)
class ProgressRing:
    """Geometry of the circular progress indicator."""

    size: int = 260
    stroke_width: int = 18

    @property
    def radius(self) -> float:
        return (self.size - self.stroke_width) / 2

    @property
    def circumference(self) -> float:
        return 2 * math.pi * self.radius

    def dash_offset(self, percentage: float) -> float:
        clamped = max(0.0, min(100.0, percentage))
        return self.circumference - (clamped / 100.0) * self.circumference

    @staticmethod
    def transition_seconds(pace: float) -> float:
        """Ring transition per tick; higher pace means a faster sweep."""
        effective = max(MIN_EFFECTIVE_PACE, min(MAX_EFFECTIVE_PACE, pace))
        return round(BASE_TRANSITION_SECONDS / effective, 2)

    def render(self, snapshot: CountdownSnapshot, pace: float) -> dict[str, float]:
        percentage = progress_percentage(snapshot)
        return {
            "percentage": round(percentage, 2),
            "circumference": round(self.circumference, 2),
            "dash_offset": round(self.dash_offset(percentage), 2),
            "transition_seconds": self.transition_seconds(pace),
        }
