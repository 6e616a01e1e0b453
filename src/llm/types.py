"""Typed payloads shared by the pace backend, parser, and pacing controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict

DEFAULT_PACE = 1.0


class PaceRequest(TypedDict):
    """Facts handed to the model for one pace decision."""
    selected_seconds: int
    remaining_seconds: int


@dataclass(frozen=True)
class PaceAdvice:
    """Cosmetic animation pace in [0, 1] with the advisor's rationale."""

    pace: float = DEFAULT_PACE
    reasoning: str = ""


DEFAULT_PACE_ADVICE = PaceAdvice()
