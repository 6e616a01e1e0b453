"""Strict parser for pace responses produced by the local model."""

from __future__ import annotations

import json
import math
from typing import Any, Optional

from .types import PaceAdvice

PACE_FIELD = "animation_pace"
REASONING_FIELD = "reasoning"


class PaceResponseError(Exception):
    """Raised when model output does not contain a usable pace."""


class PaceResponseParser:
    """Extract a ``PaceAdvice`` from model output.

    Only a finite numeric ``animation_pace`` is accepted. Values outside
    [0, 1] are clamped; anything else raises ``PaceResponseError`` so the
    caller can fall back to normal speed.
    """

    def parse(self, content: str) -> PaceAdvice:
        parsed = self._load_json_object(content)
        if parsed is None:
            raise PaceResponseError(f"No JSON object in model output: {content[:80]!r}")

        pace = self._coerce_pace(parsed.get(PACE_FIELD))
        reasoning_raw = parsed.get(REASONING_FIELD)
        reasoning = reasoning_raw.strip() if isinstance(reasoning_raw, str) else ""
        return PaceAdvice(pace=pace, reasoning=reasoning)

    def _load_json_object(self, content: str) -> Optional[dict[str, Any]]:
        text = content.strip()
        if not text:
            return None

        try:
            parsed = json.loads(text)
            if isinstance(parsed, dict):
                return parsed
        except json.JSONDecodeError:
            pass

        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end == -1 or end <= start:
            return None

        try:
            parsed = json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            return None
        return parsed if isinstance(parsed, dict) else None

    @staticmethod
    def _coerce_pace(value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise PaceResponseError(f"{PACE_FIELD} must be a number, got: {value!r}")

        pace = float(value)
        if not math.isfinite(pace):
            raise PaceResponseError(f"{PACE_FIELD} must be finite, got: {value!r}")
        return min(1.0, max(0.0, pace))
