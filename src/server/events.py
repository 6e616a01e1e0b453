"""Utilities for serializing UI events and replaying the latest view state."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from contracts.ui_protocol import MESSAGE_COMMAND, STICKY_EVENT_ORDER, STICKY_EVENT_TYPES


def make_event(
    event_type: str,
    *,
    now_fn: Callable[[], datetime] | None = None,
    **payload: Any,
) -> str:
    """Serialize an event payload with type and timestamp for websocket delivery."""
    now = now_fn() if now_fn is not None else datetime.now(timezone.utc)
    return json.dumps(
        {
            "type": event_type,
            "timestamp": now.isoformat(),
            **payload,
        },
        ensure_ascii=False,
    )


def parse_command(raw: str | bytes) -> Optional[dict[str, Any]]:
    """Decode a page message; returns None unless it is a named command object."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return None

    try:
        message = json.loads(raw)
    except json.JSONDecodeError:
        return None

    if not isinstance(message, dict) or message.get("type") != MESSAGE_COMMAND:
        return None
    if not isinstance(message.get("command"), str):
        return None
    return message


class StickyEventStore:
    """Cache of the latest view events replayed to newly connected pages."""
    def __init__(self):
        self._events: dict[str, str] = {}

    def remember(self, event_type: str, message: str) -> None:
        if event_type not in STICKY_EVENT_TYPES:
            return
        self._events[event_type] = message

    def snapshot(self) -> list[str]:
        return [self._events[key] for key in STICKY_EVENT_ORDER if key in self._events]
