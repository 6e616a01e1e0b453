"""Web UI websocket event and command constants."""

from __future__ import annotations

# Websocket event types (server -> page)
EVENT_HELLO = "hello"
EVENT_TIMER = "timer"
EVENT_POMODORO = "pomodoro"
EVENT_PACE = "pace"
EVENT_NOTIFICATION = "notification"
EVENT_ERROR = "error"

# Websocket message type (page -> server)
MESSAGE_COMMAND = "command"

COMMAND_SELECT_DURATION = "select_duration"
COMMAND_SELECT_PRESET = "select_preset"
COMMAND_START = "start"
COMMAND_PAUSE = "pause"
COMMAND_RESUME = "resume"
COMMAND_TOGGLE = "toggle"
COMMAND_RESET = "reset"
COMMAND_START_SESSION = "start_session"
COMMAND_RESET_SESSION = "reset_session"
COMMAND_CONFIGURE_PLAN = "configure_plan"

STICKY_EVENT_TYPES: frozenset[str] = frozenset(
    {
        EVENT_TIMER,
        EVENT_POMODORO,
        EVENT_PACE,
    }
)

STICKY_EVENT_ORDER: tuple[str, ...] = (
    EVENT_POMODORO,
    EVENT_TIMER,
    EVENT_PACE,
)
