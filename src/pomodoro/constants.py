"""Mode, phase, action, and reason constants used by the timer state machines."""

from __future__ import annotations

DEFAULT_TIMER_SECONDS = 5 * 60
TICK_INTERVAL_SECONDS = 1.0

DEFAULT_WORK_SECONDS = 25 * 60
DEFAULT_SHORT_BREAK_SECONDS = 5 * 60
DEFAULT_LONG_BREAK_SECONDS = 15 * 60
DEFAULT_CYCLES_BEFORE_LONG_BREAK = 4

MODE_IDLE = "idle"
MODE_RUNNING = "running"
MODE_PAUSED = "paused"

PHASE_WORK = "work"
PHASE_SHORT_BREAK = "short_break"
PHASE_LONG_BREAK = "long_break"

ACTION_SELECT = "select"
ACTION_START = "start"
ACTION_PAUSE = "pause"
ACTION_RESUME = "resume"
ACTION_RESET = "reset"

ACTION_START_SESSION = "start_session"
ACTION_RESET_SESSION = "reset_session"
ACTION_UPDATE_PLAN = "update_plan"
ACTION_PHASE_CHANGED = "phase_changed"
ACTION_SESSION_COMPLETED = "session_completed"

ACTION_SYNC = "sync"
ACTION_TICK = "tick"
ACTION_COMPLETED = "completed"

REASON_SELECTED = "selected"
REASON_STARTED = "started"
REASON_RESTARTED = "restarted"
REASON_PAUSED = "paused"
REASON_RESUMED = "resumed"
REASON_RESET = "reset"
REASON_ALREADY_RUNNING = "already_running"
REASON_NOT_RUNNING = "not_running"
REASON_NOT_PAUSED = "not_paused"

REASON_SESSION_STARTED = "session_started"
REASON_SESSION_RESET = "session_reset"
REASON_SESSION_RUNNING = "session_running"
REASON_PLAN_UPDATED = "plan_updated"

REASON_TICK = "tick"
REASON_STARTUP = "startup"
