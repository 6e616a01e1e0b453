"""French notification and rejection texts for countdown and pomodoro flows."""

from __future__ import annotations

from pomodoro import PomodoroEvent, PomodoroPlan
from pomodoro.constants import (
    ACTION_PAUSE,
    ACTION_RESET_SESSION,
    ACTION_RESUME,
    ACTION_SESSION_COMPLETED,
    ACTION_START,
    ACTION_START_SESSION,
    ACTION_UPDATE_PLAN,
    PHASE_LONG_BREAK,
    PHASE_SHORT_BREAK,
    PHASE_WORK,
    REASON_ALREADY_RUNNING,
    REASON_NOT_PAUSED,
    REASON_NOT_RUNNING,
    REASON_SESSION_RUNNING,
)

TITLE_TIMER = "ChronoZen"
TITLE_POMODORO = "ChronoZen Pomodoro"

MESSAGE_TIMER_DONE = "C'est terminé !"
MESSAGE_SESSION_DONE = "Session Pomodoro terminée ! Bravo !"


def format_minutes(seconds: int) -> str:
    """Render a phase length for messages: whole minutes, else `M:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    if remainder == 0:
        return f"{minutes} min"
    return f"{minutes}:{remainder:02d} min"


def session_started_text(plan: PomodoroPlan) -> str:
    return (
        f"Cycle 1/{plan.cycles_before_long_break} : Au travail ! "
        f"({format_minutes(plan.work_seconds)})"
    )


def pomodoro_event_text(event: PomodoroEvent) -> str:
    """Return the notification text for a countdown completion."""
    if event.action == ACTION_SESSION_COMPLETED:
        return MESSAGE_SESSION_DONE

    snapshot = event.snapshot
    plan = event.plan
    cycles = snapshot.cycles_before_long_break
    if snapshot.phase == PHASE_SHORT_BREAK:
        return (
            f"Pause courte ({format_minutes(plan.short_break_seconds)}). "
            f"Cycle {snapshot.completed_work_cycles}/{cycles}."
        )
    if snapshot.phase == PHASE_LONG_BREAK:
        return f"Pause longue méritée ({format_minutes(plan.long_break_seconds)}) !"
    if snapshot.phase == PHASE_WORK:
        return f"Cycle {snapshot.completed_work_cycles}/{cycles} : Au travail !"
    return MESSAGE_TIMER_DONE


def rejection_text(action: str, reason: str) -> str:
    """Return French text for commands that are not possible right now."""
    if reason == REASON_ALREADY_RUNNING:
        return "Le minuteur est déjà en cours."
    if reason == REASON_NOT_RUNNING and action == ACTION_PAUSE:
        return "Le minuteur n'est pas en cours."
    if reason == REASON_NOT_PAUSED and action in (ACTION_RESUME, ACTION_START):
        return "Le minuteur n'est pas en pause."
    if reason == REASON_SESSION_RUNNING:
        if action == ACTION_START_SESSION:
            return "Une session Pomodoro est déjà en cours."
        if action == ACTION_UPDATE_PLAN:
            return "Mettez la session en pause pour modifier les durées."
        if action == ACTION_RESET_SESSION:
            return "Mettez la session en pause avant de la réinitialiser."
    return "Cette action n'est pas possible pour le moment."


def invalid_duration_text(detail: str) -> str:
    return f"Durée invalide : {detail}"


def invalid_plan_text(detail: str) -> str:
    return f"Configuration Pomodoro invalide : {detail}"
