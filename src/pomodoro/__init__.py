from .cycle import (
    PomodoroCycleController,
    PomodoroEvent,
    PomodoroPhase,
    PomodoroSnapshot,
    SessionActionResult,
)
from .durations import (
    DEFAULT_PRESET,
    PRESET_DURATIONS,
    DurationInputError,
    DurationPreset,
    find_preset,
    parse_duration_input,
)
from .engine import (
    ActionResult,
    CountdownEngine,
    CountdownMode,
    CountdownSnapshot,
    CountdownTick,
    TickScheduler,
)
from .plan import PlanInputError, PomodoroPlan

__all__ = [
    "ActionResult",
    "CountdownEngine",
    "CountdownMode",
    "CountdownSnapshot",
    "CountdownTick",
    "DEFAULT_PRESET",
    "DurationInputError",
    "DurationPreset",
    "PRESET_DURATIONS",
    "PlanInputError",
    "PomodoroCycleController",
    "PomodoroEvent",
    "PomodoroPhase",
    "PomodoroPlan",
    "PomodoroSnapshot",
    "SessionActionResult",
    "TickScheduler",
    "find_preset",
    "parse_duration_input",
]
