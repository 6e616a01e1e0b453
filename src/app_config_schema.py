"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_CONFIG_FILE = "config.toml"

PACE_BACKEND_RULES = "rules"
PACE_BACKEND_LLM = "llm"
PACE_BACKENDS = (PACE_BACKEND_RULES, PACE_BACKEND_LLM)


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class TimerSettings:
    """Plain countdown settings from `[timer]`."""
    default_seconds: int = 300


@dataclass(frozen=True)
class PomodoroSettings:
    """Default session plan from `[pomodoro]`."""
    work_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15
    cycles_before_long_break: int = 4


@dataclass(frozen=True)
class PaceSettings:
    """Pace advisor selection and rate limiting from `[pace]`."""
    enabled: bool = True
    backend: str = PACE_BACKEND_RULES
    min_interval_seconds: float = 5.0
    timeout_seconds: float = 10.0


@dataclass(frozen=True)
class LLMSettings:
    """Local LLM inference and prompt settings from `[llm]`."""
    model_path: str = ""
    hf_filename: str = ""
    hf_repo_id: str = ""
    hf_revision: str = ""
    system_prompt: str = ""
    n_threads: int = 4
    n_ctx: int = 1024
    n_batch: int = 256
    temperature: float = 0.2
    top_p: float = 0.9
    repeat_penalty: float = 1.1
    max_tokens: int = 128
    verbose: bool = False


@dataclass(frozen=True)
class UIServerSettings:
    """Built-in UI server settings from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""


@dataclass(frozen=True)
class NotificationSettings:
    """Completion chime and vibration settings from `[notifications]`."""
    audio_enabled: bool = True
    output_device: Optional[int] = None
    tone_hz: float = 880.0
    tone_seconds: float = 0.35
    volume: float = 0.3
    vibrate_ms: int = 200


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    timer: TimerSettings
    pomodoro: PomodoroSettings
    pace: PaceSettings
    llm: LLMSettings
    ui_server: UIServerSettings
    notifications: NotificationSettings
    source_file: str


@dataclass(frozen=True)
class SecretConfig:
    """Environment-provided secrets kept out of `config.toml`."""
    hf_token: Optional[str]
