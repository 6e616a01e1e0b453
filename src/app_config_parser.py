"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    PACE_BACKENDS,
    AppConfig,
    AppConfigurationError,
    LLMSettings,
    NotificationSettings,
    PaceSettings,
    PomodoroSettings,
    TimerSettings,
    UIServerSettings,
)


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    return AppConfig(
        timer=_parse_timer_settings(_section(raw, "timer")),
        pomodoro=_parse_pomodoro_settings(_section(raw, "pomodoro")),
        pace=_parse_pace_settings(_section(raw, "pace")),
        llm=_parse_llm_settings(_section(raw, "llm"), base_dir=base_dir),
        ui_server=_parse_ui_server_settings(_section(raw, "ui_server"), base_dir=base_dir),
        notifications=_parse_notification_settings(_section(raw, "notifications")),
        source_file=source_file,
    )


def _parse_timer_settings(section: Mapping[str, Any]) -> TimerSettings:
    return TimerSettings(
        default_seconds=_as_positive_int(
            section.get("default_seconds", 300),
            "timer.default_seconds",
        ),
    )


def _parse_pomodoro_settings(section: Mapping[str, Any]) -> PomodoroSettings:
    return PomodoroSettings(
        work_minutes=_as_positive_int(
            section.get("work_minutes", 25),
            "pomodoro.work_minutes",
        ),
        short_break_minutes=_as_positive_int(
            section.get("short_break_minutes", 5),
            "pomodoro.short_break_minutes",
        ),
        long_break_minutes=_as_positive_int(
            section.get("long_break_minutes", 15),
            "pomodoro.long_break_minutes",
        ),
        cycles_before_long_break=_as_positive_int(
            section.get("cycles_before_long_break", 4),
            "pomodoro.cycles_before_long_break",
        ),
    )


def _parse_pace_settings(section: Mapping[str, Any]) -> PaceSettings:
    backend = _as_str(section.get("backend", "rules"), "pace.backend").lower()
    if backend not in PACE_BACKENDS:
        raise AppConfigurationError(
            f"pace.backend must be one of: {', '.join(PACE_BACKENDS)}."
        )
    min_interval = _as_float(
        section.get("min_interval_seconds", 5.0),
        "pace.min_interval_seconds",
    )
    if min_interval < 0:
        raise AppConfigurationError("pace.min_interval_seconds must be >= 0.")
    timeout = _as_float(section.get("timeout_seconds", 10.0), "pace.timeout_seconds")
    if timeout <= 0:
        raise AppConfigurationError("pace.timeout_seconds must be > 0.")
    return PaceSettings(
        enabled=_as_bool(section.get("enabled", True), "pace.enabled"),
        backend=backend,
        min_interval_seconds=min_interval,
        timeout_seconds=timeout,
    )


def _parse_llm_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> LLMSettings:
    _forbid_secret_fields(section, "llm", ("hf_token",))
    system_prompt = _as_str(section.get("system_prompt", ""), "llm.system_prompt")
    return LLMSettings(
        model_path=_resolve_path(
            base_dir,
            _as_str(section.get("model_path", ""), "llm.model_path"),
        ),
        hf_filename=_as_str(section.get("hf_filename", ""), "llm.hf_filename"),
        hf_repo_id=_as_str(section.get("hf_repo_id", ""), "llm.hf_repo_id"),
        hf_revision=_as_str(section.get("hf_revision", ""), "llm.hf_revision"),
        system_prompt=_resolve_path(base_dir, system_prompt) if system_prompt else "",
        n_threads=_as_int(section.get("n_threads", 4), "llm.n_threads"),
        n_ctx=_as_int(section.get("n_ctx", 1024), "llm.n_ctx"),
        n_batch=_as_int(section.get("n_batch", 256), "llm.n_batch"),
        temperature=_as_float(section.get("temperature", 0.2), "llm.temperature"),
        top_p=_as_float(section.get("top_p", 0.9), "llm.top_p"),
        repeat_penalty=_as_float(
            section.get("repeat_penalty", 1.1),
            "llm.repeat_penalty",
        ),
        max_tokens=_as_int(section.get("max_tokens", 128), "llm.max_tokens"),
        verbose=_as_bool(section.get("verbose", False), "llm.verbose"),
    )


def _parse_ui_server_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> UIServerSettings:
    index_file = _as_str(section.get("index_file", ""), "ui_server.index_file")
    return UIServerSettings(
        enabled=_as_bool(section.get("enabled", True), "ui_server.enabled"),
        host=_as_str(section.get("host", "127.0.0.1"), "ui_server.host"),
        port=_as_int(section.get("port", 8765), "ui_server.port"),
        index_file=_resolve_path(base_dir, index_file) if index_file else "",
    )


def _parse_notification_settings(section: Mapping[str, Any]) -> NotificationSettings:
    vibrate_ms = _as_int(section.get("vibrate_ms", 200), "notifications.vibrate_ms")
    if vibrate_ms < 0:
        raise AppConfigurationError("notifications.vibrate_ms must be >= 0.")
    return NotificationSettings(
        audio_enabled=_as_bool(
            section.get("audio_enabled", True),
            "notifications.audio_enabled",
        ),
        output_device=(
            _as_int(section.get("output_device"), "notifications.output_device")
            if "output_device" in section
            else None
        ),
        tone_hz=_as_float(section.get("tone_hz", 880.0), "notifications.tone_hz"),
        tone_seconds=_as_float(
            section.get("tone_seconds", 0.35),
            "notifications.tone_seconds",
        ),
        volume=_as_float(section.get("volume", 0.3), "notifications.volume"),
        vibrate_ms=vibrate_ms,
    )


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_positive_int(value: Any, field: str) -> int:
    number = _as_int(value, field)
    if number <= 0:
        raise AppConfigurationError(f"{field} must be a positive integer.")
    return number


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    else:
        raise AppConfigurationError(f"{field} must be a float.")
    if not math.isfinite(number):
        raise AppConfigurationError(f"{field} must be finite.")
    return number


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)


def _forbid_secret_fields(
    section: Mapping[str, Any],
    section_name: str,
    fields: tuple[str, ...],
) -> None:
    present = [field for field in fields if field in section]
    if present:
        joined = ", ".join(f"{section_name}.{field}" for field in present)
        raise AppConfigurationError(
            f"Secret values must not be stored in config.toml: {joined}. "
            "Move them to environment variables."
        )
