from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli as tomllib  # type: ignore

from pomoladder.core.period import DEFAULT_SCHEDULE, Schedule
from pomoladder.core.presentation import DEFAULT_DECORATION_COUNT, DEFAULT_ROTATION_SPEED

CONFIG_ENV_VAR = "POMOLADDER_CONFIG"

_SCHEDULE_FIELDS = (
    "small_work",
    "small_break",
    "medium_work",
    "medium_break",
    "pomodoro_work",
    "pomodoro_break",
    "long_break",
    "small_repeat",
    "medium_repeat",
    "pomodoro_repeat",
)


class ConfigurationError(Exception):
    """Raised when the configuration file cannot be used."""


@dataclass(frozen=True)
class DisplaySettings:
    work_label: str = "Working"
    break_label: str = "Resting"
    decoration_count: int = DEFAULT_DECORATION_COUNT
    rotation_speed: float = DEFAULT_ROTATION_SPEED
    frame_rate: float = 30.0
    bell: bool = True


@dataclass(frozen=True)
class Settings:
    schedule: Schedule = DEFAULT_SCHEDULE
    display: DisplaySettings = field(default_factory=DisplaySettings)
    source_file: Optional[str] = None


def resolve_config_path(config_path: str | None = None) -> Optional[Path]:
    """Return the explicit or environment-provided config path, if any."""
    raw = config_path or os.getenv(CONFIG_ENV_VAR)
    if not raw:
        return None
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    return path


def load_settings(config_path: str | None = None) -> Settings:
    """Load settings from TOML, falling back to defaults without a file."""
    path = resolve_config_path(config_path)
    if path is None:
        return Settings()
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")
    if not path.is_file():
        raise ConfigurationError(f"Config path is not a file: {path}")

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except tomllib.TOMLDecodeError as error:
        raise ConfigurationError(f"Failed to parse config TOML: {error}") from error

    return Settings(
        schedule=_parse_schedule(_section(raw, "schedule")),
        display=_parse_display(_section(raw, "display")),
        source_file=str(path),
    )


def _parse_schedule(section: Mapping[str, Any]) -> Schedule:
    unknown = sorted(set(section) - set(_SCHEDULE_FIELDS))
    if unknown:
        raise ConfigurationError(f"Unknown schedule keys: {', '.join(unknown)}")
    values = {
        name: _as_int(section[name], f"schedule.{name}")
        for name in _SCHEDULE_FIELDS
        if name in section
    }
    try:
        return Schedule(**values)
    except ValueError as error:
        raise ConfigurationError(f"Invalid schedule: {error}") from error


def _parse_display(section: Mapping[str, Any]) -> DisplaySettings:
    defaults = DisplaySettings()
    decoration_count = _as_int(
        section.get("decoration_count", defaults.decoration_count),
        "display.decoration_count",
    )
    if decoration_count < 0:
        raise ConfigurationError("display.decoration_count must not be negative.")
    frame_rate = _as_float(section.get("frame_rate", defaults.frame_rate), "display.frame_rate")
    if frame_rate <= 0:
        raise ConfigurationError("display.frame_rate must be greater than zero.")
    return DisplaySettings(
        work_label=_as_str(section.get("work_label", defaults.work_label), "display.work_label"),
        break_label=_as_str(
            section.get("break_label", defaults.break_label), "display.break_label"
        ),
        decoration_count=decoration_count,
        rotation_speed=_as_float(
            section.get("rotation_speed", defaults.rotation_speed),
            "display.rotation_speed",
        ),
        frame_rate=frame_rate,
        bell=_as_bool(section.get("bell", defaults.bell), "display.bell"),
    )


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if isinstance(value, str):
        return value.strip()
    raise ConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise ConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise ConfigurationError(f"{field} must be an integer.") from error
    raise ConfigurationError(f"{field} must be an integer.")


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError as error:
            raise ConfigurationError(f"{field} must be a float.") from error
    else:
        raise ConfigurationError(f"{field} must be a float.")
    if not math.isfinite(number):
        raise ConfigurationError(f"{field} must be a finite number.")
    return number
