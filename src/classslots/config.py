"""Configuration loading for classslots.

Settings come from an optional YAML file and are then overridden by
``CLASSSLOTS_*`` environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from classslots.schedule.exceptions import InvalidTimeFormatError
from classslots.schedule.timemath import to_minutes

DEFAULT_CONFIG_FILE = "classslots.yaml"

BACKENDS = ("content_store", "database")


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


@dataclass
class Settings:
    """Process-wide settings.

    ``max_capacity`` and ``session_minutes`` apply to every slot of every
    course; they are deployment settings, not per-course data.
    """

    backend: str = "content_store"
    content_store_url: str = "http://localhost:1337"
    content_store_token: str = ""
    locale: str = "pt-BR"
    request_timeout: float = 10.0
    db_path: str = "classslots.db"
    max_capacity: int = 15
    session_minutes: int = 50
    nearly_full_ratio: float = 0.8
    few_seats_threshold: int = 7
    time_prefix: str = "BRT"
    lock_timeout: float = 5.0
    utc_offset_hours: int = -3
    fallback_times: list[str] = field(
        default_factory=lambda: ["14:00", "15:00", "16:00", "17:00", "18:00", "19:00", "20:00"]
    )

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ConfigError: If a value is out of range.
        """
        if self.backend not in BACKENDS:
            raise ConfigError(f"Unknown backend '{self.backend}', expected one of {BACKENDS}")
        if self.max_capacity < 1:
            raise ConfigError("max_capacity must be >= 1")
        if not 1 <= self.session_minutes <= 24 * 60:
            raise ConfigError("session_minutes must be between 1 and 1440")
        if not 0 < self.nearly_full_ratio <= 1:
            raise ConfigError("nearly_full_ratio must be in (0, 1]")
        if self.few_seats_threshold < 0:
            raise ConfigError("few_seats_threshold must be >= 0")
        if not -12 <= self.utc_offset_hours <= 14:
            raise ConfigError("utc_offset_hours must be between -12 and 14")
        if self.request_timeout <= 0 or self.lock_timeout <= 0:
            raise ConfigError("timeouts must be positive")
        if not self.fallback_times:
            raise ConfigError("fallback_times must list at least one time")
        for label in self.fallback_times:
            try:
                to_minutes(label)
            except InvalidTimeFormatError as e:
                raise ConfigError(f"Invalid fallback time {label!r}, expected HH:MM") from e

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create settings from a dictionary, rejecting unknown keys.

        Raises:
            ConfigError: If unknown keys are present or values are invalid.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e


def _coerce(name: str, raw: str, template: Any) -> Any:
    """Convert an environment string to the type of the default value."""
    try:
        if isinstance(template, int):
            return int(raw)
        if isinstance(template, float):
            return float(raw)
        if isinstance(template, list):
            return [item.strip() for item in raw.split(",") if item.strip()]
    except ValueError as e:
        raise ConfigError(f"Invalid value for CLASSSLOTS_{name.upper()}: {raw!r}") from e
    return raw


def _env_overrides(defaults: Settings) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for f in fields(Settings):
        raw = os.environ.get(f"CLASSSLOTS_{f.name.upper()}")
        if raw is not None:
            overrides[f.name] = _coerce(f.name, raw, getattr(defaults, f.name))
    return overrides


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML (optional) and the environment.

    Args:
        config_path: Path to a YAML file. When None, CLASSSLOTS_CONFIG is
            consulted, then ./classslots.yaml if it exists.

    Returns:
        Parsed settings.

    Raises:
        ConfigError: If the file is missing, not a mapping, or invalid.
    """
    explicit = config_path is not None or "CLASSSLOTS_CONFIG" in os.environ
    if config_path is None:
        config_path = os.environ.get("CLASSSLOTS_CONFIG", DEFAULT_CONFIG_FILE)
    config_path = Path(config_path)

    data: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        if loaded is not None:
            if not isinstance(loaded, dict):
                raise ConfigError(
                    f"Configuration must be a YAML mapping, got {type(loaded).__name__}"
                )
            data = loaded
    elif explicit:
        raise ConfigError(f"Configuration file not found: {config_path}")

    settings = Settings.from_dict(data)
    overrides = _env_overrides(settings)
    if not overrides:
        return settings
    return Settings.from_dict({**data, **overrides})
