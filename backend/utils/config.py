"""Runtime settings loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from backend.domain.constraints import DEFAULT_DAY_NAMES


TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class ConfigurationError(ValueError):
    """Raised when an environment variable holds an unusable value."""


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got '{raw}'") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"{name} must be one of {sorted(TRUE_VALUES | FALSE_VALUES)}, got '{raw}'"
    )


def _env_day_names(name: str) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return DEFAULT_DAY_NAMES
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str
    allocation_room_count: int
    allocation_day_names: tuple[str, ...]
    allocation_bucket_capacity: int
    allocation_validate_intervals: bool
    request_source_path: Path


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process; tests derive variants with replace()."""
    return Settings(
        app_name=os.getenv("APP_NAME", "Study Room Allocator"),
        app_version=os.getenv("APP_VERSION", "1.0.0"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        allocation_room_count=_env_int("ROOM_COUNT", 10),
        allocation_day_names=_env_day_names("DAY_NAMES"),
        allocation_bucket_capacity=_env_int("BUCKET_CAPACITY", 100),
        allocation_validate_intervals=_env_bool("VALIDATE_INTERVALS", True),
        request_source_path=Path(os.getenv("REQUEST_SOURCE_PATH", "input.txt")),
    )
