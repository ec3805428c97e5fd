"""Domain-level validation rules for room allocation."""

from __future__ import annotations

from dataclasses import dataclass

from backend.domain.models import Weekday


DEFAULT_ROOM_COUNT = 10
DEFAULT_BUCKET_CAPACITY = 100
DEFAULT_DAY_NAMES: tuple[str, ...] = tuple(day.short_name for day in Weekday)


@dataclass(frozen=True)
class AllocatorConfig:
    room_count: int = DEFAULT_ROOM_COUNT
    day_names: tuple[str, ...] = DEFAULT_DAY_NAMES
    bucket_capacity: int = DEFAULT_BUCKET_CAPACITY
    validate_intervals: bool = True


def validate_allocator_config(config: AllocatorConfig) -> None:
    if config.room_count <= 0:
        raise ValueError("room_count must be > 0")
    if not config.day_names:
        raise ValueError("day_names must not be empty")
    if any(not name for name in config.day_names):
        raise ValueError("day_names must not contain empty names")
    if len(set(config.day_names)) != len(config.day_names):
        raise ValueError("day_names must be unique")
    if config.bucket_capacity <= 0:
        raise ValueError("bucket_capacity must be > 0")


def intervals_overlap(start: int, end: int, other_start: int, other_end: int) -> bool:
    """Half-open overlap test; intervals that only touch do not conflict."""
    return not (end <= other_start or start >= other_end)
