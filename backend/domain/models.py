"""Domain models for study room allocation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional


class Weekday(IntEnum):
    MON = 0
    TUE = 1
    WED = 2
    THU = 3
    FRI = 4
    SAT = 5
    SUN = 6

    @property
    def short_name(self) -> str:
        return self.name.capitalize()


@dataclass
class StudyGroupRequest:
    """One group's desired meeting slot.

    Only ``room`` changes after construction: the allocator sets it once when
    the request is placed and leaves it ``None`` otherwise.
    """

    group_name: str
    day: str
    start: int
    end: int
    room: Optional[int] = None
    sequence: int = 0

    @property
    def is_assigned(self) -> bool:
        return self.room is not None


class OutcomeKind(str, Enum):
    ASSIGNED = "ASSIGNED"
    INVALID_DAY = "INVALID_DAY"
    INVALID_INTERVAL = "INVALID_INTERVAL"
    FULLY_BOOKED = "FULLY_BOOKED"
    BUCKET_CAPACITY_EXCEEDED = "BUCKET_CAPACITY_EXCEEDED"


@dataclass(frozen=True)
class AllocationOutcome:
    group_name: str
    day: str
    start: int
    end: int
    kind: OutcomeKind
    room: Optional[int] = None
    reason: str = ""
    sequence: int = 0

    @property
    def succeeded(self) -> bool:
        return self.kind is OutcomeKind.ASSIGNED


@dataclass(frozen=True)
class AllocationResult:
    outcomes: list[AllocationOutcome]
    assignments: dict[tuple[int, int], list[StudyGroupRequest]] = field(default_factory=dict)
    room_count: int = 0
    day_names: tuple[str, ...] = ()
    bucket_capacity: int = 0

    @property
    def assigned_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def rejected_count(self) -> int:
        return len(self.outcomes) - self.assigned_count
