"""Per-run room occupancy keyed by (day index, room number)."""

from __future__ import annotations

from collections import defaultdict

from backend.domain.constraints import intervals_overlap
from backend.domain.models import OutcomeKind, StudyGroupRequest


class RequestRejectedError(Exception):
    """Base for per-request failures that are recovered inside a run."""

    kind: OutcomeKind


class BucketCapacityExceededError(RequestRejectedError):
    """Raised when a (day, room) bucket already holds its maximum bookings."""

    kind = OutcomeKind.BUCKET_CAPACITY_EXCEEDED

    def __init__(self, day_index: int, room: int, capacity: int) -> None:
        super().__init__(
            f"bucket (day={day_index}, room={room}) is full at {capacity} bookings"
        )
        self.day_index = day_index
        self.room = room
        self.capacity = capacity


class Schedule:
    """Accepted requests per (day, room); intervals in a bucket never overlap."""

    def __init__(self, bucket_capacity: int) -> None:
        self._bucket_capacity = bucket_capacity
        self._buckets: dict[tuple[int, int], list[StudyGroupRequest]] = defaultdict(list)

    def bucket(self, day_index: int, room: int) -> list[StudyGroupRequest]:
        return list(self._buckets.get((day_index, room), []))

    def has_conflict(self, day_index: int, room: int, start: int, end: int) -> bool:
        return any(
            intervals_overlap(start, end, booked.start, booked.end)
            for booked in self._buckets.get((day_index, room), [])
        )

    def is_full(self, day_index: int, room: int) -> bool:
        return len(self._buckets.get((day_index, room), [])) >= self._bucket_capacity

    def add(self, day_index: int, room: int, request: StudyGroupRequest) -> None:
        if self.is_full(day_index, room):
            raise BucketCapacityExceededError(day_index, room, self._bucket_capacity)
        if self.has_conflict(day_index, room, request.start, request.end):
            raise ValueError(
                f"group {request.group_name} overlaps an existing booking "
                f"in room {room} on day {day_index}"
            )
        self._buckets[(day_index, room)].append(request)

    def snapshot(self) -> dict[tuple[int, int], list[StudyGroupRequest]]:
        return {
            key: list(bookings)
            for key, bookings in sorted(self._buckets.items())
            if bookings
        }
