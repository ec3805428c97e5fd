"""Greedy earliest-end-first room allocation for study group requests."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence

from backend.domain.constraints import AllocatorConfig, validate_allocator_config
from backend.domain.models import (
    AllocationOutcome,
    AllocationResult,
    OutcomeKind,
    StudyGroupRequest,
)
from backend.domain.schedule import (
    BucketCapacityExceededError,
    RequestRejectedError,
    Schedule,
)
from backend.repository.request_source import RequestSourceRepository
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


class AllocationValidationError(Exception):
    """Raised when the allocation run configuration is invalid."""


class InvalidDayError(RequestRejectedError):
    kind = OutcomeKind.INVALID_DAY

    def __init__(self, day: str) -> None:
        super().__init__(f"invalid day '{day}'")
        self.day = day


class InvalidIntervalError(RequestRejectedError):
    kind = OutcomeKind.INVALID_INTERVAL

    def __init__(self, start: int, end: int) -> None:
        super().__init__(f"start ({start}) must be < end ({end})")
        self.start = start
        self.end = end


class NoRoomAvailableError(RequestRejectedError):
    kind = OutcomeKind.FULLY_BOOKED

    def __init__(self, room_count: int) -> None:
        super().__init__(f"all {room_count} rooms are fully booked")
        self.room_count = room_count


def build_day_lookup(day_names: Iterable[str]) -> dict[str, int]:
    return {name: index for index, name in enumerate(day_names)}


def resolve_day(day: str, day_lookup: Mapping[str, int]) -> int:
    """Return the day index for an exact, case-sensitive day name."""
    try:
        return day_lookup[day]
    except KeyError as exc:
        raise InvalidDayError(day) from exc


def sort_by_end_time(requests: Iterable[StudyGroupRequest]) -> list[StudyGroupRequest]:
    """Order by end time only; sorted() is stable so ties keep input order."""
    return sorted(requests, key=lambda request: request.end)


def _place_request(
    request: StudyGroupRequest,
    schedule: Schedule,
    day_lookup: Mapping[str, int],
    config: AllocatorConfig,
) -> int:
    day_index = resolve_day(request.day, day_lookup)
    if config.validate_intervals and request.start >= request.end:
        raise InvalidIntervalError(request.start, request.end)

    capacity_error: BucketCapacityExceededError | None = None
    for room in range(1, config.room_count + 1):
        if schedule.has_conflict(day_index, room, request.start, request.end):
            continue
        try:
            schedule.add(day_index, room, request)
        except BucketCapacityExceededError as exc:
            capacity_error = exc
            continue
        return room

    if capacity_error is not None:
        raise capacity_error
    raise NoRoomAvailableError(config.room_count)


def _outcome_for(
    request: StudyGroupRequest,
    kind: OutcomeKind,
    room: Optional[int] = None,
    reason: str = "",
) -> AllocationOutcome:
    return AllocationOutcome(
        group_name=request.group_name,
        day=request.day,
        start=request.start,
        end=request.end,
        kind=kind,
        room=room,
        reason=reason,
        sequence=request.sequence,
    )


def allocate_rooms(
    requests: Sequence[StudyGroupRequest],
    config: Optional[AllocatorConfig] = None,
) -> AllocationResult:
    """Assign each request to the lowest-numbered free room on its day.

    Requests are processed once, in ascending end-time order, with no
    backtracking. Rejections are reported as outcomes and never abort the run.
    """
    config = config or AllocatorConfig()
    try:
        validate_allocator_config(config)
    except ValueError as exc:
        raise AllocationValidationError(str(exc)) from exc

    day_lookup = build_day_lookup(config.day_names)
    schedule = Schedule(bucket_capacity=config.bucket_capacity)
    outcomes: list[AllocationOutcome] = []

    for request in sort_by_end_time(requests):
        request.room = None
        try:
            room = _place_request(request, schedule, day_lookup, config)
        except RequestRejectedError as exc:
            outcome = _outcome_for(request, exc.kind, reason=str(exc))
        else:
            request.room = room
            outcome = _outcome_for(request, OutcomeKind.ASSIGNED, room=room)

        if outcome.succeeded:
            logger.info(
                "Request assigned | group=%s | day=%s | start=%s | end=%s | room=%s",
                outcome.group_name,
                outcome.day,
                outcome.start,
                outcome.end,
                outcome.room,
            )
        else:
            logger.warning(
                "Request rejected | group=%s | day=%s | start=%s | end=%s | kind=%s | reason=%s",
                outcome.group_name,
                outcome.day,
                outcome.start,
                outcome.end,
                outcome.kind.value,
                outcome.reason,
            )
        outcomes.append(outcome)

    result = AllocationResult(
        outcomes=outcomes,
        assignments=schedule.snapshot(),
        room_count=config.room_count,
        day_names=tuple(config.day_names),
        bucket_capacity=config.bucket_capacity,
    )
    logger.info(
        "Allocation completed | requests=%s | assigned=%s | rejected=%s | rooms=%s",
        len(outcomes),
        result.assigned_count,
        result.rejected_count,
        config.room_count,
    )
    return result


class StudyRoomAllocationService:
    """Builds allocator configuration from settings and runs allocations."""

    def __init__(
        self,
        repository: Optional[RequestSourceRepository] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or RequestSourceRepository(self._settings)

    def build_config(self, room_count: Optional[int] = None) -> AllocatorConfig:
        config = AllocatorConfig(
            room_count=(
                room_count
                if room_count is not None
                else self._settings.allocation_room_count
            ),
            day_names=tuple(self._settings.allocation_day_names),
            bucket_capacity=self._settings.allocation_bucket_capacity,
            validate_intervals=self._settings.allocation_validate_intervals,
        )
        try:
            validate_allocator_config(config)
        except ValueError as exc:
            raise AllocationValidationError(str(exc)) from exc
        return config

    def schedule_requests(
        self,
        requests: Sequence[StudyGroupRequest],
        *,
        room_count: Optional[int] = None,
    ) -> AllocationResult:
        return allocate_rooms(requests, self.build_config(room_count=room_count))

    def schedule_from_source(
        self,
        path: Optional[Path] = None,
        *,
        room_count: Optional[int] = None,
    ) -> AllocationResult:
        requests = self._repository.load_requests(path)
        logger.info("Loaded study group requests | count=%s", len(requests))
        return self.schedule_requests(requests, room_count=room_count)
