from __future__ import annotations

from dataclasses import replace
from itertools import combinations

import pytest

from backend.domain.constraints import AllocatorConfig, intervals_overlap
from backend.domain.models import OutcomeKind, StudyGroupRequest
from backend.services.allocation_service import (
    AllocationValidationError,
    InvalidDayError,
    StudyRoomAllocationService,
    allocate_rooms,
    build_day_lookup,
    resolve_day,
    sort_by_end_time,
)
from backend.utils.config import get_settings


def _requests(*rows: tuple[str, str, int, int]) -> list[StudyGroupRequest]:
    return [
        StudyGroupRequest(group_name=group, day=day, start=start, end=end, sequence=index)
        for index, (group, day, start, end) in enumerate(rows)
    ]


def _assert_no_overlaps(result) -> None:
    for bookings in result.assignments.values():
        for first, second in combinations(bookings, 2):
            assert not intervals_overlap(first.start, first.end, second.start, second.end)


def test_equal_end_times_keep_input_order() -> None:
    requests = _requests(("A", "Mon", 9, 10), ("B", "Mon", 9, 10))

    result = allocate_rooms(requests)

    assert [(o.group_name, o.room) for o in result.outcomes] == [("A", 1), ("B", 2)]
    assert requests[0].room == 1
    assert requests[1].room == 2


def test_overlap_with_single_room_rejects_later_ending_request() -> None:
    requests = _requests(("B", "Mon", 10, 12), ("A", "Mon", 9, 11))

    result = allocate_rooms(requests, AllocatorConfig(room_count=1))

    assert [o.group_name for o in result.outcomes] == ["A", "B"]
    assert result.outcomes[0].kind is OutcomeKind.ASSIGNED
    assert result.outcomes[0].room == 1
    assert result.outcomes[1].kind is OutcomeKind.FULLY_BOOKED
    assert result.outcomes[1].room is None
    assert requests[0].room is None


def test_invalid_day_is_skipped_without_room_search() -> None:
    requests = _requests(("A", "Funday", 9, 10))

    result = allocate_rooms(requests)

    assert result.outcomes[0].kind is OutcomeKind.INVALID_DAY
    assert result.outcomes[0].room is None
    assert result.assignments == {}
    assert not requests[0].is_assigned


def test_day_match_is_case_sensitive() -> None:
    result = allocate_rooms(_requests(("A", "mon", 9, 10)))

    assert result.outcomes[0].kind is OutcomeKind.INVALID_DAY


def test_eleventh_request_on_same_slot_is_fully_booked() -> None:
    requests = _requests(*[(chr(ord("A") + i), "Mon", 9, 10) for i in range(11)])

    result = allocate_rooms(requests)

    assigned = [o for o in result.outcomes if o.succeeded]
    assert [o.room for o in assigned] == list(range(1, 11))
    assert result.outcomes[-1].group_name == "K"
    assert result.outcomes[-1].kind is OutcomeKind.FULLY_BOOKED
    assert result.assigned_count == 10
    assert result.rejected_count == 1


def test_touching_intervals_share_a_room() -> None:
    result = allocate_rooms(
        _requests(("A", "Mon", 9, 10), ("B", "Mon", 10, 11)),
        AllocatorConfig(room_count=1),
    )

    assert [o.room for o in result.outcomes] == [1, 1]
    assert [r.group_name for r in result.assignments[(0, 1)]] == ["A", "B"]


def test_same_interval_on_different_days_reuses_room_one() -> None:
    result = allocate_rooms(
        _requests(("A", "Mon", 9, 10), ("B", "Tue", 9, 10), ("C", "Sun", 9, 10)),
        AllocatorConfig(room_count=1),
    )

    assert all(o.room == 1 for o in result.outcomes)
    assert set(result.assignments) == {(0, 1), (1, 1), (6, 1)}


def test_first_free_room_is_lowest_numbered() -> None:
    # B takes room 2 while A holds room 1; C fits back into room 1 after A.
    result = allocate_rooms(
        _requests(("A", "Mon", 8, 10), ("B", "Mon", 9, 11), ("C", "Mon", 10, 12))
    )

    assert [(o.group_name, o.room) for o in result.outcomes] == [("A", 1), ("B", 2), ("C", 1)]


def test_outcomes_follow_end_time_order_not_input_order() -> None:
    result = allocate_rooms(
        _requests(("A", "Mon", 13, 15), ("B", "Funday", 9, 10), ("C", "Wed", 8, 9))
    )

    assert [o.group_name for o in result.outcomes] == ["C", "B", "A"]
    assert [o.sequence for o in result.outcomes] == [2, 1, 0]


def test_no_overlap_invariant_holds_for_dense_input() -> None:
    rows = [
        (chr(ord("A") + i % 26), ("Mon", "Tue")[i % 2], 8 + i % 5, 10 + i % 7)
        for i in range(60)
    ]

    result = allocate_rooms(_requests(*rows), AllocatorConfig(room_count=3))

    _assert_no_overlaps(result)
    placed = sum(len(bookings) for bookings in result.assignments.values())
    assert placed == result.assigned_count


def test_fully_booked_only_after_every_room_conflicts() -> None:
    rows = [("A", "Mon", 9, 12), ("B", "Mon", 10, 13), ("C", "Mon", 11, 14)]
    result = allocate_rooms(_requests(*rows), AllocatorConfig(room_count=2))

    rejected = [o for o in result.outcomes if not o.succeeded]
    assert [o.group_name for o in rejected] == ["C"]
    for room in (1, 2):
        assert any(
            intervals_overlap(11, 14, booked.start, booked.end)
            for booked in result.assignments[(0, room)]
        )


def test_allocation_is_deterministic() -> None:
    rows = [("A", "Mon", 9, 11), ("B", "Mon", 9, 11), ("C", "Fri", 7, 9), ("D", "Mon", 10, 11)]

    first = allocate_rooms(_requests(*rows), AllocatorConfig(room_count=2))
    second = allocate_rooms(_requests(*rows), AllocatorConfig(room_count=2))

    assert first.outcomes == second.outcomes
    assert {
        key: [r.group_name for r in value] for key, value in first.assignments.items()
    } == {
        key: [r.group_name for r in value] for key, value in second.assignments.items()
    }


def test_reversed_interval_is_rejected_by_default() -> None:
    result = allocate_rooms(_requests(("A", "Mon", 11, 9), ("B", "Mon", 10, 10)))

    assert [o.kind for o in result.outcomes] == [
        OutcomeKind.INVALID_INTERVAL,
        OutcomeKind.INVALID_INTERVAL,
    ]
    assert result.assignments == {}


def test_reversed_interval_accepted_when_validation_disabled() -> None:
    result = allocate_rooms(
        _requests(("A", "Mon", 11, 9)),
        AllocatorConfig(validate_intervals=False),
    )

    assert result.outcomes[0].kind is OutcomeKind.ASSIGNED
    assert result.outcomes[0].room == 1


def test_invalid_day_checked_before_interval() -> None:
    result = allocate_rooms(_requests(("A", "Funday", 11, 9)))

    assert result.outcomes[0].kind is OutcomeKind.INVALID_DAY


def test_full_bucket_moves_request_to_next_room() -> None:
    result = allocate_rooms(
        _requests(("A", "Mon", 8, 9), ("B", "Mon", 9, 10)),
        AllocatorConfig(room_count=2, bucket_capacity=1),
    )

    assert [o.room for o in result.outcomes] == [1, 2]


def test_full_buckets_everywhere_report_capacity_exceeded() -> None:
    result = allocate_rooms(
        _requests(("A", "Mon", 8, 9), ("B", "Mon", 9, 10), ("C", "Mon", 10, 11)),
        AllocatorConfig(room_count=2, bucket_capacity=1),
    )

    assert result.outcomes[2].kind is OutcomeKind.BUCKET_CAPACITY_EXCEEDED
    assert result.outcomes[2].room is None
    assert all(len(bookings) <= 1 for bookings in result.assignments.values())


def test_custom_day_names_resolve_in_order() -> None:
    result = allocate_rooms(
        _requests(("A", "Sat", 9, 10), ("B", "Mon", 9, 10)),
        AllocatorConfig(day_names=("Sat", "Sun")),
    )

    assert result.outcomes[0].kind is OutcomeKind.ASSIGNED
    assert result.outcomes[1].kind is OutcomeKind.INVALID_DAY
    assert list(result.assignments) == [(0, 1)]


def test_invalid_config_raises_before_processing() -> None:
    requests = _requests(("A", "Mon", 9, 10))

    with pytest.raises(AllocationValidationError):
        allocate_rooms(requests, AllocatorConfig(room_count=0))
    assert requests[0].room is None


def test_resolve_day_raises_for_unknown_token() -> None:
    lookup = build_day_lookup(("Mon", "Tue"))

    assert resolve_day("Tue", lookup) == 1
    with pytest.raises(InvalidDayError):
        resolve_day("Wed", lookup)


def test_sort_by_end_time_is_stable() -> None:
    requests = _requests(("A", "Mon", 1, 5), ("B", "Mon", 0, 3), ("C", "Mon", 2, 5), ("D", "Mon", 1, 3))

    assert [r.group_name for r in sort_by_end_time(requests)] == ["B", "D", "A", "C"]


def test_empty_request_list_yields_empty_result() -> None:
    result = allocate_rooms([])

    assert result.outcomes == []
    assert result.assignments == {}


def test_service_uses_settings_and_room_override() -> None:
    settings = replace(get_settings(), allocation_room_count=2, allocation_bucket_capacity=5)
    service = StudyRoomAllocationService(settings=settings)
    rows = [("A", "Mon", 9, 10), ("B", "Mon", 9, 10), ("C", "Mon", 9, 10)]

    default_run = service.schedule_requests(_requests(*rows))
    override_run = service.schedule_requests(_requests(*rows), room_count=3)

    assert default_run.room_count == 2
    assert default_run.outcomes[-1].kind is OutcomeKind.FULLY_BOOKED
    assert override_run.assigned_count == 3
    assert override_run.bucket_capacity == 5


def test_service_rejects_invalid_room_override() -> None:
    service = StudyRoomAllocationService(settings=get_settings())

    with pytest.raises(AllocationValidationError):
        service.build_config(room_count=-1)
