"""Console report rendering for allocation outcomes."""

from __future__ import annotations

from backend.domain.models import AllocationOutcome, AllocationResult, OutcomeKind


REPORT_HEADER = "Scheduled study groups:"
RESCHEDULE_SUGGESTION = "Suggestion: Try rescheduling the group to a different time or day."


def _not_scheduled_line(outcome: AllocationOutcome) -> str:
    return (
        f"Error: Group {outcome.group_name} could not be scheduled on "
        f"{outcome.day} from {outcome.start} to {outcome.end}."
    )


def format_outcome(
    outcome: AllocationOutcome,
    *,
    room_count: int,
    bucket_capacity: int,
) -> list[str]:
    if outcome.kind is OutcomeKind.ASSIGNED:
        return [
            f"Group {outcome.group_name}: {outcome.day} from {outcome.start} "
            f"to {outcome.end} in room {outcome.room}"
        ]
    if outcome.kind is OutcomeKind.INVALID_DAY:
        return [
            f"Error: Group {outcome.group_name} has an invalid day '{outcome.day}'. "
            "Skipping scheduling."
        ]
    if outcome.kind is OutcomeKind.INVALID_INTERVAL:
        return [
            f"Error: Group {outcome.group_name} has an invalid time range from "
            f"{outcome.start} to {outcome.end}. Skipping scheduling."
        ]
    if outcome.kind is OutcomeKind.BUCKET_CAPACITY_EXCEEDED:
        return [
            _not_scheduled_line(outcome),
            (
                f"Reason: Room bookings on {outcome.day} have reached the limit "
                f"of {bucket_capacity} per room."
            ),
            RESCHEDULE_SUGGESTION,
        ]
    return [
        _not_scheduled_line(outcome),
        f"Reason: All {room_count} rooms are fully booked during the requested time slot.",
        RESCHEDULE_SUGGESTION,
    ]


def render_report(result: AllocationResult) -> list[str]:
    """Header plus the outcome lines in processing (end-time) order."""
    lines = [REPORT_HEADER]
    for outcome in result.outcomes:
        lines.extend(
            format_outcome(
                outcome,
                room_count=result.room_count,
                bucket_capacity=result.bucket_capacity,
            )
        )
    return lines
