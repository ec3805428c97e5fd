"""HTTP controller layer for study room scheduling."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from backend.controllers.dependencies import get_allocation_service
from backend.domain.models import OutcomeKind, StudyGroupRequest
from backend.services.allocation_service import (
    AllocationValidationError,
    StudyRoomAllocationService,
)
from backend.services.report_service import render_report
from backend.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["scheduling"])


class StudyGroupRequestItem(BaseModel):
    """Input DTO; the day token is checked by the allocator, not here."""

    group_name: str = Field(min_length=1, max_length=1)
    day: str = Field(min_length=1)
    start: int
    end: int

    @field_validator("group_name")
    @classmethod
    def validate_group_name(cls, value: str) -> str:
        if value.isspace():
            raise ValueError("group_name must not be whitespace")
        return value


class ScheduleRequest(BaseModel):
    requests: list[StudyGroupRequestItem]
    room_count: int | None = Field(default=None, gt=0)


class OutcomeResponse(BaseModel):
    group_name: str
    day: str
    start: int
    end: int
    status: OutcomeKind
    room: int | None = Field(default=None, gt=0)
    reason: str = ""


class BookingResponse(BaseModel):
    group_name: str
    start: int
    end: int


class RoomAssignmentResponse(BaseModel):
    day: str
    room: int = Field(gt=0)
    bookings: list[BookingResponse]


class ScheduleResponse(BaseModel):
    outcomes: list[OutcomeResponse]
    assignments: list[RoomAssignmentResponse]
    report_lines: list[str]
    assigned_count: int = Field(ge=0)
    rejected_count: int = Field(ge=0)


class ScheduleConfigResponse(BaseModel):
    room_count: int = Field(gt=0)
    day_names: list[str]
    bucket_capacity: int = Field(gt=0)
    validate_intervals: bool


@router.get("/health", status_code=status.HTTP_200_OK)
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/schedule/config",
    response_model=ScheduleConfigResponse,
    status_code=status.HTTP_200_OK,
)
async def schedule_config(
    service: StudyRoomAllocationService = Depends(get_allocation_service),
) -> ScheduleConfigResponse:
    try:
        config = service.build_config()
    except AllocationValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc
    return ScheduleConfigResponse(
        room_count=config.room_count,
        day_names=list(config.day_names),
        bucket_capacity=config.bucket_capacity,
        validate_intervals=config.validate_intervals,
    )


@router.post(
    "/schedule",
    response_model=ScheduleResponse,
    status_code=status.HTTP_200_OK,
)
async def schedule(
    payload: ScheduleRequest,
    service: StudyRoomAllocationService = Depends(get_allocation_service),
) -> ScheduleResponse:
    """Run one allocation over the posted requests; nothing is kept afterwards."""
    requests = [
        StudyGroupRequest(
            group_name=item.group_name,
            day=item.day,
            start=item.start,
            end=item.end,
            sequence=index,
        )
        for index, item in enumerate(payload.requests)
    ]
    try:
        result = service.schedule_requests(requests, room_count=payload.room_count)
    except AllocationValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - unexpected failure
        logger.exception("Unexpected scheduling failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to schedule study groups",
        ) from exc

    return ScheduleResponse(
        outcomes=[
            OutcomeResponse(
                group_name=outcome.group_name,
                day=outcome.day,
                start=outcome.start,
                end=outcome.end,
                status=outcome.kind,
                room=outcome.room,
                reason=outcome.reason,
            )
            for outcome in result.outcomes
        ],
        assignments=[
            RoomAssignmentResponse(
                day=result.day_names[day_index],
                room=room,
                bookings=[
                    BookingResponse(
                        group_name=booking.group_name,
                        start=booking.start,
                        end=booking.end,
                    )
                    for booking in bookings
                ],
            )
            for (day_index, room), bookings in result.assignments.items()
        ],
        report_lines=render_report(result),
        assigned_count=result.assigned_count,
        rejected_count=result.rejected_count,
    )
