"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from backend.services.allocation_service import StudyRoomAllocationService


def get_allocation_service(request: Request) -> StudyRoomAllocationService:
    service = getattr(request.app.state, "allocation_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Allocation service is not initialized",
        )
    return service
