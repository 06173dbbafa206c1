"""Bookings API router.

Students request and cancel; hostel owners (and admins) approve or reject.
Every rule lives in ``booking_service``; this module only maps HTTP onto it.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hostelconnect.api.deps import get_current_user, get_db
from hostelconnect.models.booking import Booking
from hostelconnect.models.user import User
from hostelconnect.schemas.auth import MessageResponse
from hostelconnect.schemas.booking import (
    BookingCreate,
    BookingDetailResponse,
    BookingListResponse,
    BookingStatusUpdate,
)
from hostelconnect.services import booking_service

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


def _as_list(bookings: list[Booking]) -> BookingListResponse:
    return BookingListResponse(
        items=[BookingDetailResponse.model_validate(b) for b in bookings],
        total=len(bookings),
    )


@router.post(
    "",
    response_model=BookingDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request a booking",
)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Booking:
    """Send a booking request for a hostel. Only students can do this."""
    return await booking_service.create_booking(db, current_user, body.hostel_id, body.message)


@router.get(
    "",
    response_model=BookingListResponse,
    summary="List the current student's booking requests",
)
async def list_my_bookings(
    hostel_id: uuid.UUID | None = Query(None, description="Only requests for this hostel"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BookingListResponse:
    bookings = await booking_service.list_bookings_for_student(db, current_user, hostel_id)
    return _as_list(bookings)


@router.get(
    "/requests",
    response_model=BookingListResponse,
    summary="List booking requests for the current owner's hostels",
)
async def list_booking_requests(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BookingListResponse:
    bookings = await booking_service.list_bookings_for_owner(db, current_user)
    return _as_list(bookings)


@router.get(
    "/all",
    response_model=BookingListResponse,
    summary="List every booking (admin)",
)
async def list_all_bookings(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BookingListResponse:
    bookings = await booking_service.list_all_bookings(db, current_user)
    return _as_list(bookings)


@router.get(
    "/{booking_id}",
    response_model=BookingDetailResponse,
    summary="Get a booking",
)
async def get_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Booking:
    """Return a booking the caller is party to. Others get 404."""
    return await booking_service.get_booking(db, current_user, booking_id)


@router.patch(
    "/{booking_id}/status",
    response_model=BookingDetailResponse,
    summary="Approve or reject a booking",
)
async def set_booking_status(
    booking_id: uuid.UUID,
    body: BookingStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Booking:
    return await booking_service.set_booking_status(db, current_user, booking_id, body.status)


@router.delete(
    "/{booking_id}",
    response_model=MessageResponse,
    summary="Cancel a pending booking request",
)
async def cancel_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    await booking_service.cancel_booking(db, current_user, booking_id)
    return MessageResponse(message="Booking request cancelled")
