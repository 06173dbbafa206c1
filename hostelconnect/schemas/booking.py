"""Pydantic v2 request/response schemas for booking endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from hostelconnect.schemas.auth import UserSummary
from hostelconnect.schemas.hostel import HostelSummary

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BookingCreate(BaseModel):
    """Schema for a student's booking request."""

    hostel_id: uuid.UUID
    message: str | None = Field(None, max_length=1000)


class BookingStatusUpdate(BaseModel):
    """Owner/admin decision on a pending booking."""

    status: str = Field(..., max_length=20)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingResponse(BaseModel):
    """Standard booking response."""

    id: uuid.UUID
    hostel_id: uuid.UUID
    student_id: uuid.UUID
    status: str
    message: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookingDetailResponse(BookingResponse):
    """Booking with the hostel summary and the student's contact details.

    Used for dashboards, where each row shows both sides of the request
    without extra round-trips.
    """

    hostel: HostelSummary | None = None
    student: UserSummary | None = None


class BookingListResponse(BaseModel):
    """List of bookings."""

    items: list[BookingDetailResponse]
    total: int
