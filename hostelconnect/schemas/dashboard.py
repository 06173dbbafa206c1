"""Pydantic v2 response schemas for role dashboards and navigation."""

from pydantic import BaseModel, Field

from hostelconnect.schemas.admin import PlatformStats
from hostelconnect.schemas.auth import UserResponse
from hostelconnect.schemas.booking import BookingDetailResponse
from hostelconnect.schemas.hostel import HostelResponse


class BookingsByStatus(BaseModel):
    pending: list[BookingDetailResponse] = Field(default_factory=list)
    approved: list[BookingDetailResponse] = Field(default_factory=list)
    rejected: list[BookingDetailResponse] = Field(default_factory=list)


class StudentDashboard(BaseModel):
    profile: UserResponse
    bookings: BookingsByStatus


class OwnerDashboard(BaseModel):
    profile: UserResponse
    hostels: list[HostelResponse]
    booking_requests: BookingsByStatus


class AdminDashboard(BaseModel):
    profile: UserResponse
    stats: PlatformStats


class LandingResponse(BaseModel):
    role: str
    redirect_to: str


class AccessDecisionResponse(BaseModel):
    """Whether the caller may open a screen, and where to go if not."""

    allowed: bool
    redirect_to: str | None = None
    notice: str | None = None
