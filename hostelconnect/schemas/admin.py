"""Pydantic v2 response schemas for the admin back-office."""

from pydantic import BaseModel

from hostelconnect.schemas.auth import UserResponse


class PlatformStats(BaseModel):
    """Counts shown on the admin dashboard."""

    total_users: int
    users_by_role: dict[str, int]
    total_hostels: int
    total_bookings: int
    bookings_by_status: dict[str, int]


class UserListResponse(BaseModel):
    items: list[UserResponse]
    total: int
