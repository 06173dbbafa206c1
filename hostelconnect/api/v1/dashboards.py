"""Role dashboards.

Each dashboard is scoped to one role. ``require_screen`` applies the
navigation access rules and turns a denial into 401/403 carrying the path
the client should redirect to. Admins may open any dashboard and may pass
``as_user`` to see it as a particular student or owner would.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hostelconnect.api.deps import get_db, get_optional_user
from hostelconnect.auth.permissions import is_admin
from hostelconnect.auth.roles import Role
from hostelconnect.errors import NotAuthorized, NotFound, ValidationError
from hostelconnect.models.booking import Booking
from hostelconnect.models.user import User
from hostelconnect.navigation import check_access
from hostelconnect.schemas.admin import PlatformStats
from hostelconnect.schemas.auth import UserResponse
from hostelconnect.schemas.booking import BookingDetailResponse
from hostelconnect.schemas.dashboard import AdminDashboard, BookingsByStatus, OwnerDashboard, StudentDashboard
from hostelconnect.schemas.hostel import HostelResponse
from hostelconnect.services import admin_service, booking_service, hostel_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/dashboards", tags=["dashboards"])


def require_screen(screen_role: Role):
    """Dependency factory: the caller, if allowed onto ``screen_role``'s screen."""

    async def _dependency(current_user: User | None = Depends(get_optional_user)) -> User:
        decision = check_access(current_user, screen_role)
        if not decision.allowed:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED if current_user is None else status.HTTP_403_FORBIDDEN,
                detail={"message": decision.notice, "redirect_to": decision.redirect_to},
            )
        return current_user

    return _dependency


async def _dashboard_subject(
    db: AsyncSession,
    viewer: User,
    as_user: uuid.UUID | None,
    screen_role: Role,
) -> User:
    """Whose dashboard to build: the viewer's own, or (admins only) another user's."""
    if as_user is None or as_user == viewer.id:
        return viewer
    if not is_admin(viewer):
        raise NotAuthorized("Only admins can view another user's dashboard")

    subject = await db.get(User, as_user)
    if subject is None:
        raise NotFound("User not found")
    if subject.access_role is not screen_role:
        raise ValidationError({"as_user": f"User is not a {screen_role.value}"})

    logger.info("Admin %s viewing %s dashboard as user %s", viewer.id, screen_role.value, subject.id)
    return subject


def _group_by_status(bookings: list[Booking]) -> BookingsByStatus:
    grouped = BookingsByStatus()
    for booking in bookings:
        getattr(grouped, booking.lifecycle_status.value).append(BookingDetailResponse.model_validate(booking))
    return grouped


@router.get("/student", response_model=StudentDashboard)
async def student_dashboard(
    as_user: uuid.UUID | None = Query(None, description="Admin only: view as this student"),
    db: AsyncSession = Depends(get_db),
    viewer: User = Depends(require_screen(Role.STUDENT)),
) -> StudentDashboard:
    """Profile plus the student's booking requests grouped by status."""
    subject = await _dashboard_subject(db, viewer, as_user, Role.STUDENT)
    bookings = await booking_service.list_bookings_for_student(db, subject)
    return StudentDashboard(
        profile=UserResponse.model_validate(subject),
        bookings=_group_by_status(bookings),
    )


@router.get("/owner", response_model=OwnerDashboard)
async def owner_dashboard(
    as_user: uuid.UUID | None = Query(None, description="Admin only: view as this owner"),
    db: AsyncSession = Depends(get_db),
    viewer: User = Depends(require_screen(Role.OWNER)),
) -> OwnerDashboard:
    """The owner's listings and the booking requests made against them."""
    subject = await _dashboard_subject(db, viewer, as_user, Role.OWNER)
    hostels = await hostel_service.list_hostels_for_owner(db, subject)
    requests = await booking_service.list_bookings_for_owner(db, subject)
    return OwnerDashboard(
        profile=UserResponse.model_validate(subject),
        hostels=[HostelResponse.from_hostel(h) for h in hostels],
        booking_requests=_group_by_status(requests),
    )


@router.get("/admin", response_model=AdminDashboard)
async def admin_dashboard(
    db: AsyncSession = Depends(get_db),
    viewer: User = Depends(require_screen(Role.ADMIN)),
) -> AdminDashboard:
    stats = await admin_service.get_stats(db, viewer)
    return AdminDashboard(
        profile=UserResponse.model_validate(viewer),
        stats=PlatformStats(**stats),
    )
