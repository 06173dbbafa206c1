"""Authorization rules shared by every service.

Each mutation in the service layer asks one of these predicates before it
touches the database, so the same role and ownership rules apply whether a
request comes from the HTTP API, the seed script or a test.
"""

import logging

from fastapi import Depends

from hostelconnect.auth.dependencies import get_current_user
from hostelconnect.auth.roles import Role
from hostelconnect.errors import NotAuthorized
from hostelconnect.models.booking import Booking
from hostelconnect.models.hostel import Hostel
from hostelconnect.models.user import User

logger = logging.getLogger(__name__)


def is_admin(user: User) -> bool:
    return user.access_role is Role.ADMIN


def ensure_role(user: User, *roles: Role, action: str = "perform this action") -> None:
    """Raise ``NotAuthorized`` unless ``user`` holds one of ``roles``."""
    if user.access_role not in roles:
        logger.warning(
            "User %s with role %s denied: needs one of %s to %s",
            user.id,
            user.access_role.value,
            ", ".join(role.value for role in roles),
            action,
        )
        raise NotAuthorized(f"Only {' or '.join(role.value for role in roles)} accounts can {action}")


def can_manage_hostel(user: User, hostel: Hostel) -> bool:
    """Owners manage their own listings; admins manage all of them."""
    return is_admin(user) or (user.access_role is Role.OWNER and hostel.owner_id == user.id)


def ensure_can_manage_hostel(user: User, hostel: Hostel) -> None:
    if not can_manage_hostel(user, hostel):
        logger.warning("User %s may not manage hostel %s", user.id, hostel.id)
        raise NotAuthorized("You do not manage this hostel")


def can_view_booking(user: User, booking: Booking) -> bool:
    """A booking is visible to its student, its hostel's owner and admins."""
    if is_admin(user):
        return True
    if booking.student_id == user.id:
        return True
    return booking.hostel is not None and booking.hostel.owner_id == user.id


def can_decide_booking(user: User, booking: Booking) -> bool:
    """Approve/reject is reserved for the hostel's owner and admins."""
    if is_admin(user):
        return True
    return (
        user.access_role is Role.OWNER
        and booking.hostel is not None
        and booking.hostel.owner_id == user.id
    )


def require_roles(*roles: Role):
    """FastAPI dependency factory: the current user, if they hold one of ``roles``.

    Usage::

        @router.get("/stats")
        async def stats(admin: User = Depends(require_roles(Role.ADMIN))): ...
    """

    async def _dependency(current_user: User = Depends(get_current_user)) -> User:
        ensure_role(current_user, *roles, action="access this resource")
        return current_user

    return _dependency
