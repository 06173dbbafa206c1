"""Admin back-office service: platform stats and user management."""

import logging
import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hostelconnect.auth.permissions import ensure_role
from hostelconnect.auth.roles import Role, parse_role
from hostelconnect.errors import NotFound, ValidationError
from hostelconnect.models.booking import Booking, BookingStatus
from hostelconnect.models.hostel import Hostel
from hostelconnect.models.notification import Notification
from hostelconnect.models.user import User

logger = logging.getLogger(__name__)


async def get_stats(db: AsyncSession, admin: User) -> dict:
    """Counts shown on the admin dashboard."""
    ensure_role(admin, Role.ADMIN, action="view platform statistics")

    role_rows = await db.execute(select(User.role, func.count()).group_by(User.role))
    users_by_role = {role.value: 0 for role in Role}
    for role, count in role_rows.all():
        key = parse_role(role).value
        users_by_role[key] += count

    status_rows = await db.execute(select(Booking.status, func.count()).group_by(Booking.status))
    bookings_by_status = {status.value: 0 for status in BookingStatus}
    for status, count in status_rows.all():
        bookings_by_status[status] = count

    total_hostels = (await db.execute(select(func.count()).select_from(Hostel))).scalar_one()

    return {
        "total_users": sum(users_by_role.values()),
        "users_by_role": users_by_role,
        "total_hostels": total_hostels,
        "total_bookings": sum(bookings_by_status.values()),
        "bookings_by_status": bookings_by_status,
    }


async def list_users(db: AsyncSession, admin: User, role: Role | None = None) -> list[User]:
    ensure_role(admin, Role.ADMIN, action="list users")
    query = select(User)
    if role is not None:
        query = query.where(User.role == role.value)
    result = await db.execute(query.order_by(User.created_at.desc()))
    return list(result.scalars().all())


async def delete_user(db: AsyncSession, admin: User, user_id: uuid.UUID) -> None:
    """Delete an account and everything that belongs to it.

    Removes the user's hostels (with their amenities, images and bookings),
    the bookings the user made, and the user's notifications.
    """
    ensure_role(admin, Role.ADMIN, action="delete users")
    if user_id == admin.id:
        raise ValidationError({"user_id": "You cannot delete your own account"})

    user = await db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")

    hostels = (await db.execute(select(Hostel).where(Hostel.owner_id == user.id))).scalars().all()
    hostel_ids = [hostel.id for hostel in hostels]

    if hostel_ids:
        await db.execute(delete(Booking).where(Booking.hostel_id.in_(hostel_ids)))
    await db.execute(delete(Booking).where(Booking.student_id == user.id))
    for hostel in hostels:
        await db.delete(hostel)
    await db.execute(delete(Notification).where(Notification.user_id == user.id))
    await db.delete(user)
    await db.flush()

    logger.info(
        "Admin %s deleted user %s (%s) with %d hostel(s)",
        admin.id,
        user.id,
        user.role,
        len(hostel_ids),
    )
