"""Booking lifecycle service.

A booking starts ``pending``. The hostel's owner (or an admin) moves it to
``approved`` or ``rejected``; both are terminal. While it is still pending
the requesting student may cancel it, which deletes the row.

Status writes are conditional on the row still being pending, so two
concurrent decisions on the same booking cannot both succeed.
"""

import logging
import uuid

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hostelconnect.auth.permissions import can_decide_booking, can_view_booking, ensure_role, is_admin
from hostelconnect.auth.roles import Role
from hostelconnect.errors import DuplicateRequest, InvalidTransition, NotAuthorized, NotFound, ValidationError
from hostelconnect.models.booking import Booking, BookingStatus, can_transition
from hostelconnect.models.hostel import Hostel
from hostelconnect.models.user import User
from hostelconnect.services import notification_service

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 1000

DECISION_STATUSES = frozenset({BookingStatus.APPROVED, BookingStatus.REJECTED})

_DECISION_TEMPLATES = {
    BookingStatus.APPROVED: "booking_approved",
    BookingStatus.REJECTED: "booking_rejected",
}


async def _load_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    booking = result.scalar_one_or_none()
    if booking is None:
        raise NotFound("Booking not found")
    return booking


async def _has_pending_request(db: AsyncSession, student_id: uuid.UUID, hostel_id: uuid.UUID) -> bool:
    result = await db.execute(
        select(Booking.id).where(
            Booking.student_id == student_id,
            Booking.hostel_id == hostel_id,
            Booking.status == BookingStatus.PENDING.value,
        )
    )
    return result.first() is not None


async def create_booking(
    db: AsyncSession,
    student: User,
    hostel_id: uuid.UUID,
    message: str | None = None,
) -> Booking:
    """Create a pending booking request from ``student`` for a hostel.

    Raises:
        NotAuthorized: the caller is not a student.
        NotFound: the hostel does not exist.
        ValidationError: the message is too long.
        DuplicateRequest: the student already has a pending request for it.
    """
    ensure_role(student, Role.STUDENT, action="request bookings")

    hostel = await db.get(Hostel, hostel_id)
    if hostel is None:
        raise NotFound("Hostel not found")

    if message is not None:
        message = message.strip() or None
    if message is not None and len(message) > MAX_MESSAGE_LENGTH:
        raise ValidationError({"message": f"Message must be at most {MAX_MESSAGE_LENGTH} characters"})

    if await _has_pending_request(db, student.id, hostel.id):
        raise DuplicateRequest("You already have a pending request for this hostel")

    booking = Booking(
        hostel=hostel,
        student=student,
        status=BookingStatus.PENDING.value,
        message=message,
    )
    db.add(booking)
    try:
        await db.flush()
    except IntegrityError:
        # Lost a race with a concurrent request; the partial unique index caught it.
        raise DuplicateRequest("You already have a pending request for this hostel") from None
    await db.refresh(booking, ["created_at", "updated_at"])

    logger.info("Booking %s requested by student %s for hostel %s", booking.id, student.id, hostel.id)
    await notification_service.notify(
        db,
        hostel.owner_id,
        "booking_requested",
        student_name=student.full_name,
        hostel_name=hostel.name,
    )
    return booking


async def list_bookings_for_student(
    db: AsyncSession,
    student: User,
    hostel_id: uuid.UUID | None = None,
) -> list[Booking]:
    """Return the caller's own booking requests, oldest first."""
    query = select(Booking).where(Booking.student_id == student.id)
    if hostel_id is not None:
        query = query.where(Booking.hostel_id == hostel_id)
    result = await db.execute(query.order_by(Booking.created_at.asc()))
    return list(result.scalars().all())


async def list_bookings_for_owner(db: AsyncSession, owner: User) -> list[Booking]:
    """Return booking requests made against the caller's hostels, newest first."""
    ensure_role(owner, Role.OWNER, Role.ADMIN, action="view booking requests")
    result = await db.execute(
        select(Booking)
        .join(Hostel, Booking.hostel_id == Hostel.id)
        .where(Hostel.owner_id == owner.id)
        .order_by(Booking.created_at.desc())
    )
    return list(result.scalars().all())


async def list_all_bookings(db: AsyncSession, caller: User) -> list[Booking]:
    """Return every booking on the platform (admin only), newest first."""
    ensure_role(caller, Role.ADMIN, action="view all bookings")
    result = await db.execute(select(Booking).order_by(Booking.created_at.desc()))
    return list(result.scalars().all())


async def get_booking(db: AsyncSession, caller: User, booking_id: uuid.UUID) -> Booking:
    """Return one booking the caller is allowed to see.

    Bookings the caller cannot see are reported as missing so their
    existence is not revealed.
    """
    booking = await _load_booking(db, booking_id)
    if not can_view_booking(caller, booking):
        raise NotFound("Booking not found")
    return booking


async def set_booking_status(
    db: AsyncSession,
    caller: User,
    booking_id: uuid.UUID,
    new_status: BookingStatus | str,
) -> Booking:
    """Approve or reject a pending booking.

    Raises:
        ValidationError: ``new_status`` is not ``approved`` or ``rejected``.
        NotFound: the booking does not exist.
        NotAuthorized: the caller neither owns the hostel nor is an admin.
        InvalidTransition: the booking has already been decided.
    """
    try:
        target = BookingStatus(new_status)
    except ValueError:
        target = None
    if target not in DECISION_STATUSES:
        raise ValidationError({"status": "Status must be 'approved' or 'rejected'"})

    booking = await _load_booking(db, booking_id)
    if not can_decide_booking(caller, booking):
        logger.warning("User %s may not decide booking %s", caller.id, booking.id)
        raise NotAuthorized("Only the hostel owner or an admin can approve or reject this booking")

    current = booking.lifecycle_status
    if not can_transition(current, target):
        raise InvalidTransition(f"Booking is already {current.value}")

    result = await db.execute(
        update(Booking)
        .where(Booking.id == booking.id, Booking.status == BookingStatus.PENDING.value)
        .values(status=target.value, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise InvalidTransition("Booking was decided by someone else")
    await db.refresh(booking, ["status", "updated_at"])

    logger.info(
        "Booking %s %s -> %s by %s%s",
        booking.id,
        current.value,
        target.value,
        caller.id,
        " (admin)" if is_admin(caller) else "",
    )
    await notification_service.notify(
        db,
        booking.student_id,
        _DECISION_TEMPLATES[target],
        hostel_name=booking.hostel.name,
        location=booking.hostel.location,
    )
    return booking


async def cancel_booking(db: AsyncSession, student: User, booking_id: uuid.UUID) -> None:
    """Withdraw the caller's own pending request. The row is deleted.

    Raises:
        NotFound: the booking does not exist.
        NotAuthorized: the caller did not make this request.
        InvalidTransition: the booking has already been decided.
    """
    booking = await _load_booking(db, booking_id)
    if booking.student_id != student.id:
        logger.warning("User %s may not cancel booking %s", student.id, booking.id)
        raise NotAuthorized("You can only cancel your own booking requests")

    current = booking.lifecycle_status
    if current.is_terminal:
        raise InvalidTransition(f"Cannot cancel a booking that is already {current.value}")

    hostel = booking.hostel
    result = await db.execute(
        delete(Booking)
        .where(Booking.id == booking.id, Booking.status == BookingStatus.PENDING.value)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise InvalidTransition("Booking was decided before it could be cancelled")
    db.expunge(booking)

    logger.info("Booking %s cancelled by student %s", booking_id, student.id)
    await notification_service.notify(
        db,
        hostel.owner_id,
        "booking_cancelled",
        student_name=student.full_name,
        hostel_name=hostel.name,
    )
