"""Notification service: templated in-app notices for booking events."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hostelconnect.errors import NotFound
from hostelconnect.models.notification import Notification
from hostelconnect.models.user import User

logger = logging.getLogger(__name__)

TEMPLATES = {
    "booking_requested": {
        "title": "New booking request for {hostel_name}",
        "message": "{student_name} has requested to book {hostel_name}. Review it from your dashboard.",
    },
    "booking_approved": {
        "title": "Booking approved: {hostel_name}",
        "message": "Your booking request for {hostel_name} in {location} has been approved.",
    },
    "booking_rejected": {
        "title": "Booking rejected: {hostel_name}",
        "message": "Your booking request for {hostel_name} was not accepted. You can search for other hostels.",
    },
    "booking_cancelled": {
        "title": "Booking request cancelled: {hostel_name}",
        "message": "{student_name} has cancelled their pending request for {hostel_name}.",
    },
}


async def notify(db: AsyncSession, user_id: uuid.UUID, template: str, **context: object) -> Notification:
    """Write a notification for ``user_id`` from one of ``TEMPLATES``.

    Raises:
        KeyError: if ``template`` is unknown or a placeholder is missing
            from ``context``.
    """
    tmpl = TEMPLATES[template]
    notification = Notification(
        user_id=user_id,
        title=tmpl["title"].format(**context),
        message=tmpl["message"].format(**context),
    )
    db.add(notification)
    await db.flush()
    await db.refresh(notification, ["created_at"])
    logger.info("Notification %s (%s) queued for user %s", notification.id, template, user_id)
    return notification


async def list_notifications(db: AsyncSession, user: User, unread_only: bool = False) -> list[Notification]:
    """Return the caller's notifications, newest first."""
    query = select(Notification).where(Notification.user_id == user.id)
    if unread_only:
        query = query.where(Notification.read.is_(False))
    result = await db.execute(query.order_by(Notification.created_at.desc()))
    return list(result.scalars().all())


async def mark_read(db: AsyncSession, user: User, notification_id: uuid.UUID) -> Notification:
    """Mark one of the caller's notifications as read."""
    result = await db.execute(
        select(Notification).where(
            Notification.id == notification_id,
            Notification.user_id == user.id,
        )
    )
    notification = result.scalar_one_or_none()
    if notification is None:
        raise NotFound("Notification not found")

    notification.read = True
    await db.flush()
    return notification
