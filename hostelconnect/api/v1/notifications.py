"""Notification API routes: the caller's own in-app notices."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hostelconnect.api.deps import get_current_user, get_db
from hostelconnect.models.user import User
from hostelconnect.schemas.notification import NotificationListResponse, NotificationResponse
from hostelconnect.services import notification_service

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationListResponse:
    """Newest first."""
    items = await notification_service.list_notifications(db, current_user, unread_only=unread_only)
    return NotificationListResponse(
        items=[NotificationResponse.model_validate(n) for n in items],
        total=len(items),
        unread=sum(1 for n in items if not n.read),
    )


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationResponse:
    notification = await notification_service.mark_read(db, current_user, notification_id)
    return NotificationResponse.model_validate(notification)
