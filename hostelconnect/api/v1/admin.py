"""Admin back-office API routes. Every route requires the admin role."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hostelconnect.api.deps import get_db, require_roles
from hostelconnect.auth.roles import Role
from hostelconnect.models.user import User
from hostelconnect.schemas.admin import PlatformStats, UserListResponse
from hostelconnect.schemas.auth import MessageResponse, UserResponse
from hostelconnect.services import admin_service

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])

_admin_only = require_roles(Role.ADMIN)


@router.get("/stats", response_model=PlatformStats, summary="Platform statistics")
async def stats(
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(_admin_only),
) -> PlatformStats:
    return PlatformStats(**await admin_service.get_stats(db, admin))


@router.get("/users", response_model=UserListResponse, summary="List users")
async def list_users(
    role: Role | None = Query(None, description="Only users with this role"),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(_admin_only),
) -> UserListResponse:
    users = await admin_service.list_users(db, admin, role)
    return UserListResponse(
        items=[UserResponse.model_validate(u) for u in users],
        total=len(users),
    )


@router.delete("/users/{user_id}", response_model=MessageResponse, summary="Delete a user")
async def delete_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(_admin_only),
) -> MessageResponse:
    """Delete an account with its hostels, bookings and notifications."""
    await admin_service.delete_user(db, admin, user_id)
    return MessageResponse(message="User deleted")
