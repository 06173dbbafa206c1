"""Hostel listing API routes.

Search and detail are public. Creating, editing and deleting go through
the listing service, which enforces the owner/admin rules.
"""

import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hostelconnect.api.deps import get_current_user, get_db
from hostelconnect.models.user import User
from hostelconnect.schemas.auth import MessageResponse
from hostelconnect.schemas.hostel import HostelCreate, HostelListResponse, HostelResponse, HostelUpdate
from hostelconnect.services import hostel_service

router = APIRouter(prefix="/api/v1/hostels", tags=["hostels"])


def _as_list(hostels) -> HostelListResponse:
    return HostelListResponse(
        items=[HostelResponse.from_hostel(h) for h in hostels],
        total=len(hostels),
    )


@router.get(
    "",
    response_model=HostelListResponse,
    summary="Search hostels",
)
async def search_hostels(
    location: str | None = Query(None, max_length=255, description="Substring of the location"),
    min_price: Decimal | None = Query(None, ge=0),
    max_price: Decimal | None = Query(None, ge=0),
    amenities: list[str] = Query(default=[], description="Every listed amenity must be available"),
    db: AsyncSession = Depends(get_db),
) -> HostelListResponse:
    """Public search by location, monthly price range and amenities."""
    hostels = await hostel_service.search_hostels(
        db,
        location=location,
        min_price=min_price,
        max_price=max_price,
        amenities=amenities,
    )
    return _as_list(hostels)


@router.get(
    "/mine",
    response_model=HostelListResponse,
    summary="List the current owner's hostels",
)
async def list_my_hostels(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> HostelListResponse:
    hostels = await hostel_service.list_hostels_for_owner(db, current_user)
    return _as_list(hostels)


@router.post(
    "",
    response_model=HostelResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a hostel listing",
)
async def create_hostel(
    body: HostelCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> HostelResponse:
    """Create a listing owned by the authenticated owner (or admin)."""
    hostel = await hostel_service.create_hostel(db, current_user, **body.model_dump())
    return HostelResponse.from_hostel(hostel)


@router.get(
    "/{hostel_id}",
    response_model=HostelResponse,
    summary="Get a hostel by ID",
)
async def get_hostel(
    hostel_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> HostelResponse:
    hostel = await hostel_service.get_hostel(db, hostel_id)
    return HostelResponse.from_hostel(hostel)


@router.put(
    "/{hostel_id}",
    response_model=HostelResponse,
    summary="Update a hostel",
)
async def update_hostel(
    hostel_id: uuid.UUID,
    body: HostelUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> HostelResponse:
    """Partially update a listing. Only explicitly set fields are changed."""
    hostel = await hostel_service.update_hostel(
        db,
        current_user,
        hostel_id,
        **body.model_dump(exclude_unset=True),
    )
    return HostelResponse.from_hostel(hostel)


@router.delete(
    "/{hostel_id}",
    response_model=MessageResponse,
    summary="Delete a hostel",
)
async def delete_hostel(
    hostel_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    """Delete a listing and every booking made for it."""
    await hostel_service.delete_hostel(db, current_user, hostel_id)
    return MessageResponse(message="Hostel deleted")
