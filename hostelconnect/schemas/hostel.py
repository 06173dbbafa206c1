"""Pydantic v2 request/response schemas for hostel endpoints.

Request schemas only bound sizes and types; the listing service owns the
business rules (positive price and rooms, known amenity names).
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class HostelCreate(BaseModel):
    """Schema for creating a listing."""

    name: str = Field(..., max_length=255)
    location: str = Field(..., max_length=255)
    price: Decimal
    rooms: int
    description: str | None = Field(None, max_length=5000)
    amenities: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list, max_length=20)


class HostelUpdate(BaseModel):
    """Partial update. ``amenities`` and ``images`` replace the stored set when given."""

    name: str | None = Field(None, max_length=255)
    location: str | None = Field(None, max_length=255)
    price: Decimal | None = None
    rooms: int | None = None
    description: str | None = Field(None, max_length=5000)
    amenities: list[str] | None = None
    images: list[str] | None = Field(None, max_length=20)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class HostelImageResponse(BaseModel):
    image_url: str
    position: int
    is_primary: bool

    model_config = ConfigDict(from_attributes=True)


class HostelSummary(BaseModel):
    """The listing fields shown next to a booking."""

    id: uuid.UUID
    name: str
    location: str
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class HostelResponse(BaseModel):
    """Full listing with amenity flags and ordered images."""

    id: uuid.UUID
    owner_id: uuid.UUID
    name: str
    location: str
    price: Decimal
    rooms: int
    description: str | None = None
    amenities: dict[str, bool]
    images: list[HostelImageResponse]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_hostel(cls, hostel) -> "HostelResponse":
        return cls(
            id=hostel.id,
            owner_id=hostel.owner_id,
            name=hostel.name,
            location=hostel.location,
            price=hostel.price,
            rooms=hostel.rooms,
            description=hostel.description,
            amenities=hostel.amenities.as_dict() if hostel.amenities is not None else {},
            images=[HostelImageResponse.model_validate(image) for image in hostel.images],
            created_at=hostel.created_at,
            updated_at=hostel.updated_at,
        )


class HostelListResponse(BaseModel):
    """List of listings. Search is not paginated."""

    items: list[HostelResponse]
    total: int
