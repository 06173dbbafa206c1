"""Listing service: hostel CRUD and public search."""

import logging
import uuid
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hostelconnect.auth.permissions import ensure_can_manage_hostel, ensure_role
from hostelconnect.auth.roles import Role
from hostelconnect.errors import NotFound, ValidationError
from hostelconnect.models.booking import Booking
from hostelconnect.models.hostel import AMENITY_FLAGS, Hostel, HostelAmenities, HostelImage
from hostelconnect.models.user import User

logger = logging.getLogger(__name__)

_SCALAR_FIELDS = ("name", "location", "price", "rooms", "description")


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _clean_text(value: Any, field: str, errors: dict[str, str], required: bool) -> str | None:
    if value is None:
        if required:
            errors[field] = f"{field.capitalize()} is required"
        return None
    text = str(value).strip()
    if not text:
        if required:
            errors[field] = f"{field.capitalize()} cannot be blank"
        return None
    return text


def _clean_price(value: Any, errors: dict[str, str]) -> Decimal | None:
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        errors["price"] = "Price must be a number"
        return None
    if not price.is_finite() or price <= 0:
        errors["price"] = "Price must be greater than zero"
        return None
    return price.quantize(Decimal("0.01"))


def _clean_rooms(value: Any, errors: dict[str, str]) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        errors["rooms"] = "Rooms must be a whole number"
        return None
    if value <= 0:
        errors["rooms"] = "Rooms must be greater than zero"
        return None
    return value


def parse_amenities(names: Iterable[str], errors: dict[str, str]) -> set[str]:
    """Normalise amenity names, recording unknown ones in ``errors``."""
    requested = {str(name).strip().lower() for name in names if str(name).strip()}
    unknown = sorted(requested - set(AMENITY_FLAGS))
    if unknown:
        errors["amenities"] = f"Unknown amenities: {', '.join(unknown)}"
    return requested & set(AMENITY_FLAGS)


def _clean_images(urls: Iterable[str], errors: dict[str, str]) -> list[str]:
    cleaned = []
    for url in urls:
        text = (url or "").strip()
        if not text:
            errors["images"] = "Image URLs cannot be blank"
            continue
        cleaned.append(text)
    return cleaned


def _validate(fields: dict[str, Any], *, partial: bool) -> dict[str, Any]:
    """Check every provided field and raise one ``ValidationError`` listing all problems."""
    errors: dict[str, str] = {}
    cleaned: dict[str, Any] = {}

    for field in ("name", "location"):
        if field in fields or not partial:
            cleaned[field] = _clean_text(fields.get(field), field, errors, required=True)
    if "description" in fields:
        cleaned["description"] = _clean_text(fields["description"], "description", errors, required=False)
    if "price" in fields or not partial:
        cleaned["price"] = _clean_price(fields.get("price"), errors)
    if "rooms" in fields or not partial:
        cleaned["rooms"] = _clean_rooms(fields.get("rooms"), errors)
    if fields.get("amenities") is not None:
        cleaned["amenities"] = parse_amenities(fields["amenities"], errors)
    if fields.get("images") is not None:
        cleaned["images"] = _clean_images(fields["images"], errors)

    if errors:
        raise ValidationError(errors)
    return cleaned


def _build_images(urls: list[str]) -> list[HostelImage]:
    return [HostelImage(image_url=url, position=i, is_primary=i == 0) for i, url in enumerate(urls)]


def _amenity_flags(enabled: set[str]) -> dict[str, bool]:
    return {flag: flag in enabled for flag in AMENITY_FLAGS}


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


async def create_hostel(
    db: AsyncSession,
    caller: User,
    *,
    name: str,
    location: str,
    price: Decimal | float | int | str,
    rooms: int,
    description: str | None = None,
    amenities: Iterable[str] | None = None,
    images: Iterable[str] | None = None,
) -> Hostel:
    """Create a listing owned by ``caller``.

    Amenities not named are off. The first image is the primary one.

    Raises:
        NotAuthorized: the caller is a student.
        ValidationError: one or more fields are invalid; nothing is written.
    """
    ensure_role(caller, Role.OWNER, Role.ADMIN, action="create hostels")
    cleaned = _validate(
        {
            "name": name,
            "location": location,
            "price": price,
            "rooms": rooms,
            "description": description,
            "amenities": amenities if amenities is not None else [],
            "images": images if images is not None else [],
        },
        partial=False,
    )

    hostel = Hostel(
        owner=caller,
        name=cleaned["name"],
        location=cleaned["location"],
        price=cleaned["price"],
        rooms=cleaned["rooms"],
        description=cleaned.get("description"),
        amenities=HostelAmenities(**_amenity_flags(cleaned["amenities"])),
        images=_build_images(cleaned["images"]),
    )
    db.add(hostel)
    await db.flush()
    await db.refresh(hostel, ["created_at", "updated_at"])

    logger.info("Hostel %s (%s) created by %s", hostel.id, hostel.name, caller.id)
    return hostel


async def get_hostel(db: AsyncSession, hostel_id: uuid.UUID) -> Hostel:
    """Return one hostel. Listings are public."""
    result = await db.execute(select(Hostel).where(Hostel.id == hostel_id))
    hostel = result.scalar_one_or_none()
    if hostel is None:
        raise NotFound("Hostel not found")
    return hostel


async def update_hostel(db: AsyncSession, caller: User, hostel_id: uuid.UUID, **fields: Any) -> Hostel:
    """Partially update a listing.

    Scalar fields that are not passed keep their value. ``amenities`` and
    ``images``, when passed, replace the whole flag set or image list.
    """
    unknown = set(fields) - set(_SCALAR_FIELDS) - {"amenities", "images"}
    if unknown:
        raise ValidationError({name: "Unknown field" for name in sorted(unknown)})

    hostel = await get_hostel(db, hostel_id)
    ensure_can_manage_hostel(caller, hostel)
    cleaned = _validate(fields, partial=True)

    for field in _SCALAR_FIELDS:
        if field in cleaned:
            setattr(hostel, field, cleaned[field])

    if "amenities" in cleaned:
        flags = _amenity_flags(cleaned["amenities"])
        if hostel.amenities is None:
            hostel.amenities = HostelAmenities(**flags)
        else:
            for flag, value in flags.items():
                setattr(hostel.amenities, flag, value)

    if "images" in cleaned:
        hostel.images = _build_images(cleaned["images"])

    if "amenities" in cleaned or "images" in cleaned:
        # Child rows changed; the listing row itself may not have.
        hostel.updated_at = func.now()

    await db.flush()
    await db.refresh(hostel, ["updated_at"])

    logger.info("Hostel %s updated by %s (%s)", hostel.id, caller.id, ", ".join(sorted(cleaned)))
    return hostel


async def delete_hostel(db: AsyncSession, caller: User, hostel_id: uuid.UUID) -> None:
    """Delete a listing with its amenities, images and every booking for it."""
    hostel = await get_hostel(db, hostel_id)
    ensure_can_manage_hostel(caller, hostel)

    result = await db.execute(delete(Booking).where(Booking.hostel_id == hostel.id))
    await db.delete(hostel)
    await db.flush()
    logger.info("Hostel %s deleted by %s along with %d booking(s)", hostel_id, caller.id, result.rowcount)


async def list_hostels_for_owner(db: AsyncSession, owner: User) -> list[Hostel]:
    """Return the caller's own listings, newest first."""
    ensure_role(owner, Role.OWNER, Role.ADMIN, action="manage hostels")
    result = await db.execute(
        select(Hostel).where(Hostel.owner_id == owner.id).order_by(Hostel.created_at.desc())
    )
    return list(result.scalars().all())


async def search_hostels(
    db: AsyncSession,
    location: str | None = None,
    min_price: Decimal | float | None = None,
    max_price: Decimal | float | None = None,
    amenities: Iterable[str] = (),
) -> list[Hostel]:
    """Public search.

    ``location`` matches as a case-insensitive substring (``%`` and ``_``
    are literal), prices are inclusive bounds, and every requested amenity
    must be available.
    """
    errors: dict[str, str] = {}
    required = parse_amenities(amenities, errors)
    if errors:
        raise ValidationError(errors)

    query = select(Hostel)
    location = (location or "").strip()
    if location:
        query = query.where(Hostel.location.icontains(location, autoescape=True))
    if min_price is not None:
        query = query.where(Hostel.price >= min_price)
    if max_price is not None:
        query = query.where(Hostel.price <= max_price)
    if required:
        query = query.join(HostelAmenities, HostelAmenities.hostel_id == Hostel.id).where(
            *(getattr(HostelAmenities, flag).is_(True) for flag in sorted(required))
        )

    result = await db.execute(query.order_by(Hostel.created_at.desc()))
    return list(result.scalars().all())
