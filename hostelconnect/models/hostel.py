"""Hostel model with its amenity flags and image list."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostelconnect.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

# Order matters: it is the order amenities are shown and serialised in.
AMENITY_FLAGS: tuple[str, ...] = (
    "wifi",
    "water",
    "electricity",
    "security",
    "furniture",
    "kitchen",
    "bathroom",
)


class Hostel(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A hostel property listed by an owner."""

    __tablename__ = "hostels"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_hostels_price_positive"),
        CheckConstraint("rooms > 0", name="ck_hostels_rooms_positive"),
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)  # per month
    rooms: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)

    # Relationships
    owner: Mapped["User"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    amenities: Mapped["HostelAmenities | None"] = relationship(
        back_populates="hostel",
        uselist=False,
        lazy="selectin",
        cascade="all, delete-orphan",
    )
    images: Mapped[list["HostelImage"]] = relationship(
        back_populates="hostel",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="HostelImage.position",
    )

    @property
    def amenity_set(self) -> set[str]:
        """Names of the amenity flags that are switched on."""
        if self.amenities is None:
            return set()
        return {flag for flag in AMENITY_FLAGS if getattr(self.amenities, flag)}

    @property
    def image_urls(self) -> list[str]:
        return [image.image_url for image in self.images]

    def __repr__(self) -> str:
        return f"<Hostel(id={self.id}, name={self.name!r}, owner_id={self.owner_id})>"


class HostelAmenities(Base):
    """Amenity flags for exactly one hostel."""

    __tablename__ = "amenities"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    hostel_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("hostels.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    wifi: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    water: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    electricity: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    security: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    furniture: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    kitchen: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    bathroom: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    hostel: Mapped["Hostel"] = relationship(back_populates="amenities")

    def as_dict(self) -> dict[str, bool]:
        return {flag: bool(getattr(self, flag)) for flag in AMENITY_FLAGS}


class HostelImage(Base):
    """One image reference in a hostel's ordered gallery."""

    __tablename__ = "hostel_images"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    hostel_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("hostels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    hostel: Mapped["Hostel"] = relationship(back_populates="images")

    def __repr__(self) -> str:
        return f"<HostelImage(hostel_id={self.hostel_id}, position={self.position})>"
