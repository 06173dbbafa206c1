"""Booking model: a student's request to reserve a hostel."""

import uuid
from enum import Enum

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostelconnect.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class BookingStatus(str, Enum):
    """Booking lifecycle states. ``pending`` is the only non-terminal one."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not BookingStatus.PENDING


# pending -> approved | rejected; nothing leaves a terminal state.
ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.APPROVED, BookingStatus.REJECTED}),
    BookingStatus.APPROVED: frozenset(),
    BookingStatus.REJECTED: frozenset(),
}


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    """Return True if the state machine allows ``current -> target``."""
    return target in ALLOWED_TRANSITIONS[current]


class Booking(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A booking request linking a student to a hostel."""

    __tablename__ = "bookings"

    hostel_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("hostels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default=BookingStatus.PENDING.value,
        nullable=False,
        index=True,
    )
    message: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    hostel: Mapped["Hostel"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    student: Mapped["User"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_bookings_status",
        ),
        # At most one open request per student and hostel.
        Index(
            "uq_bookings_pending_student_hostel",
            "student_id",
            "hostel_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
    )

    @property
    def lifecycle_status(self) -> BookingStatus:
        return BookingStatus(self.status)

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, hostel_id={self.hostel_id}, student_id={self.student_id}, status={self.status})>"
        )
