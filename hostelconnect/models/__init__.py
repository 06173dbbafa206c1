"""SQLAlchemy models for HostelConnect.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from hostelconnect.models.booking import Booking, BookingStatus
from hostelconnect.models.hostel import AMENITY_FLAGS, Hostel, HostelAmenities, HostelImage
from hostelconnect.models.notification import Notification
from hostelconnect.models.user import User

__all__ = [
    "AMENITY_FLAGS",
    "Booking",
    "BookingStatus",
    "Hostel",
    "HostelAmenities",
    "HostelImage",
    "Notification",
    "User",
]
