"""Seed the database with demo accounts, hostels near Kirinyaga University and bookings.

Everything except the accounts is created through the service layer, so
the seeded data obeys the same rules as data entered through the API.

Run from the repository root:
    python -m scripts.seed_data
"""

import asyncio
import sys
from decimal import Decimal
from pathlib import Path

# Add the repository root to the path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete, or_, select

from hostelconnect.auth.passwords import hash_password
from hostelconnect.auth.roles import Role
from hostelconnect.database import async_session_factory, engine
from hostelconnect.models.booking import Booking, BookingStatus
from hostelconnect.models.hostel import Hostel
from hostelconnect.models.notification import Notification
from hostelconnect.models.user import User
from hostelconnect.services import booking_service, hostel_service

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_PASSWORD = "hostel1234"

USERS = [
    {"email": "admin@hostelconnect.test", "full_name": "Platform Admin", "role": Role.ADMIN},
    {
        "email": "wanjiru.owner@hostelconnect.test",
        "full_name": "Wanjiru Kamau",
        "phone_number": "+254 712 345 678",
        "role": Role.OWNER,
    },
    {
        "email": "otieno.owner@hostelconnect.test",
        "full_name": "Peter Otieno",
        "phone_number": "+254 733 456 789",
        "role": Role.OWNER,
    },
    {
        "email": "amina.student@hostelconnect.test",
        "full_name": "Amina Mwangi",
        "phone_number": "+254 701 222 333",
        "role": Role.STUDENT,
    },
    {
        "email": "brian.student@hostelconnect.test",
        "full_name": "Brian Njoroge",
        "phone_number": "+254 722 111 000",
        "role": Role.STUDENT,
    },
]

# Keyed by owner email
HOSTELS = {
    "wanjiru.owner@hostelconnect.test": [
        {
            "name": "Kutus Comfort Hostel",
            "location": "Kutus, 5 min walk to Kirinyaga University main gate",
            "price": Decimal("6500.00"),
            "rooms": 24,
            "description": (
                "Single and bedsitter rooms with reliable borehole water, tokens-based "
                "electricity and a night guard. Shared kitchen on every floor."
            ),
            "amenities": ["wifi", "water", "electricity", "security", "kitchen"],
            "images": [
                "https://images.hostelconnect.test/kutus-comfort/front.jpg",
                "https://images.hostelconnect.test/kutus-comfort/room.jpg",
            ],
        },
        {
            "name": "Green Court Residence",
            "location": "Kutus town, behind Naivas",
            "price": Decimal("8000.00"),
            "rooms": 12,
            "description": "Furnished bedsitters with private bathrooms. Fibre Wi-Fi included in rent.",
            "amenities": ["wifi", "water", "electricity", "security", "furniture", "bathroom"],
            "images": ["https://images.hostelconnect.test/green-court/front.jpg"],
        },
    ],
    "otieno.owner@hostelconnect.test": [
        {
            "name": "Kerugoya Scholars Hostel",
            "location": "Kerugoya, along Kutus-Kerugoya road",
            "price": Decimal("4500.00"),
            "rooms": 30,
            "description": "Budget shared rooms on the matatu route to campus. Gated compound.",
            "amenities": ["water", "electricity", "security"],
            "images": [],
        },
    ],
}

# (student email, hostel name, final status, message)
BOOKINGS = [
    ("amina.student@hostelconnect.test", "Kutus Comfort Hostel", BookingStatus.APPROVED, "Looking for a single room from January."),
    ("amina.student@hostelconnect.test", "Kerugoya Scholars Hostel", BookingStatus.REJECTED, None),
    ("brian.student@hostelconnect.test", "Kutus Comfort Hostel", BookingStatus.PENDING, "Is the room on the ground floor?"),
    ("brian.student@hostelconnect.test", "Green Court Residence", BookingStatus.PENDING, None),
]


async def _clear_demo_data(session) -> None:
    """Remove a previous seed run so the script can be re-run."""
    emails = [u["email"] for u in USERS]
    user_ids = list((await session.execute(select(User.id).where(User.email.in_(emails)))).scalars())
    if not user_ids:
        return

    print("⚠️  Demo accounts already exist. Deleting and re-seeding...")
    hostels = (await session.execute(select(Hostel).where(Hostel.owner_id.in_(user_ids)))).scalars().all()
    hostel_ids = [h.id for h in hostels]
    await session.execute(
        delete(Booking).where(or_(Booking.student_id.in_(user_ids), Booking.hostel_id.in_(hostel_ids)))
    )
    for hostel in hostels:
        await session.delete(hostel)
    await session.execute(delete(Notification).where(Notification.user_id.in_(user_ids)))
    await session.flush()
    await session.execute(delete(User).where(User.id.in_(user_ids)))
    await session.flush()


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def seed() -> None:
    """Populate the database with demo data. Idempotent."""
    async with async_session_factory() as session:
        await _clear_demo_data(session)

        # 1. Accounts
        users: dict[str, User] = {}
        for data in USERS:
            user = User(
                email=data["email"],
                hashed_password=hash_password(DEMO_PASSWORD),
                full_name=data["full_name"],
                phone_number=data.get("phone_number"),
                role=data["role"].value,
            )
            session.add(user)
            users[user.email] = user
        await session.flush()
        print(f"✅ Created {len(users)} accounts")

        # 2. Hostels
        hostels: dict[str, Hostel] = {}
        for owner_email, listings in HOSTELS.items():
            for listing in listings:
                hostel = await hostel_service.create_hostel(session, users[owner_email], **listing)
                hostels[hostel.name] = hostel
                print(f"   🏠 {hostel.name} ({hostel.location}) KES {hostel.price}/month")

        # 3. Bookings, decided by each hostel's owner
        for student_email, hostel_name, final_status, message in BOOKINGS:
            hostel = hostels[hostel_name]
            booking = await booking_service.create_booking(session, users[student_email], hostel.id, message)
            if final_status is not BookingStatus.PENDING:
                owner = next(u for u in users.values() if u.id == hostel.owner_id)
                await booking_service.set_booking_status(session, owner, booking.id, final_status)

        await session.commit()

        print(f"✅ Created {len(BOOKINGS)} bookings")
        print()
        print("=" * 60)
        print("📊 Seed Summary")
        print("=" * 60)
        for data in USERS:
            print(f"   {data['role'].value:<8} {data['email']} / {DEMO_PASSWORD}")
        print(f"   Hostels:  {len(hostels)}")
        print(f"   Bookings: {len(BOOKINGS)}")
        print("=" * 60)
        print("🎉 Done! You can now log in at /api/v1/auth/login")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
