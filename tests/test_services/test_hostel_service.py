"""Tests for the listing service: CRUD rules and search."""

import uuid
from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from hostelconnect.errors import NotAuthorized, NotFound, ValidationError
from hostelconnect.models.hostel import Hostel, HostelAmenities, HostelImage
from hostelconnect.models.user import User
from hostelconnect.services import hostel_service


async def _count(db, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


def _listing(**overrides) -> dict:
    data = {
        "name": "Kutus Comfort Hostel",
        "location": "Kutus",
        "price": Decimal("300"),
        "rooms": 10,
    }
    data.update(overrides)
    return data


class TestCreateHostel:
    async def test_owner_creates_with_amenities_and_images(self, db_session, owner: User):
        hostel = await hostel_service.create_hostel(
            db_session,
            owner,
            **_listing(amenities=["WiFi", "kitchen"], images=["https://img.test/a.jpg", "https://img.test/b.jpg"]),
        )
        assert hostel.owner_id == owner.id
        assert hostel.price == Decimal("300.00")
        assert hostel.amenity_set == {"wifi", "kitchen"}
        assert hostel.image_urls == ["https://img.test/a.jpg", "https://img.test/b.jpg"]
        assert [img.is_primary for img in hostel.images] == [True, False]

    async def test_amenities_default_to_off(self, db_session, owner: User):
        hostel = await hostel_service.create_hostel(db_session, owner, **_listing())
        assert hostel.amenities is not None
        assert not any(hostel.amenities.as_dict().values())
        assert hostel.images == []

    async def test_admin_may_create(self, db_session, admin: User):
        hostel = await hostel_service.create_hostel(db_session, admin, **_listing())
        assert hostel.owner_id == admin.id

    async def test_student_may_not_create(self, db_session, student: User):
        with pytest.raises(NotAuthorized):
            await hostel_service.create_hostel(db_session, student, **_listing())
        assert await _count(db_session, Hostel) == 0

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"price": 0}, "price"),
            ({"price": Decimal("-5")}, "price"),
            ({"price": "abc"}, "price"),
            ({"rooms": 0}, "rooms"),
            ({"rooms": -1}, "rooms"),
            ({"name": "   "}, "name"),
            ({"location": ""}, "location"),
            ({"amenities": ["wifi", "pool"]}, "amenities"),
            ({"images": ["https://img.test/a.jpg", " "]}, "images"),
        ],
    )
    async def test_invalid_input_persists_nothing(self, db_session, owner: User, overrides, field):
        with pytest.raises(ValidationError) as exc_info:
            await hostel_service.create_hostel(db_session, owner, **_listing(**overrides))
        assert field in exc_info.value.errors
        assert await _count(db_session, Hostel) == 0
        assert await _count(db_session, HostelAmenities) == 0

    async def test_reports_every_bad_field(self, db_session, owner: User):
        with pytest.raises(ValidationError) as exc_info:
            await hostel_service.create_hostel(db_session, owner, **_listing(price=0, rooms=0, name=""))
        assert set(exc_info.value.errors) == {"price", "rooms", "name"}


class TestReadHostel:
    async def test_amenities_round_trip(self, db_session, owner: User):
        created = await hostel_service.create_hostel(
            db_session, owner, **_listing(amenities=["water", "security", "bathroom"])
        )
        hostel_id = created.id
        db_session.expunge_all()

        loaded = await hostel_service.get_hostel(db_session, hostel_id)
        assert loaded is not created
        assert loaded.amenity_set == {"water", "security", "bathroom"}

    async def test_get_unknown(self, db_session):
        with pytest.raises(NotFound):
            await hostel_service.get_hostel(db_session, uuid.uuid4())

    async def test_list_for_owner(self, db_session, owner: User, hostel: Hostel, other_hostel: Hostel):
        mine = await hostel_service.list_hostels_for_owner(db_session, owner)
        assert [h.id for h in mine] == [hostel.id]

    async def test_students_have_no_listings_page(self, db_session, student: User):
        with pytest.raises(NotAuthorized):
            await hostel_service.list_hostels_for_owner(db_session, student)


class TestUpdateHostel:
    async def test_partial_update_keeps_other_fields(self, db_session, owner: User, hostel: Hostel):
        updated = await hostel_service.update_hostel(db_session, owner, hostel.id, price=Decimal("7000"))
        assert updated.price == Decimal("7000.00")
        assert updated.name == "Kutus Comfort Hostel"
        assert updated.rooms == 24
        assert updated.amenity_set == {"wifi", "water", "security"}
        assert len(updated.images) == 2

    async def test_amenities_replaced_wholesale(self, db_session, owner: User, hostel: Hostel):
        updated = await hostel_service.update_hostel(db_session, owner, hostel.id, amenities=["kitchen"])
        assert updated.amenity_set == {"kitchen"}
        assert await _count(db_session, HostelAmenities) == 1

    async def test_images_replaced_wholesale(self, db_session, owner: User, hostel: Hostel):
        updated = await hostel_service.update_hostel(
            db_session, owner, hostel.id, images=["https://img.test/new.jpg"]
        )
        assert updated.image_urls == ["https://img.test/new.jpg"]
        assert updated.images[0].is_primary
        assert await _count(db_session, HostelImage) == 1

    @pytest.mark.parametrize(
        "changes",
        [{"amenities": ["kitchen"]}, {"images": ["https://img.test/new.jpg"]}],
    )
    async def test_child_only_update_touches_listing(self, db_session, owner: User, hostel: Hostel, changes):
        await db_session.execute(
            update(Hostel)
            .where(Hostel.id == hostel.id)
            .values(updated_at=datetime(2020, 1, 1))
            .execution_options(synchronize_session=False)
        )
        updated = await hostel_service.update_hostel(db_session, owner, hostel.id, **changes)
        assert updated.updated_at.year > 2020

    async def test_admin_may_update_any(self, db_session, admin: User, hostel: Hostel):
        updated = await hostel_service.update_hostel(db_session, admin, hostel.id, name="Renamed")
        assert updated.name == "Renamed"

    async def test_other_owner_may_not_update(self, db_session, other_owner: User, hostel: Hostel):
        with pytest.raises(NotAuthorized):
            await hostel_service.update_hostel(db_session, other_owner, hostel.id, name="Mine now")
        assert hostel.name == "Kutus Comfort Hostel"

    async def test_invalid_update(self, db_session, owner: User, hostel: Hostel):
        with pytest.raises(ValidationError):
            await hostel_service.update_hostel(db_session, owner, hostel.id, rooms=0)
        assert hostel.rooms == 24

    async def test_unknown_field(self, db_session, owner: User, hostel: Hostel):
        with pytest.raises(ValidationError):
            await hostel_service.update_hostel(db_session, owner, hostel.id, owner_id=uuid.uuid4())

    async def test_unknown_hostel(self, db_session, owner: User):
        with pytest.raises(NotFound):
            await hostel_service.update_hostel(db_session, owner, uuid.uuid4(), name="x")


class TestDatabaseChecks:
    @pytest.mark.parametrize(("field", "value"), [("price", Decimal("0")), ("rooms", -3)])
    async def test_non_positive_values_rejected(self, db_session, hostel: Hostel, field, value):
        setattr(hostel, field, value)
        with pytest.raises(IntegrityError):
            await db_session.flush()


class TestDeleteHostel:
    async def test_removes_amenities_and_images(self, db_session, owner: User, hostel: Hostel):
        await hostel_service.delete_hostel(db_session, owner, hostel.id)
        assert await _count(db_session, Hostel) == 0
        assert await _count(db_session, HostelAmenities) == 0
        assert await _count(db_session, HostelImage) == 0

    async def test_other_owner_may_not_delete(self, db_session, other_owner: User, hostel: Hostel):
        with pytest.raises(NotAuthorized):
            await hostel_service.delete_hostel(db_session, other_owner, hostel.id)
        assert await _count(db_session, Hostel) == 1

    async def test_student_may_not_delete(self, db_session, student: User, hostel: Hostel):
        with pytest.raises(NotAuthorized):
            await hostel_service.delete_hostel(db_session, student, hostel.id)


class TestSearchHostels:
    @pytest.fixture
    async def listings(self, db_session, owner: User) -> dict[str, Hostel]:
        specs = {
            "cheap_wifi": _listing(name="Cheap", location="Kutus Town", price=150, amenities=["wifi"]),
            "mid_wifi": _listing(name="Mid", location="kutus stage", price=250, amenities=["wifi", "water"]),
            "mid_nowifi": _listing(name="Mid No Wifi", location="Kerugoya", price=300, amenities=["water"]),
            "top_wifi": _listing(name="Edge", location="Kerugoya", price=400, amenities=["wifi"]),
            "pricey_wifi": _listing(name="Pricey", location="Kutus 100%", price=500, amenities=["wifi", "kitchen"]),
        }
        return {key: await hostel_service.create_hostel(db_session, owner, **data) for key, data in specs.items()}

    async def test_price_range_and_amenity(self, db_session, listings):
        found = await hostel_service.search_hostels(db_session, min_price=200, max_price=400, amenities={"wifi"})
        assert {h.id for h in found} == {listings["mid_wifi"].id, listings["top_wifi"].id}

    async def test_no_filters_returns_everything(self, db_session, listings):
        assert len(await hostel_service.search_hostels(db_session)) == len(listings)

    async def test_location_is_case_insensitive_substring(self, db_session, listings):
        found = await hostel_service.search_hostels(db_session, location="KUTUS")
        assert {h.name for h in found} == {"Cheap", "Mid", "Pricey"}

    async def test_location_wildcards_are_literal(self, db_session, listings):
        assert [h.name for h in await hostel_service.search_hostels(db_session, location="100%")] == ["Pricey"]
        assert await hostel_service.search_hostels(db_session, location="K_tus") == []

    async def test_every_requested_amenity_required(self, db_session, listings):
        found = await hostel_service.search_hostels(db_session, amenities=["wifi", "water"])
        assert [h.name for h in found] == ["Mid"]

    async def test_unknown_amenity_rejected(self, db_session, listings):
        with pytest.raises(ValidationError):
            await hostel_service.search_hostels(db_session, amenities=["pool"])
