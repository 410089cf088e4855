import asyncio
from datetime import datetime, timezone

import pytest
from bson import ObjectId
from mongomock_motor import AsyncMongoMockClient

from campbook.db.mongo import BOOKINGS_COLLECTION, CAMPGROUNDS_COLLECTION, USERS_COLLECTION
from campbook.db.mongo_repositories import (
    MongoBookingRepository,
    MongoCampgroundRepository,
    MongoUserRepository,
)


@pytest.fixture
def db():
    return AsyncMongoMockClient()["campbook_test"]


@pytest.fixture
def users(db):
    return MongoUserRepository(db[USERS_COLLECTION])


@pytest.fixture
def campgrounds(db):
    return MongoCampgroundRepository(db[CAMPGROUNDS_COLLECTION])


@pytest.fixture
def bookings(db):
    return MongoBookingRepository(db[BOOKINGS_COLLECTION])


def book(bookings, user_id, campground_id):
    return asyncio.run(bookings.create({
        "user": user_id,
        "campground": campground_id,
        "booking_date": datetime(2026, 7, 1, tzinfo=timezone.utc),
        "created_at": datetime.now(timezone.utc),
    }))


def camp(campgrounds, name):
    return asyncio.run(campgrounds.create({"name": name, "address": "1 Forest Rd"}))


def test_user_lookups(users):
    created = asyncio.run(users.create({"firebase_uid": "fb-1", "email": "jane@example.com", "role": "user"}))

    assert ObjectId.is_valid(created["id"])
    assert asyncio.run(users.find_by_id(created["id"]))["firebase_uid"] == "fb-1"
    assert asyncio.run(users.find_by_firebase_uid("fb-1"))["id"] == created["id"]
    assert asyncio.run(users.find_by_email("jane@example.com"))["id"] == created["id"]
    assert asyncio.run(users.find_by_id("not-an-id")) is None
    assert asyncio.run(users.find_by_id(str(ObjectId()))) is None


def test_campground_update_find_and_delete(campgrounds):
    alpha = camp(campgrounds, "Alpha")
    beta = camp(campgrounds, "Beta")

    updated = asyncio.run(campgrounds.update(alpha["id"], {"address": "2 Lake Rd"}))
    assert updated == {"id": alpha["id"], "name": "Alpha", "address": "2 Lake Rd"}
    assert asyncio.run(campgrounds.update(str(ObjectId()), {"address": "x"})) is None

    assert [c["name"] for c in asyncio.run(campgrounds.find_all())] == ["Alpha", "Beta"]
    found = asyncio.run(campgrounds.find_by_ids([alpha["id"], "bogus", str(ObjectId())]))
    assert list(found) == [alpha["id"]]

    deleted = asyncio.run(campgrounds.delete(beta["id"]))
    assert deleted["name"] == "Beta"
    assert asyncio.run(campgrounds.find_by_id(beta["id"])) is None
    assert asyncio.run(campgrounds.delete(beta["id"])) is None


def test_booking_references_stored_as_object_ids(db, bookings, campgrounds):
    campground = camp(campgrounds, "Alpha")
    user_id = str(ObjectId())

    booking = book(bookings, user_id, campground["id"])
    assert booking["user"] == user_id
    assert booking["campground"] == campground["id"]

    stored = asyncio.run(db[BOOKINGS_COLLECTION].find_one({}))
    assert stored["user"] == ObjectId(user_id)
    assert stored["campground"] == ObjectId(campground["id"])

    fetched = asyncio.run(bookings.find_by_id(booking["id"]))
    assert fetched["user"] == user_id
    assert fetched["campground"] == campground["id"]


def test_booking_filters_and_counts(bookings, campgrounds):
    alpha = camp(campgrounds, "Alpha")
    beta = camp(campgrounds, "Beta")
    jane, joe = str(ObjectId()), str(ObjectId())
    book(bookings, jane, alpha["id"])
    book(bookings, jane, beta["id"])
    book(bookings, joe, alpha["id"])

    assert {b["campground"] for b in asyncio.run(bookings.find(user_id=jane))} == {alpha["id"], beta["id"]}
    assert [b["user"] for b in asyncio.run(bookings.find(campground_id=beta["id"]))] == [jane]
    assert len(asyncio.run(bookings.find(user_id=jane, campground_id=alpha["id"]))) == 1
    assert len(asyncio.run(bookings.find())) == 3

    assert asyncio.run(bookings.count_by_user(jane)) == 2
    assert asyncio.run(bookings.count_by_user(joe)) == 1
    assert asyncio.run(bookings.count_by_user(str(ObjectId()))) == 0
    assert asyncio.run(bookings.count_all()) == 3


def test_count_by_campground_keeps_deleted_campgrounds(bookings, campgrounds):
    alpha = camp(campgrounds, "Alpha")
    beta = camp(campgrounds, "Beta")
    user_id = str(ObjectId())
    book(bookings, user_id, alpha["id"])
    book(bookings, user_id, alpha["id"])
    book(bookings, user_id, beta["id"])
    asyncio.run(campgrounds.delete(beta["id"]))

    groups = {g["campground_id"]: g for g in asyncio.run(bookings.count_by_campground())}

    assert groups[alpha["id"]] == {"campground_id": alpha["id"], "campground_name": "Alpha", "booking_count": 2}
    assert groups[beta["id"]] == {"campground_id": beta["id"], "campground_name": None, "booking_count": 1}
    assert sum(g["booking_count"] for g in groups.values()) == asyncio.run(bookings.count_all())


def test_booking_update_and_delete(db, bookings, campgrounds):
    alpha = camp(campgrounds, "Alpha")
    beta = camp(campgrounds, "Beta")
    booking = book(bookings, str(ObjectId()), alpha["id"])

    updated = asyncio.run(bookings.update(booking["id"], {"campground": beta["id"]}))
    assert updated["campground"] == beta["id"]
    stored = asyncio.run(db[BOOKINGS_COLLECTION].find_one({}))
    assert stored["campground"] == ObjectId(beta["id"])

    assert asyncio.run(bookings.update("not-an-id", {"campground": beta["id"]})) is None
    assert asyncio.run(bookings.update(booking["id"], {}))["id"] == booking["id"]

    deleted = asyncio.run(bookings.delete(booking["id"]))
    assert deleted["campground"] == beta["id"]
    assert asyncio.run(bookings.find_by_id(booking["id"])) is None
