"""
campbook/db/mongo_repositories.py

Purpose: Motor implementations of the repository protocols

- Converts between ObjectId-keyed documents and the string-keyed dicts
  the services work with
- Bookings keep `user` and `campground` as ObjectIds so the dashboard
  aggregation can `$lookup` campgrounds
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from campbook.db.mongo import CAMPGROUNDS_COLLECTION
from campbook.db.repositories import Document
from campbook.utils.validation_utils import is_valid_object_id

BOOKING_REFERENCE_FIELDS = ("user", "campground")


def _object_id(value: Optional[str]) -> Optional[ObjectId]:
    if not is_valid_object_id(value):
        return None
    return ObjectId(value)


def _serialize(document: Optional[Dict[str, Any]]) -> Optional[Document]:
    """Maps `_id` to a string `id` and stringifies ObjectId references."""
    if document is None:
        return None
    result = {key: value for key, value in document.items() if key != "_id"}
    result["id"] = str(document["_id"])
    for key, value in list(result.items()):
        if isinstance(value, ObjectId):
            result[key] = str(value)
    return result


def _with_references(data: Document) -> Dict[str, Any]:
    """Turns string booking references back into ObjectIds for storage."""
    stored = dict(data)
    for field in BOOKING_REFERENCE_FIELDS:
        if field in stored and isinstance(stored[field], str):
            stored[field] = _object_id(stored[field])
    return stored


class MongoUserRepository:
    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def find_by_id(self, user_id: str) -> Optional[Document]:
        oid = _object_id(user_id)
        if oid is None:
            return None
        return _serialize(await self.collection.find_one({"_id": oid}))

    async def find_by_firebase_uid(self, firebase_uid: str) -> Optional[Document]:
        return _serialize(await self.collection.find_one({"firebase_uid": firebase_uid}))

    async def find_by_email(self, email: str) -> Optional[Document]:
        return _serialize(await self.collection.find_one({"email": email}))

    async def create(self, data: Document) -> Document:
        document = dict(data)
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return _serialize(document)


class MongoCampgroundRepository:
    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def find_all(self) -> List[Document]:
        cursor = self.collection.find().sort("name", 1)
        return [_serialize(doc) async for doc in cursor]

    async def find_by_id(self, campground_id: str) -> Optional[Document]:
        oid = _object_id(campground_id)
        if oid is None:
            return None
        return _serialize(await self.collection.find_one({"_id": oid}))

    async def find_by_ids(self, campground_ids: List[str]) -> Dict[str, Document]:
        oids = [oid for oid in (_object_id(cid) for cid in set(campground_ids)) if oid]
        if not oids:
            return {}
        cursor = self.collection.find({"_id": {"$in": oids}})
        return {str(doc["_id"]): _serialize(doc) async for doc in cursor}

    async def create(self, data: Document) -> Document:
        document = dict(data)
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return _serialize(document)

    async def update(self, campground_id: str, changes: Document) -> Optional[Document]:
        oid = _object_id(campground_id)
        if oid is None:
            return None
        if not changes:
            return await self.find_by_id(campground_id)
        updated = await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            return_document=ReturnDocument.AFTER
        )
        return _serialize(updated)

    async def delete(self, campground_id: str) -> Optional[Document]:
        oid = _object_id(campground_id)
        if oid is None:
            return None
        return _serialize(await self.collection.find_one_and_delete({"_id": oid}))


class MongoBookingRepository:
    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def find(
        self,
        user_id: Optional[str] = None,
        campground_id: Optional[str] = None
    ) -> List[Document]:
        query: Dict[str, Any] = {}
        if user_id is not None:
            query["user"] = _object_id(user_id)
        if campground_id is not None:
            query["campground"] = _object_id(campground_id)
        cursor = self.collection.find(query).sort("created_at", 1)
        return [_serialize(doc) async for doc in cursor]

    async def find_by_id(self, booking_id: str) -> Optional[Document]:
        oid = _object_id(booking_id)
        if oid is None:
            return None
        return _serialize(await self.collection.find_one({"_id": oid}))

    async def count_by_user(self, user_id: str) -> int:
        return await self.collection.count_documents({"user": _object_id(user_id)})

    async def count_all(self) -> int:
        return await self.collection.count_documents({})

    async def count_by_campground(self) -> List[Document]:
        pipeline = [
            {"$group": {"_id": "$campground", "booking_count": {"$sum": 1}}},
            {
                "$lookup": {
                    "from": CAMPGROUNDS_COLLECTION,
                    "localField": "_id",
                    "foreignField": "_id",
                    "as": "campground",
                }
            },
        ]
        groups = []
        async for entry in self.collection.aggregate(pipeline):
            # empty when the campground was deleted
            matches = entry.get("campground") or []
            groups.append({
                "campground_id": str(entry["_id"]),
                "campground_name": matches[0].get("name") if matches else None,
                "booking_count": entry["booking_count"],
            })
        return groups

    async def create(self, data: Document) -> Document:
        document = _with_references(data)
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return _serialize(document)

    async def update(self, booking_id: str, changes: Document) -> Optional[Document]:
        oid = _object_id(booking_id)
        if oid is None:
            return None
        if not changes:
            return await self.find_by_id(booking_id)
        updated = await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": _with_references(changes)},
            return_document=ReturnDocument.AFTER
        )
        return _serialize(updated)

    async def delete(self, booking_id: str) -> Optional[Document]:
        oid = _object_id(booking_id)
        if oid is None:
            return None
        return _serialize(await self.collection.find_one_and_delete({"_id": oid}))
