"""
campbook/db/repositories.py

Purpose: Persistence interfaces, one per entity

Services only talk to these protocols. Implementations hand back plain
dicts where `id` and every reference field (`user`, `campground`) are
strings, so nothing above this layer touches driver types. Unknown or
malformed ids behave like missing documents.

Writes that break a unique constraint raise
`pymongo.errors.DuplicateKeyError`.
"""

from typing import Any, Dict, List, Optional, Protocol

Document = Dict[str, Any]


class UserRepository(Protocol):
    async def find_by_id(self, user_id: str) -> Optional[Document]:
        ...

    async def find_by_firebase_uid(self, firebase_uid: str) -> Optional[Document]:
        ...

    async def find_by_email(self, email: str) -> Optional[Document]:
        ...

    async def create(self, data: Document) -> Document:
        """Insert a user and return it with its new `id`."""
        ...


class CampgroundRepository(Protocol):
    async def find_all(self) -> List[Document]:
        ...

    async def find_by_id(self, campground_id: str) -> Optional[Document]:
        ...

    async def find_by_ids(self, campground_ids: List[str]) -> Dict[str, Document]:
        """Return the campgrounds that exist, keyed by id."""
        ...

    async def create(self, data: Document) -> Document:
        ...

    async def update(self, campground_id: str, changes: Document) -> Optional[Document]:
        """Apply `changes` and return the updated document, or None if absent."""
        ...

    async def delete(self, campground_id: str) -> Optional[Document]:
        """Remove the campground and return its prior state, or None if absent."""
        ...


class BookingRepository(Protocol):
    async def find(
        self,
        user_id: Optional[str] = None,
        campground_id: Optional[str] = None
    ) -> List[Document]:
        """List bookings, optionally narrowed to an owner and/or campground."""
        ...

    async def find_by_id(self, booking_id: str) -> Optional[Document]:
        ...

    async def count_by_user(self, user_id: str) -> int:
        ...

    async def count_all(self) -> int:
        ...

    async def count_by_campground(self) -> List[Document]:
        """
        Group bookings by campground.

        Each entry has `campground_id`, `campground_name` (None when the
        campground no longer exists) and `booking_count`. Order is unspecified.
        """
        ...

    async def create(self, data: Document) -> Document:
        ...

    async def update(self, booking_id: str, changes: Document) -> Optional[Document]:
        ...

    async def delete(self, booking_id: str) -> Optional[Document]:
        ...
