"""
campbook/services/campground_service.py

Purpose: Campground CRUD

Deleting a campground does not touch its bookings; they keep a
reference that no longer resolves.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List

from pymongo.errors import DuplicateKeyError

from campbook.core.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from campbook.core.logging import get_logger
from campbook.db.repositories import CampgroundRepository
from campbook.schemas.campground import CampgroundCreate, CampgroundUpdate, campground_view

logger = get_logger(__name__)

REQUIRED_FIELDS = ("name", "address")


class CampgroundService:
    def __init__(self, campgrounds: CampgroundRepository):
        self.campgrounds = campgrounds

    async def list_campgrounds(self) -> List[Dict[str, Any]]:
        return [campground_view(c) for c in await self.campgrounds.find_all()]

    async def get_campground(self, campground_id: str) -> Dict[str, Any]:
        campground = await self.campgrounds.find_by_id(campground_id)
        if not campground:
            raise ResourceNotFoundError(f"No campground with the id of {campground_id}")
        return campground_view(campground)

    async def create_campground(self, payload: CampgroundCreate) -> Dict[str, Any]:
        data = payload.model_dump()
        data["created_at"] = datetime.now(timezone.utc)

        try:
            campground = await self.campgrounds.create(data)
        except DuplicateKeyError as e:
            raise ConflictError(f"Campground named '{payload.name}' already exists") from e

        logger.info("Campground created", extra={"campground_id": campground["id"]})
        return campground_view(campground)

    async def update_campground(self, campground_id: str, payload: CampgroundUpdate) -> Dict[str, Any]:
        changes = payload.changes()
        for field in REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(f"Campground {field} cannot be empty")

        try:
            campground = await self.campgrounds.update(campground_id, changes)
        except DuplicateKeyError as e:
            raise ConflictError(f"Campground named '{changes.get('name')}' already exists") from e

        if not campground:
            raise ResourceNotFoundError(f"No campground with the id of {campground_id}")

        logger.info("Campground updated", extra={"campground_id": campground_id})
        return campground_view(campground)

    async def delete_campground(self, campground_id: str) -> Dict[str, Any]:
        campground = await self.campgrounds.delete(campground_id)
        if not campground:
            raise ResourceNotFoundError(f"No campground with the id of {campground_id}")

        logger.info("Campground deleted", extra={"campground_id": campground_id})
        return campground_view(campground)
