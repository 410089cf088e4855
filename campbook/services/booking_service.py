"""
campbook/services/booking_service.py

Purpose: Booking management

- Owners and admins can read, change and cancel a booking; nobody else can
- Non-admin users may hold at most MAX_BOOKINGS_PER_USER bookings when
  creating a new one (admins are exempt)
- Admin dashboard: bookings per campground, busiest first
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from campbook.core.config import settings
from campbook.core.exceptions import (
    ForbiddenError,
    QuotaExceededError,
    ResourceNotFoundError,
    ValidationError,
)
from campbook.core.logging import get_logger, LogContext
from campbook.db.repositories import BookingRepository, CampgroundRepository
from campbook.schemas.booking import BookingUpdate, booking_view, dashboard_entry_view
from campbook.schemas.user import UserRole
from campbook.utils.validation_utils import is_valid_object_id

logger = get_logger(__name__)


def _is_admin(user: Dict[str, Any]) -> bool:
    return user.get("role") == UserRole.ADMIN.value


def rank_campground_groups(groups: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Orders dashboard groups by booking count descending, then campground
    name ascending. Groups whose campground was deleted sort last among
    equal counts.
    """
    return sorted(
        groups,
        key=lambda g: (
            -g["booking_count"],
            g.get("campground_name") is None,
            g.get("campground_name") or "",
        )
    )


class BookingService:
    def __init__(
        self,
        bookings: BookingRepository,
        campgrounds: CampgroundRepository,
        max_bookings_per_user: Optional[int] = None
    ):
        self.bookings = bookings
        self.campgrounds = campgrounds
        self.max_bookings_per_user = max_bookings_per_user or settings.MAX_BOOKINGS_PER_USER

    async def _with_campgrounds(self, bookings: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        campgrounds = await self.campgrounds.find_by_ids([b["campground"] for b in bookings])
        return [booking_view(b, campgrounds.get(b["campground"])) for b in bookings]

    async def _with_campground(self, booking: Dict[str, Any]) -> Dict[str, Any]:
        campground = await self.campgrounds.find_by_id(booking["campground"])
        return booking_view(booking, campground)

    async def _load_owned(self, booking_id: str, requester: Dict[str, Any], action: str) -> Dict[str, Any]:
        booking = await self.bookings.find_by_id(booking_id)
        if not booking:
            raise ResourceNotFoundError(f"No booking with the id of {booking_id}")

        if booking["user"] != requester["id"] and not _is_admin(requester):
            raise ForbiddenError(
                f"User {requester['id']} is not authorized to {action} this booking"
            )
        return booking

    async def list_bookings(
        self,
        requester: Dict[str, Any],
        campground_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Admins see every booking (optionally for one campground); everyone
        else sees only their own.
        """
        if _is_admin(requester):
            bookings = await self.bookings.find(campground_id=campground_id)
        else:
            bookings = await self.bookings.find(user_id=requester["id"], campground_id=campground_id)
        return await self._with_campgrounds(bookings)

    async def get_booking(self, booking_id: str, requester: Dict[str, Any]) -> Dict[str, Any]:
        booking = await self._load_owned(booking_id, requester, "view")
        return await self._with_campground(booking)

    async def create_booking(
        self,
        requester: Dict[str, Any],
        campground_id: Optional[str],
        booking_date: datetime
    ) -> Dict[str, Any]:
        """
        Books a campground for the requester.

        The quota is read-then-write without a lock, so two simultaneous
        requests from one user can overshoot it by one.
        """
        if not campground_id:
            raise ValidationError("Please provide a campground")

        with LogContext(user_id=requester["id"], campground_id=campground_id):
            campground = await self.campgrounds.find_by_id(campground_id)
            if not campground:
                raise ResourceNotFoundError(f"No campground with the id of {campground_id}")

            if not _is_admin(requester):
                existing = await self.bookings.count_by_user(requester["id"])
                if existing >= self.max_bookings_per_user:
                    logger.info("Booking quota reached")
                    raise QuotaExceededError(
                        f"The user with ID {requester['id']} has already made "
                        f"{self.max_bookings_per_user} bookings"
                    )

            booking = await self.bookings.create({
                "user": requester["id"],
                "campground": campground_id,
                "booking_date": booking_date,
                "created_at": datetime.now(timezone.utc),
            })
            logger.info("Booking created", extra={"booking_id": booking["id"]})

        return booking_view(booking, campground)

    async def update_booking(
        self,
        booking_id: str,
        requester: Dict[str, Any],
        payload: BookingUpdate
    ) -> Dict[str, Any]:
        """
        Partial update of date, campground or (admins only) owner.
        Reassigning the owner does not re-check the new owner's quota.
        """
        await self._load_owned(booking_id, requester, "update")

        sent = payload.model_dump(exclude_unset=True)
        changes: Dict[str, Any] = {}

        if "bookingDate" in sent:
            if sent["bookingDate"] is None:
                raise ValidationError("Booking date cannot be empty")
            changes["booking_date"] = sent["bookingDate"]

        if "campground" in sent:
            campground_id = sent["campground"]
            if not campground_id or not await self.campgrounds.find_by_id(campground_id):
                raise ResourceNotFoundError(f"No campground with the id of {campground_id}")
            changes["campground"] = campground_id

        if "user" in sent:
            if not _is_admin(requester):
                raise ForbiddenError("Only admins can reassign a booking")
            if not is_valid_object_id(sent["user"]):
                raise ValidationError("Invalid user id")
            changes["user"] = sent["user"]

        booking = await self.bookings.update(booking_id, changes)
        if not booking:
            raise ResourceNotFoundError(f"No booking with the id of {booking_id}")

        logger.info("Booking updated", extra={"booking_id": booking_id, "user_id": requester["id"]})
        return await self._with_campground(booking)

    async def delete_booking(self, booking_id: str, requester: Dict[str, Any]) -> Dict[str, Any]:
        """Deletes the booking and returns what it looked like beforehand."""
        await self._load_owned(booking_id, requester, "delete")

        booking = await self.bookings.delete(booking_id)
        if not booking:
            raise ResourceNotFoundError(f"No booking with the id of {booking_id}")

        logger.info("Booking deleted", extra={"booking_id": booking_id, "user_id": requester["id"]})
        return await self._with_campground(booking)

    async def dashboard_summary(self, requester: Dict[str, Any]) -> Dict[str, Any]:
        if not _is_admin(requester):
            raise ForbiddenError(
                f"User {requester['id']} is not authorized to access the dashboard"
            )

        total = await self.bookings.count_all()
        groups = rank_campground_groups(await self.bookings.count_by_campground())

        return {
            "totalBookings": total,
            "bookingSummary": [dashboard_entry_view(g) for g in groups],
        }
